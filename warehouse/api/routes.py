#!/usr/bin/env python3
"""
History Routes - Metrics Ingestion, Raw and Interval History, Health
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from ..store.storage import IotDbHistoryStorage
from .schemas import MetricsDataRequest, MetricsHistoryResponse, ValueRecord

logger = logging.getLogger("warehouse.api")

# backend duration literal, eg: 30m, 6h, 7d, 4w
HISTORY_PATTERN = r"^[1-9][0-9]*(ms|s|m|h|d|w|mo|y)$"


def create_history_routes(storage: Optional[IotDbHistoryStorage]) -> APIRouter:
    """Create history storage routes; storage is None when IoTDB is disabled."""
    router = APIRouter()

    def require_storage() -> IotDbHistoryStorage:
        if storage is None:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                                detail="history storage is disabled")
        return storage

    @router.get("/api/health")
    def health():
        """Readiness of the history storage."""
        if storage is None:
            return {"status": "disabled"}
        return {"status": storage.readiness.value}

    @router.post("/api/metrics", status_code=status.HTTP_202_ACCEPTED)
    def submit_metrics(body: MetricsDataRequest):
        """Persist one collected metrics snapshot (fire and forget)."""
        store = require_storage()
        store.save_data(body.to_metrics_data())
        logger.debug(f"Metrics data from monitor {body.id} {body.app}.{body.metrics}: {len(body.values)} rows")
        return {"received": len(body.values)}

    @router.get("/api/monitors/{monitor_id}/metrics/{app}/{metrics}/{metric}/history",
                response_model=MetricsHistoryResponse)
    def get_metric_history(
        monitor_id: int,
        app: str,
        metrics: str,
        metric: str,
        label: Optional[str] = Query(None),
        history: str = Query("6h", pattern=HISTORY_PATTERN),
        interval: bool = Query(False),
    ):
        """Raw history (newest first) or 4h interval aggregates, keyed by instance."""
        store = require_storage()
        if interval:
            values_map = store.get_history_interval(monitor_id, app, metrics, metric, label, history)
        else:
            values_map = store.get_history(monitor_id, app, metrics, metric, label, history)
        return MetricsHistoryResponse(
            id=monitor_id,
            app=app,
            metrics=metrics,
            field=metric,
            values={
                instance: [ValueRecord.from_value(v) for v in values]
                for instance, values in values_map.items()
            },
        )

    return router
