#!/usr/bin/env python3
"""
warehouse FastAPI application factory

The history storage is created when the app starts and its session pool is
released on shutdown.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .api.routes import create_history_routes
from .core.config import WarehouseConfig
from .store.session import BackendSession
from .store.storage import IotDbHistoryStorage

logger = logging.getLogger("warehouse.server")


def create_storage(config: WarehouseConfig, session: Optional[BackendSession] = None) -> Optional[IotDbHistoryStorage]:
    """Build and initialize the history storage, None when disabled."""
    if not config.iotdb.enabled:
        logger.info("IoTDB history storage disabled")
        return None
    if session is None:
        from .store.iotdb_session import create_session
        session = create_session(config.iotdb)
    storage = IotDbHistoryStorage(session, config.iotdb)
    storage.initialize()
    return storage


def create_app(config: WarehouseConfig, session: Optional[BackendSession] = None) -> FastAPI:
    storage = create_storage(config, session)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if storage is not None:
            storage.shutdown()

    app = FastAPI(title="warehouse", lifespan=lifespan)
    app.state.storage = storage
    app.include_router(create_history_routes(storage))
    return app
