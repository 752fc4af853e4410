"""
Batch write path.

Each label set is written independently: a failed insert is logged and the
remaining batches are still attempted. Buffers are released afterwards no
matter what happened.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from .batches import WriteBatch
from .errors import BackendError
from .session import BackendSession

logger = logging.getLogger("warehouse.storage")


@dataclass
class WriteReport:
    written: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


def write_batches(session: BackendSession, batches: Dict[str, WriteBatch]) -> WriteReport:
    report = WriteReport()
    try:
        for batch in batches.values():
            try:
                session.insert_batch(batch, is_sorted=True)
                report.written.append(batch.device_id)
            except BackendError as e:
                logger.error(f"[warehouse iotdb] insert {batch.row_size} rows into {batch.device_id} failed: {e}",
                             exc_info=True)
                report.failed[batch.device_id] = str(e)
    finally:
        for batch in batches.values():
            batch.reset()
        batches.clear()
    return report
