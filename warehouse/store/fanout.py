"""
Instance fan-out.

IoTDB has no notion of instances: labelled rows of an entity are separate
devices below the entity path. When a history request names no label, the
devices under the entity are discovered and queried one by one.
"""

import logging
from typing import List, Optional, Tuple

from .errors import BackendError, IdentifierError
from .identifiers import EntityPath, derive_instance_label
from .queries import show_devices_query
from .session import BackendSession

logger = logging.getLogger("warehouse.storage")


class InstanceResolver:
    """Discovers the instances stored under an entity path."""

    def __init__(self, session: BackendSession, query_timeout_ms: Optional[int] = None):
        self.session = session
        self.query_timeout_ms = query_timeout_ms

    def resolve(self, path: EntityPath) -> List[str]:
        """Return the instance labels of the devices under `path`, [] on failure."""
        sql = show_devices_query(path.without_labels().device_id)
        devices: List[str] = []
        try:
            with self.session.execute_query(sql, self.query_timeout_ms) as cursor:
                for record in cursor:
                    if record.fields and record.fields[0] is not None:
                        devices.append(str(record.fields[0]))
        except BackendError as e:
            logger.error(f"query show all devices sql error. sql: {sql}: {e}", exc_info=True)
            return []

        instances = []
        for device in devices:
            try:
                instances.append(derive_instance_label(path, device))
            except IdentifierError as e:
                logger.warning(f"skip device {device}: {e}")
        return instances

    def plan(self, path: EntityPath, label: Optional[str]) -> List[Tuple[str, EntityPath]]:
        """
        Map instance keys to the device paths to query.

        An explicit label is queried directly under the "" key. Without one,
        every discovered instance gets its own query; if nothing is found the
        bare entity path is queried under "".
        """
        if label is not None:
            return [("", path.with_labels(label))]
        bare = path.without_labels()
        instances = self.resolve(bare)
        if not instances:
            return [("", bare)]
        return [(instance, bare.with_labels(instance)) for instance in instances]
