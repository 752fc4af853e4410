"""
Device identifier codec.

IoTDB stores every series under a dotted path. Metrics of a monitored entity
are laid out as

    ${root}.${app}.${metrics}.${id}              entity without labels
    ${root}.${app}.${metrics}.${id}.${labels}    one instance per label set

so `${root}.${app}.${metrics}.${id}.*` lists every instance of an entity.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from ..models import NULL_VALUE
from .errors import IdentifierError

BACK_QUOTE = "`"
SEPARATOR = "."


class IoTDBVersion(str, Enum):
    """Backend schema version, controls identifier quoting and database setup."""
    V_0_13 = "0.13"
    V_1_0 = "1.0"


def quote(text: Optional[str]) -> Optional[str]:
    """Wrap a path segment in back quotes so keywords (eg: nodes) stay legal."""
    if not text or (text.startswith(BACK_QUOTE) and text.endswith(BACK_QUOTE)):
        return text
    text = text.replace("*", "-")
    return f"{BACK_QUOTE}{text}{BACK_QUOTE}"


def unquote(text: str) -> str:
    if len(text) >= 2 and text.startswith(BACK_QUOTE) and text.endswith(BACK_QUOTE):
        return text[1:-1]
    return text


def has_labels(labels: Optional[str]) -> bool:
    return bool(labels) and labels != NULL_VALUE


def build_device_id(
    root: str,
    app: str,
    metrics: str,
    entity_id: int,
    labels: Optional[str] = None,
    use_quote: bool = False,
    version: IoTDBVersion = IoTDBVersion.V_1_0,
) -> str:
    """
    Build the device path of an entity.

    App and metrics segments are quoted only for queries; the entity id is
    quoted for queries and always on 1.0 where numeric segments are illegal.
    """
    entity = str(entity_id)
    device_id = SEPARATOR.join([
        root,
        quote(app) if use_quote else app,
        quote(metrics) if use_quote else metrics,
        quote(entity) if (use_quote or version == IoTDBVersion.V_1_0) else entity,
    ])
    if has_labels(labels):
        device_id += SEPARATOR + quote(labels)
    return device_id


@dataclass(frozen=True)
class EntityPath:
    """Device path of one monitored entity, optionally narrowed to an instance."""
    root: str
    app: str
    metrics: str
    entity_id: int
    labels: Optional[str] = None
    use_quote: bool = False
    version: IoTDBVersion = IoTDBVersion.V_1_0

    @property
    def prefix(self) -> str:
        """Path without the label segment."""
        return build_device_id(self.root, self.app, self.metrics, self.entity_id,
                               None, self.use_quote, self.version)

    @property
    def device_id(self) -> str:
        return build_device_id(self.root, self.app, self.metrics, self.entity_id,
                               self.labels, self.use_quote, self.version)

    @property
    def has_labels(self) -> bool:
        return has_labels(self.labels)

    def with_labels(self, labels: Optional[str]) -> "EntityPath":
        return replace(self, labels=labels)

    def without_labels(self) -> "EntityPath":
        return replace(self, labels=None)

    def __str__(self) -> str:
        return self.device_id


def derive_instance_label(path: EntityPath, child_path: str) -> str:
    """
    Return the instance label of a device discovered under `path`.

    The backend may echo the entity prefix quoted, in insert form or fully
    unquoted, so all three forms are accepted. Surrounding back quotes are removed from the label.
    """
    candidates = {
        replace(path, use_quote=True).prefix,
        replace(path, use_quote=False).prefix,
        replace(path, use_quote=False, version=IoTDBVersion.V_0_13).prefix,
    }
    for prefix in sorted(candidates, key=len, reverse=True):
        head = prefix + SEPARATOR
        if child_path.startswith(head) and len(child_path) > len(head):
            return unquote(child_path[len(head):])
    raise IdentifierError(f"device {child_path} is not under {path.prefix}")
