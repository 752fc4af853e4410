"""
Backend session interface.

The storage talks to IoTDB only through these classes. Implementations wrap
a pooled client and must be safe to call from several threads; every
failure is raised as BackendError.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .batches import WriteBatch
from .queries import SHOW_STORAGE_GROUP


@dataclass
class RowRecord:
    """One result row, None marks a null field."""
    timestamp: int
    fields: List[Any] = field(default_factory=list)

    def has_null_field(self) -> bool:
        return any(value is None for value in self.fields)


class Cursor(ABC):
    """Result set of a query. Must be closed, it pins server side memory."""

    @abstractmethod
    def has_next(self) -> bool:
        ...

    @abstractmethod
    def next(self) -> RowRecord:
        ...

    @abstractmethod
    def close(self) -> None:
        ...

    def __enter__(self) -> "Cursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __iter__(self):
        while self.has_next():
            yield self.next()


class BackendSession(ABC):
    """Pooled connection to the time-series backend."""

    @abstractmethod
    def execute_query(self, sql: str, timeout_ms: Optional[int] = None) -> Cursor:
        ...

    @abstractmethod
    def execute_statement(self, sql: str) -> None:
        ...

    @abstractmethod
    def insert_batch(self, batch: WriteBatch, is_sorted: bool = True) -> None:
        ...

    @abstractmethod
    def close(self) -> None:
        ...

    def probe(self) -> None:
        """Lightweight connectivity check, raises BackendError on failure."""
        with self.execute_query(SHOW_STORAGE_GROUP):
            pass
