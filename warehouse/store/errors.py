"""
Storage error taxonomy.

Every failure inside the store carries an ErrorKind so the storage facade
can turn it into a log line and an empty result in one place.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    CONNECTIVITY = "connectivity"
    TTL_CONFIGURATION = "ttl_configuration"
    WRITE = "write"
    QUERY = "query"
    DECODE = "decode"


class StorageError(RuntimeError):
    """Base class for history storage failures."""

    kind: ErrorKind = ErrorKind.QUERY

    def __init__(self, message: str, kind: Optional[ErrorKind] = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class BackendError(StorageError):
    """Raised by session implementations when a backend call fails."""


class IdentifierError(StorageError):
    """A discovered device path does not belong to the expected entity."""

    kind = ErrorKind.QUERY


class DecodeError(StorageError):
    """A result row could not be turned into a history value."""

    kind = ErrorKind.DECODE
