"""
History Storage Modules

Organized by concern:
- identifiers.py: device path building and quoting
- batches.py: snapshot to write batch assembly
- writer.py: batch write path
- queries.py: IoTDB statements
- fanout.py: instance discovery for history queries
- decoder.py: result rows to history values
- session.py: backend session interface
- iotdb_session.py: apache-iotdb session pool implementation
- storage.py: IotDbHistoryStorage facade
"""

from .errors import BackendError, DecodeError, ErrorKind, IdentifierError, StorageError
from .identifiers import EntityPath, IoTDBVersion, build_device_id, derive_instance_label, quote

__all__ = [
    'BackendError',
    'DecodeError',
    'ErrorKind',
    'IdentifierError',
    'StorageError',
    'EntityPath',
    'IoTDBVersion',
    'build_device_id',
    'derive_instance_label',
    'quote',
]
