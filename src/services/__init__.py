"""Services package."""

from src.services.access_gate import (
    AccessCredential,
    AccessDeniedError,
    AccessGate,
    AccessGateError,
    GuardedAction,
    InvalidAccessCodeError,
)
from src.services.snapshot import SnapshotService, backup_file_name
from src.services.storage import (
    DuplicateError,
    EntityStoreInterface,
    InMemoryEntityStore,
    JsonFileEntityStore,
    NotFoundError,
    SnapshotError,
    SnapshotFormatError,
    StorageError,
)

__all__ = [
    # Access gate
    "AccessCredential",
    "AccessDeniedError",
    "AccessGate",
    "AccessGateError",
    "GuardedAction",
    "InvalidAccessCodeError",
    # Snapshot
    "SnapshotService",
    "backup_file_name",
    # Storage services
    "DuplicateError",
    "EntityStoreInterface",
    "InMemoryEntityStore",
    "JsonFileEntityStore",
    "NotFoundError",
    "SnapshotError",
    "SnapshotFormatError",
    "StorageError",
]
