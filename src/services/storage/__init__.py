"""
Storage Services Package

Provides the abstract entity store interface and its implementations.
The JSON file store is the production backing; the in-memory store is used
for tests. Both are swappable behind EntityStoreInterface.
"""

from src.services.storage.interface import (
    DuplicateError,
    EntityStoreInterface,
    NotFoundError,
    StorageError,
)
from src.services.storage.codec import (
    SnapshotError,
    SnapshotFormatError,
    dump_snapshot,
    load_snapshot,
)
from src.services.storage.memory import InMemoryEntityStore
from src.services.storage.json_file import JsonFileEntityStore

__all__ = [
    # Interface
    "EntityStoreInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "SnapshotError",
    "SnapshotFormatError",
    "StorageError",
    # Codec
    "dump_snapshot",
    "load_snapshot",
    # Implementations
    "InMemoryEntityStore",
    "JsonFileEntityStore",
]
