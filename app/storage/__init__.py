"""
OrganiJob - Storage layer

Selects the persistence backend from settings:
    ORGANIJOB_STORAGE_BACKEND=database  - SQLAlchemy (SQLite or PostgreSQL)
    ORGANIJOB_STORAGE_BACKEND=file      - single JSON document on disk

Usage in routers:
    from ..storage import get_storage, Storage

    @router.get("/")
    def handler(storage: Storage = Depends(get_storage)):
        ...
"""
import logging
from typing import Optional

from ..config import settings, Settings
from .base import (
    Storage, StorageError, StorageConflictError,
    UserRecord, ContactRecord, to_iso, from_iso,
)

logger = logging.getLogger("organijob.storage")

_storage: Optional[Storage] = None


def build_storage(config: Settings = settings) -> Storage:
    """Create the backend named by `config.storage_backend`."""
    if config.storage_backend == "file":
        from .json_file import JsonFileStorage
        storage = JsonFileStorage(config.data_file)
    else:
        from .sql import SqlStorage
        storage = SqlStorage(config.database_url)

    logger.info(f"Using {storage.name} storage backend")
    return storage


def get_storage() -> Storage:
    """FastAPI dependency returning the process-wide storage backend."""
    global _storage
    if _storage is None:
        _storage = build_storage()
    return _storage


__all__ = [
    "Storage",
    "StorageError",
    "StorageConflictError",
    "UserRecord",
    "ContactRecord",
    "to_iso",
    "from_iso",
    "build_storage",
    "get_storage",
]
