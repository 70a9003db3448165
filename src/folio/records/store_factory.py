"""Factory for record store providers.

Creates appropriate RecordStore implementation based on configuration.
"""

from loguru import logger

from folio.records.store import RecordStore
from folio.records.store_fs import FileSystemRecordStore
from folio.records.store_memory import MemoryRecordStore
from folio.settings import settings


# Singleton instance
_record_store_instance: RecordStore | None = None


def get_record_store() -> RecordStore:
    """Get record store instance (singleton).

    Returns:
        RecordStore implementation based on RECORDS__PROVIDER setting

    Raises:
        ValueError: If record store type is invalid
    """
    global _record_store_instance

    if _record_store_instance is not None:
        return _record_store_instance

    store_type = settings.records.provider.lower()

    if store_type == "filesystem":
        logger.info("Initializing FileSystemRecordStore")
        _record_store_instance = FileSystemRecordStore(base_path=settings.records.path)
    elif store_type == "memory":
        logger.warning("Using in-memory record store - records are not persisted")
        _record_store_instance = MemoryRecordStore()
    else:
        raise ValueError(
            f"Invalid record store type: {store_type}. "
            f"Valid options: filesystem, memory"
        )

    return _record_store_instance


def set_record_store(store: RecordStore | None) -> None:
    """Replace the singleton (used by the CLI and tests)."""
    global _record_store_instance
    _record_store_instance = store
