"""Persistent record storage."""

from folio.records.store import Exclude, IExact, Query, RecordStore
from folio.records.store_factory import get_record_store
from folio.records.store_fs import FileSystemRecordStore
from folio.records.store_memory import MemoryRecordStore

__all__ = [
    "Exclude",
    "FileSystemRecordStore",
    "IExact",
    "MemoryRecordStore",
    "Query",
    "RecordStore",
    "get_record_store",
]
