"""Filesystem-based record store implementation.

Stores each document as a JSON file on disk, one directory per collection.
Suitable for development, testing, and small single-node deployments.
"""

import asyncio
import json
import os
import re
from pathlib import Path
from typing import Any, Sequence

from loguru import logger

from folio.errors import PersistentStoreError
from folio.records.store import Query, RecordStore, apply_query

_SAFE_ID = re.compile(r"^[A-Za-z0-9_-]+$")


class FileSystemRecordStore(RecordStore):
    """Filesystem-based record storage.

    Storage layout:
        {base_path}/{collection}/{id}.json

    Example:
        ~/.folio/records/posts/3f2c9a0d4b8e4f1c9a7e2b6d5c4a3b21.json

    File I/O runs in a worker thread (``asyncio.to_thread``) to keep the
    event loop free. Writes go to a temporary file and are renamed into
    place, so a reader never sees a half-written document.
    Performance: O(1) get, O(n) find/count per collection
    """

    def __init__(self, base_path: str = "~/.folio/records"):
        """Initialize filesystem record store.

        Args:
            base_path: Root directory for record data
        """
        self.base_path = Path(os.path.expanduser(base_path))
        logger.info(f"FileSystemRecordStore initialized: {self.base_path}")

    def _doc_path(self, collection: str, record_id: str) -> Path | None:
        """Path to a document file, None for ids that cannot be stored."""
        if not _SAFE_ID.match(record_id) or not _SAFE_ID.match(collection):
            return None
        return self.base_path / collection / f"{record_id}.json"

    def _read(self, path: Path) -> dict[str, Any]:
        try:
            with open(path, "r") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read {path}: {e}")
            raise PersistentStoreError(f"Failed to read {path.name}: {e}") from e

    def _write(self, path: Path, doc: dict[str, Any]) -> None:
        tmp = path.with_suffix(".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w") as f:
                json.dump(doc, f, indent=2)
            tmp.replace(path)
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            raise PersistentStoreError(f"Failed to write {path.name}: {e}") from e

    def _unlink(self, path: Path) -> bool:
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(f"Failed to delete {path}: {e}")
            raise PersistentStoreError(f"Failed to delete {path.name}: {e}") from e

    def _all(self, collection: str) -> list[dict[str, Any]]:
        directory = self.base_path / collection
        if not directory.exists():
            return []
        return [self._read(path) for path in sorted(directory.glob("*.json"))]

    # Synchronous file operations; the async API runs them in a worker thread

    def _get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        path = self._doc_path(collection, record_id)
        if path is None or not path.exists():
            return None
        return self._read(path)

    def _find_ids(self, collection: str, record_ids: Sequence[str]) -> list[dict[str, Any]]:
        docs = []
        for record_id in dict.fromkeys(record_ids):
            doc = self._get(collection, record_id)
            if doc is not None:
                docs.append(doc)
        return docs

    def _insert(self, collection: str, doc: dict[str, Any]) -> None:
        path = self._doc_path(collection, doc["id"])
        if path is None:
            raise PersistentStoreError(f"Invalid record id: {doc['id']!r}")
        self._write(path, doc)
        logger.debug(f"Inserted {collection}/{doc['id']}")

    def _update(self, collection: str, record_id: str, doc: dict[str, Any]) -> bool:
        path = self._doc_path(collection, record_id)
        if path is None or not path.exists():
            return False
        self._write(path, doc)
        logger.debug(f"Updated {collection}/{record_id}")
        return True

    def _delete(self, collection: str, record_id: str) -> bool:
        path = self._doc_path(collection, record_id)
        if path is None:
            return False
        deleted = self._unlink(path)
        if deleted:
            logger.debug(f"Deleted {collection}/{record_id}")
        return deleted

    def _delete_many(self, collection: str, record_ids: Sequence[str]) -> int:
        deleted = 0
        for record_id in dict.fromkeys(record_ids):
            path = self._doc_path(collection, record_id)
            if path is not None and self._unlink(path):
                deleted += 1
        logger.debug(f"Deleted {deleted} documents from {collection}")
        return deleted

    async def get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        return await asyncio.to_thread(self._get, collection, record_id)

    async def find(self, collection: str, query: Query | None = None) -> list[dict[str, Any]]:
        docs = await asyncio.to_thread(self._all, collection)
        return apply_query(docs, query or Query())

    async def find_ids(self, collection: str, record_ids: Sequence[str]) -> list[dict[str, Any]]:
        return await asyncio.to_thread(self._find_ids, collection, record_ids)

    async def count(self, collection: str, query: Query | None = None) -> int:
        query = query or Query()
        unpaged = Query(
            filters=query.filters, search=query.search, search_fields=query.search_fields
        )
        docs = await asyncio.to_thread(self._all, collection)
        return len(apply_query(docs, unpaged))

    async def insert(self, collection: str, doc: dict[str, Any]) -> None:
        await asyncio.to_thread(self._insert, collection, doc)

    async def update(self, collection: str, record_id: str, doc: dict[str, Any]) -> bool:
        return await asyncio.to_thread(self._update, collection, record_id, doc)

    async def delete(self, collection: str, record_id: str) -> bool:
        return await asyncio.to_thread(self._delete, collection, record_id)

    async def delete_many(self, collection: str, record_ids: Sequence[str]) -> int:
        return await asyncio.to_thread(self._delete_many, collection, record_ids)
