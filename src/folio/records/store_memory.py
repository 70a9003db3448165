"""In-memory record store for tests and throwaway runs."""

import copy
from typing import Any, Sequence

from folio.records.store import Query, RecordStore, apply_query


class MemoryRecordStore(RecordStore):
    """Dict-backed record store.

    Storage layout:
        {collection: {id: document}}

    Documents are deep-copied in and out so callers never share state with
    the store.
    """

    def __init__(self):
        self.collections: dict[str, dict[str, dict[str, Any]]] = {}

    def _collection(self, name: str) -> dict[str, dict[str, Any]]:
        return self.collections.setdefault(name, {})

    async def get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        doc = self._collection(collection).get(record_id)
        return copy.deepcopy(doc) if doc is not None else None

    async def find(self, collection: str, query: Query | None = None) -> list[dict[str, Any]]:
        docs = apply_query(self._collection(collection).values(), query or Query())
        return copy.deepcopy(docs)

    async def find_ids(self, collection: str, record_ids: Sequence[str]) -> list[dict[str, Any]]:
        docs = self._collection(collection)
        return [copy.deepcopy(docs[i]) for i in dict.fromkeys(record_ids) if i in docs]

    async def count(self, collection: str, query: Query | None = None) -> int:
        query = query or Query()
        unpaged = Query(
            filters=query.filters, search=query.search, search_fields=query.search_fields
        )
        return len(apply_query(self._collection(collection).values(), unpaged))

    async def insert(self, collection: str, doc: dict[str, Any]) -> None:
        self._collection(collection)[doc["id"]] = copy.deepcopy(doc)

    async def update(self, collection: str, record_id: str, doc: dict[str, Any]) -> bool:
        docs = self._collection(collection)
        if record_id not in docs:
            return False
        docs[record_id] = copy.deepcopy(doc)
        return True

    async def delete(self, collection: str, record_id: str) -> bool:
        return self._collection(collection).pop(record_id, None) is not None

    async def delete_many(self, collection: str, record_ids: Sequence[str]) -> int:
        docs = self._collection(collection)
        return sum(1 for i in dict.fromkeys(record_ids) if docs.pop(i, None) is not None)
