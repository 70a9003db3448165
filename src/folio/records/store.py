"""Abstract record store interface.

Defines the contract for document persistence with multiple backend implementations:
- FileSystemRecordStore: JSON files on disk (dev/small deployments)
- MemoryRecordStore: in-process dicts (testing)

Documents are JSON-compatible dicts keyed by their ``id`` field and grouped
into collections (one per record type). Every call is atomic on its own;
there are no multi-document transactions.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable, Sequence


@dataclass(frozen=True)
class IExact:
    """Filter value matching a string field case-insensitively."""

    value: str


@dataclass(frozen=True)
class Exclude:
    """Filter value matching anything except ``value``."""

    value: Any


@dataclass
class Query:
    """Filter, search, sort and pagination for ``find``.

    Attributes:
        filters: field -> value equality (IExact / Exclude for variants)
        search: case-insensitive substring matched against ``search_fields``
        search_fields: string or list-of-string fields searched
        sort_by: field to sort on
        descending: sort direction
        skip: documents to skip
        limit: max documents returned (None = all)
    """

    filters: dict[str, Any] | None = None
    search: str | None = None
    search_fields: Sequence[str] = ()
    sort_by: str = "created_at"
    descending: bool = True
    skip: int = 0
    limit: int | None = None


def _field_matches(actual: Any, expected: Any) -> bool:
    if isinstance(expected, IExact):
        return isinstance(actual, str) and actual.lower() == expected.value.lower()
    if isinstance(expected, Exclude):
        return actual != expected.value
    return actual == expected


def _search_matches(doc: dict[str, Any], needle: str, fields: Sequence[str]) -> bool:
    needle = needle.lower()
    for name in fields:
        value = doc.get(name)
        if isinstance(value, str) and needle in value.lower():
            return True
        if isinstance(value, list) and any(
            isinstance(v, str) and needle in v.lower() for v in value
        ):
            return True
    return False


def matches(doc: dict[str, Any], query: Query) -> bool:
    """True if ``doc`` satisfies the query's filters and search."""
    for name, expected in (query.filters or {}).items():
        if not _field_matches(doc.get(name), expected):
            return False
    if query.search and not _search_matches(doc, query.search, query.search_fields):
        return False
    return True


def apply_query(docs: Iterable[dict[str, Any]], query: Query) -> list[dict[str, Any]]:
    """Filter, sort and paginate documents in memory."""
    selected = [doc for doc in docs if matches(doc, query)]
    # Documents missing the sort field always go last
    keyed = [d for d in selected if d.get(query.sort_by) is not None]
    missing = [d for d in selected if d.get(query.sort_by) is None]
    keyed.sort(key=lambda d: d[query.sort_by], reverse=query.descending)
    selected = keyed + missing
    end = None if query.limit is None else query.skip + query.limit
    return selected[query.skip:end]


class RecordStore(ABC):
    """Abstract interface for record persistence."""

    @abstractmethod
    async def get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        """Get a document by id.

        Returns:
            Document dict if found, None otherwise

        Raises:
            PersistentStoreError: Backend failure
        """
        pass

    @abstractmethod
    async def find(self, collection: str, query: Query | None = None) -> list[dict[str, Any]]:
        """Find documents matching a query (filtered, sorted, paginated)."""
        pass

    @abstractmethod
    async def find_ids(self, collection: str, record_ids: Sequence[str]) -> list[dict[str, Any]]:
        """Get every existing document among ``record_ids``."""
        pass

    @abstractmethod
    async def count(self, collection: str, query: Query | None = None) -> int:
        """Count documents matching a query's filters and search."""
        pass

    @abstractmethod
    async def insert(self, collection: str, doc: dict[str, Any]) -> None:
        """Insert a new document (``doc["id"]`` must be set)."""
        pass

    @abstractmethod
    async def update(self, collection: str, record_id: str, doc: dict[str, Any]) -> bool:
        """Replace an existing document.

        Returns:
            True if replaced, False if no document had this id
        """
        pass

    @abstractmethod
    async def delete(self, collection: str, record_id: str) -> bool:
        """Delete a document.

        Returns:
            True if deleted, False if not found
        """
        pass

    @abstractmethod
    async def delete_many(self, collection: str, record_ids: Sequence[str]) -> int:
        """Delete every document among ``record_ids`` in one call.

        Returns:
            Number of documents deleted
        """
        pass
