"""Create/update/delete of records that own hosted images.

A record lives in the record store; its images live in the remote asset
store. There is no transaction spanning both, so every operation picks an
order and a failure policy:

- create: persist as-is. Images were uploaded by the caller beforehand.
- update: persist first, then delete superseded images. Cleanup failures are
  logged and recorded as orphans, never surfaced.
- delete: delete every owned image, then the record. Under STRICT a failed
  image deletion aborts and the record stays; under BEST_EFFORT the record
  is removed anyway.
"""

import asyncio
from typing import Any, Mapping, Sequence

from loguru import logger
from pydantic import BaseModel, Field, computed_field
from pydantic import ValidationError as PydanticValidationError

from folio.assets.resolver import identifier_for
from folio.assets.store import AssetStore
from folio.errors import NotFoundError, PersistentStoreError, StrictDeleteError, ValidationError
from folio.lifecycle.orphans import OrphanLedger
from folio.lifecycle.policy import Policy
from folio.lifecycle.record_type import RecordType
from folio.records.store import Exclude, IExact, Query, RecordStore
from folio.schemas.assets import AssetDeletion, AssetReference, DeleteOutcome
from folio.schemas.records import RecordBase, RecordPage, utc_now


class DeleteReport(BaseModel):
    """Result of a single-record delete."""

    record_id: str
    deletions: list[AssetDeletion] = Field(default_factory=list)

    @computed_field
    @property
    def failed(self) -> list[AssetDeletion]:
        return [d for d in self.deletions if not d.succeeded]


def _validate(model: type[BaseModel], data: Any) -> BaseModel:
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e


class LifecycleCoordinator:
    """Keeps records of one type consistent with their hosted images.

    Example:
        >>> coordinator = LifecycleCoordinator(POST, records, assets)
        >>> post = await coordinator.create({"title": "Hello", ...})
        >>> await coordinator.update(post.id, {"image": {"url": ..., "identifier": ...}})
        >>> await coordinator.delete(post.id)
    """

    def __init__(
        self,
        record_type: RecordType,
        records: RecordStore,
        assets: AssetStore,
        ledger: OrphanLedger | None = None,
    ):
        """Initialize coordinator.

        Args:
            record_type: Record type definition (model, asset fields, policies)
            records: Persistent record store
            assets: Remote asset store
            ledger: Where failed deletions are recorded (None disables recording)
        """
        self.record_type = record_type
        self.records = records
        self.assets = assets
        self.ledger = ledger

    @property
    def collection(self) -> str:
        return self.record_type.collection

    def _to_record(self, doc: dict[str, Any]) -> RecordBase:
        try:
            return self.record_type.model.model_validate(doc)
        except PydanticValidationError as e:
            raise PersistentStoreError(
                f"Stored {self.record_type.label} {doc.get('id')} is malformed: {e}"
            ) from e

    # =========================================================================
    # Reads
    # =========================================================================

    async def get(self, record_id: str) -> RecordBase:
        """Load a record.

        Raises:
            NotFoundError: No record with this id
        """
        doc = await self.records.get(self.collection, record_id)
        if doc is None:
            raise NotFoundError(f"{self.record_type.label} not found: {record_id}")
        return self._to_record(doc)

    async def get_by_slug(self, slug: str) -> RecordBase:
        """Load a record by its slug.

        Raises:
            NotFoundError: The type has no slug, or no record carries this slug
        """
        if "slug" not in self.record_type.model.model_fields:
            raise NotFoundError(f"{self.record_type.label} records have no slug")
        docs = await self.records.find(self.collection, Query(filters={"slug": slug}, limit=1))
        if not docs:
            raise NotFoundError(f"{self.record_type.label} not found: {slug}")
        return self._to_record(docs[0])

    async def lookup(self, identifier: str) -> RecordBase:
        """Load a record by id, falling back to its slug for slugged types."""
        try:
            return await self.get(identifier)
        except NotFoundError:
            if "slug" not in self.record_type.model.model_fields:
                raise
        return await self.get_by_slug(identifier)

    async def get_many(self, record_ids: list[str]) -> list[RecordBase]:
        docs = await self.records.find_ids(self.collection, record_ids)
        return [self._to_record(doc) for doc in docs]

    async def find(
        self,
        filters: dict[str, Any] | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 10,
        sort_by: str | None = None,
        descending: bool | None = None,
    ) -> RecordPage:
        """One page of records matching equality filters and a text search."""
        page = max(page, 1)
        limit = max(limit, 1)
        query = Query(
            filters={k: v for k, v in (filters or {}).items() if v is not None},
            search=search or None,
            search_fields=self.record_type.search_fields,
            sort_by=sort_by or self.record_type.default_sort,
            descending=self.record_type.default_descending if descending is None else descending,
            skip=(page - 1) * limit,
            limit=limit,
        )
        docs, total = await asyncio.gather(
            self.records.find(self.collection, query),
            self.records.count(self.collection, query),
        )
        return RecordPage(
            items=[self._to_record(doc) for doc in docs], total=total, page=page, limit=limit
        )

    async def _check_unique(self, record: RecordBase) -> None:
        for name in self.record_type.unique_fields:
            value = getattr(record, name)
            clash = await self.records.find(
                self.collection,
                Query(filters={name: IExact(value), "id": Exclude(record.id)}, limit=1),
            )
            if clash:
                raise ValidationError(
                    f"A {self.record_type.label.lower()} with this {name} already exists",
                    [{"field": name, "message": "already exists"}],
                )

    # =========================================================================
    # Create / update
    # =========================================================================

    async def create(self, data: dict[str, Any] | BaseModel) -> RecordBase:
        """Validate and persist a new record.

        Images referenced by the record must already be uploaded. Nothing is
        uploaded here and nothing is cleaned up if persistence fails.

        Raises:
            ValidationError: Input violates the record's constraints
            PersistentStoreError: Record store failure
        """
        payload = _validate(self.record_type.create_model, data)
        record = _validate(self.record_type.model, payload.model_dump())
        await self._check_unique(record)

        await self.records.insert(self.collection, record.model_dump(mode="json"))
        logger.info(f"Created {self.record_type.name} {record.id}")
        return record

    async def update(self, record_id: str, patch: dict[str, Any] | BaseModel) -> RecordBase:
        """Apply a partial update, then delete any superseded images.

        The record is persisted before cleanup starts. A failed image deletion
        is logged and recorded in the orphan ledger; the update still succeeds.

        Raises:
            ValidationError: Patch or resulting record is invalid
            NotFoundError: No record with this id
            PersistentStoreError: Record store failure
        """
        changes = _validate(self.record_type.update_model, patch).model_dump(exclude_unset=True)
        current = await self.get(record_id)

        merged = {**current.model_dump(), **changes, "id": current.id, "updated_at": utc_now()}
        updated = _validate(self.record_type.model, merged)
        if any(name in changes for name in self.record_type.unique_fields):
            await self._check_unique(updated)

        superseded = [
            (field.name, ref)
            for field in self.record_type.asset_fields
            for ref in field.superseded(current, updated)
        ]

        if not await self.records.update(self.collection, record_id, updated.model_dump(mode="json")):
            raise NotFoundError(f"{self.record_type.label} not found: {record_id}")
        logger.info(f"Updated {self.record_type.name} {record_id}")

        for field, ref in superseded:
            deletion = await self.delete_asset(record_id, field, ref)
            if deletion is not None and not deletion.succeeded:
                logger.warning(
                    f"Failed to delete superseded {field} {deletion.identifier} "
                    f"of {self.record_type.name} {record_id}: {deletion.error or deletion.outcome.value}"
                )
                await self.record_orphan(deletion)

        return updated

    async def update_many(
        self, record_ids: Sequence[str], patch: dict[str, Any] | BaseModel
    ) -> list[RecordBase]:
        """Apply the same partial update to several records.

        The patch is validated once against the update model before anything
        is written. Each record then goes through ``update``, so superseded
        images are cleaned up per record. Unknown ids are skipped.

        Raises:
            ValidationError: No ids, empty or invalid patch
            PersistentStoreError: Record store failure
        """
        changes = _validate(self.record_type.update_model, patch).model_dump(exclude_unset=True)
        ids = list(dict.fromkeys(i for i in record_ids if i))
        if not ids:
            raise ValidationError(f"No {self.record_type.label.lower()} ids provided")
        if not changes:
            raise ValidationError("No fields to update")

        updated = []
        for record in await self.get_many(ids):
            try:
                updated.append(await self.update(record.id, changes))
            except NotFoundError:
                logger.warning(f"{self.record_type.name} {record.id} removed during bulk update")
        logger.info(f"Bulk updated {len(updated)} of {len(ids)} {self.record_type.name} records")
        return updated

    async def reorder(self, orders: Mapping[str, int]) -> int:
        """Set the ``order`` field of several records.

        Args:
            orders: record id -> new order (unknown ids are skipped)

        Returns:
            Number of records updated

        Raises:
            ValidationError: The type has no order field
        """
        if "order" not in self.record_type.model.model_fields:
            raise ValidationError(f"{self.record_type.label} records cannot be reordered")

        count = 0
        for record_id, order in orders.items():
            try:
                await self.update(record_id, {"order": order})
            except NotFoundError:
                logger.warning(f"Skipping reorder of unknown {self.record_type.name} {record_id}")
                continue
            count += 1
        return count

    # =========================================================================
    # Delete
    # =========================================================================

    async def delete_asset(
        self, record_id: str, field: str, ref: AssetReference
    ) -> AssetDeletion | None:
        """Delete one referenced image.

        Never raises for asset store failures: they come back as a failed
        AssetDeletion. Returns None when no identifier can be resolved, since
        there is nothing the asset store could delete.
        """
        identifier = identifier_for(ref)
        if identifier is None:
            logger.warning(
                f"No asset identifier for {field} of {self.record_type.name} {record_id} "
                f"({ref.url}), skipping remote delete"
            )
            return None

        try:
            result = await self.assets.delete(identifier)
        except Exception as e:
            logger.error(f"Asset store delete of {identifier} raised: {e}")
            return AssetDeletion(
                identifier=identifier,
                field=field,
                record_id=record_id,
                outcome=DeleteOutcome.ERROR,
                error=str(e) or type(e).__name__,
            )

        return AssetDeletion(
            identifier=identifier,
            field=field,
            record_id=record_id,
            outcome=result.outcome,
            error=None if result.is_success else f"asset store returned {result.raw!r}",
        )

    async def remove_assets(self, record: RecordBase) -> list[AssetDeletion]:
        """Delete every image the record owns, concurrently.

        Each deletion settles on its own; one failure does not stop the others.
        """
        targets = self.record_type.owned_references(record)
        results = await asyncio.gather(
            *(self.delete_asset(record.id, field, ref) for field, ref in targets)
        )
        return [d for d in results if d is not None]

    async def record_orphan(self, deletion: AssetDeletion) -> None:
        if self.ledger is None:
            return
        try:
            await self.ledger.record(self.record_type.name, deletion)
        except PersistentStoreError as e:
            logger.error(f"Could not record orphaned asset {deletion.identifier}: {e}")

    async def delete(self, record_id: str) -> DeleteReport:
        """Delete a record and its images according to the type's delete policy.

        Raises:
            NotFoundError: No record with this id
            StrictDeleteError: STRICT policy and an image could not be deleted
                (the record is left in place)
            PersistentStoreError: Record store failure
        """
        record = await self.get(record_id)
        report = DeleteReport(record_id=record_id, deletions=await self.remove_assets(record))
        failed = report.failed

        if failed and self.record_type.delete_policy is Policy.STRICT:
            identifiers = ", ".join(d.identifier for d in failed)
            logger.error(
                f"Keeping {self.record_type.name} {record_id}: "
                f"failed to delete assets {identifiers}"
            )
            raise StrictDeleteError(
                f"Failed to delete {self.record_type.label.lower()} assets: {identifiers}",
                failed,
            )

        for deletion in failed:
            logger.warning(
                f"Removing {self.record_type.name} {record_id} despite failed delete of "
                f"{deletion.identifier}: {deletion.error or deletion.outcome.value}"
            )

        if not await self.records.delete(self.collection, record_id):
            logger.warning(f"{self.record_type.name} {record_id} was already removed")

        # Only once the record is gone: a sweep must never touch a live record's image
        for deletion in failed:
            await self.record_orphan(deletion)
        logger.info(
            f"Deleted {self.record_type.name} {record_id} "
            f"({len(report.deletions)} assets, {len(failed)} failed)"
        )
        return report
