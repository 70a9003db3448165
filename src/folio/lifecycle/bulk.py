"""Bulk delete of records and their images.

All owned images across the batch are deleted concurrently and each deletion
settles independently. The records are then removed in one batch call.

Bulk deletes follow the record type's ``bulk_delete_policy``, which is
separate from the single-record ``delete_policy``. With the default
BEST_EFFORT every matched record is removed whatever the image outcomes;
with STRICT, records with a failed image deletion are kept.
"""

import asyncio
from typing import Sequence

from loguru import logger
from pydantic import BaseModel, Field, computed_field

from folio.errors import NotFoundError, ValidationError
from folio.lifecycle.coordinator import LifecycleCoordinator
from folio.lifecycle.policy import Policy
from folio.schemas.assets import AssetDeletion, DeleteOutcome


class BulkDeleteResult(BaseModel):
    """Outcome of a bulk delete."""

    deleted_count: int
    deleted_ids: list[str] = Field(default_factory=list)
    kept_ids: list[str] = Field(default_factory=list)
    deletions: list[AssetDeletion] = Field(default_factory=list)

    @computed_field
    @property
    def failed(self) -> list[AssetDeletion]:
        return [d for d in self.deletions if not d.succeeded]


class BulkAggregator:
    """Fans out image deletions for a batch of records of one type."""

    def __init__(self, coordinator: LifecycleCoordinator):
        self.coordinator = coordinator

    @property
    def record_type(self):
        return self.coordinator.record_type

    async def delete_many(self, record_ids: Sequence[str]) -> BulkDeleteResult:
        """Delete a batch of records and every image they own.

        Args:
            record_ids: Ids of records to delete (unknown ids are ignored)

        Returns:
            BulkDeleteResult with deleted/kept ids and per-image outcomes

        Raises:
            ValidationError: No ids given
            NotFoundError: None of the ids match a record
            PersistentStoreError: Record store failure
        """
        ids = list(dict.fromkeys(i for i in record_ids if i))
        if not ids:
            raise ValidationError(f"No {self.record_type.label.lower()} ids provided")

        records = await self.coordinator.get_many(ids)
        if not records:
            raise NotFoundError(f"No {self.record_type.label.lower()} records found")

        targets = [
            (record.id, field, ref)
            for record in records
            for field, ref in self.record_type.owned_references(record)
        ]
        settled = await asyncio.gather(
            *(self.coordinator.delete_asset(rid, field, ref) for rid, field, ref in targets),
            return_exceptions=True,
        )

        deletions: list[AssetDeletion] = []
        for (rid, field, ref), outcome in zip(targets, settled):
            if isinstance(outcome, BaseException):
                # delete_asset reports failures itself; this only catches the unexpected
                outcome = AssetDeletion(
                    identifier=ref.identifier or ref.url,
                    field=field,
                    record_id=rid,
                    outcome=DeleteOutcome.ERROR,
                    error=str(outcome) or type(outcome).__name__,
                )
            if outcome is not None:
                deletions.append(outcome)

        failed_records = {d.record_id for d in deletions if not d.succeeded}
        if self.record_type.bulk_delete_policy is Policy.STRICT:
            kept = [r.id for r in records if r.id in failed_records]
        else:
            kept = []
        to_delete = [r.id for r in records if r.id not in kept]

        orphaned = [d for d in deletions if not d.succeeded and d.record_id not in kept]
        for deletion in orphaned:
            logger.warning(
                f"Bulk delete of {self.record_type.name} {deletion.record_id} continues "
                f"despite failed delete of {deletion.identifier}"
            )

        deleted_count = 0
        if to_delete:
            deleted_count = await self.coordinator.records.delete_many(
                self.coordinator.collection, to_delete
            )

        # Recorded after removal so a sweep never targets a live record's image
        for deletion in orphaned:
            await self.coordinator.record_orphan(deletion)

        result = BulkDeleteResult(
            deleted_count=deleted_count,
            deleted_ids=to_delete,
            kept_ids=kept,
            deletions=deletions,
        )
        logger.info(
            f"Bulk deleted {deleted_count} {self.record_type.name} records "
            f"({len(deletions)} assets, {len(result.failed)} failed, {len(kept)} kept)"
        )
        return result
