"""Ledger of assets whose remote deletion failed.

When a record is removed or an image is superseded but the remote delete
fails, the image is orphaned: nothing references it any more. The ledger keeps
one entry per identifier in the record store so a later sweep can retry the
deletion.

Storage:
    collection ``_orphans``, document id = sha1(identifier)
"""

import hashlib
from datetime import datetime

from loguru import logger
from pydantic import BaseModel, Field

from folio.assets.store import AssetStore
from folio.records.store import Query, RecordStore
from folio.schemas.assets import AssetDeletion
from folio.schemas.records import utc_now

ORPHANS_COLLECTION = "_orphans"


class OrphanEntry(BaseModel):
    """One asset awaiting deletion."""

    id: str
    identifier: str
    record_type: str
    record_id: str
    field: str
    reason: str | None = None
    attempts: int = 1
    recorded_at: datetime = Field(default_factory=utc_now)
    last_attempt_at: datetime = Field(default_factory=utc_now)


class SweepResult(BaseModel):
    """Outcome of one sweep over the ledger."""

    cleared: list[str] = Field(default_factory=list)
    remaining: list[str] = Field(default_factory=list)


def _entry_id(identifier: str) -> str:
    return hashlib.sha1(identifier.encode("utf-8")).hexdigest()


class OrphanLedger:
    """Records failed asset deletions and retries them on demand."""

    def __init__(self, records: RecordStore):
        self.records = records

    async def record(self, record_type: str, deletion: AssetDeletion) -> OrphanEntry:
        """Add a failed deletion, bumping the attempt count if already known."""
        entry_id = _entry_id(deletion.identifier)
        existing = await self.records.get(ORPHANS_COLLECTION, entry_id)

        if existing:
            entry = OrphanEntry.model_validate(existing)
            entry.attempts += 1
            entry.reason = deletion.error or deletion.outcome.value
            entry.last_attempt_at = utc_now()
            await self.records.update(ORPHANS_COLLECTION, entry_id, entry.model_dump(mode="json"))
        else:
            entry = OrphanEntry(
                id=entry_id,
                identifier=deletion.identifier,
                record_type=record_type,
                record_id=deletion.record_id,
                field=deletion.field,
                reason=deletion.error or deletion.outcome.value,
            )
            await self.records.insert(ORPHANS_COLLECTION, entry.model_dump(mode="json"))

        logger.info(f"Recorded orphaned asset {deletion.identifier} (attempts={entry.attempts})")
        return entry

    async def entries(self) -> list[OrphanEntry]:
        docs = await self.records.find(
            ORPHANS_COLLECTION, Query(sort_by="recorded_at", descending=False)
        )
        return [OrphanEntry.model_validate(doc) for doc in docs]

    async def sweep(self, assets: AssetStore) -> SweepResult:
        """Retry every ledger entry once.

        Entries whose delete now reports ok or not-found are removed. The rest
        (including deletes that raised) stay with their attempt count bumped.
        """
        result = SweepResult()

        for entry in await self.entries():
            try:
                outcome = await assets.delete(entry.identifier)
                succeeded = outcome.is_success
                reason = None if succeeded else (outcome.raw or outcome.outcome.value)
            except Exception as e:
                succeeded = False
                reason = str(e) or type(e).__name__

            if succeeded:
                await self.records.delete(ORPHANS_COLLECTION, entry.id)
                result.cleared.append(entry.identifier)
                continue

            entry.attempts += 1
            entry.reason = reason
            entry.last_attempt_at = utc_now()
            await self.records.update(ORPHANS_COLLECTION, entry.id, entry.model_dump(mode="json"))
            result.remaining.append(entry.identifier)
            logger.warning(f"Orphaned asset {entry.identifier} still not deleted: {reason}")

        logger.info(
            f"Orphan sweep: {len(result.cleared)} cleared, {len(result.remaining)} remaining"
        )
        return result
