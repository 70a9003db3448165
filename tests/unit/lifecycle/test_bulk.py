"""Unit tests for bulk deletes."""

import dataclasses
from unittest.mock import AsyncMock, patch

import pytest

from folio.errors import AssetStoreError, NotFoundError, PersistentStoreError, ValidationError
from folio.lifecycle.bulk import BulkAggregator
from folio.lifecycle.coordinator import LifecycleCoordinator
from folio.lifecycle.orphans import ORPHANS_COLLECTION, OrphanLedger
from folio.lifecycle.policy import Policy
from folio.lifecycle.registry import POST
from folio.schemas.assets import AssetReference, DeleteOutcome


def post_payload(title: str, image: AssetReference) -> dict:
    return {
        "title": title,
        "excerpt": "e",
        "content": "c",
        "category": "news",
        "image": image.model_dump(),
    }


async def _create_posts(coordinator, hosted, names):
    return [
        await coordinator.create(post_payload(name, hosted(f"posts/{name}"))) for name in names
    ]


@pytest.mark.asyncio
async def test_bulk_delete_continues_past_failures(service, records, assets, hosted):
    """Bulk deletes are best-effort even for strict record types."""
    a, b, c = await _create_posts(service.coordinator("post"), hosted, ["a", "b", "c"])
    assets.script("posts/b", AssetStoreError("boom"))

    result = await service.bulk["post"].delete_many([a.id, b.id, c.id])

    assert result.deleted_count == 3
    assert sorted(result.deleted_ids) == sorted([a.id, b.id, c.id])
    assert result.kept_ids == []
    assert [(d.identifier, d.outcome) for d in result.failed] == [("posts/b", DeleteOutcome.ERROR)]
    assert sorted(assets.delete_calls) == ["posts/a", "posts/b", "posts/c"]
    assert await records.count("posts") == 0
    orphans = await records.find(ORPHANS_COLLECTION)
    assert [o["identifier"] for o in orphans] == ["posts/b"]


@pytest.mark.asyncio
async def test_bulk_delete_ignores_unknown_and_duplicate_ids(service, records, hosted):
    (a,) = await _create_posts(service.coordinator("post"), hosted, ["a"])

    result = await service.bulk["post"].delete_many([a.id, "unknown", a.id])

    assert result.deleted_count == 1
    assert result.deleted_ids == [a.id]


@pytest.mark.asyncio
async def test_bulk_delete_no_ids(service):
    with pytest.raises(ValidationError):
        await service.bulk["post"].delete_many([])


@pytest.mark.asyncio
async def test_bulk_delete_nothing_found(service, assets):
    with pytest.raises(NotFoundError):
        await service.bulk["post"].delete_many(["x", "y"])
    assert assets.delete_calls == []


@pytest.mark.asyncio
async def test_bulk_delete_gallery_assets(service, assets, hosted):
    studies = service.coordinator("case-study")
    study = await studies.create(
        {
            "title": "Shop",
            "excerpt": "e",
            "project_overview": "o",
            "client_name": "Acme",
            "completed_date": "2024-05-01T00:00:00Z",
            "technologies": ["python"],
            "main_image": hosted("cs/main").model_dump(),
            "gallery": [hosted("cs/g1").model_dump(), hosted("cs/g2").model_dump()],
        }
    )

    result = await service.bulk["case-study"].delete_many([study.id])

    assert sorted(assets.delete_calls) == ["cs/g1", "cs/g2", "cs/main"]
    assert len(result.deletions) == 3


@pytest.mark.asyncio
async def test_strict_bulk_policy_keeps_failed_records(records, assets, hosted):
    strict_posts = dataclasses.replace(POST, bulk_delete_policy=Policy.STRICT)
    coordinator = LifecycleCoordinator(strict_posts, records, assets, OrphanLedger(records))
    a, b = await _create_posts(coordinator, hosted, ["a", "b"])
    assets.script("posts/b", DeleteOutcome.ERROR)

    result = await BulkAggregator(coordinator).delete_many([a.id, b.id])

    assert result.deleted_ids == [a.id]
    assert result.kept_ids == [b.id]
    assert result.deleted_count == 1
    assert await records.get("posts", b.id) is not None
    assert await records.find(ORPHANS_COLLECTION) == []


@pytest.mark.asyncio
async def test_bulk_delete_store_failure_records_no_orphans(service, records, assets, hosted):
    a, b = await _create_posts(service.coordinator("post"), hosted, ["a", "b"])
    assets.script("posts/b", DeleteOutcome.ERROR)

    with patch.object(
        records, "delete_many", AsyncMock(side_effect=PersistentStoreError("disk full"))
    ):
        with pytest.raises(PersistentStoreError):
            await service.bulk["post"].delete_many([a.id, b.id])

    assert await records.count("posts") == 2
    assert await records.find(ORPHANS_COLLECTION) == []
