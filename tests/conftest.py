"""Shared fixtures: in-memory stores and a content service wired to them."""

import pytest

from folio.assets.store_memory import MemoryAssetStore
from folio.lifecycle.registry import ContentService
from folio.records.store_memory import MemoryRecordStore
from folio.schemas.assets import AssetReference

CDN = "https://res.cloudinary.com/demo/image/upload"


def _hosted(identifier: str, version: int = 1712345678, explicit: bool = True) -> AssetReference:
    return AssetReference(
        url=f"{CDN}/v{version}/{identifier}.jpg",
        identifier=identifier if explicit else None,
    )


@pytest.fixture
def hosted():
    """Factory for references to hosted jpgs, with or without a stored identifier.

    Example:
        hosted("posts/abc")                  # identifier stored
        hosted("posts/abc", explicit=False)  # identifier derived from url
    """
    return _hosted


@pytest.fixture
def records():
    return MemoryRecordStore()


@pytest.fixture
def assets():
    return MemoryAssetStore()


@pytest.fixture
def service(records, assets):
    return ContentService(records=records, assets=assets)
