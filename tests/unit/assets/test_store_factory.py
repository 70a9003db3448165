"""Unit tests for building asset stores from settings."""

import pytest

from folio.assets.retry import RetryingAssetStore
from folio.assets.store_cloudinary import CloudinaryAssetStore
from folio.assets.store_factory import build_asset_store
from folio.assets.store_memory import MemoryAssetStore
from folio.settings import AssetStoreSettings


def test_memory_provider_single_attempt():
    store = build_asset_store(AssetStoreSettings(provider="memory"))
    assert isinstance(store, MemoryAssetStore)


def test_retry_wrapper_when_attempts_configured():
    store = build_asset_store(AssetStoreSettings(provider="memory", retry_attempts=3))

    assert isinstance(store, RetryingAssetStore)
    assert store.attempts == 3
    assert isinstance(store.inner, MemoryAssetStore)


def test_cloudinary_provider():
    store = build_asset_store(
        AssetStoreSettings(provider="cloudinary", cloud_name="demo", api_key="k", api_secret="s")
    )
    assert isinstance(store, CloudinaryAssetStore)
    assert store.endpoint == "https://api.cloudinary.com/v1_1/demo/image"


def test_cloudinary_requires_credentials():
    with pytest.raises(ValueError):
        build_asset_store(
            AssetStoreSettings(provider="cloudinary", cloud_name="", api_key="", api_secret="")
        )


def test_unknown_provider():
    with pytest.raises(ValueError, match="Invalid asset store provider"):
        build_asset_store(AssetStoreSettings(provider="s3"))


def test_is_configured_needs_all_credentials():
    assert AssetStoreSettings(cloud_name="demo", api_key="k", api_secret="s").is_configured
    assert not AssetStoreSettings(cloud_name="demo", api_key="k", api_secret="").is_configured
