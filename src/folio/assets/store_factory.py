"""Factory for asset store providers.

Creates the AssetStore implementation named by ASSETS__PROVIDER, wrapped with
retries when ASSETS__RETRY_ATTEMPTS > 1.
"""

from loguru import logger

from folio.assets.retry import RetryingAssetStore
from folio.assets.store import AssetStore
from folio.assets.store_cloudinary import CloudinaryAssetStore
from folio.assets.store_memory import MemoryAssetStore
from folio.settings import AssetStoreSettings, settings


# Singleton instance
_asset_store_instance: AssetStore | None = None


def build_asset_store(config: AssetStoreSettings) -> AssetStore:
    """Build an asset store from explicit settings.

    Raises:
        ValueError: If the provider is unknown or credentials are missing
    """
    provider = config.provider.lower()

    if provider == "cloudinary":
        store: AssetStore = CloudinaryAssetStore(
            cloud_name=config.cloud_name,
            api_key=config.api_key,
            api_secret=config.api_secret,
            api_base_url=config.api_base_url,
            timeout=config.timeout,
        )
    elif provider == "memory":
        logger.warning("Using in-memory asset store - uploads are not persisted")
        store = MemoryAssetStore()
    else:
        raise ValueError(
            f"Invalid asset store provider: {provider}. Valid options: cloudinary, memory"
        )

    if config.retry_attempts > 1:
        store = RetryingAssetStore(
            store, attempts=config.retry_attempts, backoff=config.retry_backoff
        )
    return store


def get_asset_store() -> AssetStore:
    """Get asset store instance (singleton)."""
    global _asset_store_instance

    if _asset_store_instance is None:
        logger.info(f"Initializing {settings.assets.provider} asset store")
        _asset_store_instance = build_asset_store(settings.assets)

    return _asset_store_instance


def set_asset_store(store: AssetStore | None) -> None:
    """Replace the singleton (used by the CLI and tests)."""
    global _asset_store_instance
    _asset_store_instance = store
