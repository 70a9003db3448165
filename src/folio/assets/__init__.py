"""Remote asset store access.

- resolver: derive identifiers from hosted URLs
- AssetStore: upload/delete contract with Cloudinary and in-memory backends
- RetryingAssetStore: bounded retry wrapper
"""

from folio.assets.resolver import identifier_for, resolve_identifier
from folio.assets.retry import RetryingAssetStore
from folio.assets.store import AssetStore
from folio.assets.store_cloudinary import CloudinaryAssetStore
from folio.assets.store_factory import build_asset_store, get_asset_store
from folio.assets.store_memory import MemoryAssetStore

__all__ = [
    "AssetStore",
    "CloudinaryAssetStore",
    "MemoryAssetStore",
    "RetryingAssetStore",
    "build_asset_store",
    "get_asset_store",
    "identifier_for",
    "resolve_identifier",
]
