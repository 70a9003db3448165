"""Abstract asset store interface.

Defines the contract for remote image hosting with multiple backend implementations:
- CloudinaryAssetStore: Cloudinary REST API (production)
- MemoryAssetStore: in-process dict (dev/testing)
"""

from abc import ABC, abstractmethod

from folio.schemas.assets import DeleteResult, UploadResult


class AssetStore(ABC):
    """Abstract interface for the remote asset store.

    Every call is a single network attempt. Wrap with RetryingAssetStore for
    bounded retries.
    """

    @abstractmethod
    async def upload(
        self, data: bytes | str, folder: str, identifier: str | None = None
    ) -> UploadResult:
        """Store an image, replacing any object with the same identifier.

        Args:
            data: Raw image bytes or a base64 data URI
            folder: Destination folder
            identifier: Desired identifier within the folder (generated if None)

        Returns:
            UploadResult with URL, identifier and image metadata

        Raises:
            AssetStoreError: Network, auth or quota failure
        """
        pass

    @abstractmethod
    async def delete(self, identifier: str) -> DeleteResult:
        """Delete an image by identifier.

        Args:
            identifier: Asset store identifier

        Returns:
            DeleteResult with outcome ok, not-found or error

        Raises:
            AssetStoreError: Transport failure
        """
        pass

    async def close(self) -> None:
        """Release any held connections."""
        return None
