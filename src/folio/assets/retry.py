"""Bounded retry with exponential backoff around any AssetStore.

``not-found`` is a terminal success for deletes and is never retried.
``error`` outcomes and AssetStoreError are retried until attempts run out;
the last outcome (or error) is then returned (or raised) unchanged.
"""

import asyncio

from loguru import logger

from folio.assets.store import AssetStore
from folio.errors import AssetStoreError
from folio.schemas.assets import DeleteResult, UploadResult


class RetryingAssetStore(AssetStore):
    """Wraps an AssetStore with bounded retries."""

    def __init__(
        self,
        inner: AssetStore,
        attempts: int = 3,
        backoff: float = 0.5,
        max_backoff: float = 8.0,
    ):
        """Initialize retrying wrapper.

        Args:
            inner: Store that performs the actual calls
            attempts: Total attempts per call (1 disables retrying)
            backoff: Delay before the second attempt, doubled afterwards
            max_backoff: Upper bound for a single delay
        """
        if attempts < 1:
            raise ValueError("attempts must be >= 1")
        self.inner = inner
        self.attempts = attempts
        self.backoff = backoff
        self.max_backoff = max_backoff

    def _delay(self, attempt: int) -> float:
        return min(self.backoff * (2 ** (attempt - 1)), self.max_backoff)

    async def upload(
        self, data: bytes | str, folder: str, identifier: str | None = None
    ) -> UploadResult:
        # Overwrite semantics make repeated uploads under one identifier safe.
        for attempt in range(1, self.attempts + 1):
            try:
                return await self.inner.upload(data, folder, identifier)
            except AssetStoreError as e:
                if attempt == self.attempts:
                    raise
                delay = self._delay(attempt)
                logger.warning(
                    f"Upload to {folder} failed (attempt {attempt}/{self.attempts}), "
                    f"retrying in {delay:.2f}s: {e}"
                )
                await asyncio.sleep(delay)
        raise AssertionError("unreachable")

    async def delete(self, identifier: str) -> DeleteResult:
        for attempt in range(1, self.attempts + 1):
            try:
                result = await self.inner.delete(identifier)
            except AssetStoreError as e:
                if attempt == self.attempts:
                    raise
                reason = str(e)
            else:
                if result.is_success or attempt == self.attempts:
                    return result
                reason = f"outcome {result.raw or result.outcome.value}"

            delay = self._delay(attempt)
            logger.warning(
                f"Delete of {identifier} failed (attempt {attempt}/{self.attempts}), "
                f"retrying in {delay:.2f}s: {reason}"
            )
            await asyncio.sleep(delay)
        raise AssertionError("unreachable")

    async def close(self) -> None:
        await self.inner.close()
