"""In-memory asset store.

Keeps uploaded images in a dict. Used for local development and tests; every
delete call is recorded so callers can assert on cleanup behaviour.
"""

import base64
from uuid import uuid4

from loguru import logger

from folio.assets.store import AssetStore
from folio.errors import AssetStoreError
from folio.schemas.assets import DeleteOutcome, DeleteResult, UploadResult


class MemoryAssetStore(AssetStore):
    """Dict-backed asset store.

    Outcomes can be scripted per identifier:
        store.script(identifier, DeleteOutcome.ERROR)      # delete reports error
        store.script(identifier, AssetStoreError("boom"))  # delete raises
    """

    def __init__(self, base_url: str = "https://assets.local/image/upload"):
        self.base_url = base_url.rstrip("/")
        self.objects: dict[str, bytes] = {}
        self.delete_calls: list[str] = []
        self.upload_calls: list[str] = []
        self._scripted: dict[str, DeleteOutcome | Exception] = {}
        self._version = 0

    def script(self, identifier: str, result: DeleteOutcome | Exception) -> None:
        """Force the outcome of future deletes of ``identifier``."""
        self._scripted[identifier] = result

    def url_for(self, identifier: str, fmt: str = "jpg") -> str:
        return f"{self.base_url}/v{self._version}/{identifier}.{fmt}"

    async def upload(
        self, data: bytes | str, folder: str, identifier: str | None = None
    ) -> UploadResult:
        if isinstance(data, str):
            payload = data.split(",", 1)[1] if data.startswith("data:") else data
            try:
                data = base64.b64decode(payload, validate=True)
            except ValueError as e:
                raise AssetStoreError(f"Invalid base64 image data: {e}") from e

        name = identifier or uuid4().hex[:20]
        full_id = f"{folder.strip('/')}/{name}" if folder else name
        self._version += 1
        self.objects[full_id] = data
        self.upload_calls.append(full_id)
        logger.debug(f"Stored asset {full_id} ({len(data)} bytes)")

        return UploadResult(
            url=self.url_for(full_id),
            identifier=full_id,
            format="jpg",
            byte_size=len(data),
        )

    async def delete(self, identifier: str) -> DeleteResult:
        self.delete_calls.append(identifier)

        scripted = self._scripted.get(identifier)
        if isinstance(scripted, Exception):
            raise scripted
        if scripted is not None:
            return DeleteResult(identifier=identifier, outcome=scripted, raw=scripted.value)

        if self.objects.pop(identifier, None) is None:
            return DeleteResult(
                identifier=identifier, outcome=DeleteOutcome.NOT_FOUND, raw="not found"
            )
        return DeleteResult(identifier=identifier, outcome=DeleteOutcome.OK, raw="ok")
