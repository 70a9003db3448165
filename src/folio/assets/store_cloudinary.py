"""Cloudinary-backed asset store.

Talks to the Cloudinary upload API directly over httpx using signed requests:

    POST {api_base_url}/{cloud_name}/image/upload
    POST {api_base_url}/{cloud_name}/image/destroy

Signature: SHA-1 of the alphabetically sorted ``key=value`` parameters joined
by ``&`` with the API secret appended. ``file``, ``api_key`` and
``resource_type`` are not signed.
"""

import hashlib
import time
from typing import Any

import httpx
from loguru import logger

from folio.assets.store import AssetStore
from folio.errors import AssetStoreError
from folio.schemas.assets import DeleteOutcome, DeleteResult, UploadResult

_UNSIGNED = {"file", "api_key", "resource_type", "cloud_name"}

_OUTCOMES = {
    "ok": DeleteOutcome.OK,
    "not found": DeleteOutcome.NOT_FOUND,
}


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    """Compute the Cloudinary request signature for ``params``."""
    payload = "&".join(
        f"{key}={params[key]}"
        for key in sorted(params)
        if key not in _UNSIGNED and params[key] not in (None, "")
    )
    return hashlib.sha1(f"{payload}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryAssetStore(AssetStore):
    """Asset store using the Cloudinary REST API."""

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        api_base_url: str = "https://api.cloudinary.com/v1_1",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize Cloudinary store.

        Args:
            cloud_name: Cloudinary cloud name
            api_key: API key
            api_secret: API secret (used for signing only, never sent)
            api_base_url: REST API base URL
            timeout: HTTP timeout in seconds
            client: Optional preconfigured httpx client
        """
        if not (cloud_name and api_key and api_secret):
            raise ValueError(
                "Cloudinary credentials required "
                "(ASSETS__CLOUD_NAME, ASSETS__API_KEY, ASSETS__API_SECRET)"
            )

        self.cloud_name = cloud_name
        self.api_key = api_key
        self._api_secret = api_secret
        self.endpoint = f"{api_base_url.rstrip('/')}/{cloud_name}/image"
        self._client = client or httpx.AsyncClient(timeout=timeout)
        logger.info(f"CloudinaryAssetStore initialized: cloud={cloud_name}")

    def _signed(self, params: dict[str, Any]) -> dict[str, Any]:
        params = {k: v for k, v in params.items() if v not in (None, "")}
        params["timestamp"] = int(time.time())
        params["signature"] = sign_params(params, self._api_secret)
        params["api_key"] = self.api_key
        return params

    async def _post(self, action: str, data: dict[str, Any], files: dict | None = None) -> dict:
        url = f"{self.endpoint}/{action}"
        try:
            response = await self._client.post(url, data=data, files=files)
        except httpx.HTTPError as e:
            raise AssetStoreError(f"Cloudinary {action} request failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code >= 400:
            message = body.get("error", {}).get("message") if isinstance(body, dict) else None
            raise AssetStoreError(
                f"Cloudinary {action} failed ({response.status_code}): "
                f"{message or response.text[:200]}"
            )
        return body

    async def upload(
        self, data: bytes | str, folder: str, identifier: str | None = None
    ) -> UploadResult:
        """Upload an image with overwrite semantics.

        Args:
            data: Raw bytes (sent as multipart) or a data URI / remote URL string
            folder: Destination folder
            identifier: Desired public id within the folder

        Returns:
            UploadResult built from the Cloudinary response
        """
        params = self._signed(
            {"folder": folder, "public_id": identifier, "overwrite": "true"}
        )

        if isinstance(data, bytes):
            body = await self._post("upload", params, files={"file": ("upload", data)})
        else:
            body = await self._post("upload", {**params, "file": data})

        logger.debug(f"Uploaded asset {body.get('public_id')} to folder {folder}")
        try:
            return UploadResult(
                url=body["secure_url"],
                identifier=body["public_id"],
                width=body.get("width"),
                height=body.get("height"),
                format=body.get("format"),
                byte_size=body.get("bytes"),
            )
        except KeyError as e:
            raise AssetStoreError(f"Cloudinary upload response missing {e}") from e

    async def delete(self, identifier: str) -> DeleteResult:
        """Destroy an image by public id.

        ``"ok"`` and ``"not found"`` map to their outcomes; any other result
        string is reported as an error outcome.
        """
        body = await self._post("destroy", self._signed({"public_id": identifier}))
        raw = body.get("result")
        outcome = _OUTCOMES.get(raw, DeleteOutcome.ERROR)
        logger.debug(f"Cloudinary destroy {identifier}: {raw}")
        return DeleteResult(identifier=identifier, outcome=outcome, raw=raw)

    async def close(self) -> None:
        await self._client.aclose()
