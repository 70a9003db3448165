"""FastAPI dependencies.

Route handlers receive stores and coordinators through these so tests can
swap them with ``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends

from folio.assets.store import AssetStore
from folio.lifecycle.registry import ContentService, get_content_service


def get_service() -> ContentService:
    return get_content_service()


def get_assets(service: Annotated[ContentService, Depends(get_service)]) -> AssetStore:
    return service.assets


Service = Annotated[ContentService, Depends(get_service)]
Assets = Annotated[AssetStore, Depends(get_assets)]
