"""Image upload/delete endpoints.

Clients upload an image here first, then send the returned ``url`` and
``identifier`` as an asset reference when creating or updating a record.
"""

from fastapi import APIRouter, HTTPException, status
from loguru import logger
from pydantic import BaseModel, Field

from folio.api.dependencies import Assets
from folio.schemas.assets import AssetReference, UploadResult
from folio.settings import settings

router = APIRouter(prefix="/api/assets", tags=["Assets"])


class UploadRequest(BaseModel):
    """Image upload request."""

    image: str = Field(default="", description="Base64 data URI or remote image URL")
    folder: str | None = Field(default=None, description="Destination folder")
    identifier: str | None = Field(
        default=None, description="Desired identifier (existing image is overwritten)"
    )


class UploadResponse(BaseModel):
    message: str
    result: UploadResult
    reference: AssetReference = Field(description="Ready to store in a record image field")


class DeleteRequest(BaseModel):
    identifier: str = Field(default="", description="Asset store identifier")


class DeleteResponse(BaseModel):
    message: str
    identifier: str
    outcome: str


@router.post("/upload")
async def upload_image(request: UploadRequest, assets: Assets) -> UploadResponse:
    """Upload an image to the asset store.

    Example:
        ```
        POST /api/assets/upload
        {
            "image": "data:image/png;base64,iVBORw0KGgo...",
            "folder": "posts",
            "identifier": "launch-cover"
        }
        ```
    """
    if not request.image:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Image data is required"
        )

    folder = request.folder or settings.assets.default_folder
    result = await assets.upload(request.image, folder, request.identifier)
    logger.info(f"Uploaded image {result.identifier}")
    return UploadResponse(
        message="Image uploaded successfully", result=result, reference=result.reference()
    )


@router.post("/delete")
async def delete_image(request: DeleteRequest, assets: Assets) -> DeleteResponse:
    """Delete an image from the asset store by identifier.

    ``not-found`` is reported as a successful no-op.
    """
    if not request.identifier:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Identifier is required"
        )

    result = await assets.delete(request.identifier)
    if not result.is_success:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to delete image: asset store returned {result.raw!r}",
        )
    return DeleteResponse(
        message="Image deleted successfully",
        identifier=result.identifier,
        outcome=result.outcome.value,
    )
