"""Health and status endpoints.

Public endpoints for health checks and system status.
"""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from folio.lifecycle.registry import RECORD_TYPES
from folio.settings import settings
from folio.version import __version__

router = APIRouter(prefix="/api", tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Health status (ok, degraded, down)")
    message: str = Field(description="Human-readable status")
    version: str = Field(description="Application version")


class StatusResponse(BaseModel):
    """System status response."""

    status: str = Field(description="System status")
    version: str = Field(description="Application version")
    asset_store: str = Field(description="Asset store provider")
    asset_store_configured: bool = Field(description="Whether Cloudinary credentials are set")
    record_store: str = Field(description="Record store provider")
    retry_attempts: int = Field(description="Attempts per asset store call")
    orphan_ledger_enabled: bool = Field(description="Whether failed deletions are recorded")
    record_types: dict[str, dict[str, str]] = Field(
        description="Delete policies per record type"
    )


@router.get("/health")
async def health() -> HealthResponse:
    """Health check endpoint.

    Returns:
        HealthResponse with status and version
    """
    return HealthResponse(status="ok", message="Server is running.", version=__version__)


@router.get("/status")
async def status() -> StatusResponse:
    """System status endpoint.

    Returns store configuration and the delete policies of every record type.
    Credentials are never included; missing Cloudinary credentials report
    ``degraded``.
    """
    configured = settings.assets.provider != "cloudinary" or settings.assets.is_configured
    return StatusResponse(
        status="ok" if configured else "degraded",
        version=__version__,
        asset_store=settings.assets.provider,
        asset_store_configured=configured,
        record_store=settings.records.provider,
        retry_attempts=settings.assets.retry_attempts,
        orphan_ledger_enabled=settings.lifecycle.orphan_ledger_enabled,
        record_types={
            name: {
                "delete_policy": t.delete_policy.value,
                "bulk_delete_policy": t.bulk_delete_policy.value,
            }
            for name, t in RECORD_TYPES.items()
        },
    )
