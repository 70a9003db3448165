"""Asset reference and asset-store result models.

An AssetReference pairs the public URL of a hosted image with the identifier
the asset store needs to delete it. The identifier is authoritative; the URL
is a fallback from which an identifier can sometimes be derived.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class AssetReference(BaseModel):
    """One hosted image attached to a record field."""

    url: str = Field(min_length=1, description="Public URL of the hosted image")
    identifier: str | None = Field(
        default=None,
        description="Asset store identifier (public id); derived from url when absent",
    )

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)


class UploadResult(BaseModel):
    """Result of storing an image in the asset store."""

    url: str = Field(description="Secure public URL")
    identifier: str = Field(description="Asset store identifier")
    width: int | None = Field(default=None, description="Pixel width")
    height: int | None = Field(default=None, description="Pixel height")
    format: str | None = Field(default=None, description="Image format (jpg, png, ...)")
    byte_size: int | None = Field(default=None, description="Stored size in bytes")

    def reference(self) -> AssetReference:
        return AssetReference(url=self.url, identifier=self.identifier)


class DeleteOutcome(str, Enum):
    """Outcome reported by the asset store for a delete call."""

    OK = "ok"
    NOT_FOUND = "not-found"
    ERROR = "error"


class DeleteResult(BaseModel):
    """Asset store answer to a single delete call."""

    identifier: str
    outcome: DeleteOutcome
    raw: str | None = Field(
        default=None, description="Result string as returned by the provider"
    )

    @property
    def is_success(self) -> bool:
        """ok and not-found both count as success (delete is idempotent)."""
        return self.outcome in (DeleteOutcome.OK, DeleteOutcome.NOT_FOUND)


class AssetDeletion(BaseModel):
    """One remote deletion attempted while removing or updating a record."""

    identifier: str
    field: str
    record_id: str
    outcome: DeleteOutcome
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome in (DeleteOutcome.OK, DeleteOutcome.NOT_FOUND)
