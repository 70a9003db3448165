"""Error kinds surfaced by the content core.

The HTTP layer maps these to status codes; the core itself never speaks HTTP.
"""

from typing import TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

if TYPE_CHECKING:
    from folio.schemas.assets import AssetDeletion


class FolioError(Exception):
    """Base class for all folio errors."""


class ValidationError(FolioError):
    """Caller-supplied data violates a required-field or shape constraint."""

    def __init__(self, message: str, errors: list[dict] | None = None):
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        """Build from a pydantic validation failure, keeping field locations."""
        errors = [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        fields = ", ".join(e["field"] for e in errors if e["field"])
        message = f"Invalid fields: {fields}" if fields else "Invalid input"
        return cls(message, errors)


class NotFoundError(FolioError):
    """Referenced record identifier does not exist."""


class AssetStoreError(FolioError):
    """Remote asset upload/delete failed or returned an unexpected outcome."""


class StrictDeleteError(AssetStoreError):
    """A strict-policy delete aborted because an asset could not be removed.

    The owning record is left in place.
    """

    def __init__(self, message: str, failed: list["AssetDeletion"]):
        super().__init__(message)
        self.failed = failed


class PersistentStoreError(FolioError):
    """Underlying record store call failed."""
