"""Accessors for the asset reference fields of a record.

A record type declares its asset fields once; the coordinator uses them to
list owned references and to find references an update supersedes.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel

from folio.assets.resolver import identifier_for
from folio.schemas.assets import AssetReference


def same_asset(a: AssetReference, b: AssetReference) -> bool:
    """True if two references point at the same remote object."""
    if a == b or a.url == b.url:
        return True
    ident = identifier_for(a)
    return ident is not None and ident == identifier_for(b)


class AssetField(ABC):
    """One asset-bearing field of a record."""

    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"

    @abstractmethod
    def read(self, record: BaseModel) -> list[AssetReference]:
        """References currently held by the field."""
        pass

    @abstractmethod
    def superseded(self, old: BaseModel, new: BaseModel) -> list[AssetReference]:
        """References held by ``old`` that ``new`` no longer holds."""
        pass


class SingleAssetField(AssetField):
    """Field holding one optional AssetReference (cover image, logo, avatar)."""

    def read(self, record: BaseModel) -> list[AssetReference]:
        ref = getattr(record, self.name, None)
        return [ref] if ref is not None else []

    def superseded(self, old: BaseModel, new: BaseModel) -> list[AssetReference]:
        before = getattr(old, self.name, None)
        after = getattr(new, self.name, None)
        if before is None:
            return []
        # Re-uploads under the same identifier overwrite in place
        if after is not None and same_asset(before, after):
            return []
        return [before]


class AssetListField(AssetField):
    """Field holding a list of AssetReferences (gallery)."""

    def read(self, record: BaseModel) -> list[AssetReference]:
        return list(getattr(record, self.name, None) or [])

    def superseded(self, old: BaseModel, new: BaseModel) -> list[AssetReference]:
        after = self.read(new)
        return [ref for ref in self.read(old) if not any(same_asset(ref, n) for n in after)]
