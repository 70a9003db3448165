"""Record type definitions driving a LifecycleCoordinator."""

from dataclasses import dataclass

from pydantic import BaseModel

from folio.lifecycle.fields import AssetField
from folio.lifecycle.policy import Policy
from folio.schemas.assets import AssetReference
from folio.schemas.records import RecordBase


@dataclass(frozen=True)
class RecordType:
    """Everything the coordinator needs to know about one record type.

    Single-record and bulk deletes have independent policies; bulk
    deletes default to best-effort for every type. ``bulk_update`` exposes
    ``POST /bulk/update``; types with an ``order`` field can be reordered.
    """

    name: str
    label: str
    collection: str
    model: type[RecordBase]
    create_model: type[BaseModel]
    update_model: type[BaseModel]
    asset_fields: tuple[AssetField, ...] = ()
    delete_policy: Policy = Policy.BEST_EFFORT
    bulk_delete_policy: Policy = Policy.BEST_EFFORT
    search_fields: tuple[str, ...] = ()
    unique_fields: tuple[str, ...] = ()
    default_sort: str = "created_at"
    default_descending: bool = True
    bulk_update: bool = False

    def owned_references(self, record: BaseModel) -> list[tuple[str, AssetReference]]:
        """(field name, reference) for every asset the record holds."""
        return [(field.name, ref) for field in self.asset_fields for ref in field.read(record)]
