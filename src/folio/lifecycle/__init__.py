"""Record lifecycle: keeps records and their hosted images consistent.

- LifecycleCoordinator: create/update/delete for one record type
- BulkAggregator: concurrent image cleanup + batch record removal
- OrphanLedger: failed deletions kept for later sweeps
"""

from folio.lifecycle.bulk import BulkAggregator, BulkDeleteResult
from folio.lifecycle.coordinator import DeleteReport, LifecycleCoordinator
from folio.lifecycle.fields import AssetField, AssetListField, SingleAssetField
from folio.lifecycle.orphans import OrphanEntry, OrphanLedger, SweepResult
from folio.lifecycle.policy import Policy
from folio.lifecycle.record_type import RecordType
from folio.lifecycle.registry import (
    RECORD_TYPES,
    ContentService,
    get_content_service,
)

__all__ = [
    "AssetField",
    "AssetListField",
    "BulkAggregator",
    "BulkDeleteResult",
    "ContentService",
    "DeleteReport",
    "LifecycleCoordinator",
    "OrphanEntry",
    "OrphanLedger",
    "Policy",
    "RECORD_TYPES",
    "RecordType",
    "SingleAssetField",
    "SweepResult",
    "get_content_service",
]
