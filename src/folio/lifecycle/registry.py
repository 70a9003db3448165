"""Record types served by folio and their coordinators.

| type        | asset fields          | delete      | bulk delete |
|-------------|-----------------------|-------------|-------------|
| post        | image                 | strict      | best-effort |
| job         | -                     | best-effort | best-effort |
| case-study  | main_image, gallery   | best-effort | best-effort |
| client      | logo                  | strict      | best-effort |
| team-member | avatar                | best-effort | best-effort |
| inquiry     | -                     | best-effort | best-effort |

Case studies can also be fetched by slug. Inquiries accept bulk updates.
"""

from folio.assets.store import AssetStore
from folio.assets.store_factory import get_asset_store
from folio.lifecycle.bulk import BulkAggregator
from folio.lifecycle.coordinator import LifecycleCoordinator
from folio.lifecycle.fields import AssetListField, SingleAssetField
from folio.lifecycle.orphans import OrphanLedger
from folio.lifecycle.policy import Policy
from folio.lifecycle.record_type import RecordType
from folio.records.store import RecordStore
from folio.records.store_factory import get_record_store
from folio.schemas import records as r
from folio.settings import settings

POST = RecordType(
    name="post",
    label="Post",
    collection="posts",
    model=r.Post,
    create_model=r.PostCreate,
    update_model=r.PostUpdate,
    asset_fields=(SingleAssetField("image"),),
    delete_policy=Policy.STRICT,
    search_fields=("title", "excerpt", "category", "tags"),
)

JOB = RecordType(
    name="job",
    label="Job listing",
    collection="jobs",
    model=r.JobListing,
    create_model=r.JobListingCreate,
    update_model=r.JobListingUpdate,
    search_fields=("title", "description", "location", "skills"),
)

CASE_STUDY = RecordType(
    name="case-study",
    label="Case study",
    collection="case_studies",
    model=r.CaseStudy,
    create_model=r.CaseStudyCreate,
    update_model=r.CaseStudyUpdate,
    asset_fields=(SingleAssetField("main_image"), AssetListField("gallery")),
    search_fields=("title", "excerpt", "client_name", "technologies"),
    unique_fields=("title",),
)

CLIENT = RecordType(
    name="client",
    label="Client",
    collection="clients",
    model=r.Client,
    create_model=r.ClientCreate,
    update_model=r.ClientUpdate,
    asset_fields=(SingleAssetField("logo"),),
    delete_policy=Policy.STRICT,
    search_fields=("name",),
)

TEAM_MEMBER = RecordType(
    name="team-member",
    label="Team member",
    collection="team",
    model=r.TeamMember,
    create_model=r.TeamMemberCreate,
    update_model=r.TeamMemberUpdate,
    asset_fields=(SingleAssetField("avatar"),),
    search_fields=("name", "role", "expertise"),
    default_sort="order",
    default_descending=False,
)

INQUIRY = RecordType(
    name="inquiry",
    label="Inquiry",
    collection="inquiries",
    model=r.Inquiry,
    create_model=r.InquiryCreate,
    update_model=r.InquiryUpdate,
    search_fields=("name", "email", "company", "message"),
    bulk_update=True,
)

RECORD_TYPES: dict[str, RecordType] = {
    t.name: t for t in (POST, JOB, CASE_STUDY, CLIENT, TEAM_MEMBER, INQUIRY)
}


class ContentService:
    """One coordinator and bulk aggregator per record type, sharing two stores."""

    def __init__(
        self,
        records: RecordStore,
        assets: AssetStore,
        record_types: dict[str, RecordType] | None = None,
        ledger_enabled: bool = True,
    ):
        self.records = records
        self.assets = assets
        self.ledger = OrphanLedger(records) if ledger_enabled else None
        self.coordinators = {
            name: LifecycleCoordinator(record_type, records, assets, self.ledger)
            for name, record_type in (record_types or RECORD_TYPES).items()
        }
        self.bulk = {name: BulkAggregator(c) for name, c in self.coordinators.items()}

    def coordinator(self, name: str) -> LifecycleCoordinator:
        """Coordinator for a record type name.

        Raises:
            KeyError: Unknown record type
        """
        return self.coordinators[name]


_service_instance: ContentService | None = None


def get_content_service() -> ContentService:
    """Get content service (singleton) wired to the configured stores."""
    global _service_instance

    if _service_instance is None:
        _service_instance = ContentService(
            records=get_record_store(),
            assets=get_asset_store(),
            ledger_enabled=settings.lifecycle.orphan_ledger_enabled,
        )
    return _service_instance


def set_content_service(service: ContentService | None) -> None:
    """Replace the singleton (used by tests)."""
    global _service_instance
    _service_instance = service
