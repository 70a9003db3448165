"""Pydantic models for content records and asset references."""

from folio.schemas.assets import (
    AssetDeletion,
    AssetReference,
    DeleteOutcome,
    DeleteResult,
    UploadResult,
)
from folio.schemas.records import (
    CaseStudy,
    CaseStudyCreate,
    CaseStudyUpdate,
    Client,
    ClientCreate,
    ClientUpdate,
    Inquiry,
    InquiryCreate,
    InquiryUpdate,
    JobListing,
    JobListingCreate,
    JobListingUpdate,
    Post,
    PostCreate,
    PostUpdate,
    RecordBase,
    RecordPage,
    TeamMember,
    TeamMemberCreate,
    TeamMemberUpdate,
)

__all__ = [
    "AssetDeletion",
    "AssetReference",
    "DeleteOutcome",
    "DeleteResult",
    "UploadResult",
    "RecordBase",
    "RecordPage",
    "Post",
    "PostCreate",
    "PostUpdate",
    "JobListing",
    "JobListingCreate",
    "JobListingUpdate",
    "CaseStudy",
    "CaseStudyCreate",
    "CaseStudyUpdate",
    "Client",
    "ClientCreate",
    "ClientUpdate",
    "TeamMember",
    "TeamMemberCreate",
    "TeamMemberUpdate",
    "Inquiry",
    "InquiryCreate",
    "InquiryUpdate",
]
