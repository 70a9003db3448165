"""Content record models.

Each record type has three models:
- ``<Type>Create``: input accepted on create (required fields enforced)
- ``<Type>``: the stored record (create fields + id and timestamps)
- ``<Type>Update``: partial patch, every field optional
"""

import re
from datetime import datetime, timezone
from typing import Literal
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializeAsAny,
    computed_field,
    field_validator,
    model_validator,
)

from folio.schemas.assets import AssetReference


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def slugify(title: str) -> str:
    """Lowercase, strip punctuation, collapse whitespace and dashes."""
    slug = re.sub(r"[^a-z0-9\s-]", "", title.lower())
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def _drop_blank(values: list[str] | None) -> list[str] | None:
    if values is None:
        return None
    return [v.strip() for v in values if v and v.strip()]


class RecordBase(BaseModel):
    """Identity and timestamps shared by every stored record."""

    id: str = Field(default_factory=lambda: uuid4().hex, description="Record identifier")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class _Input(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


# =============================================================================
# Posts (blog)
# =============================================================================


class Author(BaseModel):
    name: str = "Admin"
    role: str | None = None
    avatar: str | None = None


class PostCreate(_Input):
    title: str = Field(min_length=1)
    excerpt: str = Field(min_length=1)
    content: str = Field(min_length=1)
    category: str = Field(min_length=1)
    tags: list[str] = Field(default_factory=list)
    image: AssetReference
    read_time: int = Field(default=5, ge=0)
    status: Literal["draft", "published"] = "published"
    featured: bool = False
    author: Author = Field(default_factory=Author)
    publish_date: datetime = Field(default_factory=utc_now)


class Post(PostCreate, RecordBase):
    pass


class PostUpdate(_Input):
    title: str | None = Field(default=None, min_length=1)
    excerpt: str | None = Field(default=None, min_length=1)
    content: str | None = Field(default=None, min_length=1)
    category: str | None = Field(default=None, min_length=1)
    tags: list[str] | None = None
    image: AssetReference | None = None
    read_time: int | None = Field(default=None, ge=0)
    status: Literal["draft", "published"] | None = None
    featured: bool | None = None
    author: Author | None = None
    publish_date: datetime | None = None


# =============================================================================
# Job listings (careers)
# =============================================================================

Department = Literal["engineering", "design", "marketing", "sales", "operations", "other"]
JobType = Literal["remote", "hybrid", "in-office"]
JobStatus = Literal["active", "paused", "closed"]


class JobListingCreate(_Input):
    title: str = Field(min_length=1)
    department: Department
    location: str = Field(min_length=1)
    job_type: JobType
    experience: str | None = None
    salary: str | None = None
    skills: list[str] = Field(min_length=1)
    description: str = Field(min_length=1)
    requirements: list[str] = Field(min_length=1)
    responsibilities: list[str] = Field(default_factory=list)
    benefits: list[str] = Field(default_factory=list)
    status: JobStatus = "active"
    posted_date: datetime = Field(default_factory=utc_now)
    application_count: int = Field(default=0, ge=0)
    view_count: int = Field(default=0, ge=0)

    @field_validator("skills", "requirements", mode="before")
    @classmethod
    def _strip_blank_entries(cls, v):
        return _drop_blank(v) if isinstance(v, list) else v


class JobListing(JobListingCreate, RecordBase):
    pass


class JobListingUpdate(_Input):
    title: str | None = Field(default=None, min_length=1)
    department: Department | None = None
    location: str | None = Field(default=None, min_length=1)
    job_type: JobType | None = None
    experience: str | None = None
    salary: str | None = None
    skills: list[str] | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, min_length=1)
    requirements: list[str] | None = Field(default=None, min_length=1)
    responsibilities: list[str] | None = None
    benefits: list[str] | None = None
    status: JobStatus | None = None

    @field_validator("skills", "requirements", mode="before")
    @classmethod
    def _strip_blank_entries(cls, v):
        return _drop_blank(v) if isinstance(v, list) else v


# =============================================================================
# Case studies (portfolio)
# =============================================================================

CaseStudyStatus = Literal["completed", "in-progress", "on-hold"]
CaseStudyCategory = Literal[
    "web-dev", "mobile", "ecommerce", "saas", "healthcare", "fintech", "education", "other"
]

CATEGORY_NAMES = {
    "web-dev": "Web Development",
    "mobile": "Mobile Development",
    "ecommerce": "E-commerce",
    "saas": "SaaS",
    "healthcare": "Healthcare",
    "fintech": "Fintech",
    "education": "Education",
    "other": "Other",
}


class CaseStudyCreate(_Input):
    title: str = Field(min_length=1)
    excerpt: str = Field(min_length=1)
    project_overview: str = Field(min_length=1)
    client_name: str = Field(min_length=1)
    completed_date: datetime
    technologies: list[str] = Field(min_length=1)
    live_domain_link: str = Field(default="", pattern=r"^$|^https?://.+")
    challenges: str = ""
    status: CaseStudyStatus = "completed"
    category: CaseStudyCategory = "web-dev"
    featured: bool = False
    main_image: AssetReference
    gallery: list[AssetReference] = Field(default_factory=list)

    @field_validator("technologies", mode="before")
    @classmethod
    def _strip_blank_entries(cls, v):
        return _drop_blank(v) if isinstance(v, list) else v


class CaseStudy(CaseStudyCreate, RecordBase):
    slug: str = ""

    @model_validator(mode="after")
    def _derive_slug(self) -> "CaseStudy":
        self.slug = slugify(self.title)
        return self

    @computed_field
    @property
    def category_name(self) -> str:
        return CATEGORY_NAMES.get(self.category, "Other")


class CaseStudyUpdate(_Input):
    title: str | None = Field(default=None, min_length=1)
    excerpt: str | None = Field(default=None, min_length=1)
    project_overview: str | None = Field(default=None, min_length=1)
    client_name: str | None = Field(default=None, min_length=1)
    completed_date: datetime | None = None
    technologies: list[str] | None = Field(default=None, min_length=1)
    live_domain_link: str | None = Field(default=None, pattern=r"^$|^https?://.+")
    challenges: str | None = None
    status: CaseStudyStatus | None = None
    category: CaseStudyCategory | None = None
    featured: bool | None = None
    main_image: AssetReference | None = None
    gallery: list[AssetReference] | None = None

    @field_validator("technologies", mode="before")
    @classmethod
    def _strip_blank_entries(cls, v):
        return _drop_blank(v) if isinstance(v, list) else v


# =============================================================================
# Clients
# =============================================================================


class ClientCreate(_Input):
    name: str = Field(min_length=1, max_length=100)
    logo: AssetReference


class Client(ClientCreate, RecordBase):
    pass


class ClientUpdate(_Input):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    logo: AssetReference | None = None


# =============================================================================
# Team members
# =============================================================================


class TeamMemberCreate(_Input):
    name: str = Field(min_length=1)
    role: str = Field(min_length=1)
    experience: str = Field(min_length=1)
    expertise: list[str] = Field(min_length=2)
    avatar: AssetReference
    order: int = 0
    is_active: bool = True


class TeamMember(TeamMemberCreate, RecordBase):
    pass


class TeamMemberUpdate(_Input):
    name: str | None = Field(default=None, min_length=1)
    role: str | None = Field(default=None, min_length=1)
    experience: str | None = Field(default=None, min_length=1)
    expertise: list[str] | None = Field(default=None, min_length=2)
    avatar: AssetReference | None = None
    order: int | None = None
    is_active: bool | None = None


# =============================================================================
# Inquiries (contact form)
# =============================================================================

ProjectType = Literal[
    "web-development",
    "mobile-app",
    "ecommerce",
    "digital-marketing",
    "branding",
    "consulting",
    "other",
]
Budget = Literal["5k-15k", "15k-30k", "30k-50k", "50k-100k", "100k+", "discuss"]
Timeline = Literal["asap", "1-3-months", "3-6-months", "6-12-months", "flexible"]
InquiryStatus = Literal["new", "contacted", "in-progress", "quoted", "closed", "archived"]
Priority = Literal["low", "medium", "high", "urgent"]


class InquiryCreate(_Input):
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(pattern=r"^\S+@\S+\.\S+$")
    phone: str = Field(min_length=1, max_length=20)
    company: str | None = Field(default=None, max_length=100)
    project_type: ProjectType
    budget: Budget
    timeline: Timeline | None = None
    message: str = Field(min_length=1, max_length=2000)
    newsletter: bool = False
    terms: bool
    status: InquiryStatus = "new"
    priority: Priority = "medium"
    notes: str | None = Field(default=None, max_length=1000)
    assigned_to: str | None = None
    source: str = "website"

    @field_validator("email")
    @classmethod
    def _lowercase_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("terms")
    @classmethod
    def _terms_accepted(cls, v: bool) -> bool:
        if v is not True:
            raise ValueError("Terms and conditions must be accepted")
        return v


class Inquiry(InquiryCreate, RecordBase):
    pass


class InquiryUpdate(_Input):
    status: InquiryStatus | None = None
    priority: Priority | None = None
    notes: str | None = Field(default=None, max_length=1000)
    assigned_to: str | None = None


# =============================================================================
# Listing
# =============================================================================

class RecordPage(BaseModel):
    """One page of records plus pagination info."""

    items: list[SerializeAsAny[RecordBase]]
    total: int
    page: int
    limit: int

    @computed_field
    @property
    def total_pages(self) -> int:
        return -(-self.total // self.limit) if self.limit else 0

    @computed_field
    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @computed_field
    @property
    def has_prev(self) -> bool:
        return self.page > 1
