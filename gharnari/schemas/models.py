"""
Ghar Nari - Record Models
=========================

Declarative field rules for every stored record.

Each field carries its constraints (type, bounds, enumeration, pattern)
and pydantic evaluates them. JSON names on disk are camelCase; Python
attributes are snake_case.
"""

import math
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from gharnari.core.constants import (
    IMAGE_URL_SCHEMES,
    MAX_ABOUT_LENGTH,
    MAX_AUTHOR_LENGTH,
    MAX_BIO_LENGTH,
    MAX_COMMENT_LENGTH,
    MAX_CONTENT_LENGTH,
    MAX_EMAIL_LENGTH,
    MAX_EXCERPT_LENGTH,
    MAX_SITE_NAME_LENGTH,
    MAX_SLUG_LENGTH,
    MAX_TAG_LENGTH,
    MAX_TAGLINE_LENGTH,
    MAX_TAGS,
    MAX_TITLE_LENGTH,
    MAX_WELCOME_LENGTH,
    WORDS_PER_MINUTE,
)
from gharnari.schemas.sanitization import is_local_upload, sanitize_url
from gharnari.utils.timestamps import parse_iso, utc_now_iso


# =============================================================================
# Shared Field Types
# =============================================================================

UUID_PATTERN = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
SLUG_PATTERN = r"^[A-Za-z0-9\-._~]+$"
# Latin letters, whitespace and the Devanagari block
COMMENT_AUTHOR_PATTERN = "^[a-zA-Z\\s\\u0900-\\u097F]+$"


def _check_timestamp(value: str) -> str:
    if parse_iso(value) is None:
        raise ValueError("Invalid ISO-8601 timestamp")
    return value


RecordId = Annotated[str, Field(pattern=UUID_PATTERN)]
Timestamp = Annotated[str, AfterValidator(_check_timestamp)]
Tag = Annotated[str, Field(min_length=1, max_length=MAX_TAG_LENGTH)]


class Category(str, Enum):
    ZINDAGI = "Zindagi"
    SOCIETY = "Society"
    PARVARISH = "Parvarish"
    SEHAT = "Sehat"
    GHAR_KI_BAAT = "Ghar ki baat"
    DIL_SE = "Dil se"
    KAHANI = "Kahani"


class PostStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    SCHEDULED = "scheduled"


def reading_time(content: str) -> int:
    """Minutes to read at WORDS_PER_MINUTE, rounded up."""
    return math.ceil(len(content.split()) / WORDS_PER_MINUTE)


# =============================================================================
# Base Record
# =============================================================================

class Record(BaseModel):
    """Base for stored records: camelCase on disk, unknown keys dropped."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json(self) -> Dict[str, Any]:
        """Serialize with declaration field order and JSON names."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# Post
# =============================================================================

class Post(Record):
    id: Optional[RecordId] = None
    title: str = Field(min_length=1, max_length=MAX_TITLE_LENGTH)
    slug: str = Field(min_length=1, max_length=MAX_SLUG_LENGTH, pattern=SLUG_PATTERN)
    content: str = Field(min_length=1, max_length=MAX_CONTENT_LENGTH)
    excerpt: str = Field(default="", max_length=MAX_EXCERPT_LENGTH)
    author: str = Field(min_length=1, max_length=MAX_AUTHOR_LENGTH)
    published_at: Optional[Timestamp] = None
    created_at: Optional[Timestamp] = None
    updated_at: Optional[Timestamp] = None
    category: Category
    tags: List[Tag] = Field(default_factory=list, max_length=MAX_TAGS)
    featured_image: Optional[str] = None
    status: PostStatus
    views: int = Field(default=0, ge=0)
    read_time: int = Field(default=0, ge=0)
    is_draft: bool = True

    @field_validator("featured_image")
    @classmethod
    def _check_featured_image(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        if is_local_upload(value) or sanitize_url(value, IMAGE_URL_SCHEMES):
            return value
        raise ValueError("Featured image must be an http(s) URL or an /uploads/ path")

    @model_validator(mode="after")
    def _derive_fields(self) -> "Post":
        created = parse_iso(self.created_at) if self.created_at else None
        updated = parse_iso(self.updated_at) if self.updated_at else None
        if created and updated and updated < created:
            raise ValueError("updatedAt must not be earlier than createdAt")

        if self.status == PostStatus.PUBLISHED:
            if self.published_at is None:
                self.published_at = self.updated_at or self.created_at or utc_now_iso()
        else:
            self.published_at = None

        self.is_draft = self.status == PostStatus.DRAFT
        self.read_time = reading_time(self.content)
        return self


# =============================================================================
# Comment
# =============================================================================

class Comment(Record):
    id: Optional[RecordId] = None
    post_id: RecordId
    author: str = Field(min_length=1, max_length=MAX_AUTHOR_LENGTH, pattern=COMMENT_AUTHOR_PATTERN)
    email: EmailStr
    content: str = Field(min_length=1, max_length=MAX_COMMENT_LENGTH)
    created_at: Optional[Timestamp] = None
    approved: bool = False

    @field_validator("email", mode="before")
    @classmethod
    def _check_email_length(cls, value: Any) -> Any:
        if isinstance(value, str) and len(value) > MAX_EMAIL_LENGTH:
            raise ValueError("Email too long")
        return value


# =============================================================================
# Site Settings
# =============================================================================

class SiteSettings(Record):
    site_name: str = Field(min_length=1, max_length=MAX_SITE_NAME_LENGTH)
    tagline: str = Field(min_length=1, max_length=MAX_TAGLINE_LENGTH)
    welcome_message: str = Field(min_length=1, max_length=MAX_WELCOME_LENGTH)
    about_section: str = Field(min_length=1, max_length=MAX_ABOUT_LENGTH)
    author_name: str = Field(min_length=1, max_length=MAX_AUTHOR_LENGTH)
    author_bio: str = Field(min_length=1, max_length=MAX_BIO_LENGTH)
    social_links: Dict[str, Optional[str]] = Field(default_factory=dict)

    @field_validator("social_links")
    @classmethod
    def _check_social_links(cls, links: Dict[str, Optional[str]]) -> Dict[str, Optional[str]]:
        checked = {}
        for platform, url in links.items():
            if url and not sanitize_url(url):
                raise ValueError(f"Invalid {platform} URL")
            checked[platform] = url or None
        return checked


# =============================================================================
# Analytics
# =============================================================================

class Analytics(Record):
    post_id: str = Field(min_length=1)
    views: int = Field(default=0, ge=0)
    reads: int = Field(default=0, ge=0)
    engagement_score: float = Field(default=0.0, ge=0)
    last_viewed: Optional[Timestamp] = None


# =============================================================================
# Snapshots
# =============================================================================

class BackupSnapshot(Record):
    """
    On-disk shape of a backup.

    Collections stay raw here: records are checked through the record
    pipeline on restore, so one bad record is reported with its index.
    """

    posts: List[Any]
    comments: List[Any]
    settings: Dict[str, Any]
    analytics: Optional[List[Any]] = None
    timestamp: Optional[str] = None
    version: Optional[str] = None


class ExportDocument(BackupSnapshot):
    exported_at: str


__all__ = [
    "Category",
    "PostStatus",
    "Record",
    "Post",
    "Comment",
    "SiteSettings",
    "Analytics",
    "BackupSnapshot",
    "ExportDocument",
    "reading_time",
    "UUID_PATTERN",
]
