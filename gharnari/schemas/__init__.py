"""
Ghar Nari - Schema Package
==========================

Record models plus the two-stage record pipeline.

Structure:
    - sanitization.py: Stage one, normalize untrusted input
    - validation.py: Stage two, check against the models
    - models.py: Declarative field rules (pydantic)
    - pipeline.py: Per-collection pairing of both stages
"""

from .models import (
    Analytics,
    BackupSnapshot,
    Category,
    Comment,
    ExportDocument,
    Post,
    PostStatus,
    Record,
    SiteSettings,
)
from .pipeline import (
    ANALYTICS_SCHEMA,
    COMMENT_SCHEMA,
    POST_SCHEMA,
    SETTINGS_SCHEMA,
    RecordSchema,
)
from .validation import ValidationIssue, ValidationResult

__all__ = [
    "Analytics",
    "BackupSnapshot",
    "Category",
    "Comment",
    "ExportDocument",
    "Post",
    "PostStatus",
    "Record",
    "SiteSettings",
    "RecordSchema",
    "POST_SCHEMA",
    "COMMENT_SCHEMA",
    "SETTINGS_SCHEMA",
    "ANALYTICS_SCHEMA",
    "ValidationIssue",
    "ValidationResult",
]
