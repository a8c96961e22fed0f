"""
Ghar Nari - Record Validation
=============================

Stage two of the record pipeline: check a normalized record against its
model and report every failing field instead of the first one.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar, Union

from pydantic import ValidationError

from gharnari.schemas.models import Analytics, Comment, Post, Record, SiteSettings


RecordT = TypeVar("RecordT", bound=Record)


# =============================================================================
# Results
# =============================================================================

@dataclass(frozen=True)
class ValidationIssue:
    """One failing field: a dotted path and a human-readable message."""

    path: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"path": self.path, "message": self.message}

    def with_prefix(self, prefix: str) -> "ValidationIssue":
        return ValidationIssue(f"{prefix}.{self.path}" if self.path else prefix, self.message)


@dataclass
class ValidationResult(Generic[RecordT]):
    """Either a typed record or the list of issues that rejected it."""

    record: Optional[RecordT] = None
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.record is not None and not self.issues


def format_location(loc: Sequence[Union[str, int]]) -> str:
    """('tags', 3) -> 'tags[3]', ('socialLinks', 'github') -> 'socialLinks.github'."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else str(part)
    return path


def issues_from_error(error: ValidationError) -> List[ValidationIssue]:
    return [
        ValidationIssue(format_location(detail["loc"]), detail["msg"])
        for detail in error.errors()
    ]


def check_record(model: Type[RecordT], data: Any) -> ValidationResult[RecordT]:
    """Validate data against model, collecting all field-level issues."""
    try:
        return ValidationResult(record=model.model_validate(data))
    except ValidationError as e:
        return ValidationResult(issues=issues_from_error(e))


# =============================================================================
# Per-Collection Checks
# =============================================================================

def validate_post(data: Any) -> ValidationResult[Post]:
    return check_record(Post, data)


def validate_comment(data: Any) -> ValidationResult[Comment]:
    return check_record(Comment, data)


def validate_settings(data: Any) -> ValidationResult[SiteSettings]:
    return check_record(SiteSettings, data)


def validate_analytics(data: Any) -> ValidationResult[Analytics]:
    return check_record(Analytics, data)


__all__ = [
    "ValidationIssue",
    "ValidationResult",
    "format_location",
    "issues_from_error",
    "check_record",
    "validate_post",
    "validate_comment",
    "validate_settings",
    "validate_analytics",
]
