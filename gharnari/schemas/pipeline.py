"""
Ghar Nari - Record Pipeline
===========================

Pairs the two record stages per collection.

The stages stay separate functions: callers run `normalize` and then
`check` so a rejected record is always attributed to validation, never
to sanitization.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Sequence, Tuple

from gharnari.schemas.sanitization import (
    sanitize_analytics,
    sanitize_comment,
    sanitize_post,
    sanitize_settings,
)
from gharnari.schemas.validation import (
    RecordT,
    ValidationIssue,
    ValidationResult,
    validate_analytics,
    validate_comment,
    validate_post,
    validate_settings,
)


@dataclass(frozen=True)
class RecordSchema(Generic[RecordT]):
    """Stage one (normalize) and stage two (check) for one collection."""

    collection: str
    normalize: Callable[[Any], Dict[str, Any]]
    check: Callable[[Any], ValidationResult[RecordT]]

    def check_all(self, records: Sequence[Any]) -> Tuple[List[RecordT], List[ValidationIssue]]:
        """
        Run both stages over a whole collection.

        Returns the accepted records in input order and every issue found,
        each path prefixed with the collection name and record index.
        """
        accepted: List[RecordT] = []
        issues: List[ValidationIssue] = []
        for index, raw in enumerate(records):
            normalized = self.normalize(raw)
            result = self.check(normalized)
            if result.ok:
                accepted.append(result.record)
            else:
                prefix = f"{self.collection}[{index}]"
                issues.extend(issue.with_prefix(prefix) for issue in result.issues)
        return accepted, issues


POST_SCHEMA = RecordSchema("posts", sanitize_post, validate_post)
COMMENT_SCHEMA = RecordSchema("comments", sanitize_comment, validate_comment)
SETTINGS_SCHEMA = RecordSchema("settings", sanitize_settings, validate_settings)
ANALYTICS_SCHEMA = RecordSchema("analytics", sanitize_analytics, validate_analytics)


__all__ = [
    "RecordSchema",
    "POST_SCHEMA",
    "COMMENT_SCHEMA",
    "SETTINGS_SCHEMA",
    "ANALYTICS_SCHEMA",
]
