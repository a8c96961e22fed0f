"""
Ghar Nari - Storage Error System
================================

Centralized error codes and exceptions for the storage boundary.

Every exception raised past the store or the backup manager derives from
StorageError and renders a payload the route layer can return as-is.
"""

from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from gharnari.schemas.validation import ValidationIssue


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCode(str, Enum):
    """
    Centralized error codes for the storage engine.

    Format: CATEGORY_SPECIFIC_ERROR

    Categories:
    - VALIDATION: Record validation errors
    - POST / COMMENT: Missing records
    - BACKUP: Backup and restore errors
    - STORAGE: File system errors
    """

    # Validation errors (422)
    VALIDATION_FAILED = "VALIDATION_FAILED"

    # Record errors (404)
    POST_NOT_FOUND = "POST_NOT_FOUND"
    COMMENT_NOT_FOUND = "COMMENT_NOT_FOUND"

    # Backup errors (404, 400, 500)
    BACKUP_NOT_FOUND = "BACKUP_NOT_FOUND"
    BACKUP_INVALID_FORMAT = "BACKUP_INVALID_FORMAT"
    BACKUP_FAILED = "BACKUP_FAILED"

    # Storage errors (500)
    STORAGE_WRITE_FAILED = "STORAGE_WRITE_FAILED"


# =============================================================================
# Error Messages
# =============================================================================

ERROR_MESSAGES: Dict[ErrorCode, str] = {
    ErrorCode.VALIDATION_FAILED: "Record validation failed",
    ErrorCode.POST_NOT_FOUND: "Post not found",
    ErrorCode.COMMENT_NOT_FOUND: "Comment not found",
    ErrorCode.BACKUP_NOT_FOUND: "Backup file not found",
    ErrorCode.BACKUP_INVALID_FORMAT: "Invalid backup file structure",
    ErrorCode.BACKUP_FAILED: "Backup operation failed",
    ErrorCode.STORAGE_WRITE_FAILED: "Failed to write collection",
}


# =============================================================================
# Default Status Codes
# =============================================================================

ERROR_STATUS_CODES: Dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_FAILED: 422,
    ErrorCode.POST_NOT_FOUND: 404,
    ErrorCode.COMMENT_NOT_FOUND: 404,
    ErrorCode.BACKUP_NOT_FOUND: 404,
    ErrorCode.BACKUP_INVALID_FORMAT: 400,
    ErrorCode.BACKUP_FAILED: 500,
    ErrorCode.STORAGE_WRITE_FAILED: 500,
}


# =============================================================================
# Exceptions
# =============================================================================

class StorageError(Exception):
    """
    Base storage exception with an error code.

    Usage:
        raise StorageError(ErrorCode.BACKUP_FAILED)
        raise StorageError(ErrorCode.BACKUP_FAILED, details={"reason": "disk full"})
    """

    code: ErrorCode = ErrorCode.STORAGE_WRITE_FAILED

    def __init__(
        self,
        code: Optional[ErrorCode] = None,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        if code is not None:
            self.code = code
        self.message = message or ERROR_MESSAGES.get(self.code, "An error occurred")
        self.details = details
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return ERROR_STATUS_CODES.get(self.code, 500)

    def to_dict(self) -> Dict[str, Any]:
        """Render the structured error payload."""
        return {
            "success": False,
            "error_code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class RecordValidationError(StorageError):
    """Raised when a write contains one or more invalid records."""

    code = ErrorCode.VALIDATION_FAILED

    def __init__(self, collection: str, issues: List["ValidationIssue"]):
        self.collection = collection
        self.issues = list(issues)
        summary = ", ".join(f"{i.path}: {i.message}" for i in self.issues[:5])
        super().__init__(
            message=f"Invalid {collection} data: {summary}",
            details={
                "collection": collection,
                "issues": [issue.to_dict() for issue in self.issues],
            },
        )


class PostNotFoundError(StorageError):
    """Raised when a post id matches no stored post."""

    code = ErrorCode.POST_NOT_FOUND

    def __init__(self, post_id: str):
        self.post_id = post_id
        super().__init__(details={"id": post_id})


class CommentNotFoundError(StorageError):
    """Raised when a comment id matches no stored comment."""

    code = ErrorCode.COMMENT_NOT_FOUND

    def __init__(self, comment_id: str):
        self.comment_id = comment_id
        super().__init__(details={"id": comment_id})


class BackupError(StorageError):
    """Raised when a backup cannot be written or restored."""

    code = ErrorCode.BACKUP_FAILED


class BackupNotFoundError(BackupError):
    """Raised when a named backup does not exist."""

    code = ErrorCode.BACKUP_NOT_FOUND

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            message=f"Backup file not found: {name}",
            details={"name": name},
        )


class BackupFormatError(BackupError):
    """Raised when a backup file is unreadable or structurally invalid."""

    code = ErrorCode.BACKUP_INVALID_FORMAT


__all__ = [
    "ErrorCode",
    "ERROR_MESSAGES",
    "ERROR_STATUS_CODES",
    "StorageError",
    "RecordValidationError",
    "PostNotFoundError",
    "CommentNotFoundError",
    "BackupError",
    "BackupNotFoundError",
    "BackupFormatError",
]
