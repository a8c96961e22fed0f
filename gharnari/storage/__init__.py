"""
Ghar Nari - Storage Module
==========================

File-backed document store for the blog.

Structure:
    - core.py: Base class with collection files, self-healing reads, validated writes
    - posts.py: Posts, post lifecycle and cascading deletion
    - comments.py: Comments and moderation
    - settings.py: Site settings singleton
    - analytics.py: Analytics aggregates and dashboard summary
    - maintenance.py: Integrity check, orphan cleanup, health
    - uploads.py: Local featured image cleanup
"""

from .core import StorageCore
from .posts import PostsMixin, PostDeletionResult
from .comments import CommentsMixin
from .settings import SettingsMixin, default_settings
from .analytics import AnalyticsMixin
from .maintenance import MaintenanceMixin


class DocumentStore(
    PostsMixin,
    CommentsMixin,
    SettingsMixin,
    AnalyticsMixin,
    MaintenanceMixin,
    StorageCore,
):
    """
    Complete store combining all mixins.

    The order matters - StorageCore must be last so its __init__ runs.
    """
    pass


__all__ = [
    "DocumentStore",
    "StorageCore",
    "PostDeletionResult",
    "default_settings",
]
