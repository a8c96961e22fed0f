"""
Ghar Nari - Storage Maintenance Mixin
=====================================

Integrity report, orphaned comment cleanup and file health.
"""

from typing import Any, Dict, List

from gharnari.core.constants import (
    ANALYTICS_FILE,
    COMMENTS_FILE,
    POSTS_FILE,
    SETTINGS_FILE,
)
from gharnari.core.logger import logger
from gharnari.errors import StorageError


class MaintenanceMixin:
    """Mixin for maintenance operations. Reports only; nothing is repaired here."""

    async def perform_integrity_check(self) -> Dict[str, Any]:
        """
        Scan all collections for records missing required fields.

        Returns:
            {"status": "healthy" | "issues_found", "issues": [str, ...]}
        """
        issues: List[str] = []

        try:
            for index, post in enumerate(await self.get_posts()):
                if not (post.id and post.title and post.slug):
                    issues.append(f"Post at index {index} is missing required fields")

            for index, comment in enumerate(await self.get_comments()):
                if not (comment.id and comment.post_id and comment.author):
                    issues.append(f"Comment at index {index} is missing required fields")

            settings = await self.get_settings()
            if not (settings.site_name and settings.author_name):
                issues.append("Site settings are missing required fields")
        except (StorageError, OSError) as e:
            issues.append(f"Integrity check failed: {type(e).__name__}")

        status = "healthy" if not issues else "issues_found"
        logger.tree("Integrity Check", [
            ("Status", status),
            ("Issues", len(issues)),
        ], emoji="🩺" if not issues else "⚠️")
        return {"status": status, "issues": issues}

    async def cleanup_orphaned_comments(self) -> Dict[str, int]:
        """
        Drop comments whose post no longer exists.

        Returns:
            {"removed": int, "remaining": int}
        """
        posts = await self.get_posts()
        comments = await self.get_comments()
        post_ids = {post.id for post in posts}

        valid = [c for c in comments if c.post_id in post_ids]
        removed = len(comments) - len(valid)
        if removed:
            await self.save_comments(valid)
            logger.tree("Orphaned Comments Removed", [
                ("Removed", removed),
                ("Remaining", len(valid)),
            ], emoji="🧹")

        return {"removed": removed, "remaining": len(valid)}

    async def health_check(self) -> Dict[str, Any]:
        """Read every collection; a collection is healthy when it loads and its file exists."""
        checks = {
            "posts": (POSTS_FILE, self.get_posts),
            "comments": (COMMENTS_FILE, self.get_comments),
            "settings": (SETTINGS_FILE, self.get_settings),
            "analytics": (ANALYTICS_FILE, self.get_analytics),
        }

        files: Dict[str, bool] = {}
        for name, (filename, loader) in checks.items():
            try:
                await loader()
                files[name] = self.collection_path(filename).exists()
            except (StorageError, OSError) as e:
                logger.error_tree("Collection Health Check Failed", e, [
                    ("Collection", name),
                ])
                files[name] = False

        return {
            "status": "healthy" if all(files.values()) else "degraded",
            "files": files,
        }


__all__ = ["MaintenanceMixin"]
