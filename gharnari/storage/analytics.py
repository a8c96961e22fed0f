"""
Ghar Nari - Storage Analytics Mixin
===================================

Per-post analytics aggregates (write-through) and the dashboard summary.
"""

from typing import Any, Dict, List, Mapping, Sequence, Union

from gharnari.core.constants import ANALYTICS_FILE
from gharnari.schemas import ANALYTICS_SCHEMA, Analytics, PostStatus


TOP_POSTS_LIMIT = 5


class AnalyticsMixin:
    """Mixin for analytics operations."""

    async def get_analytics(self) -> List[Analytics]:
        return await self._read_records(ANALYTICS_FILE, ANALYTICS_SCHEMA)

    async def save_analytics(self, analytics: Sequence[Union[Analytics, Mapping[str, Any]]]) -> List[Analytics]:
        return await self._write_records(ANALYTICS_FILE, ANALYTICS_SCHEMA, analytics)

    async def get_analytics_summary(self) -> Dict[str, Any]:
        """Totals over published posts and approved comments, plus the top posts by views."""
        posts = await self.get_published_posts()
        comments = await self.get_comments()

        top_posts = sorted(posts, key=lambda p: p.views, reverse=True)[:TOP_POSTS_LIMIT]
        return {
            "totalViews": sum(p.views for p in posts),
            "totalPosts": len(posts),
            "totalComments": sum(1 for c in comments if c.approved),
            "topPosts": [
                {"id": p.id, "title": p.title, "views": p.views, "slug": p.slug}
                for p in top_posts
            ],
        }


__all__ = ["AnalyticsMixin"]
