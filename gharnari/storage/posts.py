"""
Ghar Nari - Storage Posts Mixin
===============================

Post collection operations, lifecycle helpers and cascading deletion.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union
from uuid import uuid4

from gharnari.core.constants import POSTS_FILE
from gharnari.core.logger import logger
from gharnari.errors import PostNotFoundError, StorageError
from gharnari.schemas import POST_SCHEMA, Post, PostStatus
from gharnari.storage.uploads import delete_local_image
from gharnari.utils.timestamps import utc_now_iso


PostInput = Union[Post, Mapping[str, Any]]


@dataclass
class PostDeletionResult:
    """Outcome of a post deletion and its best-effort side effects."""

    post_id: str
    post_title: str
    comments_deleted: int = 0
    image_deleted: bool = False
    comment_error: Optional[str] = None
    image_error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "message": "Post and associated data deleted successfully",
            "postTitle": self.post_title,
            "commentsDeleted": self.comments_deleted,
            "imageDeleted": self.image_deleted,
            "details": {
                "post": "deleted",
                "comments": f"{self.comments_deleted} deleted" if self.comments_deleted else "none found",
                "image": "deleted" if self.image_deleted else "none or external",
            },
            "errors": {
                "commentError": self.comment_error,
                "imageError": self.image_error,
            },
        }


class PostsMixin:
    """Mixin for post collection operations."""

    async def get_posts(self) -> List[Post]:
        """All valid posts in file order."""
        return await self._read_records(POSTS_FILE, POST_SCHEMA)

    async def save_posts(self, posts: Sequence[PostInput]) -> List[Post]:
        """Replace the post collection. All-or-nothing."""
        return await self._write_records(POSTS_FILE, POST_SCHEMA, posts)

    async def get_post_by_id(self, post_id: str) -> Optional[Post]:
        posts = await self.get_posts()
        return next((post for post in posts if post.id == post_id), None)

    async def get_post_by_slug(self, slug: str) -> Optional[Post]:
        """Published post with this slug; drafts are never served by slug."""
        posts = await self.get_posts()
        return next(
            (p for p in posts if p.slug == slug and p.status == PostStatus.PUBLISHED),
            None,
        )

    async def get_published_posts(self) -> List[Post]:
        posts = await self.get_posts()
        return [post for post in posts if post.status == PostStatus.PUBLISHED]

    async def increment_post_views(self, post_id: str) -> Optional[int]:
        """
        Add one view to a post and return the new count.

        Load, increment, save: two concurrent calls can both read the same
        count and one increment is lost. Returns None when the post does not
        exist or the save fails.
        """
        posts = await self.get_posts()
        post = next((p for p in posts if p.id == post_id), None)
        if post is None:
            return None

        post.views += 1
        try:
            await self.save_posts(posts)
        except StorageError as e:
            logger.error_tree("View Increment Failed", e, [
                ("Post ID", post_id),
            ])
            return None
        return post.views

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def create_post(self, data: Mapping[str, Any]) -> Post:
        """Store a new post with a fresh id and timestamps."""
        now = utc_now_iso()
        record = {
            **data,
            "id": str(uuid4()),
            "createdAt": now,
            "updatedAt": now,
            "views": 0,
        }
        if record.get("status") == PostStatus.PUBLISHED.value:
            record["publishedAt"] = now

        posts: List[PostInput] = list(await self.get_posts())
        posts.append(record)
        saved = await self.save_posts(posts)
        created = saved[-1]

        logger.tree("Post Created", [
            ("ID", created.id),
            ("Title", created.title[:50]),
            ("Status", created.status.value),
        ], emoji="📝")
        return created

    async def update_post(self, post_id: str, changes: Mapping[str, Any]) -> Post:
        """
        Merge changes into a stored post.

        The id, createdAt and views never change; views only move through
        increment_post_views. Moving to published stamps publishedAt when it
        is unset; leaving published clears it. A replaced local featured
        image is deleted after the post is saved.

        Raises:
            PostNotFoundError: If no post has this id.
            RecordValidationError: If the merged post is invalid.
        """
        posts = await self.get_posts()
        index = next((i for i, p in enumerate(posts) if p.id == post_id), None)
        if index is None:
            raise PostNotFoundError(post_id)

        current = posts[index].to_json()
        merged = {
            **current,
            **changes,
            "id": post_id,
            "createdAt": current["createdAt"],
            "views": current["views"],
            "updatedAt": utc_now_iso(),
        }
        if changes.get("status") == PostStatus.PUBLISHED.value and not merged.get("publishedAt"):
            merged["publishedAt"] = merged["updatedAt"]

        updated_posts: List[PostInput] = list(posts)
        updated_posts[index] = merged
        saved = await self.save_posts(updated_posts)
        updated = saved[index]

        old_image = current.get("featuredImage")
        if old_image and old_image != updated.featured_image:
            try:
                await asyncio.to_thread(delete_local_image, self.uploads_dir, old_image)
            except OSError as e:
                logger.error_tree("Old Image Deletion Failed", e, [
                    ("Post ID", post_id),
                ])

        logger.tree("Post Updated", [
            ("ID", post_id),
            ("Fields", ", ".join(sorted(changes)) or "None"),
        ], emoji="✏️")
        return updated

    async def set_post_status(self, post_id: str, status: Union[PostStatus, str]) -> Post:
        value = status.value if isinstance(status, PostStatus) else status
        return await self.update_post(post_id, {"status": value})

    async def delete_post(self, post_id: str) -> PostDeletionResult:
        """
        Delete a post, its comments and its local featured image.

        Comment and image cleanup are independent best-effort steps: a
        failure in either is recorded in the result and the post is removed
        anyway.

        Raises:
            PostNotFoundError: If no post has this id.
        """
        posts = await self.get_posts()
        target = next((p for p in posts if p.id == post_id), None)
        if target is None:
            raise PostNotFoundError(post_id)

        result = PostDeletionResult(post_id=post_id, post_title=target.title)

        # Cascade comments
        try:
            comments = await self.get_comments()
            remaining = [c for c in comments if c.post_id != post_id]
            result.comments_deleted = len(comments) - len(remaining)
            if result.comments_deleted:
                await self.save_comments(remaining)
        except StorageError as e:
            result.comments_deleted = 0
            result.comment_error = e.message
            logger.error_tree("Comment Cascade Failed", e, [
                ("Post ID", post_id),
            ])

        # Local featured image
        if target.featured_image:
            try:
                result.image_deleted = await asyncio.to_thread(
                    delete_local_image, self.uploads_dir, target.featured_image
                )
            except OSError as e:
                result.image_error = e.strerror or type(e).__name__
                logger.error_tree("Image Deletion Failed", e, [
                    ("Post ID", post_id),
                ])

        await self.save_posts([p for p in posts if p.id != post_id])

        logger.tree("Post Deleted", [
            ("ID", post_id),
            ("Title", target.title[:50]),
            ("Comments Deleted", result.comments_deleted),
            ("Image Deleted", "Yes" if result.image_deleted else "No"),
        ], emoji="🗑️")
        return result


__all__ = ["PostsMixin", "PostDeletionResult"]
