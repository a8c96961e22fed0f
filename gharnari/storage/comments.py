"""
Ghar Nari - Storage Comments Mixin
==================================

Comment collection operations and moderation helpers.
"""

from typing import Any, List, Mapping, Optional, Sequence, Union
from uuid import uuid4

from gharnari.core.constants import COMMENTS_FILE
from gharnari.core.logger import logger
from gharnari.errors import CommentNotFoundError
from gharnari.schemas import COMMENT_SCHEMA, Comment
from gharnari.utils.timestamps import utc_now_iso


CommentInput = Union[Comment, Mapping[str, Any]]


class CommentsMixin:
    """Mixin for comment collection operations."""

    async def get_comments(self) -> List[Comment]:
        """All valid comments in file order, approved or not."""
        return await self._read_records(COMMENTS_FILE, COMMENT_SCHEMA)

    async def save_comments(self, comments: Sequence[CommentInput]) -> List[Comment]:
        """Replace the comment collection. All-or-nothing."""
        return await self._write_records(COMMENTS_FILE, COMMENT_SCHEMA, comments)

    async def get_comments_by_post_id(self, post_id: str) -> List[Comment]:
        comments = await self.get_comments()
        return [c for c in comments if c.post_id == post_id]

    async def get_approved_comments(self, post_id: str) -> List[Comment]:
        """Comments safe to show publicly for a post."""
        comments = await self.get_comments_by_post_id(post_id)
        return [c for c in comments if c.approved]

    async def get_comment_by_id(self, comment_id: str) -> Optional[Comment]:
        comments = await self.get_comments()
        return next((c for c in comments if c.id == comment_id), None)

    async def create_comment(self, data: Mapping[str, Any]) -> Comment:
        """Store a reader comment. New comments always await approval."""
        record = {
            **data,
            "id": str(uuid4()),
            "createdAt": utc_now_iso(),
            "approved": False,
        }
        comments: List[CommentInput] = list(await self.get_comments())
        comments.append(record)
        saved = await self.save_comments(comments)
        created = saved[-1]

        logger.tree("Comment Received", [
            ("ID", created.id),
            ("Post ID", created.post_id),
            ("Author", created.author[:50]),
        ], emoji="💬")
        return created

    async def set_comment_approval(self, comment_id: str, approved: bool) -> Comment:
        """
        Approve or hide a comment.

        Raises:
            CommentNotFoundError: If no comment has this id.
        """
        comments = await self.get_comments()
        comment = next((c for c in comments if c.id == comment_id), None)
        if comment is None:
            raise CommentNotFoundError(comment_id)

        comment.approved = bool(approved)
        await self.save_comments(comments)

        logger.tree("Comment Moderated", [
            ("ID", comment_id),
            ("Approved", "Yes" if comment.approved else "No"),
        ], emoji="🛡️")
        return comment

    async def delete_comment(self, comment_id: str) -> bool:
        """Remove a comment. Returns False when it did not exist."""
        comments = await self.get_comments()
        remaining = [c for c in comments if c.id != comment_id]
        if len(remaining) == len(comments):
            return False

        await self.save_comments(remaining)
        logger.tree("Comment Deleted", [
            ("ID", comment_id),
        ], emoji="🗑️")
        return True


__all__ = ["CommentsMixin"]
