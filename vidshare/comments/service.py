"""Comment service layer.

Business logic for:
- Comment creation with the two-level reply rule
- Per-video listing and comment tree reads
- Removal of a video's comments when the video is deleted
"""

import html
from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from vidshare.core.errors import (
    ChannelNotFoundError,
    CommentNotFoundError,
    ValidationFailedError,
    VideoNotFoundError,
)

from .models import Comment, CommentLookup, create_comment
from .tree import CommentTree, build_comment_tree


if TYPE_CHECKING:
    from cassandra.cluster import Session

    from vidshare.channels.service import ChannelService


logger = structlog.get_logger(__name__)


# Allowed HTML tags (basic formatting only)
ALLOWED_TAGS = {"b", "i", "em", "strong", "code"}


def sanitize_content(content: str) -> str:
    """Escape HTML in comment content, keeping basic formatting tags."""
    escaped = html.escape(content.strip())
    for tag in ALLOWED_TAGS:
        escaped = escaped.replace(f"&lt;{tag}&gt;", f"<{tag}>")
        escaped = escaped.replace(f"&lt;/{tag}&gt;", f"</{tag}>")
    return escaped


class CommentService:
    """Service for video comments."""

    # Rows per read when walking a whole video's comments
    TREE_PAGE_SIZE = 1000

    def __init__(
        self,
        session: "Session",
        keyspace: str,
        channel_service: "ChannelService",
    ):
        """Initialize with Cassandra session and the channel service."""
        self.session = session
        self.keyspace = keyspace
        self.channel_service = channel_service
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for efficient queries."""
        self._video_exists = self.session.prepare(f"""
            SELECT video_id FROM {self.keyspace}.videos
            WHERE video_id = ?
        """)

        self._insert_comment = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.comments
            (video_id, created_at, comment_id, parent_id, channel_id,
             author_name, author_avatar, content, likes, dislikes)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """)

        self._insert_comment_by_id = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.comments_by_id
            (comment_id, video_id, parent_id, created_at)
            VALUES (?, ?, ?, ?)
        """)

        self._get_comment_by_id = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.comments_by_id
            WHERE comment_id = ?
        """)

        self._get_comments_by_video = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.comments
            WHERE video_id = ?
            LIMIT ?
        """)

        self._get_comments_after = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.comments
            WHERE video_id = ? AND (created_at, comment_id) > (?, ?)
            LIMIT ?
        """)

        self._get_comment = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.comments
            WHERE video_id = ? AND created_at = ? AND comment_id = ?
        """)

        self._get_comment_ids_by_video = self.session.prepare(f"""
            SELECT comment_id FROM {self.keyspace}.comments
            WHERE video_id = ?
        """)

        self._delete_comments_by_video = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.comments
            WHERE video_id = ?
        """)

        self._delete_comment_by_id = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.comments_by_id
            WHERE comment_id = ?
        """)

    async def _ensure_video(self, video_id: UUID) -> None:
        result = await self.session.aexecute(self._video_exists, [video_id])
        if result.one() is None:
            raise VideoNotFoundError(video_id)

    async def find_comment(self, comment_id: UUID) -> CommentLookup | None:
        """Find a comment by ID (O(1) lookup table)."""
        result = await self.session.aexecute(self._get_comment_by_id, [comment_id])
        row = result.one()
        return CommentLookup.from_row(row) if row else None

    # ==========================================================================
    # Comment CRUD
    # ==========================================================================

    async def create_comment(
        self,
        video_id: UUID,
        channel_id: UUID,
        content: str,
        parent_id: UUID | None = None,
    ) -> Comment:
        """Create a comment or a reply on a video.

        A reply must point at a top-level comment of the same video; this is
        what keeps the tree at two levels.

        Raises:
            VideoNotFoundError: unknown video
            ChannelNotFoundError: author channel has no profile
            ValidationFailedError: empty content or invalid parent
        """
        await self._ensure_video(video_id)

        author = await self.channel_service.get_summary(channel_id)
        if author is None:
            raise ChannelNotFoundError(channel_id)

        safe_content = sanitize_content(content)
        if not safe_content:
            raise ValidationFailedError("Comment cannot be empty", field="content")

        if parent_id is not None:
            parent = await self.find_comment(parent_id)
            if parent is None or parent.video_id != video_id:
                raise ValidationFailedError(
                    f"Parent comment {parent_id} not found on this video",
                    field="parent_id",
                )
            if parent.parent_id is not None:
                raise ValidationFailedError(
                    "Replies can only be added to top-level comments",
                    field="parent_id",
                )

        comment = create_comment(
            video_id=video_id,
            channel_id=channel_id,
            author_name=author.username,
            content=safe_content,
            parent_id=parent_id,
            author_avatar=author.avatar,
        )

        await self.session.aexecute(
            self._insert_comment,
            [
                comment.video_id,
                comment.created_at,
                comment.comment_id,
                comment.parent_id,
                comment.channel_id,
                comment.author_name,
                comment.author_avatar,
                comment.content,
                comment.likes,
                comment.dislikes,
            ],
        )
        await self.session.aexecute(
            self._insert_comment_by_id,
            [comment.comment_id, comment.video_id, comment.parent_id, comment.created_at],
        )

        logger.info(
            "comment_created",
            comment_id=str(comment.comment_id),
            video_id=str(video_id),
            parent_id=str(parent_id) if parent_id else None,
        )
        return comment

    async def list_comments(self, video_id: UUID, limit: int = 10) -> list[Comment]:
        """Oldest comments of a video, up to ``limit``."""
        rows = await self.session.aexecute(
            self._get_comments_by_video, [video_id, limit]
        )
        return [Comment.from_row(row) for row in rows]

    async def _all_comments(self, video_id: UUID) -> list[Comment]:
        """Every comment of a video, oldest first, read in key-ordered pages."""
        comments = await self.list_comments(video_id, self.TREE_PAGE_SIZE)
        page = comments
        while len(page) == self.TREE_PAGE_SIZE:
            last = page[-1]
            rows = await self.session.aexecute(
                self._get_comments_after,
                [video_id, last.created_at, last.comment_id, self.TREE_PAGE_SIZE],
            )
            page = [Comment.from_row(row) for row in rows]
            comments.extend(page)
        return comments

    async def get_comment_tree(self, video_id: UUID) -> CommentTree:
        """Comments of a video arranged as top-level comments and replies.

        Orphaned replies are logged and left out; the read still succeeds.

        Raises:
            VideoNotFoundError: unknown video
        """
        await self._ensure_video(video_id)

        comments = await self._all_comments(video_id)
        tree = build_comment_tree(comments)

        if tree.has_orphans:
            logger.warning(
                "comment_tree_orphans",
                video_id=str(video_id),
                orphans=[
                    {
                        "comment_id": str(orphan.comment_id),
                        "parent_id": str(orphan.parent_id),
                        "reason": orphan.reason.value,
                    }
                    for orphan in tree.orphans
                ],
            )
        return tree

    async def get_comment(self, video_id: UUID, comment_id: UUID) -> Comment:
        """Single comment of a video.

        Raises:
            CommentNotFoundError: unknown comment or comment of another video
        """
        lookup = await self.find_comment(comment_id)
        if lookup is None or lookup.video_id != video_id:
            raise CommentNotFoundError(comment_id)

        result = await self.session.aexecute(
            self._get_comment, [video_id, lookup.created_at, comment_id]
        )
        row = result.one()
        if row is None:
            raise CommentNotFoundError(comment_id)
        return Comment.from_row(row)

    async def delete_video_comments(self, video_id: UUID) -> int:
        """Delete every comment of a video.

        Returns:
            Number of comments removed
        """
        rows = await self.session.aexecute(self._get_comment_ids_by_video, [video_id])
        comment_ids = [row.comment_id for row in rows]

        await self.session.aexecute(self._delete_comments_by_video, [video_id])
        for comment_id in comment_ids:
            await self.session.aexecute(self._delete_comment_by_id, [comment_id])

        logger.info(
            "video_comments_deleted", video_id=str(video_id), count=len(comment_ids)
        )
        return len(comment_ids)
