"""Database models for video comments.

Architecture: adjacency list with a fixed depth of two
- parent_id references a top-level comment (NULL for top-level comments)
- Comments of a video share one partition, oldest first, so a single query
  returns everything the tree builder needs in creation order
- Author name/avatar are denormalised for read-heavy workloads
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

# Main Comments Table - partition by video, clustering by creation time
COMMENT_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.comments (
    video_id UUID,
    created_at TIMESTAMP,
    comment_id UUID,
    parent_id UUID,
    channel_id UUID,
    author_name TEXT,
    author_avatar TEXT,
    content TEXT,
    likes INT,
    dislikes INT,
    PRIMARY KEY ((video_id), created_at, comment_id)
) WITH CLUSTERING ORDER BY (created_at ASC, comment_id ASC)
"""

# Comments by ID - O(1) lookup used to validate reply parents
COMMENTS_BY_ID_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.comments_by_id (
    comment_id UUID PRIMARY KEY,
    video_id UUID,
    parent_id UUID,
    created_at TIMESTAMP
)
"""

COMMENTS_TABLES_CQL = [
    COMMENT_TABLE_CQL,
    COMMENTS_BY_ID_TABLE_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


@dataclass
class Comment:
    """Comment entity."""

    comment_id: UUID
    video_id: UUID
    channel_id: UUID
    author_name: str
    author_avatar: str | None
    content: str
    parent_id: UUID | None
    likes: int
    dislikes: int
    created_at: datetime

    @property
    def is_reply(self) -> bool:
        return self.parent_id is not None

    @classmethod
    def from_row(cls, row: Any) -> "Comment":
        """Create Comment from Cassandra row."""
        return cls(
            comment_id=row.comment_id,
            video_id=row.video_id,
            channel_id=row.channel_id,
            author_name=row.author_name or "",
            author_avatar=row.author_avatar,
            content=row.content or "",
            parent_id=row.parent_id,
            likes=row.likes or 0,
            dislikes=row.dislikes or 0,
            created_at=row.created_at,
        )


@dataclass
class CommentLookup:
    """Lightweight comment for O(1) ID lookup."""

    comment_id: UUID
    video_id: UUID
    parent_id: UUID | None
    created_at: datetime

    @classmethod
    def from_row(cls, row: Any) -> "CommentLookup":
        """Create CommentLookup from Cassandra row."""
        return cls(
            comment_id=row.comment_id,
            video_id=row.video_id,
            parent_id=row.parent_id,
            created_at=row.created_at,
        )


# ==============================================================================
# Factory Functions
# ==============================================================================


def create_comment(
    video_id: UUID,
    channel_id: UUID,
    author_name: str,
    content: str,
    parent_id: UUID | None = None,
    author_avatar: str | None = None,
) -> Comment:
    """Create a new comment with default values."""
    return Comment(
        comment_id=uuid4(),
        video_id=video_id,
        channel_id=channel_id,
        author_name=author_name,
        author_avatar=author_avatar,
        content=content,
        parent_id=parent_id,
        likes=0,
        dislikes=0,
        created_at=datetime.now(UTC),
    )
