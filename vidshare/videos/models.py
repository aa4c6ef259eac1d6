"""Database models for videos.

Counters (likes/dislikes) are not stored on the video row: they live in the
``video_engagement`` counter table owned by ``vidshare.reactions``.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

VIDEO_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.videos (
    video_id UUID PRIMARY KEY,
    channel_id UUID,
    title TEXT,
    description TEXT,
    thumbnail TEXT,
    url TEXT,
    tag TEXT,
    duration INT,
    views INT,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
)
"""

# Videos by tag - random sampling per category
VIDEOS_BY_TAG_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.videos_by_tag (
    tag TEXT,
    video_id UUID,
    PRIMARY KEY ((tag), video_id)
)
"""

VIDEOS_TABLES_CQL = [
    VIDEO_TABLE_CQL,
    VIDEOS_BY_TAG_TABLE_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


@dataclass
class Video:
    """Video entity."""

    video_id: UUID
    channel_id: UUID
    title: str
    description: str
    thumbnail: str
    url: str
    tag: str
    duration: int
    views: int
    created_at: datetime
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: Any) -> "Video":
        """Create Video from Cassandra row."""
        return cls(
            video_id=row.video_id,
            channel_id=row.channel_id,
            title=row.title or "",
            description=row.description or "",
            thumbnail=row.thumbnail or "",
            url=row.url or "",
            tag=row.tag or "",
            duration=row.duration or 0,
            views=row.views or 0,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


# ==============================================================================
# Factory Functions
# ==============================================================================


def create_video(
    channel_id: UUID,
    title: str,
    description: str,
    thumbnail: str,
    url: str,
    tag: str,
    duration: int,
) -> Video:
    """Create a new video with default values."""
    now = datetime.now(UTC)
    return Video(
        video_id=uuid4(),
        channel_id=channel_id,
        title=title,
        description=description,
        thumbnail=thumbnail,
        url=url,
        tag=tag,
        duration=duration,
        views=0,
        created_at=now,
        updated_at=now,
    )
