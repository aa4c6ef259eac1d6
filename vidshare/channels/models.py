"""Database models for channels.

A channel is the acting identity of the platform: it owns videos, writes
comments and reacts to videos. Its ``liked``/``disliked`` sets are not stored
here; they are read from ``channel_reactions`` (see ``vidshare.reactions``).
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import UUID


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

CHANNEL_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.channels (
    channel_id UUID PRIMARY KEY,
    username TEXT,
    avatar TEXT,
    subscribers INT,
    created_at TIMESTAMP
)
"""

# Videos owned by a channel, newest first
CHANNEL_VIDEOS_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.channel_videos (
    channel_id UUID,
    video_id UUID,
    created_at TIMESTAMP,
    PRIMARY KEY ((channel_id), video_id)
)
"""

CHANNELS_TABLES_CQL = [
    CHANNEL_TABLE_CQL,
    CHANNEL_VIDEOS_TABLE_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


@dataclass
class ChannelSummary:
    """Public channel fields embedded in videos and comments."""

    channel_id: UUID
    username: str
    avatar: str | None
    subscribers: int

    @classmethod
    def from_row(cls, row: Any) -> "ChannelSummary":
        """Create ChannelSummary from Cassandra row."""
        return cls(
            channel_id=row.channel_id,
            username=row.username or "",
            avatar=row.avatar,
            subscribers=row.subscribers or 0,
        )


@dataclass
class Channel(ChannelSummary):
    """Channel with its reaction sets and owned videos."""

    created_at: datetime | None = None
    liked: list[UUID] = field(default_factory=list)
    disliked: list[UUID] = field(default_factory=list)
    videos: list[UUID] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: Any) -> "Channel":
        """Create Channel from Cassandra row (sets filled in by the service)."""
        return cls(
            channel_id=row.channel_id,
            username=row.username or "",
            avatar=row.avatar,
            subscribers=row.subscribers or 0,
            created_at=row.created_at,
        )


def create_channel(
    channel_id: UUID,
    username: str,
    avatar: str | None = None,
) -> Channel:
    """Create a new channel with default values."""
    return Channel(
        channel_id=channel_id,
        username=username,
        avatar=avatar,
        subscribers=0,
        created_at=datetime.now(UTC),
    )
