"""Channel service layer."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from vidshare.core.errors import ChannelNotFoundError
from vidshare.reactions.models import ReactionKind

from .models import Channel, ChannelSummary, create_channel


if TYPE_CHECKING:
    from cassandra.cluster import Session

    from vidshare.reactions.service import EngagementService


logger = structlog.get_logger(__name__)


class ChannelService:
    """Service for channel profiles and their owned-video lists."""

    def __init__(
        self,
        session: "Session",
        keyspace: str,
        engagement_service: "EngagementService",
    ):
        """Initialize with Cassandra session and the engagement service."""
        self.session = session
        self.keyspace = keyspace
        self.engagement_service = engagement_service
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for efficient queries."""
        self._insert_channel = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.channels
            (channel_id, username, avatar, subscribers, created_at)
            VALUES (?, ?, ?, ?, ?)
            IF NOT EXISTS
        """)

        self._get_channel = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.channels
            WHERE channel_id = ?
        """)

        self._insert_channel_video = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.channel_videos
            (channel_id, video_id, created_at)
            VALUES (?, ?, ?)
        """)

        self._delete_channel_video = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.channel_videos
            WHERE channel_id = ? AND video_id = ?
        """)

        self._get_channel_videos = self.session.prepare(f"""
            SELECT video_id FROM {self.keyspace}.channel_videos
            WHERE channel_id = ?
        """)

    async def register_channel(
        self,
        channel_id: UUID,
        username: str,
        avatar: str | None = None,
    ) -> tuple[Channel, bool]:
        """Create the channel profile unless it already exists.

        Returns:
            (channel, created)
        """
        channel = create_channel(channel_id, username, avatar)
        result = await self.session.aexecute(
            self._insert_channel,
            [
                channel.channel_id,
                channel.username,
                channel.avatar,
                channel.subscribers,
                channel.created_at,
            ],
        )
        if result.was_applied:
            logger.info("channel_registered", channel_id=str(channel_id))
            return channel, True

        return await self.get_channel(channel_id), False

    async def get_summary(self, channel_id: UUID) -> ChannelSummary | None:
        """Public channel fields, or None if the channel does not exist."""
        result = await self.session.aexecute(self._get_channel, [channel_id])
        row = result.one()
        return ChannelSummary.from_row(row) if row else None

    async def channel_exists(self, channel_id: UUID) -> bool:
        return await self.get_summary(channel_id) is not None

    async def get_channel(self, channel_id: UUID) -> Channel:
        """Channel with liked, disliked and owned video ids.

        Raises:
            ChannelNotFoundError: If the channel does not exist
        """
        result = await self.session.aexecute(self._get_channel, [channel_id])
        row = result.one()
        if row is None:
            raise ChannelNotFoundError(channel_id)

        channel = Channel.from_row(row)
        reactions = await self.engagement_service.get_channel_reactions(channel_id)
        channel.liked = reactions[ReactionKind.LIKE]
        channel.disliked = reactions[ReactionKind.DISLIKE]
        channel.videos = await self.list_video_ids(channel_id)
        return channel

    async def list_video_ids(self, channel_id: UUID) -> list[UUID]:
        rows = await self.session.aexecute(self._get_channel_videos, [channel_id])
        return [row.video_id for row in rows]

    async def add_video(
        self,
        channel_id: UUID,
        video_id: UUID,
        created_at: datetime | None = None,
    ) -> None:
        """Record a video in the channel's owned-video list."""
        await self.session.aexecute(
            self._insert_channel_video,
            [channel_id, video_id, created_at or datetime.now(UTC)],
        )

    async def remove_video(self, channel_id: UUID, video_id: UUID) -> None:
        """Drop a video from the channel's owned-video list."""
        await self.session.aexecute(self._delete_channel_video, [channel_id, video_id])
