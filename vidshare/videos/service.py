"""Video service layer.

Business logic for:
- Paginated listing with channel, counters and first comments
- Random sampling by tag
- Video creation, owner-only update and cascading delete
"""

import random
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from vidshare.core.errors import (
    ChannelNotFoundError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
    VideoNotFoundError,
)

from .catalog import VideoCatalog
from .models import Video, create_video


if TYPE_CHECKING:
    from cassandra.cluster import Session

    from vidshare.channels.models import ChannelSummary
    from vidshare.channels.service import ChannelService
    from vidshare.comments.models import Comment
    from vidshare.comments.service import CommentService
    from vidshare.reactions.models import EngagementCounts
    from vidshare.reactions.service import EngagementService


logger = structlog.get_logger(__name__)


@dataclass
class VideoDetail:
    """Video with its channel, counters and (possibly truncated) comments."""

    video: Video
    channel: "ChannelSummary | None"
    engagement: "EngagementCounts"
    comments: list["Comment"] = field(default_factory=list)


@dataclass
class VideoPage:
    page: int
    pages: int
    items: list[VideoDetail]


class VideoService:
    """Service for videos."""

    def __init__(
        self,
        session: "Session",
        keyspace: str,
        channel_service: "ChannelService",
        comment_service: "CommentService",
        engagement_service: "EngagementService",
        rng: random.Random | None = None,
        catalog: VideoCatalog | None = None,
        min_per_page: int = 8,
        comment_limit: int = 10,
        sample_size: int = 10,
        max_duration: int = 1000,
    ):
        """Initialize with Cassandra session and the services a video spans.

        Args:
            rng: Random source for sampling and new-video defaults
            catalog: Source of url/tag for new videos
        """
        self.session = session
        self.keyspace = keyspace
        self.channel_service = channel_service
        self.comment_service = comment_service
        self.engagement_service = engagement_service
        self.rng = rng or random.Random()
        self.catalog = catalog or VideoCatalog.load()
        self.min_per_page = min_per_page
        self.comment_limit = comment_limit
        self.sample_size = sample_size
        self.max_duration = max_duration
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for efficient queries."""
        self._insert_video = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.videos
            (video_id, channel_id, title, description, thumbnail, url, tag,
             duration, views, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """)

        self._insert_video_by_tag = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.videos_by_tag (tag, video_id)
            VALUES (?, ?)
        """)

        self._get_video = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.videos
            WHERE video_id = ?
        """)

        self._list_videos = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.videos
            LIMIT ?
        """)

        self._count_videos = self.session.prepare(f"""
            SELECT COUNT(*) FROM {self.keyspace}.videos
        """)

        self._get_video_ids_by_tag = self.session.prepare(f"""
            SELECT video_id FROM {self.keyspace}.videos_by_tag
            WHERE tag = ?
        """)

        self._update_video = self.session.prepare(f"""
            UPDATE {self.keyspace}.videos
            SET title = ?, description = ?, thumbnail = ?, updated_at = ?
            WHERE video_id = ?
        """)

        self._delete_video = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.videos
            WHERE video_id = ?
        """)

        self._delete_video_by_tag = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.videos_by_tag
            WHERE tag = ? AND video_id = ?
        """)

    # ==========================================================================
    # Reads
    # ==========================================================================

    async def find_video(self, video_id: UUID) -> Video | None:
        result = await self.session.aexecute(self._get_video, [video_id])
        row = result.one()
        return Video.from_row(row) if row else None

    async def _require_video(self, video_id: UUID) -> Video:
        video = await self.find_video(video_id)
        if video is None:
            raise VideoNotFoundError(video_id)
        return video

    async def _detail(self, video: Video, comment_limit: int | None) -> VideoDetail:
        channel = await self.channel_service.get_summary(video.channel_id)
        engagement = await self.engagement_service.get_engagement(video.video_id)
        comments = []
        if comment_limit:
            comments = await self.comment_service.list_comments(
                video.video_id, comment_limit
            )
        return VideoDetail(
            video=video, channel=channel, engagement=engagement, comments=comments
        )

    async def count_videos(self) -> int:
        result = await self.session.aexecute(self._count_videos, [])
        row = result.one()
        return row.count if row else 0

    async def list_videos(
        self,
        page: int = 0,
        per_page: int | None = None,
        comment_limit: int | None = None,
    ) -> VideoPage:
        """Page of videos with channel, counters and first comments.

        Page size and comment count never go below their configured minimums.

        Raises:
            NotFoundError: If the page holds no videos
        """
        page = max(0, page)
        per_page = max(self.min_per_page, per_page or self.min_per_page)
        comment_limit = max(self.comment_limit, comment_limit or self.comment_limit)

        offset = page * per_page
        rows = await self.session.aexecute(self._list_videos, [offset + per_page])
        videos = [Video.from_row(row) for row in rows][offset:]
        if not videos:
            raise NotFoundError("None Found")

        count = max(await self.count_videos(), self.min_per_page)
        items = [await self._detail(video, comment_limit) for video in videos]
        return VideoPage(page=page, pages=count // per_page, items=items)

    async def random_videos(self, tag: str) -> list[VideoDetail]:
        """Random sample of the videos of a tag, without comments.

        Raises:
            NotFoundError: If the tag has no videos
        """
        rows = await self.session.aexecute(self._get_video_ids_by_tag, [tag])
        video_ids = [row.video_id for row in rows]
        chosen = self.rng.sample(video_ids, min(self.sample_size, len(video_ids)))

        items = []
        for video_id in chosen:
            video = await self.find_video(video_id)
            if video is not None:
                items.append(await self._detail(video, comment_limit=None))
        if not items:
            raise NotFoundError("None Found")
        return items

    async def get_video(
        self, video_id: UUID, comment_limit: int | None = None
    ) -> VideoDetail:
        """Video with channel, counters and up to ``comment_limit`` comments.

        Raises:
            VideoNotFoundError: If the video does not exist
        """
        video = await self._require_video(video_id)
        return await self._detail(video, comment_limit or self.comment_limit)

    # ==========================================================================
    # Writes
    # ==========================================================================

    async def create_video(
        self,
        channel_id: UUID,
        title: str,
        description: str = "",
        thumbnail: str | None = None,
    ) -> VideoDetail:
        """Create a video owned by ``channel_id``.

        ``url``, ``tag`` and ``duration`` are not client-controlled: they come
        from the catalog and the random source.

        Raises:
            ValidationFailedError: If no thumbnail was uploaded
            ChannelNotFoundError: If the channel has no profile
        """
        if not thumbnail:
            raise ValidationFailedError("Image not uploaded!", field="thumbnail")

        channel = await self.channel_service.get_summary(channel_id)
        if channel is None:
            raise ChannelNotFoundError(channel_id)

        entry = self.catalog.choose(self.rng)
        video = create_video(
            channel_id=channel_id,
            title=title,
            description=description,
            thumbnail=thumbnail,
            url=entry.url,
            tag=entry.category,
            duration=self.rng.randint(0, self.max_duration),
        )

        await self.session.aexecute(
            self._insert_video,
            [
                video.video_id,
                video.channel_id,
                video.title,
                video.description,
                video.thumbnail,
                video.url,
                video.tag,
                video.duration,
                video.views,
                video.created_at,
                video.updated_at,
            ],
        )
        await self.session.aexecute(self._insert_video_by_tag, [video.tag, video.video_id])
        await self.channel_service.add_video(channel_id, video.video_id, video.created_at)

        logger.info(
            "video_created",
            video_id=str(video.video_id),
            channel_id=str(channel_id),
            tag=video.tag,
        )
        return await self._detail(video, comment_limit=None)

    def _check_owner(self, video: Video, channel_id: UUID) -> None:
        if video.channel_id != channel_id:
            logger.warning(
                "video_permission_denied",
                video_id=str(video.video_id),
                channel_id=str(channel_id),
            )
            raise PermissionDeniedError("You can only modify your own videos")

    async def update_video(
        self,
        video_id: UUID,
        channel_id: UUID,
        title: str | None = None,
        description: str | None = None,
        thumbnail: str | None = None,
    ) -> VideoDetail:
        """Update the editable fields of a video; omitted fields are kept.

        Raises:
            VideoNotFoundError: If the video does not exist
            PermissionDeniedError: If ``channel_id`` does not own the video
        """
        video = await self._require_video(video_id)
        self._check_owner(video, channel_id)

        if title is not None:
            video.title = title
        if description is not None:
            video.description = description
        if thumbnail is not None:
            video.thumbnail = thumbnail
        video.updated_at = datetime.now(UTC)

        await self.session.aexecute(
            self._update_video,
            [video.title, video.description, video.thumbnail, video.updated_at, video_id],
        )

        logger.info("video_updated", video_id=str(video_id))
        return await self._detail(video, self.comment_limit)

    async def delete_video(self, video_id: UUID, channel_id: UUID) -> None:
        """Delete a video with its comments, reactions and counters.

        Dependents go first and the video row last, so a cascade that fails
        part way can be finished by deleting again.

        Raises:
            VideoNotFoundError: If the video does not exist
            PermissionDeniedError: If ``channel_id`` does not own the video
        """
        video = await self._require_video(video_id)
        self._check_owner(video, channel_id)

        comments = await self.comment_service.delete_video_comments(video_id)
        reactions = await self.engagement_service.purge_video(video_id)
        await self.channel_service.remove_video(channel_id, video_id)
        await self.session.aexecute(self._delete_video_by_tag, [video.tag, video_id])
        await self.session.aexecute(self._delete_video, [video_id])

        logger.info(
            "video_deleted",
            video_id=str(video_id),
            comments=comments,
            reactions=reactions,
        )
