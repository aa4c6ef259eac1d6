"""Pydantic schemas for videos."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from vidshare.channels.schemas import ChannelSummaryResponse
from vidshare.comments.schemas import CommentResponse

from .service import VideoDetail, VideoPage


# ==============================================================================
# Request Schemas
# ==============================================================================


class CreateVideoRequest(BaseModel):
    """Request to create a video.

    Server-managed fields (channel, counters, url, tag, duration) sent by the
    client are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field("", max_length=5000)
    thumbnail: str | None = Field(None, max_length=2048)


class UpdateVideoRequest(BaseModel):
    """Partial update of the editable video fields."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    thumbnail: str | None = Field(None, min_length=1, max_length=2048)


# ==============================================================================
# Response Schemas
# ==============================================================================


class VideoResponse(BaseModel):
    """Video with channel, counters and comments."""

    id: UUID
    title: str
    description: str
    thumbnail: str
    url: str
    tag: str
    duration: int
    views: int = 0
    likes: int = 0
    dislikes: int = 0
    channel: ChannelSummaryResponse | None = None
    comments: list[CommentResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime | None = None

    @classmethod
    def from_detail(cls, detail: VideoDetail) -> "VideoResponse":
        video = detail.video
        return cls(
            id=video.video_id,
            title=video.title,
            description=video.description,
            thumbnail=video.thumbnail,
            url=video.url,
            tag=video.tag,
            duration=video.duration,
            views=video.views,
            likes=detail.engagement.likes,
            dislikes=detail.engagement.dislikes,
            channel=(
                ChannelSummaryResponse.from_summary(detail.channel)
                if detail.channel
                else None
            ),
            comments=[CommentResponse.from_comment(c) for c in detail.comments],
            created_at=video.created_at,
            updated_at=video.updated_at,
        )


class VideoListResponse(BaseModel):
    """Page of videos."""

    page: int
    pages: int
    videos: list[VideoResponse]

    @classmethod
    def from_page(cls, page: VideoPage) -> "VideoListResponse":
        return cls(
            page=page.page,
            pages=page.pages,
            videos=[VideoResponse.from_detail(item) for item in page.items],
        )


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str
