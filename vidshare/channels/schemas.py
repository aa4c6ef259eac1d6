"""Pydantic schemas for channels."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from .models import Channel, ChannelSummary


class RegisterChannelRequest(BaseModel):
    """Request to create the profile of the authenticated channel."""

    username: str = Field(..., min_length=1, max_length=50)
    avatar: str | None = Field(None, max_length=2048)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Strip whitespace and validate username."""
        v = v.strip()
        if not v:
            msg = "Username cannot be empty"
            raise ValueError(msg)
        return v


class ChannelSummaryResponse(BaseModel):
    """Channel fields embedded in videos and comments."""

    id: UUID
    username: str
    avatar: str | None = None
    subscriber: int = 0

    @classmethod
    def from_summary(cls, summary: ChannelSummary) -> "ChannelSummaryResponse":
        return cls(
            id=summary.channel_id,
            username=summary.username,
            avatar=summary.avatar,
            subscriber=summary.subscribers,
        )


class ChannelResponse(ChannelSummaryResponse):
    """Full channel profile."""

    liked: list[UUID] = Field(default_factory=list)
    disliked: list[UUID] = Field(default_factory=list)
    videos: list[UUID] = Field(default_factory=list)
    created_at: datetime | None = None

    @classmethod
    def from_channel(cls, channel: Channel) -> "ChannelResponse":
        return cls(
            id=channel.channel_id,
            username=channel.username,
            avatar=channel.avatar,
            subscriber=channel.subscribers,
            liked=channel.liked,
            disliked=channel.disliked,
            videos=channel.videos,
            created_at=channel.created_at,
        )
