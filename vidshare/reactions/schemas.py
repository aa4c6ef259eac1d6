"""Pydantic schemas for reaction endpoints."""

from uuid import UUID

from pydantic import BaseModel

from .models import EngagementCounts, ReactionKind, ToggleAction, ToggleResult


class ToggleReactionResponse(BaseModel):
    """Result of a like/dislike toggle."""

    message: str
    action: ToggleAction
    reaction: ReactionKind
    cleared: ReactionKind | None = None

    @classmethod
    def from_result(cls, result: ToggleResult) -> "ToggleReactionResponse":
        label = "Like" if result.reaction is ReactionKind.LIKE else "Dislike"
        return cls(
            message=f"Video's {label} has been updated.",
            action=result.action,
            reaction=result.reaction,
            cleared=result.cleared,
        )


class EngagementResponse(BaseModel):
    """Like/dislike counters of a video."""

    video_id: UUID
    likes: int = 0
    dislikes: int = 0

    @classmethod
    def from_counts(cls, counts: EngagementCounts) -> "EngagementResponse":
        return cls(video_id=counts.video_id, likes=counts.likes, dislikes=counts.dislikes)
