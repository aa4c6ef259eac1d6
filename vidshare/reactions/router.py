"""Like/dislike endpoints."""

from uuid import UUID

from fastapi import APIRouter

from vidshare.auth.dependencies import CurrentChannel

from .dependencies import EngagementServiceDep
from .schemas import EngagementResponse, ToggleReactionResponse


router = APIRouter(prefix="/v1/videos", tags=["reactions"])


@router.put(
    "/{video_id}/like",
    response_model=ToggleReactionResponse,
    summary="Toggle like",
)
async def like_video(
    video_id: UUID,
    engagement_service: EngagementServiceDep,
    channel: CurrentChannel,
) -> ToggleReactionResponse:
    """Like a video, or remove the like if already present.

    Liking a disliked video removes the dislike.
    """
    result = await engagement_service.toggle_like(channel.id, video_id)
    return ToggleReactionResponse.from_result(result)


@router.put(
    "/{video_id}/dislike",
    response_model=ToggleReactionResponse,
    summary="Toggle dislike",
)
async def dislike_video(
    video_id: UUID,
    engagement_service: EngagementServiceDep,
    channel: CurrentChannel,
) -> ToggleReactionResponse:
    """Dislike a video, or remove the dislike if already present."""
    result = await engagement_service.toggle_dislike(channel.id, video_id)
    return ToggleReactionResponse.from_result(result)


@router.get(
    "/{video_id}/engagement",
    response_model=EngagementResponse,
    summary="Get like/dislike counters",
)
async def get_engagement(
    video_id: UUID,
    engagement_service: EngagementServiceDep,
) -> EngagementResponse:
    """Current like/dislike counters of a video."""
    counts = await engagement_service.get_engagement(video_id)
    return EngagementResponse.from_counts(counts)
