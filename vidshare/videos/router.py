"""Video endpoints.

Provides routes for:
- Paginated listing and random sampling by tag
- Video details with comments
- Create, update and delete (owner only)
"""

from uuid import UUID

from fastapi import APIRouter, Query, status

from vidshare.auth.dependencies import CurrentChannel

from .dependencies import VideoServiceDep
from .schemas import (
    CreateVideoRequest,
    MessageResponse,
    UpdateVideoRequest,
    VideoListResponse,
    VideoResponse,
)


router = APIRouter(prefix="/v1/videos", tags=["videos"])


@router.get("", response_model=VideoListResponse, summary="List videos")
async def list_videos(
    video_service: VideoServiceDep,
    page: int = Query(0, le=1000, description="Page to select, starting at 0"),
    limit: int = Query(8, le=100, description="Videos per page (at least 8)"),
    comment_limit: int = Query(
        10, le=500, description="Comments per video (at least 10)"
    ),
) -> VideoListResponse:
    """Paginated videos with channel, counters and first comments."""
    result = await video_service.list_videos(
        page=page, per_page=limit, comment_limit=comment_limit
    )
    return VideoListResponse.from_page(result)


@router.get(
    "/random/{tag}",
    response_model=list[VideoResponse],
    summary="Random videos of a tag",
)
async def random_videos(tag: str, video_service: VideoServiceDep) -> list[VideoResponse]:
    """Up to ten random videos sharing a tag."""
    items = await video_service.random_videos(tag)
    return [VideoResponse.from_detail(item) for item in items]


@router.get("/{video_id}", response_model=VideoResponse, summary="Get video")
async def get_video(
    video_id: UUID,
    video_service: VideoServiceDep,
    comment_limit: int = Query(10, ge=1, le=500),
) -> VideoResponse:
    """Video details with channel, counters and comments."""
    detail = await video_service.get_video(video_id, comment_limit=comment_limit)
    return VideoResponse.from_detail(detail)


@router.post(
    "",
    response_model=VideoResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create video",
)
async def create_video(
    data: CreateVideoRequest,
    video_service: VideoServiceDep,
    channel: CurrentChannel,
) -> VideoResponse:
    """Create a video for the authenticated channel.

    The thumbnail URL must point at an already uploaded image.
    """
    detail = await video_service.create_video(
        channel_id=channel.id,
        title=data.title,
        description=data.description,
        thumbnail=data.thumbnail,
    )
    return VideoResponse.from_detail(detail)


@router.put(
    "/{video_id}",
    response_model=VideoResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Update video",
)
async def update_video(
    video_id: UUID,
    data: UpdateVideoRequest,
    video_service: VideoServiceDep,
    channel: CurrentChannel,
) -> VideoResponse:
    """Update title, description or thumbnail of an owned video."""
    detail = await video_service.update_video(
        video_id,
        channel.id,
        title=data.title,
        description=data.description,
        thumbnail=data.thumbnail,
    )
    return VideoResponse.from_detail(detail)


@router.delete("/{video_id}", response_model=MessageResponse, summary="Delete video")
async def delete_video(
    video_id: UUID,
    video_service: VideoServiceDep,
    channel: CurrentChannel,
) -> MessageResponse:
    """Delete an owned video with its comments, reactions and counters."""
    await video_service.delete_video(video_id, channel.id)
    return MessageResponse(
        message=(
            f"You have successfully deleted the video with ID {video_id} "
            "along with its comments"
        )
    )
