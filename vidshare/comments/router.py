"""Comment endpoints, nested under videos.

Provides routes for:
- Reading a video's comment tree
- Creating comments and replies
- Reading a single comment
"""

from uuid import UUID

from fastapi import APIRouter, status

from vidshare.auth.dependencies import CurrentChannel

from .dependencies import CommentServiceDep
from .schemas import CommentResponse, CommentTreeResponse, CreateCommentRequest


router = APIRouter(prefix="/v1/videos", tags=["comments"])


@router.get(
    "/{video_id}/comments",
    response_model=CommentTreeResponse,
    summary="Get comment tree",
)
async def get_comment_tree(
    video_id: UUID,
    comment_service: CommentServiceDep,
) -> CommentTreeResponse:
    """Top-level comments of a video, oldest first, with their replies.

    Replies whose parent is gone are left out.
    """
    tree = await comment_service.get_comment_tree(video_id)
    return CommentTreeResponse.from_tree(video_id, tree)


@router.post(
    "/{video_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create comment",
)
async def create_comment(
    video_id: UUID,
    data: CreateCommentRequest,
    comment_service: CommentServiceDep,
    channel: CurrentChannel,
) -> CommentResponse:
    """Comment on a video, or reply to one of its top-level comments."""
    comment = await comment_service.create_comment(
        video_id=video_id,
        channel_id=channel.id,
        content=data.content,
        parent_id=data.parent_id,
    )
    return CommentResponse.from_comment(comment)


@router.get(
    "/{video_id}/comments/{comment_id}",
    response_model=CommentResponse,
    summary="Get comment",
)
async def get_comment(
    video_id: UUID,
    comment_id: UUID,
    comment_service: CommentServiceDep,
) -> CommentResponse:
    """Single comment of a video."""
    return CommentResponse.from_comment(
        await comment_service.get_comment(video_id, comment_id)
    )
