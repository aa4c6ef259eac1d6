"""Pydantic schemas for comments.

Request/Response models for:
- Comment creation
- Flat comment lists embedded in video details
- The two-level comment tree
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import Comment
from .tree import CommentTree


# ==============================================================================
# Request Schemas
# ==============================================================================


class CreateCommentRequest(BaseModel):
    """Request to create a comment or a reply."""

    content: str = Field(..., min_length=1, max_length=10000)
    parent_id: UUID | None = None

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        """Strip whitespace and validate content."""
        v = v.strip()
        if not v:
            msg = "Content cannot be empty"
            raise ValueError(msg)
        return v


# ==============================================================================
# Response Schemas
# ==============================================================================


class CommentAuthorResponse(BaseModel):
    """Denormalised author of a comment."""

    id: UUID
    username: str
    avatar: str | None = None


class CommentResponse(BaseModel):
    """Single comment."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    video_id: UUID
    parent_id: UUID | None = None
    content: str
    author: CommentAuthorResponse
    likes: int = 0
    dislikes: int = 0
    created_at: datetime

    @classmethod
    def from_comment(cls, comment: Comment) -> "CommentResponse":
        """Create response from a Comment entity."""
        return cls(
            id=comment.comment_id,
            video_id=comment.video_id,
            parent_id=comment.parent_id,
            content=comment.content,
            author=CommentAuthorResponse(
                id=comment.channel_id,
                username=comment.author_name,
                avatar=comment.author_avatar,
            ),
            likes=comment.likes,
            dislikes=comment.dislikes,
            created_at=comment.created_at,
        )


class CommentNodeResponse(CommentResponse):
    """Top-level comment with the ids of its replies, oldest first."""

    children: list[UUID] = Field(default_factory=list)


class CommentTreeResponse(BaseModel):
    """Comments of a video arranged as a two-level tree.

    ``replies`` holds every reply attached to a root so clients can resolve
    ``children`` ids without another request.
    """

    video_id: UUID
    comments: list[CommentNodeResponse] = Field(default_factory=list)
    replies: list[CommentResponse] = Field(default_factory=list)
    total: int = 0

    @classmethod
    def from_tree(cls, video_id: UUID, tree: CommentTree) -> "CommentTreeResponse":
        replies = [
            CommentResponse.from_comment(reply) for reply in tree.replies.values()
        ]
        nodes = [
            CommentNodeResponse(
                **CommentResponse.from_comment(node.comment).model_dump(),
                children=list(node.children),
            )
            for node in tree.roots
        ]
        return cls(
            video_id=video_id,
            comments=nodes,
            replies=replies,
            total=len(nodes) + len(replies),
        )
