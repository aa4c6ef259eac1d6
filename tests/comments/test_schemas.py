"""Tests for comment schemas."""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from vidshare.comments.models import create_comment
from vidshare.comments.schemas import CommentTreeResponse, CreateCommentRequest
from vidshare.comments.tree import build_comment_tree


def test_create_request_strips_content():
    assert CreateCommentRequest(content="  hi  ").content == "hi"


def test_create_request_rejects_blank():
    with pytest.raises(ValidationError):
        CreateCommentRequest(content="   ")


def test_tree_response_leaves_orphans_out():
    video_id = uuid4()
    root = create_comment(video_id, uuid4(), "A", "root")
    reply = create_comment(video_id, uuid4(), "B", "reply", parent_id=root.comment_id)
    orphan = create_comment(video_id, uuid4(), "C", "lost", parent_id=uuid4())

    response = CommentTreeResponse.from_tree(
        video_id, build_comment_tree([root, reply, orphan])
    )

    assert [c.id for c in response.comments] == [root.comment_id]
    assert response.comments[0].children == [reply.comment_id]
    assert [r.id for r in response.replies] == [reply.comment_id]
    assert orphan.comment_id not in {r.id for r in response.replies}
