"""Tests for service error mapping."""

import pytest

from vidshare.core.errors import (
    ChannelNotFoundError,
    CommentNotFoundError,
    ConflictRaceError,
    NotFoundError,
    PermissionDeniedError,
    StoreError,
    ValidationFailedError,
    VidshareError,
    VideoNotFoundError,
    status_for,
)


@pytest.mark.parametrize(
    ("error", "status_code"),
    [
        (NotFoundError(), 404),
        (VideoNotFoundError("v"), 404),
        (ChannelNotFoundError("c"), 404),
        (CommentNotFoundError("c"), 404),
        (ValidationFailedError("bad"), 422),
        (PermissionDeniedError(), 403),
        (ConflictRaceError("c", "v", 3), 409),
        (StoreError("write_membership"), 503),
        (VidshareError("odd", "unknown_code"), 500),
    ],
)
def test_status_for(error: VidshareError, status_code: int):
    assert status_for(error) == status_code


def test_store_error_names_step():
    cause = TimeoutError("slow")
    error = StoreError("adjust_counters", cause, video_id="v1")
    assert error.step == "adjust_counters"
    assert error.details == {"video_id": "v1"}
    assert "adjust_counters" in error.message
    assert "slow" in error.message


def test_video_not_found_message():
    assert VideoNotFoundError("abc").message == "Video abc not found!"
