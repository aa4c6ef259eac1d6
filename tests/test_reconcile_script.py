"""Tests for the engagement reconciliation script."""

from uuid import uuid4

import pytest

from scripts.reconcile_engagement import parse_args, reconcile
from vidshare.reactions.service import EngagementService

from .fakes import FakeCassandra


def test_parse_video_ids():
    video_id = uuid4()
    args = parse_args([str(video_id)])
    assert args.video_ids == [video_id]
    assert args.dirty is False


def test_parse_requires_target():
    with pytest.raises(SystemExit):
        parse_args([])


def test_parse_rejects_bad_id():
    with pytest.raises(SystemExit):
        parse_args(["not-a-uuid"])


@pytest.mark.asyncio
async def test_reconcile_given_videos(
    engagement_service: EngagementService, store: FakeCassandra
):
    video_id = uuid4()
    store.reactions[(uuid4(), video_id)] = "like"
    store.counters[video_id] = {"likes": 0, "dislikes": 2}

    reports = await reconcile(engagement_service, [video_id])

    assert [r.repaired for r in reports] == [True]
    assert store.count(video_id) == {"likes": 1, "dislikes": 0}
