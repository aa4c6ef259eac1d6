"""Tests for like/dislike endpoints."""

from unittest.mock import AsyncMock, Mock
from uuid import UUID, uuid4

import pytest
from cassandra import OperationTimedOut
from fastapi import FastAPI
from fastapi.testclient import TestClient

from vidshare.core.errors import ConflictRaceError, StoreError, VideoNotFoundError
from vidshare.reactions.models import (
    EngagementCounts,
    ReactionKind,
    ToggleAction,
    ToggleResult,
)


@pytest.fixture
def engagement_service(app: FastAPI) -> Mock:
    service = Mock()
    service.toggle_like = AsyncMock()
    service.toggle_dislike = AsyncMock()
    service.get_engagement = AsyncMock()
    app.state.engagement_service = service
    return service


class TestToggleRoutes:
    def test_requires_token(self, client: TestClient, engagement_service: Mock):
        response = client.put(f"/v1/videos/{uuid4()}/like")

        assert response.status_code == 401
        body = response.json()
        assert body["error"] is True
        assert body["message"] == "Access token not provided"
        engagement_service.toggle_like.assert_not_awaited()

    def test_invalid_token(self, client: TestClient, engagement_service: Mock):
        response = client.put(
            f"/v1/videos/{uuid4()}/like", headers={"Authorization": "Bearer nope"}
        )
        assert response.status_code == 401

    def test_like(
        self,
        client: TestClient,
        engagement_service: Mock,
        auth_headers: dict[str, str],
        channel_id: UUID,
    ):
        video_id = uuid4()
        engagement_service.toggle_like.return_value = ToggleResult(
            video_id, ReactionKind.LIKE, ToggleAction.INCREMENT, changed=True
        )

        response = client.put(f"/v1/videos/{video_id}/like", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {
            "message": "Video's Like has been updated.",
            "action": "increment",
            "reaction": "like",
            "cleared": None,
        }
        engagement_service.toggle_like.assert_awaited_once_with(channel_id, video_id)

    def test_dislike_clearing_like(
        self, client: TestClient, engagement_service: Mock, auth_headers: dict[str, str]
    ):
        video_id = uuid4()
        engagement_service.toggle_dislike.return_value = ToggleResult(
            video_id,
            ReactionKind.DISLIKE,
            ToggleAction.INCREMENT,
            changed=True,
            cleared=ReactionKind.LIKE,
        )

        response = client.put(f"/v1/videos/{video_id}/dislike", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Video's Dislike has been updated."
        assert response.json()["cleared"] == "like"

    @pytest.mark.parametrize(
        ("error", "status_code"),
        [
            (VideoNotFoundError("x"), 404),
            (ConflictRaceError("c", "v", 3), 409),
            (StoreError("adjust_counters"), 503),
            (OperationTimedOut(), 503),
        ],
    )
    def test_errors_map_to_status(
        self,
        client: TestClient,
        engagement_service: Mock,
        auth_headers: dict[str, str],
        error: Exception,
        status_code: int,
    ):
        engagement_service.toggle_like.side_effect = error

        response = client.put(f"/v1/videos/{uuid4()}/like", headers=auth_headers)

        assert response.status_code == status_code
        assert response.json()["status_code"] == status_code
        assert response.json()["request_id"]

    def test_not_found_message(
        self, client: TestClient, engagement_service: Mock, auth_headers: dict[str, str]
    ):
        video_id = uuid4()
        engagement_service.toggle_like.side_effect = VideoNotFoundError(video_id)

        response = client.put(f"/v1/videos/{video_id}/like", headers=auth_headers)

        assert response.json()["message"] == f"Video {video_id} not found!"
        assert response.json()["code"] == "video_not_found"

    def test_service_unavailable(self, client: TestClient, auth_headers: dict[str, str]):
        response = client.put(f"/v1/videos/{uuid4()}/like", headers=auth_headers)
        assert response.status_code == 503


def test_engagement_counts(client: TestClient, engagement_service: Mock):
    video_id = uuid4()
    engagement_service.get_engagement.return_value = EngagementCounts(video_id, 4, 1)

    response = client.get(f"/v1/videos/{video_id}/engagement")

    assert response.status_code == 200
    assert response.json() == {"video_id": str(video_id), "likes": 4, "dislikes": 1}
