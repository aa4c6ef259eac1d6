"""Tests for video endpoints."""

from unittest.mock import AsyncMock, Mock
from uuid import UUID, uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from vidshare.channels.models import ChannelSummary
from vidshare.core.errors import (
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from vidshare.reactions.models import EngagementCounts
from vidshare.videos.models import create_video
from vidshare.videos.service import VideoDetail, VideoPage


def make_detail(channel_id: UUID | None = None) -> VideoDetail:
    channel_id = channel_id or uuid4()
    video = create_video(
        channel_id=channel_id,
        title="Title",
        description="About",
        thumbnail="thumb.png",
        url="https://cdn.example/a.mp4",
        tag="Music",
        duration=120,
    )
    return VideoDetail(
        video=video,
        channel=ChannelSummary(channel_id, "owner", None, 5),
        engagement=EngagementCounts(video.video_id, likes=3, dislikes=1),
    )


@pytest.fixture
def video_service(app: FastAPI) -> Mock:
    service = Mock()
    for name in (
        "list_videos",
        "random_videos",
        "get_video",
        "create_video",
        "update_video",
        "delete_video",
    ):
        setattr(service, name, AsyncMock())
    app.state.video_service = service
    return service


class TestReadRoutes:
    def test_list(self, client: TestClient, video_service: Mock):
        detail = make_detail()
        video_service.list_videos.return_value = VideoPage(page=0, pages=1, items=[detail])

        response = client.get("/v1/videos", params={"page": 0, "limit": 3})

        assert response.status_code == 200
        data = response.json()
        assert (data["page"], data["pages"]) == (0, 1)
        video = data["videos"][0]
        assert video["likes"] == 3
        assert video["channel"] == {
            "id": str(detail.channel.channel_id),
            "username": "owner",
            "avatar": None,
            "subscriber": 5,
        }
        video_service.list_videos.assert_awaited_once_with(
            page=0, per_page=3, comment_limit=10
        )

    def test_list_empty(self, client: TestClient, video_service: Mock):
        video_service.list_videos.side_effect = NotFoundError("None Found")

        response = client.get("/v1/videos")

        assert response.status_code == 404
        assert response.json()["message"] == "None Found"

    @pytest.mark.parametrize(
        "params",
        [{"page": 1_000_000_000}, {"limit": 101}, {"comment_limit": 501}],
    )
    def test_list_out_of_range(
        self, client: TestClient, video_service: Mock, params: dict
    ):
        response = client.get("/v1/videos", params=params)

        assert response.status_code == 422
        video_service.list_videos.assert_not_awaited()

    def test_random(self, client: TestClient, video_service: Mock):
        video_service.random_videos.return_value = [make_detail(), make_detail()]

        response = client.get("/v1/videos/random/Music")

        assert response.status_code == 200
        assert len(response.json()) == 2
        video_service.random_videos.assert_awaited_once_with("Music")

    def test_get(self, client: TestClient, video_service: Mock):
        detail = make_detail()
        video_service.get_video.return_value = detail

        response = client.get(f"/v1/videos/{detail.video.video_id}?comment_limit=25")

        assert response.status_code == 200
        assert response.json()["id"] == str(detail.video.video_id)
        video_service.get_video.assert_awaited_once_with(
            detail.video.video_id, comment_limit=25
        )

    def test_get_malformed_id(self, client: TestClient, video_service: Mock):
        response = client.get("/v1/videos/not-a-uuid")
        assert response.status_code == 422


class TestWriteRoutes:
    def test_create_ignores_server_fields(
        self,
        client: TestClient,
        video_service: Mock,
        auth_headers: dict[str, str],
        channel_id: UUID,
    ):
        video_service.create_video.return_value = make_detail(channel_id)

        response = client.post(
            "/v1/videos",
            json={
                "title": "Mine",
                "thumbnail": "t.png",
                "likes": 999,
                "duration": 5,
                "url": "https://evil.example",
            },
            headers=auth_headers,
        )

        assert response.status_code == 201
        video_service.create_video.assert_awaited_once_with(
            channel_id=channel_id, title="Mine", description="", thumbnail="t.png"
        )

    def test_create_without_thumbnail(
        self, client: TestClient, video_service: Mock, auth_headers: dict[str, str]
    ):
        video_service.create_video.side_effect = ValidationFailedError(
            "Image not uploaded!", field="thumbnail"
        )

        response = client.post("/v1/videos", json={"title": "x"}, headers=auth_headers)

        assert response.status_code == 422
        assert response.json()["message"] == "Image not uploaded!"

    def test_create_requires_token(self, client: TestClient, video_service: Mock):
        response = client.post("/v1/videos", json={"title": "x", "thumbnail": "t"})
        assert response.status_code == 401

    def test_update_returns_created(
        self, client: TestClient, video_service: Mock, auth_headers: dict[str, str]
    ):
        detail = make_detail()
        video_service.update_video.return_value = detail

        response = client.put(
            f"/v1/videos/{detail.video.video_id}",
            json={"title": "Renamed"},
            headers=auth_headers,
        )

        assert response.status_code == 201

    def test_update_not_owner(
        self, client: TestClient, video_service: Mock, auth_headers: dict[str, str]
    ):
        video_service.update_video.side_effect = PermissionDeniedError()

        response = client.put(
            f"/v1/videos/{uuid4()}", json={"title": "x"}, headers=auth_headers
        )

        assert response.status_code == 403

    def test_delete(
        self,
        client: TestClient,
        video_service: Mock,
        auth_headers: dict[str, str],
        channel_id: UUID,
    ):
        video_id = uuid4()

        response = client.delete(f"/v1/videos/{video_id}", headers=auth_headers)

        assert response.status_code == 200
        assert str(video_id) in response.json()["message"]
        video_service.delete_video.assert_awaited_once_with(video_id, channel_id)
