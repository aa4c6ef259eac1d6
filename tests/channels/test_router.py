"""Tests for channel endpoints."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, Mock
from uuid import UUID, uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from vidshare.channels.models import Channel
from vidshare.core.errors import ChannelNotFoundError


def make_channel(channel_id: UUID, **overrides) -> Channel:
    values = {
        "channel_id": channel_id,
        "username": "creator",
        "avatar": None,
        "subscribers": 0,
        "created_at": datetime(2024, 1, 1, tzinfo=UTC),
    }
    values.update(overrides)
    return Channel(**values)


@pytest.fixture
def channel_service(app: FastAPI) -> Mock:
    service = Mock()
    service.register_channel = AsyncMock()
    service.get_channel = AsyncMock()
    app.state.channel_service = service
    return service


def test_register_creates(
    client: TestClient,
    channel_service: Mock,
    auth_headers: dict[str, str],
    channel_id: UUID,
):
    channel_service.register_channel.return_value = (make_channel(channel_id), True)

    response = client.post(
        "/v1/channels", json={"username": " creator "}, headers=auth_headers
    )

    assert response.status_code == 201
    channel_service.register_channel.assert_awaited_once_with(channel_id, "creator", None)


def test_register_existing_returns_ok(
    client: TestClient,
    channel_service: Mock,
    auth_headers: dict[str, str],
    channel_id: UUID,
):
    channel_service.register_channel.return_value = (make_channel(channel_id), False)

    response = client.post("/v1/channels", json={"username": "x"}, headers=auth_headers)

    assert response.status_code == 200


def test_me_lists_reactions(
    client: TestClient,
    channel_service: Mock,
    auth_headers: dict[str, str],
    channel_id: UUID,
):
    liked = uuid4()
    channel_service.get_channel.return_value = make_channel(channel_id, liked=[liked])

    response = client.get("/v1/channels/me", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["liked"] == [str(liked)]
    assert response.json()["disliked"] == []


def test_unknown_channel(client: TestClient, channel_service: Mock):
    channel_id = uuid4()
    channel_service.get_channel.side_effect = ChannelNotFoundError(channel_id)

    response = client.get(f"/v1/channels/{channel_id}")

    assert response.status_code == 404
    assert response.json()["message"] == "Channel does not exist!"
