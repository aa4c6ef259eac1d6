"""Shared fixtures."""

import os
import tempfile
from collections.abc import Iterator
from uuid import UUID, uuid4

# Settings are cached on first use; test values must be in place before
# vidshare.main configures logging at import time.
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="vidshare-logs-"))
os.environ.setdefault("LOG_REQUESTS", "false")

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from vidshare.auth.security import create_access_token
from vidshare.reactions.service import EngagementService

from .fakes import FakeCassandra


@pytest.fixture
def app() -> FastAPI:
    """Fresh application; lifespan is not run, so no store connections."""
    from vidshare.main import create_app

    return create_app()


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    yield TestClient(app)


@pytest.fixture
def channel_id() -> UUID:
    return uuid4()


@pytest.fixture
def auth_headers(channel_id: UUID) -> dict[str, str]:
    """Bearer header acting as ``channel_id``."""
    return {"Authorization": f"Bearer {create_access_token(str(channel_id))}"}


@pytest.fixture
def store() -> FakeCassandra:
    return FakeCassandra()


@pytest.fixture
def engagement_service(store: FakeCassandra) -> EngagementService:
    return EngagementService(session=store, keyspace="test_keyspace")
