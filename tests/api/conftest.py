"""Fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from botmachine.api.main import create_app
from botmachine.bot import build_router
from botmachine.models import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(bot_token="1:T", webhook_secret="s3cret")


@pytest.fixture
def app(settings, fake_client, store):
    return create_app(router=build_router(store), client=fake_client, settings=settings)


@pytest.fixture
def client(app):
    """Create a test client for the API."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def start_update() -> dict:
    """Raw Bot API update carrying /start."""
    return {
        "update_id": 1000,
        "message": {
            "message_id": 1,
            "date": 1700000000,
            "chat": {"id": 42, "type": "private"},
            "from": {"id": 42, "is_bot": False, "first_name": "Ada"},
            "text": "/start",
        },
    }
