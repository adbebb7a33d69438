"""Tests for the webhook, health and metrics endpoints."""

from unittest.mock import AsyncMock, MagicMock, patch

from fastapi.testclient import TestClient

from botmachine.api.main import create_app
from botmachine.bot import build_router
from botmachine.models import Settings

SECRET_HEADER = {"X-Telegram-Bot-Api-Secret-Token": "s3cret"}


class TestWebhookEndpoint:
    """Tests for POST /webhook."""

    def test_update_is_dispatched(self, client, fake_client, start_update):
        response = client.post("/webhook", json=start_update, headers=SECRET_HEADER)

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert fake_client.sent[0]["text"] == "<b>Counter</b>: <b>0</b>"

    def test_session_persists_between_deliveries(self, client, store, fake_client, start_update):
        client.post("/webhook", json=start_update, headers=SECRET_HEADER)

        callback = {
            "update_id": 1001,
            "callback_query": {
                "id": "cb-1",
                "from": {"id": 42, "is_bot": False, "first_name": "Ada"},
                "chat_instance": "1",
                "message": {"message_id": 5, "date": 0, "chat": {"id": 42, "type": "private"}},
                "data": "increment",
            },
        }
        response = client.post("/webhook", json=callback, headers=SECRET_HEADER)

        assert response.status_code == 200
        session, _ = store._store["42"]
        assert session["counter_value"] == 1
        assert fake_client.edited[-1]["message_id"] == 5

    def test_wrong_secret_rejected(self, client, fake_client, start_update):
        response = client.post(
            "/webhook",
            json=start_update,
            headers={"X-Telegram-Bot-Api-Secret-Token": "wrong"},
        )

        assert response.status_code == 401
        assert fake_client.calls == []

    def test_missing_secret_rejected(self, client, start_update):
        response = client.post("/webhook", json=start_update)

        assert response.status_code == 401

    def test_no_secret_configured_accepts_any(self, fake_client, start_update):
        app = create_app(client=fake_client, settings=Settings(bot_token="1:T"))
        router = MagicMock()
        router.handle = AsyncMock()
        app.state.bot_router = router

        with TestClient(app) as client:
            response = client.post("/webhook", json=start_update)

        assert response.status_code == 200
        router.handle.assert_awaited_once()

    def test_invalid_update_rejected(self, client):
        response = client.post("/webhook", json={"message": "nope"}, headers=SECRET_HEADER)

        assert response.status_code == 422

    def test_handler_failure_still_acknowledged(self, client, app, start_update):
        app.state.bot_router.on_text("^boom$", AsyncMock(side_effect=RuntimeError("boom")))
        start_update["message"]["text"] = "boom"

        response = client.post("/webhook", json=start_update, headers=SECRET_HEADER)

        assert response.status_code == 200


class TestHealthEndpoints:
    """Tests for health and metrics endpoints."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert {service["name"] for service in data["services"]} == {"chat_client"}

    def test_live(self, client):
        assert client.get("/live").json() == {"status": "alive"}

    def test_metrics(self, client, start_update):
        client.post("/webhook", json=start_update, headers=SECRET_HEADER)

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "botmachine_updates_total" in response.text


class TestLifespan:
    """Tests for resources created at startup."""

    def test_created_session_store_closed_on_shutdown(self, fake_client):
        store = MagicMock()
        store.close = AsyncMock()
        app = create_app(client=fake_client, settings=Settings(bot_token="1:T"))

        with patch("botmachine.api.main.get_session_store", return_value=store):
            with TestClient(app):
                assert app.state.session_store is store
                store.close.assert_not_awaited()

        store.close.assert_awaited_once()

    def test_injected_client_not_closed(self, fake_client, store):
        fake_client.close = AsyncMock()
        app = create_app(router=build_router(store), client=fake_client, settings=Settings())

        with TestClient(app):
            pass

        fake_client.close.assert_not_awaited()
