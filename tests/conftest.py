"""Pytest configuration and shared fixtures."""

import itertools
from typing import Any

import pytest

from botmachine.channels.base import BaseChatClient
from botmachine.infrastructure.session_store import InMemorySessionStore
from botmachine.models import Update

DEFAULT_USER_ID = 42


class FakeChatClient(BaseChatClient):
    """Chat client recording every outbound call."""

    def __init__(self):
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self._ids = itertools.count(100)

    def _record(self, method: str, **kwargs: Any) -> None:
        self.calls.append((method, kwargs))

    def calls_to(self, method: str) -> list[dict[str, Any]]:
        return [kwargs for name, kwargs in self.calls if name == method]

    @property
    def sent(self) -> list[dict[str, Any]]:
        return self.calls_to("send_message")

    @property
    def edited(self) -> list[dict[str, Any]]:
        return self.calls_to("edit_message_text")

    @property
    def answered(self) -> list[dict[str, Any]]:
        return self.calls_to("answer_callback_query")

    async def send_message(self, chat_id: int | str, text: str, **extra: Any) -> dict:
        self._record("send_message", chat_id=chat_id, text=text, **extra)
        return {"message_id": next(self._ids), "chat": {"id": chat_id}, "text": text}

    async def edit_message_text(
        self, chat_id: int | str, message_id: int, text: str, **extra: Any
    ) -> dict | bool:
        self._record(
            "edit_message_text", chat_id=chat_id, message_id=message_id, text=text, **extra
        )
        return True

    async def delete_message(self, chat_id: int | str, message_id: int) -> bool:
        self._record("delete_message", chat_id=chat_id, message_id=message_id)
        return True

    async def answer_callback_query(
        self, callback_query_id: str, text: str | None = None, show_alert: bool = False
    ) -> bool:
        self._record(
            "answer_callback_query",
            callback_query_id=callback_query_id,
            text=text,
            show_alert=show_alert,
        )
        return True


_update_ids = itertools.count(1)


def build_message_update(
    text: str | None = None,
    user_id: int | None = DEFAULT_USER_ID,
    chat_id: int | None = None,
    **message_fields: Any,
) -> Update:
    """Build a message update; ``user_id=None`` builds a channel post."""
    message: dict[str, Any] = {
        "message_id": next(_update_ids),
        "chat": {"id": chat_id or user_id or -100, "type": "private"},
        **message_fields,
    }
    if text is not None:
        message["text"] = text
    if user_id is None:
        return Update.model_validate({"update_id": next(_update_ids), "channel_post": message})
    message["from"] = {"id": user_id, "is_bot": False, "first_name": f"User{user_id}"}
    return Update.model_validate({"update_id": next(_update_ids), "message": message})


def build_callback_update(
    data: str,
    user_id: int = DEFAULT_USER_ID,
    message_id: int = 10,
) -> Update:
    """Build a callback query update for a button on ``message_id``."""
    user = {"id": user_id, "is_bot": False, "first_name": f"User{user_id}"}
    update_id = next(_update_ids)
    return Update.model_validate(
        {
            "update_id": update_id,
            "callback_query": {
                "id": f"cb-{update_id}",
                "from": user,
                "message": {
                    "message_id": message_id,
                    "chat": {"id": user_id, "type": "private"},
                    "text": "keyboard",
                },
                "data": data,
            },
        }
    )


@pytest.fixture
def fake_client() -> FakeChatClient:
    """Create a recording chat client."""
    return FakeChatClient()


@pytest.fixture
def store() -> InMemorySessionStore:
    """Create a fresh in-memory session store."""
    return InMemorySessionStore()


@pytest.fixture
def message_update():
    """Factory for message updates."""
    return build_message_update


@pytest.fixture
def callback_update():
    """Factory for callback query updates."""
    return build_callback_update
