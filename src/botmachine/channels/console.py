"""Console chat client - runs a router locally without the Bot API.

Outbound messages are printed with rich; buttons are shown as numbered
options. ``ConsoleSession`` turns typed input into synthetic updates: a
number picks a button of the last keyboard, anything else is sent as text.
A leading backslash sends the rest verbatim, so "\\1" is the text "1".
"""

import itertools
from typing import Any

from rich.console import Console
from rich.panel import Panel

from ..models.update import Update
from .base import BaseChatClient, flatten_buttons

CONSOLE_CHAT_ID = 1
CONSOLE_USER = {"id": 1, "is_bot": False, "first_name": "Console", "username": "console"}
ESCAPE_PREFIX = "\\"


class ConsoleClient(BaseChatClient):
    """Chat client printing to a rich console."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()
        self.messages: dict[int, dict[str, Any]] = {}
        self.last_message_id: int | None = None
        self._ids = itertools.count(1)

    def next_message_id(self) -> int:
        return next(self._ids)

    def _print(self, text: str, reply_markup: dict | None, title: str) -> None:
        body = text + self.convert_buttons_to_text(reply_markup)
        self.console.print(
            Panel(body, title=f"[bold green]{title}[/bold green]", border_style="green")
        )

    async def send_message(self, chat_id: int | str, text: str, **extra: Any) -> dict:
        message_id = self.next_message_id()
        message = {
            "message_id": message_id,
            "chat": {"id": chat_id, "type": "private"},
            "text": text,
            "reply_markup": extra.get("reply_markup"),
        }
        self.messages[message_id] = message
        self.last_message_id = message_id
        self._print(text, extra.get("reply_markup"), "Bot")
        return message

    async def edit_message_text(
        self, chat_id: int | str, message_id: int, text: str, **extra: Any
    ) -> dict | bool:
        message = self.messages.setdefault(
            message_id, {"message_id": message_id, "chat": {"id": chat_id, "type": "private"}}
        )
        message["text"] = text
        message["reply_markup"] = extra.get("reply_markup")
        self.last_message_id = message_id
        self._print(text, extra.get("reply_markup"), "Bot (edited)")
        return message

    async def delete_message(self, chat_id: int | str, message_id: int) -> bool:
        self.messages.pop(message_id, None)
        if self.last_message_id == message_id:
            self.last_message_id = None
        return True

    async def answer_callback_query(
        self, callback_query_id: str, text: str | None = None, show_alert: bool = False
    ) -> bool:
        if text:
            style = "bold red" if show_alert else "yellow"
            self.console.print(f"[{style}]{text}[/{style}]")
        return True


class ConsoleSession:
    """Builds updates from console input for a single local user."""

    def __init__(self, client: ConsoleClient):
        self.client = client
        self._update_ids = itertools.count(1)

    def _message(self, message_id: int, text: str | None = None) -> dict[str, Any]:
        message: dict[str, Any] = {
            "message_id": message_id,
            "chat": {"id": CONSOLE_CHAT_ID, "type": "private"},
            "from": CONSOLE_USER,
        }
        if text is not None:
            message["text"] = text
        return message

    def build_update(self, user_input: str) -> Update:
        """Turn one line of input into an update.

        A number selects the matching callback button of the last shown
        message; any other input becomes a text message. A leading
        backslash is stripped and the rest is always sent as text.
        """
        update_id = next(self._update_ids)
        if user_input.startswith(ESCAPE_PREFIX):
            button = None
            user_input = user_input[len(ESCAPE_PREFIX) :]
        else:
            button = self._pick_button(user_input)
        if button is not None:
            message_id = self.client.last_message_id or 0
            return Update.model_validate(
                {
                    "update_id": update_id,
                    "callback_query": {
                        "id": f"console-{update_id}",
                        "from": CONSOLE_USER,
                        "message": self._message(message_id),
                        "data": button["callback_data"],
                    },
                }
            )
        message = self._message(self.client.next_message_id(), user_input)
        return Update.model_validate({"update_id": update_id, "message": message})

    def _pick_button(self, user_input: str) -> dict | None:
        if not user_input.strip().isdigit() or self.client.last_message_id is None:
            return None
        message = self.client.messages.get(self.client.last_message_id, {})
        buttons = flatten_buttons(message.get("reply_markup"))
        index = int(user_input.strip()) - 1
        if 0 <= index < len(buttons) and "callback_data" in buttons[index]:
            return buttons[index]
        return None
