"""Base chat client - abstract interface for outbound transports."""

from abc import ABC, abstractmethod
from typing import Any


class TelegramAPIError(Exception):
    """The chat provider rejected a request."""

    def __init__(self, method: str, description: str, error_code: int | None = None):
        self.method = method
        self.description = description
        self.error_code = error_code
        super().__init__(f"{method} failed ({error_code}): {description}")


class MessageNotModifiedError(TelegramAPIError):
    """An edit would leave the message unchanged."""


class BaseChatClient(ABC):
    """Abstract base class for outbound chat transports.

    The dialogue engine only talks to the provider through this interface, so
    the HTTP client, the local console client and test doubles are
    interchangeable.
    """

    @abstractmethod
    async def send_message(self, chat_id: int | str, text: str, **extra: Any) -> dict:
        """Send a new message.

        Args:
            chat_id: Target chat
            text: Message text
            **extra: Provider options such as parse_mode and reply_markup

        Returns:
            The sent message object
        """
        pass

    @abstractmethod
    async def edit_message_text(
        self, chat_id: int | str, message_id: int, text: str, **extra: Any
    ) -> dict | bool:
        """Replace the text (and markup) of an existing message."""
        pass

    @abstractmethod
    async def delete_message(self, chat_id: int | str, message_id: int) -> bool:
        """Delete a message."""
        pass

    @abstractmethod
    async def answer_callback_query(
        self, callback_query_id: str, text: str | None = None, show_alert: bool = False
    ) -> bool:
        """Acknowledge a button press, optionally showing a toast or alert."""
        pass

    def convert_buttons_to_text(self, reply_markup: dict | None) -> str:
        """Render keyboard buttons as numbered text options.

        Used by transports that cannot display buttons.

        Args:
            reply_markup: Inline or reply keyboard markup

        Returns:
            Formatted text with numbered options
        """
        buttons = flatten_buttons(reply_markup)
        if not buttons:
            return ""

        lines = ["\nOptions:"]
        for i, btn in enumerate(buttons, 1):
            lines.append(f"{i}. {btn.get('text', f'Option {i}')}")
        lines.append("\nReply with the number of your choice.")

        return "\n".join(lines)


def flatten_buttons(reply_markup: dict | None) -> list[dict]:
    """List the buttons of a keyboard markup row by row."""
    if not reply_markup:
        return []
    rows = reply_markup.get("inline_keyboard") or reply_markup.get("keyboard") or []
    return [button for row in rows for button in row]
