"""Chat transports: the client interface, Telegram, console and long polling."""

from .base import BaseChatClient, MessageNotModifiedError, TelegramAPIError
from .console import ConsoleClient, ConsoleSession
from .telegram import TelegramClient

__all__ = [
    "BaseChatClient",
    "TelegramAPIError",
    "MessageNotModifiedError",
    "TelegramClient",
    "ConsoleClient",
    "ConsoleSession",
]
