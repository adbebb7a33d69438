"""Data models for the bot runtime."""

from .config import Settings, get_settings
from .update import (
    CallbackQuery,
    Chat,
    Contact,
    Message,
    MessagePayload,
    PhotoSize,
    Update,
    User,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Updates
    "Update",
    "Message",
    "CallbackQuery",
    "User",
    "Chat",
    "Contact",
    "PhotoSize",
    "MessagePayload",
]
