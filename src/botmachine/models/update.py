"""Inbound update and outbound payload models.

Only the subset of the Telegram Bot API schema the engine reads is modelled;
unknown fields are ignored so newer API versions parse cleanly.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TelegramModel(BaseModel):
    """Base for Bot API objects."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class User(TelegramModel):
    """Sender of a message or callback query."""

    id: int
    is_bot: bool = False
    first_name: str = ""
    last_name: str | None = None
    username: str | None = None
    language_code: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name or ''}".strip()


class Chat(TelegramModel):
    """Conversation a message belongs to."""

    id: int
    type: str = "private"
    title: str | None = None
    username: str | None = None


class Contact(TelegramModel):
    """Shared phone contact."""

    phone_number: str
    first_name: str = ""
    last_name: str | None = None
    user_id: int | None = None


class PhotoSize(TelegramModel):
    """One size variant of a photo attachment."""

    file_id: str
    file_unique_id: str = ""
    width: int = 0
    height: int = 0
    file_size: int | None = None


class Message(TelegramModel):
    """A chat message."""

    message_id: int
    chat: Chat
    from_user: User | None = Field(default=None, alias="from")
    date: int = 0
    text: str | None = None
    caption: str | None = None
    contact: Contact | None = None
    photo: list[PhotoSize] | None = None


class CallbackQuery(TelegramModel):
    """Inline keyboard button press."""

    id: str
    from_user: User = Field(alias="from")
    message: Message | None = None
    chat_instance: str = ""
    data: str | None = None


class Update(TelegramModel):
    """One inbound event from the chat provider."""

    update_id: int
    message: Message | None = None
    edited_message: Message | None = None
    channel_post: Message | None = None
    callback_query: CallbackQuery | None = None

    @property
    def kind(self) -> str:
        """Short label for the update type, used for logs and metrics."""
        if self.callback_query is not None:
            return "callback_query"
        if self.message is not None:
            return "message"
        if self.channel_post is not None:
            return "channel_post"
        if self.edited_message is not None:
            return "edited_message"
        return "other"

    @property
    def text(self) -> str | None:
        message = self.message or self.channel_post
        return message.text if message else None

    @property
    def callback_data(self) -> str | None:
        return self.callback_query.data if self.callback_query else None


class MessagePayload(BaseModel):
    """Presentation payload produced by a component."""

    text: str
    parse_mode: str | None = None
    reply_markup: dict[str, Any] | None = None

    def to_extra(self) -> dict[str, Any]:
        """Optional send/edit arguments, with unset fields omitted."""
        extra: dict[str, Any] = {}
        if self.parse_mode:
            extra["parse_mode"] = self.parse_mode
        if self.reply_markup is not None:
            extra["reply_markup"] = self.reply_markup
        return extra
