"""Telegram Bot API client.

A thin asynchronous wrapper over the HTTP Bot API. Every method maps to one
API call; a response with ``ok: false`` raises :class:`TelegramAPIError` and
network failures surface as ``httpx.HTTPError``.

Configuration:
    BOTMACHINE_BOT_TOKEN: bot token issued by @BotFather
    BOTMACHINE_API_BASE_URL: https://api.telegram.org (default)
"""

import logging
from typing import Any

import httpx

from ..models.config import Settings
from ..models.update import Update
from .base import BaseChatClient, MessageNotModifiedError, TelegramAPIError

logger = logging.getLogger(__name__)

NOT_MODIFIED_MARKER = "message is not modified"


class TelegramClient(BaseChatClient):
    """Telegram Bot API client over httpx."""

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.telegram.org",
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            token: Bot token
            base_url: Bot API server URL
            timeout: Request timeout in seconds; long polls add their own timeout on top
            transport: Optional httpx transport (used by tests)
        """
        if not token:
            raise ValueError("Bot token must be provided")
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "TelegramClient":
        return cls(
            token=settings.bot_token,
            base_url=settings.api_base_url,
            timeout=settings.request_timeout_seconds,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=f"{self.base_url}/bot{self.token}",
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def call(
        self, method: str, request_timeout: float | None = None, **params: Any
    ) -> Any:
        """Call a Bot API method.

        Args:
            method: API method name, e.g. ``sendMessage``
            request_timeout: Optional per-request HTTP timeout override
            **params: Method parameters; None values are dropped

        Returns:
            The ``result`` field of the API response

        Raises:
            TelegramAPIError: If the API answered with ``ok: false``
            httpx.HTTPError: On network or protocol failures
        """
        client = await self._get_client()
        body = {key: value for key, value in params.items() if value is not None}
        if request_timeout is None:
            request_timeout = self.timeout

        response = await client.post(f"/{method}", json=body, timeout=request_timeout)
        try:
            data = response.json()
        except ValueError:
            response.raise_for_status()
            raise TelegramAPIError(method, "Invalid JSON response", response.status_code)

        if not data.get("ok"):
            description = data.get("description", "Unknown error")
            error_code = data.get("error_code", response.status_code)
            if NOT_MODIFIED_MARKER in description.lower():
                raise MessageNotModifiedError(method, description, error_code)
            logger.warning(f"Telegram API error in {method}: {error_code} {description}")
            raise TelegramAPIError(method, description, error_code)

        return data.get("result")

    async def get_me(self) -> dict:
        return await self.call("getMe")

    async def get_updates(
        self,
        offset: int | None = None,
        timeout: int = 30,
        limit: int | None = None,
        allowed_updates: list[str] | None = None,
    ) -> list[Update]:
        """Long-poll for new updates.

        Args:
            offset: Identifier of the first update to return
            timeout: Long-poll timeout in seconds
            limit: Maximum number of updates
            allowed_updates: Update types to receive

        Returns:
            Parsed updates, oldest first
        """
        result = await self.call(
            "getUpdates",
            request_timeout=self.timeout + timeout,
            offset=offset,
            limit=limit,
            allowed_updates=allowed_updates,
            timeout=timeout,
        )
        return [Update.model_validate(item) for item in result or []]

    async def send_message(self, chat_id: int | str, text: str, **extra: Any) -> dict:
        return await self.call("sendMessage", chat_id=chat_id, text=text, **extra)

    async def edit_message_text(
        self, chat_id: int | str, message_id: int, text: str, **extra: Any
    ) -> dict | bool:
        return await self.call(
            "editMessageText", chat_id=chat_id, message_id=message_id, text=text, **extra
        )

    async def delete_message(self, chat_id: int | str, message_id: int) -> bool:
        return await self.call("deleteMessage", chat_id=chat_id, message_id=message_id)

    async def answer_callback_query(
        self, callback_query_id: str, text: str | None = None, show_alert: bool = False
    ) -> bool:
        return await self.call(
            "answerCallbackQuery",
            callback_query_id=callback_query_id,
            text=text,
            show_alert=show_alert or None,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
