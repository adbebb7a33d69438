"""Per-update context handed to middleware, handlers, commands and queries."""

from typing import TYPE_CHECKING, Any

from ..channels.base import BaseChatClient, MessageNotModifiedError
from ..infrastructure.logging_config import get_logger
from ..models.update import Chat, Message, MessagePayload, Update, User
from .flow import FLOW_NAME_KEY, FLOW_STATE_KEY

if TYPE_CHECKING:
    from .router import Router

logger = get_logger(__name__)


class ContextError(RuntimeError):
    """Raised when an operation needs data the current update does not carry."""


class BotContext:
    """Bundles one inbound update with its session and outbound operations.

    Built once per update by the router and discarded after dispatch.
    """

    def __init__(self, client: BaseChatClient, update: Update, router: "Router"):
        self.client = client
        self.update = update
        self.router = router
        self.session: dict[str, Any] = {}
        # Scratch space for middleware, lives for one dispatch
        self.state: dict[str, Any] = {}
        self.params: dict[str, str] = {}
        self.callback_answered = False

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    @property
    def from_user(self) -> User | None:
        """Sender of the update, None for channel posts and edited messages."""
        if self.update.callback_query is not None:
            return self.update.callback_query.from_user
        if self.update.message is not None:
            return self.update.message.from_user
        return None

    @property
    def message(self) -> Message | None:
        """The message this update is about (the keyboard's message for callbacks)."""
        if self.update.callback_query is not None:
            return self.update.callback_query.message
        return self.update.message or self.update.channel_post

    @property
    def chat(self) -> Chat | None:
        return self.message.chat if self.message is not None else None

    @property
    def text(self) -> str | None:
        return self.update.text

    @property
    def callback_data(self) -> str | None:
        return self.update.callback_data

    # -------------------------------------------------------------------------
    # Outbound operations
    # -------------------------------------------------------------------------

    async def reply(self, text: str, **extra: Any) -> dict:
        """Send a new message to the current chat."""
        if self.chat is None:
            raise ContextError("Cannot reply when chat is not defined")
        return await self.client.send_message(self.chat.id, text, **extra)

    async def edit_message_text(self, text: str, **extra: Any) -> dict | bool:
        """Edit the message this update is about.

        Editing a message to identical content is not an error.
        """
        message = self.message
        if self.chat is None or message is None:
            raise ContextError("Cannot edit message when chat or message is not defined")
        try:
            return await self.client.edit_message_text(
                self.chat.id, message.message_id, text, **extra
            )
        except MessageNotModifiedError:
            logger.debug("message_not_modified", message_id=message.message_id)
            return False

    async def delete_message(self) -> bool:
        """Delete the message this update is about."""
        message = self.message
        if self.chat is None or message is None:
            raise ContextError("Cannot delete message when chat or message is not defined")
        return await self.client.delete_message(self.chat.id, message.message_id)

    async def answer_callback_query(
        self, text: str | None = None, show_alert: bool = False
    ) -> bool:
        """Acknowledge the button press, optionally with a toast or alert."""
        if self.update.callback_query is None:
            raise ContextError("Cannot answer callback query when callback_query is not defined")
        result = await self.client.answer_callback_query(
            self.update.callback_query.id, text=text, show_alert=show_alert
        )
        self.callback_answered = True
        return result

    async def send(self, payload: MessagePayload) -> dict:
        """Send a rendered component as a new message."""
        return await self.reply(payload.text, **payload.to_extra())

    async def edit(self, payload: MessagePayload) -> dict | bool:
        """Replace the current message with a rendered component."""
        return await self.edit_message_text(payload.text, **payload.to_extra())

    # -------------------------------------------------------------------------
    # Flow control
    # -------------------------------------------------------------------------

    @property
    def flow_name(self) -> str | None:
        return self.session.get(FLOW_NAME_KEY)

    @property
    def flow_state(self) -> str | None:
        return self.session.get(FLOW_STATE_KEY)

    async def enter_flow(self, flow_name: str, initial_state: str | None = None) -> None:
        """Start a flow and render its first state within this dispatch.

        Args:
            flow_name: Name of a flow registered on the router
            initial_state: State to start in; the flow's initial state when None
        """
        if initial_state is None and flow_name in self.router.flows:
            initial_state = self.router.flows[flow_name].initial_state

        self.session[FLOW_NAME_KEY] = flow_name
        if initial_state is None:
            self.session.pop(FLOW_STATE_KEY, None)
        else:
            self.session[FLOW_STATE_KEY] = initial_state
        await self.router.route(self)

    def exit_flow(self) -> None:
        """Leave the active flow, keeping the rest of the session."""
        self.session.pop(FLOW_NAME_KEY, None)
        self.session.pop(FLOW_STATE_KEY, None)

    def __repr__(self) -> str:
        return f"BotContext(update_id={self.update.update_id}, kind={self.update.kind})"
