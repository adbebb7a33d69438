"""botmachine - a stateful dialogue engine for Telegram bots.

Routes inbound updates through middleware to slash-command, free-text and
callback routes, or to the flow (finite-state machine) named by the user's
session.
"""

__version__ = "0.3.0"

from .core import (
    ActionPayload,
    BotContext,
    Command,
    FlowController,
    Keyboard,
    Query,
    Refresh,
    Router,
    Transition,
    create_flow,
    state,
)
from .middleware import session

__all__ = [
    "__version__",
    "ActionPayload",
    "BotContext",
    "Command",
    "FlowController",
    "Keyboard",
    "Query",
    "Refresh",
    "Router",
    "Transition",
    "create_flow",
    "session",
    "state",
]
