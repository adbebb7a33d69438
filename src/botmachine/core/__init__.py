"""Dialogue engine core: patterns, context, router and flows."""

from .context import BotContext, ContextError
from .flow import (
    DEFAULT_INITIAL_STATE,
    FLOW_NAME_KEY,
    FLOW_STATE_KEY,
    Action,
    ActionHandler,
    Flow,
    FlowController,
    Refresh,
    StateDefinition,
    Transition,
    create_flow,
    state,
)
from .keyboard import Keyboard
from .patterns import Pattern, command_pattern, compile_pattern
from .ports import (
    ActionPayload,
    Command,
    CommandInputError,
    Query,
    command,
    noop_command,
    query,
    render_component,
)
from .router import Handler, Middleware, Route, Router

__all__ = [
    # Patterns
    "Pattern",
    "compile_pattern",
    "command_pattern",
    # Context
    "BotContext",
    "ContextError",
    # Router
    "Router",
    "Route",
    "Handler",
    "Middleware",
    # Flows
    "Flow",
    "FlowController",
    "StateDefinition",
    "Action",
    "ActionHandler",
    "Refresh",
    "Transition",
    "create_flow",
    "state",
    "FLOW_NAME_KEY",
    "FLOW_STATE_KEY",
    "DEFAULT_INITIAL_STATE",
    # Ports
    "ActionPayload",
    "Command",
    "Query",
    "CommandInputError",
    "command",
    "query",
    "noop_command",
    "render_component",
    # UI
    "Keyboard",
]
