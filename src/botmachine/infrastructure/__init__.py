"""Infrastructure: logging, metrics and session persistence."""

from .logging_config import (
    bind_context,
    clear_context,
    configure_structlog,
    get_logger,
)
from .metrics import (
    dispatch_duration_seconds,
    flow_transitions_total,
    record_flow_transition,
    record_update,
    updates_total,
)
from .session_store import (
    InMemorySessionStore,
    RedisSessionStore,
    SessionStore,
    get_session_store,
)

__all__ = [
    # Logging
    "get_logger",
    "bind_context",
    "clear_context",
    "configure_structlog",
    # Metrics
    "updates_total",
    "dispatch_duration_seconds",
    "flow_transitions_total",
    "record_update",
    "record_flow_transition",
    # Session
    "SessionStore",
    "InMemorySessionStore",
    "RedisSessionStore",
    "get_session_store",
]
