"""Structlog configuration for structured logging.

The renderer and level follow ``Settings.environment`` (``BOTMACHINE_ENVIRONMENT``):
JSON lines at INFO in production, coloured console output at DEBUG otherwise.
Every event carries the environment and service name, plus the update and
user ids the router binds for the duration of one dispatch.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from .. import __version__
from ..models.config import Settings, get_settings

SERVICE_NAME = "botmachine"


def service_info_processor(environment: str) -> Processor:
    """Build a processor stamping service, version and environment on events."""

    def add_service_info(
        logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict["service"] = SERVICE_NAME
        event_dict["version"] = __version__
        event_dict["environment"] = environment
        return event_dict

    return add_service_info


def build_processors(settings: Settings) -> list[Processor]:
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        service_info_processor(settings.environment),
    ]
    if settings.is_production:
        return [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [
        *shared_processors,
        structlog.dev.ConsoleRenderer(
            colors=sys.stdout.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        ),
    ]


def configure_structlog(settings: Settings | None = None) -> None:
    """Configure structlog and the stdlib root logger for the given settings.

    Args:
        settings: Runtime settings; loaded from the environment when None
    """
    settings = settings or get_settings()
    level = logging.INFO if settings.is_production else logging.DEBUG

    structlog.configure(
        processors=build_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Loggers are re-resolved after reconfiguration (CLI startup, tests)
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout)
    logging.getLogger().setLevel(level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance.

    Args:
        name: Logger name (usually __name__ from the calling module)
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind key-value pairs to every event logged in the current task."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


configure_structlog()
