"""Router - dispatches inbound updates to flows and stateless routes.

Dispatch order for one update:

1. Middleware, outermost first (session loading lives here).
2. The active flow named by the session, if any. A claimed update stops here.
3. Text: command routes, then free-text routes. Callback data: callback routes.
   The first matching route in declaration order runs; nothing else does.

Unmatched updates are dropped silently: stray photos or idle chatter are
expected input, not errors.
"""

import re
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from ..channels.base import BaseChatClient
from ..infrastructure.logging_config import bind_context, clear_context, get_logger
from ..infrastructure.metrics import record_update
from ..models.update import Update
from .context import BotContext
from .flow import FLOW_NAME_KEY, FlowController
from .patterns import Pattern, command_pattern, compile_pattern

logger = get_logger(__name__)

Handler = Callable[[BotContext], Awaitable[Any]]
NextFunction = Callable[[], Awaitable[None]]
Middleware = Callable[[BotContext, NextFunction], Awaitable[None]]
PatternLike = str | re.Pattern[str] | Pattern


@dataclass(frozen=True)
class Route:
    """A compiled (pattern, handler) pair."""

    pattern: Pattern
    handler: Handler


class Router:
    """Owns routes, middleware and flows, and dispatches updates end to end."""

    def __init__(self, client: BaseChatClient | None = None) -> None:
        self.client = client
        self.command_routes: list[Route] = []
        self.text_routes: list[Route] = []
        self.callback_query_routes: list[Route] = []
        self.middlewares: list[Middleware] = []
        self.flows: dict[str, FlowController] = {}

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def on_command(self, command: PatternLike, handler: Handler | None = None) -> Any:
        """Register a slash command route.

        A plain name such as ``"start"`` or ``"/start"`` matches ``/start``,
        ``/start@bot`` and ``/start args`` (trailing text in ``params["args"]``).
        A compiled regex or Pattern is used as-is. Without a handler, returns a
        decorator.
        """
        if isinstance(command, str):
            pattern = command_pattern(command)
        else:
            pattern = compile_pattern(command)
        return self._register(self.command_routes, pattern, handler)

    def on_text(self, pattern: PatternLike, handler: Handler | None = None) -> Any:
        """Register a free-text route."""
        return self._register(self.text_routes, compile_pattern(pattern), handler)

    def on_callback_query(self, pattern: PatternLike, handler: Handler | None = None) -> Any:
        """Register a callback data route."""
        return self._register(self.callback_query_routes, compile_pattern(pattern), handler)

    def _register(self, routes: list[Route], pattern: Pattern, handler: Handler | None) -> Any:
        if handler is not None:
            routes.append(Route(pattern, handler))
            return handler

        def decorator(fn: Handler) -> Handler:
            routes.append(Route(pattern, fn))
            return fn

        return decorator

    def use(self, middleware: Middleware) -> None:
        """Append a middleware; earlier middleware wraps later middleware."""
        self.middlewares.append(middleware)

    def add_flow(self, flow: FlowController) -> None:
        """Register a flow controller under its name."""
        if flow.name in self.flows:
            raise ValueError(f"Flow {flow.name!r} is already registered")
        self.flows[flow.name] = flow

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    async def handle(self, update: Update, client: BaseChatClient | None = None) -> None:
        """Dispatch one update through middleware and routing.

        Exceptions raised during dispatch are logged and swallowed so a single
        failing update cannot stop the delivery loop. The user gets no
        automatic error reply.

        Args:
            update: Inbound update
            client: Transport used for replies; defaults to the router's client

        Raises:
            ValueError: Neither the router nor the call provides a client. This is
                a wiring error and is raised before dispatch starts.
        """
        client = client or self.client
        if client is None:
            raise ValueError("Router.handle needs a chat client")
        ctx = BotContext(client, update, self)

        async def endpoint() -> None:
            await self.route(ctx)

        chain: NextFunction = endpoint
        for middleware in reversed(self.middlewares):
            chain = self._wrap(middleware, ctx, chain)

        user = ctx.from_user
        bind_context(update_id=update.update_id, user_id=user.id if user else None)
        start = time.perf_counter()
        status = "ok"
        try:
            await chain()
        except Exception:
            status = "error"
            logger.exception("update_failed", kind=update.kind)
        finally:
            record_update(update.kind, status, time.perf_counter() - start)
            clear_context()

    @staticmethod
    def _wrap(middleware: Middleware, ctx: BotContext, call_next: NextFunction) -> NextFunction:
        async def step() -> None:
            await middleware(ctx, call_next)

        return step

    async def route(self, ctx: BotContext) -> None:
        """Route a context to the active flow or the first matching route."""
        flow_name = ctx.session.get(FLOW_NAME_KEY)
        if flow_name:
            flow = self.flows.get(flow_name)
            if flow is None:
                logger.warning("flow_not_registered", flow=flow_name)
            elif await flow.handle(ctx):
                return

        text = ctx.text
        if text is not None:
            if await self._process_routes(self.command_routes, text, ctx):
                return
            if await self._process_routes(self.text_routes, text, ctx):
                return

        data = ctx.callback_data
        if data is not None:
            if await self._process_routes(self.callback_query_routes, data, ctx):
                return

        logger.debug("update_unhandled", kind=ctx.update.kind)

    async def _process_routes(self, routes: list[Route], value: str, ctx: BotContext) -> bool:
        for route in routes:
            params = route.pattern.match(value)
            if params is not None:
                ctx.params = params
                await route.handler(ctx)
                return True
        return False
