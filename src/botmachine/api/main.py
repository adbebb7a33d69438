"""FastAPI application receiving Telegram updates by webhook."""

import asyncio
import time
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .. import __version__
from ..bot import build_router
from ..channels.base import BaseChatClient
from ..channels.telegram import TelegramClient
from ..core.router import Router
from ..infrastructure import get_logger, get_session_store
from ..models import Settings, get_settings
from .routes import health_router, webhooks_router
from .schemas import ErrorResponse

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Builds the Telegram client and the demo router (with its session store)
    when they were not injected, and closes what it created on shutdown.
    """
    state = app.state
    created_client = None
    if state.client is None:
        created_client = TelegramClient.from_settings(state.settings)
        state.client = created_client
    if state.bot_router is None:
        state.session_store = get_session_store(state.settings)
        state.bot_router = build_router(state.session_store)

    logger.info(
        "api_startup",
        client=type(state.client).__name__,
        flows=list(state.bot_router.flows),
    )

    yield

    if created_client is not None:
        await created_client.close()
    if state.session_store is not None:
        await state.session_store.close()
    logger.info("api_shutdown")


def create_app(
    router: Router | None = None,
    client: BaseChatClient | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        router: Bot router; the demo router is built at startup when None
        client: Chat client for replies; a TelegramClient is built at startup when None
        settings: Runtime settings; loaded from the environment when None
    """
    app = FastAPI(
        title="botmachine",
        description="Telegram webhook receiver for a botmachine router.",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings or get_settings()
    app.state.bot_router = router
    app.state.client = client
    app.state.session_store = None
    app.state.dispatch_lock = asyncio.Lock()

    @app.middleware("http")
    async def timing_middleware(request: Request, call_next):
        """Log every request except health and metrics probes."""
        start_time = time.time()
        response = await call_next(request)
        duration = time.time() - start_time

        if not request.url.path.startswith(("/metrics", "/health", "/live")):
            logger.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=round(duration * 1000, 2),
            )
        return response

    app.include_router(health_router)
    app.include_router(webhooks_router)

    # Prometheus metrics endpoint
    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        """Prometheus metrics endpoint."""
        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.error(
            "unhandled_exception",
            method=request.method,
            path=request.url.path,
            error=str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="Internal Server Error",
                detail=str(exc),
                timestamp=datetime.now(),
            ).model_dump(mode="json"),
        )

    return app


# Create app instance
app = create_app()
