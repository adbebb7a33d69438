"""Health check endpoints."""

from fastapi import APIRouter, Request

from ... import __version__
from ...infrastructure.session_store import InMemorySessionStore, SessionStore
from ..schemas import HealthResponse, ServiceHealth

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """
    Health check endpoint.

    Reports whether a chat client and a bot router are wired into the app.
    """
    services = []
    overall_status = "healthy"

    client = getattr(request.app.state, "client", None)
    if client is not None:
        services.append(
            ServiceHealth(name="chat_client", status="healthy", message=type(client).__name__)
        )
    else:
        services.append(
            ServiceHealth(name="chat_client", status="unhealthy", message="No client configured")
        )
        overall_status = "degraded"

    store: SessionStore | None = getattr(request.app.state, "session_store", None)
    if store is not None:
        message = type(store).__name__
        if isinstance(store, InMemorySessionStore):
            message += f" ({len(store)} sessions)"
        services.append(ServiceHealth(name="session_store", status="healthy", message=message))

    return HealthResponse(status=overall_status, version=__version__, services=services)


@router.get("/live")
async def liveness_check() -> dict:
    """Simple check to verify the service is running."""
    return {"status": "alive"}
