"""Pydantic response models for the webhook API."""

from datetime import datetime

from pydantic import BaseModel, Field


class WebhookResponse(BaseModel):
    """Acknowledgement returned to the Bot API for every accepted update."""

    ok: bool = True


class ServiceHealth(BaseModel):
    """Health status of an individual dependency."""

    name: str
    status: str  # "healthy", "degraded", "unhealthy"
    message: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy", "degraded"
    version: str
    timestamp: datetime = Field(default_factory=datetime.now)
    services: list[ServiceHealth] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Error response."""

    error: str
    detail: str | None = None
    timestamp: datetime = Field(default_factory=datetime.now)
