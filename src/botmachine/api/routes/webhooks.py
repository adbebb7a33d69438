"""Telegram webhook endpoint: the push alternative to long polling."""

import hmac

from fastapi import APIRouter, Depends, Header, HTTPException, Request

from ...infrastructure.logging_config import get_logger
from ...models.update import Update
from ..schemas import WebhookResponse

router = APIRouter(tags=["Webhooks"])

logger = get_logger(__name__)

SECRET_TOKEN_HEADER = "X-Telegram-Bot-Api-Secret-Token"


async def verify_secret_token(
    request: Request,
    secret_token: str | None = Header(None, alias=SECRET_TOKEN_HEADER),
) -> None:
    """Reject requests whose secret token header does not match the configured secret.

    No check is made when no secret is configured.
    """
    expected = request.app.state.settings.webhook_secret
    if not expected:
        return
    if secret_token is None or not hmac.compare_digest(secret_token, expected):
        client_host = request.client.host if request.client else None
        logger.warning("webhook_secret_mismatch", client=client_host)
        raise HTTPException(status_code=401, detail="Invalid secret token")


@router.post(
    "/webhook",
    response_model=WebhookResponse,
    dependencies=[Depends(verify_secret_token)],
)
async def telegram_webhook(update: Update, request: Request) -> WebhookResponse:
    """Handle one update pushed by the Bot API.

    Updates are dispatched one at a time; concurrent deliveries wait on the
    app's dispatch lock. Handler failures are logged by the router and still
    acknowledged so the Bot API does not redeliver them.
    """
    state = request.app.state
    if state.bot_router is None or state.client is None:
        raise HTTPException(status_code=503, detail="Bot is not configured")

    async with state.dispatch_lock:
        await state.bot_router.handle(update, state.client)

    logger.debug("webhook_update_handled", update_id=update.update_id, kind=update.kind)
    return WebhookResponse()
