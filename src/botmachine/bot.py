"""Demo bot wiring: session middleware, stateless commands and the counter flow."""

from .channels.base import BaseChatClient
from .core import BotContext, FlowController, Router
from .domains.counter import COUNTER_FLOW, counter_flow
from .infrastructure.session_store import SessionStore
from .middleware import session

HELP_TEXT = (
    "/start - open the counter\n"
    "/cancel - close the counter\n"
    "/help - show this message"
)


async def start(ctx: BotContext) -> None:
    await ctx.enter_flow(COUNTER_FLOW)


async def help_command(ctx: BotContext) -> None:
    await ctx.reply(HELP_TEXT)


async def cancel(ctx: BotContext) -> None:
    ctx.exit_flow()
    await ctx.reply("Nothing is open. Send /start to begin.")


def build_router(store: SessionStore | None = None, client: BaseChatClient | None = None) -> Router:
    """Build the demo router.

    Args:
        store: Session store; in-memory when None
        client: Default chat client for ``Router.handle``

    Returns:
        Router with session middleware, ``/start``, ``/help``, ``/cancel`` and
        the counter flow registered
    """
    router = Router(client)
    router.use(session(store))
    router.add_flow(FlowController(counter_flow))
    router.on_command("start", start)
    router.on_command("help", help_command)
    router.on_command("cancel", cancel)
    return router
