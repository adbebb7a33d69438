"""Session middleware: loads the sender's session before routing, saves it after."""

from ..core.context import BotContext
from ..core.router import NextFunction
from ..infrastructure.logging_config import get_logger
from ..infrastructure.session_store import InMemorySessionStore, SessionStore

logger = get_logger(__name__)


class SessionMiddleware:
    """Connects the router to a session store.

    The session key is the sender's user id. Updates without a sender (channel
    posts) get a throwaway empty session that is never persisted. The session
    is saved only after the whole update, including any flow rendering, has
    been handled; an empty session deletes the stored entry. When a handler
    raises, nothing is saved.
    """

    def __init__(self, store: SessionStore | None = None):
        """Initialize the middleware.

        Args:
            store: Session store; defaults to a fresh InMemorySessionStore
        """
        self.store = store if store is not None else InMemorySessionStore()

    @staticmethod
    def session_key(ctx: BotContext) -> str | None:
        user = ctx.from_user
        return str(user.id) if user is not None else None

    async def __call__(self, ctx: BotContext, call_next: NextFunction) -> None:
        key = self.session_key(ctx)
        if key is None:
            ctx.session = {}
            await call_next()
            return

        ctx.session = await self.store.get(key) or {}

        await call_next()

        if not ctx.session:
            await self.store.delete(key)
            logger.debug("session_deleted", key=key)
        else:
            await self.store.set(key, ctx.session)


def session(store: SessionStore | None = None) -> SessionMiddleware:
    """Create a session middleware for ``Router.use``."""
    return SessionMiddleware(store)
