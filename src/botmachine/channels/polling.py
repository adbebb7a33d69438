"""Sequential long-poll loop feeding updates to the router.

Delivery is at-most-once: the offset cursor advances before an update is
handled, so a crash while handling skips that update instead of replaying it.
Errors escaping an iteration (typically transport failures) are logged and
the loop sleeps a fixed delay before polling again; the failed call is not
retried.
"""

import asyncio
from typing import TYPE_CHECKING

from ..infrastructure.logging_config import get_logger
from .telegram import TelegramClient

if TYPE_CHECKING:
    from ..core.router import Router

logger = get_logger(__name__)


class LongPoller:
    """Pulls updates with ``getUpdates`` and dispatches them one at a time."""

    def __init__(
        self,
        client: TelegramClient,
        router: "Router",
        timeout: int = 30,
        retry_delay: float = 5.0,
        allowed_updates: list[str] | None = None,
    ):
        """Initialize the poller.

        Args:
            client: Telegram client used for polling and replies
            router: Router dispatching each update
            timeout: Long-poll timeout in seconds
            retry_delay: Pause after a failed iteration, in seconds
            allowed_updates: Update types to request
        """
        self.client = client
        self.router = router
        self.timeout = timeout
        self.retry_delay = retry_delay
        self.allowed_updates = allowed_updates
        self.offset: int | None = None
        self._stopped = asyncio.Event()

    @property
    def running(self) -> bool:
        return not self._stopped.is_set()

    def stop(self) -> None:
        """Ask the loop to exit after the current iteration."""
        self._stopped.set()

    async def poll_once(self) -> int:
        """Fetch one batch and dispatch it.

        Returns:
            Number of updates dispatched
        """
        updates = await self.client.get_updates(
            offset=self.offset,
            timeout=self.timeout,
            allowed_updates=self.allowed_updates,
        )
        for update in updates:
            # Commit before handling: at-most-once delivery
            self.offset = update.update_id + 1
            await self.router.handle(update, self.client)
            if not self.running:
                break
        return len(updates)

    async def run(self) -> None:
        """Poll until :meth:`stop` is called."""
        self._stopped.clear()
        logger.info("polling_started", timeout=self.timeout)
        while self.running:
            try:
                await self.poll_once()
            except Exception:
                logger.exception("polling_error", retry_delay=self.retry_delay)
                if self.running:
                    await asyncio.sleep(self.retry_delay)
        logger.info("polling_stopped", offset=self.offset)


async def run_polling(
    client: TelegramClient,
    router: "Router",
    timeout: int = 30,
    retry_delay: float = 5.0,
) -> None:
    """Run a LongPoller until cancelled."""
    poller = LongPoller(client, router, timeout=timeout, retry_delay=retry_delay)
    await poller.run()
