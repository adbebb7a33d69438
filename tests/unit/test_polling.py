"""Tests for the long-poll loop."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from botmachine.channels.polling import LongPoller


@pytest.fixture
def client() -> MagicMock:
    client = MagicMock()
    client.get_updates = AsyncMock(return_value=[])
    return client


@pytest.fixture
def router() -> MagicMock:
    router = MagicMock()
    router.handle = AsyncMock()
    return router


class TestLongPoller:
    """Tests for LongPoller."""

    @pytest.mark.asyncio
    async def test_poll_once_dispatches_in_order(self, client, router, message_update):
        updates = [message_update("a"), message_update("b")]
        client.get_updates.return_value = updates
        poller = LongPoller(client, router, timeout=10)

        count = await poller.poll_once()

        assert count == 2
        assert [call.args[0] for call in router.handle.await_args_list] == updates
        assert poller.offset == updates[-1].update_id + 1
        client.get_updates.assert_awaited_once_with(offset=None, timeout=10, allowed_updates=None)

    @pytest.mark.asyncio
    async def test_offset_advances_before_handling(self, client, router, message_update):
        """Test that an update is committed before its handler runs."""
        update = message_update("a")
        client.get_updates.return_value = [update]
        poller = LongPoller(client, router)
        offsets = []

        async def handle(received, transport):
            offsets.append(poller.offset)

        router.handle.side_effect = handle

        await poller.poll_once()

        assert offsets == [update.update_id + 1]

    @pytest.mark.asyncio
    async def test_failed_update_is_skipped(self, client, router, message_update):
        """Test at-most-once delivery: a crash mid-handling does not replay the update."""
        update = message_update("a")
        client.get_updates.return_value = [update]
        router.handle.side_effect = RuntimeError("crash")
        poller = LongPoller(client, router)

        with pytest.raises(RuntimeError):
            await poller.poll_once()

        assert poller.offset == update.update_id + 1

    @pytest.mark.asyncio
    async def test_next_poll_uses_offset(self, client, router, message_update):
        client.get_updates.return_value = [message_update("a")]
        poller = LongPoller(client, router)
        await poller.poll_once()
        offset = poller.offset

        client.get_updates.return_value = []
        await poller.poll_once()

        assert client.get_updates.await_args.kwargs["offset"] == offset

    @pytest.mark.asyncio
    async def test_run_survives_errors_and_stops(self, client, router):
        poller = LongPoller(client, router, retry_delay=0.5)
        calls = 0

        async def get_updates(**kwargs):
            nonlocal calls
            calls += 1
            if calls == 1:
                raise ConnectionError("network down")
            poller.stop()
            return []

        client.get_updates.side_effect = get_updates

        with patch("botmachine.channels.polling.asyncio.sleep", new=AsyncMock()) as sleep:
            await poller.run()

        assert calls == 2
        sleep.assert_awaited_once_with(0.5)
        assert not poller.running

    @pytest.mark.asyncio
    async def test_stop_interrupts_batch(self, client, router, message_update):
        client.get_updates.return_value = [message_update("a"), message_update("b")]
        poller = LongPoller(client, router)
        router.handle.side_effect = lambda update, transport: poller.stop()

        await poller.poll_once()

        assert router.handle.await_count == 1
