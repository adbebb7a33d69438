"""Tests for CLI module."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from botmachine import __version__
from botmachine.cli import app, main, print_error, print_welcome, run_poller
from botmachine.models import Settings

runner = CliRunner()


class TestPrintFunctions:
    """Tests for CLI print functions."""

    def test_print_welcome(self):
        """Test welcome message prints."""
        with patch("botmachine.cli.console") as mock_console:
            print_welcome()
            mock_console.print.assert_called_once()

    def test_print_error(self):
        """Test error message printing."""
        with patch("botmachine.cli.console") as mock_console:
            print_error("Something went wrong")
            mock_console.print.assert_called_once()


class TestInfoCommands:
    """Tests for version and config commands."""

    def test_version_command(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_config_command(self):
        settings = Settings(bot_token="1:SUPERTOKEN")
        with patch("botmachine.cli.get_settings", return_value=settings):
            result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        assert "Session Store" in result.output
        assert "SUPERTOKEN" not in result.output


class TestRunCommands:
    """Tests for the run and serve commands."""

    def test_run_without_token(self):
        with patch("botmachine.cli.get_settings", return_value=Settings(bot_token="")):
            result = runner.invoke(app, ["run"])

        assert result.exit_code == 1

    def test_run_starts_poller(self):
        with (
            patch("botmachine.cli.get_settings", return_value=Settings(bot_token="1:T")),
            patch("botmachine.cli.run_poller", new=MagicMock()) as run_poller,
            patch("botmachine.cli.asyncio.run") as mock_run,
        ):
            result = runner.invoke(app, ["run"])

        assert result.exit_code == 0
        run_poller.assert_called_once_with()
        mock_run.assert_called_once_with(run_poller.return_value)

    def test_serve_without_token(self):
        with patch("botmachine.cli.get_settings", return_value=Settings(bot_token="")):
            result = runner.invoke(app, ["serve"])

        assert result.exit_code == 1

    def test_serve_runs_uvicorn(self):
        settings = Settings(bot_token="1:T", webhook_port=9000)
        with (
            patch("botmachine.cli.get_settings", return_value=settings),
            patch("uvicorn.run") as mock_uvicorn,
        ):
            result = runner.invoke(app, ["serve", "--host", "127.0.0.1"])

        assert result.exit_code == 0
        kwargs = mock_uvicorn.call_args.kwargs
        assert kwargs == {"host": "127.0.0.1", "port": 9000}


class TestRunPoller:
    """Tests for the long-polling runner."""

    @pytest.mark.asyncio
    async def test_client_and_store_closed_when_polling_stops(self):
        telegram = MagicMock()
        telegram.get_me = AsyncMock(return_value={"username": "demo_bot"})
        telegram.close = AsyncMock()
        store = MagicMock()
        store.close = AsyncMock()
        poller = MagicMock()
        poller.run = AsyncMock(side_effect=RuntimeError("boom"))

        with (
            patch("botmachine.cli.get_settings", return_value=Settings(bot_token="1:T")),
            patch("botmachine.cli.TelegramClient.from_settings", return_value=telegram),
            patch("botmachine.cli.get_session_store", return_value=store),
            patch("botmachine.cli.LongPoller", return_value=poller),
            patch("botmachine.cli.console"),
        ):
            with pytest.raises(RuntimeError):
                await run_poller()

        telegram.close.assert_awaited_once()
        store.close.assert_awaited_once()


class TestChatCommand:
    """Tests for the console chat command."""

    def test_chat_session(self):
        """Test a short console conversation with the demo bot."""
        with patch("botmachine.cli.Prompt.ask", side_effect=["/start", "2", "", "exit"]):
            result = runner.invoke(app, ["chat"])

        assert result.exit_code == 0
        assert "Counter" in result.output
        assert "Goodbye" in result.output


class TestMain:
    def test_main_calls_app(self):
        with patch("botmachine.cli.app") as mock_app:
            main()
            mock_app.assert_called_once()
