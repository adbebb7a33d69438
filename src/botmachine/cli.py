"""Command-line interface for botmachine."""

import asyncio

import typer
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from .bot import build_router
from .channels import ConsoleClient, ConsoleSession, TelegramClient
from .channels.polling import LongPoller
from .infrastructure import get_session_store
from .models import get_settings

app = typer.Typer(
    name="botmachine",
    help="Stateful Telegram bot runtime",
    add_completion=False,
)
console = Console()


def print_welcome():
    """Print welcome message."""
    console.print(
        Panel.fit(
            "[bold blue]botmachine console[/bold blue]\n"
            "[dim]Talk to the demo bot without Telegram[/dim]\n\n"
            "Commands:\n"
            "  [green]/start[/green] - Open the counter flow\n"
            "  [green]1, 2, ...[/green] - Press a button of the last message\n"
            "  [green]\\1[/green] - Send \"1\" as text instead of pressing a button\n"
            "  [green]exit[/green] or [green]quit[/green] - Leave the console",
            title="Welcome",
            border_style="blue",
        )
    )


def print_error(message: str):
    """Print an error message."""
    console.print(
        Panel(
            f"[red]{message}[/red]",
            title="[bold red]Error[/bold red]",
            border_style="red",
        )
    )


def _require_token(token: str) -> None:
    if not token:
        print_error(
            "No bot token found.\n"
            "Set BOTMACHINE_BOT_TOKEN environment variable or create a .env file."
        )
        raise typer.Exit(1)


async def run_chat_loop(debug: bool = False):
    """Run the local console chat loop."""
    client = ConsoleClient(console)
    chat_session = ConsoleSession(client)
    router = build_router(client=client)

    print_welcome()

    while True:
        try:
            user_input = Prompt.ask("[bold blue]You[/bold blue]")

            if user_input.lower() in ("exit", "quit"):
                console.print("[dim]Goodbye![/dim]")
                break

            if not user_input.strip():
                continue

            update = chat_session.build_update(user_input)
            if debug:
                console.print(f"[dim]{update.kind}: {update.text or update.callback_data}[/dim]")
            await router.handle(update)

        except KeyboardInterrupt:
            console.print("\n[dim]Interrupted. Type 'exit' to quit.[/dim]")
            continue


async def run_poller() -> None:
    """Long-poll the Bot API with the demo router until interrupted."""
    settings = get_settings()
    client = TelegramClient.from_settings(settings)
    store = get_session_store(settings)
    router = build_router(store, client)
    poller = LongPoller(
        client,
        router,
        timeout=settings.poll_timeout_seconds,
        retry_delay=settings.retry_delay_seconds,
    )
    try:
        me = await client.get_me()
        console.print(f"[green]Polling as @{me.get('username', '?')}[/green]")
        await poller.run()
    finally:
        await client.close()
        await store.close()


@app.command()
def run():
    """Run the bot with long polling."""
    settings = get_settings()
    _require_token(settings.bot_token)
    try:
        asyncio.run(run_poller())
    except KeyboardInterrupt:
        console.print("[dim]Stopped.[/dim]")


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port"),
):
    """Serve the webhook API with uvicorn."""
    import uvicorn

    from .api.main import create_app

    settings = get_settings()
    _require_token(settings.bot_token)
    uvicorn.run(
        create_app(settings=settings),
        host=host or settings.webhook_host,
        port=port or settings.webhook_port,
    )


@app.command()
def chat(
    debug: bool = typer.Option(False, "--debug", "-d", help="Show the updates sent to the router"),
):
    """Start an interactive console session with the demo bot."""
    asyncio.run(run_chat_loop(debug=debug))


@app.command()
def version():
    """Show version information."""
    from . import __version__

    console.print(f"botmachine v{__version__}")


@app.command()
def config():
    """Show current configuration."""
    settings = get_settings()

    table = Table(title="Configuration", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    # Only show non-sensitive settings
    table.add_row("Environment", settings.environment)
    table.add_row("API Base URL", settings.api_base_url)
    table.add_row("Poll Timeout", f"{settings.poll_timeout_seconds}s")
    table.add_row("Retry Delay", f"{settings.retry_delay_seconds}s")
    table.add_row("Session Store", settings.session_store)
    table.add_row("Session TTL", str(settings.session_ttl_seconds or "none"))
    table.add_row("Webhook", f"{settings.webhook_host}:{settings.webhook_port}")
    table.add_row("Webhook Secret Set", "Yes" if settings.webhook_secret else "No")
    table.add_row("Bot Token Set", "Yes" if settings.bot_token else "No")

    console.print(table)


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
