"""Command, Query and Component contracts.

Business logic plugs into flows through three kinds of callables:

- Command: ``(payload, ctx) -> result``. May mutate ``ctx.session``.
- Query: ``(ctx) -> props``. Supplies view-model data; must not mutate the
  session (a convention, not enforced at runtime).
- Component: ``(props) -> MessagePayload``. Pure renderer.

Each may be synchronous or return an awaitable. The :class:`Command` and
:class:`Query` wrappers add optional pydantic input validation and a
``with_input`` helper for deriving a fixed input from the context.
"""

import inspect
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar, Union

from pydantic import BaseModel, ValidationError

from ..models.update import MessagePayload

if TYPE_CHECKING:
    from .context import BotContext

T = TypeVar("T")

CommandFunction = Callable[[Any, "BotContext"], Any]
QueryFunction = Callable[["BotContext"], Any]
Component = Callable[[Any], Union[MessagePayload, Mapping[str, Any], Awaitable[Any]]]


class CommandInputError(ValueError):
    """Raised when a command or query receives input that fails validation."""

    def __init__(self, name: str, error: ValidationError):
        self.name = name
        self.error = error
        super().__init__(f"Invalid input for {name}: {error}")


@dataclass
class ActionPayload:
    """Input handed to a command bound to a flow action."""

    params: dict[str, str] = field(default_factory=dict)
    session: dict[str, Any] = field(default_factory=dict)
    text: str | None = None


async def maybe_await(value: "T | Awaitable[T]") -> T:
    """Resolve a value that may be an awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value


def _validate(name: str, model: type[BaseModel] | None, data: Any) -> Any:
    if model is None:
        return data
    if isinstance(data, model):
        return data
    if isinstance(data, ActionPayload):
        data = {**data.params, "text": data.text} if data.text is not None else data.params
    try:
        return model.model_validate(data or {})
    except ValidationError as e:
        raise CommandInputError(name, e) from e


class Command:
    """A state-mutating operation bound to a flow action.

    Args:
        execute: ``(input, ctx) -> result`` implementation
        input_model: Optional pydantic model the input is validated against.
            An ActionPayload is validated from its params (plus ``text``).
        name: Name used in logs and errors (defaults to the function name)
    """

    def __init__(
        self,
        execute: Callable[[Any, "BotContext"], Any],
        input_model: type[BaseModel] | None = None,
        name: str | None = None,
    ):
        self.execute_fn = execute
        self.input_model = input_model
        self.name = name or getattr(execute, "__name__", "command")

    async def execute(self, data: Any, ctx: "BotContext") -> Any:
        validated = _validate(self.name, self.input_model, data)
        return await maybe_await(self.execute_fn(validated, ctx))

    async def __call__(self, payload: Any, ctx: "BotContext") -> Any:
        return await self.execute(payload, ctx)

    def with_input(self, build: Callable[["BotContext"], Any]) -> "Command":
        """Return a command that ignores its payload and uses ``build(ctx)`` instead."""

        async def execute(_: Any, ctx: "BotContext") -> Any:
            return await self.execute(await maybe_await(build(ctx)), ctx)

        return Command(execute, name=self.name)

    def __repr__(self) -> str:
        return f"Command({self.name})"


class Query:
    """A read-only operation supplying view-model data to a component.

    Args:
        execute: ``(input, ctx) -> props`` implementation
        input_model: Optional pydantic model the input is validated against
        name: Name used in logs and errors
    """

    def __init__(
        self,
        execute: Callable[[Any, "BotContext"], Any],
        input_model: type[BaseModel] | None = None,
        name: str | None = None,
    ):
        self.execute_fn = execute
        self.input_model = input_model
        self.name = name or getattr(execute, "__name__", "query")

    async def execute(self, data: Any, ctx: "BotContext") -> Any:
        validated = _validate(self.name, self.input_model, data)
        return await maybe_await(self.execute_fn(validated, ctx))

    async def __call__(self, ctx: "BotContext") -> Any:
        """Run as a state's ``on_enter`` hook, with no input."""
        return await self.execute(None, ctx)

    def with_input(self, build: Callable[["BotContext"], Any]) -> "Query":
        """Return a query whose input is derived from the context."""

        async def execute(_: Any, ctx: "BotContext") -> Any:
            return await self.execute(await maybe_await(build(ctx)), ctx)

        return Query(execute, name=self.name)

    def __repr__(self) -> str:
        return f"Query({self.name})"


def command(
    fn: Callable[[Any, "BotContext"], Any] | None = None,
    *,
    input_model: type[BaseModel] | None = None,
) -> Any:
    """Decorator turning a function into a :class:`Command`."""

    def wrap(f: Callable[[Any, "BotContext"], Any]) -> Command:
        return Command(f, input_model=input_model)

    return wrap(fn) if fn is not None else wrap


def query(
    fn: Callable[[Any, "BotContext"], Any] | None = None,
    *,
    input_model: type[BaseModel] | None = None,
) -> Any:
    """Decorator turning a function into a :class:`Query`."""

    def wrap(f: Callable[[Any, "BotContext"], Any]) -> Query:
        return Query(f, input_model=input_model)

    return wrap(fn) if fn is not None else wrap


async def noop_command(payload: Any, ctx: "BotContext") -> None:
    """Command that does nothing, for transitions without business logic."""
    return None


async def render_component(component: Component, props: Any) -> MessagePayload:
    """Run a component and normalise its result to a MessagePayload."""
    rendered = await maybe_await(component(props))
    if isinstance(rendered, MessagePayload):
        return rendered
    if isinstance(rendered, str):
        return MessagePayload(text=rendered)
    return MessagePayload.model_validate(rendered)
