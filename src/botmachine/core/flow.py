"""Flow controller: named finite-state machines driving multi-step dialogues.

A flow is a set of named states. Each state loads view data on entry
(``on_enter`` query), renders it (``component``) and declares ordered action
tables (``on_action`` for callback data, ``on_text`` for free text). The
first matching pattern wins; its command runs and its handler decides the
next state.

States form a directed graph with no terminal marker: a state is terminal
when none of its handlers ever yields a next state.
"""

from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

from ..infrastructure.logging_config import get_logger
from ..infrastructure.metrics import record_flow_transition
from .patterns import Pattern, compile_pattern
from .ports import ActionPayload, Component, QueryFunction, maybe_await, render_component

if TYPE_CHECKING:
    from .context import BotContext

logger = get_logger(__name__)

FLOW_NAME_KEY = "flow_name"
FLOW_STATE_KEY = "flow_state"
DEFAULT_INITIAL_STATE = "index"

NextStateResolver = Callable[[Any, "BotContext"], Union[str, None, Awaitable[Union[str, None]]]]


# =============================================================================
# Action handlers
# =============================================================================


@dataclass(frozen=True)
class Refresh:
    """Run the command, then re-render the current state."""

    command: Callable[[Any, "BotContext"], Any]


@dataclass(frozen=True)
class Transition:
    """Run the command, then move to ``next_state``.

    ``next_state`` is a state name, a resolver called with
    ``(command_result, ctx)`` returning a name or a falsy value, or None.
    A missing or falsy next state exits the flow.
    """

    command: Callable[[Any, "BotContext"], Any]
    next_state: str | NextStateResolver | None = None


ActionHandler = Union[Refresh, Transition]


@dataclass(frozen=True)
class Action:
    """Compiled (pattern, handler) pair of a state's action table."""

    pattern: Pattern
    handler: ActionHandler


ActionTable = Union[Sequence[tuple[Any, ActionHandler]], Sequence[Action]]


def _compile_actions(entries: ActionTable | None) -> tuple[Action, ...]:
    if entries is None:
        return ()
    if isinstance(entries, Mapping):
        raise TypeError("Action tables must be ordered sequences of (pattern, handler) pairs")

    actions = []
    for entry in entries:
        if isinstance(entry, Action):
            actions.append(entry)
            continue
        pattern, handler = entry
        if not isinstance(handler, (Refresh, Transition)):
            raise TypeError(f"Action handler for {pattern!r} must be Refresh or Transition")
        actions.append(Action(compile_pattern(pattern), handler))
    return tuple(actions)


# =============================================================================
# Flow definition
# =============================================================================


@dataclass(frozen=True)
class StateDefinition:
    """One node of a flow."""

    component: Component
    on_enter: QueryFunction | None = None
    on_action: tuple[Action, ...] = ()
    on_text: tuple[Action, ...] = ()


def state(
    component: Component,
    on_enter: QueryFunction | None = None,
    on_action: ActionTable | None = None,
    on_text: ActionTable | None = None,
) -> StateDefinition:
    """Build a StateDefinition, compiling its action patterns.

    Args:
        component: Renderer turning ``on_enter`` props into a MessagePayload
        on_enter: Optional query producing the component's props
        on_action: Ordered (pattern, handler) pairs matched against callback data
        on_text: Ordered (pattern, handler) pairs matched against message text
    """
    return StateDefinition(
        component=component,
        on_enter=on_enter,
        on_action=_compile_actions(on_action),
        on_text=_compile_actions(on_text),
    )


@dataclass(frozen=True)
class Flow:
    """A named flow configuration."""

    name: str
    states: Mapping[str, StateDefinition] = field(default_factory=dict)
    initial_state: str = DEFAULT_INITIAL_STATE

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Flow name must be a non-empty string")
        if self.initial_state not in self.states:
            raise ValueError(
                f"Initial state {self.initial_state!r} is not defined in flow {self.name!r}"
            )


def create_flow(
    name: str,
    states: Mapping[str, StateDefinition],
    initial_state: str | None = None,
) -> Flow:
    """Create a flow configuration.

    The initial state defaults to ``index`` when defined, otherwise to the
    first declared state.
    """
    if initial_state is None:
        initial_state = DEFAULT_INITIAL_STATE if DEFAULT_INITIAL_STATE in states else next(
            iter(states), DEFAULT_INITIAL_STATE
        )
    return Flow(name=name, states=dict(states), initial_state=initial_state)


# =============================================================================
# Controller
# =============================================================================


class FlowController:
    """Runs one flow's state machine against the current update."""

    def __init__(self, flow: Flow):
        self.flow = flow

    @property
    def name(self) -> str:
        return self.flow.name

    @property
    def initial_state(self) -> str:
        return self.flow.initial_state

    @property
    def states(self) -> Mapping[str, StateDefinition]:
        return self.flow.states

    async def handle(self, ctx: "BotContext") -> bool:
        """Handle the update if this flow is active.

        Returns:
            True when the update was claimed by the flow, False when the flow
            is not active or was force-exited because its state pointer is stale.
        """
        if ctx.session.get(FLOW_NAME_KEY) != self.name:
            return False

        state_name = ctx.session.get(FLOW_STATE_KEY) or self.initial_state
        current = self.states.get(state_name)

        if current is None:
            logger.error("flow_state_missing", flow=self.name, state=state_name)
            self.exit_flow(ctx)
            record_flow_transition(self.name, "recovered")
            return False

        action = self._match_action(current, ctx)
        if action is None:
            record_flow_transition(self.name, "rerender")
            await self.render_state(state_name, ctx)
            return True

        await self.execute_action(action.handler, state_name, ctx)
        return True

    def _match_action(self, current: StateDefinition, ctx: "BotContext") -> Action | None:
        if ctx.callback_data is not None:
            value, actions = ctx.callback_data, current.on_action
        elif ctx.text is not None:
            value, actions = ctx.text, current.on_text
        else:
            return None

        for action in actions:
            params = action.pattern.match(value)
            if params is not None:
                ctx.params = params
                return action
        return None

    async def execute_action(
        self, handler: ActionHandler, state_name: str, ctx: "BotContext"
    ) -> None:
        """Run the bound command and move to the resolved next state."""
        payload = ActionPayload(params=dict(ctx.params), session=ctx.session, text=ctx.text)
        result = await maybe_await(handler.command(payload, ctx))

        if ctx.session.get(FLOW_NAME_KEY) != self.name:
            # The command exited this flow or entered another one.
            logger.debug("flow_left_by_command", flow=self.name, state=state_name)
            return

        next_state = await self._resolve_next_state(handler, state_name, result, ctx)

        if not next_state:
            logger.debug("flow_exit", flow=self.name, state=state_name)
            record_flow_transition(self.name, "exit")
            self.exit_flow(ctx)
            return

        if next_state not in self.states:
            logger.error(
                "flow_state_missing", flow=self.name, state=next_state, previous=state_name
            )
            record_flow_transition(self.name, "recovered")
            self.exit_flow(ctx)
            return

        outcome = "refresh" if isinstance(handler, Refresh) else "transition"
        logger.debug("flow_transition", flow=self.name, state=state_name, next_state=next_state)
        record_flow_transition(self.name, outcome)
        ctx.session[FLOW_STATE_KEY] = next_state
        await self.render_state(next_state, ctx)

    async def _resolve_next_state(
        self, handler: ActionHandler, state_name: str, result: Any, ctx: "BotContext"
    ) -> str | None:
        if isinstance(handler, Refresh):
            return state_name

        next_state = handler.next_state
        if next_state is None or isinstance(next_state, str):
            return next_state
        return await maybe_await(next_state(result, ctx))

    async def render_state(self, state_name: str, ctx: "BotContext") -> None:
        """Load, render and send a state.

        Callback updates acknowledge the button press and edit the message it
        belongs to; every other update gets a new message.
        """
        definition = self.states[state_name]
        props = await maybe_await(definition.on_enter(ctx)) if definition.on_enter else {}
        payload = await render_component(definition.component, props)

        if ctx.update.callback_query is not None:
            if not ctx.callback_answered:
                await ctx.answer_callback_query()
            await ctx.edit(payload)
        else:
            await ctx.send(payload)

    def exit_flow(self, ctx: "BotContext") -> None:
        ctx.exit_flow()

    def __repr__(self) -> str:
        return f"FlowController({self.name!r}, states={list(self.states)})"
