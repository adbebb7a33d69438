"""Counter flow definition."""

import re

from ...core import BotContext, Refresh, Transition, create_flow, noop_command, state
from .components import confirm_reset_component, counter_component, rename_component
from .core import (
    decrement_counter_command,
    get_counter_query,
    increment_counter_command,
    reset_counter_command,
    validate_new_name,
)

COUNTER_FLOW = "counter"

# Any text that is not a command
NEW_NAME_PATTERN = re.compile(r"^(?P<new_name>[^/].*)$", re.DOTALL)


class States:
    COUNTER = "counter"
    RENAME = "rename"
    CONFIRM_RESET = "confirm_reset"


async def close_counter_command(payload, ctx: BotContext) -> None:
    text = "Counter closed. Send /start to open it again."
    if ctx.update.callback_query is not None:
        await ctx.answer_callback_query()
        await ctx.edit_message_text(text)
    else:
        await ctx.reply(text)


def after_rename(result, ctx: BotContext) -> str:
    """Stay on the rename screen when the new name was rejected."""
    return States.COUNTER if result is not None else States.RENAME


counter_flow = create_flow(
    COUNTER_FLOW,
    {
        States.COUNTER: state(
            component=counter_component,
            on_enter=get_counter_query,
            on_action=[
                ("^increment$", Refresh(increment_counter_command)),
                ("^decrement$", Refresh(decrement_counter_command)),
                ("^rename$", Transition(noop_command, States.RENAME)),
                ("^reset$", Transition(noop_command, States.CONFIRM_RESET)),
                ("^close$", Transition(close_counter_command)),
            ],
            on_text=[
                ("^/cancel$", Transition(close_counter_command)),
            ],
        ),
        States.RENAME: state(
            component=rename_component,
            on_enter=get_counter_query,
            on_action=[
                ("^back$", Transition(noop_command, States.COUNTER)),
            ],
            on_text=[
                ("^/cancel$", Transition(noop_command, States.COUNTER)),
                (NEW_NAME_PATTERN, Transition(validate_new_name, after_rename)),
            ],
        ),
        States.CONFIRM_RESET: state(
            component=confirm_reset_component,
            on_enter=get_counter_query,
            on_action=[
                ("^confirm_reset$", Transition(reset_counter_command, States.COUNTER)),
                ("^back$", Transition(noop_command, States.COUNTER)),
            ],
        ),
    },
    initial_state=States.COUNTER,
)
