"""Counter components: pure renderers from view models to message payloads."""

from html import escape

from ...core import Keyboard
from ...models import MessagePayload
from .core import CounterView


def counter_component(props: CounterView) -> MessagePayload:
    keyboard = (
        Keyboard()
        .text("-", "decrement")
        .text("+", "increment")
        .row()
        .text("Rename", "rename")
        .text("Reset", "reset")
        .row()
        .text("Close", "close")
    )
    return MessagePayload(
        text=f"<b>{escape(props.name)}</b>: <b>{props.count}</b>",
        parse_mode="HTML",
        reply_markup=keyboard.inline(),
    )


def rename_component(props: CounterView) -> MessagePayload:
    keyboard = Keyboard().text("Back", "back")
    return MessagePayload(
        text=f"Current name: <b>{escape(props.name)}</b>\n\nSend a new name or /cancel:",
        parse_mode="HTML",
        reply_markup=keyboard.inline(),
    )


def confirm_reset_component(props: CounterView) -> MessagePayload:
    keyboard = Keyboard().text("Yes, reset", "confirm_reset").text("No", "back")
    return MessagePayload(
        text=f"Reset <b>{escape(props.name)}</b> (currently {props.count})?",
        parse_mode="HTML",
        reply_markup=keyboard.inline(),
    )
