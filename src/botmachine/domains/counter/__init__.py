"""Counter demo domain: a small flow exercising refresh, transitions and exit."""

from .core import (
    CounterView,
    RenameInput,
    decrement_counter_command,
    get_counter_query,
    increment_counter_command,
    rename_counter_command,
    reset_counter_command,
)
from .flow import COUNTER_FLOW, States, counter_flow

__all__ = [
    "COUNTER_FLOW",
    "States",
    "counter_flow",
    "CounterView",
    "RenameInput",
    "get_counter_query",
    "increment_counter_command",
    "decrement_counter_command",
    "rename_counter_command",
    "reset_counter_command",
]
