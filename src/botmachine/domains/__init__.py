"""Business domains for the demo bot.

Each subdirectory holds the queries, commands, components and flow of one
feature; ``botmachine.bot`` registers them with the router.

Available domains:
- counter: Counter with increment, decrement, rename and reset
"""

from .counter import counter_flow

__all__ = ["counter_flow"]
