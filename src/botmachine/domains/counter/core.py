"""Counter business logic: queries and commands over the session."""

from pydantic import BaseModel, Field

from ...core import ActionPayload, BotContext, Command, CommandInputError, Query

DEFAULT_NAME = "Counter"


class CounterView(BaseModel):
    """View model shared by counter components."""

    name: str
    count: int


class RenameInput(BaseModel):
    new_name: str = Field(min_length=1, max_length=64)


def _view(ctx: BotContext) -> CounterView:
    return CounterView(
        name=ctx.session.get("counter_name", DEFAULT_NAME),
        count=ctx.session.get("counter_value", 0),
    )


async def _get_counter(_: None, ctx: BotContext) -> CounterView:
    return _view(ctx)


async def _increment(_: ActionPayload, ctx: BotContext) -> CounterView:
    ctx.session["counter_value"] = ctx.session.get("counter_value", 0) + 1
    return _view(ctx)


async def _decrement(_: ActionPayload, ctx: BotContext) -> CounterView:
    ctx.session["counter_value"] = ctx.session.get("counter_value", 0) - 1
    return _view(ctx)


async def _rename(data: RenameInput, ctx: BotContext) -> CounterView:
    ctx.session["counter_name"] = data.new_name.strip()
    return _view(ctx)


async def _reset(_: ActionPayload, ctx: BotContext) -> None:
    ctx.session.pop("counter_value", None)
    ctx.session.pop("counter_name", None)


get_counter_query = Query(_get_counter, name="get_counter")
increment_counter_command = Command(_increment, name="increment_counter")
decrement_counter_command = Command(_decrement, name="decrement_counter")
rename_counter_command = Command(_rename, input_model=RenameInput, name="rename_counter")
reset_counter_command = Command(_reset, name="reset_counter")


async def validate_new_name(payload: ActionPayload, ctx: BotContext) -> CounterView | None:
    """Rename from free text; an invalid name keeps the old one and returns None."""
    new_name = (payload.params.get("new_name") or "").strip()
    if not new_name:
        return None
    try:
        return await rename_counter_command.execute({"new_name": new_name}, ctx)
    except CommandInputError:
        return None
