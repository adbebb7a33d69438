"""Keyboard builder for component reply markup."""

from typing import Any


class Keyboard:
    """Fluent builder for inline and reply keyboards.

    Example:
        Keyboard().text("-", "decrement").text("+", "increment").row().url("Docs", url)
    """

    def __init__(self) -> None:
        self.rows: list[list[dict[str, Any]]] = [[]]

    def add(self, *buttons: dict[str, Any]) -> "Keyboard":
        """Append raw button objects to the current row."""
        self.rows[-1].extend(buttons)
        return self

    def text(self, label: str, callback_data: str) -> "Keyboard":
        """Append a callback button."""
        return self.add({"text": label, "callback_data": callback_data})

    def url(self, label: str, url: str) -> "Keyboard":
        """Append a link button."""
        return self.add({"text": label, "url": url})

    def request_contact(self, label: str) -> "Keyboard":
        """Append a reply-keyboard button that shares the user's phone number."""
        return self.add({"text": label, "request_contact": True})

    def row(self) -> "Keyboard":
        """Start a new row. Consecutive calls do not create empty rows."""
        if self.rows[-1]:
            self.rows.append([])
        return self

    def _rows(self) -> list[list[dict[str, Any]]]:
        return [list(row) for row in self.rows if row]

    def inline(self) -> dict[str, Any]:
        """Build inline keyboard markup."""
        return {"inline_keyboard": self._rows()}

    def reply(self, resize: bool = True, one_time: bool = False) -> dict[str, Any]:
        """Build reply keyboard markup."""
        return {
            "keyboard": self._rows(),
            "resize_keyboard": resize,
            "one_time_keyboard": one_time,
        }

    @staticmethod
    def remove() -> dict[str, Any]:
        """Markup that hides a previously shown reply keyboard."""
        return {"remove_keyboard": True}
