"""Tests for the keyboard builder."""

from botmachine.core import Keyboard


class TestKeyboard:
    def test_inline_rows(self):
        markup = (
            Keyboard().text("-", "dec").text("+", "inc").row().url("Docs", "https://x").inline()
        )

        assert markup == {
            "inline_keyboard": [
                [{"text": "-", "callback_data": "dec"}, {"text": "+", "callback_data": "inc"}],
                [{"text": "Docs", "url": "https://x"}],
            ]
        }

    def test_no_empty_rows(self):
        markup = Keyboard().row().text("a", "a").row().row().inline()

        assert markup == {"inline_keyboard": [[{"text": "a", "callback_data": "a"}]]}

    def test_reply_keyboard(self):
        markup = Keyboard().request_contact("Share phone").reply(one_time=True)

        assert markup == {
            "keyboard": [[{"text": "Share phone", "request_contact": True}]],
            "resize_keyboard": True,
            "one_time_keyboard": True,
        }

    def test_remove(self):
        assert Keyboard.remove() == {"remove_keyboard": True}
