"""Tests for route and action pattern compilation."""

import dataclasses
import re

import pytest

from botmachine.core.patterns import Pattern, command_pattern, compile_pattern


class TestPathTemplates:
    """Tests for ``:name`` path templates."""

    def test_single_parameter(self):
        """Test that a marker after a literal colon captures one segment."""
        pattern = compile_pattern("select_item::id")

        assert pattern.is_template
        assert pattern.match("select_item:store_1") == {"id": "store_1"}

    def test_parameter_stops_at_separator(self):
        """Test that a parameter value never spans a colon."""
        pattern = compile_pattern("select_item::id")

        assert pattern.match("select_item:store_1:extra") is None

    def test_multiple_parameters(self):
        """Test several markers in one template."""
        pattern = compile_pattern("order::order_id::action")

        assert pattern.match("order:17:cancel") == {"order_id": "17", "action": "cancel"}
        assert pattern.param_names == ("order_id", "action")

    def test_template_is_anchored(self):
        """Test that templates match the whole input only."""
        pattern = compile_pattern("select_item::id")

        assert pattern.match("x_select_item:1") is None
        assert pattern.match("select_item:") is None

    def test_literal_text_is_escaped(self):
        """Test that regex metacharacters in a template are literal."""
        pattern = compile_pattern("page.next::n")

        assert pattern.match("page.next:2") == {"n": "2"}
        assert pattern.match("pageXnext:2") is None

    def test_duplicate_parameter_rejected(self):
        """Test that a parameter name can appear only once."""
        with pytest.raises(ValueError, match="Duplicate parameter"):
            compile_pattern("swap::x::x")


class TestRegexPatterns:
    """Tests for plain regular expression patterns."""

    def test_match_without_groups_returns_empty_params(self):
        pattern = compile_pattern("^increment$")

        assert not pattern.is_template
        assert pattern.match("increment") == {}
        assert pattern.match("decrement") is None

    def test_regex_is_searched_not_anchored(self):
        """Test that anchoring is left to the pattern author."""
        pattern = compile_pattern("ment")

        assert pattern.match("increment") == {}

    def test_named_groups_become_params(self):
        pattern = compile_pattern(r"^page_(?P<number>\d+)$")

        assert pattern.match("page_3") == {"number": "3"}

    def test_unmatched_optional_group_is_omitted(self):
        pattern = compile_pattern(r"^go(?:_(?P<target>\w+))?$")

        assert pattern.match("go") == {}
        assert pattern.match("go_home") == {"target": "home"}

    def test_non_capturing_group_is_not_a_template(self):
        """Test that ``(?:`` is never read as a parameter marker."""
        pattern = compile_pattern("^(?:yes|no)$")

        assert not pattern.is_template
        assert pattern.match("yes") == {}

    def test_compiled_regex_is_accepted(self):
        regex = re.compile(r"^hello", re.IGNORECASE)
        pattern = compile_pattern(regex)

        assert pattern.regex is regex
        assert pattern.match("HELLO there") == {}

    def test_compiled_pattern_is_returned_unchanged(self):
        pattern = compile_pattern("^x$")

        assert compile_pattern(pattern) is pattern


class TestInvalidPatterns:
    """Tests for registration-time validation."""

    def test_empty_pattern(self):
        with pytest.raises(ValueError):
            compile_pattern("")

    def test_invalid_regex(self):
        with pytest.raises(ValueError, match="Invalid pattern"):
            compile_pattern("(")

    def test_wrong_type(self):
        with pytest.raises(TypeError):
            compile_pattern(123)  # type: ignore[arg-type]

    def test_pattern_is_immutable(self):
        pattern = compile_pattern("^x$")

        with pytest.raises(dataclasses.FrozenInstanceError):
            pattern.source = "^y$"  # type: ignore[misc]


class TestCommandPattern:
    """Tests for slash command matchers."""

    @pytest.fixture
    def start(self) -> Pattern:
        return command_pattern("start")

    def test_bare_command(self, start: Pattern):
        assert start.match("/start") == {}

    def test_bot_suffix(self, start: Pattern):
        assert start.match("/start@counter_bot") == {}

    def test_arguments(self, start: Pattern):
        assert start.match("/start deep link") == {"args": "deep link"}

    def test_prefix_of_other_command_does_not_match(self, start: Pattern):
        assert start.match("/starter") is None
        assert start.match("start") is None

    def test_leading_slash_is_optional(self):
        assert command_pattern("/help").match("/help") == {}

    def test_empty_command_rejected(self):
        with pytest.raises(ValueError):
            command_pattern("/")
