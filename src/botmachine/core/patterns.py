"""Route and action pattern compilation.

A pattern is either a regular expression or a path template such as
``select_item::id``, where every ``:name`` marker captures one ``:``-separated
segment into a named parameter. Patterns are compiled once, when a route or
state is registered, into an immutable :class:`Pattern` value.
"""

import re
from dataclasses import dataclass

# ":name" where name is an identifier; "::id" is a literal ":" followed by a marker.
# "(?:" opens a non-capturing regex group and is never a marker.
PARAM_MARKER = re.compile(r"(?<!\?):([A-Za-z_][A-Za-z0-9_]*)")

PATH_SEPARATOR = ":"


@dataclass(frozen=True)
class Pattern:
    """Compiled matcher producing named parameters."""

    source: str
    regex: re.Pattern[str]
    is_template: bool = False

    def match(self, text: str) -> dict[str, str] | None:
        """Match text against the pattern.

        Args:
            text: Inbound text or callback data

        Returns:
            None when the text does not match, otherwise the named captures
            (possibly empty). Optional groups that did not participate are omitted.
        """
        found = self.regex.search(text)
        if found is None:
            return None
        return {name: value for name, value in found.groupdict().items() if value is not None}

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(self.regex.groupindex)

    def __repr__(self) -> str:
        kind = "template" if self.is_template else "regex"
        return f"Pattern({kind}={self.source!r})"


def compile_template(template: str) -> re.Pattern[str]:
    """Compile a path template into an anchored regex with named groups.

    Literal text is escaped; each ``:name`` marker becomes ``(?P<name>[^:]+)``.
    """
    parts: list[str] = []
    seen: set[str] = set()
    position = 0
    for marker in PARAM_MARKER.finditer(template):
        name = marker.group(1)
        if name in seen:
            raise ValueError(f"Duplicate parameter {name!r} in pattern {template!r}")
        seen.add(name)
        parts.append(re.escape(template[position : marker.start()]))
        parts.append(f"(?P<{name}>[^{re.escape(PATH_SEPARATOR)}]+)")
        position = marker.end()
    parts.append(re.escape(template[position:]))
    return re.compile("^" + "".join(parts) + r"\Z")


def compile_pattern(pattern: "str | re.Pattern[str] | Pattern") -> Pattern:
    """Compile a route or action pattern.

    Args:
        pattern: Path template, regular expression source, compiled regex, or
            an already compiled Pattern (returned unchanged)

    Returns:
        Immutable Pattern value

    Raises:
        ValueError: If the pattern is empty or an invalid regular expression
        TypeError: If the pattern is not a string or regex
    """
    if isinstance(pattern, Pattern):
        return pattern
    if isinstance(pattern, re.Pattern):
        return Pattern(source=pattern.pattern, regex=pattern)
    if not isinstance(pattern, str):
        raise TypeError(f"Pattern must be a string or compiled regex, got {type(pattern).__name__}")
    if not pattern:
        raise ValueError("Pattern must be a non-empty string")

    if PARAM_MARKER.search(pattern):
        return Pattern(source=pattern, regex=compile_template(pattern), is_template=True)

    try:
        regex = re.compile(pattern)
    except re.error as e:
        raise ValueError(f"Invalid pattern {pattern!r}: {e}") from e
    return Pattern(source=pattern, regex=regex)


def command_pattern(command: str) -> Pattern:
    """Build the matcher for a slash command such as ``/start``.

    Accepts an optional ``@botname`` suffix and exposes trailing arguments as
    the ``args`` parameter.
    """
    name = command.lstrip("/")
    if not name:
        raise ValueError("Command name must be a non-empty string")
    regex = re.compile(rf"^/{re.escape(name)}(?:@\w+)?(?:\s+(?P<args>.*))?$", re.DOTALL)
    return Pattern(source=f"/{name}", regex=regex)
