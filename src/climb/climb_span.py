"""
Source spans and caret-underline rendering for climb diagnostics.

A `Span` is a half-open range `[begin, begin + length)` into the original source
string. Errors carry a span so the driver can print the offending line with the
bad substring underlined:

    let x = 1 !! 2 in x
              ^^

Exports:
    - Span
    - escape_char
    - render_span
    - format_error
"""

from __future__ import annotations

from typing import Any

from climb.climb_errors import SpanError

_ESCAPES = {
    "\t": "'\\t'",
    "\n": "'\\n'",
    "\r": "'\\r'",
    "\b": "'\\b'",
    "\f": "'\\f'",
    "'": "'\\''",
}


class Span:
    """An immutable range of the source text.

    Attributes:
        begin (int): Offset of the first character.
        length (int): Number of characters covered, never negative.
    """

    __slots__ = ("begin", "length")

    def __init__(self, begin: int, length: int) -> None:
        if length < 0:
            raise ValueError(f"span length negative: {length}")
        object.__setattr__(self, "begin", begin)
        object.__setattr__(self, "length", length)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Span is immutable")

    @classmethod
    def eof(cls, source: str) -> Span:
        """The empty span just past the last character of `source`."""
        return cls(len(source), 0)

    @classmethod
    def between(cls, begin: int, end: int) -> Span:
        return cls(begin, end - begin)

    @property
    def end(self) -> int:
        return self.begin + self.length

    def text(self, source: str) -> str:
        return source[self.begin : self.end]

    def __repr__(self) -> str:
        return f"Span({self.begin}, {self.length})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Span)
            and self.begin == other.begin
            and self.length == other.length
        )

    def __hash__(self) -> int:
        return hash((self.begin, self.length))


def escape_char(c: str) -> str:
    """Quotes a single character for use inside an error message.

    Control characters with a conventional escape use it, printable ASCII and
    any letter or digit pass through, everything else becomes `'\\uXXXX'`.
    """
    if c in _ESCAPES:
        return _ESCAPES[c]
    if "!" <= c <= "~" or c.isalpha() or c.isdecimal():
        return f"'{c}'"
    return f"'\\u{ord(c):04x}'"


def render_span(source: str, span: Span) -> str:
    """Renders the source line containing `span` with a caret underline below it.

    Args:
        source: The complete original source text.
        span: The range to underline. A span starting at `len(source)` (end of
            input) is shown under the last line.

    Returns:
        Two lines joined by a newline: the source line, then the underline.
        Tabs before the span are kept so the carets stay aligned.
    """
    anchor = min(span.begin, len(source) - 1)
    if anchor < 0:
        anchor = 0
    line_begin = source.rfind("\n", 0, anchor) + 1
    line_end = source.find("\n", anchor)
    if line_end < 0:
        line_end = len(source)
    line = source[line_begin:line_end]

    prefix = "".join(
        "\t" if ch == "\t" else " " for ch in source[line_begin : span.begin]
    )
    underline = "^"
    if span.length > 1:
        underline += "~" * (span.length - 2) + "^"
    return f"{line}\n{prefix}{underline}"


def format_error(source: str, error: SpanError) -> str:
    """Formats `error` the way the driver prints it: message, line, underline."""
    return f"error: {error.message}\n{render_span(source, error.span)}"


__all__ = ["Span", "escape_char", "format_error", "render_span"]
