"""Shell-like splitting and unquoting of command strings."""

from __future__ import annotations


class ShellQuoteError(ValueError):
    """Raised when a string cannot be split or unquoted as a shell would."""


class MismatchedQuotesError(ShellQuoteError):
    """Raised when the input has an unterminated quote."""


class TrailingBackslashError(ShellQuoteError):
    """Raised when the input ends with an escaping backslash."""


def _check_state(
    operation: str, text: str, in_double: bool, in_single: bool, escaped: bool
) -> None:
    if in_double or in_single:
        raise MismatchedQuotesError(f"{operation} `{text!r}`: mismatched quotes")
    if escaped:
        raise TrailingBackslashError(f"{operation} `{text!r}`: trailing backslash")


def split(text: str) -> list[str]:
    """Split *text* on spaces outside quotes, removing quoting and escapes.

    Every unquoted space ends a segment, so consecutive spaces yield empty
    segments; a trailing empty segment is dropped.
    """
    segments: list[str] = []
    current: list[str] = []
    in_double = in_single = escaped = False

    for char in text:
        if escaped:
            current.append(char)
            escaped = False
        elif char == "\\" and not in_single:
            escaped = True
        elif char == '"' and not in_single:
            in_double = not in_double
        elif char == "'" and not in_double:
            in_single = not in_single
        elif char == " " and not in_double and not in_single:
            segments.append("".join(current))
            current.clear()
        else:
            current.append(char)

    _check_state("split", text, in_double, in_single, escaped)

    if current:
        segments.append("".join(current))
    return segments


def unquote(text: str) -> str:
    """Remove shell quoting and escapes from *text*.

    Variables and command substitutions are left as they are.
    """
    out: list[str] = []
    in_double = in_single = escaped = False

    for char in text:
        if escaped:
            out.append(char)
            escaped = False
        elif char == "\\":
            if in_single:
                out.append(char)
            else:
                escaped = True
        elif char == '"':
            if in_single:
                out.append(char)
            else:
                in_double = not in_double
        elif char == "'":
            if in_double:
                out.append(char)
            else:
                in_single = not in_single
        else:
            out.append(char)

    _check_state("unquote", text, in_double, in_single, escaped)
    return "".join(out)