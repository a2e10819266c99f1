"""Decoding of quoted literals and escape sequences in grammar files."""

from __future__ import annotations

import re

_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "'": "'",
    "\\": "\\",
    "-": "-",
}

_ESCAPE = re.compile(
    r"\\(x[0-9a-fA-F]{2}|u[0-9a-fA-F]{4}|U[0-9a-fA-F]{8}|.?)",
    re.DOTALL,
)


def _replace(match: re.Match[str]) -> str:
    seq = match.group(1)
    if seq in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[seq]
    if len(seq) > 1 and seq[0] in "xuU":
        return chr(int(seq[1:], 16))
    raise ValueError(f"invalid escape sequence: \\{seq}")


def unescape(text: str) -> str:
    """Return ``text`` with all escape sequences replaced by their characters.

    Raises ValueError on a malformed escape sequence.
    """
    return _ESCAPE.sub(_replace, text)


def fix_literal(text: str) -> str:
    """Strip the surrounding quotes from a literal and unescape its body."""
    if len(text) < 2:
        raise ValueError(f"literal too short: {text!r}")
    return unescape(text[1:-1])