"""
Placeholder extraction for literal SQL spans.

Recognized forms, most specific first:

    \\@       escaped sigil, stays literal, no binding
    @@table   current table of the query
    @@name    raw SQL expression taken from a variable
    @name     plain bind value

Every placeholder is replaced with the positional marker '?' and yields one
Bind in source order. Escapes are kept escaped in the extracted text, which
makes extraction idempotent; back ends turn them into plain '@' when emitting.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import List, Tuple

MARKER = "?"

_IDENT = r"[A-Za-z0-9_]+(?:\.[A-Za-z0-9_]+)*"

_PLACEHOLDER_RE = re.compile(
    r"(?P<escape>\\@+)"
    r"|(?P<table>@@table)(?!\w)(?!\.\w)"
    rf"|@@(?P<expr>{_IDENT})"
    rf"|@(?P<value>{_IDENT})"
)

_ESCAPE_RE = re.compile(r"\\(@+)")


class BindKind(enum.Enum):
    """What a positional marker is bound to."""
    TABLE = "table"     # current-table sentinel
    EXPR = "expr"       # raw SQL fragment
    VALUE = "value"     # scalar value


@dataclass(frozen=True)
class Bind:
    """
    Bind expression of one positional marker.

    `source` is the host-language expression exactly as written after the
    sigils (empty for the table sentinel).
    """
    kind: BindKind
    source: str = ""

    def __str__(self) -> str:
        if self.kind is BindKind.TABLE:
            return "@@table"
        if self.kind is BindKind.EXPR:
            return f"@@{self.source}"
        return f"@{self.source}"


TABLE = Bind(BindKind.TABLE)


def extract_placeholders(text: str) -> Tuple[str, Tuple[Bind, ...]]:
    """
    Rewrites placeholders of a literal span to positional markers.

    Args:
        text: Literal template text

    Returns:
        (text with markers, binds in source order)
    """
    binds: List[Bind] = []

    def _replace(match: re.Match) -> str:
        if match.group("escape"):
            return match.group(0)
        if match.group("table"):
            binds.append(TABLE)
        elif match.group("expr"):
            binds.append(Bind(BindKind.EXPR, match.group("expr")))
        else:
            binds.append(Bind(BindKind.VALUE, match.group("value")))
        return MARKER

    return _PLACEHOLDER_RE.sub(_replace, text), tuple(binds)


def unescape(text: str) -> str:
    """Turns escaped sigils of extracted text into literal ones."""
    return _ESCAPE_RE.sub(r"\1", text)


__all__ = ["MARKER", "BindKind", "Bind", "TABLE", "extract_placeholders", "unescape"]
