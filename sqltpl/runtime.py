"""
Runtime support for procedures generated by the python back end.

Generated code imports the names below; the trimming patterns are shared
with the go back end so both targets trim wrapper bodies the same way.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, List

# One leading and one trailing AND/OR, case-insensitive, whitespace-delimited
WHERE_TRIM_PATTERN = r"(?i)^\s*(?:and|or)(?:\s+|$)|(?:^|\s+)(?:and|or)\s*$"
# One leading and one trailing comma
SET_TRIM_PATTERN = r"^\s*,\s*|\s*,\s*$"

_WHERE_TRIM_RE = re.compile(WHERE_TRIM_PATTERN)
_SET_TRIM_RE = re.compile(SET_TRIM_PATTERN)


class _CurrentTable:
    """Placeholder for the table of the query being built."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CURRENT_TABLE"

    def __reduce__(self):
        return (_CurrentTable, ())


CURRENT_TABLE = _CurrentTable()


@dataclass(frozen=True)
class Expr:
    """Raw SQL fragment bound to a positional marker (not a scalar value)."""
    sql: Any


def trim_where(text: str) -> str:
    """Trimmed WHERE body without its boundary AND/OR."""
    return _WHERE_TRIM_RE.sub("", text.strip()).strip()


def trim_set(text: str) -> str:
    """Trimmed SET body without its boundary commas."""
    return _SET_TRIM_RE.sub("", text.strip()).strip()


def _needs_separator(chunks: List[str]) -> bool:
    for chunk in reversed(chunks):
        if chunk:
            return not chunk[-1].isspace()
    return False


_TRIMMERS = {
    "where": (trim_where, "WHERE "),
    "set": (trim_set, "SET "),
}


def splice(keyword: str, chunks: List[str], chunk_params: List[Any],
           target: List[str], target_params: List[Any]) -> bool:
    """
    Closes a {{where}} / {{set}} sub-buffer.

    The accumulated text is trimmed; when something is left it is prefixed
    with the clause keyword and appended, with its parameters, to the
    enclosing buffer. A space separates it from preceding text that does not
    already end in whitespace.

    Returns:
        True if the clause was written
    """
    try:
        trim, prefix = _TRIMMERS[keyword]
    except KeyError:
        raise AssertionError(f"unsupported wrapper {keyword!r} in sql template") from None
    body = trim("".join(chunks))
    if not body:
        return False
    if _needs_separator(target):
        target.append(" ")
    target.append(prefix)
    target.append(body)
    target_params.extend(chunk_params)
    return True


__all__ = [
    "WHERE_TRIM_PATTERN",
    "SET_TRIM_PATTERN",
    "CURRENT_TABLE",
    "Expr",
    "trim_where",
    "trim_set",
    "splice",
]
