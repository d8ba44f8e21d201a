"""
Lexical types.

The scanner only distinguishes literal text from directive bodies;
directive contents are interpreted by the parser.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Token:
    """
    Scanner token with the source line for error reporting.
    """
    is_directive: bool
    text: str
    line: int           # line number (starting from 1)

    def __repr__(self) -> str:
        kind = "DIRECTIVE" if self.is_directive else "TEXT"
        return f"Token({kind}, {self.text!r}, line {self.line})"


__all__ = ["Token"]
