"""
Syntax errors of the SQL template language.

Every error carries the 1-based line of the offending construct. All of them
are fatal for the template being compiled and leave other templates untouched.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import SqlTplUserError


@dataclass
class TemplateSyntaxError(SqlTplUserError):
    """Base class for template syntax errors."""
    line: int

    @property
    def message(self) -> str:
        return "invalid template"

    def __str__(self) -> str:
        return f"line {self.line}: {self.message}"


@dataclass
class UnterminatedDirectiveError(TemplateSyntaxError):
    """'{{' without a closing '}}' on the same line."""

    @property
    def message(self) -> str:
        return "missing }}"


@dataclass
class UnknownDirectiveError(TemplateSyntaxError):
    """Directive keyword is not recognized or lacks its expression."""
    directive: str
    reason: str = ""

    @property
    def message(self) -> str:
        if self.reason:
            return f"{self.reason}: {{{{{self.directive}}}}}"
        return f"unknown directive: {self.directive!r}"


@dataclass
class ElseWithoutIfError(TemplateSyntaxError):
    """{{else}} with no open {{if}}."""

    @property
    def message(self) -> str:
        return "else without if"


@dataclass
class ElseIfWithoutIfError(TemplateSyntaxError):
    """{{else if}} with no open {{if}}."""

    @property
    def message(self) -> str:
        return "else if without an open if block"


@dataclass
class DuplicateElseError(TemplateSyntaxError):
    """Second {{else}} in the same if block."""

    @property
    def message(self) -> str:
        return "multiple else in same if block"


@dataclass
class ElseIfAfterElseError(TemplateSyntaxError):
    """{{else if}} following {{else}}."""

    @property
    def message(self) -> str:
        return "else if after else"


@dataclass
class UnmatchedEndError(TemplateSyntaxError):
    """{{end}} with nothing open."""

    @property
    def message(self) -> str:
        return "unmatched end"


@dataclass
class UnclosedBlockError(TemplateSyntaxError):
    """Template ended while blocks were still open."""
    directive: str
    open_blocks: int = 1

    @property
    def message(self) -> str:
        extra = f" ({self.open_blocks} blocks open)" if self.open_blocks > 1 else ""
        return f"unclosed {{{{{self.directive}}}}} block at end of template{extra}"


__all__ = [
    "TemplateSyntaxError",
    "UnterminatedDirectiveError",
    "UnknownDirectiveError",
    "ElseWithoutIfError",
    "ElseIfWithoutIfError",
    "DuplicateElseError",
    "ElseIfAfterElseError",
    "UnmatchedEndError",
    "UnclosedBlockError",
]
