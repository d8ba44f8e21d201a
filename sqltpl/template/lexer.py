"""
Scanner for SQL templates.

Splits the template into literal spans and {{ ... }} directive bodies,
line by line. Directive contents are not interpreted here.
"""

from __future__ import annotations

from typing import Iterator, List

from .errors import UnterminatedDirectiveError
from .tokens import Token

OPEN = "{{"
CLOSE = "}}"


class TemplateLexer:
    """
    Line-oriented template scanner.

    Every line except the last keeps its line break at the end of its final
    literal token, so words on adjacent lines stay separated in the output.
    Indentation of continuation lines is dropped.
    """

    def __init__(self, text: str):
        self.text = text.replace("\r\n", "\n")

    def tokenize(self) -> List[Token]:
        """
        Scans the whole template.

        Returns:
            Tokens in source order; literal tokens may be empty

        Raises:
            UnterminatedDirectiveError: '{{' without '}}' on the same line
        """
        return list(self.iter_tokens())

    def iter_tokens(self) -> Iterator[Token]:
        lines = self.text.split("\n")
        last = len(lines) - 1
        for index, line in enumerate(lines):
            if index:
                # the previous line break already separates this line
                line = line.lstrip(" \t")
            yield from self._scan_line(line, index + 1, index < last)

    def _scan_line(self, line: str, line_no: int, has_break: bool) -> Iterator[Token]:
        rest = line
        while True:
            start = rest.find(OPEN)
            if start == -1:
                yield Token(False, rest + ("\n" if has_break else ""), line_no)
                return
            yield Token(False, rest[:start], line_no)
            rest = rest[start + len(OPEN):]
            end = rest.find(CLOSE)
            if end == -1:
                raise UnterminatedDirectiveError(line=line_no)
            yield Token(True, rest[:end].strip(), line_no)
            rest = rest[end + len(CLOSE):]


def tokenize_template(text: str) -> List[Token]:
    """
    Convenience wrapper around TemplateLexer.

    Raises:
        UnterminatedDirectiveError: On a directive left open at end of line
    """
    return TemplateLexer(text).tokenize()


__all__ = ["TemplateLexer", "tokenize_template", "OPEN", "CLOSE"]
