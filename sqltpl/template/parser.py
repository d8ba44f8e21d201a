"""
Block parser for SQL templates.

Turns the scanner token stream into an AST. Open blocks live on an explicit
stack of frames; a frame is frozen into an immutable node when its {{end}}
is reached and attached to the body that was active in the enclosing frame.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from .errors import (
    DuplicateElseError,
    ElseIfAfterElseError,
    ElseIfWithoutIfError,
    ElseWithoutIfError,
    UnclosedBlockError,
    UnknownDirectiveError,
    UnmatchedEndError,
)
from .lexer import TemplateLexer
from .nodes import (
    WRAPPER_KEYWORDS,
    Branch,
    ConditionalNode,
    LoopNode,
    Node,
    TemplateAST,
    TextNode,
    WrapperNode,
)
from .placeholders import extract_placeholders
from .tokens import Token

_LOG = logging.getLogger("sqltpl.template.parser")

_ELSE_IF_RE = re.compile(r"else\s+if(?:\s+(?P<cond>.*))?$", re.DOTALL)
_KEYWORD_RE = re.compile(r"(?P<keyword>\w+)(?:\s+(?P<rest>.*))?$", re.DOTALL)

# Frame kinds
_IF = "if"
_FOR = "for"


@dataclass
class _Frame:
    """
    Block under construction.

    For `if` frames `bodies` holds one list per branch and `branch_index`
    points at the branch being filled; after {{else}} content goes to
    `else_body` instead.
    """
    kind: str
    line: int
    header: str = ""
    conditions: List[str] = field(default_factory=list)
    bodies: List[List[Node]] = field(default_factory=lambda: [[]])
    branch_index: int = 0
    else_body: Optional[List[Node]] = None

    @property
    def in_else(self) -> bool:
        return self.else_body is not None

    def active_body(self) -> List[Node]:
        if self.else_body is not None:
            return self.else_body
        return self.bodies[self.branch_index]

    def freeze(self) -> Node:
        if self.kind == _IF:
            branches = tuple(
                Branch(condition=cond, body=tuple(body))
                for cond, body in zip(self.conditions, self.bodies)
            )
            else_body = tuple(self.else_body) if self.else_body is not None else None
            return ConditionalNode(branches=branches, else_body=else_body, line=self.line)
        if self.kind == _FOR:
            return LoopNode(header=self.header, body=tuple(self.bodies[0]), line=self.line)
        return WrapperNode(keyword=self.kind, body=tuple(self.bodies[0]), line=self.line)


class TemplateParser:
    """
    Stack-based parser over scanner tokens.
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self._root: List[Node] = []
        self._stack: List[_Frame] = []

    def parse(self) -> TemplateAST:
        """
        Parses the token stream.

        Returns:
            Root nodes of the template

        Raises:
            TemplateSyntaxError: On any structural error (see errors module)
        """
        self._root = []
        self._stack = []

        for token in self.tokens:
            if token.is_directive:
                self._handle_directive(token.text, token.line)
            else:
                self._handle_text(token)

        if self._stack:
            outer = self._stack[0]
            raise UnclosedBlockError(
                line=outer.line,
                directive=outer.kind,
                open_blocks=len(self._stack),
            )

        _LOG.debug("parsed %d tokens into %d root nodes", len(self.tokens), len(self._root))
        return tuple(self._root)

    # -------------------- text --------------------

    def _handle_text(self, token: Token) -> None:
        text = token.text
        if not text:
            return
        target = self._target()
        previous = target[-1] if target and isinstance(target[-1], TextNode) else None
        if not text.strip():
            # whitespace between directives only separates words
            if previous is not None and previous.content[-1:].isspace():
                return
            text = " "
        content, binds = extract_placeholders(text)
        if previous is not None:
            # consecutive spans of one body (a line break between them)
            target[-1] = TextNode(
                content=previous.content + content,
                binds=previous.binds + binds,
                line=previous.line,
            )
            return
        target.append(TextNode(content=content, binds=binds, line=token.line))

    def _target(self) -> List[Node]:
        """Body that receives new nodes: the root or the top frame's active body."""
        if not self._stack:
            return self._root
        return self._stack[-1].active_body()

    # -------------------- directives --------------------

    def _handle_directive(self, directive: str, line: int) -> None:
        if directive in WRAPPER_KEYWORDS:
            self._stack.append(_Frame(kind=directive, line=line))
            return
        if directive == "end":
            self._handle_end(line)
            return
        if directive == "else":
            self._handle_else(line)
            return

        else_if = _ELSE_IF_RE.match(directive)
        if else_if:
            self._handle_else_if(self._require_expr(directive, else_if.group("cond"), line), line)
            return

        match = _KEYWORD_RE.match(directive)
        keyword = match.group("keyword") if match else ""
        if keyword == _IF:
            cond = self._require_expr(directive, match.group("rest"), line)
            self._stack.append(_Frame(kind=_IF, line=line, conditions=[cond]))
        elif keyword == _FOR:
            header = self._require_expr(directive, match.group("rest"), line)
            self._stack.append(_Frame(kind=_FOR, line=line, header=header))
        else:
            raise UnknownDirectiveError(line=line, directive=directive)

    @staticmethod
    def _require_expr(directive: str, expr: Optional[str], line: int) -> str:
        expr = (expr or "").strip()
        if not expr:
            raise UnknownDirectiveError(line=line, directive=directive, reason="missing expression")
        return expr

    def _open_conditional(self) -> Optional[_Frame]:
        if self._stack and self._stack[-1].kind == _IF:
            return self._stack[-1]
        return None

    def _handle_else_if(self, cond: str, line: int) -> None:
        frame = self._open_conditional()
        if frame is None:
            raise ElseIfWithoutIfError(line=line)
        if frame.in_else:
            raise ElseIfAfterElseError(line=line)
        frame.conditions.append(cond)
        frame.bodies.append([])
        frame.branch_index = len(frame.bodies) - 1

    def _handle_else(self, line: int) -> None:
        frame = self._open_conditional()
        if frame is None:
            raise ElseWithoutIfError(line=line)
        if frame.in_else:
            raise DuplicateElseError(line=line)
        frame.else_body = []

    def _handle_end(self, line: int) -> None:
        if not self._stack:
            raise UnmatchedEndError(line=line)
        frame = self._stack.pop()
        node = frame.freeze()
        if isinstance(node, WrapperNode) and not node.body:
            _LOG.warning("empty {{%s}} block at line %d renders nothing", node.keyword, frame.line)
        self._target().append(node)


def parse_template(text: str) -> TemplateAST:
    """
    Convenience function: scan and parse template text.

    Raises:
        TemplateSyntaxError: On lexical or structural errors
    """
    return TemplateParser(TemplateLexer(text).tokenize()).parse()


__all__ = ["TemplateParser", "parse_template"]
