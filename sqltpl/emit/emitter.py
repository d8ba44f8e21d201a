"""
Emitter: template AST -> instruction list.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from ..template.nodes import (
    WRAPPER_KEYWORDS,
    ConditionalNode,
    LoopNode,
    Node,
    TemplateAST,
    TextNode,
    WrapperNode,
    children,
)
from ..template.placeholders import unescape
from .ir import (
    AppendLiteral,
    AppendParams,
    BeginBranch,
    BeginLoop,
    BeginWrapper,
    BranchKind,
    DeclareBuffers,
    EndBranch,
    EndLoop,
    EndWrapper,
    Instruction,
)

_LOG = logging.getLogger("sqltpl.emit")

# Assumed number of iterations of a loop when sizing the parameter list
DEFAULT_LOOP_MULTIPLIER = 4


class UnsupportedWrapperError(AssertionError):
    """Wrapper keyword the emitter has no rendering for (parser bug)."""
    pass


def estimate_capacity(nodes: Tuple[Node, ...], loop_multiplier: int = DEFAULT_LOOP_MULTIPLIER) -> int:
    """
    Static guess of the number of parameters.

    Binds outside loops count once, binds inside loops count
    `loop_multiplier` times per enclosing loop. All conditional arms are
    counted.
    """
    def _count(body: Tuple[Node, ...], factor: int) -> int:
        total = 0
        for node in body:
            if isinstance(node, TextNode):
                total += len(node.binds) * factor
            elif isinstance(node, LoopNode):
                total += _count(node.body, factor * loop_multiplier)
            else:
                for child in children(node):
                    total += _count(child, factor)
        return total

    return _count(nodes, 1)


class Emitter:
    """
    Walks the AST depth-first and produces instructions.

    All text and parameters target the innermost open wrapper, or the main
    buffer outside of wrappers.
    """

    def __init__(self, loop_multiplier: int = DEFAULT_LOOP_MULTIPLIER):
        self.loop_multiplier = loop_multiplier
        self._out: List[Instruction] = []
        self._depth = 0

    def emit(self, ast: TemplateAST) -> List[Instruction]:
        capacity = estimate_capacity(ast, self.loop_multiplier)
        self._out = [DeclareBuffers(capacity=capacity)]
        self._depth = 0
        self._emit_body(ast)
        _LOG.debug("emitted %d instructions, params capacity %d", len(self._out), capacity)
        return self._out

    def _emit_body(self, body: Tuple[Node, ...]) -> None:
        for node in body:
            self._emit_node(node)

    def _emit_node(self, node: Node) -> None:
        if isinstance(node, TextNode):
            self._out.append(AppendLiteral(text=unescape(node.content)))
            if node.binds:
                self._out.append(AppendParams(binds=node.binds))
        elif isinstance(node, LoopNode):
            self._out.append(BeginLoop(header=node.header))
            self._emit_body(node.body)
            self._out.append(EndLoop())
        elif isinstance(node, ConditionalNode):
            self._emit_conditional(node)
        elif isinstance(node, WrapperNode):
            self._emit_wrapper(node)
        else:
            raise TypeError(f"Unknown template node: {type(node).__name__}")

    def _emit_conditional(self, node: ConditionalNode) -> None:
        for index, branch in enumerate(node.branches):
            kind = BranchKind.IF if index == 0 else BranchKind.ELSE_IF
            self._out.append(BeginBranch(kind=kind, condition=branch.condition))
            self._emit_body(branch.body)
        if node.else_body is not None:
            self._out.append(BeginBranch(kind=BranchKind.ELSE))
            self._emit_body(node.else_body)
        self._out.append(EndBranch())

    def _emit_wrapper(self, node: WrapperNode) -> None:
        if node.keyword not in WRAPPER_KEYWORDS:
            raise UnsupportedWrapperError(f"unsupported wrapper {node.keyword!r} in sql template")
        self._depth += 1
        self._out.append(BeginWrapper(keyword=node.keyword, depth=self._depth))
        self._emit_body(node.body)
        self._out.append(EndWrapper(keyword=node.keyword, depth=self._depth))
        self._depth -= 1


def emit_program(ast: TemplateAST, loop_multiplier: int = DEFAULT_LOOP_MULTIPLIER) -> List[Instruction]:
    return Emitter(loop_multiplier).emit(ast)


__all__ = [
    "DEFAULT_LOOP_MULTIPLIER",
    "UnsupportedWrapperError",
    "estimate_capacity",
    "Emitter",
    "emit_program",
]
