"""
Python back end.

Prints statements over a list of string chunks and a parameter list. The
generated code relies on names from `sqltpl.runtime` (see RUNTIME_IMPORT).
Conditions and loop headers are Python source taken verbatim from the
template: `{{for item in items}}` becomes `for item in items:`.
"""

from __future__ import annotations

from typing import List, Sequence

from ..ir import (
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
)
from .base import BaseBackend
from ...template.placeholders import Bind, BindKind

RUNTIME_IMPORT = "from sqltpl.runtime import CURRENT_TABLE, Expr, splice"


class PythonBackend(BaseBackend):
    name = "python"
    indent_unit = "    "

    def __init__(self, buffer: str = "sb", params: str = "params"):
        super().__init__(buffer=buffer, params=params)
        # statements written into each open block, innermost last
        self._counts: List[int] = []

    def render(self, program) -> str:
        self._counts = []
        return super().render(program)

    def line(self, text: str = "") -> None:
        super().line(text)
        if text and self._counts:
            self._counts[-1] += 1

    def _open_block(self, header: str) -> None:
        self.line(header)
        self.indent()
        self._counts.append(0)

    def _close_block(self) -> None:
        if not self._counts.pop():
            super().line("pass")
        self.dedent()

    def quote(self, text: str) -> str:
        return repr(text)

    def format_bind(self, bind: Bind) -> str:
        if bind.kind is BindKind.TABLE:
            return "CURRENT_TABLE"
        if bind.kind is BindKind.EXPR:
            return f"Expr({bind.source})"
        return bind.source

    def wrapper_names(self, depth: int) -> tuple[str, str]:
        return f"_tmp{depth}", f"_tmp{depth}_params"

    def declare(self, instr: DeclareBuffers) -> None:
        self.line(f"{self.buffer} = []")
        self.line(f"{self.params} = []  # expected size: {instr.capacity}")

    def append_literal(self, instr: AppendLiteral) -> None:
        buffer, _ = self.target
        self.line(f"{buffer}.append({self.quote(instr.text)})")

    def append_params(self, instr: AppendParams) -> None:
        _, params = self.target
        values = [self.format_bind(b) for b in instr.binds]
        if len(values) == 1:
            self.line(f"{params}.append({values[0]})")
        else:
            self.line(f"{params}.extend(({', '.join(values)}))")

    def begin_branch(self, instr: BeginBranch) -> None:
        if instr.kind is BranchKind.IF:
            self._open_block(f"if {instr.condition}:")
            return
        self._close_block()
        if instr.kind is BranchKind.ELSE_IF:
            self._open_block(f"elif {instr.condition}:")
        else:
            self._open_block("else:")

    def end_branch(self, instr: EndBranch) -> None:
        self._close_block()

    def begin_loop(self, instr: BeginLoop) -> None:
        self._open_block(f"for {instr.header}:")

    def end_loop(self, instr: EndLoop) -> None:
        self._close_block()

    def begin_wrapper(self, instr: BeginWrapper) -> None:
        buffer, params = self.wrapper_names(instr.depth)
        self.line(f"{buffer} = []")
        self.line(f"{params} = []")
        self.push_target(buffer, params)

    def end_wrapper(self, instr: EndWrapper) -> None:
        buffer, params = self.pop_target()
        outer_buffer, outer_params = self.target
        self.line(f"splice({instr.keyword!r}, {buffer}, {params}, {outer_buffer}, {outer_params})")


def render_function(name: str, args: Sequence[str], body: str, *, buffer: str = "sb",
                    params: str = "params", with_import: bool = True) -> str:
    """
    Wraps a generated body into a function returning (sql, params).
    """
    lines: List[str] = []
    if with_import:
        lines.append(RUNTIME_IMPORT)
        lines.append("")
        lines.append("")
    lines.append(f"def {name}({', '.join(args)}):")
    for body_line in body.splitlines():
        lines.append(f"    {body_line}" if body_line else "")
    lines.append(f'    return "".join({buffer}), {params}')
    return "\n".join(lines) + "\n"


__all__ = ["PythonBackend", "RUNTIME_IMPORT", "render_function"]
