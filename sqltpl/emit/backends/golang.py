"""
Go back end.

Prints gorm-flavoured statements that build the query into a
strings.Builder and a []any parameter slice. Conditions and loop headers are
Go source taken verbatim from the template.

The output is a snippet spliced into a method body, so the trimming regexps
of {{where}} / {{set}} are compiled once at its top rather than per use.
"""

from __future__ import annotations

from typing import List

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
    Instruction,
)
from .base import BaseBackend
from ...runtime import SET_TRIM_PATTERN, WHERE_TRIM_PATTERN
from ...template.placeholders import Bind, BindKind

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

# keyword -> (trim pattern, regexp variable, clause prefix)
_TRIM = {
    "where": (WHERE_TRIM_PATTERN, "trimWhere", "WHERE "),
    "set": (SET_TRIM_PATTERN, "trimSet", "SET "),
}

# Characters Go code treats as trailing whitespace of the enclosing buffer
_GO_SPACE = r'" \t\n\r\v\f"'


def go_quote(text: str) -> str:
    """Interpreted Go string literal for text."""
    out = []
    for ch in text:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\x{ord(ch):02x}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


class GoBackend(BaseBackend):
    name = "go"

    def __init__(self, buffer: str = "sb", params: str = "params"):
        super().__init__(buffer=buffer, params=params)
        # wrapper keywords of the program being rendered, in order of first use
        self._trims: List[str] = []

    def render(self, program: List[Instruction]) -> str:
        self._trims = []
        for instr in program:
            if isinstance(instr, BeginWrapper) and instr.keyword not in self._trims:
                self._trims.append(instr.keyword)
        return super().render(program)

    def quote(self, text: str) -> str:
        return go_quote(text)

    def format_bind(self, bind: Bind) -> str:
        if bind.kind is BindKind.TABLE:
            return "clause.Table{Name: clause.CurrentTable}"
        if bind.kind is BindKind.EXPR:
            return f"clause.Expr{{SQL: {bind.source}}}"
        return bind.source

    def declare(self, instr: DeclareBuffers) -> None:
        self.line(f"var {self.buffer} strings.Builder")
        self.line(f"{self.params} := make([]any, 0, {instr.capacity})")
        for keyword in self._trims:
            pattern, var, _ = _TRIM[keyword]
            self.line(f"{var} := regexp.MustCompile(`{pattern}`)")
        self.line()

    def append_literal(self, instr: AppendLiteral) -> None:
        buffer, _ = self.target
        self.line(f"{buffer}.WriteString({self.quote(instr.text)})")

    def append_params(self, instr: AppendParams) -> None:
        _, params = self.target
        values = ", ".join(self.format_bind(b) for b in instr.binds)
        self.line(f"{params} = append({params}, {values})")

    def begin_branch(self, instr: BeginBranch) -> None:
        if instr.kind is BranchKind.IF:
            self.line(f"if {instr.condition} {{")
            self.indent()
            return
        self.dedent()
        if instr.kind is BranchKind.ELSE_IF:
            self.line(f"}} else if {instr.condition} {{")
        else:
            self.line("} else {")
        self.indent()

    def end_branch(self, instr: EndBranch) -> None:
        self.dedent()
        self.line("}")

    def begin_loop(self, instr: BeginLoop) -> None:
        self.line(f"for {instr.header} {{")
        self.indent()

    def end_loop(self, instr: EndLoop) -> None:
        self.dedent()
        self.line("}")

    def begin_wrapper(self, instr: BeginWrapper) -> None:
        buffer, params = self.wrapper_names(instr.depth)
        self.line("{")
        self.indent()
        self.line(f"var {buffer} strings.Builder")
        self.line(f"var {params} []any")
        self.push_target(buffer, params)

    def end_wrapper(self, instr: EndWrapper) -> None:
        buffer, params = self.pop_target()
        outer_buffer, outer_params = self.target
        _, var, prefix = _TRIM[instr.keyword]
        c = f"c{instr.depth}"
        self.line(f"{c} := strings.TrimSpace({buffer}.String())")
        self.line(f"{c} = strings.TrimSpace({var}.ReplaceAllString({c}, \"\"))")
        self.line(f'if {c} != "" {{')
        self.indent()
        self.line(f"if s := {outer_buffer}.String(); s != \"\" && !strings.ContainsAny(s[len(s)-1:], {_GO_SPACE}) {{")
        self.indent()
        self.line(f'{outer_buffer}.WriteString(" ")')
        self.dedent()
        self.line("}")
        self.line(f"{outer_buffer}.WriteString({self.quote(prefix)})")
        self.line(f"{outer_buffer}.WriteString({c})")
        self.line(f"{outer_params} = append({outer_params}, {params}...)")
        self.dedent()
        self.line("}")
        self.dedent()
        self.line("}")


__all__ = ["GoBackend", "go_quote"]
