from __future__ import annotations

from typing import Callable, Dict, List

from ..ir import (
    AppendLiteral,
    AppendParams,
    BeginBranch,
    BeginLoop,
    BeginWrapper,
    DeclareBuffers,
    EndBranch,
    EndLoop,
    EndWrapper,
    Instruction,
)
from ...template.placeholders import Bind

__all__ = ["BaseBackend"]


class BaseBackend:
    """
    Base class of code back ends.

    Walks an instruction list and prints target-language statements.
    Subclasses implement one hook per instruction type and the bind and
    literal formatting of their language.
    """
    #: Back end name used in configuration and CLI (go, python, …)
    name: str = "base"
    #: One indentation level
    indent_unit: str = "\t"

    def __init__(self, buffer: str = "sb", params: str = "params"):
        self.buffer = buffer
        self.params = params
        self._lines: List[str] = []
        self._level = 0
        # innermost first: (buffer, params) the statements currently target
        self._targets: List[tuple[str, str]] = []

    # --- driver -------------------------------------------------------

    def render(self, program: List[Instruction]) -> str:
        """Prints the instruction list as a block of statements."""
        self._lines = []
        self._level = 0
        self._targets = [(self.buffer, self.params)]
        handlers: Dict[type, Callable] = {
            DeclareBuffers: self.declare,
            AppendLiteral: self.append_literal,
            AppendParams: self.append_params,
            BeginBranch: self.begin_branch,
            EndBranch: self.end_branch,
            BeginLoop: self.begin_loop,
            EndLoop: self.end_loop,
            BeginWrapper: self.begin_wrapper,
            EndWrapper: self.end_wrapper,
        }
        for instruction in program:
            handler = handlers.get(type(instruction))
            if handler is None:
                raise TypeError(f"Unknown instruction: {instruction!r}")
            handler(instruction)
        return "\n".join(self._lines) + "\n"

    # --- helpers for subclasses --------------------------------------

    def line(self, text: str = "") -> None:
        self._lines.append(self.indent_unit * self._level + text if text else "")

    def indent(self) -> None:
        self._level += 1

    def dedent(self) -> None:
        self._level -= 1

    @property
    def target(self) -> tuple[str, str]:
        """(buffer, params) names the current statements write to."""
        return self._targets[-1]

    def push_target(self, buffer: str, params: str) -> None:
        self._targets.append((buffer, params))

    def pop_target(self) -> tuple[str, str]:
        return self._targets.pop()

    def wrapper_names(self, depth: int) -> tuple[str, str]:
        """Sub-buffer names of a wrapper at the given nesting depth."""
        return f"tmp{depth}", f"tmp{depth}Params"

    # --- hooks --------------------------------------------------------

    def quote(self, text: str) -> str:
        raise NotImplementedError

    def format_bind(self, bind: Bind) -> str:
        raise NotImplementedError

    def declare(self, instr: DeclareBuffers) -> None:
        raise NotImplementedError

    def append_literal(self, instr: AppendLiteral) -> None:
        raise NotImplementedError

    def append_params(self, instr: AppendParams) -> None:
        raise NotImplementedError

    def begin_branch(self, instr: BeginBranch) -> None:
        raise NotImplementedError

    def end_branch(self, instr: EndBranch) -> None:
        raise NotImplementedError

    def begin_loop(self, instr: BeginLoop) -> None:
        raise NotImplementedError

    def end_loop(self, instr: EndLoop) -> None:
        raise NotImplementedError

    def begin_wrapper(self, instr: BeginWrapper) -> None:
        raise NotImplementedError

    def end_wrapper(self, instr: EndWrapper) -> None:
        raise NotImplementedError
