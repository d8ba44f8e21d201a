"""
Intermediate instruction list produced by the emitter.

Instructions describe what the generated procedure does, independent of the
target language. Back ends only print them.

Blocks are bracketed: BeginLoop/EndLoop, BeginWrapper/EndWrapper, and a
conditional chain is one or more BeginBranch (IF, then ELSE_IF..., then an
optional ELSE) closed by a single EndBranch.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Tuple, Union

from ..template.placeholders import Bind


class BranchKind(enum.Enum):
    IF = "if"
    ELSE_IF = "else_if"
    ELSE = "else"


@dataclass(frozen=True)
class DeclareBuffers:
    """Output buffer and parameter list; capacity is a static estimate."""
    capacity: int


@dataclass(frozen=True)
class AppendLiteral:
    """Append SQL text (markers included, escapes already resolved)."""
    text: str


@dataclass(frozen=True)
class AppendParams:
    binds: Tuple[Bind, ...]


@dataclass(frozen=True)
class BeginBranch:
    kind: BranchKind
    condition: str = ""


@dataclass(frozen=True)
class EndBranch:
    pass


@dataclass(frozen=True)
class BeginLoop:
    header: str


@dataclass(frozen=True)
class EndLoop:
    pass


@dataclass(frozen=True)
class BeginWrapper:
    """
    Start of a scoped sub-buffer.

    `depth` is the nesting level of wrappers (1 for the outermost) and lets
    back ends give nested sub-buffers distinct names.
    """
    keyword: str
    depth: int


@dataclass(frozen=True)
class EndWrapper:
    keyword: str
    depth: int


Instruction = Union[
    DeclareBuffers,
    AppendLiteral,
    AppendParams,
    BeginBranch,
    EndBranch,
    BeginLoop,
    EndLoop,
    BeginWrapper,
    EndWrapper,
]

OPCODES: Dict[type, str] = {
    DeclareBuffers: "declare",
    AppendLiteral: "literal",
    AppendParams: "params",
    BeginBranch: "begin_branch",
    EndBranch: "end_branch",
    BeginLoop: "begin_loop",
    EndLoop: "end_loop",
    BeginWrapper: "begin_wrapper",
    EndWrapper: "end_wrapper",
}


def _plain(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, Bind):
        return {"kind": value.kind.value, "source": value.source}
    if isinstance(value, tuple):
        return [_plain(v) for v in value]
    return value


def to_dict(instruction: Instruction) -> Dict[str, Any]:
    """JSON-friendly form of an instruction."""
    data: Dict[str, Any] = {"op": OPCODES[type(instruction)]}
    for f in fields(instruction):
        data[f.name] = _plain(getattr(instruction, f.name))
    return data


def dump(program: List[Instruction]) -> List[Dict[str, Any]]:
    return [to_dict(i) for i in program]


__all__ = [
    "BranchKind",
    "DeclareBuffers",
    "AppendLiteral",
    "AppendParams",
    "BeginBranch",
    "EndBranch",
    "BeginLoop",
    "EndLoop",
    "BeginWrapper",
    "EndWrapper",
    "Instruction",
    "OPCODES",
    "to_dict",
    "dump",
]
