"""
AST nodes of SQL templates.

A closed set of immutable node classes. Children are stored in tuples and
are owned by their parent node only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union

from .placeholders import Bind

WHERE = "where"
SET = "set"
WRAPPER_KEYWORDS = (WHERE, SET)


@dataclass(frozen=True)
class TextNode:
    """
    Literal SQL span.

    `content` already has its placeholders replaced with '?';
    `binds` holds the matching bind expressions in order.
    """
    content: str
    binds: Tuple[Bind, ...] = ()
    line: int = 0


@dataclass(frozen=True)
class WrapperNode:
    """{{where}} / {{set}} block: prefixes and trims its rendered body."""
    keyword: str
    body: Tuple[Node, ...] = ()
    line: int = 0


@dataclass(frozen=True)
class LoopNode:
    """{{for header}} block; the header is reproduced verbatim."""
    header: str
    body: Tuple[Node, ...] = ()
    line: int = 0


@dataclass(frozen=True)
class Branch:
    """One `if` / `else if` arm."""
    condition: str
    body: Tuple[Node, ...] = ()


@dataclass(frozen=True)
class ConditionalNode:
    """
    {{if}} ... {{else if}} ... {{else}} ... {{end}} chain.

    branches[0] is the `if` arm, further entries are `else if` arms in source
    order. `else_body` is None when there was no {{else}}.
    """
    branches: Tuple[Branch, ...]
    else_body: Optional[Tuple[Node, ...]] = None
    line: int = 0


Node = Union[TextNode, WrapperNode, LoopNode, ConditionalNode]

# Root node sequence of one template
TemplateAST = Tuple[Node, ...]


def children(node: Node) -> Iterator[Tuple[Node, ...]]:
    """Child bodies of a node in source order."""
    if isinstance(node, (WrapperNode, LoopNode)):
        yield node.body
    elif isinstance(node, ConditionalNode):
        for branch in node.branches:
            yield branch.body
        if node.else_body is not None:
            yield node.else_body


def walk(nodes: Tuple[Node, ...]) -> Iterator[Node]:
    """Depth-first, left-to-right traversal."""
    for node in nodes:
        yield node
        for body in children(node):
            yield from walk(body)


def collect_binds(nodes: Tuple[Node, ...]) -> Tuple[Bind, ...]:
    """All bind expressions of the tree in source order."""
    binds = []
    for node in walk(nodes):
        if isinstance(node, TextNode):
            binds.extend(node.binds)
    return tuple(binds)


__all__ = [
    "WHERE",
    "SET",
    "WRAPPER_KEYWORDS",
    "TextNode",
    "WrapperNode",
    "LoopNode",
    "Branch",
    "ConditionalNode",
    "Node",
    "TemplateAST",
    "children",
    "walk",
    "collect_binds",
]
