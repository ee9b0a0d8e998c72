from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class Span:
    line: int
    col: int


@dataclass(frozen=True)
class Number:
    value: float
    text: str
    span: Span


@dataclass(frozen=True)
class Name:
    name: str
    span: Span


@dataclass(frozen=True)
class Unary:
    op: str  # '-', '+' or '!'
    operand: 'Node'
    span: Span


@dataclass(frozen=True)
class Binary:
    op: str
    left: 'Node'
    right: 'Node'
    span: Span


@dataclass(frozen=True)
class Call:
    func: str
    args: Tuple['Node', ...]
    span: Span


Node = Union[Number, Name, Unary, Binary, Call]


def children(node: Node) -> Tuple[Node, ...]:
    if isinstance(node, Unary):
        return (node.operand,)
    if isinstance(node, Binary):
        return (node.left, node.right)
    if isinstance(node, Call):
        return node.args
    return ()


def iter_nodes(node: Node):
    """Yield ``node`` and all of its descendants, depth first."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(children(current)))
