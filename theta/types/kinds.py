"""Exhaustive dispatch over the four node kinds, plus construction helpers."""

from __future__ import annotations

from typing import Sequence

from theta import Value
from theta.types.call import Arg, Call
from theta.types.constant import Constant, values_identical
from theta.types.errors import ThetaUnknownNodeKind
from theta.types.formals import Param, ParameterList
from theta.types.node import Node, NodeKind
from theta.types.symbol import Symbol


def kind_of(node: Node, path: Sequence[int] = ()) -> NodeKind:
    match node:
        case Constant():
            return NodeKind.CONSTANT
        case Symbol():
            return NodeKind.SYMBOL
        case Call():
            return NodeKind.CALL
        case ParameterList():
            return NodeKind.PARAMETER_LIST
        case _:
            raise ThetaUnknownNodeKind(node, path)


def identical(a: Value, b: Value) -> bool:
    """Deep structural equality; order- and name-sensitive for calls."""
    if isinstance(a, Node) or isinstance(b, Node):
        return isinstance(a, Node) and isinstance(b, Node) and a == b
    return values_identical(a, b)


def as_node(value: Value) -> Node:
    """Embed a runtime value in a tree: nodes as themselves, anything else as a Constant."""
    if isinstance(value, Node):
        return value
    return Constant(value)


# --- Construction helpers ---
def sym(name: str) -> Symbol:
    return Symbol(name)


def const(value: Value) -> Constant:
    return Constant(value)


def call(head: Node | str, *args, **named) -> Call:
    """call("f", 1, x, Arg("y", ...), z=2) builds f(1, x, y = ..., z = 2).

    Strings in head position become Symbols; non-node argument values become Constants.
    """
    if isinstance(head, str):
        head = Symbol(head)
    children: list[Arg] = []
    for a in args:
        if isinstance(a, Arg):
            children.append(Arg(a.name, as_node(a.value)))
        else:
            children.append(Arg(None, as_node(a)))
    for name, value in named.items():
        children.append(Arg(name, as_node(value)))
    return Call.build(head, children)


def formals(*names: str | Param, **defaults) -> ParameterList:
    entries: list[Param | str] = list(names)
    for name, value in defaults.items():
        entries.append(Param(name, as_node(value)))
    return ParameterList(entries)
