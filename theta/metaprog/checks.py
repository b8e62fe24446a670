"""Static checks and rewrites built on the generic walker."""

from __future__ import annotations

from typing import Iterator

from theta.types.call import Call
from theta.types.constant import Constant
from theta.types.formals import ParameterList
from theta.types.node import Node
from theta.types.symbol import Symbol
from theta.metaprog.walker import collect, rebuild, visit

ASSIGNMENT_OPERATORS = frozenset({"<-", "=", "<<-"})

LOGICAL_ABBREVIATIONS = {"T": True, "F": False}


def find_identifier(node: Node, name: str) -> bool:
    """Whether `name` is used anywhere, as a symbol or as a formal name."""
    target = Symbol(name)

    def combine(n: Node, results: Iterator[bool]) -> bool:
        if isinstance(n, ParameterList) and name in n.names:
            return True
        return any(results)

    return visit(node, lambda n: n == target, combine)


def is_assignment(node: Node) -> bool:
    return (
        isinstance(node, Call)
        and isinstance(node.head, Symbol)
        and node.head.name in ASSIGNMENT_OPERATORS
        and node.arity == 2
    )


def find_assign(node: Node) -> list[str]:
    """Names assigned anywhere in `node`, first occurrence first.

    Right-hand sides are searched too, so `a <- b <- 1` yields a and b.
    """
    def assigned(n: Node) -> list[str]:
        if is_assignment(n):
            lhs = n.get(1)
            if isinstance(lhs, Symbol):
                return [lhs.name]
            if isinstance(lhs, Constant) and isinstance(lhs.value, str):
                return [lhs.value]
        return []

    return collect(node, lambda n: [], assigned)


def expand_logical_abbr(node: Node) -> Node:
    """Replace the T and F shorthands by TRUE and FALSE constants.

    Callee positions are left alone (`T()` calls a function named T).
    """
    def leaf(n: Node) -> Node:
        if isinstance(n, Symbol) and n.name in LOGICAL_ABBREVIATIONS:
            return Constant(LOGICAL_ABBREVIATIONS[n.name])
        return n

    def combine(n: Node, results: Iterator[Node]) -> Node:
        children = list(results)
        if isinstance(n, Call) and isinstance(children[0], Constant):
            children[0] = n.head
        return rebuild(n, children)

    return visit(node, leaf, combine)
