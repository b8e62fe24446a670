"""Capture code with free identifiers replaced from a call frame."""

from __future__ import annotations

from typing import Iterator

from theta.types.call import Call
from theta.types.environment import Environment
from theta.types.formals import ParameterList
from theta.types.kinds import as_node
from theta.types.node import Node
from theta.types.promise import Dots, Promise
from theta.types.symbol import MISSING, Symbol
from theta.metaprog.walker import Splice, rebuild, visit


def quote(node: Node) -> Node:
    """Identity: the node itself, with no lookups."""
    return node


def _replacement(node: Node, env: Environment) -> Node | Splice:
    if not isinstance(node, Symbol) or node is MISSING or not env.has_local(node):
        return node
    binding = env.get_local(node)
    if binding is MISSING:
        return MISSING
    if isinstance(binding, Promise):
        # The code that was passed, never its value
        return binding.expr
    if isinstance(binding, Dots):
        return Splice(binding.exprs())
    return as_node(binding)


def substitute(node: Node, env: Environment) -> Node:
    """Rebuild `node`, replacing symbols bound locally in `env`.

    Only call frames (and explicit tables) are substitution contexts; anywhere
    else, notably the root environment, this is `quote`. Lookups never leave
    `env` for its parents.
    """
    if not env.substitutable:
        return node

    def combine(n: Node, results: Iterator[Node | Splice]) -> Node:
        children = list(results)
        # `...` can only be spliced among arguments
        if isinstance(n, Call) and isinstance(children[0], Splice):
            children[0] = n.head
        elif isinstance(n, ParameterList):
            children = [p.default if isinstance(r, Splice) else r for p, r in zip(n.entries, children)]
        return rebuild(n, children)

    result = visit(node, lambda n: _replacement(n, env), combine)
    if isinstance(result, Splice):
        return node
    return result
