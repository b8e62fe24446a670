"""Quasiquotation: quote a tree, evaluating only the sub-expressions marked with `.()`."""

from __future__ import annotations

from typing import Iterator, Mapping, Optional

from theta import EvaluatorFn, Value
from theta.types.call import Arg, Call
from theta.types.environment import Environment
from theta.types.errors import ThetaTypeError
from theta.types.kinds import as_node
from theta.types.node import Node
from theta.types.symbol import Symbol
from theta.metaprog.walker import Splice, rebuild, visit

UNQUOTE = Symbol(".")
UNQUOTE_SPLICE = Symbol("..")


def _is_site(node: Node, marker: Symbol) -> bool:
    # Exactly one argument: `.()` with no argument is not an unquote site and
    # is rebuilt like any other call.
    return isinstance(node, Call) and node.head == marker and node.arity == 1


def is_unquote(node: Node) -> bool:
    return _is_site(node, UNQUOTE)


def is_unquote_splice(node: Node) -> bool:
    return _is_site(node, UNQUOTE_SPLICE)


def _splice_args(value: Value) -> list[Arg]:
    if isinstance(value, Mapping):
        # Unnamed entries of a partly named list are keyed by position
        return [Arg(k if isinstance(k, str) else None, as_node(v)) for k, v in value.items()]
    if isinstance(value, (list, tuple)):
        return [a if isinstance(a, Arg) else Arg(None, as_node(a)) for a in value]
    raise ThetaTypeError(f"splice-unquote must produce a list, got {value!r}", value)


def quasiquote(node: Node, where: Environment, evaluate_fn: Optional[EvaluatorFn] = None) -> Node:
    """Rebuild `node`; `.(x)` sites are replaced by the value of x in `where`.

    `..(xs)` evaluates xs to a sequence and splices its elements into the
    enclosing call's arguments. The input tree is never modified.
    """
    if evaluate_fn is None:
        from theta.evaluation.evaluator import evaluate as evaluate_fn

    def combine(n: Node, results: Iterator[Node | Splice]) -> Node | Splice:
        # The marked argument is evaluated, not walked
        if is_unquote(n):
            return as_node(evaluate_fn(n.args[0].value, where))
        if is_unquote_splice(n):
            return Splice(_splice_args(evaluate_fn(n.args[0].value, where)))
        return rebuild(n, results)

    result = visit(node, lambda n: n, combine)
    if isinstance(result, Splice):
        raise ThetaTypeError(f"cannot splice at the top level of {node}", node)
    return result
