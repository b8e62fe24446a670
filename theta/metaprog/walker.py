"""Generic recursive descent over the four node kinds.

`visit(node, base_case, combine)` is the single abstraction behind the static
checks and tree rewrites in this package:

- base_case(node) gives the result for a Constant or Symbol.
- combine(node, results) reduces a Call or ParameterList. `results` is a lazy
  iterator over the visited children (callee first for a Call, defaults for a
  ParameterList), so a combine step can stop early (boolean search), consume
  everything (collection), or never look at the children at all (a rewrite
  that replaces the whole node).

The walk is bounded by THETA_WALK_DEPTH and charged against the active budget.
A host RecursionError is reported as ThetaRecursionLimitExceeded.
"""

from __future__ import annotations

from typing import Callable, Iterable, Iterator, Optional, Sequence, TypeVar

from theta.config import get_walk_depth
from theta.runtime_context import charge, reserve_stack
from theta.types.call import Arg, Call
from theta.types.constant import Constant
from theta.types.errors import ThetaRecursionLimitExceeded, ThetaTypeError, ThetaUnknownNodeKind
from theta.types.formals import Param, ParameterList
from theta.types.node import Node
from theta.types.symbol import Symbol

T = TypeVar("T")

BaseCase = Callable[[Node], T]
Combine = Callable[[Node, Iterator[T]], T]


def visit(node: Node, base_case: BaseCase, combine: Combine, max_depth: Optional[int] = None) -> T:
    limit = max_depth if max_depth is not None else get_walk_depth()
    reserve_stack(limit)
    try:
        return _visit(node, base_case, combine, limit, ())
    except RecursionError:
        raise ThetaRecursionLimitExceeded(limit) from None


def _visit(node: Node, base_case: BaseCase, combine: Combine, limit: int, path: tuple[int, ...]) -> T:
    if len(path) > limit:
        raise ThetaRecursionLimitExceeded(limit, path)
    charge()
    match node:
        case Constant() | Symbol():
            return base_case(node)
        case Call(children):
            return combine(node, (
                _visit(a.value, base_case, combine, limit, path + (i,))
                for i, a in enumerate(children)
            ))
        case ParameterList(entries):
            return combine(node, (
                _visit(p.default, base_case, combine, limit, path + (i,))
                for i, p in enumerate(entries)
            ))
        case _:
            raise ThetaUnknownNodeKind(node, path)


class Splice:
    """Rewrite result meaning: replace this argument by zero or more (name, node) arguments."""

    __slots__ = ("args",)

    def __init__(self, args: Iterable[Arg]):
        self.args: tuple[Arg, ...] = tuple(args)

    def __repr__(self) -> str:
        return f"Splice({list(self.args)!r})"


def rebuild(node: Node, results: Iterable[Node | Splice]) -> Node:
    """Reassemble a Call or ParameterList of the same kind from rewritten children.

    Argument names are carried over from the original children. A Splice result
    in argument position is flattened in place; in callee position, or as a
    default value, it is an error.
    """
    match node:
        case Call(children):
            items: list[Arg] = []
            for i, (a, r) in enumerate(zip(children, results)):
                if isinstance(r, Splice):
                    if i == 0:
                        raise ThetaTypeError(f"cannot splice into the callee position of {node}", node)
                    items.extend(r.args)
                else:
                    items.append(Arg(a.name, r))
            return Call(items)
        case ParameterList(entries):
            params: list[Param] = []
            for p, r in zip(entries, results):
                if isinstance(r, Splice):
                    raise ThetaTypeError(f"cannot splice into the default of formal '{p.name}'", node)
                params.append(Param(p.name, r))
            return ParameterList(params)
        case _:
            raise ThetaUnknownNodeKind(node)


# --- Usage shapes ---
def search(node: Node, predicate: Callable[[Node], bool]) -> bool:
    """True as soon as any node satisfies `predicate`; later siblings are not visited."""
    return visit(node, predicate, lambda n, results: predicate(n) or any(results))


def collect(node: Node, leaf: Callable[[Node], Sequence[T]],
            local: Callable[[Node], Sequence[T]] = lambda n: ()) -> list[T]:
    """Ordered, duplicate-free union of leaf and per-node contributions."""
    def combine(n: Node, results: Iterator[list[T]]) -> list[T]:
        gathered: list[T] = list(local(n))
        for r in results:
            gathered.extend(r)
        return list(dict.fromkeys(gathered))

    return visit(node, lambda n: list(dict.fromkeys(leaf(n))), combine)


def transform(node: Node, leaf: Callable[[Node], Node]) -> Node:
    """Rebuild `node` with every Constant/Symbol replaced by leaf(node)."""
    return visit(node, leaf, rebuild)
