"""Promises: deferred, memoized, single-evaluation (expression, environment) pairs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Iterator, NamedTuple, Optional

from theta import EvaluatorFn, Value
from theta.types.call import Arg
from theta.types.errors import ThetaRecursiveDefaultEvaluation
from theta.types.node import Node

if TYPE_CHECKING:
    from theta.types.environment import Environment


class Promise:
    """A lazily evaluated argument.

    Forced at most once; the value is cached. Re-entering a promise while it is
    being forced raises ThetaRecursiveDefaultEvaluation instead of recursing
    until the host stack runs out (e.g. `function(x = x) x`).
    """

    __slots__ = ("expr", "env", "forced", "cache", "forcing", "name")

    def __init__(self, expr: Node, env: Optional[Environment], name: Optional[str] = None):
        self.expr: Node = expr
        self.env: Environment | None = env
        self.forced: bool = False
        self.cache: Value = None
        self.forcing: bool = False
        self.name: str | None = name

    def force(self, evaluate_fn: EvaluatorFn) -> Value:
        if self.forced:
            return self.cache
        if self.forcing:
            raise ThetaRecursiveDefaultEvaluation(self.expr, self.name)
        self.forcing = True
        try:
            value = evaluate_fn(self.expr, self.env)
        finally:
            # An interrupted promise may be forced again later
            self.forcing = False
        self.cache = value
        self.forced = True
        return value

    def __repr__(self) -> str:
        state = f"value={self.cache!r}" if self.forced else "unforced"
        return f"<Promise {self.expr} {state}>"


class DotsEntry(NamedTuple):
    name: Optional[str]
    promise: Promise


class Dots:
    """The variadic collector of a call frame: ordered (name, promise) pairs."""

    __slots__ = ("entries",)

    def __init__(self, entries: Iterable[DotsEntry | tuple] = ()):
        self.entries: tuple[DotsEntry, ...] = tuple(DotsEntry(*e) for e in entries)

    def exprs(self) -> list[Arg]:
        """The unevaluated argument expressions, names preserved."""
        return [Arg(e.name, e.promise.expr) for e in self.entries]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[DotsEntry]:
        return iter(self.entries)

    def __repr__(self) -> str:
        inner = ", ".join(f"{e.name} = {e.promise.expr}" if e.name else str(e.promise.expr) for e in self.entries)
        return f"<... {inner}>"
