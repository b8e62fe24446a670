"""Host-provided callables: primitives (evaluated arguments) and special forms."""

from __future__ import annotations

from typing import Callable, Optional

from theta import EvaluatorFn, Value
from theta.types.call import Arg, Call
from theta.types.closure import Closure
from theta.types.environment import Environment
from theta.types.formals import ParameterList

PrimitiveFn = Callable[..., Value]
SpecialFormFn = Callable[[tuple[Arg, ...], Environment, EvaluatorFn], Value]


class Primitive:
    """A builtin receiving already-evaluated arguments.

    The function is called as fn(env, args), or fn(env, args, names) when
    `named` is set, where names holds each argument's tag (or None).
    """

    __slots__ = ("name", "fn", "formals", "named")

    is_special_form = False

    def __init__(self, name: str, fn: PrimitiveFn, formals: Optional[ParameterList] = None, named: bool = False):
        self.name = name
        self.fn = fn
        self.formals = formals
        self.named = named

    def invoke(self, env: Environment, args: list[Value], names: Optional[list[Optional[str]]] = None) -> Value:
        if self.named:
            return self.fn(env, args, names if names is not None else [None] * len(args))
        return self.fn(env, args)

    def __repr__(self) -> str:
        return f"<primitive {self.name}>"


class SpecialForm:
    """A builtin receiving its argument nodes unevaluated plus the calling environment."""

    __slots__ = ("name", "handler", "formals")

    is_special_form = True

    def __init__(self, name: str, handler: SpecialFormFn, formals: Optional[ParameterList] = None):
        self.name = name
        self.handler = handler
        self.formals = formals

    def invoke(self, call: Call, env: Environment, evaluate_fn: EvaluatorFn) -> Value:
        return self.handler(call.args, env, evaluate_fn)

    def __repr__(self) -> str:
        return f"<special form {self.name}>"


def is_callable(value: Value) -> bool:
    """Closures, primitives, special forms and plain Python `fn(env, args)` callables."""
    if isinstance(value, (Closure, Primitive, SpecialForm)):
        return True
    return callable(value) and not isinstance(value, type)
