"""Application engine for closures.

Arguments are matched to formals with the standardizer's three passes, then
bound as promises in a fresh frame whose parent is the closure's defining
environment (lexical scope). Nothing is evaluated here: a promise is forced
the first time the body reads it.
"""

from __future__ import annotations

import logging
from typing import Optional

from theta import EvaluatorFn, Value
from theta.types.call import Arg, Call
from theta.types.closure import Closure
from theta.types.environment import CallFrame, Environment
from theta.types.errors import ThetaUnboundSymbol
from theta.types.formals import VARIADIC
from theta.types.node import Node
from theta.types.promise import Dots, Promise
from theta.types.symbol import MISSING, Symbol
from theta.metaprog.standardize import match_arguments

logger = logging.getLogger(__name__)

_DOTS = Symbol(VARIADIC)


def dots_in(env: Environment) -> Dots:
    """The `...` collector visible from `env`."""
    scope = env.find(VARIADIC)
    dots = scope.vars[VARIADIC] if scope is not None else None
    if not isinstance(dots, Dots):
        raise ThetaUnboundSymbol(VARIADIC, "'...' used in an incorrect context")
    return dots


def expand_dots(args: tuple[Arg, ...], env: Environment) -> list[tuple[Optional[str], Node | Promise]]:
    """Supplied (name, node) pairs with any `...` replaced by the caller's collected promises."""
    supplied: list[tuple[Optional[str], Node | Promise]] = []
    for a in args:
        if a.value == _DOTS:
            supplied.extend((e.name, e.promise) for e in dots_in(env))
        else:
            supplied.append((a.name, a.value))
    return supplied


def bind_arguments(fn: Closure, call: Call, caller_env: Environment) -> Environment:
    """Create the call frame for `fn` applied to the arguments of `call`."""
    matching = match_arguments(fn.formals, expand_dots(call.args, caller_env))
    frame = CallFrame(fn, call, caller_env)
    local_env = Environment(outer=fn.env, frame=frame)

    def promise_for(item: Node | Promise, name: Optional[str]) -> Promise:
        # Promises forwarded through `...` are shared, not re-wrapped
        return item if isinstance(item, Promise) else Promise(item, caller_env, name)

    for p in fn.formals:
        if p.name == VARIADIC:
            if frame.dots is None:
                frame.dots = Dots((name, promise_for(item, name)) for name, item in matching.dots)
                local_env.define(VARIADIC, frame.dots)
            continue
        item = matching.matched.get(p.name, MISSING)
        if item is not MISSING:
            local_env.define(p.name, promise_for(item, p.name))
            continue
        frame.missing.add(p.name)
        if p.default is not MISSING:
            # Defaults are evaluated in the callee's own frame
            local_env.define(p.name, Promise(p.default, local_env, p.name))
        else:
            local_env.bind_missing(p.name)
    return local_env


def apply_closure(fn: Closure, call: Call, caller_env: Environment, evaluate_fn: EvaluatorFn) -> Value:
    """Apply a closure to the unevaluated arguments of `call` made in `caller_env`."""
    local_env = bind_arguments(fn, call, caller_env)
    logger.debug("apply %s", call)
    return evaluate_fn(fn.body, local_env)
