"""Core evaluator for the Theta engine.

Tree-walking evaluation of Nodes in an explicit Environment:

- Constants evaluate to their value.
- Symbols are looked up through the environment chain; promise bindings are
  forced (once) on first use.
- Calls resolve their head to a callable. Special forms receive the argument
  nodes unevaluated; closures get fresh promises (call-by-need); primitives
  and plain host callables get evaluated values.

Nesting is bounded by the runtime depth limit, and a host RecursionError is
reported as ThetaRecursionLimitExceeded rather than escaping.
"""

from __future__ import annotations

from theta import Value
from theta import runtime_context
from theta.types.call import Arg, Call
from theta.types.callables import Primitive, SpecialForm, is_callable
from theta.types.closure import Closure
from theta.types.constant import Constant
from theta.types.environment import Environment
from theta.types.errors import (
    ThetaArityError,
    ThetaMissingValueAccess,
    ThetaNotCallable,
    ThetaRecursionLimitExceeded,
    ThetaUnboundSymbol,
    ThetaUnknownNodeKind,
)
from theta.types.formals import VARIADIC, ParameterList
from theta.types.node import Node
from theta.types.promise import Promise
from theta.types.symbol import MISSING, Symbol
from theta.evaluation.apply import apply_closure, dots_in


_DOTS = Symbol(VARIADIC)


def evaluate(expr: Node, env: Environment) -> Value:
    """Evaluate `expr` in `env`; every failure propagates to the caller."""
    try:
        return evaluate0(expr, env)
    except RecursionError:
        raise ThetaRecursionLimitExceeded(runtime_context.get_max_depth()) from None


def evaluate0(expr: Node, env: Environment) -> Value:
    runtime_context.charge()
    match expr:
        case Constant(value):
            return value
        case Symbol():
            return lookup_value(expr, env)
        case Call():
            runtime_context.enter()
            try:
                return _evaluate_call(expr, env)
            finally:
                runtime_context.leave()
        case ParameterList():
            # Parameter lists are self-evaluating data
            return expr
        case _:
            raise ThetaUnknownNodeKind(expr)


def force(promise: Promise) -> Value:
    return promise.force(evaluate)


def lookup_value(symbol: Symbol, env: Environment) -> Value:
    """The value of `symbol`: forced if it is a promise, an error if it is a missing argument."""
    if symbol is MISSING:
        raise ThetaMissingValueAccess()
    if symbol.name == VARIADIC:
        raise ThetaUnboundSymbol(VARIADIC, "'...' used in an incorrect context")
    binding = env.lookup(symbol)
    if binding is MISSING:
        raise ThetaMissingValueAccess(symbol.name)
    if isinstance(binding, Promise):
        return force(binding)
    return binding


def find_function(name: str, env: Environment) -> Value:
    """Resolve a callee name, skipping bindings that are not callable."""
    skipped: Value = None
    found_other = False
    scope: Environment | None = env
    while scope is not None:
        if name in scope.vars:
            binding = scope.vars[name]
            if binding is MISSING:
                raise ThetaMissingValueAccess(name)
            if isinstance(binding, Promise):
                binding = force(binding)
            if is_callable(binding):
                return binding
            if not found_other:
                skipped, found_other = binding, True
        scope = scope.outer
    if found_other:
        raise ThetaNotCallable(skipped, name)
    raise ThetaUnboundSymbol(name, f"could not find function '{name}'")


def resolve_callee(head: Node, env: Environment) -> Value:
    if isinstance(head, Symbol):
        return find_function(head.name, env)
    fn = evaluate(head, env)
    if not is_callable(fn):
        raise ThetaNotCallable(fn)
    return fn


def evaluate_arguments(args: tuple[Arg, ...], env: Environment) -> tuple[list[Value], list[str | None]]:
    """Evaluate arguments left to right, expanding `...` from the enclosing frame."""
    values: list[Value] = []
    names: list[str | None] = []
    for position, a in enumerate(args, start=1):
        if a.value == _DOTS:
            for entry in dots_in(env):
                values.append(force(entry.promise))
                names.append(entry.name)
        elif a.value is MISSING:
            raise ThetaArityError(f"argument {position} is empty")
        else:
            values.append(evaluate(a.value, env))
            names.append(a.name)
    return values, names


def _evaluate_call(expr: Call, env: Environment) -> Value:
    fn = resolve_callee(expr.head, env)
    if isinstance(fn, SpecialForm):
        return fn.invoke(expr, env, evaluate)
    if isinstance(fn, Closure):
        return apply_closure(fn, expr, env, evaluate)
    values, names = evaluate_arguments(expr.args, env)
    if isinstance(fn, Primitive):
        return fn.invoke(env, values, names)
    # Plain host callable registered as fn(env, args)
    return fn(env, values)
