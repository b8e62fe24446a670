"""Built-in functions for the Theta host table.

This module defines arithmetic, comparison, vector construction, the
code-as-data helpers (call construction, classification, introspection of
closures) and the registration utility that installs them, together with the
special forms, into a root environment.

Plain functions are called as fn(env, args) with evaluated arguments; those
that accept named arguments are wrapped in a Primitive with their formals.
"""
from __future__ import annotations

import operator
from collections.abc import Mapping
from typing import Any, Callable, Optional

import numpy as np

from theta import Value
from theta.types.call import Arg, Call
from theta.types.callables import Primitive, SpecialForm
from theta.types.closure import Closure
from theta.types.environment import Environment
from theta.types.errors import ThetaArityError, ThetaTypeError
from theta.types.formals import ParameterList
from theta.types.kinds import as_node, identical
from theta.types.node import Node
from theta.types.null import Null, NullType
from theta.types.symbol import Symbol
from theta.evaluation.evaluator import evaluate, find_function
from theta.evaluation.special_forms import SPECIAL_FORMS
from theta.evaluation.special_forms.if_form import as_condition
from theta.metaprog.standardize import match_form_args, standardize


def _exactly(n: int, args: list[Value], name: str) -> None:
    if len(args) != n:
        raise ThetaArityError(f"{name} requires exactly {n} argument{'s' if n != 1 else ''}, got {len(args)}")


def _bind(args: list[Value], names: list[Optional[str]], formals: ParameterList, name: str) -> dict[str, Any]:
    """Match evaluated arguments to a primitive's formals; unsupplied optionals are absent."""
    return match_form_args([Arg(n, v) for n, v in zip(names, args)], formals, name)


def _scalar(value: Value) -> Value:
    """Unwrap numpy scalars so results compare and print like plain values."""
    if isinstance(value, np.generic):
        return value.item()
    return value


# -------------------------------
# Arithmetic
# -------------------------------
def _arith(name: str, op: Callable[[Value, Value], Value]) -> Callable[[Environment, list[Value]], Value]:
    def binary(env: Environment, args: list[Value]) -> Value:
        _exactly(2, args, name)
        try:
            return _scalar(op(args[0], args[1]))
        except TypeError:
            raise ThetaTypeError(f"non-numeric argument to binary operator {name}", args) from None
    binary.__name__ = f"arith_{op.__name__}"
    return binary


def _unary(name: str, op: Callable[[Value], Value], value: Value) -> Value:
    if isinstance(value, bool):
        value = int(value)
    try:
        return _scalar(op(value))
    except TypeError:
        raise ThetaTypeError(f"invalid argument to unary operator {name}", value) from None


_plus = _arith("+", operator.add)
_minus = _arith("-", operator.sub)
mul = _arith("*", operator.mul)
power = _arith("^", operator.pow)


def add(env: Environment, args: list[Value]) -> Value:
    """Binary addition; unary plus with one argument."""
    if len(args) == 1:
        return _unary("+", operator.pos, args[0])
    return _plus(env, args)


def sub(env: Environment, args: list[Value]) -> Value:
    """Binary subtraction; unary negation with one argument."""
    if len(args) == 1:
        return _unary("-", operator.neg, args[0])
    return _minus(env, args)


def _true_divide(a: Value, b: Value) -> Value:
    # Division by zero gives Inf or NaN, as for doubles
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.true_divide(a, b)


div = _arith("/", _true_divide)


# -------------------------------
# Comparison and logic
# -------------------------------
def _compare(name: str, op: Callable[[Value, Value], Value]) -> Callable[[Environment, list[Value]], Value]:
    def compare(env: Environment, args: list[Value]) -> Value:
        _exactly(2, args, name)
        try:
            return _scalar(op(args[0], args[1]))
        except TypeError:
            raise ThetaTypeError(f"comparison ({name}) is possible only for atomic types", args) from None
    compare.__name__ = f"compare_{op.__name__}"
    return compare


eq = _compare("==", operator.eq)
ne = _compare("!=", operator.ne)
lt = _compare("<", operator.lt)
gt = _compare(">", operator.gt)
lte = _compare("<=", operator.le)
gte = _compare(">=", operator.ge)


def logical_not(env: Environment, args: list[Value]) -> Value:
    _exactly(1, args, "!")
    value = args[0]
    if isinstance(value, np.ndarray):
        return np.logical_not(value)
    return not as_condition(value)


def identical_builtin(env: Environment, args: list[Value]) -> bool:
    """identical(a, b): structural equality of values and code."""
    _exactly(2, args, "identical")
    return identical(args[0], args[1])


# -------------------------------
# Vectors and lists
# -------------------------------
_ATOMIC = (bool, int, float, complex, str, np.generic)


def c_builtin(env: Environment, args: list[Value]) -> Value:
    """Combine atomic values and arrays into one numpy array (coercing like R's c()).

    Anything non-atomic among the arguments makes the result a plain list.
    """
    items = [a for a in args if not isinstance(a, NullType)]
    if not items:
        return Null
    flat: list[Value] = []
    for a in items:
        if isinstance(a, np.ndarray):
            flat.extend(a.ravel().tolist())
        elif isinstance(a, _ATOMIC):
            flat.append(_scalar(a))
        else:
            return items
    return np.asarray(flat)


def list_builtin(env: Environment, args: list[Value], names: list[Optional[str]]) -> Value:
    """list(...): a list, or a dict when any element is named.

    Unnamed elements of a partly named list are keyed by their 1-based position.
    """
    if all(n is None for n in names):
        return list(args)
    return {n if n is not None else i: v for i, (n, v) in enumerate(zip(names, args), start=1)}


def length_builtin(env: Environment, args: list[Value]) -> int:
    _exactly(1, args, "length")
    value = args[0]
    if isinstance(value, NullType):
        return 0
    if isinstance(value, Call):
        return len(value)
    if isinstance(value, np.ndarray):
        return int(value.size)
    if isinstance(value, (list, tuple, Mapping, ParameterList)):
        return len(value)
    return 1


# -------------------------------
# Evaluation
# -------------------------------
EVAL_FORMALS = ParameterList(["expr", ("envir", Null)])


def _environment_arg(value: Value, env: Environment, name: str) -> Environment:
    if isinstance(value, Environment):
        return value
    if isinstance(value, Mapping):
        return Environment.from_mapping(value, outer=env)
    raise ThetaTypeError(f"{name}: invalid 'envir' argument {value!r}", value)


def eval_builtin(env: Environment, args: list[Value], names: list[Optional[str]]) -> Value:
    """eval(expr, envir): evaluate a code value; anything that is not code is returned as is."""
    matched = _bind(args, names, EVAL_FORMALS, "eval")
    target = _environment_arg(matched["envir"], env, "eval") if "envir" in matched else env
    expr = matched["expr"]
    if isinstance(expr, Node):
        return evaluate(expr, target)
    return expr


# -------------------------------
# Code construction and classification
# -------------------------------
def _head(value: Value, name: str) -> Node:
    if isinstance(value, str):
        return Symbol(value)
    if isinstance(value, (Symbol, Call)):
        return value
    raise ThetaTypeError(f"{name}: invalid function name {value!r}", value)


def as_call(env: Environment, args: list[Value]) -> Call:
    """as.call(x): a Call from a list whose first element is the callee."""
    _exactly(1, args, "as.call")
    value = args[0]
    if isinstance(value, Call):
        return value
    if isinstance(value, Mapping):
        entries = [(k if isinstance(k, str) else None, v) for k, v in value.items()]
    elif isinstance(value, (list, tuple)):
        entries = [(None, v) for v in value]
    else:
        raise ThetaTypeError(f"invalid argument list {value!r}", value)
    if not entries:
        raise ThetaArityError("as.call needs a callee")
    head = _head(entries[0][1], "as.call")
    return Call.build(head, [Arg(n, as_node(v)) for n, v in entries[1:]])


def as_name(env: Environment, args: list[Value]) -> Symbol:
    _exactly(1, args, "as.name")
    value = args[0]
    if isinstance(value, Symbol):
        return value
    if isinstance(value, np.ndarray) and value.size == 1:
        value = value.reshape(-1)[0].item()
    if isinstance(value, str):
        return Symbol(value)
    raise ThetaTypeError(f"invalid type for as.name: {value!r}", value)


def call_builtin(env: Environment, args: list[Value], names: list[Optional[str]]) -> Call:
    """call(name, ...): a call to `name` with the given (evaluated) arguments embedded."""
    if not args or names[0] is not None:
        raise ThetaArityError("call needs a function name as its first argument")
    if not isinstance(args[0], str):
        raise ThetaTypeError(f"first argument of call must be a character string, got {args[0]!r}", args[0])
    return Call.build(Symbol(args[0]), [Arg(n, as_node(v)) for n, v in zip(names[1:], args[1:])])


def is_call(env: Environment, args: list[Value]) -> bool:
    _exactly(1, args, "is.call")
    return isinstance(args[0], Call)


def is_name(env: Environment, args: list[Value]) -> bool:
    _exactly(1, args, "is.name")
    return isinstance(args[0], Symbol)


def is_pairlist(env: Environment, args: list[Value]) -> bool:
    _exactly(1, args, "is.pairlist")
    return isinstance(args[0], (ParameterList, NullType))


# -------------------------------
# Functions and environments
# -------------------------------
def _function_arg(value: Value, env: Environment) -> Value:
    if isinstance(value, str):
        return find_function(value, env)
    return value


def formals_builtin(env: Environment, args: list[Value]) -> Value:
    """formals(fn): the parameter list of a closure (NULL for builtins without one)."""
    _exactly(1, args, "formals")
    fn = _function_arg(args[0], env)
    if isinstance(fn, (Closure, Primitive, SpecialForm)) and fn.formals is not None:
        return fn.formals
    return Null


def body_builtin(env: Environment, args: list[Value]) -> Value:
    _exactly(1, args, "body")
    fn = _function_arg(args[0], env)
    return fn.body if isinstance(fn, Closure) else Null


def environment_builtin(env: Environment, args: list[Value]) -> Value:
    """environment(fn): a closure's defining environment; the calling one with no argument."""
    if not args or isinstance(args[0], NullType):
        return env
    _exactly(1, args, "environment")
    fn = _function_arg(args[0], env)
    if isinstance(fn, Closure):
        return fn.env
    return Null


NEW_ENV_FORMALS = ParameterList([("parent", Null)])


def new_env(env: Environment, args: list[Value], names: list[Optional[str]]) -> Environment:
    """new.env(parent): an empty table environment (a substitution context)."""
    matched = _bind(args, names, NEW_ENV_FORMALS, "new.env")
    parent = matched.get("parent", env)
    if not isinstance(parent, Environment):
        raise ThetaTypeError(f"new.env: 'parent' must be an environment, got {parent!r}", parent)
    return Environment.from_mapping({}, outer=parent)


STANDARDISE_FORMALS = ParameterList(["call", ("fn", Null)])


def _formals_of(fn: Value) -> ParameterList:
    if isinstance(fn, ParameterList):
        return fn
    if isinstance(fn, (Closure, Primitive, SpecialForm)) and fn.formals is not None:
        return fn.formals
    raise ThetaTypeError(f"standardise_call: no formal arguments available for {fn!r}", fn)


def standardise_call(env: Environment, args: list[Value], names: list[Optional[str]]) -> Call:
    """standardise_call(call, fn): name every argument of `call` by the formal of `fn` it matches.

    Without `fn` the callee is looked up from the call's head.
    """
    matched = _bind(args, names, STANDARDISE_FORMALS, "standardise_call")
    target = matched["call"]
    if not isinstance(target, Call):
        raise ThetaTypeError(f"standardise_call: expected a call, got {target!r}", target)
    if "fn" in matched:
        fn = _function_arg(matched["fn"], env)
    elif isinstance(target.head, Symbol):
        fn = find_function(target.head.name, env)
    else:
        raise ThetaTypeError(f"standardise_call: cannot resolve the callee of {target}", target)
    return standardize(target, _formals_of(fn))


def register(env: Environment) -> None:
    """Register all builtin functions, special forms and constants into the given environment."""
    env.update(SPECIAL_FORMS)
    env.update(
        {
            Symbol("+"): add,
            Symbol("-"): sub,
            Symbol("*"): mul,
            Symbol("/"): div,
            Symbol("^"): power,
            Symbol("=="): eq,
            Symbol("!="): ne,
            Symbol("<"): lt,
            Symbol(">"): gt,
            Symbol("<="): lte,
            Symbol(">="): gte,
            Symbol("!"): logical_not,
            Symbol("identical"): identical_builtin,
            Symbol("c"): c_builtin,
            Symbol("list"): Primitive("list", list_builtin, named=True),
            Symbol("length"): length_builtin,
            Symbol("eval"): Primitive("eval", eval_builtin, EVAL_FORMALS, named=True),
            Symbol("as.call"): as_call,
            Symbol("as.name"): as_name,
            Symbol("as.symbol"): as_name,  # alias for as.name
            Symbol("call"): Primitive("call", call_builtin, named=True),
            Symbol("is.call"): is_call,
            Symbol("is.name"): is_name,
            Symbol("is.symbol"): is_name,  # alias for is.name
            Symbol("is.pairlist"): is_pairlist,
            Symbol("formals"): formals_builtin,
            Symbol("body"): body_builtin,
            Symbol("environment"): environment_builtin,
            Symbol("new.env"): Primitive("new.env", new_env, NEW_ENV_FORMALS, named=True),
            Symbol("standardise_call"): Primitive(
                "standardise_call", standardise_call, STANDARDISE_FORMALS, named=True
            ),
        }
    )
    env.define(Symbol("T"), True)
    env.define(Symbol("F"), False)
