from collections.abc import Mapping

from theta import EvaluatorFn, Value
from theta.types.call import Arg
from theta.types.environment import Environment
from theta.types.errors import ThetaArityError, ThetaTypeError
from theta.types.formals import ParameterList
from theta.types.null import Null
from theta.metaprog.quasiquote import quasiquote
from theta.metaprog.standardize import match_form_args
from theta.metaprog.substitute import quote, substitute

QUOTE_FORMALS = ParameterList(["expr"])
SUBSTITUTE_FORMALS = ParameterList(["expr", ("env", Null)])
BQUOTE_FORMALS = ParameterList(["expr", ("where", Null)])


def context_environment(value: Value, env: Environment, form: str) -> Environment:
    """An evaluated environment argument: an Environment, or a mapping turned into a table."""
    if isinstance(value, Environment):
        return value
    if isinstance(value, Mapping):
        return Environment.from_mapping(value, outer=env)
    raise ThetaTypeError(f"{form}: expected an environment or a named list, got {value!r}", value)


def quote_form(args: tuple[Arg, ...], env: Environment, evaluate_fn: EvaluatorFn) -> Value:
    if len(args) != 1:
        raise ThetaArityError("quote expects exactly 1 argument")
    return quote(args[0].value)


def substitute_form(args: tuple[Arg, ...], env: Environment, evaluate_fn: EvaluatorFn) -> Value:
    """substitute(expr, env): expr with symbols bound in the current frame (or `env`) replaced."""
    matched = match_form_args(args, SUBSTITUTE_FORMALS, "substitute")
    target = env
    if "env" in matched:
        target = context_environment(evaluate_fn(matched["env"], env), env, "substitute")
    return substitute(matched["expr"], target)


def bquote_form(args: tuple[Arg, ...], env: Environment, evaluate_fn: EvaluatorFn) -> Value:
    """bquote(expr, where): expr quoted, with .(x) evaluated in `where` (default: here)."""
    matched = match_form_args(args, BQUOTE_FORMALS, "bquote")
    where = env
    if "where" in matched:
        where = context_environment(evaluate_fn(matched["where"], env), env, "bquote")
    return quasiquote(matched["expr"], where, evaluate_fn)
