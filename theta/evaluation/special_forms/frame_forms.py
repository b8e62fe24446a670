"""Forms that inspect the current call frame: missing(), sys.call(), match.call()."""

from theta import EvaluatorFn, Value
from theta.types.call import Arg, Call
from theta.types.constant import Constant
from theta.types.environment import CallFrame, Environment
from theta.types.errors import ThetaArityError, ThetaTypeError
from theta.types.formals import VARIADIC, ParameterList
from theta.types.null import Null
from theta.types.promise import Promise
from theta.types.symbol import Symbol
from theta.evaluation.apply import dots_in
from theta.metaprog.standardize import match_form_args, standardize

MISSING_FORMALS = ParameterList(["x"])

_DOTS = Symbol(VARIADIC)


def _frame(env: Environment, form: str) -> CallFrame:
    if env.frame is None:
        raise ThetaTypeError(f"{form} used outside a function", env)
    return env.frame


def is_missing_argument(name: str, env: Environment) -> bool:
    """Whether formal `name` of the frame `env` was left unsupplied.

    A formal supplied as a bare reference to a missing formal of the caller
    counts as missing too.
    """
    frame = env.frame
    if frame is None or name not in frame.function.formals:
        raise ThetaTypeError(f"'missing' can only be used for arguments, not '{name}'", name)
    if name in frame.missing:
        return True
    binding = env.get_local(name)
    if isinstance(binding, Promise) and not binding.forced and isinstance(binding.expr, Symbol):
        caller = binding.env
        inner = binding.expr.name
        if caller is not None and caller.frame is not None and inner in caller.frame.function.formals:
            return is_missing_argument(inner, caller)
    return False


def missing_form(args: tuple[Arg, ...], env: Environment, evaluate_fn: EvaluatorFn) -> Value:
    target = match_form_args(args, MISSING_FORMALS, "missing")["x"]
    if isinstance(target, Constant) and isinstance(target.value, str):
        target = Symbol(target.value)
    if not isinstance(target, Symbol):
        raise ThetaTypeError(f"invalid use of 'missing' on {target}", target)
    return is_missing_argument(target.name, env)


def sys_call_form(args: tuple[Arg, ...], env: Environment, evaluate_fn: EvaluatorFn) -> Value:
    """The call that created the current frame, as written; NULL at top level."""
    if args:
        raise ThetaArityError("sys.call takes no arguments")
    return env.frame.call if env.frame is not None else Null


def match_call_form(args: tuple[Arg, ...], env: Environment, evaluate_fn: EvaluatorFn) -> Value:
    """The current call with `...` expanded and every argument named by its formal."""
    if args:
        raise ThetaArityError("match.call takes no arguments")
    frame = _frame(env, "match.call")
    expanded: list[Arg] = []
    for a in frame.call.args:
        if a.value == _DOTS:
            expanded.extend(dots_in(frame.caller).exprs())
        else:
            expanded.append(a)
    return standardize(Call.build(frame.call.head, expanded), frame.function.formals)
