from theta import EvaluatorFn, Value
from theta.types.call import Arg
from theta.types.environment import Environment
from theta.types.errors import ThetaArityError
from theta.types.null import Null


def brace_form(args: tuple[Arg, ...], env: Environment, evaluate_fn: EvaluatorFn) -> Value:
    result: Value = Null
    for a in args:
        result = evaluate_fn(a.value, env)
    return result


def paren_form(args: tuple[Arg, ...], env: Environment, evaluate_fn: EvaluatorFn) -> Value:
    if len(args) != 1:
        raise ThetaArityError("( expects exactly one expression")
    return evaluate_fn(args[0].value, env)
