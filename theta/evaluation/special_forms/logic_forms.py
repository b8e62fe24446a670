from theta import EvaluatorFn, Value
from theta.types.call import Arg
from theta.types.environment import Environment
from theta.types.errors import ThetaArityError
from theta.evaluation.special_forms.if_form import as_condition


def and_form(args: tuple[Arg, ...], env: Environment, evaluate_fn: EvaluatorFn) -> Value:
    """Short-circuiting logical AND: the right operand is evaluated only if the left is TRUE."""
    if len(args) != 2:
        raise ThetaArityError("&& requires exactly 2 arguments")
    if not as_condition(evaluate_fn(args[0].value, env)):
        return False
    return as_condition(evaluate_fn(args[1].value, env))


def or_form(args: tuple[Arg, ...], env: Environment, evaluate_fn: EvaluatorFn) -> Value:
    """Short-circuiting logical OR: the right operand is evaluated only if the left is FALSE."""
    if len(args) != 2:
        raise ThetaArityError("|| requires exactly 2 arguments")
    if as_condition(evaluate_fn(args[0].value, env)):
        return True
    return as_condition(evaluate_fn(args[1].value, env))
