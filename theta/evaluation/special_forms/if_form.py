import math

import numpy as np

from theta import EvaluatorFn, Value
from theta.types.call import Arg
from theta.types.environment import Environment
from theta.types.errors import ThetaArityError, ThetaTypeError
from theta.types.formals import ParameterList
from theta.types.null import Null, NullType

IF_FORMALS = ParameterList(["cond", "yes", ("no", Null)])


def as_condition(value: Value) -> bool:
    """Interpret a value as a single TRUE/FALSE."""
    if isinstance(value, np.ndarray):
        if value.size == 0:
            raise ThetaTypeError("argument is of length zero", value)
        if value.size > 1:
            raise ThetaTypeError("the condition has length > 1", value)
        value = value.reshape(-1)[0]
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, NullType) or value is None:
        raise ThetaTypeError("argument is of length zero", value)
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            raise ThetaTypeError("missing value where TRUE/FALSE needed", value)
        return value != 0
    raise ThetaTypeError(f"argument is not interpretable as logical: {value!r}", value)


def if_form(args: tuple[Arg, ...], env: Environment, evaluate_fn: EvaluatorFn) -> Value:
    if len(args) not in (2, 3):
        raise ThetaArityError("if requires a condition, a then-expression and an optional else-expression")

    if as_condition(evaluate_fn(args[0].value, env)):
        return evaluate_fn(args[1].value, env)
    elif len(args) == 3:
        return evaluate_fn(args[2].value, env)
    else:
        return Null
