from theta import EvaluatorFn, Value
from theta.types.call import Arg
from theta.types.closure import Closure
from theta.types.constant import Constant
from theta.types.environment import Environment
from theta.types.errors import ThetaArityError, ThetaTypeError
from theta.types.formals import ParameterList
from theta.types.null import Null, NullType

FUNCTION_FORMALS = ParameterList(["args", ("body", Null)])


def function_form(args: tuple[Arg, ...], env: Environment, evaluate_fn: EvaluatorFn) -> Value:
    """function(params, body): a closure over the calling environment.

    A missing body makes a function that returns NULL.
    """
    if not args or len(args) > 2:
        raise ThetaArityError("function requires a parameter list and at most one body expression")

    params = args[0].value
    if isinstance(params, Constant) and isinstance(params.value, NullType):
        params = ParameterList()
    if not isinstance(params, ParameterList):
        raise ThetaTypeError(f"function: invalid formal argument list {params}", params)

    body = args[1].value if len(args) == 2 else Constant(Null)
    return Closure(params, body, env)
