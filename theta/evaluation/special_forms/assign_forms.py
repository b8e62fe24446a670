from theta import EvaluatorFn, Value
from theta.types.call import Arg
from theta.types.constant import Constant
from theta.types.environment import Environment
from theta.types.errors import ThetaArityError, ThetaTypeError
from theta.types.node import Node
from theta.types.symbol import MISSING, Symbol


def assignment_target(node: Node) -> str:
    if isinstance(node, Symbol) and node is not MISSING:
        return node.name
    if isinstance(node, Constant) and isinstance(node.value, str) and node.value:
        return node.value
    raise ThetaTypeError(f"invalid assignment target {node}", node)


def assign_form(args: tuple[Arg, ...], env: Environment, evaluate_fn: EvaluatorFn) -> Value:
    """x <- value: bind in the current environment and return the value."""
    if len(args) != 2:
        raise ThetaArityError("<- requires exactly 2 arguments: target <- value")
    name = assignment_target(args[0].value)
    value = evaluate_fn(args[1].value, env)
    env.define(name, value)
    return value


def super_assign_form(args: tuple[Arg, ...], env: Environment, evaluate_fn: EvaluatorFn) -> Value:
    """x <<- value: rebind x in the nearest enclosing scope that has it, else at the root."""
    if len(args) != 2:
        raise ThetaArityError("<<- requires exactly 2 arguments: target <<- value")
    name = assignment_target(args[0].value)
    value = evaluate_fn(args[1].value, env)
    scope = env.outer if env.outer is not None else env
    scope.set(name, value)
    return value
