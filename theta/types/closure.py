"""Closure representation for Theta functions."""

from __future__ import annotations

from io import StringIO

from theta import Value
from theta.types.call import Call
from theta.types.environment import Environment
from theta.types.formals import ParameterList
from theta.types.node import Node


class Closure:
    """A first-class function: formal parameters, body, and defining environment."""

    __slots__ = ("formals", "body", "env")

    is_special_form = False

    def __init__(self, formals: ParameterList, body: Node, env: Environment):
        self.formals: ParameterList = formals
        self.body: Node = body
        # Lexical scope: the body runs in a child of the defining environment
        self.env: Environment = env

    def __str__(self) -> str:
        with StringIO() as buffer:
            buffer.write("function")
            buffer.write(str(self.formals))
            buffer.write(" ")
            buffer.write(str(self.body))
            return buffer.getvalue()

    def __repr__(self) -> str:
        return f"<Closure {self}>"

    def invoke(self, call: Call, caller_env: Environment) -> Value:
        """Apply this closure to the unevaluated arguments of `call`."""
        from theta.evaluation.apply import apply_closure
        from theta.evaluation.evaluator import evaluate
        return apply_closure(self, call, caller_env, evaluate)
