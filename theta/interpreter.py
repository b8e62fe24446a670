from __future__ import annotations

import logging
from typing import Iterable, Optional

from theta import Value
from theta import config, runtime_context
from theta.types.call import Call
from theta.types.environment import Environment
from theta.types.errors import ThetaTypeError
from theta.types.formals import ParameterList
from theta.types.node import Node
from theta.types.null import Null
from theta.builtin.env_builtin import register
from theta.evaluation.evaluator import evaluate
from theta.metaprog.quasiquote import quasiquote
from theta.metaprog.standardize import standardize
from theta.metaprog.substitute import substitute

logger = logging.getLogger(__name__)


class Interpreter:
    """
    A Theta session: one root environment holding the host table, and the
    limits every top-level operation runs under.

    Budgets default to THETA_NODE_BUDGET / THETA_TIME_BUDGET and the depth
    limit to THETA_MAX_DEPTH; explicit arguments take precedence.
    """

    def __init__(
        self,
        node_budget: Optional[int] = None,
        time_budget: Optional[float] = None,
        max_depth: Optional[int] = None,
    ):
        self.node_budget = node_budget if node_budget is not None else config.get_node_budget()
        self.time_budget = time_budget if time_budget is not None else config.get_time_budget()
        self.max_depth = max_depth
        self.env: Environment = Environment()
        register(self.env)
        logger.debug(
            "session created: nodes=%s seconds=%s depth=%s",
            self.node_budget, self.time_budget, self.max_depth,
        )

    def _run(self, fn, *args):
        with runtime_context.max_depth(self.max_depth), \
                runtime_context.budget(self.node_budget, self.time_budget):
            return fn(*args)

    def eval(self, nodes: Node | Iterable[Node], env: Optional[Environment] = None) -> Value:
        """Evaluate one top-level Node, or a sequence of them; returns the last value (NULL if none)."""
        target = env if env is not None else self.env
        if isinstance(nodes, Node):
            nodes = [nodes]

        def run_all() -> Value:
            result: Value = Null
            for node in nodes:
                if not isinstance(node, Node):
                    raise ThetaTypeError(f"cannot evaluate non-node {node!r}", node)
                result = evaluate(node, target)
            return result

        return self._run(run_all)

    def substitute(self, node: Node, env: Environment) -> Node:
        return self._run(substitute, node, env)

    def quasiquote(self, node: Node, where: Optional[Environment] = None) -> Node:
        return self._run(quasiquote, node, where if where is not None else self.env, evaluate)

    def standardize(self, call: Call, formals: ParameterList) -> Call:
        return self._run(standardize, call, formals)

    def define(self, name: str, value: Value) -> None:
        """Bind a host value in the session's root environment."""
        self.env.define(name, value)

    def lookup(self, name: str) -> Value:
        return self.env.lookup(name)
