# Core type aliases for Theta's data model.
# Code is represented by the closed Node hierarchy in theta.types (Constant,
# Symbol, Call, ParameterList). Runtime values are plain Python objects
# (numbers, strings, numpy arrays, lists), Nodes themselves (code as data),
# closures, environments and the Null singleton.
#
# Naming guidance:
# - Expression: use in quoting/walking code to denote syntactic forms (Nodes).
# - Value:      use in evaluator/runtime code to denote evaluated values.

from typing import Any, Callable

# Runtime value alias
Value = Any
# Code-as-data alias; always a theta.types.node.Node at runtime
Expression = Any

# Evaluator function type: passed to special forms so they can evaluate selectively
EvaluatorFn = Callable[..., Value]
