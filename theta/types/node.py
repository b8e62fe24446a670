from __future__ import annotations

from enum import Enum


class NodeKind(Enum):
    CONSTANT = "constant"
    SYMBOL = "symbol"
    CALL = "call"
    PARAMETER_LIST = "parameter_list"


class Node:
    """Base class of the closed code representation.

    Exactly four subclasses exist: Constant, Symbol, Call and ParameterList.
    Nodes are persistent values; every edit returns a new tree.
    """

    __slots__ = ()

    kind: NodeKind

    def __setattr__(self, key, value):
        # Slots are written once from __init__ via object.__setattr__.
        raise AttributeError(f"{type(self).__name__} nodes are immutable")

    def __delattr__(self, key):
        raise AttributeError(f"{type(self).__name__} nodes are immutable")
