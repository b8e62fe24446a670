from __future__ import annotations
import sys

from theta.types.errors import ThetaTypeError
from theta.types.node import Node, NodeKind


class Symbol(Node):
    __slots__ = ("name",)
    __match_args__ = ("name",)

    kind = NodeKind.SYMBOL

    def __init__(self, name: str):
        if not isinstance(name, str):
            raise ThetaTypeError(f"Symbol name must be a string, got {name!r}", name)
        if not name:
            raise ThetaTypeError("attempt to use zero-length variable name", name)
        # Intern to ensure fast equality/hash and reduce memory
        object.__setattr__(self, "name", sys.intern(name))

    def __eq__(self, other) -> bool:
        return isinstance(other, Symbol) and self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self):
        return f"Symbol({self.name!r})"

    def __str__(self):
        return self.name

    def __reduce__(self):
        return (Symbol, (self.name,))


class _MissingMarker(Symbol):
    """The empty symbol: stands for an argument or default that was not supplied.

    It is an ordinary Symbol for classification and inspection, but the
    environment refuses to store it as a variable value.
    """

    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            inst = object.__new__(cls)
            object.__setattr__(inst, "name", "")
            cls._instance = inst
        return cls._instance

    def __init__(self):
        pass

    def __repr__(self):
        return "MISSING"

    def __reduce__(self):
        return (_MissingMarker, ())


MISSING = _MissingMarker()


def is_missing(node) -> bool:
    return node is MISSING
