from __future__ import annotations


class NullType:
    """The empty value: result of an `if` without else, an empty block, an empty body."""

    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self): return "NULL"
    def __bool__(self): return False

    def __eq__(self, other):
        return isinstance(other, NullType)

    def __hash__(self):
        return hash("NULL")

    def __reduce__(self):
        return (NullType, ())


Null = NullType()
