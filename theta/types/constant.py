from __future__ import annotations

import math
from collections.abc import Mapping

import numpy as np

from theta import Value
from theta.types.errors import ThetaTypeError
from theta.types.node import Node, NodeKind


def values_identical(a: Value, b: Value) -> bool:
    """Value equality used for Constant nodes and the `identical` primitive.

    Types must agree (1 is not 1.0, True is not 1). NaN is identical to NaN.
    Arrays are identical when dtype, shape and elements agree. Named lists
    (mappings) need the same keys in the same order and identical values.
    """
    if a is b:
        return True
    if isinstance(a, np.ndarray) or isinstance(b, np.ndarray):
        if not (isinstance(a, np.ndarray) and isinstance(b, np.ndarray)):
            return False
        if a.dtype != b.dtype or a.shape != b.shape:
            return False
        return bool(np.array_equal(a, b, equal_nan=a.dtype.kind in "fc"))
    if type(a) is not type(b):
        return False
    if isinstance(a, (list, tuple)):
        return len(a) == len(b) and all(values_identical(x, y) for x, y in zip(a, b))
    if isinstance(a, Mapping):
        return len(a) == len(b) and all(
            values_identical(ka, kb) and values_identical(a[ka], b[kb]) for ka, kb in zip(a, b)
        )
    if isinstance(a, float) and math.isnan(a) and math.isnan(b):
        return True
    return bool(a == b)


def value_hash(value: Value) -> int:
    if isinstance(value, np.ndarray):
        return hash((value.dtype.str, value.shape, value.tobytes()))
    if isinstance(value, (list, tuple)):
        return hash(tuple(value_hash(v) for v in value))
    if isinstance(value, Mapping):
        return hash(tuple((value_hash(k), value_hash(v)) for k, v in value.items()))
    if isinstance(value, float) and math.isnan(value):
        # hash(nan) is per object; every NaN is identical to every other
        return hash("nan")
    try:
        return hash(value)
    except TypeError:
        # Unhashable values still need a hash consistent with values_identical
        return hash(type(value).__name__)


class Constant(Node):
    """An atomic literal. Equality is value equality."""

    __slots__ = ("value",)
    __match_args__ = ("value",)

    kind = NodeKind.CONSTANT

    def __init__(self, value: Value):
        if isinstance(value, Node):
            raise ThetaTypeError(f"Constant cannot wrap the node {value!r}", value)
        object.__setattr__(self, "value", value)

    def __eq__(self, other) -> bool:
        return isinstance(other, Constant) and values_identical(self.value, other.value)

    def __hash__(self) -> int:
        return value_hash(self.value)

    def __repr__(self):
        return f"Constant({self.value!r})"

    def __str__(self):
        if isinstance(self.value, str):
            escaped = self.value.replace("\\", "\\\\").replace('"', '\\"')
            return f'"{escaped}"'
        if isinstance(self.value, bool):
            return "TRUE" if self.value else "FALSE"
        return str(self.value)

    def __reduce__(self):
        return (Constant, (self.value,))
