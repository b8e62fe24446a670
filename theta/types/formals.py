"""Formal parameter lists: names plus optional default expressions."""

from __future__ import annotations

from io import StringIO
from typing import Iterable, Iterator, NamedTuple, Optional

from theta.types.constant import Constant
from theta.types.errors import ThetaTypeError
from theta.types.node import Node, NodeKind
from theta.types.symbol import MISSING

# Reserved name of the variadic formal
VARIADIC = "..."


class Param(NamedTuple):
    name: str
    default: Node = MISSING


def _as_param(entry) -> Param:
    if isinstance(entry, str):
        return Param(entry, MISSING)
    if isinstance(entry, tuple) and len(entry) == 2:
        name, default = entry
        if not isinstance(default, Node):
            default = Constant(default)
        return Param(name, default)
    raise ThetaTypeError(f"formal must be a name or a (name, default) pair, got {entry!r}", entry)


class ParameterList(Node):
    """Ordered formals; names are unique except for the variadic marker."""

    __slots__ = ("entries",)
    __match_args__ = ("entries",)

    kind = NodeKind.PARAMETER_LIST

    def __init__(self, entries: Iterable[Param | tuple | str] = ()):
        params = tuple(_as_param(e) for e in entries)
        seen: set[str] = set()
        for p in params:
            if not isinstance(p.name, str) or not p.name:
                raise ThetaTypeError(f"formal name must be a non-empty string, got {p.name!r}", p.name)
            if p.name in seen and p.name != VARIADIC:
                raise ThetaTypeError(f"repeated formal argument '{p.name}'", p.name)
            seen.add(p.name)
        object.__setattr__(self, "entries", params)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.entries)

    @property
    def variadic_index(self) -> Optional[int]:
        for i, p in enumerate(self.entries):
            if p.name == VARIADIC:
                return i
        return None

    def default(self, name: str) -> Optional[Node]:
        for p in self.entries:
            if p.name == name:
                return p.default
        return None

    def __contains__(self, name: str) -> bool:
        return any(p.name == name for p in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Param]:
        return iter(self.entries)

    def __eq__(self, other) -> bool:
        return isinstance(other, ParameterList) and self.entries == other.entries

    def __hash__(self) -> int:
        return hash(self.entries)

    def __repr__(self):
        return f"ParameterList({list(self.entries)!r})"

    def __str__(self):
        with StringIO() as buffer:
            buffer.write("(")
            buffer.write(", ".join(
                p.name if p.default is MISSING else f"{p.name} = {p.default}"
                for p in self.entries
            ))
            buffer.write(")")
            return buffer.getvalue()

    def __reduce__(self):
        return (ParameterList, (self.entries,))
