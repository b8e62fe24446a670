"""Call nodes: application of a callee to ordered, optionally named arguments."""

from __future__ import annotations

from io import StringIO
from typing import Iterable, Iterator, NamedTuple, Optional

from theta.types.errors import ThetaArityError, ThetaTypeError
from theta.types.node import Node, NodeKind
from theta.types.symbol import Symbol

_KEEP = object()


class Arg(NamedTuple):
    """One child of a Call: an optional tag name and the child node."""

    name: Optional[str]
    value: Node


def _as_arg(item) -> Arg:
    if isinstance(item, Node):
        return Arg(None, item)
    if isinstance(item, tuple) and len(item) == 2:
        name, value = item
        if name is not None and not isinstance(name, str):
            raise ThetaTypeError(f"argument name must be a string or None, got {name!r}", name)
        if not isinstance(value, Node):
            raise ThetaTypeError(f"call children must be nodes, got {value!r}", value)
        return Arg(name or None, value)
    raise ThetaTypeError(f"call children must be nodes or (name, node) pairs, got {item!r}", item)


class Call(Node):
    """children[0] is the callee (a Symbol or a nested Call); the rest are arguments."""

    __slots__ = ("children",)
    __match_args__ = ("children",)

    kind = NodeKind.CALL

    def __init__(self, children: Iterable[Arg | tuple | Node]):
        items = tuple(_as_arg(c) for c in children)
        if not items:
            raise ThetaArityError("a call needs at least a callee")
        head = items[0].value
        if not isinstance(head, (Symbol, Call)):
            raise ThetaTypeError(f"call head must be a symbol or a call, got {head!r}", head)
        object.__setattr__(self, "children", items)

    @classmethod
    def build(cls, head: Node, args: Iterable[Arg | tuple | Node] = ()) -> Call:
        """Build a call from a head node and its (name, node) arguments."""
        return cls([Arg(None, head), *args])

    # --- Accessors ---
    @property
    def head(self) -> Node:
        return self.children[0].value

    @property
    def args(self) -> tuple[Arg, ...]:
        return self.children[1:]

    @property
    def arity(self) -> int:
        return len(self.children) - 1

    def __len__(self) -> int:
        return len(self.children)

    def __iter__(self) -> Iterator[Arg]:
        return iter(self.children)

    def _index(self, index: int, allow_end: bool = False) -> int:
        size = len(self.children)
        if index < 0:
            index += size
        upper = size if allow_end else size - 1
        if not 0 <= index <= upper:
            raise IndexError(f"child index {index} out of range for a call with {size} children")
        return index

    def get(self, index: int) -> Node:
        return self.children[self._index(index)].value

    def name_at(self, index: int) -> Optional[str]:
        return self.children[self._index(index)].name

    def arg(self, name: str) -> Optional[Node]:
        """First argument tagged `name`, or None."""
        for a in self.args:
            if a.name == name:
                return a.value
        return None

    # --- Persistent edits (always return a new Call) ---
    def with_child(self, index: int, value: Node, name=_KEEP) -> Call:
        """Replace (or append, when index == len) a child; the name is kept unless given."""
        index = self._index(index, allow_end=True)
        items = list(self.children)
        if index == len(items):
            items.append(Arg(None if name is _KEEP else name, value))
        else:
            old = items[index]
            items[index] = Arg(old.name if name is _KEEP else name, value)
        return Call(items)

    def without_child(self, index: int) -> Call:
        """Drop a child; later children shift down by one."""
        index = self._index(index)
        items = self.children[:index] + self.children[index + 1:]
        if not items:
            raise ThetaArityError("cannot remove the only child of a call")
        return Call(items)

    def with_args(self, args: Iterable[Arg | tuple | Node]) -> Call:
        return Call([self.children[0], *args])

    # --- Equality ---
    def __eq__(self, other) -> bool:
        return isinstance(other, Call) and self.children == other.children

    def __hash__(self) -> int:
        return hash(self.children)

    def __repr__(self):
        return f"Call({list(self.children)!r})"

    def __str__(self):
        with StringIO() as buffer:
            buffer.write(str(self.head))
            buffer.write("(")
            first = True
            for a in self.args:
                if not first:
                    buffer.write(", ")
                if a.name is not None:
                    buffer.write(f"{a.name} = ")
                buffer.write(str(a.value))
                first = False
            buffer.write(")")
            return buffer.getvalue()

    def __reduce__(self):
        return (Call, (self.children,))
