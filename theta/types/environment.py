"""Runtime environment for Theta.

The Environment stores bindings of names to values (or Promises) and supports
nested scopes via an `outer` link. The chain is acyclic and ends at a single
root with no parent. Environments are shared by reference: every closure and
promise that captured one sees writes made through any other alias.
"""

from __future__ import annotations

from io import StringIO
from typing import TYPE_CHECKING, Iterator, Mapping, Optional

from theta import Value
from theta.types.errors import ThetaMissingValueAccess, ThetaTypeError, ThetaUnboundSymbol
from theta.types.symbol import MISSING, Symbol

if TYPE_CHECKING:
    from theta.types.call import Call
    from theta.types.closure import Closure
    from theta.types.promise import Dots


class CallFrame:
    """Bookkeeping for one closure invocation, attached to its local environment."""

    __slots__ = ("function", "call", "caller", "dots", "missing")

    def __init__(self, function: Closure, call: Call, caller: Environment, dots: Optional[Dots] = None):
        self.function = function
        self.call = call
        self.caller = caller
        self.dots = dots
        # Formals that were not supplied by the caller
        self.missing: set[str] = set()

    def __repr__(self) -> str:
        return f"<CallFrame {self.call}>"


def _key(name: Symbol | str) -> str:
    if isinstance(name, Symbol):
        if name is MISSING:
            raise ThetaMissingValueAccess()
        return name.name
    if isinstance(name, str) and name:
        return name
    raise ThetaTypeError(f"Cannot use {name!r} as a variable name", name)


class Environment:
    """Hierarchical mapping from names to values."""

    __slots__ = ("vars", "outer", "frame", "is_table")

    def __init__(self, outer: Optional[Environment] = None, frame: Optional[CallFrame] = None):
        self.vars: dict[str, Value] = {}
        self.outer: Environment | None = outer
        self.frame: CallFrame | None = frame
        self.is_table: bool = False

    @classmethod
    def from_mapping(cls, mapping: Mapping[Symbol | str, Value], *, outer: Optional[Environment]) -> Environment:
        """Build an environment from a flat table of values.

        `outer` is required: lookups that miss the table fall back to it and
        nowhere else, so pass None only for a deliberately isolated table.
        """
        env = cls(outer=outer)
        env.is_table = True
        env.update(mapping)
        return env

    @property
    def substitutable(self) -> bool:
        """True for call frames and explicit tables, never for the root/global scope."""
        return self.frame is not None or self.is_table

    @property
    def root(self) -> Environment:
        env = self
        while env.outer is not None:
            env = env.outer
        return env

    @property
    def is_root(self) -> bool:
        return self.outer is None

    def define(self, name: Symbol | str, value: Value) -> None:
        """Bind `name` to `value` in this frame only (never in an ancestor).

        Raises ThetaMissingValueAccess if `value` is the missing-argument marker.
        """
        key = _key(name)
        if value is MISSING:
            raise ThetaMissingValueAccess()
        self.vars[key] = value

    def bind_missing(self, name: Symbol | str) -> None:
        """Mark a formal as not supplied; reading it raises ThetaMissingValueAccess."""
        self.vars[_key(name)] = MISSING

    def find(self, name: Symbol | str) -> Optional[Environment]:
        """Find the nearest environment in the chain that binds `name`."""
        key = _key(name)
        env: Optional[Environment] = self
        while env is not None:
            if key in env.vars:
                return env
            env = env.outer
        return None

    def lookup(self, name: Symbol | str) -> Value:
        """Return the raw binding for `name` (possibly a Promise), walking outward.

        Raises ThetaUnboundSymbol if not found.
        """
        key = _key(name)
        env: Optional[Environment] = self
        while env is not None:
            if key in env.vars:
                return env.vars[key]
            env = env.outer
        raise ThetaUnboundSymbol(key)

    def get_local(self, name: Symbol | str, default: Value = None) -> Value:
        return self.vars.get(_key(name), default)

    def has_local(self, name: Symbol | str) -> bool:
        return _key(name) in self.vars

    def set(self, name: Symbol | str, value: Value) -> None:
        """Update the nearest existing binding for `name`; define it at the root if there is none."""
        if value is MISSING:
            raise ThetaMissingValueAccess()
        env = self.find(name)
        if env is None:
            env = self.root
        env.vars[_key(name)] = value

    def remove(self, name: Symbol | str) -> None:
        key = _key(name)
        if key not in self.vars:
            raise ThetaUnboundSymbol(key)
        del self.vars[key]

    def update(self, mapping: Mapping[Symbol | str, Value]) -> None:
        """Bulk-define a mapping of name -> value in the current frame."""
        for k, v in mapping.items():
            self.define(k, v)

    def names(self) -> list[str]:
        return list(self.vars)

    def __contains__(self, name: Symbol | str) -> bool:
        return self.find(name) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.vars)

    def _write_vars(self, buffer: StringIO) -> None:
        """Write this frame's variables into the buffer in a compact form."""
        buffer.write("{")
        first = True
        for k, v in self.vars.items():
            if not first:
                buffer.write(", ")
            buffer.write(f"{k}: {v!r}")
            first = False
        buffer.write("}")

    def __str__(self) -> str:
        """Human-readable single-frame view with an indicator for parent."""
        with StringIO() as buffer:
            self._write_vars(buffer)
            if self.outer is not None:
                buffer.write(" -> ...")  # indicate parent exists
            return buffer.getvalue()

    def __repr__(self) -> str:
        """Chain representation for debugging: local names, then binding counts of ancestors."""
        with StringIO() as buffer:
            buffer.write("<Environment chain: ")
            chain = ["{" + ", ".join(self.vars) + "}"]
            env: Optional[Environment] = self.outer
            while env is not None:
                chain.append(f"[{len(env.vars)} bindings]")
                env = env.outer
            buffer.write(" -> ".join(chain))
            buffer.write(">")
            return buffer.getvalue()
