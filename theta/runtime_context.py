from __future__ import annotations
import logging
import sys
import time
from contextlib import contextmanager
from typing import Iterator, Optional

from theta.config import get_max_depth as _configured_max_depth
from theta.types.errors import ThetaBudgetExceeded, ThetaRecursionLimitExceeded

logger = logging.getLogger(__name__)

# NOTE: For now this is process-global. If threading is introduced,
# consider switching to contextvars or threading.local.
_depth: int = 0
_max_depth: Optional[int] = None
_budget: Optional["Budget"] = None

# Host frames one nested evaluation or walk step may use, and the ceiling
# reserve_stack never raises the interpreter recursion limit past.
FRAMES_PER_LEVEL = 8
_STACK_MARGIN = 200
_STACK_CEILING = 10000


def reserve_stack(levels: int) -> None:
    """Raise the host recursion limit so `levels` nested steps fit on the Python stack.

    The limit is never lowered. Past the ceiling a host RecursionError is still
    possible; callers translate it into ThetaRecursionLimitExceeded.
    """
    needed = min(levels * FRAMES_PER_LEVEL + _STACK_MARGIN, _STACK_CEILING)
    if sys.getrecursionlimit() < needed:
        logger.debug("raising recursion limit to %d for depth %d", needed, levels)
        sys.setrecursionlimit(needed)


class Budget:
    """Node-count and wall-clock allowance for one driver-level operation."""

    __slots__ = ("max_nodes", "max_seconds", "nodes", "started")

    def __init__(self, max_nodes: Optional[int] = None, max_seconds: Optional[float] = None):
        self.max_nodes = max_nodes
        self.max_seconds = max_seconds
        self.nodes = 0
        self.started = time.monotonic()

    def charge(self, n: int = 1) -> None:
        self.nodes += n
        if self.max_nodes is not None and self.nodes > self.max_nodes:
            raise ThetaBudgetExceeded("node", self.max_nodes, self.nodes)
        if self.max_seconds is not None:
            elapsed = time.monotonic() - self.started
            if elapsed > self.max_seconds:
                raise ThetaBudgetExceeded("time", self.max_seconds, round(elapsed, 6))

    def __repr__(self) -> str:
        return f"Budget(nodes={self.nodes}/{self.max_nodes}, seconds={self.max_seconds})"


def get_max_depth() -> int:
    global _max_depth
    if _max_depth is None:
        _max_depth = _configured_max_depth()
    return _max_depth


def set_max_depth(limit: Optional[int]) -> None:
    """Override the evaluation depth limit; None re-reads THETA_MAX_DEPTH."""
    global _max_depth
    _max_depth = limit


def get_depth() -> int:
    return _depth


def enter() -> None:
    """Account for one more nested evaluation; raise once the limit is passed."""
    global _depth
    limit = get_max_depth()
    if _depth >= limit:
        raise ThetaRecursionLimitExceeded(limit)
    if _depth == 0:
        reserve_stack(limit)
    _depth += 1


def leave() -> None:
    global _depth
    _depth -= 1


def charge(n: int = 1) -> None:
    if _budget is not None:
        _budget.charge(n)


def get_budget() -> Optional[Budget]:
    return _budget


@contextmanager
def budget(max_nodes: Optional[int] = None, max_seconds: Optional[float] = None) -> Iterator[Optional[Budget]]:
    """Run the enclosed operation under a node/time budget.

    With neither limit set the currently active budget (if any) stays in force.
    The previous budget is restored on exit, whether or not the block raised.
    """
    global _budget
    if max_nodes is None and max_seconds is None:
        yield _budget
        return
    previous = _budget
    _budget = Budget(max_nodes, max_seconds)
    logger.debug("budget start: nodes=%s seconds=%s", max_nodes, max_seconds)
    try:
        yield _budget
    finally:
        logger.debug("budget stop: %r", _budget)
        _budget = previous


@contextmanager
def max_depth(limit: Optional[int]) -> Iterator[int]:
    """Temporarily override the evaluation depth limit; None keeps the current one."""
    global _max_depth
    if limit is None:
        yield get_max_depth()
        return
    previous = _max_depth
    _max_depth = limit
    try:
        yield limit
    finally:
        _max_depth = previous
