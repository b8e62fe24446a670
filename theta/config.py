from __future__ import annotations
import os
from typing import Optional

# Defaults
_DEFAULT_MAX_DEPTH = 512
_DEFAULT_WALK_DEPTH = 400


def int_from_env(var: str, default: Optional[int]) -> Optional[int]:
    raw = os.environ.get(var)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(f"{var} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{var} must be positive, got {value}")
    return value


def float_from_env(var: str, default: Optional[float]) -> Optional[float]:
    raw = os.environ.get(var)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw.strip())
    except ValueError:
        raise ValueError(f"{var} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{var} must be positive, got {value}")
    return value


def get_max_depth() -> int:
    return int_from_env('THETA_MAX_DEPTH', _DEFAULT_MAX_DEPTH)


def get_walk_depth() -> int:
    return int_from_env('THETA_WALK_DEPTH', _DEFAULT_WALK_DEPTH)


def get_node_budget() -> Optional[int]:
    return int_from_env('THETA_NODE_BUDGET', None)


def get_time_budget() -> Optional[float]:
    return float_from_env('THETA_TIME_BUDGET', None)
