import pytest

from theta import runtime_context
from theta.builtin.env_builtin import register
from theta.types.environment import Environment


@pytest.fixture
def env():
    """Return a fresh root environment with the default host table."""
    e = Environment()
    register(e)
    return e


@pytest.fixture(autouse=True)
def _reset_runtime_context():
    # Depth limits are process-global; never leak an override into the next test
    yield
    runtime_context.set_max_depth(None)
