import pytest

from theta import config, runtime_context
from theta.interpreter import Interpreter
from theta.types import Null, call, const, formals, sym
from theta.types.environment import Environment
from theta.types.errors import ThetaBudgetExceeded, ThetaRecursionLimitExceeded, ThetaTypeError


def recursive_program(name="f"):
    return call("<-", sym(name), call("function", formals("n"), call(name, call("+", sym("n"), 1))))

# -----------------------------------------------------
# Evaluation sessions
# -----------------------------------------------------

def test_eval_sequence_returns_last_value():
    interp = Interpreter()
    result = interp.eval([
        call("<-", sym("x"), 2),
        call("<-", sym("y"), call("*", sym("x"), 21)),
        sym("y"),
    ])
    assert result == 42
    assert interp.lookup("x") == 2


def test_eval_single_node_and_empty_program():
    interp = Interpreter()
    assert interp.eval(call("+", 1, 2)) == 3
    assert interp.eval([]) is Null


def test_eval_rejects_non_nodes():
    with pytest.raises(ThetaTypeError):
        Interpreter().eval([const(1), 2])


def test_sessions_are_isolated():
    a, b = Interpreter(), Interpreter()
    a.eval(call("<-", sym("x"), 1))
    assert "x" in a.env
    assert "x" not in b.env


def test_define_host_value():
    interp = Interpreter()
    interp.define("scale", lambda env, args: args[0] * 10)
    assert interp.eval(call("scale", 4)) == 40

# -----------------------------------------------------
# Limits
# -----------------------------------------------------

def test_node_budget():
    interp = Interpreter(node_budget=20)
    with pytest.raises(ThetaBudgetExceeded) as info:
        interp.eval([recursive_program(), call("f", 0)])
    assert info.value.kind == "node"
    assert runtime_context.get_budget() is None
    assert runtime_context.get_depth() == 0


def test_budget_applies_per_operation():
    interp = Interpreter(node_budget=10)
    for _ in range(5):
        assert interp.eval(call("+", 1, 2)) == 3


def test_max_depth():
    interp = Interpreter(max_depth=25)
    with pytest.raises(ThetaRecursionLimitExceeded) as info:
        interp.eval([recursive_program(), call("f", 0)])
    assert info.value.limit == 25
    assert runtime_context.get_depth() == 0
    assert runtime_context.get_max_depth() == config.get_max_depth()


def test_limits_from_environment(monkeypatch):
    monkeypatch.setenv("THETA_NODE_BUDGET", "7")
    monkeypatch.setenv("THETA_TIME_BUDGET", "2.5")
    interp = Interpreter()
    assert interp.node_budget == 7
    assert interp.time_budget == 2.5
    assert Interpreter(node_budget=100).node_budget == 100


def test_malformed_limits(monkeypatch):
    monkeypatch.setenv("THETA_NODE_BUDGET", "lots")
    with pytest.raises(ValueError, match="THETA_NODE_BUDGET"):
        Interpreter()
    monkeypatch.setenv("THETA_NODE_BUDGET", "-1")
    with pytest.raises(ValueError):
        Interpreter()


def test_config_defaults(monkeypatch):
    for var in ("THETA_MAX_DEPTH", "THETA_WALK_DEPTH", "THETA_NODE_BUDGET", "THETA_TIME_BUDGET"):
        monkeypatch.delenv(var, raising=False)
    assert config.get_max_depth() == 512
    assert config.get_walk_depth() == 400
    assert config.get_node_budget() is None
    assert config.get_time_budget() is None

# -----------------------------------------------------
# Metaprogramming entry points
# -----------------------------------------------------

def test_substitute_quasiquote_standardize():
    interp = Interpreter()
    frame = Environment.from_mapping({"a": call("g", 1)}, outer=interp.env)
    assert interp.substitute(call("f", sym("a")), frame) == call("f", call("g", 1))
    assert interp.substitute(call("f", sym("a")), interp.env) == call("f", sym("a"))

    interp.eval(call("<-", sym("v"), 3))
    assert interp.quasiquote(call("f", call(".", sym("v")))) == call("f", 3)

    assert interp.standardize(call("f", 2, a=1), formals("a", "b")) == call("f", a=1, b=2)


def test_metaprogramming_runs_under_the_budget():
    interp = Interpreter(node_budget=3)
    with pytest.raises(ThetaBudgetExceeded):
        interp.quasiquote(call("f", 1, 2, 3, 4))
