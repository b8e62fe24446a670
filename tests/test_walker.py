import pytest

from theta import runtime_context
from theta.types import Arg, Call, Constant, ParameterList, Symbol, call, const, formals, sym
from theta.types.environment import Environment
from theta.types.errors import ThetaBudgetExceeded, ThetaRecursionLimitExceeded, ThetaTypeError, ThetaUnknownNodeKind
from theta.metaprog.checks import expand_logical_abbr, find_assign, find_identifier
from theta.metaprog.substitute import substitute
from theta.metaprog.walker import Splice, collect, rebuild, search, transform, visit


def nested(depth):
    node = sym("x")
    for _ in range(depth):
        node = call("f", node)
    return node

# -----------------------------------------------------
# visit
# -----------------------------------------------------

def test_visit_counts_leaves():
    tree = call("f", 1, call("g", sym("x")), formals("a", b=2))
    # f, 1, g, x, and the two defaults (MISSING for a, 2 for b)
    assert visit(tree, lambda n: 1, lambda n, results: sum(results)) == 6


def test_visit_rejects_non_nodes():
    with pytest.raises(ThetaUnknownNodeKind):
        visit(42, lambda n: n, rebuild)


def test_visit_depth_limit_reports_path():
    with pytest.raises(ThetaRecursionLimitExceeded) as info:
        visit(nested(20), lambda n: n, rebuild, max_depth=10)
    assert info.value.limit == 10
    # The callee of the deepest allowed call is the first node past the limit
    assert info.value.path == (1,) * 10 + (0,)


def test_visit_depth_limit_from_config(monkeypatch):
    monkeypatch.setenv("THETA_WALK_DEPTH", "5")
    with pytest.raises(ThetaRecursionLimitExceeded):
        transform(nested(6), lambda n: n)
    assert transform(nested(4), lambda n: n) == nested(4)


def test_deep_trees_within_the_default_limit(monkeypatch):
    monkeypatch.delenv("THETA_WALK_DEPTH", raising=False)
    tree = nested(390)
    assert transform(tree, lambda n: n) == tree

    expected = const(1)
    for _ in range(390):
        expected = call("f", expected)
    assert substitute(tree, Environment.from_mapping({"x": 1}, outer=None)) == expected


def test_host_stack_exhaustion_is_a_depth_error():
    with pytest.raises(ThetaRecursionLimitExceeded) as info:
        visit(nested(5000), lambda n: n, rebuild, max_depth=100_000)
    assert info.value.limit == 100_000


def test_visit_is_charged_to_the_budget():
    with runtime_context.budget(max_nodes=3):
        with pytest.raises(ThetaBudgetExceeded):
            transform(call("f", 1, 2, 3), lambda n: n)

# -----------------------------------------------------
# Usage shapes
# -----------------------------------------------------

def test_search_short_circuits():
    seen = []

    def is_x(n):
        seen.append(n)
        return n == sym("x")

    assert search(call("f", sym("x"), sym("y")), is_x)
    assert sym("y") not in seen
    assert not search(call("f", sym("y")), lambda n: n == sym("x"))


def test_collect_is_ordered_and_distinct():
    tree = call("f", sym("b"), sym("a"), call("g", sym("b"), sym("c")))
    names = collect(tree, lambda n: [n.name] if isinstance(n, Symbol) else [])
    assert names == ["f", "b", "a", "g", "c"]


def test_transform_rebuilds_the_same_kinds():
    tree = call("f", 1, k=call("g", 2), p=formals(a=3))
    doubled = transform(tree, lambda n: Constant(n.value * 2) if isinstance(n, Constant) else n)
    assert doubled == call("f", 2, k=call("g", 4), p=formals(a=6))
    assert isinstance(doubled, Call)
    assert isinstance(doubled.arg("p"), ParameterList)


def test_rebuild_flattens_splices():
    tree = call("f", 1, 2)
    result = rebuild(tree, [sym("f"), Splice([Arg("a", const(0)), Arg(None, const(9))]), const(2)])
    assert result == call("f", Arg("a", 0), 9, 2)


def test_rebuild_rejects_splice_in_callee():
    with pytest.raises(ThetaTypeError):
        rebuild(call("f", 1), [Splice([]), const(1)])

# -----------------------------------------------------
# Checks
# -----------------------------------------------------

def test_find_assign_collects_targets_in_order():
    block = call(
        "{",
        call("<-", sym("a"), 1),
        call("<-", sym("b"), 2),
        call("<-", sym("a"), 3),
    )
    assert find_assign(block) == ["a", "b"]


def test_find_assign_recurses_into_right_hand_sides():
    assert find_assign(call("<-", sym("a"), call("<-", sym("b"), 1))) == ["a", "b"]
    assert find_assign(call("f", call("=", const("s"), 1), call("<<-", sym("t"), 2))) == ["s", "t"]
    assert find_assign(call("f", sym("x"))) == []


def test_find_assign_ignores_complex_targets():
    assert find_assign(call("<-", call("names", sym("x")), sym("v"))) == []


def test_find_identifier():
    tree = call("function", formals("x"), call("+", sym("y"), 1))
    assert find_identifier(tree, "y")
    assert find_identifier(tree, "x")
    assert find_identifier(tree, "+")
    assert not find_identifier(tree, "z")


def test_expand_logical_abbr():
    assert expand_logical_abbr(call("f", sym("T"), sym("F"))) == call("f", True, False)
    assert expand_logical_abbr(call("T", sym("F"))) == call("T", False)


def test_expand_logical_abbr_keeps_parameter_names():
    tree = call("function", formals(T=sym("F")), sym("T"))
    assert expand_logical_abbr(tree) == call("function", formals(T=False), True)
