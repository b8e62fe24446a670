import pytest

from theta.types import Arg, call, const, formals, sym
from theta.types.environment import Environment
from theta.types.errors import ThetaTypeError, ThetaUnboundSymbol
from theta.evaluation.evaluator import evaluate
from theta.metaprog.quasiquote import is_unquote, is_unquote_splice, quasiquote
from theta.metaprog.substitute import quote


def unquote(node):
    return call(".", node)


def splice(node):
    return call("..", node)

# -----------------------------------------------------
# Unquote
# -----------------------------------------------------

def test_unquoted_constants_become_constants(env):
    tree = call("+", unquote(const(1)), unquote(const(2)))
    assert quasiquote(tree, env) == quote(call("+", 1, 2))


def test_unquote_evaluates_in_where(env):
    where = Environment.from_mapping({"x": 5}, outer=env)
    assert quasiquote(call("+", sym("a"), unquote(sym("x"))), where) == call("+", sym("a"), 5)


def test_unquote_can_inject_code(env):
    where = Environment.from_mapping({"expr": call("g", sym("y"))}, outer=env)
    assert quasiquote(call("f", unquote(sym("expr"))), where) == call("f", call("g", sym("y")))


def test_unquote_of_a_computation(env):
    assert quasiquote(call("f", unquote(call("+", 1, 2))), env) == call("f", 3)


def test_names_are_kept_around_unquote(env):
    where = Environment.from_mapping({"x": 1}, outer=env)
    assert quasiquote(call("f", k=unquote(sym("x")), m=sym("x")), where) == call("f", k=1, m=sym("x"))


def test_unquote_inside_defaults(env):
    where = Environment.from_mapping({"v": 7}, outer=env)
    tree = call("function", formals(x=unquote(sym("v"))), sym("x"))
    assert quasiquote(tree, where) == call("function", formals(x=7), sym("x"))


def test_plain_trees_are_rebuilt_equal(env):
    tree = call("f", sym("x"), call("g", 1, k="s"), formals("a", b=2))
    assert quasiquote(tree, env) == tree


def test_unquote_errors_propagate(env):
    with pytest.raises(ThetaUnboundSymbol):
        quasiquote(call("f", unquote(sym("undefined"))), env)


def test_zero_argument_unquote_is_not_a_site(env):
    assert not is_unquote(call("."))
    assert quasiquote(call("."), env) == call(".")
    assert quasiquote(call("f", call(".")), env) == call("f", call("."))


def test_two_argument_unquote_is_not_a_site(env):
    tree = call(".", sym("undefined"), sym("other"))
    assert not is_unquote(tree)
    assert quasiquote(tree, env) == tree

# -----------------------------------------------------
# Splice
# -----------------------------------------------------

def test_splice_a_list(env):
    where = Environment.from_mapping({"xs": [1, sym("y")]}, outer=env)
    assert is_unquote_splice(splice(sym("xs")))
    assert quasiquote(call("f", sym("a"), splice(sym("xs")), sym("b")), where) == \
        call("f", sym("a"), 1, sym("y"), sym("b"))


def test_splice_a_named_list(env):
    where = Environment.from_mapping({"xs": {"p": 1, 2: sym("q")}}, outer=env)
    assert quasiquote(call("f", splice(sym("xs"))), where) == call("f", Arg("p", 1), sym("q"))


def test_splice_an_empty_list(env):
    where = Environment.from_mapping({"xs": []}, outer=env)
    assert quasiquote(call("f", splice(sym("xs"))), where) == call("f")


def test_splice_requires_a_list(env):
    with pytest.raises(ThetaTypeError):
        quasiquote(call("f", splice(const(5))), env)


def test_splice_at_top_level(env):
    where = Environment.from_mapping({"xs": [1]}, outer=env)
    with pytest.raises(ThetaTypeError):
        quasiquote(splice(sym("xs")), where)


def test_splice_in_callee_position(env):
    where = Environment.from_mapping({"xs": [sym("f")]}, outer=env)
    with pytest.raises(ThetaTypeError):
        quasiquote(call(splice(sym("xs")), 1), where)


def test_splice_into_a_default(env):
    where = Environment.from_mapping({"xs": [1]}, outer=env)
    with pytest.raises(ThetaTypeError):
        quasiquote(formals(x=splice(sym("xs"))), where)

# -----------------------------------------------------
# bquote
# -----------------------------------------------------

def test_bquote_defaults_to_calling_environment(env):
    evaluate(call("<-", sym("x"), 5), env)
    assert evaluate(call("bquote", call("+", sym("a"), unquote(sym("x")))), env) == call("+", sym("a"), 5)


def test_bquote_with_where(env):
    result = evaluate(call("bquote", unquote(sym("x")), where=call("list", x=2)), env)
    assert result == const(2)


def test_bquote_inside_a_function(env):
    evaluate(call("<-", sym("f"), call("function", formals("n"),
                                       call("bquote", call("g", unquote(sym("n")), splice(sym("rest")))))), env)
    evaluate(call("<-", sym("rest"), call("list", 1, 2)), env)
    assert evaluate(call("f", call("+", 1, 1)), env) == call("g", 2, 1, 2)


def test_bquote_builds_evaluable_code(env):
    code = evaluate(call("bquote", call("+", unquote(call("*", 2, 3)), 1)), env)
    assert evaluate(code, env) == 7


def test_bquote_where_must_be_an_environment(env):
    with pytest.raises(ThetaTypeError):
        evaluate(call("bquote", sym("x"), 3), env)


def test_unquote_outside_bquote(env):
    with pytest.raises(ThetaUnboundSymbol):
        evaluate(unquote(const(1)), env)
