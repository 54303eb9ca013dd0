import math
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.append(str(SRC))

from calclang.errors import (  # noqa: E402
    ArityError,
    MatchError,
    RecursionLimitError,
    StatementError,
    UndefinedNameError,
)
from calclang.evaluator import Evaluator, format_number  # noqa: E402
from calclang.parser import ParseError  # noqa: E402
from calclang.stdlib import Builtin  # noqa: E402


def log_feature(name: str):
    print(f"[feature] {name}")


@pytest.fixture
def ev():
    return Evaluator()


def run(ev: Evaluator, *lines: str):
    result = None
    for line in lines:
        result = ev.feed_statement(line)
    return result


def test_arithmetic_precedence(ev):
    log_feature("arithmetic")
    assert ev.feed_statement("1 + 2 * 3") == 7
    assert ev.feed_statement("(1 + 2) * 3") == 9
    assert ev.feed_statement("7 / 2") == 3.5


def test_unary_minus_binds_tighter_than_power(ev):
    # -2^2 is (-2)^2, not -(2^2)
    log_feature("unary minus vs ^")
    assert ev.feed_statement("-2^2") == 4
    assert ev.feed_statement("-(2^2)") == -4


def test_power_right_associative(ev):
    log_feature("right-assoc ^")
    assert ev.feed_statement("2^3^2") == 512


def test_sub_left_associative(ev):
    log_feature("left-assoc -")
    assert ev.feed_statement("10-3-2") == 5


def test_const_binds_and_redefines(ev):
    log_feature("const redefinition")
    assert ev.feed_statement("const x = 5") == "<const x = 5>"
    assert ev.feed_statement("x") == 5
    ev.feed_statement("const x = 9")
    assert ev.feed_statement("x") == 9


def test_default_constants(ev):
    log_feature("default constants")
    assert ev.feed_statement("PI") == math.pi
    assert ev.feed_statement("E") == math.e


def test_zero_is_a_bound_value(ev):
    # lookup checks membership, so a constant holding 0 is found
    log_feature("zero-valued constant")
    ev.feed_statement("const z = 0")
    assert ev.feed_statement("z") == 0
    assert ev.feed_statement("z + 1") == 1


def test_first_matching_clause_wins(ev):
    log_feature("clause order")
    assert ev.feed_statement("let f(0) = 1") == "<func f(0) = ...>"
    assert ev.feed_statement("let f(n) = n*2") == "<func f(n) = ...>"
    assert ev.feed_statement("f(0)") == 1
    assert ev.feed_statement("f(7)") == 14


def test_bind_clause_defined_first_shadows_literal(ev):
    log_feature("clauses accumulate, never replace")
    run(ev, "let g(n) = n", "let g(0) = 100")
    assert ev.feed_statement("g(0)") == 0
    assert len(ev.session.functions["g"]) == 2


def test_recursive_factorial(ev):
    log_feature("recursion through clauses")
    run(ev, "let fact(0) = 1", "let fact(n) = n * fact(n - 1)")
    assert ev.feed_statement("fact(10)") == 3628800


def test_multi_parameter_patterns(ev):
    log_feature("multiple parameters")
    run(
        ev,
        "let ack(0, n) = n + 1",
        "let ack(m, 0) = ack(m - 1, 1)",
        "let ack(m, n) = ack(m - 1, ack(m, n - 1))",
    )
    assert ev.feed_statement("ack(2, 3)") == 9


def test_literal_pattern_from_expression_and_constant(ev):
    log_feature("literal patterns evaluated at definition time")
    ev.feed_statement("const k = 3")
    assert ev.feed_statement("let h(k + 1) = 40") == "<func h(4) = ...>"
    assert ev.feed_statement("let h(2 * 0.25) = 5") == "<func h(0.5) = ...>"
    assert ev.feed_statement("h(4)") == 40
    assert ev.feed_statement("h(0.5)") == 5
    # k is a bare name, so it binds rather than matching 3
    assert ev.feed_statement("let w(k) = k * 10") == "<func w(k) = ...>"
    assert ev.feed_statement("w(2)") == 20


def test_no_matching_clause(ev):
    log_feature("match error")
    ev.feed_statement("let only(1) = 1")
    with pytest.raises(StatementError) as info:
        ev.feed_statement("only(2)")
    assert isinstance(info.value.cause, MatchError)
    assert "only(2)" in str(info.value)


def test_arity_mismatch_rejects_clause(ev):
    log_feature("pattern length")
    ev.feed_statement("let two(a, b) = a + b")
    with pytest.raises(StatementError) as info:
        ev.feed_statement("two(1)")
    assert isinstance(info.value.cause, MatchError)


def test_undefined_variable(ev):
    log_feature("undefined variable")
    with pytest.raises(StatementError, match="undefined nope") as info:
        ev.feed_statement("nope + 1")
    assert isinstance(info.value.cause, UndefinedNameError)


def test_undefined_function(ev):
    log_feature("undefined function")
    with pytest.raises(StatementError, match="undefined function nofunc") as info:
        ev.feed_statement("nofunc(1)")
    assert isinstance(info.value.cause, UndefinedNameError)


def test_builtin_arity_error(ev):
    log_feature("builtin arity")
    with pytest.raises(StatementError) as info:
        ev.feed_statement("max(1)")
    assert isinstance(info.value.cause, ArityError)
    assert "expected 2 arguments, but got 1" in str(info.value)


def test_builtins(ev):
    log_feature("builtins")
    assert ev.feed_statement("max(3, 8)") == 8
    assert ev.feed_statement("min(3, 8)") == 3
    assert ev.feed_statement("floor(2.7)") == 2
    assert ev.feed_statement("ceil(2.1)") == 3
    assert ev.feed_statement("trunc(-2.7)") == -2
    assert ev.feed_statement("round(2.5)") == 3
    assert ev.feed_statement("round(-2.5)") == -2
    assert ev.feed_statement("lg(1000)") == pytest.approx(3)
    assert ev.feed_statement("deg(180)") == pytest.approx(math.pi)


def test_builtin_shadows_user_function(ev):
    log_feature("builtin dispatch first")
    ev.feed_statement("let max(a, b) = 0")
    assert ev.feed_statement("max(1, 2)") == 2


def test_zero_arg_random_is_cached(ev):
    log_feature("cached nondeterministic builtin")
    first = ev.feed_statement("rand()")
    assert 0 <= first < 1
    assert ev.feed_statement("rand()") == first
    assert ev.feed_statement("rand() - rand()") == 0


def test_same_signature_is_cached(ev):
    log_feature("call cache")
    ev.feed_statement("let sq(n) = n * n")
    assert ev.feed_statement("sq(4)") == 16
    assert ("sq", (4.0,)) in ev.session.cache


def test_cached_zero_is_a_hit():
    log_feature("zero-valued cache entry")
    calls = []

    def zero():
        calls.append(1)
        return 0.0

    ev = Evaluator(builtins={"zero": Builtin("zero", 0, zero)}, constants={})
    assert ev.feed_statement("zero()") == 0
    assert ev.feed_statement("zero()") == 0
    assert len(calls) == 1


def test_session_cache_survives_redefinition(ev):
    log_feature("cache is never invalidated by default")
    run(ev, "const rate = 2", "let pay(h) = h * rate")
    assert ev.feed_statement("pay(10)") == 20
    run(ev, "const rate = 3", "let pay(0) = 0")
    assert ev.feed_statement("pay(10)") == 20


def test_redefine_policy_drops_stale_results():
    log_feature("cache invalidation on redefinition")
    ev = Evaluator(cache_policy="redefine")
    run(ev, "const rate = 2", "let pay(h) = h * rate")
    assert ev.feed_statement("pay(10)") == 20
    run(ev, "const rate = 3", "let pay(0) = 0")
    assert ev.feed_statement("pay(10)") == 30


def test_unknown_cache_policy():
    with pytest.raises(ValueError):
        Evaluator(cache_policy="lru")


def test_statement_counter_in_error_prefix(ev):
    log_feature("statement counter")
    ev.feed_statement("1")
    with pytest.raises(StatementError, match=r"^\(Statement 2\) undefined y$"):
        ev.feed_statement("y")
    with pytest.raises(StatementError, match=r"^\(Statement 3\) "):
        ev.feed_statement("1 +")
    assert ev.feed_statement("2") == 2
    assert ev.statement_count == 4
    with pytest.raises(StatementError) as info:
        ev.feed_statement("y")
    assert info.value.index == 5


def test_trailing_tokens_are_syntax_errors(ev):
    log_feature("trailing tokens")
    with pytest.raises(StatementError) as info:
        ev.feed_statement("1 + 2 3")
    assert isinstance(info.value.cause, ParseError)
    assert info.value.__cause__ is info.value.cause


def test_empty_statement(ev):
    log_feature("empty statement")
    assert ev.feed_statement("") == "<empty>"
    assert ev.statement_count == 1


def test_failed_let_registers_nothing(ev):
    log_feature("atomic clause registration")
    with pytest.raises(StatementError):
        ev.feed_statement("let g(1, q + 1) = 1")
    assert "g" not in ev.session.functions
    # a bare unbound name is a bind slot, not an evaluation
    assert ev.feed_statement("let g(q) = 1") == "<func g(q) = ...>"


def test_failing_body_restores_scope_depth(ev):
    log_feature("scope balance after failure")
    ev.feed_statement("let bad(n) = n + missing")
    with pytest.raises(StatementError):
        ev.feed_statement("bad(1)")
    assert len(ev.session.scopes) == 1
    with pytest.raises(StatementError, match="undefined n"):
        ev.feed_statement("n")


def test_locals_shadow_constants(ev):
    log_feature("call-local scope")
    run(ev, "const n = 100", "let id(n) = n")
    assert ev.feed_statement("id(3)") == 3
    assert ev.feed_statement("n") == 100


def test_call_locals_do_not_leak(ev):
    log_feature("locals are popped")
    run(ev, "let k(a) = a", "k(5)")
    with pytest.raises(StatementError, match="undefined a"):
        ev.feed_statement("a")


def test_runaway_recursion(ev):
    log_feature("recursion limit")
    ev.feed_statement("let loop(n) = loop(n + 1)")
    with pytest.raises(StatementError) as info:
        ev.feed_statement("loop(0)")
    assert isinstance(info.value.cause, RecursionLimitError)
    assert len(ev.session.scopes) == 1


def test_deep_user_recursion(ev):
    log_feature("deep recursion through clauses")
    run(ev, "let sum(0) = 0", "let sum(n) = n + sum(n - 1)")
    assert ev.feed_statement("sum(1000)") == 500500


def test_recursion_limit_is_restored_after_each_statement(ev):
    before = sys.getrecursionlimit()
    run(ev, "let sum(0) = 0", "let sum(n) = n + sum(n - 1)", "sum(300)")
    assert sys.getrecursionlimit() == before
    ev.feed_statement("let loop(n) = loop(n + 1)")
    with pytest.raises(StatementError):
        ev.feed_statement("loop(0)")
    assert sys.getrecursionlimit() == before


def test_configured_limit_never_lowers_host_limit():
    log_feature("configurable recursion limit")
    ev = Evaluator(recursion_limit=10)
    assert ev.feed_statement("1 + 1") == 2
    run(ev, "let sum(0) = 0", "let sum(n) = n + sum(n - 1)")
    with pytest.raises(StatementError) as info:
        ev.feed_statement("sum(1000)")
    assert isinstance(info.value.cause, RecursionLimitError)


def test_ieee_division_and_domain(ev):
    log_feature("IEEE results")
    assert ev.feed_statement("1/0") == math.inf
    assert ev.feed_statement("-1/0") == -math.inf
    assert math.isnan(ev.feed_statement("0/0"))
    assert math.isnan(ev.feed_statement("ln(-1)"))
    assert ev.feed_statement("ln(0)") == -math.inf
    assert math.isnan(ev.feed_statement("(-8)^0.5"))
    assert ev.feed_statement("0^-1") == math.inf
    assert ev.feed_statement("10^400") == math.inf


def test_no_defaults():
    log_feature("empty builtin registry")
    ev = Evaluator(builtins={}, constants={})
    with pytest.raises(StatementError, match="undefined PI"):
        ev.feed_statement("PI")
    with pytest.raises(StatementError, match="undefined function max"):
        ev.feed_statement("max(1, 2)")


def test_names_lists_everything(ev):
    ev.feed_statement("let myfn(x) = x")
    ev.feed_statement("const myconst = 1")
    names = ev.names()
    assert "myfn" in names
    assert "myconst" in names
    assert "PI" in names
    assert "sin" in names


@pytest.mark.parametrize(
    "value, text",
    [
        (4.0, "4"),
        (-0.0, "0"),
        (0.5, "0.5"),
        (0.1 + 0.2, "0.30000000000000004"),
        (math.inf, "Infinity"),
        (-math.inf, "-Infinity"),
        (math.nan, "NaN"),
        (1e21, "1e+21"),
        (-2.5, "-2.5"),
        (0.000001, "0.000001"),
        (1.5e-7, "1.5e-7"),
        (1e-7, "1e-7"),
        (123456789012345678901.0, "123456789012345680000"),
        (1.5e300, "1.5e+300"),
        (3628800.0, "3628800"),
        (12.566, "12.566"),
    ],
)
def test_format_number(value, text):
    assert format_number(value) == text
