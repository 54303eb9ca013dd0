import math
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.append(str(SRC))

from calclang.stdlib import (  # noqa: E402
    DEFAULT_BUILTINS,
    DEFAULT_CONSTANTS,
    Builtin,
    reference,
)


def call(name, *args):
    return DEFAULT_BUILTINS[name](*args)


def test_arities():
    arities = {name: b.arity for name, b in DEFAULT_BUILTINS.items()}
    assert arities == {
        "rand": 0,
        "randint": 2,
        "min": 2,
        "max": 2,
        "ln": 1,
        "lg": 1,
        "round": 1,
        "floor": 1,
        "ceil": 1,
        "trunc": 1,
        "sin": 1,
        "cos": 1,
        "tg": 1,
        "deg": 1,
    }


def test_constants():
    assert DEFAULT_CONSTANTS == {"E": math.e, "PI": math.pi}


@pytest.mark.parametrize(
    "value, expected",
    [(2.5, 3.0), (2.4, 2.0), (-2.5, -2.0), (-2.6, -3.0), (0.5, 1.0)],
)
def test_round_half_up(value, expected):
    assert call("round", value) == expected


def test_results_are_floats():
    assert isinstance(call("floor", 2.5), float)
    assert isinstance(call("max", 1.0, 2.0), float)


def test_domain_errors_become_nan():
    assert math.isnan(call("ln", -1.0))
    assert math.isnan(call("lg", -5.0))


def test_log_of_zero():
    assert call("ln", 0.0) == -math.inf
    assert call("lg", 0.0) == -math.inf


def test_integral_builtins_pass_non_finite_through():
    assert call("floor", math.inf) == math.inf
    assert call("ceil", -math.inf) == -math.inf
    assert math.isnan(call("trunc", math.nan))
    assert math.isnan(call("round", math.nan))


def test_randint_range():
    for _ in range(50):
        value = call("randint", 3.0, 6.0)
        assert value in (3.0, 4.0, 5.0)


def test_rand_range():
    for _ in range(50):
        assert 0.0 <= call("rand") < 1.0


def test_trigonometry():
    assert call("sin", 0.0) == 0.0
    assert call("cos", 0.0) == 1.0
    assert call("tg", call("deg", 45.0)) == pytest.approx(1.0)


def test_overflow_becomes_inf():
    big = Builtin("big", 1, math.exp)
    assert big(1000.0) == math.inf


def test_reference_lists_every_builtin():
    text = reference()
    lines = text.splitlines()
    assert len(lines) == len(DEFAULT_BUILTINS)
    assert "  max(x, y): larger of two numbers" in lines
    assert "  rand(): random number in [0, 1)" in lines
    assert [ln.split("(")[0].strip() for ln in lines] == sorted(DEFAULT_BUILTINS)
