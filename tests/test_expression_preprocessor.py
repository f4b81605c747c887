import math

import pytest

from expression_preprocessor import AngleMode, preprocess
from formula_evaluator import evaluate


def test_symbol_substitution():
    assert preprocess("6÷2×3") == "6/2*3"
    assert preprocess("5—1") == "5-1"
    assert preprocess("π") == repr(math.pi)
    assert preprocess("e") == repr(math.e)


def test_every_letter_e_is_replaced():
    assert preprocess("1e+20") == "1" + repr(math.e) + "+20"


def test_power_operator():
    assert preprocess("2^3") == "2**3"


def test_implicit_multiplication():
    assert preprocess("2(3)") == "2*(3)"
    assert preprocess("(2)(3)") == "(2)*(3)"
    assert preprocess("(2)3") == "(2)*3"
    assert preprocess("2sin(0)") == "2*sin(0)"
    assert preprocess(")2(") == ")*2*("
    assert evaluate(preprocess("2(3)")) == 6
    assert evaluate(preprocess("(2)(3)")) == 6


def test_radians_leave_trig_untouched():
    assert preprocess("sin(1)+asin(1)", AngleMode.RADIANS) == "sin(1)+asin(1)"


def test_degrees_wrap_trig_calls():
    assert preprocess("sin(90)", AngleMode.DEGREES) == "sin(degToRad(90))"
    assert preprocess("cos(60)", AngleMode.DEGREES) == "cos(degToRad(60))"
    assert preprocess("asin(1)", AngleMode.DEGREES) == "radToDeg(asin(1))"
    assert preprocess("atan(1)", AngleMode.DEGREES) == "radToDeg(atan(1))"


def test_degree_wrapping_stops_at_the_argument():
    assert preprocess("sin(30)+1", AngleMode.DEGREES) == "sin(degToRad(30))+1"
    assert preprocess("sin(30)+cos(60)", AngleMode.DEGREES) == (
        "sin(degToRad(30))+cos(degToRad(60))"
    )
    assert preprocess("asin(0.5)+1", AngleMode.DEGREES) == "radToDeg(asin(0.5))+1"
    assert preprocess("sin((1+2)*10)", AngleMode.DEGREES) == "sin(degToRad((1+2)*10))"


def test_nested_trig_calls_in_degrees():
    assert preprocess("asin(sin(30))", AngleMode.DEGREES) == (
        "radToDeg(asin(sin(degToRad(30))))"
    )
    assert evaluate(preprocess("asin(sin(30))", AngleMode.DEGREES)) == pytest.approx(30)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("sin(30)+1", 1.5),
        ("sin(90)*2", 2),
        ("sin(30)+cos(60)", 1),
        ("asin(0.5)+1", 31),
        ("2sin(30)", 1),
        ("tan(45)-atan(1)", 1 - 45),
    ],
)
def test_degree_expressions_evaluate(raw, expected):
    assert evaluate(preprocess(raw, AngleMode.DEGREES)) == pytest.approx(expected)


def test_unclosed_trig_argument_stays_unbalanced():
    assert preprocess("sin(90", AngleMode.DEGREES) == "sin(degToRad(90"


def test_degree_and_radian_modes_agree():
    degrees = evaluate(preprocess("sin(90)", AngleMode.DEGREES))
    radians = evaluate(preprocess("sin(" + repr(math.pi / 2) + ")", AngleMode.RADIANS))
    assert abs(degrees - radians) < 1e-9


def test_unknown_input_passes_through():
    assert preprocess("foo$bar") == "foo$bar"
    assert preprocess("") == ""


def test_angle_mode_toggle():
    assert AngleMode.RADIANS.toggled() is AngleMode.DEGREES
    assert AngleMode.DEGREES.toggled() is AngleMode.RADIANS
    assert AngleMode.DEGREES.value == "DEG"
