import math

import pytest

from formula_evaluator import EvalError, FormulaEvaluator, MathFunctionTable, evaluate


def test_empty_expression_is_zero():
    assert evaluate("") == 0.0
    assert evaluate("   ") == 0.0


def test_precedence_and_associativity():
    assert evaluate("2+3*4") == 14
    assert evaluate("10-4-3") == 3
    assert evaluate("8/4/2") == 1
    assert evaluate("2**3**2") == 512
    assert evaluate("-2**2") == -4
    assert evaluate("2**-1") == 0.5
    assert evaluate("(2+3)*4") == 20
    assert evaluate("--3") == 3


def test_functions():
    assert evaluate("sqrt(16)") == 4
    assert evaluate("log(1000)") == pytest.approx(3)
    assert evaluate("ln(2.718281828459045)") == pytest.approx(1)
    assert evaluate("sin(0)") == 0
    assert evaluate("degToRad(180)") == pytest.approx(math.pi)
    assert evaluate("radToDeg(atan(1))") == pytest.approx(45)


@pytest.mark.parametrize(
    "expression",
    ["log(0)", "ln(-1)", "sqrt(-4)", "asin(2)", "acos(-1.5)", "sin()", "(-8)**(1/3)"],
)
def test_domain_violations_are_nan(expression):
    assert math.isnan(evaluate(expression))


def test_balanced_degree_wrapping_evaluates():
    assert evaluate("sin(degToRad(90))") == pytest.approx(1)
    assert evaluate("sin(degToRad(30))+1") == pytest.approx(1.5)
    assert evaluate("radToDeg(asin(0.5))+1") == pytest.approx(31)


@pytest.mark.parametrize("expression", ["(2+3", "sqrt(", "sin(degToRad(90)", "sin(degToRad(30)+1"])
def test_missing_closing_parens_raise(expression):
    with pytest.raises(EvalError):
        evaluate(expression)


def test_extra_arguments_are_ignored():
    assert evaluate("sqrt(9, 100)") == 3


def test_overflow_gives_infinity():
    assert evaluate("10**400") == math.inf
    assert evaluate("(-10)**401") == -math.inf


@pytest.mark.parametrize(
    "expression",
    ["1/0", "0**-1", "2+", "(", "2)", "1.2.3", "foo(1)", "sin", "2$3", "x", "2//3", "3 4"],
)
def test_malformed_expressions_raise(expression):
    with pytest.raises(EvalError):
        evaluate(expression)


def test_function_table_is_built_per_call():
    table = MathFunctionTable()
    first = table.build_namespace()
    second = table.build_namespace()
    assert first is not second
    assert set(first) == {
        "degToRad", "radToDeg", "log", "ln", "sqrt",
        "sin", "cos", "tan", "asin", "acos", "atan",
    }


def test_evaluator_accepts_custom_table():
    class DoubleSqrt(MathFunctionTable):
        def build_namespace(self):
            namespace = super().build_namespace()
            namespace["sqrt"] = lambda *args: 2 * math.sqrt(args[0])
            return namespace

    assert FormulaEvaluator(DoubleSqrt()).evaluate("sqrt(4)") == 4
