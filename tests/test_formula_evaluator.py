"""Tests del tokenizador, el parser y el evaluador de expresiones."""

import math

import pytest

from calculator_types import (
    ComputationError,
    DivisionByZero,
    DomainError,
    InvalidExpression,
    MalformedExpression,
)
from formula_evaluator import (
    BinaryOp,
    FormulaEvaluator,
    FunctionCall,
    Number,
    UnaryOp,
    tokenize_expression,
)
from math_provider import PythonMathProvider


@pytest.fixture
def evaluator():
    return FormulaEvaluator(PythonMathProvider("deg"))


class TestPrecedence:
    @pytest.mark.parametrize(
        "expr, expected",
        [
            ("2+3*4", 14),
            ("(2+3)*4", 20),
            ("2^3", 8),
            ("10-4-3", 3),
            ("12/4/3", 1),
            ("7%3", 1),
            ("2*3^2", 18),
            ("((1+2)*(3+4))", 21),
            (" 2 + 3 ", 5),
        ],
    )
    def test_standard_precedence(self, evaluator, expr, expected):
        assert evaluator.evaluate(expr) == pytest.approx(expected)

    def test_exponent_is_left_associative(self, evaluator):
        assert evaluator.evaluate("2^3^2") == 64
        assert evaluator.parse("2^3^2") == BinaryOp(
            "^", BinaryOp("^", Number(2.0), Number(3.0)), Number(2.0)
        )

    def test_modulo_keeps_sign_of_dividend(self, evaluator):
        assert evaluator.evaluate("-7%3") == -1

    def test_unary_minus(self, evaluator):
        assert evaluator.evaluate("3*-2") == -6
        assert evaluator.evaluate("2--3") == 5
        assert evaluator.evaluate("-2^2") == -4
        assert evaluator.evaluate("2^-1") == 0.5
        assert evaluator.parse("-2^2") == UnaryOp(
            "-", BinaryOp("^", Number(2.0), Number(2.0))
        )

    def test_formatted_result_can_seed_next_expression(self, evaluator):
        assert evaluator.evaluate("1.234568e+15*2") == pytest.approx(2.469136e15)
        assert evaluator.evaluate("3.000000e-1+1") == pytest.approx(1.3)


class TestFunctions:
    def test_nested_calls(self, evaluator):
        expected = math.sin(math.radians(math.cos(math.radians(30))))
        assert evaluator.evaluate("sin(cos(30))") == pytest.approx(expected)
        assert evaluator.parse("sin(cos(30))") == FunctionCall(
            "sin", FunctionCall("cos", Number(30.0))
        )

    def test_argument_is_a_full_expression(self, evaluator):
        assert evaluator.evaluate("sqrt(9+16)*2") == 10
        assert evaluator.evaluate("factorial(2+3)") == 120

    def test_constants_and_glyphs(self, evaluator):
        assert evaluator.evaluate("ln(e)") == pytest.approx(1)
        assert evaluator.evaluate("π") == pytest.approx(math.pi)
        assert evaluator.evaluate("2×3÷4") == 1.5
        assert evaluator.evaluate("5−2") == 3
        assert evaluator.evaluate("√(16)") == 4

    def test_angle_mode_override(self, evaluator):
        assert evaluator.evaluate("sin(90)") == pytest.approx(1)
        assert evaluator.evaluate("sin(pi/2)", angle_mode="rad") == pytest.approx(1)

    @pytest.mark.parametrize(
        "expr",
        ["asin(2)", "sqrt(-4)", "log(0)", "ln(-1)", "factorial(-1)", "factorial(2.5)"],
    )
    def test_domain_errors(self, evaluator, expr):
        with pytest.raises(DomainError):
            evaluator.evaluate(expr)


class TestErrors:
    @pytest.mark.parametrize("expr", ["5/0", "5%0", "reciprocal(0)", "0^-1", "1/(2-2)"])
    def test_division_by_zero(self, evaluator, expr):
        with pytest.raises(DivisionByZero):
            evaluator.evaluate(expr)

    @pytest.mark.parametrize(
        "expr", ["(2+3", "2+3)", "2+", "*2", "", "   ", "()", "sqrt9", "pi(2)", "(2)(3)"]
    )
    def test_malformed(self, evaluator, expr):
        with pytest.raises(MalformedExpression):
            evaluator.evaluate(expr)

    @pytest.mark.parametrize("expr", ["1.2.3+1", ".", "2$3", "foo(2)", "2+x"])
    def test_invalid_tokens(self, evaluator, expr):
        with pytest.raises(InvalidExpression):
            evaluator.evaluate(expr)

    def test_invalid_number_is_not_reported_as_malformed(self, evaluator):
        with pytest.raises(InvalidExpression) as excinfo:
            evaluator.evaluate("1.2.3")
        assert not isinstance(excinfo.value, MalformedExpression)
        assert excinfo.value.code == "INVALID_EXPRESSION"

    @pytest.mark.parametrize("expr", ["10^400", "1e400", "exp(1000)", "factorial(171)"])
    def test_overflow(self, evaluator, expr):
        with pytest.raises(ComputationError):
            evaluator.evaluate(expr)

    def test_power_without_real_result(self, evaluator):
        with pytest.raises(DomainError):
            evaluator.evaluate("(-8)^(1/3)")

    def test_nesting_limit(self, evaluator):
        with pytest.raises(MalformedExpression):
            evaluator.evaluate("(" * 150 + "1" + ")" * 150)
        assert evaluator.evaluate("(" * 20 + "1" + ")" * 20) == 1


def test_tokenize_expression():
    tokens = tokenize_expression("2.5+sin(30)^2")
    assert [(t.kind, t.text) for t in tokens] == [
        ("number", "2.5"),
        ("op", "+"),
        ("name", "sin"),
        ("lparen", "("),
        ("number", "30"),
        ("rparen", ")"),
        ("op", "^"),
        ("number", "2"),
    ]
    assert tokens[2].pos == 4


def test_tokenize_keeps_exponent_notation():
    assert [t.text for t in tokenize_expression("1.5e+12-2e")] == ["1.5e+12", "-", "2", "e"]
