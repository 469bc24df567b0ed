"""Tests del formato de resultados y de la fachada CalculatorEngine."""

import pytest

from calculator_engine import CalculatorEngine, decimal_string, format_result
from calculator_types import DivisionByZero, DomainError, EvalResult


class TestFormatResult:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (14.0, "14"),
            (120.0, "120"),
            (0.5, "0.5"),
            (-3.25, "-3.25"),
            (-0.0, "0"),
            (0.00001, "0.00001"),
            (-0.00025, "-0.00025"),
            (1.5e-6, "0.0000015"),
            (1e-7, "1e-7"),
            (123456789012.0, "123456789012"),
            (7, "7"),
        ],
    )
    def test_short_values_render_verbatim(self, value, expected):
        assert format_result(value) == expected

    @pytest.mark.parametrize(
        "value, expected",
        [
            (1234567890123.0, "1.234568e+12"),
            (0.1 + 0.2, "3.000000e-1"),
            (1 / 3, "3.333333e-1"),
            (2.469136e15, "2.469136e+15"),
            (-123456.789012345, "-1.234568e+5"),
        ],
    )
    def test_long_values_render_exponential(self, value, expected):
        assert format_result(value) == expected

    def test_exponential_has_six_fractional_digits(self):
        mantissa = format_result(2 ** 0.5 * 1e20).split("e")[0]
        assert len(mantissa.split(".")[1]) == 6

    @pytest.mark.parametrize("value", [14.0, 0.5, -3.25, 0.00001, 1e-7, 123456789012.0])
    def test_formatting_is_a_fixed_point(self, value):
        once = format_result(value)
        assert format_result(float(once)) == once

    def test_non_finite(self):
        assert format_result(float("nan")) == "NaN"
        assert format_result(float("inf")) == "∞"
        assert format_result(float("-inf")) == "-∞"


class TestDecimalString:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (1234567890123.0, "1234567890123"),
            (0.1 + 0.2, "0.30000000000000004"),
            (0.00001, "0.00001"),
            (-1.5e-6, "-0.0000015"),
            (1e-7, "1e-7"),
            (1e21, "1e+21"),
        ],
    )
    def test_keeps_every_digit(self, value, expected):
        assert decimal_string(value) == expected

    def test_round_trips_through_float(self):
        for value in (1234567890123.0, 0.1 + 0.2, 2.5e-6, -987654.321):
            assert float(decimal_string(value)) == value


class TestCalculatorEngine:
    def test_evaluate_formats(self):
        engine = CalculatorEngine("deg")
        assert engine.evaluate("2+3*4") == "14"
        assert engine.evaluate("1/3") == "3.333333e-1"
        assert engine.evaluate("sin(90)") == "1"

    def test_evaluate_raises_typed_errors(self):
        engine = CalculatorEngine()
        with pytest.raises(DivisionByZero):
            engine.evaluate("5/0")
        with pytest.raises(DomainError):
            engine.evaluate("sqrt(-1)")

    def test_try_evaluate_returns_result_or_error(self):
        engine = CalculatorEngine()
        ok = engine.try_evaluate("(2+3)*4")
        assert ok == EvalResult(ok=True, value=20.0, display="20")

        failed = engine.try_evaluate("5/0")
        assert not failed.ok
        assert failed.code == "DIVISION_BY_ZERO"
        assert failed.to_dict() == {
            "ok": False,
            "error": "División por cero",
            "code": "DIVISION_BY_ZERO",
        }

    def test_apply_function(self):
        engine = CalculatorEngine("deg")
        assert engine.apply_function("square", "7") == "49"
        assert engine.apply_function("factorial", "5") == "120"
        with pytest.raises(DivisionByZero):
            engine.apply_function("reciprocal", "0")

    def test_angle_mode_property(self):
        engine = CalculatorEngine("deg")
        engine.angle_mode = "rad"
        assert engine.angle_mode == "rad"
        assert engine.evaluate("cos(pi)") == "-1"
        assert engine.evaluate("cos(180)", angle_mode="deg") == "-1"
        with pytest.raises(ValueError):
            engine.angle_mode = "degrees"
