"""
Motor de cálculo para la calculadora científica.

Este módulo provee la clase CalculatorEngine, que evalúa expresiones con
FormulaEvaluator y da formato al resultado para la pantalla. La evaluación
es pura: el motor no sabe nada de la interfaz.

Contrato de interfaz:
    - evaluate(expression: str, angle_mode=None) -> str
    - try_evaluate(expression: str, angle_mode=None) -> EvalResult
    - apply_function(name: str, operand, angle_mode=None) -> str
    - angle_mode: propiedad 'rad' | 'deg'
"""

import math
import re
from decimal import Decimal

import config
from calculator_types import CalculatorError, EvalResult
from formula_evaluator import FormulaEvaluator
from logging_config import get_logger
from math_provider import PythonMathProvider

logger = get_logger(__name__)

_EXPONENT_RE = re.compile(r"e([+-])0*(\d)")


def _strip_exponent_padding(text: str) -> str:
    return _EXPONENT_RE.sub(r"e\1\2", text)


def decimal_string(value) -> str:
    """Representación decimal completa, sin recortar dígitos.

    Notación posicional para 1e-6 <= |x| < 1e21 y exponencial fuera de ese
    rango, con los dígitos mínimos que reproducen el mismo float.
    """
    if isinstance(value, int):
        return str(value)
    if value == int(value) and abs(value) < 1e21:
        return str(int(value))
    text = repr(float(value))
    if "e" in text and abs(value) >= 1e-6:
        return format(Decimal(text), "f")
    return _strip_exponent_padding(text)


def format_result(value) -> str:
    """Convierte un número en el texto que se muestra en pantalla.

    Si la representación decimal supera ``DISPLAY_MAX_LENGTH`` caracteres se
    usa notación exponencial con ``EXPONENTIAL_DIGITS`` decimales, p. ej.
    ``1.234568e+15``. Los enteros se muestran sin parte decimal.
    """
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if value == float("inf"):
            return "∞"
        if value == float("-inf"):
            return "-∞"

    plain = decimal_string(value)
    if len(plain) > config.DISPLAY_MAX_LENGTH:
        return _strip_exponent_padding(f"{float(value):.{config.EXPONENTIAL_DIGITS}e}")
    return plain


class CalculatorEngine:
    """Evalúa expresiones matemáticas con funciones científicas."""

    def __init__(self, angle_mode: str | None = None):
        self._provider = PythonMathProvider(angle_mode)
        self._evaluator = FormulaEvaluator(self._provider)

    # ── Propiedad: modo angular ──────────────────────────────────

    @property
    def angle_mode(self) -> str:
        return self._provider.angle_mode

    @angle_mode.setter
    def angle_mode(self, mode: str):
        self._provider.angle_mode = mode

    # ── Evaluación principal ─────────────────────────────────────

    def evaluate_value(self, expression: str, angle_mode: str | None = None) -> float:
        return self._evaluator.evaluate(expression, angle_mode)

    def evaluate(self, expression: str, angle_mode: str | None = None) -> str:
        """Evalúa la expresión y devuelve el resultado como cadena.

        Raises:
            CalculatorError: cualquiera de sus subclases (expresión inválida,
                división por cero, dominio, error de cálculo).
        """
        return self._format_result(self.evaluate_value(expression, angle_mode))

    def try_evaluate(self, expression: str, angle_mode: str | None = None) -> EvalResult:
        """Como evaluate(), pero devuelve el error en lugar de lanzarlo."""
        try:
            value = self.evaluate_value(expression, angle_mode)
        except CalculatorError as exc:
            logger.info("No se pudo evaluar %r: [%s] %s", expression, exc.code, exc.message)
            return EvalResult.failure(exc)
        return EvalResult(ok=True, value=value, display=self._format_result(value))

    def apply_function(self, name: str, operand, angle_mode: str | None = None) -> str:
        """Resuelve una función pendiente directamente sobre su operando."""
        value = self._provider.apply(name, operand, angle_mode)
        logger.debug("%s(%r) -> %r", name, operand, value)
        return self._format_result(value)

    # ── Formato del resultado ────────────────────────────────────

    @staticmethod
    def _format_result(value) -> str:
        return format_result(value)
