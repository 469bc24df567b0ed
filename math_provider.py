"""Funciones científicas de la calculadora con validación de dominio."""

from __future__ import annotations

import math

import config
from calculator_types import (
    CalculatorError,
    ComputationError,
    DivisionByZero,
    DomainError,
    InvalidExpression,
    InvalidOperand,
)
from logging_config import get_logger

logger = get_logger(__name__)

ANGLE_MODES = ("deg", "rad")


def parse_operand(operand) -> float:
    """Convierte el operando (texto o número) a float finito."""
    if isinstance(operand, (int, float)) and not isinstance(operand, bool):
        value = float(operand)
    else:
        try:
            value = float(str(operand).strip())
        except ValueError as exc:
            raise InvalidOperand(f"Operando no numérico: {operand!r}") from exc
    if not math.isfinite(value):
        raise InvalidOperand(f"Operando no finito: {operand!r}")
    return value


def _factorial(x: float) -> float:
    if x < 0 or not x.is_integer():
        raise DomainError("Factorial sólo definido para enteros no negativos")
    result = 1.0
    for i in range(2, int(x) + 1):
        result *= i
        if math.isinf(result):
            raise ComputationError(f"factorial({int(x)}) desborda")
    return result


class PythonMathProvider:
    """Biblioteca de funciones unarias; cada una valida su propio dominio."""

    FUNCTION_NAMES = (
        "sin",
        "cos",
        "tan",
        "asin",
        "acos",
        "atan",
        "log",
        "ln",
        "sqrt",
        "cbrt",
        "exp",
        "square",
        "reciprocal",
        "factorial",
    )

    def __init__(self, angle_mode: str | None = None):
        self._angle_mode = "deg"
        self.angle_mode = angle_mode or config.DEFAULT_ANGLE_MODE

    @property
    def angle_mode(self) -> str:
        return self._angle_mode

    @angle_mode.setter
    def angle_mode(self, mode: str):
        if mode not in ANGLE_MODES:
            raise ValueError("El modo debe ser 'rad' o 'deg'")
        self._angle_mode = mode

    def is_function(self, name: str) -> bool:
        return name in self.FUNCTION_NAMES

    # ── Aplicación ───────────────────────────────────────────────

    def apply(self, name: str, operand, angle_mode: str | None = None) -> float:
        """Aplica la función ``name`` al operando.

        Raises:
            InvalidExpression: función desconocida.
            InvalidOperand: el operando no es numérico.
            DomainError: argumento fuera de dominio.
            DivisionByZero: recíproco de cero.
            ComputationError: cualquier otro fallo numérico.
        """
        if not self.is_function(name):
            raise InvalidExpression(f"Función desconocida: {name}")

        mode = angle_mode or self._angle_mode
        if mode not in ANGLE_MODES:
            raise ValueError("El modo debe ser 'rad' o 'deg'")

        x = parse_operand(operand)
        fn = self._build_table(mode)[name]
        try:
            result = fn(x)
        except CalculatorError:
            raise
        except (ArithmeticError, ValueError) as exc:
            logger.debug("Fallo numérico en %s(%r): %s", name, x, exc)
            raise ComputationError("Error de cálculo") from exc

        if not math.isfinite(result):
            raise ComputationError(f"{name}({x:g}) no es finito")
        return result

    # ── Tabla de funciones ───────────────────────────────────────

    def _build_table(self, mode: str) -> dict:
        def _trig(fn):
            def w(x):
                return fn(math.radians(x) if mode == "deg" else x)

            return w

        def _inv_trig(fn, label):
            def w(x):
                if x < -1 or x > 1:
                    raise DomainError(f"Entrada inválida para {label}")
                r = fn(x)
                return math.degrees(r) if mode == "deg" else r

            return w

        return {
            "sin": _trig(math.sin),
            "cos": _trig(math.cos),
            "tan": _trig(math.tan),
            "asin": _inv_trig(math.asin, "arcsen"),
            "acos": _inv_trig(math.acos, "arccos"),
            "atan": lambda x: math.degrees(math.atan(x)) if mode == "deg" else math.atan(x),
            "log": self._log10,
            "ln": self._ln,
            "sqrt": self._sqrt,
            "cbrt": math.cbrt,
            "exp": math.exp,
            "square": lambda x: x * x,
            "reciprocal": self._reciprocal,
            "factorial": _factorial,
        }

    @staticmethod
    def _log10(x):
        if x <= 0:
            raise DomainError("Entrada inválida para el logaritmo")
        return math.log10(x)

    @staticmethod
    def _ln(x):
        if x <= 0:
            raise DomainError("Entrada inválida para el logaritmo natural")
        return math.log(x)

    @staticmethod
    def _sqrt(x):
        if x < 0:
            raise DomainError("No existe raíz cuadrada de un número negativo")
        return math.sqrt(x)

    @staticmethod
    def _reciprocal(x):
        if x == 0:
            raise DivisionByZero("No se puede dividir por cero")
        return 1 / x
