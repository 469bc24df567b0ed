"""Tipos de error y resultado de la calculadora científica.

Todas las excepciones heredan también de la excepción nativa equivalente,
así un ``except (ValueError, ZeroDivisionError, ArithmeticError)`` genérico
sigue capturándolas.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class CalculatorError(Exception):
    """Error base de la calculadora."""

    default_code = "CALCULATOR_ERROR"

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class InvalidExpression(CalculatorError, ValueError):
    """Token o expresión que no puede interpretarse como número."""

    default_code = "INVALID_EXPRESSION"


class MalformedExpression(InvalidExpression):
    """Paréntesis desbalanceados, operadores colgantes o expresión vacía."""

    default_code = "MALFORMED_EXPRESSION"


class InvalidOperand(InvalidExpression):
    """El operando de una función no es numérico."""

    default_code = "INVALID_OPERAND"


class DivisionByZero(CalculatorError, ZeroDivisionError):
    default_code = "DIVISION_BY_ZERO"


class DomainError(CalculatorError, ValueError):
    """Argumento fuera del dominio de la función."""

    default_code = "DOMAIN_ERROR"


class ComputationError(CalculatorError, ArithmeticError):
    """Fallo numérico no previsto (desbordamiento, resultado no finito...)."""

    default_code = "COMPUTATION_ERROR"


@dataclass
class EvalResult:
    """Resultado de evaluar una expresión: valor o error, nunca ambos."""

    ok: bool
    value: float | None = None
    display: str | None = None
    error: str | None = None
    code: str | None = None

    @classmethod
    def failure(cls, exc: CalculatorError) -> "EvalResult":
        return cls(ok=False, error=exc.message, code=exc.code)

    def to_dict(self) -> dict[str, Any]:
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.value is not None:
            result_dict["value"] = self.value
        if self.display is not None:
            result_dict["display"] = self.display
        if self.error is not None:
            result_dict["error"] = self.error
        if self.code is not None:
            result_dict["code"] = self.code
        return result_dict

    def __repr__(self) -> str:
        if not self.ok:
            return f"EvalResult(ok=False, code={self.code!r}, error={self.error!r})"
        return f"EvalResult(ok=True, value={self.value!r}, display={self.display!r})"
