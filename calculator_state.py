"""Estado de la calculadora entre pulsaciones.

CalculatorState es inmutable: cada operación devuelve un estado nuevo, así
la interfaz sólo guarda una referencia y los tests pueden encadenar pasos.

    state = CalculatorState().append("2").choose_operator("+").append("3")
    state = state.compute(engine)
    state.display_text  # "5"
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace

import config
from calculator_engine import CalculatorEngine, decimal_string
from calculator_types import CalculatorError
from logging_config import get_logger
from math_provider import ANGLE_MODES, PythonMathProvider

logger = get_logger(__name__)

DIGITS = "0123456789"
OPERATORS = ("+", "-", "*", "/", "%", "^", "(", ")")
ERROR = config.ERROR_SENTINEL


@dataclass(frozen=True)
class PendingFunction:
    name: str
    operand: str

    @property
    def call_text(self) -> str:
        return f"{self.name}({self.operand})"


def _grouped(operand: str) -> str:
    """Texto del operando dentro de la expresión: los negativos van entre
    paréntesis para que ``^`` no se aplique sólo a su valor absoluto."""
    return f"({operand})" if operand.startswith("-") else operand


def _operand_value(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


@dataclass(frozen=True)
class CalculatorState:
    """Expresión en construcción, operando actual, modo angular y memoria.

    ``expression[operand_start:]`` es el texto del operando ya escrito en la
    expresión; está vacío mientras el operando es el "0" inicial de un
    segmento nuevo y todavía no se ha tecleado nada.
    """

    current_operand: str = "0"
    auxiliary: str = ""
    expression: str = ""
    operand_start: int = 0
    operation: str | None = None
    pending_function: PendingFunction | None = None
    should_reset: bool = False
    error_code: str | None = None
    angle_mode: str = field(default_factory=lambda: config.DEFAULT_ANGLE_MODE)
    memory: float = 0.0

    def __post_init__(self):
        if self.angle_mode not in ANGLE_MODES:
            raise ValueError("El modo debe ser 'rad' o 'deg'")

    # ── Lectura ──────────────────────────────────────────────────

    @property
    def display_text(self) -> str:
        return self.current_operand

    @property
    def auxiliary_text(self) -> str:
        return self.auxiliary

    @property
    def is_error(self) -> bool:
        return self.current_operand == ERROR

    @property
    def has_memory(self) -> bool:
        return self.memory != 0

    # ── Auxiliares ───────────────────────────────────────────────

    @property
    def _prefix(self) -> str:
        return self.expression[: self.operand_start]

    def _fresh(self) -> "CalculatorState":
        return replace(
            self,
            current_operand="0",
            expression="",
            operand_start=0,
            operation=None,
            pending_function=None,
            should_reset=False,
            error_code=None,
        )

    def _with_operand(self, operand: str) -> "CalculatorState":
        return replace(
            self, current_operand=operand, expression=self._prefix + _grouped(operand))

    def _finish(self, display: str, auxiliary: str) -> "CalculatorState":
        return replace(
            self,
            current_operand=display,
            auxiliary=auxiliary,
            expression=_grouped(display),
            operand_start=0,
            operation=None,
            pending_function=None,
            should_reset=True,
            error_code=None,
        )

    def _fail(self, exc: CalculatorError) -> "CalculatorState":
        logger.debug("Estado de error: [%s] %s", exc.code, exc.message)
        return replace(
            self,
            current_operand=ERROR,
            auxiliary=exc.message,
            expression="",
            operand_start=0,
            operation=None,
            pending_function=None,
            should_reset=True,
            error_code=exc.code,
        )

    # ── Entrada ──────────────────────────────────────────────────

    def append(self, token: str) -> "CalculatorState":
        """Añade un dígito o el punto decimal al operando actual."""
        if len(token) != 1 or token not in DIGITS + ".":
            raise ValueError(f"Entrada no válida: {token!r}")
        if self.pending_function is not None:
            return self

        state = self._fresh() if self.should_reset else self
        current = state.current_operand

        if token == "." and "." in current:
            return state
        if current == "0":
            operand = "0." if token == "." else token
        else:
            operand = current + token
        return state._with_operand(operand)

    def choose_operator(self, op: str) -> "CalculatorState":
        """Cierra el operando actual con ``op`` y empieza un segmento nuevo."""
        if op not in OPERATORS:
            raise ValueError(f"Operador no válido: {op!r}")
        if self.is_error:
            return self

        if op == "(" and self.should_reset:
            expression = ""
        elif not self.expression and op != "(":
            expression = _grouped(self.current_operand)
        else:
            expression = self.expression
        expression += op

        return replace(
            self,
            current_operand="0",
            auxiliary=expression,
            expression=expression,
            operand_start=len(expression),
            operation=op,
            pending_function=None,
            should_reset=False,
        )

    def invoke_function(self, name: str) -> "CalculatorState":
        """Envuelve el operando actual en ``name(...)`` hasta el próximo cálculo."""
        if name not in PythonMathProvider.FUNCTION_NAMES:
            raise ValueError(f"Función desconocida: {name}")
        if self.current_operand in ("", "0", ERROR):
            return self

        pending = PendingFunction(name, self.current_operand)
        return replace(
            self,
            current_operand="",
            auxiliary=pending.call_text,
            expression=self._prefix + pending.call_text,
            operation="function",
            pending_function=pending,
            should_reset=False,
        )

    def compute(self, engine: CalculatorEngine) -> "CalculatorState":
        """Evalúa la expresión (o la función pendiente) y siembra la siguiente."""
        pending = self.pending_function
        if pending is not None and not self._prefix:
            try:
                display = engine.apply_function(pending.name, pending.operand, self.angle_mode)
            except CalculatorError as exc:
                return self._fail(exc)
            return self._finish(display, auxiliary="")

        if not self.expression:
            return self
        try:
            display = engine.evaluate(self.expression, self.angle_mode)
        except CalculatorError as exc:
            return self._fail(exc)
        return self._finish(display, auxiliary=f"{self.expression} =")

    # ── Edición ──────────────────────────────────────────────────

    def clear_all(self) -> "CalculatorState":
        return CalculatorState(angle_mode=self.angle_mode, memory=self.memory)

    def clear_entry(self) -> "CalculatorState":
        if self.is_error:
            return self.clear_all()
        return replace(
            self,
            current_operand="0",
            expression=self._prefix,
            operation=None if self.pending_function else self.operation,
            pending_function=None,
            should_reset=False,
        )

    def delete_last_character(self) -> "CalculatorState":
        if self.is_error:
            return self

        pending = self.pending_function
        if pending is not None:
            return replace(
                self,
                current_operand=pending.operand,
                auxiliary=self._prefix,
                expression=self._prefix + _grouped(pending.operand),
                operation=None,
                pending_function=None,
            )

        if self.current_operand == "0":
            return self
        operand = self.current_operand[:-1]
        if operand in ("", "-"):
            operand = "0"
        return replace(self, should_reset=False)._with_operand(operand)

    def toggle_sign(self) -> "CalculatorState":
        current = self.current_operand
        if current in ("", "0", ERROR):
            return self
        operand = current[1:] if current.startswith("-") else "-" + current
        return self._with_operand(operand)

    # ── Modo angular ─────────────────────────────────────────────

    def set_angle_mode(self, mode: str) -> "CalculatorState":
        if mode not in ANGLE_MODES:
            raise ValueError("El modo debe ser 'rad' o 'deg'")
        return replace(self, angle_mode=mode)

    def toggle_angle_mode(self) -> "CalculatorState":
        return self.set_angle_mode("rad" if self.angle_mode == "deg" else "deg")

    # ── Memoria ──────────────────────────────────────────────────

    @property
    def _visible_operand(self) -> str:
        if self.pending_function is not None:
            return self.pending_function.operand
        return self.current_operand

    def memory_store(self) -> "CalculatorState":
        return replace(self, memory=_operand_value(self._visible_operand))

    def memory_recall(self) -> "CalculatorState":
        if self.pending_function is not None:
            return self
        state = self._fresh() if self.should_reset else self
        return state._with_operand(decimal_string(self.memory))

    def memory_clear(self) -> "CalculatorState":
        return replace(self, memory=0.0)

    def memory_add(self) -> "CalculatorState":
        return replace(self, memory=self.memory + _operand_value(self._visible_operand))

    def memory_subtract(self) -> "CalculatorState":
        return replace(self, memory=self.memory - _operand_value(self._visible_operand))
