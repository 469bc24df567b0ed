"""Parseo y evaluación de expresiones para la calculadora científica.

La expresión se normaliza, se divide en tokens y se analiza con un parser
descendente recursivo que produce un árbol; el árbol se evalúa en una sola
pasada.

Precedencia, de mayor a menor:
    1. signo unario sobre el exponente de ``^`` (``2^-1``)
    2. ``^``            asociativo a la izquierda: ``2^3^2 == (2^3)^2 == 64``
    3. signo unario    (``-2^2 == -4``)
    4. ``* / %``       de izquierda a derecha
    5. ``+ -``         de izquierda a derecha
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

import config
from calculator_types import (
    ComputationError,
    DivisionByZero,
    DomainError,
    InvalidExpression,
    MalformedExpression,
)
from logging_config import get_logger
from math_provider import PythonMathProvider

logger = get_logger(__name__)

CONSTANTS = {
    "pi": math.pi,
    "e": math.e,
}


# ═════════════════════════════════════════════════════════════════
#  Tokens
# ═════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Token:
    kind: str  # "number", "name", "op", "lparen", "rparen"
    text: str
    pos: int


_TOKEN_RE = re.compile(
    r"""
    (?P<number>[\d.]+(?:[eE][+\-]?\d+)?)
    |(?P<name>[A-Za-z_]+)
    |(?P<op>[-+*/%^])
    |(?P<lparen>\()
    |(?P<rparen>\))
    """,
    re.VERBOSE,
)


def tokenize_expression(expr: str) -> list[Token]:
    """Divide una expresión ya normalizada en tokens.

    Raises:
        InvalidExpression: carácter desconocido o número mal escrito
            (``1.2.3``, ``.``).
    """
    tokens = []
    pos = 0
    while pos < len(expr):
        match = _TOKEN_RE.match(expr, pos)
        if match is None:
            raise InvalidExpression(f"Carácter no válido: {expr[pos]!r}")
        kind = match.lastgroup
        text = match.group()
        if kind == "number":
            try:
                float(text)
            except ValueError as exc:
                raise InvalidExpression(f"Número inválido: {text}") from exc
        tokens.append(Token(kind, text, pos))
        pos = match.end()
    return tokens


# ═════════════════════════════════════════════════════════════════
#  Árbol sintáctico
# ═════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Number:
    value: float


@dataclass(frozen=True)
class UnaryOp:
    op: str
    operand: object


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: object
    right: object


@dataclass(frozen=True)
class FunctionCall:
    name: str
    argument: object


class _Parser:
    """Parser descendente recursivo sobre la lista de tokens."""

    def __init__(self, tokens: list[Token], is_function, max_depth: int):
        self._tokens = tokens
        self._pos = 0
        self._depth = 0
        self._is_function = is_function
        self._max_depth = max_depth

    def parse(self):
        if not self._tokens:
            raise MalformedExpression("Expresión vacía")
        node = self._expression()
        tok = self._peek()
        if tok is not None:
            if tok.kind == "rparen":
                raise MalformedExpression(f"Paréntesis ')' sin abrir en la posición {tok.pos}")
            raise MalformedExpression(f"Token inesperado '{tok.text}' en la posición {tok.pos}")
        return node

    # ── Utilidades ───────────────────────────────────────────────

    def _peek(self) -> Token | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _next(self) -> Token:
        tok = self._peek()
        if tok is None:
            raise MalformedExpression("Expresión incompleta")
        self._pos += 1
        return tok

    def _at_op(self, ops: str) -> bool:
        tok = self._peek()
        return tok is not None and tok.kind == "op" and tok.text in ops

    def _enter(self):
        self._depth += 1
        if self._depth > self._max_depth:
            raise MalformedExpression("Expresión demasiado anidada")

    def _leave(self):
        self._depth -= 1

    # ── Reglas ───────────────────────────────────────────────────

    def _expression(self):
        node = self._term()
        while self._at_op("+-"):
            op = self._next().text
            node = BinaryOp(op, node, self._term())
        return node

    def _term(self):
        node = self._unary()
        while self._at_op("*/%"):
            op = self._next().text
            node = BinaryOp(op, node, self._unary())
        return node

    def _unary(self):
        if self._at_op("+-"):
            op = self._next().text
            self._enter()
            node = UnaryOp(op, self._unary())
            self._leave()
            return node
        return self._power()

    def _power(self):
        node = self._primary()
        while self._at_op("^"):
            self._next()
            node = BinaryOp("^", node, self._exponent())
        return node

    def _exponent(self):
        if self._at_op("+-"):
            op = self._next().text
            self._enter()
            node = UnaryOp(op, self._exponent())
            self._leave()
            return node
        return self._primary()

    def _primary(self):
        tok = self._next()

        if tok.kind == "number":
            return Number(float(tok.text))

        if tok.kind == "lparen":
            return self._group()

        if tok.kind == "name":
            nxt = self._peek()
            if tok.text in CONSTANTS:
                if nxt is not None and nxt.kind == "lparen":
                    raise MalformedExpression(f"{tok.text} no es una función")
                return Number(CONSTANTS[tok.text])
            if self._is_function(tok.text):
                if nxt is None or nxt.kind != "lparen":
                    raise MalformedExpression(f"Falta '(' después de {tok.text}")
                self._next()
                return FunctionCall(tok.text, self._group())
            raise InvalidExpression(f"Identificador no permitido: {tok.text}")

        if tok.kind == "rparen":
            raise MalformedExpression(f"Paréntesis ')' inesperado en la posición {tok.pos}")
        raise MalformedExpression(f"Falta un operando antes de '{tok.text}' en la posición {tok.pos}")

    def _group(self):
        """Contenido de un paréntesis ya consumido, hasta su ')'."""
        self._enter()
        if self._peek() is not None and self._peek().kind == "rparen":
            raise MalformedExpression("Paréntesis vacíos")
        node = self._expression()
        tok = self._peek()
        if tok is None or tok.kind != "rparen":
            raise MalformedExpression("Falta ')'")
        self._next()
        self._leave()
        return node


# ═════════════════════════════════════════════════════════════════
#  Evaluador
# ═════════════════════════════════════════════════════════════════

class FormulaEvaluator:
    """Transforma expresiones de UI y evalúa su valor numérico."""

    _GLYPHS = {
        "×": "*",
        "÷": "/",
        "−": "-",
        "√": "sqrt",
        "π": "pi",
    }

    def __init__(self, provider: PythonMathProvider):
        self._provider = provider

    def evaluate(self, expression: str, angle_mode: str | None = None) -> float:
        """Evalúa la expresión y devuelve un float finito.

        Raises:
            MalformedExpression: paréntesis u operadores mal colocados.
            InvalidExpression: token no numérico o identificador desconocido.
            DivisionByZero: ``/`` o ``%`` por cero, ``reciprocal(0)``.
            DomainError: argumento fuera de dominio.
            ComputationError: desbordamiento o resultado no finito.
        """
        tree = self.parse(expression)
        try:
            value = self._eval(tree, angle_mode)
        except RecursionError as exc:
            raise ComputationError("Expresión demasiado larga") from exc
        if not math.isfinite(value):
            raise ComputationError("Resultado fuera de rango")
        logger.debug("%r -> %r", expression, value)
        return value

    def parse(self, expression: str):
        self._validate_raw_expression(expression)
        processed = self._preprocess(expression)
        tokens = tokenize_expression(processed)
        parser = _Parser(tokens, self._provider.is_function, config.MAX_EXPRESSION_DEPTH)
        return parser.parse()

    def _validate_raw_expression(self, expression: str):
        if expression is None or not expression.strip():
            raise MalformedExpression("Expresión vacía")
        if len(expression) > config.MAX_INPUT_LENGTH:
            raise InvalidExpression("Expresión demasiado larga")

    def _preprocess(self, expr: str) -> str:
        expr = re.sub(r"\s+", "", expr)
        for glyph, replacement in self._GLYPHS.items():
            expr = expr.replace(glyph, replacement)
        return expr

    # ── Recorrido del árbol ──────────────────────────────────────

    def _eval(self, node, angle_mode):
        if isinstance(node, Number):
            return node.value

        if isinstance(node, UnaryOp):
            value = self._eval(node.operand, angle_mode)
            return -value if node.op == "-" else value

        if isinstance(node, FunctionCall):
            argument = self._eval(node.argument, angle_mode)
            return self._provider.apply(node.name, argument, angle_mode)

        if isinstance(node, BinaryOp):
            left = self._eval(node.left, angle_mode)
            right = self._eval(node.right, angle_mode)
            result = self._binary(node.op, left, right)
            if not math.isfinite(result):
                raise ComputationError("Resultado fuera de rango")
            return result

        raise InvalidExpression(f"Nodo desconocido: {node!r}")

    @staticmethod
    def _binary(op: str, a: float, b: float) -> float:
        if op == "+":
            return a + b
        if op == "-":
            return a - b
        if op == "*":
            return a * b
        if op == "/":
            if b == 0:
                raise DivisionByZero("División por cero")
            return a / b
        if op == "%":
            if b == 0:
                raise DivisionByZero("División por cero")
            return math.fmod(a, b)
        if op == "^":
            if a == 0 and b < 0:
                raise DivisionByZero("División por cero")
            try:
                return math.pow(a, b)
            except OverflowError as exc:
                raise ComputationError("Resultado fuera de rango") from exc
            except ValueError as exc:
                raise DomainError("La potencia no tiene resultado real") from exc
        raise InvalidExpression(f"Operador desconocido: {op}")
