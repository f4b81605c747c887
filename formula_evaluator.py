"""Parseo y evaluación de expresiones para la calculadora científica.

El evaluador es un analizador descendente recursivo sobre una tabla
cerrada de funciones: no hay eval() ni acceso a nombres de Python.
"""

from __future__ import annotations

import logging
import math
import re


logger = logging.getLogger(__name__)


class EvalError(ValueError):
    """Expresión mal formada o error interno durante la evaluación."""


def _guarded(fn, domain=None):
    def call(*args):
        if not args:
            return math.nan
        x = args[0]
        if domain is not None and not domain(x):
            return math.nan
        try:
            return float(fn(x))
        except (ValueError, OverflowError):
            return math.nan

    return call


class MathFunctionTable:
    """Provee las funciones admitidas por el evaluador.

    Cada llamada a build_namespace devuelve una tabla nueva, de modo que
    dos evaluaciones nunca comparten estado.
    """

    def build_namespace(self) -> dict:
        return {
            "degToRad": _guarded(math.radians),
            "radToDeg": _guarded(math.degrees),
            "log": _guarded(math.log10, lambda x: x > 0),
            "ln": _guarded(math.log, lambda x: x > 0),
            "sqrt": _guarded(math.sqrt, lambda x: x >= 0),
            "sin": _guarded(math.sin),
            "cos": _guarded(math.cos),
            "tan": _guarded(math.tan),
            "asin": _guarded(math.asin, lambda x: -1 <= x <= 1),
            "acos": _guarded(math.acos, lambda x: -1 <= x <= 1),
            "atan": _guarded(math.atan),
        }


_TOKEN_RE = re.compile(
    r"\s*(?:"
    r"(?P<number>\d+\.?\d*|\.\d+)"
    r"|(?P<name>[A-Za-z_][A-Za-z0-9_]*)"
    r"|(?P<op>\*\*|[-+*/(),])"
    r")"
)


def tokenize(expression: str) -> list:
    """Divide la expresión en tuplas (tipo, texto)."""
    tokens = []
    pos = 0
    expression = expression.rstrip()

    while pos < len(expression):
        match = _TOKEN_RE.match(expression, pos)
        if match is None:
            bad = expression[pos:].lstrip()[:1]
            raise EvalError(f"Carácter no permitido: {bad!r}")
        kind = match.lastgroup
        tokens.append((kind, match.group(kind)))
        pos = match.end()

    return tokens


def _divide(left: float, right: float) -> float:
    if right == 0:
        raise EvalError("División por cero")
    try:
        return left / right
    except OverflowError:
        return math.copysign(math.inf, left) * math.copysign(1.0, right)


def _power(base: float, exponent: float) -> float:
    if base == 0 and exponent < 0:
        raise EvalError("División por cero")
    try:
        return math.pow(base, exponent)
    except OverflowError:
        odd = exponent.is_integer() and exponent % 2 == 1
        return -math.inf if base < 0 and odd else math.inf
    except ValueError:
        # Base negativa con exponente fraccionario.
        return math.nan


class _Parser:
    def __init__(self, tokens: list, functions: dict):
        self._tokens = tokens
        self._pos = 0
        self._functions = functions

    def parse(self) -> float:
        value = self._expression()
        token = self._peek()
        if token is not None:
            raise EvalError(f"Símbolo inesperado: {token[1]!r}")
        return value

    # ── Navegación ───────────────────────────────────────────────

    def _peek(self):
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _accept(self, *ops) -> str | None:
        token = self._peek()
        if token is not None and token[0] == "op" and token[1] in ops:
            self._pos += 1
            return token[1]
        return None

    def _close_paren(self):
        if self._accept(")"):
            return
        token = self._peek()
        if token is None:
            raise EvalError("Falta ')' al final de la expresión")
        raise EvalError(f"Se esperaba ')' y llegó {token[1]!r}")

    # ── Gramática ────────────────────────────────────────────────

    def _expression(self) -> float:
        value = self._term()
        while True:
            op = self._accept("+", "-")
            if op is None:
                return value
            right = self._term()
            value = value + right if op == "+" else value - right

    def _term(self) -> float:
        value = self._unary()
        while True:
            op = self._accept("*", "/")
            if op is None:
                return value
            right = self._unary()
            value = value * right if op == "*" else _divide(value, right)

    def _unary(self) -> float:
        op = self._accept("+", "-")
        if op == "-":
            return -self._unary()
        if op == "+":
            return self._unary()
        return self._power()

    def _power(self) -> float:
        base = self._primary()
        if self._accept("**"):
            return _power(base, self._unary())
        return base

    def _primary(self) -> float:
        token = self._peek()
        if token is None:
            raise EvalError("Expresión incompleta")

        kind, text = token
        if kind == "number":
            self._pos += 1
            try:
                return float(text)
            except ValueError as exc:
                raise EvalError(f"Número inválido: {text}") from exc

        if kind == "name":
            self._pos += 1
            return self._call(text)

        if self._accept("("):
            value = self._expression()
            self._close_paren()
            return value

        raise EvalError(f"Símbolo inesperado: {text!r}")

    def _call(self, name: str) -> float:
        fn = self._functions.get(name)
        if fn is None:
            raise EvalError(f"Identificador no permitido: {name}")
        if not self._accept("("):
            raise EvalError(f"Falta '(' después de {name}")

        args = []
        if not self._accept(")"):
            args.append(self._expression())
            while self._accept(","):
                args.append(self._expression())
            self._close_paren()

        return fn(*args)


class FormulaEvaluator:
    """Evalúa expresiones canónicas y devuelve un float."""

    def __init__(self, function_table: MathFunctionTable | None = None):
        self._function_table = function_table or MathFunctionTable()

    def evaluate(self, expression: str) -> float:
        """Evalúa la expresión ya preprocesada.

        Una expresión vacía vale 0.0.

        Raises:
            EvalError: sintaxis inválida, identificador desconocido o
                división por cero.
        """
        if not expression or not expression.strip():
            return 0.0

        logger.debug("Evaluando: %s", expression)
        tokens = tokenize(expression.strip())
        parser = _Parser(tokens, self._function_table.build_namespace())

        try:
            return float(parser.parse())
        except RecursionError as exc:
            raise EvalError("Expresión demasiado anidada") from exc


def evaluate(expression: str) -> float:
    return FormulaEvaluator().evaluate(expression)
