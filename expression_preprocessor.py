"""Reescritura de la sintaxis de botones a una expresión evaluable."""

from __future__ import annotations

import enum
import math
import re


class AngleMode(enum.Enum):
    """Unidad angular de las funciones trigonométricas."""

    RADIANS = "RAD"
    DEGREES = "DEG"

    def toggled(self) -> "AngleMode":
        if self is AngleMode.RADIANS:
            return AngleMode.DEGREES
        return AngleMode.RADIANS


PI_TEXT = repr(math.pi)
E_TEXT = repr(math.e)

# Sustitución textual: la "e" se reemplaza en cualquier posición, no solo
# cuando es la constante.
_SYMBOLS = (
    ("÷", "/"),
    ("×", "*"),
    ("—", "-"),
    ("π", PI_TEXT),
    ("e", E_TEXT),
)

_IMPLICIT_MULT = (
    (re.compile(r"(\d)([a-zA-Z(])"), r"\1*\2"),
    (re.compile(r"(\))(\d)"), r"\1*\2"),
    (re.compile(r"(\))(\()"), r"\1*\2"),
)

_TRIG_FUNCTIONS = ("sin", "cos", "tan")
_INVERSE_TRIG_FUNCTIONS = ("asin", "acos", "atan")


def preprocess(raw: str, angle_mode: AngleMode = AngleMode.RADIANS) -> str:
    """Convierte el texto de la ecuación en una expresión canónica.

    Nunca falla: lo que no reconoce se deja tal cual para que el
    evaluador decida.
    """
    expr = raw
    for symbol, replacement in _SYMBOLS:
        expr = expr.replace(symbol, replacement)

    expr = expr.replace("^", "**")
    expr = insert_implicit_multiplication(expr)

    if angle_mode is AngleMode.DEGREES:
        expr = wrap_angle_conversions(expr)

    return expr


def insert_implicit_multiplication(expr: str) -> str:
    for pattern, repl in _IMPLICIT_MULT:
        expr = pattern.sub(repl, expr)
    return expr


def wrap_angle_conversions(expr: str) -> str:
    """Envuelve las llamadas trigonométricas para trabajar en grados.

    El ")" del envoltorio se inserta justo después del ")" que cierra el
    argumento. Si el argumento aún no está cerrado, el envoltorio queda
    abierto y el evaluador rechaza la expresión.
    """
    for name in _TRIG_FUNCTIONS:
        expr = _wrap_calls(expr, name, f"{name}(degToRad(", inner=True)
    for name in _INVERSE_TRIG_FUNCTIONS:
        expr = _wrap_calls(expr, name, f"radToDeg({name}(", inner=False)
    return expr


def _wrap_calls(expr: str, name: str, opening: str, inner: bool) -> str:
    pattern = re.compile(rf"(?<![A-Za-z]){name}\(")
    pos = 0

    while True:
        match = pattern.search(expr, pos)
        if match is None:
            return expr

        close = _matching_paren(expr, match.end() - 1)
        head = expr[:match.start()]
        if close is None:
            expr = head + opening + expr[match.end():]
        elif inner:
            # name(arg) -> name(degToRad(arg))
            expr = head + opening + expr[match.end():close] + "))" + expr[close + 1:]
        else:
            # name(arg) -> radToDeg(name(arg))
            expr = head + opening + expr[match.end():close + 1] + ")" + expr[close + 1:]
        pos = match.start() + len(opening)


def _matching_paren(expr: str, open_index: int) -> int | None:
    depth = 0
    for index in range(open_index, len(expr)):
        if expr[index] == "(":
            depth += 1
        elif expr[index] == ")":
            depth -= 1
            if depth == 0:
                return index
    return None
