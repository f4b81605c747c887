"""
Motor de la calculadora científica.

Este módulo provee la clase CalculatorEngine, dueña del estado de la
sesión (ecuación, resultado, modo angular, último resultado y error).
La interfaz gráfica solo necesita llamar a on_button_click(token) y
leer el estado devuelto o suscribirse a sus cambios.

Contrato de interfaz:
    - on_button_click(token: str) -> SessionState
    - get_angle_mode() -> 'RAD' | 'DEG'
    - subscribe(listener) / unsubscribe(listener)
"""

from __future__ import annotations

import dataclasses
import logging
import math
from typing import Callable

from mpmath import mp

from expression_preprocessor import E_TEXT, PI_TEXT, AngleMode, preprocess
from formula_evaluator import EvalError, FormulaEvaluator
from result_formatter import format_result


logger = logging.getLogger(__name__)


class DomainError(ValueError):
    """Argumento inválido para factorial o recíproco."""


@dataclasses.dataclass(frozen=True)
class SessionState:
    """Instantánea inmutable del estado de la calculadora."""

    equation_text: str = ""
    result_text: str = "0"
    angle_mode: AngleMode = AngleMode.RADIANS
    last_result: str = "0"
    is_error: bool = False


Listener = Callable[[SessionState], None]


class CalculatorEngine:
    """Procesa pulsaciones de botones y mantiene la ecuación en curso."""

    MAX_FACTORIAL = 170

    ERROR_TEXT = "Error"
    INVALID_INPUT_TEXT = "Invalid input"
    DIVIDE_BY_ZERO_TEXT = "Cannot divide by zero"

    _APPEND_TOKENS = {
        "sin": "sin(",
        "cos": "cos(",
        "tan": "tan(",
        "sin⁻¹": "asin(",
        "cos⁻¹": "acos(",
        "tan⁻¹": "atan(",
        "asin": "asin(",
        "acos": "acos(",
        "atan": "atan(",
        "log": "log(",
        "ln": "ln(",
        "√": "sqrt(",
        "sqrt": "sqrt(",
        "x^y": "^",
        "^": "^",
        "π": PI_TEXT,
        "e": E_TEXT,
    }
    _LITERAL_TOKENS = frozenset("0123456789.+-×÷()")
    _ANGLE_TOKENS = frozenset({"RAD/DEG", "RAD", "DEG"})
    _CONTROL_TOKENS = frozenset({"AC", "DEL", "=", "ANS", "x!", "1/x"})

    # Último carácter con el que la expresión aún está a medias.
    _PENDING_CHARS = frozenset("+-×÷*/^(.Eπ")

    def __init__(self, angle_mode: AngleMode = AngleMode.RADIANS):
        self._state = SessionState(angle_mode=angle_mode)
        self._evaluator = FormulaEvaluator()
        self._listeners: list[Listener] = []

    # ── Estado observable ────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def equation_text(self) -> str:
        return self._state.equation_text

    @property
    def result_text(self) -> str:
        return self._state.result_text

    @property
    def last_result(self) -> str:
        return self._state.last_result

    @property
    def is_error(self) -> bool:
        return self._state.is_error

    @property
    def angle_mode(self) -> AngleMode:
        return self._state.angle_mode

    def get_angle_mode(self) -> str:
        return self._state.angle_mode.value

    def subscribe(self, listener: Listener):
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener):
        self._listeners.remove(listener)

    # ── Entrada principal ────────────────────────────────────────

    def on_button_click(self, token: str) -> SessionState:
        """Aplica un botón y devuelve el nuevo estado.

        Raises:
            ValueError: el token no pertenece al teclado.
        """
        if not self.is_known_token(token):
            raise ValueError(f"Botón desconocido: {token!r}")

        logger.info("Botón pulsado: %s", token)
        before = self._state

        # Desde el estado de error solo DEL trabaja sobre la ecuación previa.
        if self._state.is_error and token not in ("AC", "DEL"):
            self._clear()

        if token == "AC":
            self._clear()
        elif token == "DEL":
            self._delete_last()
        elif token == "=":
            self._final_evaluate()
        elif token in self._ANGLE_TOKENS:
            self._update(angle_mode=self._state.angle_mode.toggled())
            self._recompute()
        elif token == "ANS":
            self._append(self._state.last_result)
        elif token == "x!":
            self._evaluate_and_replace(self._factorial)
        elif token == "1/x":
            self._evaluate_and_replace(self._reciprocal)
        else:
            self._append(self._APPEND_TOKENS.get(token, token))

        if self._state != before:
            self._notify()
        return self._state

    @classmethod
    def is_known_token(cls, token: str) -> bool:
        return (
            token in cls._APPEND_TOKENS
            or token in cls._LITERAL_TOKENS
            or token in cls._ANGLE_TOKENS
            or token in cls._CONTROL_TOKENS
        )

    # ── Transiciones ─────────────────────────────────────────────

    def _clear(self):
        # El modo angular y el último resultado sobreviven a AC.
        self._update(equation_text="", result_text="0", is_error=False)

    def _delete_last(self):
        equation = self._state.equation_text
        if equation:
            self._update(equation_text=equation[:-1])
            self._recompute()
        else:
            self._update(result_text="0")

    def _append(self, text: str):
        self._update(equation_text=self._state.equation_text + text)
        self._recompute()

    def _recompute(self):
        """Vista previa del resultado; los fallos no cambian de estado."""
        equation = self._state.equation_text
        if not equation:
            self._update(result_text="0")
            return
        if equation[-1] in self._PENDING_CHARS:
            self._update(result_text="")
            return

        try:
            value = self._compute(equation)
        except EvalError as exc:
            logger.debug("Sin vista previa para %r: %s", equation, exc)
            self._update(result_text="")
            return

        formatted = format_result(value)
        if math.isfinite(value):
            self._update(result_text=formatted, last_result=formatted, is_error=False)
        else:
            self._update(result_text=formatted, is_error=False)

    def _final_evaluate(self):
        equation = self._state.equation_text
        if not equation:
            return

        try:
            value = self._compute(equation)
        except EvalError as exc:
            logger.warning("No se pudo evaluar %r: %s", equation, exc)
            self._set_error(self.ERROR_TEXT)
            return

        formatted = format_result(value)
        if not math.isfinite(value):
            logger.warning("Resultado no finito para %r: %s", equation, formatted)
            self._set_error(formatted)
            return

        self._publish_result(formatted)

    def _evaluate_and_replace(self, operation: Callable[[float], float]):
        equation = self._state.equation_text
        if not equation:
            return

        try:
            value = operation(self._compute(equation))
        except DomainError as exc:
            logger.warning("Argumento fuera de dominio en %r: %s", equation, exc)
            self._set_error(str(exc))
            return
        except EvalError as exc:
            logger.warning("No se pudo evaluar %r: %s", equation, exc)
            self._set_error(self.ERROR_TEXT)
            return

        self._publish_result(format_result(value))

    # ── Operaciones inmediatas ───────────────────────────────────

    def _factorial(self, value: float) -> float:
        if not (
            math.isfinite(value)
            and 0 <= value <= self.MAX_FACTORIAL
            and value == math.floor(value)
        ):
            raise DomainError(self.INVALID_INPUT_TEXT)
        return float(mp.factorial(int(value)))

    def _reciprocal(self, value: float) -> float:
        if math.isnan(value):
            raise DomainError(self.ERROR_TEXT)
        if value == 0:
            raise DomainError(self.DIVIDE_BY_ZERO_TEXT)
        return 1.0 / value

    # ── Auxiliares ───────────────────────────────────────────────

    def _compute(self, equation: str) -> float:
        processed = preprocess(equation, self._state.angle_mode)
        logger.debug("Ecuación %r -> %r", equation, processed)
        return self._evaluator.evaluate(processed)

    def _publish_result(self, formatted: str):
        self._update(
            equation_text=formatted,
            result_text=formatted,
            last_result=formatted,
            is_error=False,
        )

    def _set_error(self, message: str):
        self._update(result_text=message, is_error=True)

    def _update(self, **changes):
        self._state = dataclasses.replace(self._state, **changes)

    def _notify(self):
        for listener in list(self._listeners):
            listener(self._state)
