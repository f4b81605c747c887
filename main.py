"""Punto de entrada de la calculadora científica en consola.

Cada línea leída es una secuencia de botones separados por espacios,
por ejemplo ``7 + 3 =`` o ``RAD/DEG sin 9 0 )``.
"""

import logging
import sys

from calculator_engine import CalculatorEngine
from expression_preprocessor import AngleMode


LOG_LEVEL = logging.WARNING
DEFAULT_ANGLE_MODE = AngleMode.RADIANS
PROMPT = "> "


def render(engine: CalculatorEngine) -> str:
    return f"[{engine.get_angle_mode()}] {engine.equation_text}  =  {engine.result_text}"


def run_line(engine: CalculatorEngine, line: str):
    for token in line.split():
        try:
            engine.on_button_click(token)
        except ValueError as exc:
            print(exc, file=sys.stderr)


def main():
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    engine = CalculatorEngine(angle_mode=DEFAULT_ANGLE_MODE)

    if len(sys.argv) > 1:
        run_line(engine, " ".join(sys.argv[1:]))
        print(render(engine))
        return

    while True:
        try:
            line = input(PROMPT)
        except EOFError:
            break
        run_line(engine, line)
        print(render(engine))


if __name__ == "__main__":
    main()
