from calculator_engine import CalculatorEngine
from expression_preprocessor import AngleMode
import sys


def _press(tokens: list[str], engine: CalculatorEngine | None = None) -> CalculatorEngine:
	engine = engine or CalculatorEngine()
	for token in tokens:
		engine.on_button_click(token)
	return engine


def _walk(tokens: list[str]):
	engine = CalculatorEngine()
	states = []
	for token in tokens:
		state = engine.on_button_click(token)
		states.append((token, state))
	return engine, states


def inspect_tokens(tokens: list[str]) -> None:
	"""Imprime el estado de la sesión después de cada botón."""
	_, states = _walk(tokens)

	print("Token inspection")
	print(f"tokens:         {' '.join(tokens)}")
	print(f"total states:   {len(states)}")
	for i, (token, state) in enumerate(states, start=1):
		flag = " [ERROR]" if state.is_error else ""
		print(
			f"  {i}. {token!r:>10} -> [{state.angle_mode.value}] "
			f"{state.equation_text!r} = {state.result_text!r}{flag}"
		)


def run_regressions() -> None:
	checks: list[tuple[str, bool]] = []
	expected_actual: list[tuple[str, str, str]] = []

	engine = _press(["7", "+", "3", "="])
	expected_actual.append(("7 + 3 =", "10", engine.result_text))
	checks.append((
		"final evaluate replaces equation with result",
		engine.equation_text == engine.result_text == "10",
	))

	engine = _press(["5", "x!"])
	expected_actual.append(("5 x!", "120", engine.equation_text))
	checks.append(("factorial replaces equation", engine.equation_text == "120"))

	engine = _press(["7", ".", "5", "x!"])
	checks.append((
		"factorial of 7.5 enters error state",
		engine.is_error and engine.result_text == "Invalid input",
	))
	checks.append(("factorial error keeps equation", engine.equation_text == "7.5"))

	engine = _press(["4", "1/x"])
	expected_actual.append(("4 1/x", "0.25", engine.result_text))

	engine = _press(["0", "1/x"])
	checks.append((
		"reciprocal of zero reports division by zero",
		engine.is_error and engine.result_text == "Cannot divide by zero",
	))

	engine = _press(["1", "÷", "0", "="])
	checks.append(("1÷0 enters error state", engine.is_error))
	_press(["DEL"], engine)
	checks.append((
		"DEL from error keeps the rest of the equation",
		engine.equation_text == "1÷" and engine.is_error,
	))
	_press(["5"], engine)
	checks.append((
		"digit after error starts a fresh equation",
		engine.equation_text == "5" and not engine.is_error,
	))

	engine = _press(["RAD/DEG", "sin", "9", "0", ")"])
	expected_actual.append(("DEG sin(90)", "1", engine.result_text))
	checks.append(("angle toggle reports DEG", engine.get_angle_mode() == "DEG"))

	engine = _press(["RAD/DEG", "sin⁻¹", "0", ".", "5", ")"])
	expected_actual.append(("DEG asin(0.5)", "30", engine.result_text))

	engine = _press(["2", "(", "3", ")"])
	expected_actual.append(("2(3)", "6", engine.result_text))

	engine = _press(["(", "2", ")", "(", "3", ")"])
	expected_actual.append(("(2)(3)", "6", engine.result_text))

	engine = _press(["2", "x^y", "1", "0"])
	expected_actual.append(("2^10", "1024", engine.result_text))

	engine = _press(["1", "÷", "4", "=", "×", "4", "="])
	expected_actual.append(("1÷4 = ×4 =", "1", engine.result_text))

	engine = _press(["6", "×", "7", "=", "AC", "ANS"])
	expected_actual.append(("ANS after AC", "42", engine.equation_text))

	engine = _press(["9", "AC"])
	checks.append((
		"AC clears the equation and result",
		engine.equation_text == "" and engine.result_text == "0" and not engine.is_error,
	))

	engine = CalculatorEngine(angle_mode=AngleMode.DEGREES)
	_press(["cos", "6", "0", ")"], engine)
	expected_actual.append(("cos(60) in DEG engine", "0.5", engine.result_text))

	engine = _press(["RAD/DEG", "sin", "3", "0", ")", "+", "1", "="])
	expected_actual.append(("DEG sin(30)+1 =", "1.5", engine.equation_text))

	engine = _press(["RAD/DEG", "sin⁻¹", "0", ".", "5", ")", "+", "1"])
	expected_actual.append(("DEG asin(0.5)+1", "31", engine.result_text))

	engine = _press(["RAD/DEG", "1", "÷", "0", "=", "RAD/DEG"])
	checks.append((
		"angle toggle from error state flips the mode",
		engine.get_angle_mode() == "RAD" and not engine.is_error,
	))

	for label, expected, actual in expected_actual:
		checks.append((f"{label} gives {expected}", expected == actual))

	failed = [name for name, ok in checks if not ok]
	for name, ok in checks:
		print(f"{name}: {'OK' if ok else 'FAIL'}")

	print("\nExpected vs Actual:")
	for label, expected, actual in expected_actual:
		status = "OK" if expected == actual else "FAIL"
		print(f"- {label}: {status}")
		print(f"  expected: {expected}")
		print(f"  actual:   {actual}")

	if failed:
		print("\nFAILED CHECKS:")
		for name in failed:
			print(f"- {name}")
		raise SystemExit(1)

	print("\nAll regression checks passed.")


if __name__ == "__main__":
	# Uso rápido:
	#   python regression_checks.py
	#   python regression_checks.py --inspect "RAD/DEG sin 9 0 )"
	if "--inspect" in sys.argv:
		try:
			line = sys.argv[sys.argv.index("--inspect") + 1]
		except (ValueError, IndexError):
			raise SystemExit("Missing token sequence after --inspect")

		inspect_tokens(line.split())
	else:
		run_regressions()
