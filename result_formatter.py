"""
Formato canónico de resultados numéricos para la pantalla.

La función format_result es pura: recibe un float y devuelve la cadena
que muestra la calculadora. Los casos especiales (NaN, infinitos, ruido
cercano a cero, enteros) se resuelven antes de recurrir a mpmath para
el redondeo a dígitos significativos.
"""

import math

from mpmath import mp


SIGNIFICANT_DIGITS = 10
ZERO_EPSILON = 1e-12
INTEGER_LIMIT = 1e15
INTEGER_TOLERANCE = 1e-10


def format_result(value) -> str:
    """Convierte un resultado numérico en su representación de pantalla."""
    value = float(value)

    if math.isnan(value):
        return "Error"
    if math.isinf(value):
        return "∞" if value > 0 else "-∞"
    if abs(value) < ZERO_EPSILON:
        return "0"

    if value == math.floor(value) and abs(value) < INTEGER_LIMIT:
        nearest = round(value)
        if abs(nearest - value) < INTEGER_TOLERANCE:
            return str(nearest)

    return _format_significant(value)


def _format_significant(value: float) -> str:
    text = mp.nstr(mp.mpf(value), n=SIGNIFICANT_DIGITS)
    text = text.replace(",", ".")

    # Solo la mantisa pierde ceros: "1.0e+20" -> "1e+20", nunca "1e+2".
    mantissa, separator, exponent = text.partition("e")
    if "." in mantissa:
        mantissa = mantissa.rstrip("0").rstrip(".")
    return mantissa + separator + exponent
