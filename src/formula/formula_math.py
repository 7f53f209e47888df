"""IEEE-754 arithmetic for formula numbers.

Python raises where IEEE-754 doubles quietly produce infinities or NaN
(division by zero, overflow in pow, domain errors).  Formula arithmetic never
fails on numbers, so these helpers map every such case back to the IEEE
result.
"""

import math
from typing import Callable, Dict

from formula.formula_ast import FormulaMathOp


class FormulaMathFunctions:
    """Arithmetic on doubles with IEEE-754 results for every input."""

    def get_functions(self) -> Dict[FormulaMathOp, Callable[[float, float], float]]:
        """Return the implementation of every arithmetic operator."""
        return {
            FormulaMathOp.ADD: self.add,
            FormulaMathOp.SUBTRACT: self.subtract,
            FormulaMathOp.MULTIPLY: self.multiply,
            FormulaMathOp.DIVIDE: self.divide,
            FormulaMathOp.MOD: self.mod,
            FormulaMathOp.EXPONENT: self.power,
        }

    def add(self, a: float, b: float) -> float:
        return a + b

    def subtract(self, a: float, b: float) -> float:
        return a - b

    def multiply(self, a: float, b: float) -> float:
        return a * b

    def divide(self, a: float, b: float) -> float:
        """Divide, giving a signed infinity or NaN for a zero divisor."""
        if b == 0.0:
            if a == 0.0 or math.isnan(a):
                return math.nan

            return math.copysign(math.inf, a) * math.copysign(1.0, b)

        return a / b

    def mod(self, a: float, b: float) -> float:
        """Truncated remainder; the result takes the sign of the dividend."""
        if b == 0.0 or math.isinf(a) or math.isnan(a) or math.isnan(b):
            return math.nan

        return math.fmod(a, b)

    def power(self, a: float, b: float) -> float:
        """Raise a to the power b with C pow() semantics."""
        try:
            return math.pow(a, b)

        except OverflowError:
            if a < 0.0 and self._is_odd_integer(b):
                return -math.inf

            return math.inf

        except ValueError:
            # Zero to a negative power is an infinity, anything else is a domain error
            if a == 0.0:
                if self._is_odd_integer(b):
                    return math.copysign(math.inf, a)

                return math.inf

            return math.nan

    def _is_odd_integer(self, value: float) -> bool:
        return math.isfinite(value) and value.is_integer() and int(value) % 2 == 1

    def parse_number(self, text: str) -> float:
        """
        Parse the text of a number.

        Accepts an optional sign, decimal digits with an optional fraction and
        exponent, or 'inf', 'infinity' and 'nan' in any case.  Unlike float()
        it rejects surrounding whitespace, digit separators and non-ASCII digits.

        Raises:
            ValueError: If the text is not a number
        """
        if not text.isascii() or text != text.strip() or '_' in text:
            raise ValueError(f"could not convert string to float: {text!r}")

        return float(text)
