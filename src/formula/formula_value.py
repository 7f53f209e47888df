"""Formula value hierarchy - immutable runtime values produced by the interpreter."""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


class FormulaValue(ABC):
    """
    Abstract base class for all formula runtime values.

    All formula values are immutable.
    """

    @abstractmethod
    def to_python(self) -> Any:
        """Convert to Python value for operations."""

    @abstractmethod
    def type_name(self) -> str:
        """Return formula type name for error messages."""

    @abstractmethod
    def describe(self) -> str:
        """Format the value the way the formula language writes it."""


@dataclass(frozen=True)
class FormulaNumber(FormulaValue):
    """Represents numeric values, always double precision."""
    value: float

    def to_python(self) -> float:
        return self.value

    def type_name(self) -> str:
        return "number"

    def describe(self) -> str:
        if math.isnan(self.value):
            return "nan"

        if math.isinf(self.value):
            return "inf" if self.value > 0 else "-inf"

        if self.value.is_integer():
            return str(int(self.value))

        return repr(self.value)


@dataclass(frozen=True)
class FormulaString(FormulaValue):
    """Represents string values."""
    value: str

    def to_python(self) -> str:
        return self.value

    def type_name(self) -> str:
        return "string"

    def describe(self) -> str:
        return self.value


@dataclass(frozen=True)
class FormulaBoolean(FormulaValue):
    """Represents boolean values."""
    value: bool

    def to_python(self) -> bool:
        return self.value

    def type_name(self) -> str:
        return "boolean"

    def describe(self) -> str:
        return "true" if self.value else "false"


def to_formula_value(value: Any) -> FormulaValue:
    """
    Convert a native Python value into a formula value.

    Formula values pass through unchanged.  Booleans are checked before
    numbers because bool is a subclass of int.

    Raises:
        TypeError: If the value has no formula equivalent
    """
    if isinstance(value, FormulaValue):
        return value

    if isinstance(value, bool):
        return FormulaBoolean(value)

    if isinstance(value, (int, float)):
        return FormulaNumber(float(value))

    if isinstance(value, str):
        return FormulaString(value)

    raise TypeError(f"Cannot convert {type(value).__name__} to a formula value")
