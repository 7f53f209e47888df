"""Token types and token representation for formula expressions."""

from dataclasses import dataclass
from enum import Enum


class FormulaTokenType(Enum):
    """Token types for formula expressions."""
    LPAREN = "("
    RPAREN = ")"
    COMMA = ","
    QUESTION = "?"
    COLON = ":"
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    PERCENT = "%"
    CARET = "^"
    BANG_EQUAL = "!="
    EQUAL_EQUAL = "=="
    GREATER = ">"
    GREATER_EQUAL = ">="
    LESS = "<"
    LESS_EQUAL = "<="
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"
    AND = "and"
    OR = "or"
    NOT = "not"
    TRUE = "true"
    FALSE = "false"
    EOF = "EOF"


@dataclass(frozen=True)
class FormulaToken:
    """
    Represents a single token in a formula expression.

    `value` is the exact lexeme the token was built from.  String literals keep
    their quotes and number literals are not converted.
    """
    type: FormulaTokenType
    value: str
    line: int
    column: int

    def describe(self) -> str:
        """Describe the token for error messages."""
        if self.type == FormulaTokenType.EOF:
            return "end of input"

        return f"'{self.value}'"

    def __repr__(self) -> str:
        return f"FormulaToken({self.type.name}, {self.value!r}, line={self.line}, column={self.column})"
