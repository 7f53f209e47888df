"""Exception classes for the formula language with detailed context."""

from typing import Any, Optional

from formula.formula_token import FormulaToken


class FormulaError(Exception):
    """Base exception for formula errors with detailed context information."""

    def __init__(
        self,
        message: str,
        context: Optional[str] = None,
        expected: Optional[str] = None,
        received: Optional[str] = None,
        suggestion: Optional[str] = None,
        example: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None
    ):
        """
        Initialize detailed error.

        Args:
            message: Core error description
            context: Additional context information
            expected: What was expected
            received: What was actually received
            suggestion: Suggestion for fixing the error
            example: Example of correct usage
            line: Source line where the error occurred (1-indexed)
            column: Source column where the error occurred (1-indexed)
        """
        self.message = message
        self.context = context
        self.expected = expected
        self.received = received
        self.suggestion = suggestion
        self.example = example
        self.line = line
        self.column = column

        super().__init__(self._format_detailed_message())

    def _format_detailed_message(self) -> str:
        """Format the error message with all available details."""
        parts = [f"Error: {self.message}"]

        if self.line is not None and self.column is not None:
            parts.append(f"Location: line {self.line}, column {self.column}")

        if self.received:
            parts.append(f"Received: {self.received}")

        if self.expected:
            parts.append(f"Expected: {self.expected}")

        if self.context:
            parts.append(f"Context: {self.context}")

        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")

        if self.example:
            parts.append(f"Example: {self.example}")

        return "\n".join(parts)

    def locate(self, line: Optional[int], column: Optional[int]) -> 'FormulaError':
        """
        Attach a source location to an error raised without one.

        Errors that already carry a location keep it.  The formatted message is
        rebuilt so that it includes the new location.
        """
        if self.line is None and self.column is None and line is not None and column is not None:
            self.line = line
            self.column = column
            self.args = (self._format_detailed_message(),)

        return self


class FormulaReadError(FormulaError):
    """Source text could not be read or decoded."""


class FormulaLexError(FormulaError):
    """Tokenization errors with detailed context."""


class FormulaUnterminatedStringError(FormulaLexError):
    """A string literal reached the end of input before its closing quote."""


class FormulaUnknownCharacterError(FormulaLexError):
    """A character that starts no valid token."""

    def __init__(self, character: str, **kwargs: Any) -> None:
        self.character = character
        super().__init__(**kwargs)


class FormulaParseError(FormulaError):
    """Parsing errors with detailed context."""


class FormulaUnexpectedTokenError(FormulaParseError):
    """A token that cannot appear where it was found."""

    def __init__(self, token: FormulaToken, **kwargs: Any) -> None:
        self.token = token
        kwargs.setdefault("line", token.line)
        kwargs.setdefault("column", token.column)
        super().__init__(**kwargs)


class FormulaExpectedClosingParenError(FormulaParseError):
    """A parenthesised expression is missing its ')'."""


class FormulaExpectedColonError(FormulaParseError):
    """A ternary expression is missing its ':'."""


class FormulaExpectedClosingParenInCallError(FormulaParseError):
    """A function call is missing its ')'."""


class FormulaMissingEofError(FormulaParseError):
    """The token sequence ran out without an end-of-input token."""


class FormulaNestingTooDeepError(FormulaParseError):
    """The expression nests deeper than the parser allows."""


class FormulaEvalError(FormulaError):
    """Evaluation errors with detailed context."""


class FormulaInvalidOperandsError(FormulaEvalError):
    """A binary operator was applied to operands it does not support."""


class FormulaTypeMismatchError(FormulaEvalError):
    """Two values of different kinds were compared."""


class FormulaExpectedBooleanOperandsError(FormulaEvalError):
    """'and'/'or' received a non-boolean operand."""


class FormulaExpectedBooleanOperandError(FormulaEvalError):
    """'not' received a non-boolean operand."""


class FormulaExpectedNumericOperandError(FormulaEvalError):
    """Unary minus received a non-numeric operand."""


class FormulaInvalidNumericLiteralError(FormulaEvalError):
    """Text could not be converted to a number."""


class FormulaBranchTypeMismatchError(FormulaEvalError):
    """The two branches of a ternary produced values of different kinds."""


class FormulaExpectedBooleanTestError(FormulaEvalError):
    """The test of a ternary did not produce a boolean."""


class FormulaUnsupportedFeatureError(FormulaEvalError):
    """An identifier or call could not be resolved by the evaluation context."""


class FormulaNestingTooDeepEvalError(FormulaEvalError):
    """The expression nests deeper than the interpreter allows."""
