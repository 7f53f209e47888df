"""Shared fixtures and utilities for formula tests."""

from typing import Any, List

import pytest

from formula import Formula, FormulaASTNode, FormulaToken, FormulaTokenType, FormulaLexer, FormulaParser


@pytest.fixture
def formula():
    """Create a fresh Formula instance for each test."""
    return Formula()


@pytest.fixture
def formula_custom():
    """Factory for Formula instances with custom configuration."""
    def _create_formula(max_parse_depth: int = 32, max_eval_depth: int = 200) -> Formula:
        return Formula(max_parse_depth=max_parse_depth, max_eval_depth=max_eval_depth)
    return _create_formula


class FormulaTestHelpers:
    """Helper utilities for formula testing."""

    @staticmethod
    def lex(expression: str) -> List[FormulaToken]:
        """Lex an expression."""
        return FormulaLexer().lex(expression)

    @staticmethod
    def token_types(expression: str) -> List[FormulaTokenType]:
        """Lex an expression and return just the token types, EOF included."""
        return [token.type for token in FormulaLexer().lex(expression)]

    @staticmethod
    def parse(expression: str) -> FormulaASTNode:
        """Lex and parse an expression."""
        return FormulaParser(FormulaLexer().lex(expression)).parse()

    @staticmethod
    def assert_evaluates_to(formula: Formula, expression: str, expected: str) -> None:
        """Assert that expression evaluates to expected formatted result."""
        result = formula.evaluate_and_format(expression)
        assert result == expected, f"Expected '{expected}', got '{result}'"

    @staticmethod
    def assert_python_result(formula: Formula, expression: str, expected: Any) -> None:
        """Assert that expression evaluates to expected Python object."""
        result = formula.evaluate_to_python(expression)
        assert result == expected, f"Expected Python result {expected!r}, got {result!r}"

    @staticmethod
    def build_nested_parens(depth: int, base_value: str = "1") -> str:
        """Build an expression wrapped in depth pairs of parentheses."""
        return "(" * depth + base_value + ")" * depth


@pytest.fixture
def helpers():
    """Provide test helper utilities."""
    return FormulaTestHelpers
