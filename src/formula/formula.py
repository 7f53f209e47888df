"""Main formula class and the stage functions of the formula pipeline."""

import logging
from typing import List

from formula.formula_ast import FormulaASTNode
from formula.formula_context import FormulaEvaluationContext
from formula.formula_interpreter import FormulaInterpreter
from formula.formula_lexer import FormulaLexer
from formula.formula_parser import FormulaParser
from formula.formula_pipeline import FormulaPipeline
from formula.formula_token import FormulaToken
from formula.formula_value import FormulaValue


def tokenize(text: str) -> List[FormulaToken]:
    """
    Lex formula source text into tokens.

    Raises:
        FormulaLexError: If the text contains an invalid token
    """
    return FormulaLexer().lex(text)


def parse(tokens: List[FormulaToken]) -> FormulaASTNode:
    """
    Parse tokens, ending with an EOF token, into an AST.

    Raises:
        FormulaParseError: If the tokens do not form one expression
    """
    return FormulaParser(tokens).parse()


def interpret(expr: FormulaASTNode, context: FormulaEvaluationContext | None = None) -> FormulaValue:
    """
    Evaluate an AST.

    Raises:
        FormulaEvalError: If evaluation fails
    """
    return FormulaInterpreter().interpret(expr, context)


class Formula:
    """
    Formula language front end: lexer, parser and interpreter in one place.

    Each call builds fresh lexer, parser and interpreter state, so one
    instance can be shared freely.
    """

    def __init__(self, max_parse_depth: int = 32, max_eval_depth: int = 200):
        """
        Initialize formula front end.

        Args:
            max_parse_depth: Maximum nesting of parenthesised, call and prefix expressions
            max_eval_depth: Maximum AST depth for evaluation
        """
        self.max_parse_depth = max_parse_depth
        self.max_eval_depth = max_eval_depth
        self._logger = logging.getLogger("Formula")

    def tokenize(self, expression: str) -> List[FormulaToken]:
        """
        Lex an expression.

        Raises:
            FormulaLexError: If tokenization fails
        """
        tokens = FormulaLexer().lex(expression)
        self._logger.debug("lexed %d tokens", len(tokens))
        return tokens

    def parse_tokens(self, tokens: List[FormulaToken]) -> FormulaASTNode:
        """
        Parse tokens with this instance's depth limit.

        Raises:
            FormulaParseError: If parsing fails
        """
        return FormulaParser(tokens, max_depth=self.max_parse_depth).parse()

    def parse(self, expression: str) -> FormulaASTNode:
        """
        Lex and parse an expression.

        Raises:
            FormulaLexError: If tokenization fails
            FormulaParseError: If parsing fails
        """
        pipeline = FormulaPipeline(self.tokenize, self.parse_tokens)
        return pipeline.run(expression)

    def evaluate(self, expression: str, context: FormulaEvaluationContext | None = None) -> FormulaValue:
        """
        Evaluate an expression.

        Args:
            expression: Formula source text
            context: Bindings for identifiers and functions

        Returns:
            The resulting formula value

        Raises:
            FormulaLexError: If tokenization fails
            FormulaParseError: If parsing fails
            FormulaEvalError: If evaluation fails
        """
        interpreter = FormulaInterpreter(max_depth=self.max_eval_depth)
        pipeline = FormulaPipeline(self.tokenize, self.parse_tokens).append(
            lambda expr: interpreter.interpret(expr, context)
        )
        result = pipeline.run(expression)
        self._logger.debug("evaluated to %s", result.type_name())
        return result

    def evaluate_to_python(
        self,
        expression: str,
        context: FormulaEvaluationContext | None = None
    ) -> float | str | bool:
        """Evaluate an expression and convert the result to a Python value."""
        return self.evaluate(expression, context).to_python()

    def evaluate_and_format(self, expression: str, context: FormulaEvaluationContext | None = None) -> str:
        """Evaluate an expression and format the result as formula text."""
        return self.evaluate(expression, context).describe()
