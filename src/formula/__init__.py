"""Formula language package: lexer, parser and interpreter for Notion-style formulas."""

# Main API
from formula.formula import Formula, tokenize, parse, interpret

# Exceptions
from formula.formula_error import (
    FormulaError, FormulaReadError,
    FormulaLexError, FormulaUnterminatedStringError, FormulaUnknownCharacterError,
    FormulaParseError, FormulaUnexpectedTokenError, FormulaExpectedClosingParenError, FormulaExpectedColonError,
    FormulaExpectedClosingParenInCallError, FormulaMissingEofError, FormulaNestingTooDeepError,
    FormulaEvalError, FormulaInvalidOperandsError, FormulaTypeMismatchError, FormulaExpectedBooleanOperandsError,
    FormulaExpectedBooleanOperandError, FormulaExpectedNumericOperandError, FormulaInvalidNumericLiteralError,
    FormulaBranchTypeMismatchError, FormulaExpectedBooleanTestError, FormulaUnsupportedFeatureError,
    FormulaNestingTooDeepEvalError
)

# Value types
from formula.formula_value import FormulaValue, FormulaNumber, FormulaString, FormulaBoolean, to_formula_value

# AST
from formula.formula_ast import (
    FormulaASTNode, FormulaASTBinaryOp, FormulaASTComparison, FormulaASTBooleanOp, FormulaASTUnaryOp,
    FormulaASTTernaryOp, FormulaASTCall, FormulaASTIdentifier, FormulaASTString, FormulaASTNumber,
    FormulaASTBoolean, FormulaMathOp, FormulaCompareOp, FormulaBoolOp, FormulaUnaryOperator
)

# Lower-level components (for advanced usage)
from formula.formula_context import FormulaEvaluationContext, FormulaNoBindingsContext, FormulaDictContext
from formula.formula_cursor import FormulaCursor
from formula.formula_token import FormulaToken, FormulaTokenType
from formula.formula_lexer import FormulaLexer
from formula.formula_parser import FormulaParser
from formula.formula_interpreter import FormulaInterpreter
from formula.formula_pipeline import FormulaPipeline
from formula.formula_reader import read_source


__all__ = [
    # Main API
    "Formula", "tokenize", "parse", "interpret",

    # Exceptions
    "FormulaError", "FormulaReadError",
    "FormulaLexError", "FormulaUnterminatedStringError", "FormulaUnknownCharacterError",
    "FormulaParseError", "FormulaUnexpectedTokenError", "FormulaExpectedClosingParenError",
    "FormulaExpectedColonError", "FormulaExpectedClosingParenInCallError", "FormulaMissingEofError",
    "FormulaNestingTooDeepError",
    "FormulaEvalError", "FormulaInvalidOperandsError", "FormulaTypeMismatchError",
    "FormulaExpectedBooleanOperandsError", "FormulaExpectedBooleanOperandError",
    "FormulaExpectedNumericOperandError", "FormulaInvalidNumericLiteralError", "FormulaBranchTypeMismatchError",
    "FormulaExpectedBooleanTestError", "FormulaUnsupportedFeatureError", "FormulaNestingTooDeepEvalError",

    # Value types
    "FormulaValue", "FormulaNumber", "FormulaString", "FormulaBoolean", "to_formula_value",

    # AST
    "FormulaASTNode", "FormulaASTBinaryOp", "FormulaASTComparison", "FormulaASTBooleanOp", "FormulaASTUnaryOp",
    "FormulaASTTernaryOp", "FormulaASTCall", "FormulaASTIdentifier", "FormulaASTString", "FormulaASTNumber",
    "FormulaASTBoolean", "FormulaMathOp", "FormulaCompareOp", "FormulaBoolOp", "FormulaUnaryOperator",

    # Lower-level components
    "FormulaEvaluationContext", "FormulaNoBindingsContext", "FormulaDictContext", "FormulaCursor",
    "FormulaToken", "FormulaTokenType", "FormulaLexer", "FormulaParser", "FormulaInterpreter",
    "FormulaPipeline", "read_source"
]
