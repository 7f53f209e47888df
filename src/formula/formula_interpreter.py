"""Tree-walking interpreter for formula ASTs with detailed error messages."""

import operator
from typing import Any, Callable, Dict, List, Union

from formula.formula_ast import (
    FormulaASTNode, FormulaASTBinaryOp, FormulaASTComparison, FormulaASTBooleanOp, FormulaASTUnaryOp,
    FormulaASTTernaryOp, FormulaASTCall, FormulaASTIdentifier, FormulaASTString, FormulaASTNumber,
    FormulaASTBoolean, FormulaMathOp, FormulaCompareOp, FormulaBoolOp, FormulaUnaryOperator
)
from formula.formula_context import FormulaEvaluationContext, FormulaNoBindingsContext
from formula.formula_error import (
    FormulaError, FormulaEvalError, FormulaInvalidOperandsError, FormulaTypeMismatchError,
    FormulaExpectedBooleanOperandsError, FormulaExpectedBooleanOperandError, FormulaExpectedNumericOperandError,
    FormulaInvalidNumericLiteralError, FormulaBranchTypeMismatchError, FormulaExpectedBooleanTestError,
    FormulaNestingTooDeepEvalError, FormulaUnsupportedFeatureError
)
from formula.formula_math import FormulaMathFunctions
from formula.formula_value import FormulaValue, FormulaNumber, FormulaString, FormulaBoolean


BinaryNode = Union[FormulaASTBinaryOp, FormulaASTComparison, FormulaASTBooleanOp]


class FormulaInterpreter:
    """
    Evaluates formula ASTs.

    Values are checked dynamically at every operation: arithmetic needs two
    numbers (or two strings for '+'), comparisons need two values of the same
    kind, and boolean operators need booleans.  Identifiers and calls are
    handed to the evaluation context.
    """

    BINARY_NODES = (FormulaASTBinaryOp, FormulaASTComparison, FormulaASTBooleanOp)

    COMPARISONS: Dict[FormulaCompareOp, Callable[[Any, Any], bool]] = {
        FormulaCompareOp.EQUALS: operator.eq,
        FormulaCompareOp.NOT_EQUALS: operator.ne,
        FormulaCompareOp.LESS_THAN: operator.lt,
        FormulaCompareOp.LESS_THAN_EQ: operator.le,
        FormulaCompareOp.GREATER_THAN: operator.gt,
        FormulaCompareOp.GREATER_THAN_EQ: operator.ge,
    }

    def __init__(self, max_depth: int = 200):
        """
        Initialize interpreter.

        Args:
            max_depth: Maximum AST depth to evaluate
        """
        self.max_depth = max_depth
        self.math_functions = FormulaMathFunctions()
        self._arithmetic = self.math_functions.get_functions()

    def interpret(self, expr: FormulaASTNode, context: FormulaEvaluationContext | None = None) -> FormulaValue:
        """
        Evaluate an expression.

        Args:
            expr: Root of the AST to evaluate
            context: Bindings for identifiers and functions; without one, any
                identifier or call is an error

        Returns:
            The resulting value

        Raises:
            FormulaEvalError: If evaluation fails
        """
        if context is None:
            context = FormulaNoBindingsContext()

        try:
            return self._evaluate(expr, context, 0)

        except FormulaError:
            raise

        except Exception as e:
            # Anything else comes from a caller-supplied context
            raise FormulaEvalError(
                message=f"Unexpected error during evaluation: {e}",
                line=expr.line,
                column=expr.column,
                suggestion="Check the functions supplied by the evaluation context"
            ) from e

    def _evaluate(self, expr: FormulaASTNode, context: FormulaEvaluationContext, depth: int) -> FormulaValue:
        """Internal expression evaluation with type dispatch."""
        if depth > self.max_depth:
            raise FormulaNestingTooDeepEvalError(
                message=f"Expression too deeply nested (max depth: {self.max_depth})",
                line=expr.line,
                column=expr.column,
                suggestion="Reduce nesting depth or increase max_depth limit"
            )

        if isinstance(expr, FormulaASTNumber):
            return self._evaluate_number(expr)

        if isinstance(expr, FormulaASTString):
            return FormulaString(expr.text)

        if isinstance(expr, FormulaASTBoolean):
            return FormulaBoolean(expr.value)

        if isinstance(expr, FormulaASTBinaryOp) and expr.op == FormulaMathOp.EXPONENT:
            return self._evaluate_exponent_chain(expr, context, depth)

        if isinstance(expr, self.BINARY_NODES):
            return self._evaluate_left_chain(expr, context, depth)

        if isinstance(expr, FormulaASTUnaryOp):
            return self._evaluate_unary_op(expr, context, depth)

        if isinstance(expr, FormulaASTTernaryOp):
            return self._evaluate_ternary_op(expr, context, depth)

        if isinstance(expr, FormulaASTIdentifier):
            try:
                return context.resolve(expr.name)

            except FormulaError as e:
                e.locate(expr.line, expr.column)
                raise

        if isinstance(expr, FormulaASTCall):
            return self._evaluate_call(expr, context, depth)

        raise FormulaEvalError(
            message=f"Unknown expression type: {type(expr).__name__}",
            suggestion="This is an internal error - please report this issue"
        )

    def _parse_number(self, text: str, expr: FormulaASTNode) -> FormulaNumber:
        try:
            return FormulaNumber(self.math_functions.parse_number(text))

        except ValueError as e:
            raise FormulaInvalidNumericLiteralError(
                message=f"Invalid numeric literal: {text}",
                line=expr.line,
                column=expr.column,
                received=f"Text: {text!r}",
                expected="Decimal number such as 42, 3.14 or 1e-3",
                example='Valid: +"42" or +"1.5e3"\\nInvalid: +"forty-two"'
            ) from e

    def _evaluate_number(self, expr: FormulaASTNumber) -> FormulaNumber:
        # Literals are converted here rather than in the lexer or parser
        return self._parse_number(expr.text, expr)

    def _evaluate_left_chain(
        self,
        expr: BinaryNode,
        context: FormulaEvaluationContext,
        depth: int
    ) -> FormulaValue:
        """
        Evaluate a run of binary nodes nested through their left operands.

        The parser builds `a + b + c + ...` as a left-leaning tree whose depth
        grows with the number of operands, so the left spine is walked in a
        loop.  Every operand counts as one level below the chain, however
        long the chain is.
        """
        spine: List[BinaryNode] = []
        node: FormulaASTNode = expr
        while isinstance(node, self.BINARY_NODES):
            spine.append(node)
            node = node.left

        value = self._evaluate(node, context, depth + 1)
        for op_node in reversed(spine):
            right = self._evaluate(op_node.right, context, depth + 1)
            value = self._apply_binary_node(op_node, value, right)

        return value

    def _evaluate_exponent_chain(
        self,
        expr: FormulaASTBinaryOp,
        context: FormulaEvaluationContext,
        depth: int
    ) -> FormulaValue:
        """
        Evaluate a run of '^' nested through their right operands.

        Operands are evaluated left to right and then folded from the right,
        the same order a recursive walk would use.
        """
        spine: List[FormulaASTBinaryOp] = []
        node: FormulaASTNode = expr
        while isinstance(node, FormulaASTBinaryOp) and node.op == FormulaMathOp.EXPONENT:
            spine.append(node)
            node = node.right

        bases = [self._evaluate(op_node.left, context, depth + 1) for op_node in spine]
        value = self._evaluate(node, context, depth + 1)
        for op_node, base in zip(reversed(spine), reversed(bases)):
            value = self._apply_binary_op(op_node, base, value)

        return value

    def _apply_binary_node(self, expr: BinaryNode, left: FormulaValue, right: FormulaValue) -> FormulaValue:
        if isinstance(expr, FormulaASTBinaryOp):
            return self._apply_binary_op(expr, left, right)

        if isinstance(expr, FormulaASTComparison):
            return self._apply_comparison(expr, left, right)

        return self._apply_boolean_op(expr, left, right)

    def _apply_binary_op(self, expr: FormulaASTBinaryOp, left: FormulaValue, right: FormulaValue) -> FormulaValue:
        if isinstance(left, FormulaNumber) and isinstance(right, FormulaNumber):
            return FormulaNumber(self._arithmetic[expr.op](left.value, right.value))

        if isinstance(left, FormulaString) and isinstance(right, FormulaString) and expr.op == FormulaMathOp.ADD:
            return FormulaString(left.value + right.value)

        if isinstance(left, FormulaString) and isinstance(right, FormulaString):
            suggestion = "Strings only support '+' (concatenation)"

        else:
            suggestion = "Both operands must be numbers, or both strings for '+'"

        raise FormulaInvalidOperandsError(
            message=f"Invalid operands for '{expr.op.value}': {left.type_name()} and {right.type_name()}",
            line=expr.line,
            column=expr.column,
            received=f"Left: {left.describe()} ({left.type_name()}), right: {right.describe()} ({right.type_name()})",
            expected="Two numbers, or two strings for '+'",
            suggestion=suggestion,
            example='Valid: 1 + 2, "a" + "b"\\nInvalid: 1 + "b", "a" * "b"'
        )

    def _apply_comparison(self, expr: FormulaASTComparison, left: FormulaValue, right: FormulaValue) -> FormulaBoolean:
        if type(left) is not type(right):
            raise FormulaTypeMismatchError(
                message=f"Cannot compare values of different types: {left.type_name()} and {right.type_name()}",
                line=expr.line,
                column=expr.column,
                received=f"Left: {left.describe()} ({left.type_name()}), right: {right.describe()} ({right.type_name()})",
                expected="Two values of the same type",
                suggestion="Convert one side first, for example with unary '+' to turn a string into a number"
            )

        compare = self.COMPARISONS[expr.op]
        return FormulaBoolean(compare(left.to_python(), right.to_python()))

    def _apply_boolean_op(self, expr: FormulaASTBooleanOp, left: FormulaValue, right: FormulaValue) -> FormulaBoolean:
        # Both sides were already evaluated; there is no short circuit
        if not isinstance(left, FormulaBoolean) or not isinstance(right, FormulaBoolean):
            raise FormulaExpectedBooleanOperandsError(
                message=f"'{expr.op.value}' requires boolean operands, got {left.type_name()} and {right.type_name()}",
                line=expr.line,
                column=expr.column,
                received=f"Left: {left.describe()}, right: {right.describe()}",
                expected="Two booleans",
                suggestion="Use a comparison to produce a boolean, for example x > 0"
            )

        if expr.op == FormulaBoolOp.AND:
            return FormulaBoolean(left.value and right.value)

        return FormulaBoolean(left.value or right.value)

    def _evaluate_unary_op(
        self,
        expr: FormulaASTUnaryOp,
        context: FormulaEvaluationContext,
        depth: int
    ) -> FormulaValue:
        operand = self._evaluate(expr.operand, context, depth + 1)

        if expr.op == FormulaUnaryOperator.NOT:
            if not isinstance(operand, FormulaBoolean):
                raise FormulaExpectedBooleanOperandError(
                    message=f"'not' requires a boolean operand, got {operand.type_name()}",
                    line=expr.line,
                    column=expr.column,
                    received=f"Operand: {operand.describe()}",
                    expected="A boolean",
                    example="Valid: not (x > 1)\\nInvalid: not 1"
                )

            return FormulaBoolean(not operand.value)

        if expr.op == FormulaUnaryOperator.USUB:
            if not isinstance(operand, FormulaNumber):
                raise FormulaExpectedNumericOperandError(
                    message=f"Unary '-' requires a numeric operand, got {operand.type_name()}",
                    line=expr.line,
                    column=expr.column,
                    received=f"Operand: {operand.describe()}",
                    expected="A number",
                    suggestion="Convert the value to a number with unary '+' first"
                )

            return FormulaNumber(-operand.value)

        # Unary '+' converts to a number
        if isinstance(operand, FormulaString):
            return self._parse_number(operand.value, expr)

        if isinstance(operand, FormulaBoolean):
            return FormulaNumber(1.0 if operand.value else 0.0)

        return operand

    def _evaluate_ternary_op(
        self,
        expr: FormulaASTTernaryOp,
        context: FormulaEvaluationContext,
        depth: int
    ) -> FormulaValue:
        # Both branches are evaluated before the test is checked
        test = self._evaluate(expr.test, context, depth + 1)
        accept = self._evaluate(expr.accept, context, depth + 1)
        reject = self._evaluate(expr.reject, context, depth + 1)

        if not isinstance(test, FormulaBoolean):
            raise FormulaExpectedBooleanTestError(
                message=f"Ternary test must be a boolean, got {test.type_name()}",
                line=expr.line,
                column=expr.column,
                received=f"Test: {test.describe()}",
                expected="A boolean",
                example='Valid: x > 1 ? "big" : "small"\\nInvalid: x ? "big" : "small"'
            )

        if type(accept) is not type(reject):
            raise FormulaBranchTypeMismatchError(
                message=f"Ternary branches must have the same type: {accept.type_name()} and {reject.type_name()}",
                line=expr.line,
                column=expr.column,
                received=f"True branch: {accept.describe()}, false branch: {reject.describe()}",
                expected="Two values of the same type",
                suggestion="Make both branches numbers, both strings or both booleans"
            )

        return accept if test.value else reject

    def _evaluate_call(
        self,
        expr: FormulaASTCall,
        context: FormulaEvaluationContext,
        depth: int
    ) -> FormulaValue:
        # The parser only ever produces identifier callees
        if not isinstance(expr.callee, FormulaASTIdentifier):
            raise FormulaUnsupportedFeatureError(
                message=f"Cannot call {expr.callee.describe()}",
                line=expr.line,
                column=expr.column,
                expected="A function name"
            )

        args: List[FormulaValue] = [self._evaluate(arg, context, depth + 1) for arg in expr.args]
        name = expr.callee.name
        try:
            return context.invoke(name, args)

        except FormulaError as e:
            e.locate(expr.line, expr.column)
            raise

        except Exception as e:
            raise FormulaEvalError(
                message=f"Unexpected error during evaluation: {e}",
                line=expr.line,
                column=expr.column,
                context=f"Raised by function '{name}'",
                suggestion="Check the functions supplied by the evaluation context"
            ) from e
