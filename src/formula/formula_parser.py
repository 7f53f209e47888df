"""Recursive-descent parser for formula expressions with detailed error messages."""

from typing import Callable, Dict, List, Type

from formula.formula_ast import (
    FormulaASTNode, FormulaASTBinaryOp, FormulaASTComparison, FormulaASTBooleanOp, FormulaASTUnaryOp,
    FormulaASTTernaryOp, FormulaASTCall, FormulaASTIdentifier, FormulaASTString, FormulaASTNumber,
    FormulaASTBoolean, FormulaMathOp, FormulaCompareOp, FormulaBoolOp, FormulaUnaryOperator
)
from formula.formula_cursor import FormulaCursor
from formula.formula_error import (
    FormulaUnexpectedTokenError, FormulaExpectedClosingParenError, FormulaExpectedColonError,
    FormulaExpectedClosingParenInCallError, FormulaMissingEofError, FormulaNestingTooDeepError
)
from formula.formula_token import FormulaToken, FormulaTokenType


class FormulaParser:
    """
    Parses a token list into a formula AST.

    Each precedence level is one method, from the loosest binding (ternary)
    down to atomic expressions:

        ternary        := or ('?' or ':' ternary)?
        or             := and ('or' and)*
        and            := not ('and' not)*
        not            := 'not' not | equality
        equality       := relational (('==' | '!=') relational)*
        relational     := additive (('<' | '<=' | '>' | '>=') additive)?
        additive       := multiplicative (('+' | '-') multiplicative)*
        multiplicative := prefix (('*' | '/' | '%') prefix)*
        prefix         := ('-' | '+') prefix | exponential
        exponential    := atomic ('^' atomic)*
        atomic         := identifier ('(' args? ')')? | '(' ternary ')'
                          | number | string | 'true' | 'false'

    The accept branch of a ternary is only an `or` expression, so a nested
    ternary there needs parentheses while one in the reject branch does not.
    Relational operators do not chain: `1 < 2 < 3` is a syntax error.
    """

    EQUALITY_OPERATORS: Dict[FormulaTokenType, FormulaCompareOp] = {
        FormulaTokenType.EQUAL_EQUAL: FormulaCompareOp.EQUALS,
        FormulaTokenType.BANG_EQUAL: FormulaCompareOp.NOT_EQUALS,
    }

    RELATIONAL_OPERATORS: Dict[FormulaTokenType, FormulaCompareOp] = {
        FormulaTokenType.LESS_EQUAL: FormulaCompareOp.LESS_THAN_EQ,
        FormulaTokenType.LESS: FormulaCompareOp.LESS_THAN,
        FormulaTokenType.GREATER_EQUAL: FormulaCompareOp.GREATER_THAN_EQ,
        FormulaTokenType.GREATER: FormulaCompareOp.GREATER_THAN,
    }

    ADDITIVE_OPERATORS: Dict[FormulaTokenType, FormulaMathOp] = {
        FormulaTokenType.PLUS: FormulaMathOp.ADD,
        FormulaTokenType.MINUS: FormulaMathOp.SUBTRACT,
    }

    MULTIPLICATIVE_OPERATORS: Dict[FormulaTokenType, FormulaMathOp] = {
        FormulaTokenType.STAR: FormulaMathOp.MULTIPLY,
        FormulaTokenType.SLASH: FormulaMathOp.DIVIDE,
        FormulaTokenType.PERCENT: FormulaMathOp.MOD,
    }

    PREFIX_OPERATORS: Dict[FormulaTokenType, FormulaUnaryOperator] = {
        FormulaTokenType.MINUS: FormulaUnaryOperator.USUB,
        FormulaTokenType.PLUS: FormulaUnaryOperator.UADD,
    }

    def __init__(self, tokens: List[FormulaToken], max_depth: int = 32):
        """
        Initialize parser with tokens.

        Args:
            tokens: Tokens to parse, normally ending with an EOF token
            max_depth: Maximum grammar nesting depth
        """
        self.cursor: FormulaCursor[FormulaToken] = FormulaCursor(tokens)
        self.max_depth = max_depth
        self._depth = 0

    def parse(self) -> FormulaASTNode:
        """
        Parse the tokens into a single expression.

        Returns:
            Root node of the AST

        Raises:
            FormulaParseError: If parsing fails with detailed context
        """
        expr = self._parse_expression()

        token = self._current()
        if token.type != FormulaTokenType.EOF:
            raise FormulaUnexpectedTokenError(
                token=token,
                message=f"Unexpected token after complete expression: {token.describe()}",
                received=f"Found: {token.describe()}",
                expected="End of expression",
                example="Correct: 1 < 2 and 2 < 3\\nIncorrect: 1 < 2 < 3",
                suggestion="Remove extra tokens, or combine comparisons with 'and' / 'or'",
                context="A formula is exactly one expression and comparisons do not chain"
            )

        return expr

    def _current(self) -> FormulaToken:
        """
        Return the current token without consuming it.

        Raises:
            FormulaMissingEofError: If the tokens ran out without an EOF token
        """
        token = self.cursor.peek()
        if token is None:
            raise FormulaMissingEofError(
                message="No end-of-input token found",
                expected="Token list ending with an EOF token",
                suggestion="Pass the complete output of the lexer to the parser"
            )

        return token

    def _enter(self, token: FormulaToken) -> None:
        """Descend one nesting level, enforcing the depth limit."""
        self._depth += 1
        if self._depth > self.max_depth:
            raise FormulaNestingTooDeepError(
                message=f"Expression too deeply nested (max depth: {self.max_depth})",
                line=token.line,
                column=token.column,
                suggestion="Reduce nesting depth or increase max_depth limit"
            )

    def _leave(self) -> None:
        self._depth -= 1

    def _parse_expression(self) -> FormulaASTNode:
        """Parse a full expression, the entry point for every nested expression."""
        self._enter(self._current())
        expr = self._parse_ternary()
        self._leave()
        return expr

    def _parse_ternary(self) -> FormulaASTNode:
        test = self._parse_or()

        question = self._current()
        if question.type != FormulaTokenType.QUESTION:
            return test

        self.cursor.advance()
        accept = self._parse_or()

        token = self._current()
        if token.type != FormulaTokenType.COLON:
            raise FormulaExpectedColonError(
                message="Expected ':' in ternary expression",
                line=token.line,
                column=token.column,
                received=f"Found: {token.describe()}",
                expected="':' followed by the value for a false test",
                example='Correct: x > 1 ? "big" : "small"\\nIncorrect: x > 1 ? "big"',
                suggestion="Add ':' and the value to use when the test is false",
                context="A nested ternary in the true branch must be wrapped in parentheses"
            )

        self.cursor.advance()
        reject = self._parse_expression()
        return FormulaASTTernaryOp(test, accept, reject, line=question.line, column=question.column)

    def _parse_boolean_chain(
        self,
        operand_parser: Callable[[], FormulaASTNode],
        token_type: FormulaTokenType,
        op: FormulaBoolOp
    ) -> FormulaASTNode:
        """Parse a left-associative run of one boolean connective."""
        left = operand_parser()

        while True:
            token = self._current()
            if token.type != token_type:
                return left

            self.cursor.advance()
            right = operand_parser()
            left = FormulaASTBooleanOp(left, op, right, line=token.line, column=token.column)

    def _parse_or(self) -> FormulaASTNode:
        return self._parse_boolean_chain(self._parse_and, FormulaTokenType.OR, FormulaBoolOp.OR)

    def _parse_and(self) -> FormulaASTNode:
        return self._parse_boolean_chain(self._parse_not, FormulaTokenType.AND, FormulaBoolOp.AND)

    def _parse_not(self) -> FormulaASTNode:
        token = self._current()
        if token.type != FormulaTokenType.NOT:
            return self._parse_equality()

        self.cursor.advance()
        self._enter(token)
        operand = self._parse_not()
        self._leave()
        return FormulaASTUnaryOp(FormulaUnaryOperator.NOT, operand, line=token.line, column=token.column)

    def _parse_left_associative(
        self,
        operand_parser: Callable[[], FormulaASTNode],
        operators: Dict[FormulaTokenType, FormulaMathOp] | Dict[FormulaTokenType, FormulaCompareOp],
        node_class: Type[FormulaASTBinaryOp] | Type[FormulaASTComparison]
    ) -> FormulaASTNode:
        """Parse a left-associative run of binary operators from one precedence level."""
        left = operand_parser()

        while True:
            token = self._current()
            op = operators.get(token.type)
            if op is None:
                return left

            self.cursor.advance()
            right = operand_parser()
            left = node_class(left, op, right, line=token.line, column=token.column)  # type: ignore[arg-type]

    def _parse_equality(self) -> FormulaASTNode:
        return self._parse_left_associative(self._parse_relational, self.EQUALITY_OPERATORS, FormulaASTComparison)

    def _parse_relational(self) -> FormulaASTNode:
        # At most one relational operator per level
        left = self._parse_additive()

        token = self._current()
        op = self.RELATIONAL_OPERATORS.get(token.type)
        if op is None:
            return left

        self.cursor.advance()
        right = self._parse_additive()
        return FormulaASTComparison(left, op, right, line=token.line, column=token.column)

    def _parse_additive(self) -> FormulaASTNode:
        return self._parse_left_associative(self._parse_multiplicative, self.ADDITIVE_OPERATORS, FormulaASTBinaryOp)

    def _parse_multiplicative(self) -> FormulaASTNode:
        return self._parse_left_associative(self._parse_prefix, self.MULTIPLICATIVE_OPERATORS, FormulaASTBinaryOp)

    def _parse_prefix(self) -> FormulaASTNode:
        token = self._current()
        op = self.PREFIX_OPERATORS.get(token.type)
        if op is None:
            return self._parse_exponential()

        self.cursor.advance()
        self._enter(token)
        operand = self._parse_prefix()
        self._leave()
        return FormulaASTUnaryOp(op, operand, line=token.line, column=token.column)

    def _parse_exponential(self) -> FormulaASTNode:
        """
        Parse a run of '^' operators as a right-associative chain.

        Operands are pushed as they are read and then folded from the top of the
        stack, so `a ^ b ^ c` becomes `a ^ (b ^ c)`.
        """
        operands = [self._parse_atomic()]
        carets: List[FormulaToken] = []

        while True:
            token = self._current()
            if token.type != FormulaTokenType.CARET:
                break

            self.cursor.advance()
            carets.append(token)
            operands.append(self._parse_atomic())

        result = operands.pop()
        while operands:
            caret = carets.pop()
            result = FormulaASTBinaryOp(
                operands.pop(), FormulaMathOp.EXPONENT, result, line=caret.line, column=caret.column
            )

        return result

    def _parse_atomic(self) -> FormulaASTNode:
        token = self._current()

        if token.type == FormulaTokenType.IDENTIFIER:
            self.cursor.advance()
            identifier = FormulaASTIdentifier(token.value, line=token.line, column=token.column)
            if self._current().type == FormulaTokenType.LPAREN:
                self.cursor.advance()
                return self._parse_call(identifier, token)

            return identifier

        if token.type == FormulaTokenType.LPAREN:
            self.cursor.advance()
            expr = self._parse_expression()

            closing = self._current()
            if closing.type != FormulaTokenType.RPAREN:
                raise FormulaExpectedClosingParenError(
                    message="Expected ')' to close parenthesised expression",
                    line=closing.line,
                    column=closing.column,
                    received=f"Found: {closing.describe()}",
                    expected="')'",
                    example="Correct: (1 + 2) * 3\\nIncorrect: (1 + 2 * 3",
                    suggestion="Add ')' to close the expression",
                    context=f"The '(' at line {token.line}, column {token.column} is never closed"
                )

            self.cursor.advance()
            return expr

        if token.type == FormulaTokenType.NUMBER:
            self.cursor.advance()
            return FormulaASTNumber(token.value, line=token.line, column=token.column)

        if token.type == FormulaTokenType.STRING:
            self.cursor.advance()
            return FormulaASTString(token.value, line=token.line, column=token.column)

        if token.type in (FormulaTokenType.TRUE, FormulaTokenType.FALSE):
            self.cursor.advance()
            return FormulaASTBoolean(token.type == FormulaTokenType.TRUE, line=token.line, column=token.column)

        raise FormulaUnexpectedTokenError(
            token=token,
            message=f"Unexpected token: {token.describe()}",
            received=f"Token: {token.describe()} (type: {token.type.name})",
            expected="Number, string, true, false, identifier, function call or '('",
            example='Valid starts: 42, "hello", true, price, prop("Name"), (',
            suggestion="Check for a missing operand or an extra operator",
            context=f"Token {token.describe()} cannot start an operand"
        )

    def _parse_call(self, callee: FormulaASTIdentifier, name_token: FormulaToken) -> FormulaASTCall:
        """Parse the argument list of a call; the '(' has already been consumed."""
        args: List[FormulaASTNode] = []

        if self._current().type != FormulaTokenType.RPAREN:
            args.append(self._parse_expression())
            while self._current().type == FormulaTokenType.COMMA:
                self.cursor.advance()
                args.append(self._parse_expression())

        closing = self._current()
        if closing.type != FormulaTokenType.RPAREN:
            raise FormulaExpectedClosingParenInCallError(
                message=f"Expected ')' to close call to '{callee.name}'",
                line=closing.line,
                column=closing.column,
                received=f"Found: {closing.describe()}",
                expected="',' followed by another argument, or ')'",
                example='Correct: max(1, 2)\\nIncorrect: max(1 2)',
                suggestion="Separate arguments with ',' and close the call with ')'",
                context=f"Call to '{callee.name}' starts at line {name_token.line}, column {name_token.column}"
            )

        self.cursor.advance()
        return FormulaASTCall(callee, tuple(args), line=name_token.line, column=name_token.column)
