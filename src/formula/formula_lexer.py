"""Lexer for formula expressions with detailed error messages."""

import string
from typing import Dict, List

from formula.formula_cursor import FormulaCursor
from formula.formula_error import FormulaUnknownCharacterError, FormulaUnterminatedStringError
from formula.formula_token import FormulaToken, FormulaTokenType


class FormulaLexer:
    """Lexes formula expressions into tokens with detailed error messages."""

    SINGLE_CHARACTER_TOKENS: Dict[str, FormulaTokenType] = {
        '(': FormulaTokenType.LPAREN,
        ')': FormulaTokenType.RPAREN,
        ',': FormulaTokenType.COMMA,
        '?': FormulaTokenType.QUESTION,
        ':': FormulaTokenType.COLON,
        '+': FormulaTokenType.PLUS,
        '-': FormulaTokenType.MINUS,
        '*': FormulaTokenType.STAR,
        '/': FormulaTokenType.SLASH,
        '%': FormulaTokenType.PERCENT,
        '^': FormulaTokenType.CARET,
    }

    KEYWORDS: Dict[str, FormulaTokenType] = {
        'or': FormulaTokenType.OR,
        'and': FormulaTokenType.AND,
        'not': FormulaTokenType.NOT,
        'true': FormulaTokenType.TRUE,
        'false': FormulaTokenType.FALSE,
    }

    # Only ASCII counts: the language has no Unicode identifiers or digits
    DIGITS = frozenset(string.digits)
    LETTERS = frozenset(string.ascii_letters)
    IDENTIFIER_CHARS = LETTERS | DIGITS
    WHITESPACE = frozenset(' \t\r')

    UNKNOWN_CHARACTER_SUGGESTIONS = {
        '=': "Use '==' to test for equality",
        '!': "Use '!=' to test for inequality or 'not' to negate a boolean",
        '&': "Use 'and' for boolean operations, not &",
        '|': "Use 'or' for boolean operations, not |",
        "'": 'Use double quotes for strings: "text"',
        '[': "Use parentheses ( ) for grouping, not brackets [ ]",
        ']': "Use parentheses ( ) for grouping, not brackets [ ]",
        '{': "Use parentheses ( ) for grouping, not braces { }",
        '}': "Use parentheses ( ) for grouping, not braces { }",
        '.': "Numbers need a digit before the decimal point: 0.5, not .5",
        '_': "Identifiers may only contain letters and digits",
    }

    def lex(self, expression: str) -> List[FormulaToken]:
        """
        Lex a formula expression with detailed error reporting.

        Args:
            expression: The expression string to lex

        Returns:
            List of tokens, always ending with an EOF token

        Raises:
            FormulaLexError: If tokenization fails with detailed context
        """
        cursor = FormulaCursor(expression)
        tokens: List[FormulaToken] = []
        line = 1  # Current line number (1-indexed)
        column = 1  # Current column number (1-indexed)

        while True:
            next_char = cursor.peek()
            if next_char is None:
                break

            cursor.advance()

            token_type: FormulaTokenType | None = None
            if next_char == '\n':
                # The newline itself is added back below, leaving us at column 1
                line += 1
                column = 0

            elif next_char not in self.WHITESPACE:
                token_type = self._read_token(next_char, cursor, line, column)

            lexeme = cursor.slice()
            if token_type is not None:
                tokens.append(FormulaToken(token_type, ''.join(lexeme), line, column))

            column += len(lexeme)
            cursor.commit()

        tokens.append(FormulaToken(FormulaTokenType.EOF, "", line, column))
        return tokens

    def _read_token(self, char: str, cursor: FormulaCursor[str], line: int, column: int) -> FormulaTokenType:
        """
        Classify a token whose first character has already been consumed.

        Any further characters belonging to the token are consumed here.
        """
        token_type = self.SINGLE_CHARACTER_TOKENS.get(char)
        if token_type is not None:
            return token_type

        if char == '>':
            return self._match_equals(cursor, FormulaTokenType.GREATER_EQUAL, FormulaTokenType.GREATER)

        if char == '<':
            return self._match_equals(cursor, FormulaTokenType.LESS_EQUAL, FormulaTokenType.LESS)

        if char in '=!' and cursor.peek() == '=':
            cursor.advance()
            return FormulaTokenType.EQUAL_EQUAL if char == '=' else FormulaTokenType.BANG_EQUAL

        if char == '"':
            self._read_string(cursor, line, column)
            return FormulaTokenType.STRING

        if char in self.DIGITS:
            self._read_number(cursor)
            return FormulaTokenType.NUMBER

        if char in self.LETTERS:
            return self._read_identifier(cursor)

        raise self._unknown_character_error(char, line, column)

    def _match_equals(
        self,
        cursor: FormulaCursor[str],
        with_equals: FormulaTokenType,
        without_equals: FormulaTokenType
    ) -> FormulaTokenType:
        """Extend a one-character operator to its two-character form if '=' follows."""
        if cursor.peek() == '=':
            cursor.advance()
            return with_equals

        return without_equals

    def _read_string(self, cursor: FormulaCursor[str], line: int, column: int) -> None:
        """
        Consume a string literal up to and including its closing quote.

        Raises:
            FormulaUnterminatedStringError: If the input ends first
        """
        while True:
            char = cursor.peek()
            if char is None:
                start = ''.join(cursor.slice()[:10])
                raise FormulaUnterminatedStringError(
                    message="Unterminated string literal",
                    line=line,
                    column=column,
                    received=f"String starting with: {start}...",
                    expected="Closing quote \" at end of string",
                    example='Correct: "hello world"\\nIncorrect: "hello world',
                    suggestion="Add closing quote \" at the end of the string",
                    context="String literals must be enclosed in double quotes"
                )

            cursor.advance()
            if char == '"':
                return

    def _is_digit(self, char: str | None) -> bool:
        return char is not None and char in self.DIGITS

    def _consume_digits(self, cursor: FormulaCursor[str]) -> None:
        while self._is_digit(cursor.peek()):
            cursor.advance()

    def _read_number(self, cursor: FormulaCursor[str]) -> None:
        """
        Consume the rest of a number literal.

        The grammar is digits, an optional fraction and an optional exponent.
        A '.' or 'e' that is not followed by the digits it needs is left for the
        next token.
        """
        self._consume_digits(cursor)

        if cursor.peek() == '.' and self._is_digit(cursor.peek(1)):
            cursor.advance()
            self._consume_digits(cursor)

        if cursor.peek() in ('e', 'E'):
            self._read_exponent(cursor)

    def _read_exponent(self, cursor: FormulaCursor[str]) -> None:
        """Consume an exponent marker, optional sign and digits, if the digits are there."""
        after_marker = cursor.peek(1)
        if after_marker in ('+', '-'):
            if self._is_digit(cursor.peek(2)):
                cursor.advance()
                cursor.advance()
                self._consume_digits(cursor)

            return

        if self._is_digit(after_marker):
            cursor.advance()
            self._consume_digits(cursor)

    def _read_identifier(self, cursor: FormulaCursor[str]) -> FormulaTokenType:
        """Consume an identifier and resolve it against the keyword table."""
        while True:
            char = cursor.peek()
            if char is None or char not in self.IDENTIFIER_CHARS:
                break

            cursor.advance()

        word = ''.join(cursor.slice())
        return self.KEYWORDS.get(word, FormulaTokenType.IDENTIFIER)

    def _unknown_character_error(self, char: str, line: int, column: int) -> FormulaUnknownCharacterError:
        """Build the error for a character that starts no token."""
        char_code = ord(char)
        if char_code < 32:
            char_display = f"\\u{char_code:04x}"
            return FormulaUnknownCharacterError(
                character=char,
                message=f"Invalid control character in source code: {char_display}",
                line=line,
                column=column,
                received=f"Control character: {char_display} (code {char_code})",
                expected="Valid formula characters",
                suggestion="Remove the control character",
                context="Only spaces, tabs and newlines may separate tokens"
            )

        suggestion = self.UNKNOWN_CHARACTER_SUGGESTIONS.get(char, f"'{char}' is not a valid character in a formula")
        return FormulaUnknownCharacterError(
            character=char,
            message=f"Invalid character: {char}",
            line=line,
            column=column,
            received=f"Character: {char} (code {char_code})",
            expected="Letters, digits, quotes, parentheses or an operator",
            example='Valid: prop("Price") * 2 >= 10\\nInvalid: prop("Price") & 2',
            suggestion=suggestion,
            context="Only letters, digits, string literals and formula operators are allowed"
        )
