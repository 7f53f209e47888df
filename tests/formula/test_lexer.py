"""Tests for the formula lexer."""

import pytest

from formula import (
    FormulaLexer, FormulaToken, FormulaTokenType, FormulaLexError,
    FormulaUnterminatedStringError, FormulaUnknownCharacterError, tokenize
)


T = FormulaTokenType


class TestLexerPunctuation:
    """Test single and double character tokens."""

    def test_can_handle_single_character_tokens(self):
        """Test every single character token with its position."""
        tokens = FormulaLexer().lex("( ) , ? : + - * % ^ /")

        assert tokens == [
            FormulaToken(T.LPAREN, "(", 1, 1),
            FormulaToken(T.RPAREN, ")", 1, 3),
            FormulaToken(T.COMMA, ",", 1, 5),
            FormulaToken(T.QUESTION, "?", 1, 7),
            FormulaToken(T.COLON, ":", 1, 9),
            FormulaToken(T.PLUS, "+", 1, 11),
            FormulaToken(T.MINUS, "-", 1, 13),
            FormulaToken(T.STAR, "*", 1, 15),
            FormulaToken(T.PERCENT, "%", 1, 17),
            FormulaToken(T.CARET, "^", 1, 19),
            FormulaToken(T.SLASH, "/", 1, 21),
            FormulaToken(T.EOF, "", 1, 22),
        ]

    def test_can_handle_double_character_tokens(self):
        """Test that comparison operators extend when '=' follows."""
        tokens = FormulaLexer().lex(">= <= > == < !=")

        assert tokens == [
            FormulaToken(T.GREATER_EQUAL, ">=", 1, 1),
            FormulaToken(T.LESS_EQUAL, "<=", 1, 4),
            FormulaToken(T.GREATER, ">", 1, 7),
            FormulaToken(T.EQUAL_EQUAL, "==", 1, 9),
            FormulaToken(T.LESS, "<", 1, 12),
            FormulaToken(T.BANG_EQUAL, "!=", 1, 14),
            FormulaToken(T.EOF, "", 1, 16),
        ]

    def test_operators_without_spaces(self, helpers):
        """Test that operators split correctly when written together."""
        assert helpers.token_types("1>=2") == [T.NUMBER, T.GREATER_EQUAL, T.NUMBER, T.EOF]
        assert helpers.token_types("a<-b") == [T.IDENTIFIER, T.LESS, T.MINUS, T.IDENTIFIER, T.EOF]
        assert helpers.token_types("x==-1") == [T.IDENTIFIER, T.EQUAL_EQUAL, T.MINUS, T.NUMBER, T.EOF]

    def test_empty_input_is_just_eof(self):
        """Test that empty input still produces the sentinel."""
        assert FormulaLexer().lex("") == [FormulaToken(T.EOF, "", 1, 1)]

    def test_whitespace_only_input(self):
        """Test that whitespace produces no tokens but moves the position."""
        assert FormulaLexer().lex("  \t") == [FormulaToken(T.EOF, "", 1, 4)]


class TestLexerNumbers:
    """Test the number literal sub-grammar."""

    @pytest.mark.parametrize("expression", [
        "0",
        "42",
        "007",
        "3.14",
        "10.0",
        "2e5",
        "2E5",
        "2e+5",
        "2e-5",
        "1.5e10",
        "1.5E-3",
    ])
    def test_complete_number_literals(self, expression):
        """Test that whole literals become one token with their text verbatim."""
        tokens = tokenize(expression)
        assert tokens[0] == FormulaToken(T.NUMBER, expression, 1, 1)
        assert tokens[1].type == T.EOF

    @pytest.mark.parametrize("expression,expected", [
        # Exponent marker without digits is left behind as an identifier
        ("2e", [(T.NUMBER, "2"), (T.IDENTIFIER, "e")]),
        ("2ex", [(T.NUMBER, "2"), (T.IDENTIFIER, "ex")]),
        ("2e+", [(T.NUMBER, "2"), (T.IDENTIFIER, "e"), (T.PLUS, "+")]),
        ("2e-x", [(T.NUMBER, "2"), (T.IDENTIFIER, "e"), (T.MINUS, "-"), (T.IDENTIFIER, "x")]),
        ("3E+a", [(T.NUMBER, "3"), (T.IDENTIFIER, "E"), (T.PLUS, "+"), (T.IDENTIFIER, "a")]),
        # Digits then letters
        ("12abc", [(T.NUMBER, "12"), (T.IDENTIFIER, "abc")]),
        ("1.5e3e", [(T.NUMBER, "1.5e3"), (T.IDENTIFIER, "e")]),
        # Only one fraction is consumed
        ("1.2.3", None),
    ])
    def test_partial_number_literals(self, expression, expected):
        """Test that markers without the digits they need are not consumed."""
        if expected is None:
            with pytest.raises(FormulaUnknownCharacterError):
                tokenize(expression)

            return

        tokens = tokenize(expression)
        assert [(t.type, t.value) for t in tokens[:-1]] == expected

    def test_trailing_dot_is_not_part_of_number(self):
        """Test that '1.' stops before the dot, which is then not a valid token."""
        with pytest.raises(FormulaUnknownCharacterError) as exc_info:
            tokenize("1.")

        assert exc_info.value.character == '.'
        assert exc_info.value.line == 1
        assert exc_info.value.column == 2

    def test_leading_dot_is_not_a_number(self):
        """Test that a number must start with a digit."""
        with pytest.raises(FormulaUnknownCharacterError) as exc_info:
            tokenize(".5")

        assert exc_info.value.column == 1

    def test_unicode_digits_are_not_numbers(self):
        """Test that only ASCII digits start numbers."""
        with pytest.raises(FormulaUnknownCharacterError):
            tokenize("١٢")


class TestLexerWords:
    """Test identifiers and keywords."""

    def test_keywords(self, helpers):
        """Test that the keyword table is applied."""
        assert helpers.token_types("and or not true false") == [T.AND, T.OR, T.NOT, T.TRUE, T.FALSE, T.EOF]

    def test_keywords_are_case_sensitive(self, helpers):
        """Test that only lower case keywords are recognised."""
        assert helpers.token_types("True AND Not") == [T.IDENTIFIER, T.IDENTIFIER, T.IDENTIFIER, T.EOF]

    def test_words_containing_keywords_are_identifiers(self):
        """Test that a keyword prefix does not split an identifier."""
        tokens = tokenize("andy notes truest or2")
        assert [(t.type, t.value) for t in tokens[:-1]] == [
            (T.IDENTIFIER, "andy"),
            (T.IDENTIFIER, "notes"),
            (T.IDENTIFIER, "truest"),
            (T.IDENTIFIER, "or2"),
        ]

    def test_identifier_with_digits(self):
        """Test that digits may follow the first letter."""
        assert tokenize("abc123")[0] == FormulaToken(T.IDENTIFIER, "abc123", 1, 1)

    def test_underscore_is_not_an_identifier_character(self):
        """Test that identifiers are letters and digits only."""
        with pytest.raises(FormulaUnknownCharacterError) as exc_info:
            tokenize("a_b")

        assert exc_info.value.character == '_'
        assert exc_info.value.column == 2

    def test_non_ascii_letter_is_unknown(self):
        """Test that identifiers are ASCII only."""
        with pytest.raises(FormulaUnknownCharacterError) as exc_info:
            tokenize("café")

        assert exc_info.value.character == 'é'
        assert exc_info.value.column == 4


class TestLexerStrings:
    """Test string literals."""

    def test_string_keeps_quotes(self):
        """Test that the token text includes both quotes."""
        assert tokenize('"hello world"')[0] == FormulaToken(T.STRING, '"hello world"', 1, 1)

    def test_empty_string(self):
        """Test the shortest possible string."""
        assert tokenize('""')[0] == FormulaToken(T.STRING, '""', 1, 1)

    def test_string_with_unicode(self):
        """Test that any character may appear inside a string."""
        tokens = tokenize('"⚪ ⏳ Waiting..." == x')
        assert tokens[0] == FormulaToken(T.STRING, '"⚪ ⏳ Waiting..."', 1, 1)
        assert tokens[1] == FormulaToken(T.EQUAL_EQUAL, "==", 1, 18)

    def test_string_with_operators_inside(self):
        """Test that operator characters inside strings are not tokens."""
        tokens = tokenize('"a = b & c"')
        assert len(tokens) == 2
        assert tokens[0].value == '"a = b & c"'

    def test_backslash_is_not_an_escape(self):
        """Test that strings end at the next quote with no escape processing."""
        tokens = tokenize('"a\\" b')
        assert tokens[0] == FormulaToken(T.STRING, '"a\\"', 1, 1)
        assert tokens[1] == FormulaToken(T.IDENTIFIER, "b", 1, 6)

    def test_column_after_string(self):
        """Test that the column moves past the whole literal."""
        tokens = tokenize('"ab" x')
        assert tokens[1] == FormulaToken(T.IDENTIFIER, "x", 1, 6)

    def test_unterminated_string_is_an_error(self):
        """Test that a missing closing quote is reported, not a crash."""
        with pytest.raises(FormulaUnterminatedStringError, match="Unterminated string literal") as exc_info:
            tokenize('"abc')

        assert exc_info.value.line == 1
        assert exc_info.value.column == 1

    def test_unterminated_string_reports_opening_quote(self):
        """Test that the error points at where the string started."""
        with pytest.raises(FormulaUnterminatedStringError) as exc_info:
            tokenize('x +\n  "abc')

        assert exc_info.value.line == 2
        assert exc_info.value.column == 3

    def test_unterminated_string_is_a_lex_error(self):
        """Test the error hierarchy."""
        with pytest.raises(FormulaLexError):
            tokenize('"')


class TestLexerPositions:
    """Test line and column tracking."""

    def test_newline_moves_to_next_line(self):
        """Test that a newline resets the column to 1."""
        tokens = tokenize("1\n+ 2")
        assert tokens == [
            FormulaToken(T.NUMBER, "1", 1, 1),
            FormulaToken(T.PLUS, "+", 2, 1),
            FormulaToken(T.NUMBER, "2", 2, 3),
            FormulaToken(T.EOF, "", 2, 4),
        ]

    def test_blank_lines(self):
        """Test that every newline counts."""
        tokens = tokenize("\n\n x")
        assert tokens[0] == FormulaToken(T.IDENTIFIER, "x", 3, 2)

    def test_tab_and_carriage_return_are_one_column(self):
        """Test that other whitespace advances one column each."""
        tokens = tokenize("\t\r x")
        assert tokens[0] == FormulaToken(T.IDENTIFIER, "x", 1, 4)

    def test_multi_character_tokens_advance_by_length(self):
        """Test that the column moves by the lexeme length."""
        tokens = tokenize("prop(12.5)")
        assert [(t.value, t.column) for t in tokens] == [
            ("prop", 1), ("(", 5), ("12.5", 6), (")", 10), ("", 11)
        ]

    def test_newline_inside_string_does_not_count(self):
        """Test that newlines inside a literal are part of it and keep the line number."""
        tokens = tokenize('"a\nb" x')
        assert tokens[0] == FormulaToken(T.STRING, '"a\nb"', 1, 1)
        assert tokens[1] == FormulaToken(T.IDENTIFIER, "x", 1, 7)


class TestLexerErrors:
    """Test unknown characters."""

    @pytest.mark.parametrize("expression,character,column", [
        ("1 = 2", "=", 3),
        ("!x", "!", 1),
        ("@foo", "@", 1),
        ("a & b", "&", 3),
        ("[1]", "[", 1),
        ("'text'", "'", 1),
        ("1 ; 2", ";", 3),
    ])
    def test_unknown_character(self, expression, character, column):
        """Test that invalid characters raise with their position."""
        with pytest.raises(FormulaUnknownCharacterError) as exc_info:
            tokenize(expression)

        assert exc_info.value.character == character
        assert exc_info.value.line == 1
        assert exc_info.value.column == column

    def test_single_equals_suggests_double_equals(self):
        """Test that the error message helps with a common mistake."""
        with pytest.raises(FormulaUnknownCharacterError, match="Use '==' to test for equality"):
            tokenize("a = 1")

    def test_control_character(self):
        """Test that control characters get their own message."""
        with pytest.raises(FormulaUnknownCharacterError, match="Invalid control character"):
            tokenize("1 +\x00 2")

    def test_error_reports_line(self):
        """Test that errors on later lines have the right line."""
        with pytest.raises(FormulaUnknownCharacterError) as exc_info:
            tokenize("1 +\n2 +\n  $")

        assert exc_info.value.line == 3
        assert exc_info.value.column == 3


class TestLexerReconstruction:
    """Test that tokens account for every non-whitespace character."""

    @pytest.mark.parametrize("expression", [
        "1 + 2 * 3",
        'prop("State") == "done" ? "yes" : "no"',
        "not (a >= 2.5e-3) or b != c",
        "-x ^ 2 % 7 / y",
        "f(a,\n  b,\n  c)",
    ])
    def test_lexemes_reconstruct_input(self, expression):
        """Test that joining the lexemes gives back the input without whitespace."""
        tokens = tokenize(expression)
        assert tokens[-1].type == T.EOF
        assert "".join(token.value for token in tokens) == "".join(expression.split())
