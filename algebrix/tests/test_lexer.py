"""Tests for tokens and the lexer."""

from decimal import Decimal

import pytest

from algebrix import LexError, Lexer, Operator, Token, TokenKind, tokenize


class TestOperatorInfo:
    """Tests for static operator metadata."""

    def test_precedence(self):
        assert Operator.POW.info().precedence > Operator.MULTIPLY.info().precedence
        assert Operator.MULTIPLY.info().precedence == Operator.DIVIDE.info().precedence
        assert Operator.DIVIDE.info().precedence > Operator.ADD.info().precedence
        assert Operator.ADD.info().precedence == Operator.SUBTRACT.info().precedence

    def test_orderless(self):
        """Only Add and Multiply are orderless."""
        assert Operator.ADD.orderless
        assert Operator.MULTIPLY.orderless
        assert not Operator.SUBTRACT.orderless
        assert not Operator.DIVIDE.orderless
        assert not Operator.POW.orderless

    def test_arity(self):
        for op in (Operator.ADD, Operator.SUBTRACT, Operator.MULTIPLY,
                   Operator.DIVIDE, Operator.POW, Operator.ROOT):
            assert op.info().arity == 2

    def test_parentheses_have_no_metadata(self):
        with pytest.raises(ValueError):
            Operator.LPAREN.info()

    def test_from_char(self):
        assert Operator.from_char("^") is Operator.POW
        assert Operator.from_char("(") is Operator.LPAREN
        assert Operator.from_char("%") is None


class TestToken:
    """Tests for Token values."""

    def test_constants_compare_numerically(self):
        assert Token.constant("2") == Token.constant("2.0")
        assert hash(Token.constant("2")) == hash(Token.constant("2.0"))

    def test_kinds_differ(self):
        assert Token.constant(1) != Token.variable("x")
        assert Token.variable("x") != Token.operator(Operator.ADD)

    def test_immutable(self):
        token = Token.variable("x")
        with pytest.raises(AttributeError):
            token.value = "y"

    def test_str(self):
        assert str(Token.constant("2.50")) == "2.5"
        assert str(Token.variable("abc")) == "abc"
        assert str(Token.operator(Operator.MULTIPLY)) == "*"


class TestTokenize:
    """Tests for tokenize."""

    def test_expression(self):
        tokens = tokenize("2 * (x + 1)")
        assert [str(t) for t in tokens] == ["2", "*", "(", "x", "+", "1", ")"]
        assert [t.kind for t in tokens] == [
            TokenKind.CONSTANT, TokenKind.OPERATOR, TokenKind.OPERATOR,
            TokenKind.VARIABLE, TokenKind.OPERATOR, TokenKind.CONSTANT,
            TokenKind.OPERATOR,
        ]

    def test_decimal_constant(self):
        (token,) = tokenize("3.25")
        assert token.value == Decimal("3.25")

    def test_leading_point(self):
        (token,) = tokenize(".5")
        assert token.value == Decimal("0.5")

    def test_identifiers(self):
        """A letter followed by letters or digits is one variable."""
        tokens = tokenize("x1+abc")
        assert [t.value for t in tokens if t.is_variable] == ["x1", "abc"]

    def test_digit_then_letter(self):
        """Digits stop at a letter: 2x is a constant then a variable."""
        tokens = tokenize("2x")
        assert tokens == [Token.constant(2), Token.variable("x")]

    def test_variable_names_are_interned(self):
        first, _, second = tokenize("value + value")
        assert first.value is second.value

    def test_whitespace_ignored(self):
        assert tokenize(" \t x \n") == [Token.variable("x")]

    def test_empty(self):
        assert tokenize("") == []

    def test_unrecognized_character(self):
        with pytest.raises(LexError) as info:
            tokenize("2 $ 3")
        assert info.value.char == "$"
        assert info.value.position == 2

    def test_non_ascii_digits_rejected(self):
        """Superscripts and other Unicode digits are not number characters."""
        with pytest.raises(LexError) as info:
            tokenize("²")
        assert info.value.position == 0
        with pytest.raises(LexError) as info:
            tokenize("x²")
        assert info.value.char == "²"
        assert info.value.position == 1

    def test_lex_error_is_value_error(self):
        with pytest.raises(ValueError):
            tokenize("x = 1")


class TestLexer:
    """Tests for the Lexer wrapper."""

    def test_iterates_tokens(self):
        lexer = Lexer("2 * x")
        assert len(lexer) == 3
        assert list(lexer) == lexer.tokens
