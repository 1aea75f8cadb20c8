"""
Lexer: source text to a sequence of Tokens.

    tokenize("2 * (x + 1)")
    -> [2, *, (, x, +, 1, )]

Digit runs (with at most one decimal point) become constants, a letter
followed by letters or digits becomes a variable, and each operator
character becomes an operator token. Whitespace is discarded.
"""

from typing import Iterator, List

from .errors import LexError
from .tokens import Operator, Token

DIGITS = "0123456789"


def _scan(text: str) -> Iterator[Token]:
    i = 0
    n = len(text)
    while i < n:
        c = text[i]

        if c.isspace():
            i += 1
            continue

        if c in DIGITS or (c == '.' and i + 1 < n and text[i + 1] in DIGITS):
            start = i
            seen_point = False
            while i < n and (text[i] in DIGITS or (text[i] == '.' and not seen_point)):
                if text[i] == '.':
                    seen_point = True
                i += 1
            yield Token.constant(text[start:i])
            continue

        if c.isalpha():
            start = i
            while i < n and (text[i].isalpha() or text[i] in DIGITS):
                i += 1
            yield Token.variable(text[start:i])
            continue

        op = Operator.from_char(c)
        if op is None:
            raise LexError(c, i)
        yield Token.operator(op)
        i += 1


def tokenize(text: str) -> List[Token]:
    """
    Convert source text into tokens.

    Raises:
        LexError: if a character is not whitespace, digit, letter or operator
    """
    return list(_scan(text))


class Lexer:
    """
    Token sequence for one source string.

    Examples:
        Lexer("2 * x").tokens
        # => [Token.constant(2), Token.operator(MULTIPLY), Token.variable('x')]
    """

    __slots__ = ('text', 'tokens')

    def __init__(self, text: str):
        self.text = text
        self.tokens: List[Token] = tokenize(text)

    def __iter__(self):
        return iter(self.tokens)

    def __len__(self) -> int:
        return len(self.tokens)

    def __repr__(self) -> str:
        return f"Lexer({self.text!r}, {len(self.tokens)} tokens)"
