# Tokenizer for algebraic input
#
# A Lexer holds one input string and a cursor into it. Each call to token()
# skips blanks and recognizes exactly one operator, parenthesis, identifier,
# or number, returning it with its offset in the input. Token recognition
# uses parsy combinators run at the cursor; the cursor itself is private,
# mutable state, so a Lexer must not be shared between threads.

from __future__ import annotations

import logging

from collections.abc   import Generator
from dataclasses       import dataclass
from enum              import Enum, auto

from parsy import (
    ParseError,
    char_from,
    regex,
    string,
)

from symkernel.exceptions             import InvalidOperand, LexError
from symkernel.parsing.parsy_adjust   import generate, parse_error_message, with_label

log = logging.getLogger(__name__)


#
# Tokens
#

class TokenType(Enum):
    OPERATOR = auto()
    PAREN = auto()
    NUMBER = auto()
    IDENTIFIER = auto()

@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    position: int

    def __str__(self) -> str:
        return f'{self.type.name} {self.value!r} @{self.position}'

OPERATORS = {
    '+': 'PLUS',
    '-': 'MINUS',
    '*': 'MULTIPLY',
    '/': 'DIVIDE',
    '^': 'POWER',
    '=': 'EQUALS',
}

PARENS = {
    '(': 'L_PAREN',
    ')': 'R_PAREN',
}


#
# Basic Combinators
#

blanks = regex(r'[ \t\r\n]*')
digits = regex(r'[0-9]+')

operator_p = with_label('an operator',
                        char_from(''.join(OPERATORS)).map(lambda c: (TokenType.OPERATOR, OPERATORS[c])))
paren_p = with_label('a parenthesis',
                     char_from(''.join(PARENS)).map(lambda c: (TokenType.PAREN, PARENS[c])))
identifier_p = with_label('an identifier',
                          regex(r'[A-Za-z][A-Za-z0-9]*').map(lambda s: (TokenType.IDENTIFIER, s)))

@generate
def number_p():
    whole = yield with_label('a number', digits)
    point = yield string('.').optional()
    if point is None:
        return (TokenType.NUMBER, whole)
    decimals = yield with_label('a digit after the decimal point', digits)
    return (TokenType.NUMBER, f'{whole}.{decimals}')

token_p = operator_p | paren_p | identifier_p | number_p


#
# Lexer
#

class Lexer:
    """A single-pass tokenizer over one input string at a time.

    Load text with `input`, then call `token` repeatedly; it raises
    LexError once the input is exhausted. Iterating over a lexer yields
    the remaining tokens.

    """
    def __init__(self, text: str | None = None) -> None:
        self.position = 0
        self.content = ''
        self.content_length = 0
        if text is not None:
            self.input(text)

    def input(self, text: str) -> None:
        "Loads new text and resets the cursor; progress on earlier text is discarded."
        if not isinstance(text, str):
            raise InvalidOperand(f'Lexer input must be a string, got {type(text).__name__}.')
        self.position = 0
        self.content = text
        self.content_length = len(text)

    def _skip_blanks(self) -> int:
        return blanks(self.content, self.position).index

    def at_end(self) -> bool:
        if not self.content:
            return True
        return self._skip_blanks() >= self.content_length

    def token(self) -> Token:
        if not self.content:
            raise LexError('Content input is empty.', self.position)

        self.position = self._skip_blanks()
        if self.position >= self.content_length:
            raise LexError('No more tokens.', self.position)

        start = self.position
        result = token_p(self.content, start)
        if not result.status:
            error = ParseError(result.expected, self.content, result.furthest)
            message = parse_error_message(error)
            log.debug('token error in %r: %s', self.content, message)
            raise LexError(message, result.furthest)

        kind, value = result.value
        self.position = result.index
        return Token(kind, value, start)

    def __iter__(self) -> Generator[Token, None, None]:
        while not self.at_end():
            yield self.token()


def tokenize(text: str) -> list[Token]:
    "Returns all tokens of the text, raising LexError at the first malformed one."
    return list(Lexer(text))
