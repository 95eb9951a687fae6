from __future__ import annotations

from parsy     import (
    Parser,
    ParseError,
    Result,
)
from collections.abc   import Iterable
from functools         import wraps


#
# Helpers
#

def join_nl(terms: Iterable[str], *, sep: str = ", ", last_sep=', or ', prefixes=['', '', '']) -> str:
    terms = sorted(terms)
    count = len(terms)
    if count == 0:
        joined = 'something else'
    elif count == 1:
        joined = prefixes[0] + terms[0]
    elif count == 2:
        joined = prefixes[1] + f'{terms[0]} or {terms[1]}'
    else:
        joined = prefixes[2] + sep.join(terms[0:-1]) + last_sep + terms[-1]
    return joined


def join_expecteds(expecteds: frozenset[str]):
    return join_nl(list(expecteds), prefixes=['', 'either ', 'one of '])


#
# Labelled failures
#

def with_label(description: str, p: Parser) -> Parser:
    """Replaces a parser's failure expectations with a single description.

    The failure is reported at the position where the parser started, so
    a labelled token names what was expected there rather than the
    pattern details of its parts.

    """
    def p_with_label(stream, index) -> Result:
        result = p(stream, index)
        if result.status:
            return result
        return Result.failure(index, description)
    return Parser(p_with_label)

# Fixes bug #77 in parsy Parser.desc()
def generate(fn) -> Parser:
    "Creates a parser from a generator function, aggregating the failures of each step."
    @Parser
    @wraps(fn)
    def generated(stream, index):
        iterator = fn()

        result = None
        value = None
        try:
            while True:
                next_parser = iterator.send(value)
                result = next_parser(stream, index).aggregate(result)
                if not result.status:
                    return result
                value = result.value
                index = result.index
        except StopIteration as stop:
            return Result.success(index, stop.value).aggregate(result)

    return generated


#
# Handling Parsy ParseError
#

def parse_error_message(e: ParseError) -> str:
    """Formats a parse failure on one line, with a `*` marking the failing character.

    Positions are 0-based offsets into the stream. A failure at the end of
    the stream points just past the last character.

    """
    start_context = max(e.index - 5, 0)
    end_context = min(e.index + 6, len(e.stream))
    joined = join_expecteds(e.expected)
    cont = '...' if e.index > 8 else ''

    parsed = cont + e.stream[start_context:e.index]
    error = e.stream[e.index] if e.index < len(e.stream) else ''
    rest = e.stream[(e.index + 1):end_context]
    where = f'position {e.index}' if error else f'the end of input (position {e.index})'

    return f'Expected {joined} at {where}: "{parsed}*{error}{rest}"'
