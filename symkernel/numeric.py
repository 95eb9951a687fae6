# Integer helpers for exact rational arithmetic
#
# Everything here works on Python ints only. Fractions are built on top of
# these in fraction.py; there is deliberately no floating-point path.

from __future__  import annotations

import math
import re

from typing            import Literal
from typing_extensions import TypeAlias, TypeGuard

from symkernel.exceptions import InvalidOperand


#
# Types
#

RootName: TypeAlias = Literal['sqrt', 'cbrt']

ROOT_ORDERS: dict[str, int] = {'sqrt': 2, 'cbrt': 3}

def is_integer(x) -> TypeGuard[int]:
    "Is x a genuine integer? Booleans are excluded."
    return isinstance(x, int) and not isinstance(x, bool)


#
# Divisibility
#

def gcd(a: int, b: int) -> int:
    "Greatest common divisor, always non-negative; gcd(0, 0) is 0."
    return math.gcd(a, b)

def lcm(a: int, b: int) -> int:
    "Least common multiple of two non-zero integers, always positive."
    return abs(a * b) // math.gcd(a, b)


#
# Integer Roots
#

def integer_root(n: int, order: int) -> int | None:
    """Returns the exact integer k-th root of n, or None if n is not a perfect k-th power.

    Odd roots of negative integers are negative; even roots of negative
    integers do not exist and give None.

    """
    if order < 1:
        raise InvalidOperand(f'Root order must be a positive integer, got {order}.')
    if n < 0:
        if order % 2 == 0:
            return None
        root = integer_root(-n, order)
        return None if root is None else -root
    if n == 0:
        return 0
    if order == 2:
        r = math.isqrt(n)
        return r if r * r == n else None

    # Newton iteration on integers, starting from above the root
    x = 1 << ((n.bit_length() + order - 1) // order)
    while True:
        y = ((order - 1) * x + n // x ** (order - 1)) // order
        if y >= x:
            break
        x = y
    return x if x ** order == n else None

def root_order(root: str) -> int:
    try:
        return ROOT_ORDERS[root]
    except KeyError:
        raise InvalidOperand(f'Unknown root "{root}", expected one of {", ".join(ROOT_ORDERS)}.')


#
# Numeric Literals
#

integer_re = r'[0-9]+'
numeric_re = rf'(-?)({integer_re})(?:\.({integer_re}))?'

def rational_parts_from_str(s: str) -> tuple[int, int]:
    """Converts an integer or decimal literal into an exact (numerator, denominator) pair.

    Accepts the literals the lexer produces, `int` or `int.int`, with an
    optional leading minus sign. The pair is not reduced: '2.50' gives (250, 100).

    """
    m = re.fullmatch(numeric_re, s.strip())
    if not m:
        raise InvalidOperand(f'Could not parse string as an exact numeric literal: "{s}"')

    sign, whole, decimals = m.groups('')
    denominator = 10 ** len(decimals)
    return (int(sign + whole + decimals), denominator)
