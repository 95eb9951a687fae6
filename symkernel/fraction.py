# Exact rational numbers
#
# Fractions are values: every operation returns a new Fraction and leaves
# its receiver untouched. Results are reduced to lowest terms unless the
# caller passes simplify=False, which lets Term and Expression batch several
# products before a single final reduction.

from __future__ import annotations

import fractions

from typing            import Union
from typing_extensions import TypeAlias, TypeGuard

from symkernel.exceptions import DivideByZero, InvalidOperand
from symkernel.numeric    import (RootName, gcd, integer_root, is_integer, lcm,
                                  rational_parts_from_str, root_order)
from symkernel.output     import in_panel


#
# Helpers
#

FractionLike: TypeAlias = Union['Fraction', int]

def is_fraction_like(x) -> TypeGuard[FractionLike]:
    return isinstance(x, (Fraction, fractions.Fraction)) or is_integer(x)

def as_fraction(x, role: str = 'Operand') -> Fraction:
    """Converts an integer or fraction into a Fraction, raising InvalidOperand otherwise.

    Standard library fractions are accepted too and converted exactly.
    The `role` names the operand in error messages, e.g., 'Summand' or 'Divisor'.

    """
    if isinstance(x, Fraction):
        return x
    if is_integer(x):
        return Fraction(x, 1)
    if isinstance(x, fractions.Fraction):
        return Fraction(x.numerator, x.denominator)
    raise InvalidOperand(f'{role} must be of type Fraction or Integer, got {type(x).__name__}: {x!r}.')


#
# Fractions
#

class Fraction:
    "An exact rational number numerator/denominator with integer parts."
    def __init__(self, numerator: int, denominator: int = 1) -> None:
        if not is_integer(numerator) or not is_integer(denominator):
            raise InvalidOperand(f'Fraction must be created with integers, got {numerator!r} and {denominator!r}.')
        if denominator == 0:
            raise DivideByZero(f'Fraction {numerator}/0 has a zero denominator.')
        self.numerator = numerator
        self.denominator = denominator

    @classmethod
    def from_string(cls, literal: str) -> Fraction:
        "Converts an integer or decimal literal, such as a lexer NUMBER token, to a reduced Fraction."
        numerator, denominator = rational_parts_from_str(literal)
        return cls(numerator, denominator).reduce()

    def copy(self) -> Fraction:
        return Fraction(self.numerator, self.denominator)

    def reduce(self) -> Fraction:
        """Returns this fraction in lowest terms with a positive denominator.

        The sign of the value always lives on the numerator of the result.

        """
        g = gcd(self.numerator, self.denominator)
        numerator = self.numerator // g
        denominator = self.denominator // g
        if denominator < 0:
            numerator, denominator = -numerator, -denominator
        return Fraction(numerator, denominator)

    @property
    def sign(self) -> int:
        "Returns -1, 0, or 1 according to the sign of the value."
        if self.numerator == 0:
            return 0
        return 1 if (self.numerator > 0) == (self.denominator > 0) else -1

    def is_zero(self) -> bool:
        return self.numerator == 0

    def equal_to(self, other) -> bool:
        "Do the two values agree once both are reduced? Non-rational values are never equal."
        if not is_fraction_like(other):
            return False
        this = self.reduce()
        that = as_fraction(other).reduce()
        return this.numerator == that.numerator and this.denominator == that.denominator

    #
    # Arithmetic
    #

    def add(self, other: FractionLike, simplify=True) -> Fraction:
        that = as_fraction(other, 'Summand')

        if self.denominator == that.denominator:
            result = Fraction(self.numerator + that.numerator, self.denominator)
        else:
            m = lcm(self.denominator, that.denominator)
            result = Fraction(self.numerator * (m // self.denominator) +
                              that.numerator * (m // that.denominator), m)

        return result.reduce() if simplify else result

    def subtract(self, other: FractionLike, simplify=True) -> Fraction:
        that = as_fraction(other, 'Subtrahend')
        return self.add(Fraction(-that.numerator, that.denominator), simplify)

    def multiply(self, other: FractionLike, simplify=True) -> Fraction:
        that = as_fraction(other, 'Multiplier')
        result = Fraction(self.numerator * that.numerator, self.denominator * that.denominator)
        return result.reduce() if simplify else result

    def divide(self, other: FractionLike, simplify=True) -> Fraction:
        that = as_fraction(other, 'Divisor')
        if that.is_zero():
            raise DivideByZero(f'Cannot divide {self.to_string()} by zero.')
        return self.multiply(Fraction(that.denominator, that.numerator), simplify)

    def pow(self, n: int, simplify=True) -> Fraction:
        "Raises to an integer power; negative powers invert."
        if not is_integer(n):
            raise InvalidOperand(f'Exponent of a fraction must be an integer, got {n!r}.')

        if n >= 0:
            result = Fraction(self.numerator ** n, self.denominator ** n)
        else:
            positive = self.pow(-n, simplify=False)
            if positive.is_zero():
                raise DivideByZero(f'Cannot raise zero to the negative power {n}.')
            result = Fraction(positive.denominator, positive.numerator)

        return result.reduce() if simplify else result

    def abs(self) -> Fraction:
        return Fraction(abs(self.numerator), abs(self.denominator))

    def is_rational(self, root: RootName) -> bool:
        """Is the given root ('sqrt' or 'cbrt') of this value itself rational?

        True when the root of both the reduced numerator and the reduced
        denominator are integers. Zero is always rational.

        """
        order = root_order(root)
        if self.is_zero():
            return True
        reduced = self.reduce()
        return (integer_root(reduced.numerator, order) is not None and
                integer_root(reduced.denominator, order) is not None)

    #
    # Rendering
    #

    def _normalized_parts(self) -> tuple[int, int]:
        if self.denominator < 0:
            return (-self.numerator, -self.denominator)
        return (self.numerator, self.denominator)

    def to_string(self) -> str:
        numerator, denominator = self._normalized_parts()
        if numerator == 0:
            return '0'
        if denominator == 1:
            return str(numerator)
        return f'{numerator}/{denominator}'

    def to_tex(self) -> str:
        numerator, denominator = self._normalized_parts()
        if numerator == 0:
            return '0'
        if denominator == 1:
            return str(numerator)
        sign = '-' if numerator < 0 else ''
        return f'{sign}\\frac{{{abs(numerator)}}}{{{denominator}}}'

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f'Fraction({self.numerator}, {self.denominator})'

    def __symkernel_repr__(self):
        return in_panel(self.to_string())

    #
    # Operator Protocol
    #

    def __add__(self, other):
        if is_fraction_like(other):
            return self.add(other)
        return NotImplemented

    def __radd__(self, other):
        if is_fraction_like(other):
            return as_fraction(other).add(self)
        return NotImplemented

    def __sub__(self, other):
        if is_fraction_like(other):
            return self.subtract(other)
        return NotImplemented

    def __rsub__(self, other):
        if is_fraction_like(other):
            return as_fraction(other).subtract(self)
        return NotImplemented

    def __mul__(self, other):
        if is_fraction_like(other):
            return self.multiply(other)
        return NotImplemented

    def __rmul__(self, other):
        if is_fraction_like(other):
            return as_fraction(other).multiply(self)
        return NotImplemented

    def __truediv__(self, other):
        if is_fraction_like(other):
            return self.divide(other)
        return NotImplemented

    def __rtruediv__(self, other):
        if is_fraction_like(other):
            return as_fraction(other).divide(self)
        return NotImplemented

    def __pow__(self, n):
        if is_integer(n):
            return self.pow(n)
        return NotImplemented

    def __neg__(self) -> Fraction:
        return Fraction(-self.numerator, self.denominator)

    def __abs__(self) -> Fraction:
        return self.abs()

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __eq__(self, other) -> bool:
        if is_fraction_like(other):
            return self.equal_to(other)
        return NotImplemented

    def __hash__(self) -> int:
        "Agrees with the hash of equal ints and standard library fractions."
        reduced = self.reduce()
        return hash(fractions.Fraction(reduced.numerator, reduced.denominator))

    def _cross(self, other) -> tuple[int, int]:
        this = self.reduce()
        that = as_fraction(other).reduce()
        return (this.numerator * that.denominator, that.numerator * this.denominator)

    def __lt__(self, other):
        if is_fraction_like(other):
            a, b = self._cross(other)
            return a < b
        return NotImplemented

    def __le__(self, other):
        if is_fraction_like(other):
            a, b = self._cross(other)
            return a <= b
        return NotImplemented

    def __gt__(self, other):
        if is_fraction_like(other):
            a, b = self._cross(other)
            return a > b
        return NotImplemented

    def __ge__(self, other):
        if is_fraction_like(other):
            a, b = self._cross(other)
            return a >= b
        return NotImplemented
