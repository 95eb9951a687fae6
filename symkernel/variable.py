from __future__ import annotations

from symkernel.exceptions import InvalidOperand
from symkernel.numeric    import is_integer
from symkernel.output     import tex_symbol


class Variable:
    """A symbolic atom: a named symbol raised to an integer degree.

    Degree 0 is the identity factor and negative degrees are inverse powers.
    Two variables are the same atom when their symbols agree; they are equal
    only when their degrees agree as well. Variables carry no arithmetic of
    their own; combining them is the job of Term.

    """
    def __init__(self, symbol: str, degree: int = 1) -> None:
        if not isinstance(symbol, str) or not symbol:
            raise InvalidOperand(f'A variable symbol must be a non-empty string, got {symbol!r}.')
        if not is_integer(degree):
            raise InvalidOperand(f'The degree of variable {symbol} must be an integer, got {degree!r}.')
        self.symbol = symbol
        self.degree = degree

    def copy(self) -> Variable:
        return Variable(self.symbol, self.degree)

    def same_atom(self, other: Variable) -> bool:
        return self.symbol == other.symbol

    @property
    def key(self) -> tuple[str, int]:
        return (self.symbol, self.degree)

    def to_string(self) -> str:
        if self.degree == 0:
            return ''
        if self.degree == 1:
            return self.symbol
        return f'{self.symbol}^{self.degree}'

    def to_tex(self) -> str:
        symbol = tex_symbol(self.symbol)
        if self.degree == 0:
            return ''
        if self.degree == 1:
            return symbol
        return f'{symbol}^{{{self.degree}}}'

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f'Variable({self.symbol!r}, {self.degree})'

    def __eq__(self, other) -> bool:
        if isinstance(other, Variable):
            return self.key == other.key
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.key)
