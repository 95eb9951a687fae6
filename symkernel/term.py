from __future__ import annotations

from collections       import defaultdict
from collections.abc   import Iterable, Mapping
from functools         import reduce
from typing            import TYPE_CHECKING, Union
from typing_extensions import TypeAlias

from symkernel.env        import environment
from symkernel.exceptions import IncompatibleTerms, InvalidOperand
from symkernel.fraction   import Fraction, FractionLike, as_fraction, is_fraction_like
from symkernel.numeric    import is_integer
from symkernel.output     import in_panel, tex_join
from symkernel.utils      import every, frequencies, some
from symkernel.variable   import Variable

if TYPE_CHECKING:
    from symkernel.expression import Expression

Substitution: TypeAlias = Union[Fraction, 'Expression', int]


#
# Multinomial Terms
#

class Term:
    """A symbolic term c_1 c_2 ... c_m a_1^k_1 a_2^k_2 ... a_n^k_n.

    The effective coefficient is the product of the coefficient list, and
    the effective monomial merges repeated symbols by summing their degrees.
    Products accumulate uncollapsed factors; `simplify` reduces a term to a
    single coefficient and one variable per symbol, sorted by descending
    degree and then by symbol.

    A Term is a value: operations return new terms and never change their
    receiver.

    """
    def __init__(self, variable: Variable | str | None = None, coefficient: FractionLike = 1) -> None:
        if isinstance(variable, str):
            variable = Variable(variable)
        if variable is not None and not isinstance(variable, Variable):
            raise InvalidOperand(f'Term must be initialized with a Variable or symbol, got {variable!r}.')

        self.variables: list[Variable] = [variable.copy()] if variable is not None else []
        self.coefficients: list[Fraction] = [as_fraction(coefficient, 'Coefficient').copy()]

    @classmethod
    def from_parts(cls, variables: Iterable[Variable], coefficients: Iterable[FractionLike] = (1,)) -> Term:
        term = cls()
        term.variables = [var.copy() for var in variables]
        term.coefficients = [as_fraction(c, 'Coefficient').copy() for c in coefficients]
        return term

    def copy(self) -> Term:
        return Term.from_parts(self.variables, self.coefficients)

    def coefficient(self) -> Fraction:
        "Returns the product of all coefficient factors."
        return reduce(lambda p, c: p.multiply(c), self.coefficients, Fraction(1, 1))

    @property
    def signature(self) -> str:
        "A string key for the monomial, independent of the order of the variables."
        if not self.variables:
            return '1'
        return " ".join(f'{symbol}^{degree}' for symbol, degree in sorted(var.key for var in self.variables))

    #
    # Canonicalization
    #

    def combine_vars(self) -> Term:
        """Merges variables with the same symbol by summing their degrees.

        Symbols whose degrees cancel to 0 are dropped, as x^0 is the identity.

        """
        degrees: dict[str, int] = defaultdict(int)
        for var in self.variables:
            degrees[var.symbol] += var.degree

        copy = self.copy()
        copy.variables = [Variable(symbol, degree) for symbol, degree in degrees.items() if degree != 0]
        return copy

    def sort(self) -> Term:
        "Orders variables by descending degree, breaking ties by symbol."
        copy = self.copy()
        copy.variables.sort(key=lambda var: (-var.degree, var.symbol))
        return copy

    def simplify(self) -> Term:
        copy = self.copy()
        copy.coefficients = [self.coefficient()]
        return copy.combine_vars().sort()

    #
    # Queries
    #

    def has_variable(self, symbol: str) -> bool:
        return some(lambda var: var.symbol == symbol, self.variables)

    def only_has_variable(self, symbol: str) -> bool:
        return every(lambda var: var.symbol == symbol, self.variables)

    def max_degree(self) -> int:
        "Largest degree among the variables, but never less than 1 (an ordering convention)."
        return max([1, *(var.degree for var in self.variables)])

    def max_degree_of_variable(self, symbol: str) -> int:
        return max([1, *(var.degree for var in self.variables if var.symbol == symbol)])

    def can_be_combined_with(self, other: Term) -> bool:
        "Are these like terms, with the same (symbol, degree) pairs matched one to one?"
        if len(self.variables) != len(other.variables):
            return False
        return (frequencies(var.key for var in self.variables) ==
                frequencies(var.key for var in other.variables))

    #
    # Arithmetic
    #

    def _like_term(self, other, operation: str) -> Term:
        if not isinstance(other, Term):
            raise InvalidOperand(f'Term.{operation} must be called with a Term, got {other!r}.')
        if not self.can_be_combined_with(other):
            raise IncompatibleTerms(f'Cannot {operation} unlike terms {self} and {other}.')
        return other

    def add(self, other: Term) -> Term:
        that = self._like_term(other, 'add')
        copy = self.copy()
        copy.coefficients = [self.coefficient().add(that.coefficient())]
        return copy

    def subtract(self, other: Term) -> Term:
        that = self._like_term(other, 'subtract')
        copy = self.copy()
        copy.coefficients = [self.coefficient().subtract(that.coefficient())]
        return copy

    def multiply(self, value: Term | FractionLike, simplify=True) -> Term:
        """Multiplies by a term or scalar, deferring all collapsing to simplify.

        Terms concatenate their variables and coefficients; a scalar joins
        the coefficient list, at the front when the term has variables.

        """
        copy = self.copy()

        if isinstance(value, Term):
            copy.variables.extend(var.copy() for var in value.variables)
            copy.coefficients = [c.copy() for c in value.coefficients] + copy.coefficients
        elif is_fraction_like(value):
            factor = as_fraction(value, 'Multiplier').copy()
            if copy.variables:
                copy.coefficients.insert(0, factor)
            else:
                copy.coefficients.append(factor)
        else:
            raise InvalidOperand(f'Term.multiply must be called with a Term, Integer, or Fraction, got {value!r}.')

        return copy.simplify() if simplify else copy

    def eval(self, substitutions: Mapping[str, Substitution] | None = None, simplify=True) -> Expression:
        """Substitutes values for variables, returning the result as an Expression.

        Mapped variables contribute their value raised to the variable's degree;
        unmapped variables are carried along unchanged. The result is an
        Expression because substituting an expression can expand into a sum.

        """
        from symkernel.expression import Expression

        substitutions = substitutions or {}
        result = reduce(lambda p, c: p.multiply(c, simplify), self.coefficients, Expression(1))

        for var in self.variables:
            contribution: Fraction | Expression
            if var.symbol in substitutions:
                value = substitutions[var.symbol]
                if isinstance(value, Expression):
                    contribution = value.pow(var.degree)
                elif is_fraction_like(value):
                    contribution = as_fraction(value).pow(var.degree)
                else:
                    raise InvalidOperand(f'Cannot substitute {value!r} for {var.symbol}: '
                                         f'only Expressions, Fractions, and Integers can be evaluated.')
            else:
                contribution = Expression(var.symbol).pow(var.degree)
            result = result.multiply(contribution, simplify)

        return result

    #
    # Rendering
    #

    def _body(self, implicit: bool | None = None) -> str:
        "Renders the magnitude of the term, without its sign."
        if implicit is None:
            implicit = environment.implicit_multiplication

        factors = [c.abs().to_string() for c in self.coefficients if not c.abs().equal_to(1)]
        factors.extend(var.to_string() for var in self.variables if var.degree != 0)
        if not factors:
            return self.coefficient().abs().to_string()
        return ('' if implicit else '*').join(factors)

    def _tex_body(self, multiplication: str | None = None) -> str:
        if multiplication is None:
            multiplication = environment.tex_multiplication
        op = f' \\{multiplication} '

        coefs = op.join(c.abs().to_tex() for c in self.coefficients if not c.abs().equal_to(1))
        body = tex_join([coefs, *(var.to_tex() for var in self.variables)])
        if not body:
            return self.coefficient().abs().to_tex()
        return body

    def to_string(self, implicit: bool | None = None) -> str:
        sign = '-' if self.coefficient().sign < 0 else ''
        return sign + self._body(implicit)

    def to_tex(self, multiplication: str | None = None) -> str:
        sign = '-' if self.coefficient().sign < 0 else ''
        return sign + self._tex_body(multiplication)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f'Term({self.to_string()!r})'

    def __symkernel_repr__(self):
        return in_panel(self.to_string())

    #
    # Operator Protocol
    #

    def __mul__(self, other):
        if isinstance(other, Term) or is_fraction_like(other):
            return self.multiply(other)
        return NotImplemented

    def __rmul__(self, other):
        if is_fraction_like(other):
            return self.multiply(other)
        return NotImplemented

    def __add__(self, other):
        if isinstance(other, Term):
            return self.add(other)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Term):
            return self.subtract(other)
        return NotImplemented

    def __neg__(self) -> Term:
        return self.multiply(-1)

    def __pow__(self, n):
        if is_integer(n):
            copy = self.copy()
            copy.coefficients = [self.coefficient().pow(n)]
            copy.variables = [Variable(var.symbol, var.degree * n) for var in self.variables]
            return copy.simplify()
        return NotImplemented
