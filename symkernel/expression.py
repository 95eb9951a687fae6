# Sums of terms and the canonicalization pipeline
#
# An Expression is a list of Terms plus a list of constant Fractions. Every
# operation copies its receiver, builds the (possibly unsimplified) result,
# and by default finishes with simplify(), which reduces any expression to
# a single deterministic canonical form:
#
#   1. each term is simplified on its own;
#   2. terms are sorted by max degree (floor 1), then number of variables,
#      both descending, then by monomial signature;
#   3. like terms are combined in one greedy forward pass;
#   4. variable-free terms are folded into the constants;
#   5. terms with a zero coefficient are dropped;
#   6. the constants collapse to a single Fraction, possibly zero.

from __future__ import annotations

import logging

from collections.abc   import Iterable, Mapping
from functools         import reduce
from typing            import Union
from typing_extensions import TypeAlias, TypeGuard

from symkernel.exceptions import DivideByZero, InvalidOperand, NonMonomialDivision
from symkernel.fraction   import Fraction, FractionLike, as_fraction, is_fraction_like
from symkernel.numeric    import is_integer
from symkernel.output     import in_panel, join_signed
from symkernel.term       import Substitution, Term
from symkernel.utils      import every, irange, iterate, some
from symkernel.variable   import Variable

log = logging.getLogger(__name__)


#
# Helpers
#

Summand: TypeAlias = Union[str, FractionLike, Term, 'Expression']

def is_summand(x) -> TypeGuard[Summand]:
    return isinstance(x, (str, Term, Expression)) or is_fraction_like(x)

def as_expression(x: Summand) -> Expression:
    "Normalizes a symbol, scalar, or term into an Expression; expressions pass through."
    if isinstance(x, Expression):
        return x
    return Expression(x)

def term_order_key(term: Term) -> tuple[int, int, str]:
    """Sort key placing higher-degree terms first, then terms with more variables.

    Terms without variables get the same degree floor of 1 as linear terms;
    this is an ordering convention, not their mathematical degree. The
    monomial signature breaks the remaining ties so that the order never
    depends on how an expression was built.

    """
    return (-term.max_degree(), -len(term.variables), term.signature)

def sort_terms(terms: Iterable[Term]) -> list[Term]:
    return sorted(terms, key=term_order_key)

def combine_like_terms(terms: list[Term]) -> list[Term]:
    """Merges like terms in a single greedy left-to-right pass.

    Each term not already absorbed into a kept term is merged with every
    later term it can be combined with, then kept. Kept terms are never
    revisited.

    """
    kept: list[Term] = []
    for i, term in enumerate(terms):
        if some(term.can_be_combined_with, kept):
            continue
        for other in terms[i + 1:]:
            if term.can_be_combined_with(other):
                term = term.add(other)
        kept.append(term)
    return kept


#
# Expressions
#

class Expression:
    """A sum of symbolic terms plus constants, t_1 + t_2 + ... + t_n + c.

    Construct from nothing (the empty sum), a symbol name, an integer, a
    Fraction, or a Term, and combine with add, subtract, multiply, divide,
    and pow. Operations accept any of those operand types interchangeably.
    Expressions are values; no operation changes its receiver.

    """
    def __init__(self, value: str | FractionLike | Term | None = None) -> None:
        self.terms: list[Term] = []
        self.constants: list[Fraction] = []

        if value is None:
            pass
        elif isinstance(value, str):
            self.terms = [Term(Variable(value))]
        elif isinstance(value, Term):
            self.terms = [value.copy()]
        elif is_fraction_like(value):
            self.constants = [as_fraction(value).copy()]
        else:
            raise InvalidOperand(f'Expression must be created from a string, number, Fraction, or Term, got {value!r}.')

    @classmethod
    def from_parts(cls, terms: Iterable[Term] = (), constants: Iterable[FractionLike] = ()) -> Expression:
        expr = cls()
        expr.terms = [term.copy() for term in terms]
        expr.constants = [as_fraction(c).copy() for c in constants]
        return expr

    def copy(self) -> Expression:
        return Expression.from_parts(self.terms, self.constants)

    def constant(self) -> Fraction:
        "Returns the sum of the constants."
        return reduce(lambda p, c: p.add(c), self.constants, Fraction(0, 1))

    def is_zero(self) -> bool:
        "Is this the zero expression? Only reliable on simplified expressions."
        return not self.terms and self.constant().is_zero()

    #
    # Canonicalization
    #

    def simplify(self) -> Expression:
        copy = self.copy()

        terms = sort_terms(term.simplify() for term in copy.terms)
        terms = combine_like_terms(terms)

        constant = copy.constant()
        kept = []
        for term in terms:
            if not term.variables:
                constant = constant.add(term.coefficient())
            elif term.coefficient().reduce().numerator != 0:
                kept.append(term)

        copy.terms = kept
        copy.constants = [constant if not constant.is_zero() else Fraction(0, 1)]

        log.debug('simplify: %d terms, %d constants -> %s',
                  len(self.terms), len(self.constants), copy)
        return copy

    #
    # Queries
    #

    def has_variable(self, symbol: str) -> bool:
        return some(lambda term: term.has_variable(symbol), self.terms)

    def only_has_variable(self, symbol: str) -> bool:
        "Does every term involve the given symbol alone?"
        return every(lambda term: term.only_has_variable(symbol), self.terms)

    def no_cross_product_with_variable(self, symbol: str) -> bool:
        "Is the symbol free of products with other variables in every term?"
        return every(lambda term: not term.has_variable(symbol) or term.only_has_variable(symbol), self.terms)

    def no_cross_products(self) -> bool:
        return every(lambda term: len(term.variables) <= 1, self.terms)

    def _item_count(self) -> int:
        "Counts terms plus the constant, where a zero constant counts only when there are no terms."
        has_constant = not self.constant().is_zero() or not self.terms
        return len(self.terms) + (1 if has_constant else 0)

    def _monomial(self) -> Term:
        "The single item of a simplified one-item expression, as a Term."
        if self.terms:
            return self.terms[0].copy()
        return Term(coefficient=self.constant())

    #
    # Arithmetic
    #

    def add(self, value: Summand, simplify=True) -> Expression:
        if not is_summand(value):
            raise InvalidOperand(f'Summand must be a string, number, Fraction, Term, or Expression, got {value!r}.')
        that = as_expression(value)

        copy = self.copy()
        copy.terms = sort_terms([*copy.terms, *(term.copy() for term in that.terms)])
        copy.constants.extend(c.copy() for c in that.constants)

        return copy.simplify() if simplify else copy

    def subtract(self, value: Summand, simplify=True) -> Expression:
        if not is_summand(value):
            raise InvalidOperand(f'Subtrahend must be a string, number, Fraction, Term, or Expression, got {value!r}.')
        return self.add(as_expression(value).multiply(-1), simplify)

    def multiply(self, value: Summand, simplify=True) -> Expression:
        """Multiplies out the full distribution of the two sums.

        Every term of each side multiplies every term and constant of the
        other, and every pair of constants multiplies into a variable-free
        term. Zero constants contribute nothing.

        """
        if not is_summand(value):
            raise InvalidOperand(f'Multiplier must be a string, number, Fraction, Term, or Expression, got {value!r}.')
        this = self.copy()
        that = as_expression(value).copy()

        this_constants = [c for c in this.constants if not c.is_zero()]
        that_constants = [c for c in that.constants if not c.is_zero()]

        products: list[Term] = []
        for this_term in this.terms:
            products.extend(this_term.multiply(that_term, simplify) for that_term in that.terms)
            products.extend(this_term.multiply(c, simplify) for c in that_constants)

        for that_term in that.terms:
            products.extend(that_term.multiply(c, simplify) for c in this_constants)

        for this_const in this_constants:
            for that_const in that_constants:
                products.append(Term().multiply(that_const, False).multiply(this_const, False))

        result = Expression.from_parts(sort_terms(products))
        return result.simplify() if simplify else result

    def divide(self, value: FractionLike | Expression, simplify=True) -> Expression:
        """Divides by a scalar, or by a monomial expression.

        A Fraction or integer divisor distributes over the sum. An Expression
        divisor is allowed only when both sides simplify to a single term or
        constant; otherwise NonMonomialDivision is raised. Shared variables
        subtract degrees and variables only in the divisor become inverse
        powers.

        """
        if is_fraction_like(value):
            divisor = as_fraction(value, 'Divisor')
            if divisor.is_zero():
                raise DivideByZero(f'Cannot divide {self} by zero.')
            reciprocal = Fraction(1, 1).divide(divisor, simplify)

            copy = self.copy()
            copy.terms = [term.multiply(reciprocal, simplify=False) for term in copy.terms]
            copy.constants = [c.divide(divisor, simplify) for c in copy.constants]
            return copy.simplify() if simplify else copy

        if not isinstance(value, Expression):
            raise InvalidOperand(f'Divisor must be a Fraction, Integer, or Expression, got {value!r}.')

        numerator = self.simplify()
        denominator = value.simplify()

        if denominator.is_zero():
            raise DivideByZero(f'Cannot divide {numerator} by zero.')
        if numerator._item_count() != 1 or denominator._item_count() != 1:
            raise NonMonomialDivision(f'Invalid Argument (({numerator})/({denominator})): '
                                      f'Only monomial expressions can be divided.')

        num = numerator._monomial()
        den = denominator._monomial()

        num_symbols = {var.symbol for var in num.variables}
        den_degrees = {var.symbol: var.degree for var in den.variables}
        variables = [Variable(var.symbol, var.degree - den_degrees.get(var.symbol, 0))
                     for var in num.variables]
        variables.extend(Variable(var.symbol, -var.degree)
                         for var in den.variables if var.symbol not in num_symbols)

        coefficient = num.coefficient().divide(den.coefficient(), simplify)
        log.debug('divide: (%s)/(%s) monomial quotient', numerator, denominator)

        result = Expression(Term.from_parts(variables, [coefficient]))
        return result.simplify() if simplify else result

    def pow(self, n: int, simplify=True) -> Expression:
        """Raises to an integer power by repeated multiplication.

        The zeroth power is 1. Negative powers divide 1 by the positive
        power, so they are only defined for monomials.

        """
        if not is_integer(n):
            raise InvalidOperand(f'Invalid Argument ({n!r}): exponent must be an integer.')

        if n == 0:
            one = Expression(1)
            return one.simplify() if simplify else one
        if n < 0:
            return Expression(1).divide(self.pow(-n, simplify), simplify)

        result = iterate(lambda acc: acc.multiply(self, simplify), n - 1, self.copy())
        result.terms = sort_terms(result.terms)
        return result.simplify() if simplify else result

    def eval(self, substitutions: Mapping[str, Substitution] | None = None, simplify=True) -> Expression:
        "Substitutes values for variables in every term and sums the results."
        substitutions = substitutions or {}

        start = Expression()
        start.constants = [self.constant()] if simplify else [c.copy() for c in self.constants]

        return reduce(lambda acc, term: acc.add(term.eval(substitutions, simplify), simplify),
                      self.terms, start)

    def summation(self, variable: str, lower: int, upper: int, simplify=True) -> Expression:
        """Sums this expression over integer values of `variable` from lower to upper inclusive.

        The sum is unrolled term by term; an empty range gives 0.

        """
        if not isinstance(variable, str) or not is_integer(lower) or not is_integer(upper):
            raise InvalidOperand(f'Summation needs a variable name and integer bounds, '
                                 f'got {variable!r}, {lower!r}, {upper!r}.')

        total = Expression()
        for i in irange(lower, upper):
            total = total.add(self.eval({variable: i}, simplify), simplify)
        return total.simplify() if simplify else total

    #
    # Rendering
    #

    def _constant_components(self, render) -> list[tuple[int, str]]:
        return [(c.sign, render(c.abs())) for c in self.constants if not c.is_zero()]

    def to_string(self, implicit: bool | None = None) -> str:
        components = [(term.coefficient().sign, term._body(implicit)) for term in self.terms]
        components.extend(self._constant_components(lambda c: c.to_string()))
        return join_signed(components)

    def to_tex(self, multiplication: str | None = None) -> str:
        components = [(term.coefficient().sign, term._tex_body(multiplication)) for term in self.terms]
        components.extend(self._constant_components(lambda c: c.to_tex()))
        return join_signed(components)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f'Expression({self.to_string()!r})'

    def __symkernel_repr__(self):
        return in_panel(self.to_string())

    #
    # Operator Protocol
    #

    def _canonical_key(self) -> tuple:
        simplified = self.simplify()
        terms = tuple((term.signature, term.coefficient().reduce().numerator, term.coefficient().reduce().denominator)
                      for term in simplified.terms)
        constant = simplified.constant().reduce()
        return (terms, constant.numerator, constant.denominator)

    def __eq__(self, other) -> bool:
        if is_summand(other):
            return self._canonical_key() == as_expression(other)._canonical_key()
        return NotImplemented

    def __add__(self, other):
        if is_summand(other):
            return self.add(other)
        return NotImplemented

    def __radd__(self, other):
        if is_summand(other):
            return as_expression(other).add(self)
        return NotImplemented

    def __sub__(self, other):
        if is_summand(other):
            return self.subtract(other)
        return NotImplemented

    def __rsub__(self, other):
        if is_summand(other):
            return as_expression(other).subtract(self)
        return NotImplemented

    def __mul__(self, other):
        if is_summand(other):
            return self.multiply(other)
        return NotImplemented

    def __rmul__(self, other):
        if is_summand(other):
            return as_expression(other).multiply(self)
        return NotImplemented

    def __truediv__(self, other):
        if is_fraction_like(other) or isinstance(other, Expression):
            return self.divide(other)
        if isinstance(other, (str, Term)):
            return self.divide(as_expression(other))
        return NotImplemented

    def __rtruediv__(self, other):
        if is_summand(other):
            return as_expression(other).divide(self)
        return NotImplemented

    def __pow__(self, n):
        if is_integer(n):
            return self.pow(n)
        return NotImplemented

    def __neg__(self) -> Expression:
        return self.multiply(-1)
