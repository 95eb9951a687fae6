import logging

import pytest

from functools  import reduce

from hypothesis import given, settings, strategies as st

from symkernel.env        import environment
from symkernel.exceptions import DivideByZero, InvalidOperand, NonMonomialDivision
from symkernel.expression import Expression, combine_like_terms, sort_terms, term_order_key
from symkernel.fraction   import Fraction
from symkernel.term       import Term
from symkernel.variable   import Variable


x = Expression('x')
y = Expression('y')

# Strategies
symbols = st.sampled_from(['x', 'y', 'z'])
coefficients = st.builds(Fraction, st.integers(-6, 6), st.integers(1, 6))
variables = st.builds(Variable, symbols, st.integers(-2, 3))
terms = st.builds(Term.from_parts,
                  st.lists(variables, min_size=1, max_size=3),
                  st.lists(coefficients, min_size=1, max_size=2))
summands = st.one_of(terms, coefficients, st.integers(-6, 6), symbols)

def build(parts: list) -> Expression:
    return reduce(lambda acc, s: acc.add(s), parts, Expression())


#
# Construction and canonical form
#

def test_construction() -> None:
    assert Expression().to_string() == "0"
    assert Expression('x').to_string() == "x"
    assert Expression(3).to_string() == "3"
    assert Expression(Fraction(-2, 4)).to_string() == "-2/4"
    assert Expression(Term('x', 5)).to_string() == "5*x"

    with pytest.raises(InvalidOperand):
        Expression(1.5)
    with pytest.raises(InvalidOperand):
        Expression('')


def test_adding_a_symbol_to_itself() -> None:
    assert Expression('x').add('x').to_string() == "2*x"


def test_cancelling_terms_gives_zero() -> None:
    two_x = Expression('x').multiply(2)
    result = two_x.subtract(two_x)

    assert result.to_string() == "0"
    assert result.terms == []
    assert result.is_zero()


def test_canonical_form_examples() -> None:
    assert x.add(x.multiply(2)).to_string() == x.multiply(2).add(x).to_string() == "3*x"
    assert x.add(y).to_string() == y.add(x).to_string() == "x + y"

    a = x.add(1).multiply(y.add(2))
    b = y.add(2).multiply(x.add(1))
    assert a.to_string() == b.to_string() == "x*y + 2*x + y + 2"


@settings(max_examples=100, deadline=None)
@given(parts=st.lists(summands, max_size=6), data=st.data())
def test_canonical_form_is_independent_of_summand_order(parts: list, data) -> None:
    shuffled = data.draw(st.permutations(parts))

    assert build(parts).to_string() == build(shuffled).to_string()
    assert build(parts).to_string() == build(list(reversed(parts))).to_string()


@settings(max_examples=50, deadline=None)
@given(left=st.lists(summands, max_size=4), right=st.lists(summands, max_size=4))
def test_multiplication_is_commutative(left: list, right: list) -> None:
    a, b = build(left), build(right)
    assert a.multiply(b).to_string() == b.multiply(a).to_string()


@settings(max_examples=100, deadline=None)
@given(left=st.lists(summands, max_size=5), right=st.lists(summands, max_size=3))
def test_simplified_expressions_are_canonical(left: list, right: list) -> None:
    raw = Expression()
    for s in left:
        raw = raw.add(s, simplify=False)
    raw = raw.multiply(build(right), simplify=False)
    e = raw.simplify()

    assert len(e.constants) == 1
    for term in e.terms:
        assert term.variables
        assert not term.coefficient().is_zero()
    for i, term in enumerate(e.terms):
        for other in e.terms[i + 1:]:
            assert not term.can_be_combined_with(other)
    keys = [term_order_key(term) for term in e.terms]
    assert keys == sorted(keys)
    assert e.simplify().to_string() == e.to_string()


def test_simplify_leaves_exactly_one_constant() -> None:
    assert Expression(2).add(3).constants == [Fraction(5)]
    assert Expression('x').simplify().constants == [Fraction(0)]
    assert Expression.from_parts(constants=[1, Fraction(1, 2)]).constant() == Fraction(3, 2)


def test_unsimplified_add_keeps_duplicates() -> None:
    e = Expression('x').add('x', simplify=False)

    assert len(e.terms) == 2
    assert e.to_string() == "x + x"
    assert e.simplify().to_string() == "2*x"


def test_fractional_coefficients_combine() -> None:
    assert x.divide(2).add(x.divide(3)).to_string() == "5/6*x"


def test_terms_are_ordered_by_degree_then_variable_count() -> None:
    xy = Term.from_parts([Variable('x'), Variable('y')])
    ordered = sort_terms([Term('x'), xy, Term(Variable('x', 2))])

    assert [t.to_string() for t in ordered] == ["x^2", "x*y", "x"]
    assert term_order_key(Term()) == (-1, 0, '1')


def test_negative_degrees_sort_with_linear_terms() -> None:
    assert Expression('x').pow(-1).add('y').to_string() == "x^-1 + y"
    assert Expression('y').add(Expression('x').pow(-1)).to_string() == "x^-1 + y"


def test_like_terms_combine_in_one_pass() -> None:
    terms = [Term('x', 1), Term('y', 1), Term('x', 2), Term('x', 3)]
    combined = combine_like_terms(terms)

    assert [t.to_string() for t in combined] == ["6*x", "y"]


#
# Multiplication, division, and powers
#

def test_multiply_distributes() -> None:
    assert x.add(1).multiply(x.subtract(1)).to_string() == "x^2 - 1"
    assert x.multiply(y).multiply(x).to_string() == "x^2*y"
    assert x.add(1).multiply(0).to_string() == "0"


def test_monomial_division_round_trip() -> None:
    e1 = x.pow(2).multiply(y).multiply(3)
    e2 = x.pow(3).multiply(2)
    quotient = e1.divide(e2)

    assert quotient.to_string() == "3/2*y*x^-1"
    assert quotient.multiply(e2).simplify().to_string() == e1.simplify().to_string() == "3*x^2*y"
    assert quotient.multiply(e2) == e1


def test_division_by_a_sum_is_rejected() -> None:
    with pytest.raises(NonMonomialDivision):
        x.add(1).divide(x)
    with pytest.raises(NonMonomialDivision):
        x.divide(x.add(1))
    with pytest.raises(NonMonomialDivision):
        x.add(1).pow(-1)


def test_division_by_zero() -> None:
    with pytest.raises(DivideByZero):
        x.divide(Expression(0))
    with pytest.raises(DivideByZero):
        x.divide(0)
    with pytest.raises(DivideByZero):
        x.subtract(x).pow(-2)


def test_dividing_zero_and_constants() -> None:
    assert Expression(0).divide(x).to_string() == "0"
    assert Expression(6).divide(Expression(4)).to_string() == "3/2"
    assert x.multiply(y).divide(x).to_string() == "y"
    assert x.divide(x).to_string() == "1"


def test_scalar_division_distributes() -> None:
    e = x.multiply(4).add(2)

    assert e.divide(2).to_string() == "2*x + 1"
    assert e.divide(Fraction(1, 2)).to_string() == "8*x + 4"


def test_pow() -> None:
    assert x.add(1).pow(2).to_string() == "x^2 + 2*x + 1"
    assert x.add(1).pow(0).to_string() == "1"
    assert x.add(1).pow(1).to_string() == "x + 1"
    assert x.multiply(2).pow(-2).to_string() == "1/4*x^-2"

    with pytest.raises(InvalidOperand):
        x.pow(1.5)


#
# Evaluation
#

def test_eval_square() -> None:
    result = Expression('x').pow(2).eval({'x': 3})

    assert result.to_string() == "9"
    assert result.terms == []
    assert result.constant() == Fraction(9)


def test_eval_partially_and_with_expressions() -> None:
    e = x.multiply(y).add(1)

    assert e.eval({'x': Expression('y')}).to_string() == "y^2 + 1"
    assert e.eval({'x': Fraction(1, 2)}).to_string() == "1/2*y + 1"
    assert e.eval({'z': 4}).to_string() == "x*y + 1"


def test_summation() -> None:
    i = Expression('i')

    assert i.summation('i', 1, 4).to_string() == "10"
    assert i.pow(2).multiply('x').summation('i', 1, 3).to_string() == "14*x"
    assert i.summation('i', 3, 1).to_string() == "0"

    with pytest.raises(InvalidOperand):
        i.summation('i', 1, 2.5)


#
# Queries
#

def test_variable_queries() -> None:
    e = x.multiply(y).add(x)

    assert e.has_variable('y')
    assert not e.has_variable('z')
    assert not e.only_has_variable('x')
    assert x.pow(2).add(x).only_has_variable('x')
    assert not e.no_cross_products()
    assert x.add(y).no_cross_products()
    assert e.no_cross_product_with_variable('z')
    assert not e.no_cross_product_with_variable('x')


#
# Rendering
#

def test_to_string_and_to_tex() -> None:
    e = x.pow(2).multiply(3).add(1)

    assert e.to_string() == "3*x^2 + 1"
    assert e.to_string(implicit=True) == "3x^2 + 1"
    assert e.to_tex() == "3x^{2} + 1"

    n = x.multiply(-1).add(Fraction(-1, 2))
    assert n.to_string() == "-x - 1/2"
    assert n.to_tex() == "-x - \\frac{1}{2}"

    assert Expression('alpha').pow(2).to_tex() == "\\alpha^{2}"


def test_implicit_multiplication_follows_environment() -> None:
    e = x.multiply(y).multiply(2)
    environment.on_implicit_multiplication()
    try:
        assert e.to_string() == "2xy"
    finally:
        environment.off_implicit_multiplication()
    assert e.to_string() == "2*x*y"


def test_simplify_logs_at_debug_level(caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger='symkernel'):
        x.add(1)

    assert any(r.name == 'symkernel.expression' and 'simplify' in r.getMessage() for r in caplog.records)


#
# Values and operators
#

def test_operations_never_mutate_the_receiver() -> None:
    e = Expression('x')
    e.add(1)
    e.multiply(3)
    e.pow(2)
    e.divide(2)

    assert e.to_string() == "x"
    assert len(e.terms) == 1
    assert e.constants == []


def test_operands_are_interchangeable() -> None:
    assert x.add(Term('x', 2)).to_string() == "3*x"
    assert x.multiply(Fraction(1, 2)).to_string() == "1/2*x"

    with pytest.raises(InvalidOperand):
        x.add(None)
    with pytest.raises(InvalidOperand):
        x.multiply(2.5)


def test_operator_protocol() -> None:
    assert (x + 1) * (x - 1) == x ** 2 - 1
    assert (2 * x + 3).to_string() == "2*x + 3"
    assert (1 - x).to_string() == "-x + 1"
    assert (6 * x ** 2) / (3 * x) == 2 * x
    assert x / 2 == Expression('x').multiply(Fraction(1, 2))
    assert (-x).to_string() == "-x"
    assert x == 'x'
    assert x + x != x
    assert (Fraction(1, 2) + x).to_string() == "x + 1/2"
    assert (Term('y') + x).to_string() == "x + y"
    assert (1 / (2 * x)).to_string() == "1/2*x^-1"
