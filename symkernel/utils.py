from __future__ import annotations

from collections       import defaultdict
from collections.abc   import Iterable, Hashable
from typing            import Callable, Generator, TypeVar

from symkernel.env        import environment
from symkernel.exceptions import InvalidOperand
from symkernel.numeric    import is_integer
from symkernel.protocols  import Renderable

#
# Generic
#

A = TypeVar('A')

def irange(
        start_or_stop: int,
        stop: int | None = None,
        *,
        step=1,
) -> Generator[int, None, None]:
    """Inclusive integer range.

    Parameters
    ----------
      start_or_stop - if the only argument, an integer giving the stop (inclusive)
          of the sequence; if stop is also supplied, this is the start.
      stop - if missing, start from 1 (unlike the builtin range that starts from 0);
          otherwise, the sequence goes up to and including this value.
      step - a non-zero integer giving the spacing between successive values.

    Returns an iterator over the resulting range, which is empty when
    stop lies before start in the direction of step.

    """
    if step == 0:
        raise InvalidOperand('irange step must be non-zero.')

    if stop is None:
        stop = start_or_stop
        start = 1
    else:
        start = start_or_stop

    if not is_integer(start) or not is_integer(stop):
        raise InvalidOperand(f'irange bounds must be integers, got {start!r} and {stop!r}.')

    sign = 1 if step > 0 else -1

    def generate_from_irange() -> Generator[int, None, None]:
        value = start
        while (value - stop) * sign <= 0:
            yield value
            value += step

    return generate_from_irange()

def frequencies(xs: Iterable[Hashable]) -> dict[Hashable, int]:
    "Maps each (hashable) value in the collection to the number of times it occurs."
    freqs: dict[Hashable, int] = defaultdict(int)

    for x in xs:
        freqs[x] += 1

    return dict(freqs)

def every(func, iterable):
    "Returns true if f(x) is truthy for every x in iterable."
    return all(map(func, iterable))

def some(func, iterable):
    "Returns true if f(x) is truthy for some x in iterable."
    return any(map(func, iterable))

def iterate(f: Callable[[A], A], n: int, start: A) -> A:
    """Returns nth item in the sequence: start, f(start), f(f(start)), f(f(f(start))), ...

    If n <= 0, start is returned as is.

    """
    result = start
    for _ in range(n):
        result = f(result)
    return result


#
# Integers
#

def factor_pairs(n: int) -> list[tuple[int, int]]:
    """Returns every way to write n as a product a * b of positive integers, a <= b.

    Pairs are listed with increasing a, e.g., factor_pairs(10) == [(1, 10), (2, 5)].
    Non-positive n has no such pairs.

    """
    if not is_integer(n):
        raise InvalidOperand(f'factor_pairs requires an integer, got {n!r}.')

    pairs = []
    a = 1
    while a * a <= n:
        if n % a == 0:
            pairs.append((a, n // a))
        a += 1
    return pairs


#
# Environment
#

def show(x, *, print_it=True):
    "Shows algebraic values on the environment console, in a panel where available."
    if isinstance(x, Renderable):
        out = x.__symkernel_repr__()
    elif isinstance(x, list):
        out = '[' + ', '.join(str(xi) for xi in x) + ']'
    else:
        out = str(x)
    if print_it:
        environment.console.print(out)
        return
    return out
