# output.py - shared rendering helpers for algebraic values

from __future__ import annotations

import re

from collections.abc   import Iterable
from typing            import Literal

from rich              import box
from rich.panel        import Panel

from symkernel.env     import environment

#
# LaTeX Symbols
#

GREEK_LETTERS = frozenset([
    'alpha', 'beta', 'gamma', 'delta', 'epsilon', 'varepsilon', 'zeta', 'eta',
    'theta', 'vartheta', 'iota', 'kappa', 'lambda', 'mu', 'nu', 'xi', 'pi',
    'varpi', 'rho', 'varrho', 'sigma', 'varsigma', 'tau', 'upsilon', 'phi',
    'varphi', 'chi', 'psi', 'omega',
    'Gamma', 'Delta', 'Theta', 'Lambda', 'Xi', 'Pi', 'Sigma', 'Upsilon',
    'Phi', 'Psi', 'Omega',
])

_trailing_command = re.compile(r'\\[A-Za-z]+$')

def tex_symbol(symbol: str) -> str:
    "Escapes Greek-letter names as LaTeX commands; other symbols pass through."
    if symbol in GREEK_LETTERS:
        return '\\' + symbol
    return symbol

def tex_join(parts: Iterable[str]) -> str:
    "Juxtaposes LaTeX factors, separating a bare command from a following letter."
    out = ''
    for part in parts:
        if not part:
            continue
        if _trailing_command.search(out) and part[0].isalpha():
            out += ' '
        out += part
    return out


#
# Signed Sums
#

def join_signed(components: Iterable[tuple[int, str]]) -> str:
    """Joins (sign, magnitude) components into an infix sum.

    Each component is preceded by ' + ' or ' - ' according to its sign, and
    the leading operator is then stripped (a leading minus is kept, unpadded).
    An empty sum renders as '0'.

    """
    out = ''.join((' - ' if sign < 0 else ' + ') + text for sign, text in components)
    if out.startswith(' - '):
        return '-' + out[3:]
    if out.startswith(' + '):
        return out[3:]
    return '0'


#
# Rendered Output
#

def in_panel(
        s: str,
        box=box.SQUARE,
        title: str | None = None,
        title_align: Literal['left', 'center', 'right'] = 'center',
) -> str | Panel:
    if environment.ascii_only:
        return s
    return Panel(
        s,
        expand=False,
        box=box,
        title=title,
        title_align=title_align,
    )
