import logging

from rich.logging import RichHandler
from rich.panel   import Panel

from symkernel.env        import LOGGER_NAME, environment
from symkernel.expression import Expression
from symkernel.fraction   import Fraction
from symkernel.output     import in_panel, join_signed, tex_join, tex_symbol
from symkernel.parsing.parsy_adjust import join_nl
from symkernel.utils      import show


def test_join_signed() -> None:
    assert join_signed([]) == "0"
    assert join_signed([(1, "x"), (-1, "2")]) == "x - 2"
    assert join_signed([(-1, "x"), (1, "y")]) == "-x + y"


def test_tex_helpers() -> None:
    assert tex_symbol('beta') == "\\beta"
    assert tex_symbol('b') == "b"
    assert tex_join(["\\alpha", "x"]) == "\\alpha x"
    assert tex_join(["2", "", "x^{2}"]) == "2x^{2}"


def test_in_panel_respects_ascii_only() -> None:
    assert isinstance(in_panel("x"), Panel)

    environment.on_ascii_only()
    try:
        assert in_panel("x") == "x"
        assert show(Fraction(1, 2), print_it=False) == "1/2"
    finally:
        environment.off_ascii_only()


def test_show_renders_on_console() -> None:
    out = show(Expression('x').add(1), print_it=False)

    assert isinstance(out, Panel)
    assert "x + 1" in environment.console_str(out)
    assert show([Fraction(1, 2), Fraction(3)], print_it=False) == "[1/2, 3]"


def test_tex_multiplication_setting() -> None:
    e = Expression.from_parts(constants=[2]).multiply(Expression('x').multiply(3, simplify=False), simplify=False)
    environment.set_tex_multiplication('\\times')
    try:
        assert environment.tex_multiplication == 'times'
        assert e.to_tex() == "2 \\times 3x"
    finally:
        environment.set_tex_multiplication('cdot')


def test_enable_logging_installs_one_rich_handler() -> None:
    logger = environment.enable_logging('debug')
    environment.enable_logging(logging.INFO)
    try:
        assert logger.name == LOGGER_NAME
        assert logger.level == logging.INFO
        assert sum(isinstance(h, RichHandler) for h in logger.handlers) == 1
    finally:
        for handler in [h for h in logger.handlers if isinstance(h, RichHandler)]:
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)


def test_join_nl() -> None:
    assert join_nl([]) == "something else"
    assert join_nl(["b", "a"]) == "a or b"
    assert join_nl(["c", "a", "b"]) == "a, b, or c"


def test_enable_logging_accepts_numeric_levels() -> None:
    logger = environment.enable_logging(5)
    try:
        assert environment.log_level == 5
        assert logger.level == 5
    finally:
        for handler in [h for h in logger.handlers if isinstance(h, RichHandler)]:
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
