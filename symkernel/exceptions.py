from __future__ import annotations

class SymkernelException(Exception):
    "Base exception for errors raised by the algebra kernel."
    pass

class AlgebraError(SymkernelException):
    "Base exception for failed arithmetic on fractions, terms, and expressions."
    pass

class DivideByZero(AlgebraError, ZeroDivisionError):
    "A fraction or expression was constructed or divided with a zero divisor."
    pass

class InvalidOperand(AlgebraError, TypeError):
    "An operation received a value of a type or form it does not support."
    pass

class IncompatibleTerms(AlgebraError):
    "Terms that are not like terms cannot be added or subtracted."
    pass

class NonMonomialDivision(AlgebraError):
    "Only expressions that reduce to a single term or constant can be divided."
    pass

class LexError(SymkernelException):
    "The lexer met a character or literal it cannot tokenize, or ran out of input."

    def __init__(self, message: str, position: int | None = None) -> None:
        super().__init__(message)
        self.position = position
