"""Calculator error kinds.

These never escape the engine's public operations: ``compute()`` catches them
and switches to the error display carrying ``display_message``.
"""


class CalculatorError(Exception):
    """Base exception for calculator errors."""

    display_message = "Error"


class InvalidOperandError(CalculatorError):
    """Raised when operand text is not a number, or the result is not finite."""


class MissingOperandError(CalculatorError):
    """Raised when an operand is missing and the case is not a pending-operator cancel."""


class DivideByZeroError(CalculatorError):
    """Raised when the right operand of a division is zero."""

    display_message = "Can't divide by 0"
