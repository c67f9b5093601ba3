"""
Exception types for the BigInt engine.

Every error kind is its own class under ``BigIntError`` and also derives
from the matching built-in exception, so callers can catch either the
specific kind or the Python family it belongs to (``ValueError``,
``OverflowError``, ``ZeroDivisionError``).

These are dependency-free and may be imported by every other module.
"""

from __future__ import annotations

__all__ = [
    "BigIntError",
    "InvalidInputError",
    "CapacityExceededError",
    "DivisionByZeroError",
    "InvalidExponentError",
]


class BigIntError(Exception):
    """Base class for all BigInt failures."""
    pass


class InvalidInputError(BigIntError, ValueError):
    """Raised when text or raw digits do not describe a canonical decimal integer."""

    def __init__(self, message: str, *, text: str | None = None) -> None:
        super().__init__(message)
        self.text = text


class CapacityExceededError(BigIntError, OverflowError):
    """Raised when a value would reach or exceed the configured digit capacity.

    Attributes
    ----------
    digit_count : int
        Number of digits the rejected value has (or would have).
    max_digits : int
        The configured capacity; values must stay strictly below it.
    operation : str
        Name of the construction or arithmetic step that produced the value.
    """

    def __init__(self, digit_count: int, max_digits: int, operation: str) -> None:
        super().__init__(
            f"{operation}: {digit_count} digits reaches capacity of {max_digits}"
        )
        self.digit_count = digit_count
        self.max_digits = max_digits
        self.operation = operation


class DivisionByZeroError(BigIntError, ZeroDivisionError):
    """Raised when the divisor of divide/modulo is zero."""

    def __init__(self, dividend: str) -> None:
        super().__init__(f"division of {dividend} by zero")
        self.dividend = dividend


class InvalidExponentError(BigIntError, ValueError):
    """Raised when power() is given a negative exponent."""

    def __init__(self, exponent: int) -> None:
        super().__init__(f"exponent must be >= 0, got {exponent}")
        self.exponent = exponent
