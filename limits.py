"""
Capacity layer for the BigInt engine.

Limits define the *domain* within which values are guaranteed to be
representable.  A value whose digit count reaches ``max_digits`` is
rejected at the point it would be produced - at parse time and again
after every operation that can grow a value - so no operation ever
hands back a value outside the configured capacity.
"""

from __future__ import annotations

from dataclasses import dataclass

from errors import CapacityExceededError

#: Default capacity in decimal digits.
MAX_DIGITS: int = 10_000


@dataclass(frozen=True)
class DigitLimits:
    """
    Maximum number of decimal digits a value may use.

    Values must stay strictly below ``max_digits``: a 10 000 digit limit
    admits numbers of up to 9 999 digits.
    """

    max_digits: int = MAX_DIGITS

    def __post_init__(self):
        if self.max_digits < 2:
            raise ValueError(
                f"max_digits ({self.max_digits}) must be >= 2 so that 0..9 fit"
            )

    @property
    def largest_digit_count(self) -> int:
        """Longest digit sequence a value may have."""
        return self.max_digits - 1

    def admits(self, digit_count: int) -> bool:
        return digit_count < self.max_digits

    def check(self, digit_count: int, operation: str) -> None:
        """Raise CapacityExceededError unless ``digit_count`` fits."""
        if not self.admits(digit_count):
            raise CapacityExceededError(digit_count, self.max_digits, operation)


# ---------------------------------------------------------------------------
# Common presets
# ---------------------------------------------------------------------------

DEFAULT_LIMITS = DigitLimits()

# Small limits useful for exercising overflow paths
TINY = DigitLimits(max_digits=4)
SMALL = DigitLimits(max_digits=64)

LARGE = DigitLimits(max_digits=100_000)
