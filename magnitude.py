"""
Magnitude engine: unsigned digit-sequence arithmetic.

Every function here works on plain sequences of decimal digits stored
least-significant first (``[3, 2, 1]`` is 123) and knows nothing about
signs.  Inputs are expected in canonical form - no most-significant
zeros except the single digit of zero - and every returned list is
canonical too.

BigInt builds its signed operators on top of these primitives.
"""

from __future__ import annotations

from typing import Sequence

Digits = Sequence[int]

__all__ = [
    "trim",
    "is_zero",
    "compare_magnitudes",
    "add_magnitudes",
    "sub_magnitudes",
    "scale_magnitude",
    "mul_magnitudes",
    "divmod_magnitudes",
]


# ----------------------------
# Canonical form helpers
# ----------------------------

def trim(digits: Digits) -> list[int]:
    """Drop most-significant zeros, keeping at least one digit."""
    end = len(digits)
    while end > 1 and digits[end - 1] == 0:
        end -= 1
    if end == 0:
        return [0]
    return list(digits[:end])


def is_zero(digits: Digits) -> bool:
    return len(digits) == 1 and digits[0] == 0


def compare_magnitudes(a: Digits, b: Digits) -> int:
    """Three-way comparison of two canonical magnitudes (-1, 0, 1)."""
    if len(a) != len(b):
        return 1 if len(a) > len(b) else -1
    for i in range(len(a) - 1, -1, -1):
        if a[i] != b[i]:
            return 1 if a[i] > b[i] else -1
    return 0


# ----------------------------
# Addition / subtraction
# ----------------------------

def add_magnitudes(a: Digits, b: Digits) -> list[int]:
    """Digit-by-digit sum with carry; may grow by one digit."""
    if len(a) < len(b):
        a, b = b, a
    out: list[int] = []
    carry = 0
    for i in range(len(a)):
        total = a[i] + (b[i] if i < len(b) else 0) + carry
        if total >= 10:
            carry = 1
            total -= 10
        else:
            carry = 0
        out.append(total)
    if carry:
        out.append(1)
    return out


def sub_magnitudes(a: Digits, b: Digits) -> list[int]:
    """Absolute difference ``| |a| - |b| |`` with borrow.

    The larger magnitude is always the minuend, so the caller decides the
    sign of the result.  Cancelled high digits are trimmed and a full
    cancellation collapses to ``[0]``.
    """
    if compare_magnitudes(a, b) >= 0:
        larger, smaller = a, b
    else:
        larger, smaller = b, a

    out: list[int] = []
    borrow = 0
    for i in range(len(larger)):
        diff = larger[i] - (smaller[i] if i < len(smaller) else 0) - borrow
        if diff < 0:
            diff += 10
            borrow = 1
        else:
            borrow = 0
        out.append(diff)
    return trim(out)


# ----------------------------
# Multiplication
# ----------------------------

def scale_magnitude(digits: Digits, factor: int, shift: int = 0) -> list[int]:
    """Multiply by a single digit and shift left by ``shift`` decimal places.

    The shift is realised by starting the row ``shift`` cells in, which is
    how the schoolbook partial products line up.
    """
    if not 0 <= factor <= 9:
        raise ValueError(f"factor must be a single digit, got {factor}")
    if factor == 0 or is_zero(digits):
        return [0]
    row = [0] * shift
    carry = 0
    for digit in digits:
        product = digit * factor + carry
        row.append(product % 10)
        carry = product // 10
    if carry:
        row.append(carry)
    return row


def mul_magnitudes(a: Digits, b: Digits) -> list[int]:
    """Schoolbook long multiplication built from shifted additions."""
    if is_zero(a) or is_zero(b):
        return [0]

    if len(a) >= len(b):
        longer, shorter = a, b
    else:
        longer, shorter = b, a

    total: list[int] = [0]
    for i, digit in enumerate(shorter):
        if digit == 0:
            continue
        total = add_magnitudes(total, scale_magnitude(longer, digit, shift=i))
    return total


# ----------------------------
# Long division
# ----------------------------

def divmod_magnitudes(a: Digits, b: Digits) -> tuple[list[int], list[int]]:
    """Long division of magnitudes, returning ``(quotient, remainder)``.

    Uses a table of ``b * d`` for every digit ``d`` and slides a window
    over the dividend from its most-significant end.  ``b`` must be
    non-zero.
    """
    if is_zero(b):
        raise ZeroDivisionError("divmod_magnitudes: zero divisor")
    if compare_magnitudes(a, b) < 0:
        return [0], list(a)

    multiples = [scale_magnitude(b, d) for d in range(10)]
    pending = list(reversed(a))  # most-significant first
    width = len(b)

    window = trim(list(reversed(pending[:width])))
    position = width
    if compare_magnitudes(window, b) < 0:
        # a >= b guarantees another digit is available here
        window = trim([pending[position]] + window)
        position += 1

    quotient: list[int] = []  # most-significant first
    while True:
        d = 9
        while compare_magnitudes(multiples[d], window) > 0:
            d -= 1
        quotient.append(d)
        window = sub_magnitudes(window, multiples[d])
        if position == len(pending):
            break
        window = trim([pending[position]] + window)
        position += 1

    return trim(quotient[::-1]), window
