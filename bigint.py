"""
Arbitrary-precision signed decimal integers.

A ``BigInt`` is a sign flag plus a magnitude stored one decimal digit per
cell, least-significant digit first.  Values are immutable: every
operator builds a fresh value, so ``x += y`` simply rebinds ``x``.

Layers
------
construction    from_int / from_string, with capacity checks
formatting      str() / repr() / int()
comparison      equals / greater_than and everything derived from them
arithmetic      add, subtract, multiply, divide_with_remainder, power, isqrt

The signed operators are thin sign-resolution tables over the unsigned
primitives in ``magnitude``.  Decision branches are annotated with their
branch ids (see ``contract.BRANCHES``) so white-box tests can trace
coverage back to them.

Operators (``+``, ``//``, ``**`` ...) always work under ``DEFAULT_LIMITS``.
Values built under other limits must go through the functional API
(``add(a, b, limits)`` ...) or a ``Calculator`` carrying those limits.
Comparisons never check capacity, so ``x == 10**20000`` is simply False.

Division truncates toward zero and the remainder takes the dividend's
sign, so ``a == (a // b) * b + a % b`` holds for every sign combination.
Note that this differs from Python's floor semantics for ``int``.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Union

from errors import (
    CapacityExceededError,
    DivisionByZeroError,
    InvalidExponentError,
    InvalidInputError,
)
from limits import DEFAULT_LIMITS, DigitLimits
from magnitude import (
    add_magnitudes,
    compare_magnitudes,
    divmod_magnitudes,
    is_zero,
    mul_magnitudes,
    sub_magnitudes,
)

_DIGITS_RE = re.compile(r"[0-9]+")

Operand = Union["BigInt", int]


# ---------------------------------------------------------------------------
# The value type
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class BigInt:
    """Signed decimal integer in canonical sign-magnitude form.

    ``BigInt()`` is zero.  Prefer ``from_int`` / ``from_string`` over the
    raw constructor, which only accepts an already canonical digit tuple.
    """

    negative: bool = False
    digits: tuple[int, ...] = (0,)

    def __post_init__(self) -> None:
        digits = self.digits
        if not isinstance(digits, tuple):
            digits = tuple(digits)
            object.__setattr__(self, "digits", digits)
        if not digits:
            raise InvalidInputError("digit sequence must not be empty")
        for d in digits:
            if not isinstance(d, int) or not 0 <= d <= 9:
                raise InvalidInputError(f"not a decimal digit: {d!r}")
        if len(digits) > 1 and digits[-1] == 0:
            raise InvalidInputError("most-significant digit must be non-zero")
        if self.negative and is_zero(digits):
            raise InvalidInputError("zero cannot be negative")

    # -- constructors -----------------------------------------------------

    @classmethod
    def zero(cls) -> "BigInt":
        return cls()

    @classmethod
    def one(cls) -> "BigInt":
        return cls(False, (1,))

    @classmethod
    def from_int(cls, n: int, limits: DigitLimits = DEFAULT_LIMITS) -> "BigInt":
        """Build from a native integer by peeling off ``n % 10``."""
        if isinstance(n, bool) or not isinstance(n, int):
            raise TypeError(f"expected int, got {type(n).__name__}")
        if n == 0:
            return cls()

        negative = n < 0
        if negative:
            n = -n
        digits = []
        while n > 0:
            digits.append(n % 10)
            n //= 10
        limits.check(len(digits), "from_int")
        return cls(negative, tuple(digits))

    @classmethod
    def from_string(cls, text: str, limits: DigitLimits = DEFAULT_LIMITS) -> "BigInt":
        """Parse ``-?(0|[1-9][0-9]*)``; ``"-0"`` is accepted as zero.

        Branches: PARSE-EMPTY, PARSE-LONE-SIGN, PARSE-NON-DIGIT,
                  PARSE-LEADING-ZERO, PARSE-ZERO, PARSE-CAPACITY, PARSE-VALID
        """
        if not isinstance(text, str):
            raise TypeError(f"expected str, got {type(text).__name__}")
        if not text:                                              # PARSE-EMPTY
            raise InvalidInputError("no number was given", text=text)

        negative = text[0] == "-"
        body = text[1:] if negative else text
        if not body:                                              # PARSE-LONE-SIGN
            raise InvalidInputError("sign without digits", text=text)
        if _DIGITS_RE.fullmatch(body) is None:                    # PARSE-NON-DIGIT
            raise InvalidInputError(f"not a decimal integer: {text!r}", text=text)

        if body[0] == "0":
            if len(body) > 1:                                     # PARSE-LEADING-ZERO
                raise InvalidInputError(
                    f"leading zeros are not allowed: {text!r}", text=text
                )
            return cls()                                          # PARSE-ZERO

        limits.check(len(body), "from_string")                   # PARSE-CAPACITY
        # PARSE-VALID: walk from the least-significant character
        return cls(negative, tuple(ord(ch) - 48 for ch in reversed(body)))

    # -- inspection -------------------------------------------------------

    @property
    def digit_count(self) -> int:
        return len(self.digits)

    @property
    def sign(self) -> int:
        """-1, 0 or 1."""
        if self.negative:
            return -1
        return 0 if self.is_zero() else 1

    def is_zero(self) -> bool:
        return is_zero(self.digits)

    def __bool__(self) -> bool:
        return not self.is_zero()

    # -- formatting -------------------------------------------------------

    def to_string(self) -> str:
        body = "".join(chr(48 + d) for d in reversed(self.digits))
        return "-" + body if self.negative else body

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"BigInt('{self.to_string()}')"

    def __int__(self) -> int:
        value = 0
        for d in reversed(self.digits):
            value = value * 10 + d
        return -value if self.negative else value

    def __hash__(self) -> int:
        return hash(int(self))

    # -- sign helpers -----------------------------------------------------

    def abs(self) -> "BigInt":
        if not self.negative:
            return self
        return BigInt(False, self.digits)

    def __abs__(self) -> "BigInt":
        return self.abs()

    def __neg__(self) -> "BigInt":
        if self.is_zero():
            return self
        return BigInt(not self.negative, self.digits)

    def __pos__(self) -> "BigInt":
        return self

    # -- comparison -------------------------------------------------------

    def equals(self, other: "BigInt") -> bool:
        return equals(self, other)

    def not_equals(self, other: "BigInt") -> bool:
        return not equals(self, other)

    def greater_than(self, other: "BigInt") -> bool:
        return greater_than(self, other)

    def less_than(self, other: "BigInt") -> bool:
        return not equals(self, other) and not greater_than(self, other)

    def greater_or_equal(self, other: "BigInt") -> bool:
        return equals(self, other) or greater_than(self, other)

    def less_or_equal(self, other: "BigInt") -> bool:
        return not greater_than(self, other)

    def __eq__(self, other: object) -> bool:
        rhs = _coerce_exact(other)
        if rhs is None:
            return NotImplemented
        return self.equals(rhs)

    def __ne__(self, other: object) -> bool:
        rhs = _coerce_exact(other)
        if rhs is None:
            return NotImplemented
        return self.not_equals(rhs)

    def __lt__(self, other: Operand) -> bool:
        rhs = _coerce_exact(other)
        if rhs is None:
            return NotImplemented
        return self.less_than(rhs)

    def __le__(self, other: Operand) -> bool:
        rhs = _coerce_exact(other)
        if rhs is None:
            return NotImplemented
        return self.less_or_equal(rhs)

    def __gt__(self, other: Operand) -> bool:
        rhs = _coerce_exact(other)
        if rhs is None:
            return NotImplemented
        return self.greater_than(rhs)

    def __ge__(self, other: Operand) -> bool:
        rhs = _coerce_exact(other)
        if rhs is None:
            return NotImplemented
        return self.greater_or_equal(rhs)

    # -- named arithmetic -------------------------------------------------

    def add(self, other: "BigInt") -> "BigInt":
        return add(self, other)

    def subtract(self, other: "BigInt") -> "BigInt":
        return subtract(self, other)

    def multiply(self, other: "BigInt") -> "BigInt":
        return multiply(self, other)

    def divide(self, other: "BigInt") -> "BigInt":
        return divide(self, other)

    def modulo(self, other: "BigInt") -> "BigInt":
        return modulo(self, other)

    def divide_with_remainder(self, other: "BigInt") -> tuple["BigInt", "BigInt"]:
        return divide_with_remainder(self, other)

    def power(self, exponent: Union[int, "BigInt"]) -> "BigInt":
        return power(self, exponent)

    def isqrt(self) -> "BigInt":
        return isqrt(self)

    # -- operators --------------------------------------------------------

    def __add__(self, other: Operand) -> "BigInt":
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return add(self, rhs)

    def __radd__(self, other: Operand) -> "BigInt":
        lhs = _coerce(other)
        if lhs is None:
            return NotImplemented
        return add(lhs, self)

    def __sub__(self, other: Operand) -> "BigInt":
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return subtract(self, rhs)

    def __rsub__(self, other: Operand) -> "BigInt":
        lhs = _coerce(other)
        if lhs is None:
            return NotImplemented
        return subtract(lhs, self)

    def __mul__(self, other: Operand) -> "BigInt":
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return multiply(self, rhs)

    def __rmul__(self, other: Operand) -> "BigInt":
        lhs = _coerce(other)
        if lhs is None:
            return NotImplemented
        return multiply(lhs, self)

    def __floordiv__(self, other: Operand) -> "BigInt":
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return divide(self, rhs)

    def __rfloordiv__(self, other: Operand) -> "BigInt":
        lhs = _coerce(other)
        if lhs is None:
            return NotImplemented
        return divide(lhs, self)

    def __mod__(self, other: Operand) -> "BigInt":
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return modulo(self, rhs)

    def __rmod__(self, other: Operand) -> "BigInt":
        lhs = _coerce(other)
        if lhs is None:
            return NotImplemented
        return modulo(lhs, self)

    def __divmod__(self, other: Operand) -> tuple["BigInt", "BigInt"]:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return divide_with_remainder(self, rhs)

    def __rdivmod__(self, other: Operand) -> tuple["BigInt", "BigInt"]:
        lhs = _coerce(other)
        if lhs is None:
            return NotImplemented
        return divide_with_remainder(lhs, self)

    def __pow__(self, exponent: Union[int, "BigInt"], modulo=None) -> "BigInt":
        # three-argument pow() is not supported
        if modulo is not None:
            return NotImplemented
        if isinstance(exponent, bool) or not isinstance(exponent, (int, BigInt)):
            return NotImplemented
        return power(self, exponent)

    def __rpow__(self, base: int) -> "BigInt":
        lhs = _coerce(base)
        if lhs is None:
            return NotImplemented
        return power(lhs, self)


def _coerce(value: object) -> BigInt | None:
    """Accept BigInt or native int operands; None for anything else."""
    if isinstance(value, BigInt):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return BigInt.from_int(value)
    return None


def _coerce_exact(value: object) -> BigInt | None:
    """Like ``_coerce`` but without a capacity check, for comparisons.

    A native int of any size has a well-defined order against a BigInt,
    so comparing never raises CapacityExceededError.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        # bit_length // 3 + 1 bounds the decimal digit count from above
        return BigInt.from_int(value, DigitLimits(abs(value).bit_length() // 3 + 2))
    return _coerce(value)


def _result(
    negative: bool, magnitude: list[int], limits: DigitLimits, operation: str
) -> BigInt:
    """Wrap a computed magnitude, re-validating capacity and the zero sign."""
    limits.check(len(magnitude), operation)
    return BigInt(negative and not is_zero(magnitude), tuple(magnitude))


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------

def equals(a: BigInt, b: BigInt) -> bool:
    return a.negative == b.negative and a.digits == b.digits


def greater_than(a: BigInt, b: BigInt) -> bool:
    """Strict ``a > b``.

    Branches: CMP-SIGN, CMP-LENGTH, CMP-DIGITS, CMP-EQUAL
    """
    if a.negative != b.negative:                                  # CMP-SIGN
        return b.negative

    if len(a.digits) != len(b.digits):                            # CMP-LENGTH
        longer = len(a.digits) > len(b.digits)
        # a longer negative number is further below zero
        return not longer if a.negative else longer

    for i in range(len(a.digits) - 1, -1, -1):                    # CMP-DIGITS
        if a.digits[i] != b.digits[i]:
            bigger = a.digits[i] > b.digits[i]
            return not bigger if a.negative else bigger

    return False                                                  # CMP-EQUAL


def compare(a: BigInt, b: BigInt) -> int:
    """Three-way comparison: -1, 0 or 1."""
    if equals(a, b):
        return 0
    return 1 if greater_than(a, b) else -1


# ---------------------------------------------------------------------------
# Addition / subtraction
# ---------------------------------------------------------------------------

def add(a: BigInt, b: BigInt, limits: DigitLimits = DEFAULT_LIMITS) -> BigInt:
    """Signed addition.

    Branches: ADD-NEG-NEG, ADD-NEG-POS, ADD-POS-NEG, ADD-POS-POS
    """
    if a.negative and b.negative:                                 # ADD-NEG-NEG
        magnitude = add_magnitudes(a.digits, b.digits)
        negative = True
    elif a.negative:                                              # ADD-NEG-POS
        magnitude = sub_magnitudes(b.digits, a.digits)
        negative = compare_magnitudes(a.digits, b.digits) > 0
    elif b.negative:                                              # ADD-POS-NEG
        magnitude = sub_magnitudes(b.digits, a.digits)
        negative = compare_magnitudes(b.digits, a.digits) > 0
    else:                                                         # ADD-POS-POS
        magnitude = add_magnitudes(a.digits, b.digits)
        negative = False
    return _result(negative, magnitude, limits, "add")


def subtract(a: BigInt, b: BigInt, limits: DigitLimits = DEFAULT_LIMITS) -> BigInt:
    """Signed subtraction, the mirror image of ``add``'s sign table.

    Branches: SUB-NEG-NEG, SUB-NEG-POS, SUB-POS-NEG, SUB-POS-POS
    """
    if a.negative and b.negative:                                 # SUB-NEG-NEG
        magnitude = sub_magnitudes(b.digits, a.digits)
        negative = compare_magnitudes(a.digits, b.digits) > 0
    elif a.negative:                                              # SUB-NEG-POS
        magnitude = add_magnitudes(a.digits, b.digits)
        negative = True
    elif b.negative:                                              # SUB-POS-NEG
        magnitude = add_magnitudes(a.digits, b.digits)
        negative = False
    else:                                                         # SUB-POS-POS
        magnitude = sub_magnitudes(a.digits, b.digits)
        negative = compare_magnitudes(b.digits, a.digits) > 0
    return _result(negative, magnitude, limits, "subtract")


# ---------------------------------------------------------------------------
# Multiplication
# ---------------------------------------------------------------------------

def multiply(a: BigInt, b: BigInt, limits: DigitLimits = DEFAULT_LIMITS) -> BigInt:
    """Schoolbook multiplication.

    Branches: MUL-ZERO, MUL-SAME-SIGN, MUL-MIXED-SIGN
    """
    if a.is_zero() or b.is_zero():                                # MUL-ZERO
        return BigInt()
    magnitude = mul_magnitudes(a.digits, b.digits)
    # MUL-MIXED-SIGN when exactly one side is negative, else MUL-SAME-SIGN
    return _result(a.negative != b.negative, magnitude, limits, "multiply")


# ---------------------------------------------------------------------------
# Division
# ---------------------------------------------------------------------------

def divide_with_remainder(
    a: BigInt, b: BigInt, limits: DigitLimits = DEFAULT_LIMITS
) -> tuple[BigInt, BigInt]:
    """Truncating long division returning ``(quotient, remainder)``.

    The quotient is negative iff exactly one operand is; the remainder
    takes the dividend's sign.  Neither is ever a negative zero.

    Branches: DIV-ZERO, DIV-SMALLER, DIV-EQUAL, DIV-LONG
    """
    if b.is_zero():                                               # DIV-ZERO
        raise DivisionByZeroError(a.to_string())

    if compare_magnitudes(a.digits, b.digits) < 0:                # DIV-SMALLER
        return BigInt(), a

    if equals(a, b):                                              # DIV-EQUAL
        return BigInt.one(), BigInt()

    q, r = divmod_magnitudes(a.digits, b.digits)                  # DIV-LONG
    quotient = _result(a.negative != b.negative, q, limits, "divide")
    remainder = _result(a.negative, r, limits, "divide")
    return quotient, remainder


def divide(a: BigInt, b: BigInt, limits: DigitLimits = DEFAULT_LIMITS) -> BigInt:
    return divide_with_remainder(a, b, limits)[0]


def modulo(a: BigInt, b: BigInt, limits: DigitLimits = DEFAULT_LIMITS) -> BigInt:
    return divide_with_remainder(a, b, limits)[1]


# ---------------------------------------------------------------------------
# Exponentiation and roots
# ---------------------------------------------------------------------------

def power(
    base: BigInt, exponent: Union[int, BigInt], limits: DigitLimits = DEFAULT_LIMITS
) -> BigInt:
    """Raise ``base`` to a non-negative integer power by repeated multiplication.

    Performs ``exponent - 1`` multiplications; every intermediate product
    is capacity-checked so runaway growth fails early.

    Bases 0, 1 and -1 never grow, so they are answered directly instead
    of looping up to an arbitrarily large exponent.  For any other base a
    lower bound on the result's digit count is estimated first, and a
    result that cannot fit is rejected before any multiplication runs.

    Branches: POW-NEGATIVE, POW-ZERO, POW-ONE, POW-UNIT, POW-ESTIMATE,
              POW-REPEAT
    """
    if isinstance(exponent, BigInt):
        exponent = int(exponent)
    if isinstance(exponent, bool) or not isinstance(exponent, int):
        raise TypeError(f"exponent must be int, got {type(exponent).__name__}")

    if exponent < 0:                                              # POW-NEGATIVE
        raise InvalidExponentError(exponent)
    if exponent == 0:                                             # POW-ZERO
        return BigInt.one()
    if exponent == 1:                                             # POW-ONE
        return base
    if base.digits in ((0,), (1,)):                               # POW-UNIT
        return BigInt(base.negative and exponent % 2 == 1, base.digits)
    estimate = _power_digits_lower_bound(base, exponent, limits)
    if not limits.admits(estimate):                               # POW-ESTIMATE
        raise CapacityExceededError(estimate, limits.max_digits, "power")

    result = base                                                 # POW-REPEAT
    for _ in range(exponent - 1):
        result = multiply(result, base, limits)
    return result


def _power_digits_lower_bound(base: BigInt, exponent: int, limits: DigitLimits) -> int:
    """Digits ``base ** exponent`` has at least, for ``abs(base) >= 2``.

    Uses the 15 leading digits of the base, which never overstate its
    logarithm.  The exponent is clamped where even a base of 2 would blow
    through ``limits``; the bound only shrinks with it.
    """
    exponent = min(exponent, 4 * limits.max_digits)
    width = min(base.digit_count, 15)
    lead = 0
    for d in reversed(base.digits[-width:]):
        lead = lead * 10 + d
    log = math.log10(lead) + (base.digit_count - width)
    # shave a relative epsilon so float rounding cannot overshoot
    return int(exponent * log * (1 - 1e-9)) + 1


def isqrt(value: BigInt, limits: DigitLimits = DEFAULT_LIMITS) -> BigInt:
    """Integer square root, ``floor(sqrt(value))``, by Newton iteration.

    Branches: ISQRT-NEGATIVE, ISQRT-ZERO, ISQRT-NEWTON
    """
    if value.negative:                                            # ISQRT-NEGATIVE
        raise InvalidInputError(f"isqrt of negative number {value}")
    if value.is_zero():                                           # ISQRT-ZERO
        return value

    # ISQRT-NEWTON: start from 10**ceil(n/2), which is >= sqrt(value)
    half = (value.digit_count + 1) // 2
    x = BigInt(False, (0,) * half + (1,))
    two = BigInt(False, (2,))
    while True:
        y = divide(add(x, divide(value, x, limits), limits), two, limits)
        if not greater_than(x, y):
            return x
        x = y
