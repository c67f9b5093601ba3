"""Configured BigInt calculator.

Every operation coerces its operands under the calculator's digit
limits, runs the BigInt engine with those limits, and returns a fresh
BigInt.  Operands may be BigInt values, native ints or decimal strings,
so callers such as the HTTP layer can pass user text straight through.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Union

import bigint
from bigint import BigInt
from limits import DEFAULT_LIMITS, DigitLimits

logger = logging.getLogger(__name__)

Value = Union[BigInt, int, str]


@dataclass(frozen=True)
class Calculator:
    limits: DigitLimits = DEFAULT_LIMITS

    # -- internal helpers ---------------------------------------------------

    def parse(self, value: Value) -> BigInt:
        """Turn an operand into a BigInt that fits this calculator's limits."""
        if isinstance(value, BigInt):
            self.limits.check(value.digit_count, "operand")
            return value
        if isinstance(value, str):
            return BigInt.from_string(value, self.limits)
        return BigInt.from_int(value, self.limits)

    def _binary(
        self,
        name: str,
        fn: Callable[[BigInt, BigInt, DigitLimits], BigInt],
        a: Value,
        b: Value,
    ) -> BigInt:
        lhs, rhs = self.parse(a), self.parse(b)
        result = fn(lhs, rhs, self.limits)
        logger.debug("%s(%s digits, %s digits) -> %s digits",
                     name, lhs.digit_count, rhs.digit_count, result.digit_count)
        return result

    # -- public operations --------------------------------------------------

    def add(self, a: Value, b: Value) -> BigInt:
        return self._binary("add", bigint.add, a, b)

    def sub(self, a: Value, b: Value) -> BigInt:
        return self._binary("sub", bigint.subtract, a, b)

    def mul(self, a: Value, b: Value) -> BigInt:
        return self._binary("mul", bigint.multiply, a, b)

    def div(self, a: Value, b: Value) -> BigInt:
        """Quotient truncated toward zero."""
        return self._binary("div", bigint.divide, a, b)

    def mod(self, a: Value, b: Value) -> BigInt:
        """Remainder of the truncating division; carries the dividend's sign."""
        return self._binary("mod", bigint.modulo, a, b)

    def divmod(self, a: Value, b: Value) -> tuple[BigInt, BigInt]:
        lhs, rhs = self.parse(a), self.parse(b)
        return bigint.divide_with_remainder(lhs, rhs, self.limits)

    def pow(self, base: Value, exponent: Union[int, str, BigInt]) -> BigInt:
        """Repeated-multiplication power (exponent >= 0 only)."""
        lhs = self.parse(base)
        exp = self.parse(exponent) if isinstance(exponent, str) else exponent
        result = bigint.power(lhs, exp, self.limits)
        logger.debug("pow(%s digits, %s) -> %s digits",
                     lhs.digit_count, exp, result.digit_count)
        return result

    def cmp(self, a: Value, b: Value) -> int:
        return bigint.compare(self.parse(a), self.parse(b))

    def abs(self, a: Value) -> BigInt:
        return self.parse(a).abs()

    def neg(self, a: Value) -> BigInt:
        return -self.parse(a)

    def isqrt(self, a: Value) -> BigInt:
        return bigint.isqrt(self.parse(a), self.limits)
