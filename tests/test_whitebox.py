"""White-box tests for the BigInt engine.

Each test class targets specific decision branches annotated in
``bigint.py`` (see ``contract.BRANCHES``).  A coverage matrix at the
bottom of this file records which test covers which branch, and the
last test checks that every declared branch appears in it.

Naming convention
-----------------
test_<branch_id_lowercase>_<scenario>
"""
from __future__ import annotations

import pytest

from bigint import (
    BigInt,
    add,
    divide_with_remainder,
    greater_than,
    isqrt,
    multiply,
    power,
    subtract,
)
from contract import BRANCHES
from errors import (
    CapacityExceededError,
    DivisionByZeroError,
    InvalidExponentError,
    InvalidInputError,
)
from limits import TINY


def big(text: str) -> BigInt:
    return BigInt.from_string(text)


# ===================================================================
# PARSING  (PARSE-*)
# ===================================================================

class TestParse:

    def test_parse_empty(self):
        """Branch: PARSE-EMPTY."""
        with pytest.raises(InvalidInputError):
            BigInt.from_string("")

    def test_parse_lone_sign(self):
        """Branch: PARSE-LONE-SIGN."""
        with pytest.raises(InvalidInputError):
            BigInt.from_string("-")

    def test_parse_non_digit_letter(self):
        """Branch: PARSE-NON-DIGIT."""
        with pytest.raises(InvalidInputError):
            BigInt.from_string("12a3")

    def test_parse_non_digit_unicode_digit(self):
        """Branch: PARSE-NON-DIGIT - only ASCII 0-9 count as digits."""
        with pytest.raises(InvalidInputError):
            BigInt.from_string("١٢")

    def test_parse_leading_zero(self):
        """Branch: PARSE-LEADING-ZERO."""
        with pytest.raises(InvalidInputError):
            BigInt.from_string("0123")

    def test_parse_zero_plain(self):
        """Branch: PARSE-ZERO."""
        assert BigInt.from_string("0") == BigInt()

    def test_parse_zero_signed(self):
        """Branch: PARSE-ZERO - '-0' collapses to canonical zero."""
        value = BigInt.from_string("-0")
        assert not value.negative

    def test_parse_capacity(self):
        """Branch: PARSE-CAPACITY."""
        with pytest.raises(CapacityExceededError):
            BigInt.from_string("-1234", TINY)

    def test_parse_valid(self):
        """Branch: PARSE-VALID."""
        value = BigInt.from_string("-999", TINY)
        assert value.negative
        assert value.digits == (9, 9, 9)


# ===================================================================
# COMPARISON  (CMP-*)
# ===================================================================

class TestCompare:

    def test_cmp_sign_positive_side(self):
        """Branch: CMP-SIGN."""
        assert greater_than(big("1"), big("-100"))

    def test_cmp_sign_negative_side(self):
        """Branch: CMP-SIGN."""
        assert not greater_than(big("-100"), big("1"))

    def test_cmp_length_positive(self):
        """Branch: CMP-LENGTH - longer positive is greater."""
        assert greater_than(big("100"), big("99"))

    def test_cmp_length_negative(self):
        """Branch: CMP-LENGTH - longer negative is smaller."""
        assert not greater_than(big("-100"), big("-99"))
        assert greater_than(big("-99"), big("-100"))

    def test_cmp_digits_positive(self):
        """Branch: CMP-DIGITS."""
        assert greater_than(big("521"), big("519"))

    def test_cmp_digits_negative(self):
        """Branch: CMP-DIGITS - inverted under a negative sign."""
        assert greater_than(big("-519"), big("-521"))

    def test_cmp_equal(self):
        """Branch: CMP-EQUAL."""
        assert not greater_than(big("-77"), big("-77"))


# ===================================================================
# ADDITION  (ADD-*)
# ===================================================================

class TestAdd:

    def test_add_neg_neg(self):
        """Branch: ADD-NEG-NEG."""
        assert add(big("-5"), big("-7")) == -12

    def test_add_neg_pos_negative_result(self):
        """Branch: ADD-NEG-POS - |a| > |b|."""
        assert add(big("-10"), big("3")) == -7

    def test_add_neg_pos_positive_result(self):
        """Branch: ADD-NEG-POS - |a| < |b|."""
        assert add(big("-3"), big("10")) == 7

    def test_add_neg_pos_cancel(self):
        """Branch: ADD-NEG-POS - cancellation gives plain zero."""
        result = add(big("-10"), big("10"))
        assert result == 0 and not result.negative

    def test_add_pos_neg_negative_result(self):
        """Branch: ADD-POS-NEG."""
        assert add(big("3"), big("-10")) == -7

    def test_add_pos_neg_positive_result(self):
        """Branch: ADD-POS-NEG."""
        assert add(big("10"), big("-3")) == 7

    def test_add_pos_pos(self):
        """Branch: ADD-POS-POS - carry grows the length."""
        assert add(big("999"), big("1")) == 1000


# ===================================================================
# SUBTRACTION  (SUB-*)
# ===================================================================

class TestSubtract:

    def test_sub_neg_neg_positive_result(self):
        """Branch: SUB-NEG-NEG - |a| < |b|."""
        assert subtract(big("-3"), big("-10")) == 7

    def test_sub_neg_neg_negative_result(self):
        """Branch: SUB-NEG-NEG - |a| > |b|."""
        assert subtract(big("-10"), big("-3")) == -7

    def test_sub_neg_pos(self):
        """Branch: SUB-NEG-POS."""
        assert subtract(big("-5"), big("7")) == -12

    def test_sub_pos_neg(self):
        """Branch: SUB-POS-NEG."""
        assert subtract(big("5"), big("-7")) == 12

    def test_sub_pos_pos_borrow(self):
        """Branch: SUB-POS-POS."""
        assert subtract(big("1000"), big("1")) == 999

    def test_sub_pos_pos_negative_result(self):
        """Branch: SUB-POS-POS - |a| < |b|."""
        assert subtract(big("1"), big("1000")) == -999


# ===================================================================
# MULTIPLICATION  (MUL-*)
# ===================================================================

class TestMultiply:

    def test_mul_zero_left(self):
        """Branch: MUL-ZERO."""
        assert multiply(BigInt(), big("-5")) == 0

    def test_mul_zero_right(self):
        """Branch: MUL-ZERO - never a negative zero."""
        result = multiply(big("-5"), BigInt())
        assert not result.negative

    def test_mul_same_sign(self):
        """Branch: MUL-SAME-SIGN."""
        assert multiply(big("-12"), big("-12")) == 144

    def test_mul_mixed_sign(self):
        """Branch: MUL-MIXED-SIGN."""
        assert multiply(big("12"), big("-12")) == -144


# ===================================================================
# DIVISION  (DIV-*)
# ===================================================================

class TestDivide:

    def test_div_zero(self):
        """Branch: DIV-ZERO."""
        with pytest.raises(DivisionByZeroError):
            divide_with_remainder(big("5"), BigInt())

    def test_div_zero_dividend_zero(self):
        """Branch: DIV-ZERO - 0 / 0 is still an error."""
        with pytest.raises(DivisionByZeroError):
            divide_with_remainder(BigInt(), BigInt())

    def test_div_smaller(self):
        """Branch: DIV-SMALLER."""
        assert divide_with_remainder(big("7"), big("100")) == (0, 7)

    def test_div_smaller_negative(self):
        """Branch: DIV-SMALLER - remainder keeps the dividend."""
        assert divide_with_remainder(big("-7"), big("100")) == (0, -7)

    def test_div_equal(self):
        """Branch: DIV-EQUAL."""
        assert divide_with_remainder(big("-123"), big("-123")) == (1, 0)

    def test_div_long_positive(self):
        """Branch: DIV-LONG."""
        assert divide_with_remainder(big("100"), big("7")) == (14, 2)

    def test_div_long_negative_dividend(self):
        """Branch: DIV-LONG - remainder takes the dividend's sign."""
        assert divide_with_remainder(big("-100"), big("7")) == (-14, -2)

    def test_div_long_exact_negative(self):
        """Branch: DIV-LONG - zero remainder is never negative."""
        q, r = divide_with_remainder(big("-100"), big("10"))
        assert q == -10
        assert not r.negative


# ===================================================================
# POWER  (POW-*)
# ===================================================================

class TestPower:

    def test_pow_negative(self):
        """Branch: POW-NEGATIVE."""
        with pytest.raises(InvalidExponentError):
            power(big("2"), -3)

    def test_pow_zero(self):
        """Branch: POW-ZERO."""
        assert power(big("-987"), 0) == 1

    def test_pow_one(self):
        """Branch: POW-ONE."""
        assert power(big("-987"), 1) == -987

    def test_pow_unit_minus_one_odd(self):
        """Branch: POW-UNIT."""
        assert power(big("-1"), 10**12 + 1) == -1

    def test_pow_unit_zero(self):
        """Branch: POW-UNIT."""
        assert power(BigInt(), 10**12) == 0

    def test_pow_repeat(self):
        """Branch: POW-REPEAT."""
        assert power(big("2"), 10) == 1024

    def test_pow_repeat_overflow(self):
        """Branch: POW-REPEAT - capacity checked on each step.

        10 ** 3 sits exactly on an integer logarithm, where the digit
        estimate stays one short and the loop itself must reject it.
        """
        with pytest.raises(CapacityExceededError) as exc:
            power(big("10"), 3, TINY)
        assert exc.value.operation == "multiply"

    def test_pow_estimate_huge_exponent(self):
        """Branch: POW-ESTIMATE."""
        with pytest.raises(CapacityExceededError) as exc:
            power(big("2"), 10**12, TINY)
        assert exc.value.operation == "power"

    def test_pow_estimate_default_limits(self):
        """Branch: POW-ESTIMATE - rejected without a billion multiplications."""
        with pytest.raises(CapacityExceededError) as exc:
            power(big("-2"), 1_000_000_000)
        assert exc.value.operation == "power"
        assert exc.value.digit_count >= 10_000

    def test_pow_estimate_admits_largest_fit(self):
        """Branch: POW-ESTIMATE - 99 ** 2 has 4 digits, 9 ** 3 has 3."""
        with pytest.raises(CapacityExceededError) as exc:
            power(big("99"), 2, TINY)
        assert exc.value.operation == "power"
        assert power(big("9"), 3, TINY) == 729


# ===================================================================
# INTEGER SQUARE ROOT  (ISQRT-*)
# ===================================================================

class TestIsqrt:

    def test_isqrt_negative(self):
        """Branch: ISQRT-NEGATIVE."""
        with pytest.raises(InvalidInputError):
            isqrt(big("-1"))

    def test_isqrt_zero(self):
        """Branch: ISQRT-ZERO."""
        assert isqrt(BigInt()) == 0

    def test_isqrt_newton(self):
        """Branch: ISQRT-NEWTON."""
        assert isqrt(big("99980001")) == 9999

    def test_isqrt_newton_tiny_limits(self):
        """Branch: ISQRT-NEWTON - the start value fits TINY limits."""
        assert isqrt(BigInt.from_string("999", TINY), TINY) == 31


# ===================================================================
# CAPACITY  (CAP-*)
# ===================================================================

class TestCapacity:

    def test_cap_exceeded_add(self):
        """Branch: CAP-EXCEEDED."""
        with pytest.raises(CapacityExceededError) as exc:
            add(big("999"), big("1"), TINY)
        assert exc.value.digit_count == 4

    def test_cap_exceeded_multiply(self):
        """Branch: CAP-EXCEEDED."""
        with pytest.raises(CapacityExceededError):
            multiply(big("-100"), big("10"), TINY)

    def test_cap_exceeded_subtract(self):
        """Branch: CAP-EXCEEDED."""
        with pytest.raises(CapacityExceededError):
            subtract(big("-999"), big("1"), TINY)


# ===================================================================
# BRANCH COVERAGE MATRIX
# ===================================================================
# Maps each branch-ID to the test(s) that exercise it.
# External tooling can cross-check this against real coverage data.

BRANCH_COVERAGE = {
    "PARSE-EMPTY": ["TestParse::test_parse_empty"],
    "PARSE-LONE-SIGN": ["TestParse::test_parse_lone_sign"],
    "PARSE-NON-DIGIT": [
        "TestParse::test_parse_non_digit_letter",
        "TestParse::test_parse_non_digit_unicode_digit",
    ],
    "PARSE-LEADING-ZERO": ["TestParse::test_parse_leading_zero"],
    "PARSE-ZERO": [
        "TestParse::test_parse_zero_plain",
        "TestParse::test_parse_zero_signed",
    ],
    "PARSE-CAPACITY": ["TestParse::test_parse_capacity"],
    "PARSE-VALID": ["TestParse::test_parse_valid"],
    "CMP-SIGN": [
        "TestCompare::test_cmp_sign_positive_side",
        "TestCompare::test_cmp_sign_negative_side",
    ],
    "CMP-LENGTH": [
        "TestCompare::test_cmp_length_positive",
        "TestCompare::test_cmp_length_negative",
    ],
    "CMP-DIGITS": [
        "TestCompare::test_cmp_digits_positive",
        "TestCompare::test_cmp_digits_negative",
    ],
    "CMP-EQUAL": ["TestCompare::test_cmp_equal"],
    "ADD-NEG-NEG": ["TestAdd::test_add_neg_neg"],
    "ADD-NEG-POS": [
        "TestAdd::test_add_neg_pos_negative_result",
        "TestAdd::test_add_neg_pos_positive_result",
        "TestAdd::test_add_neg_pos_cancel",
    ],
    "ADD-POS-NEG": [
        "TestAdd::test_add_pos_neg_negative_result",
        "TestAdd::test_add_pos_neg_positive_result",
    ],
    "ADD-POS-POS": ["TestAdd::test_add_pos_pos"],
    "SUB-NEG-NEG": [
        "TestSubtract::test_sub_neg_neg_positive_result",
        "TestSubtract::test_sub_neg_neg_negative_result",
    ],
    "SUB-NEG-POS": ["TestSubtract::test_sub_neg_pos"],
    "SUB-POS-NEG": ["TestSubtract::test_sub_pos_neg"],
    "SUB-POS-POS": [
        "TestSubtract::test_sub_pos_pos_borrow",
        "TestSubtract::test_sub_pos_pos_negative_result",
    ],
    "MUL-ZERO": [
        "TestMultiply::test_mul_zero_left",
        "TestMultiply::test_mul_zero_right",
    ],
    "MUL-SAME-SIGN": ["TestMultiply::test_mul_same_sign"],
    "MUL-MIXED-SIGN": ["TestMultiply::test_mul_mixed_sign"],
    "DIV-ZERO": [
        "TestDivide::test_div_zero",
        "TestDivide::test_div_zero_dividend_zero",
    ],
    "DIV-SMALLER": [
        "TestDivide::test_div_smaller",
        "TestDivide::test_div_smaller_negative",
    ],
    "DIV-EQUAL": ["TestDivide::test_div_equal"],
    "DIV-LONG": [
        "TestDivide::test_div_long_positive",
        "TestDivide::test_div_long_negative_dividend",
        "TestDivide::test_div_long_exact_negative",
    ],
    "POW-NEGATIVE": ["TestPower::test_pow_negative"],
    "POW-ZERO": ["TestPower::test_pow_zero"],
    "POW-ONE": ["TestPower::test_pow_one"],
    "POW-UNIT": [
        "TestPower::test_pow_unit_minus_one_odd",
        "TestPower::test_pow_unit_zero",
    ],
    "POW-ESTIMATE": [
        "TestPower::test_pow_estimate_huge_exponent",
        "TestPower::test_pow_estimate_default_limits",
        "TestPower::test_pow_estimate_admits_largest_fit",
    ],
    "POW-REPEAT": [
        "TestPower::test_pow_repeat",
        "TestPower::test_pow_repeat_overflow",
    ],
    "ISQRT-NEGATIVE": ["TestIsqrt::test_isqrt_negative"],
    "ISQRT-ZERO": ["TestIsqrt::test_isqrt_zero"],
    "ISQRT-NEWTON": [
        "TestIsqrt::test_isqrt_newton",
        "TestIsqrt::test_isqrt_newton_tiny_limits",
    ],
    "CAP-EXCEEDED": [
        "TestCapacity::test_cap_exceeded_add",
        "TestCapacity::test_cap_exceeded_multiply",
        "TestCapacity::test_cap_exceeded_subtract",
    ],
}


def test_every_branch_has_coverage():
    declared = {b.id for b in BRANCHES}
    assert declared == set(BRANCH_COVERAGE)


def test_coverage_matrix_names_real_tests():
    for branch_id, tests in BRANCH_COVERAGE.items():
        for name in tests:
            cls_name, test_name = name.split("::")
            cls = globals()[cls_name]
            assert hasattr(cls, test_name), f"{branch_id}: missing {name}"
