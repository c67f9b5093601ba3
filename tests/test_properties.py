"""
Property-based tests using Hypothesis.

Native Python ints are the oracle: every BigInt result must match the
exact integer result (with truncating division) and must format in
canonical form.  Operands reach well past 64-bit range.
"""

from __future__ import annotations

import math

from hypothesis import given, settings
from hypothesis import strategies as st
from hypothesis.strategies import integers

from bigint import BigInt
from contract import truncdiv, truncmod

LIMIT = 10**60

ints = integers(min_value=-LIMIT, max_value=LIMIT)
nonzero = ints.filter(lambda n: n != 0)


def canonical_strings():
    """Strings of the form -?(0|[1-9][0-9]*)."""
    body = st.one_of(
        st.just("0"),
        st.builds(
            lambda head, tail: head + tail,
            st.sampled_from("123456789"),
            st.text(alphabet="0123456789", max_size=80),
        ),
    )
    return st.builds(
        lambda sign, b: sign + b if b != "0" else b,
        st.sampled_from(["", "-"]),
        body,
    )


def B(n: int) -> BigInt:
    return BigInt.from_int(n)


# ---------------------------------------------------------------------------
# Construction and formatting
# ---------------------------------------------------------------------------

class TestRoundTrip:

    @given(text=canonical_strings())
    def test_string_round_trip(self, text):
        assert str(BigInt.from_string(text)) == text

    @given(n=ints)
    def test_int_round_trip(self, n):
        assert int(B(n)) == n

    @given(n=ints)
    def test_str_matches_int(self, n):
        assert str(B(n)) == str(n)

    @given(n=ints)
    def test_digit_count(self, n):
        assert B(n).digit_count == len(str(abs(n)))

    @given(n=ints)
    def test_hash_consistent_with_int(self, n):
        assert hash(B(n)) == hash(n)


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------

class TestComparisonProperties:

    @given(a=ints, b=ints)
    def test_matches_int_ordering(self, a, b):
        x, y = B(a), B(b)
        assert (x < y) == (a < b)
        assert (x == y) == (a == b)
        assert (x > y) == (a > b)

    @given(a=ints, b=ints)
    def test_totality(self, a, b):
        x, y = B(a), B(b)
        assert [x < y, x == y, x > y].count(True) == 1

    @given(a=ints, b=ints, c=ints)
    def test_transitivity(self, a, b, c):
        x, y, z = sorted([B(a), B(b), B(c)])
        assert x <= y <= z
        assert x <= z


# ---------------------------------------------------------------------------
# Arithmetic against the oracle
# ---------------------------------------------------------------------------

class TestArithmeticOracle:

    @given(a=ints, b=ints)
    def test_add(self, a, b):
        assert int(B(a) + B(b)) == a + b

    @given(a=ints, b=ints)
    def test_subtract(self, a, b):
        assert int(B(a) - B(b)) == a - b

    @given(a=ints, b=ints)
    def test_multiply(self, a, b):
        assert int(B(a) * B(b)) == a * b

    @given(a=ints, b=nonzero)
    def test_divide_truncates(self, a, b):
        assert int(B(a) // B(b)) == truncdiv(a, b)

    @given(a=ints, b=nonzero)
    def test_modulo_takes_dividend_sign(self, a, b):
        assert int(B(a) % B(b)) == truncmod(a, b)

    @given(a=integers(min_value=-10**6, max_value=10**6),
           n=integers(min_value=0, max_value=12))
    def test_power(self, a, n):
        assert int(B(a) ** n) == a ** n

    @given(a=integers(min_value=0, max_value=LIMIT))
    @settings(deadline=None)
    def test_isqrt(self, a):
        assert int(B(a).isqrt()) == math.isqrt(a)


# ---------------------------------------------------------------------------
# Algebraic laws
# ---------------------------------------------------------------------------

class TestAlgebraicLaws:

    @given(a=ints, b=ints)
    def test_add_commutative(self, a, b):
        assert B(a) + B(b) == B(b) + B(a)

    @given(a=ints, b=ints, c=ints)
    def test_add_associative(self, a, b, c):
        assert (B(a) + B(b)) + B(c) == B(a) + (B(b) + B(c))

    @given(a=ints, b=ints)
    def test_mul_commutative(self, a, b):
        assert B(a) * B(b) == B(b) * B(a)

    @given(a=ints, b=ints, c=ints)
    @settings(deadline=None)
    def test_mul_associative(self, a, b, c):
        assert (B(a) * B(b)) * B(c) == B(a) * (B(b) * B(c))

    @given(a=ints)
    def test_identities(self, a):
        x = B(a)
        assert x + 0 == x
        assert x * 1 == x
        assert x * 0 == 0

    @given(a=ints, b=nonzero)
    def test_division_identity(self, a, b):
        x, y = B(a), B(b)
        q, r = divmod(x, y)
        assert q * y + r == x
        assert abs(r) < abs(y)

    @given(a=ints, b=nonzero)
    def test_no_negative_zero(self, a, b):
        q, r = divmod(B(a), B(b))
        for value in (q, r, B(a) - B(a), B(a) * 0):
            assert str(value) != "-0"

    @given(a=integers(min_value=-999, max_value=999),
           n=integers(min_value=1, max_value=10))
    def test_exponent_recurrence(self, a, n):
        x = B(a)
        assert x ** 0 == 1
        assert x ** 1 == x
        assert x ** n == x ** (n - 1) * x

    @given(a=ints, b=ints)
    def test_sub_undoes_add(self, a, b):
        assert (B(a) + B(b)) - B(b) == B(a)
