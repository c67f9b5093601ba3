"""Formal contract for the BigInt calculator.

Each operation is described as a collection of:
- postconditions: what the output must satisfy given valid inputs
- error conditions: what inputs must cause specific exceptions
- algebraic properties: mathematical relationships that must hold

Postconditions and error conditions are phrased over native ``int``
inputs and use Python's own integers as the oracle.  Algebraic
properties take a ``Calculator`` plus BigInt operands and never touch
the oracle, so they can vet an implementation on their own.

The contract is machine-readable.  The factory, the counterexample
search and the conformance tests all iterate over it.

Layers
------
OperationContract   per-operation contract (post/error/properties)
BranchSpec          every decision point that white-box tests must cover
CalculatorContract  the full contract for a configured calculator
build_contract()    constructs a CalculatorContract for given limits
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Callable

from errors import (
    CapacityExceededError,
    DivisionByZeroError,
    InvalidExponentError,
    InvalidInputError,
)
from limits import DEFAULT_LIMITS, DigitLimits


# ---------------------------------------------------------------------------
# Contract building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Postcondition:
    name: str
    description: str
    check: Callable[..., bool]      # (*inputs, result) -> bool


@dataclass(frozen=True)
class ErrorCondition:
    name: str
    description: str
    trigger: Callable[..., bool]    # (*inputs) -> bool
    exception: type


@dataclass(frozen=True)
class AlgebraicProperty:
    name: str
    description: str
    arity: int          # how many free BigInt operands the check needs
    check: Callable[..., bool]      # (calc, *operands) -> bool


@dataclass(frozen=True)
class OperationContract:
    name: str
    arity: int
    postconditions: list[Postcondition]
    error_conditions: list[ErrorCondition]
    properties: list[AlgebraicProperty]


@dataclass(frozen=True)
class BranchSpec:
    """A decision point in the implementation that must be exercised."""

    id: str
    description: str
    condition: str      # human-readable boolean expression
    operation: str      # which operation / helper this belongs to


@dataclass(frozen=True)
class CalculatorContract:
    """Complete contract for a calculator configured with ``limits``."""

    limits: DigitLimits
    operations: dict[str, OperationContract]
    branches: list[BranchSpec]

    @property
    def all_properties(self) -> list[tuple[str, AlgebraicProperty]]:
        out: list[tuple[str, AlgebraicProperty]] = []
        for name, op in self.operations.items():
            for prop in op.properties:
                out.append((name, prop))
        return out

    @property
    def all_postconditions(self) -> list[tuple[str, Postcondition]]:
        out: list[tuple[str, Postcondition]] = []
        for name, op in self.operations.items():
            for post in op.postconditions:
                out.append((name, post))
        return out

    def branch(self, branch_id: str) -> BranchSpec:
        for b in self.branches:
            if b.id == branch_id:
                return b
        raise KeyError(branch_id)


# ---------------------------------------------------------------------------
# Oracle helpers used inside the contract predicates
# ---------------------------------------------------------------------------

_CANONICAL_RE = re.compile(r"-?(0|[1-9][0-9]*)")


def truncdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero (not floor division).

    Python's ``//`` rounds toward negative infinity.  The BigInt engine
    truncates toward zero instead, like C, Java and Rust.
    """
    q, r = divmod(a, b)
    # divmod rounds toward -inf; adjust when the result is negative
    # and there is a remainder.
    if r != 0 and (a < 0) != (b < 0):
        q += 1
    return q


def truncmod(a: int, b: int) -> int:
    """Remainder matching ``truncdiv``; takes the sign of ``a``."""
    return a - b * truncdiv(a, b)


def digit_count(n: int) -> int:
    """Decimal digits in ``abs(n)``, without going through ``str()``.

    ``str()`` refuses ints past ``sys.get_int_max_str_digits()``, which
    is well below the default capacity.
    """
    n = abs(n)
    # log10(2) ~= 1233 / 4096 gives a lower bound on the count
    count = max(1, ((n.bit_length() - 1) * 1233) >> 12)
    while n >= 10 ** count:
        count += 1
    return count


def is_canonical(value: Any) -> bool:
    """True when ``str(value)`` has no stray zeros and no negative zero."""
    text = str(value)
    return _CANONICAL_RE.fullmatch(text) is not None and text != "-0"


def _is_floor_root(calc: Any, a: Any) -> bool:
    """r*r <= a < (r+1)*(r+1) where r = isqrt(a); vacuous for negative a."""
    if calc.parse(a).negative:
        return True
    r = calc.isqrt(a)
    s = calc.add(r, 1)
    return calc.mul(r, r) <= a < calc.mul(s, s)


# ---------------------------------------------------------------------------
# Branches
# ---------------------------------------------------------------------------

BRANCHES: list[BranchSpec] = [
    # Parsing (BigInt.from_string)
    BranchSpec("PARSE-EMPTY", "Empty string rejected", "text == ''", "parse"),
    BranchSpec("PARSE-LONE-SIGN", "Sign without digits rejected", "text == '-'", "parse"),
    BranchSpec("PARSE-NON-DIGIT", "Character outside 0-9 rejected",
               "not fullmatch('[0-9]+', body)", "parse"),
    BranchSpec("PARSE-LEADING-ZERO", "Multi-digit string starting with 0 rejected",
               "body[0] == '0' and len(body) > 1", "parse"),
    BranchSpec("PARSE-ZERO", "'0' or '-0' parsed as canonical zero",
               "body == '0'", "parse"),
    BranchSpec("PARSE-CAPACITY", "Too many digits rejected",
               "len(body) >= max_digits", "parse"),
    BranchSpec("PARSE-VALID", "Canonical non-zero string parsed",
               "body matches [1-9][0-9]*", "parse"),
    # Comparison (greater_than)
    BranchSpec("CMP-SIGN", "Signs differ, positive side is greater",
               "a.negative != b.negative", "cmp"),
    BranchSpec("CMP-LENGTH", "Same sign, digit counts differ",
               "len(a) != len(b)", "cmp"),
    BranchSpec("CMP-DIGITS", "Same sign and length, first differing digit decides",
               "len(a) == len(b) and a != b", "cmp"),
    BranchSpec("CMP-EQUAL", "Values equal, not greater", "a == b", "cmp"),
    # Addition sign table
    BranchSpec("ADD-NEG-NEG", "Both negative: add magnitudes, negative",
               "a < 0 and b < 0", "add"),
    BranchSpec("ADD-NEG-POS", "Negative plus non-negative: subtract magnitudes",
               "a < 0 and b >= 0", "add"),
    BranchSpec("ADD-POS-NEG", "Non-negative plus negative: subtract magnitudes",
               "a >= 0 and b < 0", "add"),
    BranchSpec("ADD-POS-POS", "Both non-negative: add magnitudes",
               "a >= 0 and b >= 0", "add"),
    # Subtraction sign table
    BranchSpec("SUB-NEG-NEG", "Both negative: subtract magnitudes",
               "a < 0 and b < 0", "sub"),
    BranchSpec("SUB-NEG-POS", "Negative minus non-negative: add, negative",
               "a < 0 and b >= 0", "sub"),
    BranchSpec("SUB-POS-NEG", "Non-negative minus negative: add, non-negative",
               "a >= 0 and b < 0", "sub"),
    BranchSpec("SUB-POS-POS", "Both non-negative: subtract magnitudes",
               "a >= 0 and b >= 0", "sub"),
    # Multiplication
    BranchSpec("MUL-ZERO", "Zero operand short-circuits", "a == 0 or b == 0", "mul"),
    BranchSpec("MUL-SAME-SIGN", "Signs agree, product non-negative",
               "(a < 0) == (b < 0)", "mul"),
    BranchSpec("MUL-MIXED-SIGN", "Signs differ, product negative",
               "(a < 0) != (b < 0)", "mul"),
    # Division
    BranchSpec("DIV-ZERO", "DivisionByZeroError on b == 0", "b == 0", "div"),
    BranchSpec("DIV-SMALLER", "|a| < |b|: quotient 0, remainder a",
               "abs(a) < abs(b)", "div"),
    BranchSpec("DIV-EQUAL", "a == b: quotient 1, remainder 0", "a == b", "div"),
    BranchSpec("DIV-LONG", "Long division with the multiples table",
               "abs(a) >= abs(b) and a != b", "div"),
    # Power
    BranchSpec("POW-NEGATIVE", "InvalidExponentError on n < 0", "n < 0", "pow"),
    BranchSpec("POW-ZERO", "a ** 0 == 1", "n == 0", "pow"),
    BranchSpec("POW-ONE", "a ** 1 == a", "n == 1", "pow"),
    BranchSpec("POW-UNIT", "Base 0, 1 or -1 answered without looping",
               "n >= 2 and abs(a) <= 1", "pow"),
    BranchSpec("POW-ESTIMATE", "Result rejected by its digit lower bound before multiplying",
               "n >= 2 and abs(a) >= 2 and estimated digits >= max_digits", "pow"),
    BranchSpec("POW-REPEAT", "n - 1 repeated multiplications",
               "n >= 2 and abs(a) >= 2", "pow"),
    # Integer square root
    BranchSpec("ISQRT-NEGATIVE", "InvalidInputError on a < 0", "a < 0", "isqrt"),
    BranchSpec("ISQRT-ZERO", "isqrt(0) == 0", "a == 0", "isqrt"),
    BranchSpec("ISQRT-NEWTON", "Newton iteration from 10**ceil(n/2)", "a > 0", "isqrt"),
    # Capacity re-validation after arithmetic
    BranchSpec("CAP-EXCEEDED", "Computed value reaches max_digits",
               "digit_count(result) >= max_digits", "capacity"),
]


# ---------------------------------------------------------------------------
# Contract builder
# ---------------------------------------------------------------------------

def build_contract(limits: DigitLimits = DEFAULT_LIMITS) -> CalculatorContract:
    """Construct the full calculator contract for the given limits."""

    def fits(n: int) -> bool:
        return limits.admits(digit_count(n))

    def overflow(name: str, raw: Callable[..., int]) -> ErrorCondition:
        return ErrorCondition(
            "capacity_exceeded",
            f"CapacityExceededError when the {name} has too many digits",
            lambda *args: not fits(raw(*args)),
            CapacityExceededError,
        )

    def exact(name: str, raw: Callable[..., int]) -> list[Postcondition]:
        return [
            Postcondition(
                "result_correct",
                f"Result equals the exact {name}",
                lambda *args: int(args[-1]) == raw(*args[:-1]),
            ),
            Postcondition(
                "result_canonical",
                "Result has no leading zeros and no negative zero",
                lambda *args: is_canonical(args[-1]),
            ),
            Postcondition(
                "result_within_limits",
                "Result digit count is below max_digits",
                lambda *args: limits.admits(args[-1].digit_count),
            ),
        ]

    # ---------------------------------------------------------------- parse
    parse_contract = OperationContract(
        name="parse",
        arity=1,
        postconditions=[
            Postcondition(
                "round_trip",
                "Formatting a parsed canonical string gives it back",
                lambda text, result: (
                    str(result) == text if text != "-0" else str(result) == "0"
                ),
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "invalid_input",
                "InvalidInputError when text is not -?(0|[1-9][0-9]*)",
                lambda text: _CANONICAL_RE.fullmatch(text) is None,
                InvalidInputError,
            ),
            ErrorCondition(
                "capacity_exceeded",
                "CapacityExceededError when the digit count reaches max_digits",
                lambda text: (
                    _CANONICAL_RE.fullmatch(text) is not None
                    and not limits.admits(len(text.lstrip("-")))
                    and text.lstrip("-") != "0"
                ),
                CapacityExceededError,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "round_trip", "parse(str(a)) == a", 1,
                lambda calc, a: calc.parse(str(a)) == a,
            ),
        ],
    )

    # ------------------------------------------------------------------ add
    add_contract = OperationContract(
        name="add",
        arity=2,
        postconditions=exact("sum", lambda a, b: a + b),
        error_conditions=[overflow("sum", lambda a, b: a + b)],
        properties=[
            AlgebraicProperty(
                "commutativity", "add(a, b) == add(b, a)", 2,
                lambda calc, a, b: calc.add(a, b) == calc.add(b, a),
            ),
            AlgebraicProperty(
                "identity", "add(a, 0) == a", 1,
                lambda calc, a: calc.add(a, 0) == a,
            ),
            AlgebraicProperty(
                "inverse", "add(a, neg(a)) == 0", 1,
                lambda calc, a: calc.add(a, calc.neg(a)) == 0,
            ),
            AlgebraicProperty(
                "associativity", "add(add(a, b), c) == add(a, add(b, c))", 3,
                lambda calc, a, b, c: (
                    calc.add(calc.add(a, b), c) == calc.add(a, calc.add(b, c))
                ),
            ),
        ],
    )

    # ------------------------------------------------------------------ sub
    sub_contract = OperationContract(
        name="sub",
        arity=2,
        postconditions=exact("difference", lambda a, b: a - b),
        error_conditions=[overflow("difference", lambda a, b: a - b)],
        properties=[
            AlgebraicProperty(
                "identity", "sub(a, 0) == a", 1,
                lambda calc, a: calc.sub(a, 0) == a,
            ),
            AlgebraicProperty(
                "self_inverse", "sub(a, a) == 0", 1,
                lambda calc, a: calc.sub(a, a) == 0,
            ),
            AlgebraicProperty(
                "anti_commutativity", "sub(a, b) == neg(sub(b, a))", 2,
                lambda calc, a, b: calc.sub(a, b) == calc.neg(calc.sub(b, a)),
            ),
            AlgebraicProperty(
                "undoes_add", "sub(add(a, b), b) == a", 2,
                lambda calc, a, b: calc.sub(calc.add(a, b), b) == a,
            ),
        ],
    )

    # ------------------------------------------------------------------ mul
    mul_contract = OperationContract(
        name="mul",
        arity=2,
        postconditions=exact("product", lambda a, b: a * b),
        error_conditions=[overflow("product", lambda a, b: a * b)],
        properties=[
            AlgebraicProperty(
                "commutativity", "mul(a, b) == mul(b, a)", 2,
                lambda calc, a, b: calc.mul(a, b) == calc.mul(b, a),
            ),
            AlgebraicProperty(
                "identity", "mul(a, 1) == a", 1,
                lambda calc, a: calc.mul(a, 1) == a,
            ),
            AlgebraicProperty(
                "zero", "mul(a, 0) == 0", 1,
                lambda calc, a: calc.mul(a, 0) == 0,
            ),
            AlgebraicProperty(
                "associativity", "mul(mul(a, b), c) == mul(a, mul(b, c))", 3,
                lambda calc, a, b, c: (
                    calc.mul(calc.mul(a, b), c) == calc.mul(a, calc.mul(b, c))
                ),
            ),
            AlgebraicProperty(
                "distributivity", "mul(a, add(b, c)) == add(mul(a, b), mul(a, c))", 3,
                lambda calc, a, b, c: (
                    calc.mul(a, calc.add(b, c))
                    == calc.add(calc.mul(a, b), calc.mul(a, c))
                ),
            ),
        ],
    )

    # ------------------------------------------------------------------ div
    div_errors = [
        ErrorCondition(
            "div_by_zero_error",
            "DivisionByZeroError when divisor is zero",
            lambda a, b: b == 0,
            DivisionByZeroError,
        ),
    ]

    div_contract = OperationContract(
        name="div",
        arity=2,
        postconditions=exact("truncating quotient", truncdiv),
        error_conditions=div_errors,
        properties=[
            AlgebraicProperty(
                "identity", "div(a, 1) == a", 1,
                lambda calc, a: calc.div(a, 1) == a,
            ),
            AlgebraicProperty(
                "self", "div(a, a) == 1 for a != 0", 1,
                lambda calc, a: a == 0 or calc.div(a, a) == 1,
            ),
            AlgebraicProperty(
                "zero_numerator", "div(0, b) == 0 for b != 0", 1,
                lambda calc, b: b == 0 or calc.div(0, b) == 0,
            ),
            AlgebraicProperty(
                "truncation_toward_zero", "abs(div(a, b)) <= abs(a)", 2,
                lambda calc, a, b: b == 0 or calc.abs(calc.div(a, b)) <= calc.abs(a),
            ),
        ],
    )

    mod_contract = OperationContract(
        name="mod",
        arity=2,
        postconditions=exact("truncating remainder", truncmod),
        error_conditions=div_errors,
        properties=[
            AlgebraicProperty(
                "bounded", "abs(mod(a, b)) < abs(b)", 2,
                lambda calc, a, b: b == 0 or calc.abs(calc.mod(a, b)) < calc.abs(b),
            ),
            AlgebraicProperty(
                "dividend_sign", "mod(a, b) is 0 or has the sign of a", 2,
                lambda calc, a, b: (
                    b == 0
                    or calc.mod(a, b) == 0
                    or calc.mod(a, b).negative == calc.parse(a).negative
                ),
            ),
        ],
    )

    divmod_contract = OperationContract(
        name="divmod",
        arity=2,
        postconditions=[
            Postcondition(
                "result_correct",
                "(quotient, remainder) equal truncdiv/truncmod",
                lambda a, b, result: (
                    (int(result[0]), int(result[1])) == (truncdiv(a, b), truncmod(a, b))
                ),
            ),
            Postcondition(
                "result_canonical",
                "Neither part is a negative zero or has leading zeros",
                lambda a, b, result: is_canonical(result[0]) and is_canonical(result[1]),
            ),
        ],
        error_conditions=div_errors,
        properties=[
            AlgebraicProperty(
                "division_identity", "q * b + r == a", 2,
                lambda calc, a, b: b == 0 or (
                    calc.add(calc.mul(calc.divmod(a, b)[0], b), calc.divmod(a, b)[1]) == a
                ),
            ),
        ],
    )

    # ------------------------------------------------------------------ pow
    pow_contract = OperationContract(
        name="pow",
        arity=2,
        postconditions=exact("power", lambda a, n: a ** n),
        error_conditions=[
            ErrorCondition(
                "invalid_exponent",
                "InvalidExponentError when exponent is negative",
                lambda a, n: n < 0,
                InvalidExponentError,
            ),
            ErrorCondition(
                "capacity_exceeded",
                "CapacityExceededError when the power has too many digits",
                lambda a, n: n >= 0 and not fits(a ** n),
                CapacityExceededError,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "zero_exponent", "pow(a, 0) == 1", 1,
                lambda calc, a: calc.pow(a, 0) == 1,
            ),
            AlgebraicProperty(
                "one_exponent", "pow(a, 1) == a", 1,
                lambda calc, a: calc.pow(a, 1) == a,
            ),
            AlgebraicProperty(
                "recurrence", "pow(a, n) == mul(pow(a, n - 1), a) for n in 2..4", 1,
                lambda calc, a: all(
                    calc.pow(a, n) == calc.mul(calc.pow(a, n - 1), a)
                    for n in range(2, 5)
                ),
            ),
        ],
    )

    # ------------------------------------------------------------------ cmp
    cmp_contract = OperationContract(
        name="cmp",
        arity=2,
        postconditions=[
            Postcondition(
                "result_correct",
                "cmp(a, b) is the sign of a - b",
                lambda a, b, result: result == (a > b) - (a < b),
            ),
        ],
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "totality", "exactly one of a < b, a == b, a > b", 2,
                lambda calc, a, b: [a < b, a == b, a > b].count(True) == 1,
            ),
            AlgebraicProperty(
                "antisymmetry", "cmp(a, b) == -cmp(b, a)", 2,
                lambda calc, a, b: calc.cmp(a, b) == -calc.cmp(b, a),
            ),
            AlgebraicProperty(
                "transitivity", "a <= b and b <= c implies a <= c", 3,
                lambda calc, a, b, c: not (a <= b and b <= c) or a <= c,
            ),
        ],
    )

    # ---------------------------------------------------------------- unary
    abs_contract = OperationContract(
        name="abs",
        arity=1,
        postconditions=exact("absolute value", abs),
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "non_negative", "abs(a) >= 0", 1,
                lambda calc, a: not calc.abs(a).negative,
            ),
        ],
    )

    neg_contract = OperationContract(
        name="neg",
        arity=1,
        postconditions=exact("negation", lambda a: -a),
        error_conditions=[],
        properties=[
            AlgebraicProperty(
                "involution", "neg(neg(a)) == a", 1,
                lambda calc, a: calc.neg(calc.neg(a)) == a,
            ),
        ],
    )

    isqrt_contract = OperationContract(
        name="isqrt",
        arity=1,
        postconditions=exact("integer square root", math.isqrt),
        error_conditions=[
            ErrorCondition(
                "negative_input",
                "InvalidInputError when the input is negative",
                lambda a: a < 0,
                InvalidInputError,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "floor_root", "r*r <= a < (r+1)*(r+1) for a >= 0", 1,
                _is_floor_root,
            ),
        ],
    )

    return CalculatorContract(
        limits=limits,
        operations={
            "parse": parse_contract,
            "add": add_contract,
            "sub": sub_contract,
            "mul": mul_contract,
            "div": div_contract,
            "mod": mod_contract,
            "divmod": divmod_contract,
            "pow": pow_contract,
            "cmp": cmp_contract,
            "abs": abs_contract,
            "neg": neg_contract,
            "isqrt": isqrt_contract,
        },
        branches=BRANCHES,
    )
