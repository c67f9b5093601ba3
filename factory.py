"""
The calculator factory.

The factory does NOT just construct calculators - it *verifies* them
against the contract for the requested limits before releasing them.

Flow:
  1. Caller requests a calculator for a given DigitLimits.
  2. Factory builds the Calculator.
  3. Factory checks every algebraic property and postcondition of the
     contract over edge values plus a seeded random sample.
  4. If verification passes  -> return the calculator.
     If verification fails   -> raise, never hand out a broken instance.

Values with thousands of digits make exhaustive checking impossible, so
operands are drawn from numbers short enough to keep verification fast
while still crossing every carry, borrow and sign boundary.  Limits
narrower than that width are also checked right at the capacity edge.
"""

from __future__ import annotations

import itertools
import logging
import random
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar

from bigint import BigInt
from calculator import Calculator
from contract import (
    AlgebraicProperty,
    CalculatorContract,
    Postcondition,
    build_contract,
)
from limits import DEFAULT_LIMITS, DigitLimits

logger = logging.getLogger(__name__)


@dataclass
class VerificationResult:
    """Outcome of verifying one property or postcondition."""

    check_name: str
    passed: bool
    counterexample: tuple | None = None
    tests_run: int = 0

    def __repr__(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        ce = f"  counterexample={self.counterexample}" if self.counterexample else ""
        return f"[{status}] {self.check_name} ({self.tests_run} tests){ce}"


@dataclass
class VerificationReport:
    """Aggregate result of verifying one operation's contract."""

    operation: str
    results: list[VerificationResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)

    @property
    def tests_run(self) -> int:
        return sum(r.tests_run for r in self.results)

    def summary(self) -> str:
        lines = [f"--- {self.operation} ---"]
        for r in self.results:
            lines.append(f"  {r}")
        status = "ALL PASSED" if self.passed else "FAILED"
        lines.append(f"  => {status}")
        return "\n".join(lines)


class VerificationError(Exception):
    """Raised when a calculator fails its contract."""

    def __init__(self, report: VerificationReport):
        self.report = report
        super().__init__(f"Verification failed:\n{report.summary()}")


# ---------------------------------------------------------------------------
# The factory
# ---------------------------------------------------------------------------

class CalculatorFactory:
    """
    Produces Calculator instances that have been checked against the
    contract for their limits.

    A calculator is a pure function of its limits, so each
    (limits, samples, seed) combination is verified once per process.
    """

    SAMPLE_COUNT = 100
    SAMPLE_DIGITS = 20  # widest operand drawn during verification
    POW_EXPONENTS = 7   # exponents are drawn from 0..POW_EXPONENTS-1

    _verified: ClassVar[set[tuple[DigitLimits, int, int]]] = set()

    @classmethod
    def create(
        cls,
        limits: DigitLimits = DEFAULT_LIMITS,
        *,
        samples: int | None = None,
        seed: int = 0,
    ) -> Calculator:
        """Build, verify, and return a Calculator."""
        calc = Calculator(limits=limits)
        count = cls.SAMPLE_COUNT if samples is None else samples
        key = (limits, count, seed)
        if key not in cls._verified:
            reports = cls.verify(calc, samples=count, seed=seed)
            cls._verified.add(key)
            logger.info("calculator verified for max_digits=%d (%d checks)",
                        limits.max_digits, sum(r.tests_run for r in reports))
        return calc

    @classmethod
    def verify(
        cls,
        calc: Calculator,
        *,
        samples: int | None = None,
        seed: int = 0,
        contract: CalculatorContract | None = None,
    ) -> list[VerificationReport]:
        """Check ``calc`` against its contract; raise on the first failure."""
        contract = contract or build_contract(calc.limits)
        count = cls.SAMPLE_COUNT if samples is None else samples
        reports: list[VerificationReport] = []
        for name, op_contract in contract.operations.items():
            report = VerificationReport(operation=name)
            for prop in op_contract.properties:
                pool = generate_samples(calc.limits, prop.arity, count, seed)
                report.results.append(cls._verify_property(calc, prop, pool))
            if name != "parse":
                pool = generate_samples(calc.limits, op_contract.arity, count, seed)
                if name == "pow":
                    pool = [(a, abs(n) % cls.POW_EXPONENTS) for a, n in pool]
                report.results.extend(cls._verify_postconditions(
                    getattr(calc, name), op_contract.postconditions, pool
                ))
            reports.append(report)
            if not report.passed:
                logger.error("verification of %s failed:\n%s", name, report.summary())
                raise VerificationError(report)
        return reports

    # -- internal ---------------------------------------------------------

    @classmethod
    def _verify_property(
        cls, calc: Calculator, prop: AlgebraicProperty, pool: list[tuple[int, ...]]
    ) -> VerificationResult:
        tests_run = 0
        for combo in pool:
            tests_run += 1
            operands = tuple(BigInt.from_int(v, calc.limits) for v in combo)
            try:
                if not prop.check(calc, *operands):
                    return VerificationResult(
                        check_name=prop.name,
                        passed=False,
                        counterexample=combo,
                        tests_run=tests_run,
                    )
            except (ZeroDivisionError, OverflowError):
                # Division by zero and capacity errors are specified
                # outcomes, not property violations
                pass
        return VerificationResult(check_name=prop.name, passed=True, tests_run=tests_run)

    @classmethod
    def _verify_postconditions(
        cls,
        op: Callable[..., Any],
        posts: list[Postcondition],
        pool: list[tuple[int, ...]],
    ) -> list[VerificationResult]:
        """Evaluate ``op`` once per sample and check every postcondition."""
        results = {p.name: VerificationResult(check_name=p.name, passed=True)
                   for p in posts}
        for combo in pool:
            try:
                result = op(*combo)
            except (ZeroDivisionError, OverflowError, ValueError):
                # covered by the error conditions instead
                continue
            for post in posts:
                outcome = results[post.name]
                if not outcome.passed:
                    continue
                outcome.tests_run += 1
                if not post.check(*combo, result):
                    outcome.passed = False
                    outcome.counterexample = combo
        return list(results.values())


# ---------------------------------------------------------------------------
# Sample generation
# ---------------------------------------------------------------------------

def sample_width(limits: DigitLimits) -> int:
    return min(limits.largest_digit_count, CalculatorFactory.SAMPLE_DIGITS)


def edge_values(limits: DigitLimits) -> list[int]:
    """Carry, borrow and sign boundaries no wider than ``sample_width``."""
    widest = 10 ** sample_width(limits) - 1
    candidates = [0, 1, -1, 9, -9, 10, -10, 99, 100, -101, 12345, -98765,
                  widest, -widest]
    out: list[int] = []
    for v in candidates:
        if abs(v) <= widest and v not in out:
            out.append(v)
    return out


def generate_samples(
    limits: DigitLimits, arity: int, count: int, seed: int = 0
) -> list[tuple[int, ...]]:
    """Edge-case combinations followed by a seeded random fill.

    Every edge pair is included for unary and binary checks; ternary
    checks get the random fill only.
    """
    rng = random.Random(seed)
    edges = edge_values(limits)
    width = sample_width(limits)

    samples: list[tuple[int, ...]] = []
    if arity <= 2:
        samples.extend(itertools.product(edges, repeat=arity))

    while len(samples) < count:
        combo = tuple(random_value(rng, width) for _ in range(arity))
        samples.append(combo)
    return samples


def random_value(rng: random.Random, width: int) -> int:
    """Random signed integer with 1..width digits, uniformly by length."""
    digits = rng.randint(1, width)
    value = rng.randint(0, 10 ** digits - 1)
    return -value if rng.random() < 0.5 else value
