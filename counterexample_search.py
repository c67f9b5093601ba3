"""Counterexample search - discovers gaps in the implementation or tests.

This module runs independently of the test suite.  It searches a grid
of edge values and seeded random operands for:

1. Postcondition violations: inputs where the calculator doesn't match
   the exact result computed with native ints.
2. Error condition violations: inputs that should raise but don't (or
   raise the wrong exception).
3. Property violations: algebraic relationships that fail for some
   input combination.
4. Parse violations: strings accepted or rejected against the grammar.

Run directly::

    python -m counterexample_search
"""
from __future__ import annotations

import sys
from dataclasses import dataclass, field

from bigint import BigInt
from calculator import Calculator
from contract import CalculatorContract, build_contract
from factory import generate_samples
from limits import DEFAULT_LIMITS, SMALL, TINY, DigitLimits

# Strings that probe every parse branch; "1234" only overflows TINY.
PARSE_PROBES = [
    "", "-", "--1", "+5", " 1", "1 ", "1_000", "1.0", "0x10", "12a",
    "١٢", "007", "-01", "0", "-0", "9", "-9", "10", "-100",
    "999", "1234", "-98765",
]

# Exponents probed for pow, including the invalid ones.
POW_EXPONENTS = [-3, -1, 0, 1, 2, 3, 5]


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class Counterexample:
    category: str
    operation: str
    inputs: tuple
    expected: str
    actual: str
    description: str


@dataclass
class SearchReport:
    counterexamples: list[Counterexample] = field(default_factory=list)
    checks_run: int = 0

    @property
    def passed(self) -> bool:
        return len(self.counterexamples) == 0

    def summary(self) -> str:
        lines = [
            "Counterexample Search Report",
            "=" * 40,
            f"Total checks: {self.checks_run}",
            f"Counterexamples found: {len(self.counterexamples)}",
        ]
        if self.counterexamples:
            lines.append("")
            for i, cx in enumerate(self.counterexamples, 1):
                lines.append(f"  [{i}] {cx.category} / {cx.operation}")
                lines.append(f"      Inputs:   {cx.inputs}")
                lines.append(f"      Expected: {cx.expected}")
                lines.append(f"      Actual:   {cx.actual}")
                lines.append(f"      {cx.description}")
        else:
            lines.append("\nNo counterexamples found - all checks passed.")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Input grids
# ---------------------------------------------------------------------------

def operand_grid(
    contract: CalculatorContract, name: str, samples: int, seed: int
) -> list[tuple[int, ...]]:
    """Integer inputs for one operation, including error-triggering ones."""
    arity = contract.operations[name].arity
    grid = generate_samples(contract.limits, arity, samples, seed)
    if name == "pow":
        bases = sorted({combo[0] for combo in grid}, key=abs)[:samples]
        return [(a, n) for a in bases for n in POW_EXPONENTS]
    return grid


# ---------------------------------------------------------------------------
# Search functions
# ---------------------------------------------------------------------------

def search_postcondition_violations(
    calc: Calculator,
    contract: CalculatorContract,
    samples: int,
    seed: int,
) -> tuple[list[Counterexample], int]:
    """Verify postconditions for every non-erroring input in the grid."""
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, op_contract in contract.operations.items():
        if op_name == "parse":
            continue
        op = getattr(calc, op_name)
        for inputs in operand_grid(contract, op_name, samples, seed):
            checks += 1
            # Skip inputs that are supposed to error
            if any(ec.trigger(*inputs) for ec in op_contract.error_conditions):
                continue

            try:
                result = op(*inputs)
            except Exception as e:
                cxs.append(Counterexample(
                    category="unexpected_error",
                    operation=op_name,
                    inputs=inputs,
                    expected="no error",
                    actual=f"{type(e).__name__}: {e}",
                    description="Operation raised an unexpected exception",
                ))
                continue

            for post in op_contract.postconditions:
                if not post.check(*inputs, result):
                    cxs.append(Counterexample(
                        category="postcondition_violation",
                        operation=op_name,
                        inputs=inputs,
                        expected=post.description,
                        actual=f"result={result}",
                        description=f"Postcondition '{post.name}' violated",
                    ))

    return cxs, checks


def search_error_condition_violations(
    calc: Calculator,
    contract: CalculatorContract,
    samples: int,
    seed: int,
) -> tuple[list[Counterexample], int]:
    """Verify every error condition triggers the right exception."""
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, op_contract in contract.operations.items():
        if op_name == "parse":
            continue
        op = getattr(calc, op_name)
        for inputs in operand_grid(contract, op_name, samples, seed):
            for ec in op_contract.error_conditions:
                if not ec.trigger(*inputs):
                    continue
                checks += 1
                try:
                    result = op(*inputs)
                    cxs.append(Counterexample(
                        category="missing_error",
                        operation=op_name,
                        inputs=inputs,
                        expected=ec.exception.__name__,
                        actual=f"result={result}",
                        description=(
                            f"Error condition '{ec.name}' should have "
                            f"triggered but didn't"
                        ),
                    ))
                except ec.exception:
                    pass  # expected
                except Exception as e:
                    cxs.append(Counterexample(
                        category="wrong_error",
                        operation=op_name,
                        inputs=inputs,
                        expected=ec.exception.__name__,
                        actual=f"{type(e).__name__}: {e}",
                        description=f"Wrong exception type for '{ec.name}'",
                    ))

    return cxs, checks


def search_property_violations(
    calc: Calculator,
    contract: CalculatorContract,
    samples: int,
    seed: int,
) -> tuple[list[Counterexample], int]:
    """Check every algebraic property over the sample grid."""
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, prop in contract.all_properties:
        for combo in generate_samples(contract.limits, prop.arity, samples, seed):
            checks += 1
            operands = tuple(BigInt.from_int(v, contract.limits) for v in combo)
            try:
                holds = prop.check(calc, *operands)
            except (ZeroDivisionError, OverflowError, ValueError):
                continue
            if not holds:
                cxs.append(Counterexample(
                    category="property_violation",
                    operation=op_name,
                    inputs=combo,
                    expected=prop.description,
                    actual="property does not hold",
                    description=f"Property '{prop.name}' violated",
                ))

    return cxs, checks


def search_parse_violations(
    calc: Calculator,
    contract: CalculatorContract,
    samples: int,
    seed: int,
) -> tuple[list[Counterexample], int]:
    """Feed the probe strings through parse and check accept/reject."""
    cxs: list[Counterexample] = []
    checks = 0
    parse = contract.operations["parse"]

    for text in PARSE_PROBES:
        checks += 1
        expected = next(
            (ec for ec in parse.error_conditions if ec.trigger(text)), None
        )
        try:
            result = calc.parse(text)
        except Exception as e:
            if expected is None or not isinstance(e, expected.exception):
                cxs.append(Counterexample(
                    category="wrong_error" if expected else "unexpected_error",
                    operation="parse",
                    inputs=(text,),
                    expected=expected.exception.__name__ if expected else "no error",
                    actual=f"{type(e).__name__}: {e}",
                    description="parse rejected the input incorrectly",
                ))
            continue

        if expected is not None:
            cxs.append(Counterexample(
                category="missing_error",
                operation="parse",
                inputs=(text,),
                expected=expected.exception.__name__,
                actual=f"result={result}",
                description=f"Error condition '{expected.name}' should have triggered",
            ))
            continue
        for post in parse.postconditions:
            if not post.check(text, result):
                cxs.append(Counterexample(
                    category="postcondition_violation",
                    operation="parse",
                    inputs=(text,),
                    expected=post.description,
                    actual=f"result={result}",
                    description=f"Postcondition '{post.name}' violated",
                ))

    return cxs, checks


# ---------------------------------------------------------------------------
# Top-level runner
# ---------------------------------------------------------------------------

def run_search(
    limits: DigitLimits, samples: int = 60, seed: int = 0
) -> SearchReport:
    """Run complete counterexample search for one configuration."""
    calc = Calculator(limits)
    contract = build_contract(limits)
    report = SearchReport()

    for search_fn in (
        search_postcondition_violations,
        search_error_condition_violations,
        search_property_violations,
        search_parse_violations,
    ):
        cxs, checks = search_fn(calc, contract, samples, seed)
        report.counterexamples.extend(cxs)
        report.checks_run += checks

    return report


def main() -> None:
    """Run counterexample search across several configurations."""
    configs = [
        ("TINY    max_digits=4", TINY),
        ("SMALL   max_digits=64", SMALL),
        ("DEFAULT max_digits=10000", DEFAULT_LIMITS),
    ]

    all_passed = True
    for name, limits in configs:
        print(f"\n--- Configuration: {name} ---")
        report = run_search(limits)
        print(report.summary())
        if not report.passed:
            all_passed = False

    print("\n" + "=" * 40)
    if all_passed:
        print("ALL CONFIGURATIONS PASSED")
    else:
        print("SOME CONFIGURATIONS HAD COUNTEREXAMPLES")
        sys.exit(1)


if __name__ == "__main__":
    main()
