"""Request and record models for the calculation API.

A Calculation is one evaluated BigInt operation: the operation name,
its decimal-string operands and the decimal-string result.  Operands
and results travel as strings because JSON numbers cannot carry
thousands of digits.  This module defines the data models only -- no
arithmetic.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from limits import LARGE

# Transport guard only; the calculator's own limits decide capacity.
MAX_OPERAND_CHARS = LARGE.max_digits


# ---------------------------------------------------------------------------
# Operation: what a calculation does
# ---------------------------------------------------------------------------

class Operation(str, Enum):
    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"
    MOD = "mod"
    DIVMOD = "divmod"
    POW = "pow"
    CMP = "cmp"
    ABS = "abs"
    NEG = "neg"
    ISQRT = "isqrt"

    @property
    def arity(self) -> int:
        return 1 if self in UNARY_OPERATIONS else 2


UNARY_OPERATIONS = frozenset({Operation.ABS, Operation.NEG, Operation.ISQRT})


# ---------------------------------------------------------------------------
# Calculation
# ---------------------------------------------------------------------------

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


class CalculationCreate(BaseModel):
    """Payload for requesting a calculation (no id/result/timestamp)."""

    operation: Operation
    a: str = Field(
        ...,
        min_length=1,
        max_length=MAX_OPERAND_CHARS,
        description="Decimal integer, e.g. '-12345678901234567890'",
    )
    b: str | None = Field(
        default=None,
        min_length=1,
        max_length=MAX_OPERAND_CHARS,
        validate_default=True,
        description="Second operand; the exponent for pow",
    )

    @field_validator("b")
    @classmethod
    def b_matches_arity(cls, v: str | None, info: ValidationInfo) -> str | None:
        operation = info.data.get("operation")
        if operation is None:
            return v
        if operation.arity == 2 and v is None:
            raise ValueError(f"Operation {operation.value!r} needs operand 'b'")
        if operation.arity == 1 and v is not None:
            raise ValueError(f"Operation {operation.value!r} takes no operand 'b'")
        return v

    @property
    def operands(self) -> list[str]:
        return [self.a] if self.b is None else [self.a, self.b]


class Calculation(BaseModel):
    """Full calculation record as stored and returned by the API."""

    id: str = Field(default_factory=_new_id)
    operation: Operation
    operands: list[str]
    result: str
    remainder: str | None = None
    result_digits: int = Field(..., ge=1)
    created_at: datetime = Field(default_factory=_utcnow)
