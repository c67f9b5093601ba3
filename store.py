"""In-memory calculation store.

Provides a simple storage backend for evaluated calculations that can be
swapped for a database later.  The store only records results; the
arithmetic happens in the calculator before anything is written.
"""

from __future__ import annotations

import logging

from bigint import BigInt
from models import Calculation, CalculationCreate, Operation, _new_id, _utcnow

logger = logging.getLogger(__name__)


class CalculationNotFoundError(Exception):
    """Raised when a calculation lookup fails."""

    def __init__(self, calculation_id: str) -> None:
        self.calculation_id = calculation_id
        super().__init__(f"Calculation not found: {calculation_id}")


class CalculationStore:
    """In-memory store for calculation records."""

    def __init__(self) -> None:
        self._calculations: dict[str, Calculation] = {}

    def record(
        self,
        payload: CalculationCreate,
        result: BigInt | int,
        remainder: BigInt | None = None,
    ) -> Calculation:
        """Store the outcome of evaluating ``payload``."""
        text = str(result)
        calculation = Calculation(
            id=_new_id(),
            operation=payload.operation,
            operands=payload.operands,
            result=text,
            remainder=None if remainder is None else str(remainder),
            result_digits=len(text.lstrip("-")),
            created_at=_utcnow(),
        )
        self._calculations[calculation.id] = calculation
        logger.debug("recorded %s as %s", calculation.operation.value, calculation.id)
        return calculation

    def get(self, calculation_id: str) -> Calculation:
        """Retrieve a calculation by id."""
        try:
            return self._calculations[calculation_id]
        except KeyError:
            raise CalculationNotFoundError(calculation_id) from None

    def list(
        self,
        *,
        operation: Operation | None = None,
        offset: int = 0,
        limit: int = 50,
    ) -> list[Calculation]:
        """List calculations, newest first, with optional filtering."""
        items = list(self._calculations.values())

        if operation is not None:
            items = [c for c in items if c.operation == operation]

        items.sort(key=lambda c: c.created_at, reverse=True)
        return items[offset : offset + limit]

    def delete(self, calculation_id: str) -> Calculation:
        """Delete a calculation and return the deleted record."""
        calculation = self.get(calculation_id)
        del self._calculations[calculation_id]
        return calculation

    def count(self) -> int:
        return len(self._calculations)

    def clear(self) -> None:
        """Remove all calculations (useful for testing)."""
        self._calculations.clear()
