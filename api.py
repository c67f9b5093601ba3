"""FastAPI REST endpoints for BigInt calculations.

Routes
------
POST   /calculations          Evaluate and record a calculation
GET    /calculations          List calculations (filterable by operation)
GET    /calculations/{id}     Retrieve a single calculation
DELETE /calculations/{id}     Delete a calculation

Engine errors map onto status codes:

InvalidInputError, InvalidExponentError   422
DivisionByZeroError                       400
CapacityExceededError                     413
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from bigint import BigInt
from calculator import Calculator
from errors import (
    BigIntError,
    CapacityExceededError,
    DivisionByZeroError,
    InvalidExponentError,
    InvalidInputError,
)
from models import Calculation, CalculationCreate, Operation
from store import CalculationNotFoundError, CalculationStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/calculations", tags=["calculations"])

# The store and calculator are injected by the app factory (see app.py).
_store: CalculationStore | None = None
_calculator: Calculator | None = None


def set_store(store: CalculationStore) -> None:
    """Inject the store instance. Called once at app startup."""
    global _store
    _store = store


def get_store() -> CalculationStore:
    assert _store is not None, "Store not initialized"
    return _store


def set_calculator(calculator: Calculator) -> None:
    """Inject the verified calculator. Called once at app startup."""
    global _calculator
    _calculator = calculator


def get_calculator() -> Calculator:
    assert _calculator is not None, "Calculator not initialized"
    return _calculator


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------

class CalculationListResponse(BaseModel):
    items: list[Calculation]
    total: int


class ErrorResponse(BaseModel):
    detail: str


_STATUS_BY_ERROR: list[tuple[type[BigIntError], int]] = [
    (InvalidInputError, 422),
    (InvalidExponentError, 422),
    (DivisionByZeroError, 400),
    (CapacityExceededError, 413),
]


def _not_found(calculation_id: str) -> HTTPException:
    return HTTPException(
        status_code=404, detail=f"Calculation not found: {calculation_id}"
    )


def _engine_error(e: BigIntError) -> HTTPException:
    status = next(code for kind, code in _STATUS_BY_ERROR if isinstance(e, kind))
    logger.warning("rejected calculation (%d): %s", status, e)
    return HTTPException(status_code=status, detail=str(e))


def evaluate(
    calc: Calculator, payload: CalculationCreate
) -> tuple[BigInt | int, BigInt | None]:
    """Run ``payload`` on ``calc``; returns ``(result, remainder)``."""
    op = payload.operation
    if op == Operation.DIVMOD:
        return calc.divmod(payload.a, payload.b)
    if op.arity == 1:
        return getattr(calc, op.value)(payload.a), None
    return getattr(calc, op.value)(payload.a, payload.b), None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("", response_model=Calculation, status_code=201,
             responses={400: {"model": ErrorResponse},
                        413: {"model": ErrorResponse}})
def create_calculation(payload: CalculationCreate) -> Calculation:
    """Evaluate a calculation and record the result."""
    calc = get_calculator()
    try:
        result, remainder = evaluate(calc, payload)
    except BigIntError as e:
        raise _engine_error(e) from e
    return get_store().record(payload, result, remainder)


@router.get("", response_model=CalculationListResponse)
def list_calculations(
    operation: Operation | None = Query(
        default=None, description="Filter by operation"
    ),
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    limit: int = Query(default=50, ge=1, le=200, description="Pagination limit"),
) -> CalculationListResponse:
    """List calculations with optional filtering."""
    store = get_store()
    items = store.list(operation=operation, offset=offset, limit=limit)
    return CalculationListResponse(items=items, total=store.count())


@router.get("/{calculation_id}", response_model=Calculation)
def get_calculation(calculation_id: str) -> Calculation:
    """Retrieve a single calculation by id."""
    store = get_store()
    try:
        return store.get(calculation_id)
    except CalculationNotFoundError:
        raise _not_found(calculation_id)


@router.delete("/{calculation_id}", response_model=Calculation)
def delete_calculation(calculation_id: str) -> Calculation:
    """Delete a calculation and return the deleted record."""
    store = get_store()
    try:
        return store.delete(calculation_id)
    except CalculationNotFoundError:
        raise _not_found(calculation_id)
