"""Application factory and entry point.

Run with:
    uvicorn app:app --reload
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from api import router, set_calculator, set_store
from factory import CalculatorFactory
from limits import DEFAULT_LIMITS, DigitLimits
from store import CalculationStore

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: int | str = logging.INFO) -> None:
    """Route every module logger to stderr at ``level``."""
    logging.basicConfig(level=level, format=LOG_FORMAT)


def create_app(
    store: CalculationStore | None = None,
    limits: DigitLimits | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Accepts an optional store and digit limits for testing; creates a
    fresh store and uses the default limits if omitted.  The calculator
    comes from the factory, so the app never serves an unverified one.
    """
    if store is None:
        store = CalculationStore()
    if limits is None:
        limits = DEFAULT_LIMITS

    set_store(store)
    set_calculator(CalculatorFactory.create(limits))

    app = FastAPI(
        title="BigInt Calculator API",
        description=(
            "Arbitrary-precision signed decimal arithmetic. Operands and "
            "results are decimal strings of up to "
            f"{limits.largest_digit_count} digits. Every calculation is "
            "recorded and can be listed, fetched and deleted."
        ),
        version="0.1.0",
    )
    app.include_router(router)
    logger.info("app ready (max_digits=%d)", limits.max_digits)
    return app


# Default app instance for `uvicorn app:app`
app = create_app()
