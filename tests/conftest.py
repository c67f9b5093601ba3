"""Shared fixtures for BigInt and calculation API tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app import create_app
from calculator import Calculator
from limits import SMALL, TINY
from models import CalculationCreate, Operation
from store import CalculationStore


@pytest.fixture
def calc() -> Calculator:
    return Calculator()


@pytest.fixture
def tiny_calc() -> Calculator:
    return Calculator(TINY)


@pytest.fixture
def store() -> CalculationStore:
    return CalculationStore()


@pytest.fixture
def client(store) -> TestClient:
    app = create_app(store=store, limits=SMALL)
    return TestClient(app)


@pytest.fixture
def add_payload() -> CalculationCreate:
    """A minimal valid binary calculation."""
    return CalculationCreate(
        operation=Operation.ADD,
        a="123456789012345678901234567890",
        b="987654321098765432109876543210",
    )


@pytest.fixture
def neg_payload() -> CalculationCreate:
    """A minimal valid unary calculation."""
    return CalculationCreate(operation=Operation.NEG, a="42")
