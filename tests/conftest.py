"""Pytest fixtures for testing"""

import pytest
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Dict
from fastapi.testclient import TestClient
from finance_insights.api.main import create_app
from finance_insights.api.dependencies import get_coordinator
from finance_insights.domain.coordinator import AnalysisCoordinator
from finance_insights.domain.models import EXPENSE, INCOME, Record


# Reference "now" for every time-dependent test: mid-June 2025
NOW = datetime(2025, 6, 15, 12, 0, 0)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def coordinator() -> AnalysisCoordinator:
    """Fresh coordinator so cached results never leak between tests"""
    return AnalysisCoordinator()


@pytest.fixture
def client(coordinator: AnalysisCoordinator) -> TestClient:
    """Create FastAPI test client with an isolated coordinator"""
    app = create_app()
    app.dependency_overrides[get_coordinator] = lambda: coordinator
    return TestClient(app)


@pytest.fixture
def raw_expense() -> Callable[..., Dict[str, Any]]:
    """Build a stored transaction document"""

    def build(record_id: str, amount: Any, category: str = "Food", date: Any = "2025-06-10", **extra) -> Dict[str, Any]:
        return {"id": record_id, "amount": amount, "category": category, "date": date, "currency": "USD", **extra}

    return build


@pytest.fixture
def raw_income() -> Callable[..., Dict[str, Any]]:
    """Build a stored income document"""

    def build(record_id: str, amount: Any, date: Any = "2025-06-01", category: str = "Salary", **extra) -> Dict[str, Any]:
        return {"id": record_id, "amount": amount, "category": category, "date": date, "currency": "USD", **extra}

    return build


@pytest.fixture
def make_record() -> Callable[..., Record]:
    """Build an already-normalized Record"""

    def build(
        record_id: str,
        amount: Any,
        category: str = "Food",
        occurred_at: datetime | None = datetime(2025, 6, 10),
        kind: str = EXPENSE,
        amount_valid: bool = True,
        color: str | None = None,
    ) -> Record:
        return Record(
            id=record_id,
            kind=kind,
            amount=Decimal(str(amount)),
            category=category,
            occurred_at=occurred_at,
            currency="USD",
            color=color,
            amount_valid=amount_valid,
        )

    return build


@pytest.fixture
def scenario_snapshot(raw_expense, raw_income):
    """One month: 1000 income, food 200 + 300, transport 100"""
    transactions = [
        raw_expense("t1", 200, "Food", "2025-06-02"),
        raw_expense("t2", 300, "Food", "2025-06-05"),
        raw_expense("t3", 100, "Transport", "2025-06-07"),
    ]
    incomes = [raw_income("i1", 1000, "2025-06-01")]
    return transactions, incomes


@pytest.fixture
def income_record(make_record) -> Callable[..., Record]:
    def build(record_id: str, amount: Any, occurred_at: datetime = datetime(2025, 6, 1)) -> Record:
        return make_record(record_id, amount, "Salary", occurred_at, kind=INCOME)

    return build
