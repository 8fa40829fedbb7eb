"""
Pytest fixtures for the envelope budget test suite.

Provides structured-logging capture, snapshot factories and a per-test
SQLite database file for the selector and SQL source tests.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from datetime import UTC, date, datetime
from io import StringIO
from itertools import count

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from envelope_kernel.db.base import Base
from envelope_kernel.domain.clock import DeterministicClock
from envelope_kernel.domain.dtos import (
    AccountSnapshot,
    AllocationSnapshot,
    BudgetSnapshot,
    TransactionSnapshot,
)
from envelope_kernel.domain.period import Period
from envelope_kernel.domain.values import AccountRole, BudgetType
from envelope_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

# ---------------------------------------------------------------------------
# Logging fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture envelope_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            calculator.compute_monthly_overview("2026-02")
            logs = captured_logs()
            assert any(r["message"] == "monthly_overview_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("envelope_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# ---------------------------------------------------------------------------
# Clock fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def deterministic_clock():
    return DeterministicClock(datetime(2026, 2, 15, 12, 0, 0, tzinfo=UTC))


# ---------------------------------------------------------------------------
# Snapshot factories
# ---------------------------------------------------------------------------

_ids = count(1)


def make_account(
    balance: int,
    role: AccountRole = AccountRole.OPERATIONAL,
    **kwargs,
) -> AccountSnapshot:
    kwargs.setdefault("account_id", f"acc-{next(_ids)}")
    return AccountSnapshot(role=role, balance=balance, **kwargs)


def make_budget(
    budget_type: BudgetType = BudgetType.SPENDING,
    **kwargs,
) -> BudgetSnapshot:
    budget_id = kwargs.pop("budget_id", f"bud-{next(_ids)}")
    kwargs.setdefault("name", f"Budget {budget_id}")
    return BudgetSnapshot(budget_id=budget_id, budget_type=budget_type, **kwargs)


def make_allocation(budget_id, period: str, amount: int, **kwargs) -> AllocationSnapshot:
    kwargs.setdefault("allocation_id", f"alloc-{next(_ids)}")
    return AllocationSnapshot(
        budget_id=budget_id, period=Period.parse(period), amount=amount, **kwargs,
    )


def make_transaction(
    amount: int,
    occurred_at: date | datetime | None,
    budget_id=None,
    **kwargs,
) -> TransactionSnapshot:
    kwargs.setdefault("transaction_id", f"txn-{next(_ids)}")
    kwargs.setdefault("account_id", "acc-main")
    return TransactionSnapshot(
        amount=amount, occurred_at=occurred_at, budget_id=budget_id, **kwargs,
    )


# ---------------------------------------------------------------------------
# Database fixtures (SQLite)
# ---------------------------------------------------------------------------


@pytest.fixture
def sqlite_engine(tmp_path):
    """Fresh file-backed SQLite database with all tables created.

    File-backed so concurrent reads get their own pooled connections.
    """
    import envelope_kernel.models  # noqa: F401  (registers mappers)

    engine = create_engine(
        f"sqlite:///{tmp_path / 'envelope.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine) -> sessionmaker[Session]:
    return sessionmaker(bind=sqlite_engine, expire_on_commit=False)


@pytest.fixture
def session(session_factory) -> Generator[Session, None, None]:
    with session_factory() as session:
        yield session
