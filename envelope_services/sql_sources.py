"""
SQL-backed collaborator sources.

Composes the kernel selectors with a session factory so each read runs in
its own short-lived Session.  The monthly overview issues its four reads on
separate threads, and a Session must never be shared across threads.

Architecture: envelope_services -- imperative shell.

Failure modes:
    - SQLAlchemy errors (OperationalError, ProgrammingError, ...) propagate
      unmodified; no retries.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from sqlalchemy.orm import Session

from envelope_config.schema import EngineConfig
from envelope_engines.transactions import TransactionAggregator
from envelope_kernel.domain.dtos import (
    AccountSnapshot,
    AllocationSnapshot,
    BudgetSnapshot,
    EntityId,
    FlowTotals,
    TransactionSnapshot,
)
from envelope_kernel.domain.period import TIMEZONE_SLACK, DateRange, Period
from envelope_kernel.domain.values import AccountRole
from envelope_kernel.selectors import (
    AccountSelector,
    AllocationSelector,
    BudgetSelector,
    TransactionSelector,
)
from envelope_services.sources import Sources

SessionFactory = Callable[[], Session]


class _SessionReader:
    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory


class SqlAccountSource(_SessionReader):
    def list_active(self, role: AccountRole | None = None) -> list[AccountSnapshot]:
        with self._session_factory() as session:
            return AccountSelector(session).list_active(role)


class SqlBudgetSource(_SessionReader):
    def list_active(self) -> list[BudgetSnapshot]:
        with self._session_factory() as session:
            return BudgetSelector(session).list_active()


class SqlAllocationSource(_SessionReader):
    def list_through(self, period: Period) -> list[AllocationSnapshot]:
        with self._session_factory() as session:
            return AllocationSelector(session).list_through(period)

    def sum_for_period(self, period: Period, budget_id: EntityId | None = None) -> int:
        with self._session_factory() as session:
            return AllocationSelector(session).sum_for_period(period, budget_id)

    def sum_cumulative(
        self,
        through_period: Period,
        budget_id: EntityId | None = None,
    ) -> int:
        with self._session_factory() as session:
            return AllocationSelector(session).sum_cumulative(through_period, budget_id)


class SqlTransactionSource(_SessionReader):
    """
    Transactions read through TransactionSelector.

    Without an aggregator, sums are taken by the database on the stored
    timestamps.  With one, the window is widened by TIMEZONE_SLACK, read
    back and re-bucketed in Python so the zone and role scope match the
    overview's.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        aggregator: TransactionAggregator | None = None,
        account_roles: frozenset[AccountRole] | None = None,
    ) -> None:
        super().__init__(session_factory)
        self._aggregator = aggregator
        self._account_roles = account_roles

    def list_before(self, end: datetime) -> list[TransactionSnapshot]:
        with self._session_factory() as session:
            return TransactionSelector(session).list_before(end)

    def sum_in_range(
        self,
        start: datetime,
        end: datetime,
        budget_id: EntityId | None = None,
    ) -> FlowTotals:
        if self._aggregator is None:
            with self._session_factory() as session:
                return TransactionSelector(session).sum_in_range(start, end, budget_id)

        date_range = DateRange(start, end)
        window = date_range.widened(TIMEZONE_SLACK)
        with self._session_factory() as session:
            rows = TransactionSelector(session).list_between(window.start, window.end)
        roles = self._account_roles if budget_id is None else None
        return self._aggregator.sum_in_range(rows, date_range, budget_id, roles)


def sql_sources(session_factory: SessionFactory, config: EngineConfig | None = None) -> Sources:
    """
    Build a Sources bundle reading through the kernel selectors.

    Pass the calculator's ``config`` so transaction sums use its time zone
    and flow scope.
    """
    if config is None:
        transaction_source = SqlTransactionSource(session_factory)
    else:
        transaction_source = SqlTransactionSource(
            session_factory,
            TransactionAggregator(tz=config.tzinfo),
            config.flow_scope.account_roles(),
        )
    return Sources(
        accounts=SqlAccountSource(session_factory),
        budgets=SqlBudgetSource(session_factory),
        allocations=SqlAllocationSource(session_factory),
        transactions=transaction_source,
    )
