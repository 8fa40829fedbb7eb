"""
Collaborator read interfaces consumed by the monthly overview.

Responsibility:
    Declares the four narrow, read-only protocols the aggregation engine
    depends on (accounts, budgets, allocations, transactions) and ships
    in-memory implementations backed by snapshot tuples.  SQL-backed
    implementations live in ``envelope_services.sql_sources``.

Architecture: envelope_services -- imperative shell.
    Each protocol offers collection reads (used to build the one-shot
    OverviewSnapshot) and aggregate sums (the narrow query interface).
    ``sum_for_period`` and ``sum_cumulative`` stay separately named so the
    scoped and all-time allocation totals cannot be silently swapped.

Invariants enforced:
    - Sources never mutate what they hold; every read returns a new tuple.
    - ``list_active`` never returns archived rows.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from envelope_config.schema import EngineConfig
from envelope_engines.period_allocation import PeriodAllocationAggregator
from envelope_engines.transactions import TransactionAggregator
from envelope_kernel.domain.dtos import (
    AccountSnapshot,
    AllocationSnapshot,
    BudgetSnapshot,
    EntityId,
    FlowTotals,
    TransactionSnapshot,
)
from envelope_kernel.domain.period import DateRange, Period, to_wall_clock
from envelope_kernel.domain.values import AccountRole


class AccountSource(Protocol):
    def list_active(self, role: AccountRole | None = None) -> Sequence[AccountSnapshot]:
        """Non-archived accounts, optionally filtered by role."""
        ...


class BudgetSource(Protocol):
    def list_active(self) -> Sequence[BudgetSnapshot]:
        """Non-archived budgets."""
        ...


class AllocationSource(Protocol):
    def list_through(self, period: Period) -> Sequence[AllocationSnapshot]:
        """Every allocation for periods up to and including ``period``."""
        ...

    def sum_for_period(self, period: Period, budget_id: EntityId | None = None) -> int:
        ...

    def sum_cumulative(
        self,
        through_period: Period,
        budget_id: EntityId | None = None,
    ) -> int:
        ...


class TransactionSource(Protocol):
    def list_before(self, end: datetime) -> Sequence[TransactionSnapshot]:
        """Every dated transaction strictly before ``end``."""
        ...

    def sum_in_range(
        self,
        start: datetime,
        end: datetime,
        budget_id: EntityId | None = None,
    ) -> FlowTotals:
        """Inflow and outflow between naive wall-clock bounds ``[start, end)``."""
        ...


@dataclass(frozen=True)
class Sources:
    """The four collaborators a MonthlyOverviewCalculator reads from."""

    accounts: AccountSource
    budgets: BudgetSource
    allocations: AllocationSource
    transactions: TransactionSource


# =============================================================================
# In-memory implementations
# =============================================================================


class InMemoryAccountSource:
    def __init__(self, accounts: Iterable[AccountSnapshot] = ()) -> None:
        self._accounts = tuple(accounts)

    def list_active(self, role: AccountRole | None = None) -> tuple[AccountSnapshot, ...]:
        return tuple(
            account
            for account in self._accounts
            if not account.is_archived and (role is None or account.role == role)
        )


class InMemoryBudgetSource:
    def __init__(self, budgets: Iterable[BudgetSnapshot] = ()) -> None:
        self._budgets = tuple(budgets)

    def list_active(self) -> tuple[BudgetSnapshot, ...]:
        return tuple(budget for budget in self._budgets if not budget.is_archived)


class InMemoryAllocationSource:
    def __init__(
        self,
        allocations: Iterable[AllocationSnapshot] = (),
        aggregator: PeriodAllocationAggregator | None = None,
    ) -> None:
        self._allocations = tuple(allocations)
        self._aggregator = aggregator or PeriodAllocationAggregator()

    def list_through(self, period: Period) -> tuple[AllocationSnapshot, ...]:
        return tuple(a for a in self._allocations if a.period <= period)

    def sum_for_period(self, period: Period, budget_id: EntityId | None = None) -> int:
        return self._aggregator.sum_for_period(self._allocations, period, budget_id)

    def sum_cumulative(
        self,
        through_period: Period,
        budget_id: EntityId | None = None,
    ) -> int:
        return self._aggregator.sum_cumulative(self._allocations, through_period, budget_id)


class InMemoryTransactionSource:
    """
    Transactions held in memory.

    ``account_roles`` scopes the all-budget sums the way the overview's
    flow scope does; per-budget sums are never scoped by account role.
    """

    def __init__(
        self,
        transactions: Iterable[TransactionSnapshot] = (),
        aggregator: TransactionAggregator | None = None,
        account_roles: frozenset[AccountRole] | None = None,
    ) -> None:
        self._transactions = tuple(transactions)
        self._aggregator = aggregator or TransactionAggregator()
        self._account_roles = account_roles

    def list_before(self, end: datetime) -> tuple[TransactionSnapshot, ...]:
        return tuple(
            t
            for t in self._transactions
            if t.occurred_at is not None and to_wall_clock(t.occurred_at) < end
        )

    def sum_in_range(
        self,
        start: datetime,
        end: datetime,
        budget_id: EntityId | None = None,
    ) -> FlowTotals:
        roles = self._account_roles if budget_id is None else None
        return self._aggregator.sum_in_range(
            self._transactions, DateRange(start, end), budget_id, roles
        )


def in_memory_sources(
    accounts: Iterable[AccountSnapshot] = (),
    budgets: Iterable[BudgetSnapshot] = (),
    allocations: Iterable[AllocationSnapshot] = (),
    transactions: Iterable[TransactionSnapshot] = (),
    config: EngineConfig | None = None,
) -> Sources:
    """
    Build a Sources bundle over plain snapshot collections.

    With ``config``, transaction sums bucket in its time zone and honour its
    flow scope, so they agree with a calculator built on the same config.
    Without one, aware timestamps are compared at their own offset.
    """
    if config is None:
        transaction_source = InMemoryTransactionSource(transactions)
    else:
        transaction_source = InMemoryTransactionSource(
            transactions,
            TransactionAggregator(tz=config.tzinfo),
            config.flow_scope.account_roles(),
        )
    return Sources(
        accounts=InMemoryAccountSource(accounts),
        budgets=InMemoryBudgetSource(budgets),
        allocations=InMemoryAllocationSource(allocations),
        transactions=transaction_source,
    )
