"""
MonthlyOverviewCalculator -- Budget-wide financial snapshot for one month.

Composes the pure aggregation engines with the four collaborator sources.
The calculator first reads a consistent OverviewSnapshot (the four reads
are independent and run concurrently), then derives every figure from that
snapshot without further I/O.

Architecture: envelope_services -- imperative shell.
    Reads: Sources (accounts, budgets, allocations, transactions).
    Computes: envelope_engines (funds, period allocation, transactions,
    carryover, envelope).

Invariants enforced:
    - ready_to_assign = available_funds - cumulative allocations of every
      budget through the target month (never the target-month allocations
      alone).  Funds once assigned to a since-archived budget stay assigned.
    - available = allocated + carryover - spent, per budget.
    - savings_rate is 0.0 whenever income is 0.
    - Archived budgets get no summary; archived accounts appear in no
      balance.
    - Idempotence: unchanged data yields an identical MonthlyOverview.

Failure modes:
    - InvalidPeriodError for a malformed period, before any read is issued.
    - Any source failure aborts the whole computation and propagates
      unchanged; partial overviews are never returned.
"""

from __future__ import annotations

import contextvars
from collections import defaultdict
from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Any, TypeVar
from uuid import uuid4

from envelope_config.schema import EngineConfig
from envelope_engines import (
    BudgetEnvelopeBuilder,
    CarryoverResolver,
    FundsAggregator,
    PeriodAllocationAggregator,
    TransactionAggregator,
)
from envelope_kernel.domain.dtos import (
    AllocationSnapshot,
    BudgetSnapshot,
    BudgetSummary,
    EntityId,
    MonthlyOverview,
    OverviewSnapshot,
    TransactionSnapshot,
)
from envelope_kernel.domain.period import TIMEZONE_SLACK, Period
from envelope_kernel.logging_config import LogContext, get_logger
from envelope_services.sources import Sources

logger = get_logger("services.monthly_overview")

T = TypeVar("T")


def _group_by_budget(records: Iterable[T]) -> Mapping[EntityId, list[T]]:
    grouped: dict[EntityId, list[T]] = defaultdict(list)
    for record in records:
        budget_id = getattr(record, "budget_id", None)
        if budget_id is not None:
            grouped[budget_id].append(record)
    return grouped


def savings_rate(income: int, expense: int) -> float:
    """Fraction of income not spent; 0.0 when there is no income."""
    if income == 0:
        return 0.0
    return (income - expense) / income


class MonthlyOverviewCalculator:
    """Computes MonthlyOverview records.

    Contract:
        - ``compute_monthly_overview()`` accepts a Period or a "YYYY-MM"
          string and returns a fully populated MonthlyOverview.
        - ``fetch_snapshot()`` issues the four source reads.
        - ``compute_from_snapshot()`` is pure: no reads, no clock.

    Non-goals:
        - Does NOT write anything (read-only).
        - Does NOT cache results between calls.
    """

    def __init__(
        self,
        sources: Sources,
        config: EngineConfig | None = None,
        funds: FundsAggregator | None = None,
        allocations: PeriodAllocationAggregator | None = None,
        transactions: TransactionAggregator | None = None,
        carryover: CarryoverResolver | None = None,
        envelopes: BudgetEnvelopeBuilder | None = None,
    ) -> None:
        self._sources = sources
        self._config = config or EngineConfig.with_defaults()
        self._funds = funds or FundsAggregator()
        self._allocations = allocations or PeriodAllocationAggregator()
        self._transactions = transactions or TransactionAggregator(tz=self._config.tzinfo)
        self._carryover = carryover or CarryoverResolver(
            self._allocations, self._transactions,
        )
        self._envelopes = envelopes or BudgetEnvelopeBuilder()

    @property
    def config(self) -> EngineConfig:
        return self._config

    def compute_monthly_overview(self, period: Period | str) -> MonthlyOverview:
        """Compute the overview for ``period``.

        Raises:
            InvalidPeriodError: If ``period`` is not a valid "YYYY-MM".
        """
        target = Period.parse(period)

        with LogContext.bind(correlation_id=str(uuid4()), period=str(target)):
            logger.info("monthly_overview_started")
            snapshot = self.fetch_snapshot(target)
            overview = self.compute_from_snapshot(target, snapshot)
            logger.info("monthly_overview_completed", extra={
                "ready_to_assign": overview.ready_to_assign,
                "total_allocated": overview.total_allocated,
                "total_spent": overview.total_spent,
                "budget_count": len(overview.budget_summaries),
                "overspent_count": sum(s.is_overspent for s in overview.budget_summaries),
            })
        return overview

    def fetch_snapshot(self, target: Period) -> OverviewSnapshot:
        """Read accounts, budgets, allocations and transactions concurrently."""
        reads: dict[str, Callable[[], Any]] = {
            "accounts": self._sources.accounts.list_active,
            "budgets": self._sources.budgets.list_active,
            "allocations": lambda: self._sources.allocations.list_through(target),
            "transactions": lambda: self._sources.transactions.list_before(
                target.end() + TIMEZONE_SLACK,
            ),
        }

        workers = min(self._config.fetch_workers, len(reads))
        if workers == 1:
            results = {name: self._guarded_read(name, read) for name, read in reads.items()}
        else:
            with ThreadPoolExecutor(
                max_workers=workers, thread_name_prefix="overview-read",
            ) as executor:
                futures = {
                    name: executor.submit(
                        contextvars.copy_context().run, self._guarded_read, name, read,
                    )
                    for name, read in reads.items()
                }
                # future.result() re-raises the read's own exception
                results = {name: future.result() for name, future in futures.items()}

        snapshot = OverviewSnapshot(
            accounts=tuple(results["accounts"]),
            budgets=tuple(results["budgets"]),
            allocations=tuple(results["allocations"]),
            transactions=tuple(results["transactions"]),
        )
        logger.debug("monthly_overview_snapshot_read", extra={
            "accounts": len(snapshot.accounts),
            "budgets": len(snapshot.budgets),
            "allocations": len(snapshot.allocations),
            "transactions": len(snapshot.transactions),
        })
        return snapshot

    @staticmethod
    def _guarded_read(name: str, read: Callable[[], T]) -> T:
        try:
            return read()
        except Exception:
            logger.error("monthly_overview_read_failed", extra={"source": name}, exc_info=True)
            raise

    def compute_from_snapshot(
        self,
        target: Period,
        snapshot: OverviewSnapshot,
    ) -> MonthlyOverview:
        """Derive every overview figure from an already-read snapshot."""
        budgets = [budget for budget in snapshot.budgets if not budget.is_archived]
        allocations = snapshot.allocations
        transactions = snapshot.transactions
        month = target.date_range()

        available_funds = self._funds.available_funds(snapshot.accounts)
        capital_balance = self._funds.capital_balance(snapshot.accounts)
        total_allocated = self._allocations.sum_for_period(allocations, target)
        cumulative_allocated = self._allocations.sum_cumulative(allocations, target)
        flows = self._transactions.sum_in_range(
            transactions, month, account_roles=self._config.flow_scope.account_roles(),
        )

        allocations_by_budget = _group_by_budget(allocations)
        transactions_by_budget = _group_by_budget(transactions)
        summaries = tuple(
            self._summarize(
                budget,
                target,
                allocations_by_budget.get(budget.budget_id, ()),
                transactions_by_budget.get(budget.budget_id, ()),
            )
            for budget in budgets
        )

        return MonthlyOverview(
            period=target,
            ready_to_assign=available_funds - cumulative_allocated,
            total_allocated=total_allocated,
            total_spent=flows.outflow,
            capital_balance=capital_balance,
            available_funds=available_funds,
            savings_rate=savings_rate(flows.inflow, flows.outflow),
            budget_summaries=summaries,
        )

    def _summarize(
        self,
        budget: BudgetSnapshot,
        target: Period,
        allocations: Iterable[AllocationSnapshot],
        transactions: Iterable[TransactionSnapshot],
    ) -> BudgetSummary:
        allocations = tuple(allocations)
        transactions = tuple(transactions)
        with LogContext.bind(budget_id=str(budget.budget_id)):
            allocated = self._allocations.sum_for_period(allocations, target, budget.budget_id)
            spent = self._transactions.outflow(
                transactions, target.date_range(), budget.budget_id,
            )
            carryover = self._carryover.resolve(budget, allocations, transactions, target)
            return self._envelopes.build(budget, allocated, carryover, spent)
