"""
envelope_engines.carryover -- Balance rolled into a period from prior periods.

Responsibility:
    Walk a budget's allocation and spend history period by period, from the
    budget's first period up to (but excluding) the target period, and
    return the balance that rolls into the target period.  The walk is
    dispatched through a strategy table keyed by BudgetType:

    * SPENDING -> ResettingCarryover: use-it-or-lose-it.  At each period
      boundary a surplus resets to zero, but a deficit persists and
      accumulates until a later allocation absorbs it:
      ``running = min(0, running + allocated(p) - spent(p))``.
    * SAVINGS, GOAL, PERIODIC -> AccumulatingCarryover: a running ledger.
      ``sum(allocated) - sum(spent)`` over all prior periods, unclamped.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Periods before the budget's first period contribute nothing.
    - A budget with no history before the target period has carryover 0.
    - The target period itself is never part of the carryover.

Failure modes:
    - InvalidBudgetTypeError if a budget type has no registered policy.

Usage:
    resolver = CarryoverResolver()
    carryover = resolver.resolve(budget, allocations, transactions, Period.parse("2026-02"))
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from envelope_engines.period_allocation import PeriodAllocationAggregator
from envelope_engines.tracer import traced_engine
from envelope_engines.transactions import TransactionAggregator
from envelope_kernel.domain.dtos import (
    AllocationSnapshot,
    BudgetSnapshot,
    TransactionSnapshot,
)
from envelope_kernel.domain.period import Period
from envelope_kernel.domain.values import BudgetType
from envelope_kernel.exceptions import InvalidBudgetTypeError
from envelope_kernel.logging_config import get_logger

logger = get_logger("engines.carryover")


@dataclass(frozen=True)
class BudgetHistory:
    """
    Per-period allocated and spent totals for one budget.

    ``first_period`` is where the walk starts; None means the budget has
    no history at all.
    """

    first_period: Period | None
    allocated: Mapping[Period, int] = field(default_factory=dict)
    spent: Mapping[Period, int] = field(default_factory=dict)

    def periods_before(self, target: Period) -> Iterator[Period]:
        """Every period from ``first_period`` to ``target.previous()``, in order."""
        if self.first_period is None or self.first_period >= target:
            return iter(())
        return Period.iterate(self.first_period, target.previous())

    def net(self, period: Period) -> int:
        return self.allocated.get(period, 0) - self.spent.get(period, 0)


class CarryoverPolicy(ABC):
    """Strategy computing the carryover of one budget history."""

    name: str = "abstract"

    @abstractmethod
    def carryover(self, history: BudgetHistory, target: Period) -> int:
        ...


class ResettingCarryover(CarryoverPolicy):
    """Surplus resets at each period boundary; deficits persist."""

    name = "resetting"

    def carryover(self, history: BudgetHistory, target: Period) -> int:
        running = 0
        for period in history.periods_before(target):
            running = min(0, running + history.net(period))
        return running


class AccumulatingCarryover(CarryoverPolicy):
    """No reset: positive and negative balances both roll forward."""

    name = "accumulating"

    def carryover(self, history: BudgetHistory, target: Period) -> int:
        return sum(history.net(period) for period in history.periods_before(target))


CARRYOVER_POLICIES: Mapping[BudgetType, CarryoverPolicy] = MappingProxyType({
    BudgetType.SPENDING: ResettingCarryover(),
    BudgetType.SAVINGS: AccumulatingCarryover(),
    BudgetType.GOAL: AccumulatingCarryover(),
    BudgetType.PERIODIC: AccumulatingCarryover(),
})


class CarryoverResolver:
    """
    Resolves the carryover of a budget into a target period.

    Contract:
        ``allocations`` and ``transactions`` may contain records for other
        budgets; only the budget's own records are used.
    """

    def __init__(
        self,
        allocation_aggregator: PeriodAllocationAggregator | None = None,
        transaction_aggregator: TransactionAggregator | None = None,
        policies: Mapping[BudgetType, CarryoverPolicy] | None = None,
    ) -> None:
        self._allocations = allocation_aggregator or PeriodAllocationAggregator()
        self._transactions = transaction_aggregator or TransactionAggregator()
        self._policies = policies if policies is not None else CARRYOVER_POLICIES

    def policy_for(self, budget_type: BudgetType) -> CarryoverPolicy:
        policy = self._policies.get(budget_type)
        if policy is None:
            logger.error("carryover_unknown_budget_type", extra={
                "budget_type": str(budget_type),
            })
            raise InvalidBudgetTypeError(budget_type)
        return policy

    def history_for(
        self,
        budget: BudgetSnapshot,
        allocations: Iterable[AllocationSnapshot],
        transactions: Iterable[TransactionSnapshot],
    ) -> BudgetHistory:
        """
        Collect the budget's per-period totals.

        The walk starts at the budget's creation period.  Without a creation
        date it starts at the earliest period with any activity.
        """
        allocated = self._allocations.totals_by_period(allocations, budget.budget_id)
        spent = self._transactions.outflow_by_period(transactions, budget.budget_id)

        first_period = budget.first_period
        if first_period is None:
            first_period = min(allocated.keys() | spent.keys(), default=None)

        return BudgetHistory(first_period=first_period, allocated=allocated, spent=spent)

    @traced_engine("carryover", "1.0", fingerprint_fields=("target",))
    def resolve(
        self,
        budget: BudgetSnapshot,
        allocations: Iterable[AllocationSnapshot],
        transactions: Iterable[TransactionSnapshot],
        target: Period,
    ) -> int:
        policy = self.policy_for(budget.budget_type)
        history = self.history_for(budget, allocations, transactions)
        carryover = policy.carryover(history, target)

        logger.debug("carryover_resolved", extra={
            "budget_id": str(budget.budget_id),
            "budget_type": budget.budget_type.value,
            "policy": policy.name,
            "target": str(target),
            "first_period": str(history.first_period) if history.first_period else None,
            "carryover": carryover,
        })
        return carryover
