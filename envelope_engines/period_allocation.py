"""
envelope_engines.period_allocation -- Allocation sums by period.

Responsibility:
    Two distinct summations over allocation records:

    * ``sum_for_period`` -- allocations whose period equals the target
      period exactly (the period summary).
    * ``sum_cumulative`` -- allocations for every period up to and
      including the bound (the Ready to Assign identity).

    They are kept as separately named operations because substituting one
    for the other silently produces plausible but wrong numbers.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Allocations for the same (budget, period) are always summed.
    - Zero matching allocations yields 0, never an error.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from envelope_engines.tracer import traced_engine
from envelope_kernel.domain.dtos import AllocationSnapshot, EntityId
from envelope_kernel.domain.period import Period


def _matches_budget(allocation: AllocationSnapshot, budget_id: EntityId | None) -> bool:
    return budget_id is None or allocation.budget_id == budget_id


class PeriodAllocationAggregator:
    """Sums allocation amounts, scoped to a period or cumulatively."""

    @traced_engine("period_allocation", "1.0", fingerprint_fields=("period", "budget_id"))
    def sum_for_period(
        self,
        allocations: Iterable[AllocationSnapshot],
        period: Period,
        budget_id: EntityId | None = None,
    ) -> int:
        """Sum for exactly ``period``; all budgets when ``budget_id`` is None."""
        return sum(
            allocation.amount
            for allocation in allocations
            if allocation.period == period and _matches_budget(allocation, budget_id)
        )

    @traced_engine(
        "period_allocation_cumulative",
        "1.0",
        fingerprint_fields=("through_period", "budget_id", "since"),
    )
    def sum_cumulative(
        self,
        allocations: Iterable[AllocationSnapshot],
        through_period: Period,
        budget_id: EntityId | None = None,
        since: Period | None = None,
    ) -> int:
        """
        Sum over every period ``<= through_period``.

        ``since`` optionally sets an inclusive lower bound (used to ignore
        allocations dated before a budget existed).
        """
        return sum(
            allocation.amount
            for allocation in allocations
            if allocation.period <= through_period
            and (since is None or allocation.period >= since)
            and _matches_budget(allocation, budget_id)
        )

    def totals_by_period(
        self,
        allocations: Iterable[AllocationSnapshot],
        budget_id: EntityId | None = None,
    ) -> dict[Period, int]:
        """Allocated amount per period, for period-by-period walks."""
        totals: dict[Period, int] = defaultdict(int)
        for allocation in allocations:
            if _matches_budget(allocation, budget_id):
                totals[allocation.period] += allocation.amount
        return dict(totals)
