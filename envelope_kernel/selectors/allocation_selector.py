"""
Module: envelope_kernel.selectors.allocation_selector
Responsibility: Read-only allocation queries: the history feeding the
    carryover walk, and the two aggregate sums used by the overview.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - sum_for_period() and sum_cumulative() are distinct operations:
      period equality vs. every period up to and including the bound.
      Ready to Assign depends on the cumulative form; the period total on
      the scoped form.
    - Sums are computed in SQL and COALESCEd to 0 -- no allocations is 0,
      never NULL.
"""

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from envelope_kernel.domain.dtos import AllocationSnapshot, EntityId
from envelope_kernel.domain.period import Period
from envelope_kernel.models.allocation import Allocation
from envelope_kernel.selectors.base import BaseSelector


class AllocationSelector(BaseSelector[Allocation]):
    """Selector for envelope allocations."""

    def __init__(self, session: Session):
        super().__init__(session)

    def list_through(self, period: Period) -> list[AllocationSnapshot]:
        """
        Every allocation whose period is on or before ``period``.

        "YYYY-MM" strings sort chronologically, so the bound is a string
        comparison.
        """
        query = (
            select(Allocation)
            .where(Allocation.period <= str(period))
            .order_by(Allocation.period, Allocation.id)
        )
        return [
            AllocationSnapshot(
                allocation_id=row.id,
                budget_id=row.budget_id,
                period=Period.parse(row.period),
                amount=row.amount,
                allocated_on=row.allocated_on,
                notes=row.notes,
            )
            for row in self.session.scalars(query)
        ]

    def sum_for_period(
        self,
        period: Period,
        budget_id: EntityId | None = None,
    ) -> int:
        """Sum of allocations for exactly ``period`` (optionally one budget)."""
        query = select(func.coalesce(func.sum(Allocation.amount), 0)).where(
            Allocation.period == str(period)
        )
        if budget_id is not None:
            query = query.where(Allocation.budget_id == budget_id)
        return self.scalar_int(query)

    def sum_cumulative(
        self,
        through_period: Period,
        budget_id: EntityId | None = None,
    ) -> int:
        """Sum of allocations for every period up to and including ``through_period``."""
        query = select(func.coalesce(func.sum(Allocation.amount), 0)).where(
            Allocation.period <= str(through_period)
        )
        if budget_id is not None:
            query = query.where(Allocation.budget_id == budget_id)
        return self.scalar_int(query)
