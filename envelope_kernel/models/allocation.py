"""
Module: envelope_kernel.models.allocation
Responsibility: ORM persistence for allocations -- funds assigned to an
    envelope for one calendar month.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - period is stored as "YYYY-MM"; string order equals calendar order, so
      period-scoped and cumulative sums are plain equality / <= filters.
    - Several rows may share (budget_id, period); they are summed, never
      overwritten.  Negative amounts record corrections or moved funds.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from envelope_kernel.db.base import TrackedBase, UUIDString


class Allocation(TrackedBase):
    """One assignment of funds to a budget for a period."""

    __tablename__ = "allocations"

    __table_args__ = (
        Index("idx_allocations_budget_id", "budget_id"),
        Index("idx_allocations_period", "period"),
        Index("idx_allocations_budget_period", "budget_id", "period"),
    )

    budget_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("budgets.id", ondelete="CASCADE"),
        nullable=False,
    )

    amount: Mapped[int] = mapped_column(nullable=False)

    period: Mapped[str] = mapped_column(String(7), nullable=False)

    allocated_on: Mapped[date | None] = mapped_column(Date, nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
