"""
Module: envelope_kernel.models.budget
Responsibility: ORM persistence for budget envelopes.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/values.py only.

Invariants enforced:
    - budget_type is one of BudgetType's values.
    - created_on is the business creation date; the carryover walk never
      looks at periods before it.
    - Archived budgets stay in the table.  BudgetSelector.list_active() drops
      them, so they get no summary; their allocations still count.
"""

from datetime import date

from sqlalchemy import Boolean, Date, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from envelope_kernel.db.base import TrackedBase
from envelope_kernel.domain.values import BudgetType


class Budget(TrackedBase):
    """A named envelope with a type-specific rollover policy."""

    __tablename__ = "budgets"

    __table_args__ = (
        UniqueConstraint("name", name="uq_budget_name"),
        Index("idx_budgets_type", "budget_type"),
        Index("idx_budgets_active", "is_archived"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    budget_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=BudgetType.SPENDING.value,
    )

    target_amount: Mapped[int] = mapped_column(nullable=False, default=0)

    target_cadence: Mapped[str | None] = mapped_column(String(20), nullable=True)

    target_cadence_months: Mapped[int | None] = mapped_column(Integer, nullable=True)

    target_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    created_on: Mapped[date | None] = mapped_column(Date, nullable=True)

    is_archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Budget {self.name} type={self.budget_type}>"
