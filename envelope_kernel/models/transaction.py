"""
Module: envelope_kernel.models.transaction
Responsibility: ORM persistence for ledger transactions, optionally linked
    to a budget envelope.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - amount is signed minor units: negative = outflow, positive = inflow.
    - occurred_at may be NULL for pending rows; such rows never participate
      in aggregation.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column

from envelope_kernel.db.base import TrackedBase, UUIDString


class Transaction(TrackedBase):
    """A single movement of money on an account."""

    __tablename__ = "transactions"

    __table_args__ = (
        Index("idx_transactions_date", "occurred_at"),
        Index("idx_transactions_budget_id", "budget_id"),
        Index("idx_transactions_date_budget", "occurred_at", "budget_id"),
        Index("idx_transactions_account_date", "account_id", "occurred_at"),
    )

    account_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("accounts.id", ondelete="SET NULL"),
        nullable=True,
    )

    budget_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("budgets.id", ondelete="SET NULL"),
        nullable=True,
    )

    occurred_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    amount: Mapped[int] = mapped_column(nullable=False)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Internal transfers: neither income nor spending
    exclude_from_calculations: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )
