"""
Module: envelope_kernel.models.account
Responsibility: ORM persistence for money accounts whose balances feed
    Available Funds (operational) and Capital Balance (capital).
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/values.py only.

Invariants enforced:
    - balance and initial_balance are integer minor units.
    - role is one of AccountRole's values; "savings" rows written by older
      sync jobs are read as capital by AccountSelector.

Audit relevance:
    Balances are owned and mutated exclusively by the bank synchronization
    collaborator.  The aggregation engine only reads them.
"""

from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from envelope_kernel.db.base import TrackedBase
from envelope_kernel.domain.values import AccountRole


class Account(TrackedBase):
    """A bank or manual account with a synchronized balance."""

    __tablename__ = "accounts"

    __table_args__ = (
        Index("idx_accounts_role", "role"),
        Index("idx_accounts_archived", "is_archived"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="UAH")

    role: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=AccountRole.OPERATIONAL.value,
    )

    balance: Mapped[int] = mapped_column(nullable=False, default=0)

    # Balance at the moment tracking started; informational only
    initial_balance: Mapped[int | None] = mapped_column(nullable=True)

    is_archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Account {self.name} role={self.role} balance={self.balance}>"
