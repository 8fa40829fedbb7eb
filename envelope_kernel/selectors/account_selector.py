"""
Module: envelope_kernel.selectors.account_selector
Responsibility: Read-only queries over accounts for the funds aggregation.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Archived accounts are never returned.
    - Legacy "savings" role values are reported as AccountRole.CAPITAL.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from envelope_kernel.domain.dtos import AccountSnapshot
from envelope_kernel.domain.values import AccountRole
from envelope_kernel.models.account import Account
from envelope_kernel.selectors.base import BaseSelector


class AccountSelector(BaseSelector[Account]):
    """Selector for non-archived accounts."""

    def __init__(self, session: Session):
        super().__init__(session)

    def list_active(self, role: AccountRole | None = None) -> list[AccountSnapshot]:
        """
        Non-archived accounts, optionally restricted to one role.

        Args:
            role: Only return accounts with this role.

        Returns:
            AccountSnapshot DTOs ordered by name.
        """
        query = (
            select(Account)
            .where(Account.is_archived.is_(False))
            .order_by(Account.name, Account.id)
        )
        snapshots = [self._to_snapshot(row) for row in self.session.scalars(query)]
        if role is not None:
            # Role filtering happens after parsing so legacy aliases match
            snapshots = [s for s in snapshots if s.role == role]
        return snapshots

    @staticmethod
    def _to_snapshot(row: Account) -> AccountSnapshot:
        return AccountSnapshot(
            account_id=row.id,
            name=row.name,
            role=AccountRole.parse(row.role),
            balance=row.balance,
            is_archived=row.is_archived,
            initial_balance=row.initial_balance,
        )
