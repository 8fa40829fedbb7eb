"""
Module: envelope_kernel.selectors.transaction_selector
Responsibility: Read-only transaction queries: dated history for the
    aggregation snapshot, bounded windows for re-bucketing in Python, and
    SQL-side inflow/outflow sums.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Rows with NULL occurred_at are never returned or summed.
    - Rows flagged exclude_from_calculations are returned (the engine
      decides) but never counted by sum_in_range().
    - Ranges are half-open: occurred_at >= start AND occurred_at < end.

Failure modes:
    - Bounds are compared by the database; on PostgreSQL naive bounds are
      interpreted in the session time zone.  Callers that re-bucket in
      another zone should widen the bound (see
      MonthlyOverviewCalculator.fetch_snapshot).
"""

from datetime import datetime

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from envelope_kernel.domain.dtos import EntityId, FlowTotals, TransactionSnapshot
from envelope_kernel.domain.values import AccountRole
from envelope_kernel.models.account import Account
from envelope_kernel.models.transaction import Transaction
from envelope_kernel.selectors.base import BaseSelector


class TransactionSelector(BaseSelector[Transaction]):
    """Selector for dated ledger transactions."""

    def __init__(self, session: Session):
        super().__init__(session)

    def list_before(self, end: datetime) -> list[TransactionSnapshot]:
        """
        Every dated transaction strictly before ``end``, with its account role.

        Returns:
            TransactionSnapshot DTOs ordered by occurred_at.
        """
        return self._snapshots(Transaction.occurred_at < end)

    def list_between(self, start: datetime, end: datetime) -> list[TransactionSnapshot]:
        """Every dated transaction in ``[start, end)``, with its account role."""
        return self._snapshots(
            Transaction.occurred_at >= start,
            Transaction.occurred_at < end,
        )

    def _snapshots(self, *conditions) -> list[TransactionSnapshot]:
        query = (
            select(Transaction, Account.role)
            .outerjoin(Account, Transaction.account_id == Account.id)
            .where(Transaction.occurred_at.is_not(None), *conditions)
            .order_by(Transaction.occurred_at, Transaction.id)
        )
        return [
            TransactionSnapshot(
                transaction_id=row.id,
                account_id=row.account_id,
                budget_id=row.budget_id,
                occurred_at=row.occurred_at,
                amount=row.amount,
                account_role=AccountRole.parse(role) if role is not None else None,
                exclude_from_calculations=row.exclude_from_calculations,
            )
            for row, role in self.session.execute(query).all()
        ]

    def sum_in_range(
        self,
        start: datetime,
        end: datetime,
        budget_id: EntityId | None = None,
    ) -> FlowTotals:
        """
        Inflow and outflow in ``[start, end)``, optionally for one budget.

        Outflow is reported as a positive magnitude.
        """
        inflow = func.coalesce(
            func.sum(case((Transaction.amount > 0, Transaction.amount), else_=0)),
            0,
        )
        outflow = func.coalesce(
            func.sum(case((Transaction.amount < 0, -Transaction.amount), else_=0)),
            0,
        )
        query = (
            select(inflow, outflow)
            .where(Transaction.occurred_at.is_not(None))
            .where(Transaction.occurred_at >= start)
            .where(Transaction.occurred_at < end)
            .where(Transaction.exclude_from_calculations.is_(False))
        )
        if budget_id is not None:
            query = query.where(Transaction.budget_id == budget_id)

        total_in, total_out = self.session.execute(query).one()
        return FlowTotals(inflow=int(total_in), outflow=int(total_out))
