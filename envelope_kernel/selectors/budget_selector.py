"""
Module: envelope_kernel.selectors.budget_selector
Responsibility: Read-only queries over budget envelopes.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Archived budgets are never returned by list_active().
    - Unknown budget_type values raise InvalidBudgetTypeError rather than
      silently picking a carryover policy.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from envelope_kernel.domain.dtos import BudgetSnapshot
from envelope_kernel.domain.values import BudgetType, TargetCadence
from envelope_kernel.models.budget import Budget
from envelope_kernel.selectors.base import BaseSelector


class BudgetSelector(BaseSelector[Budget]):
    """Selector for budget envelopes."""

    def __init__(self, session: Session):
        super().__init__(session)

    def list_active(self) -> list[BudgetSnapshot]:
        """Non-archived budgets ordered by name."""
        query = (
            select(Budget)
            .where(Budget.is_archived.is_(False))
            .order_by(Budget.name, Budget.id)
        )
        return [self._to_snapshot(row) for row in self.session.scalars(query)]

    @staticmethod
    def _to_snapshot(row: Budget) -> BudgetSnapshot:
        return BudgetSnapshot(
            budget_id=row.id,
            name=row.name,
            budget_type=BudgetType.parse(row.budget_type),
            target_amount=row.target_amount,
            target_cadence=TargetCadence.parse_optional(row.target_cadence),
            target_cadence_months=row.target_cadence_months,
            target_date=row.target_date,
            created_on=row.created_on,
            is_archived=row.is_archived,
        )
