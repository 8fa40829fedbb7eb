"""
DTOs -- Immutable snapshot records consumed and produced by the engine.

Responsibility:
    Input records (accounts, budgets, allocations, transactions) are the
    read side of the four collaborators, frozen for the duration of one
    computation.  Output records (BudgetSummary, MonthlyOverview) are the
    engine's result.

Architecture position:
    Kernel > Domain -- pure data, zero I/O, no ORM types.

Invariants enforced:
    - All monetary fields are ``int`` minor units (e.g. cents).  Floats are
      never used for money; the only float is the dimensionless savings rate.
    - Records are frozen; collections are tuples.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TypeAlias
from uuid import UUID

from envelope_kernel.domain.period import Period
from envelope_kernel.domain.values import AccountRole, BudgetType, TargetCadence

EntityId: TypeAlias = UUID | str | int


# =============================================================================
# Inputs
# =============================================================================


@dataclass(frozen=True)
class AccountSnapshot:
    """Balance of one account, owned by the ledger/sync collaborator."""

    account_id: EntityId
    role: AccountRole
    balance: int
    name: str = ""
    is_archived: bool = False
    initial_balance: int | None = None


@dataclass(frozen=True)
class BudgetSnapshot:
    """
    One envelope definition.

    ``created_on`` bounds the carryover walk: periods before it contribute
    nothing.  When None, the earliest period in the budget's own allocation
    and transaction history is used instead.
    """

    budget_id: EntityId
    name: str
    budget_type: BudgetType
    target_amount: int = 0
    target_cadence: TargetCadence | None = None
    target_cadence_months: int | None = None
    target_date: date | None = None
    created_on: date | None = None
    is_archived: bool = False

    @property
    def first_period(self) -> Period | None:
        if self.created_on is None:
            return None
        return Period.from_moment(self.created_on)


@dataclass(frozen=True)
class AllocationSnapshot:
    """Funds assigned to an envelope for one period. Negative amounts move funds away."""

    allocation_id: EntityId
    budget_id: EntityId
    period: Period
    amount: int
    allocated_on: date | None = None
    notes: str | None = None


@dataclass(frozen=True)
class TransactionSnapshot:
    """
    One ledger movement.

    ``amount`` is signed: negative is an outflow (debit), positive an inflow
    (credit).  ``occurred_at`` of None means the transaction is not yet
    dated and never participates.  ``exclude_from_calculations`` marks
    internal transfers that count as neither income nor spending.
    """

    transaction_id: EntityId
    account_id: EntityId | None
    amount: int
    occurred_at: date | datetime | None
    budget_id: EntityId | None = None
    account_role: AccountRole | None = None
    exclude_from_calculations: bool = False

    @property
    def is_outflow(self) -> bool:
        return self.amount < 0

    @property
    def is_inflow(self) -> bool:
        return self.amount > 0


@dataclass(frozen=True)
class FlowTotals:
    """Inflow and outflow over a date range, both non-negative minor units."""

    inflow: int = 0
    outflow: int = 0


@dataclass(frozen=True)
class OverviewSnapshot:
    """The four collections read once at the start of a computation."""

    accounts: tuple[AccountSnapshot, ...] = ()
    budgets: tuple[BudgetSnapshot, ...] = ()
    allocations: tuple[AllocationSnapshot, ...] = ()
    transactions: tuple[TransactionSnapshot, ...] = ()


# =============================================================================
# Outputs
# =============================================================================


@dataclass(frozen=True)
class BudgetSummary:
    """
    Envelope state for the target period.

    Guarantees:
        available == allocated + carryover - spent, exactly.
    """

    budget_id: EntityId
    name: str
    budget_type: BudgetType
    target_amount: int
    allocated: int
    spent: int
    carryover: int
    available: int

    @property
    def is_overspent(self) -> bool:
        return self.available < 0


@dataclass(frozen=True)
class MonthlyOverview:
    """Consistent financial snapshot for one period."""

    period: Period
    ready_to_assign: int
    total_allocated: int
    total_spent: int
    capital_balance: int
    available_funds: int
    savings_rate: float
    budget_summaries: tuple[BudgetSummary, ...] = field(default_factory=tuple)

    def summary_for(self, budget_id: EntityId) -> BudgetSummary | None:
        for summary in self.budget_summaries:
            if summary.budget_id == budget_id:
                return summary
        return None
