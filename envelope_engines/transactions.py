"""
envelope_engines.transactions -- Inflow/outflow aggregation over date ranges.

Responsibility:
    Sum transaction amounts inside a half-open ``[start, end)`` range,
    separating inflow (credits, amount > 0) from outflow (debits,
    amount < 0, reported as a positive magnitude).  Optional filters:
    one budget, and a set of account roles (the flow-scope policy).

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Transactions without a date never participate.
    - Transactions flagged ``exclude_from_calculations`` (internal
      transfers) count as neither inflow nor outflow.
    - Timezone-aware timestamps are converted to the configured zone and
      compared as wall-clock; naive timestamps and dates are already
      wall-clock.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from datetime import tzinfo

from envelope_engines.tracer import traced_engine
from envelope_kernel.domain.dtos import EntityId, FlowTotals, TransactionSnapshot
from envelope_kernel.domain.period import DateRange, Period, to_wall_clock
from envelope_kernel.domain.values import AccountRole


class TransactionAggregator:
    """
    Sums transactions within a date range.

    Contract:
        ``budget_id=None`` means "every transaction regardless of budget
        linkage"; ``account_roles=None`` means "every account".
    """

    def __init__(self, tz: tzinfo | None = None) -> None:
        self._tz = tz

    def period_of(self, transaction: TransactionSnapshot) -> Period | None:
        """Wall-clock period of a transaction, or None when undated."""
        if transaction.occurred_at is None:
            return None
        return Period.from_moment(to_wall_clock(transaction.occurred_at, self._tz))

    def participates(
        self,
        transaction: TransactionSnapshot,
        budget_id: EntityId | None = None,
        account_roles: frozenset[AccountRole] | None = None,
    ) -> bool:
        """Whether a transaction passes the date, exclusion and scope filters."""
        if transaction.occurred_at is None or transaction.exclude_from_calculations:
            return False
        if budget_id is not None and transaction.budget_id != budget_id:
            return False
        if account_roles is not None and transaction.account_role not in account_roles:
            return False
        return True

    @traced_engine(
        "transactions",
        "1.0",
        fingerprint_fields=("date_range", "budget_id", "account_roles"),
    )
    def sum_in_range(
        self,
        transactions: Iterable[TransactionSnapshot],
        date_range: DateRange,
        budget_id: EntityId | None = None,
        account_roles: frozenset[AccountRole] | None = None,
    ) -> FlowTotals:
        inflow = 0
        outflow = 0
        for transaction in transactions:
            if not self.participates(transaction, budget_id, account_roles):
                continue
            if not date_range.contains(to_wall_clock(transaction.occurred_at, self._tz)):
                continue
            if transaction.is_outflow:
                outflow += -transaction.amount
            elif transaction.is_inflow:
                inflow += transaction.amount
        return FlowTotals(inflow=inflow, outflow=outflow)

    def outflow(
        self,
        transactions: Iterable[TransactionSnapshot],
        date_range: DateRange,
        budget_id: EntityId | None = None,
        account_roles: frozenset[AccountRole] | None = None,
    ) -> int:
        return self.sum_in_range(transactions, date_range, budget_id, account_roles).outflow

    def inflow(
        self,
        transactions: Iterable[TransactionSnapshot],
        date_range: DateRange,
        budget_id: EntityId | None = None,
        account_roles: frozenset[AccountRole] | None = None,
    ) -> int:
        return self.sum_in_range(transactions, date_range, budget_id, account_roles).inflow

    def outflow_by_period(
        self,
        transactions: Iterable[TransactionSnapshot],
        budget_id: EntityId | None = None,
    ) -> dict[Period, int]:
        """Outflow magnitude per wall-clock period, for period-by-period walks."""
        totals: dict[Period, int] = defaultdict(int)
        for transaction in transactions:
            if not transaction.is_outflow or not self.participates(transaction, budget_id):
                continue
            totals[self.period_of(transaction)] += -transaction.amount
        return dict(totals)
