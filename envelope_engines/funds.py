"""
envelope_engines.funds -- Account balance aggregation by role.

Responsibility:
    Sum balances of non-archived accounts for one role.  Operational
    accounts give Available Funds; capital accounts give Capital Balance.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Archived accounts never contribute, even if a source returns them.
    - Integer minor-unit arithmetic only; an empty account set yields 0.
"""

from __future__ import annotations

from collections.abc import Iterable

from envelope_engines.tracer import traced_engine
from envelope_kernel.domain.dtos import AccountSnapshot
from envelope_kernel.domain.values import AccountRole


class FundsAggregator:
    """Sums account balances by role."""

    @traced_engine("funds", "1.0", fingerprint_fields=("role",))
    def total_for_role(
        self,
        accounts: Iterable[AccountSnapshot],
        role: AccountRole,
    ) -> int:
        return sum(
            account.balance
            for account in accounts
            if not account.is_archived and account.role == role
        )

    def available_funds(self, accounts: Iterable[AccountSnapshot]) -> int:
        """Spendable cash: operational balances."""
        return self.total_for_role(accounts, AccountRole.OPERATIONAL)

    def capital_balance(self, accounts: Iterable[AccountSnapshot]) -> int:
        """Savings and investments: capital balances."""
        return self.total_for_role(accounts, AccountRole.CAPITAL)
