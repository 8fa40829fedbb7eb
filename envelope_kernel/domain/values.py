"""
Values -- Closed enumerations for accounts and budget envelopes.

Responsibility:
    Defines the tagged variants the aggregation engine dispatches on:
    account role (operational vs. capital) and budget type (spending,
    savings, goal, periodic), plus the optional target cadence.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Failure modes:
    - InvalidAccountRoleError / InvalidBudgetTypeError from ``parse`` when a
      raw string falls outside the closed variant and no default is given.
"""

from __future__ import annotations

from enum import Enum

from envelope_kernel.exceptions import (
    InvalidAccountRoleError,
    InvalidBudgetTypeError,
)


class AccountRole(str, Enum):
    """Role of an account in the budget."""

    OPERATIONAL = "operational"  # Spendable cash
    CAPITAL = "capital"  # Savings / investments, outside spending power

    @classmethod
    def parse(cls, value: str | AccountRole) -> AccountRole:
        """Parse a role string; ``"savings"`` is the legacy name of CAPITAL."""
        if isinstance(value, AccountRole):
            return value
        normalized = str(value).strip().lower()
        if normalized == "savings":
            return cls.CAPITAL
        try:
            return cls(normalized)
        except ValueError:
            raise InvalidAccountRoleError(value) from None


class BudgetType(str, Enum):
    """Envelope type; selects the carryover policy."""

    SPENDING = "spending"  # Surplus resets monthly, deficits persist
    SAVINGS = "savings"  # Running ledger
    GOAL = "goal"  # Running ledger toward a target
    PERIODIC = "periodic"  # Running ledger for irregular bills

    @classmethod
    def parse(
        cls,
        value: str | BudgetType | None,
        default: BudgetType | None = None,
    ) -> BudgetType:
        """Parse a budget type string, falling back to ``default`` if given."""
        if isinstance(value, BudgetType):
            return value
        if value:
            try:
                return cls(str(value).strip().lower())
            except ValueError:
                pass
        if default is not None:
            return default
        raise InvalidBudgetTypeError(value)


class TargetCadence(str, Enum):
    """How often a budget's target amount recurs."""

    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"  # Every ``target_cadence_months`` months

    @classmethod
    def parse_optional(cls, value: str | TargetCadence | None) -> TargetCadence | None:
        """Parse a cadence string, returning None when absent or unknown."""
        if isinstance(value, TargetCadence):
            return value
        if not value:
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None
