"""
Presentation mapping for MonthlyOverview.

Converts engine output (integer minor units, enum members) into the wire
shape served to clients: major-unit decimals, upper-case budget type names
and camelCase keys.  The engine itself never converts units.
"""

from __future__ import annotations

from decimal import Decimal
from types import MappingProxyType
from typing import Any, Mapping

from envelope_kernel.domain.dtos import BudgetSummary, MonthlyOverview
from envelope_kernel.domain.values import BudgetType
from envelope_kernel.exceptions import InvalidBudgetTypeError

BUDGET_TYPE_TO_WIRE: Mapping[BudgetType, str] = MappingProxyType({
    budget_type: budget_type.value.upper() for budget_type in BudgetType
})

WIRE_TO_BUDGET_TYPE: Mapping[str, BudgetType] = MappingProxyType({
    wire: budget_type for budget_type, wire in BUDGET_TYPE_TO_WIRE.items()
})


def to_major_units(minor: int, scale: int = 100) -> Decimal:
    """Minor units to major units, e.g. 12345 -> Decimal("123.45")."""
    return Decimal(minor) / Decimal(scale)


def budget_type_from_wire(value: str) -> BudgetType:
    try:
        return WIRE_TO_BUDGET_TYPE[value]
    except KeyError:
        raise InvalidBudgetTypeError(value) from None


def summary_to_wire(summary: BudgetSummary, scale: int = 100) -> dict[str, Any]:
    return {
        "budgetId": str(summary.budget_id),
        "name": summary.name,
        "type": BUDGET_TYPE_TO_WIRE[summary.budget_type],
        "targetAmount": to_major_units(summary.target_amount, scale),
        "allocated": to_major_units(summary.allocated, scale),
        "spent": to_major_units(summary.spent, scale),
        "available": to_major_units(summary.available, scale),
        "carryover": to_major_units(summary.carryover, scale),
    }


def overview_to_wire(overview: MonthlyOverview, scale: int = 100) -> dict[str, Any]:
    return {
        "month": str(overview.period),
        "readyToAssign": to_major_units(overview.ready_to_assign, scale),
        "totalAllocated": to_major_units(overview.total_allocated, scale),
        "totalSpent": to_major_units(overview.total_spent, scale),
        "capitalBalance": to_major_units(overview.capital_balance, scale),
        "availableFunds": to_major_units(overview.available_funds, scale),
        "savingsRate": overview.savings_rate,
        "budgetSummaries": [
            summary_to_wire(summary, scale) for summary in overview.budget_summaries
        ],
    }
