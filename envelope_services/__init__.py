"""
envelope_services -- Imperative shell around the aggregation engines.

Owns the collaborator source protocols (in-memory and SQL), the
MonthlyOverviewCalculator and the wire-format mapping.
"""

from envelope_services.monthly_overview import MonthlyOverviewCalculator, savings_rate
from envelope_services.presentation import (
    BUDGET_TYPE_TO_WIRE,
    WIRE_TO_BUDGET_TYPE,
    budget_type_from_wire,
    overview_to_wire,
    summary_to_wire,
    to_major_units,
)
from envelope_services.sources import (
    AccountSource,
    AllocationSource,
    BudgetSource,
    InMemoryAccountSource,
    InMemoryAllocationSource,
    InMemoryBudgetSource,
    InMemoryTransactionSource,
    Sources,
    TransactionSource,
    in_memory_sources,
)
from envelope_services.sql_sources import (
    SqlAccountSource,
    SqlAllocationSource,
    SqlBudgetSource,
    SqlTransactionSource,
    sql_sources,
)

__all__ = [
    "AccountSource",
    "AllocationSource",
    "BUDGET_TYPE_TO_WIRE",
    "BudgetSource",
    "InMemoryAccountSource",
    "InMemoryAllocationSource",
    "InMemoryBudgetSource",
    "InMemoryTransactionSource",
    "MonthlyOverviewCalculator",
    "Sources",
    "SqlAccountSource",
    "SqlAllocationSource",
    "SqlBudgetSource",
    "SqlTransactionSource",
    "TransactionSource",
    "WIRE_TO_BUDGET_TYPE",
    "budget_type_from_wire",
    "in_memory_sources",
    "overview_to_wire",
    "savings_rate",
    "sql_sources",
    "summary_to_wire",
    "to_major_units",
]
