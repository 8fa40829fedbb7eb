"""
Pure domain layer.

This module contains pure value objects and snapshot DTOs with NO
dependencies on:
- ORM (SQLAlchemy)
- Database
- Time/clock (except the injectable Clock interface)
- I/O

All domain objects are immutable and deterministic.
"""

from envelope_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from envelope_kernel.domain.dtos import (
    AccountSnapshot,
    AllocationSnapshot,
    BudgetSnapshot,
    BudgetSummary,
    EntityId,
    FlowTotals,
    MonthlyOverview,
    OverviewSnapshot,
    TransactionSnapshot,
)
from envelope_kernel.domain.period import DateRange, Period, to_wall_clock
from envelope_kernel.domain.values import AccountRole, BudgetType, TargetCadence

__all__ = [
    "AccountRole",
    "AccountSnapshot",
    "AllocationSnapshot",
    "BudgetSnapshot",
    "BudgetSummary",
    "BudgetType",
    "Clock",
    "DateRange",
    "DeterministicClock",
    "EntityId",
    "FlowTotals",
    "MonthlyOverview",
    "OverviewSnapshot",
    "Period",
    "SystemClock",
    "TargetCadence",
    "TransactionSnapshot",
    "to_wall_clock",
]
