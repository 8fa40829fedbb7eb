"""
Module: envelope_engines
Responsibility:
    Package entrypoint that re-exports the pure aggregation engines.  This
    is the canonical import surface for envelope_services.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import envelope_kernel.domain, envelope_kernel.exceptions and
    envelope_kernel.logging_config (and sibling engine modules).
    MUST NOT import envelope_services, envelope_config, SQLAlchemy, or models.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
    - Integer minor-unit arithmetic: floats are never used for money.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from envelope_engines import (
        BudgetEnvelopeBuilder,
        CarryoverResolver,
        FundsAggregator,
        PeriodAllocationAggregator,
        TransactionAggregator,
    )
"""

from envelope_engines.carryover import (
    CARRYOVER_POLICIES,
    AccumulatingCarryover,
    BudgetHistory,
    CarryoverPolicy,
    CarryoverResolver,
    ResettingCarryover,
)
from envelope_engines.envelope import BudgetEnvelopeBuilder
from envelope_engines.funds import FundsAggregator
from envelope_engines.period_allocation import PeriodAllocationAggregator
from envelope_engines.tracer import compute_input_fingerprint, traced_engine
from envelope_engines.transactions import TransactionAggregator

__all__ = [
    "AccumulatingCarryover",
    "BudgetEnvelopeBuilder",
    "BudgetHistory",
    "CARRYOVER_POLICIES",
    "CarryoverPolicy",
    "CarryoverResolver",
    "FundsAggregator",
    "PeriodAllocationAggregator",
    "ResettingCarryover",
    "TransactionAggregator",
    "compute_input_fingerprint",
    "traced_engine",
]
