"""
envelope_engines.envelope -- Per-budget envelope summary.

Responsibility:
    Combine a budget's period allocation, carryover and spend into a
    BudgetSummary with ``available = allocated + carryover - spent``.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - The identity holds exactly, in integer minor units.
    - No clamping: a negative ``available`` is a valid, reportable state
      (the envelope is overspent), not an error.
"""

from __future__ import annotations

from envelope_engines.tracer import traced_engine
from envelope_kernel.domain.dtos import BudgetSnapshot, BudgetSummary


class BudgetEnvelopeBuilder:
    """Builds BudgetSummary records."""

    @traced_engine(
        "envelope",
        "1.0",
        fingerprint_fields=("allocated", "carryover", "spent"),
    )
    def build(
        self,
        budget: BudgetSnapshot,
        allocated: int,
        carryover: int,
        spent: int,
    ) -> BudgetSummary:
        return BudgetSummary(
            budget_id=budget.budget_id,
            name=budget.name,
            budget_type=budget.budget_type,
            target_amount=budget.target_amount,
            allocated=allocated,
            spent=spent,
            carryover=carryover,
            available=allocated + carryover - spent,
        )
