"""Tests for BudgetEnvelopeBuilder."""

from envelope_engines.envelope import BudgetEnvelopeBuilder
from envelope_kernel.domain.values import BudgetType
from tests.conftest import make_budget


class TestBudgetEnvelopeBuilder:

    def setup_method(self):
        self.builder = BudgetEnvelopeBuilder()
        self.budget = make_budget(
            BudgetType.SPENDING, budget_id="food", name="Food", target_amount=600000,
        )

    def test_available_identity(self):
        summary = self.builder.build(self.budget, allocated=500000, carryover=0, spent=40000)

        assert summary.available == 460000
        assert summary.budget_id == "food"
        assert summary.name == "Food"
        assert summary.budget_type is BudgetType.SPENDING
        assert summary.target_amount == 600000

    def test_negative_carryover_reduces_available(self):
        summary = self.builder.build(self.budget, allocated=5000, carryover=-2000, spent=1000)

        assert summary.available == 2000

    def test_overspend_is_not_clamped(self):
        summary = self.builder.build(self.budget, allocated=3000, carryover=0, spent=5000)

        assert summary.available == -2000
        assert summary.is_overspent
