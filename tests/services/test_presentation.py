"""Tests for the wire-format mapping of MonthlyOverview."""

from decimal import Decimal

import pytest

from envelope_kernel.domain.dtos import BudgetSummary, MonthlyOverview
from envelope_kernel.domain.period import Period
from envelope_kernel.domain.values import BudgetType
from envelope_kernel.exceptions import InvalidBudgetTypeError
from envelope_services.presentation import (
    BUDGET_TYPE_TO_WIRE,
    WIRE_TO_BUDGET_TYPE,
    budget_type_from_wire,
    overview_to_wire,
    to_major_units,
)


class TestMajorUnits:

    @pytest.mark.parametrize("minor,expected", [
        (12345, Decimal("123.45")),
        (-200, Decimal("-2")),
        (0, Decimal("0")),
        (1, Decimal("0.01")),
    ])
    def test_default_scale(self, minor, expected):
        assert to_major_units(minor) == expected

    def test_custom_scale(self):
        assert to_major_units(1500, scale=1000) == Decimal("1.5")


class TestBudgetTypeMapping:

    def test_upper_case_names(self):
        assert BUDGET_TYPE_TO_WIRE[BudgetType.SPENDING] == "SPENDING"
        assert BUDGET_TYPE_TO_WIRE[BudgetType.PERIODIC] == "PERIODIC"

    def test_mapping_is_total_and_invertible(self):
        assert set(BUDGET_TYPE_TO_WIRE) == set(BudgetType)
        for budget_type, wire in BUDGET_TYPE_TO_WIRE.items():
            assert WIRE_TO_BUDGET_TYPE[wire] is budget_type

    def test_unknown_wire_value_rejected(self):
        with pytest.raises(InvalidBudgetTypeError):
            budget_type_from_wire("spending")


class TestOverviewToWire:

    def setup_method(self):
        self.overview = MonthlyOverview(
            period=Period(2026, 2),
            ready_to_assign=20000,
            total_allocated=500000,
            total_spent=40000,
            capital_balance=1000000,
            available_funds=50000,
            savings_rate=0.25,
            budget_summaries=(
                BudgetSummary(
                    budget_id="food",
                    name="Food",
                    budget_type=BudgetType.GOAL,
                    target_amount=600000,
                    allocated=500000,
                    spent=40000,
                    carryover=-2000,
                    available=458000,
                ),
            ),
        )

    def test_top_level_fields(self):
        wire = overview_to_wire(self.overview)

        assert wire["month"] == "2026-02"
        assert wire["readyToAssign"] == Decimal("200")
        assert wire["totalAllocated"] == Decimal("5000")
        assert wire["totalSpent"] == Decimal("400")
        assert wire["capitalBalance"] == Decimal("10000")
        assert wire["availableFunds"] == Decimal("500")
        assert wire["savingsRate"] == 0.25

    def test_budget_summaries(self):
        (summary,) = overview_to_wire(self.overview)["budgetSummaries"]

        assert summary == {
            "budgetId": "food",
            "name": "Food",
            "type": "GOAL",
            "targetAmount": Decimal("6000"),
            "allocated": Decimal("5000"),
            "spent": Decimal("400"),
            "available": Decimal("4580"),
            "carryover": Decimal("-20"),
        }
