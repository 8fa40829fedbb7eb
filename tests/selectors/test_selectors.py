"""
Tests for the read-only selectors against SQLite.

Covers:
- Archived filtering and legacy role parsing
- Period-bounded allocation reads and SQL aggregate sums
- Dated transaction reads joined with account role
- SQL-backed sources feeding the monthly overview end to end
"""

from datetime import date, datetime
from uuid import uuid4

import pytest

from envelope_config.schema import EngineConfig, FlowScope
from envelope_kernel.domain.dtos import FlowTotals
from envelope_kernel.domain.period import Period
from envelope_kernel.domain.values import AccountRole, BudgetType
from envelope_kernel.models import Account, Allocation, Budget, Transaction
from envelope_kernel.selectors import (
    AccountSelector,
    AllocationSelector,
    BudgetSelector,
    TransactionSelector,
)
from envelope_services.monthly_overview import MonthlyOverviewCalculator
from envelope_services.sql_sources import sql_sources

MAIN = uuid4()
STASH = uuid4()
CLOSED = uuid4()
FOOD = uuid4()
TRIP = uuid4()
OLD = uuid4()


@pytest.fixture
def seeded(session_factory):
    """A small ledger: two live accounts, two live budgets, one of each archived."""
    with session_factory() as session:
        session.add_all([
            Account(id=MAIN, name="Main card", role="operational", balance=800000),
            Account(id=STASH, name="Stash", role="savings", balance=1000000),
            Account(id=CLOSED, name="Closed", role="operational", balance=5000, is_archived=True),
            Budget(id=FOOD, name="Food", budget_type="spending", created_on=date(2026, 1, 1)),
            Budget(
                id=TRIP, name="Trip", budget_type="goal", target_amount=300000,
                target_cadence="yearly", created_on=date(2026, 1, 1),
            ),
            Budget(id=OLD, name="Old", budget_type="savings", is_archived=True),
        ])
        session.flush()
        session.add_all([
            Allocation(budget_id=FOOD, period="2026-01", amount=3000),
            Allocation(budget_id=FOOD, period="2026-02", amount=500000),
            Allocation(budget_id=TRIP, period="2026-01", amount=10000),
            Allocation(budget_id=TRIP, period="2026-03", amount=99999),
            Allocation(budget_id=OLD, period="2026-02", amount=7000),
            Transaction(
                account_id=MAIN, budget_id=FOOD, amount=-5000,
                occurred_at=datetime(2026, 1, 10, 12, 0),
            ),
            Transaction(
                account_id=MAIN, budget_id=FOOD, amount=-25000,
                occurred_at=datetime(2026, 2, 4, 9, 0),
            ),
            Transaction(
                account_id=MAIN, budget_id=FOOD, amount=-15000,
                occurred_at=datetime(2026, 2, 18, 19, 30),
            ),
            Transaction(account_id=MAIN, amount=200000, occurred_at=datetime(2026, 2, 1, 8, 0)),
            Transaction(
                account_id=MAIN, amount=-50000, occurred_at=datetime(2026, 2, 2, 8, 0),
                exclude_from_calculations=True,
            ),
            Transaction(account_id=STASH, amount=-1000, occurred_at=datetime(2026, 2, 20, 8, 0)),
            Transaction(account_id=MAIN, amount=-777, occurred_at=None),
            Transaction(account_id=MAIN, amount=-888, occurred_at=datetime(2026, 3, 1, 0, 0)),
        ])
        session.commit()
    return session_factory


class TestAccountSelector:

    def test_list_active_excludes_archived(self, seeded, session):
        accounts = AccountSelector(session).list_active()

        assert [a.name for a in accounts] == ["Main card", "Stash"]
        assert accounts[0].account_id == MAIN

    def test_legacy_savings_role_is_capital(self, seeded, session):
        capital = AccountSelector(session).list_active(AccountRole.CAPITAL)

        assert [a.account_id for a in capital] == [STASH]
        assert capital[0].role is AccountRole.CAPITAL


class TestBudgetSelector:

    def test_list_active(self, seeded, session):
        budgets = BudgetSelector(session).list_active()

        assert [b.budget_id for b in budgets] == [FOOD, TRIP]
        assert budgets[1].budget_type is BudgetType.GOAL
        assert budgets[1].target_amount == 300000
        assert budgets[0].created_on == date(2026, 1, 1)


class TestAllocationSelector:

    def test_list_through_bounds_period(self, seeded, session):
        rows = AllocationSelector(session).list_through(Period(2026, 2))

        assert {r.period for r in rows} == {Period(2026, 1), Period(2026, 2)}
        assert len(rows) == 4

    def test_sum_for_period(self, seeded, session):
        selector = AllocationSelector(session)

        assert selector.sum_for_period(Period(2026, 2)) == 507000
        assert selector.sum_for_period(Period(2026, 2), FOOD) == 500000
        assert selector.sum_for_period(Period(2025, 2)) == 0

    def test_sum_cumulative(self, seeded, session):
        selector = AllocationSelector(session)

        assert selector.sum_cumulative(Period(2026, 2)) == 3000 + 500000 + 10000 + 7000
        assert selector.sum_cumulative(Period(2026, 3), TRIP) == 109999


class TestTransactionSelector:

    def test_list_before_skips_undated_and_later(self, seeded, session):
        rows = TransactionSelector(session).list_before(Period(2026, 2).end())

        amounts = [r.amount for r in rows]
        assert -777 not in amounts
        assert -888 not in amounts
        assert len(rows) == 6

    def test_list_before_carries_account_role(self, seeded, session):
        rows = TransactionSelector(session).list_before(Period(2026, 2).end())

        stash_rows = [r for r in rows if r.account_id == STASH]
        assert stash_rows[0].account_role is AccountRole.CAPITAL

    def test_sum_in_range(self, seeded, session):
        month = Period(2026, 2)
        selector = TransactionSelector(session)

        assert selector.sum_in_range(month.start(), month.end()) == FlowTotals(
            inflow=200000, outflow=41000,
        )
        assert selector.sum_in_range(month.start(), month.end(), FOOD) == FlowTotals(
            inflow=0, outflow=40000,
        )

    def test_list_between_is_half_open(self, seeded, session):
        rows = TransactionSelector(session).list_between(
            datetime(2026, 2, 1, 8, 0), datetime(2026, 2, 18, 19, 30),
        )

        assert [r.amount for r in rows] == [200000, -50000, -25000]


class TestSqlSourcesOverview:
    """SQL-backed sources produce the same figures as the in-memory ones."""

    @pytest.mark.parametrize("workers", [1, 4])
    def test_monthly_overview_from_database(self, seeded, workers):
        calculator = MonthlyOverviewCalculator(
            sql_sources(seeded), EngineConfig(fetch_workers=workers),
        )

        overview = calculator.compute_monthly_overview("2026-02")

        assert overview.available_funds == 800000
        assert overview.capital_balance == 1000000
        assert overview.total_allocated == 507000
        assert overview.ready_to_assign == 800000 - (3000 + 500000 + 10000 + 7000)
        assert overview.total_spent == 41000
        assert overview.savings_rate == pytest.approx((200000 - 41000) / 200000)

        food = overview.summary_for(FOOD)
        assert food.allocated == 500000
        assert food.spent == 40000
        assert food.carryover == -2000
        assert food.available == 458000

        trip = overview.summary_for(TRIP)
        assert trip.carryover == 10000
        assert trip.available == 10000
        assert overview.summary_for(OLD) is None

    def test_configured_sums_match_overview(self, seeded):
        config = EngineConfig(flow_scope=FlowScope.OPERATIONAL_ONLY, timezone="Europe/Kyiv")
        sources = sql_sources(seeded, config)
        month = Period(2026, 2)

        overview = MonthlyOverviewCalculator(sources, config).compute_monthly_overview(month)
        flows = sources.transactions.sum_in_range(month.start(), month.end())

        assert flows == FlowTotals(inflow=200000, outflow=40000)
        assert flows.outflow == overview.total_spent
        assert sources.transactions.sum_in_range(month.start(), month.end(), FOOD).outflow == 40000
