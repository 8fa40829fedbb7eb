"""
Tests for TransactionAggregator.

Covers:
- Inflow and outflow split by sign
- Half-open month boundaries
- Undated and excluded transactions
- Budget and account-role filters
- Timezone bucketing of aware timestamps
"""

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from envelope_engines.transactions import TransactionAggregator
from envelope_kernel.domain.period import Period
from envelope_kernel.domain.values import AccountRole
from tests.conftest import make_transaction

FEBRUARY = Period(2026, 2).date_range()


class TestSumInRange:
    """Inflow and outflow sums."""

    def setup_method(self):
        self.aggregator = TransactionAggregator()

    def test_outflow_is_magnitude_of_debits(self):
        transactions = [
            make_transaction(-25000, date(2026, 2, 3)),
            make_transaction(-15000, date(2026, 2, 20)),
            make_transaction(90000, date(2026, 2, 1)),
        ]

        totals = self.aggregator.sum_in_range(transactions, FEBRUARY)

        assert totals.outflow == 40000
        assert totals.inflow == 90000

    def test_month_boundaries_are_half_open(self):
        transactions = [
            make_transaction(-100, datetime(2026, 2, 1, 0, 0)),
            make_transaction(-200, datetime(2026, 2, 28, 23, 59, 59)),
            make_transaction(-400, datetime(2026, 3, 1, 0, 0)),
            make_transaction(-800, datetime(2026, 1, 31, 23, 59, 59)),
        ]

        assert self.aggregator.outflow(transactions, FEBRUARY) == 300

    def test_undated_transactions_ignored(self):
        transactions = [
            make_transaction(-100, None),
            make_transaction(-200, date(2026, 2, 10)),
        ]

        assert self.aggregator.outflow(transactions, FEBRUARY) == 200

    def test_excluded_transactions_ignored_both_ways(self):
        transactions = [
            make_transaction(-5000, date(2026, 2, 10), exclude_from_calculations=True),
            make_transaction(5000, date(2026, 2, 10), exclude_from_calculations=True),
            make_transaction(-100, date(2026, 2, 10)),
        ]

        totals = self.aggregator.sum_in_range(transactions, FEBRUARY)

        assert totals.outflow == 100
        assert totals.inflow == 0

    def test_zero_amount_counts_nowhere(self):
        totals = self.aggregator.sum_in_range([make_transaction(0, date(2026, 2, 1))], FEBRUARY)

        assert totals.inflow == 0
        assert totals.outflow == 0

    def test_budget_filter(self):
        transactions = [
            make_transaction(-100, date(2026, 2, 1), budget_id="food"),
            make_transaction(-200, date(2026, 2, 1), budget_id="rent"),
            make_transaction(-400, date(2026, 2, 1)),
        ]

        assert self.aggregator.outflow(transactions, FEBRUARY, budget_id="food") == 100
        assert self.aggregator.outflow(transactions, FEBRUARY) == 700

    def test_account_role_filter(self):
        transactions = [
            make_transaction(-100, date(2026, 2, 1), account_role=AccountRole.OPERATIONAL),
            make_transaction(-200, date(2026, 2, 1), account_role=AccountRole.CAPITAL),
            make_transaction(300, date(2026, 2, 1), account_role=AccountRole.CAPITAL),
        ]

        totals = self.aggregator.sum_in_range(
            transactions, FEBRUARY, account_roles=frozenset({AccountRole.OPERATIONAL}),
        )

        assert totals.outflow == 100
        assert totals.inflow == 0

    def test_inflow_helper(self):
        transactions = [make_transaction(700, date(2026, 2, 1))]

        assert self.aggregator.inflow(transactions, FEBRUARY) == 700


class TestTimezoneBucketing:
    """Aware timestamps are bucketed in the configured zone."""

    def test_utc_evening_falls_into_next_local_month(self):
        aggregator = TransactionAggregator(tz=ZoneInfo("Europe/Kyiv"))
        late = make_transaction(-100, datetime(2026, 1, 31, 23, 0, tzinfo=UTC))

        assert aggregator.outflow([late], FEBRUARY) == 100
        assert aggregator.period_of(late) == Period(2026, 2)

    def test_without_zone_uses_stored_offset(self):
        aggregator = TransactionAggregator()
        late = make_transaction(-100, datetime(2026, 1, 31, 23, 0, tzinfo=UTC))

        assert aggregator.outflow([late], FEBRUARY) == 0
        assert aggregator.period_of(late) == Period(2026, 1)


class TestOutflowByPeriod:

    def test_groups_debits_per_period(self):
        aggregator = TransactionAggregator()
        transactions = [
            make_transaction(-100, date(2026, 1, 5), budget_id="food"),
            make_transaction(-150, date(2026, 1, 25), budget_id="food"),
            make_transaction(-300, date(2026, 2, 5), budget_id="food"),
            make_transaction(500, date(2026, 2, 6), budget_id="food"),
            make_transaction(-999, date(2026, 2, 6), budget_id="rent"),
            make_transaction(-50, None, budget_id="food"),
        ]

        totals = aggregator.outflow_by_period(transactions, "food")

        assert totals == {Period(2026, 1): 250, Period(2026, 2): 300}
