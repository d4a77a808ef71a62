"""Tests for portfolio KPIs."""

import math

import pytest

from receivables_pipeline.core.metrics import (
    MetricsEngine,
    collection_rate,
    debt_concentration,
    debt_counts,
    monthly_activity,
    portfolio_totals,
    reconciliation_check,
    sales_concentration,
    sales_delta,
    top_by_debt,
    top_by_total,
    variability,
)
from receivables_pipeline.core.models import (
    MONTHS,
    ClientDetailRecord,
    LoadResult,
    MonthlyActivity,
    PeriodAggregateRecord,
)


def client(name, total=0.0, paid=0.0, balance=0.0, **months):
    monthly = {m: float(months.get(m, 0.0)) for m in MONTHS}
    return ClientDetailRecord(name=name, monthly_amounts=monthly, total=total, paid=paid, balance=balance)


def period(label, gross, paid, balance):
    return PeriodAggregateRecord(period=label, gross=gross, paid=paid, balance=balance)


class TestTotalsAndRates:

    def test_portfolio_totals(self):
        clients = [client("A", 100, 60, -40), client("B", 50, 50, 0)]
        assert portfolio_totals(clients) == (150, 110, -40)

    def test_collection_rate_matches_hand_computation(self):
        clients = [client("A", 200, 150), client("B", 300, 100), client("C", 500, 500)]
        total, paid, _ = portfolio_totals(clients)
        assert collection_rate(paid, total) == 75.0
        assert collection_rate(100000, 120000) == 83.3
        assert collection_rate(100000, 120000, ndigits=None) == pytest.approx(83.3333, rel=1e-4)

    def test_zero_total_collection_rate(self):
        clients = [client("A"), client("B")]
        total, paid, _ = portfolio_totals(clients)
        assert collection_rate(paid, total) == 0

    def test_debt_counts(self):
        clients = [client("A", balance=-1), client("B", balance=0), client("C", balance=5)]
        assert debt_counts(clients) == (1, 2)


class TestReconciliation:

    def test_no_data(self):
        assert reconciliation_check([]).status == "NO_DATA"

    def test_ok_within_tolerance(self):
        rec = reconciliation_check([period("Enero", 100, 60, -40), period("Febrero", 10, 10, 1)])
        assert rec.status == "OK"
        assert rec.delta == -1

    def test_needs_review(self):
        rec = reconciliation_check([period("Enero", 100, 60, -30)])
        assert rec.status == "NEEDS_REVIEW"
        assert rec.delta == -10

    def test_sales_delta_is_signed(self):
        assert sales_delta([client("A", 100)], [period("Enero", 150, 0, -150)]) == -50
        assert sales_delta([client("A", 200)], [period("Enero", 150, 0, -150)]) == 50


class TestMonthlyActivity:

    def test_counts_only_positive_amounts(self):
        clients = [
            client("A", Enero=100, Febrero=-5),
            client("B", Enero=50),
            client("C"),
        ]
        activity = monthly_activity(clients)
        assert [m.month for m in activity] == list(MONTHS)
        enero, febrero, marzo = activity[:3]
        assert enero.active_client_count == 2
        assert enero.total_amount == 150
        assert enero.average_per_active_client == 75
        assert febrero.active_client_count == 0
        assert febrero.average_per_active_client == 0
        assert marzo.total_amount == 0

    def test_engine_memoizes_summary(self):
        result = LoadResult(details=(client("A", Enero=1),), aggregates=(), detail_sheet="D", aggregate_sheet="U")
        engine = MetricsEngine(result)
        assert engine.monthly_activity is engine.monthly_activity


class TestConcentration:

    @pytest.fixture
    def twelve_clients(self):
        totals = [100, 90, 80, 70, 60, 50, 40, 30, 20, 10, 0, 0]
        return [client(f"C{i}", total=t) for i, t in enumerate(totals)]

    def test_top_three_sales(self, twelve_clients):
        assert [c.total for c in top_by_total(twelve_clients, 3)] == [100, 90, 80]
        assert sales_concentration(twelve_clients, 3) == pytest.approx(270 / 550 * 100)
        assert round(sales_concentration(twelve_clients, 3), 1) == 49.1

    def test_debt_concentration_uses_negative_balances(self):
        clients = [
            client("A", balance=-600),
            client("B", balance=-300),
            client("C", balance=-100),
            client("D", balance=5000),
        ]
        assert [c.name for c in top_by_debt(clients, 2)] == ["A", "B"]
        assert debt_concentration(clients, 1) == pytest.approx(60.0)

    def test_empty_population(self):
        assert sales_concentration([], 3) == 0
        assert debt_concentration([client("A", balance=10)], 3) == 0


class TestVariability:

    def test_coefficient_of_variation(self):
        activity = [
            MonthlyActivity("Enero", 1, 100.0, 100.0),
            MonthlyActivity("Febrero", 1, 300.0, 300.0),
            MonthlyActivity("Marzo", 0, 0.0, 0.0),
        ]
        # mean 200, population std 100
        assert variability(activity) == pytest.approx(0.5)

    def test_no_activity(self):
        assert variability([MonthlyActivity("Enero", 0, 0.0, 0.0)]) == 0
        assert variability([]) == 0

    def test_constant_months(self):
        activity = [MonthlyActivity(m, 1, 10.0, 10.0) for m in MONTHS]
        assert math.isclose(variability(activity), 0.0)


class TestKpis:

    def test_bundle(self):
        result = LoadResult(
            details=(client("Juan Pérez", 120000, 100000, -20000, Enero=120000),),
            aggregates=(period("Enero", 120000, 100000, -20000),),
            detail_sheet="D",
            aggregate_sheet="U",
        )
        kpis = MetricsEngine(result).kpis()
        assert kpis.client_count == 1
        assert kpis.collection_rate == 83.3
        assert kpis.has_debt_count == 1
        assert kpis.no_debt_count == 0
        assert kpis.reconciliation.status == "OK"
        assert kpis.sales_delta == 0
        assert kpis.sales_concentration == 100.0
        assert kpis.debt_concentration == 100.0
        assert kpis.variability == 0
