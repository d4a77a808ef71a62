"""Portfolio KPIs over the detail and aggregate record collections.

Everything here is a pure function of its inputs. ``MetricsEngine`` only adds
a memo of the monthly activity summary for chart and export consumers.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import cached_property
from typing import Iterable, Literal, Sequence

from .models import (
    MONTHS,
    ClientDetailRecord,
    LoadResult,
    MonthlyActivity,
    PeriodAggregateRecord,
)


ReconciliationStatus = Literal["OK", "NEEDS_REVIEW", "NO_DATA"]

DEFAULT_TOLERANCE = 2.0
DEFAULT_TOP_N = 10


@dataclass(frozen=True)
class Reconciliation:
    status: ReconciliationStatus
    delta: float = 0.0


@dataclass(frozen=True)
class PortfolioKpis:
    client_count: int
    total: float
    paid: float
    balance: float
    collection_rate: float
    has_debt_count: int
    no_debt_count: int
    period_count: int
    aggregate_gross: float
    aggregate_paid: float
    aggregate_balance: float
    reconciliation: Reconciliation
    sales_delta: float
    sales_concentration: float
    debt_concentration: float
    variability: float


def portfolio_totals(details: Iterable[ClientDetailRecord]) -> tuple[float, float, float]:
    """Sum of total, paid and balance across clients."""
    total = paid = balance = 0.0
    for d in details:
        total += d.total or 0.0
        paid += d.paid or 0.0
        balance += d.balance or 0.0
    return total, paid, balance


def aggregate_totals(aggregates: Iterable[PeriodAggregateRecord]) -> tuple[float, float, float]:
    """Sum of gross, paid and balance across periods."""
    gross = paid = balance = 0.0
    for a in aggregates:
        gross += a.gross or 0.0
        paid += a.paid or 0.0
        balance += a.balance or 0.0
    return gross, paid, balance


def collection_rate(paid: float, total: float, ndigits: int | None = 1) -> float:
    """Paid as a percentage of total; 0 when nothing was billed."""
    if not total:
        return 0.0
    pct = paid / total * 100.0
    return round(pct, ndigits) if ndigits is not None else pct


def debt_counts(details: Iterable[ClientDetailRecord]) -> tuple[int, int]:
    """(clients with debt, clients without debt), split on ``balance < 0``."""
    has_debt = no_debt = 0
    for d in details:
        if (d.balance or 0.0) < 0:
            has_debt += 1
        else:
            no_debt += 1
    return has_debt, no_debt


def reconciliation_check(
    aggregates: Sequence[PeriodAggregateRecord],
    tolerance: float = DEFAULT_TOLERANCE,
) -> Reconciliation:
    """Check that the aggregate sheet's balance column agrees with paid - gross."""
    if not aggregates:
        return Reconciliation("NO_DATA")
    gross, paid, balance = aggregate_totals(aggregates)
    delta = round((paid - gross) - balance, 2)
    if abs(delta) <= tolerance:
        return Reconciliation("OK", delta)
    return Reconciliation("NEEDS_REVIEW", delta)


def sales_delta(
    details: Iterable[ClientDetailRecord],
    aggregates: Iterable[PeriodAggregateRecord],
) -> float:
    """Signed difference between detail totals and aggregate gross."""
    total, _, _ = portfolio_totals(details)
    gross, _, _ = aggregate_totals(aggregates)
    return total - gross


def monthly_activity(details: Sequence[ClientDetailRecord]) -> list[MonthlyActivity]:
    out = []
    for month in MONTHS:
        amounts = [d.monthly_amounts.get(month, 0.0) or 0.0 for d in details]
        active = sum(1 for a in amounts if a > 0)
        total = sum(amounts)
        out.append(
            MonthlyActivity(
                month=month,
                active_client_count=active,
                total_amount=total,
                average_per_active_client=total / active if active else 0.0,
            )
        )
    return out


def top_by_total(details: Iterable[ClientDetailRecord], n: int) -> list[ClientDetailRecord]:
    return sorted(details, key=lambda d: d.total or 0.0, reverse=True)[:n]


def top_by_debt(details: Iterable[ClientDetailRecord], n: int) -> list[ClientDetailRecord]:
    """The ``n`` most negative balances, most owed first."""
    return sorted(details, key=lambda d: d.balance or 0.0)[:n]


def _share(part: float, whole: float) -> float:
    return part / whole * 100.0 if whole else 0.0


def sales_concentration(details: Sequence[ClientDetailRecord], n: int = DEFAULT_TOP_N) -> float:
    """Percentage of total sales billed to the top ``n`` clients."""
    whole = sum(abs(d.total or 0.0) for d in details)
    part = sum(abs(d.total or 0.0) for d in top_by_total(details, n))
    return _share(part, whole)


def debt_concentration(details: Sequence[ClientDetailRecord], n: int = DEFAULT_TOP_N) -> float:
    """Percentage of outstanding debt owed by the ``n`` largest debtors."""
    debts = sorted((d.debt for d in details if (d.balance or 0.0) < 0), reverse=True)
    return _share(sum(debts[:n]), sum(debts))


def variability(activity: Iterable[MonthlyActivity]) -> float:
    """Coefficient of variation of monthly totals, ignoring months with no activity."""
    values = [m.total_amount for m in activity if m.total_amount]
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    if not mean:
        return 0.0
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return math.sqrt(variance) / mean


class MetricsEngine:
    """KPI computation for one loaded workbook."""

    def __init__(
        self,
        result: LoadResult,
        *,
        tolerance: float = DEFAULT_TOLERANCE,
        top_n: int = DEFAULT_TOP_N,
    ) -> None:
        self.result = result
        self.tolerance = tolerance
        self.top_n = top_n

    @cached_property
    def monthly_activity(self) -> list[MonthlyActivity]:
        return monthly_activity(self.result.details)

    def kpis(self) -> PortfolioKpis:
        details = self.result.details
        aggregates = self.result.aggregates
        total, paid, balance = portfolio_totals(details)
        has_debt, no_debt = debt_counts(details)
        gross, agg_paid, agg_balance = aggregate_totals(aggregates)
        return PortfolioKpis(
            client_count=len(details),
            total=total,
            paid=paid,
            balance=balance,
            collection_rate=collection_rate(paid, total),
            has_debt_count=has_debt,
            no_debt_count=no_debt,
            period_count=len(aggregates),
            aggregate_gross=gross,
            aggregate_paid=agg_paid,
            aggregate_balance=agg_balance,
            reconciliation=reconciliation_check(aggregates, self.tolerance),
            sales_delta=total - gross,
            sales_concentration=sales_concentration(details, self.top_n),
            debt_concentration=debt_concentration(details, self.top_n),
            variability=variability(self.monthly_activity),
        )


def compute_kpis(
    result: LoadResult,
    *,
    tolerance: float = DEFAULT_TOLERANCE,
    top_n: int = DEFAULT_TOP_N,
) -> PortfolioKpis:
    return MetricsEngine(result, tolerance=tolerance, top_n=top_n).kpis()
