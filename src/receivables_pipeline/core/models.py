"""Record types for the receivables workbook pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Literal, Mapping


MONTHS: tuple[str, ...] = (
    "Enero",
    "Febrero",
    "Marzo",
    "Abril",
    "Mayo",
    "Junio",
    "Julio",
    "Agosto",
    "Septiembre",
    "Octubre",
    "Noviembre",
    "Diciembre",
)

DebtStatus = Literal["all", "has_debt", "no_debt"]
SortKey = Literal["name", "total_desc", "paid_desc", "balance_asc"]

DEFAULT_PAGE_SIZE = 25


@dataclass(frozen=True)
class ClientDetailRecord:
    name: str
    monthly_amounts: Mapping[str, float] = field(compare=True, hash=False)
    total: float
    paid: float
    # Negative means the client owes money. Taken verbatim from the sheet.
    balance: float

    def __post_init__(self) -> None:
        # Read-only copy so the loaded figures cannot drift after parsing.
        object.__setattr__(self, "monthly_amounts", MappingProxyType(dict(self.monthly_amounts)))

    @property
    def debt(self) -> float:
        """Outstanding amount as a positive number (0 when settled)."""
        return max(0.0, -self.balance)


@dataclass(frozen=True)
class PeriodAggregateRecord:
    period: str
    gross: float
    paid: float
    balance: float


@dataclass(frozen=True)
class MonthlyActivity:
    month: str
    active_client_count: int
    total_amount: float
    average_per_active_client: float


@dataclass(frozen=True)
class LoadResult:
    details: tuple[ClientDetailRecord, ...]
    aggregates: tuple[PeriodAggregateRecord, ...]
    detail_sheet: str
    aggregate_sheet: str
    source: str = ""


@dataclass(frozen=True)
class FilterSortState:
    query: str = ""
    debt_status: DebtStatus = "all"
    min_debt: float | None = None
    max_debt: float | None = None
    sort: SortKey = "name"
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def updated(self, **changes) -> FilterSortState:
        """Return a copy with ``changes`` applied; filter changes go back to page 1."""
        if "page" not in changes:
            changes["page"] = 1
        return replace(self, **changes)

    @classmethod
    def cleared(cls) -> FilterSortState:
        return cls()
