"""Filtered, sorted and paginated projections of the client collection."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from ..utils import sort_key
from .models import ClientDetailRecord, FilterSortState


@dataclass(frozen=True)
class Page:
    rows: list[ClientDetailRecord]
    page: int
    total_pages: int
    total_rows: int

    @property
    def info(self) -> str:
        return (
            f"Página {self.page} de {self.total_pages} · "
            f"Mostrando {len(self.rows)} de {self.total_rows}"
        )


def apply_filters_and_sort(
    clients: Sequence[ClientDetailRecord],
    state: FilterSortState,
) -> list[ClientDetailRecord]:
    """Return a new list of clients matching ``state``, in ``state.sort`` order.

    Debt bounds are applied to the owed magnitude ``max(0, -balance)``.
    """
    out = list(clients)

    q = state.query.strip().lower()
    if q:
        out = [c for c in out if q in c.name.lower()]

    if state.debt_status == "has_debt":
        out = [c for c in out if c.balance < 0]
    elif state.debt_status == "no_debt":
        out = [c for c in out if c.balance >= 0]

    if state.min_debt is not None:
        out = [c for c in out if c.debt >= state.min_debt]
    if state.max_debt is not None:
        out = [c for c in out if c.debt <= state.max_debt]

    if state.sort == "total_desc":
        out.sort(key=lambda c: c.total, reverse=True)
    elif state.sort == "paid_desc":
        out.sort(key=lambda c: c.paid, reverse=True)
    elif state.sort == "balance_asc":
        out.sort(key=lambda c: c.balance)
    else:
        out.sort(key=lambda c: sort_key(c.name))
    return out


def paginate(rows: Sequence[ClientDetailRecord], page: int, page_size: int) -> Page:
    """Slice one page out of ``rows``, clamping ``page`` into range."""
    page_size = max(1, page_size)
    total_pages = max(1, math.ceil(len(rows) / page_size))
    page = min(max(page, 1), total_pages)
    start = (page - 1) * page_size
    return Page(
        rows=list(rows[start:start + page_size]),
        page=page,
        total_pages=total_pages,
        total_rows=len(rows),
    )


def current_page(clients: Sequence[ClientDetailRecord], state: FilterSortState) -> Page:
    return paginate(apply_filters_and_sort(clients, state), state.page, state.page_size)


def showing_label(filtered: Sequence[ClientDetailRecord], clients: Sequence[ClientDetailRecord]) -> str:
    return f"{len(filtered)} / {len(clients)}"


def find_client(clients: Sequence[ClientDetailRecord], name: str) -> ClientDetailRecord | None:
    """First client whose name matches ``name`` (trimmed, case-insensitive)."""
    wanted = name.strip().casefold()
    for c in clients:
        if c.name.casefold() == wanted:
            return c
    return None
