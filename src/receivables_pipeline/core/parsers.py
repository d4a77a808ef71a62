"""Row extraction for the detail (per-client) and aggregate (per-period) sheets."""

from __future__ import annotations

from typing import Any, Sequence

from ..utils import get_logger, normalize_label, to_amount
from .headers import DEFAULT_SCAN_ROWS, NOT_FOUND, Row, find_header_row
from .models import MONTHS, ClientDetailRecord, PeriodAggregateRecord

_log = get_logger(__name__)


NAME = normalize_label("Nombre Cliente")
TOTAL = normalize_label("Total")
PAID = normalize_label("Abono")
BALANCE = normalize_label("Diferencia")
GROSS = normalize_label("Venta")
PERIOD_LABELS = (normalize_label("Mes"), normalize_label("Nombre"))

# Minimal header sets used when no header row index is supplied.
DETAIL_HEADER = ("Nombre Cliente", "Total", "Abono", "Diferencia")
AGGREGATE_HEADERS = (("Mes", "Venta", "Abono"), ("Nombre", "Venta", "Abono"))


def _column_index(header: list[str], label: str) -> int:
    try:
        return header.index(label)
    except ValueError:
        return NOT_FOUND


def _cell(row: Row, idx: int) -> Any:
    if idx == NOT_FOUND or idx >= len(row):
        return None
    return row[idx]


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def parse_detail_records(
    rows: Sequence[Row],
    header_row: int | None = None,
    *,
    max_scan: int = DEFAULT_SCAN_ROWS,
) -> list[ClientDetailRecord]:
    """Extract one ClientDetailRecord per client row below the header.

    Rows whose client name is blank are skipped. Month columns missing from
    the header read as 0 for every client. Source row order is kept.

    Args:
        rows: Detail sheet rows.
        header_row: Index of the header row; located when omitted.
        max_scan: Scan window used when locating the header.

    Returns:
        Records in sheet order (empty when no header can be located).
    """
    if header_row is None:
        header_row = find_header_row(rows, DETAIL_HEADER, max_scan)
    if header_row == NOT_FOUND:
        return []

    header = [normalize_label(c) for c in rows[header_row]]
    idx_name = _column_index(header, NAME)
    idx_total = _column_index(header, TOTAL)
    idx_paid = _column_index(header, PAID)
    idx_balance = _column_index(header, BALANCE)
    idx_months = {m: _column_index(header, normalize_label(m)) for m in MONTHS}

    missing = [m for m, i in idx_months.items() if i == NOT_FOUND]
    if missing:
        _log.debug("Detail header has no column for %s; using 0", ", ".join(missing))

    out: list[ClientDetailRecord] = []
    for row in rows[header_row + 1:]:
        name = _text(_cell(row, idx_name))
        if not name:
            continue
        monthly = {m: to_amount(_cell(row, i)) for m, i in idx_months.items()}
        out.append(
            ClientDetailRecord(
                name=name,
                monthly_amounts=monthly,
                total=to_amount(_cell(row, idx_total)),
                paid=to_amount(_cell(row, idx_paid)),
                balance=to_amount(_cell(row, idx_balance)),
            )
        )
    return out


def parse_aggregate_records(
    rows: Sequence[Row],
    header_row: int | None = None,
    *,
    max_scan: int = DEFAULT_SCAN_ROWS,
) -> list[PeriodAggregateRecord]:
    """Extract one PeriodAggregateRecord per period row below the header.

    The period label comes from ``Mes`` or, failing that, ``Nombre``. When the
    sheet has no ``Diferencia`` column the balance is ``paid - gross``.
    """
    if header_row is None:
        header_row = NOT_FOUND
        for labels in AGGREGATE_HEADERS:
            header_row = find_header_row(rows, labels, max_scan)
            if header_row != NOT_FOUND:
                break
    if header_row == NOT_FOUND:
        return []

    header = [normalize_label(c) for c in rows[header_row]]
    idx_period = NOT_FOUND
    for label in PERIOD_LABELS:
        idx_period = _column_index(header, label)
        if idx_period != NOT_FOUND:
            break
    idx_gross = _column_index(header, GROSS)
    idx_paid = _column_index(header, PAID)
    idx_balance = _column_index(header, BALANCE)

    out: list[PeriodAggregateRecord] = []
    for row in rows[header_row + 1:]:
        period = _text(_cell(row, idx_period))
        if not period:
            continue
        gross = to_amount(_cell(row, idx_gross))
        paid = to_amount(_cell(row, idx_paid))
        if idx_balance != NOT_FOUND:
            balance = to_amount(_cell(row, idx_balance))
        else:
            balance = paid - gross
        out.append(PeriodAggregateRecord(period=period, gross=gross, paid=paid, balance=balance))
    return out
