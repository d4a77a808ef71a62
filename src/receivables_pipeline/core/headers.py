"""Header row location and sheet classification by header signature."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from ..utils import get_logger, normalize_label

_log = get_logger(__name__)


NOT_FOUND = -1
DEFAULT_SCAN_ROWS = 12

Row = Sequence[Any]

DETAIL = "detail"
AGGREGATE = "aggregate"

# Role -> alternative label sets; a sheet qualifies if any one set is present.
SIGNATURES: dict[str, tuple[tuple[str, ...], ...]] = {
    DETAIL: (
        ("Nombre Cliente", "Enero", "Total", "Abono", "Diferencia"),
    ),
    AGGREGATE: (
        ("Mes", "Venta", "Abono", "Diferencia"),
        ("Nombre", "Venta", "Abono", "Diferencia"),
    ),
}


def find_header_row(
    rows: Sequence[Row],
    labels: Sequence[str],
    max_scan: int = DEFAULT_SCAN_ROWS,
) -> int:
    """Return the index of the first row containing every label in ``labels``.

    Only the first ``max_scan`` rows are considered so that data further down
    cannot be mistaken for a header.

    Args:
        rows: Sheet rows, each a sequence of cell values.
        labels: Required column labels (compared after normalization).
        max_scan: Size of the scan window.

    Returns:
        Zero-based row index, or ``NOT_FOUND``.
    """
    needed = {normalize_label(label) for label in labels}
    for i, row in enumerate(rows[:max_scan]):
        cells = {normalize_label(cell) for cell in row}
        if needed <= cells:
            return i
    return NOT_FOUND


def match_signature(
    rows: Sequence[Row],
    role: str,
    max_scan: int = DEFAULT_SCAN_ROWS,
) -> int:
    """Header row index for the first matching label set of ``role``."""
    for labels in SIGNATURES[role]:
        idx = find_header_row(rows, labels, max_scan)
        if idx != NOT_FOUND:
            return idx
    return NOT_FOUND


@dataclass(frozen=True)
class SheetClassification:
    detail: str | None = None
    aggregate: str | None = None
    detail_header_row: int = NOT_FOUND
    aggregate_header_row: int = NOT_FOUND


def classify_sheets(
    sheets: Mapping[str, Sequence[Row]],
    max_scan: int = DEFAULT_SCAN_ROWS,
) -> SheetClassification:
    """Pick the detail and aggregate sheets out of a workbook.

    Sheets are visited in workbook order and the first match fills each slot.
    A sheet that matches the detail signature is never considered for the
    aggregate slot. Slots with no match stay ``None``.
    """
    detail: str | None = None
    aggregate: str | None = None
    detail_row = aggregate_row = NOT_FOUND

    for name, rows in sheets.items():
        if not rows:
            continue
        idx = match_signature(rows, DETAIL, max_scan)
        if idx != NOT_FOUND:
            _log.debug("Sheet '%s' matches detail header at row %s", name, idx)
            if detail is None:
                detail, detail_row = name, idx
            continue
        idx = match_signature(rows, AGGREGATE, max_scan)
        if idx != NOT_FOUND:
            _log.debug("Sheet '%s' matches aggregate header at row %s", name, idx)
            if aggregate is None:
                aggregate, aggregate_row = name, idx

    return SheetClassification(
        detail=detail,
        aggregate=aggregate,
        detail_header_row=detail_row,
        aggregate_header_row=aggregate_row,
    )
