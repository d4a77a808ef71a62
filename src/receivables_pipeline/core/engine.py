"""Pipeline engine: orchestrates fetch → classify → parse → metrics → write."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..errors import MissingSheetError
from ..io.workbook_reader import DEFAULT_WORKBOOK, fetch_workbook, read_sheets
from ..utils import format_clp, setup_logging, get_logger
from .headers import AGGREGATE, DEFAULT_SCAN_ROWS, DETAIL, SIGNATURES, classify_sheets
from .metrics import DEFAULT_TOLERANCE, DEFAULT_TOP_N, MetricsEngine, PortfolioKpis
from .models import DEFAULT_PAGE_SIZE, ClientDetailRecord, FilterSortState, LoadResult
from .parsers import parse_aggregate_records, parse_detail_records
from .views import Page, apply_filters_and_sort, current_page, find_client, showing_label


_log = get_logger(__name__)


def load(
    data: bytes,
    *,
    source: str = "<bytes>",
    max_scan: int = DEFAULT_SCAN_ROWS,
) -> LoadResult:
    """Parse workbook bytes into the detail and aggregate record collections.

    Stateless: calling it twice on the same bytes yields equal results.

    Raises:
        InvalidWorkbookError: if ``data`` is not an .xlsx workbook.
        MissingSheetError: if either the detail or aggregate sheet is absent.
    """
    sheets = read_sheets(data, source=source)
    found = classify_sheets(sheets, max_scan)
    if found.detail is None:
        raise MissingSheetError(DETAIL, SIGNATURES[DETAIL])
    if found.aggregate is None:
        raise MissingSheetError(AGGREGATE, SIGNATURES[AGGREGATE])

    details = parse_detail_records(sheets[found.detail], found.detail_header_row)
    aggregates = parse_aggregate_records(sheets[found.aggregate], found.aggregate_header_row)
    _log.info(
        "Loaded %s clients from '%s' and %s periods from '%s'",
        len(details), found.detail, len(aggregates), found.aggregate,
    )
    if not details:
        _log.warning("Detail sheet '%s' has no client rows", found.detail)

    return LoadResult(
        details=tuple(details),
        aggregates=tuple(aggregates),
        detail_sheet=found.detail,
        aggregate_sheet=found.aggregate,
        source=source,
    )


def load_report(source: str | Path = DEFAULT_WORKBOOK, *, max_scan: int = DEFAULT_SCAN_ROWS) -> LoadResult:
    """Fetch the workbook at ``source`` (path or URL) and load it."""
    _log.info("Reading workbook from %s", source)
    data = fetch_workbook(source)
    return load(data, source=str(source), max_scan=max_scan)


@dataclass
class ReportState:
    """Application state owned by the caller: the last good load plus view filters.

    ``reload`` replaces the loaded data wholesale on success and leaves it
    untouched when the load fails. Loads are not cancellable; when reloads
    overlap, whichever finishes last wins.
    """

    source: str = DEFAULT_WORKBOOK
    max_scan: int = DEFAULT_SCAN_ROWS
    tolerance: float = DEFAULT_TOLERANCE
    top_n: int = DEFAULT_TOP_N
    result: LoadResult | None = None
    filters: FilterSortState = field(default_factory=FilterSortState)
    selected_client: str | None = None
    _metrics: MetricsEngine | None = field(default=None, init=False, repr=False)

    def reload(self) -> LoadResult:
        result = load_report(self.source, max_scan=self.max_scan)
        self.result = result
        self._metrics = None
        self.selected_client = None
        self.filters = self.filters.updated(page=1)
        return result

    @property
    def metrics(self) -> MetricsEngine:
        if self.result is None:
            raise RuntimeError("No workbook loaded")
        if self._metrics is None:
            self._metrics = MetricsEngine(self.result, tolerance=self.tolerance, top_n=self.top_n)
        return self._metrics

    def kpis(self) -> PortfolioKpis:
        return self.metrics.kpis()

    def update_filters(self, **changes: Any) -> FilterSortState:
        self.filters = self.filters.updated(**changes)
        return self.filters

    def clear_filters(self) -> FilterSortState:
        self.filters = FilterSortState.cleared()
        return self.filters

    def select_client(self, name: str) -> ClientDetailRecord | None:
        """Select the first client called ``name`` for the detail view."""
        self.selected_client = None
        if self.result is None:
            return None
        record = find_client(self.result.details, name)
        if record is not None:
            self.selected_client = record.name
        return record

    def page(self) -> Page:
        clients = self.result.details if self.result else ()
        page = current_page(clients, self.filters)
        if page.page != self.filters.page:
            self.filters = self.filters.updated(page=page.page)
        return page


def run_pipeline(
    config: dict[str, Any],
    *,
    workbook_path: str | Path | None = None,
    output_dir: str | Path | None = None,
    filters: FilterSortState | None = None,
    client_name: str | None = None,
) -> Path:
    """Load the workbook, log the KPI summary and write the report files.

    Returns:
        Path of the Excel report.
    """
    # Deferred: report imports core.
    from ..report import write_exports, write_report

    setup_logging(config.get("logging", {}))

    paths = config.get("paths", {})
    ingest_cfg = config.get("ingest", {})
    metrics_cfg = config.get("metrics", {})
    view_cfg = config.get("view", {})

    source = str(workbook_path or paths.get("workbook") or DEFAULT_WORKBOOK)
    output_dir = Path(output_dir or paths.get("output_dir", "out"))
    max_scan = int(ingest_cfg.get("header_scan_rows", DEFAULT_SCAN_ROWS))
    tolerance = float(metrics_cfg.get("reconciliation_tolerance", DEFAULT_TOLERANCE))
    top_n = int(metrics_cfg.get("top_n", DEFAULT_TOP_N))
    top_debt_rows = int(metrics_cfg.get("top_debt_rows", 20))
    if filters is None:
        filters = FilterSortState(page_size=int(view_cfg.get("page_size", DEFAULT_PAGE_SIZE)))

    state = ReportState(source=source, max_scan=max_scan, tolerance=tolerance, top_n=top_n, filters=filters)
    result = state.reload()
    state.filters = filters
    kpis = state.kpis()
    _log_kpis(kpis)

    filtered = apply_filters_and_sort(result.details, state.filters)
    page = state.page()
    _log.info("Showing %s clients. %s", showing_label(filtered, result.details), page.info)
    for c in page.rows:
        _log.info("  %-40s %14s %14s %14s", c.name, format_clp(c.total), format_clp(c.paid), format_clp(c.balance))

    output_dir.mkdir(parents=True, exist_ok=True)
    report_path = output_dir / paths.get("report_name", "reporte_cobranza.xlsx")
    write_report(
        result,
        kpis,
        state.metrics.monthly_activity,
        report_path,
        top_debt_rows=top_debt_rows,
    )
    write_exports(
        filtered,
        result.details,
        output_dir,
        top_debt_rows=top_debt_rows,
        client_name=client_name,
    )
    return report_path


def _log_kpis(kpis: PortfolioKpis) -> None:
    _log.info(
        "Clients: %s | Total: %s | Paid: %s | Balance: %s | Collected: %s%%",
        kpis.client_count,
        format_clp(kpis.total),
        format_clp(kpis.paid),
        format_clp(kpis.balance),
        kpis.collection_rate,
    )
    _log.info("With debt: %s | Without debt: %s", kpis.has_debt_count, kpis.no_debt_count)
    _log.info(
        "Periods: %s | Gross: %s | Paid: %s | Balance: %s | Sales delta: %s",
        kpis.period_count,
        format_clp(kpis.aggregate_gross),
        format_clp(kpis.aggregate_paid),
        format_clp(kpis.aggregate_balance),
        format_clp(kpis.sales_delta),
    )
    rec = kpis.reconciliation
    if rec.status == "NEEDS_REVIEW":
        _log.warning("Aggregate sheet needs review: balance off by %s", format_clp(rec.delta))
    else:
        _log.info("Aggregate reconciliation: %s", rec.status)
