"""Pipeline core: sheet detection, record parsing, metrics, views and the engine."""

from .engine import ReportState, load, load_report, run_pipeline
from .headers import classify_sheets, find_header_row
from .metrics import MetricsEngine, compute_kpis
from .parsers import parse_aggregate_records, parse_detail_records
from .views import apply_filters_and_sort, paginate

__all__ = [
    "ReportState",
    "load",
    "load_report",
    "run_pipeline",
    "classify_sheets",
    "find_header_row",
    "MetricsEngine",
    "compute_kpis",
    "parse_aggregate_records",
    "parse_detail_records",
    "apply_filters_and_sort",
    "paginate",
]
