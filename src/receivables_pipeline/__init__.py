"""Receivables workbook ingestion, KPIs and reporting."""

from .errors import InvalidWorkbookError, MissingSheetError, ReportLoadError, WorkbookFetchError

__all__ = ["InvalidWorkbookError", "MissingSheetError", "ReportLoadError", "WorkbookFetchError"]

__version__ = "0.1.0"
