"""Report output: Excel workbook and CSV exports."""

from .csv_export import (
    client_csv_filename,
    client_detail_csv,
    filtered_clients_csv,
    to_csv,
    top_debt_csv,
    write_exports,
)
from .excel_writer import kpi_rows, write_report

__all__ = [
    "client_csv_filename",
    "client_detail_csv",
    "filtered_clients_csv",
    "to_csv",
    "top_debt_csv",
    "write_exports",
    "kpi_rows",
    "write_report",
]
