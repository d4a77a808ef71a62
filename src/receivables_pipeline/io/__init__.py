"""Pipeline I/O: workbook retrieval and sheet materialization."""

from .workbook_reader import DEFAULT_WORKBOOK, fetch_workbook, read_sheets

__all__ = ["DEFAULT_WORKBOOK", "fetch_workbook", "read_sheets"]
