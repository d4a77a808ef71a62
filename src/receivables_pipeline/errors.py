"""Fatal load errors. Anything not raised here degrades to defaults instead."""

from __future__ import annotations

from typing import Iterable


class ReportLoadError(Exception):
    """Base class for errors that abort a workbook load."""


class WorkbookFetchError(ReportLoadError):
    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        super().__init__(f"Could not load workbook {source}: {reason}")


class InvalidWorkbookError(ReportLoadError):
    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        super().__init__(f"{source} is not a readable .xlsx workbook: {reason}")


class MissingSheetError(ReportLoadError):
    def __init__(self, role: str, signatures: Iterable[Iterable[str]]) -> None:
        self.role = role
        options = " or ".join("(" + ", ".join(labels) + ")" for labels in signatures)
        super().__init__(f"No {role} sheet found; expected a header row with {options}")
