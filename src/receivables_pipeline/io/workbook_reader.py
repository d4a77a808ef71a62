"""Workbook retrieval and materialization into plain row matrices."""

from __future__ import annotations

import io
import zipfile
from pathlib import Path
from typing import Any

import openpyxl
import requests
from openpyxl.utils.exceptions import InvalidFileException

from ..errors import InvalidWorkbookError, WorkbookFetchError
from ..utils import get_logger

_log = get_logger(__name__)


DEFAULT_WORKBOOK = "./data/reporte.xlsx"
FETCH_TIMEOUT = 30

SheetRows = list[list[Any]]

# Raised by openpyxl on a malformed package; sheet XML parse errors are SyntaxError
# subclasses and surface lazily while iterating a read-only sheet.
_BAD_WORKBOOK_ERRORS = (zipfile.BadZipFile, InvalidFileException, KeyError, OSError, ValueError, SyntaxError)


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def fetch_workbook(source: str | Path, *, timeout: float = FETCH_TIMEOUT) -> bytes:
    """Read the raw workbook bytes from a local path or an http(s) URL.

    Raises:
        WorkbookFetchError: if the file is missing or the server does not
            answer with a success status.
    """
    source = str(source)
    if _is_url(source):
        try:
            resp = requests.get(source, timeout=timeout, headers={"Cache-Control": "no-store"})
        except requests.RequestException as e:
            raise WorkbookFetchError(source, str(e)) from e
        if not resp.ok:
            raise WorkbookFetchError(source, f"HTTP {resp.status_code}")
        _log.debug("Fetched %s bytes from %s", len(resp.content), source)
        return resp.content

    path = Path(source)
    if not path.is_file():
        raise WorkbookFetchError(source, "file not found")
    try:
        data = path.read_bytes()
    except OSError as e:
        raise WorkbookFetchError(source, str(e)) from e
    _log.debug("Read %s bytes from %s", len(data), path)
    return data


def read_sheets(data: bytes, *, source: str = "<bytes>") -> dict[str, SheetRows]:
    """Materialize every sheet as a list of rows, in workbook order.

    Cell values are the cached values (formulas are not evaluated) and empty
    cells become ``""``. Rows are padded to the sheet width.
    """
    try:
        wb = openpyxl.load_workbook(io.BytesIO(data), data_only=True, read_only=True)
    except _BAD_WORKBOOK_ERRORS as e:
        raise InvalidWorkbookError(source, str(e)) from e

    sheets: dict[str, SheetRows] = {}
    try:
        for name in wb.sheetnames:
            ws = wb[name]
            rows = [
                ["" if v is None else v for v in row]
                for row in ws.iter_rows(values_only=True)
            ]
            width = max((len(r) for r in rows), default=0)
            for r in rows:
                r.extend([""] * (width - len(r)))
            sheets[name] = rows
            _log.debug("Sheet '%s': %s rows x %s cols", name, len(rows), width)
    except _BAD_WORKBOOK_ERRORS as e:
        raise InvalidWorkbookError(source, f"sheet '{name}': {e}") from e
    finally:
        wb.close()
    return sheets
