"""Shared fixtures: build small receivables workbooks with openpyxl."""

import io
import zipfile

import openpyxl
import pytest

from receivables_pipeline.core.models import MONTHS


DETAIL_HEADER = ["Nombre Cliente", *MONTHS, "Total", "Abono", "Diferencia"]
AGGREGATE_HEADER = ["Mes", "Venta", "Abono", "Diferencia"]


def workbook_bytes(sheets):
    """Serialize ``{sheet name: rows}`` into .xlsx bytes, keeping sheet order."""
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(title=name)
        for row in rows:
            ws.append(list(row))
    buf = io.BytesIO()
    wb.save(buf)
    wb.close()
    return buf.getvalue()


def replace_zip_member(data, member, content):
    """Copy .xlsx bytes with one package part swapped for ``content``."""
    src = zipfile.ZipFile(io.BytesIO(data))
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as dst:
        for item in src.infolist():
            dst.writestr(item, content if item.filename == member else src.read(item.filename))
    src.close()
    return buf.getvalue()


def detail_row(name, monthly, total, paid, balance):
    return [name, *monthly, total, paid, balance]


@pytest.fixture
def detail_rows():
    """Detail sheet with two title rows above the header (header at index 2)."""
    return [
        ["Reporte anual 2024"],
        [],
        DETAIL_HEADER,
        detail_row("Juan Pérez", [10000] * 12, 120000, 100000, -20000),
        detail_row("", [0] * 12, 0, 0, 0),
    ]


@pytest.fixture
def aggregate_rows():
    return [
        ["Visitas Únicas"],
        AGGREGATE_HEADER,
        ["Enero", "$50.000", "$40.000", "-$10.000"],
        ["Febrero", 70000, 70000, 0],
    ]


@pytest.fixture
def sample_workbook(detail_rows, aggregate_rows):
    return workbook_bytes({"Visitas Únicas": aggregate_rows, "Detalle Clientes": detail_rows})
