"""Tests for detail and aggregate record extraction."""

import pytest

from receivables_pipeline.core.models import MONTHS
from receivables_pipeline.core.parsers import parse_aggregate_records, parse_detail_records

from conftest import AGGREGATE_HEADER, DETAIL_HEADER, detail_row


class TestParseDetailRecords:

    def test_scenario_skips_blank_names(self, detail_rows):
        records = parse_detail_records(detail_rows, 2)
        assert len(records) == 1
        juan = records[0]
        assert juan.name == "Juan Pérez"
        assert juan.total == 120000
        assert juan.paid == 100000
        assert juan.balance == -20000
        assert sum(juan.monthly_amounts.values()) == 120000

    def test_locates_header_when_not_given(self, detail_rows):
        assert parse_detail_records(detail_rows) == parse_detail_records(detail_rows, 2)

    def test_whitespace_name_skipped_and_trimmed(self):
        rows = [
            DETAIL_HEADER,
            detail_row("   ", [1] * 12, 12, 12, 0),
            detail_row("  Ana  ", [1] * 12, 12, 12, 0),
        ]
        records = parse_detail_records(rows, 0)
        assert [r.name for r in records] == ["Ana"]

    def test_missing_month_columns_default_to_zero(self):
        rows = [
            ["Nombre Cliente", "Enero", "Marzo", "Total", "Abono", "Diferencia"],
            ["Ana", "$1.000", "2.000", "3.000", "3.000", "0"],
        ]
        (ana,) = parse_detail_records(rows, 0)
        assert list(ana.monthly_amounts) == list(MONTHS)
        assert ana.monthly_amounts["Enero"] == 1000
        assert ana.monthly_amounts["Marzo"] == 2000
        assert ana.monthly_amounts["Febrero"] == 0
        assert ana.monthly_amounts["Diciembre"] == 0

    def test_balance_taken_verbatim(self):
        rows = [DETAIL_HEADER, detail_row("Ana", [0] * 12, 1000, 400, 0)]
        (ana,) = parse_detail_records(rows, 0)
        assert ana.balance == 0

    def test_monthly_amounts_are_read_only(self):
        rows = [DETAIL_HEADER, detail_row("Ana", [1000] * 12, 12000, 12000, 0)]
        (ana,) = parse_detail_records(rows, 0)
        with pytest.raises(TypeError):
            ana.monthly_amounts["Enero"] = 999
        assert ana.monthly_amounts["Enero"] == 1000

    def test_preserves_row_order_and_short_rows(self):
        rows = [
            DETAIL_HEADER,
            detail_row("Zoe", [0] * 12, 5, 5, 0),
            ["Ana"],
            detail_row("Mario", [0] * 12, "$", "", None),
        ]
        records = parse_detail_records(rows, 0)
        assert [r.name for r in records] == ["Zoe", "Ana", "Mario"]
        assert records[1].total == 0
        assert records[2].paid == 0

    def test_no_header(self):
        assert parse_detail_records([["x"], ["y"]]) == []


class TestParseAggregateRecords:

    def test_reads_balance_column(self, aggregate_rows):
        records = parse_aggregate_records(aggregate_rows, 1)
        assert [r.period for r in records] == ["Enero", "Febrero"]
        assert records[0].gross == 50000
        assert records[0].paid == 40000
        assert records[0].balance == -10000

    def test_computes_balance_when_column_missing(self):
        rows = [["Mes", "Venta", "Abono"], ["Q1 Ene-Mar", "$90.000", "$60.000"]]
        (q1,) = parse_aggregate_records(rows)
        assert q1.period == "Q1 Ene-Mar"
        assert q1.balance == -30000

    def test_period_from_name_column(self):
        rows = [["Nombre", "Venta", "Abono", "Diferencia"], ["Total año", 10, 10, 0], ["", 5, 5, 0]]
        records = parse_aggregate_records(rows, 0)
        assert [r.period for r in records] == ["Total año"]

    def test_month_column_takes_precedence(self):
        rows = [["Nombre", "Mes", "Venta", "Abono", "Diferencia"], ["ignorado", "Abril", 1, 1, 0]]
        (rec,) = parse_aggregate_records(rows, 0)
        assert rec.period == "Abril"

    def test_explicit_balance_is_authoritative(self):
        rows = [AGGREGATE_HEADER, ["Mayo", 100, 50, 7]]
        (rec,) = parse_aggregate_records(rows, 0)
        assert rec.balance == 7
