"""Tests for money parsing and label normalization."""

import math

import pytest

from receivables_pipeline.utils import format_clp, normalize_label, slugify, sort_key, to_amount


class TestToAmount:

    @pytest.mark.parametrize("raw,expected", [
        ("$1.234.567", 1234567.0),
        ("1.234.567", 1234567.0),
        ("  $ 45.000  ", 45000.0),
        ("-$10.000", -10000.0),
        ("1.234,5", 1234.5),
        ("0,75", 0.75),
    ])
    def test_locale_strings(self, raw, expected):
        assert to_amount(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "$", None, "n/a", "(1.000)", "1,2,3", "1_000", "0x10", "--5"])
    def test_empty_or_unparseable_is_zero(self, raw):
        assert to_amount(raw) == 0.0

    def test_native_numbers_pass_through(self):
        assert to_amount(120000) == 120000.0
        assert to_amount(-3.5) == -3.5

    @pytest.mark.parametrize("raw", [math.nan, math.inf, -math.inf, "Infinity", "nan"])
    def test_non_finite_is_zero(self, raw):
        assert to_amount(raw) == 0.0

    def test_bool_is_not_a_number(self):
        assert to_amount(True) == 0.0


class TestNormalizeLabel:

    def test_collapses_whitespace_and_uppercases(self):
        assert normalize_label("  nombre \t  cliente ") == "NOMBRE CLIENTE"

    def test_none_and_numbers(self):
        assert normalize_label(None) == ""
        assert normalize_label(2024) == "2024"


class TestFormatting:

    def test_format_clp(self):
        assert format_clp(1234567) == "$1.234.567"
        assert format_clp(-20000) == "-$20.000"
        assert format_clp(999.5) == "$1.000"
        assert format_clp(0) == "$0"

    def test_sort_key_ignores_accents_and_case(self):
        assert sort_key("Álvaro") < sort_key("beatriz")

    def test_slugify(self):
        assert slugify("Juan Pérez & Cía.") == "juan_p_rez_c_a_"

    def test_slugify_keeps_ascii_word_characters_only(self):
        assert slugify("Ñuñoa Ltda") == "_u_oa_ltda"
        assert slugify("cliente_01") == "cliente_01"
