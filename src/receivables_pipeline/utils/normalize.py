"""Normalization: header labels and locale-formatted money cells."""

from __future__ import annotations

import math
import re
import unicodedata
from typing import Any


_WS_RE = re.compile(r"\s+")
_THOUSANDS_RE = re.compile(r"\B(?=(\d{3})+(?!\d))")
# Cleaned amount text: sign, ASCII digits, one decimal point, optional exponent.
_NUMBER_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)(e[+-]?\d+)?", re.IGNORECASE | re.ASCII)

CURRENCY_SYMBOL = "$"


def normalize_label(value: Any) -> str:
    """Normalize a header cell for exact comparison.

    Collapses whitespace runs to a single space, trims and uppercases.
    ``None`` normalizes to an empty string.
    """
    if value is None:
        return ""
    return _WS_RE.sub(" ", str(value)).strip().upper()


def to_amount(value: Any) -> float:
    """Convert a money cell (native number or CLP-formatted text) to a float.

    Dots are thousands separators and commas are decimal separators, so
    ``"$1.234.567"`` is ``1234567.0`` and ``"1.234,5"`` is ``1234.5``.
    Empty, unparseable and non-finite input all yield ``0.0``; this never
    raises for a single bad cell. Accounting parentheses are not understood.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else 0.0

    s = str(value).strip()
    if not s or s == CURRENCY_SYMBOL:
        return 0.0

    s = s.replace(CURRENCY_SYMBOL, "")
    s = _WS_RE.sub("", s)
    s = s.replace(".", "").replace(",", ".")
    if not _NUMBER_RE.fullmatch(s):
        return 0.0
    number = float(s)
    return number if math.isfinite(number) else 0.0


def format_clp(value: float) -> str:
    """Format an amount as whole pesos, e.g. ``-$1.234.567``."""
    sign = "-" if value < 0 else ""
    whole = str(abs(math.floor(value + 0.5)))
    return f"{sign}${_THOUSANDS_RE.sub('.', whole)}"


def sort_key(text: str) -> str:
    """Accent and case insensitive key for ordering Spanish names."""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.casefold()


def slugify(text: str) -> str:
    return re.sub(r"[^\w]+", "_", text, flags=re.ASCII).lower()
