"""Pipeline utilities: logging, normalization."""

from .logging import setup_logging, get_logger
from .normalize import format_clp, normalize_label, slugify, sort_key, to_amount

__all__ = [
    "setup_logging",
    "get_logger",
    "format_clp",
    "normalize_label",
    "slugify",
    "sort_key",
    "to_amount",
]
