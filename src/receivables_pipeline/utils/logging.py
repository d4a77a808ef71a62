"""Console and file logging for the receivables report CLI and engine."""

import logging
import sys
from pathlib import Path
from typing import Any

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
# Third-party loggers held at WARNING.
QUIET_LOGGERS = ("openpyxl", "urllib3", "requests")

_configured = False
_loggers: dict[str, logging.Logger] = {}


def setup_logging(
    config: dict[str, Any] | None = None,
    *,
    verbose: bool = False,
    force: bool = False,
) -> None:
    """Install the report's log handlers from the ``logging`` config section.

    Recognized keys are ``level``, ``format`` and ``file``. Records go to
    stdout and, when ``file`` is set, to that file as well. ``verbose``
    (the CLI's ``-v``) overrides the level with DEBUG.

    Only the first call takes effect: ``main`` sets up logging with the CLI
    flags and the later call from ``run_pipeline`` is a no-op. Pass
    ``force=True`` to reconfigure.
    """
    global _configured
    if _configured and not force:
        return
    config = config or {}
    level_name = "DEBUG" if verbose else str(config.get("level") or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    log_file = config.get("file")
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format=config.get("format") or DEFAULT_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Module logger, cached by name."""
    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)
    return _loggers[name]
