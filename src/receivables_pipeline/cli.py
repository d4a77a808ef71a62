"""CLI for the receivables report pipeline."""

import argparse
from pathlib import Path

import yaml

from .core import run_pipeline
from .core.models import DEFAULT_PAGE_SIZE, FilterSortState
from .errors import ReportLoadError
from .utils import setup_logging, get_logger, to_amount


def _load_config(config_path: str | Path | None) -> dict:
    path = Path(config_path or "configs/default.yaml")
    if not path.exists():
        return {}
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _debt_bound(raw: str | None) -> float | None:
    if raw is None or raw.strip() == "":
        return None
    return to_amount(raw)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Load the receivables workbook, compute KPIs and write the report.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "-c", "--config",
        default="configs/default.yaml",
        help="Path to YAML config file",
    )
    parser.add_argument(
        "-w", "--workbook",
        metavar="PATH_OR_URL",
        help="Workbook to load (overrides paths.workbook)",
    )
    parser.add_argument(
        "-o", "--output-dir",
        metavar="DIR",
        help="Output directory for report and CSV exports",
    )
    parser.add_argument("-q", "--query", default="", help="Filter clients by name")
    parser.add_argument(
        "--status",
        choices=["all", "has_debt", "no_debt"],
        default="all",
        help="Filter clients by debt status",
    )
    parser.add_argument("--min-debt", metavar="AMOUNT", help="Minimum owed amount, e.g. $100.000")
    parser.add_argument("--max-debt", metavar="AMOUNT", help="Maximum owed amount")
    parser.add_argument(
        "--sort",
        choices=["name", "total_desc", "paid_desc", "balance_asc"],
        default="name",
        help="Client table order",
    )
    parser.add_argument("--page", type=int, default=1, help="Client table page")
    parser.add_argument("--page-size", type=int, help="Client table page size")
    parser.add_argument("--client", metavar="NAME", help="Also export this client's monthly detail")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Set log level to DEBUG",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    config = _load_config(args.config)
    if not config.get("paths"):
        config["paths"] = {}

    setup_logging(config.get("logging", {}), verbose=args.verbose)
    log = get_logger(__name__)

    page_size = args.page_size or int(config.get("view", {}).get("page_size", DEFAULT_PAGE_SIZE))
    filters = FilterSortState(
        query=args.query,
        debt_status=args.status,
        min_debt=_debt_bound(args.min_debt),
        max_debt=_debt_bound(args.max_debt),
        sort=args.sort,
        page=args.page,
        page_size=page_size,
    )

    try:
        report_path = run_pipeline(
            config,
            workbook_path=args.workbook,
            output_dir=args.output_dir,
            filters=filters,
            client_name=args.client,
        )
        log.info("Done. Report: %s", report_path)
    except ReportLoadError as e:
        log.error("%s", e)
        raise SystemExit(1)
    except Exception as e:
        log.exception("Pipeline failed: %s", e)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
