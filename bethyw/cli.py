#!/usr/bin/env python3
"""
Beth Yw? CLI — import Welsh Government statistics and print them as tables or JSON.

USAGE:
  python -m bethyw.cli show                                  # All datasets, all areas, as tables
  python -m bethyw.cli show -d popden biz -a W06000023       # Selected datasets and areas
  python -m bethyw.cli show -m pop dens -y 2010-2018 --json  # Filter measures/years, JSON output
  python -m bethyw.cli show --dir ./datasets

  python -m bethyw.cli datasets                              # List dataset codes

  python -m bethyw.cli serve                                 # Start API server
  python -m bethyw.cli serve --port 8000
"""
from __future__ import annotations

import argparse
import logging
import re
import sys
from pathlib import Path
from typing import Optional, Sequence

from bethyw.config import DATA_DIR, PORT, configure_logging
from bethyw.data.datasets import DATASETS, get_dataset
from bethyw.data.errors import BethYwError
from bethyw.data.loader import load_areas, load_datasets
from bethyw.data.areas import Areas
from bethyw.data.schemas import ImportFilters, InputFileSource, NO_YEAR_FILTER

logger = logging.getLogger(__name__)

_YEARS_RE = re.compile(r"(\d{4})(?:-(\d{4}))?")


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def _is_all(values: Optional[Sequence[str]]) -> bool:
    return not values or any(v.lower() == "all" for v in values)


def _split(values: Optional[Sequence[str]]) -> list[str]:
    """Accept both ``-a W1 W2`` and ``-a W1,W2``."""
    out: list[str] = []
    for value in values or []:
        out.extend(v.strip() for v in value.split(",") if v.strip())
    return out


def parse_datasets_arg(values: Optional[Sequence[str]]) -> list[InputFileSource]:
    """Dataset codes -> registry entries. None or 'all' selects every dataset."""
    values = _split(values)
    if _is_all(values):
        return list(DATASETS)
    return [get_dataset(code) for code in values]


def parse_areas_arg(values: Optional[Sequence[str]]) -> set[str]:
    """Authority codes to import; an empty set means all areas."""
    values = _split(values)
    if _is_all(values):
        return set()
    return set(values)


def parse_measures_arg(values: Optional[Sequence[str]]) -> set[str]:
    """Measure codes to import (case-insensitive); an empty set means all."""
    values = _split(values)
    if _is_all(values):
        return set()
    return {v.lower() for v in values}


def parse_years_arg(value: Optional[str]) -> tuple[int, int]:
    """YYYY or YYYY-ZZZZ -> inclusive (start, end); None or '0' -> (0, 0)."""
    if value is None or value.strip() in ("", "0", "0-0"):
        return NO_YEAR_FILTER
    match = _YEARS_RE.fullmatch(value.strip())
    if not match:
        raise ValueError("Invalid input for years argument")
    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) else start
    return start, end


def build_filters(args) -> ImportFilters:
    """Build ImportFilters from CLI args."""
    return ImportFilters.build(
        areas=parse_areas_arg(getattr(args, "areas", None)),
        measures=parse_measures_arg(getattr(args, "measures", None)),
        years=parse_years_arg(getattr(args, "years", None)),
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_show(args) -> int:
    """Import the requested datasets and print them."""
    try:
        datasets = parse_datasets_arg(args.datasets)
        filters = build_filters(args)
    except (BethYwError, ValueError) as exc:
        print(exc, file=sys.stderr)
        return 1

    data_dir = Path(args.dir)
    logger.info("Importing %d datasets from %s (%s)", len(datasets), data_dir, filters.label)
    areas = Areas()
    try:
        load_areas(areas, data_dir, filters)
    except BethYwError as exc:
        print("Error importing dataset:", file=sys.stderr)
        print(exc, file=sys.stderr)
        return 1

    load_datasets(areas, data_dir, datasets, filters)

    if args.json:
        print(areas.to_json())
    else:
        print(areas.render())
    return 0


def cmd_datasets(args) -> int:
    """List the datasets the importer knows about."""
    print(f"\nDATASETS ({len(DATASETS)}):\n")
    for dataset in DATASETS:
        print(f"  {dataset.code:<18}{dataset.name:<28}{dataset.file}")
    print()
    return 0


def cmd_serve(args) -> int:
    """Start the API server."""
    import uvicorn
    print(f"\nStarting Beth Yw? API on port {args.port}...")
    uvicorn.run("bethyw.main:app", host="0.0.0.0", port=args.port, reload=args.reload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bethyw",
        description="Beth Yw? — parse official Welsh Government statistics data files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log import progress to stderr")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    # show subcommand
    show_parser = subparsers.add_parser("show", help="Import datasets and print the result")
    show_parser.add_argument("--dir", default=str(DATA_DIR), help=f"Directory for input data (default: {DATA_DIR})")
    show_parser.add_argument("-d", "--datasets", nargs="*",
                             help="Dataset code(s) to import (omit or 'all' for every dataset)")
    show_parser.add_argument("-a", "--areas", nargs="*",
                             help="Authority code(s) to import (omit or 'all' for every area)")
    show_parser.add_argument("-m", "--measures", nargs="*",
                             help="Measure code(s) to import (omit or 'all' for every measure)")
    show_parser.add_argument("-y", "--years", default="0",
                             help="A year (YYYY) or inclusive range of years (YYYY-ZZZZ)")
    show_parser.add_argument("-j", "--json", action="store_true", help="Print the output as JSON instead of tables")
    show_parser.set_defaults(func=cmd_show)

    # datasets subcommand
    datasets_parser = subparsers.add_parser("datasets", help="List dataset codes")
    datasets_parser.set_defaults(func=cmd_datasets)

    # serve subcommand
    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=PORT, help=f"Port (default {PORT})")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging("INFO" if args.verbose else None)

    if not args.command:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
