"""
FastAPI dependencies — Areas singleton, filter parsing.
"""
from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Query

from bethyw.cli import parse_areas_arg, parse_measures_arg, parse_years_arg
from bethyw.data.areas import Areas
from bethyw.data.schemas import ImportFilters

# ---------------------------------------------------------------------------
# Global Areas singleton (set during startup)
# ---------------------------------------------------------------------------
_areas: Areas | None = None
_loaded_datasets: list[str] = []


def set_areas(areas: Areas, loaded: list[str] | None = None) -> None:
    global _areas, _loaded_datasets
    _areas = areas
    _loaded_datasets = list(loaded or [])


def loaded_datasets() -> list[str]:
    return list(_loaded_datasets)


def get_areas() -> Areas:
    if _areas is None:
        raise HTTPException(503, "Data not loaded yet")
    return _areas


# ---------------------------------------------------------------------------
# Filter parsing from query params
# ---------------------------------------------------------------------------

def parse_filters(
    areas: Optional[str] = Query(None, description="Comma-separated authority codes"),
    measures: Optional[str] = Query(None, description="Comma-separated measure codes"),
    years: Optional[str] = Query(None, description="YYYY or YYYY-ZZZZ"),
) -> ImportFilters:
    """Parse filter query parameters into ImportFilters."""
    try:
        year_range = parse_years_arg(years)
    except ValueError:
        raise HTTPException(400, f"Invalid years: {years}")

    return ImportFilters.build(
        areas=parse_areas_arg([areas] if areas else None),
        measures=parse_measures_arg([measures] if measures else None),
        years=year_range,
    )
