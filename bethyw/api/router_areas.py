"""
Area endpoints — the imported data as JSON, whole or per area/measure.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from bethyw.analytics.common import sanitize_for_json
from bethyw.data.areas import Areas
from bethyw.data.errors import NotFoundError
from bethyw.data.schemas import ImportFilters
from bethyw.api.dependencies import get_areas, parse_filters
from bethyw.api.response_models import MeasureResponse

router = APIRouter(prefix="/api/areas", tags=["areas"])


def _safe_json(data: dict) -> JSONResponse:
    return JSONResponse(content=sanitize_for_json(data))


@router.get("")
def list_areas(
    areas: Areas = Depends(get_areas),
    filters: ImportFilters = Depends(parse_filters),
):
    """Every area (optionally filtered), keyed by authority code."""
    return _safe_json(areas.subset(filters).to_dict())


@router.get("/{code}")
def area_detail(code: str, areas: Areas = Depends(get_areas)):
    """One area's names and measures."""
    try:
        areas.get_area(code)
    except NotFoundError as e:
        raise HTTPException(404, str(e))
    data = areas.subset(ImportFilters.build(areas=[code])).to_dict()
    return _safe_json(data[code])


@router.get("/{code}/measures/{measure}", response_model=MeasureResponse)
def measure_detail(code: str, measure: str, areas: Areas = Depends(get_areas)):
    """One measure for one area, with its summary statistics."""
    try:
        m = areas.get_area(code).get_measure(measure)
    except NotFoundError as e:
        raise HTTPException(404, str(e))
    return MeasureResponse(
        area=code,
        code=m.code,
        label=m.label,
        values={str(year): value for year, value in m.items()},
        average=m.get_average(),
        difference=m.get_difference(),
        difference_percentage=m.get_difference_as_percentage(),
    )
