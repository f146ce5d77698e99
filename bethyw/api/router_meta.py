"""
Meta endpoints: health, datasets.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from bethyw.data.areas import Areas
from bethyw.data.datasets import DATASETS
from bethyw.api.dependencies import get_areas, loaded_datasets
from bethyw.api.response_models import DatasetInfo, DatasetsResponse, HealthResponse

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(areas: Areas = Depends(get_areas)):
    return HealthResponse(status="ok", areas=len(areas), datasets=loaded_datasets())


@router.get("/datasets", response_model=DatasetsResponse)
def list_datasets():
    return DatasetsResponse(datasets=[
        DatasetInfo(code=d.code, name=d.name, file=d.file, parser=d.parser.value)
        for d in DATASETS
    ])
