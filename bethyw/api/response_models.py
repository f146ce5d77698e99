"""
Pydantic response schemas for the API.
"""
from __future__ import annotations

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    areas: int
    datasets: list[str]


class DatasetInfo(BaseModel):
    code: str
    name: str
    file: str
    parser: str


class DatasetsResponse(BaseModel):
    datasets: list[DatasetInfo]


class MeasureResponse(BaseModel):
    area: str
    code: str
    label: str
    values: dict[str, float]
    average: float
    difference: float
    difference_percentage: float
