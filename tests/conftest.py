"""Shared sample payloads and fixtures for the importer tests."""
import io
import json

import pytest

from bethyw.data.areas import Areas
from bethyw.data.datasets import AREAS, COMPLETE_POP, POPDEN

AREAS_CSV = (
    "Local authority code,Name (eng),Name (cym)\n"
    "W06000011,Swansea,Abertawe\n"
    "W06000023,Powys,Powys\n"
    "W06000001,Isle of Anglesey,Ynys Môn\n"
).encode("utf-8")

COMPLETE_POP_CSV = (
    "Local authority code,1999,2000,2001\n"
    "W06000011,100.5,200,300\n"
    "W06000023,5,6,7\n"
).encode("utf-8")

POPDEN_RECORDS = [
    {
        "Localauthority_Code": "W06000011",
        "Localauthority_ItemName_ENG": "Swansea",
        "Measure_Code": "Pop",
        "Measure_ItemName_ENG": "Population",
        "Year_Code": "2000",
        "Data": 250,
    },
    {
        "Localauthority_Code": "W06000011",
        "Localauthority_ItemName_ENG": "Swansea",
        "Measure_Code": "Pop",
        "Measure_ItemName_ENG": "Population",
        "Year_Code": "2002",
        "Data": "400.25",
    },
    {
        "Localauthority_Code": "W06000011",
        "Localauthority_ItemName_ENG": "Swansea",
        "Measure_Code": "Dens",
        "Measure_ItemName_ENG": "Population density",
        "Year_Code": "2002",
        "Data": 2.5,
    },
    {
        "Localauthority_Code": "W06000099",
        "Localauthority_ItemName_ENG": "Newport",
        "Measure_Code": "Pop",
        "Measure_ItemName_ENG": "Population",
        "Year_Code": "2002",
        "Data": 150,
    },
]

POPDEN_JSON = json.dumps({"odata.metadata": "", "value": POPDEN_RECORDS}).encode("utf-8")


def stream(payload: bytes) -> io.BytesIO:
    return io.BytesIO(payload)


@pytest.fixture
def areas() -> Areas:
    """Areas populated from the reference table only."""
    data = Areas()
    data.populate(stream(AREAS_CSV), AREAS.parser, AREAS.cols)
    return data


@pytest.fixture
def data_dir(tmp_path):
    """A dataset directory holding the reference table, one wide CSV and one JSON export."""
    (tmp_path / AREAS.file).write_bytes(AREAS_CSV)
    (tmp_path / COMPLETE_POP.file).write_bytes(COMPLETE_POP_CSV)
    (tmp_path / POPDEN.file).write_bytes(POPDEN_JSON)
    return tmp_path
