"""
Dataset registry: one InputFileSource per file the statistics portal publishes,
with the column mapping from logical fields to that file's literal headers.
"""
from __future__ import annotations

from typing import Optional

from bethyw.data.errors import MalformedInputError, NotFoundError
from bethyw.data.schemas import (
    InputFileSource,
    SourceColumn,
    SourceColumnMapping,
    SourceDataType,
)

# ---------------------------------------------------------------------------
# Reference table of local authorities
# ---------------------------------------------------------------------------
AREAS = InputFileSource(
    name="Areas",
    code="areas",
    file="areas.csv",
    parser=SourceDataType.AUTHORITY_CODE_CSV,
    cols={
        SourceColumn.AUTH_CODE: "Local authority code",
        SourceColumn.AUTH_NAME_ENG: "Name (eng)",
        SourceColumn.AUTH_NAME_CYM: "Name (cym)",
    },
)

# ---------------------------------------------------------------------------
# StatsWales JSON exports
# ---------------------------------------------------------------------------
POPDEN = InputFileSource(
    name="Population density",
    code="popden",
    file="popu1009.json",
    parser=SourceDataType.WELSH_STATS_JSON,
    cols={
        SourceColumn.AUTH_CODE: "Localauthority_Code",
        SourceColumn.AUTH_NAME_ENG: "Localauthority_ItemName_ENG",
        SourceColumn.MEASURE_CODE: "Measure_Code",
        SourceColumn.MEASURE_NAME: "Measure_ItemName_ENG",
        SourceColumn.YEAR: "Year_Code",
        SourceColumn.VALUE: "Data",
    },
)

BIZ = InputFileSource(
    name="Active Businesses",
    code="biz",
    file="econ0080.json",
    parser=SourceDataType.WELSH_STATS_JSON,
    cols={
        SourceColumn.AUTH_CODE: "Area_Code",
        SourceColumn.AUTH_NAME_ENG: "Area_ItemName_ENG",
        SourceColumn.MEASURE_CODE: "Variable_Code",
        SourceColumn.MEASURE_NAME: "Variable_ItemName_ENG",
        SourceColumn.YEAR: "Year_Code",
        SourceColumn.VALUE: "Data",
    },
)

# Pollutant names double as codes in this export
AQI = InputFileSource(
    name="Air Quality Indicators",
    code="aqi",
    file="envi0201.json",
    parser=SourceDataType.WELSH_STATS_JSON,
    cols={
        SourceColumn.AUTH_CODE: "Area_Code",
        SourceColumn.AUTH_NAME_ENG: "Area_ItemName_ENG",
        SourceColumn.MEASURE_CODE: "Pollutant_ItemName_ENG",
        SourceColumn.MEASURE_NAME: "Pollutant_ItemName_ENG",
        SourceColumn.YEAR: "Year_Code",
        SourceColumn.VALUE: "Data",
    },
)

TRAINS = InputFileSource(
    name="Rail passenger journeys",
    code="trains",
    file="tran0152.json",
    parser=SourceDataType.WELSH_STATS_JSON,
    cols={
        SourceColumn.AUTH_CODE: "LocalAuthority_Code",
        SourceColumn.AUTH_NAME_ENG: "LocalAuthority_ItemName_ENG",
        SourceColumn.SINGLE_MEASURE_CODE: "rail",
        SourceColumn.SINGLE_MEASURE_NAME: "Rail passenger journeys",
        SourceColumn.YEAR: "Year_Code",
        SourceColumn.VALUE: "Data",
    },
)

# ---------------------------------------------------------------------------
# Wide CSVs: one row per authority, one column per year
# ---------------------------------------------------------------------------
COMPLETE_POPDEN = InputFileSource(
    name="Population density",
    code="complete-popden",
    file="complete-popu1009-popden.csv",
    parser=SourceDataType.AUTHORITY_BY_YEAR_CSV,
    cols={
        SourceColumn.AUTH_CODE: "Local authority code",
        SourceColumn.SINGLE_MEASURE_CODE: "dens",
        SourceColumn.SINGLE_MEASURE_NAME: "Population density",
    },
)

COMPLETE_POP = InputFileSource(
    name="Population",
    code="complete-pop",
    file="complete-popu1009-pop.csv",
    parser=SourceDataType.AUTHORITY_BY_YEAR_CSV,
    cols={
        SourceColumn.AUTH_CODE: "Local authority code",
        SourceColumn.SINGLE_MEASURE_CODE: "pop",
        SourceColumn.SINGLE_MEASURE_NAME: "Population",
    },
)

COMPLETE_AREA = InputFileSource(
    name="Land area",
    code="complete-area",
    file="complete-popu1009-area.csv",
    parser=SourceDataType.AUTHORITY_BY_YEAR_CSV,
    cols={
        SourceColumn.AUTH_CODE: "Local authority code",
        SourceColumn.SINGLE_MEASURE_CODE: "area",
        SourceColumn.SINGLE_MEASURE_NAME: "Land area",
    },
)

DATASETS: list[InputFileSource] = [
    POPDEN,
    BIZ,
    AQI,
    TRAINS,
    COMPLETE_POPDEN,
    COMPLETE_POP,
    COMPLETE_AREA,
]


# ---------------------------------------------------------------------------
# Lookup policy
# ---------------------------------------------------------------------------

def column(cols: SourceColumnMapping, field: SourceColumn) -> str:
    """Return the source header/key for a logical field."""
    try:
        return cols[field]
    except KeyError:
        raise MalformedInputError(f"Column mapping has no entry for {field.name}") from None


def get_dataset(code: str) -> InputFileSource:
    """Find a registered dataset by its code."""
    for dataset in DATASETS:
        if dataset.code == code:
            return dataset
    raise NotFoundError(f"No dataset matches key: {code}")


def find_single_measure(measure_name: str) -> Optional[tuple[str, str]]:
    """Return (code, label) of the wide-format dataset whose single measure is
    named ``measure_name``, or None when no registered dataset declares it."""
    for dataset in DATASETS:
        if dataset.parser != SourceDataType.AUTHORITY_BY_YEAR_CSV:
            continue
        label = dataset.cols.get(SourceColumn.SINGLE_MEASURE_NAME)
        if label == measure_name:
            return dataset.cols[SourceColumn.SINGLE_MEASURE_CODE], label
    return None
