"""
Source-file schemas and import filters.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional


class SourceDataType(str, Enum):
    """The file shapes populate() knows how to parse."""
    AUTHORITY_CODE_CSV = "authority_code_csv"
    WELSH_STATS_JSON = "welsh_stats_json"
    AUTHORITY_BY_YEAR_CSV = "authority_by_year_csv"


class SourceColumn(str, Enum):
    """Logical fields that a column mapping translates to source headers/keys."""
    AUTH_CODE = "auth_code"
    AUTH_NAME_ENG = "auth_name_eng"
    AUTH_NAME_CYM = "auth_name_cym"
    MEASURE_CODE = "measure_code"
    MEASURE_NAME = "measure_name"
    SINGLE_MEASURE_CODE = "single_measure_code"
    SINGLE_MEASURE_NAME = "single_measure_name"
    YEAR = "year"
    VALUE = "value"


SourceColumnMapping = dict[SourceColumn, str]


@dataclass(frozen=True)
class InputFileSource:
    """A dataset file shipped by the statistics portal and how to read it."""
    name: str
    code: str
    file: str
    parser: SourceDataType
    cols: SourceColumnMapping = field(default_factory=dict)


NO_YEAR_FILTER = (0, 0)


@dataclass(frozen=True)
class ImportFilters:
    """Allow-lists applied while parsing.

    Empty ``areas``/``measures`` and a ``years`` range of (0, 0) accept
    everything. Year bounds are inclusive.
    """
    areas: frozenset[str] = frozenset()
    measures: frozenset[str] = frozenset()
    years: tuple[int, int] = NO_YEAR_FILTER

    @classmethod
    def build(
        cls,
        areas: Optional[Iterable[str]] = None,
        measures: Optional[Iterable[str]] = None,
        years: Optional[tuple[int, int]] = None,
    ) -> "ImportFilters":
        """Construct filters from loose iterables, lowercasing measure codes."""
        return cls(
            areas=frozenset(areas or ()),
            measures=frozenset(m.lower() for m in (measures or ())),
            years=tuple(years) if years else NO_YEAR_FILTER,
        )

    def allows_area(self, code: str) -> bool:
        return not self.areas or code in self.areas

    def allows_measure(self, code: str) -> bool:
        return not self.measures or code.lower() in self.measures

    def allows_year(self, year: int) -> bool:
        start, end = self.years
        if start == 0 and end == 0:
            return True
        return start <= year <= end

    @property
    def label(self) -> str:
        """Human-readable summary, used in log lines."""
        areas = ",".join(sorted(self.areas)) or "all"
        measures = ",".join(sorted(self.measures)) or "all"
        if self.years == NO_YEAR_FILTER:
            years = "all"
        else:
            years = f"{self.years[0]}-{self.years[1]}"
        return f"areas={areas} measures={measures} years={years}"
