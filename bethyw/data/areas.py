"""
Areas — the top-level container of Area objects, keyed by local authority code.

Areas is also responsible for importing data: the populate_from_*() parsers
turn the three source file shapes into Area and Measure objects, and
populate() picks the right one for a dataset.
"""
from __future__ import annotations

import io
import json
import logging
import math
from typing import IO, Any, Iterator, Optional

import pandas as pd

from bethyw.config import TABLE_COLUMN_WIDTH, TABLE_PRECISION
from bethyw.data.area import Area
from bethyw.data.datasets import column, find_single_measure
from bethyw.data.errors import (
    InvalidStreamError,
    MalformedInputError,
    NotFoundError,
    UnsupportedFormatError,
)
from bethyw.data.measure import Measure
from bethyw.data.schemas import (
    ImportFilters,
    SourceColumn,
    SourceColumnMapping,
    SourceDataType,
)

logger = logging.getLogger(__name__)

# Mapping entries that hold literal values rather than source keys
_LITERAL_COLUMNS = {SourceColumn.SINGLE_MEASURE_CODE, SourceColumn.SINGLE_MEASURE_NAME}


# ---------------------------------------------------------------------------
# Stream / token helpers
# ---------------------------------------------------------------------------

def _checked_stream(stream: IO) -> IO:
    """Fail early on a closed, unreadable or empty stream.

    Non-seekable streams are buffered so that the emptiness probe does not
    consume data.
    """
    if stream is None or getattr(stream, "closed", False) or not hasattr(stream, "read"):
        raise InvalidStreamError("Input stream is not open or not in a valid state")
    readable = getattr(stream, "readable", None)
    if readable is not None and not readable():
        raise InvalidStreamError("Input stream is not open or not in a valid state")

    seekable = getattr(stream, "seekable", None)
    if seekable is None:
        raise InvalidStreamError("Input stream is not open or not in a valid state")

    if seekable():
        pos = stream.tell()
        head = stream.read(1)
        stream.seek(pos)
        if not head:
            raise InvalidStreamError("Input stream is empty")
        return stream

    payload = stream.read()
    if not payload:
        raise InvalidStreamError("Input stream is empty")
    if isinstance(payload, bytes):
        return io.BytesIO(payload)
    return io.StringIO(payload)


def _read_csv(stream: IO) -> tuple[list[str], pd.DataFrame]:
    """Read a delimited stream into (header, rows).

    Every field is kept as a string; only empty fields become NaN, so a
    short row shows up as NaN in its missing columns.
    """
    try:
        frame = pd.read_csv(
            stream,
            header=None,
            dtype=str,
            keep_default_na=False,
            na_values=[""],
            encoding="utf-8",
        )
    except pd.errors.EmptyDataError as exc:
        raise MalformedInputError("No header row found") from exc
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise MalformedInputError(f"Could not parse CSV: {exc}") from exc

    if frame.empty:
        raise MalformedInputError("No header row found")

    header = ["" if pd.isna(h) else str(h).strip() for h in frame.iloc[0].tolist()]
    return header, frame.iloc[1:]


def _rows(frame: pd.DataFrame) -> Iterator[tuple[int, tuple]]:
    """Yield (line number, fields) for each data row (the header is line 1)."""
    for offset, row in enumerate(frame.itertuples(index=False, name=None)):
        yield offset + 2, row


def _require(row: tuple, width: int, line_no: int) -> None:
    if len(row) < width or any(pd.isna(v) for v in row[:width]):
        raise MalformedInputError(
            f"Line {line_no}: expected at least {width} columns, got {row!r}"
        )


def _parse_year(token: Any) -> int:
    try:
        year = float(token)
    except (TypeError, ValueError):
        raise MalformedInputError(f"Invalid year: {token!r}") from None
    if not year.is_integer():
        raise MalformedInputError(f"Invalid year: {token!r}")
    return int(year)


def _parse_value(token: Any) -> float:
    if isinstance(token, bool):
        raise MalformedInputError(f"Invalid value: {token!r}")
    try:
        value = float(token)
    except (TypeError, ValueError):
        raise MalformedInputError(f"Invalid value: {token!r}") from None
    if not math.isfinite(value):
        raise MalformedInputError(f"Invalid value: {token!r}")
    return value


def _position(header: list[str], cols: SourceColumnMapping, field: SourceColumn, default: int) -> int:
    """Index of a mapped column in the header, or its conventional position."""
    name = cols.get(field)
    if name is not None and name in header:
        return header.index(name)
    return default


def _map_record(record: dict, cols: SourceColumnMapping) -> dict[SourceColumn, Any]:
    """Translate a source record's keys into logical fields, dropping nulls."""
    fields: dict[SourceColumn, Any] = {}
    for field, key in cols.items():
        if field in _LITERAL_COLUMNS:
            continue
        value = record.get(key)
        if value is None:
            continue
        fields[field] = value
    return fields


class Areas:
    """All imported Area objects, keyed by local authority code."""

    def __init__(self) -> None:
        self.areas: dict[str, Area] = {}

    # ------------------------------------------------------------------
    # Container
    # ------------------------------------------------------------------

    def set_area(self, local_authority_code: str, area: Area) -> None:
        """Store ``area``, replacing any Area already held under the code."""
        self.areas[local_authority_code] = area

    def get_area(self, local_authority_code: str) -> Area:
        try:
            return self.areas[local_authority_code]
        except KeyError:
            raise NotFoundError(f"Area not found: {local_authority_code}") from None

    def _merge_area(self, local_authority_code: str) -> Area:
        """Return the Area for a code, creating it only when absent."""
        area = self.areas.get(local_authority_code)
        if area is None:
            area = Area(local_authority_code)
            self.areas[local_authority_code] = area
        return area

    def codes(self) -> list[str]:
        return sorted(self.areas)

    def __len__(self) -> int:
        return len(self.areas)

    def __contains__(self, local_authority_code: object) -> bool:
        return local_authority_code in self.areas

    def __iter__(self) -> Iterator[str]:
        return iter(self.codes())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Areas):
            return NotImplemented
        return self.areas == other.areas

    # ------------------------------------------------------------------
    # Parsers
    # ------------------------------------------------------------------

    def populate_from_authority_code_csv(
        self,
        stream: IO,
        cols: SourceColumnMapping,
        filters: Optional[ImportFilters] = None,
    ) -> None:
        """Import the reference table: ``code,English name,Welsh name`` rows."""
        filters = filters or ImportFilters()
        header, frame = _read_csv(stream)

        code_idx = _position(header, cols, SourceColumn.AUTH_CODE, 0)
        eng_idx = _position(header, cols, SourceColumn.AUTH_NAME_ENG, 1)
        cym_idx = _position(header, cols, SourceColumn.AUTH_NAME_CYM, 2)
        width = max(code_idx, eng_idx, cym_idx) + 1

        imported = 0
        for line_no, row in _rows(frame):
            _require(row, width, line_no)
            code = str(row[code_idx]).strip()
            if not filters.allows_area(code):
                continue

            area = self._merge_area(code)
            area.set_name("eng", str(row[eng_idx]))
            area.set_name("cym", str(row[cym_idx]))
            imported += 1

        logger.debug("Authority code CSV: %d areas imported (%s)", imported, filters.label)

    def populate_from_welsh_stats_json(
        self,
        stream: IO,
        cols: SourceColumnMapping,
        filters: Optional[ImportFilters] = None,
    ) -> None:
        """Import a StatsWales JSON export: one record per (area, measure, year).

        Accepts either a bare array of records or an object holding the array
        under ``value``. Records without their own measure code fall back to
        the single measure declared by ``cols``.
        """
        filters = filters or ImportFilters()
        try:
            payload = json.load(stream)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise MalformedInputError(f"Could not parse JSON: {exc}") from exc

        records = payload.get("value") if isinstance(payload, dict) else payload
        if not isinstance(records, list):
            raise MalformedInputError("Expected a JSON array of records")

        imported = 0
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                raise MalformedInputError(f"Record {index}: expected an object, got {record!r}")
            fields = _map_record(record, cols)

            if SourceColumn.AUTH_CODE not in fields:
                raise MalformedInputError(f"Record {index}: missing {column(cols, SourceColumn.AUTH_CODE)}")
            code = str(fields[SourceColumn.AUTH_CODE]).strip()
            if not filters.allows_area(code):
                continue

            if SourceColumn.MEASURE_CODE in fields:
                measure_code = str(fields[SourceColumn.MEASURE_CODE])
                measure_label = str(fields.get(SourceColumn.MEASURE_NAME, measure_code))
            else:
                measure_code = column(cols, SourceColumn.SINGLE_MEASURE_CODE)
                measure_label = column(cols, SourceColumn.SINGLE_MEASURE_NAME)
            measure_code = measure_code.lower()
            measure_label = measure_label.lower()
            if not filters.allows_measure(measure_code):
                continue

            if SourceColumn.YEAR not in fields:
                raise MalformedInputError(f"Record {index}: missing {column(cols, SourceColumn.YEAR)}")
            year = _parse_year(fields[SourceColumn.YEAR])
            if not filters.allows_year(year):
                continue

            if SourceColumn.VALUE not in fields:
                raise MalformedInputError(f"Record {index}: missing {column(cols, SourceColumn.VALUE)}")
            value = _parse_value(fields[SourceColumn.VALUE])

            measure = Measure(measure_code, measure_label)
            measure.set_value(year, value)

            area = self._merge_area(code)
            name_eng = fields.get(SourceColumn.AUTH_NAME_ENG)
            if name_eng is not None and not area.has_name("eng"):
                area.set_name("eng", str(name_eng))
            area.set_measure(measure_code, measure)
            imported += 1

        logger.debug("StatsWales JSON: %d data points imported (%s)", imported, filters.label)

    def populate_from_authority_by_year_csv(
        self,
        stream: IO,
        cols: SourceColumnMapping,
        filters: Optional[ImportFilters] = None,
    ) -> None:
        """Import a wide CSV: ``code,<year>,<year>,...`` for a single measure.

        Every area code in the file must already be present (import the
        reference table first); an unknown code raises NotFoundError.
        """
        filters = filters or ImportFilters()
        header, frame = _read_csv(stream)
        years = [_parse_year(token) for token in header[1:]]

        resolved = None
        measure_name = cols.get(SourceColumn.SINGLE_MEASURE_NAME)
        if measure_name is not None:
            resolved = find_single_measure(measure_name)
        if resolved is not None:
            measure_code, measure_label = resolved
        else:
            measure_code = column(cols, SourceColumn.SINGLE_MEASURE_CODE)
            measure_label = column(cols, SourceColumn.SINGLE_MEASURE_NAME)

        if not filters.allows_measure(measure_code):
            logger.debug("Authority by year CSV: measure %s filtered out", measure_code)
            return

        imported = 0
        for line_no, row in _rows(frame):
            _require(row, 1, line_no)
            code = str(row[0]).strip()
            if not filters.allows_area(code):
                continue

            area = self.get_area(code)
            measure = Measure(measure_code, measure_label)
            for year, token in zip(years, row[1:]):
                if not filters.allows_year(year):
                    continue
                if pd.isna(token):
                    raise MalformedInputError(f"Line {line_no}: missing value for {year}")
                measure.set_value(year, _parse_value(token))

            area.set_measure(measure_code, measure)
            imported += 1

        logger.debug("Authority by year CSV: %d rows of %s imported (%s)", imported, measure_code, filters.label)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def populate(
        self,
        stream: IO,
        data_type: SourceDataType | str,
        cols: SourceColumnMapping,
        filters: Optional[ImportFilters] = None,
    ) -> None:
        """Check the stream, then hand off to the parser for ``data_type``.

        ``filters`` defaults to accepting every area, measure and year.
        """
        stream = _checked_stream(stream)
        filters = filters or ImportFilters()

        try:
            data_type = SourceDataType(data_type)
        except ValueError:
            raise UnsupportedFormatError(f"Unexpected data type: {data_type}") from None

        if data_type is SourceDataType.AUTHORITY_CODE_CSV:
            self.populate_from_authority_code_csv(stream, cols, filters)
        elif data_type is SourceDataType.WELSH_STATS_JSON:
            self.populate_from_welsh_stats_json(stream, cols, filters)
        elif data_type is SourceDataType.AUTHORITY_BY_YEAR_CSV:
            self.populate_from_authority_by_year_csv(stream, cols, filters)
        else:
            raise UnsupportedFormatError(f"Unexpected data type: {data_type}")

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def subset(self, filters: ImportFilters) -> "Areas":
        """A filtered copy: matching areas, measures and years only."""
        out = Areas()
        for code in self.codes():
            if not filters.allows_area(code):
                continue
            source = self.areas[code]
            area = Area(code)
            area.names = dict(source.names)
            for key, measure in source.measures.items():
                if not filters.allows_measure(key):
                    continue
                copy = Measure(measure.code, measure.label)
                for year, value in measure.items():
                    if filters.allows_year(year):
                        copy.set_value(year, value)
                area.measures[key] = copy
            out.set_area(code, area)
        return out

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, dict]:
        """Nested dict of names and measures, sorted by area code."""
        result: dict[str, dict] = {}
        for code in self.codes():
            area = self.areas[code]
            names: dict[str, str] = {}
            if area.has_name("eng"):
                names["eng"] = area.get_name("eng")
            if area.has_name("cym"):
                names["cym"] = area.get_name("cym")
            measures = {
                key: {str(year): value for year, value in area.measures[key].items()}
                for key in sorted(area.measures)
            }
            result[code] = {"names": names, "measures": measures}
        return result

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, allow_nan=False)

    def render(self) -> str:
        """Tables for every area, sorted by code, then measures by code."""
        out: list[str] = []
        for code in self.codes():
            area = self.areas[code]
            out.append(f"{area.display_name()} ({code})\n")
            if not area.measures:
                out.append("<no measures>\n")
                continue
            for measure in area.sorted_measures():
                out.append(_measure_table(measure))
        return "".join(out)

    def __str__(self) -> str:
        return self.render()


def _measure_table(measure: Measure) -> str:
    w, p = TABLE_COLUMN_WIDTH, TABLE_PRECISION
    header = "".join(f"{year:>{w}}" for year in measure.years())
    header += f"{'Average':>{w}}{'Diff.':>{w}}{'% Diff.':>{w}}"
    values = "".join(f"{value:>{w}.{p}f}" for _, value in measure.items())
    values += (
        f"{measure.get_average():>{w}.{p}f}"
        f"{measure.get_difference():>{w}.{p}f}"
        f"{measure.get_difference_as_percentage():>{w}.{p}f}"
    )
    return f"{measure.label} ({measure.code})\n{header}\n{values}\n\n"
