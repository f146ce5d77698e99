"""
Measure — a named statistic with one value per year.
"""
from __future__ import annotations

from typing import Iterator

from bethyw.analytics.common import pct_change, safe_mean
from bethyw.data.errors import NotFoundError


class Measure:
    """A measure code, a human-readable label and a year -> value series.

    The code is lowercased on construction and never changes afterwards.
    """

    def __init__(self, code: str, label: str) -> None:
        self._code = code.lower()
        self.label = label
        self._series: dict[int, float] = {}

    @property
    def code(self) -> str:
        return self._code

    @property
    def series(self) -> dict[int, float]:
        """The series in ascending year order (a copy)."""
        return {year: self._series[year] for year in sorted(self._series)}

    def years(self) -> list[int]:
        return sorted(self._series)

    def items(self) -> Iterator[tuple[int, float]]:
        for year in sorted(self._series):
            yield year, self._series[year]

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def get_value(self, year: int) -> float:
        try:
            return self._series[year]
        except KeyError:
            raise NotFoundError(f"No value found for year {year}") from None

    def set_value(self, year: int, value: float) -> None:
        self._series[int(year)] = float(value)

    def combine(self, other: "Measure") -> None:
        """Overwrite this series with every year from ``other``.

        Code and label are left as they are.
        """
        for year, value in other._series.items():
            self._series[year] = value

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_average(self) -> float:
        return safe_mean(self._series.values())

    def get_difference(self) -> float:
        """Last year's value minus first year's value, 0 with fewer than two years."""
        if len(self._series) < 2:
            return 0.0
        years = self.years()
        return self._series[years[-1]] - self._series[years[0]]

    def get_difference_as_percentage(self) -> float:
        if not self._series:
            return 0.0
        years = self.years()
        return pct_change(self._series[years[-1]], self._series[years[0]])

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._series)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Measure):
            return NotImplemented
        return (
            self.code == other.code
            and self.label == other.label
            and self._series == other._series
        )

    def __repr__(self) -> str:
        return f"Measure(code={self.code!r}, label={self.label!r}, years={len(self)})"

    def __str__(self) -> str:
        header = f"{self.label} ({self.code})"
        if not self._series:
            return f"{header}\n<no data>\n"

        rule = "-" * 23
        lines = [header, f"{'Year':>6}  {'Value':>15}", rule]
        for year, value in self.items():
            lines.append(f"{year:>6}  {value:>15.6f}")
        lines.append(rule)
        lines.append(f"{'Average':>7} {self.get_average():>15.6f}")
        lines.append(f"{'Diff.':>7} {self.get_difference():>15.6f}")
        lines.append(f"{'% Diff.':>7} {self.get_difference_as_percentage():>15.6f}")
        return "\n".join(lines) + "\n"
