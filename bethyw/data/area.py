"""
Area — one local authority: its names and its measures.
"""
from __future__ import annotations

from bethyw.config import PREFERRED_LANGUAGES
from bethyw.data.errors import NotFoundError
from bethyw.data.measure import Measure


class Area:
    """A local authority keyed by its authority code.

    Names are stored by lowercase three-letter language tag (``eng``, ``cym``)
    and measures by lowercase measure code.
    """

    def __init__(self, local_authority_code: str = "") -> None:
        self._code = local_authority_code
        self.names: dict[str, str] = {}
        self.measures: dict[str, Measure] = {}

    @property
    def local_authority_code(self) -> str:
        return self._code

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    def set_name(self, lang: str, name: str) -> None:
        self.names[lang.lower()] = name

    def get_name(self, lang: str) -> str:
        try:
            return self.names[lang.lower()]
        except KeyError:
            raise NotFoundError("Language not found") from None

    def has_name(self, lang: str) -> bool:
        return lang.lower() in self.names

    def display_name(self) -> str:
        """Unnamed / the only name / English and Welsh joined with ' / '."""
        if not self.names:
            return "Unnamed"
        if len(self.names) == 1:
            return next(iter(self.names.values()))
        preferred = [self.names[lang] for lang in PREFERRED_LANGUAGES if lang in self.names]
        if not preferred:
            return self.names[min(self.names)]
        return " / ".join(preferred)

    # ------------------------------------------------------------------
    # Measures
    # ------------------------------------------------------------------

    def set_measure(self, code: str, measure: Measure) -> None:
        """Insert ``measure``, or merge its years into the existing one."""
        key = code.lower()
        existing = self.measures.get(key)
        if existing is not None:
            existing.combine(measure)
        else:
            self.measures[key] = measure

    def get_measure(self, code: str) -> Measure:
        try:
            return self.measures[code.lower()]
        except KeyError:
            raise NotFoundError(f"No measure found matching {code}") from None

    def sorted_measures(self) -> list[Measure]:
        return [self.measures[code] for code in sorted(self.measures)]

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.measures)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Area):
            return NotImplemented
        return (
            self.local_authority_code == other.local_authority_code
            and self.names == other.names
            and self.measures == other.measures
        )

    def __repr__(self) -> str:
        return f"Area({self.local_authority_code!r}, names={self.names!r}, measures={len(self)})"

    def __str__(self) -> str:
        lines = [self.display_name(), f"Local authority code: {self.local_authority_code}"]
        if not self.measures:
            lines.append("<no measures>")
            return "\n".join(lines) + "\n"
        out = "\n".join(lines) + "\n"
        for measure in self.sorted_measures():
            out += str(measure) + "\n"
        return out
