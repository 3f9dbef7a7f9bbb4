"""
Lookup-table registry: loads the fixed construction tables from YAML at
startup, validates cross-references, and exposes a read-only query API.

The registry is a module-level singleton; call get_tables() to obtain it.
All tables are loaded and validated once at import time. Nothing writes to
the registry after startup, so it is safe to share across threads.

Tables:
  body_parts.yaml:    canonical construction order, display names,
                      analysis-part aliases, stuffing firmness per part
  yardage.yaml:       base yards per piece keyed by (size key, part)
  sizing.yaml:        stuffing / safety-eye / finished-height per size key,
                      plus the size-multiplier breakpoints
  abbreviations.yaml: ordered abbreviation glossary
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

import yaml

from pupstitch.schemas.preset import BodyPartName, SizeKey

_DATA_DIR = Path(__file__).parent / "data"


@dataclass(frozen=True)
class BodyPartEntry:
    id: BodyPartName
    display_name: str
    analysis_part: str  # part name used by the vision collaborator
    stuffing: str  # firmness phrase, e.g. "firmly"


@dataclass(frozen=True)
class SizingEntry:
    size_key: SizeKey
    stuffing_oz: float
    safety_eyes: str
    finished_height: str


class LookupTables:
    """
    Immutable registry of all construction lookup tables.

    Instantiate directly to use a custom data directory (e.g. in tests);
    otherwise use get_tables() for the module singleton.
    """

    def __init__(self, data_dir: Path = _DATA_DIR) -> None:
        self._data_dir = data_dir

        self.body_parts: MappingProxyType[BodyPartName, BodyPartEntry]
        self.canonical_order: tuple[BodyPartName, ...] = ()
        self.yardage: MappingProxyType[SizeKey, MappingProxyType[BodyPartName, float]]
        self.sizing: MappingProxyType[SizeKey, SizingEntry]
        self.small_max: float = 0.0
        self.large_min: float = 0.0
        self.abbreviations: tuple[tuple[str, str], ...] = ()

        self._load_all()
        self._validate_cross_references()

    # ── Loading ────────────────────────────────────────────────────────────────

    def _load_yaml(self, filename: str) -> dict:
        path = self._data_dir / filename
        with open(path) as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a mapping at the top level")
        return data

    def _load_all(self) -> None:
        self._load_body_parts()
        self._load_yardage()
        self._load_sizing()
        self._load_abbreviations()

    def _load_body_parts(self) -> None:
        data = self._load_yaml("body_parts.yaml")
        entries: dict[BodyPartName, BodyPartEntry] = {}
        for entry in data["entries"]:
            part = BodyPartName(entry["id"])
            entries[part] = BodyPartEntry(
                id=part,
                display_name=entry["display_name"],
                analysis_part=entry.get("analysis_part", part.value),
                stuffing=entry.get("stuffing", "moderately"),
            )
        self.body_parts = MappingProxyType(entries)
        self.canonical_order = tuple(entries)

    def _load_yardage(self) -> None:
        data = self._load_yaml("yardage.yaml")
        self.yardage = MappingProxyType(
            {
                SizeKey(size): MappingProxyType(
                    {BodyPartName(part): float(yards) for part, yards in parts.items()}
                )
                for size, parts in data["sizes"].items()
            }
        )

    def _load_sizing(self) -> None:
        data = self._load_yaml("sizing.yaml")
        self.small_max = float(data["breakpoints"]["small_max"])
        self.large_min = float(data["breakpoints"]["large_min"])
        self.sizing = MappingProxyType(
            {
                SizeKey(size): SizingEntry(
                    size_key=SizeKey(size),
                    stuffing_oz=float(entry["stuffing_oz"]),
                    safety_eyes=entry["safety_eyes"],
                    finished_height=entry["finished_height"],
                )
                for size, entry in data["sizes"].items()
            }
        )

    def _load_abbreviations(self) -> None:
        data = self._load_yaml("abbreviations.yaml")
        self.abbreviations = tuple((str(a), str(m)) for a, m in data["entries"])

    # ── Cross-reference validation ─────────────────────────────────────────────

    def _validate_cross_references(self) -> None:
        """
        Run at startup. Raises ValueError listing all problems found if any
        table is missing a size key or body part that another table relies on.
        """
        errors: list[str] = []

        for part in BodyPartName:
            if part not in self.body_parts:
                errors.append(f"body_parts has no entry for {part.value!r}")

        for size in SizeKey:
            if size not in self.yardage:
                errors.append(f"yardage has no table for size {size.value!r}")
                continue
            for part in self.canonical_order:
                if part not in self.yardage[size]:
                    errors.append(
                        f"yardage[{size.value!r}] has no entry for {part.value!r}"
                    )
            if size not in self.sizing:
                errors.append(f"sizing has no entry for size {size.value!r}")

        if not self.small_max < self.large_min:
            errors.append(
                f"size breakpoints out of order: small_max={self.small_max} "
                f"large_min={self.large_min}"
            )

        abbrs = [a for a, _ in self.abbreviations]
        for a in sorted({a for a in abbrs if abbrs.count(a) > 1}):
            errors.append(f"abbreviation {a!r} defined more than once")

        if errors:
            raise ValueError(
                "Lookup table cross-reference validation failed:\n"
                + "\n".join(f"  • {e}" for e in errors)
            )

    # ── Query API ──────────────────────────────────────────────────────────────

    def size_key_for(self, multiplier: float) -> SizeKey:
        """Map a size multiplier to its size bucket (<=0.85 small, >=1.3 large)."""
        if multiplier <= self.small_max:
            return SizeKey.SMALL
        if multiplier >= self.large_min:
            return SizeKey.LARGE
        return SizeKey.MEDIUM

    def base_yardage(self, size: SizeKey, part: BodyPartName) -> float:
        """Yards per piece of ``part`` at ``size``."""
        return self.yardage[size][part]

    def stuffing_level(self, part: BodyPartName) -> str:
        return self.body_parts[part].stuffing

    def display_name(self, part: BodyPartName) -> str:
        return self.body_parts[part].display_name

    def analysis_part(self, part: BodyPartName) -> str:
        return self.body_parts[part].analysis_part

    def sizing_for(self, size: SizeKey) -> SizingEntry:
        return self.sizing[size]


# ── Module-level singleton ─────────────────────────────────────────────────────
#
# Initialized eagerly at import time so there is no lazy-init race condition
# in concurrent compiles. The tables are read-only after construction.

_tables: LookupTables = LookupTables()


def get_tables() -> LookupTables:
    """Return the module-level lookup-table singleton."""
    return _tables
