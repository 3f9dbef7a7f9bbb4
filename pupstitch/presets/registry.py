"""
Breed preset registry.

Loads one YAML file per breed from ``presets/data`` at import time, plus
``breed_aliases.yaml`` mapping common breed names to preset ids. The registry
is read-only after construction.

Usage
-----
::

    from pupstitch.presets.registry import get, list_breeds, resolve_breed_id

    preset = get(resolve_breed_id("Labrador Retriever"), size=SizeKey.SMALL)

Row range shorthand
-------------------
A row entry may give ``n: "7-12"`` to stand for six identical rounds; it
expands to one RowTemplate per row number at load time.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from pathlib import Path
from types import MappingProxyType

import yaml

from pupstitch.schemas.preset import (
    BodyPartName,
    BodyPartTemplate,
    BreedColors,
    BreedPreset,
    BuildType,
    ColorZone,
    EarShape,
    Proportions,
    RowTemplate,
    SizeKey,
    SizeVariant,
    SkillLevel,
    TailType,
)

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).parent / "data"
_ALIASES_FILE = "breed_aliases.yaml"
DEFAULT_BREED_ID = "labrador"
MAX_FUZZY_DISTANCE = 3

_RANGE_RE = re.compile(r"^\s*(\d+)\s*-\s*(\d+)\s*$")
_NAME_SPLIT_RE = re.compile(r"[-\s/,]+")


class PresetNotFoundError(KeyError):
    """No preset exists for the requested breed ("breed not supported")."""

    def __init__(self, breed_id: str) -> None:
        self.breed_id = breed_id
        super().__init__(f"Unknown breed preset: {breed_id!r}")


@dataclass(frozen=True)
class PresetSummary:
    breed_id: str
    name: str
    description: str
    base_size: SizeKey
    skill_level: SkillLevel
    estimated_hours: float


# ── YAML -> schema conversion ──────────────────────────────────────────────────


def _expand_rows(entries: list[dict]) -> tuple[RowTemplate, ...]:
    rows: list[RowTemplate] = []
    for entry in entries:
        n = entry["n"]
        if isinstance(n, int):
            numbers = [n]
        else:
            m = _RANGE_RE.match(str(n))
            if m is None:
                raise ValueError(f"row number must be an int or 'a-b' range, got {n!r}")
            first, last = int(m.group(1)), int(m.group(2))
            if last < first:
                raise ValueError(f"row range {n!r} runs backwards")
            numbers = list(range(first, last + 1))
        for number in numbers:
            rows.append(
                RowTemplate(
                    row_number=number,
                    instruction_text=entry["text"],
                    stitch_count=int(entry["sts"]),
                    color_key=entry.get("color"),
                )
            )
    return tuple(rows)


def _parse_body_part(name: str, data: dict) -> BodyPartTemplate:
    part = BodyPartName(name)
    props = data.get("proportions") or {}
    notes = data.get("assembly_notes") or ()
    if isinstance(notes, str):
        notes = (notes,)
    return BodyPartTemplate(
        name=part,
        quantity=int(data.get("quantity", 1)),
        rows=_expand_rows(data.get("rows") or []),
        color_zones=tuple(
            ColorZone(
                start_row=int(z["start"]),
                end_row=int(z["end"]),
                color_key=z["color"],
                description=z.get("description", ""),
            )
            for z in data.get("color_zones") or ()
        ),
        proportions=Proportions(
            width_ratio=float(props.get("width_ratio", 1.0)),
            height_ratio=float(props.get("height_ratio", 1.0)),
            depth_ratio=props.get("depth_ratio"),
        ),
        assembly_notes=tuple(notes),
    )


def _parse_body_parts(data: dict) -> dict[BodyPartName, BodyPartTemplate]:
    parts = {}
    for name, part_data in data.items():
        template = _parse_body_part(name, part_data)
        parts[template.name] = template
    return parts


def _parse_preset(data: dict) -> BreedPreset:
    colors = data["default_colors"]
    return BreedPreset(
        breed_id=data["breed_id"],
        name=data["name"],
        description=data.get("description", "").strip(),
        skill_level=SkillLevel(data.get("skill_level", "intermediate")),
        estimated_hours=float(data.get("estimated_hours", 4)),
        hook_size=data.get("hook_size", "3.5mm"),
        yarn_weight=data.get("yarn_weight", "worsted"),
        default_colors=BreedColors(
            primary=colors["primary"],
            secondary=colors.get("secondary"),
            tertiary=colors.get("tertiary"),
            accent=colors.get("accent"),
        ),
        default_ear_shape=EarShape(data.get("default_ear_shape", "floppy")),
        default_tail_type=TailType(data.get("default_tail_type", "straight")),
        default_build=BuildType(data.get("default_build", "athletic")),
        base_size=SizeKey(data.get("base_size", "medium")),
        body_parts=_parse_body_parts(data["body_parts"]),
        assembly_instructions=tuple(data.get("assembly_instructions") or ()),
        sizes={
            SizeKey(size): SizeVariant(
                hook_size=variant.get("hook_size", data.get("hook_size", "3.5mm")),
                yarn_weight=variant.get("yarn_weight", data.get("yarn_weight", "worsted")),
                body_parts=MappingProxyType(_parse_body_parts(variant["body_parts"])),
            )
            for size, variant in (data.get("sizes") or {}).items()
        },
    )


def levenshtein(a: str, b: str) -> int:
    """Case-insensitive edit distance."""
    a, b = a.lower(), b.lower()
    prev = list(range(len(a) + 1))
    for j, cb in enumerate(b, start=1):
        cur = [j]
        for i, ca in enumerate(a, start=1):
            cur.append(min(cur[i - 1] + 1, prev[i] + 1, prev[i - 1] + (ca != cb)))
        prev = cur
    return prev[-1]


# ── Registry ───────────────────────────────────────────────────────────────────


class PresetRegistry:
    """
    Immutable registry of breed presets and breed-name aliases.

    Instantiate directly to use a custom data directory (e.g. in tests);
    otherwise use get_presets() for the module singleton.
    """

    def __init__(self, data_dir: Path = _DATA_DIR) -> None:
        self._data_dir = data_dir
        self._presets: dict[str, BreedPreset] = {}
        self._aliases: dict[str, str] = {}

        self._load_all()
        self._validate_cross_references()

    def _load_yaml(self, path: Path) -> dict:
        with open(path) as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a mapping at the top level")
        return data

    def _load_all(self) -> None:
        for path in sorted(self._data_dir.glob("*.yaml")):
            if path.name == _ALIASES_FILE:
                continue
            try:
                preset = _parse_preset(self._load_yaml(path))
            except (KeyError, TypeError) as exc:
                raise ValueError(f"{path.name}: malformed preset ({exc})") from exc
            self._presets[preset.breed_id] = preset
            logger.debug("loaded preset %s from %s", preset.breed_id, path.name)

        aliases_path = self._data_dir / _ALIASES_FILE
        if aliases_path.exists():
            data = self._load_yaml(aliases_path)
            self._aliases = {str(k).lower(): v for k, v in (data.get("aliases") or {}).items()}

    def _validate_cross_references(self) -> None:
        errors: list[str] = []

        if not self._presets:
            errors.append(f"no presets found in {self._data_dir}")
        elif DEFAULT_BREED_ID not in self._presets:
            errors.append(f"default breed {DEFAULT_BREED_ID!r} has no preset")

        for alias, target in self._aliases.items():
            if target not in self._presets:
                errors.append(f"alias {alias!r} points at unknown preset {target!r}")

        for breed_id, preset in self._presets.items():
            if not preset.body_parts:
                errors.append(f"preset {breed_id!r} has no body parts")
            for size, variant in preset.sizes.items():
                if not variant.body_parts:
                    errors.append(
                        f"preset {breed_id!r} size {size.value!r} has no body parts"
                    )

        if errors:
            raise ValueError(
                "Preset registry validation failed:\n"
                + "\n".join(f"  • {e}" for e in errors)
            )

    # ── Query API ──────────────────────────────────────────────────────────────

    def get(self, breed_id: str, size: SizeKey | None = None) -> BreedPreset:
        """
        Return the preset for *breed_id*, specialized to *size*.

        When the preset carries a variant for the requested size (default
        ``medium``, falling back to the ``medium`` variant), its hook size,
        yarn weight and body-part set replace the base ones.

        Raises
        ------
        PresetNotFoundError
            If *breed_id* has no preset.
        """
        preset = self._presets.get(breed_id)
        if preset is None:
            raise PresetNotFoundError(breed_id)
        effective = SizeKey(size) if size is not None else SizeKey.MEDIUM
        variant = preset.sizes.get(effective) or preset.sizes.get(SizeKey.MEDIUM)
        if variant is None:
            return preset
        return replace(
            preset,
            hook_size=variant.hook_size,
            yarn_weight=variant.yarn_weight,
            body_parts=variant.body_parts,
        )

    def breed_ids(self) -> list[str]:
        return sorted(self._presets)

    def list_breeds(self) -> list[PresetSummary]:
        """Return a summary of every preset, sorted by breed id."""
        return [
            PresetSummary(
                breed_id=p.breed_id,
                name=p.name,
                description=p.description,
                base_size=p.base_size,
                skill_level=p.skill_level,
                estimated_hours=p.estimated_hours,
            )
            for _, p in sorted(self._presets.items())
        ]

    def resolve_breed_id(self, name: str) -> str:
        """
        Map any breed name to a preset id.

        Tries the alias map, then the name as a preset id, then each word of a
        compound name ("boxer-beagle", "lab mix"). Unknown names resolve to
        the default breed.
        """
        normalized = name.lower().strip()
        if normalized in self._aliases:
            return self._aliases[normalized]
        if normalized in self._presets:
            return normalized
        for part in _NAME_SPLIT_RE.split(normalized):
            if part in self._aliases:
                return self._aliases[part]
            if part in self._presets:
                return part
        return DEFAULT_BREED_ID

    def closest_breed(self, name: str) -> BreedPreset | None:
        """Fuzzy-match *name* against preset names and ids; None beyond distance 3."""
        if not name or not name.strip():
            return None
        best: BreedPreset | None = None
        best_distance = MAX_FUZZY_DISTANCE + 1
        for breed_id in sorted(self._presets):
            preset = self._presets[breed_id]
            distance = min(
                levenshtein(name, preset.name),
                levenshtein(name, breed_id.replace("-", " ")),
            )
            if distance < best_distance:
                best, best_distance = preset, distance
        return best


# ── Module-level singleton ─────────────────────────────────────────────────────

_presets: PresetRegistry = PresetRegistry()


def get_presets() -> PresetRegistry:
    """Return the module-level preset registry singleton."""
    return _presets


def get(breed_id: str, size: SizeKey | None = None) -> BreedPreset:
    """Return the preset for *breed_id* from the module registry."""
    return _presets.get(breed_id, size)


def list_breeds() -> list[PresetSummary]:
    return _presets.list_breeds()


def resolve_breed_id(name: str) -> str:
    return _presets.resolve_breed_id(name)


def closest_breed(name: str) -> BreedPreset | None:
    return _presets.closest_breed(name)
