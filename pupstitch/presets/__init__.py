from .registry import (
    PresetNotFoundError,
    PresetRegistry,
    PresetSummary,
    closest_breed,
    get,
    get_presets,
    list_breeds,
    resolve_breed_id,
)

__all__ = [
    "PresetNotFoundError",
    "PresetRegistry",
    "PresetSummary",
    "closest_breed",
    "get",
    "get_presets",
    "list_breeds",
    "resolve_breed_id",
]
