"""
Public pattern generation and export API.

generate_pattern() is the single entry point that takes a breed (and/or a
vision analysis) plus optional customizations and returns a compiled Pattern.
It wires the pipeline: preset registry → fallback analysis → PatternCompiler.
export_pdf() and export_text() render a compiled Pattern.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import IO

from pupstitch.compiler.compiler import PatternCompiler
from pupstitch.compiler.fallback import analysis_from_preset
from pupstitch.layout.paginator import PaginatedDocument
from pupstitch.layout.pdf import export_pdf as _export_pdf
from pupstitch.presets.registry import get_presets
from pupstitch.schemas.analysis import DogAnalysis
from pupstitch.schemas.customization import Customizations
from pupstitch.schemas.pattern import Pattern
from pupstitch.tables.registry import get_tables
from pupstitch.writer.text import (
    format_materials_list,
    format_pattern_markdown,
    format_pattern_text,
    format_shopping_list,
    pattern_summary,
)

_TEXT_FORMATS: dict[str, Callable[[Pattern], str]] = {
    "text": format_pattern_text,
    "markdown": format_pattern_markdown,
    "materials": lambda p: format_materials_list(p.materials),
    "shopping": lambda p: format_shopping_list(p.materials),
    "summary": pattern_summary,
}


def generate_pattern(
    breed_id: str | None = None,
    analysis: DogAnalysis | None = None,
    customizations: Customizations | None = None,
    *,
    dog_name: str | None = None,
    preview_image: bytes | None = None,
) -> Pattern:
    """
    Generate a complete amigurumi pattern.

    Parameters
    ----------
    breed_id:
        Preset id (e.g. ``"labrador"``). When omitted, the analysis's
        detected breed is resolved through the alias map, falling back to the
        default breed.
    analysis:
        Vision analysis of the dog photo. When omitted, a deterministic
        analysis is built from the preset's default colors and shapes.
    customizations:
        Palette, toggles, proportions, difficulty and size; defaults to
        standard difficulty at size 1.0.
    dog_name, preview_image:
        Optional cover and preview-page content.

    Returns
    -------
    Pattern

    Raises
    ------
    ValueError
        If neither *breed_id* nor *analysis* is given.
    PresetNotFoundError
        If *breed_id* has no preset.
    CompileError
        If a compile stage fails.
    """
    if breed_id is None and analysis is None:
        raise ValueError("generate_pattern needs a breed_id or an analysis")

    presets = get_presets()
    if breed_id is None:
        breed_id = presets.resolve_breed_id(analysis.detected_breed)

    custom = customizations or Customizations()
    size = get_tables().size_key_for(custom.size_multiplier)
    preset = presets.get(breed_id, size=size)

    return PatternCompiler().compile(
        analysis if analysis is not None else analysis_from_preset(preset),
        preset,
        custom,
        dog_name=dog_name,
        preview_image=preview_image,
    )


def export_pdf(pattern: Pattern, out: str | IO[bytes]) -> PaginatedDocument:
    """Write *pattern* as an A4 PDF to a path or binary stream."""
    return _export_pdf(pattern, out)


def export_text(pattern: Pattern, fmt: str = "text") -> str:
    """
    Render *pattern* as text.

    *fmt* is one of ``"text"``, ``"markdown"``, ``"materials"``,
    ``"shopping"`` or ``"summary"``.

    Raises
    ------
    ValueError
        For an unknown format.
    """
    try:
        render = _TEXT_FORMATS[fmt]
    except KeyError:
        raise ValueError(
            f"unknown text format {fmt!r}; expected one of {sorted(_TEXT_FORMATS)}"
        ) from None
    return render(pattern)
