"""
TemplateWriter: compiled Pattern -> per-section prose.

Each section renders through format_section(); the full pattern is the plain
text rendering with those section texts in place. Section keys are body-part
values ("head", "frontLeg", ...) in the pattern's section order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from pupstitch.schemas.pattern import Pattern
from pupstitch.writer.text import format_pattern_text, format_section


@dataclass(frozen=True)
class WriterInput:
    """Input bundle for pattern writers."""

    pattern: Pattern

    @property
    def section_order(self) -> list[str]:
        return [s.part.value for s in self.pattern.sections]


@dataclass(frozen=True)
class WriterOutput:
    """Output of a successful pattern write."""

    sections: dict[str, str]  # body-part value → section text
    full_pattern: str


@runtime_checkable
class PatternWriter(Protocol):
    """Protocol for pattern writers."""

    def write(self, writer_input: WriterInput) -> WriterOutput: ...


class TemplateWriter:
    """Deterministic template-based writer."""

    def write(self, wi: WriterInput) -> WriterOutput:
        sections = {s.part.value: format_section(s) for s in wi.pattern.sections}
        return WriterOutput(
            sections=sections,
            full_pattern=format_pattern_text(wi.pattern, sections),
        )
