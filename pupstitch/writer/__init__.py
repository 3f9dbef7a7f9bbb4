from .text import (
    format_instruction,
    format_materials_list,
    format_pattern_markdown,
    format_pattern_text,
    format_section,
    format_shopping_list,
    pattern_summary,
)
from .writer import PatternWriter, TemplateWriter, WriterInput, WriterOutput

__all__ = [
    "PatternWriter",
    "TemplateWriter",
    "WriterInput",
    "WriterOutput",
    "format_instruction",
    "format_materials_list",
    "format_pattern_markdown",
    "format_pattern_text",
    "format_section",
    "format_shopping_list",
    "pattern_summary",
]
