"""
LLMWriter: two-pass LLM-enhanced pattern writer.

Pass 1 (deterministic): TemplateWriter renders every section with exact round
numbers and stitch counts.

Pass 2 (LLM): Claude receives the template text and rewrites each section via
the write_crochet_pattern tool. The template text already states every number,
so the rewrite only changes wording.

On any failure (network error, no tool_use block, malformed tool input), write()
returns the TemplateWriter output with a UserWarning. Sections the LLM omits
keep their template text.

Requires the ``anthropic`` package (``pip install pupstitch[llm]``). The import
is deferred to ``__init__`` so the rest of the package imports without it.
"""

from __future__ import annotations

import warnings

from pupstitch.compiler.compiler import format_breed_display
from pupstitch.schemas.pattern import Pattern
from pupstitch.writer.prompts import LLM_WRITER_TOOL_SCHEMA, SYSTEM_PROMPT
from pupstitch.writer.text import format_pattern_text
from pupstitch.writer.writer import TemplateWriter, WriterInput, WriterOutput


def _build_context(pattern: Pattern) -> str:
    """Context block prefixed to the user message."""
    m = pattern.materials
    parts = [
        f"Breed: {format_breed_display(pattern.breed_id)}.",
        f"Hook: {m.hook_size}.",
    ]
    if m.yarns:
        parts.append(f"Yarn: {m.yarns[0].weight} weight.")
    if pattern.dog_name:
        parts.append(f"The doll is made for a dog named {pattern.dog_name}.")
    return "\n".join(parts)


class LLMWriter:
    """
    Two-pass LLM-enhanced pattern writer.

    Satisfies the PatternWriter Protocol. The Anthropic client reads
    ``ANTHROPIC_API_KEY`` from the environment.
    """

    def __init__(
        self,
        model: str = "claude-haiku-4-5-20251001",
        max_tokens: int = 4096,
    ) -> None:
        try:
            import anthropic

            self._client = anthropic.Anthropic()
        except ImportError as exc:
            raise ImportError(
                "Install the LLM extras for writer support: pip install pupstitch[llm]"
            ) from exc
        self._model = model
        self._max_tokens = max_tokens
        self._template_writer = TemplateWriter()

    def write(self, wi: WriterInput) -> WriterOutput:
        """Rewrite template prose; falls back to it with a UserWarning on any failure."""
        template_out = self._template_writer.write(wi)
        order = wi.section_order

        user_content = "\n\n".join(
            (
                _build_context(wi.pattern),
                "Section keys: " + ", ".join(order),
                template_out.full_pattern,
            )
        )

        try:
            response = self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                system=SYSTEM_PROMPT,
                tools=[LLM_WRITER_TOOL_SCHEMA],
                tool_choice={"type": "any"},
                messages=[{"role": "user", "content": user_content}],
            )
            tool_block = next((b for b in response.content if b.type == "tool_use"), None)
            if tool_block is None:
                return template_out

            raw_sections: dict[str, str] = tool_block.input["sections"]
            sections = {key: raw_sections.get(key) or template_out.sections[key] for key in order}
            return WriterOutput(
                sections=sections,
                full_pattern=format_pattern_text(wi.pattern, sections),
            )
        except Exception as exc:  # noqa: BLE001
            warnings.warn(
                f"LLMWriter failed, returning template prose: {exc}",
                stacklevel=2,
            )
            return template_out
