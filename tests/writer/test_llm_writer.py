"""
Tests for pupstitch/writer/llm_writer.py: LLMWriter.

Unit tests mock the anthropic client with unittest.mock so no API calls are
made. The integration test requires ANTHROPIC_API_KEY and is skipped
otherwise.
"""

from __future__ import annotations

import os
import sys
from unittest.mock import MagicMock, patch

import pytest

from pupstitch.compiler import PatternCompiler, analysis_from_preset
from pupstitch.presets import get
from pupstitch.writer.llm_writer import LLMWriter
from pupstitch.writer.writer import PatternWriter, TemplateWriter, WriterInput, WriterOutput

pytest.importorskip("anthropic")

# ── Shared fixtures ────────────────────────────────────────────────────────────


@pytest.fixture(scope="module")
def wi() -> WriterInput:
    preset = get("labrador")
    pattern = PatternCompiler().compile(
        analysis_from_preset(preset), preset, dog_name="Biscuit"
    )
    return WriterInput(pattern)


def _make_mock_client(sections: dict[str, str]) -> MagicMock:
    """Mock anthropic.Anthropic() yielding a tool_use block with the given sections."""
    tool_block = MagicMock()
    tool_block.type = "tool_use"
    tool_block.input = {"sections": sections}
    response = MagicMock()
    response.content = [tool_block]
    client = MagicMock()
    client.messages.create.return_value = response
    return client


def _writer(client: MagicMock, **kwargs) -> LLMWriter:
    with patch("anthropic.Anthropic"):
        writer = LLMWriter(**kwargs)
    writer._client = client
    return writer


def _user_content(writer: LLMWriter) -> str:
    return writer._client.messages.create.call_args.kwargs["messages"][0]["content"]


# ── TestLLMWriter ──────────────────────────────────────────────────────────────


class TestLLMWriter:
    def test_write_returns_writer_output(self, wi):
        enhanced = {key: f"Enhanced: {key}" for key in wi.section_order}
        out = _writer(_make_mock_client(enhanced)).write(wi)
        assert isinstance(out, WriterOutput)
        assert list(out.sections) == wi.section_order

    def test_section_order_preserved_in_full_pattern(self, wi):
        enhanced = {key: f"SECTION_{i}" for i, key in enumerate(wi.section_order)}
        out = _writer(_make_mock_client(enhanced)).write(wi)
        positions = [out.full_pattern.index(f"SECTION_{i}") for i in range(len(wi.section_order))]
        assert positions == sorted(positions)

    def test_missing_section_falls_back_to_template(self, wi):
        template_out = TemplateWriter().write(wi)
        first = wi.section_order[0]
        out = _writer(_make_mock_client({first: "Rewritten head"})).write(wi)
        assert out.sections[first] == "Rewritten head"
        for key in wi.section_order[1:]:
            assert out.sections[key] == template_out.sections[key]

    def test_empty_section_falls_back_to_template(self, wi):
        template_out = TemplateWriter().write(wi)
        out = _writer(_make_mock_client({"head": ""})).write(wi)
        assert out.sections["head"] == template_out.sections["head"]

    def test_no_tool_block_falls_back_to_template(self, wi):
        response = MagicMock()
        response.content = []
        client = MagicMock()
        client.messages.create.return_value = response
        out = _writer(client).write(wi)
        assert out == TemplateWriter().write(wi)

    def test_api_exception_falls_back_with_warning(self, wi):
        client = MagicMock()
        client.messages.create.side_effect = RuntimeError("network error")
        writer = _writer(client)
        with pytest.warns(UserWarning, match="LLMWriter failed"):
            out = writer.write(wi)
        assert out.full_pattern == TemplateWriter().write(wi).full_pattern

    def test_malformed_tool_input_falls_back_with_warning(self, wi):
        tool_block = MagicMock()
        tool_block.type = "tool_use"
        tool_block.input = {"wrong": {}}
        client = MagicMock()
        client.messages.create.return_value.content = [tool_block]
        with pytest.warns(UserWarning):
            out = _writer(client).write(wi)
        assert out == TemplateWriter().write(wi)

    def test_request_shape(self, wi):
        writer = _writer(_make_mock_client({}), model="claude-test", max_tokens=512)
        writer.write(wi)
        kwargs = writer._client.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-test"
        assert kwargs["max_tokens"] == 512
        assert kwargs["tool_choice"] == {"type": "any"}
        assert kwargs["tools"][0]["name"] == "write_crochet_pattern"

    def test_context_in_user_message(self, wi):
        writer = _writer(_make_mock_client({}))
        writer.write(wi)
        content = _user_content(writer)
        assert content.startswith("Breed: Labrador.")
        assert "Hook: 3.5mm." in content
        assert "Yarn: worsted weight." in content
        assert "named Biscuit" in content
        assert "Section keys: " + ", ".join(wi.section_order) in content

    def test_satisfies_pattern_writer_protocol(self):
        assert isinstance(_writer(MagicMock()), PatternWriter)

    def test_import_error_without_anthropic(self):
        with patch.dict(sys.modules, {"anthropic": None}):  # type: ignore[dict-item]
            with pytest.raises(ImportError, match=r"pupstitch\[llm\]"):
                LLMWriter()


# ── Integration test (skipped without an API key) ──────────────────────────────

_SKIP_LLM = pytest.mark.skipif(
    os.environ.get("ANTHROPIC_API_KEY") is None,
    reason="ANTHROPIC_API_KEY not set, LLM integration tests skipped",
)


@_SKIP_LLM
def test_llm_writer_keeps_every_section(wi):
    out = LLMWriter().write(wi)
    assert out.full_pattern.strip()
    assert all(out.sections[key].strip() for key in wi.section_order)
