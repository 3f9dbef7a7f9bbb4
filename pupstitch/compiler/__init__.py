from .compiler import CompileError, PatternCompiler, compile_pattern
from .fallback import analysis_from_preset, fallback_body_part_analysis

__all__ = [
    "CompileError",
    "PatternCompiler",
    "compile_pattern",
    "analysis_from_preset",
    "fallback_body_part_analysis",
]
