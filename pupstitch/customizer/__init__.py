from .customizer import (
    MissingPatternError,
    PatternCustomizer,
    estimated_cost,
    estimated_hours,
    total_yardage,
)

__all__ = [
    "MissingPatternError",
    "PatternCustomizer",
    "estimated_cost",
    "estimated_hours",
    "total_yardage",
]
