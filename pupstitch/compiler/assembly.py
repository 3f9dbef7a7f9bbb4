"""
Assembly steps: the preset's own steps plus closing tips, or a generic
sequence shaped by the detected ear type when the preset has none.
"""

from __future__ import annotations

import re

from pupstitch.schemas.analysis import DogAnalysis
from pupstitch.schemas.preset import BreedPreset, EarShape

_STEP_NUMBER_RE = re.compile(r"^\d+\.\s*")

CLOSING_TIPS = (
    "Use the long yarn tails to sew each piece. Pin pieces in place before sewing to check positioning.",
    "For a neater finish, use a whip stitch or mattress stitch to join pieces.",
    "Weave in all remaining ends securely and trim.",
)


def strip_step_number(step: str) -> str:
    """Drop a leading "3. " style step number."""
    return _STEP_NUMBER_RE.sub("", step)


def assembly_instructions(preset: BreedPreset, analysis: DogAnalysis) -> tuple[str, ...]:
    if preset.assembly_instructions:
        return tuple(strip_step_number(s) for s in preset.assembly_instructions) + CLOSING_TIPS

    if analysis.ear_shape in (EarShape.POINTY, EarShape.BUTTON):
        ears = "erect: sew to top of head so they stand up"
    else:
        ears = "floppy: sew to sides of head and let hang down naturally"

    return (
        "Attach safety eyes to head between Rnds 8-10, spaced about 6 stitches apart. "
        "Secure with washers on the inside.",
        "Sew snout to front-center of head, positioned below the eyes.",
        "Sew nose to tip of snout.",
        f"Sew ears to head, {ears}.",
        "Sew head to body. Pin in place first to ensure it sits straight.",
        "Sew front legs to body, positioned at front corners just below the head join.",
        "Sew back legs to body at back corners. Ensure the doll can sit upright.",
        "Sew tail to back of body with a slight curve.",
        "Embroider any additional details: mouth line, eyebrows, or markings using embroidery thread.",
    ) + CLOSING_TIPS
