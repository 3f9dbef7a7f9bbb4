"""
Row-template interpreter: turns one body part's row templates into compiled
instructions.

Per row, in template order:
  1. Resolve the color key: explicit row key, else color zone, else "primary".
  2. Scale the stitch count (halves round up); simplified difficulty drops two
     more stitches from the fourth row on, never below one.
  3. Prefix the yarn: "With <yarn> yarn:" on the first row, "Change to
     <yarn>." whenever the resolved color differs from the previous row's.
  4. Apply the difficulty text transform (simplify or detail).
  5. Emit a stuffing / safety-eye reminder before the first decrease row,
     unless that is the first row.
  6. Terminal rows (no stitches, or fasten-off wording) become the canonical
     fasten-off instruction.
  7. Other rows render as "Rnd <n>: <text> [<count> sts]".

Row numbers are trusted as given; the interpreter does not check that they
increase.

This module is the only place difficulty changes instruction text.
merge_repeated_rows() is the run-length pass the compiler applies to
simplified sections.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from pupstitch.schemas.customization import Customizations, DifficultyLevel
from pupstitch.schemas.pattern import CompiledInstruction, StitchType
from pupstitch.schemas.preset import BodyPartName, ColorZone, RowTemplate
from pupstitch.tables.registry import get_tables
from pupstitch.utilities.sizing import scale_stitch_count

FASTEN_OFF_TEXT = (
    "FO. Cut yarn, leaving a ~12-inch tail for sewing. "
    "Weave end through remaining stitches and pull tight to close."
)
REMINDER_NOTE = "Reminder"

_TERMINAL_MARKERS = ("cut yarn", "fasten off", "pull through remaining")

_STITCH_RE = re.compile(r"\b(sc|inc|dec|hdc|dc|tr|slst|ch)\b", re.IGNORECASE)

_REPEAT_RE = re.compile(r"\(Sc \d+, (inc|dec)\) x \d+")
_OPEN_REPEAT_RE = re.compile(r"\(Sc \d+, (inc|dec) x \d+")

INC_DETAIL = " - work 2 sc into the same stitch to increase"
DEC_DETAIL = (
    " - insert hook through front loops of next 2 stitches, yarn over and "
    "pull through all loops (invisible decrease)"
)
MAGIC_RING_DETAIL = (
    " - wrap yarn around fingers, insert hook, yarn over and pull through loop, "
    "chain 1, work stitches into the ring"
)


# ── Text transforms ────────────────────────────────────────────────────────────


def simplify_text(text: str) -> str:
    """Collapse repeat notation into plain-language phrases."""
    if "x" not in text:
        return text
    text = _REPEAT_RE.sub("Repeat pattern around", text)
    text = _OPEN_REPEAT_RE.sub("Work increases/decreases evenly", text)
    return text.replace("Magic ring", "Start with magic ring")


def detail_text(text: str) -> str:
    """Append technique clarifications for inc / dec / Magic ring markers."""
    out = text
    if "inc" in text:
        out += INC_DETAIL
    if "dec" in text:
        out += DEC_DETAIL
    if "Magic ring" in text:
        out += MAGIC_RING_DETAIL
    return out


def extract_stitches(text: str) -> tuple[StitchType, ...]:
    """
    Tag the stitch types an instruction mentions.

    A whole-word vocabulary scan, not a parser. Returns ``(SC,)`` when nothing
    matches.
    """
    found = {m.group(1).lower() for m in _STITCH_RE.finditer(text)}
    tagged = tuple(st for st in StitchType if st.value in found)
    return tagged or (StitchType.SC,)


def is_terminal(row: RowTemplate) -> bool:
    if row.stitch_count == 0:
        return True
    lowered = row.instruction_text.lower()
    return any(marker in lowered for marker in _TERMINAL_MARKERS)


def resolve_color_key(row: RowTemplate, zones: Sequence[ColorZone]) -> str:
    if row.color_key:
        return row.color_key
    for zone in zones:
        if zone.covers(row.row_number):
            return zone.color_key
    return "primary"


def _first_decrease_index(rows: Sequence[RowTemplate]) -> int | None:
    for i, row in enumerate(rows):
        if "dec" in row.instruction_text.lower():
            return i
    return None


# ── Interpreter ────────────────────────────────────────────────────────────────


def interpret(
    rows: Sequence[RowTemplate],
    color_zones: Sequence[ColorZone],
    customizations: Customizations,
    multiplier: float,
    difficulty: DifficultyLevel,
    part: BodyPartName,
) -> tuple[CompiledInstruction, ...]:
    """
    Compile one body part's rows.

    Parameters
    ----------
    rows:
        Row templates in construction order.
    color_zones:
        The part's color zones (at most one zone covers any row).
    customizations:
        Supplies the palette used to name yarns.
    multiplier:
        Combined size x proportion multiplier for this part.
    difficulty:
        Text and density profile.
    part:
        Body part, used for the stuffing phrase in the reminder row.

    Returns
    -------
    tuple[CompiledInstruction, ...]
        Empty when *rows* is empty.
    """
    stuffing = get_tables().stuffing_level(part)
    decrease_at = _first_decrease_index(rows)
    out: list[CompiledInstruction] = []
    prev_key: str | None = None

    for i, row in enumerate(rows):
        color_key = resolve_color_key(row, color_zones)
        yarn = customizations.yarn_name_for(color_key)

        count = scale_stitch_count(row.stitch_count, multiplier)
        if difficulty == DifficultyLevel.SIMPLIFIED and i > 2:
            count = max(count - 2, 1)

        text = row.instruction_text
        if i == 0:
            text = f"With {yarn} yarn: {text}"
        elif color_key != prev_key:
            text = f"Change to {yarn}. {text}"
        prev_key = color_key

        if difficulty == DifficultyLevel.SIMPLIFIED:
            text = simplify_text(text)
        elif difficulty == DifficultyLevel.DETAILED:
            text = detail_text(text)

        if i == decrease_at and i > 0:
            n = row.row_number
            out.append(
                CompiledInstruction(
                    row_number=0,
                    text=(
                        f"--- Insert safety eyes between Rnds {max(1, n - 4)}-{n - 1} "
                        f"if applicable. Stuff piece {stuffing} before continuing. ---"
                    ),
                    color_key=color_key,
                    note=REMINDER_NOTE,
                )
            )

        note = f"Color: {yarn}" if color_key != "primary" else None

        if is_terminal(row):
            out.append(
                CompiledInstruction(
                    row_number=row.row_number,
                    text=FASTEN_OFF_TEXT,
                    color_key=color_key,
                    note=note,
                )
            )
            continue

        rendered = f"Rnd {row.row_number}: {text}"
        if count > 0:
            rendered += f" [{count} sts]"
        out.append(
            CompiledInstruction(
                row_number=row.row_number,
                text=rendered,
                color_key=color_key,
                stitches_used=extract_stitches(row.instruction_text),
                note=note,
            )
        )

    return tuple(out)


def merge_repeated_rows(
    instructions: Sequence[CompiledInstruction],
) -> tuple[CompiledInstruction, ...]:
    """
    Run-length merge of consecutive instructions with byte-identical text.

    A run of N > 1 keeps its first instruction, annotated
    ``"<text> [repeat for N rows]"``. Single pass, order preserving.
    """
    merged: list[CompiledInstruction] = []
    run_start: CompiledInstruction | None = None
    run_length = 0

    def flush() -> None:
        if run_start is None:
            return
        if run_length > 1:
            merged.append(
                CompiledInstruction(
                    row_number=run_start.row_number,
                    text=f"{run_start.text} [repeat for {run_length} rows]",
                    color_key=run_start.color_key,
                    stitches_used=run_start.stitches_used,
                    note=run_start.note,
                )
            )
        else:
            merged.append(run_start)

    for inst in instructions:
        if run_start is not None and inst.text == run_start.text:
            run_length += 1
            continue
        flush()
        run_start, run_length = inst, 1
    flush()

    return tuple(merged)
