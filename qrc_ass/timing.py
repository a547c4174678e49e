from __future__ import annotations

import dataclasses
import logging
import re

from .errors import ROUNDING, SPAN_MISMATCH, PrecisionWarning
from .model import Document, Line, Syllable

logger = logging.getLogger(__name__)

MS_PER_CS = 10
CS_PER_SECOND = 100
CS_PER_MINUTE = 60 * CS_PER_SECOND
CS_PER_HOUR = 60 * CS_PER_MINUTE

ROUNDING_MODES = ("truncate", "round")

_ASS_TIME_RE = re.compile(r"(\d+):(\d{2}):(\d{2})\.(\d{2})")  # H:MM:SS.cc


def ms_to_cs(ms: int, rounding: str = "truncate") -> int:
    if rounding == "truncate":
        return ms // MS_PER_CS
    if rounding == "round":
        return (ms + MS_PER_CS // 2) // MS_PER_CS
    raise ValueError(f"Unknown rounding mode: {rounding!r}")


def karaoke_cs(duration_ms: int) -> int:
    # half-up, so the error never exceeds 5ms
    return (duration_ms + MS_PER_CS // 2) // MS_PER_CS


def format_ass_time(ms: int, rounding: str = "truncate") -> str:
    cs = ms_to_cs(max(ms, 0), rounding)
    h, rem = divmod(cs, CS_PER_HOUR)
    m, rem = divmod(rem, CS_PER_MINUTE)
    s, cc = divmod(rem, CS_PER_SECOND)
    return f"{h}:{m:02d}:{s:02d}.{cc:02d}"


def parse_ass_time(value: str) -> int:
    """`H:MM:SS.cc` -> milliseconds. Raises ValueError on anything else."""
    m = _ASS_TIME_RE.fullmatch(value.strip())
    if not m:
        raise ValueError(f"Invalid ASS time {value!r}, expected H:MM:SS.cc")
    h, mm, ss, cc = (int(g) for g in m.groups())
    if mm > 59 or ss > 59:
        raise ValueError(f"Invalid ASS time {value!r}, minutes/seconds out of range")
    return ((h * CS_PER_HOUR) + (mm * CS_PER_MINUTE) + (ss * CS_PER_SECOND) + cc) * MS_PER_CS


def _retime_line_for_ass(line: Line, rounding: str) -> tuple[Line, list[PrecisionWarning]]:
    raw_start, raw_end = line.span or (line.start, line.end)
    span_start = ms_to_cs(raw_start, rounding) * MS_PER_CS
    span_end = ms_to_cs(raw_end, rounding) * MS_PER_CS

    out: list[Syllable] = []
    cursor = span_start
    # a span opening before the first syllable leads with an untexted run
    prev_end = min(raw_start, line.start)
    worst_error = 0

    for syl in line.syllables:
        gap = syl.start_ms - prev_end
        if gap > 0:
            gap_cs = karaoke_cs(gap)
            worst_error = max(worst_error, abs(gap_cs * MS_PER_CS - gap))
            if gap_cs:
                # pause between syllables becomes an untexted karaoke run
                out.append(Syllable("", cursor, gap_cs * MS_PER_CS))
                cursor += gap_cs * MS_PER_CS
        cs = karaoke_cs(syl.duration_ms)
        worst_error = max(worst_error, abs(cs * MS_PER_CS - syl.duration_ms))
        out.append(Syllable(syl.text, cursor, cs * MS_PER_CS))
        cursor += cs * MS_PER_CS
        prev_end = syl.end_ms

    warnings: list[PrecisionWarning] = []
    if worst_error:
        warnings.append(
            PrecisionWarning(
                ROUNDING,
                f"durations rounded to centiseconds (max error {worst_error} ms)",
                line.line_no,
            )
        )
    if cursor != span_end:
        warnings.append(
            PrecisionWarning(
                SPAN_MISMATCH,
                f"karaoke sum {(cursor - span_start) // MS_PER_CS} cs differs from "
                f"dialogue span {(span_end - span_start) // MS_PER_CS} cs",
                line.line_no,
            )
        )

    retimed = dataclasses.replace(line, syllables=tuple(out), span=(span_start, span_end))
    return retimed, warnings


def retime(doc: Document, target: str, rounding: str = "truncate") -> tuple[Document, list[PrecisionWarning]]:
    """
    Re-time a document for the target format.

    QRC and LYS keep milliseconds, so documents pass through unchanged.
    ASS gets centisecond spans and per-syllable half-up rounded durations.
    Rounding error is not redistributed across a line.
    """
    if target in ("qrc", "lys"):
        return doc, []
    if target != "ass":
        raise ValueError(f"Unknown target format: {target!r}")
    if rounding not in ROUNDING_MODES:
        raise ValueError(f"Unknown rounding mode: {rounding!r}")

    lines: list[Line] = []
    warnings: list[PrecisionWarning] = []
    for line in doc.lines:
        retimed, w = _retime_line_for_ass(line, rounding)
        lines.append(retimed)
        warnings.extend(w)

    logger.debug("Retimed %d lines for ASS, %d warnings", len(lines), len(warnings))
    return Document(lines=tuple(lines), tags=dict(doc.tags)), warnings
