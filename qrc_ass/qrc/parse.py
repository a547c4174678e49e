from __future__ import annotations

import logging
import re
from typing import Iterable

from ..errors import HEADER_MISMATCH, FormatError, PrecisionWarning
from ..model import Document, Line, ParseStats, Syllable

logger = logging.getLogger(__name__)

TAG_RE = re.compile(r"^\[([a-zA-Z]{1,16}):(.*)\]\s*$")  # [ti:...] / [ar:...] / [offset:...]

DEFAULT_HEADER_TOLERANCE_MS = 10


def _is_number(s: str) -> bool:
    return s.isascii() and s.isdigit()


def _read_pair(line: str, line_no: int, open_at: int, closer: str, what: str) -> tuple[int, int, int]:
    """
    Read `<int>,<int>` followed by `closer`, starting right after the opening
    bracket at `open_at`. Returns (first, second, index after closer).
    """
    close_at = line.find(closer, open_at + 1)
    if close_at < 0:
        raise FormatError(f"unbalanced {what}, missing {closer!r}", line_no=line_no, line=line, column=open_at)
    first, sep, second = line[open_at + 1 : close_at].partition(",")
    if not sep or not _is_number(first) or not _is_number(second):
        raise FormatError(f"non-numeric {what}", line_no=line_no, line=line, column=open_at)
    return int(first), int(second), close_at + 1


def read_syllables(line: str, line_no: int, pos: int) -> list[Syllable]:
    """
    Read repeated `<text>(<startMs>,<durationMs>)` groups from `pos` to the end
    of the line. Text runs may contain anything but `(`, trailing spaces included.
    """
    syllables: list[Syllable] = []
    while pos < len(line):
        open_at = line.find("(", pos)
        if open_at < 0:
            if line[pos:].strip():
                raise FormatError("text without a timing group", line_no=line_no, line=line, column=pos)
            break
        text = line[pos:open_at]
        start, duration, pos = _read_pair(line, line_no, open_at, ")", "syllable timing")
        if syllables and start < syllables[-1].end_ms:
            raise FormatError(
                f"syllable starts at {start} ms before the previous one ends at {syllables[-1].end_ms} ms",
                line_no=line_no,
                line=line,
                column=open_at,
            )
        syllables.append(Syllable(text=text, start_ms=start, duration_ms=duration))

    if not syllables:
        raise FormatError("record has no syllables", line_no=line_no, line=line, column=pos)
    return syllables


def parse_qrc_line(
    line: str,
    line_no: int = 0,
    header_tolerance_ms: int = DEFAULT_HEADER_TOLERANCE_MS,
) -> tuple[Line, list[PrecisionWarning]]:
    """
    Tokenize one QRC record:

        [<lineStartMs>,<lineDurationMs>]<text>(<startMs>,<durationMs>)...

    A header that covers all syllables is kept as the line's `span`.
    """
    line = line.rstrip("\r\n")
    if not line.startswith("["):
        raise FormatError("missing [start,duration] line header", line_no=line_no, line=line, column=0)
    header_start, header_duration, pos = _read_pair(line, line_no, 0, "]", "line header")
    syllables = read_syllables(line, line_no, pos)

    header_end = header_start + header_duration
    span = None
    if header_start <= syllables[0].start_ms and header_end >= syllables[-1].end_ms:
        span = (header_start, header_end)
    parsed = Line(syllables=tuple(syllables), span=span, line_no=line_no)

    warnings: list[PrecisionWarning] = []
    if abs(header_start - parsed.start) > header_tolerance_ms or abs(header_end - parsed.end) > header_tolerance_ms:
        warnings.append(
            PrecisionWarning(
                HEADER_MISMATCH,
                f"header [{header_start},{header_duration}] does not match syllables "
                f"({parsed.start}..{parsed.end} ms)",
                line_no,
            )
        )
    return parsed, warnings


def parse_qrc(
    lines: Iterable[str],
    header_tolerance_ms: int = DEFAULT_HEADER_TOLERANCE_MS,
) -> tuple[Document, list[PrecisionWarning], ParseStats]:
    """
    Supported:
    - one `[start,duration]...` record per line
    - metadata tags: [ti:], [ar:], [al:], [by:], ...
    - anything else (blank lines, XML wrappers) is ignored

    The first malformed record raises FormatError; nothing is returned.
    """
    tags: dict[str, str] = {}
    records: list[Line] = []
    warnings: list[PrecisionWarning] = []

    total = 0
    ignored = 0

    for line_no, raw in enumerate(lines, start=1):
        total += 1
        line = raw.rstrip("\r\n")
        stripped = line.strip()
        if not stripped.startswith("["):
            ignored += 1
            continue

        tag = TAG_RE.match(stripped)
        if tag:
            k = tag.group(1).strip().lower()
            v = tag.group(2).strip()
            if v:
                tags[k] = v
            continue

        record, w = parse_qrc_line(line.lstrip(), line_no, header_tolerance_ms)
        records.append(record)
        warnings.extend(w)

    logger.debug("Parsed QRC: %d records, %d tags, %d ignored", len(records), len(tags), ignored)
    stats = ParseStats(lines_total=total, records=len(records), tags=len(tags), lines_ignored=ignored)
    return Document(lines=tuple(records), tags=tags), warnings, stats
