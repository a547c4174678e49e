from __future__ import annotations

import logging
import re
from typing import Iterable

from ..errors import DURATION_MISMATCH, FormatError, PrecisionWarning
from ..lys.properties import is_special_name
from ..model import Document, Line, ParseStats, Syllable
from ..timing import MS_PER_CS, parse_ass_time

logger = logging.getLogger(__name__)

DIALOGUE_PREFIX = "Dialogue:"
COMMENT_PREFIX = "Comment:"
FIELD_COUNT = 10  # Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text

# Styles carrying translations / romanization instead of karaoke timing
AUX_STYLES = frozenset({"roma", "trans", "ts"})

# `Comment: ...,meta,,...,key:value` -> LRC-style tag
META_KEYS = {
    "musicName": "ti",
    "artists": "ar",
    "album": "al",
    "ttmlAuthorGithubLogin": "by",
}

_KARAOKE_TAG_RE = re.compile(r"kf|ko|k|K")  # \kf before \k


def _is_number(s: str) -> bool:
    return s.isascii() and s.isdigit()


def split_event(line: str, line_no: int = 0, prefix: str = DIALOGUE_PREFIX) -> list[str]:
    """Split an event line into its 10 fields. Text is the last one and may contain commas."""
    if not line.startswith(prefix):
        raise FormatError(f"missing {prefix!r} prefix", line_no=line_no, line=line, column=0)
    fields = line[len(prefix) :].split(",", FIELD_COUNT - 1)
    if len(fields) != FIELD_COUNT:
        raise FormatError(
            f"expected {FIELD_COUNT} fields, got {len(fields)}",
            line_no=line_no,
            line=line,
        )
    return fields


def _karaoke_payloads(block: str) -> list[str]:
    """Payloads of every karaoke tag in one override block, e.g. `\\1c&HFF&\\k10` -> ["10"]."""
    payloads: list[str] = []
    for tag in block.split("\\")[1:]:
        tag = tag.strip()
        if tag.startswith("kt"):
            # VSFilterMod \kt sets an absolute time, not a duration
            continue
        m = _KARAOKE_TAG_RE.match(tag)
        if m:
            payloads.append(tag[m.end() :])
    return payloads


def _split_karaoke(text: str, line: str, line_no: int, offset: int) -> list[tuple[int, str]]:
    """
    Walk the Text field and return (centiseconds, text) runs.
    Each karaoke tag times the text that follows it; other override tags are dropped.
    """
    runs: list[tuple[int, str]] = []
    pos = 0
    while pos < len(text):
        if text[pos] == "{":
            close = text.find("}", pos)
            if close < 0:
                raise FormatError("unterminated override block", line_no=line_no, line=line, column=offset + pos)
            for payload in _karaoke_payloads(text[pos + 1 : close]):
                if not _is_number(payload):
                    raise FormatError(
                        f"non-numeric karaoke duration {payload!r}",
                        line_no=line_no,
                        line=line,
                        column=offset + pos,
                    )
                runs.append((int(payload), ""))
            pos = close + 1
            continue

        nxt = text.find("{", pos)
        if nxt < 0:
            nxt = len(text)
        if not runs:
            raise FormatError("text before the first karaoke tag", line_no=line_no, line=line, column=offset + pos)
        cs, run_text = runs[-1]
        runs[-1] = (cs, run_text + text[pos:nxt])
        pos = nxt

    return runs


def event_times(fields: list[str], line: str, line_no: int = 0) -> tuple[int, int]:
    """Start and End of a split event, in ms."""
    try:
        return parse_ass_time(fields[1]), parse_ass_time(fields[2])
    except ValueError as e:
        raise FormatError(str(e), line_no=line_no, line=line) from e


def parse_dialogue(line: str, line_no: int = 0) -> tuple[Line, list[PrecisionWarning]]:
    """
    Parse one `Dialogue:` event with `{\\k<cs>}` karaoke tags.

    The first syllable starts at the event start, every next one right after
    the previous (centiseconds * 10 -> ms).
    """
    line = line.rstrip("\r\n")
    fields = split_event(line, line_no)
    start_ms, end_ms = event_times(fields, line, line_no)

    text = fields[FIELD_COUNT - 1]
    runs = _split_karaoke(text, line, line_no, offset=len(line) - len(text))
    if not runs:
        raise FormatError("no karaoke tags", line_no=line_no, line=line)

    syllables: list[Syllable] = []
    cursor = start_ms
    for cs, run_text in runs:
        duration = cs * MS_PER_CS
        syllables.append(Syllable(text=run_text, start_ms=cursor, duration_ms=duration))
        cursor += duration

    warnings: list[PrecisionWarning] = []
    if cursor != end_ms:
        warnings.append(
            PrecisionWarning(
                DURATION_MISMATCH,
                f"karaoke sum {cursor - start_ms} ms does not match event duration {end_ms - start_ms} ms",
                line_no,
            )
        )

    parsed = Line(
        syllables=tuple(syllables),
        span=(start_ms, end_ms),
        style=fields[3].strip(),
        name=fields[4].strip(),
        line_no=line_no,
    )
    return parsed, warnings


def meta_tag(line: str) -> tuple[str, str] | None:
    """`Comment: ...,meta,,...,musicName:x` -> ("ti", "x"); None for any other line."""
    if not line.startswith(COMMENT_PREFIX):
        return None
    fields = line[len(COMMENT_PREFIX) :].split(",", FIELD_COUNT - 1)
    if len(fields) != FIELD_COUNT or fields[3].strip() != "meta":
        return None
    key, sep, value = fields[FIELD_COUNT - 1].partition(":")
    tag = META_KEYS.get(key.strip())
    value = value.strip()
    if not sep or tag is None or not value:
        return None
    return tag, value


def is_aux_style(style: str) -> bool:
    return style.strip().lower() in AUX_STYLES


def has_special_names(lines: Iterable[str]) -> bool:
    """True when a karaoke Dialogue carries a singer Name (v1, 左, x-bg, ...), i.e. the file targets LYS."""
    for line_no, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n").lstrip()
        if not line.startswith(DIALOGUE_PREFIX):
            continue
        fields = split_event(line, line_no)
        if not is_aux_style(fields[3]) and is_special_name(fields[4]):
            return True
    return False


def parse_ass(lines: Iterable[str]) -> tuple[Document, list[PrecisionWarning], ParseStats]:
    """
    Collect karaoke Dialogue events into a Document.

    - Dialogue with an auxiliary style (roma/trans/ts) is skipped, its times
      are still validated
    - `Comment:` events with style `meta` become document tags
    - section headers, styles and other lines are ignored
    """
    tags: dict[str, str] = {}
    records: list[Line] = []
    warnings: list[PrecisionWarning] = []

    total = 0
    ignored = 0

    for line_no, raw in enumerate(lines, start=1):
        total += 1
        line = raw.rstrip("\r\n").lstrip()

        if line.startswith(DIALOGUE_PREFIX):
            fields = split_event(line, line_no)
            if is_aux_style(fields[3]):
                event_times(fields, line, line_no)
                ignored += 1
                continue
            record, w = parse_dialogue(line, line_no)
            records.append(record)
            warnings.extend(w)
            continue

        meta = meta_tag(line)
        if meta:
            tags[meta[0]] = meta[1]
            continue

        ignored += 1

    logger.debug("Parsed ASS: %d dialogue lines, %d tags, %d ignored", len(records), len(tags), ignored)
    stats = ParseStats(lines_total=total, records=len(records), tags=len(tags), lines_ignored=ignored)
    return Document(lines=tuple(records), tags=tags), warnings, stats
