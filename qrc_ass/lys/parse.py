from __future__ import annotations

import logging
import re
from typing import Iterable

from ..errors import FormatError, PrecisionWarning
from ..model import Document, Line, ParseStats
from ..qrc.parse import TAG_RE, read_syllables
from .properties import name_for

logger = logging.getLogger(__name__)

_PROPERTY_RE = re.compile(r"\[(\d+)\]")


def parse_lys_line(line: str, line_no: int = 0) -> Line:
    """
    Tokenize one Lyricify Syllable record:

        [<property>]<text>(<startMs>,<durationMs>)...

    The property becomes the ASS Name of the line (左 / 右 / 背 / empty).
    """
    line = line.rstrip("\r\n")
    m = _PROPERTY_RE.match(line)
    if not m:
        raise FormatError("missing [property] line header", line_no=line_no, line=line, column=0)
    syllables = read_syllables(line, line_no, m.end())
    return Line(syllables=tuple(syllables), name=name_for(int(m.group(1))), line_no=line_no)


def parse_lys(lines: Iterable[str]) -> tuple[Document, list[PrecisionWarning], ParseStats]:
    """
    Supported:
    - one `[property]...` record per line
    - metadata tags: [ti:], [ar:], [al:], [by:], ...
    - anything else is ignored

    LYS has no line-level timing, so nothing here produces warnings.
    """
    tags: dict[str, str] = {}
    records: list[Line] = []

    total = 0
    ignored = 0

    for line_no, raw in enumerate(lines, start=1):
        total += 1
        line = raw.rstrip("\r\n").strip()
        if not line.startswith("["):
            ignored += 1
            continue

        tag = TAG_RE.match(line)
        if tag:
            v = tag.group(2).strip()
            if v:
                tags[tag.group(1).strip().lower()] = v
            continue

        records.append(parse_lys_line(line, line_no))

    logger.debug("Parsed LYS: %d records, %d tags, %d ignored", len(records), len(tags), ignored)
    stats = ParseStats(lines_total=total, records=len(records), tags=len(tags), lines_ignored=ignored)
    return Document(lines=tuple(records), tags=tags), [], stats
