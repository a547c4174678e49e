from __future__ import annotations

import logging
import re
from typing import Iterable

from ..errors import FormatError
from ..lrc.model import LrcDocument, LyricEvent
from ..timing import parse_ass_time
from .parse import DIALOGUE_PREFIX, FIELD_COUNT, meta_tag, split_event

logger = logging.getLogger(__name__)

_LANG_RE = re.compile(r"^x-lang:(?P<lang>.+)$")
_OVERRIDE_RE = re.compile(r"\{[^}]*\}")

TRANSLATION_STYLES = ("trans", "ts")
ROMA_STYLE = "roma"


def strip_overrides(text: str) -> str:
    return _OVERRIDE_RE.sub("", text)


def _key_for(style: str, name: str) -> str | None:
    style = style.strip().lower()
    if style == ROMA_STYLE:
        return ROMA_STYLE
    if style in TRANSLATION_STYLES:
        m = _LANG_RE.match(name.strip())
        if m:
            return m.group("lang").strip().lower()
    return None


def extract_lrc(lines: Iterable[str]) -> dict[str, LrcDocument]:
    """
    Pull translation and romanization events out of an ASS file.

    - style `trans`/`ts` with name `x-lang:<code>` -> key `<code>`
    - style `roma` -> key `roma`

    Events are stripped of override blocks and sorted by start time.
    Meta comments (musicName, artists, ...) become the tags of every document.
    """
    found: dict[str, list[LyricEvent]] = {}
    tags: dict[str, str] = {}

    for line_no, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n").lstrip()
        meta = meta_tag(line)
        if meta:
            tags[meta[0]] = meta[1]
            continue
        if not line.startswith(DIALOGUE_PREFIX):
            continue
        fields = split_event(line, line_no)
        key = _key_for(fields[3], fields[4])
        if key is None:
            continue
        try:
            start_ms = parse_ass_time(fields[1])
        except ValueError as e:
            raise FormatError(str(e), line_no=line_no, line=line) from e
        text = strip_overrides(fields[FIELD_COUNT - 1])
        if text:
            found.setdefault(key, []).append(LyricEvent(t_ms=start_ms, text=text))

    logger.debug("Extracted LRC keys: %s", sorted(found))
    return {
        key: LrcDocument(events=tuple(sorted(events, key=lambda e: e.t_ms)), tags=dict(tags) or None)
        for key, events in found.items()
    }
