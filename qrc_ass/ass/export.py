from __future__ import annotations

from ..config import AssStyle
from ..model import Document, Line
from ..timing import format_ass_time, karaoke_cs
from .parse import META_KEYS

EVENTS_FORMAT = "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text"

_STYLES_FORMAT = (
    "Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, "
    "BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, Angle, "
    "BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, Encoding"
)

_TAG_TO_META = {v: k for k, v in META_KEYS.items()}


def _script_header(style: AssStyle) -> list[str]:
    return [
        "[Script Info]",
        "ScriptType: v4.00+",
        "PlayResX: 1920",
        "PlayResY: 1440",
        "",
        "[V4+ Styles]",
        _STYLES_FORMAT,
        f"Style: {style.style},Arial,100,&H00FFFFFF,&H004E503F,&H00000000,&H00000000,"
        f"0,0,0,0,100,100,0,0,1,1.5,0.5,2,{style.margin_l},{style.margin_r},{style.margin_v},1",
        "",
    ]


def export_dialogue(line: Line, style: AssStyle | None = None) -> str:
    style = style or AssStyle()
    start, end = line.span or (line.start, line.end)
    karaoke = "".join(f"{{\\k{karaoke_cs(s.duration_ms)}}}{s.text}" for s in line.syllables)
    fields = (
        str(style.layer),
        format_ass_time(start),
        format_ass_time(end),
        style.style,
        line.name or style.name,
        str(style.margin_l),
        str(style.margin_r),
        str(style.margin_v),
        style.effect,
        karaoke,
    )
    return "Dialogue: " + ",".join(fields)


def export_ass(doc: Document, style: AssStyle | None = None, full_header: bool = False) -> list[str]:
    """
    `[Events]` + Format line, meta comments for known tags, then one Dialogue per line.
    Durations not already on centisecond boundaries are rounded half-up.
    """
    style = style or AssStyle()
    out: list[str] = _script_header(style) if full_header else []
    out.append("[Events]")
    out.append(EVENTS_FORMAT)
    for tag, value in doc.tags.items():
        key = _TAG_TO_META.get(tag)
        if key:
            out.append(f"Comment: 0,0:00:00.00,0:00:00.00,meta,,0,0,0,,{key}:{value}")
    out.extend(export_dialogue(line, style) for line in doc.lines)
    return out
