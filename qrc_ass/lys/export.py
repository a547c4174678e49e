from __future__ import annotations

from ..errors import UNKNOWN_NAME, PrecisionWarning
from ..model import Document, Line
from .properties import CATEGORY_OTHER, UNSET, name_category, property_for


def line_properties(doc: Document) -> tuple[list[int], list[PrecisionWarning]]:
    """One property per line, derived from its Name and the line before it."""
    props: list[int] = []
    warnings: list[PrecisionWarning] = []
    previous: str | None = None
    last = UNSET
    for line in doc.lines:
        category = name_category(line.name)
        if category == CATEGORY_OTHER:
            warnings.append(
                PrecisionWarning(UNKNOWN_NAME, f"unknown Name {line.name!r}, written as property {UNSET}", line.line_no)
            )
        last = property_for(category, previous, last)
        props.append(last)
        previous = category
    return props, warnings


def export_lys_line(line: Line, prop: int) -> str:
    out = [f"[{prop}]"]
    for s in line.syllables:
        out.append(f"{s.text}({s.start_ms},{s.duration_ms})")
    return "".join(out)


def export_lys(doc: Document, properties: list[int] | None = None, include_tags: bool = True) -> list[str]:
    if properties is None:
        properties, _ = line_properties(doc)
    out: list[str] = []
    if include_tags:
        for k, v in doc.tags.items():
            out.append(f"[{k}:{v}]")
    out.extend(export_lys_line(line, prop) for line, prop in zip(doc.lines, properties))
    return out
