from __future__ import annotations

from ..model import Document, Line


def export_qrc_line(line: Line) -> str:
    start, end = line.span or (line.start, line.end)
    out = [f"[{start},{end - start}]"]
    for s in line.syllables:
        out.append(f"{s.text}({s.start_ms},{s.duration_ms})")
    return "".join(out)


def export_qrc(doc: Document, include_tags: bool = True) -> list[str]:
    out: list[str] = []
    if include_tags:
        for k, v in doc.tags.items():
            out.append(f"[{k}:{v}]")
    out.extend(export_qrc_line(line) for line in doc.lines)
    return out
