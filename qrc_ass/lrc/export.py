from __future__ import annotations

from .model import LrcDocument


def _fmt_lrc_time(ms: int) -> str:
    m, rem = divmod(ms, 60_000)
    s, ms2 = divmod(rem, 1_000)
    # hundredths, truncated like the Dialogue timestamps
    return f"{m:02d}:{s:02d}.{ms2 // 10:02d}"


def export_lrc(doc: LrcDocument, include_tags: bool = True) -> str:
    out: list[str] = []
    if include_tags and doc.tags:
        for k, v in doc.tags.items():
            out.append(f"[{k}:{v}]")

    for e in doc.events:
        out.append(f"[{_fmt_lrc_time(e.t_ms)}]{e.text}")
    return "\n".join(out) + ("\n" if out else "")
