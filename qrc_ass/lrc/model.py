from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LyricEvent:
    t_ms: int
    text: str


@dataclass(frozen=True, slots=True)
class LrcDocument:
    """Line-level lyrics: one event per translated/romanized line."""

    events: tuple[LyricEvent, ...]
    tags: dict[str, str] | None = None
