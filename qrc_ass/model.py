from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Syllable:
    text: str
    start_ms: int
    duration_ms: int

    @property
    def end_ms(self) -> int:
        return self.start_ms + self.duration_ms


@dataclass(frozen=True, slots=True)
class Line:
    """
    One timed lyric line.

    `start`/`end` are always derived from the syllables. `span` is the
    explicit display range of an ASS Dialogue line and may differ from them.
    """

    syllables: tuple[Syllable, ...]
    span: tuple[int, int] | None = None
    style: str | None = None
    name: str | None = None
    line_no: int = 0

    def __post_init__(self) -> None:
        if not self.syllables:
            raise ValueError("a line needs at least one syllable")

    @property
    def start(self) -> int:
        return self.syllables[0].start_ms

    @property
    def end(self) -> int:
        return self.syllables[-1].end_ms

    @property
    def text(self) -> str:
        return "".join(s.text for s in self.syllables)


@dataclass(frozen=True, slots=True)
class Document:
    lines: tuple[Line, ...]
    tags: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ParseStats:
    lines_total: int
    records: int
    tags: int
    lines_ignored: int
