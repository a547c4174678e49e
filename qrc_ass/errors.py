from __future__ import annotations

from dataclasses import dataclass

HEADER_MISMATCH = "header_mismatch"
DURATION_MISMATCH = "duration_mismatch"
ROUNDING = "rounding"
SPAN_MISMATCH = "span_mismatch"
UNKNOWN_NAME = "unknown_name"


class FormatError(ValueError):
    """Malformed input line. Conversion of the whole file is aborted."""

    def __init__(self, message: str, *, line_no: int = 0, line: str = "", column: int | None = None):
        self.message = message
        self.line_no = line_no
        self.line = line
        self.column = column
        super().__init__(self._render())

    def _render(self) -> str:
        where = f"line {self.line_no}"
        if self.column is not None:
            where += f", column {self.column + 1}"
        return f"{where}: {self.message}: {self.line!r}"


@dataclass(frozen=True, slots=True)
class PrecisionWarning:
    """Non-fatal diagnostic, returned next to a successful result."""

    kind: str
    message: str
    line_no: int = 0

    def __str__(self) -> str:
        return f"line {self.line_no}: {self.message}"
