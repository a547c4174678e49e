from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

from .ass.export import export_ass
from .ass.extract import extract_lrc
from .ass.parse import has_special_names, parse_ass
from .config import AppConfig, load_config
from .errors import FormatError, PrecisionWarning
from .lrc.export import export_lrc
from .lrc.model import LrcDocument
from .lys.export import export_lys, line_properties
from .lys.parse import parse_lys
from .model import Document, ParseStats
from .qrc.export import export_qrc
from .qrc.parse import parse_qrc
from .timing import retime

logger = logging.getLogger(__name__)

FORMATS = ("ass", "qrc", "lys")
_EXTENSIONS = {".ass": "ass", ".qrc": "qrc", ".lys": "lys"}
_LYS_RECORD_RE = re.compile(r"\[\d+\]")

# errors that abort a single file
FILE_ERRORS = (FormatError, OSError, UnicodeDecodeError)


@dataclass(frozen=True, slots=True)
class ConversionResult:
    lines: tuple[str, ...]
    warnings: tuple[PrecisionWarning, ...]

    @property
    def text(self) -> str:
        return "\n".join(self.lines) + ("\n" if self.lines else "")


@dataclass(frozen=True, slots=True)
class FileResult:
    source: Path
    output: Path | None
    warnings: tuple[PrecisionWarning, ...] = ()
    lrc_outputs: tuple[Path, ...] = ()
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class BatchReport:
    results: list[FileResult] = field(default_factory=list)

    @property
    def failed(self) -> list[FileResult]:
        return [r for r in self.results if not r.ok]


def _check_format(fmt: str) -> str:
    fmt_l = fmt.lower()
    if fmt_l not in FORMATS:
        raise ValueError(f"format must be one of: {', '.join(FORMATS)}")
    return fmt_l


def detect_format(path: Path | None = None, lines: Sequence[str] | None = None) -> str:
    """
    By extension first, then by content: any ASS section or event line means
    ASS, a `[<property>]` record means LYS, anything else is read as QRC.
    """
    if path is not None:
        fmt = _EXTENSIONS.get(path.suffix.lower())
        if fmt:
            return fmt
    for line in lines or ():
        s = line.lstrip()
        if s.startswith(("[Events]", "[Script Info]", "Dialogue:")):
            return "ass"
        if _LYS_RECORD_RE.match(s):
            return "lys"
    return "qrc"


def other_format(fmt: str) -> str:
    return "qrc" if _check_format(fmt) == "ass" else "ass"


def default_target(source: str, lines: Sequence[str]) -> str:
    """ASS with singer names (v1, 左, x-bg, ...) goes to LYS, other ASS to QRC, QRC and LYS to ASS."""
    if _check_format(source) == "ass" and has_special_names(lines):
        return "lys"
    return other_format(source)


def parse_lines(
    lines: Iterable[str], source: str, config: AppConfig | None = None
) -> tuple[Document, list[PrecisionWarning], ParseStats]:
    cfg = config or load_config()
    source = _check_format(source)
    if source == "ass":
        return parse_ass(lines)
    if source == "lys":
        return parse_lys(lines)
    return parse_qrc(lines, header_tolerance_ms=cfg.header_tolerance_ms)


def convert_lines(
    lines: Iterable[str],
    source: str,
    target: str,
    config: AppConfig | None = None,
) -> ConversionResult:
    """
    Source lines -> parser -> transcoder -> emitter.
    Raises FormatError on the first malformed line; there is no partial output.
    """
    cfg = config or load_config()
    target = _check_format(target)

    doc, warnings, _stats = parse_lines(lines, source, cfg)
    doc, retime_warnings = retime(doc, target, rounding=cfg.rounding)
    warnings.extend(retime_warnings)

    if target == "ass":
        out = export_ass(doc, cfg.ass_style, full_header=cfg.full_header)
    elif target == "lys":
        props, name_warnings = line_properties(doc)
        warnings.extend(name_warnings)
        out = export_lys(doc, props)
    else:
        out = export_qrc(doc)

    for w in warnings:
        logger.debug("%s", w)
    return ConversionResult(lines=tuple(out), warnings=tuple(warnings))


def auto_output_path(input_path: Path, target: str) -> Path:
    """`song.qrc` -> `song_converted.ass` next to the input."""
    stem = input_path.stem or "output"
    return input_path.with_name(f"{stem}_converted.{target}")


def read_lines(path: Path) -> list[str]:
    # utf-8-sig drops the BOM many ASS editors write
    return path.read_text(encoding="utf-8-sig").splitlines()


def _write_lrc(input_path: Path, docs: dict[str, LrcDocument]) -> list[Path]:
    written: list[Path] = []
    for key, doc in docs.items():
        out = input_path.with_name(f"{input_path.stem}.{key}.lrc")
        out.write_text(export_lrc(doc), encoding="utf-8")
        logger.info("Wrote %s (%d lines)", out, len(doc.events))
        written.append(out)
    return written


def write_extracted_lrc(input_path: Path, lines: Sequence[str]) -> list[Path]:
    return _write_lrc(input_path, extract_lrc(lines))


def convert_file(
    input_path: Path,
    target: str | None = None,
    output: Path | None = None,
    config: AppConfig | None = None,
    extract: bool = False,
) -> FileResult:
    """
    Convert one file. Everything is parsed and rendered before the first
    write, so a FormatError leaves no output files behind.
    """
    cfg = config or load_config()
    lines = read_lines(input_path)
    source = detect_format(input_path, lines)
    target = _check_format(target) if target else default_target(source, lines)
    out_path = output or auto_output_path(input_path, target)

    logger.info("Converting %s (%s -> %s)", input_path, source, target)
    result = convert_lines(lines, source, target, cfg)
    extracted = extract_lrc(lines) if extract and source == "ass" else {}

    out_path.write_text(result.text, encoding="utf-8")
    lrc_outputs = _write_lrc(input_path, extracted)

    return FileResult(
        source=input_path,
        output=out_path,
        warnings=result.warnings,
        lrc_outputs=tuple(lrc_outputs),
    )


def convert_many(
    paths: Iterable[Path],
    target: str | None = None,
    config: AppConfig | None = None,
    extract: bool = False,
    keep_going: bool = True,
) -> BatchReport:
    """Each file converts independently; `keep_going=False` stops at the first failure."""
    cfg = config or load_config()
    report = BatchReport()
    for path in paths:
        try:
            report.results.append(convert_file(path, target=target, config=cfg, extract=extract))
        except FILE_ERRORS as e:
            logger.error("Failed to convert %s: %s", path, e)
            report.results.append(FileResult(source=path, output=None, error=e))
            if not keep_going:
                break
    return report
