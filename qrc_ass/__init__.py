from __future__ import annotations

from .convert import ConversionResult, convert_lines
from .errors import FormatError, PrecisionWarning
from .model import Document, Line, Syllable

__all__ = [
    "ConversionResult",
    "Document",
    "FormatError",
    "Line",
    "PrecisionWarning",
    "Syllable",
    "convert_lines",
]
