"""Decoder for run-length encoded (RLE) cellular automaton patterns."""

__version__ = "0.1.0"

from .core.errors import (
    RLEError,
    HeaderParseError,
    RowTooLongError,
    InvalidRunCountError,
    DimensionMismatchError,
)
from .core.parser import Parser, parse, parse_pattern
from .core.pattern import Pattern, PatternIter

__all__ = [
    "Parser",
    "parse",
    "parse_pattern",
    "Pattern",
    "PatternIter",
    "RLEError",
    "HeaderParseError",
    "RowTooLongError",
    "InvalidRunCountError",
    "DimensionMismatchError",
]
