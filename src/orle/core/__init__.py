"""Core RLE decoding logic."""

from .parser import Header, Parser, parse, parse_header, parse_pattern
from .pattern import Pattern, PatternIter, assemble_grid

__all__ = ["Header", "Parser", "parse", "parse_header", "parse_pattern", "Pattern", "PatternIter", "assemble_grid"]
