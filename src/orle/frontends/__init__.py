"""Frontends that feed RLE text into the decoder."""

from .cli import main

__all__ = ["main"]
