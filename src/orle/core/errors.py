"""Exceptions raised while decoding RLE patterns."""

from typing import Optional


class RLEError(ValueError):
    """Base class for all RLE decoding failures."""


class HeaderParseError(RLEError):
    """The ``x = <W>, y = <H>`` header line is malformed."""

    def __init__(self, line: str, reason: str) -> None:
        self.line = line
        self.reason = reason
        super().__init__(f"Invalid header line {line!r}: {reason}")


class RowTooLongError(RLEError):
    """A closed row holds more cells than the declared width."""

    def __init__(self, row_index: int, length: int, width: int) -> None:
        self.row_index = row_index
        self.length = length
        self.width = width
        super().__init__(f"Row {row_index} has {length} cells but pattern width is {width}")


class InvalidRunCountError(RLEError):
    """The accumulated run count is not an unsigned integer."""

    def __init__(self, digits: str) -> None:
        self.digits = digits
        super().__init__(f"Invalid run count: {digits!r}")


class DimensionMismatchError(RLEError):
    """Decoded cell count doesn't match the declared width * height."""

    def __init__(self, expected: int, actual: int, shape: Optional[tuple] = None) -> None:
        self.expected = expected
        self.actual = actual
        self.shape = shape
        message = f"Decoded {actual} cells but expected {expected}"
        if shape is not None:
            message += f" for a {shape[0]}x{shape[1]} pattern"
        super().__init__(message)
