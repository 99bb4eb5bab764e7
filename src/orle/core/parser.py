"""Run-length encoded (RLE) pattern parser.

An RLE file looks like::

    #N Glider
    x = 3, y = 3, rule = B3/S23
    bob$2bo$3o!

Lines starting with ``#`` are comments, the line starting with ``x`` declares
the pattern size and everything else is pattern body. In the body ``b`` is a
dead cell, ``o`` a living cell, ``$`` ends a row and ``!`` ends the pattern.
A number in front of any of ``b``, ``o`` or ``$`` repeats it.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from .errors import DimensionMismatchError, HeaderParseError, InvalidRunCountError, RowTooLongError
from .pattern import Pattern, PatternIter, assemble_grid

DIGITS = "0123456789"
DEAD = "b"
ALIVE = "o"
END_OF_ROW = "$"
END_OF_PATTERN = "!"


@dataclass(frozen=True)
class Header:
    """Declared pattern size and the (uninterpreted) rule string."""

    width: int
    height: int
    rule: Optional[str] = None


@dataclass
class _DecoderState:
    """Everything a single parse call accumulates."""

    width: int = 0
    height: int = 0
    rule: Optional[str] = None
    rows: List[List[int]] = field(default_factory=list)
    current_row: List[int] = field(default_factory=list)
    digits: List[str] = field(default_factory=list)
    finished: bool = False
    comments: List[str] = field(default_factory=list)


def parse_header(line: str) -> Header:
    """Parse a ``x = <width>, y = <height>, rule = <rule>`` line.

    Args:
        line: Header line, starting with 'x'

    Returns:
        Parsed Header

    Raises:
        HeaderParseError: If the x or y field is missing or not a non-negative integer
    """
    fields = line.split(",")
    if len(fields) < 2:
        raise HeaderParseError(line, "expected 'x = <width>, y = <height>'")

    width = _parse_dimension(line, fields[0], "x")
    height = _parse_dimension(line, fields[1], "y")

    rule = None
    for extra in fields[2:]:
        key, sep, value = extra.partition("=")
        if sep and key.strip() == "rule":
            rule = value.strip()

    return Header(width, height, rule)


def _parse_dimension(line: str, header_field: str, name: str) -> int:
    parts = header_field.split("=")
    if len(parts) != 2:
        raise HeaderParseError(line, f"field {header_field.strip()!r} is not '{name} = <value>'")

    key, value = parts[0].strip(), parts[1].strip()
    if key != name:
        raise HeaderParseError(line, f"expected '{name}' field, found {key!r}")
    if not (value.isascii() and value.isdigit()):
        raise HeaderParseError(line, f"{name} value {value!r} is not a non-negative integer")

    try:
        return int(value)
    except ValueError:
        raise HeaderParseError(line, f"{name} value is too long") from None


def _run_count(state: _DecoderState) -> int:
    """Consume the digit buffer as a repeat count (1 when empty)."""
    if not state.digits:
        return 1

    digits = "".join(state.digits)
    state.digits.clear()
    if not (digits.isascii() and digits.isdigit()):
        raise InvalidRunCountError(digits)

    try:
        return int(digits)
    except ValueError:
        raise InvalidRunCountError(digits) from None


def _close_row(state: _DecoderState) -> None:
    """Pad the current row to the declared width and append it."""
    row = state.current_row
    state.current_row = []

    if len(row) > state.width:
        raise RowTooLongError(len(state.rows), len(row), state.width)

    row.extend([0] * (state.width - len(row)))
    state.rows.append(row)


def _extend_row(state: _DecoderState, cell: int, count: int) -> None:
    """Append a run to the current row, refusing to grow past the width."""
    length = len(state.current_row) + count
    if length > state.width:
        raise RowTooLongError(len(state.rows), length, state.width)

    state.current_row.extend([cell] * count)


def _add_blank_rows(state: _DecoderState, count: int) -> None:
    if count <= 0:
        return

    total = len(state.rows) + count
    if total > state.height:
        raise DimensionMismatchError(
            state.width * state.height, total * state.width, (state.width, state.height)
        )

    state.rows.extend([0] * state.width for _ in range(count))


def _decode_body_line(state: _DecoderState, line: str) -> None:
    """Feed one body line through the run-length state machine.

    Rows and runs may continue across lines, so all progress lives in
    ``state``. Characters other than digits, b, o, $ and ! are skipped.
    """
    for ch in line:
        if ch in DIGITS:
            state.digits.append(ch)
        elif ch == DEAD:
            _extend_row(state, 0, _run_count(state))
        elif ch == ALIVE:
            _extend_row(state, 1, _run_count(state))
        elif ch == END_OF_ROW:
            _close_row(state)
            _add_blank_rows(state, _run_count(state) - 1)
        elif ch == END_OF_PATTERN:
            _close_row(state)
            state.digits.clear()
            state.finished = True
            return


def _build_pattern(state: _DecoderState) -> Pattern:
    grid = assemble_grid(state.width, state.height, state.rows)

    name = ""
    description = []
    metadata = {"comments": list(state.comments)}
    for comment in state.comments:
        tag, text = comment[1:2], comment[2:].strip()
        if tag == "N":
            name = text
        elif tag in ("C", "c"):
            description.append(text)
        elif tag == "O":
            metadata["author"] = text

    if state.rule is not None:
        metadata["rule"] = state.rule

    return Pattern(
        state.width,
        state.height,
        grid,
        name=name,
        description="\n".join(description),
        metadata=metadata,
    )


class Parser:
    """Decodes RLE text into a Pattern.

    A Parser holds no decoding state between calls; each call to parse()
    starts from scratch, so one instance can be reused freely.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        """Initialize the parser.

        Args:
            logger: Logger for per-line diagnostics (defaults to the module logger)
        """
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def parse(self, text: Union[str, bytes]) -> Pattern:
        """Decode a complete RLE document.

        Args:
            text: RLE text, lines separated by '\\n'

        Returns:
            Decoded Pattern

        Raises:
            HeaderParseError: If the header line is malformed
            RowTooLongError: If a row is wider than the declared width
            InvalidRunCountError: If a run count can't be read
            DimensionMismatchError: If the decoded cells don't fill width * height
        """
        if isinstance(text, bytes):
            text = text.decode("utf-8")

        state = _DecoderState()
        for line in text.split("\n"):
            self._parse_line(state, line)

        if state.current_row and not state.finished:
            self.logger.debug(f"no '!' terminator, dropping unclosed row of {len(state.current_row)} cells")

        return _build_pattern(state)

    def _parse_line(self, state: _DecoderState, line: str) -> None:
        if line.startswith("#"):
            self.logger.debug(f"comment: {line}")
            state.comments.append(line.rstrip("\r"))
        elif line.startswith("x"):
            self.logger.debug(f"rule: {line}")
            header = parse_header(line)
            state.width = header.width
            state.height = header.height
            state.rule = header.rule
            self.logger.debug(f"size: {header.width} x {header.height}")
        elif state.finished:
            if line.strip():
                self.logger.debug(f"ignoring content after '!': {line}")
        else:
            self.logger.debug(f"pattern: {line}")
            _decode_body_line(state, line)


def parse_pattern(text: Union[str, bytes]) -> Pattern:
    """Decode RLE text into a Pattern."""
    return Parser().parse(text)


def parse(text: Union[str, bytes]) -> PatternIter:
    """Decode RLE text and return an iterator over its rows."""
    return PatternIter(parse_pattern(text))
