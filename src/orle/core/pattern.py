"""Decoded pattern storage and row iteration."""

from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple
import copy
import numpy as np

from .errors import DimensionMismatchError


def assemble_grid(width: int, height: int, rows: Sequence[Sequence[int]]) -> np.ndarray:
    """Pack decoded rows into a flat row-major grid.

    Row boundaries in ``rows`` don't have to line up with ``width``; cells are
    written one after another and wrap onto the next grid row every ``width``
    cells. Only the total cell count has to match.

    Args:
        width: Declared pattern width
        height: Declared pattern height
        rows: Decoded rows, top to bottom

    Returns:
        Flat uint8 array of length width * height

    Raises:
        DimensionMismatchError: If the rows don't hold exactly width * height cells
    """
    expected = width * height
    actual = sum(len(row) for row in rows)
    if actual != expected:
        raise DimensionMismatchError(expected, actual, (width, height))

    grid = np.zeros(expected, dtype=np.uint8)
    offset = 0
    for row in rows:
        grid[offset : offset + len(row)] = row
        offset += len(row)

    return grid


class Pattern:
    """An immutable decoded pattern.

    Cells are stored in a flat numpy array in row-major order, top row
    first. The array is read-only; every accessor hands out copies.
    """

    def __init__(
        self,
        width: int,
        height: int,
        grid: Optional[Sequence[int]] = None,
        name: str = "",
        description: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize a pattern.

        Args:
            width: Number of columns
            height: Number of rows
            grid: Flat row-major cell values (0 or 1); all dead if omitted
            name: Optional pattern name
            description: Optional description
            metadata: Optional metadata dictionary

        Raises:
            DimensionMismatchError: If grid length isn't width * height
            ValueError: If a cell value is neither 0 nor 1
        """
        if width < 0 or height < 0:
            raise ValueError(f"Pattern dimensions must be non-negative: {width}x{height}")

        if grid is None:
            values = np.zeros(width * height, dtype=np.uint8)
        else:
            values = np.asarray(grid).reshape(-1)

        if values.size != width * height:
            raise DimensionMismatchError(width * height, int(values.size), (width, height))
        if not np.isin(values, (0, 1)).all():
            raise ValueError("Pattern cells must be 0 or 1")

        cells = values.astype(np.uint8)
        cells.flags.writeable = False

        self._width = width
        self._height = height
        self._grid = cells
        self.name = name
        self.description = description
        self.metadata = copy.deepcopy(metadata) if metadata else {}

    @property
    def width(self) -> int:
        """Number of columns."""
        return self._width

    @property
    def height(self) -> int:
        """Number of rows."""
        return self._height

    @property
    def shape(self) -> Tuple[int, int]:
        """Get pattern dimensions as (width, height)."""
        return (self._width, self._height)

    @property
    def grid(self) -> np.ndarray:
        """Copy of the flat row-major grid."""
        return self.get_grid()

    def get_grid(self) -> np.ndarray:
        """Get a writable copy of the flat grid.

        Returns:
            Flat uint8 array of length width * height
        """
        return self._grid.copy()

    def to_array(self) -> np.ndarray:
        """Get a copy of the grid shaped (height, width)."""
        return self._grid.reshape(self._height, self._width).copy()

    def get_row(self, y: int) -> List[int]:
        """Get one row of cells.

        Args:
            y: Row index, 0 is the top row

        Returns:
            List of exactly width cell values

        Raises:
            IndexError: If y is out of range
        """
        if not 0 <= y < self._height:
            raise IndexError(f"Row {y} out of range for height {self._height}")

        start = y * self._width
        return self._grid[start : start + self._width].tolist()

    @property
    def population(self) -> int:
        """Get the number of living cells."""
        return int(np.count_nonzero(self._grid))

    @property
    def cells(self) -> List[Tuple[int, int]]:
        """(x, y) coordinates of living cells in row-major order."""
        ys, xs = np.nonzero(self._grid.reshape(self._height, self._width))
        return [(int(x), int(y)) for x, y in zip(xs, ys)]

    def get_bounding_box(self) -> Optional[Tuple[int, int, int, int]]:
        """Get bounding box of living cells.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y) or None if no living cells
        """
        ys, xs = np.nonzero(self._grid.reshape(self._height, self._width))
        if len(xs) == 0:
            return None

        return (int(xs.min()), int(ys.min()), int(xs.max()), int(ys.max()))

    def render(self, alive: str = "*", dead: str = ".") -> str:
        """Draw the pattern as text, one line per row.

        Args:
            alive: Glyph for living cells
            dead: Glyph for dead cells

        Returns:
            Rows joined with newlines
        """
        lines = []
        for row in self:
            lines.append("".join(alive if cell else dead for cell in row))
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert pattern to dictionary for serialization.

        Returns:
            Dictionary representation
        """
        return {
            "name": self.name,
            "width": self._width,
            "height": self._height,
            "grid": self._grid.tolist(),
            "description": self.description,
            "metadata": copy.deepcopy(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Pattern":
        """Create pattern from dictionary.

        Args:
            data: Dictionary with pattern data

        Returns:
            New Pattern instance
        """
        return cls(
            width=data["width"],
            height=data["height"],
            grid=data["grid"],
            name=data.get("name", ""),
            description=data.get("description", ""),
            metadata=data.get("metadata", {}),
        )

    def __iter__(self) -> "PatternIter":
        return PatternIter(self)

    def __eq__(self, other: object) -> bool:
        """Check if two patterns have the same shape and cells."""
        if not isinstance(other, Pattern):
            return False
        return self.shape == other.shape and np.array_equal(self._grid, other._grid)

    def __repr__(self) -> str:
        return f"Pattern(name={self.name!r}, width={self._width}, height={self._height})"

    def __str__(self) -> str:
        """String representation showing living cells as '*' and dead as '.'."""
        return self.render()


class PatternIter:
    """Single-pass cursor over the rows of a pattern.

    ``next()`` returns ``None`` once every row has been handed out and keeps
    returning ``None`` afterwards. The standard iterator protocol is served
    from the same cursor, so ``for row in it`` and ``it.next()`` can be mixed.
    """

    def __init__(self, pattern: Pattern) -> None:
        self._pattern = pattern
        self._row_index = 0

    @property
    def pattern(self) -> Pattern:
        return self._pattern

    @property
    def row_index(self) -> int:
        """Index of the next row to be returned."""
        return self._row_index

    def next(self) -> Optional[List[int]]:
        """Get the next row.

        Returns:
            Fresh list of width cells, or None when exhausted
        """
        if self._row_index < self._pattern.height:
            row = self._pattern.get_row(self._row_index)
            self._row_index += 1
            return row

        return None

    def __iter__(self) -> Iterator[List[int]]:
        return self

    def __next__(self) -> List[int]:
        row = self.next()
        if row is None:
            raise StopIteration
        return row
