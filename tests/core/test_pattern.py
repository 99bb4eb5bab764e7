"""Tests for Pattern, grid assembly and row iteration."""

import json

import numpy as np
import pytest

from orle.core.errors import DimensionMismatchError
from orle.core.pattern import Pattern, PatternIter, assemble_grid


GLIDER_GRID = [0, 1, 0, 0, 0, 1, 1, 1, 1]


class TestAssembleGrid:
    """Test cases for packing rows into the flat grid."""

    def test_row_major_order(self):
        """Test rows are written top row first."""
        grid = assemble_grid(3, 3, [[0, 1, 0], [0, 0, 1], [1, 1, 1]])

        assert grid.dtype == np.uint8
        assert grid.tolist() == GLIDER_GRID

    def test_rows_not_aligned_to_width(self):
        """Test cells wrap at the width regardless of source row boundaries."""
        grid = assemble_grid(3, 2, [[1, 1], [0, 0, 1, 1]])
        assert grid.reshape(2, 3).tolist() == [[1, 1, 0], [0, 1, 1]]

    def test_too_few_cells(self):
        """Test missing cells raise DimensionMismatchError."""
        with pytest.raises(DimensionMismatchError) as exc_info:
            assemble_grid(3, 3, [[0, 1, 0], [0, 0, 1]])

        assert exc_info.value.expected == 9
        assert exc_info.value.actual == 6
        assert exc_info.value.shape == (3, 3)

    def test_too_many_cells(self):
        """Test surplus cells raise DimensionMismatchError."""
        with pytest.raises(DimensionMismatchError):
            assemble_grid(2, 1, [[1, 1], [1, 1]])

    def test_empty(self):
        """Test zero-sized grid from no rows."""
        grid = assemble_grid(0, 0, [])
        assert grid.shape == (0,)


class TestPattern:
    """Test cases for the Pattern class."""

    def test_initialization(self):
        """Test pattern initialization."""
        pattern = Pattern(3, 3, GLIDER_GRID, "Glider", "Smallest spaceship")

        assert pattern.width == 3
        assert pattern.height == 3
        assert pattern.shape == (3, 3)
        assert pattern.name == "Glider"
        assert pattern.description == "Smallest spaceship"
        assert pattern.metadata == {}

    def test_default_grid_is_dead(self):
        """Test omitted grid means all cells dead."""
        pattern = Pattern(4, 2)
        assert pattern.grid.tolist() == [0] * 8
        assert pattern.population == 0

    def test_wrong_grid_length(self):
        """Test grid length must equal width * height."""
        with pytest.raises(DimensionMismatchError):
            Pattern(3, 3, [0, 1, 0])

    def test_invalid_cell_value(self):
        """Test cells other than 0 and 1 are rejected."""
        with pytest.raises(ValueError):
            Pattern(2, 1, [0, 2])

    def test_negative_dimensions(self):
        """Test negative sizes are rejected."""
        with pytest.raises(ValueError):
            Pattern(-1, 1)

    def test_grid_is_a_copy(self):
        """Test modifying the returned grid leaves the pattern intact."""
        pattern = Pattern(3, 3, GLIDER_GRID)

        grid = pattern.get_grid()
        grid[:] = 0

        assert pattern.grid.tolist() == GLIDER_GRID

    def test_source_grid_not_shared(self):
        """Test the pattern keeps its own copy of the input cells."""
        source = np.array(GLIDER_GRID, dtype=np.uint8)
        pattern = Pattern(3, 3, source)

        source[0] = 1

        assert pattern.grid.tolist() == GLIDER_GRID

    def test_to_array(self):
        """Test 2D view is (height, width)."""
        pattern = Pattern(4, 2, [1, 0, 0, 0, 0, 0, 0, 1])
        array = pattern.to_array()

        assert array.shape == (2, 4)
        assert array[0, 0] == 1
        assert array[1, 3] == 1

    def test_get_row(self):
        """Test single row access."""
        pattern = Pattern(3, 3, GLIDER_GRID)

        assert pattern.get_row(0) == [0, 1, 0]
        assert pattern.get_row(2) == [1, 1, 1]

        with pytest.raises(IndexError):
            pattern.get_row(3)
        with pytest.raises(IndexError):
            pattern.get_row(-1)

    def test_population_and_cells(self):
        """Test living cell count and coordinates."""
        pattern = Pattern(3, 3, GLIDER_GRID)

        assert pattern.population == 5
        assert pattern.cells == [(1, 0), (2, 1), (0, 2), (1, 2), (2, 2)]

    def test_get_bounding_box(self):
        """Test bounding box calculation."""
        assert Pattern(3, 3).get_bounding_box() is None

        pattern = Pattern(5, 4, [0] * 6 + [1] + [0] * 6 + [1] + [0] * 6)
        assert pattern.get_bounding_box() == (1, 1, 3, 2)

    def test_str(self):
        """Test text rendering."""
        pattern = Pattern(3, 3, GLIDER_GRID)

        assert str(pattern) == ".*.\n..*\n***"
        assert pattern.render("O", "_") == "_O_\n__O\nOOO"

    def test_equality(self):
        """Test patterns compare by shape and cells."""
        assert Pattern(3, 3, GLIDER_GRID, "a") == Pattern(3, 3, GLIDER_GRID, "b")
        assert Pattern(3, 3, GLIDER_GRID) != Pattern(9, 1, GLIDER_GRID)
        assert Pattern(3, 3, GLIDER_GRID) != Pattern(3, 3)
        assert Pattern(3, 3) != "pattern"

    def test_to_dict(self):
        """Test dictionary serialization."""
        pattern = Pattern(3, 3, GLIDER_GRID, "Glider", metadata={"rule": "B3/S23"})
        data = pattern.to_dict()

        assert data["name"] == "Glider"
        assert data["width"] == 3
        assert data["height"] == 3
        assert data["grid"] == GLIDER_GRID
        assert data["metadata"] == {"rule": "B3/S23"}
        json.dumps(data)

    def test_metadata_not_shared_with_caller(self):
        """Test later changes to the source dict don't reach the pattern."""
        metadata = {"rule": "B3/S23", "comments": ["#N Glider"]}
        pattern = Pattern(3, 3, GLIDER_GRID, metadata=metadata)

        metadata["rule"] = "B36/S23"
        metadata["comments"].append("#C changed")

        assert pattern.metadata == {"rule": "B3/S23", "comments": ["#N Glider"]}

    def test_to_dict_metadata_is_a_copy(self):
        """Test editing serialized metadata leaves the pattern intact."""
        pattern = Pattern(3, 3, GLIDER_GRID, metadata={"comments": ["#N Glider"]})

        data = pattern.to_dict()
        data["metadata"]["comments"].append("#C changed")
        data["metadata"]["author"] = "someone"

        assert pattern.metadata == {"comments": ["#N Glider"]}

    def test_from_dict(self):
        """Test pattern creation from dictionary."""
        original = Pattern(3, 3, GLIDER_GRID, "Glider", "desc", {"author": "Richard K. Guy"})
        restored = Pattern.from_dict(json.loads(json.dumps(original.to_dict())))

        assert restored == original
        assert restored.name == "Glider"
        assert restored.description == "desc"
        assert restored.metadata == {"author": "Richard K. Guy"}


class TestPatternIter:
    """Test cases for row iteration."""

    def test_yields_height_rows_then_none(self):
        """Test next() returns each row then None."""
        rows = PatternIter(Pattern(3, 3, GLIDER_GRID))

        assert rows.row_index == 0
        assert rows.next() == [0, 1, 0]
        assert rows.row_index == 1
        assert rows.next() == [0, 0, 1]
        assert rows.next() == [1, 1, 1]
        assert rows.row_index == 3
        assert rows.next() is None
        assert rows.next() is None
        assert rows.row_index == 3

    def test_rows_are_fresh_copies(self):
        """Test changing a returned row doesn't touch the pattern."""
        pattern = Pattern(3, 3, GLIDER_GRID)
        rows = PatternIter(pattern)

        first = rows.next()
        first[0] = 1

        assert pattern.get_row(0) == [0, 1, 0]

    def test_iterator_protocol(self):
        """Test use in for loops and list()."""
        rows = PatternIter(Pattern(3, 3, GLIDER_GRID))
        assert list(rows) == [[0, 1, 0], [0, 0, 1], [1, 1, 1]]
        assert list(rows) == []
        assert rows.next() is None

    def test_not_rewound(self):
        """Test iteration resumes from the cursor, not the start."""
        rows = PatternIter(Pattern(3, 3, GLIDER_GRID))
        rows.next()

        assert list(rows) == [[0, 0, 1], [1, 1, 1]]

    def test_new_iterator_from_pattern(self):
        """Test a retained pattern can be iterated again."""
        pattern = Pattern(3, 3, GLIDER_GRID)
        exhausted = iter(pattern)
        list(exhausted)

        again = iter(pattern)
        assert again is not exhausted
        assert again.pattern is pattern
        assert again.next() == [0, 1, 0]

    def test_zero_width(self):
        """Test a zero-width pattern still yields height rows."""
        rows = PatternIter(Pattern(0, 2))

        assert rows.next() == []
        assert rows.next() == []
        assert rows.next() is None
