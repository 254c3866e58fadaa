"""
Tests for SelectedArray.
"""

import pytest
import numpy as np
import shapedarray as sa
from shapedarray import (
    SelectedArray, StridedArray, Backend, Order, Ownership,
    ShapeError, ViewBoundsError, IndexOutOfRange, EmptyRangeError,
)
from shapedarray._selected import linear_indices
from conftest import elements


@pytest.fixture
def gathered(arange_3x4):
    """Rows [2, 0] and columns [3, 1, 1] of the 3x4 arange array."""
    return arange_3x4.view([2, 0], [3, 1, 1])


class TestSelectedCreation:
    """Test SelectedArray creation and validation."""

    def test_wrap_selected(self):
        buf = np.arange(12.0)
        arr = sa.wrap_selected(buf, [0, 2], [0, 9])
        assert isinstance(arr, SelectedArray)
        assert arr.ownership is Ownership.BORROWED
        assert arr.dims == (2, 2)
        assert arr.get(1, 1) == 11.0

    def test_wrap_selected_table_list(self):
        arr = sa.wrap_selected(np.arange(12.0), [[0, 2], [0, 9]])
        assert arr.dims == (2, 2)

    def test_properties(self, gathered):
        assert gathered.backend is Backend.SELECTED
        assert gathered.order is Order.UNORDERED
        assert gathered.is_view
        assert gathered.storage_info().offset is None
        assert not gathered.storage_info().is_contiguous

    def test_tables(self, gathered):
        tables = gathered.tables
        np.testing.assert_array_equal(tables[0], [2, 0])
        np.testing.assert_array_equal(tables[1], [9, 3, 3])

    def test_outside_buffer(self):
        with pytest.raises(ViewBoundsError):
            SelectedArray(np.arange(6.0), [[0, 1], [0, 5]])
        with pytest.raises(ViewBoundsError):
            SelectedArray(np.arange(6.0), [[-1, 1]])

    def test_empty_table(self):
        with pytest.raises(ShapeError):
            SelectedArray(np.arange(6.0), [[]])

    def test_linear_indices(self):
        positions = linear_indices([np.array([0, 1]), np.array([0, 10, 20])], offset=5)
        np.testing.assert_array_equal(positions, [[5, 15, 25], [6, 16, 26]])


class TestSelectedAccess:
    """Test reads and writes through indirection tables."""

    def test_get(self, gathered):
        np.testing.assert_array_equal(
            elements(gathered), [[11.0, 5.0, 5.0], [9.0, 3.0, 3.0]])

    def test_set_writes_through(self, arange_3x4, gathered):
        gathered.set(1, 0, -9.0)
        assert arange_3x4.get(0, 3) == -9.0

    def test_duplicates_alias(self, gathered):
        gathered.set(0, 1, 42.0)
        assert gathered.get(0, 2) == 42.0

    def test_bounds_checked(self, gathered, checked):
        with pytest.raises(IndexOutOfRange):
            gathered.get(0, 3)


class TestSelectedOperations:
    """Test elementwise operations and reductions."""

    def test_fill(self, arange_3x4):
        sel = arange_3x4.view([0, 2], [1])
        sel.fill(0.5)
        np.testing.assert_array_equal(
            arange_3x4.to_numpy()[:, 1], [0.5, 4.0, 0.5])

    def test_increment_applies_per_selection(self):
        buf = np.zeros(4)
        arr = sa.wrap_selected(buf, [0, 0, 3])
        arr.increment(1.0)
        np.testing.assert_array_equal(buf, [2.0, 0.0, 0.0, 1.0])
        arr.decrement(0.5)
        np.testing.assert_array_equal(buf, [1.0, 0.0, 0.0, 0.5])

    def test_scale_applies_per_selection(self):
        buf = np.array([1.0, 1.0, 1.0])
        arr = sa.wrap_selected(buf, [1, 1, 2])
        arr.scale(3.0)
        np.testing.assert_array_equal(buf, [1.0, 9.0, 3.0])

    def test_reductions(self, gathered):
        assert gathered.min() == 3.0
        assert gathered.max() == 11.0
        assert gathered.sum() == 36.0
        assert gathered.get_min_and_max() == (3.0, 11.0)
        assert gathered.average() == pytest.approx(6.0)

    def test_flatten(self, gathered):
        np.testing.assert_array_equal(gathered.flatten(), [11, 9, 5, 3, 5, 3])

    def test_to_numpy_is_copy(self, arange_3x4, gathered):
        values = gathered.to_numpy()
        np.testing.assert_array_equal(values, elements(gathered))
        values[0, 0] = 0.0
        assert arange_3x4.get(2, 3) == 11.0

    def test_copy(self, gathered):
        dup = gathered.copy()
        assert dup.backend is Backend.FLAT
        np.testing.assert_array_equal(dup.to_numpy(), gathered.to_numpy())


class TestSelectedViews:
    """Test views of selected arrays."""

    def test_slice(self, gathered):
        row = gathered.slice(1, axis=0)
        assert isinstance(row, SelectedArray)
        np.testing.assert_array_equal(elements(row), [9.0, 3.0, 3.0])
        col = gathered.slice(0)
        np.testing.assert_array_equal(elements(col), [11.0, 9.0])

    def test_slice_to_scalar(self, gathered):
        scalar = gathered.slice(0).slice(1)
        assert isinstance(scalar, StridedArray)
        assert scalar.rank == 0
        assert scalar.get() == 9.0

    def test_view_noop_returns_self(self, gathered):
        assert gathered.view(None, slice(None)) is gathered

    def test_view_composes(self, gathered):
        sub = gathered.view([1], slice(None, None, -1))
        np.testing.assert_array_equal(elements(sub), [[3.0, 3.0, 9.0]])

    def test_view_errors(self, gathered):
        with pytest.raises(IndexOutOfRange):
            gathered.view([2], None)
        with pytest.raises(EmptyRangeError):
            gathered.view(None, slice(3, None))

    def test_as_1d(self, gathered):
        line = gathered.as_1d()
        assert line.dims == (6,)
        np.testing.assert_array_equal(elements(line), gathered.flatten())
        assert line.as_1d() is line
