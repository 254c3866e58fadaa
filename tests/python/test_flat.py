"""
Tests for FlatArray.
"""

import pytest
import numpy as np
import shapedarray as sa
from shapedarray import (
    FlatArray, StridedArray, SelectedArray, Backend, Order, Ownership, DType,
    NonConformableError, ShapeError, IndexOutOfRange,
)
from shapedarray._errors import SA_ERROR_RANK_MISMATCH


class TestFlatCreation:
    """Test FlatArray creation."""

    def test_create_zero_filled(self):
        arr = sa.create(2, 3)
        assert isinstance(arr, FlatArray)
        assert arr.dims == (2, 3)
        assert arr.rank == 2
        assert arr.number == 6
        assert arr.dtype is DType.float64
        assert arr.ownership is Ownership.OWNED
        assert not arr.is_view
        np.testing.assert_array_equal(arr.flatten(), np.zeros(6))

    def test_create_from_sequence_and_shape(self):
        assert sa.create((2, 3)).dims == (2, 3)
        assert sa.create(sa.Shape(4, 5), dtype='int8').dtype is DType.int8

    def test_create_rank_zero(self):
        arr = sa.create()
        assert arr.rank == 0
        assert arr.number == 1
        assert arr.get() == 0.0

    def test_create_invalid_shape(self):
        with pytest.raises(ShapeError):
            sa.create(2, 0)

    def test_wrap_aliases_buffer(self):
        buf = np.zeros(6)
        arr = sa.wrap(buf, 2, 3)
        assert arr.ownership is Ownership.BORROWED
        arr.set(1, 2, 7.0)
        assert buf[5] == 7.0

    def test_wrap_larger_buffer(self):
        buf = np.arange(10.0)
        arr = sa.wrap(buf, 2, 3)
        assert arr.get(1, 2) == 5.0
        np.testing.assert_array_equal(arr.flatten(), np.arange(6.0))

    def test_wrap_buffer_too_small(self):
        with pytest.raises(NonConformableError):
            sa.wrap(np.zeros(5), 2, 3)

    def test_wrap_list_buffer(self):
        arr = sa.wrap([1, 2, 3, 4], 2, 2, dtype='int32')
        assert arr.dtype is DType.int32
        assert arr.get(1, 1) == 4

    def test_wrap_non_1d_buffer(self):
        with pytest.raises(NonConformableError):
            sa.wrap(np.zeros((2, 3)), 2, 3)

    def test_wrap_unsupported_dtype(self):
        with pytest.raises(sa.UnsupportedTypeError):
            sa.wrap(np.zeros(6, dtype=np.uint8), 2, 3)

    def test_full_and_ones(self):
        np.testing.assert_array_equal(sa.ones(2, 2).flatten(), np.ones(4))
        arr = sa.full(3, value=2, dtype='int16')
        assert arr.dtype is DType.int16
        np.testing.assert_array_equal(arr.flatten(), [2, 2, 2])


class TestFlatAccess:
    """Test element access on flat arrays."""

    def test_column_major_layout(self, arange_3x4):
        for i in range(3):
            for j in range(4):
                assert arange_3x4.get(i, j) == i + 3 * j

    def test_set_get(self):
        arr = sa.create(2, 3, 4)
        arr.set(1, 2, 3, 42.0)
        assert arr.get(1, 2, 3) == 42.0
        assert arr.data[1 + 2 * (2 + 3 * 3)] == 42.0

    def test_getitem_setitem(self):
        arr = sa.create(2, 2)
        arr[1, 0] = 3.0
        assert arr[1, 0] == 3.0
        assert arr.get(1, 0) == 3.0

    def test_wrong_arity(self):
        arr = sa.create(2, 2)
        with pytest.raises(ShapeError) as exc_info:
            arr.get(1)
        assert exc_info.value.code == SA_ERROR_RANK_MISMATCH
        with pytest.raises(ShapeError):
            arr.set(0, 0, 0, 1.0)
        with pytest.raises(ShapeError) as exc_info:
            arr.view(None)
        assert exc_info.value.code == SA_ERROR_RANK_MISMATCH

    def test_not_iterable(self):
        with pytest.raises(TypeError):
            iter(sa.create(2))

    def test_properties(self, arange_3x4):
        assert arange_3x4.backend is Backend.FLAT
        assert arange_3x4.order is Order.COLUMN_MAJOR
        assert arange_3x4.strides == (1, 3)
        assert arange_3x4.get_dimension(-1) == 4
        assert arange_3x4.type_code == 6


class TestFlatOperations:
    """Test elementwise operations and reductions."""

    def test_fill_then_flatten(self):
        arr = sa.create(2, 3)
        arr.fill(5.0)
        np.testing.assert_array_equal(arr.flatten(), [5.0] * 6)

    def test_fill_generator(self):
        arr = sa.create(2, 3, dtype='int32')
        counter = iter(range(100))
        arr.fill(lambda: next(counter))
        np.testing.assert_array_equal(arr.flatten(), np.arange(6))
        assert arr.get(1, 0) == 1

    def test_increment_decrement_scale(self, arange_3x4):
        arange_3x4.increment(1.0)
        arange_3x4.scale(2.0)
        arange_3x4.decrement(2.0)
        np.testing.assert_array_equal(arange_3x4.flatten(), 2.0 * np.arange(12))

    def test_map(self, arange_3x4):
        arange_3x4.map(lambda x: x * x)
        assert arange_3x4.get(2, 3) == 121.0

    def test_map_casts_to_element_type(self):
        arr = sa.wrap(np.arange(4, dtype=np.int32), 4)
        arr.map(lambda x: x / 2)
        np.testing.assert_array_equal(arr.flatten(), [0, 0, 1, 1])

    def test_reductions(self, arange_3x4):
        assert arange_3x4.min() == 0.0
        assert arange_3x4.max() == 11.0
        assert arange_3x4.sum() == 66.0
        assert arange_3x4.average() == pytest.approx(5.5)
        assert arange_3x4.get_min_and_max() == (0.0, 11.0)

    def test_average_of_narrow_ints_does_not_wrap(self):
        buf = np.full(8, 100, dtype=np.int8)
        flat = sa.wrap(buf[:4], 4)
        strided = sa.wrap(buf, 4, strides=(2,))
        gathered = flat.view([0, 1, 2, 3])
        assert isinstance(strided, StridedArray)
        assert isinstance(gathered, SelectedArray)
        for arr in (flat, strided, gathered):
            assert arr.average() == 100.0

    def test_reductions_ignore_buffer_tail(self):
        arr = sa.wrap(np.array([3.0, 1.0, 2.0, -100.0]), 3)
        assert arr.min() == 1.0
        assert arr.sum() == 6.0

    def test_scan(self, arange_3x4):
        count = arange_3x4.scan(lambda v: int(v > 5), lambda acc, v: acc + int(v > 5))
        assert count == 6
        assert arange_3x4.scan(sa.MaxScanner()) == 11.0

    def test_scan_rejects_non_scanner(self, arange_3x4):
        with pytest.raises(TypeError):
            arange_3x4.scan(object())


class TestFlatFlatten:
    """Test flatten, copy and conversion to numpy."""

    def test_flatten_shares_exact_buffer(self):
        buf = np.arange(6.0)
        arr = sa.wrap(buf, 2, 3)
        assert arr.flatten() is buf

    def test_flatten_force_copy(self):
        buf = np.arange(6.0)
        arr = sa.wrap(buf, 2, 3)
        out = arr.flatten(force_copy=True)
        out[0] = 99.0
        assert buf[0] == 0.0

    def test_copy_is_independent(self, arange_3x4):
        dup = arange_3x4.copy()
        assert isinstance(dup, FlatArray)
        assert dup.ownership is Ownership.OWNED
        dup.set(0, 0, -1.0)
        assert arange_3x4.get(0, 0) == 0.0

    def test_create_same_shape(self, arange_3x4):
        new = arange_3x4.create()
        assert new.dims == (3, 4)
        assert new.dtype is arange_3x4.dtype
        assert new.sum() == 0.0

    def test_to_numpy(self, arange_3x4):
        values = arange_3x4.to_numpy()
        assert values.shape == (3, 4)
        assert values[2, 1] == 5.0
        values[0, 0] = 9.0
        assert arange_3x4.get(0, 0) == 9.0


class TestFlatViews:
    """Test views of flat arrays."""

    def test_slice_last_axis(self, arange_3x4):
        col = arange_3x4.slice(2)
        assert isinstance(col, StridedArray)
        assert col.dims == (3,)
        assert [col.get(i) for i in range(3)] == [6.0, 7.0, 8.0]

    def test_slice_last_axis_zero_stays_flat(self, arange_3x4):
        col = arange_3x4.slice(0)
        assert isinstance(col, FlatArray)
        assert col.is_view
        assert [col.get(i) for i in range(3)] == [0.0, 1.0, 2.0]

    def test_slice_first_axis(self, arange_3x4):
        row = arange_3x4.slice(1, axis=0)
        assert [row.get(j) for j in range(4)] == [1.0, 4.0, 7.0, 10.0]

    def test_slice_negative(self, arange_3x4):
        assert arange_3x4.slice(-1).get(0) == 9.0
        with pytest.raises(IndexOutOfRange):
            arange_3x4.slice(4)

    def test_slice_to_rank_zero(self):
        arr = sa.wrap(np.arange(5.0), 5)
        assert arr.slice(0).rank == 0
        scalar = arr.slice(3)
        assert scalar.rank == 0
        assert scalar.get() == 3.0
        scalar.set(30.0)
        assert arr.get(3) == 30.0
        with pytest.raises(ShapeError):
            scalar.slice(0)

    def test_view_noop_returns_self(self, arange_3x4):
        assert arange_3x4.view(None, None) is arange_3x4
        assert arange_3x4.view(slice(None), slice(0, 4)) is arange_3x4

    def test_view_ranges(self, arange_3x4):
        sub = arange_3x4.view(slice(1, 3), slice(1, None, 2))
        assert isinstance(sub, StridedArray)
        assert sub.dims == (2, 2)
        np.testing.assert_array_equal(sub.to_numpy(), [[4.0, 10.0], [5.0, 11.0]])

    def test_view_index_lists(self, arange_3x4):
        sel = arange_3x4.view([2, 0], None)
        assert isinstance(sel, SelectedArray)
        assert sel.dims == (2, 4)
        assert sel.get(0, 1) == 5.0
        assert sel.get(1, 3) == 9.0

    def test_getitem_view(self, arange_3x4):
        sub = arange_3x4[1:, ::-1]
        assert sub.get(0, 0) == 10.0

    def test_as_1d(self, arange_3x4):
        line = arange_3x4.as_1d()
        assert isinstance(line, FlatArray)
        assert line.dims == (12,)
        line.set(5, -5.0)
        assert arange_3x4.get(2, 1) == -5.0
        assert line.as_1d() is line
