"""Flat arrays.

A flat array stores its elements contiguously, in column-major order, at
the start of its buffer: element ``(i1, ..., iR)`` is at
``i1 + d1*(i2 + d2*(i3 + ...))``. The buffer may be longer than the number
of elements (e.g. the leading sub-block of a larger array).

Elementwise operations run as a single loop over ``0..number`` instead of
decomposing the position into per-axis indices.
"""

import logging
from typing import Optional

import numpy as np

from ._backend import Backend, Order, Ownership
from ._base import ShapedArray
from ._dtypes import DTypeLike, normalize_dtype
from ._errors import NonConformableError, ShapeError
from ._indexing import compile_ranges, fix_axis, fix_index, is_range, normalize_selections, select
from ._scanner import as_scanner
from ._selected import SelectedArray
from ._shape import Shape, ShapeLike
from ._strided import StridedArray, column_major_strides

logger = logging.getLogger("shapedarray.flat")

__all__ = ['FlatArray']


class FlatArray(ShapedArray):
    """
    Contiguous column-major array.

    Args:
        data: One-dimensional numpy buffer with at least ``number`` elements
        shape: Dimensions of the array
        ownership: OWNED for allocated buffers, BORROWED for wrapped caller
            memory, VIEW for sub-blocks of another array

    Raises:
        NonConformableError: If the buffer is too small or not one-dimensional

    Example:
        >>> arr = FlatArray.allocate((2, 3), 'float64')
        >>> arr.fill(5.0)
        >>> arr.flatten()
        array([5., 5., 5., 5., 5., 5.])
    """

    def __init__(self, data: np.ndarray, shape: ShapeLike,
                 ownership: Ownership = Ownership.OWNED):
        if not isinstance(data, np.ndarray) or data.ndim != 1:
            raise NonConformableError("Wrapped buffer must be a one-dimensional numpy array.")
        super().__init__(shape, normalize_dtype(data.dtype))
        if len(data) < self.number:
            raise NonConformableError(
                f"Wrapped array is too small: {len(data)} < {self.number}")
        self._data = data
        self._ownership = ownership

    @classmethod
    def allocate(cls, shape: ShapeLike, dtype: DTypeLike) -> 'FlatArray':
        """Zero-filled array of exactly ``number`` elements."""
        shape = Shape.make(shape)
        data = np.zeros(shape.number, dtype=normalize_dtype(dtype).numpy_dtype)
        return cls(data, shape, Ownership.OWNED)

    # =========================================================================
    # Storage
    # =========================================================================

    @property
    def data(self) -> np.ndarray:
        return self._data

    @property
    def order(self) -> Order:
        return Order.COLUMN_MAJOR

    @property
    def backend(self) -> Backend:
        return Backend.FLAT

    @property
    def strides(self):
        """Column-major strides ``(1, d1, d1*d2, ...)``."""
        return column_major_strides(self.dims)

    def _layout(self):
        return 0, self.strides

    def check_sanity(self) -> None:
        if len(self._data) < self.number:
            raise NonConformableError("Wrapped array is too small.")

    def _elements(self) -> np.ndarray:
        """The first ``number`` elements of the buffer (a view)."""
        return self._data[:self.number]

    # =========================================================================
    # Element Access
    # =========================================================================

    def _index(self, index: tuple) -> int:
        self._check_index(index)
        j = 0
        for i, dim in zip(reversed(index), reversed(self.dims)):
            j = j * dim + i
        return j

    def get(self, *index):
        return self._data[self._index(index)]

    def set(self, *args) -> None:
        index, value = self._split_value(args)
        self._data[self._index(index)] = value

    # =========================================================================
    # Elementwise Operations (single loop over the flat range)
    # =========================================================================

    def fill(self, value) -> None:
        if callable(value):
            data = self._data
            for j in range(self.number):
                data[j] = self._cast(value())
        else:
            self._elements()[...] = self._cast(value)

    def increment(self, value) -> None:
        elements = self._elements()
        elements += self._cast(value)

    def decrement(self, value) -> None:
        elements = self._elements()
        elements -= self._cast(value)

    def scale(self, value) -> None:
        elements = self._elements()
        elements *= self._cast(value)

    def map(self, function) -> None:
        data = self._data
        for j in range(self.number):
            data[j] = self._cast(function(data[j]))

    def scan(self, scanner, update=None):
        scanner = as_scanner(scanner, update)
        data = self._data
        scanner.initialize(data[0])
        for j in range(1, self.number):
            scanner.update(data[j])
        return scanner.result

    def min(self):
        return self._elements().min()

    def max(self):
        return self._elements().max()

    def sum(self):
        return self._elements().sum(dtype=self._dtype.numpy_dtype)

    def get_min_and_max(self):
        elements = self._elements()
        return elements.min(), elements.max()

    def flatten(self, force_copy: bool = False) -> np.ndarray:
        if force_copy:
            return self._elements().copy()
        if len(self._data) == self.number:
            return self._data
        return self._elements()

    def to_numpy(self, copy: bool = False) -> np.ndarray:
        values = self._elements().reshape(self.dims, order='F')
        return values.copy(order='F') if copy else values

    def assign(self, source) -> None:
        src = self._conformable_source(source)
        if isinstance(src, ShapedArray):
            src = src.to_numpy()
        self.to_numpy()[...] = src

    # =========================================================================
    # Views
    # =========================================================================

    def slice(self, idx: int, axis: Optional[int] = None) -> ShapedArray:
        if self.rank == 0:
            raise ShapeError("Cannot slice a rank-0 array")
        last = self.rank - 1
        axis = last if axis is None else fix_axis(axis, self.rank)
        idx = fix_index(idx, self.dims[axis])
        dims = self.dims[:axis] + self.dims[axis + 1:]
        if axis == last and idx == 0:
            return FlatArray(self._data, dims, Ownership.VIEW)
        strides = self.strides
        return StridedArray(self._data, strides[axis] * idx,
                            strides[:axis] + strides[axis + 1:], dims)

    def view(self, *selections) -> ShapedArray:
        selections = normalize_selections(selections, self.rank)
        strides = self.strides
        if all(is_range(sel) for sel in selections):
            _, child = compile_ranges(selections, self.dims, 0, strides)
            if child is None:
                logger.debug("view: no-op ranges, returning the same array")
                return self
            offset, child_strides, dims = child
            return StridedArray(self._data, offset, child_strides, dims)
        tables = [
            select(0, stride, dim, sel)
            for sel, stride, dim in zip(selections, strides, self.dims)
        ]
        return SelectedArray(self._data, tables)

    def as_1d(self) -> 'FlatArray':
        if self.rank == 1:
            return self
        return FlatArray(self._data, (self.number,), Ownership.VIEW)
