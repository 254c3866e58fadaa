"""Strided arrays.

A strided array addresses a possibly foreign buffer through an offset and
one stride per axis: element ``(i1, ..., iR)`` is stored at
``offset + stride1*i1 + ... + strideR*iR``. Strides may be negative or
zero; the layout is validated once at construction so that element access
needs no further checks.
"""

import logging
from typing import Optional, Sequence, Tuple

import numpy as np
from numpy.lib.stride_tricks import as_strided

from ._backend import Backend, Order, Ownership
from ._base import ShapedArray
from ._dtypes import normalize_dtype
from ._errors import ShapeError, ViewBoundsError
from ._indexing import (
    TABLE_DTYPE, compile_ranges, fix_axis, fix_index, is_range, normalize_selections, select,
)
from ._selected import SelectedArray, linear_indices
from ._shape import ShapeLike

logger = logging.getLogger("shapedarray.strided")

__all__ = [
    'StridedArray',
    'check_view_strides',
    'column_major_strides',
    'classify_order',
    'is_one_to_one',
]


def column_major_strides(dims: Sequence[int]) -> Tuple[int, ...]:
    """Strides of a contiguous column-major layout: ``(1, d1, d1*d2, ...)``."""
    strides = []
    stride = 1
    for dim in dims:
        strides.append(stride)
        stride *= dim
    return tuple(strides)


def classify_order(strides: Sequence[int], dims: Sequence[int]) -> Order:
    """Traversal order from the stride magnitudes.

    Every axis takes part, including axes of length 1. The order is
    COLUMN_MAJOR if the magnitudes strictly increase, ROW_MAJOR if they
    strictly decrease and UNORDERED otherwise (in particular when two axes
    share the same stride magnitude).
    """
    s = [abs(stride) for stride in strides]
    pairs = list(zip(s, s[1:]))
    if all(a < b for a, b in pairs):
        return Order.COLUMN_MAJOR
    if all(a > b for a, b in pairs):
        return Order.ROW_MAJOR
    return Order.UNORDERED


def check_view_strides(length: int, offset: int, strides: Sequence[int],
                       dims: Sequence[int]) -> Order:
    """Validate a strided layout and classify its order.

    The smallest and largest reachable buffer positions are accumulated
    axis by axis from ``(dim - 1)*stride``.

    Args:
        length: Number of elements of the buffer
        offset: Position of the zero multi-index
        strides: One stride per axis
        dims: One length per axis

    Returns:
        The traversal order of the layout

    Raises:
        ViewBoundsError: If a reachable position lies outside ``[0, length)``
    """
    imin = imax = offset
    for stride, dim in zip(strides, dims):
        step = (dim - 1) * stride
        if step >= 0:
            imax += step
        else:
            imin += step
    if imin < 0 or imax >= length:
        raise ViewBoundsError(
            f"{len(dims)}D view is not within available space: reaches "
            f"[{imin}, {imax}] in a buffer of length {length}")
    return classify_order(strides, dims)


def is_one_to_one(strides: Sequence[int], dims: Sequence[int]) -> bool:
    """Whether distinct multi-indices always address distinct positions.

    Sufficient test: sorted by stride magnitude, every axis of length > 1
    must step past the extent covered by all the smaller axes. A zero stride
    on such an axis fails it.
    """
    extent = 0
    for stride, dim in sorted((abs(s), d) for s, d in zip(strides, dims) if d > 1):
        if stride <= extent:
            return False
        extent += stride * (dim - 1)
    return True


class StridedArray(ShapedArray):
    """
    Array addressed with an offset and one stride per axis.

    Args:
        data: One-dimensional numpy buffer
        offset: Buffer position of the zero multi-index
        strides: One stride per axis
        shape: Dimensions of the array
        ownership: BORROWED for wrapped caller memory, VIEW for views

    Raises:
        ShapeError: If the number of strides differs from the rank
        ViewBoundsError: If the layout reaches outside the buffer

    Example:
        >>> buf = np.arange(6, dtype=np.int32)
        >>> arr = StridedArray(buf, 1, (2,), (3,))
        >>> [arr.get(i) for i in range(3)]
        [1, 3, 5]
    """

    def __init__(self, data: np.ndarray, offset: int, strides: Sequence[int],
                 shape: ShapeLike, ownership: Ownership = Ownership.VIEW):
        super().__init__(shape, normalize_dtype(data.dtype))
        strides = tuple(int(s) for s in strides)
        if len(strides) != self.rank:
            raise ShapeError("There must be as many strides as the rank.")
        self._data = data
        self._offset = int(offset)
        self._strides = strides
        self._ownership = ownership
        self._order = check_view_strides(len(data), self._offset, strides, self.dims)
        self._one_to_one = is_one_to_one(strides, self.dims)

    # =========================================================================
    # Storage
    # =========================================================================

    @property
    def data(self) -> np.ndarray:
        return self._data

    @property
    def offset(self) -> int:
        """Buffer position of the zero multi-index."""
        return self._offset

    @property
    def strides(self) -> Tuple[int, ...]:
        """One stride per axis."""
        return self._strides

    @property
    def order(self) -> Order:
        return self._order

    @property
    def backend(self) -> Backend:
        return Backend.STRIDED

    def _layout(self):
        return self._offset, self._strides

    def check_sanity(self) -> None:
        check_view_strides(len(self._data), self._offset, self._strides, self.dims)

    def is_flat(self) -> bool:
        """Whether the layout is that of a flat array over the same buffer."""
        return self._offset == 0 and self._strides == column_major_strides(self.dims)

    def _ndview(self) -> np.ndarray:
        """numpy view of the elements, indexed like ``get``."""
        itemsize = self._data.strides[0]
        return as_strided(self._data[self._offset:], shape=self.dims,
                          strides=tuple(s * itemsize for s in self._strides))

    def _positions(self) -> np.ndarray:
        """Buffer position of every element, as an array of shape ``dims``."""
        tables = [np.arange(dim, dtype=TABLE_DTYPE) * s
                  for dim, s in zip(self.dims, self._strides)]
        return linear_indices(tables, self._offset)

    # =========================================================================
    # Element Access
    # =========================================================================

    def _index(self, index: tuple) -> int:
        self._check_index(index)
        j = self._offset
        for i, stride in zip(index, self._strides):
            j += stride * i
        return j

    def get(self, *index):
        return self._data[self._index(index)]

    def set(self, *args) -> None:
        index, value = self._split_value(args)
        self._data[self._index(index)] = value

    # =========================================================================
    # Elementwise Operations
    # =========================================================================

    def fill(self, value) -> None:
        if callable(value):
            super().fill(value)
        else:
            self._ndview()[...] = self._cast(value)

    # A buffer element reached by several multi-indices (e.g. through a zero
    # stride) is updated once per multi-index, hence ufunc.at for such layouts.

    def increment(self, value) -> None:
        if not self._one_to_one:
            np.add.at(self._data, self._positions(), self._cast(value))
            return
        view = self._ndview()
        view += self._cast(value)

    def decrement(self, value) -> None:
        if not self._one_to_one:
            np.subtract.at(self._data, self._positions(), self._cast(value))
            return
        view = self._ndview()
        view -= self._cast(value)

    def scale(self, value) -> None:
        if not self._one_to_one:
            np.multiply.at(self._data, self._positions(), self._cast(value))
            return
        view = self._ndview()
        view *= self._cast(value)

    def min(self):
        return self._ndview().min()

    def max(self):
        return self._ndview().max()

    def sum(self):
        return self._ndview().sum(dtype=self._dtype.numpy_dtype)

    def get_min_and_max(self):
        view = self._ndview()
        return view.min(), view.max()

    def flatten(self, force_copy: bool = False) -> np.ndarray:
        if not force_copy and self.is_flat():
            if len(self._data) == self.number:
                return self._data
            return self._data[:self.number]
        logger.debug("flatten: copying %d elements of a strided array", self.number)
        return self._ndview().flatten(order='F')

    def to_numpy(self, copy: bool = False) -> np.ndarray:
        view = self._ndview()
        return view.copy() if copy else view

    def assign(self, source) -> None:
        src = self._conformable_source(source)
        if isinstance(src, ShapedArray):
            src = src.to_numpy()
        self._ndview()[...] = src

    # =========================================================================
    # Views
    # =========================================================================

    def slice(self, idx: int, axis: Optional[int] = None) -> 'StridedArray':
        if self.rank == 0:
            raise ShapeError("Cannot slice a rank-0 array")
        axis = self.rank - 1 if axis is None else fix_axis(axis, self.rank)
        idx = fix_index(idx, self.dims[axis])
        strides = self._strides[:axis] + self._strides[axis + 1:]
        dims = self.dims[:axis] + self.dims[axis + 1:]
        return StridedArray(self._data, self._offset + self._strides[axis] * idx,
                            strides, dims)

    def view(self, *selections) -> ShapedArray:
        selections = normalize_selections(selections, self.rank)
        if all(is_range(sel) for sel in selections):
            _, child = compile_ranges(selections, self.dims, self._offset, self._strides)
            if child is None:
                logger.debug("view: no-op ranges, returning the same array")
                return self
            offset, strides, dims = child
            return StridedArray(self._data, offset, strides, dims)
        tables = [
            select(self._offset if k == 0 else 0, stride, dim, sel)
            for k, (sel, stride, dim) in enumerate(zip(selections, self._strides, self.dims))
        ]
        logger.debug("view: index selection, returning a selected array")
        return SelectedArray(self._data, tables)

    def _single_stride(self) -> Optional[int]:
        """Stride addressing all elements in column-major order, if any."""
        stride = None
        expected = None
        for dim, s in zip(self.dims, self._strides):
            if dim == 1:
                continue
            if stride is None:
                stride = s
            elif s != expected:
                return None
            expected = s * dim
        return 1 if stride is None else stride

    def as_1d(self) -> ShapedArray:
        if self.rank == 1:
            return self
        stride = self._single_stride()
        if stride is not None:
            return StridedArray(self._data, self._offset, (stride,), (self.number,))
        logger.debug("as_1d: strides are not uniform, returning a selected array")
        table = self._positions().ravel(order='F')
        return SelectedArray(self._data, [table])
