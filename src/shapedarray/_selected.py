"""Selected arrays.

A selected array (gather view) addresses its buffer through one
indirection table per axis: element ``(i1, ..., iR)`` is stored at
``table1[i1] + ... + tableR[iR]``. Table entries are already scaled by the
stride of their axis and the offset is folded into the first table.

Tables are shared between views and must never be modified in place: any
derived table is a fresh array.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

from ._backend import Backend, Order, Ownership
from ._base import ShapedArray
from ._dtypes import normalize_dtype
from ._errors import ShapeError, ViewBoundsError
from ._indexing import TABLE_DTYPE, compose, fix_axis, fix_index, normalize_selections

logger = logging.getLogger("shapedarray.selected")

__all__ = ['SelectedArray', 'linear_indices']


def linear_indices(tables: Sequence[np.ndarray], offset: int = 0) -> np.ndarray:
    """Buffer position of every element, as an array of shape
    ``(len(t) for t in tables)``."""
    if not tables:
        return np.array(offset, dtype=TABLE_DTYPE)
    return offset + sum(np.ix_(*tables))


class SelectedArray(ShapedArray):
    """
    Array addressed through one indirection table per axis.

    Args:
        data: One-dimensional numpy buffer
        tables: One integer table per axis; the length of a table is the
            dimension of its axis

    Raises:
        ShapeError: If a table is empty or not one-dimensional
        ViewBoundsError: If a reachable position lies outside the buffer

    Example:
        >>> buf = np.arange(12.0)
        >>> arr = SelectedArray(buf, [np.array([0, 2]), np.array([0, 9])])
        >>> arr.get(1, 1)
        11.0
    """

    def __init__(self, data: np.ndarray, tables: Sequence[np.ndarray],
                 ownership: Ownership = Ownership.VIEW):
        tables = [np.asarray(t, dtype=TABLE_DTYPE) for t in tables]
        for k, table in enumerate(tables):
            if table.ndim != 1 or len(table) == 0:
                raise ShapeError(f"Indirection table {k} must be a non-empty 1D array")
        super().__init__(tuple(len(t) for t in tables), normalize_dtype(data.dtype))
        self._data = data
        self._tables = tables
        self._ownership = ownership
        self.check_sanity()

    # =========================================================================
    # Storage
    # =========================================================================

    @property
    def data(self) -> np.ndarray:
        return self._data

    @property
    def tables(self) -> List[np.ndarray]:
        """Indirection tables (one per axis, read-only by convention)."""
        return list(self._tables)

    @property
    def order(self) -> Order:
        return Order.UNORDERED

    @property
    def backend(self) -> Backend:
        return Backend.SELECTED

    def check_sanity(self) -> None:
        """Check that the extreme table entries stay within the buffer."""
        offset_min = offset_max = 0
        for table in self._tables:
            offset_min += int(table.min())
            offset_max += int(table.max())
        if offset_min < 0 or offset_max >= len(self._data):
            raise ViewBoundsError(
                f"{self.rank}D selection is not within available space: reaches "
                f"[{offset_min}, {offset_max}] in a buffer of length {len(self._data)}")

    def _positions(self) -> np.ndarray:
        return linear_indices(self._tables)

    # =========================================================================
    # Element Access
    # =========================================================================

    def _index(self, index: tuple) -> int:
        self._check_index(index)
        j = 0
        for i, table in zip(index, self._tables):
            j += table[i]
        return j

    def get(self, *index):
        return self._data[self._index(index)]

    def set(self, *args) -> None:
        index, value = self._split_value(args)
        self._data[self._index(index)] = value

    # =========================================================================
    # Elementwise Operations
    # =========================================================================

    # A buffer element selected several times is updated once per selection,
    # hence the unbuffered ufunc.at below.

    def fill(self, value) -> None:
        if callable(value):
            super().fill(value)
        else:
            self._data[self._positions()] = self._cast(value)

    def increment(self, value) -> None:
        np.add.at(self._data, self._positions(), self._cast(value))

    def decrement(self, value) -> None:
        np.subtract.at(self._data, self._positions(), self._cast(value))

    def scale(self, value) -> None:
        np.multiply.at(self._data, self._positions(), self._cast(value))

    def min(self):
        return self._data[self._positions()].min()

    def max(self):
        return self._data[self._positions()].max()

    def sum(self):
        return self._data[self._positions()].sum(dtype=self._dtype.numpy_dtype)

    def get_min_and_max(self):
        values = self._data[self._positions()]
        return values.min(), values.max()

    def flatten(self, force_copy: bool = False) -> np.ndarray:
        return self._data[self._positions().ravel(order='F')]

    def to_numpy(self, copy: bool = False) -> np.ndarray:
        return self._data[self._positions()]

    def assign(self, source) -> None:
        src = self._conformable_source(source)
        if isinstance(src, ShapedArray):
            src = src.to_numpy(copy=True)
        self._data[self._positions()] = src

    # =========================================================================
    # Views
    # =========================================================================

    def slice(self, idx: int, axis: Optional[int] = None) -> ShapedArray:
        if self.rank == 0:
            raise ShapeError("Cannot slice a rank-0 array")
        axis = self.rank - 1 if axis is None else fix_axis(axis, self.rank)
        offset = int(self._tables[axis][fix_index(idx, self.dims[axis])])
        tables = self._tables[:axis] + self._tables[axis + 1:]
        if not tables:
            from ._strided import StridedArray
            return StridedArray(self._data, offset, (), ())
        if offset != 0:
            # Fold the offset into a new first table.
            tables[0] = tables[0] + offset
        return SelectedArray(self._data, tables)

    def view(self, *selections) -> 'SelectedArray':
        selections = normalize_selections(selections, self.rank)
        tables = [compose(table, sel) for table, sel in zip(self._tables, selections)]
        if all(new is old for new, old in zip(tables, self._tables)):
            logger.debug("view: no-op selection, returning the same array")
            return self
        return SelectedArray(self._data, tables)

    def as_1d(self) -> 'SelectedArray':
        if self.rank == 1:
            return self
        table = self._positions().ravel(order='F')
        return SelectedArray(self._data, [table])
