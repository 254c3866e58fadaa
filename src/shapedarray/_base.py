"""
Shaped Array Base Class

This module defines the abstract base class of every array of the package.
It establishes the interface that all backends follow and provides default
(non-optimized, except for the loop ordering) implementations of every
operation that can be written solely with ``get`` and ``set``.

Type Hierarchy:

    ShapedArray (ABC)
    ├── FlatArray      - contiguous column-major buffer
    ├── StridedArray   - offset + one stride per axis
    └── SelectedArray  - one indirection table per axis

Design Philosophy:

1. Runtime rank: a single class per backend serves every rank from 0 (the
   scalar view obtained by slicing a rank-1 array) to MAX_RANK.

2. Aliasing: views never copy. An array created by ``slice``, ``view`` or
   ``as_1d`` shares the buffer of its parent and writes through any alias
   are visible through all of them. ``copy()`` is the only way to isolate.

3. Loop ordering: default elementwise loops put the first axis outermost
   for ROW_MAJOR arrays and the last axis outermost otherwise.

Example:

    arr = create(3, 4)                # FlatArray
    sub = arr.view(slice(1, 3), None) # StridedArray sharing arr's buffer
    sub.fill(7.0)
    arr.get(1, 0)                     # -> 7.0
"""

from abc import ABC, abstractmethod
from itertools import product
from typing import Any, Iterator, Optional, Tuple, Union, TYPE_CHECKING

import numpy as np

from ._backend import Backend, Order, Ownership, StorageInfo
from ._config import config
from ._dtypes import DType, DTypeLike, normalize_dtype
from ._errors import (
    IndexOutOfRange, NonConformableError, ShapeError, UnsupportedTypeError,
    SA_ERROR_RANK_MISMATCH,
)
from ._scanner import (
    MinScanner, MaxScanner, MinMaxScanner, SumScanner, as_scanner,
)
from ._shape import Shape, ShapeLike

if TYPE_CHECKING:
    from ._flat import FlatArray

__all__ = [
    'ShapedArray',
    'column_major_indices',
]


def column_major_indices(dims: Tuple[int, ...]) -> Iterator[Tuple[int, ...]]:
    """Multi-indices of an array in column-major order (first index fastest)."""
    for idx in product(*(range(dim) for dim in reversed(dims))):
        yield idx[::-1]


def row_major_indices(dims: Tuple[int, ...]) -> Iterator[Tuple[int, ...]]:
    """Multi-indices of an array in row-major order (last index fastest)."""
    return product(*(range(dim) for dim in dims))


class ShapedArray(ABC):
    """
    Abstract base class for all arrays.

    Required (subclasses must implement):
        get(*index), set(*index, value): element access
        data: backing buffer (one-dimensional numpy array)
        order: traversal order
        backend: backend type
        slice(idx, axis), view(*selections), as_1d(): zero-copy views

    Provided (subclasses may override with faster versions):
        fill, increment, decrement, scale, map, scan, flatten,
        min, max, sum, average, get_min_and_max,
        astype and to_byte ... to_double, copy, assign, create, to_numpy
    """

    _ownership: Ownership = Ownership.OWNED

    def __init__(self, shape: ShapeLike, dtype: DTypeLike):
        self._shape = Shape.make(shape)
        self._dtype = normalize_dtype(dtype)

    # =========================================================================
    # Shape
    # =========================================================================

    @property
    def shape(self) -> Shape:
        """Shape of the array."""
        return self._shape

    @property
    def dims(self) -> Tuple[int, ...]:
        """Dimensions as a tuple."""
        return self._shape.dims

    @property
    def rank(self) -> int:
        """Number of axes."""
        return self._shape.rank

    @property
    def number(self) -> int:
        """Number of elements."""
        return self._shape.number

    def get_dimension(self, k: int) -> int:
        """Length of the ``k``-th axis (negative ``k`` counts from the end)."""
        return self._shape.dimension(k)

    # =========================================================================
    # Element Type
    # =========================================================================

    @property
    def dtype(self) -> DType:
        """Element type."""
        return self._dtype

    @property
    def type_code(self) -> int:
        """Integer code of the element type."""
        return self._dtype.type_code

    def _cast(self, value):
        """Convert a value to the element type."""
        return self._dtype.numpy_dtype.type(value)

    # =========================================================================
    # Storage
    # =========================================================================

    @property
    @abstractmethod
    def data(self) -> np.ndarray:
        """Backing buffer (shared with every alias of this array)."""
        ...

    @property
    @abstractmethod
    def order(self) -> Order:
        """Traversal order."""
        ...

    @property
    @abstractmethod
    def backend(self) -> Backend:
        """Backend type."""
        ...

    @property
    def ownership(self) -> Ownership:
        """Ownership of the backing buffer."""
        return self._ownership

    @property
    def is_view(self) -> bool:
        """Whether this array was derived from another array."""
        return self._ownership is Ownership.VIEW

    def _layout(self) -> Tuple[Optional[int], Optional[Tuple[int, ...]]]:
        """Offset and strides of the array, ``(None, None)`` if not strided."""
        return None, None

    def storage_info(self) -> StorageInfo:
        """Summary of how the elements are stored."""
        offset, strides = self._layout()
        return StorageInfo(
            backend=self.backend,
            ownership=self.ownership,
            dtype=self._dtype.value,
            shape=self.dims,
            order=self.order,
            buffer_length=len(self.data),
            offset=offset,
            strides=strides,
        )

    def check_sanity(self) -> None:
        """Check that every reachable element lies within the buffer."""

    # =========================================================================
    # Element Access
    # =========================================================================

    @abstractmethod
    def get(self, *index):
        """Value stored at ``index`` (one integer per axis)."""
        ...

    @abstractmethod
    def set(self, *args) -> None:
        """Store a value: ``set(i1, ..., iR, value)``."""
        ...

    def _check_index(self, index: tuple) -> None:
        """Check the arity of ``index`` and, if configured, its bounds."""
        if len(index) != self._shape.rank:
            raise ShapeError(
                f"Expected {self._shape.rank} indices, got {len(index)}",
                SA_ERROR_RANK_MISMATCH)
        if config.check_bounds:
            for k, (i, dim) in enumerate(zip(index, self._shape.dims)):
                if i < 0 or i >= dim:
                    raise IndexOutOfRange(
                        f"Index {i} out of range for axis {k} of length {dim}")

    @staticmethod
    def _split_value(args: tuple) -> Tuple[tuple, Any]:
        if not args:
            raise TypeError("set() requires at least a value")
        return args[:-1], args[-1]

    def __getitem__(self, key):
        if not isinstance(key, tuple):
            key = (key,)
        if all(isinstance(i, (int, np.integer)) for i in key):
            return self.get(*key)
        return self.view(*key)

    def __setitem__(self, key, value) -> None:
        if not isinstance(key, tuple):
            key = (key,)
        self.set(*key, value)

    def __len__(self) -> int:
        return self._shape.number

    # Not iterable: use flatten() or to_numpy()
    __iter__ = None

    # =========================================================================
    # Traversal
    # =========================================================================

    def _indices(self) -> Iterator[Tuple[int, ...]]:
        """Multi-indices in the preferred traversal order of the array."""
        if self.order is Order.ROW_MAJOR:
            return row_major_indices(self.dims)
        return column_major_indices(self.dims)

    def _values(self) -> Iterator[Any]:
        for idx in self._indices():
            yield self.get(*idx)

    # =========================================================================
    # Elementwise Operations
    # =========================================================================

    def fill(self, value) -> None:
        """Set all elements to ``value``, or to successive values of
        ``value()`` if it is callable."""
        if callable(value):
            for idx in self._indices():
                self.set(*idx, self._cast(value()))
            return
        value = self._cast(value)
        for idx in self._indices():
            self.set(*idx, value)

    def increment(self, value) -> None:
        """Add ``value`` to all elements."""
        value = self._cast(value)
        for idx in self._indices():
            self.set(*idx, self.get(*idx) + value)

    def decrement(self, value) -> None:
        """Subtract ``value`` from all elements."""
        value = self._cast(value)
        for idx in self._indices():
            self.set(*idx, self.get(*idx) - value)

    def scale(self, value) -> None:
        """Multiply all elements by ``value``."""
        value = self._cast(value)
        for idx in self._indices():
            self.set(*idx, self.get(*idx) * value)

    def map(self, function) -> None:
        """Replace every element ``x`` by ``function(x)``."""
        for idx in self._indices():
            self.set(*idx, self._cast(function(self.get(*idx))))

    def scan(self, scanner, update=None):
        """Fold all elements.

        The scanner is seeded with the element at the all-zero index and
        updated with the others.

        Args:
            scanner: A Scanner, or an ``initialize(value) -> acc`` callable
            update: With a callable ``scanner``, the ``update(acc, value) -> acc``
                callable

        Returns:
            The result of the scanner
        """
        scanner = as_scanner(scanner, update)
        values = self._values()
        scanner.initialize(next(values))
        for value in values:
            scanner.update(value)
        return scanner.result

    # =========================================================================
    # Reductions
    # =========================================================================

    def min(self):
        """Smallest element."""
        return self.scan(MinScanner())

    def max(self):
        """Largest element."""
        return self.scan(MaxScanner())

    def sum(self):
        """Sum of the elements, accumulated in the element type."""
        return self.scan(SumScanner())

    def average(self) -> float:
        """Mean of the elements.

        Unlike ``sum``, the total is accumulated in int64 (integer types) or
        float64, so it does not wrap around for narrow integer types.
        """
        wide = np.int64 if self._dtype.numpy_dtype.kind == 'i' else np.float64
        return float(self.flatten().sum(dtype=wide)) / self.number

    def get_min_and_max(self) -> Tuple[Any, Any]:
        """Smallest and largest elements as a ``(min, max)`` tuple."""
        return self.scan(MinMaxScanner())

    # =========================================================================
    # Flattening and Copies
    # =========================================================================

    def flatten(self, force_copy: bool = False) -> np.ndarray:
        """Elements in column-major order.

        This default implementation always copies, whatever ``force_copy``.
        """
        out = np.empty(self.number, dtype=self._dtype.numpy_dtype)
        for j, idx in enumerate(column_major_indices(self.dims)):
            out[j] = self.get(*idx)
        return out

    def copy(self) -> 'FlatArray':
        """New flat array with the same values."""
        from ._flat import FlatArray
        return FlatArray(self.flatten(force_copy=True), self._shape)

    def create(self) -> 'FlatArray':
        """New zero-filled flat array with the same shape and element type."""
        from ._flat import FlatArray
        return FlatArray.allocate(self._shape, self._dtype)

    def to_numpy(self, copy: bool = False) -> np.ndarray:
        """numpy array of shape ``dims`` with ``result[i1, ..., iR] == get(i1, ..., iR)``.

        The default implementation always copies.
        """
        return self.flatten(force_copy=True).reshape(self.dims, order='F')

    # =========================================================================
    # Type Conversion
    # =========================================================================

    def astype(self, dtype: DTypeLike) -> 'ShapedArray':
        """Convert to another element type.

        The operation is lazy: ``self`` is returned if it is already of the
        requested type. Otherwise a new flat array is returned; float to
        integer conversion truncates toward zero.
        """
        dtype = normalize_dtype(dtype)
        if dtype is self._dtype:
            return self
        from ._flat import FlatArray
        values = self.flatten().astype(dtype.numpy_dtype)
        return FlatArray(values, self._shape)

    def to_byte(self) -> 'ShapedArray':
        """Convert to int8 (lazy)."""
        return self.astype(DType.int8)

    def to_short(self) -> 'ShapedArray':
        """Convert to int16 (lazy)."""
        return self.astype(DType.int16)

    def to_int(self) -> 'ShapedArray':
        """Convert to int32 (lazy)."""
        return self.astype(DType.int32)

    def to_long(self) -> 'ShapedArray':
        """Convert to int64 (lazy)."""
        return self.astype(DType.int64)

    def to_float(self) -> 'ShapedArray':
        """Convert to float32 (lazy)."""
        return self.astype(DType.float32)

    def to_double(self) -> 'ShapedArray':
        """Convert to float64 (lazy)."""
        return self.astype(DType.float64)

    # =========================================================================
    # Assignment
    # =========================================================================

    def _conformable_source(self, source) -> Union['ShapedArray', np.ndarray]:
        """Check ``source`` has the same shape and convert it to the element type.

        Returns either a ShapedArray of the element type or a numpy array of
        shape ``dims`` and the element type.
        """
        if isinstance(source, ShapedArray):
            if source.shape != self._shape:
                raise NonConformableError(
                    "Source and destination must have the same shape.")
            return source.astype(self._dtype)
        values = np.asarray(source)
        if values.dtype.kind not in 'biuf':
            raise UnsupportedTypeError(
                f"Cannot assign values of type {values.dtype}")
        if values.shape != self.dims:
            raise NonConformableError(
                f"Source of shape {values.shape} does not match {self.dims}")
        return values.astype(self._dtype.numpy_dtype, copy=False)

    def assign(self, source) -> None:
        """Copy the values of ``source`` into this array.

        Args:
            source: ShapedArray of the same shape, or numpy array (or nested
                sequence) whose numpy shape equals ``dims``

        Raises:
            NonConformableError: If shapes differ
            UnsupportedTypeError: If the source element type is not numeric
        """
        src = self._conformable_source(source)
        if isinstance(src, ShapedArray):
            # Materialize first: source and destination may alias.
            src = src.to_numpy(copy=True)
        for idx in self._indices():
            self.set(*idx, src[idx])

    # =========================================================================
    # Views
    # =========================================================================

    @abstractmethod
    def slice(self, idx: int, axis: Optional[int] = None) -> 'ShapedArray':
        """Rank R-1 view at index ``idx`` along ``axis`` (default: last axis)."""
        ...

    @abstractmethod
    def view(self, *selections) -> 'ShapedArray':
        """View selecting, along each axis, ``None`` (everything), a slice
        or a list of indices."""
        ...

    @abstractmethod
    def as_1d(self) -> 'ShapedArray':
        """Rank-1 view of the elements in column-major order."""
        ...

    # =========================================================================
    # Representation
    # =========================================================================

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(backend={self.backend.value}, dtype={self._dtype.value}, "
            f"dims={self.dims}, order={self.order.value})"
        )
