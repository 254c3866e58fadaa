"""
Array Factories

Creation of arrays by allocation (zero-filled flat arrays) or by wrapping
caller-supplied buffers (flat, strided or selected layouts). Wrapped arrays
alias the caller's buffer: no element is copied.
"""

import logging
from numbers import Integral
from typing import Any, Optional, Sequence

import numpy as np

from ._backend import Ownership
from ._base import ShapedArray
from ._config import config
from ._dtypes import DTypeLike, normalize_dtype
from ._errors import NonConformableError, ShapeError
from ._flat import FlatArray
from ._selected import SelectedArray
from ._shape import Shape
from ._strided import StridedArray, column_major_strides

logger = logging.getLogger("shapedarray.array")

__all__ = [
    'create',
    'zeros',
    'ones',
    'full',
    'wrap',
    'wrap_selected',
    'from_numpy',
    'shares_buffer',
]


# =============================================================================
# Helpers
# =============================================================================

def _shape_from_args(dims: tuple) -> Shape:
    if len(dims) == 1 and not isinstance(dims[0], Integral):
        return Shape.make(dims[0])
    return Shape(*dims)


def _as_buffer(buffer: Any, dtype: Optional[DTypeLike]) -> np.ndarray:
    """One-dimensional numpy buffer for ``buffer``.

    numpy arrays are used as they are (so they are aliased); other sequences
    are converted once, with ``dtype`` if given.
    """
    if isinstance(buffer, np.ndarray):
        if dtype is not None and normalize_dtype(dtype) is not normalize_dtype(buffer.dtype):
            raise NonConformableError(
                f"Buffer of type {buffer.dtype} cannot be wrapped as {normalize_dtype(dtype).value}")
    else:
        if dtype is None:
            dtype = config.default_dtype
        buffer = np.array(buffer, dtype=normalize_dtype(dtype).numpy_dtype)
    if buffer.ndim != 1:
        raise NonConformableError(
            f"Wrapped buffer must be one-dimensional, got {buffer.ndim} dimensions")
    normalize_dtype(buffer.dtype)
    return buffer


# =============================================================================
# Factory Functions
# =============================================================================

def create(*dims, dtype: Optional[DTypeLike] = None) -> FlatArray:
    """
    Create a zero-filled flat array.

    Args:
        *dims: Dimensions as integers, a single sequence or a Shape
        dtype: Element type (default from configuration, float64)

    Returns:
        New FlatArray owning its buffer

    Example:
        >>> arr = create(2, 3)
        >>> arr = create((2, 3), dtype='int32')
    """
    if dtype is None:
        dtype = config.default_dtype
    return FlatArray.allocate(_shape_from_args(dims), dtype)


def zeros(*dims, dtype: Optional[DTypeLike] = None) -> FlatArray:
    """Alias of create()."""
    return create(*dims, dtype=dtype)


def full(*dims, value, dtype: Optional[DTypeLike] = None) -> FlatArray:
    """Create a flat array with all elements set to ``value``."""
    arr = create(*dims, dtype=dtype)
    arr.fill(value)
    return arr


def ones(*dims, dtype: Optional[DTypeLike] = None) -> FlatArray:
    """Create a flat array filled with ones."""
    return full(*dims, value=1, dtype=dtype)


def wrap(buffer: Any, *dims, offset: Optional[int] = None,
         strides: Optional[Sequence[int]] = None,
         dtype: Optional[DTypeLike] = None) -> ShapedArray:
    """
    Wrap a buffer as an array (zero-copy for numpy buffers).

    Without ``offset`` and ``strides`` the result is a FlatArray and
    element ``(i1, ..., iR)`` is ``buffer[i1 + d1*(i2 + d2*(...))]``.
    Otherwise it is a StridedArray and element ``(i1, ..., iR)`` is
    ``buffer[offset + stride1*i1 + ... + strideR*iR]`` (missing offset is 0,
    missing strides are the column-major ones).

    Args:
        buffer: One-dimensional numpy array (aliased), or a sequence
            (converted once, no aliasing)
        *dims: Dimensions as integers, a single sequence or a Shape
        offset: Buffer position of the zero multi-index
        strides: One stride per axis
        dtype: Element type for non-numpy buffers; must match numpy buffers

    Raises:
        NonConformableError: If the buffer is too small for the layout
        UnsupportedTypeError: If the buffer element type is not supported

    Example:
        >>> buf = np.arange(6, dtype=np.int32)
        >>> arr = wrap(buf, 3, offset=1, strides=(2,))
        >>> [arr.get(i) for i in range(3)]
        [1, 3, 5]
    """
    data = _as_buffer(buffer, dtype)
    shape = _shape_from_args(dims)
    if offset is None and strides is None:
        return FlatArray(data, shape, Ownership.BORROWED)
    if strides is None:
        strides = column_major_strides(shape.dims)
    if len(strides) != shape.rank:
        raise ShapeError("There must be as many strides as the rank.")
    return StridedArray(data, offset or 0, strides, shape, Ownership.BORROWED)


def wrap_selected(buffer: Any, *tables, dtype: Optional[DTypeLike] = None) -> SelectedArray:
    """
    Wrap a buffer through one indirection table per axis.

    Element ``(i1, ..., iR)`` is ``buffer[table1[i1] + ... + tableR[iR]]``.

    Raises:
        ViewBoundsError: If a reachable position lies outside the buffer
    """
    if len(tables) == 1 and isinstance(tables[0], (list, tuple)) \
            and all(isinstance(t, (list, tuple, np.ndarray, range)) for t in tables[0]):
        tables = tuple(tables[0])
    data = _as_buffer(buffer, dtype)
    return SelectedArray(data, tables, Ownership.BORROWED)


def from_numpy(arr: Any, copy: bool = False) -> FlatArray:
    """
    Array with ``result.get(i1, ..., iR) == arr[i1, ..., iR]``.

    A Fortran-contiguous numpy array is wrapped without copying unless
    ``copy`` is set; any other input is copied in column-major order.

    Raises:
        ShapeError: If ``arr`` has more than MAX_RANK dimensions
        UnsupportedTypeError: If the element type is not supported
    """
    values = np.asarray(arr)
    dtype = normalize_dtype(values.dtype)
    shape = Shape(values.shape)
    if not copy and values.flags.f_contiguous:
        return FlatArray(values.reshape(-1, order='F'), shape, Ownership.BORROWED)
    logger.debug("from_numpy: copying %d elements in column-major order", shape.number)
    data = np.array(values, dtype=dtype.numpy_dtype, order='F').reshape(-1, order='F')
    return FlatArray(data, shape, Ownership.OWNED)


def shares_buffer(a: ShapedArray, b: ShapedArray) -> bool:
    """Whether two arrays alias the same memory."""
    return np.shares_memory(a.data, b.data)
