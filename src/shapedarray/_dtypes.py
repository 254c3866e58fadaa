"""
Data Type Definitions

Provides type-safe dtype constants, validation and the numpy mapping used
by every array backend.

Six primitive element types are supported:

    DType      numpy       code
    ---------------------------
    int8       int8        1     (byte)
    int16      int16       2     (short)
    int32      int32       3     (int)
    int64      int64       4     (long)
    float32    float32     5     (float)
    float64    float64     6     (double)
"""

from typing import Any, Union
from enum import Enum

import numpy as np

from ._errors import UnsupportedTypeError

__all__ = [
    'DType',
    'int8', 'int16', 'int32', 'int64', 'float32', 'float64',
    'normalize_dtype',
    'validate_dtype',
    'is_float_dtype',
    'is_int_dtype',
    'dtype_itemsize',
    'DTypeLike',
]


class DType(Enum):
    """
    Element Type Enumeration.

    Provides type-safe constants for array creation and conversion.

    Example:
        >>> from shapedarray import DType, create
        >>> arr = create(3, 4, dtype=DType.float32)
        >>>
        >>> # Or use module-level constants
        >>> import shapedarray as sa
        >>> arr = sa.create(3, 4, dtype=sa.int16)
    """

    int8 = 'int8'
    int16 = 'int16'
    int32 = 'int32'
    int64 = 'int64'
    float32 = 'float32'
    float64 = 'float64'

    @property
    def numpy_dtype(self) -> np.dtype:
        """Equivalent numpy dtype."""
        return np.dtype(self.value)

    @property
    def type_code(self) -> int:
        """Integer code of the type (1 for int8 up to 6 for float64)."""
        return _TYPE_CODES[self]

    @property
    def itemsize(self) -> int:
        """Size of one element in bytes."""
        return self.numpy_dtype.itemsize

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"DType.{self.name}"


_TYPE_CODES = {
    DType.int8: 1,
    DType.int16: 2,
    DType.int32: 3,
    DType.int64: 4,
    DType.float32: 5,
    DType.float64: 6,
}


# =============================================================================
# Module-Level Constants (For Clean Syntax)
# =============================================================================

int8 = DType.int8
int16 = DType.int16
int32 = DType.int32
int64 = DType.int64
float32 = DType.float32
float64 = DType.float64

DTypeLike = Union[str, DType, np.dtype, type]


# =============================================================================
# Type Utilities
# =============================================================================

def normalize_dtype(dtype: Any) -> DType:
    """
    Normalize a dtype-like value to a DType member.

    Args:
        dtype: DType, its string value, a numpy dtype or a numpy scalar type

    Returns:
        The matching DType

    Raises:
        UnsupportedTypeError: If dtype is not one of the six element types

    Example:
        >>> normalize_dtype('float32')
        DType.float32
        >>> normalize_dtype(np.int16)
        DType.int16
    """
    if isinstance(dtype, DType):
        return dtype
    if isinstance(dtype, str):
        try:
            return DType(dtype)
        except ValueError:
            pass
    try:
        name = np.dtype(dtype).name
    except TypeError:
        raise UnsupportedTypeError(
            f"dtype must be a DType, str or numpy dtype, got {type(dtype)}")
    try:
        return DType(name)
    except ValueError:
        raise UnsupportedTypeError(
            f"Unsupported dtype: {name}. "
            f"Supported: {[e.value for e in DType]}")


def validate_dtype(dtype: str) -> None:
    """
    Validate dtype string.

    Args:
        dtype: Data type string

    Raises:
        UnsupportedTypeError: If dtype is not supported
    """
    valid = {e.value for e in DType}
    if dtype not in valid:
        raise UnsupportedTypeError(f"Invalid dtype: {dtype}. Valid: {valid}")


def is_float_dtype(dtype: DTypeLike) -> bool:
    """Check if dtype is floating point."""
    return normalize_dtype(dtype) in (DType.float32, DType.float64)


def is_int_dtype(dtype: DTypeLike) -> bool:
    """Check if dtype is integer."""
    return normalize_dtype(dtype) in (DType.int8, DType.int16, DType.int32, DType.int64)


def dtype_itemsize(dtype: DTypeLike) -> int:
    """
    Get size in bytes for dtype.

    Args:
        dtype: Data type

    Returns:
        Size in bytes
    """
    return normalize_dtype(dtype).itemsize
