"""Backend Types and Storage Introspection.

This module defines the vocabulary shared by all array implementations:

- Backend types (Flat, Strided, Selected)
- Ownership model (Owned, Borrowed, View)
- Traversal order inferred from the strides
- A storage summary for debugging and introspection

Backend Types:
    - FLAT: One contiguous buffer, column-major, zero offset
    - STRIDED: Offset plus one stride per axis over a possibly foreign buffer
    - SELECTED: One indirection table per axis (gather view)

Example:
    >>> arr = create(3, 4)           # FLAT, OWNED
    >>> sub = arr.view(slice(1, 3))  # STRIDED, VIEW
    >>> sel = arr.view([0, 2], None) # SELECTED, VIEW
"""

from enum import Enum
from typing import Optional, Tuple
from dataclasses import dataclass

__all__ = [
    'Backend',
    'Ownership',
    'Order',
    'StorageInfo',
]


# =============================================================================
# Enumerations
# =============================================================================

class Backend(Enum):
    """Array backend type.

    Determines how a multi-index is turned into a position of the buffer.

    Attributes:
        FLAT: Contiguous column-major storage, ``i1 + d1*(i2 + d2*(...))``.
              Supports single-loop elementwise operations.

        STRIDED: ``offset + sum(stride_k * i_k)``. Produced by slicing and
                 range views, or by wrapping caller memory with strides.

        SELECTED: ``sum(table_k[i_k])``. Produced by index-list views.
                  Always unordered.
    """
    FLAT = 'flat'
    STRIDED = 'strided'
    SELECTED = 'selected'


class Ownership(Enum):
    """Data ownership model.

    Attributes:
        OWNED: Buffer allocated by the library (create, copy, conversions).

        BORROWED: Buffer supplied by the caller (wrap, from_numpy).
                  Writes through the array are visible to the caller.

        VIEW: Array derived from another array (slice, view, as_1d).
              Shares the buffer of its parent; writes through any alias
              are visible through all of them.
    """
    OWNED = 'owned'
    BORROWED = 'borrowed'
    VIEW = 'view'


class Order(Enum):
    """Traversal order classification.

    Computed once from the stride magnitudes and immutable thereafter.
    Elementwise loops put the first axis outermost for ROW_MAJOR arrays and
    the last axis outermost otherwise.
    """
    COLUMN_MAJOR = 'column-major'
    ROW_MAJOR = 'row-major'
    UNORDERED = 'unordered'


# =============================================================================
# Storage Information
# =============================================================================

@dataclass
class StorageInfo:
    """Storage metadata for an array.

    Attributes:
        backend: Storage backend type.
        ownership: Data ownership model.
        dtype: Element type string.
        shape: Array dimensions.
        order: Traversal order.
        buffer_length: Number of elements of the backing buffer.
        offset: Buffer position of the zero multi-index (None for SELECTED).
        strides: Per-axis strides (None for SELECTED).

    Note:
        This is primarily for introspection and debugging.
    """
    backend: Backend
    ownership: Ownership
    dtype: str
    shape: Tuple[int, ...]
    order: Order
    buffer_length: int
    offset: Optional[int] = None
    strides: Optional[Tuple[int, ...]] = None

    @property
    def is_contiguous(self) -> bool:
        """Whether elements occupy the start of the buffer in column-major order."""
        if self.offset != 0 or self.strides is None:
            return False
        expected = 1
        for dim, stride in zip(self.shape, self.strides):
            if dim > 1 and stride != expected:
                return False
            expected *= dim
        return True

    def __repr__(self) -> str:
        return (
            f"StorageInfo(backend={self.backend.value}, "
            f"ownership={self.ownership.value}, "
            f"dtype={self.dtype}, shape={self.shape}, order={self.order.value})"
        )
