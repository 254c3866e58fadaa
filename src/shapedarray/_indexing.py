"""Range and selection compilation.

Turns per-axis selections into addressing data for views:

- a range (a :class:`slice` or ``None``) applied to an axis of given length,
  offset contribution and stride compiles to a child offset, stride and
  element count (:class:`CompiledRange`);
- an index list applied to the same axis compiles to an indirection table of
  pre-scaled buffer positions (:func:`select`);
- an index list or range applied to an existing indirection table selects
  through it (:func:`compose`).

Negative indices count from the end: 0 is the first element, -1 the last,
-2 the penultimate and so on.
"""

from dataclasses import dataclass
from numbers import Integral
from typing import Any, Optional, Sequence, Union

import numpy as np

from ._errors import EmptyRangeError, IndexOutOfRange, ShapeError, SA_ERROR_RANK_MISMATCH

__all__ = [
    'CompiledRange',
    'compile_ranges',
    'Selection',
    'fix_index',
    'fix_axis',
    'is_range',
    'is_index_list',
    'normalize_selections',
    'select',
    'compose',
    'index_table',
]

Selection = Union[None, slice, Sequence[int], np.ndarray]

# dtype of indirection tables
TABLE_DTYPE = np.intp


def fix_index(idx: int, dim: int) -> int:
    """Apply the negative-index convention to an index along an axis of
    length ``dim``.

    Raises:
        IndexOutOfRange: If ``idx`` is outside ``[-dim, dim)``
    """
    idx = int(idx)
    if idx < 0:
        idx += dim
    if idx < 0 or idx >= dim:
        raise IndexOutOfRange(f"Index {idx} out of range for dimension {dim}")
    return idx


def fix_axis(axis: int, rank: int) -> int:
    """Apply the negative-index convention to an axis number.

    Raises:
        IndexOutOfRange: If ``axis`` is outside ``[-rank, rank)``
    """
    axis = int(axis)
    if axis < 0:
        axis += rank
    if axis < 0 or axis >= rank:
        raise IndexOutOfRange(f"Axis {axis} out of range for rank {rank}")
    return axis


def is_range(sel: Any) -> bool:
    """True if ``sel`` selects a range (``None`` or a slice)."""
    return sel is None or isinstance(sel, slice)


def is_index_list(sel: Any) -> bool:
    """True if ``sel`` is a one-dimensional sequence of integers."""
    if isinstance(sel, (str, bytes)) or is_range(sel):
        return False
    if isinstance(sel, np.ndarray):
        return sel.ndim == 1 and sel.dtype.kind in 'ui'
    if isinstance(sel, range):
        return True
    try:
        return all(isinstance(i, Integral) and not isinstance(i, bool) for i in sel)
    except TypeError:
        return False


def normalize_selections(selections: tuple, rank: int) -> tuple:
    """Check there is one selection per axis and each one is usable.

    A single tuple or list of selections is unpacked, so that
    ``view((s1, s2))`` is the same as ``view(s1, s2)``.
    """
    if len(selections) == 1 and rank != 1 and isinstance(selections[0], (tuple, list)) \
            and len(selections[0]) == rank:
        selections = tuple(selections[0])
    if len(selections) != rank:
        raise ShapeError(
            f"Expected {rank} selections (one per axis), got {len(selections)}",
            SA_ERROR_RANK_MISMATCH)
    for k, sel in enumerate(selections):
        if not (is_range(sel) or is_index_list(sel)):
            raise TypeError(
                f"Selection for axis {k} must be None, a slice or a sequence "
                f"of integers, got {type(sel).__name__}")
    return tuple(selections)


# =============================================================================
# Ranges
# =============================================================================

@dataclass(frozen=True)
class CompiledRange:
    """Range selection against a single axis.

    Args:
        rng: ``None`` for the whole axis, or a slice
        dim: Length of the axis
        offset: Offset contribution of the axis in the parent
        stride: Stride of the axis in the parent

    Attributes:
        offset: Offset contribution of the axis in the child
        stride: Stride of the axis in the child
        number: Number of selected elements (may be 0)
        does_nothing: True when the child axis is identical to the parent axis

    Example:
        >>> cr = CompiledRange(slice(None, None, -1), 4, 0, 3)
        >>> cr.offset, cr.stride, cr.number
        (9, -3, 4)
    """

    offset: int
    stride: int
    number: int
    does_nothing: bool
    start: int

    def __init__(self, rng: Optional[slice], dim: int, offset: int = 0, stride: int = 1):
        if rng is None:
            start, step, number = 0, 1, dim
        else:
            if rng.step == 0:
                raise IndexOutOfRange("Range step cannot be zero")
            start, stop, step = rng.indices(dim)
            number = len(range(start, stop, step))
        does_nothing = (start == 0 and step == 1 and number == dim)
        object.__setattr__(self, 'offset', offset + stride * start)
        object.__setattr__(self, 'stride', stride * step)
        object.__setattr__(self, 'number', number)
        object.__setattr__(self, 'does_nothing', does_nothing)
        object.__setattr__(self, 'start', start)

    @property
    def is_empty(self) -> bool:
        return self.number == 0


def compile_ranges(ranges, dims, offset, strides):
    """Compile one range per axis.

    The parent offset is folded into the first axis.

    Returns:
        ``(compiled, child)`` where ``compiled`` is the list of CompiledRange
        and ``child`` is the ``(offset, strides, dims)`` of the view, or
        ``None`` when every range is a no-op.

    Raises:
        EmptyRangeError: If any range selects no elements
    """
    compiled = [
        CompiledRange(rng, dim, offset if k == 0 else 0, stride)
        for k, (rng, dim, stride) in enumerate(zip(ranges, dims, strides))
    ]
    if all(cr.does_nothing for cr in compiled):
        return compiled, None
    for k, cr in enumerate(compiled):
        if cr.is_empty:
            raise EmptyRangeError(f"Empty range along axis {k}")
    if compiled:
        child_offset = sum(cr.offset for cr in compiled)
    else:
        child_offset = offset
    return compiled, (child_offset,
                      tuple(cr.stride for cr in compiled),
                      tuple(cr.number for cr in compiled))


# =============================================================================
# Index lists
# =============================================================================

def _fix_indices(sel, dim: int) -> np.ndarray:
    idx = np.array(sel, dtype=TABLE_DTYPE).reshape(-1)
    if idx.size == 0:
        raise EmptyRangeError("Empty index selection")
    neg = idx < 0
    if np.any(neg):
        idx[neg] += dim
    if np.any(idx < 0) or np.any(idx >= dim):
        raise IndexOutOfRange(f"Selected index out of range for dimension {dim}")
    return idx


def index_table(offset: int, stride: int, dim: int) -> np.ndarray:
    """Indirection table of a whole axis: ``offset + stride*i``."""
    return offset + stride * np.arange(dim, dtype=TABLE_DTYPE)


def select(offset: int, stride: int, dim: int, sel: Selection) -> np.ndarray:
    """Indirection table for a selection along a strided axis.

    Args:
        offset: Offset contribution of the axis
        stride: Stride of the axis
        dim: Length of the axis
        sel: ``None`` (whole axis), a slice or an index list

    Returns:
        Table whose entry ``j`` is the buffer contribution of the
        ``j``-th selected element

    Raises:
        IndexOutOfRange: If an index is outside ``[-dim, dim)``
        EmptyRangeError: If nothing is selected
    """
    if sel is None:
        return index_table(offset, stride, dim)
    if isinstance(sel, slice):
        cr = CompiledRange(sel, dim, offset, stride)
        if cr.is_empty:
            raise EmptyRangeError("Empty range")
        return index_table(cr.offset, cr.stride, cr.number)
    return offset + stride * _fix_indices(sel, dim)


def compose(table: np.ndarray, sel: Selection) -> np.ndarray:
    """Select through an existing indirection table (index of an index).

    Returns ``table`` itself when the selection is ``None`` or a range
    covering the whole table, so callers can detect no-op selections by
    identity.

    Raises:
        IndexOutOfRange: If an index is outside ``[-len(table), len(table))``
        EmptyRangeError: If nothing is selected
    """
    dim = len(table)
    if sel is None:
        return table
    if isinstance(sel, slice):
        cr = CompiledRange(sel, dim)
        if cr.does_nothing:
            return table
        if cr.is_empty:
            raise EmptyRangeError("Empty range")
        return table[cr.start::cr.stride][:cr.number].copy()
    return table[_fix_indices(sel, dim)]
