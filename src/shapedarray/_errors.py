"""
Error handling for shapedarray.

Every failure of the array engine is local and synchronous: it is raised
immediately as one of the typed exceptions below and nothing is retried.
Each exception carries an integer error code, and also derives from the
closest builtin exception so that generic handlers keep working.
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# Error Codes
# =============================================================================

# Success
SA_OK = 0

# General errors (1-9)
SA_ERROR_UNKNOWN = 1

# Shape errors (10-19)
SA_ERROR_SHAPE = 10
SA_ERROR_RANK_MISMATCH = 11
SA_ERROR_OVERFLOW = 12

# Index errors (20-29)
SA_ERROR_INDEX_OUT_OF_RANGE = 20
SA_ERROR_VIEW_BOUNDS = 21
SA_ERROR_EMPTY_RANGE = 22

# Conformance errors (30-39)
SA_ERROR_NON_CONFORMABLE = 30

# Type errors (40-49)
SA_ERROR_UNSUPPORTED_TYPE = 40


# Error code to message mapping
_ERROR_MESSAGES = {
    SA_OK: "Success",
    SA_ERROR_UNKNOWN: "Unknown error",
    SA_ERROR_SHAPE: "Invalid shape",
    SA_ERROR_RANK_MISMATCH: "Rank mismatch",
    SA_ERROR_OVERFLOW: "Too many elements",
    SA_ERROR_INDEX_OUT_OF_RANGE: "Index out of range",
    SA_ERROR_VIEW_BOUNDS: "View is not within available space",
    SA_ERROR_EMPTY_RANGE: "Empty range",
    SA_ERROR_NON_CONFORMABLE: "Non-conformable arrays",
    SA_ERROR_UNSUPPORTED_TYPE: "Unsupported element type",
}


# =============================================================================
# Exception Classes
# =============================================================================

class ShapedArrayError(Exception):
    """
    Base exception for all shapedarray errors.

    Attributes:
        code: Integer error code (one of the SA_ERROR_* constants)
        message: Human readable message
    """

    default_code = SA_ERROR_UNKNOWN

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        if code is None:
            code = self.default_code
        self.code = code
        if message is None:
            message = _ERROR_MESSAGES.get(code, f"Unknown error (code={code})")
        self.message = message
        super().__init__(message)

    @classmethod
    def from_code(cls, code: int, context: str = "") -> "ShapedArrayError":
        """Create exception from error code with optional context."""
        base_msg = _ERROR_MESSAGES.get(code, "Unknown error")
        msg = f"{context}: {base_msg}" if context else base_msg
        return cls(msg, code)


class ShapeError(ShapedArrayError, ValueError):
    """Non-positive dimension, rank mismatch or element-count overflow."""
    default_code = SA_ERROR_SHAPE


class IndexOutOfRange(ShapedArrayError, IndexError):
    """Index, axis or view layout outside the valid range."""
    default_code = SA_ERROR_INDEX_OUT_OF_RANGE


class NonConformableError(ShapedArrayError, ValueError):
    """Buffer too small for a layout, or arrays of differing shapes."""
    default_code = SA_ERROR_NON_CONFORMABLE


class EmptyRangeError(ShapedArrayError, IndexError):
    """A range or selection yields no elements where a view is required."""
    default_code = SA_ERROR_EMPTY_RANGE


class UnsupportedTypeError(ShapedArrayError, TypeError):
    """Operation invoked with an element type it does not support."""
    default_code = SA_ERROR_UNSUPPORTED_TYPE


class ViewBoundsError(IndexOutOfRange, NonConformableError):
    """Strided or selected layout reaching outside its backing buffer."""
    default_code = SA_ERROR_VIEW_BOUNDS


__all__ = [
    'ShapedArrayError',
    'ShapeError',
    'IndexOutOfRange',
    'NonConformableError',
    'EmptyRangeError',
    'UnsupportedTypeError',
    'ViewBoundsError',
    'SA_OK',
    'SA_ERROR_UNKNOWN',
    'SA_ERROR_SHAPE',
    'SA_ERROR_RANK_MISMATCH',
    'SA_ERROR_OVERFLOW',
    'SA_ERROR_INDEX_OUT_OF_RANGE',
    'SA_ERROR_VIEW_BOUNDS',
    'SA_ERROR_EMPTY_RANGE',
    'SA_ERROR_NON_CONFORMABLE',
    'SA_ERROR_UNSUPPORTED_TYPE',
]
