"""Array shapes.

A :class:`Shape` is the immutable, ordered list of dimension sizes of an
array together with its precomputed number of elements. Shapes are shared
read-only between arrays and their views.
"""

import sys
from numbers import Integral
from typing import Iterator, Tuple, Union, Sequence

from ._errors import ShapeError, IndexOutOfRange, SA_ERROR_OVERFLOW

__all__ = ['Shape', 'MAX_RANK', 'ShapeLike']

#: Maximum number of axes of an array.
MAX_RANK = 9


class Shape:
    """Immutable list of dimensions.

    Every dimension is at least 1 and the product of all dimensions must
    not exceed ``sys.maxsize``. A rank-0 shape describes a scalar and has a
    single element.

    Example:
        >>> shape = Shape(3, 4)
        >>> shape.rank, shape.number
        (2, 12)
        >>> shape.dimension(-1)
        4
        >>> Shape([3, 4]) == shape
        True
    """

    __slots__ = ('_dims', '_number')

    def __init__(self, *dims):
        if len(dims) == 1 and not isinstance(dims[0], Integral):
            dims = dims[0]
            if isinstance(dims, Shape):
                dims = dims.dims
        dims = tuple(dims)
        if len(dims) > MAX_RANK:
            raise ShapeError(f"Rank {len(dims)} exceeds the maximum rank {MAX_RANK}")
        number = 1
        for k, dim in enumerate(dims):
            if not isinstance(dim, Integral):
                raise ShapeError(f"Dimension {k} is not an integer: {dim!r}")
            if dim < 1:
                raise ShapeError(f"Invalid dimension {k}: {dim} (must be >= 1)")
            number *= int(dim)
            if number > sys.maxsize:
                raise ShapeError(f"Too many elements for shape {dims}", SA_ERROR_OVERFLOW)
        self._dims = tuple(int(dim) for dim in dims)
        self._number = number

    @classmethod
    def make(cls, *dims) -> 'Shape':
        """Build a shape, returning ``dims`` unchanged if it is already one."""
        if len(dims) == 1 and isinstance(dims[0], Shape):
            return dims[0]
        return cls(*dims)

    @property
    def dims(self) -> Tuple[int, ...]:
        """Dimensions as a tuple."""
        return self._dims

    @property
    def rank(self) -> int:
        """Number of axes."""
        return len(self._dims)

    @property
    def number(self) -> int:
        """Number of elements."""
        return self._number

    def dimension(self, k: int) -> int:
        """Length of the ``k``-th axis, negative ``k`` counting from the end."""
        rank = len(self._dims)
        if k < -rank or k >= rank:
            raise IndexOutOfRange(f"Axis {k} out of range for rank {rank}")
        return self._dims[k]

    def __len__(self) -> int:
        return len(self._dims)

    def __iter__(self) -> Iterator[int]:
        return iter(self._dims)

    def __getitem__(self, k):
        return self._dims[k]

    def __eq__(self, other) -> bool:
        if isinstance(other, Shape):
            return self._dims == other._dims
        if isinstance(other, tuple):
            return self._dims == other
        return NotImplemented

    def __ne__(self, other) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return hash(self._dims)

    def __repr__(self) -> str:
        return f"Shape{self._dims}"


ShapeLike = Union[Shape, Sequence[int]]
