"""
shapedarray - Strided Multi-dimensional Arrays

Dense numeric arrays of rank 0 to 9 over one-dimensional numpy buffers:
- Flat arrays: contiguous column-major storage
- Strided arrays: offset plus one stride per axis (zero-copy slices and ranges)
- Selected arrays: one indirection table per axis (zero-copy index lists)

Every view aliases the buffer of its parent: writes through any alias are
visible through all of them. ``copy()`` is the only way to isolate.

Example:
    >>> import shapedarray as sa
    >>>
    >>> arr = sa.create(3, 4)
    >>> arr.fill(1.0)
    >>> sub = arr.view(slice(1, 3), None)     # StridedArray sharing the buffer
    >>> sub.increment(1.0)
    >>> arr.get(1, 0)
    2.0
    >>> sel = arr.view([0, 2], [3, 0])        # SelectedArray
    >>> sel.get(1, 0)                         # arr.get(2, 3)
    2.0
"""

__version__ = '0.1.0'

import logging

from ._errors import (
    ShapedArrayError,
    ShapeError,
    IndexOutOfRange,
    NonConformableError,
    EmptyRangeError,
    UnsupportedTypeError,
    ViewBoundsError,
)
from ._dtypes import (
    DType,
    # Type constants
    int8,
    int16,
    int32,
    int64,
    float32,
    float64,
    normalize_dtype,
    is_float_dtype,
    is_int_dtype,
)
from ._config import (
    IndexingConfig,
    CreationConfig,
    ArrayConfig,
    config,
    get_config,
    set_check_bounds,
    set_default_dtype,
)
from ._shape import Shape, MAX_RANK
from ._backend import Backend, Ownership, Order, StorageInfo
from ._scanner import (
    Scanner,
    FunctionScanner,
    MinScanner,
    MaxScanner,
    MinMaxScanner,
    SumScanner,
)
from ._indexing import CompiledRange
from ._base import ShapedArray
from ._strided import StridedArray, column_major_strides, classify_order
from ._selected import SelectedArray
from ._flat import FlatArray
from ._array import (
    create,
    zeros,
    ones,
    full,
    wrap,
    wrap_selected,
    from_numpy,
    shares_buffer,
)

# Library logging: silent unless the application configures handlers
logging.getLogger("shapedarray").addHandler(logging.NullHandler())

__all__ = [
    # Version
    '__version__',
    # Errors
    'ShapedArrayError',
    'ShapeError',
    'IndexOutOfRange',
    'NonConformableError',
    'EmptyRangeError',
    'UnsupportedTypeError',
    'ViewBoundsError',
    # Element types
    'DType',
    'int8',
    'int16',
    'int32',
    'int64',
    'float32',
    'float64',
    'normalize_dtype',
    'is_float_dtype',
    'is_int_dtype',
    # Configuration
    'IndexingConfig',
    'CreationConfig',
    'ArrayConfig',
    'config',
    'get_config',
    'set_check_bounds',
    'set_default_dtype',
    # Shape and storage
    'Shape',
    'MAX_RANK',
    'Backend',
    'Ownership',
    'Order',
    'StorageInfo',
    # Scanners
    'Scanner',
    'FunctionScanner',
    'MinScanner',
    'MaxScanner',
    'MinMaxScanner',
    'SumScanner',
    # Arrays
    'CompiledRange',
    'ShapedArray',
    'FlatArray',
    'StridedArray',
    'SelectedArray',
    'column_major_strides',
    'classify_order',
    # Factories
    'create',
    'zeros',
    'ones',
    'full',
    'wrap',
    'wrap_selected',
    'from_numpy',
    'shares_buffer',
]
