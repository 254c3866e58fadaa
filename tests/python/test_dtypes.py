"""
Tests for dtype handling.
"""

import pytest
import numpy as np
from shapedarray._dtypes import (
    DType, int8, int16, int32, int64, float32, float64,
    normalize_dtype, validate_dtype, is_float_dtype, is_int_dtype, dtype_itemsize,
)
from shapedarray import UnsupportedTypeError


class TestDType:
    """Test DType enum."""

    def test_dtype_values(self):
        assert DType.int8.value == 'int8'
        assert DType.float64.value == 'float64'

    def test_module_constants(self):
        assert int16 is DType.int16
        assert float32 is DType.float32

    def test_type_codes(self):
        codes = [t.type_code for t in (int8, int16, int32, int64, float32, float64)]
        assert codes == [1, 2, 3, 4, 5, 6]

    def test_numpy_dtype(self):
        assert DType.int32.numpy_dtype == np.dtype(np.int32)
        assert DType.float32.itemsize == 4

    def test_str_and_repr(self):
        assert str(DType.int64) == 'int64'
        assert repr(DType.int64) == 'DType.int64'


class TestNormalizeDType:
    """Test normalize_dtype function."""

    @pytest.mark.parametrize("dtype_like, expected", [
        ('float32', DType.float32),
        (DType.int16, DType.int16),
        (np.int8, DType.int8),
        (np.dtype('int64'), DType.int64),
        (float, DType.float64),
    ])
    def test_normalize(self, dtype_like, expected):
        assert normalize_dtype(dtype_like) is expected

    @pytest.mark.parametrize("dtype_like", ['uint8', np.complex128, bool, 'not-a-type'])
    def test_unsupported(self, dtype_like):
        with pytest.raises(UnsupportedTypeError):
            normalize_dtype(dtype_like)

    def test_unsupported_is_type_error(self):
        with pytest.raises(TypeError):
            normalize_dtype(np.uint32)


class TestDTypeHelpers:
    """Test dtype helper functions."""

    def test_validate_dtype(self):
        validate_dtype('float64')
        with pytest.raises(UnsupportedTypeError):
            validate_dtype('float16')

    def test_is_float_dtype(self):
        assert is_float_dtype('float32')
        assert is_float_dtype(np.float64)
        assert not is_float_dtype('int32')

    def test_is_int_dtype(self):
        assert is_int_dtype(int8)
        assert is_int_dtype('int64')
        assert not is_int_dtype('float64')

    def test_dtype_itemsize(self):
        assert dtype_itemsize('int8') == 1
        assert dtype_itemsize('int16') == 2
        assert dtype_itemsize(float64) == 8
