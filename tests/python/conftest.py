"""
Pytest configuration and shared fixtures for shapedarray tests.
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

import shapedarray as sa
from shapedarray import IndexingConfig


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def arange_3x4():
    """3x4 flat float64 array filled with 0..11 in column-major order.

    Array (get(i, j) == i + 3*j):
    [[0, 3, 6,  9],
     [1, 4, 7, 10],
     [2, 5, 8, 11]]
    """
    return sa.wrap(np.arange(12, dtype=np.float64), 3, 4)


@pytest.fixture
def arange_2x3x4():
    """2x3x4 flat int32 array with get(i, j, k) == i + 2*j + 6*k."""
    return sa.wrap(np.arange(24, dtype=np.int32), 2, 3, 4)


@pytest.fixture
def buffer_6():
    """int32 buffer [0, 1, 2, 3, 4, 5]."""
    return np.arange(6, dtype=np.int32)


@pytest.fixture
def checked():
    """Enable bounds checking for the duration of a test."""
    with sa.config.local(indexing=IndexingConfig(check_bounds=True)):
        yield


@pytest.fixture(autouse=True)
def reset_config():
    """Restore default global configuration after each test."""
    yield
    sa.config.reset()


# =============================================================================
# Helper Functions
# =============================================================================

def assert_array_equal(a1, a2, rtol=1e-5, atol=1e-8):
    """Assert two arrays are approximately equal.

    ShapedArrays are compared through ``to_numpy()``.
    """
    if isinstance(a1, sa.ShapedArray):
        a1 = a1.to_numpy()
    if isinstance(a2, sa.ShapedArray):
        a2 = a2.to_numpy()
    np.testing.assert_allclose(a1, a2, rtol=rtol, atol=atol)


def elements(arr):
    """All elements of an array as a numpy array, read with get()."""
    out = np.empty(arr.dims, dtype=arr.dtype.numpy_dtype)
    for idx in np.ndindex(*arr.dims):
        out[idx] = arr.get(*idx)
    return out
