"""
Pytest configuration and shared fixtures for colsparse tests.
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

from colsparse import SparseMatrix, SparseVector, config


# Try to import scipy
try:
    import scipy.sparse as sp
    HAS_SCIPY = True
except ImportError:
    HAS_SCIPY = False


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_config():
    """Restore default configuration after every test."""
    yield
    config.reset()


@pytest.fixture(scope="session")
def requires_scipy():
    """Skip test if scipy is not available."""
    if not HAS_SCIPY:
        pytest.skip("scipy not available")


@pytest.fixture
def dense_small():
    """A small dense matrix (3x4).

    Matrix:
    [[1, 0, 2, 0],
     [0, 3, 0, 4],
     [5, 0, 0, 6]]
    """
    return np.array([
        [1.0, 0.0, 2.0, 0.0],
        [0.0, 3.0, 0.0, 4.0],
        [5.0, 0.0, 0.0, 6.0],
    ])


@pytest.fixture
def sparse_small(dense_small):
    """Same matrix as dense_small, built from dense."""
    return SparseMatrix.of_dense(dense_small)


@pytest.fixture
def half_filled_real():
    """10x10 matrix; every column holds 0.5 at rows 2, 4, 6, 8, 10."""
    return make_half_filled(0.5, dtype='float64')


@pytest.fixture
def half_filled_complex():
    """10x10 matrix; every column holds 0.5+0.75j at rows 2, 4, 6, 8, 10."""
    return make_half_filled(complex(0.5, 0.75), dtype='complex128')


# =============================================================================
# Helper Functions
# =============================================================================

def make_half_filled(value, dtype, size=10):
    """Build a size x size matrix column by column.

    Column entries sit at rows 2, 4, ..., size; the last one lies one past
    the final row.
    """
    num_feat = size // 2
    mat = SparseMatrix(size, size, dtype=dtype)
    for i in range(size):
        mat[i] = SparseVector(entries=[((j + 1) * 2, value) for j in range(num_feat)], dtype=dtype)
    return mat


def generate_matrix(sparse_level, rows, cols, seed, matrix):
    """Fill matrix[i, j] with r * 100 wherever a uniform draw r <= sparse_level.

    Works for SparseMatrix and numpy arrays alike, so the same seed yields
    the same logical matrix in both containers.
    """
    rng = np.random.default_rng(seed)
    for i in range(rows):
        for j in range(cols):
            r = rng.random()
            if r <= sparse_level:
                matrix[i, j] = r * 100
    return matrix


def random_pair(rows, cols, sparse_level=0.1, seed=0):
    """Return (sparse, dense) matrices holding the same random values."""
    sparse = generate_matrix(sparse_level, rows, cols, seed, SparseMatrix(rows, cols))
    dense = generate_matrix(sparse_level, rows, cols, seed, np.zeros((rows, cols)))
    return sparse, dense
