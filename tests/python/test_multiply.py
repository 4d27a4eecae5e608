"""
Tests for matrix-vector products (multiply and matvec).
"""

import math

import numpy as np
import pytest

from colsparse import SparseMatrix, DimensionMismatchError
from conftest import random_pair


REAL_NORM = 12.64911064067351809115
COMPLEX_NORM = 22.80350850198275836078


class TestMultiplyHalfFilled:
    """Columns with 0.5 (or 0.5+0.75j) at rows 2..10 against a constant 2 vector."""

    def test_multiply_float64_int32(self, half_filled_real):
        v = np.full(10, 2, dtype=np.int32)
        result = half_filled_real * v

        assert result.dtype == np.float64
        assert math.isclose(np.linalg.norm(result), REAL_NORM, rel_tol=0, abs_tol=1e-16)

    def test_multiply_complex128_int32(self, half_filled_complex):
        v = np.full(10, 2, dtype=np.int32)
        result = half_filled_complex * v

        assert result.dtype == np.complex128
        assert math.isclose(np.linalg.norm(result), COMPLEX_NORM, rel_tol=0, abs_tol=1e-16)

    def test_multiply_complex128_float64(self, half_filled_complex):
        v = np.full(10, 2.0)
        result = half_filled_complex.multiply(v)

        assert result.dtype == np.complex128
        assert math.isclose(np.linalg.norm(result), COMPLEX_NORM, rel_tol=0, abs_tol=1e-16)

    def test_row_past_end_contributes_nothing(self, half_filled_real):
        result = half_filled_real * ([2] * 10)
        np.testing.assert_array_equal(result, np.full(10, 4.0))


class TestMultiplyAgainstDense:
    """multiply equals dense.T @ v; matvec equals dense @ v."""

    def test_multiply_real(self):
        sparse, dense = random_pair(30, 20, sparse_level=0.3, seed=3)
        v = np.linspace(-1.0, 1.0, 30)
        np.testing.assert_allclose(sparse * v, dense.T @ v, rtol=1e-12)

    def test_matvec_real(self):
        sparse, dense = random_pair(30, 20, sparse_level=0.3, seed=3)
        v = np.linspace(-1.0, 1.0, 20)
        np.testing.assert_allclose(sparse @ v, dense @ v, rtol=1e-12)

    def test_real_matrix_complex_vector(self):
        sparse, dense = random_pair(15, 12, sparse_level=0.4, seed=11)
        v = np.arange(15) * (1 - 0.5j)
        result = sparse.multiply(v)
        assert result.dtype == np.complex128
        np.testing.assert_allclose(result, dense.T @ v, rtol=1e-12)

        w = np.arange(12) * (0.25 + 2j)
        np.testing.assert_allclose(sparse.matvec(w), dense @ w, rtol=1e-12)

    def test_complex_matrix_real_vector(self):
        dense = np.array([[1 + 1j, 0, 2], [0, -1j, 0]])
        sparse = SparseMatrix.of_dense(dense)
        v = np.array([2.0, 3.0])
        w = np.array([1.0, 0.5, -1.0])
        np.testing.assert_allclose(sparse * v, dense.T @ v)
        np.testing.assert_allclose(sparse @ w, dense @ w)

    def test_int_matrix_stays_int(self):
        sparse = SparseMatrix.of_dense([[1, 2], [3, 4]])
        result = sparse @ np.array([1, 1])
        assert result.dtype == np.int64
        np.testing.assert_array_equal(result, [3, 7])


class TestMultiplyErrors:
    """Length checks."""

    def test_multiply_length_mismatch(self):
        mat = SparseMatrix(3, 5)
        with pytest.raises(DimensionMismatchError) as excinfo:
            mat * np.ones(5)
        assert excinfo.value.expected == 3
        assert excinfo.value.actual == 5
        assert "expected 3, got 5" in str(excinfo.value)

    def test_matvec_length_mismatch(self):
        mat = SparseMatrix(3, 5)
        with pytest.raises(DimensionMismatchError):
            mat @ np.ones(3)

    def test_requires_1d(self):
        mat = SparseMatrix(2, 2)
        with pytest.raises(DimensionMismatchError):
            mat * np.ones((2, 2))
