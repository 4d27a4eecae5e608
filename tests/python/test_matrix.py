"""
Tests for SparseMatrix: creation, element access, transpose and dense
conversion.
"""

import numpy as np
import pytest

from colsparse import (
    SparseMatrix, SparseVector,
    IndexOutOfBoundsError, DimensionMismatchError,
)
from conftest import generate_matrix, random_pair


class TestSparseMatrixCreation:
    """Test SparseMatrix creation."""

    def test_create_sized(self):
        mat = SparseMatrix(10, 20)
        assert mat.shape == (10, 20)
        assert mat.num_rows == 10
        assert mat.num_cols == 20
        assert mat.num_features == 10
        assert mat.num_vectors == 20
        assert mat.nnz == 0
        assert len(mat) == 20
        assert all(col.num_rows == 10 for col in mat)

    def test_create_default(self):
        mat = SparseMatrix()
        assert mat.shape == (0, 0)
        assert mat.dtype == 'float64'

    def test_invalid_shape(self):
        with pytest.raises(ValueError):
            SparseMatrix(-1, 10)

    def test_from_columns(self):
        cols = [SparseVector(3, [(0, 1.0)]), SparseVector(3, [(2, 2.0)])]
        mat = SparseMatrix.from_columns(cols)
        assert mat.shape == (3, 2)
        assert mat[2, 1] == 2.0

    def test_properties(self, sparse_small):
        assert sparse_small.nnz == 6
        assert sparse_small.size == 12
        assert sparse_small.density == pytest.approx(0.5)
        np.testing.assert_array_equal(sparse_small.col_nnz(), [2, 1, 1, 2])


class TestSparseMatrixAccess:
    """Test element access and assignment."""

    def test_access_by_index(self):
        """Diagonal m(i, i) = i + 1 survives sorting."""
        size = 2
        m = SparseMatrix(size, size, dtype='int32')
        for i in range(size):
            m[i, i] = i + 1
        m.sort_features()

        for i in range(size):
            assert m[i, i] == i + 1

    def test_access_larger_diagonal(self):
        size = 50
        m = SparseMatrix(size, size, dtype='int64')
        for i in reversed(range(size)):
            m[i, i] = i + 1
        m.sort_features()
        for i in range(size):
            assert m.access(i, i) == i + 1
            assert m.access((i + 1) % size, i) == 0

    def test_access_by_index_non_square(self):
        """Random sparse and dense matrices agree element-wise."""
        sparse, dense = random_pair(50, 100)
        for i in range(50):
            for j in range(100):
                assert sparse[i, j] == dense[i, j]

    def test_assigned_values_and_zeros(self):
        triples = [(0, 0, 1.5), (3, 1, -2.0), (2, 4, 7.25), (4, 4, 0.125)]
        m = SparseMatrix(5, 5)
        for r, c, v in triples:
            m[r, c] = v
        lookup = {(r, c): v for r, c, v in triples}
        for r in range(5):
            for c in range(5):
                assert m[r, c] == lookup.get((r, c), 0.0)

    def test_row_beyond_range_is_zero(self):
        m = SparseMatrix(3, 3)
        assert m[10, 1] == 0.0

    def test_column_out_of_range(self):
        m = SparseMatrix(3, 3)
        with pytest.raises(IndexOutOfBoundsError):
            m[0, 3]
        with pytest.raises(IndexError):
            m[0, -1] = 1.0
        with pytest.raises(IndexOutOfBoundsError):
            m[5]

    def test_negative_row(self):
        m = SparseMatrix(3, 3)
        with pytest.raises(IndexOutOfBoundsError):
            m.assign(-1, 0, 1.0)

    def test_column_get_and_set(self):
        m = SparseMatrix(4, 2)
        m[1] = SparseVector(entries=[(3, 2.0), (0, 1.0)])
        assert m[1].num_rows == 4
        assert m[3, 1] == 2.0
        assert m[1].entries[0].row_index == 3

    def test_column_set_length_mismatch(self):
        m = SparseMatrix(4, 2)
        with pytest.raises(DimensionMismatchError):
            m[0] = SparseVector(5, [(0, 1.0)])

    def test_column_set_casts_dtype(self):
        m = SparseMatrix(2, 1, dtype='complex128')
        m[0] = SparseVector(2, [(1, 3.0)])
        assert m[0].dtype == 'complex128'
        assert m[1, 0] == 3 + 0j

    def test_column_set_requires_vector(self):
        m = SparseMatrix(2, 1)
        with pytest.raises(TypeError):
            m[0] = [1.0, 2.0]

    def test_sort_features(self):
        m = SparseMatrix(5, 2)
        m[4, 0] = 1.0
        m[1, 0] = 2.0
        assert not m.is_sorted
        m.sort_features()
        assert m.is_sorted
        assert list(m.col_indices(0)) == [1, 4]
        m.sort_features()
        assert list(m.col_indices(0)) == [1, 4]


class TestSparseMatrixTranspose:
    """Test get_transposed."""

    @pytest.mark.parametrize("rows,cols", [(100, 50), (50, 100)])
    def test_get_transposed(self, rows, cols):
        sparse, _ = random_pair(rows, cols)
        transposed = sparse.get_transposed()

        assert sparse.num_rows == transposed.num_cols
        assert sparse.num_cols == transposed.num_rows
        for i in range(rows):
            for j in range(cols):
                assert sparse[i, j] == transposed[j, i]

    def test_transpose_preserves_sparsity(self, sparse_small):
        transposed = sparse_small.T
        assert transposed.nnz == sparse_small.nnz
        assert transposed.is_sorted

    def test_double_transpose(self):
        sparse, _ = random_pair(30, 40, sparse_level=0.2, seed=7)
        assert sparse.get_transposed().get_transposed() == sparse

    def test_double_transpose_unsorted(self):
        m = SparseMatrix(4, 3)
        m[3, 0] = 1.0
        m[0, 0] = 2.0
        m[2, 2] = 3.0
        back = m.transpose().transpose()
        assert back.shape == m.shape
        np.testing.assert_array_equal(back.to_dense(), m.to_dense())

    def test_transpose_leaves_source_untouched(self, sparse_small):
        before = sparse_small.copy()
        transposed = sparse_small.get_transposed()
        transposed[0, 0] = 99.0
        assert sparse_small == before

    def test_transpose_inconsistent_state(self):
        m = SparseMatrix(2, 2)
        m[0] = SparseVector(2, [(5, 1.0)])
        with pytest.raises(DimensionMismatchError):
            m.get_transposed()


class TestSparseMatrixDense:
    """Test conversion from and to dense."""

    def test_from_dense(self):
        dense = generate_matrix(0.1, 50, 100, 0, np.zeros((50, 100)))

        sparse = SparseMatrix()
        sparse.from_dense(dense)

        assert sparse.num_features == 50
        assert sparse.num_vectors == 100
        for i in range(50):
            for j in range(100):
                assert sparse[i, j] == dense[i, j]

    def test_from_dense_roundtrip(self, dense_small):
        sparse = SparseMatrix.of_dense(dense_small)
        assert sparse.nnz == np.count_nonzero(dense_small)
        np.testing.assert_array_equal(sparse.to_dense(), dense_small)

    def test_from_dense_nested_list(self):
        sparse = SparseMatrix.of_dense([[1, 0], [0, 2]])
        assert sparse.dtype == 'int64'
        assert sparse[1, 1] == 2

    def test_from_dense_complex(self):
        dense = np.array([[0, 1 + 1j], [2, 0]])
        sparse = SparseMatrix.of_dense(dense)
        assert sparse.dtype == 'complex128'
        np.testing.assert_array_equal(sparse.to_dense(), dense)

    def test_from_dense_replaces_contents(self, sparse_small):
        sparse_small.from_dense(np.eye(2))
        assert sparse_small.shape == (2, 2)
        assert sparse_small.nnz == 2

    def test_from_dense_requires_2d(self):
        with pytest.raises(DimensionMismatchError):
            SparseMatrix().from_dense(np.zeros(3))

    def test_from_dense_columns_sorted(self, sparse_small):
        assert sparse_small.is_sorted


class TestSparseMatrixMisc:
    """Test copies, casts, equality and reductions."""

    def test_copy_is_deep(self, sparse_small):
        dup = sparse_small.copy()
        dup[0, 0] = 42.0
        assert sparse_small[0, 0] == 1.0

    def test_astype(self, sparse_small):
        cmat = sparse_small.astype('complex128')
        assert cmat.dtype == 'complex128'
        np.testing.assert_array_equal(cmat.to_dense(), sparse_small.to_dense())

    def test_equality(self, sparse_small, dense_small):
        assert sparse_small == SparseMatrix.of_dense(dense_small)
        assert sparse_small != SparseMatrix.of_dense(dense_small * 2)

    def test_sum(self, sparse_small, dense_small):
        assert sparse_small.sum() == dense_small.sum()
        np.testing.assert_array_equal(sparse_small.sum(axis=0), dense_small.sum(axis=0))
        np.testing.assert_array_equal(sparse_small.sum(axis=1), dense_small.sum(axis=1))

    def test_get_col(self, sparse_small):
        values, indices = sparse_small.get_col(3)
        np.testing.assert_array_equal(values, [4.0, 6.0])
        np.testing.assert_array_equal(indices, [1, 2])

    def test_repr(self, sparse_small):
        assert repr(sparse_small) == "SparseMatrix(shape=(3, 4), nnz=6, dtype=float64)"
        assert "density" in sparse_small.info()

    def test_truthiness_follows_column_count(self):
        """A sized matrix without stored entries is still truthy."""
        assert SparseMatrix(3, 3)
        assert not SparseMatrix(3, 0)
