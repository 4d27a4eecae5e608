"""High-Level Sparse Matrix Operations.

This module provides functional operations on sparse matrices:
- Stacking (hstack of columns)
- Cross-platform conversions (numpy, scipy)

scipy is optional and imported lazily.

Example:
    >>> from colsparse.sparse import from_numpy, to_scipy, hstack
    >>>
    >>> mat = from_numpy(np.eye(3))
    >>> csc = to_scipy(mat)
    >>> wide = hstack([mat, mat])   # 3x6
"""

from typing import Any, List, Optional, Union

import numpy as np

from .._dtypes import DType, infer_dtype, normalize_dtype, cast_scalar
from .._errors import DimensionMismatchError, TypeMismatchError
from ._matrix import SparseMatrix
from ._vector import SparseVector

__all__ = [
    # Stacking
    'hstack',

    # Cross-platform
    'from_numpy',
    'to_numpy',
    'from_scipy',
    'to_scipy',

    # Utilities
    'zeros_like',
]


# =============================================================================
# Stacking Operations
# =============================================================================

def hstack(matrices: List[SparseMatrix]) -> SparseMatrix:
    """Horizontally stack matrices (column concatenation).

    Columns are copied; the sources are not modified. The result dtype is
    the promotion of all source dtypes.

    Args:
        matrices: Matrices with the same number of rows.

    Returns:
        SparseMatrix with the columns of every source in order.

    Raises:
        DimensionMismatchError: If row counts differ.
    """
    if len(matrices) == 0:
        return SparseMatrix(0, 0)

    rows = matrices[0].num_rows
    for mat in matrices[1:]:
        if mat.num_rows != rows:
            raise DimensionMismatchError(
                f"Row mismatch: {rows} vs {mat.num_rows}", expected=rows, actual=mat.num_rows,
            )

    dtype = np.result_type(*[np.dtype(m.dtype) for m in matrices])
    columns = [col.copy() for mat in matrices for col in mat]
    return SparseMatrix.from_columns(columns, num_rows=rows, dtype=normalize_dtype(dtype))


# =============================================================================
# Cross-Platform Conversions
# =============================================================================

def from_numpy(arr: Any, dtype: Optional[Union[str, DType]] = None) -> SparseMatrix:
    """Create from a dense 2D numpy array.

    Args:
        arr: 2D numpy array.
        dtype: Entry dtype (inferred if omitted).
    """
    return SparseMatrix.of_dense(arr, dtype=dtype)


def to_numpy(mat: SparseMatrix) -> np.ndarray:
    """Convert to dense numpy array."""
    return mat.to_dense()


def from_scipy(mat: Any, dtype: Optional[Union[str, DType]] = None) -> SparseMatrix:
    """Create from any scipy sparse matrix or array.

    The input is converted to CSC; explicit zeros are dropped and row
    indices come out sorted within each column.

    Args:
        mat: scipy sparse matrix.
        dtype: Entry dtype (inferred from mat.dtype if omitted).

    Returns:
        Sorted SparseMatrix.
    """
    try:
        import scipy.sparse as sp
    except ImportError:
        raise ImportError("scipy required for from_scipy(); install colsparse[scipy]")

    if not sp.issparse(mat):
        raise TypeMismatchError(f"Expected scipy sparse matrix, got {type(mat)}")

    csc = sp.csc_matrix(mat, copy=True)
    csc.eliminate_zeros()
    csc.sort_indices()

    dtype = normalize_dtype(dtype) if dtype is not None else infer_dtype(csc.data)
    rows, cols = csc.shape
    result = SparseMatrix(rows, cols, dtype=dtype)
    for j in range(cols):
        start, end = csc.indptr[j], csc.indptr[j + 1]
        result.set_column(j, SparseVector(
            rows,
            [(int(i), cast_scalar(v, dtype)) for i, v in zip(csc.indices[start:end], csc.data[start:end])],
            dtype=dtype,
        ))
    return result


def to_scipy(mat: SparseMatrix) -> Any:
    """Convert to scipy.sparse.csc_matrix.

    Columns are emitted in stored order; scipy sums duplicates when it
    canonicalizes.
    """
    try:
        import scipy.sparse as sp
    except ImportError:
        raise ImportError("scipy required for to_scipy(); install colsparse[scipy]")

    indptr = np.zeros(mat.num_cols + 1, dtype=np.int64)
    for j, col in enumerate(mat):
        indptr[j + 1] = indptr[j] + col.nnz

    data = np.concatenate([col.values for col in mat]) if mat.num_cols else np.array([], dtype=mat.dtype)
    indices = np.concatenate([col.indices for col in mat]) if mat.num_cols else np.array([], dtype=np.int64)

    return sp.csc_matrix((data.astype(mat.dtype), indices, indptr), shape=mat.shape)


# =============================================================================
# Utilities
# =============================================================================

def zeros_like(mat: SparseMatrix) -> SparseMatrix:
    """Empty matrix with the same shape and dtype."""
    return SparseMatrix(mat.num_rows, mat.num_cols, dtype=mat.dtype)
