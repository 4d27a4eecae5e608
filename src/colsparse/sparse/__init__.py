"""colsparse Sparse Matrix Module.

Column-oriented sparse storage: every column ("vector") is a
SparseVector of (row_index, value) entries, and a SparseMatrix is an
ordered sequence of such columns.

Type Hierarchy:

    SparseEntry                   # (row_index, value)
    SparseVector                  # one column: entries + num_rows
    ColumnSparseBase (ABC)
    └── SparseMatrix              # columns + (num_rows, num_cols)

Quick Start:
    >>> from colsparse.sparse import SparseMatrix, SparseVector
    >>>
    >>> mat = SparseMatrix(4, 3)
    >>> mat[1, 2] = 0.5
    >>> mat[3] = SparseVector(entries=[(0, 1.0)])   # replace a column
    >>> mat.sort_features()
    >>> mat.get_transposed().shape
    (3, 4)

Key Functions:
    - hstack: Stack matrices column-wise
    - from_numpy, to_numpy: numpy interop
    - from_scipy, to_scipy: scipy interop
"""

# =============================================================================
# Storage Types
# =============================================================================
from ._entry import SparseEntry
from ._vector import SparseVector
from ._base import ColumnSparseBase
from ._matrix import SparseMatrix

# =============================================================================
# Operations
# =============================================================================
from ._ops import (
    hstack,
    from_numpy,
    to_numpy,
    from_scipy,
    to_scipy,
    zeros_like,
)


def is_sparse_like(obj) -> bool:
    """Check if object is a column sparse matrix."""
    return isinstance(obj, ColumnSparseBase)


__all__ = [
    'SparseEntry',
    'SparseVector',
    'ColumnSparseBase',
    'SparseMatrix',
    'hstack',
    'from_numpy',
    'to_numpy',
    'from_scipy',
    'to_scipy',
    'zeros_like',
    'is_sparse_like',
]
