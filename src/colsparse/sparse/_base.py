"""
Sparse Matrix Base Class

This module defines the abstract base class for column-oriented sparse
matrices. It fixes the shared vocabulary (shape, dtype, nnz) and derives
the common properties and column-access helpers from a small set of
abstract members.

Terminology:

    Rows are *features* and columns are *vectors*, following the LibSVM
    convention where every line of a data file is one column:

        num_rows == num_features
        num_cols == num_vectors

Example:

    class MyColumnMatrix(ColumnSparseBase):
        @property
        def shape(self) -> Tuple[int, int]:
            return self._shape

        def col_vector(self, j: int) -> SparseVector:
            return self._columns[j]

        # ... implement other required members
"""

from abc import ABC, abstractmethod
from typing import Iterator, Tuple, Union, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from ._vector import SparseVector

__all__ = [
    'ColumnSparseBase',
]


class ColumnSparseBase(ABC):
    """
    Abstract base class for column-oriented sparse matrices.

    Required Properties (subclasses must implement):
        shape: Matrix dimensions (rows, cols)
        dtype: Data type string
        nnz: Number of stored entries

    Required Methods (subclasses must implement):
        col_vector(j): The SparseVector holding column j
        to_dense(): Dense numpy array
        copy(): Deep copy
    """

    # =========================================================================
    # Abstract Properties
    # =========================================================================

    @property
    @abstractmethod
    def shape(self) -> Tuple[int, int]:
        """Matrix dimensions (rows, cols)."""
        ...

    @property
    @abstractmethod
    def dtype(self) -> str:
        """Data type string."""
        ...

    @property
    @abstractmethod
    def nnz(self) -> int:
        """Number of stored entries."""
        ...

    # =========================================================================
    # Derived Properties
    # =========================================================================

    @property
    def num_rows(self) -> int:
        """Number of rows (features)."""
        return self.shape[0]

    @property
    def num_cols(self) -> int:
        """Number of columns (vectors)."""
        return self.shape[1]

    num_features = num_rows
    num_vectors = num_cols

    @property
    def ndim(self) -> int:
        """Number of dimensions (always 2 for sparse matrices)."""
        return 2

    @property
    def size(self) -> int:
        """Total number of elements (rows * cols)."""
        return self.shape[0] * self.shape[1]

    @property
    def density(self) -> float:
        """Fraction of stored entries."""
        total = self.size
        return self.nnz / total if total > 0 else 0.0

    # =========================================================================
    # Abstract Methods
    # =========================================================================

    @abstractmethod
    def col_vector(self, j: int) -> 'SparseVector':
        """Get the sparse vector stored in column j.

        Args:
            j: Column index

        Returns:
            The column's SparseVector (not a copy)
        """
        ...

    @abstractmethod
    def to_dense(self) -> np.ndarray:
        """Convert to dense numpy array of shape (rows, cols)."""
        ...

    @abstractmethod
    def copy(self) -> 'ColumnSparseBase':
        """Create a deep copy of this matrix."""
        ...

    # =========================================================================
    # Convenience Methods
    # =========================================================================

    def col_values(self, j: int) -> np.ndarray:
        """Get stored values for column j."""
        return self.col_vector(j).values

    def col_indices(self, j: int) -> np.ndarray:
        """Get row indices of stored entries for column j."""
        return self.col_vector(j).indices

    def col_length(self, j: int) -> int:
        """Get number of stored entries in column j."""
        return self.col_vector(j).nnz

    def get_col(self, j: int) -> Tuple[np.ndarray, np.ndarray]:
        """Get both values and indices for column j.

        Returns:
            Tuple of (values, indices) arrays
        """
        vec = self.col_vector(j)
        return vec.values, vec.indices

    def iter_cols(self) -> Iterator[Tuple[np.ndarray, np.ndarray]]:
        """Iterate over columns, yielding (values, indices) tuples."""
        for j in range(self.num_cols):
            yield self.get_col(j)

    def col_nnz(self) -> np.ndarray:
        """Stored entries per column."""
        return np.array([self.col_length(j) for j in range(self.num_cols)], dtype=np.int64)

    def sum(self, axis: Union[int, None] = None) -> Union[complex, float, np.ndarray]:
        """Compute sum along axis.

        Args:
            axis: None for total sum, 0 for column sums, 1 for row sums
        """
        col_sums = np.array([self.col_values(j).sum() for j in range(self.num_cols)],
                            dtype=self.dtype)
        if axis is None:
            return col_sums.sum()
        if axis == 0:
            return col_sums

        result = np.zeros(self.num_rows, dtype=self.dtype)
        for j in range(self.num_cols):
            values, indices = self.get_col(j)
            np.add.at(result, indices, values)
        return result

    # =========================================================================
    # Magic Methods
    # =========================================================================

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}("
                f"shape={self.shape}, nnz={self.nnz}, "
                f"dtype={self.dtype})")

    def __str__(self) -> str:
        return self.__repr__()
