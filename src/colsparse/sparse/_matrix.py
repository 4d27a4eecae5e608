"""Column-Oriented Sparse Matrix.

This module provides SparseMatrix, an ordered sequence of SparseVector
columns plus the matrix dimensions.

Design:
    - Columns are independent SparseVectors; element access delegates to
      the column, so lookups are O(k) per column until ``sort_features``
      has been called and O(log k) afterwards.
    - Dimensions are fixed at construction (or by ``from_dense`` /
      decoding). Element assignment never resizes the matrix.
    - Entry dtype is generic: integer, real and complex matrices share
      one implementation, and products promote to the common dtype.

Multiplication:
    ``m * v`` / ``multiply`` dots every column with the dense vector
    (the LibSVM view: each column is one data vector, ``v`` a weight
    vector over features). ``m @ v`` / ``matvec`` is the conventional
    product over columns.

Thread Safety:
    No internal locking. Distinct instances may be used concurrently;
    mutation of one instance from several threads must be serialized
    by the caller.

Example:
    >>> mat = SparseMatrix(3, 2)
    >>> mat[0, 1] = 4.0
    >>> mat[2, 1] = 1.0
    >>> mat.sort_features()
    >>> mat.get_transposed().shape
    (2, 3)
    >>> mat * [1.0, 1.0, 1.0]
    array([0., 5.])
"""

import logging
from typing import Any, IO, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from .._dtypes import (
    DType, normalize_dtype, infer_dtype, promote_dtypes, zero_of, cast_scalar,
    as_numpy_dtype,
)
from .._errors import (
    DimensionMismatchError, check_dimensions, check_index,
)
from ._base import ColumnSparseBase
from ._vector import SparseVector

__all__ = ['SparseMatrix']

logger = logging.getLogger("colsparse.sparse")

MatrixKey = Union[int, Tuple[int, int]]


class SparseMatrix(ColumnSparseBase):
    """Sparse matrix stored as one SparseVector per column.

    Attributes:
        shape: Matrix dimensions (num_rows, num_cols).
        dtype: Entry dtype string.
        nnz: Number of stored entries over all columns.

    Example:
        >>> mat = SparseMatrix(2, 2, dtype='int32')
        >>> for i in range(2):
        ...     mat[i, i] = i + 1
        >>> mat.sort_features()
        >>> mat[1, 1]
        2
    """

    __slots__ = ('_columns', '_num_rows', '_num_cols', '_dtype')

    # =========================================================================
    # Initialization
    # =========================================================================

    def __init__(
        self,
        num_rows: int = 0,
        num_cols: int = 0,
        dtype: Union[str, DType] = 'float64',
    ):
        """Initialize a matrix whose columns are all empty.

        Args:
            num_rows: Number of rows (features).
            num_cols: Number of columns (vectors).
            dtype: Entry dtype.
        """
        if num_rows < 0 or num_cols < 0:
            raise ValueError(f"Invalid shape: {(num_rows, num_cols)}")

        self._dtype = normalize_dtype(dtype)
        self._reset(int(num_rows), int(num_cols))

    def _reset(self, num_rows: int, num_cols: int) -> None:
        self._num_rows = num_rows
        self._num_cols = num_cols
        self._columns: List[SparseVector] = [
            SparseVector(num_rows, dtype=self._dtype) for _ in range(num_cols)
        ]

    # =========================================================================
    # Factory Methods
    # =========================================================================

    @classmethod
    def from_columns(
        cls,
        columns: Iterable[SparseVector],
        num_rows: Optional[int] = None,
        dtype: Optional[Union[str, DType]] = None,
    ) -> 'SparseMatrix':
        """Create from a sequence of column vectors.

        Args:
            columns: Column vectors, taken over without copying when their
                dtype already matches.
            num_rows: Row count; defaults to the largest column num_rows.
            dtype: Entry dtype; defaults to the first column's dtype.

        Returns:
            SparseMatrix with one column per vector.
        """
        columns = list(columns)
        if dtype is None:
            dtype = columns[0].dtype if columns else 'float64'
        if num_rows is None:
            num_rows = max((c.num_rows for c in columns), default=0)

        mat = cls(num_rows, len(columns), dtype=dtype)
        for j, col in enumerate(columns):
            mat.set_column(j, col)
        return mat

    @classmethod
    def of_dense(cls, dense: Any, dtype: Optional[Union[str, DType]] = None) -> 'SparseMatrix':
        """Create from a dense 2D array-like (see ``from_dense``)."""
        return cls().from_dense(dense, dtype=dtype)

    def from_dense(self, dense: Any, dtype: Optional[Union[str, DType]] = None) -> 'SparseMatrix':
        """Reinitialize this matrix from a dense 2D array-like.

        Dimensions are taken from the dense operand. Cells equal to the
        additive identity are omitted; the others are appended to their
        column in ascending row order.

        Args:
            dense: 2D numpy array or nested list [rows][cols].
            dtype: Entry dtype; inferred from the dense data if omitted.

        Returns:
            self (for chaining).

        Raises:
            DimensionMismatchError: If dense is not two-dimensional.
        """
        arr = np.asarray(dense)
        if arr.ndim != 2:
            raise DimensionMismatchError(
                f"from_dense expects a 2D array, got {arr.ndim}D", expected=2, actual=arr.ndim,
            )

        self._dtype = normalize_dtype(dtype) if dtype is not None else infer_dtype(arr)
        rows, cols = arr.shape
        self._reset(rows, cols)

        zero = zero_of(self._dtype)
        for j in range(cols):
            col = self._columns[j]
            for i in range(rows):
                val = arr[i, j]
                if val != zero:
                    col._append(i, cast_scalar(val, self._dtype))

        logger.debug(f"from_dense: shape={self.shape}, nnz={self.nnz}")
        return self

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def shape(self) -> Tuple[int, int]:
        """Matrix dimensions (rows, cols)."""
        return self._num_rows, self._num_cols

    @property
    def dtype(self) -> str:
        """Data type string."""
        return self._dtype

    @property
    def nnz(self) -> int:
        """Number of stored entries."""
        return sum(col.nnz for col in self._columns)

    @property
    def columns(self) -> Tuple[SparseVector, ...]:
        """Column vectors (the stored objects, not copies)."""
        return tuple(self._columns)

    @property
    def is_sorted(self) -> bool:
        """Whether every column is known to be sorted."""
        return all(col.is_sorted for col in self._columns)

    # =========================================================================
    # Column Access
    # =========================================================================

    def col_vector(self, j: int) -> SparseVector:
        """Get the vector stored in column j.

        Raises:
            IndexOutOfBoundsError: If j is outside ``[0, num_cols)``.
        """
        return self._columns[check_index(j, self._num_cols, "column index")]

    def set_column(self, j: int, vector: SparseVector) -> None:
        """Replace column j.

        An unsized vector (``num_rows == 0``) takes the matrix's row count.
        A vector with a different dtype is stored as a cast copy.

        Raises:
            IndexOutOfBoundsError: If j is outside ``[0, num_cols)``.
            DimensionMismatchError: If the vector is sized differently.
        """
        j = check_index(j, self._num_cols, "column index")
        if vector.num_rows not in (0, self._num_rows):
            check_dimensions(self._num_rows, vector.num_rows, f"column {j} length")
        if vector.dtype != self._dtype:
            vector = vector.astype(self._dtype)
        vector._set_num_rows(self._num_rows)
        self._columns[j] = vector

    # =========================================================================
    # Element Access
    # =========================================================================

    def access(self, row: int, col: int) -> Any:
        """Value at (row, col), zero when no entry is stored.

        Raises:
            IndexOutOfBoundsError: If col is outside ``[0, num_cols)`` or
                row is negative.
        """
        return self.col_vector(col).access(row)

    def assign(self, row: int, col: int, value: Any) -> None:
        """Set the value at (row, col).

        Does not re-sort the column; see ``sort_features``.

        Raises:
            IndexOutOfBoundsError: If col is outside ``[0, num_cols)`` or
                row is negative.
        """
        vec = self.col_vector(col)
        if vec.num_rows == 0:
            vec._set_num_rows(self._num_rows)
        vec.assign(row, value)

    def __getitem__(self, key: MatrixKey) -> Any:
        """``m[row, col]`` returns an element, ``m[col]`` a column vector."""
        if isinstance(key, tuple):
            if len(key) != 2:
                raise TypeError(f"Invalid index: expected (row, col), got {key!r}")
            return self.access(*key)
        return self.col_vector(key)

    def __setitem__(self, key: MatrixKey, value: Any) -> None:
        """``m[row, col] = x`` sets an element, ``m[col] = vec`` a column."""
        if isinstance(key, tuple):
            if len(key) != 2:
                raise TypeError(f"Invalid index: expected (row, col), got {key!r}")
            self.assign(key[0], key[1], value)
        elif isinstance(value, SparseVector):
            self.set_column(key, value)
        else:
            raise TypeError(f"Column assignment requires a SparseVector, got {type(value)}")

    def __len__(self) -> int:
        """Return number of columns."""
        return self._num_cols

    def __iter__(self) -> Iterator[SparseVector]:
        return iter(self._columns)

    # =========================================================================
    # Ordering
    # =========================================================================

    def sort_features(self) -> None:
        """Sort every column by row index. Idempotent."""
        for col in self._columns:
            col.sort()

    def coalesce(self) -> None:
        """Coalesce every column (sort, sum duplicates, drop zeros)."""
        for col in self._columns:
            col.coalesce()

    # =========================================================================
    # Transpose
    # =========================================================================

    def get_transposed(self) -> 'SparseMatrix':
        """Return a new matrix with ``result[j, i] == self[i, j]``.

        Only stored entries are carried over; the columns of the result
        come out sorted. Cost is O(nnz) and self is not modified.

        Raises:
            DimensionMismatchError: If a stored row index lies outside
                ``[0, num_rows)``.
        """
        result = SparseMatrix(self._num_cols, self._num_rows, dtype=self._dtype)
        targets = result._columns

        for i, col in enumerate(self._columns):
            for entry in col:
                r = entry.row_index
                if r >= self._num_rows:
                    raise DimensionMismatchError(
                        f"column {i} holds row index {r} outside matrix with {self._num_rows} rows",
                        expected=self._num_rows, actual=r + 1,
                    )
                targets[r]._append(i, entry.value)

        logger.debug(f"get_transposed: {self.shape} -> {result.shape}, nnz={result.nnz}")
        return result

    def transpose(self) -> 'SparseMatrix':
        """Alias for get_transposed."""
        return self.get_transposed()

    @property
    def T(self) -> 'SparseMatrix':
        """Transposed copy."""
        return self.get_transposed()

    # =========================================================================
    # Matrix-Vector Products
    # =========================================================================

    @staticmethod
    def _as_vector(vector: Sequence[Any]) -> np.ndarray:
        arr = np.asarray(vector)
        if arr.ndim != 1:
            raise DimensionMismatchError(f"Expected 1D vector, got {arr.ndim}D", expected=1, actual=arr.ndim)
        return arr

    def multiply(self, vector: Sequence[Any]) -> np.ndarray:
        """Dot every column with a dense vector.

        ``result[j] = sum_r self[r, j] * vector[r]``. The result has one
        element per column and the promoted dtype of the matrix and the
        vector (e.g. complex entries with an int vector give complex).

        Args:
            vector: Dense vector of length ``num_rows``.

        Returns:
            Dense numpy array of length ``num_cols``.

        Raises:
            DimensionMismatchError: If ``len(vector) != num_rows``.
        """
        arr = self._as_vector(vector)
        check_dimensions(self._num_rows, len(arr), "multiply: vector length")

        result = np.zeros(self._num_cols, dtype=promote_dtypes(self._dtype, infer_dtype(arr)))
        for j, col in enumerate(self._columns):
            result[j] = col.dense_dot(arr)
        return result

    def matvec(self, vector: Sequence[Any]) -> np.ndarray:
        """Conventional matrix-vector product.

        ``result[i] = sum_j self[i, j] * vector[j]``. Stored entries with
        a row index outside ``[0, num_rows)`` are structural zeros here.

        Args:
            vector: Dense vector of length ``num_cols``.

        Returns:
            Dense numpy array of length ``num_rows``.

        Raises:
            DimensionMismatchError: If ``len(vector) != num_cols``.
        """
        arr = self._as_vector(vector)
        check_dimensions(self._num_cols, len(arr), "matvec: vector length")

        result = np.zeros(self._num_rows, dtype=promote_dtypes(self._dtype, infer_dtype(arr)))
        for j, col in enumerate(self._columns):
            x = arr[j]
            if x == 0:
                continue
            for entry in col:
                if entry.row_index < self._num_rows:
                    result[entry.row_index] += entry.value * x
        return result

    def __mul__(self, vector: Sequence[Any]) -> np.ndarray:
        return self.multiply(vector)

    def __matmul__(self, vector: Sequence[Any]) -> np.ndarray:
        return self.matvec(vector)

    # =========================================================================
    # Conversion
    # =========================================================================

    def to_dense(self) -> np.ndarray:
        """Dense numpy array of shape (num_rows, num_cols).

        Raises:
            DimensionMismatchError: If a stored row index lies outside
                ``[0, num_rows)``.
        """
        dense = np.zeros(self.shape, dtype=as_numpy_dtype(self._dtype))
        for j, col in enumerate(self._columns):
            dense[:, j] = col.to_dense()
        return dense

    def astype(self, dtype: Union[str, DType]) -> 'SparseMatrix':
        """Copy with entries cast to dtype."""
        mat = SparseMatrix(self._num_rows, self._num_cols, dtype=dtype)
        mat._columns = [col.astype(mat._dtype) for col in self._columns]
        return mat

    def copy(self) -> 'SparseMatrix':
        """Create deep copy."""
        return self.astype(self._dtype)

    # =========================================================================
    # LibSVM I/O
    # =========================================================================

    def save(self, stream: IO[str]) -> None:
        """Write this matrix to a text stream in LibSVM format (no labels)."""
        from ..io import save_libsvm
        save_libsvm(stream, self)

    def save_with_labels(self, stream: IO[str], labels: Sequence[Any]) -> None:
        """Write this matrix and one label per column in LibSVM format."""
        from ..io import save_libsvm
        save_libsvm(stream, self, labels)

    def load(self, stream: IO[str], do_sort_features: bool = True) -> 'SparseMatrix':
        """Replace this matrix with one decoded from a LibSVM stream.

        Labels, if present in the stream, are discarded.

        Returns:
            self (for chaining).
        """
        self.load_with_labels(stream, do_sort_features=do_sort_features)
        return self

    def load_with_labels(self, stream: IO[str], do_sort_features: bool = True) -> np.ndarray:
        """Replace this matrix with one decoded from a LibSVM stream.

        Args:
            stream: Text stream opened for reading by the caller.
            do_sort_features: Sort every column after decoding.

        Returns:
            Label vector (length 0 when the stream has no labels).
        """
        from ..io import load_libsvm
        mat, labels = load_libsvm(stream, dtype=self._dtype, do_sort_features=do_sort_features)
        self._num_rows, self._num_cols = mat.shape
        self._columns = mat._columns
        return labels

    # =========================================================================
    # Comparison / Representation
    # =========================================================================

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SparseMatrix):
            return NotImplemented
        return self.shape == other.shape and self._columns == other._columns

    __hash__ = None

    def info(self) -> str:
        """Get detailed information string."""
        lines = [
            f"SparseMatrix:",
            f"  shape: {self.shape}",
            f"  nnz: {self.nnz}",
            f"  dtype: {self.dtype}",
            f"  density: {self.density:.4f}",
            f"  sorted: {self.is_sorted}",
        ]
        return '\n'.join(lines)
