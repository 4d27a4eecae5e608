"""Sparse Vector (one matrix column).

A SparseVector stores an ordered list of (row_index, value) entries plus
the nominal length of the dimension it indexes into.

Ordering:
    Entries keep insertion order. Lookups scan linearly until the vector
    is known to be sorted by row index, after which they bisect. ``assign``
    never re-sorts; call ``sort()`` explicitly when fast lookup matters.

Row-index validity:
    ``0 <= row_index < num_rows`` is a logical invariant that is not
    checked on assignment. Operations that materialize dense data
    (``to_dense``) report violations; dot products treat rows beyond the
    operand's length as structural zeros.

Example:
    >>> vec = SparseVector(5, [(3, 1.5), (0, 2.0)])
    >>> vec[3]
    1.5
    >>> vec[1]
    0.0
    >>> vec.sort()
    >>> vec.indices
    array([0, 3])
"""

from bisect import bisect_left
from operator import attrgetter
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from .._config import config
from .._dtypes import (
    DType, normalize_dtype, infer_dtype, promote_dtypes, zero_of, cast_scalar,
    as_numpy_dtype,
)
from .._errors import (
    DimensionMismatchError, IndexOutOfBoundsError, check_dimensions,
)
from ._entry import SparseEntry

__all__ = ['SparseVector']


_row_key = attrgetter('row_index')

EntryLike = Union[SparseEntry, Tuple[int, Any]]


class SparseVector:
    """Sparse column: entries plus nominal length.

    Attributes:
        num_rows: Length of the dimension indexed by the entries.
        dtype: Entry dtype string.
        nnz: Number of stored entries.
        is_sorted: Whether entries are known to be in ascending row order.

    Example:
        >>> vec = SparseVector(10, dtype='complex128')
        >>> vec[4] = 1 + 2j
        >>> vec.nnz
        1
    """

    __slots__ = ('_entries', '_num_rows', '_dtype', '_sorted')

    def __init__(
        self,
        num_rows: int = 0,
        entries: Optional[Iterable[EntryLike]] = None,
        dtype: Union[str, DType] = 'float64',
    ):
        """Initialize vector.

        Args:
            num_rows: Length of the indexed dimension. Zero means unsized;
                an unsized vector placed into a matrix takes the matrix's
                row count.
            entries: Initial entries as SparseEntry or (row, value) pairs,
                stored in the given order.
            dtype: Entry dtype.
        """
        if num_rows < 0:
            raise ValueError(f"num_rows must be non-negative, got {num_rows}")

        self._num_rows = int(num_rows)
        self._dtype = normalize_dtype(dtype)
        self._entries: List[SparseEntry] = []
        self._sorted = True

        if entries is not None:
            for item in entries:
                row, value = item
                self._append(self._check_row(row), cast_scalar(value, self._dtype))

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def num_rows(self) -> int:
        """Length of the indexed dimension."""
        return self._num_rows

    @property
    def dtype(self) -> str:
        """Data type string."""
        return self._dtype

    @property
    def nnz(self) -> int:
        """Number of stored entries."""
        return len(self._entries)

    @property
    def is_sorted(self) -> bool:
        """Whether entries are known to be in ascending row order."""
        return self._sorted

    @property
    def entries(self) -> Tuple[SparseEntry, ...]:
        """Stored entries in storage order.

        These are the live entry objects, as is iteration over the vector.
        Changing an entry's ``row_index`` invalidates ``is_sorted``; call
        ``sort()`` afterwards or lookups may miss entries.
        """
        return tuple(self._entries)

    @property
    def indices(self) -> np.ndarray:
        """Row indices in storage order."""
        return np.fromiter((e.row_index for e in self._entries), dtype=np.int64, count=len(self._entries))

    @property
    def values(self) -> np.ndarray:
        """Values in storage order."""
        return np.array([e.value for e in self._entries], dtype=as_numpy_dtype(self._dtype))

    # =========================================================================
    # Factory Methods
    # =========================================================================

    @classmethod
    def from_dense(cls, dense: Sequence[Any], dtype: Optional[Union[str, DType]] = None) -> 'SparseVector':
        """Create from a dense 1-D sequence, skipping exact zeros.

        Args:
            dense: 1-D array-like.
            dtype: Entry dtype (inferred from dense if omitted).

        Returns:
            Sorted SparseVector of length ``len(dense)``.
        """
        arr = np.asarray(dense)
        if arr.ndim != 1:
            raise DimensionMismatchError(f"Expected 1D array, got {arr.ndim}D", expected=1, actual=arr.ndim)
        dtype = normalize_dtype(dtype) if dtype is not None else infer_dtype(arr)
        zero = zero_of(dtype)
        vec = cls(len(arr), dtype=dtype)
        for i, val in enumerate(arr):
            if val != zero:
                vec._entries.append(SparseEntry(i, cast_scalar(val, dtype)))
        return vec

    # =========================================================================
    # Element Access
    # =========================================================================

    @staticmethod
    def _check_row(row_index: Any) -> int:
        row = int(row_index)
        if row < 0:
            raise IndexOutOfBoundsError(f"row index {row} is negative")
        return row

    def _find(self, row: int) -> int:
        """Position of the first entry with ``row``, or -1."""
        if self._sorted and config.binary_search:
            pos = bisect_left(self._entries, row, key=_row_key)
            if pos < len(self._entries) and self._entries[pos].row_index == row:
                return pos
            return -1

        for pos, entry in enumerate(self._entries):
            if entry.row_index == row:
                return pos
        return -1

    def _append(self, row: int, value: Any) -> None:
        if self._entries and row < self._entries[-1].row_index:
            self._sorted = False
        self._entries.append(SparseEntry(row, value))

    def access(self, row_index: int) -> Any:
        """Value at row_index, or zero when no entry is stored.

        Args:
            row_index: Non-negative row index. Indices at or beyond
                ``num_rows`` are structural zeros, not errors.

        Raises:
            IndexOutOfBoundsError: If row_index is negative.
        """
        pos = self._find(self._check_row(row_index))
        if pos < 0:
            return zero_of(self._dtype)
        return self._entries[pos].value

    def assign(self, row_index: int, value: Any) -> None:
        """Overwrite the entry at row_index or append a new one.

        Does not re-sort; appending an index smaller than the last stored
        one clears ``is_sorted``.
        """
        row = self._check_row(row_index)
        value = cast_scalar(value, self._dtype)
        pos = self._find(row)
        if pos >= 0:
            self._entries[pos].value = value
        else:
            self._append(row, value)

    def __getitem__(self, row_index: int) -> Any:
        return self.access(row_index)

    def __setitem__(self, row_index: int, value: Any) -> None:
        self.assign(row_index, value)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SparseEntry]:
        return iter(self._entries)

    # =========================================================================
    # Ordering
    # =========================================================================

    def sort(self) -> None:
        """Sort entries ascending by row index.

        The sort is stable: entries sharing a row index keep their
        relative order and are not merged. Entries are always re-sorted,
        so this also repairs the order after entries were edited in place.
        """
        self._entries.sort(key=_row_key)
        self._sorted = True

    def coalesce(self) -> None:
        """Sort, sum entries sharing a row index, and drop explicit zeros."""
        self.sort()
        zero = zero_of(self._dtype)
        merged: List[SparseEntry] = []
        for entry in self._entries:
            if merged and merged[-1].row_index == entry.row_index:
                merged[-1].value = cast_scalar(merged[-1].value + entry.value, self._dtype)
            else:
                merged.append(SparseEntry(entry.row_index, entry.value))
        self._entries = [e for e in merged if e.value != zero]

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def dense_dot(self, vector: Sequence[Any]) -> Any:
        """Dot product with a dense vector.

        Entries whose row index is at or beyond ``len(vector)`` do not
        contribute.

        Returns:
            Scalar of the promoted dtype of this vector and the operand.
        """
        arr = np.asarray(vector)
        result_type = as_numpy_dtype(promote_dtypes(self._dtype, infer_dtype(arr)))
        n = len(arr)
        total = result_type.type(0)
        for entry in self._entries:
            if entry.row_index < n:
                total += entry.value * arr[entry.row_index]
        return result_type.type(total)

    def sparse_dot(self, other: 'SparseVector') -> Any:
        """Dot product with another sparse vector of the same length."""
        check_dimensions(self._num_rows, other.num_rows, "sparse_dot length")
        result_type = as_numpy_dtype(promote_dtypes(self._dtype, other.dtype))

        small, large = (self, other) if self.nnz <= other.nnz else (other, self)
        lookup = {}
        for entry in small:
            lookup[entry.row_index] = lookup.get(entry.row_index, 0) + entry.value

        total = result_type.type(0)
        for entry in large:
            match = lookup.get(entry.row_index)
            if match is not None:
                total += match * entry.value
        return result_type.type(total)

    # =========================================================================
    # Conversion
    # =========================================================================

    def to_dense(self) -> np.ndarray:
        """Dense 1-D array of length ``num_rows``.

        Raises:
            DimensionMismatchError: If an entry lies outside ``[0, num_rows)``.
        """
        dense = np.zeros(self._num_rows, dtype=as_numpy_dtype(self._dtype))
        for entry in self._entries:
            if entry.row_index >= self._num_rows:
                raise DimensionMismatchError(
                    f"entry row index {entry.row_index} outside vector of length {self._num_rows}",
                    expected=self._num_rows, actual=entry.row_index + 1,
                )
            dense[entry.row_index] = entry.value
        return dense

    def astype(self, dtype: Union[str, DType]) -> 'SparseVector':
        """Copy with values cast to dtype."""
        vec = SparseVector(self._num_rows, dtype=dtype)
        vec._entries = [SparseEntry(e.row_index, cast_scalar(e.value, vec._dtype)) for e in self._entries]
        vec._sorted = self._sorted
        return vec

    def copy(self) -> 'SparseVector':
        """Create deep copy."""
        return self.astype(self._dtype)

    def _set_num_rows(self, num_rows: int) -> None:
        """Size an unsized vector; sized vectors keep their length."""
        if self._num_rows != 0 and self._num_rows != num_rows:
            raise DimensionMismatchError(
                f"vector of length {self._num_rows} cannot be resized to {num_rows}",
                expected=num_rows, actual=self._num_rows,
            )
        self._num_rows = num_rows

    # =========================================================================
    # Comparison / Representation
    # =========================================================================

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SparseVector):
            return NotImplemented
        if self._num_rows != other._num_rows or len(self._entries) != len(other._entries):
            return False
        return all(
            a.row_index == b.row_index and a.value == b.value
            for a, b in zip(self._entries, other._entries)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"SparseVector(num_rows={self._num_rows}, nnz={self.nnz}, "
            f"dtype={self._dtype}, sorted={self._sorted})"
        )
