"""Sparse vector entry: a (row_index, value) pair."""

from dataclasses import dataclass
from typing import Any, Iterator, Tuple

__all__ = ['SparseEntry']


@dataclass
class SparseEntry:
    """One stored element of a sparse column.

    Attributes:
        row_index: Non-negative row (feature) index.
        value: Entry value, a numpy scalar of the owning vector's dtype.
    """

    __slots__ = ('row_index', 'value')

    row_index: int
    value: Any

    def as_tuple(self) -> Tuple[int, Any]:
        return self.row_index, self.value

    def __iter__(self) -> Iterator[Any]:
        yield self.row_index
        yield self.value
