"""
Error handling for colsparse.

Errors carry a numeric code grouped by category, and every concrete
error also derives from the matching builtin exception so callers can
catch either ``SparseError`` or e.g. ``IndexError``.
"""

from __future__ import annotations

from typing import Any, Optional


# =============================================================================
# Error Codes
# =============================================================================

# Success
SPARSE_OK = 0

# General errors (1-9)
SPARSE_ERROR_UNKNOWN = 1

# Argument errors (10-19)
SPARSE_ERROR_INVALID_ARGUMENT = 10
SPARSE_ERROR_DIMENSION_MISMATCH = 11
SPARSE_ERROR_INDEX_OUT_OF_BOUNDS = 14

# Type errors (20-29)
SPARSE_ERROR_TYPE_MISMATCH = 21

# I/O errors (30-39)
SPARSE_ERROR_FORMAT_ERROR = 33


_ERROR_MESSAGES = {
    SPARSE_OK: "Success",
    SPARSE_ERROR_UNKNOWN: "Unknown error",
    SPARSE_ERROR_INVALID_ARGUMENT: "Invalid argument",
    SPARSE_ERROR_DIMENSION_MISMATCH: "Dimension mismatch",
    SPARSE_ERROR_INDEX_OUT_OF_BOUNDS: "Index out of bounds",
    SPARSE_ERROR_TYPE_MISMATCH: "Type mismatch",
    SPARSE_ERROR_FORMAT_ERROR: "Format error",
}


# =============================================================================
# Exception Classes
# =============================================================================

class SparseError(Exception):
    """
    Base exception for all colsparse errors.
    """

    code = SPARSE_ERROR_UNKNOWN

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        """
        Create exception.

        Args:
            message: Detailed message (defaults to the code's description)
            code: Error code, defaults to the class code
        """
        if code is not None:
            self.code = code
        if message is None:
            message = _ERROR_MESSAGES.get(self.code, f"Unknown error (code={self.code})")
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"{_ERROR_MESSAGES.get(self.code, 'Error')} [{self.code}]: {self.message}"


class DimensionMismatchError(SparseError, ValueError):
    """Operand sizes disagree, or internal dimensions are inconsistent."""

    code = SPARSE_ERROR_DIMENSION_MISMATCH

    def __init__(self, message: Optional[str] = None, expected: Any = None, actual: Any = None):
        self.expected = expected
        self.actual = actual
        super().__init__(message)


class IndexOutOfBoundsError(SparseError, IndexError):
    """Column index outside ``[0, num_cols)`` or a negative row index."""

    code = SPARSE_ERROR_INDEX_OUT_OF_BOUNDS


class TypeMismatchError(SparseError, TypeError):
    """Unsupported or incompatible entry dtype."""

    code = SPARSE_ERROR_TYPE_MISMATCH


class LibSVMFormatError(SparseError, ValueError):
    """
    Malformed LibSVM record.

    Attributes:
        source: Name of the stream (file path or ``"<stream>"``)
        line_number: 1-based line number of the bad record
        line: Offending line content
    """

    code = SPARSE_ERROR_FORMAT_ERROR

    def __init__(self, reason: str, source: str = "<stream>",
                 line_number: Optional[int] = None, line: Optional[str] = None):
        self.reason = reason
        self.source = source
        self.line_number = line_number
        self.line = line
        if line_number is None:
            message = f"{source}: {reason}"
        else:
            message = f"{source}:{line_number}: {reason} in line {line!r}"
        super().__init__(message)


# =============================================================================
# Error Checking Functions
# =============================================================================

def check_dimensions(expected: int, actual: int, context: str = "") -> None:
    """
    Raise if two sizes disagree.

    Args:
        expected: Required size
        actual: Provided size
        context: Optional context message for better error reporting

    Raises:
        DimensionMismatchError: If sizes differ
    """
    if expected == actual:
        return
    msg = f"expected {expected}, got {actual}"
    if context:
        msg = f"{context}: {msg}"
    raise DimensionMismatchError(msg, expected=expected, actual=actual)


def check_index(index: int, bound: int, what: str = "index") -> int:
    """
    Validate ``0 <= index < bound`` and return index as ``int``.

    Raises:
        IndexOutOfBoundsError: If index is outside the range
    """
    index = int(index)
    if index < 0 or index >= bound:
        raise IndexOutOfBoundsError(f"{what} {index} out of bounds [0, {bound})")
    return index


__all__ = [
    'SPARSE_OK',
    'SPARSE_ERROR_UNKNOWN',
    'SPARSE_ERROR_INVALID_ARGUMENT',
    'SPARSE_ERROR_DIMENSION_MISMATCH',
    'SPARSE_ERROR_INDEX_OUT_OF_BOUNDS',
    'SPARSE_ERROR_TYPE_MISMATCH',
    'SPARSE_ERROR_FORMAT_ERROR',
    'SparseError',
    'DimensionMismatchError',
    'IndexOutOfBoundsError',
    'TypeMismatchError',
    'LibSVMFormatError',
    'check_dimensions',
    'check_index',
]
