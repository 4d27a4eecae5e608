"""
Data Type Definitions

Provides type-safe dtype constants, validation and numeric promotion
for sparse entries (integer, real and complex).
"""

from typing import Any, Union
from enum import Enum

import numpy as np

from ._errors import TypeMismatchError

__all__ = [
    'DType',
    'int32', 'int64', 'float32', 'float64', 'complex64', 'complex128',
    'normalize_dtype', 'validate_dtype', 'as_numpy_dtype', 'infer_dtype',
    'promote_dtypes', 'zero_of', 'cast_scalar',
    'is_int_dtype', 'is_float_dtype', 'is_complex_dtype',
]


class DType(Enum):
    """
    Entry Data Type Enumeration.

    Provides type-safe constants for matrix creation.

    Example:
        >>> from colsparse import DType, SparseMatrix
        >>> mat = SparseMatrix(10, 10, dtype=DType.complex128)
        >>>
        >>> # Or use module-level constants
        >>> import colsparse as cs
        >>> mat = SparseMatrix(10, 10, dtype=cs.int32)
    """

    int32 = 'int32'
    int64 = 'int64'
    float32 = 'float32'
    float64 = 'float64'
    complex64 = 'complex64'
    complex128 = 'complex128'

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"DType.{self.name}"


# =============================================================================
# Module-Level Constants (For Clean Syntax)
# =============================================================================

int32 = DType.int32
int64 = DType.int64
float32 = DType.float32
float64 = DType.float64
complex64 = DType.complex64
complex128 = DType.complex128


_VALID = {e.value for e in DType}


# =============================================================================
# Type Utilities
# =============================================================================

def normalize_dtype(dtype: Union[str, DType, type, np.dtype]) -> str:
    """
    Normalize dtype to string.

    Accepts DType members, strings, numpy dtypes and Python scalar
    types (``int``, ``float``, ``complex``).

    Args:
        dtype: Dtype-like object

    Returns:
        String dtype

    Raises:
        TypeMismatchError: If dtype is not supported

    Example:
        >>> normalize_dtype(DType.float32)
        'float32'
        >>> normalize_dtype(complex)
        'complex128'
    """
    if isinstance(dtype, DType):
        return dtype.value
    if isinstance(dtype, str) and dtype in _VALID:
        return dtype
    try:
        name = np.dtype(dtype).name
    except TypeError:
        raise TypeMismatchError(f"dtype must be str, DType or numpy dtype, got {type(dtype)}")
    if name not in _VALID:
        raise TypeMismatchError(f"Invalid dtype: {name}. Valid: {sorted(_VALID)}")
    return name


def validate_dtype(dtype: str) -> None:
    """
    Validate dtype string.

    Args:
        dtype: Data type string

    Raises:
        TypeMismatchError: If dtype is not supported
    """
    if dtype not in _VALID:
        raise TypeMismatchError(f"Invalid dtype: {dtype}. Valid: {sorted(_VALID)}")


def as_numpy_dtype(dtype: Union[str, DType]) -> np.dtype:
    """Get numpy dtype equivalent."""
    return np.dtype(normalize_dtype(dtype))


def infer_dtype(values: Any) -> str:
    """
    Infer the entry dtype for a dense operand or scalar.

    Booleans are widened to int64; unsigned and narrow integer types to
    int64 as well so that every inferred dtype is a supported one.
    """
    kind = np.asarray(values).dtype
    if kind.kind == 'c':
        return 'complex64' if kind == np.complex64 else 'complex128'
    if kind.kind == 'f':
        return 'float32' if kind == np.float32 else 'float64'
    if kind.kind in 'biu':
        return 'int32' if kind == np.int32 else 'int64'
    raise TypeMismatchError(f"Cannot infer numeric dtype from {kind}")


def promote_dtypes(left: Union[str, DType, np.dtype], right: Union[str, DType, np.dtype]) -> str:
    """
    Result dtype of multiplying/adding values of two dtypes.

    Example:
        >>> promote_dtypes('complex128', 'int32')
        'complex128'
        >>> promote_dtypes('int32', 'float64')
        'float64'
    """
    result = np.result_type(np.dtype(normalize_dtype(left)), np.dtype(normalize_dtype(right)))
    return normalize_dtype(result)


def zero_of(dtype: Union[str, DType]) -> Any:
    """Additive identity for dtype."""
    return as_numpy_dtype(dtype).type(0)


def cast_scalar(value: Any, dtype: Union[str, DType]) -> Any:
    """
    Cast value to the numpy scalar type of dtype.

    Raises:
        TypeMismatchError: If a complex value would lose its imaginary part
        OverflowError: If value lies outside an integer dtype's range
    """
    np_dtype = as_numpy_dtype(dtype)
    if np_dtype.kind != 'c' and np.iscomplexobj(value) and np.imag(value) != 0:
        raise TypeMismatchError(f"Cannot store complex value {value!r} in {np_dtype.name} matrix")
    if np_dtype.kind != 'c' and np.iscomplexobj(value):
        value = np.real(value)
    if np_dtype.kind == 'i':
        info = np.iinfo(np_dtype)
        if not info.min <= value <= info.max:
            raise OverflowError(f"{value!r} out of bounds for {np_dtype.name}")
    return np_dtype.type(value)


def is_int_dtype(dtype: Union[str, DType]) -> bool:
    """Check if dtype is integer."""
    return normalize_dtype(dtype) in ('int32', 'int64')


def is_float_dtype(dtype: Union[str, DType]) -> bool:
    """Check if dtype is floating point."""
    return normalize_dtype(dtype) in ('float32', 'float64')


def is_complex_dtype(dtype: Union[str, DType]) -> bool:
    """Check if dtype is complex."""
    return normalize_dtype(dtype) in ('complex64', 'complex128')
