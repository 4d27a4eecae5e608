"""
colsparse - Column-Oriented Sparse Matrices

Sparse matrices stored as one sparse vector per column, with:
- Generic entry types (integer, real, complex) and numeric promotion
- Element access by (row, col), explicit sorting for fast lookup
- Transpose, dense conversion, matrix-vector products
- LibSVM text I/O with optional labels

Modules:
- sparse: SparseEntry, SparseVector, SparseMatrix and interop helpers
- io: LibSVM codec and the LibSVMFile scoped stream

Architecture:
    ┌──────────────────────────────────────────────┐
    │  SparseMatrix  (num_rows, num_cols, dtype)   │
    ├──────────────────────────────────────────────┤
    │  column 0: SparseVector [(row, value), ...]  │
    │  column 1: SparseVector [(row, value), ...]  │
    │  ...                                         │
    └──────────────────────────────────────────────┘

Example:
    >>> import colsparse as cs
    >>>
    >>> mat = cs.SparseMatrix.of_dense([[1, 0, 2], [0, 3, 0]])
    >>> mat[1, 1]
    3
    >>> mat.get_transposed().shape
    (3, 2)
    >>>
    >>> with open("data.svm", "w") as f:
    ...     cs.save_libsvm(f, mat, labels=[1, -1, 1])
"""

import logging

__version__ = '0.1.0'

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Import main modules
from . import sparse
from . import io

from ._config import (
    CodecConfig,
    AccessConfig,
    SparseConfig,
    config,
    get_config,
    set_precision,
)

from ._errors import (
    SparseError,
    DimensionMismatchError,
    IndexOutOfBoundsError,
    TypeMismatchError,
    LibSVMFormatError,
)

from ._dtypes import (
    DType,
    int32,
    int64,
    float32,
    float64,
    complex64,
    complex128,
)

# Re-export common types
from .sparse import (
    SparseEntry,
    SparseVector,
    SparseMatrix,
    hstack,
    from_numpy,
    to_numpy,
    from_scipy,
    to_scipy,
)

from .io import (
    save_libsvm,
    load_libsvm,
    dumps_libsvm,
    loads_libsvm,
    LibSVMFile,
)

__all__ = [
    # Modules
    'sparse',
    'io',

    # Core classes
    'SparseEntry',
    'SparseVector',
    'SparseMatrix',

    # Configuration
    'CodecConfig',
    'AccessConfig',
    'SparseConfig',
    'config',
    'get_config',
    'set_precision',

    # Errors
    'SparseError',
    'DimensionMismatchError',
    'IndexOutOfBoundsError',
    'TypeMismatchError',
    'LibSVMFormatError',

    # Type constants
    'DType',
    'int32',
    'int64',
    'float32',
    'float64',
    'complex64',
    'complex128',

    # Operations
    'hstack',
    'from_numpy',
    'to_numpy',
    'from_scipy',
    'to_scipy',

    # LibSVM
    'save_libsvm',
    'load_libsvm',
    'dumps_libsvm',
    'loads_libsvm',
    'LibSVMFile',
]
