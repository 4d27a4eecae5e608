"""colsparse I/O Module.

Text codecs for sparse matrices. Currently the LibSVM sparse data
format (one column per line, optional leading label).
"""

from ._libsvm import (
    save_libsvm,
    load_libsvm,
    dumps_libsvm,
    loads_libsvm,
    LibSVMFile,
)

__all__ = [
    'save_libsvm',
    'load_libsvm',
    'dumps_libsvm',
    'loads_libsvm',
    'LibSVMFile',
]
