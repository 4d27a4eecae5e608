"""LibSVM sparse text format.

Each line holds one column ("vector") of a SparseMatrix, optionally
preceded by its label:

    [<label><delim>]<row_1based>:<value><delim><row_1based>:<value>...

Row indices are 1-based on disk and 0-based in memory. There is no
header and no trailing metadata; numbers use a locale-independent
decimal point.

Stream ownership:
    ``save_libsvm`` / ``load_libsvm`` only format and parse. They never
    open, seek or close the stream they are handed; the caller acquires
    it (``open(...)``, ``LibSVMFile(...)``, ``io.StringIO``) and releases
    it, ideally with a ``with`` block so that it is closed on every exit
    path.

Precision:
    Floating values are written with ``config.codec.float_precision``
    significant digits (17 by default), which reproduces IEEE doubles
    exactly on reading.

Example:
    >>> with open("data.svm", "w") as f:
    ...     save_libsvm(f, matrix, labels)
    >>> with LibSVMFile("data.svm", "r") as f:
    ...     matrix, labels = f.get_sparse_matrix()
"""

import io
import logging
import re
from typing import Any, IO, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .._config import config
from .._dtypes import DType, normalize_dtype, is_int_dtype, is_complex_dtype, zero_of, cast_scalar
from .._errors import LibSVMFormatError, TypeMismatchError, check_dimensions, DimensionMismatchError
from ..sparse import SparseMatrix, SparseVector

__all__ = [
    'save_libsvm',
    'load_libsvm',
    'dumps_libsvm',
    'loads_libsvm',
    'LibSVMFile',
]

logger = logging.getLogger("colsparse.io.libsvm")

_INDEX_RE = re.compile(r"[+-]?[0-9]+")

# Conversion failures reported as malformed fields
_FIELD_ERRORS = (ValueError, OverflowError, TypeMismatchError)


# =============================================================================
# Value Formatting / Parsing
# =============================================================================

def _format_value(value: Any, precision: int) -> str:
    """Render one scalar as a LibSVM field."""
    if np.iscomplexobj(value):
        return f"{float(np.real(value)):.{precision}g}{float(np.imag(value)):+.{precision}g}j"
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    return f"{float(value):.{precision}g}"


def _parse_value(text: str, dtype: str) -> Any:
    """Parse one scalar field into the numpy scalar type of dtype.

    Python-only literal syntax (digit separators, non-ASCII digits) is
    rejected with ValueError; values outside the dtype's range raise
    OverflowError.
    """
    if "_" in text or not text.isascii():
        raise ValueError(f"not a plain decimal number: {text!r}")
    return cast_scalar(_parse_number(text, dtype), dtype)


def _parse_number(text: str, dtype: str) -> Union[int, float, complex]:
    if is_complex_dtype(dtype):
        return complex(text)
    if is_int_dtype(dtype):
        try:
            return int(text)
        except ValueError:
            number = float(text)
            if not number.is_integer():
                raise
            return int(number)
    return float(text)


def _source_name(stream: Any) -> str:
    name = getattr(stream, 'name', None)
    return str(name) if name is not None else "<stream>"


def _tokenize(line: str, delimiter: str) -> List[str]:
    if delimiter.strip() == "":
        return line.split()
    return [tok.strip() for tok in line.split(delimiter) if tok.strip()]


# =============================================================================
# Encoding
# =============================================================================

def save_libsvm(
    stream: IO[str],
    matrix: SparseMatrix,
    labels: Optional[Sequence[Any]] = None,
    *,
    delimiter: Optional[str] = None,
    precision: Optional[int] = None,
) -> int:
    """Write matrix (and labels) to a text stream, one line per column.

    Entries are written in stored order and stored zeros are skipped.
    Call ``matrix.sort_features()`` first for canonical ascending output.

    Args:
        stream: Text stream opened for writing by the caller.
        matrix: Matrix to encode.
        labels: Optional label per column, written as the first field.
        delimiter: Field separator (default ``config.codec.delimiter``).
        precision: Significant digits for floats
            (default ``config.codec.float_precision``).

    Returns:
        Number of lines written.

    Raises:
        DimensionMismatchError: If labels is not 1D of length ``num_cols``.
    """
    codec = config.codec
    delimiter = codec.delimiter if delimiter is None else delimiter
    precision = codec.float_precision if precision is None else precision

    if labels is not None:
        labels = np.asarray(labels)
        if labels.ndim != 1:
            raise DimensionMismatchError(
                f"labels must be 1D, got {labels.ndim}D", expected=1, actual=labels.ndim,
            )
        check_dimensions(matrix.num_cols, len(labels), "save_libsvm: number of labels")

    if not matrix.is_sorted:
        logger.warning(
            "Saving a matrix with unsorted columns; entries are written in stored order. "
            "Call sort_features() for canonical output."
        )

    zero = zero_of(matrix.dtype)
    for j, col in enumerate(matrix):
        parts = []
        if labels is not None:
            parts.append(_format_value(labels[j], precision))
        for entry in col:
            if entry.value == zero:
                continue
            parts.append(f"{entry.row_index + 1}:{_format_value(entry.value, precision)}")
        stream.write(delimiter.join(parts))
        stream.write("\n")

    logger.debug(
        f"save_libsvm: {_source_name(stream)}: {matrix.num_cols} vectors, "
        f"{matrix.num_rows} features, labels={labels is not None}"
    )
    return matrix.num_cols


def dumps_libsvm(matrix: SparseMatrix, labels: Optional[Sequence[Any]] = None, **kwargs) -> str:
    """Encode to a LibSVM string (see ``save_libsvm``)."""
    buf = io.StringIO()
    save_libsvm(buf, matrix, labels, **kwargs)
    return buf.getvalue()


# =============================================================================
# Decoding
# =============================================================================

def load_libsvm(
    stream: Iterable[str],
    num_rows: Optional[int] = None,
    dtype: Optional[Union[str, DType]] = None,
    do_sort_features: Optional[bool] = None,
    *,
    delimiter: Optional[str] = None,
) -> Tuple[SparseMatrix, np.ndarray]:
    """Read a matrix (and labels) from a LibSVM text stream.

    Every line becomes one column; an empty line is an all-zero column.
    The first line decides whether the stream carries labels (first field
    without ``:``) and every other line must agree. Stored zeros are not
    kept as entries.

    Args:
        stream: Text stream (or any iterable of lines) opened by the caller.
        num_rows: Number of features. Inferred as the largest row index
            + 1 when omitted.
        dtype: Entry dtype (default float64).
        do_sort_features: Sort columns after reading
            (default ``config.codec.sort_on_load``).
        delimiter: Field separator (default ``config.codec.delimiter``);
            a whitespace delimiter splits on any run of whitespace.

    Returns:
        Tuple of (matrix, labels). labels has length 0 when the stream
        has no labels.

    Raises:
        LibSVMFormatError: On a malformed line, with the stream name,
            line number and content.
    """
    codec = config.codec
    delimiter = codec.delimiter if delimiter is None else delimiter
    do_sort_features = codec.sort_on_load if do_sort_features is None else do_sort_features
    dtype = normalize_dtype(dtype) if dtype is not None else 'float64'
    source = _source_name(stream)

    columns: List[List[Tuple[int, Any]]] = []
    labels: List[Any] = []
    has_labels: Optional[bool] = None
    max_row = -1

    for line_number, raw in enumerate(stream, start=1):
        line = raw.rstrip("\r\n")
        tokens = _tokenize(line, delimiter)

        line_has_label = bool(tokens) and ':' not in tokens[0]
        if has_labels is None:
            has_labels = line_has_label
        elif line_has_label != has_labels:
            reason = "unexpected label" if line_has_label else "missing label"
            raise LibSVMFormatError(reason, source, line_number, line)

        if line_has_label:
            try:
                labels.append(_parse_value(tokens[0], codec.label_dtype))
            except _FIELD_ERRORS:
                raise LibSVMFormatError(f"invalid label {tokens[0]!r}", source, line_number, line) from None
            tokens = tokens[1:]

        entries: List[Tuple[int, Any]] = []
        for tok in tokens:
            idx_s, sep, val_s = tok.partition(':')
            if not sep:
                raise LibSVMFormatError(f"missing ':' in token {tok!r}", source, line_number, line)
            if not _INDEX_RE.fullmatch(idx_s):
                raise LibSVMFormatError(f"non-integer index in token {tok!r}", source, line_number, line)
            row = int(idx_s) - 1
            if row < 0:
                raise LibSVMFormatError(f"index must be >= 1 in token {tok!r}", source, line_number, line)
            if num_rows is not None and row >= num_rows:
                raise LibSVMFormatError(
                    f"index {row + 1} exceeds {num_rows} features", source, line_number, line,
                )
            try:
                value = _parse_value(val_s, dtype)
            except _FIELD_ERRORS:
                raise LibSVMFormatError(f"non-numeric value in token {tok!r}", source, line_number, line) from None

            max_row = max(max_row, row)
            if value != 0:
                entries.append((row, value))
        columns.append(entries)

    if num_rows is None:
        num_rows = max_row + 1

    matrix = SparseMatrix(num_rows, len(columns), dtype=dtype)
    for j, entries in enumerate(columns):
        matrix.set_column(j, SparseVector(num_rows, entries, dtype=dtype))
    if do_sort_features:
        matrix.sort_features()

    label_array = np.array(labels if has_labels else [], dtype=codec.label_dtype)

    logger.debug(
        f"load_libsvm: {source}: {matrix.num_cols} vectors, {matrix.num_rows} features, "
        f"nnz={matrix.nnz}, labels={bool(has_labels)}"
    )
    return matrix, label_array


def loads_libsvm(text: str, **kwargs) -> Tuple[SparseMatrix, np.ndarray]:
    """Decode a LibSVM string (see ``load_libsvm``)."""
    return load_libsvm(io.StringIO(text), **kwargs)


# =============================================================================
# Scoped File Resource
# =============================================================================

class LibSVMFile:
    """A LibSVM file opened for reading ('r') or writing ('w').

    The file is opened on construction and closed by ``close()`` or on
    leaving a ``with`` block, whether the body succeeds or raises. The
    object is itself a text stream (``write``, iteration, ``name``), so it
    can be handed to ``save_libsvm`` / ``load_libsvm`` or to
    ``SparseMatrix.save_with_labels`` / ``load_with_labels``.

    Example:
        >>> with LibSVMFile("out.svm", "w") as f:
        ...     matrix.save_with_labels(f, labels)
        >>> with LibSVMFile("out.svm", "r") as f:
        ...     loaded = SparseMatrix()
        ...     labels = loaded.load_with_labels(f)
    """

    __slots__ = ('_path', '_mode', '_stream')

    def __init__(self, path: Any, mode: str = 'r', encoding: str = 'utf-8'):
        if mode not in ('r', 'w'):
            raise ValueError(f"mode must be 'r' or 'w', got {mode!r}")
        self._path = path
        self._mode = mode
        self._stream = open(path, mode, encoding=encoding)

    @property
    def name(self) -> str:
        return str(self._path)

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def closed(self) -> bool:
        return self._stream.closed

    # -------------------------------------------------------------------------
    # Stream protocol
    # -------------------------------------------------------------------------

    def write(self, text: str) -> int:
        return self._stream.write(text)

    def __iter__(self):
        return iter(self._stream)

    def close(self) -> None:
        self._stream.close()

    def __enter__(self) -> 'LibSVMFile':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # -------------------------------------------------------------------------
    # Matrix I/O
    # -------------------------------------------------------------------------

    def get_sparse_matrix(
        self,
        num_rows: Optional[int] = None,
        dtype: Optional[Union[str, DType]] = None,
        do_sort_features: Optional[bool] = None,
    ) -> Tuple[SparseMatrix, np.ndarray]:
        """Read the whole file; see ``load_libsvm``."""
        return load_libsvm(self, num_rows=num_rows, dtype=dtype, do_sort_features=do_sort_features)

    def set_sparse_matrix(self, matrix: SparseMatrix, labels: Optional[Sequence[Any]] = None) -> int:
        """Write matrix and optional labels; see ``save_libsvm``."""
        return save_libsvm(self, matrix, labels)

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"LibSVMFile({self.name!r}, mode={self._mode!r}, {state})"
