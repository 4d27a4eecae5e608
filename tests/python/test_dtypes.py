"""
Tests for dtype system.
"""

import numpy as np
import pytest

from colsparse import TypeMismatchError
from colsparse._dtypes import (
    DType,
    normalize_dtype,
    validate_dtype,
    infer_dtype,
    promote_dtypes,
    zero_of,
    cast_scalar,
    is_int_dtype,
    is_float_dtype,
    is_complex_dtype,
    float64,
    complex128,
)


class TestNormalizeDType:
    """Test dtype normalization."""

    def test_normalize_string(self):
        """Test normalizing string dtype."""
        assert normalize_dtype('float32') == 'float32'
        assert normalize_dtype('int64') == 'int64'
        assert normalize_dtype('complex128') == 'complex128'

    def test_normalize_dtype_enum(self):
        """Test normalizing DType enum."""
        assert normalize_dtype(float64) == 'float64'
        assert normalize_dtype(DType.complex64) == 'complex64'

    def test_normalize_python_and_numpy_types(self):
        """Test normalizing Python scalar types and numpy dtypes."""
        assert normalize_dtype(float) == 'float64'
        assert normalize_dtype(complex) == 'complex128'
        assert normalize_dtype(np.int32) == 'int32'
        assert normalize_dtype(np.dtype('float32')) == 'float32'

    def test_normalize_unsupported(self):
        """Test unsupported dtypes raise TypeMismatchError."""
        with pytest.raises(TypeMismatchError):
            normalize_dtype('uint8')
        with pytest.raises(TypeError):
            normalize_dtype(object)


class TestValidateDType:
    """Test dtype validation."""

    def test_validate_valid_dtypes(self):
        """Test validating valid dtypes."""
        for dtype in ['int32', 'int64', 'float32', 'float64', 'complex64', 'complex128']:
            validate_dtype(dtype)

    def test_validate_invalid_dtype(self):
        """Test validating invalid dtype."""
        with pytest.raises(TypeMismatchError):
            validate_dtype('float16')


class TestPromotion:
    """Test inference and promotion rules."""

    def test_infer(self):
        assert infer_dtype([1, 2, 3]) == 'int64'
        assert infer_dtype([1.0, 2.0]) == 'float64'
        assert infer_dtype([1 + 2j]) == 'complex128'
        assert infer_dtype(np.array([True, False])) == 'int64'
        assert infer_dtype(np.zeros(3, dtype=np.float32)) == 'float32'

    def test_promote(self):
        assert promote_dtypes('float64', 'int32') == 'float64'
        assert promote_dtypes('complex128', 'int32') == 'complex128'
        assert promote_dtypes('int32', complex128) == 'complex128'
        assert promote_dtypes('int32', 'int64') == 'int64'

    def test_zero_of(self):
        assert zero_of('int32') == 0
        assert isinstance(zero_of('complex128'), np.complex128)

    def test_cast_scalar(self):
        assert cast_scalar(3, 'float64') == 3.0
        assert cast_scalar(2.0 + 0j, 'float64') == 2.0
        with pytest.raises(TypeMismatchError):
            cast_scalar(1 + 1j, 'float64')
        with pytest.raises(OverflowError):
            cast_scalar(3000000000, 'int32')
        assert cast_scalar(3000000000, 'int64') == 3000000000

    def test_kind_predicates(self):
        assert is_int_dtype('int32')
        assert is_float_dtype(float64)
        assert is_complex_dtype('complex64')
        assert not is_complex_dtype('float32')
