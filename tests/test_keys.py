import numpy as np
import pytest
from unimat import (
    CipherKey, Matrix, KeyFormatError, RATIONAL,
    generate_key, key_decimals, FLOAT_KEY, INTEGER_KEY, GENERAL_KEY,
)

def test_key_decimals():
    assert key_decimals(1) == 1
    assert key_decimals(4) == 1
    assert key_decimals(10) == 2
    assert key_decimals(99) == 2
    assert key_decimals(100) == 3

@pytest.mark.parametrize("n", [1, 2, 4, 10, 16])
def test_generated_key_shape_and_unit_diagonal(rng, n):
    key = generate_key(n, rng=rng)
    assert key.kind == FLOAT_KEY
    assert key.matrix.shape == (n, n)
    assert key.has_unit_diagonal()
    off = key.matrix.data[~np.eye(n, dtype=bool)]
    assert np.all(off >= 0) and np.all(off <= 1.0 / n + 1e-6)

@pytest.mark.parametrize("n", [4, 12])
def test_generated_key_is_rounded(rng, n):
    scaled = generate_key(n, rng=rng).matrix.data.astype(np.float64) * 10 ** key_decimals(n)
    assert np.allclose(scaled, np.round(scaled), atol=1e-3)

@pytest.mark.parametrize("n", [2, 4, 16])
def test_encryption_matrix_has_unit_determinant(rng, n):
    key = generate_key(n, rng=rng)
    assert key.lower().determinant() == pytest.approx(1.0)
    assert key.upper().determinant() == pytest.approx(1.0)
    assert key.encryption_matrix().determinant() == pytest.approx(1.0, abs=1e-3)

def test_determinant_is_exactly_one_over_rationals(rng):
    key = generate_key(6, rng=rng).astype(RATIONAL)
    assert key.field is RATIONAL
    assert key.encryption_matrix().determinant() == 1

def test_rational_generation(rng):
    key = generate_key(3, rng=rng, field=RATIONAL)
    assert key.has_unit_diagonal()
    assert key.encryption_matrix().determinant() == 1

def test_factors_are_triangular(key4):
    l, u = key4.lower().data, key4.upper().data
    assert np.all(np.triu(l, 1) == 0)
    assert np.all(np.tril(u, -1) == 0)
    assert key4.encryption_matrix() == key4.lower().dot(key4.upper())

def test_integer_mode(rng):
    n = 5
    key = generate_key(n, integer_mode=True, rng=rng)
    assert key.kind == INTEGER_KEY
    data = key.matrix.data
    assert np.all(np.diag(data) == n)
    off = data[~np.eye(n, dtype=bool)]
    assert np.all(off == np.round(off))
    assert np.all((off >= 0) & (off <= 10))

def test_seeded_generation_is_reproducible():
    a = generate_key(5, rng=np.random.default_rng(7))
    b = generate_key(5, rng=np.random.default_rng(7))
    assert a.matrix == b.matrix

def test_chunk_size_must_be_positive():
    with pytest.raises(ValueError):
        generate_key(0)

def test_from_matrix_infers_kind(rng):
    assert CipherKey.from_matrix(generate_key(4, rng=rng).matrix).kind == FLOAT_KEY
    assert CipherKey.from_matrix(generate_key(4, True, rng).matrix).kind == INTEGER_KEY
    assert CipherKey.from_matrix(Matrix.from_rows([[2, 0.5], [0.1, 3]])).kind == GENERAL_KEY

def test_from_matrix_rejects_bad_matrices():
    with pytest.raises(KeyFormatError):
        CipherKey.from_matrix(Matrix.ones(2, 3))
    with pytest.raises(KeyFormatError):
        CipherKey.from_matrix(Matrix.from_rows([[1, 0.2], [0.3, 0]]))
