from fractions import Fraction
import numpy as np
from unimat import FLOAT, RATIONAL

def test_float_identities_are_float32():
    assert FLOAT.zero() == 0 and FLOAT.one() == 1
    assert isinstance(FLOAT.one(), np.float32)

def test_float_round_to_places():
    assert FLOAT.round(0.123456, 2) == np.float32(0.12)
    assert FLOAT.round(2.6, 0) == np.float32(3.0)

def test_float_round_array_stays_float32():
    out = FLOAT.round_array(np.array([1.26, 0.04], dtype=np.float32), 1)
    assert out.dtype == np.float32
    assert out.tolist() == [np.float32(1.3), np.float32(0.0)]

def test_rational_round_is_exact():
    assert RATIONAL.round(Fraction(1, 3), 2) == Fraction(33, 100)
    assert RATIONAL.round(Fraction(7, 2), 0) == Fraction(4)

def test_rational_coerce_from_float32_is_exact():
    assert RATIONAL.coerce(np.float32(0.5)) == Fraction(1, 2)
    assert RATIONAL.coerce(np.int64(3)) == Fraction(3)

def test_pow():
    assert FLOAT.pow(10, 3) == np.float32(1000)
    assert RATIONAL.pow(Fraction(1, 2), 3) == Fraction(1, 8)

def test_float_random_in_range(rng):
    a = FLOAT.random(rng, 0, 0.25, (5, 5))
    assert a.dtype == np.float32
    assert a.min() >= 0 and a.max() <= 0.25

def test_rational_random_in_closed_range(rng):
    a = RATIONAL.random(rng, 0, Fraction(1, 4), (4, 4))
    assert a.dtype == object
    assert all(isinstance(x, Fraction) for x in a.ravel())
    assert all(0 <= x <= Fraction(1, 4) for x in a.ravel())

def test_float_round_ties_away_from_zero():
    assert FLOAT.round(0.5, 0) == np.float32(1.0)
    assert FLOAT.round(2.5, 0) == np.float32(3.0)
    assert FLOAT.round(-2.5, 0) == np.float32(-3.0)
    assert FLOAT.round(0.25, 1) == np.float32(0.3)
    out = FLOAT.round_array(np.array([0.5, 2.5, -2.5, 0.25, -0.4], dtype=np.float32), 0)
    assert out.tolist() == [1.0, 3.0, -3.0, 0.0, 0.0]

def test_rational_round_ties_away_from_zero():
    assert RATIONAL.round(Fraction(1, 2), 0) == 1
    assert RATIONAL.round(Fraction(5, 2), 0) == 3
    assert RATIONAL.round(Fraction(-5, 2), 0) == -3
    assert RATIONAL.round(Fraction(1, 4), 1) == Fraction(3, 10)
    assert RATIONAL.round(Fraction(-1, 3), 2) == Fraction(-33, 100)
