# unimat/field.py
import math
from fractions import Fraction
import numpy as np
from .params import DTYPE

def round_half_away(v):
    """Nearest integer with ties away from zero; keeps the input float dtype."""
    v = np.asarray(v)
    whole = np.trunc(v)
    return whole + np.where(np.abs(v - whole) >= 0.5, np.sign(v), np.zeros_like(v))

# -----------------------------
# Numeric Fields
# -----------------------------
class Field:
    """
    Capability interface the matrix engine is generic over.

    A field provides its identities, a numpy storage dtype, explicit decimal
    rounding, exponentiation and uniform sampling. Element arithmetic
    (+, -, *, /) is whatever the stored element type implements.
    """
    name = "field"
    dtype = object

    def zero(self):
        raise NotImplementedError

    def one(self):
        raise NotImplementedError

    def coerce(self, value):
        raise NotImplementedError

    def round(self, x, decimals: int):
        raise NotImplementedError

    def pow(self, x, e: int):
        return self.coerce(x) ** e

    def random(self, rng: np.random.Generator, lo, hi, shape) -> np.ndarray:
        raise NotImplementedError

    def array(self, data) -> np.ndarray:
        """Build a 2-D storage array of this field's elements from nested rows."""
        raise NotImplementedError

    def round_array(self, a: np.ndarray, decimals: int) -> np.ndarray:
        raise NotImplementedError

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"


class FloatField(Field):
    """32-bit IEEE floats. The performance path and the one the codec serializes."""
    name = "float32"
    dtype = DTYPE

    def zero(self):
        return DTYPE(0.0)

    def one(self):
        return DTYPE(1.0)

    def coerce(self, value):
        return DTYPE(value)

    def round(self, x, decimals: int):
        d = self.pow(10, decimals)
        return DTYPE(round_half_away(DTYPE(x) * d) / d)

    def round_array(self, a: np.ndarray, decimals: int) -> np.ndarray:
        d = self.pow(10, decimals)
        return (round_half_away(a.astype(DTYPE) * d) / d).astype(DTYPE)

    def random(self, rng: np.random.Generator, lo, hi, shape) -> np.ndarray:
        return rng.uniform(float(lo), float(hi), size=shape).astype(DTYPE)

    def array(self, data) -> np.ndarray:
        return np.array(data, dtype=DTYPE)


class RationalField(Field):
    """
    Exact rationals (fractions.Fraction) held in numpy object arrays.

    Converting a float into this field is exact: the binary value of the float
    becomes the fraction, so float keys can be checked without rounding error.
    """
    name = "rational"
    dtype = object
    resolution = 10 ** 6  # grid used by random sampling

    def zero(self):
        return Fraction(0)

    def one(self):
        return Fraction(1)

    def coerce(self, value):
        if isinstance(value, Fraction):
            return value
        if isinstance(value, np.floating):
            return Fraction(float(value))
        if isinstance(value, np.integer):
            return Fraction(int(value))
        return Fraction(value)

    def round(self, x, decimals: int):
        x = self.coerce(x)
        d = Fraction(10) ** decimals
        whole = math.floor(abs(x) * d + Fraction(1, 2))
        return (whole if x >= 0 else -whole) / d

    def round_array(self, a: np.ndarray, decimals: int) -> np.ndarray:
        return np.frompyfunc(lambda x: self.round(x, decimals), 1, 1)(a).astype(object)

    def random(self, rng: np.random.Generator, lo, hi, shape) -> np.ndarray:
        lo, hi = self.coerce(lo), self.coerce(hi)
        steps = rng.integers(0, self.resolution, size=shape, endpoint=True)
        sample = np.frompyfunc(lambda k: lo + (hi - lo) * Fraction(int(k), self.resolution), 1, 1)
        return sample(steps).astype(object)

    def array(self, data) -> np.ndarray:
        rows = [[self.coerce(x) for x in row] for row in data]
        out = np.empty((len(rows), len(rows[0]) if rows else 0), dtype=object)
        for i, row in enumerate(rows):
            out[i, :] = row
        return out


FLOAT = FloatField()
RATIONAL = RationalField()
