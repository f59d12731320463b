# unimat/keys.py
import math
from dataclasses import dataclass
from typing import Optional
import numpy as np
from .errors import KeyFormatError
from .field import Field, FLOAT
from .matrix import Matrix
from .params import bcolors

FLOAT_KEY = "float"      # unit diagonal, det(K) = 1
INTEGER_KEY = "integer"  # whole-number entries, diagonal n
GENERAL_KEY = "general"  # any other non-zero diagonal

@dataclass
class CipherKey:
    """
    The raw key matrix K_raw. The factors L = tril(K_raw), U = triu(K_raw) and
    the encryption matrix K = L U are derived on demand and never stored.
    `kind` records how the key was made. It is not stored in the key file and
    only labels CLI output and solver warnings.
    """
    matrix: Matrix
    kind: str = FLOAT_KEY

    @property
    def n(self) -> int:
        return self.matrix.n

    @property
    def field(self) -> Field:
        return self.matrix.field

    def lower(self) -> Matrix:
        return self.matrix.tril()

    def upper(self) -> Matrix:
        return self.matrix.triu()

    def encryption_matrix(self, workers: Optional[int] = None) -> Matrix:
        return self.lower().dot(self.upper(), workers)

    def has_unit_diagonal(self) -> bool:
        one = self.field.one()
        return all(d == one for d in self.matrix.diagonal())

    def astype(self, field: Field) -> "CipherKey":
        return CipherKey(self.matrix.astype(field), self.kind)

    @classmethod
    def from_matrix(cls, matrix: Matrix) -> "CipherKey":
        """Wrap a loaded matrix, inferring its kind from the diagonal."""
        if matrix.n != matrix.m:
            raise KeyFormatError(f"{bcolors.FAIL}Key matrix must be square, got {matrix.n}x{matrix.m}{bcolors.ENDC}")
        diag = matrix.diagonal()
        if any(d == 0 for d in diag):
            raise KeyFormatError(f"{bcolors.FAIL}Key matrix has a zero on its diagonal{bcolors.ENDC}")
        if all(d == 1 for d in diag):
            return cls(matrix, FLOAT_KEY)
        integral = all(float(x) == math.floor(float(x)) for x in matrix.data.ravel())
        if integral and all(d == matrix.n for d in diag):
            return cls(matrix, INTEGER_KEY)
        return cls(matrix, GENERAL_KEY)

def key_decimals(n: int) -> int:
    """Decimal places kept in a key of dimension n: floor(log10 n) + 1."""
    return int(math.log10(n)) + 1

# -----------------------------
# Key Generation
# -----------------------------
def generate_key(chunk_size: int, integer_mode: bool = False, rng: Optional[np.random.Generator] = None, field: Field = FLOAT) -> CipherKey:
    if chunk_size < 1:
        raise ValueError(f"{bcolors.FAIL}chunk_size must be at least 1, got {chunk_size}{bcolors.ENDC}")
    n = chunk_size
    ident = Matrix.identity(n, field)

    # Off-diagonal entries below 1/n keep K = L U close to diagonally dominant.
    key = Matrix.random(n, n, field.zero(), field.one() / field.coerce(n), rng, field)
    key = key - key.hadamard(ident) + ident
    key = key.round(key_decimals(n))

    if integer_mode:
        key = (key - ident).scale(n * 10).round(0) + ident.scale(n)
        return CipherKey(key, INTEGER_KEY)
    return CipherKey(key, FLOAT_KEY)
