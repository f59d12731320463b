# unimat/solvers.py
import warnings
from typing import Optional
import numpy as np
from .errors import DimensionMismatch
from .keys import CipherKey
from .matrix import Matrix
from .params import DEFAULT_OMEGA, DEFAULT_ITERATIONS, bcolors
from .utils import parallel_map

BATCH_COLUMNS = 1024  # columns handed to one pool task

# -----------------------------
# Column Solvers
# -----------------------------
# Each solver takes b of shape (n,) or (n, k); the k columns are independent
# systems sharing one matrix and are solved side by side.

def forward_substitution(l: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Solve L z = b for lower-triangular L, first row to last."""
    z = b.copy()
    for i in range(l.shape[0]):
        if i:
            z[i] = (b[i] - np.dot(l[i, :i], z[:i])) / l[i, i]
        else:
            z[i] = b[i] / l[i, i]
    return z

def back_substitution(u: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Solve U x = b for upper-triangular U, last row to first."""
    n = u.shape[0]
    x = b.copy()
    for i in reversed(range(n)):
        if i < n - 1:
            x[i] = (b[i] - np.dot(u[i, i + 1:], x[i + 1:])) / u[i, i]
        else:
            x[i] = b[i] / u[i, i]
    return x

def solve_lu(l: np.ndarray, u: np.ndarray, b: np.ndarray) -> np.ndarray:
    return back_substitution(u, forward_substitution(l, b))

def solve_sor(a: np.ndarray, b: np.ndarray, omega, iterations: int) -> np.ndarray:
    """
    Successive over-relaxation for A x = b starting from x = b.

    Runs exactly `iterations` sweeps; there is no convergence test. Rows are
    updated in order, so each update already sees the new values above it.
    """
    x = b.copy()
    one = type(omega)(1)
    for _ in range(iterations):
        for i in range(a.shape[0]):
            off = np.dot(a[i], x) - a[i, i] * x[i]
            x[i] = omega / a[i, i] * (b[i] - off) + (one - omega) * x[i]
    return x

def _column_batches(m: int) -> list:
    return [slice(s, min(s + BATCH_COLUMNS, m)) for s in range(0, m, BATCH_COLUMNS)]

def _check(key: CipherKey, data: Matrix, op: str):
    if key.n != data.n:
        raise DimensionMismatch(op, key.matrix.shape, data.shape)
    if key.field is not data.field:
        raise ValueError(f"{bcolors.FAIL}{op}: key field {key.field.name} differs from data field {data.field.name}{bcolors.ENDC}")

# -----------------------------
# Encryption / Decryption
# -----------------------------
def encrypt(key: CipherKey, data: Matrix, workers: Optional[int] = None) -> Matrix:
    """Y = (tril(K_raw) triu(K_raw)) X."""
    _check(key, data, "encrypt")
    return key.encryption_matrix(workers).dot(data, workers)

def decrypt_direct(key: CipherKey, data: Matrix, workers: Optional[int] = None) -> Matrix:
    """Recover X from Y = L U X with the key's own factors, no re-factorization."""
    _check(key, data, "decrypt_direct")
    l = key.lower().data
    u = key.upper().data
    blocks = parallel_map(lambda s: solve_lu(l, u, data.data[:, s]), _column_batches(data.m), workers)
    return Matrix(np.hstack(blocks), data.field)

def decrypt_iterative(key: CipherKey, data: Matrix, omega: float = DEFAULT_OMEGA, iterations: int = DEFAULT_ITERATIONS, workers: Optional[int] = None) -> Matrix:
    """
    Approximate X from Y = K X by relaxation. The result is only as good as
    K's diagonal dominance and the iteration budget allow; rounding to
    nibbles happens in the codec, not here.
    """
    _check(key, data, "decrypt_iterative")
    if iterations < 0:
        raise ValueError(f"{bcolors.FAIL}iterations must be non-negative, got {iterations}{bcolors.ENDC}")
    if iterations == 0:
        return data.copy()
    k = key.encryption_matrix(workers)
    if not k.is_diagonally_dominant():
        warnings.warn(f"{key.kind} key: encryption matrix is not strictly diagonally dominant; relaxation may diverge", RuntimeWarning, stacklevel=2)
    a = k.data
    w = data.field.coerce(omega)
    blocks = parallel_map(lambda s: solve_sor(a, data.data[:, s], w, iterations), _column_batches(data.m), workers)
    return Matrix(np.hstack(blocks), data.field)
