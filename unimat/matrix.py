# unimat/matrix.py
from typing import Optional, Sequence
import numpy as np
from .errors import DimensionMismatch
from .field import Field, FLOAT
from .params import bcolors
from .utils import parallel_map, make_rng

# -----------------------------
# Dense Matrix over a Field
# -----------------------------
class Matrix:
    """
    Dense n x m matrix of field elements backed by a 2-D numpy array.

    Every transform returns a new Matrix. `round_` is the only method that
    mutates, and it says so in its name.
    """

    def __init__(self, data: np.ndarray, field: Field = FLOAT):
        data = np.asarray(data)
        if data.ndim != 2:
            raise ValueError(f"{bcolors.FAIL}Matrix data must be 2-D, got {data.ndim}-D{bcolors.ENDC}")
        if data.shape[0] == 0 or data.shape[1] == 0:
            raise ValueError(f"{bcolors.FAIL}Cannot build a matrix from an empty table{bcolors.ENDC}")
        if data.dtype != np.dtype(field.dtype):
            data = field.array(data.tolist())
        self.data = data
        self.field = field

    # -----------------------------
    # Constructors
    # -----------------------------
    @classmethod
    def from_rows(cls, rows: Sequence[Sequence], field: Field = FLOAT) -> "Matrix":
        rows = [list(r) for r in rows]
        if not rows or not rows[0]:
            raise ValueError(f"{bcolors.FAIL}Cannot build a matrix from an empty table{bcolors.ENDC}")
        m = len(rows[0])
        for i, r in enumerate(rows):
            if len(r) != m:
                raise ValueError(f"{bcolors.FAIL}Row {i} has {len(r)} entries, expected {m}{bcolors.ENDC}")
        return cls(field.array(rows), field)

    @classmethod
    def from_columns(cls, columns: Sequence[np.ndarray], field: Field = FLOAT) -> "Matrix":
        if not len(columns):
            raise ValueError(f"{bcolors.FAIL}Cannot build a matrix from an empty table{bcolors.ENDC}")
        return cls(field.array(np.column_stack(columns).tolist()), field)

    @classmethod
    def zero(cls, n: int, m: int, field: Field = FLOAT) -> "Matrix":
        return cls(np.full((n, m), field.zero(), dtype=field.dtype), field)

    @classmethod
    def ones(cls, n: int, m: int, field: Field = FLOAT) -> "Matrix":
        return cls(np.full((n, m), field.one(), dtype=field.dtype), field)

    @classmethod
    def identity(cls, n: int, field: Field = FLOAT) -> "Matrix":
        out = np.full((n, n), field.zero(), dtype=field.dtype)
        for i in range(n):
            out[i, i] = field.one()
        return cls(out, field)

    @classmethod
    def random(cls, n: int, m: int, lo, hi, rng: Optional[np.random.Generator] = None, field: Field = FLOAT) -> "Matrix":
        """Entries drawn independently and uniformly between lo and hi."""
        if lo > hi:
            raise ValueError(f"{bcolors.FAIL}random range is empty: min {lo} > max {hi}{bcolors.ENDC}")
        return cls(field.random(make_rng(rng), lo, hi, (n, m)), field)

    # -----------------------------
    # Shape & Access
    # -----------------------------
    @property
    def n(self) -> int:
        return self.data.shape[0]

    @property
    def m(self) -> int:
        return self.data.shape[1]

    @property
    def shape(self) -> tuple:
        return self.data.shape

    def row(self, i: int) -> np.ndarray:
        return self.data[i, :].copy()

    def column(self, j: int) -> np.ndarray:
        return self.data[:, j].copy()

    def diagonal(self) -> np.ndarray:
        return np.diag(self.data).copy()

    def __getitem__(self, idx):
        if isinstance(idx, tuple):
            return self.data[idx]
        return self.row(idx)

    def copy(self) -> "Matrix":
        return Matrix(self.data.copy(), self.field)

    def astype(self, field: Field) -> "Matrix":
        if field is self.field:
            return self.copy()
        return Matrix(field.array(self.data.tolist()), field)

    def _same_shape(self, other: "Matrix", op: str):
        if self.shape != other.shape:
            raise DimensionMismatch(op, self.shape, other.shape)

    # -----------------------------
    # Arithmetic
    # -----------------------------
    def dot(self, rhs: "Matrix", workers: Optional[int] = None) -> "Matrix":
        """Matrix product, one thread-pool task per output row."""
        if self.m != rhs.n:
            raise DimensionMismatch("dot", self.shape, rhs.shape)
        right = rhs.data
        rows = parallel_map(lambda i: np.dot(self.data[i, :], right), range(self.n), workers)
        return Matrix(np.vstack(rows).astype(self.field.dtype), self.field)

    def __matmul__(self, rhs: "Matrix") -> "Matrix":
        return self.dot(rhs)

    def __add__(self, rhs: "Matrix") -> "Matrix":
        self._same_shape(rhs, "add")
        return Matrix(self.data + rhs.data, self.field)

    def __sub__(self, rhs: "Matrix") -> "Matrix":
        self._same_shape(rhs, "sub")
        return Matrix(self.data - rhs.data, self.field)

    def hadamard(self, rhs: "Matrix") -> "Matrix":
        self._same_shape(rhs, "hadamard")
        return Matrix(self.data * rhs.data, self.field)

    def scale(self, c) -> "Matrix":
        return Matrix(self.data * self.field.coerce(c), self.field)

    def round(self, decimals: int) -> "Matrix":
        return Matrix(self.field.round_array(self.data, decimals), self.field)

    def round_(self, decimals: int) -> "Matrix":
        """In-place variant of round for callers that own the matrix."""
        self.data[...] = self.field.round_array(self.data, decimals)
        return self

    def transpose(self) -> "Matrix":
        return Matrix(self.data.T.copy(), self.field)

    @property
    def T(self) -> "Matrix":
        return self.transpose()

    def _triangle(self, keep) -> "Matrix":
        i, j = np.indices(self.shape)
        out = np.full(self.shape, self.field.zero(), dtype=self.field.dtype)
        mask = keep(i, j)
        out[mask] = self.data[mask]
        return Matrix(out, self.field)

    def tril(self) -> "Matrix":
        """Lower triangle including the diagonal."""
        return self._triangle(lambda i, j: j <= i)

    def triu(self) -> "Matrix":
        """Upper triangle including the diagonal."""
        return self._triangle(lambda i, j: j >= i)

    # -----------------------------
    # Properties of square matrices
    # -----------------------------
    def determinant(self):
        """Gaussian elimination with partial pivoting. Exact over the rational field."""
        if self.n != self.m:
            raise DimensionMismatch("determinant", self.shape, self.shape[::-1])
        if self.field is FLOAT:
            a = self.data.astype(np.float64).tolist()
            det = 1.0
        else:
            a = [list(r) for r in self.data.tolist()]
            det = self.field.one()
        n = self.n
        for c in range(n):
            p = max(range(c, n), key=lambda r: abs(a[r][c]))
            if a[p][c] == 0:
                return self.field.zero()
            if p != c:
                a[c], a[p] = a[p], a[c]
                det = -det
            det = det * a[c][c]
            for r in range(c + 1, n):
                f = a[r][c] / a[c][c]
                if f == 0:
                    continue
                for k in range(c, n):
                    a[r][k] = a[r][k] - f * a[c][k]
        return det

    def is_diagonally_dominant(self, strict: bool = True) -> bool:
        if self.n != self.m:
            raise DimensionMismatch("diagonal dominance", self.shape, self.shape[::-1])
        a = self.data.astype(np.float64) if self.field is FLOAT else self.data
        diag = np.abs(np.diag(a))
        off = np.abs(a).sum(axis=1) - diag
        return bool(np.all(diag > off)) if strict else bool(np.all(diag >= off))

    # -----------------------------
    # Comparison & Display
    # -----------------------------
    def __eq__(self, other) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.all(self.data == other.data))

    __hash__ = None

    def __str__(self) -> str:
        cells = [[str(x) for x in row] for row in self.data]
        width = max(len(c) for row in cells for c in row)
        return "\n".join(" ".join(c.rjust(width) for c in row) for row in cells)

    def __repr__(self) -> str:
        return f"Matrix({self.n}x{self.m}, field={self.field.name})"
