# unimat/codec.py
from typing import Optional
import numpy as np
from .errors import CiphertextFormatError, EmptyPayload
from .field import Field, FLOAT, round_half_away
from .keys import CipherKey
from .matrix import Matrix
from .params import (
    DTYPE, BITS_DTYPE, FLOAT_BITS, NIBBLE_BITS, NIBBLE_MAX, LETTER_BASE,
    DEFAULT_OMEGA, DEFAULT_ITERATIONS, bcolors,
)
from .solvers import encrypt, decrypt_direct, decrypt_iterative

# -----------------------------
# Nibbles ("2-digit arithmetic")
# -----------------------------
def split_nibbles(values, width: int) -> np.ndarray:
    """Chop each width-bit unit into width/4 nibbles, high nibble first."""
    v = np.asarray(values).astype(np.int64).ravel() & ((1 << width) - 1)
    shifts = np.arange(width - NIBBLE_BITS, -1, -NIBBLE_BITS)
    return ((v[:, None] >> shifts) & NIBBLE_MAX).astype(np.uint8).ravel()

def join_nibbles(nibbles, width: int) -> np.ndarray:
    """Glue groups of width/4 nibbles back into unsigned width-bit units."""
    per_unit = width // NIBBLE_BITS
    nib = np.asarray(nibbles).astype(np.int64).ravel()
    if nib.size % per_unit:
        raise ValueError(f"{bcolors.FAIL}{nib.size} nibbles do not form whole {width}-bit units{bcolors.ENDC}")
    shifts = np.arange(width - NIBBLE_BITS, -1, -NIBBLE_BITS)
    return ((nib.reshape(-1, per_unit) & NIBBLE_MAX) << shifts).sum(axis=1)

def round_to_nibbles(values) -> np.ndarray:
    """Nearest integer, clipped to a nibble. Drift corrupts output, it never raises."""
    v = np.nan_to_num(np.asarray(values).astype(np.float64), nan=0.0, posinf=NIBBLE_MAX, neginf=0.0)
    return np.clip(round_half_away(v), 0, NIBBLE_MAX).astype(np.uint8)

# -----------------------------
# Block Matrix Helpers
# -----------------------------
def padded_length(count: int, chunk_size: int) -> int:
    return -(-count // chunk_size) * chunk_size

def vector_to_matrix(vec, chunk_size: int, field: Field = FLOAT) -> Matrix:
    """
    Reshape a flat vector into a chunk_size x c matrix whose columns are
    consecutive chunks. An incomplete last chunk is padded by repeating the
    last element.
    """
    v = np.asarray(vec).ravel()
    if v.size == 0:
        raise EmptyPayload(f"{bcolors.FAIL}Nothing to encode: the input is empty{bcolors.ENDC}")
    pad = padded_length(v.size, chunk_size) - v.size
    if pad:
        v = np.concatenate([v, np.repeat(v[-1:], pad)])
    return Matrix(np.ascontiguousarray(v.reshape(-1, chunk_size).T), field)

def matrix_to_vector(m: Matrix) -> np.ndarray:
    """Column-major flatten, the inverse of vector_to_matrix before padding is cut."""
    return m.data.T.ravel().copy()

# -----------------------------
# Float Bit Patterns
# -----------------------------
def floats_to_bits(values) -> np.ndarray:
    return np.ascontiguousarray(values, dtype=DTYPE).view(BITS_DTYPE)

def bits_to_floats(bits) -> np.ndarray:
    return np.ascontiguousarray(bits, dtype=BITS_DTYPE).view(DTYPE)

def split_pieces(words, piece_bits: int, total_bits: int = FLOAT_BITS) -> np.ndarray:
    """Big-endian split of each total_bits word into pieces of piece_bits."""
    w = np.asarray(words).astype(np.int64).ravel()
    shifts = np.arange(total_bits - piece_bits, -1, -piece_bits)
    return ((w[:, None] >> shifts) & ((1 << piece_bits) - 1)).ravel()

def join_pieces(pieces, piece_bits: int, total_bits: int = FLOAT_BITS) -> np.ndarray:
    per_word = total_bits // piece_bits
    p = np.asarray(pieces).astype(np.int64).ravel() & ((1 << piece_bits) - 1)
    if p.size % per_word:
        raise CiphertextFormatError(f"{bcolors.FAIL}{p.size} pieces do not form whole {total_bits}-bit words{bcolors.ENDC}")
    shifts = np.arange(total_bits - piece_bits, -1, -piece_bits)
    return (p.reshape(-1, per_word) << shifts).sum(axis=1).astype(BITS_DTYPE)

def nibbles_to_letters(nibbles) -> str:
    return (np.asarray(nibbles, dtype=np.uint8) + LETTER_BASE).astype(np.uint8).tobytes().decode('ascii')

def letters_to_nibbles(text: str) -> np.ndarray:
    try:
        raw = np.frombuffer(text.encode('ascii'), dtype=np.uint8).astype(np.int64) - LETTER_BASE
    except UnicodeEncodeError as exc:
        raise CiphertextFormatError(f"{bcolors.FAIL}Ciphertext contains non-ASCII symbols{bcolors.ENDC}") from exc
    if raw.size and (raw.min() < 0 or raw.max() > NIBBLE_MAX):
        raise CiphertextFormatError(f"{bcolors.FAIL}Ciphertext symbols must lie in 'a'..'p'{bcolors.ENDC}")
    return raw.astype(np.uint8)

# -----------------------------
# Shared Pipeline
# -----------------------------
def encode_stream(nibbles, key: CipherKey, workers: Optional[int] = None) -> np.ndarray:
    """Nibbles -> block matrix -> K X -> column-major float32 bit patterns. No nibbles, no patterns."""
    if key.field is not FLOAT:
        raise ValueError(f"{bcolors.FAIL}The bit-pattern codec needs a {FLOAT.name} key, got {key.field.name}{bcolors.ENDC}")
    nibbles = np.asarray(nibbles).ravel()
    if nibbles.size == 0:
        return np.zeros(0, dtype=BITS_DTYPE)
    data = vector_to_matrix(nibbles, key.n)
    return floats_to_bits(matrix_to_vector(encrypt(key, data, workers)))

def decode_stream(bits, count: int, key: CipherKey, direct: bool = True, omega: float = DEFAULT_OMEGA, iterations: int = DEFAULT_ITERATIONS, workers: Optional[int] = None) -> np.ndarray:
    """Inverse of encode_stream; returns the first `count` recovered nibbles."""
    if key.field is not FLOAT:
        raise ValueError(f"{bcolors.FAIL}The bit-pattern codec needs a {FLOAT.name} key, got {key.field.name}{bcolors.ENDC}")
    if count < 0:
        raise CiphertextFormatError(f"{bcolors.FAIL}Length header must not be negative, got {count}{bcolors.ENDC}")
    if count == 0:
        return np.zeros(0, dtype=np.uint8)
    expected = padded_length(count, key.n)
    bits = np.asarray(bits).ravel()
    if bits.size < expected:
        raise CiphertextFormatError(f"{bcolors.FAIL}Ciphertext holds {bits.size} values, header needs {expected}{bcolors.ENDC}")
    data = vector_to_matrix(bits_to_floats(bits[:expected]), key.n)
    if direct:
        decrypted = decrypt_direct(key, data, workers)
    else:
        decrypted = decrypt_iterative(key, data, omega, iterations, workers)
    return round_to_nibbles(matrix_to_vector(decrypted))[:count]
