# unimat/serialization.py
import numpy as np
from .errors import IoFailure, KeyFormatError, CiphertextFormatError
from .field import FLOAT
from .keys import CipherKey
from .matrix import Matrix
from .params import DTYPE, HEADER_SEPARATOR, bcolors

KEY_HEADER_BYTES = 8   # big-endian unsigned key dimension
KEY_ENTRY_DTYPE = '>f4'

# -----------------------------
# File Helpers
# -----------------------------
def read_file_bytes(path: str) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as exc:
        raise IoFailure(path, exc) from exc

def write_file_bytes(path: str, data: bytes):
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as exc:
        raise IoFailure(path, exc) from exc

# -----------------------------
# Key File
# -----------------------------
def key_to_bytes(key: CipherKey) -> bytes:
    m = key.matrix if key.field is FLOAT else key.matrix.astype(FLOAT)
    return key.n.to_bytes(KEY_HEADER_BYTES, 'big') + np.asarray(m.data, dtype=KEY_ENTRY_DTYPE).tobytes()

def key_from_bytes(buf: bytes) -> CipherKey:
    if len(buf) < KEY_HEADER_BYTES:
        raise KeyFormatError(f"{bcolors.FAIL}Key file too short: {len(buf)} bytes{bcolors.ENDC}")
    n = int.from_bytes(buf[:KEY_HEADER_BYTES], 'big')
    expected = KEY_HEADER_BYTES + 4 * n * n
    if n == 0 or len(buf) != expected:
        raise KeyFormatError(f"{bcolors.FAIL}Key file for n={n} must hold {expected} bytes, got {len(buf)}{bcolors.ENDC}")
    data = np.frombuffer(buf[KEY_HEADER_BYTES:], dtype=KEY_ENTRY_DTYPE).astype(DTYPE).reshape(n, n)
    return CipherKey.from_matrix(Matrix(data, FLOAT))

def store_key(path: str, key: CipherKey):
    write_file_bytes(path, key_to_bytes(key))

def load_key(path: str) -> CipherKey:
    return key_from_bytes(read_file_bytes(path))

# -----------------------------
# Text Ciphertext
# -----------------------------
def format_text_ciphertext(count: int, letters: str) -> str:
    return f"{count}{HEADER_SEPARATOR}{letters}"

def parse_text_ciphertext(text: str) -> tuple[int, str]:
    head, sep, body = text.partition(HEADER_SEPARATOR)
    if not sep:
        raise CiphertextFormatError(f"{bcolors.FAIL}Missing length header{bcolors.ENDC}")
    if not (head.isascii() and head.isdigit()):
        raise CiphertextFormatError(f"{bcolors.FAIL}Length header is not a decimal number: {head[:20]!r}{bcolors.ENDC}")
    return int(head), body.rstrip("\r\n")
