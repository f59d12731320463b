# unimat/text.py
from typing import Optional, Union
import numpy as np
from .codec import (
    split_nibbles, join_nibbles, split_pieces, join_pieces,
    nibbles_to_letters, letters_to_nibbles, encode_stream, decode_stream,
)
from .errors import CiphertextFormatError
from .keys import CipherKey
from .params import BYTE_BITS, NIBBLE_BITS, DEFAULT_OMEGA, DEFAULT_ITERATIONS, CipherParams, bcolors
from .serialization import read_file_bytes, write_file_bytes, format_text_ciphertext, parse_text_ciphertext
from .utils import derived_path

# -----------------------------
# Text Carrier
# -----------------------------
def encrypt_text(data: Union[bytes, str], key: CipherKey, workers: Optional[int] = None) -> str:
    """
    Encrypt raw bytes into the text ciphertext format: the nibble count, a
    space, then eight letters 'a'..'p' per encrypted float32.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    nibbles = split_nibbles(np.frombuffer(data, dtype=np.uint8), BYTE_BITS)
    bits = encode_stream(nibbles, key, workers)
    return format_text_ciphertext(nibbles.size, nibbles_to_letters(split_pieces(bits, NIBBLE_BITS)))

def decrypt_text(ciphertext: str, key: CipherKey, direct: bool = True, omega: float = DEFAULT_OMEGA, iterations: int = DEFAULT_ITERATIONS, workers: Optional[int] = None) -> bytes:
    count, body = parse_text_ciphertext(ciphertext)
    if count % 2:
        raise CiphertextFormatError(f"{bcolors.FAIL}Text header must count whole bytes (even nibbles), got {count}{bcolors.ENDC}")
    bits = join_pieces(letters_to_nibbles(body), NIBBLE_BITS)
    nibbles = decode_stream(bits, count, key, direct, omega, iterations, workers)
    return join_nibbles(nibbles, BYTE_BITS).astype(np.uint8).tobytes()

def encrypt_text_file(path: str, key: CipherKey, params: CipherParams = CipherParams()) -> str:
    data = read_file_bytes(path)
    if params.verbose:
        print(f"{bcolors.GREY}Input data (nibbles): {split_nibbles(np.frombuffer(data, dtype=np.uint8), BYTE_BITS)[:100].tolist()}{bcolors.ENDC}")
    out = derived_path(path, "encrypted")
    write_file_bytes(out, encrypt_text(data, key, params.workers).encode("ascii"))
    print(f"Encrypted to {out}")
    return out

def decrypt_text_file(path: str, key: CipherKey, direct: bool = True, params: CipherParams = CipherParams()) -> str:
    raw = read_file_bytes(path)
    try:
        ciphertext = raw.decode("ascii")
    except UnicodeDecodeError as exc:
        raise CiphertextFormatError(f"{bcolors.FAIL}{path} is not a text ciphertext{bcolors.ENDC}") from exc
    if params.verbose:
        print(f"{bcolors.GREY}using {'direct' if direct else 'iterative'} method.{bcolors.ENDC}")
    plain = decrypt_text(ciphertext, key, direct, params.omega, params.iterations, params.workers)
    out = derived_path(path, "decrypted")
    write_file_bytes(out, plain)
    print(f"Decrypted to {out}")
    return out
