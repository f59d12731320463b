# unimat/public_api.py
import os
from typing import Optional
import numpy as np
from .audio import encrypt_audio_file, decrypt_audio_file
from .errors import UnsupportedExtension
from .keys import CipherKey, generate_key
from .params import CipherParams
from .serialization import store_key, load_key
from .text import encrypt_text_file, decrypt_text_file

TEXT = "text"
AUDIO = "audio"
CARRIERS = {".txt": TEXT, ".wav": AUDIO}

def carrier_of(path: str) -> str:
    ext = os.path.splitext(path)[1].lower()
    if ext not in CARRIERS:
        raise UnsupportedExtension(path)
    return CARRIERS[ext]

def generate_key_file(path: str, params: CipherParams = CipherParams(), rng: Optional[np.random.Generator] = None) -> CipherKey:
    key = generate_key(params.chunk_size, params.integer_mode, rng)
    store_key(path, key)
    print(f"Key saved to {path}")
    return key

def encrypt_file(key_path: str, file_path: str, params: CipherParams = CipherParams()) -> str:
    carrier = carrier_of(file_path)
    key = load_key(key_path)
    if carrier == TEXT:
        return encrypt_text_file(file_path, key, params)
    return encrypt_audio_file(file_path, key, params)

def decrypt_file(key_path: str, file_path: str, direct: bool = True, params: CipherParams = CipherParams()) -> str:
    carrier = carrier_of(file_path)
    key = load_key(key_path)
    if carrier == TEXT:
        return decrypt_text_file(file_path, key, direct, params)
    return decrypt_audio_file(file_path, key, direct, params)
