# unimat/audio.py
#
# Encryption:
#   samples -> four nibbles each -> K X -> float32 bit patterns
#   -> [hi, lo] 16-bit words, prefixed by the nibble count as two words.
# Decryption reverses every step, rounds the solved values to the nearest
# nibble and glues groups of four back into 16-bit samples.
import wave
from dataclasses import dataclass
from typing import Optional
import numpy as np
from .codec import split_nibbles, join_nibbles, split_pieces, join_pieces, encode_stream, decode_stream, padded_length
from .errors import IoFailure, UnsupportedBitDepth, UnsupportedAudioFormat, CiphertextFormatError
from .keys import CipherKey
from .params import SAMPLE_BITS, SAMPLE_DTYPE, DEFAULT_OMEGA, DEFAULT_ITERATIONS, CipherParams, bcolors
from .utils import int_to_words_be, words_be_to_int, derived_path

PCM_WIDTH = 2          # bytes per 16-bit sample
HEADER_WORDS = 2       # nibble count as a 32-bit big-endian split
WORDS_PER_VALUE = 2    # one float32 bit pattern = [hi, lo]

@dataclass
class AudioContents:
    nchannels: int
    framerate: int
    samples: np.ndarray  # interleaved int16

# -----------------------------
# WAV I/O
# -----------------------------
def read_wav(path: str) -> AudioContents:
    """Read a 16-bit PCM WAV. Any other sample width is rejected."""
    try:
        with wave.open(path, "rb") as w:
            nchannels, sampwidth, framerate = w.getnchannels(), w.getsampwidth(), w.getframerate()
            frames = w.readframes(w.getnframes())
    except wave.Error as exc:
        raise UnsupportedAudioFormat(path, str(exc)) from exc
    except EOFError as exc:
        raise UnsupportedAudioFormat(path, "truncated header") from exc
    except OSError as exc:
        raise IoFailure(path, exc) from exc
    if sampwidth != PCM_WIDTH:
        raise UnsupportedBitDepth(sampwidth)
    samples = np.frombuffer(frames, dtype='<i2').astype(SAMPLE_DTYPE)
    return AudioContents(nchannels, framerate, samples)

def write_wav(path: str, contents: AudioContents, samples: np.ndarray):
    """Write samples with the channel layout and rate of `contents`, zero-filled to whole frames."""
    samples = np.asarray(samples).astype(SAMPLE_DTYPE)
    short = -samples.size % contents.nchannels
    if short:
        samples = np.concatenate([samples, np.zeros(short, dtype=SAMPLE_DTYPE)])
    try:
        with wave.open(path, "wb") as w:
            w.setnchannels(contents.nchannels)
            w.setsampwidth(PCM_WIDTH)
            w.setframerate(contents.framerate)
            w.writeframes(samples.astype('<i2').tobytes())
    except OSError as exc:
        raise IoFailure(path, exc) from exc

# -----------------------------
# Sample Stream Cipher
# -----------------------------
def encrypt_samples(samples, key: CipherKey, workers: Optional[int] = None) -> np.ndarray:
    nibbles = split_nibbles(np.asarray(samples).astype(SAMPLE_DTYPE), SAMPLE_BITS)
    bits = encode_stream(nibbles, key, workers)
    header = np.array(int_to_words_be(nibbles.size, HEADER_WORDS, SAMPLE_BITS), dtype=np.int64)
    words = np.concatenate([header, split_pieces(bits, SAMPLE_BITS)])
    return words.astype(np.uint16).view(SAMPLE_DTYPE)

def decrypt_samples(words, key: CipherKey, direct: bool = True, omega: float = DEFAULT_OMEGA, iterations: int = DEFAULT_ITERATIONS, workers: Optional[int] = None) -> np.ndarray:
    w = np.asarray(words).astype(np.int64).ravel() & 0xFFFF
    if w.size < HEADER_WORDS:
        raise CiphertextFormatError(f"{bcolors.FAIL}Audio ciphertext is missing its length header{bcolors.ENDC}")
    count = words_be_to_int(w[:HEADER_WORDS], SAMPLE_BITS)
    if count % (SAMPLE_BITS // 4):
        raise CiphertextFormatError(f"{bcolors.FAIL}Audio header must count whole samples, got {count} nibbles{bcolors.ENDC}")
    # Trailing frame filler past the ciphertext is ignored.
    body = w[HEADER_WORDS:HEADER_WORDS + WORDS_PER_VALUE * padded_length(count, key.n)]
    body = body[:body.size - body.size % WORDS_PER_VALUE]
    nibbles = decode_stream(join_pieces(body, SAMPLE_BITS), count, key, direct, omega, iterations, workers)
    return join_nibbles(nibbles, SAMPLE_BITS).astype(np.uint16).view(SAMPLE_DTYPE)

# -----------------------------
# File Helpers
# -----------------------------
def encrypt_audio_file(path: str, key: CipherKey, params: CipherParams = CipherParams()) -> str:
    audio = read_wav(path)
    if params.verbose:
        print(f"{bcolors.GREY}2-digit: {split_nibbles(audio.samples[:25], SAMPLE_BITS).tolist()}{bcolors.ENDC}")
    words = encrypt_samples(audio.samples, key, params.workers)
    if params.verbose:
        print(f"{bcolors.GREY}split: {words[:100].tolist()}{bcolors.ENDC}")
    out = derived_path(path, "encrypted")
    write_wav(out, audio, words)
    print(f"Encrypted to {out}")
    return out

def decrypt_audio_file(path: str, key: CipherKey, direct: bool = True, params: CipherParams = CipherParams()) -> str:
    audio = read_wav(path)
    if params.verbose:
        print(f"{bcolors.GREY}using {'direct' if direct else 'iterative'} method.{bcolors.ENDC}")
    samples = decrypt_samples(audio.samples, key, direct, params.omega, params.iterations, params.workers)
    if params.verbose:
        print(f"{bcolors.GREY}glued: {samples[:25].tolist()}{bcolors.ENDC}")
    out = derived_path(path, "decrypted")
    write_wav(out, audio, samples)
    print(f"Decrypted to {out}")
    return out
