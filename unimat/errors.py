# unimat/errors.py
from .params import bcolors

# -----------------------------
# Error Taxonomy
# -----------------------------
class CipherError(Exception):
    """Base class for every failure raised by unimat."""

class DimensionMismatch(CipherError, ValueError):
    """Matrix shapes are incompatible for an operation. Always a caller bug."""

    def __init__(self, op: str, left: tuple, right: tuple):
        self.op = op
        self.left = left
        self.right = right
        super().__init__(f"{bcolors.FAIL}incompatible dimensions for {op}: {left} vs {right}{bcolors.ENDC}")

class UnsupportedBitDepth(CipherError):
    def __init__(self, sample_width: int):
        self.sample_width = sample_width
        super().__init__(f"{bcolors.FAIL}The file is not 16 bit (sample width {sample_width * 8} bit){bcolors.ENDC}")

class UnsupportedExtension(CipherError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{bcolors.FAIL}Invalid file type: {path} (expected .txt or .wav){bcolors.ENDC}")

class IoFailure(CipherError, OSError):
    """Reading or writing a carrier or key file failed; the caller may retry."""

    def __init__(self, path: str, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"{bcolors.FAIL}Cannot access {path}: {cause.strerror or cause}{bcolors.ENDC}")

class KeyFormatError(CipherError, ValueError):
    pass

class CiphertextFormatError(CipherError, ValueError):
    pass

class EmptyPayload(CipherError, ValueError):
    pass

class UnsupportedAudioFormat(CipherError):
    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"{bcolors.FAIL}{path} is not a PCM WAV file: {reason}{bcolors.ENDC}")
