from dataclasses import dataclass
from typing import Optional
import numpy as np

# -----------------------------
# CLI Colors
# -----------------------------
class bcolors:
    HEADER = '\033[95m'
    OKBLUE = '\033[94m'
    OKCYAN = '\033[96m'
    OKGREEN = '\033[92m'
    GREY = '\033[90m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'
    UNDERLINE = '\033[4m'

# -----------------------------
# Core Parameters
# -----------------------------
DTYPE = np.float32        # float field storage, serialized by bit pattern
BITS_DTYPE = np.uint32    # bit pattern of one DTYPE value
SAMPLE_DTYPE = np.int16   # 16-bit PCM word
NIBBLE_BITS = 4
NIBBLE_MAX = (1 << NIBBLE_BITS) - 1
BYTE_BITS = 8
SAMPLE_BITS = 16
FLOAT_BITS = 32
LETTER_BASE = ord('a')
HEADER_SEPARATOR = ' '

DEFAULT_CHUNK_SIZE = 16
DEFAULT_OMEGA = 1.3
DEFAULT_ITERATIONS = 100
PRINT_LIMIT = 30  # largest key printed by gen_key

@dataclass
class CipherParams:
    chunk_size: int = DEFAULT_CHUNK_SIZE  # key dimension n
    integer_mode: bool = False
    omega: float = DEFAULT_OMEGA
    iterations: int = DEFAULT_ITERATIONS
    workers: Optional[int] = None  # thread pool size, None = executor default
    verbose: bool = False
