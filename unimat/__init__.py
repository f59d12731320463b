# unimat/__init__.py
from .params import DTYPE, BITS_DTYPE, CipherParams, bcolors
from .errors import (
    CipherError, DimensionMismatch, UnsupportedBitDepth, UnsupportedExtension,
    UnsupportedAudioFormat, IoFailure, KeyFormatError, CiphertextFormatError, EmptyPayload,
)
from .field import Field, FloatField, RationalField, FLOAT, RATIONAL
from .matrix import Matrix
from .keys import CipherKey, generate_key, key_decimals, FLOAT_KEY, INTEGER_KEY, GENERAL_KEY
from .solvers import (
    encrypt, decrypt_direct, decrypt_iterative,
    forward_substitution, back_substitution, solve_lu, solve_sor,
)
from .codec import (
    split_nibbles, join_nibbles, round_to_nibbles,
    vector_to_matrix, matrix_to_vector, padded_length,
    floats_to_bits, bits_to_floats, split_pieces, join_pieces,
    nibbles_to_letters, letters_to_nibbles, encode_stream, decode_stream,
)
from .serialization import store_key, load_key, key_to_bytes, key_from_bytes
from .text import encrypt_text, decrypt_text, encrypt_text_file, decrypt_text_file
from .audio import (
    AudioContents, read_wav, write_wav,
    encrypt_samples, decrypt_samples, encrypt_audio_file, decrypt_audio_file,
)
from .public_api import generate_key_file, encrypt_file, decrypt_file, carrier_of

__version__ = "0.1.0"
