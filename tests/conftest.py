import wave
import numpy as np
import pytest
from unimat import CipherKey, Matrix, FLOAT, generate_key

def dominant_matrix(n: int, off=0.05, field=FLOAT) -> Matrix:
    """Unit-diagonal key whose L U product is strongly diagonally dominant."""
    rows = [[1.0 if i == j else off for j in range(n)] for i in range(n)]
    return Matrix.from_rows(rows, field)

@pytest.fixture
def rng():
    return np.random.default_rng(20240611)

@pytest.fixture
def key4(rng):
    return generate_key(4, rng=rng)

@pytest.fixture
def dominant_key():
    return CipherKey.from_matrix(dominant_matrix(4))

@pytest.fixture
def write_pcm():
    def _write(path, samples, nchannels=1, sampwidth=2, framerate=8000):
        with wave.open(str(path), "wb") as w:
            w.setnchannels(nchannels)
            w.setsampwidth(sampwidth)
            w.setframerate(framerate)
            if sampwidth == 2:
                w.writeframes(np.asarray(samples, dtype='<i2').tobytes())
            else:
                w.writeframes(bytes(samples))
        return str(path)
    return _write
