import numpy as np
import pytest
from unimat import (
    AudioContents, CipherParams, CiphertextFormatError, IoFailure,
    UnsupportedAudioFormat, UnsupportedBitDepth, generate_key,
    read_wav, write_wav, encrypt_samples, decrypt_samples,
    encrypt_audio_file, decrypt_audio_file,
)

SAMPLES = [0, 1, -1, 32767, -32768, 1234, -4321, 42]

def test_read_wav(tmp_path, write_pcm):
    path = write_pcm(tmp_path / "in.wav", SAMPLES, framerate=22050)
    audio = read_wav(path)
    assert audio.nchannels == 1
    assert audio.framerate == 22050
    assert audio.samples.dtype == np.int16
    assert audio.samples.tolist() == SAMPLES

def test_eight_bit_wav_is_rejected(tmp_path, write_pcm):
    path = write_pcm(tmp_path / "in8.wav", [128, 130, 120, 128], sampwidth=1)
    with pytest.raises(UnsupportedBitDepth) as exc:
        read_wav(path)
    assert exc.value.sample_width == 1

def test_non_wav_is_rejected(tmp_path):
    path = tmp_path / "fake.wav"
    path.write_bytes(b"this is not a riff file at all")
    with pytest.raises(UnsupportedAudioFormat):
        read_wav(str(path))

def test_missing_wav(tmp_path):
    with pytest.raises(IoFailure):
        read_wav(str(tmp_path / "absent.wav"))

def test_encrypted_samples_carry_header(key4):
    words = encrypt_samples(SAMPLES, key4)
    assert words.dtype == np.int16
    assert words[:2].tolist() == [0, 32]
    # 32 nibbles -> 32 floats -> 64 words after the header
    assert words.size == 2 + 64

def test_sample_round_trip_direct(key4):
    words = encrypt_samples(SAMPLES, key4)
    assert decrypt_samples(words, key4).tolist() == SAMPLES

def test_sample_round_trip_with_padding(rng):
    key = generate_key(5, rng=rng)
    words = encrypt_samples(SAMPLES[:3], key)
    assert words.size == 2 + 2 * 15
    assert decrypt_samples(words, key).tolist() == SAMPLES[:3]

def test_trailing_filler_is_ignored(key4):
    words = np.concatenate([encrypt_samples(SAMPLES, key4), np.zeros(3, dtype=np.int16)])
    assert decrypt_samples(words, key4).tolist() == SAMPLES

def test_bad_audio_header(key4):
    with pytest.raises(CiphertextFormatError):
        decrypt_samples(np.array([5], dtype=np.int16), key4)
    with pytest.raises(CiphertextFormatError):
        decrypt_samples(np.array([0, 6, 1, 2], dtype=np.int16), key4)
    assert decrypt_samples(np.array([0, 0], dtype=np.int16), key4).size == 0

def test_eight_sample_wav_iterative(tmp_path, write_pcm, dominant_key):
    src = write_pcm(tmp_path / "tone.wav", SAMPLES)
    enc = encrypt_audio_file(src, dominant_key)
    assert enc == str(tmp_path / "tone-encrypted.wav")
    dec = decrypt_audio_file(enc, dominant_key, direct=False, params=CipherParams(iterations=1000, omega=1.3))
    assert dec == str(tmp_path / "tone-encrypted-decrypted.wav")
    out = read_wav(dec).samples.astype(np.int32)
    assert np.all(np.abs(out - np.array(SAMPLES)) <= 1)

def test_wav_file_round_trip_keeps_format(tmp_path, write_pcm, rng):
    key = generate_key(5, rng=rng)
    src = write_pcm(tmp_path / "three.wav", [10, -20, 30, -40, 50, -60], nchannels=3, framerate=44100)
    enc = encrypt_audio_file(src, key)
    encrypted = read_wav(enc)
    assert encrypted.nchannels == 3
    assert encrypted.framerate == 44100
    assert encrypted.samples.size % 3 == 0
    decrypted = read_wav(decrypt_audio_file(enc, key))
    assert decrypted.samples.tolist() == [10, -20, 30, -40, 50, -60]

def test_write_wav_zero_fills_frames(tmp_path):
    path = str(tmp_path / "out.wav")
    write_wav(path, AudioContents(2, 8000, np.zeros(0, dtype=np.int16)), np.array([1, 2, 3], dtype=np.int16))
    assert read_wav(path).samples.tolist() == [1, 2, 3, 0]

def test_verbose_audio_output(tmp_path, write_pcm, key4, capsys):
    src = write_pcm(tmp_path / "v.wav", [0x1234])
    encrypt_audio_file(src, key4, CipherParams(verbose=True))
    out = capsys.readouterr().out
    assert "[1, 2, 3, 4]" in out
    assert "Encrypted to" in out

def test_empty_wav_round_trip(tmp_path, write_pcm, key4):
    src = write_pcm(tmp_path / "silent.wav", [])
    enc = encrypt_audio_file(src, key4)
    assert read_wav(enc).samples.tolist() == [0, 0]
    assert read_wav(decrypt_audio_file(enc, key4)).samples.size == 0
