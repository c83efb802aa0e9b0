"""Checkpoint 5: GOLB Audio Codec Verification."""

import sys
import os
import logging
import struct

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np
import pytest
from golombcodec import AudioEncoder, AudioDecoder
from golombcodec.codec.audio_codec import split_blocks, decode_block
from golombcodec.constants import AUDIO_HEADER_SIZE, M_CANDIDATES
from golombcodec.errors import (
    CorruptBlock, FormatError, InvalidParameter, TruncatedStream,
)
from golombcodec.io import pack_audio_header, unpack_audio_header


def create_stereo(num_frames=5000, seed=42):
    """Correlated stereo: a shared tone plus per-channel noise."""
    rng = np.random.default_rng(seed)
    t = np.arange(num_frames) / 44100
    tone = 9000 * np.sin(2 * np.pi * 330 * t)
    left = tone + rng.normal(0, 150, num_frames)
    right = 0.8 * tone + rng.normal(0, 150, num_frames)
    return np.clip(np.round(np.stack([left, right], axis=1)), -32768, 32767).astype(np.int16)


def test_mono_known_stream():
    """Four mono frames in one block produce a fixed 39-byte stream."""
    print("=" * 60)
    print("Test 1: Known Mono Stream")
    print("=" * 60)

    samples = np.array([10, 12, 11, 9], dtype=np.int16)
    data = AudioEncoder().encode(samples, sample_rate=44100, block_size=4)

    expected = (pack_audio_header(1, 44100, 4, 4, False)
                + struct.pack('<I', 2)
                + struct.pack('<i', 10)
                + struct.pack('<II', 2, 9)
                + bytes([0x2D, 0x80]))
    assert data == expected
    assert len(data) == 39

    decoded, header = AudioDecoder().decode(data)
    assert decoded.dtype == np.int16
    assert decoded.shape == (4, 1)
    np.testing.assert_array_equal(decoded[:, 0], samples)
    assert header['num_frames'] == 4
    assert header['use_mid_side'] is False
    print("✅ Known stream test passed")


@pytest.mark.parametrize("m", M_CANDIDATES)
def test_mono_every_candidate(m):
    """Any single forced m still decodes exactly."""
    samples = np.array([10, 12, 11, 9], dtype=np.int16)
    data = AudioEncoder(candidates=(m,)).encode(samples, block_size=4)
    assert struct.unpack_from('<I', data, AUDIO_HEADER_SIZE)[0] == m

    decoded, _ = AudioDecoder().decode(data)
    np.testing.assert_array_equal(decoded[:, 0], samples)


@pytest.mark.parametrize("use_mid_side", [False, True])
@pytest.mark.parametrize("block_size", [1, 7, 256, 1024, 10000])
def test_stereo_roundtrip(block_size, use_mid_side):
    """Stereo round trip for block sizes that do and do not divide the length."""
    samples = create_stereo()
    data = AudioEncoder().encode(samples, sample_rate=48000,
                                 block_size=block_size, use_mid_side=use_mid_side)
    decoded, header = AudioDecoder().decode(data)

    assert data[5] == (1 if use_mid_side else 0)
    assert header['use_mid_side'] is use_mid_side
    assert header['sample_rate'] == 48000
    assert header['block_size'] == block_size
    np.testing.assert_array_equal(decoded, samples)


def test_mid_side_helps_correlated_stereo():
    """Mid-side gives a smaller stream when the channels are nearly identical."""
    rng = np.random.default_rng(5)
    t = np.arange(8000) / 44100
    # Slow tone: sample-to-sample steps stay small, so the doubled mid
    # residuals still fit the candidate m range
    tone = np.round(3000 * np.sin(2 * np.pi * 50 * t)) + rng.integers(-3, 4, 8000)
    samples = np.stack([tone, tone + rng.integers(-2, 3, 8000)], axis=1)
    samples = np.clip(samples, -32768, 32767).astype(np.int16)

    plain = AudioEncoder().encode(samples, use_mid_side=False)
    mid_side = AudioEncoder().encode(samples, use_mid_side=True)
    assert len(mid_side) < len(plain)


def test_extreme_samples():
    """Full-scale swings survive DPCM and mid-side."""
    print("\n" + "=" * 60)
    print("Test 2: Extreme Samples")
    print("=" * 60)

    left = np.tile([-32768, 32767], 50)
    right = np.tile([32767, -32768], 50)
    samples = np.stack([left, right], axis=1).astype(np.int16)

    for use_mid_side in (False, True):
        data = AudioEncoder().encode(samples, block_size=16, use_mid_side=use_mid_side)
        decoded, _ = AudioDecoder().decode(data)
        np.testing.assert_array_equal(decoded, samples)
    print("✅ Extreme samples test passed")


def test_interleaved_input():
    """1D interleaved input is split by channel_count."""
    samples = create_stereo(300)
    data = AudioEncoder().encode(samples.ravel(), channel_count=2, block_size=64)
    decoded, header = AudioDecoder().decode(data)
    assert header['num_channels'] == 2
    np.testing.assert_array_equal(decoded, samples)


def test_multichannel_roundtrip():
    """More than two channels are coded independently."""
    rng = np.random.default_rng(9)
    samples = np.cumsum(rng.integers(-50, 51, (700, 5)), axis=0).astype(np.int16)
    data = AudioEncoder().encode(samples, block_size=128)
    decoded, _ = AudioDecoder().decode(data)
    np.testing.assert_array_equal(decoded, samples)


def test_empty_input():
    """Zero frames encode to a bare header."""
    data = AudioEncoder().encode(np.zeros((0, 2), dtype=np.int16))
    assert len(data) == AUDIO_HEADER_SIZE

    decoded, header = AudioDecoder().decode(data)
    assert decoded.shape == (0, 2)
    assert header['num_frames'] == 0


def test_single_frame_blocks():
    """Blocks of one frame carry only seeds and an empty payload."""
    samples = np.array([[5, -5], [6, -7], [-32768, 32767]], dtype=np.int16)
    data = AudioEncoder().encode(samples, block_size=1)

    header = unpack_audio_header(data)
    blocks = split_blocks(data, header)
    assert len(blocks) == 3
    for block, frame in zip(blocks, samples):
        assert block['total_bits'] == 0
        assert block['payload'] == b''
        assert block['seeds'] == frame.tolist()

    decoded, _ = AudioDecoder().decode(data)
    np.testing.assert_array_equal(decoded, samples)


def test_blocks_decode_independently():
    """Any block decodes on its own from its framing record."""
    samples = create_stereo(1000)
    data = AudioEncoder().encode(samples, block_size=300, use_mid_side=True)
    header = unpack_audio_header(data)
    blocks = split_blocks(data, header)

    assert [b['frames'] for b in blocks] == [300, 300, 300, 100]
    last = decode_block(blocks[3], use_mid_side=True, index=3)
    np.testing.assert_array_equal(last, samples[900:])
    middle = decode_block(blocks[1], use_mid_side=True, index=1)
    np.testing.assert_array_equal(middle, samples[300:600])


def test_workers_match_sequential():
    """Threaded block coding gives identical bytes and samples."""
    print("\n" + "=" * 60)
    print("Test 3: Parallel Blocks")
    print("=" * 60)

    samples = create_stereo(20000)
    sequential = AudioEncoder(workers=1).encode(samples, block_size=512, use_mid_side=True)
    threaded = AudioEncoder(workers=4).encode(samples, block_size=512, use_mid_side=True)
    assert sequential == threaded

    decoded, _ = AudioDecoder(workers=4).decode(threaded)
    np.testing.assert_array_equal(decoded, samples)
    print("✅ Parallel blocks test passed")


def test_mid_side_ignored_for_mono(caplog):
    """Mid-side on a non-stereo stream is dropped with a warning."""
    samples = np.arange(-50, 50, dtype=np.int16)
    with caplog.at_level(logging.WARNING, logger='golombcodec.codec.audio_codec'):
        data = AudioEncoder().encode(samples, block_size=32, use_mid_side=True)

    assert data[5] == 0
    assert any('Mid-side' in record.getMessage() for record in caplog.records)
    decoded, header = AudioDecoder().decode(data)
    assert header['use_mid_side'] is False
    np.testing.assert_array_equal(decoded[:, 0], samples)


def test_invalid_encoder_input():
    """Bad samples and parameters raise InvalidParameter."""
    print("\n" + "=" * 60)
    print("Test 4: Error Handling")
    print("=" * 60)

    encoder = AudioEncoder()
    with pytest.raises(InvalidParameter):
        encoder.encode(np.zeros(8, dtype=np.int16), block_size=0)
    with pytest.raises(InvalidParameter):
        encoder.encode(np.array([0.5, 1.5]))
    with pytest.raises(InvalidParameter):
        encoder.encode(np.array([40000, 0]))
    with pytest.raises(InvalidParameter):
        encoder.encode(np.zeros((2, 2, 2), dtype=np.int16))
    with pytest.raises(InvalidParameter):
        encoder.encode(np.zeros(9, dtype=np.int16), channel_count=2)
    with pytest.raises(InvalidParameter):
        encoder.encode(np.zeros((4, 2), dtype=np.int16), channel_count=3)
    with pytest.raises(InvalidParameter):
        AudioEncoder(workers=0)
    with pytest.raises(InvalidParameter):
        AudioDecoder(workers=0)


def _known_stream():
    return AudioEncoder().encode(np.array([10, 12, 11, 9], dtype=np.int16), block_size=4)


def test_truncated_streams():
    """A stream cut anywhere after the header is reported as truncated."""
    data = _known_stream()
    decoder = AudioDecoder()

    for cut in (10, AUDIO_HEADER_SIZE, AUDIO_HEADER_SIZE + 2, 30, len(data) - 1):
        with pytest.raises(TruncatedStream):
            decoder.decode(data[:cut])


def test_truncated_payload_bits():
    """Residuals that overrun the declared bit count raise TruncatedStream."""
    data = (pack_audio_header(1, 44100, 4, 4, False)
            + struct.pack('<I', 2)
            + struct.pack('<i', 10)
            + struct.pack('<II', 1, 8)
            + bytes([0x2D]))

    with pytest.raises(TruncatedStream) as excinfo:
        AudioDecoder().decode(data)
    assert 'Block 0' in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, TruncatedStream)


def test_corrupt_blocks():
    """Inconsistent block fields raise CorruptBlock."""
    data = bytearray(_known_stream())
    m_offset = AUDIO_HEADER_SIZE
    lengths_offset = AUDIO_HEADER_SIZE + 4 + 4

    zero_m = bytearray(data)
    struct.pack_into('<I', zero_m, m_offset, 0)
    with pytest.raises(CorruptBlock):
        AudioDecoder().decode(bytes(zero_m))

    bad_length = bytearray(data)
    struct.pack_into('<II', bad_length, lengths_offset, 3, 9)
    with pytest.raises(CorruptBlock):
        AudioDecoder().decode(bytes(bad_length) + b'\x00')

    extra_bits = bytearray(data)
    struct.pack_into('<II', extra_bits, lengths_offset, 2, 10)
    with pytest.raises(CorruptBlock):
        AudioDecoder().decode(bytes(extra_bits))


def test_block_too_short_for_frames():
    """A block declaring more frames than its bits can code is corrupt."""
    huge = 2 ** 32 - 1
    data = (pack_audio_header(1, 44100, huge, huge, False)
            + struct.pack('<I', 1)
            + struct.pack('<i', 0)
            + struct.pack('<II', 0, 0))
    with pytest.raises(CorruptBlock):
        AudioDecoder().decode(data)

    # Four mono frames need at least three bits
    short = (pack_audio_header(1, 44100, 4, 4, False)
             + struct.pack('<I', 2)
             + struct.pack('<i', 10)
             + struct.pack('<II', 1, 2)
             + bytes([0x80]))
    with pytest.raises(CorruptBlock):
        AudioDecoder().decode(short)


def test_trailing_and_header_errors():
    """Trailing bytes and foreign data are format errors."""
    data = _known_stream()
    with pytest.raises(FormatError):
        AudioDecoder().decode(data + b'\x00')
    with pytest.raises(FormatError):
        AudioDecoder().decode(b'RIFF' + data[4:])
    with pytest.raises(ValueError):
        AudioDecoder().decode(b'GOLB')
    print("✅ Error handling test passed")


def main():
    """Run all Checkpoint 5 tests."""
    sys.exit(pytest.main([__file__, '-v']))


if __name__ == "__main__":
    main()
