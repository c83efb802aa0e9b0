"""GOLB Audio Codec - block-based lossless audio compression.

Stream layout (little-endian):

    header   magic 'GOLB', version, transform flag, channels,
             sample rate, bit depth, total frames, block size
    block*   m (u32), one seed per channel (i32), payload bytes (u32),
             payload bits (u32), payload

Every block carries its own seeds and lengths, so blocks can be encoded
and decoded independently of each other.
"""

import logging
import struct
from concurrent.futures import ThreadPoolExecutor
from typing import List, Tuple

import numpy as np

from ..constants import (
    AUDIO_HEADER_SIZE, BLOCK_M_FORMAT, BLOCK_SEED_FORMAT, BLOCK_LENGTHS_FORMAT,
    DEFAULT_BLOCK_SIZE, DEFAULT_SAMPLE_RATE, M_CANDIDATES,
    SAMPLE_MIN, SAMPLE_MAX,
)
from ..errors import CorruptBlock, FormatError, InvalidParameter, TruncatedStream
from ..io.bitstream import (
    BitstreamWriter, BitstreamReader, pack_audio_header, unpack_audio_header,
)
from ..entropy import (
    GolombCoder, dpcm_encode, dpcm_decode, select_block_parameter,
)
from ..transform import mid_side_forward, mid_side_inverse

logger = logging.getLogger(__name__)

M_SIZE = struct.calcsize(BLOCK_M_FORMAT)
SEED_SIZE = struct.calcsize(BLOCK_SEED_FORMAT)
LENGTHS_SIZE = struct.calcsize(BLOCK_LENGTHS_FORMAT)


class AudioEncoder:
    """
    Encoder for 16-bit PCM audio.

    Pipeline (per block):
    1. Optional mid-side transform (stereo only)
    2. First-order DPCM per channel
    3. Golomb parameter search over M_CANDIDATES
    4. Golomb coding of every residual except each channel's seed
    5. Block framing
    """

    def __init__(self, candidates=M_CANDIDATES, workers: int = 1):
        """
        Args:
            candidates: Golomb parameters tried for every block
            workers: Number of threads used to encode blocks
        """
        if workers < 1:
            raise InvalidParameter(f"workers must be >= 1, got {workers}")
        self.candidates = tuple(candidates)
        self.workers = workers

    def encode(self, samples: np.ndarray, channel_count: int = None,
               sample_rate: int = DEFAULT_SAMPLE_RATE,
               block_size: int = DEFAULT_BLOCK_SIZE,
               use_mid_side: bool = False) -> bytes:
        """
        Encode PCM samples.

        Args:
            samples: Either (frames, channels) or interleaved 1D samples
            channel_count: Channels in samples (inferred for 2D input,
                           defaults to 1 for 1D input)
            sample_rate: Sample rate in Hz
            block_size: Frames per block
            use_mid_side: Store a stereo pair as mid/side

        Returns:
            Compressed data as bytes
        """
        frames = _as_frames(samples, channel_count)
        num_frames, num_channels = frames.shape

        if block_size < 1:
            raise InvalidParameter(f"Block size must be >= 1, got {block_size}")

        if use_mid_side and num_channels != 2:
            logger.warning("Mid-side requested for %d channel(s); ignoring", num_channels)
            use_mid_side = False

        header = pack_audio_header(
            num_channels=num_channels,
            sample_rate=sample_rate,
            num_frames=num_frames,
            block_size=block_size,
            use_mid_side=use_mid_side,
        )

        blocks = [frames[start:start + block_size]
                  for start in range(0, num_frames, block_size)]

        def _encode(block):
            return encode_block(block, use_mid_side, self.candidates)

        if self.workers > 1 and len(blocks) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                encoded_blocks = list(executor.map(_encode, blocks))
        else:
            encoded_blocks = [_encode(block) for block in blocks]

        result = header + b''.join(encoded_blocks)

        logger.info("Encoded %d frames x %d channels in %d blocks (%d bytes)",
                    num_frames, num_channels, len(blocks), len(result))
        return result


class AudioDecoder:
    """
    Decoder for GOLB streams.

    Pipeline (reverse of encoder):
    1. Unpack header
    2. Split the container into blocks using their length fields
    3. Golomb decode each block's residuals
    4. Inverse DPCM
    5. Inverse mid-side
    6. Clamp to 16-bit range
    """

    def __init__(self, workers: int = 1):
        """
        Args:
            workers: Number of threads used to decode blocks
        """
        if workers < 1:
            raise InvalidParameter(f"workers must be >= 1, got {workers}")
        self.workers = workers

    def decode(self, data: bytes) -> Tuple[np.ndarray, dict]:
        """
        Decode a GOLB stream.

        Args:
            data: Compressed data bytes

        Returns:
            (samples, header) where samples is an int16 array of shape
            (frames, channels) and header holds the stream metadata

        Raises:
            FormatError, TruncatedStream, CorruptBlock: If data is invalid
        """
        header = unpack_audio_header(data)
        blocks = split_blocks(data, header)
        use_mid_side = header['use_mid_side']

        def _decode(indexed_block):
            index, block = indexed_block
            return decode_block(block, use_mid_side, index)

        if self.workers > 1 and len(blocks) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                decoded = list(executor.map(_decode, enumerate(blocks)))
        else:
            decoded = [_decode(item) for item in enumerate(blocks)]

        num_channels = header['num_channels']
        if decoded:
            samples = np.concatenate(decoded, axis=0)
        else:
            samples = np.zeros((0, num_channels), dtype=np.int16)

        logger.info("Decoded %d frames x %d channels from %d blocks",
                    samples.shape[0], num_channels, len(blocks))
        return samples, header


def _as_frames(samples, channel_count: int = None) -> np.ndarray:
    """Validate samples and return them as an int64 (frames, channels) array."""
    samples = np.asarray(samples)

    if samples.ndim == 2:
        if channel_count is not None and channel_count != samples.shape[1]:
            raise InvalidParameter(
                f"channel_count={channel_count} but samples have {samples.shape[1]} columns")
        frames = samples
    elif samples.ndim == 1:
        channel_count = 1 if channel_count is None else channel_count
        if channel_count < 1:
            raise InvalidParameter(f"Channel count must be >= 1, got {channel_count}")
        if samples.size % channel_count != 0:
            raise InvalidParameter(
                f"{samples.size} interleaved samples is not a multiple of {channel_count} channels")
        frames = samples.reshape(-1, channel_count)
    else:
        raise InvalidParameter(f"Expected 1D or 2D samples, got {samples.ndim}D")

    if not 1 <= frames.shape[1] <= 255:
        raise InvalidParameter(f"Channel count must be 1-255, got {frames.shape[1]}")

    if frames.size and not np.issubdtype(frames.dtype, np.integer):
        raise InvalidParameter(f"Samples must be integers, got {frames.dtype}")

    frames = frames.astype(np.int64)
    if frames.size and (frames.min() < SAMPLE_MIN or frames.max() > SAMPLE_MAX):
        raise InvalidParameter(
            f"Samples must be within [{SAMPLE_MIN}, {SAMPLE_MAX}], "
            f"got [{frames.min()}, {frames.max()}]")
    return frames


def encode_block(block: np.ndarray, use_mid_side: bool = False,
                 candidates=M_CANDIDATES) -> bytes:
    """
    Encode one block of frames.

    Args:
        block: int64 array (frames, channels)
        use_mid_side: Apply the mid-side transform (2 channels only)
        candidates: Golomb parameters to search

    Returns:
        Framed block bytes
    """
    channels = block.T.astype(np.int64)
    if use_mid_side:
        mid, side = mid_side_forward(channels[0], channels[1])
        channels = np.stack([mid, side])

    residuals = dpcm_encode(channels.T).T  # (channels, frames)
    seeds = [int(r[0]) for r in residuals]
    coded = [int(v) for v in residuals[:, 1:].ravel()]  # channel by channel

    m = select_block_parameter(coded, candidates)
    coder = GolombCoder(m)

    writer = BitstreamWriter()
    for value in coded:
        coder.encode_to(value, writer)
    total_bits = writer.bit_count()
    payload = writer.getvalue()

    logger.debug("Block: %d frames, m=%d, %d bits", block.shape[0], m, total_bits)

    parts = [struct.pack(BLOCK_M_FORMAT, m)]
    parts.extend(struct.pack(BLOCK_SEED_FORMAT, seed) for seed in seeds)
    parts.append(struct.pack(BLOCK_LENGTHS_FORMAT, len(payload), total_bits))
    parts.append(payload)
    return b''.join(parts)


def split_blocks(data: bytes, header: dict) -> List[dict]:
    """
    Walk the block framing and slice out every block.

    Only the fixed-size fields are parsed, no residuals are decoded.

    Args:
        data: Complete GOLB stream
        header: Result of unpack_audio_header

    Returns:
        List of dicts with 'frames', 'm', 'seeds', 'payload', 'total_bits'

    Raises:
        TruncatedStream: If the data ends inside a block
        CorruptBlock: If a block's lengths are inconsistent
        FormatError: If bytes remain after the last block
    """
    num_channels = header['num_channels']
    num_frames = header['num_frames']
    block_size = header['block_size']

    offset = AUDIO_HEADER_SIZE
    frame_pos = 0
    blocks = []

    def _take(size, what):
        nonlocal offset
        if offset + size > len(data):
            raise TruncatedStream(
                f"Block {len(blocks)}: stream ends inside {what} "
                f"(need {size} bytes at offset {offset}, have {len(data) - offset})")
        chunk = data[offset:offset + size]
        offset += size
        return chunk

    while frame_pos < num_frames:
        frames = min(block_size, num_frames - frame_pos)

        (m,) = struct.unpack(BLOCK_M_FORMAT, _take(M_SIZE, 'parameter'))
        seeds = [struct.unpack(BLOCK_SEED_FORMAT, _take(SEED_SIZE, 'seed'))[0]
                 for _ in range(num_channels)]
        byte_len, total_bits = struct.unpack(
            BLOCK_LENGTHS_FORMAT, _take(LENGTHS_SIZE, 'lengths'))

        if m == 0:
            raise CorruptBlock(f"Block {len(blocks)}: parameter m is 0")

        if byte_len != (total_bits + 7) // 8:
            raise CorruptBlock(
                f"Block {len(blocks)}: {byte_len} payload bytes cannot hold "
                f"exactly {total_bits} bits")

        # Every Golomb code takes at least one bit
        if total_bits < num_channels * (frames - 1):
            raise CorruptBlock(
                f"Block {len(blocks)}: {total_bits} bits cannot hold "
                f"{num_channels * (frames - 1)} residuals")

        payload = _take(byte_len, 'payload')

        blocks.append({
            'frames': frames,
            'm': m,
            'seeds': seeds,
            'payload': payload,
            'total_bits': total_bits,
        })
        frame_pos += frames

    if offset != len(data):
        raise FormatError(f"{len(data) - offset} trailing bytes after last block")

    return blocks


def decode_block(block: dict, use_mid_side: bool = False, index: int = 0) -> np.ndarray:
    """
    Decode one block produced by split_blocks.

    Args:
        block: Block record
        use_mid_side: Invert the mid-side transform
        index: Block number, used in error messages

    Returns:
        int16 array (frames, channels)
    """
    frames = block['frames']
    seeds = block['seeds']
    num_channels = len(seeds)
    total_bits = block['total_bits']

    coder = GolombCoder(block['m'])
    reader = BitstreamReader(block['payload'], total_bits)

    residuals = np.zeros((num_channels, frames), dtype=np.int64)
    pos = 0
    for ch in range(num_channels):
        residuals[ch, 0] = seeds[ch]
        for i in range(1, frames):
            try:
                value, used = coder.decode(reader, pos)
            except TruncatedStream as exc:
                raise TruncatedStream(
                    f"Block {index}: channel {ch}, residual {i}, m={coder.m}, "
                    f"bit {pos} of {total_bits}: {exc}") from exc
            residuals[ch, i] = value
            pos += used

    if pos != total_bits:
        raise CorruptBlock(
            f"Block {index}: residuals used {pos} bits, block declares {total_bits}")

    channels = dpcm_decode(residuals.T).T

    if use_mid_side and num_channels == 2:
        left, right = mid_side_inverse(channels[0], channels[1])
        channels = np.stack([left, right])

    return np.clip(channels.T, SAMPLE_MIN, SAMPLE_MAX).astype(np.int16)
