"""Bitstream reader and writer for binary data."""

import io
import struct
from typing import Iterable

from ..constants import (
    MAGIC, VERSION, AUDIO_HEADER_FORMAT, AUDIO_HEADER_SIZE, BIT_DEPTH,
    TRANSFORM_NONE, TRANSFORM_MID_SIDE,
    IMAGE_WIDTH_BITS, IMAGE_HEIGHT_BITS, IMAGE_M_BITS,
    IMAGE_PREDICTOR_BITS, IMAGE_RESERVED_BITS, IMAGE_HEADER_BITS,
)
from ..errors import FormatError, InvalidParameter, TruncatedStream


class BitstreamWriter:
    """Append-only bit-level writer (MSB first within each byte)."""

    def __init__(self, f=None):
        """
        Initialize bitstream writer.

        Args:
            f: File object opened in binary write mode. An in-memory
               buffer is used when omitted.
        """
        self.f = f if f is not None else io.BytesIO()
        self.accumulator = 0
        self.pending = 0  # bits held in the accumulator, 0 to 7
        self.total_bits = 0

    def write_bit(self, bit: int) -> None:
        """Write a single bit."""
        self.accumulator = (self.accumulator << 1) | (bit & 1)
        self.pending += 1
        self.total_bits += 1
        if self.pending == 8:
            self._flush_byte()

    def write_bits(self, value: int, num_bits: int) -> None:
        """Write multiple bits from value (MSB first)."""
        for i in range(num_bits - 1, -1, -1):
            self.write_bit((value >> i) & 1)

    def write_sequence(self, bits: Iterable[int]) -> None:
        """Append a sequence of bits in order."""
        for bit in bits:
            self.write_bit(bit)

    def bit_count(self) -> int:
        """Total bits written, including the unflushed partial byte."""
        return self.total_bits

    def _flush_byte(self) -> None:
        """Flush accumulated bits as a byte."""
        self.f.write(bytes([self.accumulator]))
        self.accumulator = 0
        self.pending = 0

    def flush(self) -> None:
        """Pad remaining bits with 0s to reach byte boundary."""
        if self.pending > 0:
            padding = 8 - self.pending
            self.accumulator = (self.accumulator << padding)
            self.f.write(bytes([self.accumulator]))
            self.accumulator = 0
            self.pending = 0

    def getvalue(self) -> bytes:
        """Flush and return everything written to the in-memory buffer."""
        self.flush()
        return self.f.getvalue()


class BitstreamReader:
    """
    Random-access bit reader.

    The reader holds no cursor: every read takes an absolute bit position
    and the caller advances its own position by the bits it consumed.
    """

    def __init__(self, data_bytes: bytes, bit_length: int = None):
        """
        Initialize bitstream reader.

        Args:
            data_bytes: Binary data to read from
            bit_length: Number of valid bits in data_bytes. Defaults to
                        every bit of the buffer.
        """
        self.data = data_bytes
        max_bits = len(data_bytes) * 8
        if bit_length is None:
            bit_length = max_bits
        if not 0 <= bit_length <= max_bits:
            raise TruncatedStream(
                f"Declared {bit_length} bits but buffer holds only {max_bits}")
        self.bit_length = bit_length

    @classmethod
    def from_bits(cls, bits: Iterable[int]) -> 'BitstreamReader':
        """Build a reader over a literal bit sequence."""
        writer = BitstreamWriter()
        writer.write_sequence(bits)
        count = writer.bit_count()
        return cls(writer.getvalue(), count)

    def read_bit(self, pos: int) -> int:
        """Read the bit at absolute position pos."""
        if pos < 0 or pos >= self.bit_length:
            raise TruncatedStream(
                f"Bit position {pos} out of range (length {self.bit_length})")
        return (self.data[pos >> 3] >> (7 - (pos & 7))) & 1

    def read_bits(self, pos: int, num_bits: int) -> int:
        """Read num_bits starting at pos and return them as an integer."""
        if pos + num_bits > self.bit_length:
            raise TruncatedStream(
                f"Need {num_bits} bits at position {pos}, "
                f"only {max(0, self.bit_length - pos)} available")
        value = 0
        for i in range(num_bits):
            value = (value << 1) | self.read_bit(pos + i)
        return value


def pack_audio_header(num_channels: int, sample_rate: int, num_frames: int,
                      block_size: int, use_mid_side: bool = False) -> bytes:
    """
    Pack stream metadata into the 21-byte GOLB header.

    Args:
        num_channels: Channel count (1-255)
        sample_rate: Sample rate in Hz
        num_frames: Total frames in the stream
        block_size: Frames per block
        use_mid_side: Whether the stereo pair is stored as mid/side

    Returns:
        21-byte header as bytes
    """
    flag = TRANSFORM_MID_SIDE if use_mid_side else TRANSFORM_NONE
    try:
        return struct.pack(
            AUDIO_HEADER_FORMAT,
            MAGIC,
            VERSION,
            flag,
            num_channels,
            sample_rate,
            BIT_DEPTH,
            num_frames,
            block_size,
        )
    except struct.error as exc:
        raise InvalidParameter(f"Header field out of range: {exc}") from exc


def unpack_audio_header(header_bytes: bytes) -> dict:
    """
    Unpack and validate the 21-byte GOLB header.

    Args:
        header_bytes: At least 21 bytes of header data

    Returns:
        Dictionary with header fields

    Raises:
        TruncatedStream: If fewer than 21 bytes are given
        FormatError: If the header is invalid
    """
    if len(header_bytes) < AUDIO_HEADER_SIZE:
        raise TruncatedStream(
            f"Header too short. Expected {AUDIO_HEADER_SIZE}, got {len(header_bytes)}")

    magic, ver, flag, channels, rate, depth, frames, block = struct.unpack(
        AUDIO_HEADER_FORMAT, header_bytes[:AUDIO_HEADER_SIZE])

    if magic != MAGIC:
        raise FormatError(f"Invalid file signature: {magic}. Expected {MAGIC}")

    if ver != VERSION:
        raise FormatError(f"Unsupported version: {ver}")

    if flag not in (TRANSFORM_NONE, TRANSFORM_MID_SIDE):
        raise FormatError(f"Unknown transform flag: {flag}")

    if depth != BIT_DEPTH:
        raise FormatError(f"Unsupported bit depth: {depth}")

    if channels == 0:
        raise FormatError("Channel count must be at least 1")

    if block == 0:
        raise FormatError("Block size must be at least 1")

    return {
        'version': ver,
        'use_mid_side': flag == TRANSFORM_MID_SIDE,
        'num_channels': channels,
        'sample_rate': rate,
        'bit_depth': depth,
        'num_frames': frames,
        'block_size': block,
    }


def write_image_header(writer: BitstreamWriter, width: int, height: int,
                       m: int, predictor_id: int) -> None:
    """Write the 64-bit image header (width, height, m, predictor, reserved)."""
    fields = (
        ('width', width, IMAGE_WIDTH_BITS),
        ('height', height, IMAGE_HEIGHT_BITS),
        ('m', m, IMAGE_M_BITS),
        ('predictor', predictor_id, IMAGE_PREDICTOR_BITS),
    )
    for name, value, bits in fields:
        if not 0 <= value < (1 << bits):
            raise InvalidParameter(f"Image {name} {value} does not fit in {bits} bits")
        writer.write_bits(value, bits)
    writer.write_bits(0, IMAGE_RESERVED_BITS)


def read_image_header(reader: BitstreamReader) -> dict:
    """
    Read the 64-bit image header from the start of the stream.

    Raises:
        TruncatedStream: If the stream is shorter than the header
        FormatError: If the reserved bits are not zero
    """
    if reader.bit_length < IMAGE_HEADER_BITS:
        raise TruncatedStream(
            f"Image header needs {IMAGE_HEADER_BITS} bits, got {reader.bit_length}")

    pos = 0
    width = reader.read_bits(pos, IMAGE_WIDTH_BITS)
    pos += IMAGE_WIDTH_BITS
    height = reader.read_bits(pos, IMAGE_HEIGHT_BITS)
    pos += IMAGE_HEIGHT_BITS
    m = reader.read_bits(pos, IMAGE_M_BITS)
    pos += IMAGE_M_BITS
    predictor_id = reader.read_bits(pos, IMAGE_PREDICTOR_BITS)
    pos += IMAGE_PREDICTOR_BITS
    reserved = reader.read_bits(pos, IMAGE_RESERVED_BITS)

    if reserved != 0:
        raise FormatError(f"Reserved header bits must be zero, got {reserved:#x}")

    return {
        'width': width,
        'height': height,
        'm': m,
        'predictor': predictor_id,
    }
