"""Golomb coding with truncated-binary remainders."""

import enum
import numbers
from typing import List, Tuple

from ..errors import InvalidParameter
from ..io.bitstream import BitstreamReader, BitstreamWriter


class NegativeMode(enum.Enum):
    """How signed values are mapped before coding."""
    SIGN_MAGNITUDE = 0  # explicit leading sign bit, then |n|
    INTERLEAVING = 1    # zigzag: 0, -1, 1, -2, 2, ... -> 0, 1, 2, 3, 4, ...


class GolombCoder:
    """
    Encoder/decoder for one signed integer under a fixed parameter m.

    A value n is mapped to an unsigned integer, split into
    q = mapped // m and r = mapped % m, and written as:

        [sign bit]  q zeros, one 1  truncated-binary r

    With b = ceil(log2(m)) and cutoff = 2^b - m, remainders below cutoff
    take b-1 bits and the rest are written as r + cutoff in b bits.
    For m = 1 the remainder takes no bits (pure unary code).

    The coder is immutable: build a new one to change m.
    """

    def __init__(self, m: int, mode: NegativeMode = NegativeMode.INTERLEAVING):
        """
        Args:
            m: Golomb parameter (must be >= 1)
            mode: Negative value mapping

        Raises:
            InvalidParameter: If m is not an integer or m < 1
        """
        if isinstance(m, bool) or not isinstance(m, numbers.Integral):
            raise InvalidParameter(f"Parameter m must be an integer, got {m!r}")
        m = int(m)
        if m < 1:
            raise InvalidParameter(f"Parameter m must be greater than 0, got {m}")

        self._m = m
        self._mode = mode
        self._b = (m - 1).bit_length()  # ceil(log2(m))
        self._two_power_b = 1 << self._b
        self._cutoff = self._two_power_b - m

    @property
    def m(self) -> int:
        return self._m

    @property
    def mode(self) -> NegativeMode:
        return self._mode

    @property
    def b(self) -> int:
        return self._b

    @property
    def cutoff(self) -> int:
        return self._cutoff

    def __repr__(self):
        return f"GolombCoder(m={self._m}, mode={self._mode.name})"

    def map_to_unsigned(self, n: int) -> int:
        """Map a signed value to the unsigned integer that gets coded."""
        if self._mode is NegativeMode.SIGN_MAGNITUDE:
            return abs(n)
        if n >= 0:
            return 2 * n
        return -2 * n - 1

    def map_to_signed(self, mapped: int) -> int:
        """Inverse of map_to_unsigned (sign handled separately in SIGN_MAGNITUDE)."""
        if self._mode is NegativeMode.SIGN_MAGNITUDE:
            return mapped
        if mapped % 2 == 0:
            return mapped // 2
        return -((mapped + 1) // 2)

    def encode(self, n: int) -> List[int]:
        """Return the code for n as a list of bits."""
        n = int(n)
        bits = []
        if self._mode is NegativeMode.SIGN_MAGNITUDE:
            bits.append(1 if n < 0 else 0)

        mapped = self.map_to_unsigned(n)
        q, r = divmod(mapped, self._m)

        bits.extend([0] * q)
        bits.append(1)

        if r < self._cutoff:
            width, value = self._b - 1, r
        else:
            width, value = self._b, r + self._cutoff
        for i in range(width - 1, -1, -1):
            bits.append((value >> i) & 1)
        return bits

    def encode_to(self, n: int, writer: BitstreamWriter) -> None:
        """Append the code for n to writer."""
        n = int(n)
        if self._mode is NegativeMode.SIGN_MAGNITUDE:
            writer.write_bit(1 if n < 0 else 0)

        mapped = self.map_to_unsigned(n)
        q, r = divmod(mapped, self._m)

        for _ in range(q):
            writer.write_bit(0)
        writer.write_bit(1)

        if r < self._cutoff:
            writer.write_bits(r, self._b - 1)
        else:
            writer.write_bits(r + self._cutoff, self._b)

    def code_length(self, n: int) -> int:
        """Exact number of bits encode(n) produces."""
        mapped = self.map_to_unsigned(int(n))
        q, r = divmod(mapped, self._m)
        length = q + 1 + (self._b - 1 if r < self._cutoff else self._b)
        if self._mode is NegativeMode.SIGN_MAGNITUDE:
            length += 1
        return length

    def decode(self, reader: BitstreamReader, start_pos: int = 0) -> Tuple[int, int]:
        """
        Decode one value starting at bit start_pos.

        Args:
            reader: Source bits
            start_pos: Absolute bit position of the code

        Returns:
            (value, bits_consumed)

        Raises:
            TruncatedStream: If the bits run out before the code ends
        """
        pos = start_pos

        negative = False
        if self._mode is NegativeMode.SIGN_MAGNITUDE:
            negative = reader.read_bit(pos) == 1
            pos += 1

        # Unary quotient: zeros terminated by a one
        q = 0
        while reader.read_bit(pos) == 0:
            q += 1
            pos += 1
        pos += 1

        r = 0
        if self._b > 0:
            r = reader.read_bits(pos, self._b - 1)
            pos += self._b - 1
            if r >= self._cutoff:
                r = ((r << 1) | reader.read_bit(pos)) - self._cutoff
                pos += 1

        value = self.map_to_signed(q * self._m + r)
        if negative:
            value = -value
        return value, pos - start_pos


def bits_to_string(bits) -> str:
    """Render a bit sequence as a string of '0' and '1'."""
    return ''.join('1' if bit else '0' for bit in bits)
