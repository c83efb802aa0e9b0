"""Lossless Golomb-Rice audio and image codecs."""

import numpy as np

from .codec import AudioEncoder, AudioDecoder, ImageEncoder, ImageDecoder
from .entropy import GolombCoder, NegativeMode
from .transform import Predictor
from .errors import (
    CodecError,
    InvalidParameter,
    FormatError,
    TruncatedStream,
    CorruptBlock,
)
from .constants import DEFAULT_BLOCK_SIZE, DEFAULT_SAMPLE_RATE

__version__ = '0.1.0'


def encode_audio(samples, channel_count=None, sample_rate=DEFAULT_SAMPLE_RATE,
                 block_size=DEFAULT_BLOCK_SIZE, use_mid_side=False):
    """Encode 16-bit PCM samples into a GOLB stream."""
    return AudioEncoder().encode(samples, channel_count=channel_count,
                                 sample_rate=sample_rate, block_size=block_size,
                                 use_mid_side=use_mid_side)


def decode_audio(data):
    """Decode a GOLB stream into (samples, header)."""
    return AudioDecoder().decode(data)


def encode_image(pixels, width=None, height=None,
                 predictor=Predictor.AVERAGE_PREDICTOR):
    """
    Encode an 8-bit grayscale image.

    pixels may be a 2D array, or a flat raster with width and height given.
    """
    pixels = np.asarray(pixels)
    if pixels.ndim == 1:
        if width is None or height is None:
            raise InvalidParameter("width and height are required for flat pixel data")
        if pixels.size != width * height:
            raise InvalidParameter(
                f"Expected {width * height} pixels for {width}x{height}, got {pixels.size}")
        pixels = pixels.reshape(height, width)
    elif pixels.ndim == 2:
        if (width is not None and width != pixels.shape[1]) or \
                (height is not None and height != pixels.shape[0]):
            raise InvalidParameter(
                f"Image is {pixels.shape[1]}x{pixels.shape[0]}, not {width}x{height}")
    return ImageEncoder(predictor).encode(pixels)


def decode_image(data, width=None, height=None):
    """Decode a predictive Golomb image into a 2D uint8 array."""
    return ImageDecoder().decode(data, width=width, height=height)


__all__ = [
    'encode_audio',
    'decode_audio',
    'encode_image',
    'decode_image',
    'AudioEncoder',
    'AudioDecoder',
    'ImageEncoder',
    'ImageDecoder',
    'GolombCoder',
    'NegativeMode',
    'Predictor',
    'CodecError',
    'InvalidParameter',
    'FormatError',
    'TruncatedStream',
    'CorruptBlock',
]
