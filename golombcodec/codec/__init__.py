"""Codec modules for the Golomb codecs."""

from .audio_codec import AudioEncoder, AudioDecoder
from .image_codec import ImageEncoder, ImageDecoder

__all__ = [
    'AudioEncoder',
    'AudioDecoder',
    'ImageEncoder',
    'ImageDecoder',
]
