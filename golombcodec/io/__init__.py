"""I/O modules for the Golomb codecs."""

from .bitstream import (
    BitstreamWriter,
    BitstreamReader,
    pack_audio_header,
    unpack_audio_header,
    write_image_header,
    read_image_header,
)
from .audio_io import read_wav, write_wav
from .image_io import read_grayscale_image, write_grayscale_image

__all__ = [
    'BitstreamWriter',
    'BitstreamReader',
    'pack_audio_header',
    'unpack_audio_header',
    'write_image_header',
    'read_image_header',
    'read_wav',
    'write_wav',
    'read_grayscale_image',
    'write_grayscale_image',
]
