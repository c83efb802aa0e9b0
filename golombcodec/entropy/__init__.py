"""Entropy coding modules for the Golomb codecs."""

from .golomb import GolombCoder, NegativeMode, bits_to_string
from .dpcm import dpcm_encode, dpcm_decode
from .parameter import block_cost, select_block_parameter, estimate_parameter

__all__ = [
    'GolombCoder',
    'NegativeMode',
    'bits_to_string',
    'dpcm_encode',
    'dpcm_decode',
    'block_cost',
    'select_block_parameter',
    'estimate_parameter',
]
