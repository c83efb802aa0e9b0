"""Metrics for the Golomb codecs."""

from .quality import (
    calculate_bits_per_sample,
    calculate_compression_ratio,
    calculate_entropy,
    is_lossless,
)

__all__ = [
    'calculate_bits_per_sample',
    'calculate_compression_ratio',
    'calculate_entropy',
    'is_lossless',
]
