"""Compression metrics for codec evaluation."""

import numpy as np


def calculate_bits_per_sample(compressed_size: int, num_samples: int) -> float:
    """
    Calculate bits per sample (bits per pixel for images).

    Args:
        compressed_size: Size of compressed data in bytes
        num_samples: Number of samples (or pixels) coded

    Returns:
        Bits per sample
    """
    if num_samples == 0:
        return 0.0
    return (compressed_size * 8) / num_samples


def calculate_compression_ratio(original_size: int, compressed_size: int) -> float:
    """
    Calculate compression ratio.

    Args:
        original_size: Size of original data in bytes
        compressed_size: Size of compressed data in bytes

    Returns:
        Compression ratio (original / compressed)
    """
    if compressed_size == 0:
        return float('inf')
    return original_size / compressed_size


def calculate_entropy(values: np.ndarray) -> float:
    """
    Zero-order entropy of a set of integer values, in bits per value.

    A lower bound for any memoryless code of the residuals, useful for
    judging how close the Golomb code gets.

    Args:
        values: Integer values (e.g. prediction residuals)

    Returns:
        Entropy in bits
    """
    values = np.asarray(values).ravel()
    if values.size == 0:
        return 0.0

    _, counts = np.unique(values, return_counts=True)
    probs = counts / values.size
    return float(-np.sum(probs * np.log2(probs)))


def is_lossless(original: np.ndarray, reconstructed: np.ndarray) -> bool:
    """Check that a reconstruction matches the original exactly."""
    original = np.asarray(original)
    reconstructed = np.asarray(reconstructed)
    return original.shape == reconstructed.shape and np.array_equal(original, reconstructed)
