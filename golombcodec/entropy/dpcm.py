"""DPCM (Differential Pulse Code Modulation) for sample blocks."""

import numpy as np


def dpcm_encode(values: np.ndarray) -> np.ndarray:
    """
    Apply first-order DPCM along the first axis.

    Adjacent samples are highly correlated, so instead of encoding
    absolute values we encode differences:
        diff[0] = x[0]
        diff[i] = x[i] - x[i-1]  for i > 0

    A 2D input of shape (frames, channels) is differenced per channel.

    Args:
        values: Array of samples

    Returns:
        Array of differences (same shape as input, int64)
    """
    values = np.asarray(values, dtype=np.int64)
    diff = np.zeros_like(values)
    if len(values) == 0:
        return diff

    diff[0] = values[0]

    if len(values) > 1:
        diff[1:] = values[1:] - values[:-1]

    return diff


def dpcm_decode(diff_values: np.ndarray) -> np.ndarray:
    """
    Decode DPCM differences back to samples (running sum along axis 0).

    Args:
        diff_values: Array of differences

    Returns:
        Reconstructed values (int64)
    """
    return np.cumsum(np.asarray(diff_values, dtype=np.int64), axis=0)
