"""Mid-side stereo decorrelation."""

import numpy as np


def _halve(values: np.ndarray) -> np.ndarray:
    """Integer halving that truncates toward zero."""
    return np.sign(values) * (np.abs(values) // 2)


def mid_side_forward(left: np.ndarray, right: np.ndarray):
    """
    Map a stereo pair to mid/side channels.

        M = L + R
        S = L - R

    M + S = 2L is always even, so the transform is exactly invertible.

    Args:
        left: Left channel samples
        right: Right channel samples

    Returns:
        (mid, side) as int64 arrays
    """
    left = np.asarray(left, dtype=np.int64)
    right = np.asarray(right, dtype=np.int64)
    return left + right, left - right


def mid_side_inverse(mid: np.ndarray, side: np.ndarray):
    """
    Recover the stereo pair from mid/side channels.

        L = (M + S) / 2
        R = (M - S) / 2

    Args:
        mid: Mid channel
        side: Side channel

    Returns:
        (left, right) as int64 arrays
    """
    mid = np.asarray(mid, dtype=np.int64)
    side = np.asarray(side, dtype=np.int64)
    return _halve(mid + side), _halve(mid - side)
