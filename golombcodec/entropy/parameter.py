"""Golomb parameter selection.

Two strategies are used:

- Audio blocks search a fixed candidate set exhaustively and keep the
  candidate with the smallest exact coded size.
- Images estimate one global m from the mean absolute residual, assuming
  the residual magnitudes are roughly geometrically distributed.
"""

import math
from typing import Iterable, Sequence

import numpy as np

from ..constants import M_CANDIDATES, DEFAULT_IMAGE_M
from .golomb import GolombCoder, NegativeMode


def block_cost(residuals: Iterable[int], m: int, limit: int = None,
               mode: NegativeMode = NegativeMode.INTERLEAVING) -> int:
    """
    Exact number of bits needed to code residuals with parameter m.

    Args:
        residuals: Values to be coded
        m: Golomb parameter
        limit: Stop summing once the total reaches this value
        mode: Negative value mapping

    Returns:
        Total bit cost, or a value >= limit if the sum was cut short
    """
    coder = GolombCoder(m, mode)
    total = 0
    for value in residuals:
        total += coder.code_length(value)
        if limit is not None and total >= limit:
            break
    return total


def select_block_parameter(residuals: Sequence[int],
                           candidates: Sequence[int] = M_CANDIDATES,
                           mode: NegativeMode = NegativeMode.INTERLEAVING) -> int:
    """
    Pick the candidate m with the smallest coded size for a block.

    Candidates are tried in order. Each candidate's running cost is
    abandoned as soon as it reaches the best total found so far, so the
    search only prunes losers and always returns the exact minimizer.
    Ties keep the earlier (smaller) candidate, which also makes an empty
    or all-zero block choose the first candidate.

    Args:
        residuals: All coded residuals of the block (every channel)
        candidates: Parameters to try, in preference order
        mode: Negative value mapping

    Returns:
        The chosen m
    """
    best_m = candidates[0]
    best_bits = None

    for m in candidates:
        bits = block_cost(residuals, m, limit=best_bits, mode=mode)
        if best_bits is None or bits < best_bits:
            best_bits = bits
            best_m = m

    return best_m


def estimate_parameter(residuals: np.ndarray) -> int:
    """
    Estimate a single m from the mean absolute residual.

    For a geometric source with p = 1 / (mean + 1), the best Golomb
    parameter is close to -1 / log2(1 - p). The estimate is rounded half
    up and floored at 1.

    Args:
        residuals: Signed prediction residuals

    Returns:
        Estimated m (DEFAULT_IMAGE_M when there are no residuals)
    """
    residuals = np.asarray(residuals)
    if residuals.size == 0:
        return DEFAULT_IMAGE_M

    mean = float(np.mean(np.abs(residuals.astype(np.float64))))
    if mean < 1e-10:
        return 1

    p = 1.0 / (mean + 1.0)
    m = -1.0 / math.log2(1.0 - p)

    return max(1, int(math.floor(m + 0.5)))
