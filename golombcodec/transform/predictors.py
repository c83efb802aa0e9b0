"""Causal spatial predictors for lossless image coding.

Every predictor reads only the left (a), above (b) and upper-left (c)
neighbours of a pixel. Neighbours outside the image read as 0.

    c b
    a x
"""

import enum

import numpy as np

from ..errors import FormatError


class Predictor(enum.IntEnum):
    """Predictor modes. The value is the id stored in the image header."""
    PREV_PIXEL = 0          # a
    ABOVE_PIXEL = 1         # b
    AVERAGE_PREDICTOR = 2   # (a + b) / 2
    PAETH_PREDICTOR = 3     # Paeth
    JPEG_LS_PREDICTOR = 4   # a + b - c
    GRADIENT_PREDICTOR = 5  # a + (b - c) / 2


def get_predictor(value) -> Predictor:
    """
    Resolve a predictor from its id, name or enum member.

    Raises:
        FormatError: If no predictor matches
    """
    if isinstance(value, Predictor):
        return value
    if isinstance(value, str):
        key = value.strip().upper().replace('-', '_')
        for predictor in Predictor:
            if key in (predictor.name, predictor.name.replace('_PREDICTOR', '')):
                return predictor
        raise FormatError(f"Unknown predictor: {value}")
    try:
        return Predictor(int(value))
    except ValueError:
        raise FormatError(f"Unknown predictor id: {value}") from None


def _div2(value: int) -> int:
    """Divide by two, truncating toward zero."""
    return -((-value) // 2) if value < 0 else value // 2


def paeth(a: int, b: int, c: int) -> int:
    """Pick whichever of a, b, c is closest to a + b - c (ties favour a, then b)."""
    p = a + b - c
    pa = abs(p - a)
    pb = abs(p - b)
    pc = abs(p - c)

    if pa <= pb and pa <= pc:
        return a
    if pb <= pc:
        return b
    return c


def predict_pixel(predictor: Predictor, a: int, b: int, c: int) -> int:
    """
    Predict one pixel from its causal neighbours.

    Args:
        predictor: Predictor mode
        a: Left neighbour
        b: Above neighbour
        c: Upper-left neighbour

    Returns:
        Prediction (not clamped)
    """
    if predictor == Predictor.PREV_PIXEL:
        return a
    if predictor == Predictor.ABOVE_PIXEL:
        return b
    if predictor == Predictor.AVERAGE_PREDICTOR:
        return (a + b) // 2
    if predictor == Predictor.PAETH_PREDICTOR:
        return paeth(a, b, c)
    if predictor == Predictor.JPEG_LS_PREDICTOR:
        return a + b - c
    if predictor == Predictor.GRADIENT_PREDICTOR:
        return a + _div2(b - c)
    raise FormatError(f"Unknown predictor: {predictor}")


def neighbours(image: np.ndarray):
    """
    Left, above and upper-left neighbour planes of an image.

    Args:
        image: 2D array (height, width)

    Returns:
        (a, b, c) int32 arrays of the same shape, 0 outside the image
    """
    padded = np.zeros((image.shape[0] + 1, image.shape[1] + 1), dtype=np.int32)
    padded[1:, 1:] = image
    a = padded[1:, :-1]
    b = padded[:-1, 1:]
    c = padded[:-1, :-1]
    return a, b, c


def predict_image(image: np.ndarray, predictor: Predictor) -> np.ndarray:
    """
    Predict every pixel of a fully known image at once.

    Equivalent to calling predict_pixel in raster order, which is only
    possible on the encoder side where all neighbours are known.

    Args:
        image: 2D array (height, width)
        predictor: Predictor mode

    Returns:
        int32 prediction array
    """
    a, b, c = neighbours(image)

    if predictor == Predictor.PREV_PIXEL:
        return a.copy()
    if predictor == Predictor.ABOVE_PIXEL:
        return b.copy()
    if predictor == Predictor.AVERAGE_PREDICTOR:
        return (a + b) // 2
    if predictor == Predictor.PAETH_PREDICTOR:
        p = a + b - c
        pa = np.abs(p - a)
        pb = np.abs(p - b)
        pc = np.abs(p - c)
        return np.where((pa <= pb) & (pa <= pc), a, np.where(pb <= pc, b, c))
    if predictor == Predictor.JPEG_LS_PREDICTOR:
        return a + b - c
    if predictor == Predictor.GRADIENT_PREDICTOR:
        d = b - c
        return a + np.sign(d) * (np.abs(d) // 2)
    raise FormatError(f"Unknown predictor: {predictor}")


def compute_residuals(image: np.ndarray, predictor: Predictor) -> np.ndarray:
    """Residual = actual - predicted, for every pixel (int32)."""
    return image.astype(np.int32) - predict_image(image, predictor)
