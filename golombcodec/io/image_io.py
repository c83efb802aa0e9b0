"""Grayscale image reader and writer backed by Pillow."""

from pathlib import Path

import numpy as np
from PIL import Image

from ..errors import InvalidParameter


def read_grayscale_image(path: str) -> np.ndarray:
    """
    Read an image file as 8-bit grayscale.

    Colour images are converted with Pillow's 'L' mode.

    Args:
        path: Path to any format Pillow can open

    Returns:
        2D numpy array with dtype uint8
    """
    with Image.open(Path(path)) as img:
        return np.array(img.convert('L'), dtype=np.uint8)


def write_grayscale_image(image: np.ndarray, path: str) -> None:
    """
    Write an 8-bit grayscale image. The format follows the file extension.

    Args:
        image: 2D numpy array
        path: Output file path
    """
    image = np.asarray(image)
    if image.ndim != 2:
        raise InvalidParameter(f"Expected 2D array, got {image.ndim}D")

    Image.fromarray(image.astype(np.uint8)).save(Path(path))
