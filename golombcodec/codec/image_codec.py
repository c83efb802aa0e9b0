"""Predictive lossless image codec for 8-bit grayscale images."""

import logging

import numpy as np

from ..constants import (
    IMAGE_HEADER_BITS, IMAGE_WIDTH_BITS, IMAGE_HEIGHT_BITS, PIXEL_MIN, PIXEL_MAX,
)
from ..errors import FormatError, InvalidParameter
from ..io.bitstream import (
    BitstreamWriter, BitstreamReader, write_image_header, read_image_header,
)
from ..entropy import GolombCoder, estimate_parameter
from ..transform import (
    Predictor, get_predictor, compute_residuals, predict_pixel,
)

logger = logging.getLogger(__name__)


class ImageEncoder:
    """
    Encoder for 8-bit grayscale images.

    Pipeline:
    1. Predict every pixel from its left/above/upper-left neighbours
    2. Residual = actual - predicted
    3. Estimate one Golomb m from the mean absolute residual
    4. Write header (width, height, m, predictor)
    5. Golomb code residuals in raster order
    """

    def __init__(self, predictor=Predictor.AVERAGE_PREDICTOR):
        self.predictor = get_predictor(predictor)

    def encode(self, image: np.ndarray, predictor=None) -> bytes:
        """
        Encode an image.

        Args:
            image: 2D numpy array (height, width) with values in [0, 255]
            predictor: Overrides the encoder's predictor for this call

        Returns:
            Packed bit sequence (zero-padded to a whole byte)
        """
        predictor = self.predictor if predictor is None else get_predictor(predictor)
        image = _validate_image(image)
        height, width = image.shape

        residuals = compute_residuals(image, predictor)
        m = estimate_parameter(residuals)
        coder = GolombCoder(m)

        writer = BitstreamWriter()
        write_image_header(writer, width, height, m, int(predictor))
        for value in residuals.ravel().tolist():
            coder.encode_to(value, writer)

        logger.debug("Image %dx%d: predictor=%s, m=%d, %d bits",
                     width, height, predictor.name, m, writer.bit_count())
        return writer.getvalue()


class ImageDecoder:
    """
    Decoder for predictive Golomb images.

    Decoding is strictly sequential: each pixel's prediction needs its
    already reconstructed left, above and upper-left neighbours.
    """

    def decode(self, data: bytes, width: int = None, height: int = None) -> np.ndarray:
        """
        Decode an image.

        Args:
            data: Packed bit sequence produced by ImageEncoder
            width: Expected width (checked against the header when given)
            height: Expected height (checked against the header when given)

        Returns:
            Reconstructed 2D uint8 array (height, width)

        Raises:
            FormatError, TruncatedStream: If data is invalid
        """
        reader = BitstreamReader(data)
        header = read_image_header(reader)

        if width is not None and width != header['width']:
            raise FormatError(f"Width mismatch: header says {header['width']}, expected {width}")
        if height is not None and height != header['height']:
            raise FormatError(f"Height mismatch: header says {header['height']}, expected {height}")
        if header['m'] == 0:
            raise FormatError("Image header declares m = 0")

        width = header['width']
        height = header['height']
        predictor = get_predictor(header['predictor'])
        coder = GolombCoder(header['m'])

        rows = []
        prev = [0] * width
        pos = IMAGE_HEADER_BITS
        for _ in range(height):
            row = [0] * width
            for x in range(width):
                residual, used = coder.decode(reader, pos)
                pos += used
                a = row[x - 1] if x > 0 else 0
                b = prev[x]
                c = prev[x - 1] if x > 0 else 0
                value = predict_pixel(predictor, a, b, c) + residual
                row[x] = min(PIXEL_MAX, max(PIXEL_MIN, value))
            rows.append(row)
            prev = row

        return np.array(rows, dtype=np.uint8).reshape(height, width)


def _validate_image(image) -> np.ndarray:
    """Check shape and range, return the image as a 2D int32 array."""
    image = np.asarray(image)
    if image.ndim != 2:
        raise InvalidParameter(f"Expected 2D image, got {image.ndim}D")
    height, width = image.shape
    if width >= (1 << IMAGE_WIDTH_BITS) or height >= (1 << IMAGE_HEIGHT_BITS):
        raise InvalidParameter(f"Image {width}x{height} exceeds the 16-bit header limits")
    if image.size and not np.issubdtype(image.dtype, np.integer):
        raise InvalidParameter(f"Pixels must be integers, got {image.dtype}")

    image = image.astype(np.int64)
    if image.size and (image.min() < PIXEL_MIN or image.max() > PIXEL_MAX):
        raise InvalidParameter(
            f"Pixels must be within [{PIXEL_MIN}, {PIXEL_MAX}], "
            f"got [{image.min()}, {image.max()}]")
    return image.astype(np.int32)
