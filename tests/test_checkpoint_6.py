"""Checkpoint 6: Predictive Image Codec Verification."""

import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np
import pytest
from golombcodec import ImageEncoder, ImageDecoder, Predictor
from golombcodec.entropy import GolombCoder
from golombcodec.errors import FormatError, InvalidParameter, TruncatedStream
from golombcodec.io import BitstreamWriter, BitstreamReader, write_image_header, read_image_header


def create_test_image(height=48, width=64, seed=42):
    """Smooth gradient with a bright square and some noise."""
    rng = np.random.default_rng(seed)
    y, x = np.mgrid[:height, :width]
    image = x * 2.0 + y * 1.5
    image[height // 4:height // 2, width // 4:width // 2] += 80
    image += rng.normal(0, 4, image.shape)
    return np.clip(np.round(image), 0, 255).astype(np.uint8)


def test_known_2x2_image():
    """2x2 image with the average predictor has a fixed 11-byte encoding."""
    print("=" * 60)
    print("Test 1: Known 2x2 Image")
    print("=" * 60)

    image = np.array([[5, 7], [6, 9]], dtype=np.uint8)
    data = ImageEncoder(Predictor.AVERAGE_PREDICTOR).encode(image)

    header = read_image_header(BitstreamReader(data))
    assert header == {'width': 2, 'height': 2, 'm': 3, 'predictor': 2}
    assert data == bytes([0x00, 0x02, 0x00, 0x02, 0x00, 0x03, 0x20, 0x00,
                          0x18, 0x63, 0x90])

    decoded = ImageDecoder().decode(data, 2, 2)
    assert decoded.dtype == np.uint8
    np.testing.assert_array_equal(decoded, image)
    print("✅ Known image test passed")


@pytest.mark.parametrize("predictor", list(Predictor))
def test_roundtrip_all_predictors(predictor):
    """Every predictor reconstructs the image exactly."""
    image = create_test_image()
    data = ImageEncoder(predictor).encode(image)

    assert read_image_header(BitstreamReader(data))['predictor'] == int(predictor)
    decoded = ImageDecoder().decode(data)
    np.testing.assert_array_equal(decoded, image)


@pytest.mark.parametrize("shape", [(1, 1), (1, 17), (17, 1), (3, 5)])
def test_roundtrip_small_shapes(shape):
    """Single rows, single columns and tiny images."""
    rng = np.random.default_rng(sum(shape))
    image = rng.integers(0, 256, shape).astype(np.uint8)
    for predictor in Predictor:
        data = ImageEncoder(predictor).encode(image)
        np.testing.assert_array_equal(ImageDecoder().decode(data), image)


def test_extreme_pixels():
    """Hard edges between 0 and 255 decode exactly."""
    image = np.zeros((16, 16), dtype=np.uint8)
    image[::2, 1::2] = 255
    image[1::2, ::2] = 255
    for predictor in Predictor:
        data = ImageEncoder(predictor).encode(image)
        np.testing.assert_array_equal(ImageDecoder().decode(data), image)


def test_predictor_override():
    """encode(predictor=...) overrides the encoder default."""
    image = create_test_image(16, 16)
    data = ImageEncoder(Predictor.PREV_PIXEL).encode(image, predictor='paeth')
    assert read_image_header(BitstreamReader(data))['predictor'] == 3
    np.testing.assert_array_equal(ImageDecoder().decode(data), image)


def test_black_image_uses_unary():
    """An all-zero image has zero residuals and m = 1."""
    print("\n" + "=" * 60)
    print("Test 2: Degenerate Images")
    print("=" * 60)

    image = np.zeros((8, 8), dtype=np.uint8)
    data = ImageEncoder().encode(image)
    assert read_image_header(BitstreamReader(data))['m'] == 1
    # 64 header bits + one bit per pixel
    assert len(data) == 8 + 8
    np.testing.assert_array_equal(ImageDecoder().decode(data), image)


def test_empty_image():
    """An image without pixels is a bare header with m = 8."""
    data = ImageEncoder().encode(np.zeros((0, 0), dtype=np.uint8))
    assert len(data) == 8
    assert read_image_header(BitstreamReader(data)) == {
        'width': 0, 'height': 0, 'm': 8, 'predictor': 2,
    }
    assert ImageDecoder().decode(data).shape == (0, 0)
    print("✅ Degenerate images test passed")


def _craft_stream(residuals, width, height, m=1, predictor=0):
    writer = BitstreamWriter()
    write_image_header(writer, width, height, m, predictor)
    coder = GolombCoder(m)
    for value in residuals:
        coder.encode_to(value, writer)
    return writer.getvalue()


def test_decoder_clamps_pixels():
    """Reconstructed pixels outside [0, 255] are clamped."""
    data = _craft_stream([300, -400, 10], width=3, height=1, m=64)
    decoded = ImageDecoder().decode(data)
    # 300 -> 255, 255 - 400 -> 0, 0 + 10 -> 10
    np.testing.assert_array_equal(decoded, [[255, 0, 10]])


def test_invalid_images():
    """Bad shapes, dtypes and ranges raise InvalidParameter."""
    print("\n" + "=" * 60)
    print("Test 3: Error Handling")
    print("=" * 60)

    encoder = ImageEncoder()
    with pytest.raises(InvalidParameter):
        encoder.encode(np.zeros(16, dtype=np.uint8))
    with pytest.raises(InvalidParameter):
        encoder.encode(np.zeros((2, 2, 3), dtype=np.uint8))
    with pytest.raises(InvalidParameter):
        encoder.encode(np.full((2, 2), 256))
    with pytest.raises(InvalidParameter):
        encoder.encode(np.full((2, 2), -1))
    with pytest.raises(InvalidParameter):
        encoder.encode(np.zeros((2, 2), dtype=np.float32))
    with pytest.raises(InvalidParameter):
        encoder.encode(np.zeros((1, 1 << 16), dtype=np.uint8))
    with pytest.raises(FormatError):
        ImageEncoder('median')


def test_invalid_streams():
    """Header mismatches, truncation and unknown predictors are rejected."""
    image = create_test_image(8, 8)
    data = ImageEncoder().encode(image)
    decoder = ImageDecoder()

    with pytest.raises(FormatError):
        decoder.decode(data, width=9, height=8)
    with pytest.raises(FormatError):
        decoder.decode(data, width=8, height=7)

    with pytest.raises(TruncatedStream):
        decoder.decode(data[:6])
    with pytest.raises(TruncatedStream):
        decoder.decode(data[:len(data) // 2])

    with pytest.raises(FormatError):
        decoder.decode(_craft_stream([1], width=1, height=1, predictor=9))

    zero_m = bytearray(data)
    zero_m[4:6] = b'\x00\x00'
    with pytest.raises(FormatError):
        decoder.decode(bytes(zero_m))
    print("✅ Error handling test passed")


def main():
    """Run all Checkpoint 6 tests."""
    sys.exit(pytest.main([__file__, '-v']))


if __name__ == "__main__":
    main()
