#!/usr/bin/env python3
"""
Golomb Encoder CLI

Usage:
    python encode.py --input <path> --output <path> [options]

Example:
    python encode.py --input song.wav --output song.golb --block-size 1024 --mid-side
    python encode.py --input photo.png --output photo.gimg --predictor paeth
"""

import argparse
import logging
import sys
import os
import time

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from golombcodec import AudioEncoder, ImageEncoder, Predictor
from golombcodec.constants import DEFAULT_BLOCK_SIZE
from golombcodec.io import read_wav, read_grayscale_image
from golombcodec.metrics import calculate_bits_per_sample, calculate_compression_ratio


def main():
    parser = argparse.ArgumentParser(
        description='Golomb Encoder - Lossless compression for audio and grayscale images',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Encode 16-bit WAV
  python encode.py --input data/song.wav --output song.golb

  # Encode stereo WAV with mid-side and smaller blocks
  python encode.py --input data/song.wav --output song.golb --mid-side --block-size 512

  # Encode an image (any format Pillow reads, converted to grayscale)
  python encode.py --input data/photo.png --output photo.gimg --predictor jpeg_ls
        """
    )

    # Required arguments
    parser.add_argument('--input', '-i', required=True,
                        help='Input path (.wav for audio, otherwise an image)')
    parser.add_argument('--output', '-o', required=True,
                        help='Output compressed file path')

    # Audio options
    parser.add_argument('--block-size', '-b', type=int, default=DEFAULT_BLOCK_SIZE,
                        help=f'Frames per audio block (default: {DEFAULT_BLOCK_SIZE})')
    parser.add_argument('--mid-side', '-m', action='store_true',
                        help='Use mid-side transform for stereo audio')
    parser.add_argument('--workers', '-w', type=int, default=1,
                        help='Threads used to encode audio blocks (default: 1)')

    # Image options
    parser.add_argument('--predictor', '-p', default='average',
                        choices=[p.name.replace('_PREDICTOR', '').lower() for p in Predictor],
                        help='Image predictor (default: average)')

    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose output')

    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    # Validate block size
    if args.block_size < 1:
        print(f"Error: Block size must be at least 1, got {args.block_size}",
              file=sys.stderr)
        sys.exit(1)

    # Check input file exists
    if not os.path.exists(args.input):
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        sys.exit(1)

    input_ext = os.path.splitext(args.input)[1].lower()

    try:
        if args.verbose:
            print(f"Reading input: {args.input}")

        start_time = time.time()

        if input_ext == '.wav':
            samples, sample_rate = read_wav(args.input)
            num_samples = samples.size
            original_size = samples.nbytes

            if args.verbose:
                print(f"  Frames: {samples.shape[0]}")
                print(f"  Channels: {samples.shape[1]}")
                print(f"  Sample rate: {sample_rate} Hz")
                print(f"Encoding with block size={args.block_size}, "
                      f"mid-side={'on' if args.mid_side else 'off'}...")

            encoder = AudioEncoder(workers=args.workers)
            compressed = encoder.encode(samples, sample_rate=sample_rate,
                                        block_size=args.block_size,
                                        use_mid_side=args.mid_side)
        else:
            image = read_grayscale_image(args.input)
            num_samples = image.size
            original_size = image.nbytes

            if args.verbose:
                print(f"  Shape: {image.shape}")
                print(f"  Range: [{image.min()}, {image.max()}]")
                print(f"Encoding with predictor={args.predictor}...")

            encoder = ImageEncoder(args.predictor)
            compressed = encoder.encode(image)

        # Write output
        with open(args.output, 'wb') as f:
            f.write(compressed)

        elapsed = time.time() - start_time

        # Calculate metrics
        compressed_size = len(compressed)
        bps = calculate_bits_per_sample(compressed_size, num_samples)
        cr = calculate_compression_ratio(original_size, compressed_size)

        if args.verbose:
            print(f"\nResults:")
            print(f"  Original size:   {original_size:,} bytes")
            print(f"  Compressed size: {compressed_size:,} bytes")
            print(f"  Compression ratio: {cr:.2f}x")
            print(f"  Bits per sample: {bps:.3f}")
            print(f"  Encoding time: {elapsed:.2f}s")
            print(f"\nOutput written to: {args.output}")
        else:
            print(f"Encoded: {args.input} -> {args.output} "
                  f"({cr:.2f}x compression, {bps:.3f} bits/sample)")

    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
