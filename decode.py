#!/usr/bin/env python3
"""
Golomb Decoder CLI

Usage:
    python decode.py --input <path> --output <path>

Example:
    python decode.py --input song.golb --output song.wav
    python decode.py --input photo.gimg --output photo.png
"""

import argparse
import logging
import sys
import os
import time

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from golombcodec import AudioDecoder, ImageDecoder
from golombcodec.constants import MAGIC
from golombcodec.io import write_wav, write_grayscale_image


def main():
    parser = argparse.ArgumentParser(
        description='Golomb Decoder - Decompress GOLB audio and Golomb images',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Decode audio to WAV
  python decode.py --input song.golb --output song.wav

  # Decode an image (format follows the output extension)
  python decode.py --input photo.gimg --output photo.png --verbose

  # Force the stream type instead of detecting it from the GOLB magic
  python decode.py --input photo.gimg --output photo.png --type image
        """
    )

    # Required arguments
    parser.add_argument('--input', '-i', required=True,
                        help='Input compressed file path')
    parser.add_argument('--output', '-o', required=True,
                        help='Output path (.wav for audio, image format by extension)')

    # Optional arguments
    parser.add_argument('--type', '-t', choices=['auto', 'audio', 'image'], default='auto',
                        help="Stream type (default: auto, 'GOLB' magic means audio; "
                             "use 'image' for images whose header happens to start with it)")
    parser.add_argument('--workers', '-w', type=int, default=1,
                        help='Threads used to decode audio blocks (default: 1)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose output')

    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    # Check input file exists
    if not os.path.exists(args.input):
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.verbose:
            print(f"Reading compressed file: {args.input}")

        start_time = time.time()

        # Read compressed data
        with open(args.input, 'rb') as f:
            compressed = f.read()

        if args.verbose:
            print(f"  Compressed size: {len(compressed):,} bytes")
            print("Decoding...")

        is_audio = args.type == 'audio' or \
            (args.type == 'auto' and compressed[:len(MAGIC)] == MAGIC)
        if is_audio:
            decoder = AudioDecoder(workers=args.workers)
            samples, header = decoder.decode(compressed)
            write_wav(args.output, samples, header['sample_rate'])
            summary = (f"{samples.shape[0]} frames, {samples.shape[1]} ch, "
                       f"{header['sample_rate']} Hz")
            output_size = samples.nbytes
        else:
            decoder = ImageDecoder()
            image = decoder.decode(compressed)
            write_grayscale_image(image, args.output)
            summary = f"{image.shape[1]}x{image.shape[0]}"
            output_size = image.nbytes

        elapsed = time.time() - start_time

        if args.verbose:
            print(f"\nReconstructed: {summary}")
            print(f"  Output size: {output_size:,} bytes")
            print(f"  Decoding time: {elapsed:.2f}s")
            print(f"\nOutput written to: {args.output}")
        else:
            print(f"Decoded: {args.input} -> {args.output} ({summary})")

    except ValueError as e:
        print(f"Error: Invalid compressed file - {e}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
