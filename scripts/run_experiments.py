#!/usr/bin/env python3
"""
Run experiments for the Golomb codecs.

Compares block sizes and mid-side on synthetic stereo audio, and every
predictor on a synthetic image (or an image given on the command line).
Generates metrics.json for the report.
"""

import sys
import os
import json
from datetime import datetime

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np

from golombcodec import AudioEncoder, AudioDecoder, ImageEncoder, ImageDecoder, Predictor
from golombcodec.entropy import dpcm_encode
from golombcodec.io import read_grayscale_image
from golombcodec.transform import compute_residuals
from golombcodec.metrics import (
    calculate_bits_per_sample,
    calculate_compression_ratio,
    calculate_entropy,
    is_lossless,
)


def create_synthetic_audio(num_frames=44100, sample_rate=44100, seed=42):
    """
    Create correlated stereo audio: a shared two-tone signal plus
    independent noise per channel.
    """
    rng = np.random.default_rng(seed)
    t = np.arange(num_frames) / sample_rate
    tone = 8000 * np.sin(2 * np.pi * 440 * t) + 3000 * np.sin(2 * np.pi * 1320 * t)
    left = tone + rng.normal(0, 200, num_frames)
    right = 0.9 * tone + rng.normal(0, 200, num_frames)
    stereo = np.stack([left, right], axis=1)
    return np.clip(np.round(stereo), -32768, 32767).astype(np.int16)


def create_synthetic_image(height=128, width=128, seed=42):
    """Create a smooth gradient image with a bright disc and mild noise."""
    rng = np.random.default_rng(seed)
    y, x = np.mgrid[:height, :width]
    image = (x * 255.0 / max(1, width - 1)) * 0.6 + (y * 255.0 / max(1, height - 1)) * 0.3
    mask = (y - height // 2) ** 2 + (x - width // 2) ** 2 <= (min(height, width) // 4) ** 2
    image[mask] += 60
    image += rng.normal(0, 3, image.shape)
    return np.clip(np.round(image), 0, 255).astype(np.uint8)


def run_audio_experiment(samples, sample_rate, block_size, use_mid_side):
    """Encode/decode audio with one configuration and collect metrics."""
    encoder = AudioEncoder()
    decoder = AudioDecoder()

    compressed = encoder.encode(samples, sample_rate=sample_rate,
                                block_size=block_size, use_mid_side=use_mid_side)
    recovered, _ = decoder.decode(compressed)

    return {
        'block_size': block_size,
        'mid_side': use_mid_side,
        'compressed_bytes': len(compressed),
        'bits_per_sample': round(calculate_bits_per_sample(len(compressed), samples.size), 4),
        'compression_ratio': round(calculate_compression_ratio(samples.nbytes, len(compressed)), 3),
        'lossless': bool(is_lossless(samples, recovered)),
    }


def run_image_experiment(image, predictor):
    """Encode/decode an image with one predictor and collect metrics."""
    compressed = ImageEncoder(predictor).encode(image)
    recovered = ImageDecoder().decode(compressed)
    residuals = compute_residuals(image, predictor)

    return {
        'predictor': predictor.name,
        'compressed_bytes': len(compressed),
        'bits_per_pixel': round(calculate_bits_per_sample(len(compressed), image.size), 4),
        'residual_entropy': round(calculate_entropy(residuals), 4),
        'compression_ratio': round(calculate_compression_ratio(image.nbytes, len(compressed)), 3),
        'lossless': bool(is_lossless(image, recovered)),
    }


def main():
    """Run all experiments."""
    print("=" * 60)
    print("GOLOMB CODEC - EXPERIMENT RUNNER")
    print("=" * 60)

    results_dir = "results"
    os.makedirs(results_dir, exist_ok=True)

    # Audio
    sample_rate = 44100
    samples = create_synthetic_audio(sample_rate=sample_rate)
    raw_entropy = calculate_entropy(dpcm_encode(samples))
    print(f"\nSynthetic audio: {samples.shape[0]} frames x {samples.shape[1]} ch")
    print(f"  DPCM residual entropy: {raw_entropy:.3f} bits/sample")

    print("\n" + "=" * 60)
    print("AUDIO: BLOCK SIZE / MID-SIDE")
    print("=" * 60)

    audio_results = []
    for block_size in [256, 1024, 4096]:
        for use_mid_side in [False, True]:
            result = run_audio_experiment(samples, sample_rate, block_size, use_mid_side)
            audio_results.append(result)
            print(f"  block={block_size:5d} mid-side={'on ' if use_mid_side else 'off'}: "
                  f"{result['bits_per_sample']:.4f} bits/sample, "
                  f"CR={result['compression_ratio']:.2f}x, "
                  f"lossless={result['lossless']}")

    # Image
    if len(sys.argv) > 1:
        image_source = sys.argv[1]
        image = read_grayscale_image(image_source)
    else:
        image_source = "synthetic"
        image = create_synthetic_image()

    print("\n" + "=" * 60)
    print(f"IMAGE: PREDICTORS ({image_source}, {image.shape[1]}x{image.shape[0]})")
    print("=" * 60)

    image_results = []
    for predictor in Predictor:
        result = run_image_experiment(image, predictor)
        image_results.append(result)
        print(f"  {predictor.name:<20} {result['bits_per_pixel']:.4f} bpp "
              f"(entropy {result['residual_entropy']:.4f}), "
              f"lossless={result['lossless']}")

    output = {
        "experiment_date": datetime.now().isoformat(),
        "audio": {
            "frames": int(samples.shape[0]),
            "channels": int(samples.shape[1]),
            "sample_rate": sample_rate,
            "dpcm_residual_entropy": round(raw_entropy, 4),
            "results": audio_results,
        },
        "image": {
            "source": image_source,
            "shape": list(image.shape),
            "results": image_results,
        },
    }

    output_path = os.path.join(results_dir, "metrics.json")
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(output, f, indent=2, ensure_ascii=False)

    print("\n" + "=" * 60)
    print("EXPERIMENT COMPLETE")
    print("=" * 60)
    print(f"\nResults saved to: {output_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
