"""WAV reader and writer for 16-bit PCM audio."""

import wave
from pathlib import Path
from typing import Tuple

import numpy as np

from ..errors import FormatError, InvalidParameter


def read_wav(path: str) -> Tuple[np.ndarray, int]:
    """
    Read a 16-bit PCM WAV file.

    Args:
        path: Path to the .wav file

    Returns:
        (samples, sample_rate) where samples is an int16 array of shape
        (frames, channels)

    Raises:
        FormatError: If the file is not 16-bit PCM
    """
    try:
        with wave.open(str(Path(path)), 'rb') as wav:
            channels = wav.getnchannels()
            sample_width = wav.getsampwidth()
            sample_rate = wav.getframerate()
            raw = wav.readframes(wav.getnframes())
    except wave.Error as exc:
        raise FormatError(f"Not a valid WAV file: {path} ({exc})") from exc

    if sample_width != 2:
        raise FormatError(f"Only 16-bit WAV supported, got {sample_width * 8}-bit")

    data = np.frombuffer(raw, dtype='<i2').astype(np.int16)
    return data.reshape(-1, channels), sample_rate


def write_wav(path: str, samples: np.ndarray, sample_rate: int) -> None:
    """
    Write a 16-bit PCM WAV file.

    Args:
        path: Output file path
        samples: int16 array (frames, channels), or 1D for mono
        sample_rate: Sample rate in Hz
    """
    samples = np.asarray(samples)
    if samples.ndim == 1:
        samples = samples.reshape(-1, 1)
    if samples.ndim != 2:
        raise InvalidParameter(f"Expected 1D or 2D samples, got {samples.ndim}D")

    with wave.open(str(Path(path)), 'wb') as wav:
        wav.setnchannels(samples.shape[1])
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(samples.astype('<i2').tobytes())
