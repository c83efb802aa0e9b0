"""Constants for the Golomb audio and image codecs."""

import struct

# Magic number: 'GOLB' (Golomb audio container)
MAGIC = b'GOLB'
VERSION = 0x01

# Transform flag values
TRANSFORM_NONE = 0
TRANSFORM_MID_SIDE = 1

# Stream header format (Little-endian, 21 bytes total)
# 4s: Magic (4B), B: Version (1B), B: Transform flag (1B), B: Channels (1B)
# I: Sample rate (4B), H: Bit depth (2B), I: Total frames (4B), I: Block size (4B)
AUDIO_HEADER_FORMAT = '<4sBBBIHII'
AUDIO_HEADER_SIZE = struct.calcsize(AUDIO_HEADER_FORMAT)  # 21 bytes

# Per-block framing: m (4B), one signed seed per channel (4B each),
# payload byte length (4B), payload bit count (4B)
BLOCK_M_FORMAT = '<I'
BLOCK_SEED_FORMAT = '<i'
BLOCK_LENGTHS_FORMAT = '<II'

# Only 16-bit PCM is supported
BIT_DEPTH = 16
SAMPLE_MIN = -32768
SAMPLE_MAX = 32767

DEFAULT_BLOCK_SIZE = 1024
DEFAULT_SAMPLE_RATE = 44100

# Candidate Golomb parameters for the per-block search
M_CANDIDATES = (1, 2, 4, 8, 16, 32, 64, 128, 256)

# Image header bit widths (64 bits total, MSB first)
IMAGE_WIDTH_BITS = 16
IMAGE_HEIGHT_BITS = 16
IMAGE_M_BITS = 16
IMAGE_PREDICTOR_BITS = 4
IMAGE_RESERVED_BITS = 12
IMAGE_HEADER_BITS = (IMAGE_WIDTH_BITS + IMAGE_HEIGHT_BITS + IMAGE_M_BITS +
                     IMAGE_PREDICTOR_BITS + IMAGE_RESERVED_BITS)

# Used when there are no residuals to estimate from
DEFAULT_IMAGE_M = 8

PIXEL_MIN = 0
PIXEL_MAX = 255
