"""Error kinds raised by the codecs.

Every error derives from ``ValueError`` so callers catching invalid-data
errors keep working.
"""


class CodecError(ValueError):
    """Base class for all codec errors."""


class InvalidParameter(CodecError):
    """A coding parameter or input is out of range (e.g. ``m = 0``)."""


class FormatError(CodecError):
    """Header content is not a stream this codec can decode."""


class TruncatedStream(CodecError):
    """A read ran past the end of the declared bits or bytes."""


class CorruptBlock(CodecError):
    """Block framing disagrees with its payload."""
