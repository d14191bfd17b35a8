"""
Exceptions raised by pie_tools.

Every error derives from :py:class:`PIEError`, which itself is a
:py:class:`ValueError`; malformed input and undersized buffers are both
value problems the caller can correct.
"""


class PIEError(ValueError):
    """Base class of all pie_tools errors."""


class InvalidMagic(PIEError):
    """The stream does not start with ``b'PIE'``."""


class UnsupportedVersion(PIEError):
    """The header carries a format revision other than the supported one."""


class InvalidDimensions(PIEError):
    """Width or height is zero or does not fit in 16 bits."""


class InvalidFlags(PIEError):
    """Reserved flag bits are set."""


class TooManyColors(PIEError):
    """More than 256 distinct colors were encountered."""


class ColorNotInPalette(PIEError):
    """A pixel color is missing from a fixed palette."""


class InvalidPixelData(PIEError):
    """The pixel buffer does not hold ``width * height * stride`` bytes."""


class InvalidPalette(PIEError):
    """The palette is malformed or does not match the image stride."""


class MissingPalette(PIEError):
    """The stream has no embedded palette and none was supplied."""


class OutputTooLarge(PIEError):
    """The encoded stream does not fit in the destination capacity."""


class DestinationTooSmall(PIEError):
    """The destination cannot hold the decoded pixels."""


class CorruptData(PIEError):
    """The stream is truncated or its runs are inconsistent with the header."""
