"""
Various constants for pie_tools
"""

from enum import IntEnum, IntFlag

#: Magic bytes at the start of every PIE stream.
MAGIC = b"PIE"

#: The only format revision this package reads and writes.
VERSION = 2

#: Size of the fixed header in bytes.
HEADER_SIZE = 16

#: Longest run a single pair can describe; the count is a single byte.
MAX_RUN_LENGTH = 0xFF

#: Palette indices are single bytes.
MAX_COLORS = 0x100


class Flags(IntFlag):
    """
    Header flags.

    Bits other than :py:attr:`PALETTE` and :py:attr:`ALPHA` are reserved and
    must be zero.
    """

    NONE = 0
    PALETTE = 1 << 0
    ALPHA = 1 << 1


#: Mask of the reserved bits of the 32-bit flags field.
RESERVED_FLAGS = 0xFFFFFFFF & ~int(Flags.PALETTE | Flags.ALPHA)


class PixelFormat(IntEnum):
    """
    Pixel format. The value is the stride in bytes.
    """

    RGB = 3
    RGBA = 4

    @staticmethod
    def from_flags(flags: int) -> "PixelFormat":
        return PixelFormat.RGBA if flags & Flags.ALPHA else PixelFormat.RGB

    @property
    def stride(self) -> int:
        return int(self.value)

    @property
    def flags(self) -> Flags:
        return Flags.ALPHA if self == PixelFormat.RGBA else Flags.NONE

    @property
    def pil_mode(self) -> str:
        return self.name
