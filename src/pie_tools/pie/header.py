"""
File header structure.
"""

import logging
from typing import Any, BinaryIO, TypeVar

from attrs import astuple, define, field

from pie_tools.constants import (
    HEADER_SIZE,
    MAGIC,
    RESERVED_FLAGS,
    VERSION,
    Flags,
    PixelFormat,
)
from pie_tools.errors import (
    CorruptData,
    InvalidDimensions,
    InvalidFlags,
    InvalidMagic,
    UnsupportedVersion,
)
from pie_tools.pie.base import BaseElement
from pie_tools.pie.bin_utils import reserve_position, unpack, write_fmt
from pie_tools.validators import in_, range_

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="FileHeader")


@define(repr=True)
class FileHeader(BaseElement):
    """
    Header section of the PIE file.

    Example::

        from pie_tools.pie.header import FileHeader
        from pie_tools.constants import Flags

        header = FileHeader(flags=Flags.PALETTE, width=8, height=8, count=23)

    .. py:attribute:: signature

        Signature: always equal to ``b'PIE'``.

    .. py:attribute:: version

        Version number, always 2.

    .. py:attribute:: flags

        Bit mask of :py:class:`~pie_tools.constants.Flags`. ``PALETTE`` is set
        when the palette is embedded after the pairs, ``ALPHA`` when pixels
        are 4 bytes wide.

    .. py:attribute:: width

        The width of the image in pixels.

    .. py:attribute:: height

        The height of the image in pixels.

    .. py:attribute:: count

        The number of (run length, palette index) pairs following the header.
    """

    _FORMAT = "3sBIHHI"

    signature: bytes = field(default=MAGIC, repr=False)
    version: int = field(default=VERSION, validator=in_((VERSION,), UnsupportedVersion))
    flags: int = field(default=0, converter=int)
    width: int = field(default=1, validator=range_(1, 0xFFFF, InvalidDimensions))
    height: int = field(default=1, validator=range_(1, 0xFFFF, InvalidDimensions))
    count: int = field(default=0, validator=range_(0, 0xFFFFFFFF, CorruptData))

    @signature.validator
    def _validate_signature(self, attribute: Any, value: bytes) -> None:
        if value != MAGIC:
            raise InvalidMagic("This is not a PIE file: %r" % (value,))

    @flags.validator
    def _validate_flags(self, attribute: Any, value: int) -> None:
        if value & RESERVED_FLAGS:
            raise InvalidFlags("Reserved flag bits are set: 0x%08x" % value)

    @classmethod
    def read(cls: type[T], fp: BinaryIO, **kwargs: Any) -> T:
        data = fp.read(HEADER_SIZE)
        if data[: len(MAGIC)] != MAGIC[: len(data)]:
            raise InvalidMagic("This is not a PIE file: %r" % (data[: len(MAGIC)],))
        if len(data) != HEADER_SIZE:
            raise CorruptData(
                "Header is truncated: %d bytes, expected %d" % (len(data), HEADER_SIZE)
            )
        return cls(*unpack(cls._FORMAT, data))

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        return write_fmt(fp, self._FORMAT, *astuple(self))

    def write_placeholder(self, fp: BinaryIO) -> int:
        """
        Write the header with a zero pair count.

        :return: the position of the count field, for
            :py:func:`~pie_tools.pie.bin_utils.write_position`.
        """
        write_fmt(fp, self._FORMAT[:-1], *astuple(self)[:-1])
        return reserve_position(fp, "I")

    @property
    def pixel_format(self) -> PixelFormat:
        return PixelFormat.from_flags(self.flags)

    @property
    def stride(self) -> int:
        return self.pixel_format.stride

    @property
    def has_alpha(self) -> bool:
        return bool(self.flags & Flags.ALPHA)

    @property
    def has_palette(self) -> bool:
        return bool(self.flags & Flags.PALETTE)

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def decoded_size(self) -> int:
        """Size of the decoded pixel buffer in bytes."""
        return self.pixel_count * self.stride

    @property
    def data_size(self) -> int:
        """Size of the pair stream in bytes."""
        return self.count * 2
