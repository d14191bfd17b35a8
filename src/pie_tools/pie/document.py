"""
PIE document structure module.

This module contains the PIE class that represents the low-level binary
structure of a PIE file.
"""

import logging
from typing import Any, BinaryIO, Optional, TypeVar, Union

from attrs import define, field

from pie_tools.compression import decode_rle, encode_rle
from pie_tools.constants import HEADER_SIZE, Flags, PixelFormat
from pie_tools.errors import (
    CorruptData,
    InvalidPalette,
    InvalidPixelData,
    MissingPalette,
)
from pie_tools.pie.base import BaseElement
from pie_tools.pie.bin_utils import read_exact, trimmed_repr, write_bytes
from pie_tools.pie.header import FileHeader
from pie_tools.pie.palette import Palette

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="PIE")


@define(repr=False)
class PIE(BaseElement):
    """
    Low-level PIE file structure.

    Example::

        from pie_tools.pie import PIE

        with open(input_file, 'rb') as f:
            pie = PIE.read(f)

        with open(output_file, 'wb') as f:
            pie.write(f)

    .. py:attribute:: header

        See :py:class:`.FileHeader`.

    .. py:attribute:: pairs

        Raw pair stream, two bytes per ``(run_length, palette_index)`` pair.

    .. py:attribute:: palette

        Embedded :py:class:`.Palette`, or None when the palette is kept
        outside of the file.
    """

    header: FileHeader = field(factory=FileHeader)
    pairs: bytes = b""
    palette: Optional[Palette] = None

    @classmethod
    def read(cls: type[T], fp: BinaryIO, **kwargs: Any) -> T:
        header = FileHeader.read(fp)
        logger.debug("read %s" % header)
        pairs = read_exact(fp, header.data_size)
        palette = None
        if header.has_palette:
            palette = Palette.read(fp, header.stride)
            logger.debug("read palette of %d colors" % len(palette))
        return cls(header, pairs, palette)

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        self._sync_header()
        logger.debug("writing %s" % self.header)
        written = self.header.write(fp)
        written += write_bytes(fp, self.pairs)
        if self.palette is not None:
            written += self.palette.write(fp)
        return written

    def _sync_header(self) -> None:
        if len(self.pairs) % 2:
            raise CorruptData("Odd number of bytes in the pair stream")
        flags = self.header.flags & ~int(Flags.PALETTE)
        if self.palette is not None:
            flags |= Flags.PALETTE
        self.header.flags = int(flags)
        self.header.count = len(self.pairs) // 2

    @classmethod
    def encode(
        cls: type[T],
        pixels: Union[bytes, bytearray, memoryview],
        width: int,
        height: int,
        has_alpha: bool = False,
        embed_palette: bool = True,
        palette: Optional[Palette] = None,
        extend_palette: bool = True,
    ) -> tuple[T, Palette]:
        """
        Build a document from raw pixels.

        :return: the document and the palette the indices refer to, which is
            also embedded when ``embed_palette`` is set.
        """
        pixel_format = PixelFormat.RGBA if has_alpha else PixelFormat.RGB
        header = FileHeader(flags=pixel_format.flags, width=width, height=height)
        size = memoryview(pixels).nbytes
        if size != header.decoded_size:
            raise InvalidPixelData(
                "Expected %d bytes of %s pixels for %dx%d, got %d"
                % (header.decoded_size, pixel_format.name, width, height, size)
            )
        palette = Palette(pixel_format.stride) if palette is None else palette.copy()
        pairs = encode_rle(pixels, pixel_format.stride, palette, extend_palette)
        self = cls(header, pairs, palette if embed_palette else None)
        self._sync_header()
        return self, palette

    def decode(self, palette: Optional[Palette] = None) -> bytes:
        """
        Decode the pixels.

        :param palette: palette to use instead of the embedded one.
        :raise MissingPalette: when there is neither.
        """
        if palette is None:
            palette = self.palette
        if palette is None:
            raise MissingPalette("No embedded palette, a palette must be supplied")
        if palette.stride != self.header.stride:
            raise InvalidPalette(
                "Palette stride %d does not match the image stride %d"
                % (palette.stride, self.header.stride)
            )
        return decode_rle(self.pairs, palette, self.header.pixel_count)

    @property
    def size(self) -> int:
        """Encoded size in bytes."""
        size = HEADER_SIZE + len(self.pairs)
        if self.palette is not None:
            size += len(self.palette) * self.palette.stride
        return size

    def __repr__(self) -> str:
        return "PIE(header=%r, pairs=%s, palette=%r)" % (
            self.header,
            trimmed_repr(self.pairs),
            self.palette,
        )
