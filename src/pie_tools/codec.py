"""
Stream codec over caller-supplied buffers.

These are the entry points of the PIE core. They are pure functions: no file
access and no state kept between calls. Buffers are anything that supports
the buffer protocol; destinations must be writable (``bytearray``, a writable
``memoryview``, a ``uint8`` numpy array, ...).

Example usage::

    from pie_tools.codec import decode, encode, required_decoded_size

    dest = bytearray(4096)
    size = encode(pixels, 8, 8, has_alpha=False, embed_palette=True, dest=dest)

    source = bytes(dest[:size])
    pixels = bytearray(required_decoded_size(source))
    result = decode(source, pixels)
    result.width, result.height, result.stride, result.size
"""

import logging
from typing import Any, Optional, Union

from attrs import define

from pie_tools.compression import rle
from pie_tools.constants import HEADER_SIZE, Flags, PixelFormat
from pie_tools.errors import (
    CorruptData,
    DestinationTooSmall,
    InvalidPalette,
    InvalidPixelData,
    MissingPalette,
)
from pie_tools.pie.bin_utils import BufferWriter, write_position
from pie_tools.pie.header import FileHeader
from pie_tools.pie.palette import Palette
from pie_tools.pie.validate import check

logger = logging.getLogger(__name__)

Buffer = Union[bytes, bytearray, memoryview]
PaletteLike = Union[Palette, bytes, bytearray, memoryview]


@define(frozen=True)
class DecodeResult:
    """Outcome of decoding into a caller-supplied buffer."""

    width: int
    height: int
    stride: int
    size: int


@define(frozen=True)
class DecodedImage:
    """Decoded pixels owned by the caller."""

    width: int
    height: int
    pixel_format: PixelFormat
    pixels: bytes
    palette: Palette

    @property
    def stride(self) -> int:
        return self.pixel_format.stride


def _as_palette(palette: Optional[PaletteLike], stride: int) -> Optional[Palette]:
    if palette is None or isinstance(palette, Palette):
        if palette is not None and palette.stride != stride:
            raise InvalidPalette(
                "Palette stride %d does not match the image stride %d"
                % (palette.stride, stride)
            )
        return palette
    return Palette.fromraw(palette, stride)


def _writable(dest: Any, capacity: Optional[int]) -> tuple[memoryview, int]:
    view = memoryview(dest).cast("B")
    if view.readonly:
        raise TypeError("Destination buffer is read-only")
    if capacity is None:
        capacity = view.nbytes
    elif not 0 <= capacity <= view.nbytes:
        raise ValueError(
            "Capacity %d is outside of the destination size %d" % (capacity, view.nbytes)
        )
    return view, capacity


def encode(
    pixels: Buffer,
    width: int,
    height: int,
    has_alpha: bool = False,
    embed_palette: bool = True,
    dest: Any = None,
    capacity: Optional[int] = None,
    palette: Optional[PaletteLike] = None,
    extend_palette: bool = True,
) -> Union[int, bytes]:
    """
    Encode raw pixels into a PIE stream.

    The stream is assembled in a capacity-bounded
    :py:class:`~pie_tools.pie.bin_utils.BufferWriter` and copied to ``dest``
    only once it is complete, so ``dest`` is left untouched on failure.

    :param pixels: ``width * height`` pixels, 3 bytes each (4 with alpha),
        row-major.
    :param width: width in pixels.
    :param height: height in pixels.
    :param has_alpha: whether pixels are RGBA.
    :param embed_palette: whether to append the palette to the stream.
    :param dest: writable destination buffer. When omitted, the stream is
        returned as bytes.
    :param capacity: maximum stream size, by default the size of ``dest``
        (unbounded without ``dest``).
    :param palette: palette to start from, as a
        :py:class:`~pie_tools.pie.palette.Palette` or raw color bytes. It is
        copied, not modified.
    :param extend_palette: when false, colors missing from ``palette``
        raise :py:class:`~pie_tools.errors.ColorNotInPalette`.
    :return: the number of bytes written to ``dest``, or the stream bytes.
    :raise TooManyColors: more than 256 distinct colors.
    :raise OutputTooLarge: the stream does not fit in ``capacity``.
    """
    pixel_format = PixelFormat.RGBA if has_alpha else PixelFormat.RGB
    flags = pixel_format.flags | (Flags.PALETTE if embed_palette else Flags.NONE)
    header = FileHeader(flags=flags, width=width, height=height)

    size = memoryview(pixels).nbytes
    if size != header.decoded_size:
        raise InvalidPixelData(
            "Expected %d bytes of %s pixels for %dx%d, got %d"
            % (header.decoded_size, pixel_format.name, width, height, size)
        )

    view = None
    if dest is not None:
        view, capacity = _writable(dest, capacity)

    table = _as_palette(palette, pixel_format.stride)
    table = Palette(pixel_format.stride) if table is None else table.copy()

    writer = BufferWriter(capacity)
    position = header.write_placeholder(writer)
    count = rle.encode(pixels, pixel_format.stride, table, writer, extend_palette)
    write_position(writer, position, count)
    if embed_palette:
        table.write(writer)
    data = writer.getvalue()
    logger.debug(
        "encoded %dx%d %s: %d pairs, %d colors, %d bytes"
        % (width, height, pixel_format.name, count, len(table), len(data))
    )

    if view is None:
        return data
    view[: len(data)] = data
    return len(data)


def read_header(source: Buffer) -> FileHeader:
    """Parse the header of a stream."""
    return FileHeader.frombytes(bytes(memoryview(source).cast("B")[:HEADER_SIZE]))


def required_decoded_size(source: Buffer) -> int:
    """Size of the decoded pixel buffer, computed from the header alone."""
    return read_header(source).decoded_size


def read_palette(source: Buffer) -> Optional[Palette]:
    """Return the embedded palette of a stream, or None."""
    data = memoryview(source).cast("B")
    header = read_header(data)
    if not header.has_palette:
        return None
    return Palette.fromraw(data[HEADER_SIZE + header.data_size :], header.stride)


def decode(
    source: Buffer,
    dest: Any = None,
    capacity: Optional[int] = None,
    palette: Optional[PaletteLike] = None,
    validate: bool = True,
) -> Union[DecodeResult, DecodedImage]:
    """
    Decode a PIE stream into pixels.

    The destination size is checked once, up front: the decoded size is
    always known from the header. Pixels are expanded into a scratch buffer
    and copied to ``dest`` only once every pair has been decoded, so
    ``dest`` is left untouched on failure.

    :param source: the whole stream.
    :param dest: writable destination buffer. When omitted, a
        :py:class:`DecodedImage` owning new pixel bytes is returned.
    :param capacity: usable size of ``dest``, by default all of it.
    :param palette: palette to use instead of the embedded one, as a
        :py:class:`~pie_tools.pie.palette.Palette` or raw color bytes.
        Required when the stream has no embedded palette.
    :param validate: run :py:func:`~pie_tools.pie.validate.check` on the
        stream first. Streams from untrusted sources should be validated.
    :return: :py:class:`DecodeResult` when ``dest`` is given.
    :raise DestinationTooSmall: ``capacity`` cannot hold the pixels.
    :raise MissingPalette: no embedded palette and none supplied.
    """
    data = memoryview(source).cast("B")
    header = read_header(data)
    size = header.decoded_size

    view = None
    if dest is not None:
        view, capacity = _writable(dest, capacity)
        if capacity < size:
            raise DestinationTooSmall(
                "Decoded image needs %d bytes, destination holds %d" % (size, capacity)
            )

    if validate:
        check(data)
    end = HEADER_SIZE + header.data_size
    if end > len(data):
        raise CorruptData(
            "Stream is truncated: %d pairs need %d bytes, %d available"
            % (header.count, end, len(data))
        )

    table = _as_palette(palette, header.stride)
    if table is None:
        if not header.has_palette:
            raise MissingPalette("No embedded palette, a palette must be supplied")
        table = Palette.fromraw(data[end:], header.stride)

    pairs = data[HEADER_SIZE:end]
    pixels = bytearray(size)
    written = rle.decode(pairs, table, pixels, header.pixel_count)
    if view is None:
        return DecodedImage(
            header.width, header.height, header.pixel_format, bytes(pixels), table
        )

    view[:written] = pixels
    logger.debug("decoded %dx%d, %d bytes" % (header.width, header.height, written))
    return DecodeResult(header.width, header.height, header.stride, written)
