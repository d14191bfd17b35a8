"""
Structural checks for PIE streams read from untrusted sources.

:py:func:`validate` answers yes or no for a parsed header and the number of
bytes available; :py:func:`check` inspects a whole stream and raises the
error that describes the first problem found.
"""

import logging
from typing import Optional, Union

from pie_tools.compression.rle import count_pixels
from pie_tools.constants import HEADER_SIZE, MAX_COLORS
from pie_tools.errors import CorruptData, InvalidPalette, PIEError
from pie_tools.pie.header import FileHeader

logger = logging.getLogger(__name__)


def required_size(header: FileHeader, palette_length: int = 0) -> int:
    """Size of the stream described by ``header``, in bytes."""
    size = HEADER_SIZE + header.data_size
    if header.has_palette:
        size += palette_length * header.stride
    return size


def validate(
    header: FileHeader, available_bytes: int, palette_length: Optional[int] = None
) -> bool:
    """
    Check that ``header`` is well formed and fits in ``available_bytes``.

    The header fields are checked again with :py:func:`attrs.validate`, which
    catches headers built while attrs validators were disabled
    (:py:func:`attrs.validators.disabled`); a header parsed with
    :py:meth:`FileHeader.read` already passed these checks.

    :param header: parsed header.
    :param available_bytes: size of the whole stream, header included.
    :param palette_length: number of embedded colors if known. When the
        palette is embedded and the length is unknown, at least one color
        must fit after the pairs.
    :return: True when the stream can be decoded.
    """
    try:
        header.validate()
    except PIEError as e:
        logger.debug("invalid header: %s" % e)
        return False

    if header.count == 0:
        logger.debug("header has no pairs")
        return False

    if header.has_palette and palette_length is None:
        palette_length = 1
    size = required_size(header, palette_length or 0)
    if size > available_bytes:
        logger.debug("stream needs %d bytes, %d available" % (size, available_bytes))
        return False
    return True


def check(data: Union[bytes, bytearray, memoryview]) -> FileHeader:
    """
    Check a whole stream and return its header.

    On top of :py:func:`validate`, this verifies that the embedded palette is
    a whole number of colors, that every index refers to one of them, and
    that the runs add up to ``width * height``.

    :raise PIEError: the subclass describing the problem.
    """
    data = memoryview(data).cast("B")
    header = FileHeader.frombytes(bytes(data[:HEADER_SIZE]))
    if header.count == 0:
        raise CorruptData("Stream has no pairs")

    end = HEADER_SIZE + header.data_size
    if end > len(data):
        raise CorruptData(
            "Stream is truncated: %d pairs need %d bytes, %d available"
            % (header.count, end, len(data))
        )
    pairs = bytes(data[HEADER_SIZE:end])

    if header.has_palette:
        palette_size = len(data) - end
        if palette_size == 0 or palette_size % header.stride:
            raise InvalidPalette(
                "Embedded palette size %d is not a positive multiple of %d"
                % (palette_size, header.stride)
            )
        palette_length = palette_size // header.stride
        if palette_length > MAX_COLORS:
            raise InvalidPalette(
                "Embedded palette holds %d colors, at most %d are allowed"
                % (palette_length, MAX_COLORS)
            )
        highest = max(pairs[1::2])
        if highest >= palette_length:
            raise CorruptData(
                "Palette index %d out of range, palette has %d colors"
                % (highest, palette_length)
            )

    if 0 in pairs[0::2]:
        raise CorruptData("Stream contains a zero run length")

    pixels = count_pixels(pairs)
    if pixels != header.pixel_count:
        raise CorruptData(
            "Runs describe %d pixels, header says %dx%d"
            % (pixels, header.width, header.height)
        )
    return header
