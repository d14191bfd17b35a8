"""
Image compression utilities for PIE pixel data.

PIE stores pixels as indices into a palette of at most 256 colors, and
compresses the index stream with horizontal run-length encoding. The
pair stream is a sequence of ``(run_length, palette_index)`` byte pairs.

Key functions:

- :py:func:`encode_rle`: Pixel bytes to pair bytes, growing a palette
- :py:func:`decode_rle`: Pair bytes back to pixel bytes

Example usage::

    from pie_tools.compression import decode_rle, encode_rle
    from pie_tools.pie.palette import Palette

    palette = Palette(stride=3)
    pairs = encode_rle(pixels, 3, palette)
    pixels = decode_rle(pairs, palette, width * height)

RLE is most effective on pixel art: few colors and long horizontal
stretches of one color. The vertical axis is not considered.
"""

import io
import logging
from typing import TYPE_CHECKING, Union

from pie_tools.compression import rle

if TYPE_CHECKING:
    from pie_tools.pie.palette import Palette

logger = logging.getLogger(__name__)


def encode_rle(
    data: Union[bytes, bytearray, memoryview],
    stride: int,
    palette: "Palette",
    extend_palette: bool = True,
) -> bytes:
    """Encode raw pixels.

    :param data: raw pixel bytes, ``stride`` bytes per pixel.
    :param stride: 3 for RGB, 4 for RGBA.
    :param palette: palette to look colors up in; new colors are appended
        unless ``extend_palette`` is false.
    :return: pair bytes.
    """
    with io.BytesIO() as fp:
        count = rle.encode(data, stride, palette, fp, extend_palette)
        result = fp.getvalue()
    logger.debug("encoded %d pairs, %d colors" % (count, len(palette)))
    return result


def decode_rle(
    data: Union[bytes, bytearray, memoryview], palette: "Palette", pixel_count: int
) -> bytes:
    """Decode pair bytes.

    :param data: pair bytes.
    :param palette: palette the indices refer to.
    :param pixel_count: number of pixels the pairs must expand to.
    :return: raw pixel bytes.
    """
    result = bytearray(pixel_count * palette.stride)
    try:
        rle.decode(data, palette, result, pixel_count)
    except ValueError as e:
        logger.error(f"An error occurred during RLE decoding: {e}")
        logger.info(
            f"Decompression of RLE data failed: {pixel_count=} {len(palette)=} size={len(data)}",
            exc_info=True,
        )
        raise
    return bytes(result)
