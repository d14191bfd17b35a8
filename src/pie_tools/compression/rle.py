"""
Palette-indexed RLE codec.

The pixel buffer is treated as one contiguous 1-D array of pixels. A single
left-to-right scan groups identical neighbouring pixels into runs, and every
run becomes a two byte pair::

    (run_length, palette_index)

Rows have no meaning to the scan, so a run may continue from the last pixel
of one row into the first pixel of the next. Runs are capped at 255 pixels
because the count is a single byte; a longer stretch of one color becomes
several pairs.

Encoding example::
    Input:  [A, A, A, B, C, C, C, C]   (palette: A=0, B=1, C=2)
    Output: [3, 0, 1, 1, 4, 2]

Functions:

- :py:func:`iter_runs`: Split a pixel buffer into (color, run length) runs
- :py:func:`encode`: Write the pairs for a pixel buffer to a file object
- :py:func:`decode`: Expand pairs into a pixel buffer
"""

import logging
from typing import TYPE_CHECKING, Any, BinaryIO, Iterator, Union

from pie_tools.constants import MAX_RUN_LENGTH
from pie_tools.errors import CorruptData, InvalidPalette, InvalidPixelData

if TYPE_CHECKING:
    from pie_tools.pie.palette import Palette

logger = logging.getLogger(__name__)

Buffer = Union[bytes, bytearray, memoryview]


def iter_runs(
    data: Buffer, stride: int, limit: int = MAX_RUN_LENGTH
) -> Iterator[tuple[bytes, int]]:
    """iter_runs(data, stride) -> iterator of (color, run_length)

    A run is extended only by a byte-identical pixel, alpha included.
    """
    data = bytes(data)
    length = len(data)
    if length % stride:
        raise InvalidPixelData(
            "Pixel data size %d is not a multiple of the stride %d" % (length, stride)
        )

    i = 0
    while i < length:
        color = data[i : i + stride]
        j = i + stride
        run = 1
        while run < limit and j < length and data[j : j + stride] == color:
            j += stride
            run += 1
        yield color, run
        i = j


def encode(
    data: Buffer,
    stride: int,
    palette: "Palette",
    fp: BinaryIO,
    extend_palette: bool = True,
) -> int:
    """encode(data, stride, palette, fp) -> int

    Write the pairs for ``data`` to ``fp`` and return the number of pairs.

    New colors are appended to ``palette`` in first-occurrence order. With
    ``extend_palette=False`` the palette is fixed and an unknown color raises
    :py:class:`~pie_tools.errors.ColorNotInPalette`.
    """
    if palette.stride != stride:
        raise InvalidPalette(
            "Palette stride %d does not match the pixel stride %d"
            % (palette.stride, stride)
        )
    lookup = palette.find_or_insert if extend_palette else palette.index

    count = 0
    for color, run in iter_runs(data, stride):
        fp.write(bytes((run, lookup(color))))
        count += 1
    return count


def decode(pairs: Buffer, palette: "Palette", dest: Any, pixel_count: int) -> int:
    """decode(pairs, palette, dest, pixel_count) -> int

    Expand ``pairs`` into ``dest`` and return the number of bytes written.

    ``dest`` is any writable buffer of at least ``pixel_count * stride``
    bytes. A single cursor walks the destination; it never resets at row
    boundaries.
    """
    pairs = bytes(pairs)
    if len(pairs) % 2:
        raise CorruptData("Odd number of bytes in the pair stream: %d" % len(pairs))

    stride = palette.stride
    colors = len(palette)
    total = pixel_count * stride
    view = memoryview(dest).cast("B")

    cursor = 0
    for i in range(0, len(pairs), 2):
        run, index = pairs[i], pairs[i + 1]
        if run == 0:
            raise CorruptData("Zero run length in pair %d" % (i // 2))
        if index >= colors:
            raise CorruptData(
                "Palette index %d out of range in pair %d, palette has %d colors"
                % (index, i // 2, colors)
            )
        end = cursor + run * stride
        if end > total:
            raise CorruptData("Runs exceed the image size of %d pixels" % pixel_count)
        view[cursor:end] = palette[index] * run
        cursor = end

    if cursor != total:
        raise CorruptData(
            "Expected %d pixels but decoded %d pixels" % (pixel_count, cursor // stride)
        )
    return cursor


def count_pixels(pairs: Buffer) -> int:
    """Sum of the run lengths of ``pairs``."""
    return sum(bytes(pairs)[0::2])
