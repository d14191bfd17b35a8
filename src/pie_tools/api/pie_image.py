"""
PIE Image module.

This module provides the :py:class:`PIEImage` class, the primary entry point
for users of pie-tools. It wraps the low-level :py:class:`~pie_tools.pie.PIE`
structure and converts between PIE streams, PIL images and numpy arrays.

Example usage::

    from PIL import Image
    from pie_tools import PIEImage

    # Encode a PNG
    pie = PIEImage.frompil(Image.open('sprite.png'))
    pie.save('sprite.pie')

    # Decode it again
    pie = PIEImage.open('sprite.pie')
    print(f"Size: {pie.width}x{pie.height}, {len(pie.palette)} colors")
    pie.topil().save('sprite.png')

    # Keep the palette out of the file
    pie = PIEImage.frompil(Image.open('sprite.png'), embed_palette=False)
    pie.save('sprite.pie')
    palette = pie.palette
    pie = PIEImage.open('sprite.pie', palette=palette)
"""

import logging
import os
from typing import Any, BinaryIO, Optional, Sequence, Union

import numpy as np
from PIL import Image

from pie_tools.api.numpy_io import from_array, get_array
from pie_tools.api.pil_io import convert_pil_to_pixels, convert_pixels_to_pil
from pie_tools.constants import PixelFormat
from pie_tools.errors import InvalidPixelData, MissingPalette
from pie_tools.pie import PIE, Palette
from pie_tools.pie.validate import check

logger = logging.getLogger(__name__)

PaletteLike = Union[Palette, bytes, bytearray, memoryview]


class PIEImage:
    """
    PIE image.

    Use :py:meth:`open`, :py:meth:`new`, :py:meth:`frompil` or
    :py:meth:`fromarray` to create one.

    :param data: low-level :py:class:`~pie_tools.pie.PIE` record.
    :param palette: palette the indices refer to. Defaults to the embedded
        one.
    """

    def __init__(self, data: PIE, palette: Optional[Palette] = None):
        assert isinstance(data, PIE)
        self._record = data
        self._palette = palette if palette is not None else data.palette
        self._pixels: Optional[bytes] = None

    @classmethod
    def new(
        cls,
        size: tuple[int, int],
        color: Sequence[int] = (0, 0, 0),
        embed_palette: bool = True,
    ) -> "PIEImage":
        """
        Create a new image filled with a single color.

        :param size: (width, height) tuple.
        :param color: RGB or RGBA tuple; its length selects the pixel format.
        :param embed_palette: whether to embed the palette.
        """
        width, height = size
        if len(color) not in (PixelFormat.RGB, PixelFormat.RGBA):
            raise InvalidPixelData("Color must be RGB or RGBA: %r" % (color,))
        pixels = bytes(color) * (width * height)
        return cls.frombytes(pixels, size, len(color) == 4, embed_palette)

    @classmethod
    def frombytes(
        cls,
        pixels: Union[bytes, bytearray, memoryview],
        size: tuple[int, int],
        has_alpha: bool = False,
        embed_palette: bool = True,
        palette: Optional[PaletteLike] = None,
        extend_palette: bool = True,
    ) -> "PIEImage":
        """
        Create a new image from raw pixel bytes.

        :param pixels: row-major RGB or RGBA bytes.
        :param size: (width, height) tuple.
        :param has_alpha: whether pixels are RGBA.
        :param embed_palette: whether to embed the palette.
        :param palette: palette to start from.
        :param extend_palette: when false, every color must be in ``palette``.
        """
        width, height = size
        stride = PixelFormat.RGBA if has_alpha else PixelFormat.RGB
        if palette is not None and not isinstance(palette, Palette):
            palette = Palette.fromraw(palette, stride)
        record, palette = PIE.encode(
            pixels, width, height, has_alpha, embed_palette, palette, extend_palette
        )
        self = cls(record, palette)
        self._pixels = bytes(pixels)
        return self

    @classmethod
    def frompil(cls, image: Image.Image, **kwargs: Any) -> "PIEImage":
        """
        Create a new image from PIL Image.

        Images with transparency become RGBA, everything else RGB.

        :param image: PIL Image object.
        :param kwargs: see :py:meth:`frombytes`.
        """
        pixels, pixel_format = convert_pil_to_pixels(image)
        return cls.frombytes(
            pixels, image.size, pixel_format == PixelFormat.RGBA, **kwargs
        )

    @classmethod
    def fromarray(cls, array: np.ndarray, **kwargs: Any) -> "PIEImage":
        """
        Create a new image from a ``(height, width, channels)`` array.

        :param array: numpy array, see
            :py:func:`~pie_tools.api.numpy_io.from_array`.
        :param kwargs: see :py:meth:`frombytes`.
        """
        pixels, width, height, pixel_format = from_array(array)
        return cls.frombytes(
            pixels, (width, height), pixel_format == PixelFormat.RGBA, **kwargs
        )

    @classmethod
    def open(
        cls,
        fp: Union[BinaryIO, str, bytes, os.PathLike],
        palette: Optional[PaletteLike] = None,
    ) -> "PIEImage":
        """
        Open a PIE image.

        The stream is checked with :py:func:`~pie_tools.pie.validate.check`
        before it is parsed.

        :param fp: filename or file-like object.
        :param palette: palette to decode with, required when the file has
            no embedded palette.
        :return: A :py:class:`PIEImage` object.
        """
        if isinstance(fp, (str, bytes, os.PathLike)):
            with open(fp, "rb") as f:
                data = f.read()
        else:
            data = fp.read()
        header = check(data)
        if palette is not None and not isinstance(palette, Palette):
            palette = Palette.fromraw(palette, header.stride)
        return cls(PIE.frombytes(data), palette)

    def save(
        self,
        fp: Union[BinaryIO, str, bytes, os.PathLike],
        mode: str = "wb",
    ) -> None:
        """
        Save the PIE file.

        :param fp: filename or file-like object.
        :param mode: file open mode, default 'wb'.
        """
        if isinstance(fp, (str, bytes, os.PathLike)):
            with open(fp, mode) as f:
                self._record.write(f)
        else:
            self._record.write(fp)

    def tobytes(self) -> bytes:
        """Return the encoded PIE stream."""
        return self._record.tobytes()

    def topil(self) -> Image.Image:
        """
        Get PIL Image.

        :return: :py:class:`PIL.Image.Image` in RGB or RGBA mode.
        """
        return convert_pixels_to_pil(
            self.pixels, self.width, self.height, self.pixel_format
        )

    def numpy(self) -> np.ndarray:
        """
        Get ``(height, width, stride)`` uint8 numpy array of the pixels.
        """
        return get_array(self.pixels, self.width, self.height, self.pixel_format)

    @property
    def pixels(self) -> bytes:
        """Decoded row-major pixel bytes."""
        if self._pixels is None:
            if self._palette is None:
                raise MissingPalette(
                    "No embedded palette, open the image with a palette"
                )
            self._pixels = self._record.decode(self._palette)
        return self._pixels

    @property
    def width(self) -> int:
        """Width of the image in pixels."""
        return self._record.header.width

    @property
    def height(self) -> int:
        """Height of the image in pixels."""
        return self._record.header.height

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) tuple."""
        return self.width, self.height

    @property
    def pixel_format(self) -> PixelFormat:
        """See :py:class:`~pie_tools.constants.PixelFormat`."""
        return self._record.header.pixel_format

    @property
    def has_alpha(self) -> bool:
        return self._record.header.has_alpha

    @property
    def has_palette(self) -> bool:
        """Whether the palette is embedded in the file."""
        return self._record.header.has_palette

    @property
    def palette(self) -> Optional[Palette]:
        """Palette the pixel indices refer to."""
        return self._palette

    @property
    def compression_ratio(self) -> float:
        """Encoded size over decoded size."""
        return self._record.size / self._record.header.decoded_size

    def __repr__(self) -> str:
        return "%s(size=%dx%d, format=%s, colors=%s, embedded=%s)" % (
            self.__class__.__name__,
            self.width,
            self.height,
            self.pixel_format.name,
            "?" if self._palette is None else len(self._palette),
            self.has_palette,
        )

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        if cycle:
            p.text(repr(self))
            return
        with p.group(2, "%s(" % self.__class__.__name__, ")"):
            p.breakable("")
            p.text("size=%dx%d," % self.size)
            p.breakable()
            p.text("record=")
            p.pretty(self._record)
            p.breakable("")
