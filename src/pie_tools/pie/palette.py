"""
Palette structure.

The palette is an insertion-ordered table of unique colors. Each entry is
exactly ``stride`` bytes, and an image refers to the entries by single-byte
index, hence the 256 color ceiling.
"""

import logging
from typing import Any, BinaryIO, Iterable, Iterator, Optional, TypeVar, Union

from pie_tools.constants import MAX_COLORS, PixelFormat
from pie_tools.errors import ColorNotInPalette, InvalidPalette, TooManyColors
from pie_tools.pie.base import BaseElement
from pie_tools.pie.bin_utils import read_exact, trimmed_repr, write_bytes

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="Palette")

Color = Union[bytes, bytearray, memoryview]


class Palette(BaseElement):
    """
    Color table of a PIE image.

    Example::

        from pie_tools.pie.palette import Palette

        palette = Palette(stride=3)
        palette.find_or_insert(b"\\xff\\x00\\x00")  # 0
        palette.find_or_insert(b"\\x00\\xff\\x00")  # 1
        palette.find_or_insert(b"\\xff\\x00\\x00")  # 0
        palette.tobytes()  # b'\\xff\\x00\\x00\\x00\\xff\\x00'

    :param stride: bytes per color, 3 for RGB and 4 for RGBA.
    :param colors: initial entries, in order.
    """

    def __init__(self, stride: int = 3, colors: Iterable[Color] = ()):
        if stride not in (PixelFormat.RGB, PixelFormat.RGBA):
            raise InvalidPalette("Invalid palette stride: %r" % (stride,))
        self._stride = int(stride)
        self._colors: list[bytes] = []
        self._index: dict[bytes, int] = {}
        for color in colors:
            self._append(self._check(color))

    @property
    def stride(self) -> int:
        return self._stride

    @property
    def pixel_format(self) -> PixelFormat:
        return PixelFormat(self._stride)

    @property
    def colors(self) -> tuple[bytes, ...]:
        return tuple(self._colors)

    def find_or_insert(self, color: Color) -> int:
        """
        Return the index of ``color``, appending it when it is new.

        :raise TooManyColors: when the palette already holds 256 colors.
        """
        color = bytes(color)
        index = self._index.get(color)
        if index is None:
            index = self._append(self._check(color))
        return index

    def index(self, color: Color) -> int:
        """
        Return the index of ``color``.

        :raise ColorNotInPalette: when the color is not in the palette.
        """
        index = self._index.get(bytes(color))
        if index is None:
            raise ColorNotInPalette("Color %s is not in the palette" % bytes(color).hex())
        return index

    def copy(self: T) -> T:
        return self.__class__(self._stride, self._colors)

    def _check(self, color: Color) -> bytes:
        color = bytes(color)
        if len(color) != self._stride:
            raise InvalidPalette(
                "Color %s does not match the palette stride %d"
                % (color.hex(), self._stride)
            )
        return color

    def _append(self, color: bytes) -> int:
        if len(self._colors) >= MAX_COLORS:
            raise TooManyColors(
                "Palette cannot hold more than %d colors" % MAX_COLORS
            )
        index = len(self._colors)
        self._colors.append(color)
        # Duplicates read from an external table stay addressable, but
        # lookups resolve to the first occurrence.
        self._index.setdefault(color, index)
        return index

    @classmethod
    def read(
        cls: type[T],
        fp: BinaryIO,
        stride: int = 3,
        count: Optional[int] = None,
        **kwargs: Any,
    ) -> T:
        """
        Read ``count`` entries, or every remaining byte when ``count`` is None.
        """
        if count is None:
            data = fp.read()
        else:
            data = read_exact(fp, count * stride)
        logger.debug("reading palette, len=%d" % len(data))
        return cls.fromraw(data, stride)

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        logger.debug("writing palette, len=%d" % len(self))
        return write_bytes(fp, b"".join(self._colors))

    @classmethod
    def fromraw(cls: type[T], data: Union[bytes, bytearray, memoryview], stride: int) -> T:
        """
        Build a palette from concatenated color entries.

        :raise InvalidPalette: when the data is not a whole number of entries,
            or holds more than 256 of them.
        """
        data = bytes(data)
        if len(data) % stride:
            raise InvalidPalette(
                "Palette size %d is not a multiple of the stride %d" % (len(data), stride)
            )
        if len(data) > MAX_COLORS * stride:
            raise InvalidPalette(
                "Palette holds %d colors, at most %d are allowed"
                % (len(data) // stride, MAX_COLORS)
            )
        return cls(stride, (data[i : i + stride] for i in range(0, len(data), stride)))

    def __len__(self) -> int:
        return len(self._colors)

    def __getitem__(self, index: int) -> bytes:
        return self._colors[index]

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._colors)

    def __contains__(self, color: Any) -> bool:
        if not isinstance(color, (bytes, bytearray, memoryview)):
            return False
        return bytes(color) in self._index

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Palette):
            return NotImplemented
        return self._stride == other._stride and self._colors == other._colors

    def __repr__(self) -> str:
        return "Palette(stride=%d, colors=%s)" % (
            self._stride,
            trimmed_repr(b"".join(self._colors), 24),
        )

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        p.text(repr(self))
