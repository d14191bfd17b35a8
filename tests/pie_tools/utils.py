import logging
import tempfile
from typing import Any, Type, TypeVar

from pie_tools.pie.base import BaseElement
from pie_tools.pie.bin_utils import trimmed_repr

T = TypeVar("T", bound=BaseElement)

logging.basicConfig(level=logging.DEBUG)

COLOR_0 = b"\x6a\xbe\x30"
COLOR_1 = b"\xff\xff\xff"
COLOR_2 = b"\x00\x00\x00"
COLOR_3 = b"\x5b\x6e\xe1"

#: Palette of the 8x8 sample, in the order it is stored.
SAMPLE_PALETTE = COLOR_0 + COLOR_1 + COLOR_2 + COLOR_3

_ROWS = [
    [1, 0, 0, 0, 0, 0, 0, 1],
    [1, 1, 1, 1, 1, 2, 2, 1],
    [2, 2, 2, 2, 1, 2, 2, 1],
    [2, 2, 2, 2, 1, 2, 2, 1],
    [1, 1, 1, 1, 1, 2, 2, 1],
    [2, 2, 2, 2, 2, 2, 1, 1],
    [2, 2, 2, 2, 2, 2, 1, 2],
    [1, 3, 3, 3, 3, 3, 3, 1],
]
_COLORS = [COLOR_0, COLOR_1, COLOR_2, COLOR_3]

#: Decoded pixels of the 8x8 sample.
SAMPLE_PIXELS = b"".join(_COLORS[index] for row in _ROWS for index in row)

#: (run_length, palette_index) pairs of the 8x8 sample. Several runs cross
#: row boundaries.
SAMPLE_PAIRS = bytes(
    [
        1, 1, 6, 0, 6, 1, 2, 2, 1, 1, 4, 2, 1, 1, 2, 2,
        1, 1, 4, 2, 1, 1, 2, 2, 6, 1, 2, 2, 1, 1, 6, 2,
        2, 1, 6, 2, 1, 1, 1, 2, 1, 1, 6, 3, 1, 1,
    ]
)  # fmt: skip

SAMPLE_HEADER = (
    b"PIE\x02"  # magic, version
    b"\x01\x00\x00\x00"  # flags: palette embedded
    b"\x08\x00\x08\x00"  # width, height
    b"\x17\x00\x00\x00"  # 23 pairs
)

#: 8x8 RGB stream with an embedded palette.
SAMPLE_STREAM = SAMPLE_HEADER + SAMPLE_PAIRS + SAMPLE_PALETTE


def banded_image(colors: list, width: int = 8, rows_per_band: int = 2) -> bytes:
    """Horizontal bands of ``rows_per_band`` rows, one per color."""
    return b"".join(color * (width * rows_per_band) for color in colors)


def check_write_read(element: T, *args: Any, **kwargs: Any) -> None:
    with tempfile.TemporaryFile() as f:
        element.write(f)
        f.flush()
        f.seek(0)
        new_element = element.read(f, *args, **kwargs)
    assert element == new_element, "%s vs %s" % (element, new_element)


def check_read_write(cls: Type[T], data: bytes, *args: Any, **kwargs: Any) -> None:
    element = cls.frombytes(data, *args, **kwargs)
    new_data = element.tobytes()
    assert data == new_data, "%s vs %s" % (trimmed_repr(data), trimmed_repr(new_data))
