import logging

import pytest
from PIL import Image

from pie_tools.api import pil_io
from pie_tools.constants import PixelFormat

logger = logging.getLogger(__name__)


@pytest.mark.parametrize(
    "mode, expected",
    [
        ("1", PixelFormat.RGB),
        ("L", PixelFormat.RGB),
        ("P", PixelFormat.RGB),
        ("RGB", PixelFormat.RGB),
        ("CMYK", PixelFormat.RGB),
        ("LA", PixelFormat.RGBA),
        ("PA", PixelFormat.RGBA),
        ("RGBA", PixelFormat.RGBA),
    ],
)
def test_get_pixel_format(mode: str, expected: PixelFormat) -> None:
    image = Image.new(mode, (2, 2))
    assert pil_io.get_pixel_format(image) == expected


def test_get_pixel_format_transparency() -> None:
    image = Image.new("P", (2, 2))
    image.info["transparency"] = 0
    assert pil_io.get_pixel_format(image) == PixelFormat.RGBA


def test_convert_pil_to_pixels_rgb() -> None:
    image = Image.new("RGB", (2, 1), (1, 2, 3))
    pixels, pixel_format = pil_io.convert_pil_to_pixels(image)
    assert pixel_format == PixelFormat.RGB
    assert pixels == b"\x01\x02\x03" * 2


def test_convert_pil_to_pixels_grayscale() -> None:
    image = Image.new("L", (1, 1), 128)
    assert pil_io.convert_pil_to_pixels(image) == (b"\x80" * 3, PixelFormat.RGB)


def test_convert_pil_to_pixels_rgba() -> None:
    image = Image.new("RGBA", (1, 2), (1, 2, 3, 4))
    pixels, pixel_format = pil_io.convert_pil_to_pixels(image)
    assert pixel_format == PixelFormat.RGBA
    assert pixels == b"\x01\x02\x03\x04" * 2


@pytest.mark.parametrize("pixel_format", [PixelFormat.RGB, PixelFormat.RGBA])
def test_convert_pixels_to_pil(pixel_format: PixelFormat) -> None:
    pixels = bytes(range(3 * 2 * pixel_format.stride))
    image = pil_io.convert_pixels_to_pil(pixels, 3, 2, pixel_format)
    assert image.mode == pixel_format.pil_mode
    assert image.size == (3, 2)
    assert image.tobytes() == pixels
