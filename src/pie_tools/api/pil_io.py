"""
PIL IO module.
"""

import logging
from typing import Union

from PIL import Image

from pie_tools.constants import PixelFormat

logger = logging.getLogger(__name__)

_ALPHA_MODES = ("RGBA", "LA", "PA", "RGBa", "La")


def get_pixel_format(image: Image.Image) -> PixelFormat:
    """Pick the pixel format for a PIL image: RGBA when it has transparency."""
    if image.mode in _ALPHA_MODES or "transparency" in image.info:
        return PixelFormat.RGBA
    return PixelFormat.RGB


def convert_pil_to_pixels(image: Image.Image) -> tuple[bytes, PixelFormat]:
    """Convert a PIL Image to raw RGB or RGBA bytes."""
    pixel_format = get_pixel_format(image)
    if image.mode != pixel_format.pil_mode:
        logger.debug("converting %s image to %s" % (image.mode, pixel_format.pil_mode))
        image = image.convert(pixel_format.pil_mode)
    return image.tobytes(), pixel_format


def convert_pixels_to_pil(
    pixels: Union[bytes, bytearray, memoryview],
    width: int,
    height: int,
    pixel_format: PixelFormat,
) -> Image.Image:
    """Convert raw RGB or RGBA bytes to a PIL Image."""
    return Image.frombytes(pixel_format.pil_mode, (width, height), bytes(pixels))
