import logging
from typing import Union

import numpy as np

from pie_tools.constants import PixelFormat
from pie_tools.errors import InvalidPixelData

logger = logging.getLogger(__name__)


def get_array(
    pixels: Union[bytes, bytearray, memoryview],
    width: int,
    height: int,
    pixel_format: PixelFormat,
) -> np.ndarray:
    """Return ``(height, width, stride)`` uint8 array over the pixel bytes."""
    array = np.frombuffer(pixels, dtype=np.uint8)
    return array.reshape((height, width, pixel_format.stride))


def from_array(array: np.ndarray) -> tuple[bytes, int, int, PixelFormat]:
    """
    Convert an image array to raw pixel bytes.

    Accepts ``(height, width)`` grayscale or ``(height, width, channels)``
    arrays with 1, 3 or 4 channels. Float arrays are taken to be in
    ``[0, 1]``.

    :return: pixel bytes, width, height and pixel format.
    """
    array = np.asarray(array)
    if array.ndim == 2:
        array = array[:, :, np.newaxis]
    if array.ndim != 3 or array.shape[2] not in (1, 3, 4):
        raise InvalidPixelData("Unsupported array shape: %r" % (array.shape,))

    if array.dtype.kind == "f":
        array = np.round(np.clip(array, 0.0, 1.0) * 255.0).astype(np.uint8)
    elif array.dtype == np.bool_:
        array = array.astype(np.uint8) * 255
    elif array.dtype != np.uint8:
        if array.size and (array.min() < 0 or array.max() > 255):
            raise InvalidPixelData("Values out of the 8-bit range in %s array" % array.dtype)
        array = array.astype(np.uint8)

    if array.shape[2] == 1:
        logger.debug("expanding grayscale array to RGB")
        array = np.repeat(array, 3, axis=2)

    height, width, channels = array.shape
    return np.ascontiguousarray(array).tobytes(), width, height, PixelFormat(channels)
