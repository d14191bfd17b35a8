"""
pie-tools: Python package for reading and writing PIE pixel art images.

PIE (Palette Indexed Encoding) is a lossless format for images with few
colors: pixels are stored as single-byte indices into a palette of at most
256 colors, compressed with horizontal run-length encoding. The palette is
either embedded in the file or kept by the application.

Basic usage::

    from PIL import Image
    from pie_tools import PIEImage

    pie = PIEImage.frompil(Image.open('sprite.png'))
    pie.save('sprite.pie')

    PIEImage.open('sprite.pie').topil().save('roundtrip.png')

Architecture:

- :py:mod:`pie_tools.codec`: Buffer level encode/decode entry points
- :py:mod:`pie_tools.pie`: Low-level binary structure parsing/writing
- :py:mod:`pie_tools.compression`: Palette-indexed RLE codec
- :py:mod:`pie_tools.api`: High-level user-facing API
"""

from pie_tools.api.pie_image import PIEImage
from pie_tools.codec import decode, encode, required_decoded_size
from pie_tools.version import __version__

__all__ = ["PIEImage", "decode", "encode", "required_decoded_size", "__version__"]
