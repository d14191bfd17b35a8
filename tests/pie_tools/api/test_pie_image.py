import io
import logging

import numpy as np
import pytest
from PIL import Image

from pie_tools import PIEImage
from pie_tools.constants import PixelFormat
from pie_tools.errors import InvalidMagic, InvalidPixelData, MissingPalette
from pie_tools.pie import Palette

from ..utils import (
    COLOR_0,
    COLOR_1,
    SAMPLE_PALETTE,
    SAMPLE_PIXELS,
    SAMPLE_STREAM,
)

logger = logging.getLogger(__name__)


def test_new() -> None:
    pie = PIEImage.new((4, 3), color=(10, 20, 30))
    assert pie.size == (4, 3)
    assert pie.pixel_format == PixelFormat.RGB
    assert not pie.has_alpha
    assert pie.has_palette
    assert len(pie.palette) == 1
    assert pie.pixels == b"\x0a\x14\x1e" * 12
    assert pie.tobytes()[16:] == b"\x0c\x00\x0a\x14\x1e"


def test_new_rgba() -> None:
    pie = PIEImage.new((2, 2), color=(1, 2, 3, 0), embed_palette=False)
    assert pie.has_alpha
    assert not pie.has_palette
    assert pie.pixel_format == PixelFormat.RGBA
    assert len(pie.tobytes()) == 16 + 2


def test_new_invalid_color() -> None:
    with pytest.raises(InvalidPixelData):
        PIEImage.new((2, 2), color=(1, 2))


def test_frombytes() -> None:
    pie = PIEImage.frombytes(SAMPLE_PIXELS, (8, 8), palette=SAMPLE_PALETTE)
    assert pie.tobytes() == SAMPLE_STREAM
    assert pie.palette == Palette.fromraw(SAMPLE_PALETTE, 3)
    assert pie.compression_ratio == pytest.approx(len(SAMPLE_STREAM) / 192)


def test_open_filename(sample_file: str) -> None:
    pie = PIEImage.open(sample_file)
    assert pie.size == (8, 8)
    assert pie.has_palette
    assert pie.pixels == SAMPLE_PIXELS


def test_open_file_object(sample_stream: bytes) -> None:
    pie = PIEImage.open(io.BytesIO(sample_stream))
    assert pie.pixels == SAMPLE_PIXELS


def test_open_invalid() -> None:
    with pytest.raises(InvalidMagic):
        PIEImage.open(io.BytesIO(b"GIF89a" + SAMPLE_STREAM[6:]))


def test_save(tmp_path, sample_stream: bytes) -> None:
    pie = PIEImage.open(io.BytesIO(sample_stream))
    path = tmp_path / "output.pie"
    pie.save(str(path))
    assert path.read_bytes() == sample_stream

    with io.BytesIO() as f:
        pie.save(f)
        assert f.getvalue() == sample_stream


def test_external_palette(tmp_path) -> None:
    pie = PIEImage.frombytes(SAMPLE_PIXELS, (8, 8), embed_palette=False)
    palette = pie.palette
    path = tmp_path / "external.pie"
    pie.save(path)

    opened = PIEImage.open(path)
    assert not opened.has_palette
    assert opened.palette is None
    with pytest.raises(MissingPalette):
        opened.pixels
    assert "colors=?" in repr(opened)

    assert PIEImage.open(path, palette=palette).pixels == SAMPLE_PIXELS
    raw = palette.tobytes()
    assert PIEImage.open(path, palette=raw).pixels == SAMPLE_PIXELS


def test_external_palette_overrides_embedded(sample_stream: bytes) -> None:
    swapped = Palette(3, [COLOR_1, COLOR_0] + list(Palette.fromraw(SAMPLE_PALETTE, 3))[2:])
    pie = PIEImage.open(io.BytesIO(sample_stream), palette=swapped)
    assert pie.palette == swapped
    assert pie.pixels[:6] == COLOR_0 + COLOR_1


def test_frompil_rgb() -> None:
    image = Image.frombytes("RGB", (8, 8), SAMPLE_PIXELS)
    pie = PIEImage.frompil(image)
    assert pie.pixel_format == PixelFormat.RGB
    assert pie.pixels == SAMPLE_PIXELS
    assert pie.topil().tobytes() == image.tobytes()


def test_frompil_rgba() -> None:
    image = Image.new("RGBA", (3, 2), (1, 2, 3, 4))
    image.putpixel((1, 1), (1, 2, 3, 0))
    pie = PIEImage.frompil(image)
    assert pie.has_alpha
    assert len(pie.palette) == 2
    output = pie.topil()
    assert output.mode == "RGBA"
    assert output.tobytes() == image.tobytes()


def test_frompil_palette_transparency() -> None:
    image = Image.new("P", (2, 2), 0)
    image.putpalette([255, 0, 0, 0, 255, 0])
    image.putpixel((0, 0), 1)
    image.info["transparency"] = 0
    pie = PIEImage.frompil(image)
    assert pie.has_alpha
    assert pie.pixels[:4] == b"\x00\xff\x00\xff"
    assert pie.pixels[4:8] == b"\xff\x00\x00\x00"


def test_frompil_round_trip(tmp_path) -> None:
    image = Image.frombytes("RGB", (8, 8), SAMPLE_PIXELS)
    path = tmp_path / "sample.pie"
    PIEImage.frompil(image).save(path)
    assert PIEImage.open(path).topil().tobytes() == SAMPLE_PIXELS


def test_fromarray() -> None:
    array = np.zeros((3, 5, 4), dtype=np.uint8)
    array[1] = (255, 0, 0, 255)
    pie = PIEImage.fromarray(array)
    assert pie.size == (5, 3)
    assert pie.has_alpha
    assert np.array_equal(pie.numpy(), array)


def test_numpy(sample_stream: bytes) -> None:
    pie = PIEImage.open(io.BytesIO(sample_stream))
    array = pie.numpy()
    assert array.shape == (8, 8, 3)
    assert bytes(array[0, 0]) == COLOR_1


def test_repr(sample_stream: bytes) -> None:
    pie = PIEImage.open(io.BytesIO(sample_stream))
    assert repr(pie) == "PIEImage(size=8x8, format=RGB, colors=4, embedded=True)"
