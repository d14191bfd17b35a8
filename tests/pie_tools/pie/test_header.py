from typing import Iterator

import pytest

from pie_tools.constants import Flags, PixelFormat
from pie_tools.errors import (
    CorruptData,
    InvalidDimensions,
    InvalidFlags,
    InvalidMagic,
    UnsupportedVersion,
)
from pie_tools.pie.bin_utils import BufferWriter, write_position
from pie_tools.pie.header import FileHeader

from ..utils import SAMPLE_HEADER, check_read_write, check_write_read


@pytest.fixture
def fixture() -> Iterator[bytes]:
    yield SAMPLE_HEADER


def test_header_from_to(fixture: bytes) -> None:
    header = FileHeader.frombytes(fixture)
    assert header.tobytes() == fixture
    check_read_write(FileHeader, fixture)


def test_header_fields(fixture: bytes) -> None:
    header = FileHeader.frombytes(fixture)
    assert header.signature == b"PIE"
    assert header.version == 2
    assert header.flags == Flags.PALETTE
    assert header.width == 8
    assert header.height == 8
    assert header.count == 23
    assert header.has_palette
    assert not header.has_alpha
    assert header.stride == 3
    assert header.pixel_format == PixelFormat.RGB
    assert header.pixel_count == 64
    assert header.decoded_size == 192
    assert header.data_size == 46


def test_header_little_endian() -> None:
    header = FileHeader(flags=Flags.ALPHA, width=0x0102, height=0x0304, count=0x05060708)
    assert header.tobytes() == (
        b"PIE\x02\x02\x00\x00\x00\x02\x01\x04\x03\x08\x07\x06\x05"
    )
    assert header.stride == 4


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(flags=0, width=1, height=1, count=1),
        dict(flags=Flags.PALETTE | Flags.ALPHA, width=0xFFFF, height=0xFFFF, count=7),
    ],
)
def test_header_write_read(kwargs: dict) -> None:
    check_write_read(FileHeader(**kwargs))


@pytest.mark.parametrize(
    "data, error",
    [
        (b"PIX\x02" + SAMPLE_HEADER[4:], InvalidMagic),
        (b" " + SAMPLE_HEADER, InvalidMagic),
        (b"XY", InvalidMagic),
        (b"PIE\x01" + SAMPLE_HEADER[4:], UnsupportedVersion),
        (b"PIE\x03" + SAMPLE_HEADER[4:], UnsupportedVersion),
        (SAMPLE_HEADER[:4] + b"\x04\x00\x00\x00" + SAMPLE_HEADER[8:], InvalidFlags),
        (SAMPLE_HEADER[:4] + b"\x00\x00\x00\x80" + SAMPLE_HEADER[8:], InvalidFlags),
        (SAMPLE_HEADER[:8] + b"\x00\x00\x08\x00" + SAMPLE_HEADER[12:], InvalidDimensions),
        (SAMPLE_HEADER[:8] + b"\x08\x00\x00\x00" + SAMPLE_HEADER[12:], InvalidDimensions),
        (SAMPLE_HEADER[:15], CorruptData),
        (b"", CorruptData),
        (b"PI", CorruptData),
    ],
)
def test_header_exception(data: bytes, error: type) -> None:
    with pytest.raises(error):
        FileHeader.frombytes(data)


def test_header_errors_are_value_errors() -> None:
    with pytest.raises(ValueError):
        FileHeader(width=0)


def test_header_validate_on_setattr() -> None:
    header = FileHeader(width=2, height=2)
    with pytest.raises(InvalidDimensions):
        header.height = 0
    with pytest.raises(InvalidFlags):
        header.flags = 0x10


def test_header_placeholder() -> None:
    header = FileHeader(flags=Flags.PALETTE, width=8, height=8, count=23)
    writer = BufferWriter(16)
    position = header.write_placeholder(writer)
    assert position == 12
    assert writer.getvalue()[12:] == b"\x00\x00\x00\x00"
    write_position(writer, position, 23)
    assert writer.getvalue() == SAMPLE_HEADER
