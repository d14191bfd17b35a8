"""
Binary processing utilities.

All multi-byte integers of the PIE format are little-endian, so every helper
here prefixes its ``struct`` format with ``<``.
"""

import io
import logging
import struct
from typing import Any, BinaryIO, Union

from pie_tools.errors import CorruptData, OutputTooLarge

logger = logging.getLogger(__name__)


def pack(fmt: str, *args: Any) -> bytes:
    return struct.pack("<" + fmt, *args)


def unpack(fmt: str, data: bytes) -> tuple:
    return struct.unpack("<" + fmt, data)


def write_fmt(fp: BinaryIO, fmt: str, *args: Any) -> int:
    """
    Writes data to ``fp`` according to ``fmt``.
    """
    fmt = "<" + fmt
    fmt_size = struct.calcsize(fmt)
    written = write_bytes(fp, struct.pack(fmt, *args))
    assert written == fmt_size, (written, fmt_size)
    return written


def write_bytes(fp: BinaryIO, data: Union[bytes, bytearray, memoryview]) -> int:
    """
    Write bytes to the file object and return the written size.
    """
    written = fp.write(data)
    assert written == len(data), (written, len(data))
    return written


def read_exact(fp: BinaryIO, size: int) -> bytes:
    data = fp.read(size)
    if len(data) != size:
        raise CorruptData(
            "Unexpected end of data: read %d bytes, expected %d" % (len(data), size)
        )
    return data


def reserve_position(fp: BinaryIO, fmt: str = "I") -> int:
    """
    Reserves the current position for write.

    Use with `write_position`. The reserved bytes are zero-filled so that the
    stream stays contiguous until the value is known.

    :param fp: file-like object
    :param fmt: format of the reserved position
    :return: the position
    """
    position = fp.tell()
    write_fmt(fp, fmt, 0)
    return position


def write_position(fp: BinaryIO, position: int, value: int, fmt: str = "I") -> int:
    """
    Writes a value to the specified position.

    :param fp: file-like object
    :param position: position of the value marker
    :param value: value to write
    :param fmt: format of the value
    :return: written byte size
    """
    current_position = fp.tell()
    fp.seek(position)
    written = write_bytes(fp, pack(fmt, value))
    fp.seek(current_position)
    return written


def trimmed_repr(data: Any, trim_length: int = 16) -> str:
    if isinstance(data, bytes):
        if len(data) > trim_length:
            return repr(data[:trim_length] + b" ... =" + str(len(data)).encode("ascii"))
    return repr(data)


class BufferWriter(io.RawIOBase):
    """
    Bounds-checked append cursor over a growable buffer.

    The buffer never holds more than ``capacity`` bytes: a write that would
    pass the capacity raises :py:class:`~pie_tools.errors.OutputTooLarge`
    before anything is copied. Seeking back into the written region and
    writing overwrites in place, which is how the pair count placeholder is
    patched.

    Example::

        writer = BufferWriter(capacity=16)
        position = reserve_position(writer)
        writer.write(b"abcd")
        write_position(writer, position, 4)
        writer.getvalue()  # b'\\x04\\x00\\x00\\x00abcd'

    :param capacity: maximum number of bytes, ``None`` for no limit.
    """

    def __init__(self, capacity: Union[int, None] = None):
        if capacity is not None and capacity < 0:
            raise ValueError("capacity must be non-negative: %d" % capacity)
        super().__init__()
        self._buffer = bytearray()
        self._position = 0
        self._capacity = capacity

    @property
    def capacity(self) -> Union[int, None]:
        return self._capacity

    @property
    def remaining(self) -> Union[int, None]:
        if self._capacity is None:
            return None
        return self._capacity - self._position

    def readable(self) -> bool:
        return False

    def writable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def tell(self) -> int:
        return self._position

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if whence == io.SEEK_SET:
            position = offset
        elif whence == io.SEEK_CUR:
            position = self._position + offset
        elif whence == io.SEEK_END:
            position = len(self._buffer) + offset
        else:
            raise ValueError("Invalid whence: %r" % whence)
        if not 0 <= position <= len(self._buffer):
            raise ValueError("Cannot seek outside of the written region: %d" % position)
        self._position = position
        return position

    def write(self, data: Any) -> int:
        size = len(data)
        end = self._position + size
        if self._capacity is not None and end > self._capacity:
            raise OutputTooLarge(
                "Encoded data exceeds the destination capacity of %d bytes"
                % self._capacity
            )
        self._buffer[self._position : end] = data
        self._position = end
        return size

    def getvalue(self) -> bytes:
        return bytes(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)
