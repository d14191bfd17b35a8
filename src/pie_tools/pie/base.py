"""
Base class of the PIE records.

A PIE stream is three consecutive sections: the fixed header, the pair
stream and the optional palette. :py:class:`~pie_tools.pie.header.FileHeader`,
:py:class:`~pie_tools.pie.palette.Palette` and the whole-file
:py:class:`~pie_tools.pie.document.PIE` record share the serialization
protocol defined here, so any of them can be moved between file objects
and bytes the same way.
"""

import io
import logging
from enum import Enum
from typing import Any, BinaryIO, TypeVar

from attrs import fields, has, validate

from pie_tools.pie.bin_utils import trimmed_repr

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="BaseElement")


class BaseElement:
    """
    Serializable section of a PIE stream.

    Subclasses implement :py:meth:`read` and :py:meth:`write`; the byte
    conversions go through an in-memory file. Extra arguments to
    :py:meth:`frombytes` reach :py:meth:`read`, which is how a palette learns
    its stride::

        header = FileHeader.frombytes(data[:16])
        palette = Palette.frombytes(data[16 + header.data_size :], header.stride)
    """

    @classmethod
    def read(cls: type[T], fp: BinaryIO, **kwargs: Any) -> T:
        """Read the section from the current position of ``fp``."""
        raise NotImplementedError()

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        """Write the section to ``fp`` and return the number of bytes."""
        raise NotImplementedError()

    @classmethod
    def frombytes(cls: type[T], data: bytes, *args: Any, **kwargs: Any) -> T:
        with io.BytesIO(data) as f:
            return cls.read(f, *args, **kwargs)

    def tobytes(self, *args: Any, **kwargs: Any) -> bytes:
        with io.BytesIO() as f:
            self.write(f, *args, **kwargs)
            return f.getvalue()

    def validate(self) -> None:
        """Run the attrs field validators, raising the typed PIE error."""
        validate(self)  # type: ignore[arg-type]

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        name = self.__class__.__name__
        if cycle or not has(self.__class__):
            p.text(repr(self) if not cycle else "%s(...)" % name)
            return

        with p.group(2, "%s(" % name, ")"):
            p.breakable("")
            shown = [f for f in fields(self.__class__) if f.repr]  # type: ignore[arg-type]
            for i, attribute in enumerate(shown):
                if i:
                    p.text(",")
                    p.breakable()
                p.text("%s=" % attribute.name)
                value = getattr(self, attribute.name)
                if isinstance(value, bytes):
                    # Pair streams and palettes can be large.
                    p.text(trimmed_repr(value))
                elif isinstance(value, Enum):
                    p.text(value.name)
                else:
                    p.pretty(value)
            p.breakable("")
