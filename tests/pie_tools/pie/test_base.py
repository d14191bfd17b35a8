import pytest

from pie_tools.pie import PIE, FileHeader, Palette
from pie_tools.pie.base import BaseElement

from ..utils import SAMPLE_HEADER


def test_frombytes_passes_arguments() -> None:
    palette = Palette.frombytes(b"\x01\x02\x03\x04" * 2, 4)
    assert palette.stride == 4
    assert len(palette) == 2


def test_read_write_not_implemented() -> None:
    with pytest.raises(NotImplementedError):
        BaseElement.frombytes(b"")
    with pytest.raises(NotImplementedError):
        BaseElement().tobytes()


def test_pretty(sample_stream: bytes) -> None:
    pretty = pytest.importorskip("IPython.lib.pretty")
    text = pretty.pretty(FileHeader.frombytes(SAMPLE_HEADER))
    assert text.startswith("FileHeader(")
    assert "width=8" in text
    assert "signature" not in text

    text = pretty.pretty(PIE.frombytes(sample_stream))
    assert "pairs=b'" in text
    assert "... =46" in text
    assert "Palette(stride=3" in text
