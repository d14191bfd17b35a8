"""Pytest configuration for pie-tools tests."""

from typing import Iterator

import pytest

from tests.pie_tools.utils import SAMPLE_PALETTE, SAMPLE_PIXELS, SAMPLE_STREAM


@pytest.fixture
def sample_stream() -> Iterator[bytes]:
    yield SAMPLE_STREAM


@pytest.fixture
def sample_pixels() -> Iterator[bytes]:
    yield SAMPLE_PIXELS


@pytest.fixture
def sample_palette() -> Iterator[bytes]:
    yield SAMPLE_PALETTE


@pytest.fixture
def sample_file(tmp_path, sample_stream) -> Iterator[str]:
    path = tmp_path / "sample.pie"
    path.write_bytes(sample_stream)
    yield str(path)
