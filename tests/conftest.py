"""Shared fixtures: images are synthesized in memory with Pillow."""

from __future__ import annotations

from io import BytesIO
from typing import Callable

import pytest
from PIL import Image

from batch_compressor.core.models import SourceImage

ImageFactory = Callable[..., bytes]


def _encode(
    size: tuple[int, int],
    fmt: str = "PNG",
    mode: str = "RGB",
    color: object = (200, 40, 40),
    **params,
) -> bytes:
    image = Image.new(mode, size, color)
    if mode == "RGB":
        # vertical stripes
        for x in range(0, size[0], max(1, size[0] // 16)):
            for y in range(size[1]):
                image.putpixel((x, y), (x % 256, y % 256, 90))
    buffer = BytesIO()
    image.save(buffer, format=fmt, **params)
    return buffer.getvalue()


@pytest.fixture
def make_image_bytes() -> ImageFactory:
    return _encode


@pytest.fixture
def make_source(make_image_bytes: ImageFactory) -> Callable[..., SourceImage]:
    def factory(identifier: str, size: tuple[int, int] = (64, 48), fmt: str = "PNG", **kwargs) -> SourceImage:
        return SourceImage.from_bytes(identifier, make_image_bytes(size, fmt, **kwargs))

    return factory


@pytest.fixture
def corrupt_source() -> SourceImage:
    return SourceImage.from_bytes("broken.jpg", b"\xff\xd8 definitely not a jpeg")
