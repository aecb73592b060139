import io

import pytest
from PIL import Image


def make_image_bytes(width: int, height: int, image_format: str = "JPEG", mode: str = "RGB") -> bytes:
    """Encode a solid-colour image of the given size."""
    buf = io.BytesIO()
    color = (200, 40, 40, 255) if mode == "RGBA" else (200, 40, 40)
    Image.new(mode, (width, height), color[: len(mode)]).save(buf, format=image_format)
    return buf.getvalue()


@pytest.fixture()
def wide_jpeg_bytes() -> bytes:
    """A 1200x600 JPEG."""
    return make_image_bytes(1200, 600, "JPEG")


@pytest.fixture()
def small_png_bytes() -> bytes:
    """A 100x50 PNG, smaller than the default resize height."""
    return make_image_bytes(100, 50, "PNG")


@pytest.fixture()
def rgba_png_bytes() -> bytes:
    """A 400x400 PNG with an alpha channel."""
    return make_image_bytes(400, 400, "PNG", mode="RGBA")


@pytest.fixture()
def corrupt_jpeg_bytes() -> bytes:
    """Bytes that claim to be a JPEG but cannot be decoded."""
    return b"\xff\xd8\xff\xe0 definitely not a real jpeg \xff\xd9"


@pytest.fixture()
def square_png_bytes() -> bytes:
    """An 800x800 PNG."""
    return make_image_bytes(800, 800, "PNG")
