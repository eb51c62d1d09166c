"""Tests for the cover art pixelizer"""
from io import BytesIO
from unittest.mock import MagicMock, patch

import pytest
import requests
from PIL import Image

from providers.errors import ImageProcessingError
from system_utils.image import (
    PixelSample,
    WHITE,
    download_image,
    grid_to_json,
    pixelize,
    pixelize_bytes,
)


def encode(img: Image.Image, fmt: str = "PNG") -> bytes:
    buf = BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def ok_response(content: bytes) -> MagicMock:
    response = MagicMock()
    response.content = content
    response.raise_for_status.return_value = None
    return response


def test_full_resolution_grid():
    data = encode(Image.new("RGB", (64, 64), (30, 215, 96)))

    grid = pixelize_bytes(data)

    assert len(grid) == 1080 * 1080 == 1_166_400
    assert all(0 <= channel <= 255 for sample in grid[:1000] for channel in sample)
    assert grid[0] == PixelSample(30, 215, 96)
    assert grid[-1] == PixelSample(30, 215, 96)


def test_row_major_order():
    img = Image.new("RGB", (2, 2))
    img.putpixel((0, 0), (255, 0, 0))
    img.putpixel((1, 0), (0, 255, 0))
    img.putpixel((0, 1), (0, 0, 255))
    img.putpixel((1, 1), (255, 255, 255))

    grid = pixelize_bytes(encode(img), resolution=2)

    assert grid == [
        PixelSample(255, 0, 0),
        PixelSample(0, 255, 0),
        PixelSample(0, 0, 255),
        PixelSample(255, 255, 255),
    ]


@pytest.mark.parametrize("mode, color", [
    ("RGBA", (10, 20, 30, 128)),
    ("LA", (90, 200)),
    ("L", 90),
])
def test_alpha_and_greyscale_become_three_channels(mode, color):
    data = encode(Image.new(mode, (8, 8), color))

    grid = pixelize_bytes(data, resolution=4)

    assert len(grid) == 16
    assert all(len(sample) == 3 for sample in grid)


def test_rgba_keeps_colour_and_drops_alpha():
    data = encode(Image.new("RGBA", (8, 8), (10, 20, 30, 128)))

    grid = pixelize_bytes(data, resolution=4)

    assert set(grid) == {PixelSample(10, 20, 30)}


def test_non_square_image_fills_the_square():
    data = encode(Image.new("RGB", (300, 100), (1, 2, 3)), fmt="JPEG")

    grid = pixelize_bytes(data, resolution=10)

    assert len(grid) == 100


@pytest.mark.parametrize("data", [b"", b"not an image at all", b"\x89PNG\r\n\x1a\n truncated"])
def test_undecodable_bytes_raise(data):
    with pytest.raises(ImageProcessingError):
        pixelize_bytes(data)


def test_download_http_error_raises():
    response = MagicMock()
    response.raise_for_status.side_effect = requests.exceptions.HTTPError("404 Client Error")

    with patch("system_utils.image.requests.get", return_value=response):
        with pytest.raises(ImageProcessingError):
            download_image("https://i.scdn.co/image/missing")


async def test_pixelize_downloads_and_samples():
    data = encode(Image.new("RGB", (16, 16), (200, 100, 50)))

    with patch("system_utils.image.requests.get", return_value=ok_response(data)) as get:
        grid = await pixelize("https://i.scdn.co/image/cover", resolution=3)

    get.assert_called_once_with("https://i.scdn.co/image/cover", timeout=None)
    assert grid == [PixelSample(200, 100, 50)] * 9


async def test_pixelize_malformed_bytes_falls_back_to_white():
    with patch("system_utils.image.requests.get", return_value=ok_response(b"<html>oops</html>")):
        grid = await pixelize("https://i.scdn.co/image/cover")

    assert grid == [WHITE]
    assert grid_to_json(grid) == [{"r": 255, "g": 255, "b": 255}]


async def test_pixelize_empty_body_falls_back_to_white():
    with patch("system_utils.image.requests.get", return_value=ok_response(b"")):
        assert await pixelize("https://i.scdn.co/image/cover") == [WHITE]


async def test_pixelize_unreachable_url_falls_back_to_white():
    error = requests.exceptions.ConnectionError("Name or service not known")
    with patch("system_utils.image.requests.get", side_effect=error):
        assert await pixelize("https://nowhere.invalid/cover.jpg") == [WHITE]


def test_grid_to_json_shape():
    assert grid_to_json([PixelSample(1, 2, 3)]) == [{"r": 1, "g": 2, "b": 3}]
