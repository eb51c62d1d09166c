"""
Image utilities for system_utils package.
Turns a cover-art URL into a flat grid of RGB samples.

Dependencies: none inside the package
"""
from __future__ import annotations
import asyncio
from io import BytesIO
from typing import Dict, List, NamedTuple, Optional

import requests
from PIL import Image, ImageOps

from config import ALBUM_ART
from logging_config import get_logger
from providers.errors import ImageProcessingError

logger = get_logger(__name__)


class PixelSample(NamedTuple):
    r: int
    g: int
    b: int


PixelGrid = List[PixelSample]

WHITE = PixelSample(255, 255, 255)


def fallback_grid() -> PixelGrid:
    """Single white sample returned whenever the cover cannot be processed"""
    return [WHITE]


def download_image(url: str, timeout: Optional[float] = None) -> bytes:
    """Fetch raw image bytes. Blocking, run it in an executor."""
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise ImageProcessingError(f"Download failed for {url}: {e}") from e
    return response.content


def pixelize_bytes(data: bytes, resolution: int = 1080) -> PixelGrid:
    """
    Decode an image and sample it on a resolution x resolution square.

    Non-square images are scaled to cover the square and centre-cropped.
    Alpha, palette and greyscale images are all converted to plain RGB first,
    so the result always has exactly resolution**2 samples in row-major order.
    """
    if not data:
        raise ImageProcessingError("Empty image data")

    try:
        with Image.open(BytesIO(data)) as img:
            rgb = img.convert("RGB")
        resized = ImageOps.fit(rgb, (resolution, resolution))
        raw = resized.tobytes()
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        # UnidentifiedImageError is an OSError
        raise ImageProcessingError(f"Could not decode image: {e}") from e

    return [PixelSample(r, g, b) for r, g, b in zip(raw[0::3], raw[1::3], raw[2::3])]


def pixelize_url_sync(url: str, resolution: int, timeout: Optional[float]) -> PixelGrid:
    return pixelize_bytes(download_image(url, timeout), resolution)


async def pixelize(url: str, resolution: Optional[int] = None) -> PixelGrid:
    """
    Download the cover at `url` and return its pixel grid.

    Never raises: any failure is logged and degrades to the single white sample.
    Download and Pillow work run in a thread executor to keep the event loop free.
    """
    resolution = resolution or ALBUM_ART["resolution"]
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(
            None, pixelize_url_sync, url, resolution, ALBUM_ART["download_timeout"]
        )
    except Exception as e:
        logger.error(f"Error processing album cover: {e}")
        return fallback_grid()


def grid_to_json(grid: PixelGrid) -> List[Dict[str, int]]:
    return [sample._asdict() for sample in grid]
