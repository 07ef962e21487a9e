"""Stamping tag watermarks onto poster images."""

from __future__ import annotations

from collections.abc import Sequence
from enum import IntEnum

from PIL import Image

from .imaging import ImageError, load_image, scale, write_image_to_bytes

MAX_WATERMARK_COUNT = 4
WATERMARK_WIDTH_TO_IMAGE_WIDTH_RATIO = 0.3158
WATERMARK_WIDTH_TO_HEIGHT_RATIO = 2
WATERMARK_GAP_SIZE = 10


class Watermark(IntEnum):
    CHINESE_SUBTITLE = 1
    UNCENSORED = 2
    FOUR_K = 3
    LEAK = 4


_resources: dict[int, bytes] = {}


def register_resource(tag: Watermark, data: bytes) -> None:
    """Set the encoded image used for a watermark tag."""
    _resources[tag] = bytes(data)


def add_watermark_to_image(img: Image.Image, marks: Sequence[Image.Image]) -> Image.Image:
    """Stack the marks in the bottom right corner, the first one on top."""
    if len(marks) > MAX_WATERMARK_COUNT:
        raise ImageError(f"water mark count out of limit, size:{len(marks)}")
    if not marks:
        raise ImageError("no watermark found")
    width, height = img.size
    out = img.convert("RGBA")
    mark_width = int(width * WATERMARK_WIDTH_TO_IMAGE_WIDTH_RATIO)
    mark_height = mark_width // WATERMARK_WIDTH_TO_HEIGHT_RATIO
    for i, mark in enumerate(reversed(marks)):
        top = height - (i + 1) * mark_height - i * WATERMARK_GAP_SIZE
        bottom = height - i * mark_height - i * WATERMARK_GAP_SIZE
        if top < 0 or bottom < 0:
            raise ImageError("image height too small to contain all watermarks")
        scaled = scale(mark, mark_width, mark_height)
        out.alpha_composite(scaled, dest=(width - mark_width, top))
    return out


def add_watermark(img: Image.Image, tags: Sequence[Watermark]) -> Image.Image:
    """Stamp the registered watermark images of the tags onto the image."""
    marks = []
    for tag in tags:
        data = _resources.get(tag)
        if data is None:
            raise ImageError(f"watermark:{int(tag)} not found")
        marks.append(load_image(data))
    try:
        return add_watermark_to_image(img, marks)
    except ImageError as exc:
        raise ImageError(f"add water mark failed: {exc}") from exc


def add_watermark_from_bytes(data: bytes, tags: Sequence[Watermark]) -> bytes:
    return write_image_to_bytes(add_watermark(load_image(data), tags))