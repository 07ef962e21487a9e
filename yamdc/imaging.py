"""Image decoding, JPEG encoding, scaling and poster cropping."""

from __future__ import annotations

import io
from collections.abc import Sequence

from PIL import Image, UnidentifiedImageError

from . import face
from .face import Rect

DEFAULT_ASPECT_RATIO = 0.7


class ImageError(Exception):
    """Raised when an image cannot be decoded, encoded or cropped."""


def load_image(data: bytes) -> Image.Image:
    """Decode image data in any format Pillow understands."""
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise ImageError(f"unable to decode image: {exc}") from exc
    return img


def write_image_to_bytes(img: Image.Image) -> bytes:
    """Encode an image as JPEG."""
    if img.mode not in ("RGB", "L", "CMYK"):
        img = img.convert("RGB")
    buf = io.BytesIO()
    try:
        img.save(buf, format="JPEG", quality=75)
    except (OSError, ValueError) as exc:
        raise ImageError(f"unable to convert img to jpg: {exc}") from exc
    return buf.getvalue()


def transcode_to_jpeg(data: bytes) -> bytes:
    """Decode image data and re-encode it as JPEG."""
    return write_image_to_bytes(load_image(data))


def make_color_image(width: int, height: int, rgba: Sequence[int]) -> Image.Image:
    """Return an RGBA image of the given size filled with one colour."""
    return Image.new("RGBA", (width, height), tuple(rgba))


def make_color_image_data(width: int, height: int, rgba: Sequence[int]) -> bytes:
    """Return JPEG data of a single colour image."""
    return write_image_to_bytes(make_color_image(width, height, rgba))


def scale(img: Image.Image, width: int, height: int) -> Image.Image:
    """Resize an image with nearest neighbour sampling."""
    return img.convert("RGBA").resize((width, height), Image.Resampling.NEAREST)


def _cut_frame_via_height(dx: int, dy: int, dx_center: int, aspect_ratio: float) -> Rect:
    crop_width = int(dy * aspect_ratio)
    left = dx_center - crop_width // 2
    right = dx_center + crop_width // 2
    if left < 0:
        right += abs(left)
        left = 0
    if right > dx:
        left -= right - dx
        right = dx
    if left < 0 or right > dx:
        raise ImageError(f"unable to crop satisfy image, left:{left}, right:{right}")
    return Rect(left, 0, right, dy)


def _cut_frame_via_width(dx: int, dy: int, dy_center: int, aspect_ratio: float) -> Rect:
    crop_height = int(dx / aspect_ratio)
    top = dy_center - crop_height // 2
    bottom = dy_center + crop_height // 2
    if top < 0:
        bottom += abs(top)
        top = 0
    if bottom > dy:
        top -= bottom - dy
        bottom = dy
    if top < 0 or bottom > dy:
        raise ImageError(f"unable to crop satisfy image, top:{top}, bottom:{bottom}")
    return Rect(0, top, dx, bottom)


def determine_cut_frame(
    dx: int, dy: int, dx_center: int, dy_center: int, aspect_ratio: float
) -> Rect:
    """Compute the crop frame of the given aspect ratio around a centre point."""
    if dx == 0 or dy == 0:
        raise ImageError("invalid image resolution")
    if aspect_ratio == 0:
        raise ImageError("invalid aspectRatio")
    if dx / dy > aspect_ratio:
        return _cut_frame_via_height(dx, dy, dx_center, aspect_ratio)
    return _cut_frame_via_width(dx, dy, dy_center, aspect_ratio)


def cut_image_via_rectangle(img: Image.Image, rect: Rect) -> Image.Image:
    """Crop an image to the rectangle."""
    if img.width < rect.max_x or img.height < rect.max_y:
        raise ImageError("invalid rectangle")
    box = (max(rect.min_x, 0), max(rect.min_y, 0), rect.max_x, rect.max_y)
    return img.crop(box)


def cut_censored_image(img: Image.Image) -> Image.Image:
    """Crop a poster from the right hand side of a cover."""
    try:
        frame = determine_cut_frame(img.width, img.height, img.width, 0, DEFAULT_ASPECT_RATIO)
    except ImageError as exc:
        raise ImageError(f"unable to determine cut frame: {exc}") from exc
    return cut_image_via_rectangle(img, frame)


def cut_image_with_face_rec(img: Image.Image) -> Image.Image:
    """Crop a poster centred on the largest face found in the image."""
    faces = face.search_faces(write_image_to_bytes(img))
    if not faces:
        raise ImageError("no face found")
    selected = face.find_max_face(faces)
    try:
        frame = determine_cut_frame(
            img.width,
            img.height,
            selected.min_x + selected.width() // 2,
            selected.min_y + selected.height() // 2,
            DEFAULT_ASPECT_RATIO,
        )
    except ImageError as exc:
        raise ImageError(f"unable to determine cut frame: {exc}") from exc
    return cut_image_via_rectangle(img, frame)


def cut_image_with_face_rec_from_bytes(data: bytes) -> bytes:
    return write_image_to_bytes(cut_image_with_face_rec(load_image(data)))


def cut_censored_image_from_bytes(data: bytes) -> bytes:
    return write_image_to_bytes(cut_censored_image(load_image(data)))