import io

import pytest
from PIL import Image

from yamdc import face, imaging
from yamdc.face import FaceRecognitionError, FaceRecognizer, Rect
from yamdc.imaging import ImageError


@pytest.mark.parametrize(
    "dx, dy, dx_center, dy_center, expected",
    [
        (71, 100, 71, 0, Rect(1, 0, 71, 100)),
        (100, 100, 100, 0, Rect(30, 0, 100, 100)),
        (100, 100, 50, 0, Rect(15, 0, 85, 100)),
        (100, 100, 0, 0, Rect(0, 0, 70, 100)),
        (1000, 100, 1000, 0, Rect(930, 0, 1000, 100)),
        (70, 120, 70, 0, Rect(0, 0, 70, 100)),
        (70, 1000, 0, 0, Rect(0, 0, 70, 100)),
        (70, 1000, 0, 100, Rect(0, 50, 70, 150)),
    ],
)
def test_cut_frame(dx, dy, dx_center, dy_center, expected):
    rect = imaging.determine_cut_frame(dx, dy, dx_center, dy_center, imaging.DEFAULT_ASPECT_RATIO)
    assert rect == expected


@pytest.mark.parametrize("dx, dy", [(0, 123), (123, 0)])
def test_cut_frame_invalid_resolution(dx, dy):
    with pytest.raises(ImageError):
        imaging.determine_cut_frame(dx, dy, 0, 0, imaging.DEFAULT_ASPECT_RATIO)


def test_cut_frame_zero_ratio():
    with pytest.raises(ImageError):
        imaging.determine_cut_frame(100, 100, 0, 0, 0)


def _png_bytes(img):
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def test_make_color_image_fills_pixels():
    img = imaging.make_color_image(4, 3, (10, 20, 30, 255))
    assert img.size == (4, 3)
    assert img.getpixel((3, 2)) == (10, 20, 30, 255)


def test_transcode_png_to_jpeg():
    data = _png_bytes(imaging.make_color_image(16, 8, (0, 0, 255, 255)))
    out = imaging.transcode_to_jpeg(data)
    assert out[:2] == b"\xff\xd8"
    decoded = imaging.load_image(out)
    assert decoded.format == "JPEG"
    assert decoded.size == (16, 8)


def test_load_invalid_data():
    with pytest.raises(ImageError):
        imaging.load_image(b"not an image")


def test_make_color_image_data_roundtrip():
    data = imaging.make_color_image_data(20, 10, (0, 0, 0, 255))
    img = imaging.load_image(data)
    assert img.size == (20, 10)
    assert all(v < 8 for v in img.convert("RGB").getpixel((5, 5)))


def test_scale_changes_size():
    img = imaging.make_color_image(100, 50, (1, 2, 3, 255))
    scaled = imaging.scale(img, 10, 5)
    assert scaled.size == (10, 5)
    assert scaled.getpixel((9, 4)) == (1, 2, 3, 255)


def test_cut_image_via_rectangle_out_of_bounds():
    img = imaging.make_color_image(10, 10, (0, 0, 0, 255))
    with pytest.raises(ImageError):
        imaging.cut_image_via_rectangle(img, Rect(0, 0, 11, 10))


def test_cut_image_via_rectangle_crops():
    img = imaging.make_color_image(10, 10, (0, 0, 0, 255))
    cut = imaging.cut_image_via_rectangle(img, Rect(2, 3, 7, 10))
    assert cut.size == (5, 7)


def test_cut_censored_image_takes_right_side():
    img = Image.new("RGB", (1000, 100), (0, 0, 0))
    img.paste((255, 255, 255), (930, 0, 1000, 100))
    cut = imaging.cut_censored_image(img)
    assert cut.size == (70, 100)
    assert cut.getpixel((0, 0)) == (255, 255, 255)


def test_cut_censored_image_from_bytes():
    data = imaging.make_color_image_data(100, 100, (0, 0, 0, 255))
    out = imaging.cut_censored_image_from_bytes(data)
    assert imaging.load_image(out).size == (70, 100)


class _FixedFaces(FaceRecognizer):
    name = "fixed"

    def __init__(self, faces):
        self.faces = faces

    def search_faces(self, data):
        return list(self.faces)


@pytest.fixture
def restore_face():
    yield
    face.set_face_rec(None)


def test_cut_with_face_rec_centres_on_largest_face(restore_face):
    face.set_face_rec(_FixedFaces([Rect(10, 10, 30, 30), Rect(60, 0, 100, 40)]))
    img = Image.new("RGB", (200, 100), (0, 0, 0))
    img.paste((255, 255, 255), (45, 0, 115, 100))
    cut = imaging.cut_image_with_face_rec(img)
    assert cut.size == (70, 100)
    assert cut.getpixel((0, 50)) == (255, 255, 255)
    assert cut.getpixel((69, 50)) == (255, 255, 255)


def test_cut_with_face_rec_no_face(restore_face):
    face.set_face_rec(_FixedFaces([]))
    data = imaging.make_color_image_data(200, 100, (0, 0, 0, 255))
    with pytest.raises(ImageError):
        imaging.cut_image_with_face_rec_from_bytes(data)


def test_cut_with_face_rec_without_recognizer(restore_face):
    face.set_face_rec(None)
    img = imaging.make_color_image(200, 100, (0, 0, 0, 255))
    with pytest.raises(FaceRecognitionError):
        imaging.cut_image_with_face_rec(img)