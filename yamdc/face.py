"""Face detection interface, a fallback group and the shared recogniser."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

logger = logging.getLogger(__name__)

NAME_GOFACE = "goface"
NAME_PIGO = "pigo"


class FaceRecognitionError(Exception):
    """Raised when no face recogniser is available."""


@dataclass(frozen=True)
class Rect:
    """An axis aligned rectangle from (min_x, min_y) to (max_x, max_y)."""

    min_x: int = 0
    min_y: int = 0
    max_x: int = 0
    max_y: int = 0

    def width(self) -> int:
        return self.max_x - self.min_x

    def height(self) -> int:
        return self.max_y - self.min_y


class FaceRecognizer(ABC):
    """Finds faces in encoded image data."""

    name: str = ""

    @abstractmethod
    def search_faces(self, data: bytes) -> list[Rect]:
        """Return the rectangles of the faces found in the image."""


class FaceGroup(FaceRecognizer):
    """Tries each recogniser in turn and returns the first success."""

    name = "group"

    def __init__(self, impls: Iterable[FaceRecognizer]) -> None:
        self.impls = list(impls)

    def search_faces(self, data: bytes) -> list[Rect]:
        last_error: Exception | None = None
        for impl in self.impls:
            try:
                faces = impl.search_faces(data)
            except Exception as exc:  # any recogniser failure falls through to the next
                last_error = exc
                continue
            logger.debug("search face succ with %s", impl.name)
            return faces
        if last_error is not None:
            raise last_error
        return []


_state: dict[str, FaceRecognizer] = {}


def set_face_rec(impl: FaceRecognizer | None) -> None:
    """Install impl as the shared recogniser; None disables recognition."""
    if impl is None:
        _state.pop("default", None)
        return
    if not callable(getattr(impl, "search_faces", None)):
        raise TypeError(f"not a face recogniser: {impl!r}")
    _state["default"] = impl


def search_faces(data: bytes) -> list[Rect]:
    impl = _state.get("default")
    if impl is None:
        raise FaceRecognitionError("not impl")
    return impl.search_faces(data)


def find_max_face(faces: Sequence[Rect]) -> Rect:
    """Return the face with the largest area, or an empty Rect."""
    best, best_area = Rect(), 0
    for face in faces:
        area = face.width() * face.height()
        if area > best_area:
            best, best_area = face, area
    return best


def is_face_recognize_enabled() -> bool:
    return "default" in _state