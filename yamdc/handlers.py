"""Metadata handlers and the registry that creates them by name."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import Any, Protocol

from . import ffmpeg
from .model import AvMeta, FileContext
from .number_parser import get_clean_id

logger = logging.getLogger(__name__)

H_POSTER_CROPPER = "poster_cropper"
H_DURATION_FIXER = "duration_fixer"
H_IMAGE_TRANSCODER = "image_transcoder"
H_TRANSLATER = "translater"
H_WATERMARK_MAKER = "watermark_maker"
H_TAG_PADDER = "tag_padder"
H_NUMBER_TITLE = "number_title"
H_ACTOR_SPLITER = "actor_spliter"


class HandlerNotFoundError(LookupError):
    """Raised when no handler is registered under the requested name."""


class _Handler(Protocol):
    def handle(self, fc: FileContext) -> None: ...


class _DurationProbe(Protocol):
    def read_duration(self, path: str) -> float: ...


Creator = Callable[[Any], _Handler]

_registry: dict[str, Creator] = {}


def register(name: str, creator: Creator) -> None:
    """Register a handler creator under a name, replacing any earlier one."""
    _registry[name] = creator


def create_handler(name: str, args: Any = None) -> _Handler:
    """Create the handler registered under name, passing it its arguments."""
    try:
        creator = _registry[name]
    except KeyError:
        raise HandlerNotFoundError(f"handler:{name} not found") from None
    return creator(args)


def handler_to_creator(handler: _Handler) -> Creator:
    """Return a creator that ignores its arguments and yields the given handler."""
    if not callable(getattr(handler, "handle", None)):
        raise TypeError(f"not a handler: {handler!r}")
    handler_name = type(handler).__name__

    def creator(args: Any) -> _Handler:
        logger.debug("create handler %s, args ignored: %r", handler_name, args)
        return handler

    return creator


def handlers() -> list[str]:
    """Return the names of all registered handlers, sorted."""
    return sorted(_registry)


class ActorSplitHandler:
    """Split actor names such as 'Name (Alias)' into separate entries."""

    _PATTERN = re.compile(r"\s*(.+?)\s*\(\s*(.+?)\s*\)")

    @staticmethod
    def _clean_actor(actor: str) -> str:
        return actor.strip().replace("（", "(").replace("）", ")")

    def _try_extract_actor(self, actor: str) -> list[str] | None:
        matches = list(self._PATTERN.finditer(actor))
        if not matches:
            return None
        names: list[str] = []
        for match in matches:
            names.extend((match.group(1).strip(), match.group(2).strip()))
        return names

    def handle(self, fc: FileContext) -> None:
        actors: list[str] = []
        for actor in fc.meta.actors:
            actor = self._clean_actor(actor)
            split = self._try_extract_actor(actor)
            if split is None:
                actors.append(actor)
            else:
                actors.extend(split)
        fc.meta.actors = actors


class DurationFixerHandler:
    """Fill in a missing duration by probing the media file."""

    def __init__(self, probe: _DurationProbe | None = None) -> None:
        self._probe = probe

    def handle(self, fc: FileContext) -> None:
        if fc.meta.duration > 0:
            return
        if self._probe is not None:
            duration = self._probe.read_duration(fc.full_file_path)
        else:
            if not ffmpeg.is_ffprobe_enabled():
                return
            duration = ffmpeg.read_duration(fc.full_file_path)
        fc.meta.duration = int(duration)
        logger.debug("rewrite video duration succ, duration:%s", duration)


class NumberTitleHandler:
    """Prefix the title with the number unless the title already holds it."""

    def handle(self, fc: FileContext) -> None:
        title = get_clean_id(fc.meta.title)
        number = get_clean_id(fc.number.number_id)
        if number in title:
            return
        fc.meta.title = fc.number.number_id + " " + fc.meta.title


class TagPadderHandler:
    """Add tags derived from the number's flags and its series prefix."""

    @staticmethod
    def _number_prefix_tag(fc: FileContext) -> str | None:
        chars: list[str] = []
        pure_number = True
        for ch in fc.number.number_id:
            if ch in "-_":
                break
            if ch.isalpha():
                pure_number = False
            chars.append(ch)
        if pure_number:
            return None
        return "".join(chars)

    @staticmethod
    def _rewrite_or_append_tag(meta: AvMeta, tag: str) -> None:
        wanted = tag.casefold()
        found = False
        for idx, item in enumerate(meta.genres):
            if item.casefold() == wanted:
                meta.genres[idx] = tag
                found = True
        if not found:
            meta.genres.append(tag)

    def handle(self, fc: FileContext) -> None:
        fc.meta.genres = fc.meta.genres + fc.number.generate_tags()
        tag = self._number_prefix_tag(fc)
        if tag is not None:
            self._rewrite_or_append_tag(fc.meta, tag)
        fc.meta.genres = list(dict.fromkeys(fc.meta.genres))


register(H_ACTOR_SPLITER, handler_to_creator(ActorSplitHandler()))
register(H_DURATION_FIXER, handler_to_creator(DurationFixerHandler()))
register(H_NUMBER_TITLE, handler_to_creator(NumberTitleHandler()))
register(H_TAG_PADDER, handler_to_creator(TagPadderHandler()))