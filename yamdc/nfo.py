"""Reading and writing movie NFO documents."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'


@dataclass
class ScrapeInfo:
    source: str = ""
    date: str = ""


@dataclass
class Actor:
    name: str = ""
    role: str = ""
    thumb: str = ""


@dataclass
class Art:
    poster: str = ""
    fanart: list[str] = field(default_factory=list)


@dataclass
class Movie:
    plot: str = ""
    date_added: str = ""
    title: str = ""
    original_title: str = ""
    sort_title: str = ""
    set_name: str = ""
    rating: float = 0.0
    release: str = ""
    release_date: str = ""
    premiered: str = ""
    runtime: int = 0  # minutes
    year: int = 0
    tags: list[str] = field(default_factory=list)
    studio: str = ""
    maker: str = ""
    genres: list[str] = field(default_factory=list)
    art: Art = field(default_factory=Art)
    mpaa: str = ""
    director: str = ""
    actors: list[Actor] = field(default_factory=list)
    poster: str = ""
    thumb: str = ""
    label: str = ""
    id: str = ""
    cover: str = ""
    fanart: str = ""
    scrape_info: ScrapeInfo = field(default_factory=ScrapeInfo)


def _format_float(value: float) -> str:
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


def _text(parent: ET.Element, tag: str, value: str, omit_empty: bool = True) -> None:
    if omit_empty and not value:
        return
    ET.SubElement(parent, tag).text = value


def _texts(parent: ET.Element, tag: str, values: list[str]) -> None:
    for value in values:
        ET.SubElement(parent, tag).text = value


def _to_element(movie: Movie) -> ET.Element:
    root = ET.Element("movie")
    _text(root, "plot", movie.plot)
    _text(root, "dateadded", movie.date_added)
    _text(root, "title", movie.title)
    _text(root, "originaltitle", movie.original_title)
    _text(root, "sorttitle", movie.sort_title)
    _text(root, "set", movie.set_name)
    if movie.rating:
        _text(root, "rating", _format_float(movie.rating))
    _text(root, "release", movie.release)
    _text(root, "releasedate", movie.release_date)
    _text(root, "premiered", movie.premiered)
    if movie.runtime:
        _text(root, "runtime", str(movie.runtime))
    if movie.year:
        _text(root, "year", str(movie.year))
    _texts(root, "tag", movie.tags)
    _text(root, "studio", movie.studio)
    _text(root, "maker", movie.maker)
    _texts(root, "genre", movie.genres)
    art = ET.SubElement(root, "art")
    _text(art, "poster", movie.art.poster)
    _texts(art, "fanart", movie.art.fanart)
    _text(root, "mpaa", movie.mpaa)
    _text(root, "director", movie.director)
    for actor in movie.actors:
        node = ET.SubElement(root, "actor")
        _text(node, "name", actor.name)
        _text(node, "role", actor.role)
        _text(node, "thumb", actor.thumb)
    _text(root, "poster", movie.poster)
    _text(root, "thumb", movie.thumb)
    _text(root, "label", movie.label)
    _text(root, "id", movie.id)
    _text(root, "cover", movie.cover)
    _text(root, "fanart", movie.fanart)
    scrape = ET.SubElement(root, "scrape_info")
    _text(scrape, "source", movie.scrape_info.source, omit_empty=False)
    _text(scrape, "date", movie.scrape_info.date, omit_empty=False)
    return root


def _parse_int(text: str, tag: str, unsigned: bool = False) -> int:
    text = text.strip()
    if not text:
        return 0
    value = int(text)
    if unsigned and value < 0:
        raise ValueError(f"negative value for <{tag}>")
    return value


_STRING_FIELDS = {
    "plot": "plot",
    "dateadded": "date_added",
    "title": "title",
    "originaltitle": "original_title",
    "sorttitle": "sort_title",
    "set": "set_name",
    "release": "release",
    "releasedate": "release_date",
    "premiered": "premiered",
    "studio": "studio",
    "maker": "maker",
    "mpaa": "mpaa",
    "director": "director",
    "poster": "poster",
    "thumb": "thumb",
    "label": "label",
    "id": "id",
    "cover": "cover",
    "fanart": "fanart",
}


def _from_element(root: ET.Element) -> Movie:
    if root.tag != "movie":
        raise ValueError(f"expected element <movie> but have <{root.tag}>")
    movie = Movie()
    for child in root:
        tag = child.tag
        text = child.text or ""
        if tag in _STRING_FIELDS:
            setattr(movie, _STRING_FIELDS[tag], text)
        elif tag == "rating":
            movie.rating = float(text.strip() or 0)
        elif tag == "runtime":
            movie.runtime = _parse_int(text, tag, unsigned=True)
        elif tag == "year":
            movie.year = _parse_int(text, tag)
        elif tag == "tag":
            movie.tags.append(text)
        elif tag == "genre":
            movie.genres.append(text)
        elif tag == "art":
            for sub in child:
                if sub.tag == "poster":
                    movie.art.poster = sub.text or ""
                elif sub.tag == "fanart":
                    movie.art.fanart.append(sub.text or "")
        elif tag == "actor":
            actor = Actor()
            for sub in child:
                if sub.tag in ("name", "role", "thumb"):
                    setattr(actor, sub.tag, sub.text or "")
            movie.actors.append(actor)
        elif tag == "scrape_info":
            for sub in child:
                if sub.tag in ("source", "date"):
                    setattr(movie.scrape_info, sub.tag, sub.text or "")
    return movie


def parse_movie_with_data(data: bytes) -> Movie:
    """Decode an NFO document; raises ValueError on malformed input."""
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise ValueError(f"invalid nfo xml: {exc}") from exc
    return _from_element(root)


def parse_movie(path: str | Path) -> Movie:
    return parse_movie_with_data(Path(path).read_bytes())


def _encode(movie: Movie) -> bytes:
    root = _to_element(movie)
    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode", short_empty_elements=False)
    return (XML_HEADER + body).encode("utf-8")


def write_movie(stream: BinaryIO, movie: Movie) -> None:
    """Write the movie as an indented NFO document to a binary stream."""
    stream.write(_encode(movie))


def write_movie_to_file(path: str | Path, movie: Movie) -> None:
    with open(path, "wb") as handle:
        write_movie(handle, movie)