"""Core data types: categories, movie metadata, parsed numbers and file contexts."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum

DEFAULT_SUFFIX_LEAK = "LEAK"
DEFAULT_SUFFIX_CHINESE_SUBTITLE = "C"
DEFAULT_SUFFIX_4K = "4K"
DEFAULT_SUFFIX_MULTI_CD = "CD"

DEFAULT_TAG_UNCENSORED = "无码"
DEFAULT_TAG_CHINESE_SUBTITLE = "中文字幕"
DEFAULT_TAG_4K = "4K"
DEFAULT_TAG_LEAK = "无码流出"


class Category(str, Enum):
    """Category of a movie number, used to pick category specific searchers."""

    DEFAULT = "DEFAULT"
    FC2 = "FC2"

    def __str__(self) -> str:
        return self.value


def is_fc2(number: str) -> bool:
    """Return True when the number belongs to the FC2 family."""
    return number.upper().startswith("FC2")


def determine_category(number_id: str) -> Category:
    """Work out the category of a number id."""
    if is_fc2(number_id):
        return Category.FC2
    return Category.DEFAULT


def decode_fc2_val_id(number: str) -> str | None:
    """Return the numeric part after the last dash of an FC2 number, or None."""
    if not is_fc2(number):
        return None
    head, sep, tail = number.rpartition("-")
    if not sep:
        return None
    return tail


@dataclass
class File:
    name: str = ""
    key: str = ""


@dataclass
class ScrapeInfo:
    source: str = ""
    date_ts: int = 0


@dataclass
class SingleTranslateItem:
    enable: bool = False
    translated_text: str = ""


@dataclass
class TranslateInfo:
    title: SingleTranslateItem = field(default_factory=SingleTranslateItem)
    plot: SingleTranslateItem = field(default_factory=SingleTranslateItem)


@dataclass
class ExtInfo:
    scrape_info: ScrapeInfo = field(default_factory=ScrapeInfo)
    translate_info: TranslateInfo = field(default_factory=TranslateInfo)


@dataclass
class AvMeta:
    """Scraped metadata of one movie."""

    number: str = ""
    title: str = ""
    plot: str = ""
    actors: list[str] = field(default_factory=list)
    release_date: int = 0
    duration: int = 0
    studio: str = ""
    label: str = ""
    series: str = ""
    genres: list[str] = field(default_factory=list)
    cover: File | None = None
    poster: File | None = None
    sample_images: list[File] = field(default_factory=list)
    director: str = ""
    ext_info: ExtInfo = field(default_factory=ExtInfo)


@dataclass
class Number:
    """A movie number recognised from a file name, with its flags."""

    number_id: str = ""
    is_cn_sub: bool = False
    episode: str = ""
    is_uncensored: bool = False
    is_4k: bool = False
    is_cracked: bool = False
    is_leaked: bool = False
    cat: Category | None = None

    def generate_suffix(self, base: str) -> str:
        if self.is_4k:
            base += "-" + DEFAULT_SUFFIX_4K
        if self.is_cn_sub:
            base += "-" + DEFAULT_SUFFIX_CHINESE_SUBTITLE
        if self.is_leaked:
            base += "-" + DEFAULT_SUFFIX_LEAK
        return base

    def generate_tags(self) -> list[str]:
        tags = []
        if self.is_uncensored:
            tags.append(DEFAULT_TAG_UNCENSORED)
        if self.is_cn_sub:
            tags.append(DEFAULT_TAG_CHINESE_SUBTITLE)
        if self.is_4k:
            tags.append(DEFAULT_TAG_4K)
        if self.is_leaked:
            tags.append(DEFAULT_TAG_LEAK)
        return tags

    def generate_file_name(self) -> str:
        return self.generate_suffix(self.number_id)


@dataclass
class FileContext:
    """State carried through the scraping of one media file."""

    full_file_path: str = ""
    file_name: str = ""
    file_ext: str = ""
    save_file_base: str = ""
    save_dir: str = ""
    meta: AvMeta | None = None
    number: Number | None = None

    def dir(self, level: int) -> str:
        """Return the directory `level` steps above the file's own directory."""
        if level < 0:
            raise ValueError("level must not be negative")
        directory = os.path.normpath(os.path.dirname(self.full_file_path) or ".")
        if level == 0:
            return directory
        parts = directory.split(os.sep)
        if level >= len(parts):
            return os.sep
        return os.path.join(*parts[: len(parts) - level])