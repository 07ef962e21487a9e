"""Application configuration read from a JSON file that may hold comments."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or understood."""


def _blank(segment: str) -> str:
    return "".join(ch if ch == "\n" else " " for ch in segment)


def _string_end(text: str, start: int) -> int:
    """Return the index just past the string literal that starts at `start`."""
    i = start + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == '"':
            return i + 1
        i += 1
    raise ConfigError("unterminated string literal")


def _strip_comments(text: str) -> str:
    out = []
    i = 0
    while i < len(text):
        if text[i] == '"':
            end = _string_end(text, i)
            out.append(text[i:end])
            i = end
        elif text.startswith("//", i):
            end = text.find("\n", i)
            if end < 0:
                end = len(text)
            out.append(_blank(text[i:end]))
            i = end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            if end < 0:
                raise ConfigError("unterminated block comment")
            out.append(_blank(text[i : end + 2]))
            i = end + 2
        else:
            out.append(text[i])
            i += 1
    return "".join(out)


def _strip_trailing_commas(text: str) -> str:
    out = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == '"':
            end = _string_end(text, i)
            out.append(text[i:end])
            i = end
            continue
        if ch == ",":
            rest = text[i + 1 :].lstrip()
            if rest[:1] in ("]", "}"):
                out.append(" ")
                i += 1
                continue
        out.append(ch)
        i += 1
    return "".join(out)


def standardize(text: str) -> str:
    """Turn JSON with comments and trailing commas into standard JSON."""
    return _strip_trailing_commas(_strip_comments(text))


def _type_error(key: str, expected: str) -> ConfigError:
    return ConfigError(f"config field {key!r}: expected {expected}")


def _read_str(data: dict, key: str, current: str) -> str:
    value = data.get(key)
    if value is None:
        return current
    if not isinstance(value, str):
        raise _type_error(key, "string")
    return value


def _read_int(data: dict, key: str, current: int) -> int:
    value = data.get(key)
    if value is None:
        return current
    if isinstance(value, bool) or not isinstance(value, int):
        raise _type_error(key, "integer")
    return value


def _read_bool(data: dict, key: str, current: bool) -> bool:
    value = data.get(key)
    if value is None:
        return current
    if not isinstance(value, bool):
        raise _type_error(key, "boolean")
    return value


def _str_list(value: Any, key: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise _type_error(key, "list of strings")
    return list(value)


def _read_str_list(data: dict, key: str, current: list[str]) -> list[str]:
    if key not in data:
        return current
    return _str_list(data[key], key)


def _read_map(data: dict, key: str, current: dict[str, Any]) -> dict[str, Any]:
    if key not in data:
        return current
    value = data[key]
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise _type_error(key, "object")
    merged = dict(current)
    merged.update(value)
    return merged


def _read_object(data: dict, key: str) -> dict | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise _type_error(key, "object")
    return value


def _read_object_list(data: dict, key: str, current: list, build: Callable[[dict], Any]) -> list:
    if key not in data:
        return current
    value = data[key]
    if value is None:
        return []
    if not isinstance(value, list):
        raise _type_error(key, "list")
    items = []
    for item in value:
        if not isinstance(item, dict):
            raise _type_error(key, "list of objects")
        items.append(build(item))
    return items


@dataclass
class CategoryPlugin:
    name: str = ""
    plugins: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> CategoryPlugin:
        return cls(name=_read_str(data, "name", ""), plugins=_read_str_list(data, "plugins", []))


@dataclass
class Dependency:
    link: str = ""
    rel_path: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> Dependency:
        return cls(link=_read_str(data, "link", ""), rel_path=_read_str(data, "rel_path", ""))


@dataclass
class ProxyConfig:
    addr: str = ""
    user: str = ""
    password: str = ""


@dataclass
class NetworkConfig:
    timeout: int = 0  # seconds
    proxy: str = ""

    def merge(self, data: dict) -> None:
        self.timeout = _read_int(data, "timeout", self.timeout)
        self.proxy = _read_str(data, "proxy", self.proxy)


@dataclass
class LogConfig:
    file: str = ""
    level: str = ""
    file_count: int = 0
    file_size: int = 0
    keep_days: int = 0
    console: bool = False

    def merge(self, data: dict) -> None:
        self.file = _read_str(data, "file", self.file)
        self.level = _read_str(data, "level", self.level)
        self.file_count = _read_int(data, "file_count", self.file_count)
        self.file_size = _read_int(data, "file_size", self.file_size)
        self.keep_days = _read_int(data, "keep_days", self.keep_days)
        self.console = _read_bool(data, "console", self.console)


def _regex_rules(value: Any, key: str) -> list[list[str]]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise _type_error(key, "list of string lists")
    return [_str_list(item, key) for item in value]


@dataclass
class Config:
    scan_dir: str = ""
    save_dir: str = ""
    data_dir: str = ""
    naming: str = ""
    plugin_config: dict[str, Any] = field(default_factory=dict)
    handler_config: dict[str, Any] = field(default_factory=dict)
    plugins: list[str] = field(default_factory=list)
    category_plugins: list[CategoryPlugin] = field(default_factory=list)
    handlers: list[str] = field(default_factory=list)
    extra_media_exts: list[str] = field(default_factory=list)
    log_config: LogConfig = field(default_factory=LogConfig)
    dependencies: list[Dependency] = field(default_factory=list)
    network_config: NetworkConfig = field(default_factory=NetworkConfig)
    # Patterns removed (or replaced) from a file name before the number is extracted.
    regexes_to_replace: list[list[str]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> Config:
        """Build a configuration from decoded JSON, on top of the defaults."""
        if not isinstance(data, dict):
            raise ConfigError("config must be a JSON object")
        cfg = default_config()
        cfg.scan_dir = _read_str(data, "scan_dir", cfg.scan_dir)
        cfg.save_dir = _read_str(data, "save_dir", cfg.save_dir)
        cfg.data_dir = _read_str(data, "data_dir", cfg.data_dir)
        cfg.naming = _read_str(data, "naming", cfg.naming)
        cfg.plugin_config = _read_map(data, "plugin_config", cfg.plugin_config)
        cfg.handler_config = _read_map(data, "handler_config", cfg.handler_config)
        cfg.plugins = _read_str_list(data, "plugins", cfg.plugins)
        cfg.category_plugins = _read_object_list(
            data, "category_plugins", cfg.category_plugins, CategoryPlugin.from_dict
        )
        cfg.handlers = _read_str_list(data, "handlers", cfg.handlers)
        cfg.extra_media_exts = _read_str_list(data, "extra_media_exts", cfg.extra_media_exts)
        if (log := _read_object(data, "log_config")) is not None:
            cfg.log_config.merge(log)
        cfg.dependencies = _read_object_list(data, "dependencies", cfg.dependencies, Dependency.from_dict)
        if (network := _read_object(data, "network_config")) is not None:
            cfg.network_config.merge(network)
        if "regexes_to_replace" in data:
            cfg.regexes_to_replace = _regex_rules(data["regexes_to_replace"], "regexes_to_replace")
        return cfg


def default_config() -> Config:
    return Config(
        plugins=[
            "javbus",
            "javhoo",
            "airav",
            "javdb",
            "jav321",
            "caribpr",
            "18av",
            "njav",
            "missav",
            "freejavbt",
            "tktube",
            "avsox",
        ],
        category_plugins=[
            CategoryPlugin(
                name="FC2",
                plugins=["fc2", "18av", "njav", "freejavbt", "tktube", "avsox", "fc2ppvdb"],
            ),
        ],
        handlers=[
            "image_transcoder",
            "poster_cropper",
            "watermark_maker",
            "actor_spliter",
            "tag_padder",
            "duration_fixer",
            "number_title",
            "translater",
        ],
        log_config=LogConfig(level="info", console=True),
    )


def parse(path: str | Path) -> Config:
    """Read a configuration file, allowing comments and trailing commas."""
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(standardize(text))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid config json: {exc}") from exc
    return Config.from_dict(data)