"""Feature switches read from environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields

PREFIX = "yamdc"

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}


def _parse_bool(key: str, value: str) -> bool:
    if value == "":
        return False
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"invalid boolean value {value!r} for {key}")


@dataclass(frozen=True)
class EnvFlag:
    enable_search_meta_cache: bool = True
    enable_link_mode: bool = False
    enable_go_face_recognizer: bool = True
    enable_pigo_face_recognizer: bool = True

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> EnvFlag:
        """Build flags from YAMDC_<NAME> variables, falling back to <NAME>."""
        env = os.environ if environ is None else environ
        values = {}
        for f in fields(cls):
            for key in (f"{PREFIX}_{f.name}".upper(), f.name.upper()):
                if key in env:
                    values[f.name] = _parse_bool(key, env[key])
                    break
        return cls(**values)


# Until load() runs, every flag is off.
_current = EnvFlag(
    enable_search_meta_cache=False,
    enable_link_mode=False,
    enable_go_face_recognizer=False,
    enable_pigo_face_recognizer=False,
)


def load(environ: Mapping[str, str] | None = None) -> EnvFlag:
    """Read the flags from the environment and make them current."""
    global _current
    _current = EnvFlag.from_environ(environ)
    return _current


def get_flag() -> EnvFlag:
    return _current


def is_enable_search_meta_cache() -> bool:
    return _current.enable_search_meta_cache


def is_enable_link_mode() -> bool:
    return _current.enable_link_mode


def is_enable_go_face_recognizer() -> bool:
    return _current.enable_go_face_recognizer


def is_enable_pigo_face_recognizer() -> bool:
    return _current.enable_pigo_face_recognizer