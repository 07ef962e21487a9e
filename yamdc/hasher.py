"""Hex digests of strings and bytes."""

import hashlib


def to_md5(text: str) -> str:
    return to_md5_bytes(text.encode("utf-8"))


def to_md5_bytes(data: bytes) -> str:
    return hashlib.md5(data).hexdigest()


def to_sha1(text: str) -> str:
    return to_sha1_bytes(text.encode("utf-8"))


def to_sha1_bytes(data: bytes) -> str:
    return hashlib.sha1(data).hexdigest()