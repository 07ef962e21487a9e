"""Downloading files and making sure required data files are present."""

from __future__ import annotations

import logging
import os
import time
import zlib
from contextlib import closing
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import requests
import zstandard

from .client import HTTPClient, default_client

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024
_MARKER_SUFFIX = ".ts"


class DownloadError(Exception):
    """Raised when a file cannot be downloaded or stored."""


def _decoder(encoding: str) -> Any | None:
    """Return a streaming decompressor for the encoding, or None for plain bodies."""
    if encoding == "gzip":
        return zlib.decompressobj(16 + zlib.MAX_WBITS)
    if encoding == "deflate":
        return zlib.decompressobj(-zlib.MAX_WBITS)
    if encoding == "zstd":
        return zstandard.ZstdDecompressor().decompressobj()
    return None


class DownloadManager:
    """Downloads URLs to files through an HTTP client."""

    def __init__(self, client: HTTPClient | None = None) -> None:
        self._client = client if client is not None else default_client()

    def download(self, src: str, dst: str) -> None:
        """Fetch src and store it at dst, going through a temporary file."""
        directory = os.path.dirname(dst) or "."
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as exc:
            raise DownloadError(f"mkdir failed, path:{directory}: {exc}") from exc
        try:
            response = self._client.do("GET", src)
        except requests.RequestException as exc:
            raise DownloadError(f"do request failed: {exc}") from exc
        with closing(response):
            if response.status_code != 200:
                raise DownloadError(f"status code:{response.status_code} not ok")
            decoder = _decoder(response.headers.get("Content-Encoding", ""))
            tmp = dst + ".temp"
            try:
                with open(tmp, "wb") as out:
                    for chunk in iter(
                        lambda: response.raw.read(_CHUNK_SIZE, decode_content=False), b""
                    ):
                        out.write(chunk if decoder is None else decoder.decompress(chunk))
                    if decoder is not None:
                        out.write(decoder.flush())
            except (OSError, zlib.error, zstandard.ZstdError, requests.RequestException) as exc:
                raise DownloadError(f"transfer data failed: {exc}") from exc
        try:
            os.replace(tmp, dst)
        except OSError as exc:
            raise DownloadError(f"unable to move file: {exc}") from exc


@dataclass
class Dependency:
    url: str
    target: str


def resolve(client: HTTPClient | None, deps: list[Dependency]) -> None:
    """Download every dependency whose completion marker is missing."""
    manager = DownloadManager(client)
    for dep in deps:
        marker = dep.target + _MARKER_SUFFIX
        if os.path.exists(marker):
            continue
        logger.debug("start download link %s", dep.url)
        try:
            manager.download(dep.url, dep.target)
        except DownloadError as exc:
            raise DownloadError(
                f"download link:{dep.url} to target:{dep.target} failed: {exc}"
            ) from exc
        logger.debug("download link succ %s", dep.url)
        try:
            Path(marker).write_text(str(int(time.time())))
        except OSError as exc:
            raise DownloadError(f"write ts file failed: {exc}") from exc