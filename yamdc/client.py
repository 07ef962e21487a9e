"""Shared HTTP client and decoding of compressed response bodies."""

from __future__ import annotations

import gzip
import zlib
from typing import Any
from urllib.parse import urlsplit

import requests
import zstandard

DEFAULT_TIMEOUT = 10.0

_CHROME_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def _validate_proxy(proxy: str) -> str:
    try:
        parts = urlsplit(proxy)
    except ValueError as exc:
        raise ValueError(f"parse proxy link failed: {exc}") from exc
    if not parts.scheme or not parts.netloc:
        raise ValueError(f"parse proxy link failed: {proxy!r}")
    return proxy


class HTTPClient:
    """A cookie-keeping HTTP client with a timeout and an optional proxy."""

    def __init__(self, timeout: float | None = None, proxy: str = "") -> None:
        self.timeout = float(timeout) if timeout else DEFAULT_TIMEOUT
        self.proxy = _validate_proxy(proxy) if proxy else ""
        self._session = requests.Session()
        self._session.headers["User-Agent"] = _CHROME_USER_AGENT
        if self.proxy:
            self._session.proxies = {"http": self.proxy, "https": self.proxy}

    def do(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """Send a request; the body is left unread so it can be streamed."""
        kwargs.setdefault("timeout", self.timeout)
        kwargs.setdefault("stream", True)
        return self._session.request(method, url, **kwargs)

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> HTTPClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


_state: dict[str, HTTPClient] = {}


def set_default(client: HTTPClient) -> None:
    """Make client the shared client; it must offer a callable do()."""
    if not callable(getattr(client, "do", None)):
        raise TypeError(f"not an HTTP client: {client!r}")
    _state["default"] = client


def default_client() -> HTTPClient:
    """Return the shared client, creating one with default settings if needed."""
    client = _state.get("default")
    if client is None:
        client = HTTPClient()
        _state["default"] = client
    return client


def decode_body(encoding: str, data: bytes) -> bytes:
    """Undo a Content-Encoding of gzip, deflate or zstd; other encodings pass through."""
    try:
        if encoding == "gzip":
            return gzip.decompress(data)
        if encoding == "deflate":
            return zlib.decompress(data, -zlib.MAX_WBITS)
        if encoding == "zstd":
            return zstandard.ZstdDecompressor().decompressobj().decompress(data)
    except (OSError, EOFError, zlib.error, zstandard.ZstdError) as exc:
        raise ValueError(f"invalid {encoding} body: {exc}") from exc
    return data


def read_http_data(response: requests.Response) -> bytes:
    """Read the whole body of a response, decoded, and close the response."""
    try:
        raw = response.raw.read(decode_content=False)
    finally:
        response.close()
    return decode_body(response.headers.get("Content-Encoding", ""), raw)