import gzip
import zlib

import pytest
import responses
import zstandard

from yamdc import client


def test_decode_gzip_round_trip():
    assert client.decode_body("gzip", gzip.compress(b"hello body")) == b"hello body"


def test_decode_deflate_round_trip():
    comp = zlib.compressobj(wbits=-zlib.MAX_WBITS)
    data = comp.compress(b"deflated data") + comp.flush()
    assert client.decode_body("deflate", data) == b"deflated data"


def test_decode_zstd_round_trip():
    data = zstandard.ZstdCompressor().compress(b"zstd data")
    assert client.decode_body("zstd", data) == b"zstd data"


def test_unknown_encoding_passes_through():
    assert client.decode_body("", b"plain") == b"plain"
    assert client.decode_body("br", b"as-is") == b"as-is"


def test_bad_gzip_raises():
    with pytest.raises(ValueError):
        client.decode_body("gzip", b"not gzip at all")


class _FakeRaw:
    def __init__(self, data):
        self.data = data

    def read(self, decode_content=True):
        return self.data


class _FakeResponse:
    def __init__(self, data, headers):
        self.raw = _FakeRaw(data)
        self.headers = headers
        self.closed = False

    def close(self):
        self.closed = True


def test_read_http_data_decodes_and_closes():
    rsp = _FakeResponse(gzip.compress(b"payload"), {"Content-Encoding": "gzip"})
    assert client.read_http_data(rsp) == b"payload"
    assert rsp.closed


def test_default_timeout():
    with client.HTTPClient() as c:
        assert c.timeout == client.DEFAULT_TIMEOUT
    with client.HTTPClient(timeout=3) as c:
        assert c.timeout == 3.0


def test_invalid_proxy_raises():
    with pytest.raises(ValueError):
        client.HTTPClient(proxy="http://[::1")


def test_proxy_is_kept():
    with client.HTTPClient(proxy="http://localhost:8080") as c:
        assert c.proxy == "http://localhost:8080"


def test_set_default_round_trip():
    original = client.default_client()
    replacement = client.HTTPClient()
    try:
        client.set_default(replacement)
        assert client.default_client() is replacement
    finally:
        client.set_default(original)
        replacement.close()


def test_do_and_read():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, "http://example.com/data", body=b"remote bytes", status=200)
        with client.HTTPClient() as c:
            rsp = c.do("GET", "http://example.com/data")
            assert rsp.status_code == 200
            assert client.read_http_data(rsp) == b"remote bytes"