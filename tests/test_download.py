import gzip
import os

import pytest
import responses

from yamdc.client import HTTPClient
from yamdc.download import Dependency, DownloadError, DownloadManager, resolve

MODEL_URL = (
    "https://github.com/Kagami/go-face-testdata/raw/master/models/"
    "shape_predictor_5_face_landmarks.dat"
)


@pytest.fixture
def http_client():
    with HTTPClient() as c:
        yield c


def test_download(tmp_path, http_client):
    dst = tmp_path / "testdata" / "abc.dat"
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, MODEL_URL, body=b"model-bytes" * 100, status=200)
        DownloadManager(http_client).download(MODEL_URL, str(dst))
    assert dst.read_bytes() == b"model-bytes" * 100
    assert not os.path.exists(str(dst) + ".temp")


def test_download_bad_status(tmp_path, http_client):
    dst = tmp_path / "x.dat"
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, "http://example.com/missing", status=404)
        with pytest.raises(DownloadError, match="404"):
            DownloadManager(http_client).download("http://example.com/missing", str(dst))
    assert not dst.exists()


def test_download_gzip_body(tmp_path, http_client):
    dst = tmp_path / "g.dat"
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.GET,
            "http://example.com/g",
            body=gzip.compress(b"compressed content"),
            headers={"Content-Encoding": "gzip"},
            status=200,
        )
        DownloadManager(http_client).download("http://example.com/g", str(dst))
    assert dst.read_bytes() == b"compressed content"


def test_resolve_writes_marker_and_skips(tmp_path, http_client):
    target = tmp_path / "models" / "facefinder"
    deps = [Dependency(url="http://example.com/facefinder", target=str(target))]
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, "http://example.com/facefinder", body=b"cascade", status=200)
        resolve(http_client, deps)
        resolve(http_client, deps)
        assert len(rsps.calls) == 1
    assert target.read_bytes() == b"cascade"
    assert (tmp_path / "models" / "facefinder.ts").read_text().isdigit()


def test_resolve_error_names_link(tmp_path, http_client):
    deps = [Dependency(url="http://example.com/gone", target=str(tmp_path / "gone"))]
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, "http://example.com/gone", status=500)
        with pytest.raises(DownloadError, match="http://example.com/gone"):
            resolve(http_client, deps)
    assert not (tmp_path / "gone.ts").exists()