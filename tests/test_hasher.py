import string

from yamdc import hasher


def test_md5_of_empty_input():
    assert hasher.to_md5("") == "d41d8cd98f00b204e9800998ecf8427e"


def test_sha1_of_empty_input():
    assert hasher.to_sha1("") == "da39a3ee5e6b4b0d3255bfef95601890afd80709"


def test_string_and_bytes_agree():
    text = "ABC-123 番号"
    assert hasher.to_md5(text) == hasher.to_md5_bytes(text.encode("utf-8"))
    assert hasher.to_sha1(text) == hasher.to_sha1_bytes(text.encode("utf-8"))


def test_digest_shape():
    md5 = hasher.to_md5_bytes(b"data")
    sha1 = hasher.to_sha1_bytes(b"data")
    assert len(md5) == 32
    assert len(sha1) == 40
    assert set(md5 + sha1) <= set(string.hexdigits.lower())


def test_different_inputs_give_different_digests():
    assert hasher.to_md5("a") != hasher.to_md5("b")
    assert hasher.to_sha1("a") != hasher.to_sha1("b")