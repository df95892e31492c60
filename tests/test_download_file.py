from __future__ import annotations

import hashlib
import io
import os
import sys
from pathlib import Path

import pytest

from nginx_binaries.download import download_file
from nginx_binaries.errors import (
    CorruptDownloadError,
    InvalidChecksumFormatError,
    NetworkError,
    UnexpectedResponseError,
)

URL = "https://example.com/nginx-1.18.0-x86_64-linux"


class FakeClient:
    def __init__(self, payload: bytes) -> None:
        self.payload = payload
        self.calls: list[str] = []

    def get_json(self, url: str, *, timeout: float) -> object:
        raise AssertionError("not used")

    def open(self, url: str, *, timeout: float) -> io.BytesIO:
        self.calls.append(url)
        return io.BytesIO(self.payload)


class FailingClient:
    def __init__(self, error: Exception) -> None:
        self.error = error
        self.calls: list[str] = []

    def get_json(self, url: str, *, timeout: float) -> object:
        raise AssertionError("not used")

    def open(self, url: str, *, timeout: float) -> io.BytesIO:
        self.calls.append(url)
        raise self.error


def _sha256(b: bytes) -> str:
    return "sha256:" + hashlib.sha256(b).hexdigest()


def test_download_writes_file_and_creates_parents(tmp_path: Path) -> None:
    payload = b"\x7fELF binary"
    dest = tmp_path / "a" / "b" / "nginx"
    client = FakeClient(payload)

    got = download_file(URL, _sha256(payload), dest, client=client)

    assert got == dest
    assert dest.read_bytes() == payload
    assert client.calls == [URL]


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX file modes")
def test_download_marks_file_executable(tmp_path: Path) -> None:
    payload = b"binary"
    dest = tmp_path / "nginx"

    download_file(URL, _sha256(payload), dest, client=FakeClient(payload))

    assert os.access(dest, os.X_OK)


def test_existing_valid_file_is_not_downloaded_again(tmp_path: Path) -> None:
    payload = b"binary"
    dest = tmp_path / "nginx"
    dest.write_bytes(payload)
    client = FakeClient(b"something else")

    got = download_file(URL, _sha256(payload), dest, client=client)

    assert got == dest
    assert client.calls == []
    assert dest.read_bytes() == payload


def test_existing_corrupt_file_is_replaced(tmp_path: Path) -> None:
    payload = b"binary"
    dest = tmp_path / "nginx"
    dest.write_bytes(b"truncat")
    client = FakeClient(payload)

    download_file(URL, _sha256(payload), dest, client=client)

    assert client.calls == [URL]
    assert dest.read_bytes() == payload


def test_checksum_mismatch_raises_and_keeps_file(tmp_path: Path) -> None:
    dest = tmp_path / "nginx"
    expected = _sha256(b"expected")

    with pytest.raises(CorruptDownloadError) as exc:
        download_file(URL, expected, dest, client=FakeClient(b"tampered"))

    assert exc.value.path == dest
    assert exc.value.algorithm == "sha256"
    assert "nginx" in str(exc.value)
    assert "sha256" in str(exc.value)
    assert dest.read_bytes() == b"tampered"


def test_unexpected_response_propagates(tmp_path: Path) -> None:
    dest = tmp_path / "nginx"
    client = FailingClient(UnexpectedResponseError(URL, 404, "Not Found"))

    with pytest.raises(UnexpectedResponseError) as exc:
        download_file(URL, _sha256(b"x"), dest, client=client)

    assert exc.value.status == 404
    assert URL in str(exc.value)
    assert not dest.exists()


def test_network_error_propagates(tmp_path: Path) -> None:
    client = FailingClient(NetworkError("connection refused", url=URL))

    with pytest.raises(NetworkError):
        download_file(URL, _sha256(b"x"), tmp_path / "nginx", client=client)


def test_malformed_checksum_fails_before_network(tmp_path: Path) -> None:
    client = FakeClient(b"x")

    with pytest.raises(InvalidChecksumFormatError):
        download_file(URL, "deadbeef", tmp_path / "nginx", client=client)

    assert client.calls == []
