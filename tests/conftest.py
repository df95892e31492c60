from __future__ import annotations

import hashlib
from collections.abc import Callable
from typing import Any

import pytest

from nginx_binaries import platforms


def _make_entry(
    *,
    name: str = "nginx",
    version: str = "1.18.0",
    variant: str = "",
    os: str = "linux",
    arch: str = "x86_64",
    payload: bytes = b"nginx binary",
    filename: str | None = None,
    checksum: str | None = None,
) -> dict[str, Any]:
    if filename is None:
        suffix = f"-{variant}" if variant else ""
        filename = f"{name}-{version}{suffix}-{arch}-{os}"
    if checksum is None:
        checksum = "sha256:" + hashlib.sha256(payload).hexdigest()
    return {
        "name": name,
        "version": version,
        "variant": variant,
        "os": os,
        "arch": arch,
        "filename": filename,
        "date": "2020-11-24T19:32:12Z",
        "size": len(payload),
        "checksum": checksum,
        "bundledLibs": {"openssl": "1.1.1i-r0"},
    }


def _make_index(*entries: dict[str, Any], format_version: int = 2) -> dict[str, Any]:
    return {"formatVersion": format_version, "contents": list(entries)}


@pytest.fixture
def make_entry() -> Callable[..., dict[str, Any]]:
    return _make_entry


@pytest.fixture
def make_index() -> Callable[..., dict[str, Any]]:
    return _make_index


@pytest.fixture
def linux_host(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pin the detected host to linux/x86_64."""
    monkeypatch.setattr(platforms, "host_os", lambda: "linux")
    monkeypatch.setattr(platforms, "host_arch", lambda: "x86_64")
