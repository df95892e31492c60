from __future__ import annotations

import json
import logging
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from nginx_binaries import Downloader, DownloaderConfig, NetworkError, Query


@pytest.fixture
def repo_dir(
    tmp_path: Path,
    make_entry: Callable[..., dict[str, Any]],
    make_index: Callable[..., dict[str, Any]],
) -> Path:
    root = tmp_path / "repo"
    root.mkdir()
    entries = []
    for version in ("1.18.0", "1.19.5"):
        payload = f"nginx {version}".encode()
        entry = make_entry(version=version, payload=payload)
        (root / entry["filename"]).write_bytes(payload)
        entries.append(entry)
    (root / "index.json").write_text(json.dumps(make_index(*entries)), encoding="utf-8")
    return root


def _downloader(repo_dir: Path, cache_dir: Path, max_age: float = 60) -> Downloader:
    config = DownloaderConfig(
        repo_url=repo_dir.as_uri(), cache_dir=cache_dir, cache_max_age=max_age, timeout=5
    )
    return Downloader("nginx", config)


def test_download_from_file_repository(repo_dir: Path, tmp_path: Path) -> None:
    d = _downloader(repo_dir, tmp_path / "cache")

    path = d.download(Query(version="1.18.0", os="linux", arch="x86_64"))

    assert path.read_bytes() == (repo_dir / path.name).read_bytes()
    assert (tmp_path / "cache" / "index.json").is_file()


def test_stale_index_used_when_repository_unreachable(
    repo_dir: Path, tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    cache_dir = tmp_path / "cache"
    assert _downloader(repo_dir, cache_dir).versions(Query(os="linux", arch="x86_64")) == [
        "1.19.5",
        "1.18.0",
    ]

    shutil.rmtree(repo_dir)

    # max_age=0 forces a refresh attempt, which fails
    d = _downloader(repo_dir, cache_dir, max_age=0)
    with caplog.at_level(logging.WARNING, logger="nginx_binaries"):
        versions = d.versions(Query(os="linux", arch="x86_64"))

    assert versions == ["1.19.5", "1.18.0"]
    assert "stale index" in caplog.text


def test_unreachable_repository_without_cache_raises(tmp_path: Path) -> None:
    d = _downloader(tmp_path / "missing", tmp_path / "cache")

    with pytest.raises(NetworkError):
        d.search(Query(os="linux", arch="x86_64"))
