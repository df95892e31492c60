from __future__ import annotations

from pathlib import Path

import pytest
from platformdirs import user_cache_dir

from nginx_binaries.cache import get_cache_dir


def test_get_cache_dir_env_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("NGINX_BINARIES_CACHE_DIR", str(tmp_path))
    assert get_cache_dir() == tmp_path.resolve()


def test_get_cache_dir_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NGINX_BINARIES_CACHE_DIR", raising=False)
    assert get_cache_dir() == Path(user_cache_dir("nginx-binaries"))


def test_get_cache_dir_ignores_empty_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NGINX_BINARIES_CACHE_DIR", "")
    assert get_cache_dir() == Path(user_cache_dir("nginx-binaries"))
