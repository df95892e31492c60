from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_cache_dir

_ENV_CACHE_DIR = "NGINX_BINARIES_CACHE_DIR"


def get_cache_dir() -> Path:
    """
    Return the directory holding the cached index and downloaded binaries.

    Override with env var:
      NGINX_BINARIES_CACHE_DIR=/path/to/cache

    Layout:
      {cache_dir}/index.json
      {cache_dir}/{entry.filename}

    Default:
      platformdirs.user_cache_dir("nginx-binaries")
    """
    override = os.environ.get(_ENV_CACHE_DIR)
    if override:
        return Path(override).expanduser().resolve()

    return Path(user_cache_dir("nginx-binaries"))
