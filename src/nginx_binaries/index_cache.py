from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Any

from .catalog import Catalog, parse_catalog
from .errors import InvalidCatalogError, NetworkError
from .transport import HttpClient, UrllibClient

logger = logging.getLogger(__name__)

INDEX_FILENAME = "index.json"


def index_path(cache_dir: Path) -> Path:
    return cache_dir / INDEX_FILENAME


def get_catalog(
    repo_url: str,
    cache_dir: Path,
    *,
    timeout: float,
    max_age: float,
    client: HttpClient | None = None,
) -> Catalog:
    """
    Return the repository catalog, using {cache_dir}/index.json when fresh.

    States:
      - cached file younger than max_age minutes: read it, no network;
        an unreadable cached file is treated as missing
      - otherwise: fetch {repo_url}/index.json and overwrite the cached file
      - fetch failed with a connectivity error and a (stale) cached file
        exists: warn and return the stale copy
      - anything else: the error propagates

    max_age <= 0 always refreshes.
    """
    path = index_path(cache_dir)

    is_cached = False
    try:
        mtime = path.stat().st_mtime
    except OSError:
        pass
    else:
        is_cached = True
        if max_age > 0 and time.time() - mtime < max_age * 60:
            logger.debug("Using cached index %s", path)
            try:
                return read_cached_catalog(path)
            except InvalidCatalogError as e:
                # e.g. truncated by an interrupted write
                logger.warning("Discarding unreadable cached index: %s", e)
                is_cached = False

    url = f"{repo_url.rstrip('/')}/{INDEX_FILENAME}"
    if client is None:
        client = UrllibClient()

    try:
        logger.debug("Fetching %s", url)
        data = client.get_json(url, timeout=timeout)
    except NetworkError as e:
        if not is_cached:
            raise
        try:
            stale = read_cached_catalog(path)
        except InvalidCatalogError:
            raise e from None
        logger.warning("Failed to refresh repository index, using stale index: %s", e)
        return stale

    catalog = parse_catalog(data, source=url)
    _write_index(path, data)

    return catalog


def read_cached_catalog(path: Path) -> Catalog:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InvalidCatalogError(f"Cached index is not valid JSON: {path}") from e
    return parse_catalog(data, source=str(path))


def _write_index(path: Path, data: Any) -> None:
    """Write via a temp file in the same directory so readers never see a partial index."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", dir=str(path.parent), prefix=".index-", delete=False
    ) as f:
        json.dump(data, f, indent=2)
        tmp = Path(f.name)
    try:
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise
