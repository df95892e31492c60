from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import BinaryIO

from .checksum import CHUNK_SIZE, new_hash, parse_checksum, verify_file
from .errors import CorruptDownloadError
from .transport import HttpClient, UrllibClient

logger = logging.getLogger(__name__)


def download_file(
    url: str,
    checksum: str,
    dest: Path,
    *,
    client: HttpClient | None = None,
    timeout: float = 10.0,
) -> Path:
    """
    Ensure `dest` holds the content of `url` matching `checksum`.

    If the file already exists and the checksum matches, no request is made.
    Otherwise the body is streamed to `dest` (mode 0755) while hashing it.
    On mismatch CorruptDownloadError is raised and the file is left in place
    for inspection; the next call will detect it and download again.
    """
    if verify_file(dest, checksum):
        logger.debug("File %s already exists", dest)
        return dest

    algorithm, expected = parse_checksum(checksum)
    h = new_hash(algorithm)

    if client is None:
        client = UrllibClient()

    logger.info("Downloading %s...", url)

    dest.parent.mkdir(parents=True, exist_ok=True)

    with client.open(url, timeout=timeout) as body, _open_executable(dest) as f:
        for chunk in iter(lambda: body.read(CHUNK_SIZE), b""):
            h.update(chunk)
            f.write(chunk)

    got = h.hexdigest()
    if got != expected.lower():
        raise CorruptDownloadError(dest, algorithm, expected, got)

    logger.debug("File was saved in %s", dest)
    return dest


def _open_executable(path: Path) -> BinaryIO:
    # Binaries are meant to be run straight from the cache.
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC | getattr(os, "O_BINARY", 0), 0o755)
    return os.fdopen(fd, "wb")
