from __future__ import annotations

import hashlib
from pathlib import Path

from .errors import InvalidChecksumFormatError

CHUNK_SIZE = 1024 * 1024


def parse_checksum(checksum: str) -> tuple[str, str]:
    """
    Split `<algorithm>:<hexdigest>` into (algorithm, hexdigest).

    Example:
      sha1:7336b675b26bd67fdda3db18c66fa7f64691e280
    """
    algorithm, _, value = checksum.partition(":")
    if not algorithm or not value:
        raise InvalidChecksumFormatError(f"Invalid checksum value: {checksum}")
    return algorithm, value


def new_hash(algorithm: str) -> hashlib._Hash:
    try:
        return hashlib.new(algorithm)
    except ValueError as e:
        raise InvalidChecksumFormatError(f"Unsupported checksum algorithm: {algorithm}") from e


def file_digest(path: Path, algorithm: str) -> str:
    h = new_hash(algorithm)
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            h.update(chunk)
    return h.hexdigest()


def verify_file(path: Path, checksum: str) -> bool:
    """
    Return True iff `path` is a regular file whose digest matches `checksum`.

    A missing path or a directory is not an error, just a mismatch.
    """
    algorithm, expected = parse_checksum(checksum)
    if not path.is_file():
        return False
    return file_digest(path, algorithm) == expected.lower()
