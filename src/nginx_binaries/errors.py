from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .query import Query


class NginxBinariesError(Exception):
    """Base error for catalog lookup, caching and binary downloads."""


class InvalidChecksumFormatError(NginxBinariesError, ValueError):
    """Checksum is not in `<algorithm>:<hexdigest>` form, or the algorithm is unknown."""


class InvalidVersionRangeError(NginxBinariesError, ValueError):
    """Version range expression cannot be parsed."""


class FetchError(NginxBinariesError):
    """Fetching a remote resource failed."""

    def __init__(self, message: str, *, url: str) -> None:
        super().__init__(message)
        self.url = url


class UnexpectedResponseError(FetchError):
    """Server answered with a status other than 200."""

    def __init__(self, url: str, status: int | None, reason: str = "") -> None:
        super().__init__(f"Unexpected response for {url}: {status} {reason}".rstrip(), url=url)
        self.status = status
        self.reason = reason


class NetworkError(FetchError):
    """Connection-level failure: DNS, refused connection, timeout."""


class InvalidCatalogError(NginxBinariesError):
    """Catalog document is not valid JSON or does not have the expected shape."""


class IndexFormatMismatchError(NginxBinariesError):
    """Catalog declares a formatVersion this package does not understand."""

    def __init__(self, expected: int, actual: object) -> None:
        super().__init__(
            f"Index format version mismatch (expected {expected}, got {actual}), "
            "clean cache and update nginx-binaries package"
        )
        self.expected = expected
        self.actual = actual


class CorruptDownloadError(NginxBinariesError):
    """Downloaded file does not match the expected checksum."""

    def __init__(self, path: Path, algorithm: str, expected: str, actual: str) -> None:
        super().__init__(f"File {path.name} is corrupted, {algorithm} checksum doesn't match!")
        self.path = path
        self.algorithm = algorithm
        self.expected = expected
        self.actual = actual


class NoMatchFoundError(NginxBinariesError, LookupError):
    """No catalog entry satisfies the query."""

    def __init__(self, message: str, query: Query) -> None:
        super().__init__(message)
        self.query = query
