from __future__ import annotations

import logging

from .catalog import FORMAT_VERSION, Catalog, CatalogEntry
from .downloader import (
    NGINX,
    NJS,
    Downloader,
    DownloaderConfig,
    nginx_binary,
    njs_binary,
)
from .errors import (
    CorruptDownloadError,
    FetchError,
    IndexFormatMismatchError,
    InvalidCatalogError,
    InvalidChecksumFormatError,
    InvalidVersionRangeError,
    NetworkError,
    NginxBinariesError,
    NoMatchFoundError,
    UnexpectedResponseError,
)
from .query import Query

__version__ = "1.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "FORMAT_VERSION",
    "NGINX",
    "NJS",
    "Catalog",
    "CatalogEntry",
    "Downloader",
    "DownloaderConfig",
    "Query",
    "nginx_binary",
    "njs_binary",
    "NginxBinariesError",
    "FetchError",
    "NetworkError",
    "UnexpectedResponseError",
    "InvalidCatalogError",
    "IndexFormatMismatchError",
    "InvalidChecksumFormatError",
    "InvalidVersionRangeError",
    "CorruptDownloadError",
    "NoMatchFoundError",
]
