from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .cache import get_cache_dir
from .catalog import CatalogEntry
from .download import download_file
from .errors import NoMatchFoundError
from .index_cache import get_catalog
from .query import Query, format_query, rank
from .transport import HttpClient, UrllibClient

NGINX = "nginx"
NJS = "njs"

DEFAULT_REPO_URL = "https://jirutka.github.io/nginx-binaries"


@dataclass(slots=True)
class DownloaderConfig:
    """
    Settings shared by all operations of a Downloader.

    repo_url: URL of the repository with binaries. After changing it, delete
      the old index.json in cache_dir or set cache_max_age to 0; the cached
      index is not invalidated automatically.
    cache_dir: where index.json and downloaded binaries are stored.
    cache_max_age: minutes for which the cached index is considered fresh.
    timeout: network timeout in seconds.
    """

    repo_url: str = DEFAULT_REPO_URL
    cache_dir: Path = field(default_factory=get_cache_dir)
    cache_max_age: float = 8 * 60
    timeout: float = 10.0


class Downloader:
    """Looks up and downloads binaries of one artifact family (e.g. nginx)."""

    def __init__(
        self,
        name: str,
        config: DownloaderConfig | None = None,
        client: HttpClient | None = None,
    ) -> None:
        self.name = name
        self.config = config if config is not None else DownloaderConfig()
        self.client = client if client is not None else UrllibClient()

    def search(self, query: Query | None = None) -> list[CatalogEntry]:
        """Return metadata of available binaries matching the query, best first."""
        catalog = get_catalog(
            self.config.repo_url,
            self.config.cache_dir,
            timeout=self.config.timeout,
            max_age=self.config.cache_max_age,
            client=self.client,
        )
        return rank(catalog, self.name, query or Query())

    def download(self, query: Query | None = None, dest: Path | None = None) -> Path:
        """
        Download the best binary matching `query` and return its path.

        If several versions satisfy the version range, the highest one wins.
        The file goes to `dest`, or to `cache_dir/<filename>` by default. If it
        already exists with a matching checksum nothing is downloaded.

        Raises NoMatchFoundError if no binary matches.
        """
        query = query or Query()
        matches = self.search(query)
        if not matches:
            raise NoMatchFoundError(
                f"No {self.name} binary found for {format_query(query.with_defaults())}",
                query.with_defaults(),
            )

        entry = matches[0]
        if dest is None:
            dest = self.config.cache_dir / entry.filename

        return download_file(
            self.url_for(entry),
            entry.checksum,
            dest,
            client=self.client,
            timeout=self.config.timeout,
        )

    def variants(self, query: Query | None = None) -> list[str]:
        return _distinct(e.variant for e in self.search(query))

    def versions(self, query: Query | None = None) -> list[str]:
        return _distinct(e.version for e in self.search(query))

    def url_for(self, entry: CatalogEntry) -> str:
        return f"{self.config.repo_url.rstrip('/')}/{entry.filename}"


def nginx_binary(config: DownloaderConfig | None = None) -> Downloader:
    return Downloader(NGINX, config)


def njs_binary(config: DownloaderConfig | None = None) -> Downloader:
    return Downloader(NJS, config)


def _distinct(values: Iterable[str]) -> list[str]:
    # dict keeps first-seen order
    return list(dict.fromkeys(values))
