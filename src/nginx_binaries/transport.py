from __future__ import annotations

import http.client
import json
import urllib.request
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass
from typing import Any, Protocol
from urllib.error import HTTPError, URLError

from .errors import FetchError, InvalidCatalogError, NetworkError, UnexpectedResponseError


class Body(Protocol):
    def read(self, size: int = -1) -> bytes: ...


class HttpClient(Protocol):
    def get_json(self, url: str, *, timeout: float) -> Any:
        """Fetch url and decode its body as JSON."""
        raise NotImplementedError

    def open(self, url: str, *, timeout: float) -> AbstractContextManager[Body]:
        """Open url for streaming; the request is issued when the context is entered."""
        raise NotImplementedError


class _ResponseBody:
    def __init__(self, resp: Any, url: str) -> None:
        self._resp = resp
        self._url = url

    def read(self, size: int = -1) -> bytes:
        try:
            return self._resp.read() if size < 0 else self._resp.read(size)
        except (OSError, http.client.HTTPException) as e:  # e.g. TimeoutError, IncompleteRead
            raise NetworkError(f"Failed to read response from {self._url}: {e}", url=self._url) from e


@dataclass(frozen=True, slots=True)
class UrllibClient:
    """
    Default HTTP client using stdlib urllib.

    Supports:
      - https://, http://
      - file:///... (local mirrors and offline tests)
    """

    def get_json(self, url: str, *, timeout: float) -> Any:
        with self.open(url, timeout=timeout) as body:
            raw = body.read()
        try:
            return json.loads(raw)
        except ValueError as e:
            raise InvalidCatalogError(f"Response from {url} is not valid JSON") from e

    @contextmanager
    def open(self, url: str, *, timeout: float) -> Iterator[Body]:
        try:
            resp = urllib.request.urlopen(url, timeout=timeout)
        except HTTPError as e:
            raise UnexpectedResponseError(url, e.code, str(e.reason)) from e
        except URLError as e:
            raise NetworkError(f"Failed to fetch {url}: {e.reason}", url=url) from e
        except (OSError, http.client.HTTPException) as e:
            raise NetworkError(f"Failed to fetch {url}: {e!r}", url=url) from e
        except ValueError as e:
            raise FetchError(f"Invalid URL: {url}", url=url) from e

        with resp:
            # file:// responses carry no status
            status = getattr(resp, "status", None)
            if status is not None and status != 200:
                raise UnexpectedResponseError(url, status, getattr(resp, "reason", ""))
            yield _ResponseBody(resp, url)
