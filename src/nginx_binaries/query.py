from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from . import platforms
from .catalog import Catalog, CatalogEntry
from .version_range import parse_range, version_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Query:
    """
    Selection criteria for a binary.

    version: exact version or a version range (`1.18.0`, `1.18.x`, `^1.18.0`,
      `>=1.18`); None matches any version.
    variant: build variant (e.g. `debug`); defaults to "" (the default build).
    os: defaults to the host OS.
    arch: defaults to the host architecture (x86_64 on darwin); aliases such
      as `x64` or `arm64` are normalized before matching.
    """

    version: str | None = None
    variant: str | None = None
    os: str | None = None
    arch: str | None = None

    def with_defaults(self) -> Query:
        return replace(
            self,
            variant="" if self.variant is None else self.variant,
            os=platforms.host_os() if self.os is None else self.os,
            arch=platforms.default_arch() if self.arch is None else self.arch,
        )


def format_query(query: Query) -> str:
    """
    Human readable form, e.g. `{version: >=1.18, variant: , os: linux, arch: x86_64}`.

    Unset keys are omitted.
    """
    parts = [
        f"{key}: {value}"
        for key, value in (
            ("version", query.version),
            ("variant", query.variant),
            ("os", query.os),
            ("arch", query.arch),
        )
        if value is not None
    ]
    return "{" + ", ".join(parts) + "}"


def rank(catalog: Catalog, name: str, query: Query) -> list[CatalogEntry]:
    """
    Entries of `name` matching `query` (after defaulting), highest version first.

    Entries with equal versions keep their catalog order.
    """
    q = query.with_defaults()
    logger.debug("Looking for %s binary matching %s", name, format_query(q))

    version_range = parse_range(q.version) if q.version is not None else None
    arch = platforms.normalize_arch(q.arch or "")

    matches = [
        e
        for e in catalog.entries
        if e.name == name
        and (version_range is None or version_range.contains(e.version))
        and e.variant == q.variant
        and e.os == q.os
        and e.arch == arch
    ]
    return sorted(matches, key=lambda e: version_key(e.version), reverse=True)
