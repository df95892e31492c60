from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .errors import IndexFormatMismatchError, InvalidCatalogError

# Keep in sync with the repository index generator.
FORMAT_VERSION = 2


_REQUIRED_STR = ("name", "version", "variant", "os", "arch", "filename", "date", "checksum")


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """
    One published binary build.

    `filename` is unique within the catalog; joined with the repository URL
    it gives the download URL. `checksum` is `<algorithm>:<hexdigest>`.
    """

    name: str
    version: str
    # Empty string is the default variant.
    variant: str
    os: str
    arch: str
    filename: str
    published_at: datetime
    size: int
    checksum: str
    bundled_libs: dict[str, str] = field(default_factory=dict, hash=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CatalogEntry:
        return cls(
            name=data["name"],
            version=data["version"],
            variant=data["variant"],
            os=data["os"],
            arch=data["arch"],
            filename=data["filename"],
            published_at=_parse_date(data["date"]),
            size=data["size"],
            checksum=data["checksum"],
            bundled_libs=dict(data.get("bundledLibs") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        """Index document form (camelCase keys, ISO-8601 date)."""
        return {
            "name": self.name,
            "version": self.version,
            "variant": self.variant,
            "os": self.os,
            "arch": self.arch,
            "filename": self.filename,
            "date": self.published_at.isoformat().replace("+00:00", "Z"),
            "size": self.size,
            "checksum": self.checksum,
            "bundledLibs": dict(self.bundled_libs),
        }


@dataclass(frozen=True, slots=True)
class Catalog:
    format_version: int
    entries: tuple[CatalogEntry, ...] = ()


def parse_catalog(data: Any, source: str = "index") -> Catalog:
    """
    Build a Catalog from a decoded index document.

    The format version is checked first so an index from a newer (or older)
    generator fails with IndexFormatMismatchError rather than a shape error.
    """
    if not isinstance(data, dict):
        raise InvalidCatalogError(f"Index must be a JSON object: {source}")

    if data.get("formatVersion") != FORMAT_VERSION:
        raise IndexFormatMismatchError(FORMAT_VERSION, data.get("formatVersion"))

    contents = data.get("contents")
    if not isinstance(contents, list):
        raise InvalidCatalogError(f"Index 'contents' must be a list: {source}")

    for i, entry in enumerate(contents):
        _validate_entry_dict(entry, i, source)

    return Catalog(
        format_version=FORMAT_VERSION,
        entries=tuple(CatalogEntry.from_dict(e) for e in contents),
    )


def _validate_entry_dict(entry: Any, i: int, source: str) -> None:
    if not isinstance(entry, dict):
        raise InvalidCatalogError(f"Index contents[{i}] must be an object: {source}")

    for k in _REQUIRED_STR:
        if not isinstance(entry.get(k), str):
            raise InvalidCatalogError(f"Index contents[{i}] missing string '{k}': {source}")

    if not entry["checksum"]:
        raise InvalidCatalogError(f"Index contents[{i}] has empty 'checksum': {source}")

    size = entry.get("size")
    if not isinstance(size, int) or isinstance(size, bool) or size < 0:
        raise InvalidCatalogError(
            f"Index contents[{i}] 'size' must be a non-negative integer: {source}"
        )

    libs = entry.get("bundledLibs", {})
    if libs is not None and not isinstance(libs, dict):
        raise InvalidCatalogError(f"Index contents[{i}] 'bundledLibs' must be an object: {source}")

    try:
        _parse_date(entry["date"])
    except ValueError as e:
        raise InvalidCatalogError(f"Index contents[{i}] has invalid 'date': {source}") from e


def _parse_date(value: str) -> datetime:
    # fromisoformat() only accepts a trailing "Z" since Python 3.11
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)
