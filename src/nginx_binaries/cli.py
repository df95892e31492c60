from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from .downloader import DEFAULT_REPO_URL, NGINX, NJS, Downloader, DownloaderConfig
from .errors import NginxBinariesError
from .query import Query
from .util import format_bytes


def search_cmd(downloader: Downloader, query: Query, *, as_json: bool) -> int:
    try:
        entries = downloader.search(query)
    except NginxBinariesError as e:
        print(str(e))
        return 2

    if as_json:
        print(json.dumps([e.to_dict() for e in entries], indent=2, sort_keys=True))
        return 0

    for e in entries:
        print(
            f"{e.version}\t{e.variant or '-'}\t{e.os}\t{e.arch}\t"
            f"{format_bytes(e.size)}\t{e.filename}"
        )
    return 0


def download_cmd(downloader: Downloader, query: Query, *, dest: Path | None) -> int:
    try:
        path = downloader.download(query, dest)
    except NginxBinariesError as e:
        print(str(e))
        return 2

    print(str(path))
    return 0


def versions_cmd(downloader: Downloader, query: Query) -> int:
    try:
        values = downloader.versions(query)
    except NginxBinariesError as e:
        print(str(e))
        return 2

    for v in values:
        print(v)
    return 0


def variants_cmd(downloader: Downloader, query: Query) -> int:
    try:
        values = downloader.variants(query)
    except NginxBinariesError as e:
        print(str(e))
        return 2

    # The default variant is an empty string; show it as such.
    for v in values:
        print(v if v else '""')
    return 0


def cache_dir_cmd(downloader: Downloader) -> int:
    print(str(downloader.config.cache_dir))
    return 0


def _add_query_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--name",
        choices=[NGINX, NJS],
        default=NGINX,
        help="Binary to look up (default: nginx)",
    )
    p.add_argument("--version", dest="version_range", default=None, help="Version or range")
    p.add_argument("--variant", default=None, help="Build variant (default: the default build)")
    p.add_argument("--os", default=None, help="Target OS (default: host OS)")
    p.add_argument("--arch", default=None, help="Target CPU architecture (default: host)")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nginx-binaries",
        description="Download standalone nginx and njs binaries from a binary repository.",
    )
    parser.add_argument("--version", action="store_true", help="Print version")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--repo-url", default=DEFAULT_REPO_URL, help=f"Repository URL (default: {DEFAULT_REPO_URL})"
    )
    parser.add_argument("--cache-dir", type=Path, default=None, help="Cache directory")
    parser.add_argument(
        "--cache-max-age",
        type=float,
        default=8 * 60,
        help="Minutes the cached index stays fresh; 0 always refreshes (default: 480)",
    )
    parser.add_argument(
        "--timeout", type=float, default=10.0, help="Network timeout in seconds (default: 10)"
    )

    sub = parser.add_subparsers(dest="command")

    p_search = sub.add_parser("search", help="List binaries matching a query")
    _add_query_args(p_search)
    p_search.add_argument("--json", action="store_true", help="Print entries as JSON")

    p_download = sub.add_parser("download", help="Download the best matching binary")
    _add_query_args(p_download)
    p_download.add_argument("--dest", type=Path, default=None, help="Destination file path")

    p_versions = sub.add_parser("versions", help="List available versions")
    _add_query_args(p_versions)

    p_variants = sub.add_parser("variants", help="List available variants")
    _add_query_args(p_variants)

    sub.add_parser("cache-dir", help="Print the cache directory")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        from . import __version__

        print(f"nginx-binaries {__version__}")
        return 0

    if not args.command:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
    )

    config = DownloaderConfig(
        repo_url=args.repo_url,
        cache_max_age=args.cache_max_age,
        timeout=args.timeout,
    )
    if args.cache_dir is not None:
        config.cache_dir = args.cache_dir

    if args.command == "cache-dir":
        return cache_dir_cmd(Downloader(NGINX, config))

    downloader = Downloader(args.name, config)
    query = Query(
        version=args.version_range,
        variant=args.variant,
        os=args.os,
        arch=args.arch,
    )

    if args.command == "search":
        return search_cmd(downloader, query, as_json=args.json)
    if args.command == "download":
        return download_cmd(downloader, query, dest=args.dest)
    if args.command == "versions":
        return versions_cmd(downloader, query)
    if args.command == "variants":
        return variants_cmd(downloader, query)

    parser.error(f"unknown command: {args.command}")
    return 2
