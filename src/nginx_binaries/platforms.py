from __future__ import annotations

import platform
import sys

# Node-style spellings -> canonical (Alpine) spellings used in the catalog.
_ARCH_NAMES = {
    "arm": "armv7",
    "arm64": "aarch64",
    "x32": "x86",
    "x64": "x86_64",
}

# platform.machine() spellings -> Node-style spellings.
_MACHINE_ALIASES = {
    "amd64": "x64",
    "armv7l": "arm",
    "i386": "x32",
    "i686": "x32",
}


def normalize_arch(arch: str) -> str:
    """
    Normalize an architecture name to the spelling used in the catalog.

    Unknown names are returned unchanged.
    """
    return _ARCH_NAMES.get(arch, arch)


def host_os() -> str:
    """Host OS as `linux`, `darwin` or `win32`."""
    return sys.platform


def host_arch() -> str:
    machine = platform.machine().lower()
    return normalize_arch(_MACHINE_ALIASES.get(machine, machine))


def default_arch() -> str:
    """
    Architecture a query defaults to when none is given.

    macOS (darwin) on ARM can run x86_64 binaries, and those are the only
    darwin builds published, so darwin hosts always default to x86_64.
    """
    if host_os() == "darwin":
        return "x86_64"
    return host_arch()
