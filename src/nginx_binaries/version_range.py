from __future__ import annotations

import re
from dataclasses import dataclass

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

from .errors import InvalidVersionRangeError

_OPERATORS = ("~=", "==", "!=", ">=", "<=", ">", "<", "=", "^", "~")
_HYPHEN_RE = re.compile(r"^(\S+)\s+-\s+(\S+)$")
_OP_SPACE_RE = re.compile(r"(~=|==|!=|>=|<=|[<>=~^])\s+")
_WILDCARDS = {"x", "X", "*"}


@dataclass(frozen=True, slots=True)
class VersionRange:
    """
    A parsed version range: any of `alternatives` must be satisfied.

    Accepts npm semver ranges (`1.18.x`, `^1.18.0`, `~1.18`, `1.2 - 1.4`,
    `>=1.18 <2 || 2.1.0`) as well as PEP 440 specifier sets (`>=1.18,<2`).
    """

    expression: str
    alternatives: tuple[SpecifierSet, ...]

    def contains(self, version: str) -> bool:
        try:
            v = Version(version)
        except InvalidVersion:
            return False
        # prereleases only match an alternative that names one
        return any(
            spec.contains(v, prereleases=bool(spec.prereleases)) for spec in self.alternatives
        )


def parse_range(expression: str) -> VersionRange:
    alternatives = tuple(
        _to_specifier_set(alt.strip(), expression) for alt in expression.split("||")
    )
    return VersionRange(expression=expression, alternatives=alternatives)


def satisfies(version: str, expression: str) -> bool:
    return parse_range(expression).contains(version)


def version_key(version: str) -> tuple[int, Version]:
    """Sort key; unparseable versions sort below every valid one."""
    try:
        return (1, Version(version))
    except InvalidVersion:
        return (0, Version("0"))


def _to_specifier_set(alt: str, expression: str) -> SpecifierSet:
    clauses: list[str] = []

    m = _HYPHEN_RE.match(alt)
    if m:
        clauses += _comparator(">=", m.group(1), expression)
        clauses += _comparator("<=", m.group(2), expression)
    else:
        tokens = alt.split(",") if "," in alt else _OP_SPACE_RE.sub(r"\1", alt).split()
        for token in tokens:
            token = token.strip()
            if not token:
                if "," in alt:
                    raise InvalidVersionRangeError(f"Invalid version range: {expression!r}")
                continue
            op, rest = _split_operator(token)
            clauses += _comparator(op, rest.strip(), expression)

    try:
        spec_set = SpecifierSet(",".join(clauses))
    except InvalidSpecifier as e:
        raise InvalidVersionRangeError(f"Invalid version range: {expression!r}") from e
    return SpecifierSet(
        ",".join(clauses), prereleases=any(_is_prerelease(s.version) for s in spec_set)
    )


def _is_prerelease(version: str) -> bool:
    try:
        return Version(version).is_prerelease
    except InvalidVersion:
        # wildcard clauses such as `!=1.18.*`
        return False


def _split_operator(token: str) -> tuple[str, str]:
    for op in _OPERATORS:
        if token.startswith(op):
            return op, token[len(op) :]
    return "", token


def _comparator(op: str, token: str, expression: str) -> list[str]:
    if not token:
        raise InvalidVersionRangeError(f"Invalid version range: {expression!r}")

    nums, suffix = _parse_partial(token, expression)
    n = len(nums)
    full = n >= 3
    exact = _join(nums) + suffix

    if n == 0:
        # `*`, `>=*`, ... match anything; `<*` and `>*` match nothing.
        return ["<0"] if op in ("<", ">") else []

    if op in ("", "=", "=="):
        if full:
            return [f"=={exact}"]
        return [f">={_join(nums)}", f"<{_join(_bump(nums, n - 1))}"]
    if op == "!=":
        return [f"!={exact}"] if full else [f"!={_join(nums)}.*"]
    if op == "~=":
        return [f"~={exact}"]
    if op == ">=":
        return [f">={exact}"]
    if op == "<":
        return [f"<{exact}"]
    if op == ">":
        return [f">{exact}"] if full else [f">={_join(_bump(nums, n - 1))}"]
    if op == "<=":
        return [f"<={exact}"] if full else [f"<{_join(_bump(nums, n - 1))}"]
    if op == "~":
        return [f">={exact}", f"<{_join(_bump(nums, min(n - 1, 1)))}"]
    if op == "^":
        idx = next((i for i, x in enumerate(nums[:3]) if x != 0), n - 1)
        return [f">={exact}", f"<{_join(_bump(nums, idx))}"]

    raise InvalidVersionRangeError(f"Invalid version range: {expression!r}")


def _parse_partial(token: str, expression: str) -> tuple[list[int], str]:
    """
    Parse `1`, `1.2`, `1.2.x`, `v1.2.3-rc.1` into numeric parts and a suffix.

    Parsing stops at the first wildcard part.
    """
    if token[0] in "vV":
        token = token[1:]

    core, suffix = token, ""
    m = re.search(r"[-+]", token)
    if m:
        core, suffix = token[: m.start()], token[m.start() :]

    nums: list[int] = []
    for part in core.split("."):
        if part in _WILDCARDS:
            break
        if not part.isdigit():
            raise InvalidVersionRangeError(f"Invalid version range: {expression!r}")
        nums.append(int(part))

    if suffix and len(nums) < 3:
        raise InvalidVersionRangeError(f"Invalid version range: {expression!r}")
    return nums, suffix


def _bump(nums: list[int], idx: int) -> list[int]:
    return nums[:idx] + [nums[idx] + 1]


def _join(nums: list[int]) -> str:
    return ".".join(str(x) for x in nums)
