"""
Semantic version parsing and comparison helpers.
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

import semver

from .exceptions import VersionParseError


def parse_semver(version: str) -> semver.Version:
    """Parse a semver string, raising VersionParseError when it is invalid."""
    try:
        return semver.Version.parse(version)
    except (TypeError, ValueError) as e:
        raise VersionParseError(str(version), str(e)) from e


def max_version(versions: Iterable[str]) -> str:
    """Return the highest version by semver precedence."""
    best: Optional[Tuple[semver.Version, str]] = None
    for text in versions:
        parsed = parse_semver(text)
        if best is None or parsed > best[0]:
            best = (parsed, text)
    if best is None:
        raise ValueError("max_version() requires at least one version")
    return best[1]
