"""
Interfaces for pluggable version resolution and lock file reading.
"""

from __future__ import annotations

from pathlib import Path
from typing import Collection, List, Protocol, Union

from .models import PackageRecord


class LatestVersionResolver(Protocol):
    """Produce the version a package's duplicates are compared against."""

    source: str
    # False when lookups are cheap enough to run inline on the caller's thread.
    concurrent: bool = True

    def latest(self, name: str, observed_versions: Collection[str]) -> str:
        ...


class LockfileReader(Protocol):
    """Turn a lock file on disk into package records."""

    def __call__(self, path: Union[str, Path]) -> List[PackageRecord]:
        ...
