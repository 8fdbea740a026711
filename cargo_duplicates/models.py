"""
Core data models for lock file duplicate analysis.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Dependency:
    """Exact (name, version) reference declared by a package."""

    name: str
    version: str

    @property
    def key(self) -> Tuple[str, str]:
        return (self.name, self.version)


@dataclass(frozen=True)
class PackageRecord:
    """One resolved package from the lock file."""

    name: str
    version: str
    dependencies: Tuple[Dependency, ...] = ()
    source: Optional[str] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("package name must not be empty")
        # Accept lists from callers but store an immutable tuple.
        object.__setattr__(self, "dependencies", tuple(self.dependencies))

    @property
    def key(self) -> Tuple[str, str]:
        return (self.name, self.version)

    @property
    def label(self) -> str:
        return format_label(self.name, self.version)


def format_label(name: str, version: str) -> str:
    return f"{name} v{version}"


@dataclass
class VersionEntry:
    """A distinct version of a package and the records that depend on it."""

    version: str
    dependents: List[PackageRecord] = field(default_factory=list)

    def add_dependent(self, record: PackageRecord) -> None:
        if not any(existing is record for existing in self.dependents):
            self.dependents.append(record)


@dataclass(frozen=True)
class UnresolvedDependency:
    """A declared dependency with no matching package in the index."""

    package: Tuple[str, str]
    dependency: Dependency

    def to_dict(self) -> Dict:
        return {
            "package": self.package[0],
            "package_version": self.package[1],
            "name": self.dependency.name,
            "version": self.dependency.version,
        }


@dataclass(frozen=True)
class UsageChain:
    """Path of labels from a dependent up toward a root package."""

    labels: Tuple[str, ...]
    cycle: bool = False

    def __str__(self) -> str:
        text = " -> ".join(self.labels)
        if self.cycle:
            text += " -> (cycle)"
        return text


@dataclass(frozen=True)
class DuplicateUser:
    """A dependent of a duplicate version together with its usage chain."""

    record: PackageRecord
    chain: UsageChain

    def to_dict(self) -> Dict:
        return {
            "name": self.record.name,
            "version": self.record.version,
            "chain": list(self.chain.labels),
            "cycle": self.chain.cycle,
        }


@dataclass(frozen=True)
class DuplicateOccurrence:
    """A non-latest version of a package that coexists with other versions."""

    package: str
    version: str
    latest: str
    latest_source: str
    users: Tuple[DuplicateUser, ...] = ()

    def to_dict(self) -> Dict:
        return {
            "package": self.package,
            "version": self.version,
            "latest": self.latest,
            "latest_source": self.latest_source,
            "users": [user.to_dict() for user in self.users],
        }


@dataclass(frozen=True)
class AnalysisError:
    """Non-fatal problem scoped to a single package name."""

    package: str
    message: str

    def to_dict(self) -> Dict:
        return {"package": self.package, "message": self.message}


@dataclass
class AnalysisResult:
    """Everything the analyzer hands to the reporters."""

    duplicates: List[DuplicateOccurrence] = field(default_factory=list)
    unresolved: List[UnresolvedDependency] = field(default_factory=list)
    errors: List[AnalysisError] = field(default_factory=list)
    fallbacks: List[str] = field(default_factory=list)
    num_packages: int = 0

    @property
    def duplicated_packages(self) -> List[str]:
        seen: Dict[str, None] = {}
        for occurrence in self.duplicates:
            seen.setdefault(occurrence.package, None)
        return list(seen)

    def to_dict(self) -> Dict:
        return {
            "duplicates": [occurrence.to_dict() for occurrence in self.duplicates],
            "unresolved": [item.to_dict() for item in self.unresolved],
            "errors": [error.to_dict() for error in self.errors],
            "fallbacks": list(self.fallbacks),
            "num_packages": self.num_packages,
        }
