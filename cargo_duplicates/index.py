"""
Name -> versions -> dependents index built from lock file records.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .models import PackageRecord, UnresolvedDependency, VersionEntry


logger = logging.getLogger(__name__)


class DependencyIndex:
    """Group package records by name and track who depends on each version.

    Entries keep insertion order: names in first-seen order, versions in the
    order they appear in the record list, dependents in declaration order.
    """

    def __init__(self) -> None:
        self._packages: Dict[str, List[VersionEntry]] = {}
        self._entries: Dict[Tuple[str, str], VersionEntry] = {}
        self.records: List[PackageRecord] = []
        self.unresolved: List[UnresolvedDependency] = []

    @classmethod
    def build(cls, records: Iterable[PackageRecord]) -> "DependencyIndex":
        """Build the index in two passes over the records.

        Args:
            records: Resolved package records from the lock file

        Returns:
            Populated DependencyIndex. Edges pointing at packages that are
            not in the record list are collected in ``unresolved``.
        """
        index = cls()
        index.records = list(records)

        for record in index.records:
            index._add_version(record.name, record.version)

        for record in index.records:
            for dep in record.dependencies:
                entry = index._entries.get(dep.key)
                if entry is None:
                    logger.warning(
                        "dependency %s not found (required by %s)", dep.name, record.label
                    )
                    index.unresolved.append(UnresolvedDependency(record.key, dep))
                    continue
                entry.add_dependent(record)

        logger.debug(
            "Indexed %d records: %d names, %d versions, %d unresolved edges",
            len(index.records),
            len(index._packages),
            len(index),
            len(index.unresolved),
        )
        return index

    def _add_version(self, name: str, version: str) -> VersionEntry:
        key = (name, version)
        entry = self._entries.get(key)
        if entry is None:
            entry = VersionEntry(version=version)
            self._entries[key] = entry
            self._packages.setdefault(name, []).append(entry)
        return entry

    def names(self) -> List[str]:
        return sorted(self._packages)

    def versions(self, name: str) -> List[VersionEntry]:
        return list(self._packages.get(name, []))

    def entry(self, name: str, version: str) -> Optional[VersionEntry]:
        return self._entries.get((name, version))

    def dependents(self, name: str, version: str) -> List[PackageRecord]:
        entry = self.entry(name, version)
        if entry is None:
            return []
        return list(entry.dependents)

    def duplicated_names(self) -> List[str]:
        """Sorted names that are present at two or more versions."""
        return [name for name in self.names() if len(self._packages[name]) > 1]

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
