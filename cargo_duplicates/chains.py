"""
Usage chain tracing: explain why a package version ends up in the graph.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Set, Tuple

from .index import DependencyIndex
from .models import DuplicateUser, PackageRecord, UsageChain, VersionEntry


logger = logging.getLogger(__name__)


def _next_dependent(index: DependencyIndex, record: PackageRecord) -> Optional[PackageRecord]:
    """First dependent of ``record`` that is itself a resolved node."""
    for dependent in index.dependents(record.name, record.version):
        if dependent.key in index:
            return dependent
    return None


def trace_usage_chain(index: DependencyIndex, start: PackageRecord) -> UsageChain:
    """Walk dependent edges from ``start`` until a root is reached.

    When a package has several dependents the first one in declaration order
    is followed, so the result is one valid path, not necessarily the
    shortest. Revisiting a node stops the walk and flags the chain as a cycle.
    """
    labels: List[str] = [start.label]
    visited: Set[Tuple[str, str]] = {start.key}
    current = start

    while True:
        dependent = _next_dependent(index, current)
        if dependent is None:
            return UsageChain(tuple(labels))
        if dependent.key in visited:
            logger.info("Dependency cycle detected at %s", dependent.label)
            return UsageChain(tuple(labels), cycle=True)
        labels.append(dependent.label)
        visited.add(dependent.key)
        current = dependent


def trace_users(index: DependencyIndex, entry: VersionEntry) -> Tuple[DuplicateUser, ...]:
    """Usage chains for every dependent of a version entry."""
    return tuple(
        DuplicateUser(record=record, chain=trace_usage_chain(index, record))
        for record in entry.dependents
    )
