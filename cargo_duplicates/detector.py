"""
Duplicate detection: find package names pinned at several versions.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Dict, List, Optional

from tqdm import tqdm

from .chains import trace_users
from .exceptions import VersionParseError
from .index import DependencyIndex
from .interfaces import LatestVersionResolver
from .models import AnalysisError, DuplicateOccurrence
from .resolvers import LocalMaximumResolver
from .version_utils import max_version, parse_semver


logger = logging.getLogger(__name__)


@dataclass
class Reference:
    """The version a package's other versions are compared against."""

    version: str
    source: str


@dataclass
class DetectionResult:
    duplicates: List[DuplicateOccurrence] = field(default_factory=list)
    errors: List[AnalysisError] = field(default_factory=list)
    fallbacks: List[str] = field(default_factory=list)


class DuplicateDetector:
    """Classify every non-reference version of a duplicated name."""

    def __init__(
        self,
        resolver: Optional[LatestVersionResolver] = None,
        max_workers: int = 8,
        show_progress: bool = False,
    ) -> None:
        self.resolver = resolver or LocalMaximumResolver()
        self.max_workers = max(1, max_workers)
        self.show_progress = show_progress

    def detect(self, index: DependencyIndex) -> DetectionResult:
        """Produce duplicate occurrences in sorted package-name order.

        Args:
            index: Dependency index built from the lock file

        Returns:
            DetectionResult with occurrences, per-name errors and the names
            whose registry lookup fell back to the local maximum
        """
        result = DetectionResult()

        local_max: Dict[str, str] = {}
        for name in index.duplicated_names():
            versions = [entry.version for entry in index.versions(name)]
            try:
                local_max[name] = max_version(versions)
            except VersionParseError as e:
                logger.error("Skipping %s: %s", name, e)
                result.errors.append(AnalysisError(name, str(e)))

        references = self.resolve_references(index, local_max, result)

        for name in sorted(references):
            reference = references[name]
            baseline = parse_semver(reference.version)
            for entry in index.versions(name):
                if parse_semver(entry.version) == baseline:
                    continue
                result.duplicates.append(DuplicateOccurrence(
                    package=name,
                    version=entry.version,
                    latest=reference.version,
                    latest_source=reference.source,
                    users=trace_users(index, entry),
                ))

        logger.info(
            "Found %d duplicate versions across %d packages",
            len(result.duplicates),
            len(references),
        )
        return result

    def resolve_references(
        self,
        index: DependencyIndex,
        local_max: Dict[str, str],
        result: DetectionResult,
    ) -> Dict[str, Reference]:
        """Ask the resolver for each name's reference version, falling back locally.

        Lookups run on a thread pool unless the resolver declares itself
        non-concurrent, in which case they run inline in sorted order. A
        KeyboardInterrupt cancels every lookup that has not started yet and
        is re-raised.
        """
        if not local_max:
            return {}
        if getattr(self.resolver, "concurrent", True) and self.max_workers > 1:
            return self._resolve_concurrently(index, local_max, result)
        return self._resolve_inline(index, local_max, result)

    def _observed(self, index: DependencyIndex, name: str) -> List[str]:
        return [entry.version for entry in index.versions(name)]

    def _progress(self, iterable, total: int):
        if self.show_progress:
            return tqdm(iterable, total=total, desc="Resolving latest versions", unit="crate")
        return iterable

    def _resolve_inline(
        self,
        index: DependencyIndex,
        local_max: Dict[str, str],
        result: DetectionResult,
    ) -> Dict[str, Reference]:
        references: Dict[str, Reference] = {}
        try:
            for name in self._progress(local_max, len(local_max)):
                lookup = partial(self.resolver.latest, name, self._observed(index, name))
                references[name] = self._reference(name, lookup, local_max[name], result)
        except KeyboardInterrupt:
            logger.warning("Interrupted, skipping %d pending lookups", len(local_max) - len(references) - 1)
            raise
        return references

    def _resolve_concurrently(
        self,
        index: DependencyIndex,
        local_max: Dict[str, str],
        result: DetectionResult,
    ) -> Dict[str, Reference]:
        references: Dict[str, Reference] = {}
        executor = ThreadPoolExecutor(max_workers=min(self.max_workers, len(local_max)))
        try:
            futures: Dict[Future, str] = {
                executor.submit(self.resolver.latest, name, self._observed(index, name)): name
                for name in local_max
            }
            for future in self._progress(as_completed(futures), len(futures)):
                name = futures[future]
                references[name] = self._reference(name, future.result, local_max[name], result)
        except BaseException as e:
            if isinstance(e, KeyboardInterrupt):
                logger.warning("Interrupted, cancelling pending registry lookups")
            executor.shutdown(wait=False, cancel_futures=True)
            raise
        executor.shutdown(wait=True)
        return references

    def _reference(
        self,
        name: str,
        lookup: Callable[[], str],
        fallback: str,
        result: DetectionResult,
    ) -> Reference:
        # Only ordinary errors fall back; interrupts and exits propagate.
        try:
            latest = lookup()
            parse_semver(latest)
        except Exception as e:
            logger.warning("Falling back to local maximum %s for %s: %s", fallback, name, e)
            result.fallbacks.append(name)
            result.errors.append(AnalysisError(name, f"latest version lookup failed: {e}"))
            return Reference(fallback, "local")
        return Reference(latest, self.resolver.source)
