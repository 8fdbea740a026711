"""
Core analyzer tying the index, detector and chain tracer together.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from .config import AnalyzerConfig
from .detector import DuplicateDetector
from .index import DependencyIndex
from .interfaces import LatestVersionResolver, LockfileReader
from .lockfile import load_lockfile
from .models import AnalysisResult, PackageRecord
from .resolvers import create_resolver


logger = logging.getLogger(__name__)


class DuplicateAnalyzer:
    """Report packages that are pinned at more than one version."""

    def __init__(
        self,
        config: Optional[AnalyzerConfig] = None,
        resolver: Optional[LatestVersionResolver] = None,
        reader: LockfileReader = load_lockfile,
    ):
        """Initialize the analyzer.

        Args:
            config: Analyzer settings; defaults to AnalyzerConfig()
            resolver: Latest-version strategy; chosen from config.offline when omitted
            reader: Callable loading package records from a lock file path
        """
        self.config = config or AnalyzerConfig()
        self.resolver = resolver or create_resolver(self.config)
        self.reader = reader

    def build_index(self, records: Iterable[PackageRecord]) -> DependencyIndex:
        return DependencyIndex.build(records)

    def analyze(self, records: Iterable[PackageRecord]) -> AnalysisResult:
        """Run the full analysis on already parsed records.

        Args:
            records: Package records from a lock file reader

        Returns:
            AnalysisResult with duplicates (sorted by name), unresolved
            edges and per-package diagnostics
        """
        index = self.build_index(records)
        detector = DuplicateDetector(
            resolver=self.resolver,
            max_workers=self.config.max_workers,
            show_progress=self.config.show_progress,
        )
        detection = detector.detect(index)

        result = AnalysisResult(
            duplicates=detection.duplicates,
            unresolved=list(index.unresolved),
            errors=detection.errors,
            fallbacks=detection.fallbacks,
            num_packages=len(index.records),
        )
        logger.info(
            "Analyzed %d packages: %d duplicates, %d unresolved edges, %d errors",
            result.num_packages,
            len(result.duplicates),
            len(result.unresolved),
            len(result.errors),
        )
        return result

    def analyze_lockfile(self, path: Union[str, Path]) -> AnalysisResult:
        """Load a lock file and analyze it."""
        records = self.reader(path)
        return self.analyze(records)
