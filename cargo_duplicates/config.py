"""
Runtime configuration for the analyzer.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from . import __version__


logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_URL = "https://crates.io/api/v1/crates"
DEFAULT_TIMEOUT = 10.0
DEFAULT_MAX_WORKERS = 8

ENV_REGISTRY_URL = "CARGO_DUPLICATES_REGISTRY_URL"
ENV_TIMEOUT = "CARGO_DUPLICATES_TIMEOUT"
ENV_JOBS = "CARGO_DUPLICATES_JOBS"


@dataclass(frozen=True)
class AnalyzerConfig:
    """Settings shared by the analyzer, resolvers and reporters."""

    offline: bool = False
    registry_url: str = DEFAULT_REGISTRY_URL
    timeout: float = DEFAULT_TIMEOUT
    max_workers: int = DEFAULT_MAX_WORKERS
    use_newest_version: bool = True
    show_progress: bool = True
    user_agent: str = f"cargo-duplicates/{__version__}"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AnalyzerConfig":
        """Build a config from environment variables, ignoring bad values."""
        env = os.environ if environ is None else environ
        config = cls()

        registry_url = env.get(ENV_REGISTRY_URL)
        if registry_url:
            config = replace(config, registry_url=registry_url.rstrip("/"))

        timeout = env.get(ENV_TIMEOUT)
        if timeout:
            try:
                config = replace(config, timeout=float(timeout))
            except ValueError:
                logger.warning("Ignoring invalid %s=%r", ENV_TIMEOUT, timeout)

        jobs = env.get(ENV_JOBS)
        if jobs:
            try:
                config = replace(config, max_workers=max(1, int(jobs)))
            except ValueError:
                logger.warning("Ignoring invalid %s=%r", ENV_JOBS, jobs)

        return config

    def with_overrides(self, **overrides) -> "AnalyzerConfig":
        """Return a copy with every non-None override applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values)
