"""
Latest-version resolvers: crates.io lookup and local-maximum fallback.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Collection, Dict, Optional

import requests

from .config import AnalyzerConfig
from .exceptions import ResolverError
from .interfaces import LatestVersionResolver
from .version_utils import max_version


logger = logging.getLogger(__name__)


@dataclass
class ResolverCache:
    """Shared in-memory cache and HTTP session for registry lookups."""

    latest_cache: Dict[str, str] = field(default_factory=dict)
    session: requests.Session = field(default_factory=requests.Session)
    lock: threading.Lock = field(default_factory=threading.Lock)

    def get(self, name: str) -> Optional[str]:
        with self.lock:
            return self.latest_cache.get(name)

    def put(self, name: str, version: str) -> None:
        with self.lock:
            self.latest_cache[name] = version


class LocalMaximumResolver(LatestVersionResolver):
    """Offline resolver: the highest version already present in the lock file."""

    source = "local"
    concurrent = False

    def latest(self, name: str, observed_versions: Collection[str]) -> str:
        return max_version(observed_versions)


class CratesIoResolver(LatestVersionResolver):
    """Resolver that asks the crates.io API for the newest published version."""

    source = "registry"

    def __init__(
        self,
        config: Optional[AnalyzerConfig] = None,
        cache: Optional[ResolverCache] = None,
    ) -> None:
        self.config = config or AnalyzerConfig()
        self.cache = cache or ResolverCache()
        self.cache.session.headers.update({
            "Accept": "application/json",
            "User-Agent": self.config.user_agent,
        })

    def fetch_crate_metadata(self, name: str) -> Dict:
        url = f"{self.config.registry_url.rstrip('/')}/{name}"
        logger.debug("Fetching crate metadata for %s from %s", name, url)
        try:
            with self.cache.session.get(url, timeout=self.config.timeout) as response:
                response.raise_for_status()
                return response.json()
        except requests.RequestException as e:
            raise ResolverError(name, str(e)) from e
        except ValueError as e:
            raise ResolverError(name, f"invalid JSON response: {e}") from e

    def latest(self, name: str, observed_versions: Collection[str]) -> str:
        cached = self.cache.get(name)
        if cached is not None:
            logger.debug("Cache hit: latest %s", name)
            return cached

        metadata = self.fetch_crate_metadata(name)
        field_name = "newest_version" if self.config.use_newest_version else "max_version"
        crate = metadata.get("crate") if isinstance(metadata, dict) else None
        version = crate.get(field_name) if isinstance(crate, dict) else None
        if not isinstance(version, str) or not version:
            raise ResolverError(name, f"response has no crate.{field_name}")

        self.cache.put(name, version)
        return version

    def close(self) -> None:
        self.cache.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def create_resolver(config: AnalyzerConfig) -> LatestVersionResolver:
    """Pick the resolver matching the configured mode."""
    if config.offline:
        return LocalMaximumResolver()
    return CratesIoResolver(config)
