"""
Exceptions raised while loading and analyzing lock files.
"""


class DuplicatesError(Exception):
    """Base exception for all cargo-duplicates errors."""


class LockfileNotFoundError(DuplicatesError):
    """Raised when the lock file path does not exist."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Lock file not found: {path}")


class LockfileParseError(DuplicatesError):
    """Raised when the lock file cannot be turned into package records."""


class VersionParseError(DuplicatesError, ValueError):
    """Raised when a version string is not valid semver."""

    def __init__(self, version: str, reason: str = "not a semantic version"):
        self.version = version
        super().__init__(f"Invalid version {version!r}: {reason}")


class ResolverError(DuplicatesError):
    """Raised when the latest version of a crate cannot be looked up."""

    def __init__(self, package: str, reason: str):
        self.package = package
        self.reason = reason
        super().__init__(f"Could not resolve latest version of {package}: {reason}")
