"""
Cargo.lock reader.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Dict, List, Tuple, Union

from .exceptions import LockfileNotFoundError, LockfileParseError
from .models import Dependency, PackageRecord


logger = logging.getLogger(__name__)

DEFAULT_LOCKFILE = "Cargo.lock"


def _split_dependency(spec: str) -> Tuple[str, str]:
    """Split ``"name"``, ``"name version"`` or ``"name version (source)"``."""
    parts = spec.split()
    if not parts or len(parts) > 3:
        raise LockfileParseError(f"Malformed dependency entry: {spec!r}")
    name = parts[0]
    version = parts[1] if len(parts) > 1 else ""
    if version.startswith("("):
        raise LockfileParseError(f"Malformed dependency entry: {spec!r}")
    return name, version


def _resolve_bare_name(name: str, versions_by_name: Dict[str, List[str]], owner: str) -> str:
    # Cargo omits the version when only one package of that name exists.
    versions = versions_by_name.get(name, [])
    if len(versions) != 1:
        raise LockfileParseError(
            f"Dependency {name!r} of {owner} matches {len(versions)} packages; "
            "a version is required"
        )
    return versions[0]


def parse_lockfile(text: str) -> List[PackageRecord]:
    """Parse Cargo.lock contents into package records."""
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise LockfileParseError(f"Invalid TOML: {e}") from e

    packages = data.get("package")
    if not isinstance(packages, list):
        raise LockfileParseError("Lock file has no [[package]] entries")

    raw: List[Dict] = []
    versions_by_name: Dict[str, List[str]] = {}
    for position, package in enumerate(packages):
        if not isinstance(package, dict):
            raise LockfileParseError(f"Package entry #{position} is not a table")
        name = package.get("name")
        version = package.get("version")
        if not isinstance(name, str) or not name or not isinstance(version, str):
            raise LockfileParseError(f"Package entry #{position} needs a name and a version")
        raw.append(package)
        versions_by_name.setdefault(name, []).append(version)

    records = []
    for package in raw:
        owner = f"{package['name']} {package['version']}"
        dependencies = []
        deps = package.get("dependencies", [])
        if not isinstance(deps, list):
            raise LockfileParseError(f"Dependencies of {owner} must be an array")
        for spec in deps:
            if not isinstance(spec, str):
                raise LockfileParseError(f"Dependency entry of {owner} must be a string")
            dep_name, dep_version = _split_dependency(spec)
            if not dep_version:
                dep_version = _resolve_bare_name(dep_name, versions_by_name, owner)
            dependencies.append(Dependency(dep_name, dep_version))
        records.append(PackageRecord(
            name=package["name"],
            version=package["version"],
            dependencies=tuple(dependencies),
            source=package.get("source"),
        ))

    logger.info("Parsed %d packages from lock file", len(records))
    return records


def load_lockfile(path: Union[str, Path] = DEFAULT_LOCKFILE) -> List[PackageRecord]:
    """Read and parse a Cargo.lock file from disk."""
    path = Path(path)
    if not path.is_file():
        raise LockfileNotFoundError(path)
    logger.info("Loading lock file %s", path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise LockfileParseError(f"Could not read {path}: {e}") from e
    return parse_lockfile(text)
