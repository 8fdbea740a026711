"""
cargo-duplicates

A tool for finding crates that a Cargo.lock pins at more than one version and
explaining which dependents pull the stale versions in.
"""

__version__ = "0.1.0"

from .cli import main

__all__ = ["main"]
