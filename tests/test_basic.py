"""Tests for the cargo_duplicates package."""

import pytest


def test_package_import():
    """Test that the package can be imported."""
    import cargo_duplicates
    assert cargo_duplicates.__version__ == "0.1.0"


def test_cli_import():
    """Test that CLI module can be imported."""
    from cargo_duplicates.cli import main
    assert callable(main)


def test_analyzer_import():
    """Test that analyzer module can be imported."""
    from cargo_duplicates.analyzer import DuplicateAnalyzer
    assert DuplicateAnalyzer is not None


def test_analyzer_initialization_offline():
    """Offline config selects the local-maximum resolver."""
    from cargo_duplicates.analyzer import DuplicateAnalyzer
    from cargo_duplicates.config import AnalyzerConfig
    from cargo_duplicates.resolvers import LocalMaximumResolver

    analyzer = DuplicateAnalyzer(AnalyzerConfig(offline=True))

    assert isinstance(analyzer.resolver, LocalMaximumResolver)
    assert analyzer.config.offline is True


def test_analyzer_initialization_online():
    """Online config selects the crates.io resolver."""
    from cargo_duplicates.analyzer import DuplicateAnalyzer
    from cargo_duplicates.resolvers import CratesIoResolver

    analyzer = DuplicateAnalyzer()

    assert isinstance(analyzer.resolver, CratesIoResolver)
    analyzer.resolver.close()


def test_config_from_env():
    from cargo_duplicates.config import AnalyzerConfig

    config = AnalyzerConfig.from_env({
        "CARGO_DUPLICATES_REGISTRY_URL": "http://mirror.local/api/v1/crates/",
        "CARGO_DUPLICATES_TIMEOUT": "2.5",
        "CARGO_DUPLICATES_JOBS": "not-a-number",
    })

    assert config.registry_url == "http://mirror.local/api/v1/crates"
    assert config.timeout == 2.5
    assert config.max_workers == 8


def test_config_overrides_skip_none():
    from cargo_duplicates.config import AnalyzerConfig

    config = AnalyzerConfig(timeout=3.0).with_overrides(timeout=None, offline=True)

    assert config.timeout == 3.0
    assert config.offline is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
