"""Tests for semver parsing."""

import pytest

from cargo_duplicates.exceptions import VersionParseError
from cargo_duplicates.version_utils import max_version, parse_semver


def test_semver_prerelease_sorting() -> None:
    versions = [
        "1.0.0",
        "1.0.0-rc.1",
        "1.0.0-beta.11",
        "1.0.0-beta.2",
        "1.0.0-beta",
        "1.0.0-alpha.beta",
        "1.0.0-alpha.1",
        "1.0.0-alpha",
    ]

    ordered = sorted(versions, key=parse_semver)

    assert ordered == [
        "1.0.0-alpha",
        "1.0.0-alpha.1",
        "1.0.0-alpha.beta",
        "1.0.0-beta",
        "1.0.0-beta.2",
        "1.0.0-beta.11",
        "1.0.0-rc.1",
        "1.0.0",
    ]


def test_numeric_components_compare_numerically() -> None:
    assert parse_semver("0.10.0") > parse_semver("0.9.9")
    assert parse_semver("2.0.0") > parse_semver("1.99.99")
    assert max_version(["0.9.0", "0.10.1", "0.10.0"]) == "0.10.1"


def test_release_outranks_its_prereleases() -> None:
    assert max_version(["1.10.0-rc.1", "1.10.0", "1.9.0"]) == "1.10.0"
    assert str(parse_semver("1.2.3-rc.1+sha.abc")) == "1.2.3-rc.1+sha.abc"


@pytest.mark.parametrize("version", ["1.0", "v1.2.3", "01.2.3", "1.2.3-01", "1.2.3-", "", "latest"])
def test_invalid_versions_raise(version: str) -> None:
    with pytest.raises(VersionParseError) as excinfo:
        parse_semver(version)

    assert excinfo.value.version == version


def test_non_string_version_raises() -> None:
    with pytest.raises(VersionParseError):
        parse_semver(None)


def test_max_version_reports_bad_input() -> None:
    with pytest.raises(VersionParseError) as excinfo:
        max_version(["1.0.0", "nightly"])

    assert excinfo.value.version == "nightly"


def test_build_metadata_is_ignored_for_precedence() -> None:
    assert parse_semver("1.0.0+a") == parse_semver("1.0.0+b")
    assert max_version(["1.0.0+build.1", "0.9.0"]) == "1.0.0+build.1"
