"""Tests for the lanmon version information."""

from datetime import datetime

from lanmon.version import LANMON_VERSION, Version


def test_version_methods():
    """Test Version class methods."""
    v = Version(major=1, minor=2, patch=3, date=datetime(2023, 1, 1))

    assert str(v) == "1.2.3"
    assert v.semver() == (1, 2, 3)
    assert v.date_string("%Y") == "2023"
    assert v.full_version() == "1.2.3 (2023-01-01)"


def test_lanmon_version_instance():
    """Test the package version instance."""
    import lanmon

    assert isinstance(LANMON_VERSION, Version)
    assert lanmon.__version__ == str(LANMON_VERSION)
