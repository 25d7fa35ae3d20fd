"""Tests for version reporting."""

from unittest.mock import patch

from covermark import version
from covermark.version import BuildInfo, get_version_string


def test_version_without_git():
    with patch.object(version, "get_build_info", return_value=BuildInfo("0.1.0", None, False)):
        assert get_version_string() == "0.1.0"


def test_version_with_short_commit():
    info = BuildInfo("0.1.0", "0123456789abcdef", True)
    with patch.object(version, "get_build_info", return_value=info):
        assert get_version_string() == "0.1.0 (0123456-dirty)"


def test_git_failure_is_not_fatal():
    with patch("subprocess.check_output", side_effect=FileNotFoundError):
        info = version.get_build_info()
    assert info.commit is None
    assert info.dirty is False
