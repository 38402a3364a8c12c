"""Unit tests for casemap.shared.paths module."""

from pathlib import Path

import pytest

from casemap.shared.paths import CASEMAP_DIR, CONFIG_FILE, index_path, version_dir


@pytest.mark.cli_unit
class TestPaths:
    """Tests for path constants and functions."""

    def test_casemap_dir_is_in_home(self):
        assert CASEMAP_DIR == Path.home() / ".casemap"

    def test_config_file_location(self):
        assert CONFIG_FILE == CASEMAP_DIR / "config.yaml"

    def test_version_dir(self, tmp_path):
        assert version_dir(tmp_path, "v1") == tmp_path / "v1"

    def test_index_path_accepts_str(self):
        assert index_path("cases", "v1") == Path("cases") / "v1" / "_index.md"
