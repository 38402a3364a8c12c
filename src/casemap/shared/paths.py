"""Path management for casemap.

Manages the ~/.casemap/ directory and the on-disk layout of test cases.
"""

from pathlib import Path

# Base directory for per-user casemap data
CASEMAP_DIR = Path.home() / ".casemap"

# CLI config file
CONFIG_FILE = CASEMAP_DIR / "config.yaml"

# Canonical merged document inside each version directory
INDEX_FILE_NAME = "_index.md"


def version_dir(cases_dir: str | Path, version: str) -> Path:
    """Directory holding the markdown fragments of one version."""
    return Path(cases_dir) / version


def index_path(cases_dir: str | Path, version: str) -> Path:
    """Canonical document path for a version."""
    return version_dir(cases_dir, version) / INDEX_FILE_NAME
