"""Shared modules for casemap.

Paths and logging used by the CLI, the content client and the session.
"""

from .logging import configure_logging, get_logger, verbosity_to_level
from .paths import CASEMAP_DIR, CONFIG_FILE, INDEX_FILE_NAME, index_path, version_dir

__all__ = [
    # Paths
    "CASEMAP_DIR",
    "CONFIG_FILE",
    "INDEX_FILE_NAME",
    "index_path",
    "version_dir",
    # Logging
    "configure_logging",
    "get_logger",
    "verbosity_to_level",
]
