"""casemap - test plan mind map viewer with per-tester status tracking."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("casemap")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"  # Fallback for editable installs without metadata

__all__ = ["__version__"]
