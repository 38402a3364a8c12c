"""Build-time merge of per-module markdown fragments.

Each version directory holds one markdown file per module. The merge
concatenates them, in filename order, into the canonical _index.md that the
viewer fetches.
"""

import logging
import os
import stat
import tempfile
from pathlib import Path

from .errors import MergeError
from .shared.paths import INDEX_FILE_NAME, index_path, version_dir

logger = logging.getLogger(__name__)

FRAGMENT_SEPARATOR = "\n\n---\n\n"


def _output_mode(output: Path) -> int:
    """Permissions for the canonical document: keep an existing file's, else 0o666 minus umask."""
    if output.exists():
        return stat.S_IMODE(output.stat().st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def list_fragments(directory: Path) -> list[Path]:
    """Markdown fragments of a version directory, sorted by filename."""
    return sorted(
        (p for p in directory.iterdir() if p.suffix == ".md" and p.name != INDEX_FILE_NAME),
        key=lambda p: p.name,
    )


def render_document(version: str, fragments: list[Path]) -> str:
    """Concatenate fragments under a version heading."""
    parts = [f"# {version} Test Cases\n\n"]
    for fragment in fragments:
        parts.append(fragment.read_text(encoding="utf-8") + FRAGMENT_SEPARATOR)
    return "".join(parts)


def merge_fragments(cases_dir: str | Path, version: str) -> Path:
    """Write the canonical document for a version.

    Args:
        cases_dir: Root directory containing one sub-directory per version
        version: Version identifier (e.g., v1.0.0)

    Returns:
        Path of the written canonical document

    Raises:
        MergeError: If the version directory does not exist
    """
    directory = version_dir(cases_dir, version)
    if not directory.is_dir():
        raise MergeError(
            message=f"Directory not found for version {version}",
            data={"path": str(directory)},
        )

    fragments = list_fragments(directory)
    logger.info(f"Merging files for version {version}: {[f.name for f in fragments]}")
    content = render_document(version, fragments)

    output = index_path(cases_dir, version)
    fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".index-", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.chmod(tmp_name, _output_mode(output))
        os.replace(tmp_name, output)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info(f"Successfully created {output}")
    return output
