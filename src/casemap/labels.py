"""Case identifier extraction and label decoration."""

import re

from .status import StatusValue

# Bracket-delimited case label, e.g. "[TC-001] Login succeeds"
CASE_ID_PATTERN = re.compile(r"\[([A-Z0-9-]+)\]")


def extract_case_id(canonical_text: str) -> str | None:
    """Return the case id from a node's canonical text, or None.

    Only canonical text may be passed here. A decorated label carries a
    status glyph prefix and must never be parsed back.
    """
    match = CASE_ID_PATTERN.search(canonical_text)
    if not match:
        return None
    return match.group(1)


def decorate(status: StatusValue, canonical_text: str) -> str:
    """Build the visible label for a case node."""
    return f"{status.value} {canonical_text}"
