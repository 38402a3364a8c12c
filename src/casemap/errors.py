"""Error types for casemap.

Network and environment failures are converted to these at the boundary
where they occur. Callers decide whether a given error is fatal to a load
(document), silently recoverable (status file) or a build-time failure.
"""

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlparse

# Error codes
DOCUMENT_LOAD_ERROR = 1001
STATUS_LOAD_ERROR = 1002
READ_ONLY_SELECTION_ERROR = 1003
MERGE_ERROR = 1004


@dataclass
class CaseMapError(Exception):
    """Base error class for casemap errors."""

    code: int
    message: str
    data: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data:
            error["data"] = self.data
        return error


@dataclass
class DocumentLoadError(CaseMapError):
    """Canonical document could not be fetched or is empty."""

    code: int = DOCUMENT_LOAD_ERROR
    message: str = "Failed to load test case document"


@dataclass
class StatusLoadError(CaseMapError):
    """Status file could not be fetched or parsed."""

    code: int = STATUS_LOAD_ERROR
    message: str = "Failed to load status file"


@dataclass
class ReadOnlySelectionError(CaseMapError):
    """Status mutation attempted without an identified tester."""

    code: int = READ_ONLY_SELECTION_ERROR
    message: str = "Select a tester before changing statuses"


@dataclass
class MergeError(CaseMapError):
    """Fragment merge could not run."""

    code: int = MERGE_ERROR
    message: str = "Merge failed"


def map_http_error(status_code: int, url: str, error_cls: type[CaseMapError]) -> CaseMapError:
    """Map a non-success HTTP status to a casemap error.

    Args:
        status_code: HTTP status code
        url: URL that was requested
        error_cls: DocumentLoadError or StatusLoadError

    Returns:
        Instance of error_cls
    """
    return error_cls(
        message=f"Failed to fetch {url}. Status: {status_code}",
        data={"url": url, "http_status": status_code},
    )


def map_connection_error(
    error_message: str,
    url: str,
    error_cls: type[CaseMapError],
    is_timeout: bool = False,
) -> CaseMapError:
    """Map a connection or timeout failure to a casemap error.

    Args:
        error_message: Message from the underlying exception
        url: URL that was being accessed
        error_cls: DocumentLoadError or StatusLoadError
        is_timeout: Whether this was a timeout error

    Returns:
        Instance of error_cls
    """
    if is_timeout:
        return error_cls(
            message=f"Request timeout fetching {url}",
            data={"url": url, "original_error": error_message},
        )

    parsed = urlparse(url)
    host_port = f"{parsed.hostname}:{parsed.port}" if parsed.port else parsed.hostname
    return error_cls(
        message=f"Cannot reach content store at {host_port}",
        data={"url": url, "original_error": error_message},
    )
