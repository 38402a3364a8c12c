"""Status values and the per-(version, user) status store."""

import logging
from collections import Counter
from enum import Enum
from typing import TYPE_CHECKING, Any

from .errors import ReadOnlySelectionError, StatusLoadError

if TYPE_CHECKING:
    from .client import ContentClient

logger = logging.getLogger(__name__)

# Sentinel user: no identified tester, never editable, never saved
DEFAULT_USER = "default"


class StatusValue(str, Enum):
    """Test case status, stored remotely as its glyph."""

    UNTESTED = "⚪️"
    PASS = "✅"
    FAIL = "❌"
    BLOCKED = "🟡"

    def next(self) -> "StatusValue":
        """Next status in the click cycle."""
        index = STATUS_CYCLE.index(self)
        return STATUS_CYCLE[(index + 1) % len(STATUS_CYCLE)]


STATUS_CYCLE: tuple[StatusValue, ...] = (
    StatusValue.UNTESTED,
    StatusValue.PASS,
    StatusValue.FAIL,
    StatusValue.BLOCKED,
)

StatusMap = dict[str, StatusValue]


def parse_status_map(raw: dict[str, Any]) -> StatusMap:
    """Convert a decoded status file into a StatusMap.

    Entries whose value is not a known glyph are dropped, which leaves them
    Untested.
    """
    statuses: StatusMap = {}
    for case_id, value in raw.items():
        try:
            statuses[str(case_id)] = StatusValue(value)
        except ValueError:
            logger.debug(f"Ignoring unknown status {value!r} for {case_id}")
    return statuses


class StatusStore:
    """Owns the StatusMap of the active (version, user) pair.

    The map is replaced wholesale on every selection change and mutated in
    place only by cycle().
    """

    def __init__(self, client: "ContentClient | None" = None):
        """Initialize StatusStore.

        Args:
            client: Content client used by fetch()/load(). Without a client
                every load yields an empty map.
        """
        self.client = client
        self._version: str | None = None
        self._user: str = DEFAULT_USER
        self._statuses: StatusMap = {}

    @property
    def version(self) -> str | None:
        """Version the current map belongs to."""
        return self._version

    @property
    def user(self) -> str:
        """User the current map belongs to."""
        return self._user

    @property
    def read_only(self) -> bool:
        """Whether mutation is forbidden for the current user."""
        return self._user == DEFAULT_USER

    async def fetch(self, version: str, user: str) -> StatusMap:
        """Fetch the status map for a pair without replacing the current one.

        Any failure yields an empty map. No request is made for the default
        user.
        """
        if user == DEFAULT_USER or self.client is None:
            return {}
        try:
            raw = await self.client.fetch_statuses(version, user)
        except StatusLoadError as e:
            logger.warning(f"Could not load statuses for {user}: {e.message}")
            return {}
        return parse_status_map(raw)

    def replace(self, version: str, user: str, statuses: StatusMap) -> None:
        """Replace the whole map and its (version, user) scope."""
        self._version = version
        self._user = user
        self._statuses = dict(statuses)

    async def load(self, version: str, user: str) -> StatusMap:
        """Fetch and install the status map for a pair."""
        statuses = await self.fetch(version, user)
        self.replace(version, user, statuses)
        return self.snapshot()

    def get(self, case_id: str) -> StatusValue:
        """Status of a case, Untested if absent."""
        return self._statuses.get(case_id, StatusValue.UNTESTED)

    def cycle(self, case_id: str) -> StatusValue:
        """Advance a case to its next status and return it.

        Raises:
            ReadOnlySelectionError: If no tester is selected
        """
        if self.read_only:
            raise ReadOnlySelectionError(data={"case_id": case_id})
        new_status = self.get(case_id).next()
        self._statuses[case_id] = new_status
        logger.debug(f"{case_id} -> {new_status.name}")
        return new_status

    def snapshot(self) -> StatusMap:
        """Copy of the current map."""
        return dict(self._statuses)

    def to_json(self) -> dict[str, str]:
        """Current map with glyph strings, as stored by the host."""
        return {case_id: status.value for case_id, status in self._statuses.items()}

    def counts(self, case_ids: list[str] | None = None) -> dict[StatusValue, int]:
        """Tally statuses.

        Args:
            case_ids: Cases to count (absent ones count as Untested). Defaults
                to the cases present in the map.
        """
        ids = case_ids if case_ids is not None else list(self._statuses)
        tally = Counter(self.get(case_id) for case_id in ids)
        return {status: tally.get(status, 0) for status in STATUS_CYCLE}
