"""Save gateway: relays the status map to the host application.

The host channel is one-way. Once a message is dispatched the gateway waits
a fixed acknowledgment delay and reports success; no host response is read.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

import httpx
from rich.console import Console

from .status import DEFAULT_USER

logger = logging.getLogger(__name__)

DEFAULT_ACK_DELAY = 1.5
SAVE_LABEL = "Save changes"
SAVING_LABEL = "Saving..."

MSG_SELECT_TESTER = "Please select a tester first"
MSG_SAVE_SENT = "Save request sent"
MSG_NO_HOST = "Saving is only available inside the host app. Data was written to the log."


class SaveResult(str, Enum):
    """Outcome of a save request."""

    SENT = "sent"
    LOCAL_ONLY = "local_only"
    REJECTED = "rejected"
    BUSY = "busy"


@dataclass
class SaveTrigger:
    """State of the save control."""

    enabled: bool = True
    busy: bool = False
    visible: bool = False
    label: str = SAVE_LABEL

    def begin(self) -> None:
        self.enabled = False
        self.busy = True
        self.label = SAVING_LABEL

    def reset(self) -> None:
        self.enabled = True
        self.busy = False
        self.label = SAVE_LABEL


class HostChannel(Protocol):
    """One-way outbound message bridge to the host application."""

    def post_message(self, message: dict[str, Any]) -> None: ...


class Notifier(Protocol):
    """Toast/alert presentation."""

    def notify(self, message: str, level: str = "info") -> None: ...


class ConsoleNotifier:
    """Notifier printing to stderr with rich."""

    STYLES = {"success": "green", "info": "cyan", "warning": "yellow", "error": "red"}

    def __init__(self, console: Console | None = None):
        self.console = console or Console(stderr=True)

    def notify(self, message: str, level: str = "info") -> None:
        style = self.STYLES.get(level, "cyan")
        self.console.print(f"[{style}]{message}[/{style}]")


class HttpHostChannel:
    """Host channel posting messages to an HTTP endpoint.

    Each message is sent as {"data": message} from a background task.
    Delivery failures are logged and never raised to the caller.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport
        self._tasks: set[asyncio.Task] = set()

    def post_message(self, message: dict[str, Any]) -> None:
        task = asyncio.get_running_loop().create_task(self._send(message))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _send(self, message: dict[str, Any]) -> None:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.url, json={"data": message})
                response.raise_for_status()
            logger.info(f"Delivered {message.get('action')} to host")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Host channel delivery failed: {e}")

    async def drain(self) -> None:
        """Wait for in-flight messages to finish sending."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)


def build_envelope(version: str, user: str, content: dict[str, str]) -> dict[str, Any]:
    """Build the saveData message sent to the host.

    Args:
        content: Case id to status glyph, as produced by StatusStore.to_json()
    """
    return {
        "action": "saveData",
        "payload": {
            "version": version,
            "user": user,
            "content": dict(content),
            "message": f"[Test] {user} updated results for {version}",
        },
    }


class SaveGateway:
    """Serializes a status map and relays it to the host channel."""

    def __init__(
        self,
        channel: HostChannel | None,
        notifier: Notifier,
        trigger: SaveTrigger | None = None,
        ack_delay: float = DEFAULT_ACK_DELAY,
    ):
        """Initialize SaveGateway.

        Args:
            channel: Host channel, None when no host is present
            notifier: User-visible notification sink
            trigger: Save control state
            ack_delay: Optimistic acknowledgment delay (seconds)
        """
        self.channel = channel
        self.notifier = notifier
        self.trigger = trigger or SaveTrigger()
        self.ack_delay = ack_delay

    async def save(self, version: str, user: str, content: dict[str, str]) -> SaveResult:
        """Send the serialized status map to the host.

        Returns:
            SaveResult describing what happened
        """
        if user == DEFAULT_USER:
            self.notifier.notify(MSG_SELECT_TESTER, level="error")
            return SaveResult.REJECTED

        if not self.trigger.enabled:
            logger.debug("Save already in flight, ignoring request")
            return SaveResult.BUSY

        self.trigger.begin()
        envelope = build_envelope(version, user, content)

        if self.channel is None:
            logger.info(f"No host channel, save not persisted: {envelope}")
            self.notifier.notify(MSG_NO_HOST, level="warning")
            self.trigger.reset()
            return SaveResult.LOCAL_ONLY

        self.channel.post_message(envelope)
        try:
            await asyncio.sleep(self.ack_delay)
            self.notifier.notify(MSG_SAVE_SENT, level="success")
        finally:
            self.trigger.reset()
        return SaveResult.SENT
