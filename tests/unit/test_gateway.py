"""Unit tests for the save gateway."""

import asyncio
import json
import logging

import httpx
import pytest

from casemap.gateway import (
    MSG_NO_HOST,
    MSG_SAVE_SENT,
    MSG_SELECT_TESTER,
    SAVE_LABEL,
    SAVING_LABEL,
    HttpHostChannel,
    SaveGateway,
    SaveResult,
    build_envelope,
)
from casemap.status import DEFAULT_USER

STATUSES = {"TC-001": "✅", "TC-002": "🟡"}


class TestBuildEnvelope:
    """Tests for the saveData message."""

    def test_envelope_shape(self):
        envelope = build_envelope("v1.0.0", "alice", STATUSES)
        assert envelope == {
            "action": "saveData",
            "payload": {
                "version": "v1.0.0",
                "user": "alice",
                "content": {"TC-001": "✅", "TC-002": "🟡"},
                "message": "[Test] alice updated results for v1.0.0",
            },
        }

    def test_envelope_is_json_serializable(self):
        json.dumps(build_envelope("v1", "alice", STATUSES))


class TestSaveGateway:
    """Tests for SaveGateway.save."""

    @pytest.mark.asyncio
    async def test_default_user_rejected(self, channel, notifier):
        """Test saving without a tester is rejected with no host activity."""
        gateway = SaveGateway(channel, notifier, ack_delay=0)
        result = await gateway.save("v1", DEFAULT_USER, STATUSES)

        assert result is SaveResult.REJECTED
        assert channel.messages == []
        assert notifier.notifications == [(MSG_SELECT_TESTER, "error")]
        assert gateway.trigger.enabled

    @pytest.mark.asyncio
    async def test_sends_envelope_and_reports_success(self, channel, notifier):
        gateway = SaveGateway(channel, notifier, ack_delay=0)
        result = await gateway.save("v1", "alice", STATUSES)

        assert result is SaveResult.SENT
        assert channel.messages == [build_envelope("v1", "alice", STATUSES)]
        assert notifier.notifications == [(MSG_SAVE_SENT, "success")]
        assert gateway.trigger.enabled
        assert gateway.trigger.label == SAVE_LABEL

    @pytest.mark.asyncio
    async def test_trigger_busy_until_ack_delay(self, channel, notifier):
        """Test the trigger stays disabled until the optimistic delay passes."""
        gateway = SaveGateway(channel, notifier, ack_delay=0.05)
        task = asyncio.create_task(gateway.save("v1", "alice", STATUSES))
        await asyncio.sleep(0)

        assert not gateway.trigger.enabled
        assert gateway.trigger.busy
        assert gateway.trigger.label == SAVING_LABEL
        assert notifier.notifications == []

        assert await task is SaveResult.SENT
        assert gateway.trigger.enabled
        assert not gateway.trigger.busy

    @pytest.mark.asyncio
    async def test_second_save_while_busy_ignored(self, channel, notifier):
        """Test at most one save is in flight."""
        gateway = SaveGateway(channel, notifier, ack_delay=0.05)
        first = asyncio.create_task(gateway.save("v1", "alice", STATUSES))
        await asyncio.sleep(0)

        assert await gateway.save("v1", "alice", STATUSES) is SaveResult.BUSY
        assert await first is SaveResult.SENT
        assert len(channel.messages) == 1

    @pytest.mark.asyncio
    async def test_no_host_falls_back_locally(self, notifier):
        """Test a missing host is surfaced and the trigger restored at once."""
        gateway = SaveGateway(None, notifier, ack_delay=10)
        result = await gateway.save("v1", "alice", STATUSES)

        assert result is SaveResult.LOCAL_ONLY
        assert notifier.notifications == [(MSG_NO_HOST, "warning")]
        assert gateway.trigger.enabled
        assert gateway.trigger.label == SAVE_LABEL


class TestHttpHostChannel:
    """Tests for HttpHostChannel."""

    @pytest.mark.asyncio
    async def test_posts_wrapped_message(self):
        received = []

        def handler(request: httpx.Request) -> httpx.Response:
            received.append(json.loads(request.content))
            return httpx.Response(204)

        channel = HttpHostChannel("http://host/save", transport=httpx.MockTransport(handler))
        channel.post_message({"action": "saveData", "payload": {}})
        await channel.drain()

        assert received == [{"data": {"action": "saveData", "payload": {}}}]

    @pytest.mark.asyncio
    async def test_delivery_failure_is_not_raised(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        channel = HttpHostChannel("http://host/save", transport=httpx.MockTransport(handler))
        channel.post_message({"action": "saveData", "payload": {}})
        await channel.drain()

    @pytest.mark.asyncio
    async def test_invalid_url_is_logged_not_raised(self, caplog):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.InvalidURL("bad")

        channel = HttpHostChannel("http://host/save", transport=httpx.MockTransport(handler))
        with caplog.at_level(logging.WARNING, logger="casemap.gateway"):
            channel.post_message({"action": "saveData", "payload": {}})
            await channel.drain()

        assert "Host channel delivery failed" in caplog.text
