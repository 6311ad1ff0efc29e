"""Tests for the leadq command line.

The client fixture is injected through ctx.obj so commands never touch
the network or the home directory.
"""
import json

import pytest
from click.testing import CliRunner

from leadqueue.cli.main import cli
from leadqueue.client.gateway import GatewayRejected, GatewayUnreachable
from leadqueue.client.submit import FormSubmissionClient
from leadqueue.core.constants import QUEUE_SLOT
from leadqueue.offline.queue import OfflineQueue
from leadqueue.offline.store import FileSlotStore


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner, client, *args, input=None):
    return runner.invoke(cli, list(args), obj={"client": client}, input=input)


class TestSubmitCommand:
    """leadq submit."""

    def test_submit_sent(self, runner, client, gateway):
        result = invoke(runner, client, "submit", "free-class",
                        "-f", "name=Jane", "-f", "email=jane@example.com")

        assert result.exit_code == 0, result.output
        assert "Submit: SENT" in result.output
        gateway.send.assert_called_once_with("free-class", {"name": "Jane", "email": "jane@example.com"})

    def test_submit_queued_when_offline(self, runner, client, gateway, observer, queue):
        """Test offline submission is saved with a reassuring message."""
        observer.set_online(False)
        gateway.send.side_effect = GatewayUnreachable("down")

        result = invoke(runner, client, "submit", "free-class", "--retry-delay", "0",
                        "-f", "name=Jane", "-f", "email=jane@example.com")

        assert result.exit_code == 0, result.output
        assert "saved" in result.output
        assert "1 form queued" in result.output
        assert queue.size() == 1

    def test_submit_failed_online(self, runner, client, gateway):
        gateway.send.side_effect = GatewayRejected("HTTP 500")

        result = invoke(runner, client, "submit", "contact", "--retry-count", "2",
                        "-f", "name=A", "-f", "email=a@b.co", "-f", "message=hi")

        assert result.exit_code == 1
        assert gateway.send.call_count == 2
        assert "HTTP 500" in result.output

    def test_submit_invalid_payload(self, runner, client, gateway):
        """Test missing fields are caught before anything is sent."""
        result = invoke(runner, client, "submit", "free-class", "-f", "name=Jane")

        assert result.exit_code == 2
        assert "Email is required" in result.output
        gateway.send.assert_not_called()

    def test_submit_no_validate(self, runner, client, gateway):
        result = invoke(runner, client, "submit", "free-class", "--no-validate", "-f", "name=Jane")
        assert result.exit_code == 0, result.output

    def test_submit_json_payload(self, runner, client, gateway):
        payload = {"name": "Jane", "email": "jane@example.com", "age": 30}

        result = invoke(runner, client, "submit", "free-class", "--json", "-", input=json.dumps(payload))

        assert result.exit_code == 0, result.output
        gateway.send.assert_called_once_with("free-class", payload)

    def test_submit_bad_field(self, runner, client):
        result = invoke(runner, client, "submit", "free-class", "-f", "oops")
        assert result.exit_code == 2


class TestOfflineCommands:
    """leadq offline ..."""

    def test_status(self, runner, client, queue, jane):
        queue.enqueue("free-class", jane)
        queue.enqueue("contact", jane)

        result = invoke(runner, client, "offline", "status")

        data = json.loads(result.output)
        assert data["pending_count"] == 2
        assert data["badge"] == "2 forms queued"
        assert data["status"] == "online"

    def test_queue_listing(self, runner, client, queue, jane):
        queue.enqueue("free-class", jane)

        result = invoke(runner, client, "offline", "queue")

        assert result.exit_code == 0
        assert "free-class" in result.output
        assert "jane@example.com" not in result.output

    def test_queue_empty(self, runner, client):
        result = invoke(runner, client, "offline", "queue")
        assert "Queue is empty" in result.output

    def test_drain(self, runner, client, gateway, queue, jane):
        queue.enqueue("free-class", jane)

        result = invoke(runner, client, "offline", "drain")

        assert result.exit_code == 0, result.output
        assert "Delivered 1" in result.output
        assert queue.size() == 0

    def test_drain_offline(self, runner, client, observer, queue, jane):
        queue.enqueue("free-class", jane)
        observer.set_online(False)

        result = invoke(runner, client, "offline", "drain")

        assert result.exit_code == 1
        assert queue.size() == 1

    def test_clear_confirm(self, runner, client, queue, jane):
        queue.enqueue("free-class", jane)

        declined = invoke(runner, client, "offline", "clear", input="n\n")
        assert queue.size() == 1

        accepted = invoke(runner, client, "offline", "clear", input="y\n")
        assert accepted.exit_code == 0, accepted.output
        assert declined.exit_code in (0, 1)
        assert queue.size() == 0

    def test_clear_corrupt_queue(self, runner, client, store):
        store.write(QUEUE_SLOT, "garbage")

        result = invoke(runner, client, "offline", "clear", "--yes")

        assert result.exit_code == 0, result.output
        assert store.read(QUEUE_SLOT) is None

    def test_undecodable_queue_file(self, runner, tmp_path, gateway, observer):
        """Test a queue file of non-UTF-8 bytes fails status cleanly and can be cleared."""
        (tmp_path / f"{QUEUE_SLOT}.json").write_bytes(b"\xff\xfe[garbage")
        client = FormSubmissionClient(
            gateway=gateway, queue=OfflineQueue(FileSlotStore(tmp_path)), observer=observer,
        )

        status = invoke(runner, client, "offline", "status")
        assert status.exit_code == 3
        assert "Status check failed" in status.output

        cleared = invoke(runner, client, "offline", "clear", "--yes")
        assert cleared.exit_code == 0, cleared.output
        assert not (tmp_path / f"{QUEUE_SLOT}.json").exists()

    def test_connected(self, runner, client, observer):
        observer.set_online(False)

        result = invoke(runner, client, "offline", "connected")

        assert json.loads(result.output) == {"connected": False, "status": "offline"}
