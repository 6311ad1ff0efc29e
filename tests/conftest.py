"""Test configuration and fixtures.

MemoryStore-backed queues, a manual connectivity observer and a mocked
gateway keep every test in-process: no network, no home directory.
"""
import sys
from io import StringIO
from pathlib import Path
from unittest.mock import MagicMock

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from leadqueue.client.submit import FormSubmissionClient
from leadqueue.core.receipt import set_receipt_stream
from leadqueue.offline.queue import OfflineQueue
from leadqueue.offline.reconnect import ManualObserver
from leadqueue.offline.store import MemoryStore


@pytest.fixture(autouse=True)
def capture_receipts():
    """Collect receipts in a buffer instead of stdout."""
    stream = StringIO()
    set_receipt_stream(stream)
    yield stream
    set_receipt_stream(None)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def queue(store) -> OfflineQueue:
    return OfflineQueue(store)


@pytest.fixture
def observer() -> ManualObserver:
    """Online unless a test says otherwise."""
    return ManualObserver(online=True)


@pytest.fixture
def gateway() -> MagicMock:
    """Gateway that accepts everything until a test sets side_effect."""
    gw = MagicMock()
    gw.send.return_value = {"id": 1}
    return gw


@pytest.fixture
def sleeps() -> list:
    """Records retry waits instead of sleeping."""
    return []


@pytest.fixture
def client(gateway, queue, observer, sleeps) -> FormSubmissionClient:
    return FormSubmissionClient(
        gateway=gateway,
        queue=queue,
        observer=observer,
        sleep=sleeps.append,
    )


@pytest.fixture
def jane() -> dict:
    return {"name": "Jane", "email": "jane@example.com"}
