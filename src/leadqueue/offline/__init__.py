"""Offline mode: persisted queue, drain, and connectivity monitoring.

Submissions that cannot reach the gateway while the device is offline
are stored locally and delivered in order once connectivity returns.

Usage:
    from leadqueue.offline import OfflineQueue, FileSlotStore, process_queued_submissions

    queue = OfflineQueue(FileSlotStore("~/.leadqueue"))
    queue.enqueue("contact", {"name": "Jane", "email": "jane@example.com"})

    # Drain when connected
    process_queued_submissions(queue, gateway, observer)
"""
from leadqueue.offline.store import (
    SlotStore,
    MemoryStore,
    FileSlotStore,
)
from leadqueue.offline.queue import (
    OfflineQueue,
    QueuedSubmission,
)
from leadqueue.offline.sync import process_queued_submissions
from leadqueue.offline.reconnect import (
    ConnectivityObserver,
    ManualObserver,
    SocketProbeObserver,
    GatewayProbeObserver,
    ConnectionMonitor,
)

__all__ = [
    # Storage
    "SlotStore",
    "MemoryStore",
    "FileSlotStore",
    # Queue operations
    "OfflineQueue",
    "QueuedSubmission",
    # Drain
    "process_queued_submissions",
    # Connectivity
    "ConnectivityObserver",
    "ManualObserver",
    "SocketProbeObserver",
    "GatewayProbeObserver",
    "ConnectionMonitor",
]
