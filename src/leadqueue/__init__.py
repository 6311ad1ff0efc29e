"""
leadqueue - Offline-resilient lead form submissions

Forms hand payloads to a FormSubmissionClient. The client retries the
submission gateway a bounded number of times; if the device is offline
the payload is persisted and sent later, oldest first, once the
connection monitor sees the network come back.
"""

__version__ = "1.0.0"

from leadqueue.core.receipt import QueueStorageError, StopRule, emit_receipt
from leadqueue.offline import (
    ConnectionMonitor,
    FileSlotStore,
    ManualObserver,
    MemoryStore,
    OfflineQueue,
    QueuedSubmission,
    process_queued_submissions,
)
from leadqueue.client.submit import (
    FormSubmissionClient,
    ProgressEmitter,
    SubmissionProgress,
    SubmitOptions,
    SubmitResult,
)
from leadqueue.client.factory import build_client

__all__ = [
    "__version__",
    "emit_receipt",
    "StopRule",
    "QueueStorageError",
    "ConnectionMonitor",
    "FileSlotStore",
    "ManualObserver",
    "MemoryStore",
    "OfflineQueue",
    "QueuedSubmission",
    "process_queued_submissions",
    "FormSubmissionClient",
    "ProgressEmitter",
    "SubmissionProgress",
    "SubmitOptions",
    "SubmitResult",
    "build_client",
]
