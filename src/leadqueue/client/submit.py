"""Form submission with bounded retries and offline fallback.

submit() tries the gateway up to retry_count times, waiting a fixed
retry_delay between attempts (backoff_factor > 1 turns that into an
exponential delay capped at max_delay_ms). When every attempt fails:

- device offline: the payload goes to the offline queue and the result
  is a soft success (success=False, data={"queued": True, ...})
- device online: the result carries the last error; the caller offers
  a manual retry

Progress is published as SubmissionProgress snapshots to subscribers of
the client's ProgressEmitter and to the per-call on_progress callback.
The percentage follows the attempt number, not bytes on the wire.
"""
import time
from dataclasses import dataclass, field
from typing import Callable

from leadqueue.client.gateway import GatewayError
from leadqueue.core.constants import (
    MESSAGE_QUEUED,
    MESSAGE_SENT,
    SUBMIT_DEFAULT_BACKOFF_FACTOR,
    SUBMIT_DEFAULT_RETRY_COUNT,
    SUBMIT_DEFAULT_RETRY_DELAY_MS,
    SUBMIT_MAX_RETRY_DELAY_MS,
)
from leadqueue.core.receipt import emit_receipt, payload_hash
from leadqueue.offline.queue import OfflineQueue, QueuedSubmission
from leadqueue.offline.reconnect import ConnectionMonitor, ConnectivityObserver
from leadqueue.offline.sync import process_queued_submissions

STATUSES = ("idle", "submitting", "success", "error", "retrying")


@dataclass(frozen=True)
class SubmissionProgress:
    """Snapshot of one submission's progress for display."""
    status: str = "idle"
    progress: int = 0  # 0-100
    current_attempt: int = 0
    max_attempts: int = 0
    error: str | None = None
    queued: bool = False
    message: str | None = None

    def __post_init__(self):
        if self.status not in STATUSES:
            raise ValueError(f"Unknown status: {self.status}")


@dataclass
class SubmitOptions:
    """Retry policy for one submit() call."""
    retry_count: int = SUBMIT_DEFAULT_RETRY_COUNT
    retry_delay_ms: int = SUBMIT_DEFAULT_RETRY_DELAY_MS
    track_progress: bool = True
    backoff_factor: float = SUBMIT_DEFAULT_BACKOFF_FACTOR
    max_delay_ms: int = SUBMIT_MAX_RETRY_DELAY_MS

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after failed attempt number `attempt` (1-based)."""
        delay_ms = self.retry_delay_ms * (self.backoff_factor ** (attempt - 1))
        return min(delay_ms, self.max_delay_ms) / 1000


@dataclass
class SubmitResult:
    """Outcome of submit()."""
    success: bool
    data: dict | None = None
    error: str | None = None
    attempts: int = 0

    @property
    def queued(self) -> bool:
        return isinstance(self.data, dict) and self.data.get("queued") is True


class ProgressEmitter:
    """Fan SubmissionProgress snapshots out to subscribers."""

    def __init__(self):
        self._listeners: list[Callable[[SubmissionProgress], None]] = []

    def subscribe(self, listener: Callable[[SubmissionProgress], None]) -> Callable[[], None]:
        """Add a listener. Returns a function that removes it again."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, progress: SubmissionProgress):
        for listener in list(self._listeners):
            listener(progress)


@dataclass
class FormSubmissionClient:
    """Entry point for forms and the connection-status display.

    Owns no global state: gateway, queue and observer are injected, and
    sleep can be swapped out so retry waits cost nothing in tests.
    """
    gateway: object
    queue: OfflineQueue
    observer: ConnectivityObserver
    sleep: Callable[[float], None] = time.sleep
    progress: ProgressEmitter = field(default_factory=ProgressEmitter)
    monitor: ConnectionMonitor | None = None

    def submit(
        self,
        form_type: str,
        payload: dict,
        options: SubmitOptions | None = None,
        on_progress: Callable[[SubmissionProgress], None] | None = None,
    ) -> SubmitResult:
        """Deliver a form payload, retrying and falling back to the queue.

        Args:
            form_type: Non-empty form tag
            payload: Field values, already validated by the caller
            options: Retry policy (defaults: 3 attempts, 2000ms apart)
            on_progress: Called with each SubmissionProgress snapshot

        Returns:
            SubmitResult. Exhausted retries are reported here, not raised.

        Raises:
            QueueStorageError: The offline queue could not be written
        """
        if not isinstance(form_type, str) or not form_type.strip():
            raise ValueError("form_type must be a non-empty string")
        if not isinstance(payload, dict):
            raise TypeError("payload must be a dict")

        options = options or SubmitOptions()
        max_attempts = max(1, options.retry_count)
        form_hash = payload_hash(payload)

        def report(status: str, attempt: int, progress: int, **extra):
            if not options.track_progress:
                return
            snapshot = SubmissionProgress(
                status=status,
                progress=max(0, min(100, progress)),
                current_attempt=attempt,
                max_attempts=max_attempts,
                **extra,
            )
            self.progress.emit(snapshot)
            if on_progress:
                on_progress(snapshot)

        last_error = None
        for attempt in range(1, max_attempts + 1):
            report("submitting", attempt, int((attempt - 0.5) * 100 / max_attempts))
            emit_receipt("submission_attempt", {
                "form_type": form_type,
                "form_hash": form_hash,
                "attempt": attempt,
                "max_attempts": max_attempts,
            })

            try:
                data = self.gateway.send(form_type, payload)
            except GatewayError as e:
                last_error = str(e)
                if attempt < max_attempts:
                    report("retrying", attempt, int(attempt * 100 / max_attempts), error=last_error)
                    self.sleep(options.delay_for(attempt))
                continue

            report("success", attempt, 100, message=MESSAGE_SENT)
            emit_receipt("submission_success", {
                "form_type": form_type,
                "form_hash": form_hash,
                "attempts": attempt,
            })
            return SubmitResult(success=True, data=data, attempts=attempt)

        if not self.observer.is_online():
            entry = self.queue.enqueue(QueuedSubmission(form_type=form_type, payload=dict(payload)))
            report("success", max_attempts, 100, queued=True, message=MESSAGE_QUEUED)
            return SubmitResult(
                success=False,
                data={"queued": True, "submission_id": entry.id},
                attempts=max_attempts,
            )

        report("error", max_attempts, 100, error=last_error)
        emit_receipt("submission_failed", {
            "form_type": form_type,
            "form_hash": form_hash,
            "attempts": max_attempts,
            "error": last_error,
        })
        return SubmitResult(success=False, error=last_error, attempts=max_attempts)

    def get_submission_queue(self) -> tuple[QueuedSubmission, ...]:
        return self.queue.get_queue()

    def process_queued_submissions(self) -> dict:
        return process_queued_submissions(self.queue, self.gateway, self.observer)

    def clear_submission_queue(self) -> int | None:
        return self.queue.clear()

    def is_online(self) -> bool:
        return self.observer.is_online()

    def setup_connection_listeners(
        self,
        on_online: Callable[[], None] | None = None,
        on_offline: Callable[[], None] | None = None,
        on_queue_change: Callable[[int], None] | None = None,
    ) -> ConnectionMonitor:
        """Register listeners on the client's monitor.

        Every Offline -> Online transition drains the queue before
        on_online runs. A drain that stops on a failed delivery is
        re-run with backoff while the device stays online.
        """
        if self.monitor is None:
            self.monitor = ConnectionMonitor(self.observer, queue=self.queue)
        self.monitor.set_drain(self.process_queued_submissions)
        self.monitor.setup_connection_listeners(on_online, on_offline, on_queue_change)
        return self.monitor
