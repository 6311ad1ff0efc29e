"""Connectivity observation and reconnection handling.

Observers answer one question, is_online(). ConnectionMonitor samples an
observer, tracks the Online/Offline state machine and calls registered
listeners on every transition. There is no debounce: a flapping link
fires a listener per flap. Drains triggered that way are safe to repeat
because an entry is only removed after the gateway accepts it.

The monitor also watches the queue slot's version so a queue changed by
another process sharing the storage directory shows up as a
queue-change callback.

A drain registered with set_drain() runs on every Offline -> Online
transition. When it stops on a failed delivery with entries left, the
monitor runs it again after QUEUE_RETRY_DELAY_MS * factor**failures
(capped at QUEUE_MAX_RETRY_DELAY_MS) for as long as the device stays
online.
"""
import socket
import threading
import time
from typing import Callable

from leadqueue.core.constants import (
    MONITOR_INTERVAL_SECONDS,
    PROBE_TIMEOUT_SECONDS,
    QUEUE_MAX_RETRY_DELAY_MS,
    QUEUE_RETRY_BACKOFF_FACTOR,
    QUEUE_RETRY_DELAY_MS,
)
from leadqueue.core.receipt import emit_receipt


class ConnectivityObserver:
    """Interface: report whether the gateway's network is reachable."""

    def is_online(self) -> bool:
        raise NotImplementedError


class ManualObserver(ConnectivityObserver):
    """Connectivity state set explicitly (CLI --offline flag, tests)."""

    def __init__(self, online: bool = True):
        self._online = online

    def is_online(self) -> bool:
        return self._online

    def set_online(self, online: bool):
        self._online = online


class SocketProbeObserver(ConnectivityObserver):
    """Online when a TCP connection to host:port succeeds."""

    def __init__(self, host: str, port: int, timeout: float = PROBE_TIMEOUT_SECONDS):
        self.host = host
        self.port = port
        self.timeout = timeout

    def is_online(self) -> bool:
        try:
            with socket.create_connection((self.host, self.port), timeout=self.timeout):
                return True
        except OSError:
            return False


class GatewayProbeObserver(ConnectivityObserver):
    """Online when the gateway's health endpoint answers."""

    def __init__(self, gateway):
        self.gateway = gateway

    def is_online(self) -> bool:
        return self.gateway.ping()


class ConnectionMonitor:
    """Bridges connectivity transitions and queue changes to callbacks."""

    def __init__(
        self,
        observer: ConnectivityObserver,
        queue=None,
        interval_seconds: float = MONITOR_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        retry_delay_ms: int = QUEUE_RETRY_DELAY_MS,
        backoff_factor: float = QUEUE_RETRY_BACKOFF_FACTOR,
        max_delay_ms: int = QUEUE_MAX_RETRY_DELAY_MS,
    ):
        self.observer = observer
        self.queue = queue
        self.interval_seconds = interval_seconds
        self.clock = clock
        self.retry_delay_ms = retry_delay_ms
        self.backoff_factor = backoff_factor
        self.max_delay_ms = max_delay_ms
        self.error: Exception | None = None
        self._drain: Callable[[], dict] | None = None
        self._drain_failures = 0
        self._retry_at: float | None = None
        self._on_online: list[Callable[[], None]] = []
        self._on_offline: list[Callable[[], None]] = []
        self._on_queue_change: list[Callable[[int], None]] = []
        self._online: bool | None = None
        self._queue_version = self._read_queue_version()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def setup_connection_listeners(
        self,
        on_online: Callable[[], None] | None = None,
        on_offline: Callable[[], None] | None = None,
        on_queue_change: Callable[[int], None] | None = None,
    ):
        """Register transition handlers. May be called more than once."""
        if on_online:
            self._on_online.append(on_online)
        if on_offline:
            self._on_offline.append(on_offline)
        if on_queue_change:
            self._on_queue_change.append(on_queue_change)

    def is_online(self) -> bool:
        """Current connectivity, sampled now."""
        return self.observer.is_online()

    def set_drain(self, drain: Callable[[], dict]):
        """Register the queue drain. Replaces any drain set before."""
        self._drain = drain

    @property
    def next_retry_at(self) -> float | None:
        """Clock time of the next scheduled re-drain, None if none is due."""
        return self._retry_at

    def drain(self) -> dict:
        """Run the registered drain now and schedule a re-drain if it failed.

        Returns:
            The drain result dict
        """
        if self._drain is None:
            raise RuntimeError("No drain registered; call set_drain() first")

        result = self._drain()
        if result.get("reason") == "delivery_failed" and result.get("remaining"):
            self._drain_failures += 1
            delay_ms = min(
                self.retry_delay_ms * self.backoff_factor ** self._drain_failures,
                self.max_delay_ms,
            )
            self._retry_at = self.clock() + delay_ms / 1000
            emit_receipt("drain_retry_scheduled", {
                "failures": self._drain_failures,
                "delay_ms": int(delay_ms),
                "remaining": result["remaining"],
            })
        else:
            self._drain_failures = 0
            self._retry_at = None
        return result

    def poll_once(self) -> dict:
        """Sample connectivity and queue version once, firing callbacks.

        The first sample only establishes the initial state; callbacks
        fire on changes after that. A re-drain that has come due runs
        while the device is online.

        Returns:
            Dict with online, transition (None, "online" or "offline"),
            retried and queue_changed
        """
        online = self.observer.is_online()
        previous = self._online
        self._online = online

        transition = None
        if previous is not None and online != previous:
            transition = "online" if online else "offline"
            emit_receipt("connectivity_change", {
                "status": transition,
            })
            if online and self._drain is not None:
                self.drain()
            handlers = self._on_online if online else self._on_offline
            for handler in list(handlers):
                handler()

        retried = False
        if (online and transition is None and self._retry_at is not None
                and self.clock() >= self._retry_at):
            self.drain()
            retried = True

        queue_changed = False
        version = self._read_queue_version()
        if version != self._queue_version:
            self._queue_version = version
            queue_changed = True
            if self._on_queue_change:
                size = self.queue.size()
                for handler in list(self._on_queue_change):
                    handler(size)

        return {
            "online": online,
            "transition": transition,
            "retried": retried,
            "queue_changed": queue_changed,
        }

    def _read_queue_version(self):
        if self.queue is None:
            return None
        return self.queue.store.version(self.queue.slot)

    def start(self):
        """Poll on a daemon thread until stop() is called."""
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="leadqueue-monitor", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None):
        self._stop.set()
        if self._thread:
            self._thread.join(timeout)
            self._thread = None

    def run_forever(self):
        """Poll on the calling thread until stop() is called from elsewhere."""
        self._stop.clear()
        self._run()

    def _run(self):
        while not self._stop.is_set():
            try:
                self.poll_once()
            except Exception as e:
                self.error = e
                emit_receipt("monitor_stopped", {
                    "error": f"{type(e).__name__}: {e}",
                })
                raise
            self._stop.wait(self.interval_seconds)
