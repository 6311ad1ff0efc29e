"""Persisted FIFO queue of form submissions awaiting delivery.

The queue lives in a single storage slot (offline_form_submission_queue)
as a JSON array. That slot is the only record of what is still owed to
the gateway: counts shown to the user always come from it.

Entries are never deduplicated. Two identical payloads submitted twice
are two entries.
"""
import json
import threading
import uuid
from dataclasses import asdict, dataclass, field, replace

from leadqueue.core.constants import QUEUE_SLOT
from leadqueue.core.receipt import QueueStorageError, emit_receipt, payload_hash, utc_now
from leadqueue.offline.store import SlotStore


@dataclass(frozen=True)
class QueuedSubmission:
    """A form payload waiting to be delivered."""
    form_type: str
    payload: dict
    id: str = ""
    enqueued_at: str = ""
    attempts: int = 0  # drain attempts so far

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "QueuedSubmission":
        """Restore an entry read from storage."""
        try:
            return cls(
                form_type=data["form_type"],
                payload=dict(data["payload"]),
                id=data["id"],
                enqueued_at=data.get("enqueued_at", ""),
                attempts=int(data.get("attempts", 0)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise QueueStorageError(f"Malformed queue entry: {data!r}") from e


@dataclass
class OfflineQueue:
    """Read-modify-write access to the queue slot.

    Every operation re-reads the slot, so changes made by another
    process sharing the store are picked up. There is no locking across
    processes. Within one process a lock serializes each read-modify-write
    (monitor-thread drains against caller-thread enqueues).
    """
    store: SlotStore
    slot: str = QUEUE_SLOT
    _listeners: list = field(default_factory=list, init=False, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False, compare=False)

    def _load(self) -> list[QueuedSubmission]:
        raw = self.store.read(self.slot)
        if raw is None or not raw.strip():
            return []
        try:
            entries = json.loads(raw)
        except json.JSONDecodeError as e:
            raise QueueStorageError(f"Queue slot {self.slot} holds invalid JSON: {e}") from e
        if not isinstance(entries, list):
            raise QueueStorageError(f"Queue slot {self.slot} does not hold a list")
        return [QueuedSubmission.from_dict(entry) for entry in entries]

    def _save(self, entries: list[QueuedSubmission]):
        if not entries:
            self.store.delete(self.slot)
        else:
            self.store.write(self.slot, json.dumps([e.to_dict() for e in entries], default=str))
        for listener in list(self._listeners):
            listener(len(entries))

    def on_change(self, listener):
        """Call listener(size) after every write made through this queue."""
        self._listeners.append(listener)

    def enqueue(self, submission: QueuedSubmission | str, payload: dict | None = None) -> QueuedSubmission:
        """Append a submission to the end of the queue.

        Args:
            submission: A QueuedSubmission, or a form_type string
            payload: Field values when submission is a form_type

        Returns:
            The stored entry, with id and enqueued_at filled in
        """
        if isinstance(submission, str):
            submission = QueuedSubmission(form_type=submission, payload=dict(payload or {}))

        entry = replace(
            submission,
            id=submission.id or str(uuid.uuid4()),
            enqueued_at=submission.enqueued_at or utc_now(),
        )

        with self._lock:
            entries = self._load()
            entries.append(entry)
            self._save(entries)

        emit_receipt("offline_enqueue", {
            "submission_id": entry.id,
            "form_type": entry.form_type,
            "form_hash": payload_hash(entry.payload),
            "queue_size": len(entries),
        })

        return entry

    def get_queue(self) -> tuple[QueuedSubmission, ...]:
        """Current entries in FIFO order. A fresh snapshot on every call."""
        return tuple(self._load())

    def size(self) -> int:
        return len(self._load())

    def peek(self, n: int = 10) -> list[QueuedSubmission]:
        """Oldest n entries without removing them."""
        return self._load()[:n]

    def remove(self, submission_id: str) -> bool:
        """Delete one entry by id. Returns False if it was not queued."""
        with self._lock:
            entries = self._load()
            kept = [e for e in entries if e.id != submission_id]
            if len(kept) == len(entries):
                return False
            self._save(kept)
            return True

    def update(self, submission: QueuedSubmission) -> bool:
        """Overwrite the stored entry with the same id, keeping its position."""
        with self._lock:
            entries = self._load()
            for i, entry in enumerate(entries):
                if entry.id == submission.id:
                    entries[i] = submission
                    self._save(entries)
                    return True
            return False

    def clear(self) -> int | None:
        """Empty the queue unconditionally.

        Returns:
            How many entries were dropped, or None if the slot was unreadable
        """
        with self._lock:
            try:
                size = len(self._load())
            except QueueStorageError:
                # Corrupt contents are discarded along with everything else
                size = None
            self.store.delete(self.slot)
            for listener in list(self._listeners):
                listener(0)

        emit_receipt("queue_cleared", {
            "cleared_count": size,
        })

        return size
