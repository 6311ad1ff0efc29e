"""Core receipt primitives used by every leadqueue module.

Functions:
    payload_hash: SHA256 fingerprint of a form payload
    emit_receipt: Emit receipt with required fields to the receipt stream
    set_receipt_stream: Redirect (or silence) receipt output
    StopRule: Exception for conditions that must surface
"""
import hashlib
import json
import sys
from datetime import datetime, timezone
from typing import TextIO

# None means "resolve sys.stdout at emit time"
_receipt_stream: TextIO | None = None
_receipts_enabled = True


class StopRule(Exception):
    """Raised when stoprule triggers. Never catch silently."""
    pass


class QueueStorageError(StopRule):
    """Offline queue storage is unreadable, corrupt, or unwritable."""
    pass


def utc_now() -> str:
    """Current UTC time as ISO-8601 with a Z suffix."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def payload_hash(data: bytes | str | dict) -> str:
    """Compute SHA256 hex digest of a payload.

    Dicts are serialized with sorted keys so equal payloads hash equally.
    Pure function with no side effects.

    Args:
        data: Bytes, string, or dict to hash

    Returns:
        64-char lowercase hex digest
    """
    if isinstance(data, dict):
        data = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def set_receipt_stream(stream: TextIO | None, enabled: bool = True) -> None:
    """Send receipts to stream (None = stdout), or disable them entirely."""
    global _receipt_stream, _receipts_enabled
    _receipt_stream = stream
    _receipts_enabled = enabled


def emit_receipt(receipt_type: str, data: dict) -> dict:
    """Emit a receipt with standard required fields.

    Writes one JSON line to the receipt stream with flush. Callers must not
    put raw form payloads in data; pass a payload_hash instead.

    Args:
        receipt_type: Type of receipt (submission_attempt, offline_enqueue, ...)
        data: Receipt fields

    Returns:
        Complete receipt dict with receipt_type, ts, payload_hash
    """
    receipt = {
        "receipt_type": receipt_type,
        "ts": utc_now(),
        "payload_hash": payload_hash(data),
        **data
    }

    if _receipts_enabled:
        stream = _receipt_stream or sys.stdout
        print(json.dumps(receipt, sort_keys=True, default=str), file=stream, flush=True)

    return receipt
