"""Core subpackage for leadqueue primitives.

Exports all from receipt.py, schemas.py, and constants.py.
"""
from .receipt import (
    QueueStorageError,
    StopRule,
    emit_receipt,
    payload_hash,
    set_receipt_stream,
    utc_now,
)
from .schemas import FORM_REQUIRED_FIELDS, required_fields, validate_payload
from .constants import (
    SUBMIT_DEFAULT_RETRY_COUNT,
    SUBMIT_DEFAULT_RETRY_DELAY_MS,
    SUBMIT_DEFAULT_BACKOFF_FACTOR,
    SUBMIT_MAX_RETRY_DELAY_MS,
    QUEUE_SLOT,
    QUEUE_MAX_ATTEMPTS,
    FORM_ENDPOINTS,
)

__all__ = [
    # Receipt primitives
    "emit_receipt",
    "payload_hash",
    "set_receipt_stream",
    "utc_now",
    "StopRule",
    "QueueStorageError",
    # Schemas
    "FORM_REQUIRED_FIELDS",
    "required_fields",
    "validate_payload",
    # Constants
    "SUBMIT_DEFAULT_RETRY_COUNT",
    "SUBMIT_DEFAULT_RETRY_DELAY_MS",
    "SUBMIT_DEFAULT_BACKOFF_FACTOR",
    "SUBMIT_MAX_RETRY_DELAY_MS",
    "QUEUE_SLOT",
    "QUEUE_MAX_ATTEMPTS",
    "FORM_ENDPOINTS",
]
