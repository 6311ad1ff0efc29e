"""Drain the offline queue into the gateway.

Drain process:
1. Check connectivity (offline: do nothing)
2. Walk the queue oldest first, one delivery at a time
3. Delivered: remove the entry
4. Failed: count the attempt, drop the entry past QUEUE_MAX_ATTEMPTS,
   and stop the cycle so later entries never overtake an earlier one

Deliveries are never sent in parallel.
"""
from dataclasses import replace

from leadqueue.client.gateway import GatewayError
from leadqueue.core.constants import QUEUE_MAX_ATTEMPTS
from leadqueue.core.receipt import emit_receipt


def process_queued_submissions(
    queue,
    gateway,
    observer,
    max_attempts: int = QUEUE_MAX_ATTEMPTS,
) -> dict:
    """Deliver queued submissions in FIFO order.

    Args:
        queue: OfflineQueue to drain
        gateway: Object with send(form_type, payload)
        observer: ConnectivityObserver consulted before starting
        max_attempts: Drain attempts before an entry is dropped

    Returns:
        Drain result with success, reason, delivered, dropped, remaining
    """
    if not observer.is_online():
        return {
            "success": False,
            "reason": "offline",
            "delivered": 0,
            "dropped": 0,
            "remaining": queue.size(),
        }

    entries = queue.get_queue()
    if not entries:
        return {
            "success": True,
            "reason": "queue_empty",
            "delivered": 0,
            "dropped": 0,
            "remaining": 0,
        }

    delivered = 0
    dropped = 0
    result = {"success": True, "reason": "drained"}

    for entry in entries:
        try:
            gateway.send(entry.form_type, entry.payload)
        except GatewayError as e:
            attempts = entry.attempts + 1
            if attempts >= max_attempts:
                queue.remove(entry.id)
                dropped += 1
                emit_receipt("queue_drop", {
                    "submission_id": entry.id,
                    "form_type": entry.form_type,
                    "attempts": attempts,
                    "error": str(e),
                })
            else:
                queue.update(replace(entry, attempts=attempts))

            result = {
                "success": False,
                "reason": "delivery_failed",
                "failed_id": entry.id,
                "error": str(e),
            }
            break

        queue.remove(entry.id)
        delivered += 1
        emit_receipt("queue_delivered", {
            "submission_id": entry.id,
            "form_type": entry.form_type,
            "attempts": entry.attempts + 1,
        })

    result.update({
        "delivered": delivered,
        "dropped": dropped,
        "remaining": queue.size(),
    })

    emit_receipt("queue_drain", {
        "success": result["success"],
        "reason": result["reason"],
        "delivered": delivered,
        "dropped": dropped,
        "remaining": result["remaining"],
    })

    return result
