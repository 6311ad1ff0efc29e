"""leadqueue constants and defaults.

All magic numbers live here. No exceptions.
"""

# Direct submission retry defaults
SUBMIT_DEFAULT_RETRY_COUNT = 3
SUBMIT_DEFAULT_RETRY_DELAY_MS = 2000
SUBMIT_DEFAULT_BACKOFF_FACTOR = 1.0  # 1.0 = fixed delay
SUBMIT_MAX_RETRY_DELAY_MS = 60000

# Offline queue
QUEUE_SLOT = "offline_form_submission_queue"
QUEUE_MAX_ATTEMPTS = 5  # Drain attempts before an entry is dropped
QUEUE_RETRY_DELAY_MS = 5000  # Base wait before re-draining after a failed drain
QUEUE_RETRY_BACKOFF_FACTOR = 1.5
QUEUE_MAX_RETRY_DELAY_MS = 60000

# Gateway
API_BASE_URL = "http://localhost:5000"
API_FORM_PREFIX = "/api/form"
API_HEALTH_PATH = "/api/health"
API_TIMEOUT_MS = 10000
API_FORM_SUBMISSION_TIMEOUT_MS = 15000
API_USER_AGENT = "leadqueue/1.0"

# Form type -> gateway endpoint
FORM_ENDPOINTS = {
    "free-class": f"{API_FORM_PREFIX}/free-class",
    "assessment": f"{API_FORM_PREFIX}/assessment",
    "contact": f"{API_FORM_PREFIX}/contact",
    "appointment": f"{API_FORM_PREFIX}/appointment",
}

# Connection monitor
MONITOR_INTERVAL_SECONDS = 5.0
PROBE_TIMEOUT_SECONDS = 3.0

# User-facing messages
MESSAGE_QUEUED = "Saved. Your form will be sent automatically when you are back online."
MESSAGE_SENT = "Your form was sent."
