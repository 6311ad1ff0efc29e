"""HTTP adapter for the submission API gateway.

The gateway is the lead/appointment backend. It answers a form POST with
a JSON envelope:

    {"success": true, "data": {...}}       accepted
    {"success": false, "error": "..."}     rejected

Non-2xx responses are rejections too. Transport problems (DNS, refused
connection, timeout) are reported separately so callers can tell "the
backend said no" from "the backend could not be reached".
"""
import requests

from leadqueue.core.constants import (
    API_FORM_PREFIX,
    API_HEALTH_PATH,
    API_FORM_SUBMISSION_TIMEOUT_MS,
    API_TIMEOUT_MS,
    API_USER_AGENT,
    FORM_ENDPOINTS,
)


class GatewayError(Exception):
    """Delivery to the gateway failed."""
    pass


class GatewayUnreachable(GatewayError):
    """No HTTP response was received."""
    pass


class GatewayRejected(GatewayError):
    """The gateway answered but did not accept the submission."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def endpoint_for(form_type: str) -> str:
    """Gateway path for a form type. Unknown types go to the generic form route."""
    return FORM_ENDPOINTS.get(form_type, f"{API_FORM_PREFIX}/{form_type}")


class SubmissionGateway:
    """POSTs form payloads to the gateway over a shared requests.Session."""

    def __init__(
        self,
        base_url: str,
        timeout_ms: int = API_FORM_SUBMISSION_TIMEOUT_MS,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_ms = timeout_ms
        self.session = session or requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": API_USER_AGENT,
        })

    def url_for(self, form_type: str) -> str:
        return f"{self.base_url}{endpoint_for(form_type)}"

    def send(self, form_type: str, payload: dict):
        """Deliver one payload.

        Args:
            form_type: Form tag, selects the endpoint
            payload: JSON-serializable field values

        Returns:
            The envelope's data (or the whole body if it has no envelope)

        Raises:
            GatewayUnreachable: No response received
            GatewayRejected: Non-2xx status or success=false
        """
        url = self.url_for(form_type)
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout_ms / 1000)
        except requests.RequestException as e:
            raise GatewayUnreachable(f"{url}: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = response.text

        if not 200 <= response.status_code < 300:
            raise GatewayRejected(
                _error_text(body) or f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

        if isinstance(body, dict) and "success" in body:
            if not body["success"]:
                raise GatewayRejected(
                    _error_text(body) or "Submission rejected",
                    status_code=response.status_code,
                )
            return body.get("data")

        return body

    def ping(self, timeout_ms: int = API_TIMEOUT_MS) -> bool:
        """True if the health endpoint answers 2xx."""
        try:
            response = self.session.get(f"{self.base_url}{API_HEALTH_PATH}", timeout=timeout_ms / 1000)
        except requests.RequestException:
            return False
        return 200 <= response.status_code < 300

    def close(self):
        self.session.close()


def _error_text(body) -> str:
    if isinstance(body, dict):
        error = body.get("error") or body.get("message")
        if isinstance(error, dict):
            return error.get("message", str(error))
        return str(error) if error else ""
    return str(body).strip()[:200]
