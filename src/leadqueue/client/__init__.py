"""Submission client and gateway adapter.

Only the gateway is re-exported here; offline.sync depends on it, so this
package must not import submit.py at load time.
"""
from .gateway import (
    GatewayError,
    GatewayRejected,
    GatewayUnreachable,
    SubmissionGateway,
    endpoint_for,
)

__all__ = [
    "GatewayError",
    "GatewayRejected",
    "GatewayUnreachable",
    "SubmissionGateway",
    "endpoint_for",
]
