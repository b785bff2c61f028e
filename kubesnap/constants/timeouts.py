"""Timeout constants for kubectl and helm invocations.

All timeout values for API requests, process lifetimes and backoff.
"""

from typing import Final

# ============================================================================
# API request timeouts (string format for kubectl --request-timeout)
# ============================================================================

CLUSTER_REQUEST_TIMEOUT: Final = "20s"
NODE_REQUEST_TIMEOUT: Final = "15s"
ENDPOINTS_REQUEST_TIMEOUT: Final = "15s"

# ============================================================================
# Process-level timeouts (seconds, must be greater than request timeouts)
# ============================================================================

COMMAND_TIMEOUT: Final = 30.0
HELM_COMMAND_TIMEOUT: Final = 30.0

# Grace period between SIGTERM and SIGKILL for a forced termination.
TERMINATE_GRACE_PERIOD: Final = 3.0

# Upper bound on draining pipes after the process has exited; a grandchild
# holding the pipe open must not stall the caller.
OUTPUT_DRAIN_TIMEOUT: Final = 2.0

__all__ = [
    "CLUSTER_REQUEST_TIMEOUT",
    "COMMAND_TIMEOUT",
    "ENDPOINTS_REQUEST_TIMEOUT",
    "HELM_COMMAND_TIMEOUT",
    "NODE_REQUEST_TIMEOUT",
    "OUTPUT_DRAIN_TIMEOUT",
    "TERMINATE_GRACE_PERIOD",
]
