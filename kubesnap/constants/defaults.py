"""Default values for client settings, retry policy and caches."""

from typing import Final

# ============================================================================
# Retry policy defaults
# ============================================================================

MAX_ATTEMPTS_DEFAULT: Final = 2
RETRY_DELAY_DEFAULT: Final = 1.0  # seconds, doubled per attempt

RETRYABLE_EXIT_CODES_DEFAULT: Final[frozenset[int]] = frozenset({1, 2, 137})

RETRYABLE_ERROR_SUBSTRINGS_DEFAULT: Final[tuple[str, ...]] = (
    "i/o timeout",
    "timed out",
    "connection refused",
    "connection reset",
    "no such host",
    "temporarily unavailable",
    "EOF",
    "context deadline exceeded",
    "server is currently unable",
)

# ============================================================================
# Cache TTLs (seconds)
# ============================================================================

# Filesystem and network counters move continuously.
NODE_STATS_CACHE_TTL_DEFAULT: Final = 15.0
# Authorization rarely changes within a session.
SECRET_PERMISSION_CACHE_TTL_DEFAULT: Final = 60.0

# ============================================================================
# Executable discovery
# ============================================================================

KUBECTL_EXECUTABLE: Final = "kubectl"
HELM_EXECUTABLE: Final = "helm"
KUBECTL_ENV_VAR: Final = "KUBECTL_EXE"
HELM_ENV_VAR: Final = "HELM_EXE"
KUBECONFIG_ENV_VAR: Final = "KUBECONFIG"

DEFAULT_SEARCH_DIRECTORIES: Final[tuple[str, ...]] = (
    "/usr/local/bin",
    "/opt/homebrew/bin",
    "/opt/homebrew/sbin",
    "/usr/local/google-cloud-sdk/bin",
    "/usr/local/share/google-cloud-sdk/bin",
    "~/google-cloud-sdk/bin",
    "/usr/bin",
    "/usr/sbin",
)

DEFAULT_KUBECONFIG_RELATIVE_PATH: Final = "~/.kube/config"

# Settings environment variable prefix.
SETTINGS_ENV_PREFIX: Final = "KUBESNAP_"

__all__ = [
    "DEFAULT_KUBECONFIG_RELATIVE_PATH",
    "DEFAULT_SEARCH_DIRECTORIES",
    "HELM_ENV_VAR",
    "HELM_EXECUTABLE",
    "KUBECONFIG_ENV_VAR",
    "KUBECTL_ENV_VAR",
    "KUBECTL_EXECUTABLE",
    "MAX_ATTEMPTS_DEFAULT",
    "NODE_STATS_CACHE_TTL_DEFAULT",
    "RETRYABLE_ERROR_SUBSTRINGS_DEFAULT",
    "RETRYABLE_EXIT_CODES_DEFAULT",
    "RETRY_DELAY_DEFAULT",
    "SECRET_PERMISSION_CACHE_TTL_DEFAULT",
    "SETTINGS_ENV_PREFIX",
]
