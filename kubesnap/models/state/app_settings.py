"""Client settings models.

``ClientSettings`` reads ``KUBESNAP_*`` environment variables through
pydantic-settings. The executable and kubeconfig fields also honour the
variables kubectl and helm users already export.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from kubesnap.constants.defaults import (
    HELM_ENV_VAR,
    KUBECONFIG_ENV_VAR,
    KUBECTL_ENV_VAR,
    MAX_ATTEMPTS_DEFAULT,
    NODE_STATS_CACHE_TTL_DEFAULT,
    RETRY_DELAY_DEFAULT,
    RETRYABLE_ERROR_SUBSTRINGS_DEFAULT,
    RETRYABLE_EXIT_CODES_DEFAULT,
    SECRET_PERMISSION_CACHE_TTL_DEFAULT,
    SETTINGS_ENV_PREFIX,
)
from kubesnap.constants.timeouts import (
    CLUSTER_REQUEST_TIMEOUT,
    COMMAND_TIMEOUT,
    HELM_COMMAND_TIMEOUT,
    NODE_REQUEST_TIMEOUT,
)
from kubesnap.models.command.retry_policy import RetryPolicy


def _prefixed_or(field_name: str, fallback: str) -> AliasChoices:
    """The prefixed variable first, then the tool's own variable."""
    return AliasChoices(f"{SETTINGS_ENV_PREFIX}{field_name.upper()}", fallback)


class ClientSettings(BaseSettings):
    """Client settings model with validation."""

    model_config = SettingsConfigDict(
        env_prefix=SETTINGS_ENV_PREFIX,
        env_ignore_empty=True,
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    # Executables
    kubectl_path: str | None = Field(
        default=None, validation_alias=_prefixed_or("kubectl_path", KUBECTL_ENV_VAR)
    )
    helm_path: str | None = Field(
        default=None, validation_alias=_prefixed_or("helm_path", HELM_ENV_VAR)
    )
    kubeconfig: str | None = Field(
        default=None, validation_alias=_prefixed_or("kubeconfig", KUBECONFIG_ENV_VAR)
    )
    extra_search_directories: Annotated[tuple[str, ...], NoDecode] = ()

    # Process policy
    command_timeout: float = Field(default=COMMAND_TIMEOUT, gt=0)
    helm_command_timeout: float = Field(default=HELM_COMMAND_TIMEOUT, gt=0)
    max_attempts: int = Field(default=MAX_ATTEMPTS_DEFAULT, ge=1)
    retry_delay: float = Field(default=RETRY_DELAY_DEFAULT, ge=0)
    retryable_exit_codes: Annotated[frozenset[int], NoDecode] = RETRYABLE_EXIT_CODES_DEFAULT
    retryable_error_substrings: Annotated[tuple[str, ...], NoDecode] = (
        RETRYABLE_ERROR_SUBSTRINGS_DEFAULT
    )

    # kubectl --request-timeout values
    request_timeout: str = CLUSTER_REQUEST_TIMEOUT
    node_request_timeout: str = NODE_REQUEST_TIMEOUT

    # Cache TTLs (seconds)
    node_stats_cache_ttl: float = Field(default=NODE_STATS_CACHE_TTL_DEFAULT, ge=0)
    secret_permission_cache_ttl: float = Field(
        default=SECRET_PERMISSION_CACHE_TTL_DEFAULT, ge=0
    )

    @field_validator(
        "extra_search_directories",
        "retryable_exit_codes",
        "retryable_error_substrings",
        mode="before",
    )
    @classmethod
    def split_comma_list(cls, value: Any) -> Any:
        """Environment values for list fields are comma separated."""
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    def retry_policy(self) -> RetryPolicy:
        """Shared kubectl retry policy built from these settings."""
        return RetryPolicy(
            timeout=self.command_timeout,
            max_attempts=self.max_attempts,
            retry_delay=self.retry_delay,
            retryable_exit_codes=self.retryable_exit_codes,
            retryable_error_substrings=self.retryable_error_substrings,
        )

    def helm_retry_policy(self) -> RetryPolicy:
        """Same retry behaviour with the helm process timeout."""
        return self.retry_policy().model_copy(update={"timeout": self.helm_command_timeout})

    @classmethod
    def from_env(cls) -> ClientSettings:
        """Load settings from the environment.

        Raises:
            ConfigLoadError: a variable holds a value that fails validation.
        """
        try:
            return cls()
        except ValidationError as exc:
            raise ConfigLoadError(f"Invalid client settings: {exc}") from exc


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when settings fail to load."""
