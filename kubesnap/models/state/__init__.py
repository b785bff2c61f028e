"""State models: client settings and configuration errors."""

from kubesnap.models.state.app_settings import (
    ClientSettings,
    ConfigError,
    ConfigLoadError,
)

__all__ = ["ClientSettings", "ConfigError", "ConfigLoadError"]
