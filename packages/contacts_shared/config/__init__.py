"""Public API for shared contacts configuration utilities."""

from .loader import DEFAULT_CONFIG_PATH, load_config, load_settings
from .models import (
    ComponentsSettings,
    ContactsSettings,
    LoggingSettings,
    ObservabilitySettings,
    PublicApiOtelSettings,
    resolve_component_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ComponentsSettings",
    "ContactsSettings",
    "LoggingSettings",
    "ObservabilitySettings",
    "PublicApiOtelSettings",
    "load_config",
    "load_settings",
    "resolve_component_settings",
]
