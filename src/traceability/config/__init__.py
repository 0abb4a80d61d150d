"""Config – options snapshot, loaders and configuration errors."""

from traceability.config.settings import (
    DEFAULT_HEADER_NAME,
    DotenvSettingsLoader,
    EnvSettingsLoader,
    FixedOptionsProvider,
    OptionsProvider,
    Settings,
    SettingsLoader,
    StaticOptionsProvider,
    TraceabilityOptions,
    configure_options,
    get_options,
    reset_options,
    resolve_options,
)
from traceability.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "DEFAULT_HEADER_NAME",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "FixedOptionsProvider",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "OptionsProvider",
    "Settings",
    "SettingsLoader",
    "StaticOptionsProvider",
    "TraceabilityOptions",
    "configure_options",
    "get_options",
    "reset_options",
    "resolve_options",
]
