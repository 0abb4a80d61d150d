"""Config settings – immutable options, loaders and the global snapshot."""
from traceability.config.settings.base import Settings
from traceability.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from traceability.config.settings.options import (
    DEFAULT_HEADER_NAME,
    ID_FORMAT_HIERARCHICAL,
    ID_FORMAT_W3C,
    TRACEPARENT_HEADER,
    TRACESTATE_HEADER,
    TraceabilityOptions,
)
from traceability.config.settings.provider import (
    FixedOptionsProvider,
    OptionsProvider,
    StaticOptionsProvider,
    configure_options,
    default_provider,
    get_options,
    reset_options,
    resolve_options,
)

__all__ = [
    "DEFAULT_HEADER_NAME",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "FixedOptionsProvider",
    "ID_FORMAT_HIERARCHICAL",
    "ID_FORMAT_W3C",
    "OptionsProvider",
    "Settings",
    "SettingsLoader",
    "StaticOptionsProvider",
    "TRACEPARENT_HEADER",
    "TRACESTATE_HEADER",
    "TraceabilityOptions",
    "configure_options",
    "default_provider",
    "get_options",
    "reset_options",
    "resolve_options",
]
