"""Config validation errors."""
from traceability.kernel.errors import ApplicationError


class ConfigError(ApplicationError):
    """Configuration is invalid or could not be loaded."""
    default_code = "config_error"


class MissingRequiredSettingError(ConfigError):
    """A required setting is absent from every source."""
    default_code = "missing_required_setting"

    def __init__(self, setting_name: str, hint: str = "") -> None:
        message = f"Required setting '{setting_name}' is missing"
        if hint:
            message = f"{message}: {hint}"
        super().__init__(message)
        self.setting_name = setting_name


class InvalidSettingValueError(ConfigError):
    """A setting is present but its value is not acceptable."""
    default_code = "invalid_setting_value"

    def __init__(self, setting_name: str, value: object, reason: str) -> None:
        super().__init__(
            f"Setting '{setting_name}' has invalid value {value!r}: {reason}"
        )
        self.setting_name = setting_name
        self.value = value
        self.reason = reason


__all__ = ["ConfigError", "InvalidSettingValueError", "MissingRequiredSettingError"]
