"""Config – 12-factor settings and loaders."""

from es_commerce.config.settings import (
    EngineSettings,
    EnvSettingsLoader,
    Settings,
    SettingsFactory,
    SettingsLoader,
)
from es_commerce.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "EngineSettings",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
]
