"""Config settings – 12-factor env-based configuration."""
from es_commerce.config.settings.base import Settings
from es_commerce.config.settings.engine import EngineSettings
from es_commerce.config.settings.factory import SettingsFactory
from es_commerce.config.settings.loaders import EnvSettingsLoader, SettingsLoader

__all__ = ["EngineSettings", "EnvSettingsLoader", "Settings", "SettingsFactory", "SettingsLoader"]
