"""Config settings – SettingsFactory."""
from __future__ import annotations

from typing import Any, Sequence, TypeVar

from es_commerce.config.settings.base import Settings
from es_commerce.config.settings.loaders import SettingsLoader
from es_commerce.config.validation.errors import ConfigError, MissingRequiredSettingError

T = TypeVar("T", bound=Settings)


class SettingsFactory:
    """Layer loader values and explicit overrides into one settings object.

    Later loaders win over earlier ones, *overrides* win over every loader,
    and the dataclass defaults fill whatever nobody supplied.
    """

    @staticmethod
    def create(
        settings_cls: type[T],
        loaders: Sequence[SettingsLoader] = (),
        overrides: dict[str, Any] | None = None,
    ) -> T:
        values: dict[str, Any] = {}
        for loader in loaders:
            values.update(loader.values(settings_cls))
        values.update(overrides or {})

        missing = [name for name in settings_cls.required_fields() if name not in values]
        if missing:
            raise MissingRequiredSettingError(settings_cls.env_key(missing[0]))
        try:
            return settings_cls(**values)
        except TypeError as exc:
            raise ConfigError(
                f"Cannot build {settings_cls.__name__}: {exc}",
                detail={"settings": settings_cls.__name__, "fields": sorted(values)},
                cause=exc,
            ) from exc


__all__ = ["SettingsFactory"]
