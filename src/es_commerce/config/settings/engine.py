"""Config settings – EngineSettings for the event-sourcing runtime."""
from __future__ import annotations

import dataclasses
from typing import Any, ClassVar, Mapping

from es_commerce.config.settings.base import Settings
from es_commerce.config.settings.factory import SettingsFactory
from es_commerce.config.settings.loaders import EnvSettingsLoader
from es_commerce.config.validation import InvalidSettingValueError

_POSITIVE = (
    "drain_stream_limit",
    "drain_event_limit",
    "correlate_limit",
    "settle_max_passes",
    "reaction_max_retries",
    "subscription_queue_size",
)


@dataclasses.dataclass
class EngineSettings(Settings):
    """Bounds for the correlate/drain loop, subscriptions and logging."""

    env_prefix: ClassVar[str] = "ESHOP"

    drain_stream_limit: int = 10
    drain_event_limit: int = 100
    correlate_limit: int = 100
    settle_max_passes: int = 10
    settle_debounce_ms: int = 10
    reaction_max_retries: int = 3
    subscription_queue_size: int = 100
    log_level: str = "INFO"
    log_json: bool = True

    def validate(self) -> None:
        for name in _POSITIVE:
            value = getattr(self, name)
            if value < 1:
                raise InvalidSettingValueError(name, value, "must be >= 1")
        if self.settle_debounce_ms < 0:
            raise InvalidSettingValueError(
                "settle_debounce_ms", self.settle_debounce_ms, "must be >= 0"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> EngineSettings:
        """``ESHOP_*`` variables (``os.environ`` by default), then *overrides*."""
        return SettingsFactory.create(cls, [EnvSettingsLoader(environ)], overrides)


__all__ = ["EngineSettings"]
