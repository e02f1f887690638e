"""Config settings – loaders that read raw values for a Settings class."""
from __future__ import annotations

import abc
import dataclasses
import os
import typing
from typing import Any, Callable, Mapping, TypeVar

from es_commerce.config.settings.base import Settings
from es_commerce.config.validation import InvalidSettingValueError

T = TypeVar("T", bound=Settings)

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})


def _to_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"expected one of {sorted(_TRUE | _FALSE)}")


_PARSERS: dict[Any, Callable[[str], Any]] = {bool: _to_bool, int: int, float: float, str: str}


class SettingsLoader(abc.ABC):
    """Reads the values one source holds for a settings class.

    Sources only return what they actually have; defaults are left to the
    dataclass so several loaders can be layered by :class:`SettingsFactory`.
    """

    @abc.abstractmethod
    def values(self, settings_cls: type[Settings]) -> dict[str, Any]: ...

    def load(self, settings_cls: type[T]) -> T:
        """Build *settings_cls* from this source alone."""
        from es_commerce.config.settings.factory import SettingsFactory

        return SettingsFactory.create(settings_cls, loaders=[self])


class EnvSettingsLoader(SettingsLoader):
    """Environment variables named by ``Settings.env_key``.

    *environ* defaults to ``os.environ``; tests pass a plain dict.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ

    def values(self, settings_cls: type[Settings]) -> dict[str, Any]:
        environ = os.environ if self._environ is None else self._environ
        hints = typing.get_type_hints(settings_cls)
        found: dict[str, Any] = {}
        for field in dataclasses.fields(settings_cls):
            key = settings_cls.env_key(field.name)
            if key not in environ:
                continue
            raw = environ[key]
            parse = _PARSERS.get(hints.get(field.name), str)
            try:
                found[field.name] = parse(raw)
            except ValueError as exc:
                raise InvalidSettingValueError(key, raw, str(exc)) from exc
        return found


__all__ = ["EnvSettingsLoader", "SettingsLoader"]
