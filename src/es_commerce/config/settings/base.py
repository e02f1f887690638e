"""Config settings – Settings, the dataclass every settings group extends."""
from __future__ import annotations

import dataclasses
from typing import Any, ClassVar, TypeVar

S = TypeVar("S", bound="Settings")


@dataclasses.dataclass
class Settings:
    """A group of related settings, validated as soon as it is built.

    ``env_prefix`` names the environment variables the group is read from:
    field ``drain_event_limit`` under prefix ``ESHOP`` is
    ``ESHOP_DRAIN_EVENT_LIMIT``.
    """

    env_prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Raise :class:`InvalidSettingValueError` on a bad combination."""

    @classmethod
    def env_key(cls, field_name: str) -> str:
        return "_".join(p for p in (cls.env_prefix, field_name) if p).upper()

    @classmethod
    def required_fields(cls) -> list[str]:
        return [
            f.name
            for f in dataclasses.fields(cls)
            if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING
        ]

    def replace(self: S, **changes: Any) -> S:
        """Copy with *changes* applied (and validated again)."""
        return dataclasses.replace(self, **changes)


__all__ = ["Settings"]
