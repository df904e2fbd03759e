"""Config settings – Settings base class."""
from __future__ import annotations

import dataclasses
from typing import Any


@dataclasses.dataclass
class Settings:
    """Dataclass settings whose fields map to ``<PREFIX>_<FIELD>`` variables.

    Subclasses set ``_prefix`` and override :meth:`_validate`; validation
    runs on construction, so an instance is always usable.
    """

    _prefix: dataclasses.ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""

    @classmethod
    def env_key(cls, field_name: str) -> str:
        """Environment variable name for *field_name*, e.g. ``FCM_TIMEOUT``."""
        return f"{cls._prefix}_{field_name}".upper().lstrip("_")

    @classmethod
    def required_fields(cls) -> tuple[str, ...]:
        return tuple(
            f.name
            for f in dataclasses.fields(cls)
            if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING
        )

    def as_options(self, *exclude: str) -> dict[str, Any]:
        """Field values as a plain dict, minus *exclude*; lists are copied."""
        options: dict[str, Any] = {}
        for f in dataclasses.fields(self):
            if f.name in exclude:
                continue
            value = getattr(self, f.name)
            options[f.name] = list(value) if isinstance(value, list) else value
        return options


__all__ = ["Settings"]
