"""Observability – SensitiveFieldsFilter."""
from __future__ import annotations

import re
from typing import Any

DEFAULT_SENSITIVE_FIELDS: frozenset[str] = frozenset({
    "authorization", "access_token", "token", "tokens", "private_key",
    "private_key_id", "registration_token", "registration_tokens",
    "registration_ids", "notification_key", "password", "secret",
})

_BEARER = re.compile(r"(Bearer\s+)\S+", re.IGNORECASE)


class SensitiveFieldsFilter:
    """Mask credentials and device tokens in log event dicts.

    Values under a sensitive key become ``[REDACTED]``; bearer tokens that
    leak into other string values are masked in place.
    """

    REDACTED = "[REDACTED]"

    def __init__(self, sensitive_fields: frozenset[str] | None = None) -> None:
        self._fields = frozenset(f.lower() for f in (sensitive_fields or DEFAULT_SENSITIVE_FIELDS))

    def redact(self, data: dict[str, Any]) -> dict[str, Any]:
        return {k: (self.REDACTED if k.lower() in self._fields else v) for k, v in data.items()}

    def redact_deep(self, data: dict[str, Any]) -> dict[str, Any]:
        """Recursively redact nested dicts and lists."""
        return {
            k: self.REDACTED if isinstance(k, str) and k.lower() in self._fields else self._scrub(v)
            for k, v in data.items()
        }

    def _scrub(self, value: Any) -> Any:
        if isinstance(value, dict):
            return self.redact_deep(value)
        if isinstance(value, list):
            return [self._scrub(v) for v in value]
        if isinstance(value, str):
            return _BEARER.sub(rf"\g<1>{self.REDACTED}", value)
        return value


__all__ = ["DEFAULT_SENSITIVE_FIELDS", "SensitiveFieldsFilter"]
