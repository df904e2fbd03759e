"""Domain errors — a message that cannot be sent as given."""

from __future__ import annotations

from typing import Any

from fcm_client.errors.base import BaseError


class DomainError(BaseError):
    """Raised when a message or request violates a client-side rule."""

    default_code = "domain_error"


class ValidationError(DomainError):
    """Input data does not meet validation rules.

    ``errors`` is a list of field-level validation failures. Raised before
    any network activity takes place.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = errors or []

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


class InvalidTopicError(ValidationError):
    """Topic name contains characters outside ``[a-zA-Z0-9-_.~%]``."""

    default_code = "invalid_topic"

    def __init__(self, topic: Any, **kwargs: Any) -> None:
        super().__init__(
            f"Invalid topic name {topic!r}",
            errors=[{"field": "topic", "value": topic}],
            **kwargs,
        )
        self.topic = topic


class InvalidConditionError(ValidationError):
    """Topic condition is not a well-formed boolean expression."""

    default_code = "invalid_condition"

    def __init__(self, condition: Any, **kwargs: Any) -> None:
        super().__init__(
            f"Invalid topic condition {condition!r}",
            errors=[{"field": "condition", "value": condition}],
            **kwargs,
        )
        self.condition = condition


class MissingTargetError(ValidationError):
    """A required identifier (target, project, key name) is absent or blank."""

    default_code = "missing_target"

    def __init__(self, field: str, message: str | None = None, **kwargs: Any) -> None:
        super().__init__(
            message or f"'{field}' is required",
            errors=[{"field": field}],
            **kwargs,
        )
        self.field = field


__all__ = [
    "DomainError",
    "InvalidConditionError",
    "InvalidTopicError",
    "MissingTargetError",
    "ValidationError",
]
