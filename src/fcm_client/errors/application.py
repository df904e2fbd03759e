"""Application-layer errors — credentials and client configuration."""

from __future__ import annotations

from typing import Any

from fcm_client.errors.base import BaseError


class ApplicationError(BaseError):
    """The client is set up in a way that cannot work."""

    default_code = "application_error"


class InvalidCredentialError(ApplicationError):
    """Service-account credentials cannot be resolved or exchanged for a token.

    ``source_kind`` names how the credentials input was classified
    (``file_path``, ``stream`` or ``invalid``).
    """

    default_code = "invalid_credential"

    def __init__(
        self,
        message: str = "Invalid service account credentials",
        *,
        source_kind: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.source_kind = source_kind


class ConfigError(ApplicationError):
    """Settings could not be loaded or failed validation."""

    default_code = "config_error"


class MissingRequiredSettingError(ConfigError):
    """A required ``FCM_*`` variable is absent."""

    default_code = "missing_required_setting"

    def __init__(self, setting_name: str, **kwargs: Any) -> None:
        super().__init__(f"Required setting '{setting_name}' is missing", **kwargs)
        self.setting_name = setting_name


class InvalidSettingValueError(ConfigError):
    """A setting is present but cannot be used."""

    default_code = "invalid_setting_value"

    def __init__(self, setting_name: str, value: object, reason: str, **kwargs: Any) -> None:
        super().__init__(
            f"Setting '{setting_name}' has invalid value {value!r}: {reason}",
            detail={"setting": setting_name, "reason": reason},
            **kwargs,
        )
        self.setting_name = setting_name
        self.value = value
        self.reason = reason


__all__ = [
    "ApplicationError",
    "ConfigError",
    "InvalidCredentialError",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
]
