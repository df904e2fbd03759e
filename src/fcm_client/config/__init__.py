"""Config – 12-factor settings and loaders."""

from fcm_client.config.base import Settings
from fcm_client.errors import ConfigError, InvalidSettingValueError, MissingRequiredSettingError
from fcm_client.config.fcm import (
    FCMSettings,
    FIREBASE_MESSAGING_SCOPE,
    INSTANCE_ID_BASE_URL,
    LEGACY_BASE_URL,
    V1_BASE_URL,
)
from fcm_client.config.loaders import EnvSettingsLoader, SettingsLoader

__all__ = [
    "ConfigError",
    "EnvSettingsLoader",
    "FCMSettings",
    "FIREBASE_MESSAGING_SCOPE",
    "INSTANCE_ID_BASE_URL",
    "InvalidSettingValueError",
    "LEGACY_BASE_URL",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
    "V1_BASE_URL",
]
