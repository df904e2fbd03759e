"""Config settings – FCMSettings."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from fcm_client.config.base import Settings
from fcm_client.errors import InvalidSettingValueError

V1_BASE_URL = "https://fcm.googleapis.com/v1/projects"
INSTANCE_ID_BASE_URL = "https://iid.googleapis.com"
LEGACY_BASE_URL = "https://fcm.googleapis.com"
FIREBASE_MESSAGING_SCOPE = "https://www.googleapis.com/auth/firebase.messaging"


@dataclasses.dataclass
class FCMSettings(Settings):
    """Client settings, loadable from ``FCM_*`` environment variables."""

    _prefix: ClassVar[str] = "FCM"

    credentials: str
    project_id: str = ""
    timeout: float = 10.0
    v1_base_url: str = V1_BASE_URL
    iid_base_url: str = INSTANCE_ID_BASE_URL
    legacy_base_url: str = LEGACY_BASE_URL
    scopes: list[str] = dataclasses.field(default_factory=lambda: [FIREBASE_MESSAGING_SCOPE])

    def _validate(self) -> None:
        if self.timeout <= 0:
            raise InvalidSettingValueError("timeout", self.timeout, "must be positive")
        for name in ("v1_base_url", "iid_base_url", "legacy_base_url"):
            value = getattr(self, name)
            if not value.startswith(("http://", "https://")):
                raise InvalidSettingValueError(name, value, "must be an http(s) URL")
            setattr(self, name, value.rstrip("/"))


__all__ = [
    "FCMSettings",
    "FIREBASE_MESSAGING_SCOPE",
    "INSTANCE_ID_BASE_URL",
    "LEGACY_BASE_URL",
    "V1_BASE_URL",
]
