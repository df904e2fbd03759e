"""Error hierarchy — public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError             (domain.py)
    │   └── ValidationError
    │       ├── InvalidTopicError
    │       ├── InvalidConditionError
    │       └── MissingTargetError
    └── ApplicationError        (application.py)
        ├── InvalidCredentialError
        └── ConfigError
            ├── MissingRequiredSettingError
            └── InvalidSettingValueError

Remote error statuses are never raised; they come back as a
:class:`~fcm_client.messaging.SendResult`.
"""

from fcm_client.errors.application import (
    ApplicationError,
    ConfigError,
    InvalidCredentialError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)
from fcm_client.errors.base import BaseError
from fcm_client.errors.domain import (
    DomainError,
    InvalidConditionError,
    InvalidTopicError,
    MissingTargetError,
    ValidationError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "ConfigError",
    "DomainError",
    "InvalidConditionError",
    "InvalidCredentialError",
    "InvalidSettingValueError",
    "InvalidTopicError",
    "MissingRequiredSettingError",
    "MissingTargetError",
    "ValidationError",
]
