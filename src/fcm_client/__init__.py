"""
fcm_client – Firebase Cloud Messaging REST client.

Import path convention::

    from fcm_client import FCMClient
    from fcm_client.errors import InvalidCredentialError, ValidationError
    from fcm_client.config import EnvSettingsLoader, FCMSettings
    from fcm_client.testing import RecordingTransport, StaticCredentialProvider
"""

from fcm_client.errors import InvalidCredentialError, ValidationError
from fcm_client.messaging import EndpointKind, FCMClient, SendResult

__version__ = "0.1.0"
__all__ = [
    "EndpointKind",
    "FCMClient",
    "InvalidCredentialError",
    "SendResult",
    "ValidationError",
    "__version__",
]
