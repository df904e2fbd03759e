"""Auth – service-account credential sources and token providers."""
from fcm_client.auth.provider import CredentialProvider, ServiceAccountCredentialProvider
from fcm_client.auth.source import CredentialSource, SourceKind

__all__ = [
    "CredentialProvider",
    "CredentialSource",
    "ServiceAccountCredentialProvider",
    "SourceKind",
]
