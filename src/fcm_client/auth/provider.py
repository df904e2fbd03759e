"""Auth – bearer token providers backed by google-auth service accounts."""
from __future__ import annotations

import json
import logging
from typing import IO, Any, Protocol, Sequence, runtime_checkable

import google.auth.exceptions
import google.auth.transport.requests
from google.oauth2 import service_account

from fcm_client.auth.source import CredentialSource, SourceKind
from fcm_client.config.fcm import FIREBASE_MESSAGING_SCOPE
from fcm_client.errors import InvalidCredentialError

__all__ = ["CredentialProvider", "ServiceAccountCredentialProvider"]

logger = logging.getLogger(__name__)


@runtime_checkable
class CredentialProvider(Protocol):
    """Port: hand out a bearer access token for the next request."""

    def token(self) -> str: ...


class ServiceAccountCredentialProvider:
    """CredentialProvider that exchanges a service-account key for OAuth2 tokens.

    The key is read lazily on the first :meth:`token` call. Token expiry and
    refresh are delegated to :class:`google.oauth2.service_account.Credentials`.
    A stream can only be read once, so a failed stream load is replayed on
    later calls; a file path is re-read each time until it loads.
    """

    def __init__(
        self,
        source: Any,
        scopes: Sequence[str] | None = None,
        request: google.auth.transport.Request | None = None,
    ) -> None:
        self._source = CredentialSource.classify(source)
        self._scopes = list(scopes or [FIREBASE_MESSAGING_SCOPE])
        self._request = request
        self._credentials: service_account.Credentials | None = None
        self._load_error: InvalidCredentialError | None = None

    @property
    def source(self) -> CredentialSource:
        return self._source

    def json_key(self) -> IO[Any]:
        """Resolve the configured source to a readable JSON handle."""
        return self._source.open()

    def token(self) -> str:
        credentials = self._load_credentials()
        if not credentials.valid:
            request = self._request or google.auth.transport.requests.Request()
            try:
                credentials.refresh(request)
            except google.auth.exceptions.RefreshError as exc:
                raise InvalidCredentialError(
                    "Could not obtain an access token for the service account",
                    source_kind=self._source.kind.value,
                    cause=exc,
                ) from exc
            logger.debug("service account token refreshed expiry=%s", credentials.expiry)
        return credentials.token

    def _load_credentials(self) -> service_account.Credentials:
        if self._credentials is not None:
            return self._credentials
        if self._load_error is not None:
            raise self._load_error
        try:
            self._credentials = self._build_credentials(self._read_info())
        except InvalidCredentialError as exc:
            if self._source.kind is SourceKind.STREAM:
                self._load_error = exc
            raise
        return self._credentials

    def _build_credentials(self, info: dict[str, Any]) -> service_account.Credentials:
        try:
            return service_account.Credentials.from_service_account_info(info, scopes=self._scopes)
        except ValueError as exc:
            raise InvalidCredentialError(
                "Service account JSON is missing a private key or client email",
                source_kind=self._source.kind.value,
                cause=exc,
            ) from exc

    def _read_info(self) -> dict[str, Any]:
        handle = self.json_key()
        try:
            info = json.load(handle)
        except ValueError as exc:
            raise InvalidCredentialError(
                "Service account key is not valid JSON",
                source_kind=self._source.kind.value,
                cause=exc,
            ) from exc
        finally:
            if self._source.kind is SourceKind.FILE_PATH:
                handle.close()
        if not isinstance(info, dict):
            raise InvalidCredentialError(
                "Service account key must be a JSON object",
                source_kind=self._source.kind.value,
            )
        return info
