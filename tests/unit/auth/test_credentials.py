"""Unit tests – credential sources and the service-account token provider."""
from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from fcm_client.auth import (
    CredentialProvider,
    CredentialSource,
    ServiceAccountCredentialProvider,
    SourceKind,
)
from fcm_client.errors import InvalidCredentialError
from fcm_client.testing import StaticCredentialProvider

CLIENT_EMAIL = "83315528762cf7e0-7bbcc3aad87e0083391bc7f234d487c8@developer.gserviceaccount.com"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def service_account_info() -> dict[str, Any]:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()
    return {
        "type": "service_account",
        "project_id": "example",
        "private_key_id": "c09c4593eee53707ca9f4208fbd6fe72b29fc7ab",
        "private_key": pem,
        "client_email": CLIENT_EMAIL,
        "client_id": "acedc3c0a63b3562376386f0.apps.googleusercontent.com",
        "auth_uri": "https://accounts.google.com/o/oauth2/auth",
        "token_uri": "https://oauth2.googleapis.com/token",
        "universe_domain": "googleapis.com",
    }


class _TokenResponse:
    def __init__(self, status: int, payload: dict[str, Any]) -> None:
        self.status = status
        self.headers: dict[str, str] = {}
        self.data = json.dumps(payload).encode("utf-8")


class _TokenEndpoint:
    """google.auth.transport.Request double answering the JWT grant."""

    def __init__(self, status: int = 200, payload: dict[str, Any] | None = None) -> None:
        self.status = status
        self.payload = payload or {"access_token": "access_token", "expires_in": 3600, "token_type": "Bearer"}
        self.calls: list[str] = []

    def __call__(self, url: str, method: str = "GET", body: Any = None, headers: Any = None, **kwargs: Any) -> _TokenResponse:
        self.calls.append(url)
        return _TokenResponse(self.status, self.payload)


# ---------------------------------------------------------------------------
# CredentialSource
# ---------------------------------------------------------------------------


class TestCredentialSource:
    def test_path_to_existing_file(self, tmp_path: Path) -> None:
        key_file = tmp_path / "key.json"
        key_file.write_text("{}", encoding="utf-8")
        source = CredentialSource.classify(str(key_file))
        assert source.kind is SourceKind.FILE_PATH
        with source.open() as handle:
            assert handle.read() == "{}"

    def test_pathlike(self, tmp_path: Path) -> None:
        key_file = tmp_path / "key.json"
        key_file.write_text("{}", encoding="utf-8")
        source = CredentialSource.classify(key_file)
        assert source.kind is SourceKind.FILE_PATH
        source.open().close()

    def test_io_object_returned_as_is(self) -> None:
        stream = io.StringIO("hey")
        source = CredentialSource.classify(stream)
        assert source.kind is SourceKind.STREAM
        assert source.open() is stream

    def test_binary_stream(self) -> None:
        stream = io.BytesIO(b"{}")
        assert CredentialSource.classify(stream).open() is stream

    @pytest.mark.parametrize("value", [None, {}, 42, ["key.json"]])
    def test_non_io_objects_are_invalid(self, value: Any) -> None:
        source = CredentialSource.classify(value)
        assert source.kind is SourceKind.INVALID
        with pytest.raises(InvalidCredentialError) as exc_info:
            source.open()
        assert exc_info.value.source_kind == "invalid"

    def test_json_string_is_rejected(self, service_account_info: dict[str, Any]) -> None:
        with pytest.raises(InvalidCredentialError):
            CredentialSource.classify(json.dumps(service_account_info)).open()

    @pytest.mark.parametrize("path", ["keys/fake_credentials.json", "fake_credentials.json", "/nonexistent/key.json", ""])
    def test_missing_file(self, path: str) -> None:
        with pytest.raises(InvalidCredentialError) as exc_info:
            CredentialSource.classify(path).open()
        assert exc_info.value.code == "invalid_credential"

    def test_directory_is_not_a_key_file(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidCredentialError):
            CredentialSource.classify(str(tmp_path)).open()


# ---------------------------------------------------------------------------
# ServiceAccountCredentialProvider
# ---------------------------------------------------------------------------


class TestServiceAccountCredentialProvider:
    def test_is_protocol_compatible(self) -> None:
        assert isinstance(ServiceAccountCredentialProvider("key.json"), CredentialProvider)
        assert isinstance(StaticCredentialProvider(), CredentialProvider)

    def test_json_key_for_stream(self) -> None:
        stream = io.StringIO("hey")
        assert ServiceAccountCredentialProvider(stream).json_key() is stream

    def test_json_key_for_missing_file(self) -> None:
        with pytest.raises(InvalidCredentialError):
            ServiceAccountCredentialProvider("fake_credentials.json").json_key()

    def test_token_from_file(self, tmp_path: Path, service_account_info: dict[str, Any]) -> None:
        key_file = tmp_path / "key.json"
        key_file.write_text(json.dumps(service_account_info), encoding="utf-8")
        endpoint = _TokenEndpoint()
        provider = ServiceAccountCredentialProvider(str(key_file), request=endpoint)
        assert provider.token() == "access_token"
        assert endpoint.calls == ["https://oauth2.googleapis.com/token"]

    def test_token_from_stream_is_cached_until_expiry(self, service_account_info: dict[str, Any]) -> None:
        endpoint = _TokenEndpoint()
        provider = ServiceAccountCredentialProvider(io.StringIO(json.dumps(service_account_info)), request=endpoint)
        assert provider.token() == "access_token"
        assert provider.token() == "access_token"
        assert len(endpoint.calls) == 1

    def test_invalid_json(self) -> None:
        provider = ServiceAccountCredentialProvider(io.StringIO("hey"), request=_TokenEndpoint())
        with pytest.raises(InvalidCredentialError, match="not valid JSON"):
            provider.token()

    def test_json_array(self) -> None:
        provider = ServiceAccountCredentialProvider(io.StringIO("[]"), request=_TokenEndpoint())
        with pytest.raises(InvalidCredentialError):
            provider.token()

    def test_missing_client_email(self, service_account_info: dict[str, Any]) -> None:
        info = {k: v for k, v in service_account_info.items() if k != "client_email"}
        provider = ServiceAccountCredentialProvider(io.StringIO(json.dumps(info)), request=_TokenEndpoint())
        with pytest.raises(InvalidCredentialError) as exc_info:
            provider.token()
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_stream_failure_is_reported_consistently(self, service_account_info: dict[str, Any]) -> None:
        info = {k: v for k, v in service_account_info.items() if k != "client_email"}
        provider = ServiceAccountCredentialProvider(io.StringIO(json.dumps(info)), request=_TokenEndpoint())
        for _ in range(2):
            with pytest.raises(InvalidCredentialError, match="private key or client email") as exc_info:
                provider.token()
            assert isinstance(exc_info.value.__cause__, ValueError)

    def test_file_is_reread_after_failure(self, tmp_path: Path, service_account_info: dict[str, Any]) -> None:
        key = tmp_path / "key.json"
        key.write_text("{")
        provider = ServiceAccountCredentialProvider(str(key), request=_TokenEndpoint())
        with pytest.raises(InvalidCredentialError, match="not valid JSON"):
            provider.token()
        key.write_text(json.dumps(service_account_info))
        assert provider.token() == "access_token"

    def test_rejected_grant(self, service_account_info: dict[str, Any]) -> None:
        endpoint = _TokenEndpoint(400, {"error": "invalid_grant", "error_description": "Invalid JWT Signature."})
        provider = ServiceAccountCredentialProvider(io.StringIO(json.dumps(service_account_info)), request=endpoint)
        with pytest.raises(InvalidCredentialError, match="access token"):
            provider.token()

    def test_invalid_sources_fail_closed(self) -> None:
        for value in (None, {}, '{"type": "service_account"}'):
            with pytest.raises(InvalidCredentialError):
                ServiceAccountCredentialProvider(value, request=_TokenEndpoint()).token()
