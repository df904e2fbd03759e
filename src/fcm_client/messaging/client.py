"""Messaging – FCMClient, one method per REST operation."""
from __future__ import annotations

import json
from typing import Any, Callable, Mapping, NoReturn, Sequence, TypeVar
from urllib.parse import quote, urlencode

from fcm_client.auth import CredentialProvider, ServiceAccountCredentialProvider
from fcm_client.config import (
    FCMSettings,
    INSTANCE_ID_BASE_URL,
    LEGACY_BASE_URL,
    V1_BASE_URL,
)
from fcm_client.errors import InvalidCredentialError, MissingTargetError, ValidationError
from fcm_client.messaging.payload import (
    build_device_group_body,
    build_legacy_body,
    build_topic_batch_body,
    build_v1_body,
    normalize_topic,
    validate_condition,
    validate_registration_ids,
    with_target,
)
from fcm_client.messaging.response import EndpointKind, ResponseInterpreter, SendResult
from fcm_client.observability.logging import get_logger
from fcm_client.transport import HttpxTransport, Transport

__all__ = ["FCMClient"]

T = TypeVar("T")
logger = get_logger(__name__)


class FCMClient:
    """Synchronous client for the FCM v1, Instance ID and device-group APIs.

    Each call validates its input, fetches a bearer token, performs exactly
    one HTTP request and returns a :class:`SendResult`. Remote error
    statuses are returned, not raised; nothing is retried.

    Args:
        credentials: path to a service-account JSON key file, or an open
            IO-like object holding it.
        project_name: Firebase project id, required for ``send_v1`` and
            device-group management.
        options: optional overrides: ``timeout``, ``v1_base_url``,
            ``iid_base_url``, ``legacy_base_url``, ``scopes``.
        transport: HTTP transport; an :class:`HttpxTransport` is created
            (and closed by :meth:`close`) when omitted.
        credential_provider: token source; defaults to a
            :class:`ServiceAccountCredentialProvider` over *credentials*.
    """

    def __init__(
        self,
        credentials: Any,
        project_name: str = "",
        options: Mapping[str, Any] | None = None,
        *,
        transport: Transport | None = None,
        credential_provider: CredentialProvider | None = None,
    ) -> None:
        self.project_name = project_name or ""
        self.options: dict[str, Any] = dict(options or {})
        self.v1_base_url = str(self.options.get("v1_base_url", V1_BASE_URL)).rstrip("/")
        self.iid_base_url = str(self.options.get("iid_base_url", INSTANCE_ID_BASE_URL)).rstrip("/")
        self.legacy_base_url = str(self.options.get("legacy_base_url", LEGACY_BASE_URL)).rstrip("/")
        self._credentials = credential_provider or ServiceAccountCredentialProvider(
            credentials, scopes=self.options.get("scopes")
        )
        self._owns_transport = transport is None
        self._transport = transport or HttpxTransport(timeout=float(self.options.get("timeout", 10.0)))
        self._interpreter = ResponseInterpreter()

    @classmethod
    def from_settings(
        cls,
        settings: FCMSettings,
        *,
        transport: Transport | None = None,
        credential_provider: CredentialProvider | None = None,
    ) -> "FCMClient":
        return cls(
            settings.credentials,
            settings.project_id,
            settings.as_options("credentials", "project_id"),
            transport=transport,
            credential_provider=credential_provider,
        )

    def __enter__(self) -> "FCMClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_transport and isinstance(self._transport, HttpxTransport):
            self._transport.close()

    # ------------------------------------------------------------------
    # HTTP v1
    # ------------------------------------------------------------------

    def send_v1(self, message: Mapping[str, Any]) -> SendResult:
        """Send *message* through ``projects/{project}/messages:send``.

        *message* names exactly one of ``token`` (a string or list),
        ``topic``, ``condition`` or ``notification_key``; every other key
        is copied verbatim into the ``message`` envelope.
        """
        project = self._require_project()
        body = self._validated(build_v1_body, message)
        url = f"{self.v1_base_url}/{project}/messages:send"
        return self._execute("POST", url, body, endpoint=EndpointKind.V1, route="{project}/messages:send")

    send_notification_v1 = send_v1
    send = send_v1

    def send_to_topic(self, topic: str, options: Mapping[str, Any] | None = None) -> SendResult:
        self._validated(normalize_topic, topic)
        return self.send_v1(with_target("topic", topic, options))

    def send_to_topic_condition(
        self, condition: str, options: Mapping[str, Any] | None = None
    ) -> SendResult:
        self._validated(validate_condition, condition)
        return self.send_v1(with_target("condition", condition, options))

    # ------------------------------------------------------------------
    # Legacy multicast and device groups
    # ------------------------------------------------------------------

    def send_legacy(
        self, registration_ids: Sequence[str], options: Mapping[str, Any] | None = None
    ) -> SendResult:
        """Multicast through the legacy ``fcm/send`` endpoint.

        The result carries ``canonical_ids`` and ``not_registered_ids``
        read from the per-recipient ``results`` array.
        """
        body = self._validated(build_legacy_body, registration_ids, options)
        return self._execute(
            "POST",
            f"{self.legacy_base_url}/fcm/send",
            body,
            endpoint=EndpointKind.LEGACY,
            route="fcm/send",
            registration_ids=body["registration_ids"],
        )

    def create_notification_key(self, key_name: str, registration_ids: Sequence[str]) -> SendResult:
        return self._device_group("create", key_name, registration_ids)

    def add_registration_ids(
        self, key_name: str, notification_key: str, registration_ids: Sequence[str]
    ) -> SendResult:
        return self._device_group("add", key_name, registration_ids, notification_key)

    def remove_registration_ids(
        self, key_name: str, notification_key: str, registration_ids: Sequence[str]
    ) -> SendResult:
        return self._device_group("remove", key_name, registration_ids, notification_key)

    def recover_notification_key(self, key_name: str) -> SendResult:
        project = self._require_project()
        if not isinstance(key_name, str) or not key_name.strip():
            self._reject(MissingTargetError("notification_key_name"))
        query = urlencode({"notification_key_name": key_name})
        return self._execute(
            "GET",
            f"{self.legacy_base_url}/fcm/notification?{query}",
            endpoint=EndpointKind.DEVICE_GROUP,
            route="fcm/notification?notification_key_name={key_name}",
            extra_headers={"project_id": project},
        )

    def _device_group(
        self,
        operation: str,
        key_name: str,
        registration_ids: Sequence[str],
        notification_key: str | None = None,
    ) -> SendResult:
        project = self._require_project()
        body = self._validated(
            build_device_group_body, operation, key_name, registration_ids, notification_key
        )
        return self._execute(
            "POST",
            f"{self.legacy_base_url}/fcm/notification",
            body,
            endpoint=EndpointKind.DEVICE_GROUP,
            route="fcm/notification",
            extra_headers={"project_id": project},
        )

    # ------------------------------------------------------------------
    # Instance ID
    # ------------------------------------------------------------------

    def get_instance_id_info(
        self, registration_token: str, options: Mapping[str, Any] | None = None
    ) -> SendResult:
        """Look up app and subscription details for *registration_token*."""
        token = self._path_token(registration_token)
        url = f"{self.iid_base_url}/iid/info/{token}"
        if options and options.get("details"):
            url = f"{url}?details=true"
        return self._execute("GET", url, endpoint=EndpointKind.INSTANCE_ID, route="iid/info/{token}")

    def topic_subscription(self, topic: str, registration_token: str) -> SendResult:
        name = self._validated(normalize_topic, topic)
        token = self._path_token(registration_token)
        url = f"{self.iid_base_url}/iid/v1/{token}/rel/topics/{name}"
        return self._execute(
            "POST", url, endpoint=EndpointKind.INSTANCE_ID, route="iid/v1/{token}/rel/topics/{topic}"
        )

    def topic_unsubscription(self, topic: str, registration_token: str) -> SendResult:
        return self.batch_topic_unsubscription(topic, [registration_token])

    def batch_topic_subscription(self, topic: str, registration_tokens: Sequence[str]) -> SendResult:
        return self._batch_topic("batchAdd", topic, registration_tokens)

    def batch_topic_unsubscription(self, topic: str, registration_tokens: Sequence[str]) -> SendResult:
        return self._batch_topic("batchRemove", topic, registration_tokens)

    def _batch_topic(self, action: str, topic: str, registration_tokens: Sequence[str]) -> SendResult:
        body = self._validated(build_topic_batch_body, topic, registration_tokens)
        return self._execute(
            "POST",
            f"{self.iid_base_url}/iid/v1:{action}",
            body,
            endpoint=EndpointKind.INSTANCE_ID,
            route=f"iid/v1:{action}",
        )

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _validated(self, build: Callable[..., T], *args: Any) -> T:
        try:
            return build(*args)
        except ValidationError as exc:
            self._reject(exc)

    @staticmethod
    def _reject(exc: ValidationError) -> NoReturn:
        logger.warning("fcm.validation_failed", code=exc.code, error=exc.message)
        raise exc

    def _require_project(self) -> str:
        if not self.project_name.strip():
            self._reject(MissingTargetError("project_name"))
        return self.project_name

    def _path_token(self, registration_token: str) -> str:
        (token,) = self._validated(validate_registration_ids, [registration_token], "registration_token")
        return quote(token, safe=":")

    def _headers(self, extra: Mapping[str, str] | None = None) -> dict[str, str]:
        """Request headers with a freshly fetched bearer token."""
        try:
            token = self._credentials.token()
        except InvalidCredentialError as exc:
            logger.warning("fcm.credentials_failed", code=exc.code, error=exc.message)
            raise
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
        }
        headers.update(extra or {})
        return headers

    def _execute(
        self,
        method: str,
        url: str,
        body: Mapping[str, Any] | None = None,
        *,
        endpoint: EndpointKind,
        route: str,
        registration_ids: Sequence[str] = (),
        extra_headers: Mapping[str, str] | None = None,
    ) -> SendResult:
        headers = self._headers(extra_headers)
        content = json.dumps(body).encode("utf-8") if body is not None else None
        logger.debug("fcm.request", method=method, route=route, endpoint=endpoint.value)
        response = self._transport.request(method, url, headers=headers, content=content)
        result = self._interpreter.interpret(response, endpoint, registration_ids)
        if result.success:
            logger.info("fcm.response", endpoint=endpoint.value, status_code=result.status_code)
        else:
            logger.warning(
                "fcm.response",
                endpoint=endpoint.value,
                status_code=result.status_code,
                response=result.response,
                retryable=result.retryable,
            )
        return result
