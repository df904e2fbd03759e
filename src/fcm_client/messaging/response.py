"""Messaging – response interpretation into :class:`SendResult`."""
from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from typing import Any, Sequence

from fcm_client.transport import HttpResponse

__all__ = ["DEFAULT_MESSAGES", "EndpointKind", "ResponseInterpreter", "SendResult"]

SUCCESS = "success"
NOT_REGISTERED = "NotRegistered"


class EndpointKind(str, enum.Enum):
    """Which API produced a response; decides whether per-recipient results are read."""

    V1 = "v1"
    LEGACY = "legacy"
    DEVICE_GROUP = "device_group"
    INSTANCE_ID = "instance_id"


@dataclass(frozen=True)
class SendResult:
    """Normalised outcome of one request.

    ``response`` is ``"success"`` for HTTP 200 and an explanatory message
    otherwise. ``canonical_ids`` (result index -> replacement registration
    id) and ``not_registered_ids`` are only filled for legacy multicast
    sends.
    """

    response: str
    body: str
    headers: dict[str, str]
    status_code: int
    canonical_ids: dict[int, str] | None = None
    not_registered_ids: list[str] | None = None

    @property
    def success(self) -> bool:
        return self.response == SUCCESS

    @property
    def retryable(self) -> bool:
        """True for 5xx statuses; the caller owns the retry/backoff loop."""
        return 500 <= self.status_code < 600

    def json(self) -> Any:
        """Decode ``body``; an empty body decodes to ``{}``."""
        return json.loads(self.body) if self.body else {}

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "response": self.response,
            "body": self.body,
            "headers": dict(self.headers),
            "status_code": self.status_code,
        }
        if self.canonical_ids is not None:
            result["canonical_ids"] = dict(self.canonical_ids)
        if self.not_registered_ids is not None:
            result["not_registered_ids"] = list(self.not_registered_ids)
        return result


DEFAULT_MESSAGES: dict[int, str] = {
    400: (
        "Only applies for JSON requests. Indicates that the request could not "
        "be parsed as JSON, or it contained invalid fields."
    ),
    401: "There was an error authenticating the sender account.",
    403: (
        "The sender is not authorized for this target. Check that the topic "
        "or condition matches the project and that the credential scopes allow sending."
    ),
    500: "There was an internal error in the FCM server while trying to process the request.",
    503: "Server is temporarily unavailable.",
}


@dataclass
class ResponseInterpreter:
    """Map ``(status, body, headers)`` to a :class:`SendResult`.

    Remote error statuses are described, never raised.
    """

    messages: dict[int, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Caller entries override the defaults; unspecified statuses keep them.
        self.messages = {**DEFAULT_MESSAGES, **self.messages}

    def interpret(
        self,
        response: HttpResponse,
        endpoint: EndpointKind = EndpointKind.V1,
        registration_ids: Sequence[str] = (),
    ) -> SendResult:
        status = response.status_code
        if status == 200:
            canonical_ids = not_registered_ids = None
            if endpoint is EndpointKind.LEGACY:
                canonical_ids, not_registered_ids = self._recipient_results(
                    response.body, registration_ids
                )
            return SendResult(
                response=SUCCESS,
                body=response.body,
                headers=dict(response.headers),
                status_code=status,
                canonical_ids=canonical_ids,
                not_registered_ids=not_registered_ids,
            )
        return SendResult(
            response=self.describe(status, response.body),
            body=response.body,
            headers=dict(response.headers),
            status_code=status,
        )

    def describe(self, status_code: int, body: str = "") -> str:
        if status_code in self.messages:
            return self.messages[status_code]
        if 500 <= status_code < 600:
            return self.messages[500]
        return body

    @staticmethod
    def _recipient_results(
        body: str, registration_ids: Sequence[str]
    ) -> tuple[dict[int, str], list[str]]:
        canonical_ids: dict[int, str] = {}
        not_registered_ids: list[str] = []
        try:
            decoded = json.loads(body) if body else {}
        except ValueError:
            return canonical_ids, not_registered_ids
        if not isinstance(decoded, dict) or not isinstance(decoded.get("results"), list):
            return canonical_ids, not_registered_ids

        results = decoded["results"]
        if _count(decoded, "canonical_ids"):
            for index, result in enumerate(results):
                if isinstance(result, dict) and result.get("registration_id"):
                    canonical_ids[index] = result["registration_id"]
        if _count(decoded, "failure"):
            for index, result in enumerate(results):
                if (
                    isinstance(result, dict)
                    and result.get("error") == NOT_REGISTERED
                    and index < len(registration_ids)
                ):
                    not_registered_ids.append(registration_ids[index])
        return canonical_ids, not_registered_ids


def _count(decoded: dict[str, Any], key: str) -> bool:
    value = decoded.get(key)
    return isinstance(value, int) and value > 0
