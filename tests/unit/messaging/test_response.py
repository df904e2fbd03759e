"""Unit tests – ResponseInterpreter and SendResult."""
from __future__ import annotations

import json

import pytest

from fcm_client.messaging.response import DEFAULT_MESSAGES, EndpointKind, ResponseInterpreter, SendResult
from fcm_client.transport import HttpResponse


def _legacy_body(**overrides: object) -> str:
    body = {
        "multicast_id": 216,
        "success": 1,
        "failure": 1,
        "canonical_ids": 1,
        "results": [
            {"message_id": "1:0408"},
            {"error": "NotRegistered"},
            {"message_id": "1:2342", "registration_id": "32"},
        ],
    }
    body.update(overrides)
    return json.dumps(body)


class TestInterpretStatus:
    def setup_method(self) -> None:
        self.interpreter = ResponseInterpreter()

    def test_200_is_success_without_recipient_fields(self) -> None:
        result = self.interpreter.interpret(HttpResponse(200, "{}", {}))
        assert result.to_dict() == {
            "response": "success",
            "body": "{}",
            "headers": {},
            "status_code": 200,
        }
        assert result.canonical_ids is None
        assert result.not_registered_ids is None
        assert result.success is True

    @pytest.mark.parametrize(
        ("status", "fragment"),
        [
            (400, "Only applies for JSON requests"),
            (401, "There was an error authenticating"),
            (403, "not authorized"),
            (500, "There was an internal error"),
            (503, "Server is temporarily unavailable"),
            (502, "There was an internal error"),
        ],
    )
    def test_error_statuses_are_described(self, status: int, fragment: str) -> None:
        result = self.interpreter.interpret(HttpResponse(status, '{"error": {}}', {"x": "1"}))
        assert fragment in result.response
        assert result.status_code == status
        assert result.body == '{"error": {}}'
        assert result.headers == {"x": "1"}
        assert result.success is False

    def test_other_status_passes_body_through(self) -> None:
        result = self.interpreter.interpret(HttpResponse(404, "Requested entity was not found.", {}))
        assert result.response == "Requested entity was not found."
        assert result.status_code == 404

    def test_custom_messages(self) -> None:
        interpreter = ResponseInterpreter(messages={401: "bad key", 500: "boom"})
        assert interpreter.interpret(HttpResponse(401)).response == "bad key"
        assert interpreter.interpret(HttpResponse(504)).response == "boom"

    def test_partial_custom_messages_keep_defaults(self) -> None:
        interpreter = ResponseInterpreter(messages={401: "bad key"})
        assert interpreter.interpret(HttpResponse(503, "down")).response == DEFAULT_MESSAGES[503]
        assert interpreter.interpret(HttpResponse(502, "bad gateway")).response == DEFAULT_MESSAGES[500]
        assert interpreter.interpret(HttpResponse(400)).response == DEFAULT_MESSAGES[400]
        assert interpreter.interpret(HttpResponse(401)).response == "bad key"


class TestLegacyRecipientResults:
    def setup_method(self) -> None:
        self.interpreter = ResponseInterpreter()
        self.ids = ["42", "43", "44"]

    def test_canonical_and_not_registered_ids(self) -> None:
        result = self.interpreter.interpret(
            HttpResponse(200, _legacy_body()), EndpointKind.LEGACY, self.ids
        )
        assert result.canonical_ids == {2: "32"}
        assert result.not_registered_ids == ["43"]

    def test_counts_gate_the_scan(self) -> None:
        result = self.interpreter.interpret(
            HttpResponse(200, _legacy_body(canonical_ids=0, failure=0)), EndpointKind.LEGACY, self.ids
        )
        assert result.canonical_ids == {}
        assert result.not_registered_ids == []

    def test_other_errors_are_not_collected(self) -> None:
        body = _legacy_body(results=[{"error": "InvalidRegistration"}, {"error": "NotRegistered"}])
        result = self.interpreter.interpret(HttpResponse(200, body), EndpointKind.LEGACY, ["a", "b"])
        assert result.not_registered_ids == ["b"]

    def test_unparseable_body_yields_empty_fields(self) -> None:
        result = self.interpreter.interpret(HttpResponse(200, "not json"), EndpointKind.LEGACY, self.ids)
        assert result.canonical_ids == {}
        assert result.not_registered_ids == []
        assert result.success is True

    def test_v1_endpoint_never_reads_results(self) -> None:
        result = self.interpreter.interpret(HttpResponse(200, _legacy_body()), EndpointKind.V1, self.ids)
        assert result.canonical_ids is None
        assert result.not_registered_ids is None

    def test_error_status_skips_results(self) -> None:
        result = self.interpreter.interpret(HttpResponse(401, _legacy_body()), EndpointKind.LEGACY, self.ids)
        assert result.canonical_ids is None


class TestSendResult:
    def test_to_dict_includes_recipient_fields_when_set(self) -> None:
        result = SendResult("success", "{}", {}, 200, canonical_ids={0: "x"}, not_registered_ids=[])
        assert result.to_dict()["canonical_ids"] == {0: "x"}
        assert result.to_dict()["not_registered_ids"] == []

    @pytest.mark.parametrize(("status", "retryable"), [(503, True), (500, True), (400, False), (200, False)])
    def test_retryable(self, status: int, retryable: bool) -> None:
        assert SendResult("x", "", {}, status).retryable is retryable

    def test_json(self) -> None:
        assert SendResult("success", '{"name": "projects/p/messages/1"}', {}, 200).json() == {
            "name": "projects/p/messages/1"
        }
        assert SendResult("success", "", {}, 200).json() == {}

    def test_frozen(self) -> None:
        result = SendResult("success", "{}", {}, 200)
        with pytest.raises(Exception):
            result.status_code = 500  # type: ignore[misc]
