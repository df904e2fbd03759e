"""Messaging – request payload construction and client-side validation.

Every function here is pure: it either returns the JSON-compatible body
for an endpoint or raises a :class:`~fcm_client.errors.ValidationError`.
Nested option maps (``notification``, ``data``, ``android``, ``apns``,
``webpush``, ...) are copied through untouched.
"""
from __future__ import annotations

import re
from typing import Any, Iterable, Mapping

from fcm_client.errors import (
    InvalidConditionError,
    InvalidTopicError,
    MissingTargetError,
    ValidationError,
)

__all__ = [
    "TARGET_FIELDS",
    "TOPIC_PREFIX",
    "build_device_group_body",
    "build_legacy_body",
    "build_topic_batch_body",
    "build_v1_body",
    "normalize_topic",
    "target_of",
    "validate_condition",
    "validate_registration_ids",
    "with_target",
]

TARGET_FIELDS = ("token", "topic", "condition", "notification_key")
TOPIC_PREFIX = "/topics/"

_TOPIC_NAME = re.compile(r"[a-zA-Z0-9\-_.~%]+")
_CONDITION_TOKEN = re.compile(
    r"\s*(?:(?P<topic>'[^']*')|(?P<op>&&|\|\||!|\(|\))|(?P<word>[A-Za-z]+))"
)


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def normalize_topic(topic: Any) -> str:
    """Return the bare topic name, stripping one leading ``/topics/``.

    Raises:
        InvalidTopicError: the name is empty or holds a character outside
            letters, digits and ``-_.~%``.
    """
    if not isinstance(topic, str):
        raise InvalidTopicError(topic)
    name = topic[len(TOPIC_PREFIX):] if topic.startswith(TOPIC_PREFIX) else topic
    if not _TOPIC_NAME.fullmatch(name):
        raise InvalidTopicError(topic)
    return name


def _tokenize_condition(condition: str) -> list[tuple[str, str]]:
    tokens: list[tuple[str, str]] = []
    pos = 0
    end = len(condition.rstrip())
    while pos < end:
        match = _CONDITION_TOKEN.match(condition, pos)
        if match is None:
            raise InvalidConditionError(condition)
        kind = match.lastgroup or ""
        value = match.group(kind)
        if kind == "topic" and not _TOPIC_NAME.fullmatch(value[1:-1]):
            raise InvalidConditionError(condition)
        if kind == "word" and value not in ("in", "topics"):
            raise InvalidConditionError(condition)
        tokens.append((kind, value))
        pos = match.end()
    return tokens


class _ConditionParser:
    """Recursive-descent check of the topic condition grammar::

        expr  := term ("||" term)*
        term  := unary ("&&" unary)*
        unary := "!" unary | "(" expr ")" | TOPIC "in" "topics"
    """

    def __init__(self, condition: str) -> None:
        self._condition = condition
        self._tokens = _tokenize_condition(condition)
        self._pos = 0

    def parse(self) -> None:
        if not self._tokens:
            self._fail()
        self._expr()
        if self._pos != len(self._tokens):
            self._fail()

    def _fail(self) -> None:
        raise InvalidConditionError(self._condition)

    def _peek(self) -> str | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos][1]
        return None

    def _take(self, expected: str | None = None, kind: str | None = None) -> None:
        if self._pos >= len(self._tokens):
            self._fail()
        token_kind, value = self._tokens[self._pos]
        if (expected is not None and value != expected) or (kind is not None and token_kind != kind):
            self._fail()
        self._pos += 1

    def _expr(self) -> None:
        self._term()
        while self._peek() == "||":
            self._take("||")
            self._term()

    def _term(self) -> None:
        self._unary()
        while self._peek() == "&&":
            self._take("&&")
            self._unary()

    def _unary(self) -> None:
        nxt = self._peek()
        if nxt == "!":
            self._take("!")
            self._unary()
        elif nxt == "(":
            self._take("(")
            self._expr()
            self._take(")")
        else:
            self._take(kind="topic")
            self._take("in", kind="word")
            self._take("topics", kind="word")


def validate_condition(condition: Any) -> str:
    """Return *condition* unchanged if it is a well-formed topic condition.

    Example: ``"'dogs' in topics && ('cats' in topics || !('birds' in topics))"``.

    Raises:
        InvalidConditionError: the expression does not parse.
    """
    if _is_blank(condition):
        raise InvalidConditionError(condition)
    _ConditionParser(condition).parse()
    return condition


def validate_registration_ids(registration_ids: Any, field: str = "registration_ids") -> list[str]:
    """Return a list copy of *registration_ids*; every entry must be a non-blank string."""
    if isinstance(registration_ids, str) or not isinstance(registration_ids, Iterable):
        raise MissingTargetError(field, f"'{field}' must be a list of registration tokens")
    ids = list(registration_ids)
    if not ids or any(_is_blank(i) for i in ids):
        raise MissingTargetError(field, f"'{field}' must hold at least one non-blank token")
    return ids


def target_of(message: Mapping[str, Any]) -> str:
    """Return the single target selector populated in *message*."""
    present = [name for name in TARGET_FIELDS if message.get(name) is not None]
    if not present:
        raise MissingTargetError(
            "message", f"message needs one of {', '.join(TARGET_FIELDS)}"
        )
    if len(present) > 1:
        raise ValidationError(
            f"message names more than one target: {', '.join(present)}",
            code="ambiguous_target",
            errors=[{"field": name} for name in present],
        )
    return present[0]


def with_target(kind: str, value: Any, options: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Merge a target selector in front of caller-supplied options."""
    message: dict[str, Any] = {kind: value}
    for key, option in (options or {}).items():
        if key == kind:
            continue
        message[key] = option
    return message


def build_v1_body(message: Mapping[str, Any]) -> dict[str, Any]:
    """Return the ``messages:send`` body ``{"message": {...}}`` for *message*."""
    if not isinstance(message, Mapping):
        raise ValidationError("message must be a mapping", code="invalid_message")
    kind = target_of(message)
    envelope = dict(message)
    value = envelope[kind]
    if kind == "topic":
        envelope["topic"] = normalize_topic(value)
    elif kind == "condition":
        validate_condition(value)
    elif kind == "token" and not isinstance(value, str):
        envelope["token"] = validate_registration_ids(value, field="token")
    elif _is_blank(value):
        raise MissingTargetError(kind)
    return {"message": envelope}


def build_topic_batch_body(topic: Any, registration_tokens: Any) -> dict[str, Any]:
    """Body for ``iid/v1:batchAdd`` and ``iid/v1:batchRemove``."""
    name = normalize_topic(topic)
    tokens = validate_registration_ids(registration_tokens, field="registration_tokens")
    return {"to": f"{TOPIC_PREFIX}{name}", "registration_tokens": tokens}


def build_legacy_body(registration_ids: Any, options: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Body for the legacy multicast ``fcm/send`` endpoint."""
    body: dict[str, Any] = {"registration_ids": validate_registration_ids(registration_ids)}
    for key, option in (options or {}).items():
        if key in ("registration_ids", "to"):
            raise ValidationError(
                f"'{key}' cannot be passed as a multicast option",
                code="ambiguous_target",
                errors=[{"field": key}],
            )
        body[key] = option
    return body


def build_device_group_body(
    operation: str,
    key_name: Any,
    registration_ids: Any,
    notification_key: Any = None,
) -> dict[str, Any]:
    """Body for ``fcm/notification`` create/add/remove operations."""
    if _is_blank(key_name):
        raise MissingTargetError("notification_key_name")
    body: dict[str, Any] = {"operation": operation, "notification_key_name": key_name}
    if operation != "create":
        if _is_blank(notification_key):
            raise MissingTargetError("notification_key")
        body["notification_key"] = notification_key
    body["registration_ids"] = validate_registration_ids(registration_ids)
    return body
