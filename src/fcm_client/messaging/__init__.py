"""Messaging – payload building, response interpretation and the FCM client."""
from fcm_client.messaging.client import FCMClient
from fcm_client.messaging.payload import (
    TARGET_FIELDS,
    build_topic_batch_body,
    build_v1_body,
    normalize_topic,
    validate_condition,
)
from fcm_client.messaging.response import EndpointKind, ResponseInterpreter, SendResult

__all__ = [
    "EndpointKind",
    "FCMClient",
    "ResponseInterpreter",
    "SendResult",
    "TARGET_FIELDS",
    "build_topic_batch_body",
    "build_v1_body",
    "normalize_topic",
    "validate_condition",
]
