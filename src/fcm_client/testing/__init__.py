"""Testing – in-memory doubles for FCMClient collaborators."""
from fcm_client.testing.fakes import RecordedRequest, RecordingTransport, StaticCredentialProvider

__all__ = ["RecordedRequest", "RecordingTransport", "StaticCredentialProvider"]
