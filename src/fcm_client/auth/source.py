"""Auth – CredentialSource, the closed variant over credential inputs."""
from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from typing import IO, Any

from fcm_client.errors import InvalidCredentialError

__all__ = ["CredentialSource", "SourceKind"]


class SourceKind(str, enum.Enum):
    FILE_PATH = "file_path"
    STREAM = "stream"
    INVALID = "invalid"


@dataclass(frozen=True)
class CredentialSource:
    """A service-account JSON source resolved to one of :class:`SourceKind`.

    Strings and ``os.PathLike`` objects are file paths; anything with a
    callable ``read`` is a stream; every other value (``None``, mappings,
    numbers) is invalid. A raw JSON document passed as a string is treated
    as a path and therefore fails to resolve.
    """

    kind: SourceKind
    value: Any

    @classmethod
    def classify(cls, source: Any) -> "CredentialSource":
        if callable(getattr(source, "read", None)):
            return cls(SourceKind.STREAM, source)
        if isinstance(source, (str, os.PathLike)):
            return cls(SourceKind.FILE_PATH, source)
        return cls(SourceKind.INVALID, source)

    def open(self) -> IO[Any]:
        """Return a readable handle on the JSON document.

        File handles are owned by the caller; streams are returned as-is.

        Raises:
            InvalidCredentialError: the source is invalid or the file is missing.
        """
        if self.kind is SourceKind.STREAM:
            return self.value
        if self.kind is SourceKind.FILE_PATH:
            path = os.fspath(self.value)
            if not path or not os.path.isfile(path):
                raise InvalidCredentialError(
                    "Credentials file not found",
                    source_kind=self.kind.value,
                    detail={"path": path},
                )
            try:
                return open(path, encoding="utf-8")
            except OSError as exc:
                raise InvalidCredentialError(
                    "Credentials file is not readable",
                    source_kind=self.kind.value,
                    detail={"path": path},
                    cause=exc,
                ) from exc
        raise InvalidCredentialError(
            "Credentials must be a path to a JSON key file or an IO-like object",
            source_kind=self.kind.value,
            detail={"type": type(self.value).__name__},
        )
