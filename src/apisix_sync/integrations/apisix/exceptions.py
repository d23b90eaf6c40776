"""APISIX codec exceptions.

Every error here is terminal for the field being decoded and, because the
entity models run the codecs during validation, for the whole resource
bundle. None of them derive from ``ValueError``: pydantic only wraps
``ValueError``/``AssertionError`` into ``ValidationError``, so these reach
the caller unchanged.
"""

from __future__ import annotations

from typing import Any

# Payload excerpts longer than this are truncated in error messages
MAX_PAYLOAD_EXCERPT = 200


def _excerpt(payload: Any) -> str:
    if isinstance(payload, bytes | bytearray):
        text = bytes(payload).decode("utf-8", errors="replace")
    else:
        text = str(payload)
    if len(text) > MAX_PAYLOAD_EXCERPT:
        return text[:MAX_PAYLOAD_EXCERPT] + "..."
    return text


class ApisixCodecError(Exception):
    """Base exception for APISIX wire codec errors.

    Attributes:
        message: Human-readable error message.
        field: Name of the resource field being decoded (if known).
        payload: The offending payload or value (if available).
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        payload: Any = None,
    ) -> None:
        """Initialize ApisixCodecError.

        Args:
            message: Human-readable error message.
            field: Name of the resource field being decoded.
            payload: The offending payload or value.
        """
        super().__init__(message)
        self.message = message
        self.field = field
        self.payload = payload

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.field:
            return f"{self.message} [field: {self.field}]"
        return self.message


class MalformedValueError(ApisixCodecError):
    """Raised when a field payload has a shape the codec does not recognize."""


class EmptyPayloadError(MalformedValueError):
    """Raised when a field payload is zero-length."""

    def __init__(
        self,
        message: str = "Empty payload",
        field: str | None = None,
    ) -> None:
        super().__init__(message=message, field=field, payload=b"")


class MalformedNodeError(ApisixCodecError):
    """Raised when an upstream node key, port or weight cannot be parsed."""

    def __init__(
        self,
        message: str = "Invalid upstream node",
        key: str | None = None,
        field: str | None = "nodes",
        payload: Any = None,
    ) -> None:
        """Initialize MalformedNodeError.

        Args:
            message: Human-readable error message.
            key: The node map key (``host`` or ``host:port``) that failed.
            field: Name of the resource field being decoded.
            payload: The offending node value.
        """
        if key is not None:
            message = f"{message}: {key!r}"
        super().__init__(message=message, field=field, payload=payload)
        self.key = key


class InvalidIdentifierError(ApisixCodecError):
    """Raised when an ``id`` field is present but is not a JSON string."""

    def __init__(
        self,
        payload: Any,
        message: str = "plugin metadata id is not a string",
        field: str | None = "id",
    ) -> None:
        super().__init__(
            message=f"{message}, input: {_excerpt(payload)}",
            field=field,
            payload=payload,
        )


class ConfigLoadError(ApisixCodecError):
    """Raised when a configuration source file cannot be loaded.

    Attributes:
        path: Path of the configuration source.
    """

    def __init__(self, message: str, path: str | None = None) -> None:
        if path:
            message = f"{message}: {path}"
        super().__init__(message=message)
        self.path = path
