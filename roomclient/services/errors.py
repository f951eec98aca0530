"""Failures reported by the room session client."""
from __future__ import annotations

import enum


class ErrorKind(str, enum.Enum):
    NETWORK_UNREACHABLE = "network_unreachable"
    TIMEOUT = "timeout"
    SERVER_ERROR = "server_error"
    MALFORMED_RESPONSE = "malformed_response"
    CANCELLED = "cancelled"


class RoomClientError(RuntimeError):
    """Base class for errors delivered through a room request's result."""

    kind: ErrorKind


class NetworkUnreachableError(RoomClientError):
    """Raised when the room service could not be reached at all."""

    kind = ErrorKind.NETWORK_UNREACHABLE


class RequestTimeoutError(RoomClientError):
    kind = ErrorKind.TIMEOUT


class ServerError(RoomClientError):
    """The room service answered with a non-2xx status."""

    kind = ErrorKind.SERVER_ERROR

    def __init__(self, status_code: int, message: str | None = None) -> None:
        self.status_code = status_code
        self.message = message or f"server error ({status_code})"
        super().__init__(self.message)


class MalformedResponseError(RoomClientError):
    """A 2xx response whose body is not a JSON object."""

    kind = ErrorKind.MALFORMED_RESPONSE


class RequestCancelledError(RoomClientError):
    kind = ErrorKind.CANCELLED
