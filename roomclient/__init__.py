"""Client for creating, joining and leaving rooms on the RTC room service."""
from .schemas.rooms import RoomDescriptor, RtcType, parse_room_descriptor
from .services.errors import (
    ErrorKind,
    MalformedResponseError,
    NetworkUnreachableError,
    RequestCancelledError,
    RequestTimeoutError,
    RoomClientError,
    ServerError,
)
from .services.rooms import RoomCall, RoomResult, RoomSessionClient

__all__ = [
    "ErrorKind",
    "MalformedResponseError",
    "NetworkUnreachableError",
    "RequestCancelledError",
    "RequestTimeoutError",
    "RoomCall",
    "RoomClientError",
    "RoomDescriptor",
    "RoomResult",
    "RoomSessionClient",
    "RtcType",
    "ServerError",
    "parse_room_descriptor",
]
