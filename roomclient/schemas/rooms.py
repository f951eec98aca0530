"""Data contracts for room create/join/leave requests and responses."""
from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field


class RtcType(enum.IntEnum):
    """Known transport modes reported in ``rtc_type``."""

    P2P = 0
    LIVEKIT = 1


@dataclass(frozen=True, slots=True)
class RoomDescriptor:
    """Connection metadata for a room, as reported by the room service."""

    room_id: str = ""
    token: str = ""
    url: str = ""
    creator: str = ""
    max_participants: int = 0
    timeout: int = 0
    rtc_type: int = 0
    uids: tuple[str, ...] = ()
    source_channel_id: str = ""
    source_channel_type: int = 0
    status: int = 0
    created_at: str = ""

    @classmethod
    def parse(cls, payload: object) -> "RoomDescriptor":
        return parse_room_descriptor(payload)

    def connection_info(self) -> tuple[str, str, int]:
        """Return the ``(url, token, rtc_type)`` triple the media engine needs."""

        return self.url, self.token, self.rtc_type


def parse_room_descriptor(payload: object) -> RoomDescriptor:
    """Build a descriptor from a decoded JSON object.

    Parsing is lenient: missing or mistyped fields fall back to empty strings,
    zero or an empty uid tuple instead of failing the whole payload. Anything
    that is not a mapping yields the all-defaults descriptor.
    """

    if not isinstance(payload, Mapping):
        return RoomDescriptor()

    return RoomDescriptor(
        room_id=_as_str(_lookup(payload, "room_id", "roomId")),
        token=_as_str(_lookup(payload, "token")),
        url=_as_str(_lookup(payload, "url")),
        creator=_as_str(_lookup(payload, "creator")),
        max_participants=max(0, _as_int(_lookup(payload, "max_participants", "maxParticipants"))),
        timeout=max(0, _as_int(_lookup(payload, "timeout"))),
        rtc_type=_as_int(_lookup(payload, "rtc_type", "rtcType")),
        uids=_as_str_tuple(_lookup(payload, "uids")),
        source_channel_id=_as_str(_lookup(payload, "source_channel_id", "sourceChannelId")),
        source_channel_type=_as_int(_lookup(payload, "source_channel_type", "sourceChannelType")),
        status=_as_int(_lookup(payload, "status")),
        created_at=_as_str(_lookup(payload, "created_at", "createdAt")),
    )


def _lookup(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return None


def _as_str(value: object) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return str(value)
        except ValueError:
            return ""
    return ""


def _as_int(value: object) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else 0
    if isinstance(value, str):
        text = value.strip()
        digits = text[1:] if text.startswith("-") else text
        if not (digits.isascii() and digits.isdecimal()):
            return 0
        try:
            return int(text)
        except ValueError:
            return 0
    return 0


def _as_str_tuple(value: object) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(item for item in value if isinstance(item, str))


class CreateRoomRequest(BaseModel):
    source_channel_id: str
    source_channel_type: int = 0
    creator: str = Field(..., description="uid of the creating participant")
    room_id: str
    rtc_type: int
    invite_on: int = 0
    max_participants: int
    uids: list[str] = Field(default_factory=list, description="Participants invited on creation")
    device_type: str


class JoinRoomRequest(BaseModel):
    uid: str
    device_type: str


class LeaveRoomRequest(BaseModel):
    uid: str
