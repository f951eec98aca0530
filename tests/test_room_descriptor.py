"""Tests for lenient room descriptor parsing."""
from __future__ import annotations

import dataclasses
import sys

import pytest

from roomclient.schemas.rooms import RoomDescriptor, RtcType, parse_room_descriptor


def test_empty_payload_yields_defaults():
    room = parse_room_descriptor({})

    assert room == RoomDescriptor()
    assert room.room_id == ""
    assert room.token == ""
    assert room.max_participants == 0
    assert room.timeout == 0
    assert room.rtc_type == 0
    assert room.uids == ()


def test_full_server_payload():
    payload = {
        "source_channel_id": "channel_ios",
        "source_channel_type": 0,
        "room_id": "room-42",
        "creator": "user_1",
        "token": "jwt-token",
        "url": "wss://rtc.example.com",
        "status": 1,
        "created_at": "2026-01-18 10:00:00",
        "max_participants": 9,
        "timeout": 3600,
        "rtc_type": 1,
        "uids": ["user_1", "user_2"],
    }

    room = RoomDescriptor.parse(payload)

    assert room.room_id == "room-42"
    assert room.creator == "user_1"
    assert room.token == "jwt-token"
    assert room.url == "wss://rtc.example.com"
    assert room.max_participants == 9
    assert room.timeout == 3600
    assert room.rtc_type == RtcType.LIVEKIT
    assert room.uids == ("user_1", "user_2")
    assert room.source_channel_id == "channel_ios"
    assert room.status == 1
    assert room.created_at == "2026-01-18 10:00:00"
    assert room.connection_info() == ("wss://rtc.example.com", "jwt-token", 1)


def test_camel_case_keys_are_recognised():
    room = parse_room_descriptor({"roomId": "abc", "maxParticipants": 4, "rtcType": 0})

    assert room.room_id == "abc"
    assert room.max_participants == 4
    assert room.rtc_type == RtcType.P2P


def test_snake_case_wins_over_camel_case():
    room = parse_room_descriptor({"room_id": "snake", "roomId": "camel"})

    assert room.room_id == "snake"


def test_mistyped_fields_fall_back_to_defaults():
    payload = {
        "room_id": ["not", "a", "string"],
        "token": None,
        "url": {"nested": True},
        "creator": True,
        "max_participants": "lots",
        "timeout": 12.5,
        "rtc_type": False,
        "uids": "user_1",
    }

    room = parse_room_descriptor(payload)

    assert room == RoomDescriptor()


def test_coercible_values_are_converted():
    room = parse_room_descriptor(
        {"room_id": 1001, "max_participants": " 6 ", "timeout": 30.0, "rtc_type": "1"}
    )

    assert room.room_id == "1001"
    assert room.max_participants == 6
    assert room.timeout == 30
    assert room.rtc_type == 1


def test_negative_capacity_and_timeout_are_clamped():
    room = parse_room_descriptor({"max_participants": -3, "timeout": -1})

    assert room.max_participants == 0
    assert room.timeout == 0


def test_uids_keep_server_order_and_drop_non_strings():
    uids = [f"user_{index}" for index in range(50, 0, -1)]

    room = parse_room_descriptor({"uids": uids})
    assert room.uids == tuple(uids)

    mixed = parse_room_descriptor({"uids": ["b", 7, None, "a"]})
    assert mixed.uids == ("b", "a")


@pytest.mark.parametrize("payload", [None, [], "room", 42, ["room_id", "x"]])
def test_non_mapping_payload_yields_defaults(payload):
    assert parse_room_descriptor(payload) == RoomDescriptor()


def test_descriptor_is_immutable():
    room = parse_room_descriptor({"room_id": "r1"})

    with pytest.raises(dataclasses.FrozenInstanceError):
        room.room_id = "r2"  # type: ignore[misc]


@pytest.mark.skipif(
    not hasattr(sys, "get_int_max_str_digits"), reason="interpreter has no int/str conversion limit"
)
def test_oversized_integers_fall_back_to_defaults():
    huge = 10**5000

    room = parse_room_descriptor({"token": huge, "room_id": huge, "timeout": "9" * 5000})

    assert room.token == ""
    assert room.room_id == ""
    assert room.timeout == 0


@pytest.mark.parametrize("raw", ["1_000", "١٢", "+5", "--5", "-", "", "0x10"])
def test_only_plain_decimal_strings_are_integers(raw):
    assert parse_room_descriptor({"max_participants": raw}).max_participants == 0


def test_negative_decimal_string_is_accepted_for_rtc_type():
    assert parse_room_descriptor({"rtc_type": " -2 "}).rtc_type == -2
