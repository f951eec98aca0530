import pytest
from pydantic import ValidationError

from roomclient.core.config import Settings, get_settings


def test_defaults_match_room_service_layout() -> None:
    current = Settings()

    assert current.create_path == "/api/v1/rooms"
    assert current.join_path.format(room_id="r1") == "/api/v1/rooms/r1/join"
    assert current.leave_path.format(room_id="r1") == "/api/v1/rooms/r1/leave"
    assert current.request_timeout == 10.0
    assert current.default_max_participants == 9
    assert current.default_rtc_type == 1


def test_settings_read_prefixed_environment(monkeypatch) -> None:
    monkeypatch.setenv("ROOMCLIENT_BASE_URL", "https://rooms.example.com")
    monkeypatch.setenv("ROOMCLIENT_REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("ROOMCLIENT_DEVICE_TYPE", "desktop")

    current = Settings()

    assert current.base_url == "https://rooms.example.com"
    assert current.request_timeout == 2.5
    assert current.device_type == "desktop"


@pytest.mark.parametrize("timeout", [0, -1])
def test_non_positive_timeout_is_rejected(timeout: float) -> None:
    with pytest.raises(ValidationError):
        Settings(request_timeout=timeout)


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()
