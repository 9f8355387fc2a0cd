"""Tests for PlaylistOrganizerSettings."""

import pytest
from pydantic import ValidationError

from playlist_organizer.settings import PlaylistOrganizerSettings, get_settings

_ENV_VARS = (
    "SPOTIFY_CLIENT_ID",
    "SPOTIFY_REDIRECT_URI",
    "SPOTIFY_SCOPES",
    "VERIFIER_STORE_PATH",
    "REQUEST_TIMEOUT_SECONDS",
    "PLAYLIST_ITEMS_PAGE_SIZE",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()


def test_defaults() -> None:
    settings = PlaylistOrganizerSettings()
    assert settings.SPOTIFY_CLIENT_ID == ""
    assert settings.SPOTIFY_REDIRECT_URI == "http://localhost:5173/callback"
    assert settings.SPOTIFY_SCOPES == "user-read-private playlist-read-private"
    assert settings.VERIFIER_STORE_PATH == ""
    assert settings.REQUEST_TIMEOUT_SECONDS == 30.0
    assert settings.PLAYLIST_ITEMS_PAGE_SIZE == 50
    assert settings.LOG_LEVEL == "INFO"


def test_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    """Environment variables override defaults."""
    monkeypatch.setenv("SPOTIFY_CLIENT_ID", "env-id")
    monkeypatch.setenv("SPOTIFY_REDIRECT_URI", "http://127.0.0.1:8888/callback")
    monkeypatch.setenv("PLAYLIST_ITEMS_PAGE_SIZE", "20")

    settings = PlaylistOrganizerSettings()
    assert settings.SPOTIFY_CLIENT_ID == "env-id"
    assert settings.SPOTIFY_REDIRECT_URI == "http://127.0.0.1:8888/callback"
    assert settings.PLAYLIST_ITEMS_PAGE_SIZE == 20


def test_get_settings_is_cached() -> None:
    """get_settings returns the same instance until the cache is cleared."""
    assert get_settings() is get_settings()


@pytest.mark.parametrize(("raw", "expected"), [("debug", "DEBUG"), (" Warning ", "WARNING"), ("ERROR", "ERROR")])
def test_log_level_is_normalised(monkeypatch: pytest.MonkeyPatch, raw: str, expected: str) -> None:
    """Level names are accepted in any case and stored upper-cased."""
    monkeypatch.setenv("LOG_LEVEL", raw)
    assert PlaylistOrganizerSettings().LOG_LEVEL == expected


def test_unknown_log_level_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    """An unknown level fails at load time, not when logging is configured."""
    monkeypatch.setenv("LOG_LEVEL", "verbose")
    with pytest.raises(ValidationError, match="unknown log level"):
        PlaylistOrganizerSettings()
