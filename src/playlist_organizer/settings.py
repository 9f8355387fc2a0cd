"""Playlist organizer configuration loaded from environment variables."""

import functools
import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings

from playlist_organizer.spotify.constants import (
    DEFAULT_PLAYLIST_ITEMS_PAGE_SIZE,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_SPOTIFY_REDIRECT_URI,
    SPOTIFY_SCOPES,
)


class PlaylistOrganizerSettings(BaseSettings):
    """Client configuration."""

    # Spotify app (PKCE: no client secret)
    SPOTIFY_CLIENT_ID: str = ""
    SPOTIFY_REDIRECT_URI: str = DEFAULT_SPOTIFY_REDIRECT_URI
    SPOTIFY_SCOPES: str = SPOTIFY_SCOPES

    # Where the PKCE code verifier is kept between redirect and callback.
    # Empty = in-memory only.
    VERIFIER_STORE_PATH: str = ""

    # HTTP
    REQUEST_TIMEOUT_SECONDS: float = DEFAULT_REQUEST_TIMEOUT

    # Paging
    PLAYLIST_ITEMS_PAGE_SIZE: int = DEFAULT_PLAYLIST_ITEMS_PAGE_SIZE

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = {"env_prefix": ""}

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalise_log_level(cls, value: str) -> str:
        """Accept level names in any case, e.g. ``debug``."""
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level {value!r}")
        return level


@functools.lru_cache(maxsize=1)
def get_settings() -> PlaylistOrganizerSettings:
    """Return cached settings singleton."""
    return PlaylistOrganizerSettings()
