"""Spotify API client, models and exceptions."""

from playlist_organizer.spotify.client import PlaylistItemsResult, SpotifyClient
from playlist_organizer.spotify.exceptions import (
    APIError,
    AuthError,
    DataError,
    SpotifyClientError,
)

__all__ = [
    "APIError",
    "AuthError",
    "DataError",
    "PlaylistItemsResult",
    "SpotifyClient",
    "SpotifyClientError",
]
