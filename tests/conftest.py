"""Shared test configuration and fixtures."""

from datetime import UTC, datetime

import pytest
from factories import make_token

from playlist_organizer.auth.storage import InMemoryStorage
from playlist_organizer.auth.tokens import TokenManager
from playlist_organizer.settings import PlaylistOrganizerSettings
from playlist_organizer.spotify.client import SpotifyClient
from playlist_organizer.spotify.models import TokenData


@pytest.fixture
def settings() -> PlaylistOrganizerSettings:
    return PlaylistOrganizerSettings(
        SPOTIFY_CLIENT_ID="test-client-id",
        SPOTIFY_REDIRECT_URI="http://localhost:5173/callback",
        SPOTIFY_SCOPES="user-read-private playlist-read-private",
    )


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def redirects() -> list[str]:
    """URLs the token manager tried to open in a browser."""
    return []


@pytest.fixture
def token_manager(
    settings: PlaylistOrganizerSettings, storage: InMemoryStorage, redirects: list[str]
) -> TokenManager:
    return TokenManager(settings, storage, redirect=redirects.append)


@pytest.fixture
def authenticated_manager(token_manager: TokenManager) -> TokenManager:
    token_manager.token_data = TokenData(token=make_token(), last_refresh=datetime.now(UTC))
    return token_manager


@pytest.fixture
def client(authenticated_manager: TokenManager) -> SpotifyClient:
    return SpotifyClient(authenticated_manager)
