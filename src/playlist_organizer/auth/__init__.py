"""PKCE authorization and token lifecycle."""

from playlist_organizer.auth.storage import InMemoryStorage, JSONFileStorage, KeyValueStorage
from playlist_organizer.auth.tokens import AuthState, TokenManager

__all__ = ["AuthState", "InMemoryStorage", "JSONFileStorage", "KeyValueStorage", "TokenManager"]
